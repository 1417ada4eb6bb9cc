"""
CamManager - Assistant Service
Answers free-text questions about the inventory through Gemini

Strategy: the caller's visible cameras/recorders are serialized into a
system context and sent with the question to the generateContent REST
endpoint. Errors never reach the caller; they become a fixed message.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from cammanager.config import Settings, get_settings
from cammanager.models.camera import Camera, Recorder

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Error: API key not found. Please set CAMMANAGER_GEMINI_API_KEY."
APOLOGY_MESSAGE = "Sorry, I encountered an error analyzing your system."
EMPTY_ANSWER_MESSAGE = "I couldn't generate a response."


def build_context(cameras: List[Camera], recorders: List[Recorder]) -> str:
    """System prompt with the inventory snapshot the answer must stick to."""
    recorder_data = [{"name": r.name, "ip": r.ip, "location": r.location} for r in recorders]
    camera_data = [
        {
            "name": c.name,
            "status": c.status,
            "location": c.location,
            "installDate": c.install_date,
            "type": c.type,
            "ip": c.ip,
        }
        for c in cameras
    ]
    return (
        "You are an expert Security System Administrator assistant.\n"
        "You have access to the following system data in JSON format:\n\n"
        f"Recorders: {json.dumps(recorder_data, ensure_ascii=False)}\n"
        f"Cameras: {json.dumps(camera_data, ensure_ascii=False)}\n\n"
        "Answer the user's question based strictly on this data.\n"
        "If you suggest technical actions, keep them brief.\n"
        "Format the response in Markdown.\n"
        "If the user asks for a summary, provide a breakdown by status and location."
    )


class AssistantService:
    """
    Thin client for the text-generation API.

    Runs outside any inventory mutation, so a slow or failing call never
    holds up or rolls back a change.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = timeout or settings.assistant_timeout
        self._transport = transport

    def _payload(self, query: str, context: str) -> Dict[str, Any]:
        return {
            "contents": [
                {"role": "user", "parts": [{"text": context}]},
                {"role": "user", "parts": [{"text": query}]},
            ],
            "generationConfig": {
                "thinkingConfig": {"thinkingBudget": 0}  # Low latency for chat
            },
        }

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        parts = []
        for candidate in data.get("candidates") or []:
            for part in (candidate.get("content") or {}).get("parts") or []:
                if part.get("text"):
                    parts.append(part["text"])
            if parts:
                break
        return "".join(parts)

    async def ask(self, query: str, cameras: List[Camera], recorders: List[Recorder]) -> str:
        """Markdown answer, or a fixed user-facing message when anything goes wrong."""
        if not self.api_key:
            logger.warning("Assistant called without an API key")
            return MISSING_KEY_MESSAGE

        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = self._payload(query, build_context(cameras, recorders))

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, params={"key": self.api_key}, json=payload)
                response.raise_for_status()
                text = self._extract_text(response.json())
        except httpx.TimeoutException:
            logger.error("Gemini API timeout")
            return APOLOGY_MESSAGE
        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini API error: HTTP {e.response.status_code}")
            return APOLOGY_MESSAGE
        except httpx.RequestError as e:
            logger.error(f"Gemini API unreachable: {e}")
            return APOLOGY_MESSAGE
        except ValueError as e:
            logger.error(f"Gemini API returned invalid JSON: {e}")
            return APOLOGY_MESSAGE

        return text or EMPTY_ANSWER_MESSAGE
