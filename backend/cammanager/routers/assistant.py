"""
CamManager - Assistant Router
Free-text questions about the inventory
"""
import logging
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from cammanager.dependencies import get_assistant, get_capability, get_inventory
from cammanager.services.access import Capability, filter_visible
from cammanager.services.assistant import AssistantService
from cammanager.services.inventory import Inventory

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/assistant", tags=["Assistant"])


class AssistantQuery(BaseModel):
    query: str = Field(..., min_length=1, max_length=2000)


class AssistantAnswer(BaseModel):
    answer: str  # Markdown


@router.post("/ask", response_model=AssistantAnswer)
async def ask_assistant(
    body: AssistantQuery,
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory),
    assistant: AssistantService = Depends(get_assistant)
):
    """
    Ask the assistant about the cameras and recorders the current user may see.

    Failures come back as a readable answer, never as an HTTP error.
    """
    # Snapshot before awaiting; the answer is built from this view only
    cameras = filter_visible(capability, inventory.devices.cameras())
    recorders = filter_visible(capability, inventory.devices.recorders())

    answer = await assistant.ask(body.query, cameras, recorders)
    return AssistantAnswer(answer=answer)
