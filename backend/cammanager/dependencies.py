"""
CamManager - API Dependencies
Session state and current-user checks shared by the routers
"""
from fastapi import Depends, HTTPException, Request, status

from cammanager.config import Settings, get_settings
from cammanager.models.user import User
from cammanager.services.access import Capability, resolve_capability
from cammanager.services.assistant import AssistantService
from cammanager.services.inventory import Inventory


def get_inventory(request: Request) -> Inventory:
    """The session's inventory, created at startup."""
    return request.app.state.inventory


def get_assistant(request: Request) -> AssistantService:
    return request.app.state.assistant


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return getattr(request.app.state, "settings", None) or get_settings()


async def get_current_user_required(
    inventory: Inventory = Depends(get_inventory),
) -> User:
    """Require a logged-in user, raise 401 if nobody is."""
    user = inventory.gateway.current_user
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


async def require_admin(
    current_user: User = Depends(get_current_user_required),
) -> User:
    """Require admin role, raise 403 if not admin."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


async def get_capability(
    current_user: User = Depends(get_current_user_required),
) -> Capability:
    """Visibility of the current user, resolved once per request."""
    return resolve_capability(current_user)
