"""
CamManager - Authentication Router
Login/logout, password change and account management
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from cammanager.dependencies import get_current_user_required, get_inventory, require_admin
from cammanager.errors import InventoryError, to_http_exception
from cammanager.models.user import User
from cammanager.schemas.user import LoginRequest, PasswordChange, UserResponse, UserSave
from cammanager.services.inventory import Inventory

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["authentication"])


# ============================================================
# Authentication Endpoints
# ============================================================

@router.post("/login", response_model=UserResponse)
async def login(
    credentials: LoginRequest,
    inventory: Inventory = Depends(get_inventory)
):
    """Authenticate and make the account the current session user."""
    try:
        user = inventory.gateway.login(credentials.username, credentials.password)
    except InventoryError as e:
        raise to_http_exception(e) from e

    logger.info(f"User '{user.username}' logged in")
    return UserResponse.build(user)


@router.post("/logout")
async def logout(inventory: Inventory = Depends(get_inventory)):
    """End the current session (logged in the activity log if someone was logged in)."""
    inventory.gateway.logout()
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user_required)
):
    """Get current authenticated user information."""
    return UserResponse.build(current_user)


@router.post("/change-password")
async def change_password(
    password_data: PasswordChange,
    current_user: User = Depends(get_current_user_required),
    inventory: Inventory = Depends(get_inventory)
):
    """Change current user's password."""
    try:
        inventory.gateway.change_password(password_data.new_password, password_data.confirm_password)
    except InventoryError as e:
        raise to_http_exception(e) from e

    return {"message": "Password changed successfully"}


# ============================================================
# User Management (Admin only)
# ============================================================

@router.get("/users", response_model=List[UserResponse])
async def list_users(
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """List all users (admin only)."""
    users = sorted(inventory.gateway.users(), key=lambda u: u.username.lower())
    return [UserResponse.build(u) for u in users]


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserSave,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Create a new user (admin only)."""
    if user_data.id and inventory.gateway.find_user(user_data.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"User with id {user_data.id} already exists"
        )
    try:
        user = inventory.gateway.save_user(user_data, actor=admin.username)
    except InventoryError as e:
        raise to_http_exception(e) from e
    return UserResponse.build(user)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_data: UserSave,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Update a user (admin only). Leave the password empty to keep it."""
    if not inventory.gateway.find_user(user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with id {user_id} not found"
        )
    try:
        user = inventory.gateway.save_user(user_data.model_copy(update={"id": user_id}), actor=admin.username)
    except InventoryError as e:
        raise to_http_exception(e) from e
    return UserResponse.build(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Delete a user (admin only). Admins cannot delete themselves."""
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete your own account"
        )
    inventory.gateway.delete_user(user_id, actor=admin.username)
