"""
CamManager - Pydantic Schemas
"""
from cammanager.schemas.camera import CameraResponse, CameraSave, RecorderResponse, RecorderSave
from cammanager.schemas.user import UserResponse, UserSave

__all__ = ["CameraSave", "CameraResponse", "RecorderSave", "RecorderResponse", "UserSave", "UserResponse"]
