"""
Pydantic schemas for request/response validation
"""
from backend.schemas.user import AuthResponse, UserCreate, UserLogin, UserSummary
from backend.schemas.project import ProjectCreate, ProjectResponse
from backend.schemas.task import MessageResponse, TaskCreate, TaskResponse, TaskStatusUpdate

__all__ = [
    "AuthResponse",
    "UserCreate",
    "UserLogin",
    "UserSummary",
    "ProjectCreate",
    "ProjectResponse",
    "MessageResponse",
    "TaskCreate",
    "TaskResponse",
    "TaskStatusUpdate",
]
