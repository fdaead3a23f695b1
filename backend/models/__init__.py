"""ProTasker Database Models"""
from backend.models.user import User
from backend.models.project import Project, ProjectStatus
from backend.models.project_member import MemberRole, ProjectMember
from backend.models.task import Task, TaskPriority, TaskStatus

__all__ = [
    "User",
    "Project",
    "ProjectStatus",
    "MemberRole",
    "ProjectMember",
    "Task",
    "TaskPriority",
    "TaskStatus",
]
