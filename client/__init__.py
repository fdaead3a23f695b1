"""ProTasker board client: board state, drag gestures and optimistic moves."""
from client.api import TaskStoreClient
from client.app import KanbanApp, ValidationError
from client.config import ClientSettings
from client.drag import DragController, DragPhase, DragSession, MoveIntent
from client.errors import ApiError, AuthenticationError, NetworkError, NotFoundError, ServerError
from client.geometry import Point, Rect, closest_center
from client.models import STATUSES, Priority, Project, Task, TaskStatus, User
from client.reconcile import MoveOutcome, PendingMove, Reconciler
from client.session import Session
from client.state import BoardState

__all__ = [
    "ApiError",
    "AuthenticationError",
    "BoardState",
    "ClientSettings",
    "DragController",
    "DragPhase",
    "DragSession",
    "KanbanApp",
    "MoveIntent",
    "MoveOutcome",
    "NetworkError",
    "NotFoundError",
    "PendingMove",
    "Point",
    "Priority",
    "Project",
    "Reconciler",
    "Rect",
    "STATUSES",
    "ServerError",
    "Session",
    "Task",
    "TaskStatus",
    "TaskStoreClient",
    "User",
    "closest_center",
]
