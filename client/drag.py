"""Drag Controller: pointer gestures on cards turned into move intents.

A gesture goes Idle -> Armed on pointer-down over a card, Armed -> Dragging
once the pointer has travelled ``activation_distance`` from where it went
down, and back to Idle on release or cancel. Only a release while Dragging,
over a column other than the task's current one, produces a move intent.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional

from loguru import logger

from client.geometry import Point, Rect, closest_center
from client.models import STATUSES, TaskStatus
from client.state import BoardState


class DragPhase(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    DRAGGING = "dragging"


class MoveIntent(NamedTuple):
    task_id: int
    target_status: TaskStatus


@dataclass
class DragSession:
    task_id: int
    origin: Point
    pointer: Point
    card_rect: Rect
    activated: bool = False
    over: Optional[TaskStatus] = None

    @property
    def offset(self) -> Point:
        """How far the card has been carried from its resting place."""
        return self.pointer - self.origin

    @property
    def dragged_rect(self) -> Rect:
        offset = self.offset
        return self.card_rect.translate(offset.x, offset.y)


class DragController:
    def __init__(
        self,
        board: BoardState,
        activation_distance: float = 8.0,
        on_move: Optional[Callable[[MoveIntent], None]] = None,
    ) -> None:
        if activation_distance < 0:
            raise ValueError("activation_distance must be >= 0")
        self.board = board
        self.activation_distance = activation_distance
        self.on_move = on_move
        self._columns: Dict[TaskStatus, Rect] = {}
        self._session: Optional[DragSession] = None

    # -------------------- drop targets --------------------
    def register_column(self, status: TaskStatus, rect: Rect) -> None:
        self._columns[TaskStatus(status)] = rect

    def unregister_column(self, status: TaskStatus) -> None:
        self._columns.pop(TaskStatus(status), None)

    def _resolve_target(self, session: DragSession) -> Optional[TaskStatus]:
        regions = [(status, self._columns[status]) for status in STATUSES if status in self._columns]
        return closest_center(session.dragged_rect, regions)

    # -------------------- state --------------------
    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def phase(self) -> DragPhase:
        if self._session is None:
            return DragPhase.IDLE
        return DragPhase.DRAGGING if self._session.activated else DragPhase.ARMED

    @property
    def is_dragging(self) -> bool:
        return self.phase is DragPhase.DRAGGING

    @property
    def active_task_id(self) -> Optional[int]:
        return self._session.task_id if self.is_dragging else None

    @property
    def over_column(self) -> Optional[TaskStatus]:
        """Column to highlight as the drop candidate, while dragging."""
        return self._session.over if self.is_dragging else None

    # -------------------- pointer events --------------------
    def pointer_down(self, task_id: int, point: Point, card_rect: Rect) -> bool:
        """Arm a gesture on a card. Ignored unless Idle."""
        if self._session is not None:
            return False
        self._session = DragSession(task_id=task_id, origin=point, pointer=point, card_rect=card_rect)
        return True

    def pointer_move(self, point: Point) -> DragPhase:
        session = self._session
        if session is None:
            return DragPhase.IDLE
        session.pointer = point
        if not session.activated and session.origin.distance_to(point) >= self.activation_distance:
            session.activated = True
            logger.debug(f"Drag started on task {session.task_id}")
        if session.activated:
            session.over = self._resolve_target(session)
        return self.phase

    def pointer_up(self, point: Optional[Point] = None) -> Optional[MoveIntent]:
        """End the gesture; returns the move intent if the drop changes a column."""
        session = self._session
        if session is None:
            return None
        if point is not None:
            self.pointer_move(point)
        self._session = None

        if not session.activated or session.over is None:
            return None
        current = self.board.status_of(session.task_id)
        if current is None or current == session.over:
            return None

        intent = MoveIntent(session.task_id, session.over)
        logger.debug(f"Task {intent.task_id} dropped on {intent.target_status.value}")
        if self.on_move is not None:
            self.on_move(intent)
        return intent

    def cancel(self) -> None:
        """Abandon any gesture without emitting anything."""
        self._session = None
