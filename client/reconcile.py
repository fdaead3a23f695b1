"""Reconciliation Layer: optimistic moves, persisted or rolled back by resync."""
import asyncio
import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from loguru import logger

from client.api import TaskStoreClient
from client.drag import MoveIntent
from client.errors import ApiError, AuthenticationError, Notifier
from client.models import TaskStatus
from client.session import Session
from client.state import BoardState


class MoveOutcome(str, Enum):
    COMMITTED = "committed"
    RESYNCED = "resynced"
    RESYNC_FAILED = "resync_failed"
    STALE = "stale"
    UNAUTHENTICATED = "unauthenticated"
    IGNORED = "ignored"


@dataclass(frozen=True)
class PendingMove:
    """A move applied to the board but not yet confirmed by the store."""

    task_id: int
    target_status: TaskStatus
    previous_status: TaskStatus
    sequence: int


class Reconciler:
    """
    Applies move intents for one open project.

    Each intent is applied to the board immediately, then persisted. A
    failed persist is resolved by reloading the whole board from the store
    rather than by undoing the single field, unless a newer intent for the
    same task was issued in the meantime; that resync is dropped as stale.
    Moves of other tasks that are still in flight, or that were committed
    while the reload was running, are replayed over the fresh snapshot.
    """

    def __init__(
        self,
        board: BoardState,
        store: TaskStoreClient,
        session: Session,
        project_id: int,
        notify: Optional[Notifier] = None,
        on_unauthenticated: Optional[Callable[[], None]] = None,
    ) -> None:
        self.board = board
        self.store = store
        self.session = session
        self.project_id = project_id
        self.notify = notify or (lambda message: logger.error(message))
        self.on_unauthenticated = on_unauthenticated
        self._counter = itertools.count(1)
        self._latest: Dict[int, int] = {}
        self._unsettled: Dict[int, PendingMove] = {}
        # One entry per resync in progress, collecting moves committed meanwhile
        self._watchers: List[Dict[int, PendingMove]] = []
        self._inflight: Set[asyncio.Task] = set()
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def deactivate(self) -> None:
        """Stop touching the board; used when its project is closed."""
        self._active = False

    # -------------------- two-phase move --------------------
    def begin(self, intent: MoveIntent) -> Optional[PendingMove]:
        """Phase one: tentative in-memory mutation. Never suspends."""
        target = TaskStatus(intent.target_status)
        previous = self.board.status_of(intent.task_id)
        if previous is None or previous == target:
            return None
        self.board.apply_status(intent.task_id, target)
        sequence = next(self._counter)
        self._latest[intent.task_id] = sequence
        pending = PendingMove(intent.task_id, target, previous, sequence)
        self._unsettled[sequence] = pending
        logger.debug(f"Optimistic move #{sequence}: task {intent.task_id} {previous.value} -> {target.value}")
        return pending

    def is_stale(self, pending: PendingMove) -> bool:
        return not self._active or self._latest.get(pending.task_id) != pending.sequence

    def _settle(self, pending: PendingMove, committed: bool) -> None:
        self._unsettled.pop(pending.sequence, None)
        if committed:
            for committed_meanwhile in self._watchers:
                committed_meanwhile[pending.sequence] = pending

    async def on_move_intent(self, intent: MoveIntent) -> MoveOutcome:
        return await self._persist(self.begin(intent))

    async def _resync(self, pending: PendingMove) -> MoveOutcome:
        if self.is_stale(pending):
            logger.info(f"Skipping resync for move #{pending.sequence}: superseded")
            return MoveOutcome.STALE
        committed_meanwhile: Dict[int, PendingMove] = {}
        self._watchers.append(committed_meanwhile)
        try:
            tasks = await self.store.list_tasks(self.project_id)
        except AuthenticationError:
            return self._unauthenticated()
        except ApiError as exc:
            self.notify(f"Could not reload the board: {exc}")
            return MoveOutcome.RESYNC_FAILED
        finally:
            self._watchers.remove(committed_meanwhile)
        # A newer move of the same task may have been issued while the list call was in flight
        if self.is_stale(pending):
            logger.info(f"Discarding resync for move #{pending.sequence}: superseded")
            return MoveOutcome.STALE
        self.board.load(tasks)
        replayed = self._replay({**committed_meanwhile, **self._unsettled})
        logger.info(f"Board resynced after failed move of task {pending.task_id} ({replayed} move(s) replayed)")
        return MoveOutcome.RESYNCED

    def _replay(self, moves: Dict[int, PendingMove]) -> int:
        """Re-apply moves the snapshot may predate; only each task's latest move counts."""
        replayed = 0
        for sequence in sorted(moves):
            move = moves[sequence]
            if self._latest.get(move.task_id) == sequence and self.board.apply_status(move.task_id, move.target_status):
                replayed += 1
        return replayed

    def _unauthenticated(self) -> MoveOutcome:
        # A 401 for a closed board must not end a session started since
        if self._active:
            self.session.clear()
            if self.on_unauthenticated is not None:
                self.on_unauthenticated()
        return MoveOutcome.UNAUTHENTICATED

    # -------------------- fire and forget --------------------
    def submit(self, intent: MoveIntent) -> asyncio.Task:
        """Run ``on_move_intent`` in the background; must be called inside a running loop.

        The optimistic update is visible as soon as this returns.
        """
        pending = self.begin(intent)
        task = asyncio.get_running_loop().create_task(self._persist(pending))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _persist(self, pending: Optional[PendingMove]) -> MoveOutcome:
        """Phase two: confirm the move with the store or fall back to a resync."""
        if pending is None:
            return MoveOutcome.IGNORED
        try:
            await self.store.update_task_status(pending.task_id, pending.target_status)
        except AuthenticationError:
            self._settle(pending, committed=False)
            return self._unauthenticated()
        except ApiError as exc:
            self._settle(pending, committed=False)
            logger.warning(f"Persisting move #{pending.sequence} for task {pending.task_id} failed: {exc}")
            return await self._resync(pending)
        self._settle(pending, committed=True)
        return MoveOutcome.COMMITTED

    async def drain(self) -> None:
        """Wait for every in-flight persistence request to settle."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight))
