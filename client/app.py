"""Client-side controller: session, project list, the open board and its gestures."""
from datetime import datetime
from typing import List, Optional

from loguru import logger

from client.api import TaskStoreClient
from client.config import ClientSettings
from client.drag import DragController, MoveIntent
from client.errors import ApiError, AuthenticationError, Notifier
from client.geometry import Point, Rect
from client.models import Priority, Project, Task
from client.reconcile import Reconciler
from client.session import Session
from client.state import BoardState


class ValidationError(ValueError):
    """Form input rejected before any request is sent."""


class KanbanApp:
    """
    Glue between the task store and the board.

    CRUD failures are reported through ``notify`` (a blocking notice in a
    UI); a 401 anywhere logs the user out instead. Drag moves are handed to
    the current project's :class:`Reconciler`, which resolves their failures
    without bothering the user.
    """

    def __init__(
        self,
        store: TaskStoreClient,
        session: Session,
        settings: Optional[ClientSettings] = None,
        notify: Optional[Notifier] = None,
    ) -> None:
        self.store = store
        self.session = session
        self.settings = settings or store.settings
        self.notify = notify or (lambda message: logger.error(message))
        self.projects: List[Project] = []
        self.current_project: Optional[Project] = None
        self.board = BoardState()
        self.drag = DragController(
            self.board,
            activation_distance=self.settings.DRAG_ACTIVATION_DISTANCE,
            on_move=self._on_move,
        )
        self.reconciler: Optional[Reconciler] = None

    # -------------------- session --------------------
    @property
    def logged_in(self) -> bool:
        return self.session.is_authenticated

    async def signup(self, username: str, email: str, password: str) -> bool:
        try:
            token, user = await self.store.signup(username, email, password)
        except ApiError as exc:
            self.notify(exc.message or "Auth Error")
            return False
        self.session.start(token, user)
        await self.refresh_projects()
        return True

    async def login(self, email: str, password: str) -> bool:
        try:
            token, user = await self.store.login(email, password)
        except ApiError as exc:
            self.notify(exc.message or "Auth Error")
            return False
        self.session.start(token, user)
        await self.refresh_projects()
        return True

    def logout(self) -> None:
        self.close_project()
        self.projects = []
        self.session.clear()

    def _handle_failure(self, exc: ApiError, message: str) -> None:
        if isinstance(exc, AuthenticationError):
            logger.info("Store rejected the session; logging out")
            self.logout()
            return
        self.notify(f"{message}: {exc.message}")

    # -------------------- projects --------------------
    async def refresh_projects(self) -> List[Project]:
        try:
            self.projects = await self.store.list_projects()
        except ApiError as exc:
            self._handle_failure(exc, "Could not load projects")
        return self.projects

    async def create_project(self, title: str, description: Optional[str] = None) -> Optional[Project]:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Project title is required")
        try:
            project = await self.store.create_project(title, description)
        except ApiError as exc:
            self._handle_failure(exc, "Create failed")
            return None
        self.projects.insert(0, project)
        return project

    async def delete_project(self, project_id: int) -> bool:
        try:
            await self.store.delete_project(project_id)
        except ApiError as exc:
            self._handle_failure(exc, "Delete failed")
            return False
        self.projects = [project for project in self.projects if project.id != project_id]
        if self.current_project is not None and self.current_project.id == project_id:
            self.close_project()
        return True

    async def open_project(self, project: Project) -> bool:
        self.close_project()
        self.current_project = project
        self.reconciler = Reconciler(
            self.board,
            self.store,
            self.session,
            project.id,
            notify=self.notify,
            on_unauthenticated=self._on_move_unauthenticated,
        )
        try:
            tasks = await self.store.list_tasks(project.id)
        except ApiError as exc:
            self._handle_failure(exc, "Could not load tasks")
            return False
        if self.current_project is project:
            self.board.load(tasks)
        return True

    def close_project(self) -> None:
        self.drag.cancel()
        if self.reconciler is not None:
            self.reconciler.deactivate()
            self.reconciler = None
        self.current_project = None
        self.board.load([])

    # -------------------- tasks --------------------
    async def create_task(
        self,
        title: str,
        description: Optional[str] = None,
        priority: Priority = Priority.MEDIUM,
        assigned_to: Optional[int] = None,
        due_date: Optional[datetime] = None,
    ) -> Optional[Task]:
        if self.current_project is None:
            raise ValidationError("Open a project before adding tasks")
        title = (title or "").strip()
        if not title:
            raise ValidationError("Task title is required")
        try:
            priority = Priority(priority)
        except ValueError:
            raise ValidationError(f"Unknown priority: {priority!r}") from None

        project = self.current_project
        try:
            task = await self.store.create_task(project.id, title, description, priority, assigned_to, due_date)
        except ApiError as exc:
            self._handle_failure(exc, "Create failed")
            return None
        if self.current_project is project:
            self.board.add(task)
        return task

    async def delete_task(self, task_id: int) -> bool:
        try:
            await self.store.delete_task(task_id)
        except ApiError as exc:
            self._handle_failure(exc, "Delete failed")
            return False
        self.board.remove(task_id)
        return True

    # -------------------- gestures --------------------
    def press(self, task_id: int, point: Point, card_rect: Rect) -> bool:
        return self.drag.pointer_down(task_id, point, card_rect)

    def move(self, point: Point) -> None:
        self.drag.pointer_move(point)

    def release(self, point: Optional[Point] = None) -> Optional[MoveIntent]:
        """Finish a gesture. Must run inside the event loop when it may drop a card."""
        return self.drag.pointer_up(point)

    def cancel(self) -> None:
        self.drag.cancel()

    def _on_move(self, intent: MoveIntent) -> None:
        if self.reconciler is None:
            return
        self.reconciler.submit(intent)

    def _on_move_unauthenticated(self) -> None:
        logger.info("Store rejected the session during a move; logging out")
        self.logout()
