"""Board State Manager: the open project's tasks, partitioned into columns."""
from typing import Callable, Dict, Iterable, List, Optional

from client.models import STATUSES, Task, TaskStatus

Listener = Callable[[], None]


class BoardState:
    """
    In-memory task set of the currently open project.

    This is the single source of truth the board is rendered from. Column
    membership is never stored separately: ``columns()`` derives it from each
    task's ``status`` so a task can only ever sit in one column.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None) -> None:
        self._tasks: List[Task] = []
        self._listeners: List[Listener] = []
        if tasks is not None:
            self.load(tasks)

    # -------------------- mutation --------------------
    def load(self, tasks: Iterable[Task]) -> None:
        """Replace the whole set with an authoritative snapshot."""
        self._tasks = [task.model_copy() for task in tasks]
        self._notify()

    def add(self, task: Task) -> None:
        """Insert a freshly created task at the front (newest first)."""
        self._tasks.insert(0, task.model_copy())
        self._notify()

    def apply_status(self, task_id: int, status: TaskStatus) -> bool:
        """Move one task to ``status``. Unknown ids are ignored.

        Returns True when the task exists, whether or not its status changed.
        """
        status = TaskStatus(status)
        task = self.get(task_id)
        if task is None:
            return False
        if task.status != status:
            task.status = status
            self._notify()
        return True

    def remove(self, task_id: int) -> bool:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                del self._tasks[index]
                self._notify()
                return True
        return False

    # -------------------- queries --------------------
    def get(self, task_id: int) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def status_of(self, task_id: int) -> Optional[TaskStatus]:
        task = self.get(task_id)
        return task.status if task else None

    @property
    def tasks(self) -> List[Task]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return any(task.id == task_id for task in self._tasks)

    def columns(self, query: Optional[str] = None) -> Dict[TaskStatus, List[Task]]:
        """Group tasks by status, in fixed column order.

        ``query`` narrows every column to tasks whose title or description
        contains it (case-insensitive); relative order is unchanged.
        """
        needle = query.strip().lower() if query else ""
        columns: Dict[TaskStatus, List[Task]] = {status: [] for status in STATUSES}
        for task in self._tasks:
            if needle and not _matches(task, needle):
                continue
            columns[task.status].append(task)
        return columns

    def counts(self) -> Dict[TaskStatus, int]:
        return {status: len(tasks) for status, tasks in self.columns().items()}

    def snapshot(self) -> List[dict]:
        """Plain-data copy of the board, for comparisons and debugging."""
        return [task.model_dump() for task in self._tasks]

    # -------------------- change listeners --------------------
    def subscribe(self, callback: Listener) -> None:
        self._listeners.append(callback)

    def unsubscribe(self, callback: Listener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()


def _matches(task: Task, needle: str) -> bool:
    haystack = f"{task.title}\n{task.description or ''}".lower()
    return needle in haystack
