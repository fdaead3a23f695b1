import pytest

from client.drag import DragController, DragPhase, MoveIntent
from client.geometry import Point, Rect, closest_center
from client.models import STATUSES, Task, TaskStatus
from client.state import BoardState

COLUMN_WIDTH = 300


def _column_rect(index: int) -> Rect:
    return Rect(index * COLUMN_WIDTH, 0, COLUMN_WIDTH - 20, 600)


def _controller(**kwargs):
    board = BoardState(
        [
            Task(id=1, project_id=1, title="A", status="todo"),
            Task(id=2, project_id=1, title="B", status="review"),
        ]
    )
    intents = []
    controller = DragController(board, on_move=intents.append, **kwargs)
    for index, status in enumerate(STATUSES):
        controller.register_column(status, _column_rect(index))
    return board, controller, intents


# A card resting in the first column, grabbed at its center
CARD = Rect(10, 20, 260, 80)
GRAB = CARD.center


def _drag_to(controller: DragController, task_id: int, column_index: int):
    controller.pointer_down(task_id, GRAB, CARD)
    target = Point(GRAB.x + column_index * COLUMN_WIDTH, GRAB.y)
    controller.pointer_move(Point(GRAB.x + 4, GRAB.y))
    controller.pointer_move(target)
    return controller.pointer_up(target)


def test_click_below_threshold_never_drags():
    board, controller, intents = _controller()
    phases = [controller.phase]

    controller.pointer_down(1, GRAB, CARD)
    phases.append(controller.phase)
    controller.pointer_move(Point(GRAB.x + 5, GRAB.y + 5))  # ~7.07 units
    phases.append(controller.phase)
    assert controller.over_column is None
    assert controller.pointer_up() is None
    phases.append(controller.phase)

    assert phases == [DragPhase.IDLE, DragPhase.ARMED, DragPhase.ARMED, DragPhase.IDLE]
    assert intents == []
    assert board.status_of(1) == TaskStatus.TODO


def test_reaching_the_threshold_starts_dragging():
    _, controller, _ = _controller()
    controller.pointer_down(1, GRAB, CARD)

    assert controller.pointer_move(Point(GRAB.x + 8, GRAB.y)) is DragPhase.DRAGGING
    assert controller.is_dragging
    assert controller.active_task_id == 1
    assert controller.over_column == TaskStatus.TODO


def test_drop_on_another_column_emits_one_intent():
    board, controller, intents = _controller()

    intent = _drag_to(controller, 1, 3)

    assert intent == MoveIntent(1, TaskStatus.DONE)
    assert intents == [intent]
    assert controller.phase is DragPhase.IDLE
    # The controller only reports; applying the move is someone else's job
    assert board.status_of(1) == TaskStatus.TODO


def test_highlight_follows_the_pointer():
    _, controller, _ = _controller()
    controller.pointer_down(1, GRAB, CARD)

    controller.pointer_move(Point(GRAB.x + COLUMN_WIDTH, GRAB.y))
    assert controller.over_column == TaskStatus.IN_PROGRESS
    controller.pointer_move(Point(GRAB.x + 2 * COLUMN_WIDTH, GRAB.y))
    assert controller.over_column == TaskStatus.REVIEW
    assert controller.session.offset == Point(2 * COLUMN_WIDTH, 0)


def test_drop_on_own_column_is_a_noop():
    board, controller, intents = _controller()
    before = board.snapshot()

    assert _drag_to(controller, 2, 2) is None
    assert intents == []
    assert board.snapshot() == before


def test_drop_without_columns_is_a_noop():
    board, controller, intents = _controller()
    for status in STATUSES:
        controller.unregister_column(status)

    assert _drag_to(controller, 1, 3) is None
    assert intents == []


def test_drop_of_a_task_removed_mid_drag_is_a_noop():
    board, controller, intents = _controller()
    controller.pointer_down(1, GRAB, CARD)
    controller.pointer_move(Point(GRAB.x + 3 * COLUMN_WIDTH, GRAB.y))
    board.remove(1)

    assert controller.pointer_up() is None
    assert intents == []


def test_cancel_discards_the_gesture():
    _, controller, intents = _controller()
    controller.pointer_down(1, GRAB, CARD)
    controller.pointer_move(Point(GRAB.x + 3 * COLUMN_WIDTH, GRAB.y))

    controller.cancel()

    assert controller.phase is DragPhase.IDLE
    assert controller.session is None
    assert controller.pointer_up() is None
    assert intents == []


def test_second_pointer_down_is_ignored_while_a_gesture_is_live():
    _, controller, _ = _controller()
    assert controller.pointer_down(1, GRAB, CARD) is True
    assert controller.pointer_down(2, GRAB, CARD) is False
    assert controller.session.task_id == 1


def test_equidistant_columns_resolve_to_the_earlier_status():
    board = BoardState([Task(id=1, project_id=1, title="A", status="todo")])
    controller = DragController(board)
    # Registered out of order on purpose: the tie must still go to "in-progress"
    controller.register_column(TaskStatus.DONE, Rect(150, 0, 100, 100))
    controller.register_column(TaskStatus.IN_PROGRESS, Rect(0, 0, 100, 100))
    card = Rect(75, 25, 100, 50)  # center (125, 50): 75 from both column centers

    controller.pointer_down(1, card.center, card)
    controller.pointer_move(Point(card.center.x, card.center.y + 10))
    controller.pointer_move(card.center)

    assert controller.over_column == TaskStatus.IN_PROGRESS
    assert controller.pointer_up() == MoveIntent(1, TaskStatus.IN_PROGRESS)


def test_closest_center_prefers_first_on_ties():
    dragged = Rect(0, 0, 10, 10)
    regions = [("left", Rect(-20, 0, 10, 10)), ("right", Rect(20, 0, 10, 10))]

    assert closest_center(dragged, regions) == "left"
    assert closest_center(dragged, list(reversed(regions))) == "right"
    assert closest_center(dragged, []) is None


def test_negative_threshold_is_rejected():
    with pytest.raises(ValueError):
        DragController(BoardState(), activation_distance=-1)
