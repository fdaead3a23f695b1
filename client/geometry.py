"""Screen-space primitives and drop-target collision detection."""
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, TypeVar

K = TypeVar("K")


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.left + self.width / 2, self.top + self.height / 2)

    def translate(self, dx: float, dy: float) -> "Rect":
        return Rect(self.left + dx, self.top + dy, self.width, self.height)


def closest_center(dragged: Rect, regions: Iterable[Tuple[K, Rect]]) -> Optional[K]:
    """Key of the region whose center is nearest to the dragged rect's center.

    Regions are scanned in the given order and only a strictly smaller
    distance replaces the current best, so ties go to the earliest region.
    Returns None when there are no regions.
    """
    origin = dragged.center
    best_key: Optional[K] = None
    best_distance = math.inf
    for key, rect in regions:
        distance = origin.distance_to(rect.center)
        if distance < best_distance:
            best_key, best_distance = key, distance
    return best_key
