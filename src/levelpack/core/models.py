"""Core data models for level-based container packing.

Classes:
    Dimension  — width/depth/height extents with volume and hold queries
    Box        — an item to pack; its orientation is rewritten in place
    Space      — a free region with an origin and a reciprocal remainder
    Placement  — immutable pairing of the space occupied and the box in it
    Level      — horizontal slab of placements with a fixed height
    Container  — packing result built on one chosen container dimension

Height is the vertical axis. A 2D rotation only swaps width and depth;
a 3D rotation may move height onto one of the other two axes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .validator import InvalidInputError, OverlapError, PackingError

Extents = Tuple[float, float, float]

_DIMENSION_PATTERN = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*[xX]\s*(\d+(?:\.\d+)?)\s*[xX]\s*(\d+(?:\.\d+)?)\s*$"
)


def _parse_number(text: str) -> float:
    return float(text) if "." in text else int(text)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _fits(extents: Extents, target: "Dimension") -> bool:
    width, depth, height = extents
    return (
        width <= target.width
        and depth <= target.depth
        and height <= target.height
    )


def _orientations(width: float, depth: float, height: float, rotate_3d: bool) -> List[Extents]:
    """Distinct axis-aligned orientations, the given one first."""
    candidates = [(width, depth, height), (depth, width, height)]
    if rotate_3d:
        candidates += [
            (width, height, depth), (height, width, depth),
            (depth, height, width), (height, depth, width),
        ]
    seen: set = set()
    result: List[Extents] = []
    for extents in candidates:
        if extents not in seen:
            seen.add(extents)
            result.append(extents)
    return result


# ─────────────────────────────────────────────────────────────────────────────
# Dimension
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Dimension:
    """
    Extents of a rectangular volume.

    Attributes:
        width:  X-axis extent.
        depth:  Y-axis extent.
        height: Z-axis (vertical) extent.
        name:   Optional label, e.g. a container catalog name.
    """
    width: float
    depth: float
    height: float
    name: str = ""

    @property
    def volume(self) -> float:
        return self.width * self.depth * self.height

    @property
    def footprint(self) -> float:
        return self.width * self.depth

    @property
    def extents(self) -> Extents:
        return (self.width, self.depth, self.height)

    def is_empty(self) -> bool:
        return self.width <= 0 or self.depth <= 0 or self.height <= 0

    def can_hold_2d(self, box: "Box") -> bool:
        """True if *box* fits with its height kept vertical."""
        return box.can_fit_inside_2d(self)

    def can_hold_3d(self, box: "Box") -> bool:
        """True if *box* fits in any axis-aligned orientation."""
        return box.can_fit_inside_3d(self)

    def encode(self) -> str:
        return "x".join(_format_number(v) for v in self.extents)

    @classmethod
    def decode(cls, text: str, name: str = "") -> "Dimension":
        """
        Parse a ``"<width>x<depth>x<height>"`` string.

        Raises:
            InvalidInputError: if *text* is not three numbers joined by 'x'.
        """
        match = _DIMENSION_PATTERN.match(text or "")
        if match is None:
            raise InvalidInputError(f"Cannot parse dimension from {text!r}")
        width, depth, height = (_parse_number(g) for g in match.groups())
        return cls(width, depth, height, name=name)


# ─────────────────────────────────────────────────────────────────────────────
# Box
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(eq=False)
class Box(Dimension):
    """
    An item to be packed.

    Boxes compare by identity: two boxes with equal extents are still two
    distinct items. Fit queries prefixed ``can_`` never change orientation;
    the ``fit_rotate_*`` and ``rotate_*`` methods rewrite it in place.
    """

    __eq__ = object.__eq__
    __hash__ = object.__hash__

    def rotate_2d(self) -> "Box":
        self.width, self.depth = self.depth, self.width
        return self

    def rotate_3d(self) -> "Box":
        self.width, self.depth, self.height = self.depth, self.height, self.width
        return self

    def orientations(self, rotate_3d: bool = True) -> List[Extents]:
        return _orientations(self.width, self.depth, self.height, rotate_3d)

    def can_fit_inside_2d(self, space: Dimension) -> bool:
        return any(_fits(o, space) for o in self.orientations(rotate_3d=False))

    def can_fit_inside_3d(self, space: Dimension) -> bool:
        return any(_fits(o, space) for o in self.orientations(rotate_3d=True))

    def fit_rotate_2d(self, space: Dimension) -> bool:
        """
        Rotate around the vertical axis so the box fits *space*.

        The current orientation is kept when it already fits.

        Returns:
            False (orientation unchanged) if neither 2D rotation fits.
        """
        for extents in self.orientations(rotate_3d=False):
            if _fits(extents, space):
                self._apply(extents)
                return True
        return False

    def fit_rotate_3d_smallest_footprint(self, space: Dimension) -> bool:
        """Rotate to the fitting orientation with the smallest footprint."""
        best: Optional[Extents] = None
        for extents in self.orientations(rotate_3d=True):
            if not _fits(extents, space):
                continue
            if best is None or extents[0] * extents[1] < best[0] * best[1]:
                best = extents
        if best is None:
            return False
        self._apply(best)
        return True

    def rotate_largest_footprint_3d(self, space: Dimension) -> bool:
        """Rotate to the fitting orientation with the largest footprint."""
        best: Optional[Extents] = None
        for extents in self.orientations(rotate_3d=True):
            if not _fits(extents, space):
                continue
            if best is None or extents[0] * extents[1] > best[0] * best[1]:
                best = extents
        if best is None:
            return False
        self._apply(best)
        return True

    def copy(self) -> "Box":
        return Box(self.width, self.depth, self.height, name=self.name)

    def _apply(self, extents: Extents) -> None:
        self.width, self.depth, self.height = extents

    def __repr__(self) -> str:
        label = f"{self.name}, " if self.name else ""
        return f"Box({label}{self.encode()})"


# ─────────────────────────────────────────────────────────────────────────────
# Space
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(eq=False)
class Space(Dimension):
    """
    A free region available for placement.

    ``remainder`` is the peer region that, together with this one and the
    box that was cut out of the parent, rebuilds the parent region. The
    link is always set on both sides (see ``set_remainder``).
    """
    __eq__ = object.__eq__
    __hash__ = object.__hash__

    x: float = 0
    y: float = 0
    z: float = 0
    remainder: Optional["Space"] = field(default=None, repr=False)

    @property
    def origin(self) -> Extents:
        return (self.x, self.y, self.z)

    def set_remainder(self, other: "Space") -> None:
        self.remainder = other
        other.remainder = self

    @staticmethod
    def split_pair(working: "Space", remainder: "Space") -> "Space":
        """Link *working* and *remainder* reciprocally and return *working*."""
        working.set_remainder(remainder)
        return working

    def intersects(self, other: "Space") -> bool:
        return (
            self.x < other.x + other.width and other.x < self.x + self.width
            and self.y < other.y + other.depth and other.y < self.y + self.depth
            and self.z < other.z + other.height and other.z < self.z + self.height
        )

    def __repr__(self) -> str:
        return f"Space({self.encode()} @ {self.x},{self.y},{self.z})"


# ─────────────────────────────────────────────────────────────────────────────
# Placement
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Placement:
    """
    A box fixed at the origin corner of the space it was assigned.

    The pairing is immutable; the box's extents are read at access time so
    the final orientation chosen by the packer is the one reported.
    """
    space: Space
    box: Box

    @property
    def x(self) -> float:
        return self.space.x

    @property
    def y(self) -> float:
        return self.space.y

    @property
    def z(self) -> float:
        return self.space.z

    @property
    def x_max(self) -> float:
        return self.space.x + self.box.width

    @property
    def y_max(self) -> float:
        return self.space.y + self.box.depth

    @property
    def z_max(self) -> float:
        return self.space.z + self.box.height

    def intersects(self, other: "Placement") -> bool:
        """True if the occupied volumes of the two boxes overlap."""
        return (
            self.x < other.x_max and other.x < self.x_max
            and self.y < other.y_max and other.y < self.y_max
            and self.z < other.z_max and other.z < self.z_max
        )

    def to_dict(self) -> dict:
        return {
            "box": self.box.name,
            "dims": [self.box.width, self.box.depth, self.box.height],
            "position": [self.x, self.y, self.z],
        }


# ─────────────────────────────────────────────────────────────────────────────
# Level
# ─────────────────────────────────────────────────────────────────────────────

class Level:
    """A horizontal slab of the container starting at ``z``."""

    __slots__ = ("height", "z", "placements")

    def __init__(self, height: float, z: float = 0) -> None:
        self.height = height
        self.z = z
        self.placements: List[Placement] = []

    def add(self, placement: Placement) -> None:
        self.placements.append(placement)

    def validate(self) -> None:
        """
        Raises:
            OverlapError: if two boxes in this level intersect.
        """
        for i, first in enumerate(self.placements):
            for second in self.placements[i + 1:]:
                if first.intersects(second):
                    raise OverlapError(
                        f"{first.box!r} at {first.space.origin} intersects "
                        f"{second.box!r} at {second.space.origin}"
                    )

    def __iter__(self) -> Iterator[Placement]:
        return iter(self.placements)

    def __len__(self) -> int:
        return len(self.placements)

    def __repr__(self) -> str:
        return f"Level(z={self.z}, height={self.height}, boxes={len(self.placements)})"


# ─────────────────────────────────────────────────────────────────────────────
# Container
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(eq=False)
class Container(Dimension):
    """
    Packing result for one chosen container.

    Placements are kept in the order boxes were fixed in place, and also
    grouped per level.
    """
    __eq__ = object.__eq__
    __hash__ = object.__hash__

    levels: List[Level] = field(default_factory=list, repr=False)
    placements: List[Placement] = field(default_factory=list, repr=False)

    @classmethod
    def from_dimension(cls, dimension: Dimension) -> "Container":
        return cls(dimension.width, dimension.depth, dimension.height,
                   name=dimension.name)

    @property
    def stack_height(self) -> float:
        """Sum of the heights of all opened levels."""
        return sum(level.height for level in self.levels)

    def get_stack_height(self) -> float:
        return self.stack_height

    def add_level(self, height: float) -> Level:
        """Open a level of *height* on top of the current stack."""
        level = Level(height, z=self.stack_height)
        self.levels.append(level)
        return level

    def add(self, placement: Placement) -> None:
        if not self.levels:
            raise PackingError("add_level() must be called before add()")
        self.levels[-1].add(placement)
        self.placements.append(placement)

    def get_remaining_free_space(self) -> Dimension:
        """Full footprint above the current stack."""
        return Dimension(self.width, self.depth, self.height - self.stack_height)

    def get_boxes(self) -> List[Box]:
        return [p.box for p in self.placements]

    @property
    def box_count(self) -> int:
        return len(self.placements)

    @property
    def used_volume(self) -> float:
        return sum(p.box.volume for p in self.placements)

    @property
    def utilization(self) -> float:
        """Volume utilization percentage."""
        if not self.placements:
            return 0.0
        return (self.used_volume / self.volume) * 100

    def validate_current_level(self) -> None:
        if self.levels:
            self.levels[-1].validate()

    def __repr__(self) -> str:
        label = f"{self.name}, " if self.name else ""
        return (
            f"Container({label}{self.encode()}, "
            f"levels={len(self.levels)}, "
            f"boxes={self.box_count}, "
            f"height={self.stack_height}, "
            f"util={self.utilization:.1f}%)"
        )
