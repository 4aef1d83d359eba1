"""
Packing validator: input checks and verification of finished packings.

Input checks (raised at the packer boundary):
  - at least one container and one box
  - every extent is a positive, finite number

Packing checks (``verify_packing``):
  1. Containment  — each box fits its assigned space, each space and box
                    lies inside the container
  2. Overlap      — no two placed boxes share volume
  3. Conservation — every input box is placed exactly once

A packer that finds no container for a box set returns ``None``; that is
not an error and never raises.
"""

from __future__ import annotations

import math
import numbers
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

import numpy as np

if TYPE_CHECKING:
    from .models import Box, Container, Dimension, Space


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────

class PackingError(Exception):
    """Base class for all packing errors."""


class InvalidInputError(PackingError, ValueError):
    """Boxes, containers or settings violate a precondition."""


class OutOfBoundsError(PackingError):
    """A box extends outside its space or the container."""


class OverlapError(PackingError):
    """Two placed boxes occupy the same volume."""


class ConservationError(PackingError):
    """Placed boxes differ from the input boxes."""


class RemainderError(PackingError):
    """A split pair is not reciprocal or does not rebuild its parent."""


# Float tolerance for geometric comparisons.
EPS = 1e-9


# ─────────────────────────────────────────────────────────────────────────────
# Input validation
# ─────────────────────────────────────────────────────────────────────────────

def validate_dimensions(items: Sequence["Dimension"], kind: str) -> None:
    """
    Reject empty inputs and non-positive or non-finite extents.

    Args:
        items: Boxes or container dimensions.
        kind:  Noun used in error messages ("box", "container").

    Raises:
        InvalidInputError: on the first offending item.
    """
    if not items:
        raise InvalidInputError(f"At least one {kind} is required")
    for index, item in enumerate(items):
        for axis in ("width", "depth", "height"):
            value = getattr(item, axis, None)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidInputError(
                    f"{kind} #{index} has non-numeric {axis}: {value!r}"
                )
            if not math.isfinite(value) or value <= 0:
                raise InvalidInputError(
                    f"{kind} #{index} must have a positive {axis}, got {value}"
                )


# ─────────────────────────────────────────────────────────────────────────────
# Packing verification
# ─────────────────────────────────────────────────────────────────────────────

def verify_packing(container: "Container", boxes: Optional[Iterable["Box"]] = None) -> bool:
    """
    Verify a packing returned by the packer.

    Args:
        container: Result container.
        boxes:     The input boxes; when given, conservation is checked
                   against them.

    Returns:
        True if all checks pass.

    Raises:
        OutOfBoundsError:  box outside its space or the container.
        OverlapError:      two boxes intersect.
        ConservationError: a box is missing, foreign or placed twice.
    """
    placements = container.placements
    bounds = np.array(container.extents, dtype=np.float64)

    # ── 1. Containment ───────────────────────────────────────────────────
    for p in placements:
        space, box = p.space, p.box
        if (box.width > space.width + EPS or box.depth > space.depth + EPS
                or box.height > space.height + EPS):
            raise OutOfBoundsError(f"{box!r} does not fit its space {space!r}")
        low = np.array(space.origin, dtype=np.float64)
        if np.any(low < -EPS) or np.any(low + space.extents > bounds + EPS):
            raise OutOfBoundsError(f"{space!r} extends outside {container!r}")

    # ── 2. Overlap ───────────────────────────────────────────────────────
    if placements:
        mins = np.array([[p.x, p.y, p.z] for p in placements], dtype=np.float64)
        maxs = np.array([[p.x_max, p.y_max, p.z_max] for p in placements], dtype=np.float64)
        if np.any(maxs > bounds + EPS):
            raise OutOfBoundsError(f"A box extends outside {container!r}")

        # Pairwise open-interval intersection on all three axes.
        overlap = np.all(
            (mins[:, None, :] < maxs[None, :, :] - EPS)
            & (mins[None, :, :] < maxs[:, None, :] - EPS),
            axis=2,
        )
        np.fill_diagonal(overlap, False)
    else:
        overlap = np.zeros((0, 0), dtype=bool)

    if np.any(overlap):
        i, j = (int(k) for k in np.argwhere(overlap)[0])
        raise OverlapError(
            f"{placements[i].box!r} at {placements[i].space.origin} intersects "
            f"{placements[j].box!r} at {placements[j].space.origin}"
        )

    # ── 3. Conservation ──────────────────────────────────────────────────
    placed_ids = [id(p.box) for p in placements]
    if len(set(placed_ids)) != len(placed_ids):
        raise ConservationError("A box was placed more than once")
    if boxes is not None:
        expected = {id(b) for b in boxes}
        if expected != set(placed_ids):
            missing = len(expected - set(placed_ids))
            foreign = len(set(placed_ids) - expected)
            raise ConservationError(
                f"{missing} input box(es) not placed, {foreign} unknown box(es) placed"
            )

    return True


def verify_split(parent: "Space", used: "Dimension", working: "Space") -> bool:
    """
    Verify a free-space pair produced for *used* inside *parent*.

    The pair must link reciprocally, and the two halves plus the column
    taken by the used footprint must rebuild the parent volume.

    Raises:
        RemainderError: if either condition fails.
    """
    remainder = working.remainder
    if remainder is None or remainder.remainder is not working:
        raise RemainderError(f"{working!r} has no reciprocal remainder")
    used_column = used.width * used.depth * parent.height
    total = working.volume + remainder.volume + used_column
    if abs(total - parent.volume) > EPS * max(1.0, parent.volume):
        raise RemainderError(
            f"Split of {parent!r} leaks volume: {total} != {parent.volume}"
        )
    return True
