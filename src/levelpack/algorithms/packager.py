"""
Level-based packer: fit a set of boxes into one of several containers.

Algorithm overview
~~~~~~~~~~~~~~~~~~
Containers are tried in the order given. The first container that is large
enough by volume and can hold every box on its own is packed; a container
that fails midway is abandoned and the next one is tried from scratch with
a fresh copy of the pending boxes.

A container is filled one horizontal **level** at a time:
  1. Every pending box is rotated to its largest footprint that fits above
     the current stack. If any box no longer fits, the attempt is aborted.
  2. The seed box is the one with the largest footprint (tie: tallest), or
     the tallest (tie: largest footprint) when ``footprint_first`` is off.
  3. A box whose height exactly matches the remaining height takes over as
     seed, the one with the largest footprint among such boxes.
  4. A level as tall as the seed is opened over the full container
     footprint and handed to ``fit_2d``.

``fit_2d`` puts a box in the corner of a free space, splits what is left
into candidate strips (``free_spaces``), picks the best-fitting pending box
over all strips (``best_volume_placement``), fills the smaller remainder
strip first and then recurses into the chosen strip. Placed boxes are never
revisited.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import PackagerSettings
from ..core.models import Box, Container, Dimension, Placement, Space
from ..core.validator import validate_dimensions

logger = logging.getLogger(__name__)

# Indices into the list returned by ``free_spaces`` that assume the used
# box is rotated a quarter turn around the vertical axis.
ROTATED_SPACE_INDICES = (2, 3)


class Packager:
    """
    Pack boxes into the first suitable container.

    Configuration is fixed at construction; every ``pack`` call works on its
    own pending list and result container, so one instance may be shared
    between threads as long as the boxes are not.

    Args:
        containers:      Candidate containers in priority order.
        rotate_3d:       Allow all axis-aligned rotations; when False only
                         width and depth may swap.
        footprint_first: Choose level seeds by footprint, then height; when
                         False by height, then footprint.

    Raises:
        InvalidInputError: if *containers* is empty or has a non-positive extent.
    """

    def __init__(
        self,
        containers: Iterable[Dimension],
        rotate_3d: bool = True,
        footprint_first: bool = True,
    ) -> None:
        candidates = tuple(containers)
        validate_dimensions(candidates, "container")
        self.containers: Tuple[Dimension, ...] = candidates
        self.rotate_3d = rotate_3d
        self.footprint_first = footprint_first

    @classmethod
    def from_settings(cls, settings: PackagerSettings) -> "Packager":
        return cls(
            settings.to_dimensions(),
            rotate_3d=settings.rotate_3d,
            footprint_first=settings.footprint_first,
        )

    # ── Container selection ──────────────────────────────────────────────

    def pack(self, boxes: Sequence[Box]) -> Optional[Container]:
        """
        Return a container holding all *boxes*, or None if none can.

        The boxes' orientations are rewritten; the placements of the
        returned container reference the very box objects passed in.

        Raises:
            InvalidInputError: if *boxes* is empty or has a non-positive extent.
        """
        boxes = list(boxes)
        validate_dimensions(boxes, "box")

        volume = sum(box.volume for box in boxes)

        for dimension in self.containers:
            if dimension.volume < volume:
                logger.debug("Skipping %r: volume %s < %s", dimension, dimension.volume, volume)
                continue
            if not all(self._can_hold(dimension, box) for box in boxes):
                logger.debug("Skipping %r: a box does not fit", dimension)
                continue

            holder = self._pack_levels(dimension, boxes)
            if holder is None:
                logger.debug("Attempt in %r aborted, trying next container", dimension)
                continue

            logger.info(
                "Packed %d boxes into %r in %d levels",
                len(boxes), dimension, len(holder.levels),
            )
            return holder

        logger.info("No container fits %d boxes", len(boxes))
        return None

    def _can_hold(self, dimension: Dimension, box: Box) -> bool:
        if self.rotate_3d:
            return dimension.can_hold_3d(box)
        return dimension.can_hold_2d(box)

    # ── Level loop ───────────────────────────────────────────────────────

    def _pack_levels(self, dimension: Dimension, boxes: List[Box]) -> Optional[Container]:
        """Build one container level by level; None if a box stops fitting."""
        pending = list(boxes)
        holder = Container.from_dimension(dimension)

        while pending:
            space = holder.get_remaining_free_space()

            current: Optional[Box] = None
            for box in pending:
                if self.rotate_3d:
                    fits = box.rotate_largest_footprint_3d(space)
                else:
                    fits = box.fit_rotate_2d(space)
                if not fits:
                    return None
                if current is None or self._is_better_seed(box, current):
                    current = box

            if current.height < space.height:
                # prefer a box that closes the container exactly
                ideal: Optional[Box] = None
                for box in pending:
                    if box.height == space.height:
                        if ideal is None or ideal.footprint < box.footprint:
                            ideal = box
                if ideal is not None:
                    current = ideal

            level = holder.add_level(current.height)
            level_space = Space(
                dimension.width, dimension.depth, current.height,
                x=0, y=0, z=level.z,
            )
            logger.debug("Opened %r with seed %r", level, current)

            pending.remove(current)
            self.fit_2d(pending, holder, current, level_space)

        return holder

    def _is_better_seed(self, box: Box, current: Box) -> bool:
        if self.footprint_first:
            if current.footprint < box.footprint:
                return True
            return current.footprint == box.footprint and current.height < box.height
        if current.height < box.height:
            return True
        return current.height == box.height and current.footprint < box.footprint

    # ── Placement recursion ──────────────────────────────────────────────

    def fit_2d(self, pending: List[Box], holder: Container, used: Box, free: Space) -> None:
        """
        Place *used* in the corner of *free* and fill the rest of *free*.

        Boxes taken from *pending* are removed from it; placements are
        appended to *holder*.
        """
        if self.rotate_3d:
            # minimize footprint
            used.fit_rotate_3d_smallest_footprint(free)

        # The orientation of used may still change below, depending on which
        # of the free spaces is taken.
        holder.add(Placement(free, used))

        if not pending:
            used.fit_rotate_2d(free)
            return

        spaces = self.free_spaces(free, used)

        best = self.best_volume_placement(pending, spaces)
        if best is None:
            used.fit_rotate_2d(free)
            return

        if any(best.space is spaces[i] for i in ROTATED_SPACE_INDICES):
            used.rotate_2d()

        pending.remove(best.box)

        # fill the smaller remainder first
        remainder = best.space.remainder
        if remainder is not None and not remainder.is_empty():
            box = self.best_volume(pending, remainder)
            if box is not None:
                pending.remove(box)
                self.fit_2d(pending, holder, box, remainder)

        self.fit_2d(pending, holder, best.box, best.space)

    # ── Free-space splitting ─────────────────────────────────────────────

    def free_spaces(self, free: Space, used: Dimension) -> List[Optional[Space]]:
        """
        Split what *used* leaves of *free* into up to four candidate spaces.

        The box sits in the corner at the origin of *free*. Index 0 is the
        strip beside the box (full depth) and index 1 the strip behind it
        (full width), both for the current orientation.
        Indices 2 and 3 are the same strips for the box turned a quarter
        turn. Each space carries its remainder, the part of *free* that is
        neither the space nor the box. Missing candidates are None.
        """
        spaces: List[Optional[Space]] = [None, None, None, None]
        for offset, (width, depth) in enumerate(
            ((used.width, used.depth), (used.depth, used.width))
        ):
            if free.width < width or free.depth < depth:
                continue
            if free.width > width:
                beside = Space(
                    free.width - width, free.depth, free.height,
                    x=free.x + width, y=free.y, z=free.z,
                )
                behind_box = Space(
                    width, free.depth - depth, free.height,
                    x=free.x, y=free.y + depth, z=free.z,
                )
                spaces[2 * offset] = Space.split_pair(beside, behind_box)
            if free.depth > depth:
                behind = Space(
                    free.width, free.depth - depth, free.height,
                    x=free.x, y=free.y + depth, z=free.z,
                )
                beside_box = Space(
                    free.width - width, depth, free.height,
                    x=free.x + width, y=free.y, z=free.z,
                )
                spaces[2 * offset + 1] = Space.split_pair(behind, beside_box)
        return spaces

    # ── Best-fit selection ───────────────────────────────────────────────

    def best_volume(self, pending: Sequence[Box], space: Space) -> Optional[Box]:
        """Largest box that fits *space*; ties go to the smaller footprint."""
        best: Optional[Box] = None
        for box in pending:
            if not self._can_fit(box, space):
                continue
            if best is None or self._is_better_fit(box, space, best, space):
                best = box
        return best

    def best_volume_placement(
        self, pending: Sequence[Box], spaces: Sequence[Optional[Space]]
    ) -> Optional[Placement]:
        """Best box over all non-empty *spaces*, paired with its space."""
        best: Optional[Box] = None
        best_space: Optional[Space] = None
        for space in spaces:
            if space is None or space.is_empty():
                continue
            for box in pending:
                if not self._can_fit(box, space):
                    continue
                if best is None or self._is_better_fit(box, space, best, best_space):
                    best = box
                    best_space = space
        if best is None:
            return None
        return Placement(best_space, best)

    def _can_fit(self, box: Box, space: Space) -> bool:
        if self.rotate_3d:
            return box.can_fit_inside_3d(space)
        return box.can_fit_inside_2d(space)

    def _is_better_fit(self, box: Box, space: Space, best: Box, best_space: Space) -> bool:
        if best.volume < box.volume:
            return True
        if best.volume > box.volume:
            return False
        # equal volume: compare footprints after the tightest rotation
        if self.rotate_3d:
            best.fit_rotate_3d_smallest_footprint(best_space)
            box.fit_rotate_3d_smallest_footprint(space)
        return box.footprint < best.footprint
