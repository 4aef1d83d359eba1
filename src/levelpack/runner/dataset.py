"""Box-set generation and orderings for packing experiments."""

import random
from typing import Callable

from levelpack.core.models import Box


def generate_boxes(
    count: int = 20,
    min_dim: int = 1,
    max_dim: int = 10,
    seed: int | None = None,
) -> list[Box]:
    """
    Generate boxes with integer extents drawn from [min_dim, max_dim].

    Args:
        count: Number of boxes to generate
        min_dim: Smallest extent on any axis
        max_dim: Largest extent on any axis
        seed: Random seed for reproducibility (default: None)

    Returns:
        List of freshly created Box objects named "box-<i>"

    Raises:
        ValueError: If the bounds are not positive or min_dim > max_dim
    """
    if min_dim <= 0 or min_dim > max_dim:
        raise ValueError(f"Invalid extent bounds: [{min_dim}, {max_dim}]")

    rng = random.Random(seed)

    boxes = []
    for i in range(count):
        width = rng.randint(min_dim, max_dim)
        depth = rng.randint(min_dim, max_dim)
        height = rng.randint(min_dim, max_dim)
        boxes.append(Box(width, depth, height, name=f"box-{i}"))

    return boxes


def generate_identical(count: int, width: float, depth: float, height: float) -> list[Box]:
    """Generate *count* distinct boxes with the same extents."""
    return [Box(width, depth, height, name=f"box-{i}") for i in range(count)]


def copy_boxes(boxes: list[Box]) -> list[Box]:
    """Fresh boxes with the same extents and names, in the same order."""
    return [box.copy() for box in boxes]


def random_order(boxes: list[Box], seed: int | None = None) -> list[Box]:
    """
    Return boxes in random order.

    Args:
        boxes: List of boxes
        seed: Random seed for reproducibility (default: None)

    Returns:
        Shuffled copy of the list (same box objects)
    """
    shuffled = boxes.copy()
    random.Random(seed).shuffle(shuffled)
    return shuffled


def volume_sorted_order(boxes: list[Box]) -> list[Box]:
    """Sort boxes by volume (largest first)."""
    return sorted(boxes, key=lambda b: b.volume, reverse=True)


def footprint_sorted_order(boxes: list[Box]) -> list[Box]:
    """Sort boxes by largest face area (largest first)."""
    return sorted(
        boxes,
        key=lambda b: max(b.width * b.depth, b.width * b.height, b.depth * b.height),
        reverse=True,
    )


# Map of ordering strategy names to functions
ORDERING_STRATEGIES: dict[str, Callable[[list[Box]], list[Box]]] = {
    "random": random_order,
    "volume_sorted": volume_sorted_order,
    "footprint_sorted": footprint_sorted_order,
}


def get_ordering_strategy(name: str) -> Callable[[list[Box]], list[Box]]:
    """
    Get an ordering strategy function by name.

    Args:
        name: Strategy name (random, volume_sorted, footprint_sorted)

    Returns:
        Ordering function

    Raises:
        ValueError: If strategy name is not recognized
    """
    if name not in ORDERING_STRATEGIES:
        raise ValueError(
            f"Unknown ordering strategy: {name}. "
            f"Available: {list(ORDERING_STRATEGIES.keys())}"
        )
    return ORDERING_STRATEGIES[name]
