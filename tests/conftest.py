"""Shared fixtures for the levelpack test suite."""

import os
import sys

import pytest

# Ensure the src layout is importable without an installed package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from levelpack.algorithms.packager import Packager  # noqa: E402
from levelpack.core.models import Dimension  # noqa: E402


@pytest.fixture
def cube_container():
    """A 10 x 10 x 10 container."""
    return Dimension(10, 10, 10, name="cube")


@pytest.fixture
def roomy_container():
    """Tall enough for 20 boxes of extent <= 10 stacked one per level."""
    return Dimension(100, 100, 200, name="roomy")


@pytest.fixture
def packer_2d(cube_container):
    return Packager([cube_container], rotate_3d=False)


@pytest.fixture
def packer_3d(cube_container):
    return Packager([cube_container], rotate_3d=True)
