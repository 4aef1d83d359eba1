"""Level-based 3D container packing.

Public API:
    from levelpack import Packager, Box, Dimension
    packager = Packager([Dimension(10, 10, 10)])
    container = packager.pack([Box(6, 10, 10), Box(4, 10, 10)])  # None if no fit
"""

from .algorithms.packager import Packager
from .config import ContainerSpec, PackagerSettings, load_settings, settings_from_dict
from .core.models import Box, Container, Dimension, Level, Placement, Space
from .core.validator import InvalidInputError, PackingError, verify_packing

__version__ = "0.1.0"

__all__ = [
    # Engine
    "Packager",
    # Models
    "Box",
    "Container",
    "Dimension",
    "Level",
    "Placement",
    "Space",
    # Configuration
    "ContainerSpec",
    "PackagerSettings",
    "load_settings",
    "settings_from_dict",
    # Errors & verification
    "PackingError",
    "InvalidInputError",
    "verify_packing",
]
