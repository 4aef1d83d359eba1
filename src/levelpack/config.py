"""
Packer configuration: candidate containers and rotation/seed modes.

Settings are immutable pydantic models so a configured ``Packager`` can be
shared freely. A container catalog can be written in YAML::

    rotate_3d: true
    footprint_first: true
    containers:
      - name: small parcel
        width: 30
        depth: 20
        height: 15
      - "60x40x40"          # shorthand: <width>x<depth>x<height>

Containers are tried in the order listed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .core.models import Dimension
from .core.validator import InvalidInputError


class ContainerSpec(BaseModel):
    """One candidate container."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    width: float = Field(gt=0)
    depth: float = Field(gt=0)
    height: float = Field(gt=0)

    def to_dimension(self) -> Dimension:
        return Dimension(self.width, self.depth, self.height, name=self.name)


class PackagerSettings(BaseModel):
    """
    All tuneable parameters of a packer.

    Attributes:
        containers:      Candidate containers in priority order.
        rotate_3d:       Allow any axis-aligned rotation (False: height fixed).
        footprint_first: Seed levels by footprint first (False: height first).
    """

    model_config = ConfigDict(frozen=True)

    containers: List[ContainerSpec] = Field(min_length=1)
    rotate_3d: bool = True
    footprint_first: bool = True

    @field_validator("containers", mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        expanded = []
        for item in value:
            if isinstance(item, str):
                dimension = Dimension.decode(item)
                item = {"width": dimension.width, "depth": dimension.depth,
                        "height": dimension.height}
            elif isinstance(item, Dimension):
                item = {"name": item.name, "width": item.width,
                        "depth": item.depth, "height": item.height}
            expanded.append(item)
        return expanded

    def to_dimensions(self) -> List[Dimension]:
        return [spec.to_dimension() for spec in self.containers]

    def to_dict(self) -> dict:
        return self.model_dump()


def settings_from_dict(data: Any) -> PackagerSettings:
    """
    Build settings from already-parsed data.

    Raises:
        InvalidInputError: if *data* does not describe valid settings.
    """
    if not isinstance(data, dict):
        raise InvalidInputError(f"Settings must be a mapping, got {type(data).__name__}")
    try:
        return PackagerSettings.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid packer settings: {exc}") from exc


def load_settings(path: Union[str, Path]) -> PackagerSettings:
    """
    Load settings from a YAML file.

    Raises:
        InvalidInputError: if the file is not valid YAML or not valid settings.
    """
    with Path(path).open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise InvalidInputError(f"Cannot parse {path}: {exc}") from exc
    return settings_from_dict(data)
