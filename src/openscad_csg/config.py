"""Configuration for AST to CSG tree conversion.

Example:
    from openscad_csg.config import CSGProcessorConfig, load_config

    config = CSGProcessorConfig(max_depth=20, enable_logging=True)
    config = CSGProcessorConfig.from_dict({"maxDepth": 20})
    config = load_config("csg.yaml")
"""

from __future__ import annotations

import dataclasses
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

import yaml

from .tree.nodes import Color, CSGMaterial


#: Material attached to every node unless the configuration overrides it.
DEFAULT_MATERIAL = CSGMaterial(
    color=Color(r=0.3, g=0.5, b=0.8, a=1.0),
    opacity=1.0,
    metalness=0.1,
    roughness=0.4,
    wireframe=False,
)


@dataclass(frozen=True)
class CSGProcessorConfig:
    """Options accepted by ``process_ast_to_csg_tree()``.

    Attributes:
        enable_logging: Log start and completion summaries at INFO level.
        enable_optimization: Reserved; accepted but not consulted.
        enable_validation: Reserved; the validator is never run
            automatically, call ``validate_csg_tree()`` explicitly.
        max_depth: Deepest AST nesting converted. Deeper branches fail with
            MAX_DEPTH_EXCEEDED.
        max_nodes: Accepted but not enforced by the conversion walk.
        enable_text_recovery: Recover numbers and vectors from the raw text
            of malformed expression nodes.
        default_material: Material attached to every converted node.
    """
    enable_logging: bool = False
    enable_optimization: bool = True
    enable_validation: bool = True
    max_depth: int = 50
    max_nodes: int = 10000
    enable_text_recovery: bool = True
    default_material: CSGMaterial = field(default_factory=lambda: DEFAULT_MATERIAL)

    def with_overrides(self, **overrides: Any) -> "CSGProcessorConfig":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **overrides)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "CSGProcessorConfig":
        """Build a configuration from a mapping of options.

        Keys may be snake_case (``max_depth``) or camelCase (``maxDepth``).
        Missing keys keep their defaults. A ``default_material`` given as a
        mapping is merged over DEFAULT_MATERIAL.

        Raises:
            ValueError: If the mapping contains an unknown option.
            TypeError: If data is not a mapping.
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError(f"Configuration must be a mapping, not {type(data).__name__}")

        names = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name not in names:
                raise ValueError(f"Unknown configuration option: {key}")
            if name == "default_material":
                value = _material_from_value(value)
            kwargs[name] = value
        return cls(**kwargs)


def _snake_case(name: str) -> str:
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()


def _material_from_value(value: Any) -> CSGMaterial:
    if isinstance(value, CSGMaterial):
        return value
    if not isinstance(value, Mapping):
        raise TypeError(f"default_material must be a mapping, not {type(value).__name__}")

    names = {f.name for f in dataclasses.fields(CSGMaterial)}
    kwargs: dict[str, Any] = {}
    for key, item in value.items():
        name = _snake_case(key)
        if name not in names:
            raise ValueError(f"Unknown material option: {key}")
        if name == "color":
            item = _color_from_value(item)
        kwargs[name] = item
    return dataclasses.replace(DEFAULT_MATERIAL, **kwargs)


def _color_from_value(value: Any) -> Color:
    if isinstance(value, Color):
        return value
    if isinstance(value, Mapping):
        return Color(**{k: float(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)) and len(value) in (3, 4):
        return Color(*(float(v) for v in value))
    raise ValueError(f"Invalid material color: {value!r}")


def coerce_config(config: "CSGProcessorConfig | Mapping[str, Any] | None") -> CSGProcessorConfig:
    """Accept a config object, a mapping of overrides, or None for defaults."""
    if isinstance(config, CSGProcessorConfig):
        return config
    return CSGProcessorConfig.from_dict(config)


def load_config(file: str) -> CSGProcessorConfig:
    """Load a configuration from a YAML file.

    An empty file yields the default configuration.

    Args:
        file: Path of the YAML file.

    Returns:
        The configuration described by the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file holds unknown options or is not a mapping.

    Example:
        # csg.yaml
        #   maxDepth: 20
        #   defaultMaterial:
        #     color: [1.0, 0.0, 0.0]
        config = load_config("csg.yaml")
    """
    file_path = os.path.abspath(file)
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File {file} not found")

    with open(file_path, 'r', encoding='utf-8') as f:
        data: Optional[Any] = yaml.safe_load(f)

    if data is not None and not isinstance(data, Mapping):
        raise ValueError(f"Configuration file {file} must contain a mapping")
    return CSGProcessorConfig.from_dict(data)
