# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 GeoFLOW NetCDF Team

"""
Schema store for the JSON metadata document.

The schema has two required top-level arrays and one optional one::

    {
        "dimensions": [{"name": "node", "size": 3}],
        "variables": [
            {"name": "lat", "type": "double", "dims": ["node"],
             "attributes": [{"name": "units", "type": "string",
                             "value": "degrees_north"}]}
        ],
        "attributes": [{"name": "Conventions", "type": "string", "value": "CF-1.8"}]
    }

The document is parsed once into frozen records; lookups are read-only.
"""

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Union

from ..core.exceptions import (
    SchemaError,
    UnknownDimensionError,
    VariableNotFoundError,
    require,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DimensionSpec:
    """A named, sized axis."""
    name: str
    size: int


@dataclass(frozen=True)
class AttributeSpec:
    """An attribute declaration; ``value`` is always text at this layer."""
    name: str
    type_name: str
    value: str


@dataclass(frozen=True)
class VariableSpec:
    """A variable declaration with its ordered dimension names."""
    name: str
    type_name: str
    dims: Tuple[str, ...] = ()
    attributes: Tuple[AttributeSpec, ...] = field(default_factory=tuple)

    def shape(self, store: "SchemaStore") -> Tuple[int, ...]:
        """Declared shape, resolving each dimension size through ``store``."""
        return tuple(store.dimension_size(dim) for dim in self.dims)


def _render_value(value: Any) -> str:
    """Render a JSON attribute value as text."""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    if isinstance(value, list):
        return ",".join(_render_value(item) for item in value)
    raise SchemaError(f"Unsupported attribute value {value!r}")


def _parse_attributes(entries: Any, owner: str) -> Tuple[AttributeSpec, ...]:
    require(isinstance(entries, list), f"'attributes' of {owner} must be an array", SchemaError)
    attributes = []
    for entry in entries:
        require(isinstance(entry, Mapping), f"Attribute of {owner} must be an object", SchemaError)
        missing = [key for key in ("name", "type", "value") if key not in entry]
        require(not missing, f"Attribute of {owner} is missing {missing}", SchemaError)
        attributes.append(AttributeSpec(
            name=str(entry["name"]),
            type_name=str(entry["type"]),
            value=_render_value(entry["value"]),
        ))
    return tuple(attributes)


class SchemaStore:
    """Typed, read-only view over a parsed schema tree.

    Args:
        tree: Mapping with ``dimensions``, ``variables`` and optional
            ``attributes`` arrays (e.g. the result of ``json.load``)

    Raises:
        SchemaError: If the tree is structurally invalid
    """

    def __init__(self, tree: Mapping[str, Any]) -> None:
        require(isinstance(tree, Mapping), "Schema root must be an object", SchemaError)
        self._tree = copy.deepcopy(dict(tree))
        self._dimensions = self._parse_dimensions(self._tree.get("dimensions"))
        self._variables = self._parse_variables(self._tree.get("variables"))
        self._global_attributes = _parse_attributes(self._tree.get("attributes", []), "schema")
        self._dim_sizes = {dim.name: dim.size for dim in self._dimensions}
        self._by_name = {var.name: var for var in self._variables}

        logger.debug(
            "Loaded schema with %d dimensions and %d variables",
            len(self._dimensions), len(self._variables),
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SchemaStore":
        """Load a schema from a JSON file.

        Raises:
            SchemaError: If the file cannot be read or decoded
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                tree = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise SchemaError(f"Failed to load schema {path}: {exc}") from exc
        return cls(tree)

    # ---- parsing ----

    @staticmethod
    def _parse_dimensions(entries: Any) -> Tuple[DimensionSpec, ...]:
        require(isinstance(entries, list), "Schema requires a 'dimensions' array", SchemaError)
        dimensions = []
        seen = set()
        for entry in entries:
            require(isinstance(entry, Mapping) and "name" in entry and "size" in entry,
                    f"Dimension entry {entry!r} needs 'name' and 'size'", SchemaError)
            name = str(entry["name"])
            size = entry["size"]
            require(isinstance(size, int) and not isinstance(size, bool) and size > 0,
                    f"Dimension '{name}' size must be a positive integer, got {size!r}",
                    SchemaError)
            require(name not in seen, f"Dimension '{name}' declared twice", SchemaError)
            seen.add(name)
            dimensions.append(DimensionSpec(name=name, size=size))
        return tuple(dimensions)

    @staticmethod
    def _parse_variables(entries: Any) -> Tuple[VariableSpec, ...]:
        require(isinstance(entries, list), "Schema requires a 'variables' array", SchemaError)
        variables = []
        seen = set()
        for entry in entries:
            require(isinstance(entry, Mapping) and "name" in entry and "type" in entry,
                    f"Variable entry {entry!r} needs 'name' and 'type'", SchemaError)
            name = str(entry["name"])
            dims = entry.get("dims", [])
            require(isinstance(dims, list), f"'dims' of variable '{name}' must be an array",
                    SchemaError)
            require(name not in seen, f"Variable '{name}' declared twice", SchemaError)
            seen.add(name)
            variables.append(VariableSpec(
                name=name,
                type_name=str(entry["type"]),
                dims=tuple(str(dim) for dim in dims),
                attributes=_parse_attributes(entry.get("attributes", []), f"variable '{name}'"),
            ))
        return tuple(variables)

    # ---- lookups ----

    def dimensions(self) -> List[Tuple[str, int]]:
        """Declared dimensions as ``(name, size)`` pairs in file order."""
        return [(dim.name, dim.size) for dim in self._dimensions]

    def dimension_size(self, name: str) -> int:
        try:
            return self._dim_sizes[name]
        except KeyError:
            raise UnknownDimensionError(f"Dimension '{name}' is not declared in the schema") from None

    def has_dimension(self, name: str) -> bool:
        return name in self._dim_sizes

    def variable(self, name: str) -> VariableSpec:
        """Look up a variable declaration by name.

        Raises:
            VariableNotFoundError: If the schema does not declare ``name``
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise VariableNotFoundError(f"Variable '{name}' is not declared in the schema") from None

    def has_variable(self, name: str) -> bool:
        return name in self._by_name

    def variables(self) -> List[VariableSpec]:
        return list(self._variables)

    def variable_names(self) -> List[str]:
        return [var.name for var in self._variables]

    def attributes_of(self, var_name: str) -> List[Tuple[str, str, str]]:
        """Declared attributes of a variable as ``(name, type_name, text)``."""
        return [(a.name, a.type_name, a.value) for a in self.variable(var_name).attributes]

    def global_attributes(self) -> List[Tuple[str, str, str]]:
        return [(a.name, a.type_name, a.value) for a in self._global_attributes]

    def undeclared_dimensions(self) -> Dict[str, List[str]]:
        """Variables that reference dimension names missing from ``dimensions``."""
        problems: Dict[str, List[str]] = {}
        for var in self._variables:
            missing = [dim for dim in var.dims if dim not in self._dim_sizes]
            if missing:
                problems[var.name] = missing
        return problems
