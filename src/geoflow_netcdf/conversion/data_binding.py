# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 GeoFLOW NetCDF Team

"""
Data binder.

Writes in-memory values into container variables. Every write resolves the
variable by name, coerces the values into an owned buffer of the variable's
element type, checks the element count against the declared shape and then
performs a single bulk write.

Three source shapes are supported:
  - one field of every node in a node collection
  - a single scalar
  - a plain sequence of values
"""

import logging
from typing import Any, Callable, Sequence, Union

import numpy as np

from ..core.exceptions import ShapeMismatchError, ValidationError
from .container import ContainerBinding, VariableBinding
from .types import coerce_values

logger = logging.getLogger(__name__)

FieldSelector = Union[int, str, Callable[[Any], Any]]


def field_getter(field: FieldSelector) -> Callable[[Any], Any]:
    """Turn a field selector into a ``node -> value`` function.

    Args:
        field: Field index (read through ``node.value(index)``), accessor name
            (e.g. ``"lat"``), or a callable taking the node

    Raises:
        ValidationError: If the selector is none of those
    """
    if isinstance(field, bool):
        raise ValidationError("Field selector must not be a bool")
    if isinstance(field, (int, np.integer)):
        index = int(field)
        return lambda node: node.value(index)
    if isinstance(field, str):
        return lambda node: getattr(node, field)
    if callable(field):
        return field
    raise ValidationError(f"Unsupported field selector {field!r}")


class DataBinder:
    """Bulk writes of values into named container variables.

    Args:
        container: Open container holding the variable definitions
    """

    def __init__(self, container: ContainerBinding) -> None:
        self.container = container

    def write_node_field(self, var_name: str, nodes: Sequence[Any], field: FieldSelector) -> None:
        """Write ``field`` of every node, in collection order, into ``var_name``.

        Element ``i`` of the variable (flattened in declared dimension order)
        receives node ``i``'s value.

        Raises:
            VariableNotFoundError: If the container has no such variable
            ElementTypeError: If a value does not match the variable's type
            ShapeMismatchError: If ``len(nodes)`` differs from the variable size
        """
        getter = field_getter(field)
        self._write(var_name, [getter(node) for node in nodes])

    def write_scalar(self, var_name: str, value: Any) -> None:
        """Write a single value into a scalar or one-element variable."""
        self._write(var_name, [value])

    def write_values(self, var_name: str, values: Any) -> None:
        """Write a sequence (or numpy array) of values verbatim."""
        self._write(var_name, values)

    def _write(self, var_name: str, values: Any) -> None:
        binding = self.container.binding(var_name)
        buffer = coerce_values(values, binding.tag)
        self._check_shape(binding, buffer)
        self.container.put_data(binding.handle, buffer.reshape(binding.shape))
        logger.debug("Wrote %d values to %s", buffer.size, var_name)

    @staticmethod
    def _check_shape(binding: VariableBinding, buffer: np.ndarray) -> None:
        if buffer.size != binding.size:
            raise ShapeMismatchError(
                f"Variable '{binding.name}' has shape {binding.shape} "
                f"({binding.size} values) but {buffer.size} values were supplied"
            )
