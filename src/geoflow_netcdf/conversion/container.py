# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 GeoFLOW NetCDF Team

"""
Thin binding over a ``netCDF4.Dataset``.

Exposes only the primitives the converter needs (create dimension, create
variable, write attribute, look up a variable by name, write data) and turns
every netCDF4 failure into ``ContainerIOError``.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Sequence, Tuple, Union

import netCDF4 as nc4
import numpy as np

from ..core.exceptions import (
    ConfigurationError,
    ContainerIOError,
    DuplicateDimensionError,
    DuplicateVariableError,
    UnknownDimensionError,
    VariableNotFoundError,
    conversion_error_handler,
)
from .types import TypeTag

logger = logging.getLogger(__name__)

class FileMode(Enum):
    """How the container file is opened."""

    READ = "read"          # file exists, open read-only
    WRITE = "write"        # file exists, open for writing
    REPLACE = "replace"    # create new file, even if it exists
    NEW_FILE = "newFile"   # create new file, fail if it already exists

    @classmethod
    def parse(cls, value: Union[str, "FileMode"]) -> "FileMode":
        if isinstance(value, cls):
            return value
        for mode in cls:
            if mode.value == value or mode.name.lower() == str(value).lower():
                return mode
        raise ConfigurationError(f"Unknown file mode '{value}'")


class ContainerBinding:
    """Exclusive owner of one open NetCDF file.

    Args:
        path: NetCDF file path (e.g. ``myfile.nc``)
        mode: One of the ``FileMode`` values (or their string names)
        file_format: netCDF4 file format for newly created files

    Raises:
        ContainerIOError: If the file cannot be opened in ``mode``
    """

    def __init__(
        self,
        path: Union[str, Path],
        mode: Union[str, FileMode] = FileMode.NEW_FILE,
        file_format: str = "NETCDF4",
    ) -> None:
        self.path = Path(path)
        self.mode = FileMode.parse(mode)
        self._ds = None

        if self.mode in (FileMode.READ, FileMode.WRITE) and not self.path.exists():
            raise ContainerIOError(f"Cannot open {self.path} ({self.mode.value}): file does not exist")

        with conversion_error_handler(
            f"open of {self.path} ({self.mode.value})", logger, error_type=ContainerIOError
        ):
            if self.mode is FileMode.READ:
                self._ds = nc4.Dataset(str(self.path), "r")
            elif self.mode is FileMode.WRITE:
                self._ds = nc4.Dataset(str(self.path), "a")
            elif self.mode is FileMode.REPLACE:
                self._ds = nc4.Dataset(str(self.path), "w", clobber=True, format=file_format)
            else:
                self._ds = nc4.Dataset(str(self.path), "w", clobber=False, format=file_format)

        logger.debug("Opened %s in %s mode", self.path, self.mode.value)

    # ---- lifecycle ----

    @property
    def is_open(self) -> bool:
        return self._ds is not None and self._ds.isopen()

    def close(self) -> None:
        """Flush and close the file. Safe to call more than once."""
        ds = getattr(self, "_ds", None)
        if ds is None:
            return
        self._ds = None
        if ds.isopen():
            with conversion_error_handler(
                f"close of {self.path}", logger, error_type=ContainerIOError
            ):
                ds.close()
            logger.debug("Closed %s", self.path)

    def __enter__(self) -> "ContainerBinding":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        self.close()

    @property
    def dataset(self) -> nc4.Dataset:
        if not self.is_open:
            raise ContainerIOError(f"Container {self.path} is closed")
        return self._ds

    # ---- dimensions ----

    def create_dimension(self, name: str, size: int) -> None:
        """Create a dimension; an identical existing one is left as is.

        Raises:
            DuplicateDimensionError: If ``name`` exists with another size
        """
        ds = self.dataset
        if name in ds.dimensions:
            existing = len(ds.dimensions[name])
            if existing != size:
                raise DuplicateDimensionError(
                    f"Dimension '{name}' already exists with size {existing}, not {size}"
                )
            logger.debug("Dimension %s = %d already present", name, size)
            return
        with conversion_error_handler(
            f"createDimension({name}, {size})", logger, error_type=ContainerIOError
        ):
            ds.createDimension(name, size)

    def has_dimension(self, name: str) -> bool:
        return name in self.dataset.dimensions

    def dimension_size(self, name: str) -> int:
        try:
            return len(self.dataset.dimensions[name])
        except KeyError:
            raise UnknownDimensionError(f"Dimension '{name}' does not exist in {self.path}") from None

    # ---- variables ----

    def create_variable(self, name: str, tag: TypeTag, dims: Sequence[str]) -> nc4.Variable:
        """Create a variable of type ``tag`` over ``dims`` (in order).

        Raises:
            UnknownDimensionError: If a dimension has not been created
            DuplicateVariableError: If ``name`` exists with another type or dims
        """
        ds = self.dataset
        dims = tuple(dims)
        for dim in dims:
            if dim not in ds.dimensions:
                raise UnknownDimensionError(
                    f"Variable '{name}' references dimension '{dim}' which does not exist"
                )

        if name in ds.variables:
            existing = ds.variables[name]
            if existing.dimensions == dims and TypeTag.from_dtype(existing.dtype) is tag:
                logger.debug("Variable %s already present", name)
                return existing
            raise DuplicateVariableError(
                f"Variable '{name}' already exists as {existing.dtype}{existing.dimensions}"
            )

        with conversion_error_handler(
            f"createVariable({name})", logger, error_type=ContainerIOError
        ):
            return ds.createVariable(name, tag.nc_datatype, dims)

    def get_variable(self, name: str) -> nc4.Variable:
        """Look up a variable handle by name.

        Raises:
            VariableNotFoundError: If the container has no such variable
        """
        try:
            return self.dataset.variables[name]
        except KeyError:
            raise VariableNotFoundError(f"Variable '{name}' does not exist in {self.path}") from None

    def has_variable(self, name: str) -> bool:
        return name in self.dataset.variables

    def variable_shape(self, name: str) -> Tuple[int, ...]:
        return tuple(self.get_variable(name).shape)

    def variable_tag(self, name: str) -> TypeTag:
        return TypeTag.from_dtype(self.get_variable(name).dtype)

    def binding(self, name: str) -> "VariableBinding":
        """Resolve ``name`` to its handle, element type, dimensions and shape."""
        var = self.get_variable(name)
        return VariableBinding(
            name=name,
            tag=TypeTag.from_dtype(var.dtype),
            dims=tuple(var.dimensions),
            shape=tuple(var.shape),
            handle=var,
        )

    # ---- attributes ----

    def put_attribute(self, var: nc4.Variable, name: str, value: Any) -> None:
        """Write an already-typed attribute value onto a variable."""
        with conversion_error_handler(
            f"putAtt({var.name}:{name})", logger, error_type=ContainerIOError
        ):
            var.setncattr(name, value)

    def put_global_attribute(self, name: str, value: Any) -> None:
        with conversion_error_handler(
            f"putAtt(:{name})", logger, error_type=ContainerIOError
        ):
            self.dataset.setncattr(name, value)

    # ---- data ----

    def put_data(self, var: nc4.Variable, buffer: np.ndarray) -> None:
        """Write a buffer already shaped like ``var`` in one call."""
        with conversion_error_handler(
            f"putVar({var.name})", logger, error_type=ContainerIOError
        ):
            if var.ndim == 0:
                value = buffer.reshape(())
                # vlen strings are assigned as a plain str
                var.assignValue(value.item() if buffer.dtype.kind == "O" else value)
            else:
                var[:] = buffer

    def read_variable(self, name: str) -> np.ndarray:
        """Read a variable's full contents as an unmasked array."""
        var = self.get_variable(name)
        with conversion_error_handler(
            f"getVar({name})", logger, error_type=ContainerIOError
        ):
            var.set_auto_mask(False)
            if var.ndim == 0:
                return np.asarray(var.getValue())
            return np.asarray(var[:])


@dataclass(frozen=True)
class VariableBinding:
    """Resolved association of a variable name with its on-disk slot.

    Built by name lookup each time it is needed; never mutated.
    """
    name: str
    tag: TypeTag
    dims: Tuple[str, ...]
    shape: Tuple[int, ...]
    handle: Any = field(default=None, compare=False, repr=False)

    @property
    def size(self) -> int:
        """Number of elements: product of the dimension sizes (1 for scalars)."""
        return int(np.prod(self.shape, dtype=np.int64))
