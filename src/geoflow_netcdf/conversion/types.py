# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 GeoFLOW NetCDF Team

"""
Type table for schema-declared NetCDF types.

Maps the symbolic type names used in the JSON schema (the NetCDF CDL names:
``byte``, ``short``, ``int``, ``double``, ``string``...) onto an explicit
``TypeTag`` and carries the two conversions that depend on it:

- ``parse_attribute_value``: attribute text -> typed numpy value
- ``coerce_values``: caller-supplied data -> owned numpy write buffer
"""

import math
from enum import Enum
from typing import Any, Dict, Iterable, Optional

import numpy as np

from ..core.exceptions import (
    AttributeValueParseError,
    ElementTypeError,
    UnknownTypeError,
)


class TypeTag(Enum):
    """On-disk element type of a variable or attribute."""

    INT8 = "byte"
    UINT8 = "ubyte"
    INT16 = "short"
    UINT16 = "ushort"
    INT32 = "int"
    UINT32 = "uint"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT32 = "float"
    FLOAT64 = "double"
    STRING = "string"

    @property
    def dtype(self) -> np.dtype:
        """numpy dtype of an in-memory buffer for this tag."""
        return _DTYPES[self]

    @property
    def nc_datatype(self) -> Any:
        """Datatype argument accepted by ``netCDF4.Dataset.createVariable``."""
        if self is TypeTag.STRING:
            return str
        return self.dtype.str.lstrip("<>=|")

    @property
    def is_integer(self) -> bool:
        return self.dtype.kind in "iu"

    @property
    def is_float(self) -> bool:
        return self.dtype.kind == "f"

    @classmethod
    def from_dtype(cls, dtype: Any) -> "TypeTag":
        """Reverse lookup of the tag for a numpy dtype or ``str`` (vlen string)."""
        if dtype is str:
            return cls.STRING
        dtype = np.dtype(dtype)
        if dtype.kind in "OUS":
            return cls.STRING
        for tag, candidate in _DTYPES.items():
            if candidate == dtype:
                return tag
        raise UnknownTypeError(f"No type tag for dtype '{dtype}'")


_DTYPES: Dict[TypeTag, np.dtype] = {
    TypeTag.INT8: np.dtype(np.int8),
    TypeTag.UINT8: np.dtype(np.uint8),
    TypeTag.INT16: np.dtype(np.int16),
    TypeTag.UINT16: np.dtype(np.uint16),
    TypeTag.INT32: np.dtype(np.int32),
    TypeTag.UINT32: np.dtype(np.uint32),
    TypeTag.INT64: np.dtype(np.int64),
    TypeTag.UINT64: np.dtype(np.uint64),
    TypeTag.FLOAT32: np.dtype(np.float32),
    TypeTag.FLOAT64: np.dtype(np.float64),
    TypeTag.STRING: np.dtype(object),
}

# Symbolic schema name -> tag
TYPE_TABLE: Dict[str, TypeTag] = {tag.value: tag for tag in TypeTag}


class TypeMapper:
    """Exact-match lookup from schema type names to ``TypeTag``.

    Args:
        table: Optional replacement table (defaults to ``TYPE_TABLE``)
    """

    def __init__(self, table: Optional[Dict[str, TypeTag]] = None) -> None:
        self._table = dict(TYPE_TABLE if table is None else table)

    def resolve(self, type_name: str) -> TypeTag:
        """Map a schema type name to its tag.

        Raises:
            UnknownTypeError: If the name is not in the table
        """
        try:
            return self._table[type_name]
        except (KeyError, TypeError):
            known = ", ".join(sorted(self._table))
            raise UnknownTypeError(
                f"Unknown type '{type_name}' (known types: {known})"
            ) from None

    def name_of(self, tag: TypeTag) -> str:
        for name, candidate in self._table.items():
            if candidate is tag:
                return name
        raise UnknownTypeError(f"Type tag {tag} has no schema name")

    @property
    def names(self):
        return list(self._table)


# =============================================================================
# Attribute text parsing
# =============================================================================

def parse_attribute_value(
    text: str,
    tag: TypeTag,
    variable: Optional[str] = None,
    attribute: Optional[str] = None,
) -> Any:
    """Convert an attribute's text value to its declared type.

    Numeric text may hold several comma-separated values, which produce a
    1-D array attribute (e.g. ``valid_range``).

    Args:
        text: Raw attribute text from the schema
        tag: Declared attribute type
        variable: Owning variable name (error context only)
        attribute: Attribute name (error context only)

    Returns:
        ``str`` for STRING, else a numpy scalar or 1-D numpy array

    Raises:
        AttributeValueParseError: If any token does not parse under ``tag``
    """
    if tag is TypeTag.STRING:
        return text

    def fail(reason: str) -> AttributeValueParseError:
        where = f"{variable}:{attribute}" if variable else str(attribute)
        return AttributeValueParseError(
            f"Attribute {where} value '{text}' is not a valid {tag.value}: {reason}",
            variable=variable,
            attribute=attribute,
            type_name=tag.value,
            value=text,
        )

    tokens = [token.strip() for token in str(text).split(",")]
    if not tokens or any(token == "" for token in tokens):
        raise fail("empty value")

    parsed = []
    for token in tokens:
        if "_" in token:
            raise fail(f"'{token}' contains '_'")
        if tag.is_integer:
            try:
                number = int(token, 10)
            except ValueError:
                raise fail(f"'{token}' is not an integer") from None
            info = np.iinfo(tag.dtype)
            if number < info.min or number > info.max:
                raise fail(f"{number} outside [{info.min}, {info.max}]")
        else:
            try:
                number = float(token)
            except ValueError:
                raise fail(f"'{token}' is not a number") from None
            if not _fits_float(number, tag):
                raise fail(f"{number} overflows {tag.value}")
        parsed.append(number)

    values = np.array(parsed, dtype=tag.dtype)
    if len(values) == 1:
        return values[0]
    return values


# =============================================================================
# Data buffer coercion
# =============================================================================

def coerce_values(values: Any, tag: TypeTag) -> np.ndarray:
    """Build an owned numpy buffer of ``tag``'s dtype from caller data.

    numpy inputs carry an asserted dtype which must equal the tag's dtype.
    Plain Python scalars are untyped literals and are checked by value.

    Args:
        values: numpy array/scalar, Python scalar, or iterable of scalars
        tag: Element type of the target variable

    Returns:
        A new numpy array (1-D unless ``values`` was a multi-dimensional array)

    Raises:
        ElementTypeError: If any element does not match ``tag``
    """
    if isinstance(values, np.ndarray):
        _check_dtype(values.dtype, tag)
        if values.dtype.kind == "O":
            for index, item in enumerate(values.flat):
                _coerce_item(item, tag, index)
        return np.array(values, dtype=tag.dtype, copy=True)

    if isinstance(values, (np.generic, str, bytes, int, float)) or not _is_iterable(values):
        values = [values]

    items = list(values)
    buffer = np.empty(len(items), dtype=tag.dtype)
    for index, item in enumerate(items):
        buffer[index] = _coerce_item(item, tag, index)
    return buffer


def _is_iterable(value: Any) -> bool:
    return isinstance(value, Iterable)


def _check_dtype(dtype: np.dtype, tag: TypeTag) -> None:
    if tag is TypeTag.STRING:
        if dtype.kind not in "UO":
            raise ElementTypeError(f"Cannot write {dtype} values into a string variable")
    elif dtype != tag.dtype:
        raise ElementTypeError(
            f"Supplied dtype {dtype} does not match declared type {tag.value} ({tag.dtype})"
        )


def _fits_float(number: float, tag: TypeTag) -> bool:
    if not math.isfinite(number):
        return True
    return abs(number) <= float(np.finfo(tag.dtype).max)


def _coerce_item(item: Any, tag: TypeTag, index: int) -> Any:
    if isinstance(item, np.generic):
        _check_dtype(item.dtype, tag)
        return item

    if tag is TypeTag.STRING:
        if not isinstance(item, str):
            raise ElementTypeError(
                f"Element {index} ({item!r}) is not a str for a string variable"
            )
        return item

    # bool is an int subclass; it is never a valid numeric element
    if isinstance(item, bool):
        raise ElementTypeError(f"Element {index} is a bool, expected {tag.value}")

    if tag.is_integer:
        if not isinstance(item, int):
            raise ElementTypeError(
                f"Element {index} ({item!r}) is not an integer for {tag.value}"
            )
        info = np.iinfo(tag.dtype)
        if item < info.min or item > info.max:
            raise ElementTypeError(
                f"Element {index} ({item}) outside {tag.value} range [{info.min}, {info.max}]"
            )
        return item

    if not isinstance(item, (int, float)):
        raise ElementTypeError(f"Element {index} ({item!r}) is not a number for {tag.value}")
    try:
        number = float(item)
    except OverflowError:
        raise ElementTypeError(f"Element {index} ({item}) overflows {tag.value}") from None
    if not _fits_float(number, tag):
        raise ElementTypeError(f"Element {index} ({item}) overflows {tag.value}")
    return item
