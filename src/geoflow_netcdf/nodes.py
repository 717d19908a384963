"""
GeoFLOW node records.

The converter only needs nodes to expose scalar field values by index plus a
few fixed accessors; ``NodeLike`` captures that contract and ``GNode`` is a
ready-made implementation for callers that do not bring their own type.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, Tuple, runtime_checkable


@runtime_checkable
class NodeLike(Protocol):
    """Anything the data binder can read field values from."""

    @property
    def lat(self) -> Any: ...

    @property
    def lon(self) -> Any: ...

    def value(self, index: int) -> Any: ...


@dataclass(frozen=True)
class GNode:
    """A spatial node carrying its coordinates and field values."""
    lat: float
    lon: float
    values: Tuple[Any, ...] = field(default_factory=tuple)

    def value(self, index: int) -> Any:
        """Field value at ``index``."""
        return self.values[index]

    @property
    def n_fields(self) -> int:
        return len(self.values)
