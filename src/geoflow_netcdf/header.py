# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 GeoFLOW NetCDF Team

"""
GeoFLOW data file header record.

Only the shape of the header is modelled here; reading it from a binary
GeoFLOW file is done elsewhere. The converter uses a few of its fields
(element count, time cycle, time stamp) as scalar variable values.
"""

from dataclasses import dataclass
from math import prod
from typing import Tuple

from .core.exceptions import require

DEFAULT_DATA_SIZE = 8


@dataclass(frozen=True)
class GHeaderInfo:
    """Header of a binary GeoFLOW data file."""

    # Stored in the header
    version: int                      # 0 = constant expansion order, 1 = varies
    dim: int                          # element dimension (2 or 3)
    n_elems: int
    poly_order: Tuple[int, ...]       # polynomial order per dimension
    grid_type: int
    time_cycle: int
    time_stamp: int
    has_mult_vars: bool = False

    # Derived
    n_header_bytes: int = 0
    n_data_bytes: int = 0
    data_size: int = DEFAULT_DATA_SIZE
    n_nodes_per_elem: int = 0
    n_nodes: int = 0

    @classmethod
    def with_derived(
        cls,
        version: int,
        dim: int,
        n_elems: int,
        poly_order,
        grid_type: int,
        time_cycle: int,
        time_stamp: int,
        has_mult_vars: bool = False,
        n_header_bytes: int = 0,
        data_size: int = DEFAULT_DATA_SIZE,
    ) -> "GHeaderInfo":
        """Build a header and fill in the node and byte counts.

        Raises:
            ValidationError: If ``poly_order`` does not have ``dim`` entries
        """
        poly_order = tuple(int(p) for p in poly_order)
        require(len(poly_order) == dim,
                f"poly_order has {len(poly_order)} entries for a {dim}-D element")
        require(data_size in (4, 8), f"data_size must be 4 or 8, got {data_size}")

        n_nodes_per_elem = prod(p + 1 for p in poly_order)
        n_nodes = n_elems * n_nodes_per_elem
        return cls(
            version=version,
            dim=dim,
            n_elems=n_elems,
            poly_order=poly_order,
            grid_type=grid_type,
            time_cycle=time_cycle,
            time_stamp=time_stamp,
            has_mult_vars=has_mult_vars,
            n_header_bytes=n_header_bytes,
            n_data_bytes=n_nodes * data_size,
            data_size=data_size,
            n_nodes_per_elem=n_nodes_per_elem,
            n_nodes=n_nodes,
        )
