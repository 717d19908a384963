"""
Schema-driven NetCDF conversion.

Materializes a JSON schema (dimensions, variables, attributes) into a NetCDF
file and binds GeoFLOW node data to its variables.
"""

from .container import ContainerBinding, FileMode, VariableBinding
from .converter import GToNetCDF
from .data_binding import DataBinder, field_getter
from .metadata import MetadataWriter
from .report import ConversionReport, ReportEntry
from .schema import AttributeSpec, DimensionSpec, SchemaStore, VariableSpec
from .types import TYPE_TABLE, TypeMapper, TypeTag, coerce_values, parse_attribute_value

__all__ = [
    "AttributeSpec",
    "ContainerBinding",
    "ConversionReport",
    "DataBinder",
    "DimensionSpec",
    "FileMode",
    "GToNetCDF",
    "MetadataWriter",
    "ReportEntry",
    "SchemaStore",
    "TYPE_TABLE",
    "TypeMapper",
    "TypeTag",
    "VariableBinding",
    "VariableSpec",
    "coerce_values",
    "field_getter",
    "parse_attribute_value",
]
