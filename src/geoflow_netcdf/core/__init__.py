"""Core building blocks shared across geoflow_netcdf."""

from .exceptions import (
    AttributeValueParseError,
    ConfigurationError,
    ContainerIOError,
    DataBindingError,
    DuplicateDimensionError,
    DuplicateVariableError,
    ElementTypeError,
    GeoFlowNetCDFError,
    MetadataError,
    SchemaError,
    ShapeMismatchError,
    UnknownDimensionError,
    UnknownTypeError,
    ValidationError,
    VariableNotFoundError,
)

__all__ = [
    "AttributeValueParseError",
    "ConfigurationError",
    "ContainerIOError",
    "DataBindingError",
    "DuplicateDimensionError",
    "DuplicateVariableError",
    "ElementTypeError",
    "GeoFlowNetCDFError",
    "MetadataError",
    "SchemaError",
    "ShapeMismatchError",
    "UnknownDimensionError",
    "UnknownTypeError",
    "ValidationError",
    "VariableNotFoundError",
]
