"""
Custom exception hierarchy for geoflow_netcdf.

This module defines the error types raised while materializing a JSON schema
into a NetCDF container and binding GeoFLOW node data to its variables.
"""

import logging
from contextlib import contextmanager
from typing import Optional


class GeoFlowNetCDFError(Exception):
    """
    Base exception for all geoflow_netcdf errors.

    Catch this to handle every failure raised by the converter with a single
    except clause.
    """
    pass


class ConfigurationError(GeoFlowNetCDFError):
    """
    Configuration-related errors.

    Raised when:
    - The converter configuration file cannot be loaded or parsed
    - Configuration values are invalid
    """
    pass


class SchemaError(ConfigurationError):
    """
    Schema document errors.

    Raised when:
    - The schema JSON file cannot be read or decoded
    - The ``dimensions`` or ``variables`` arrays are missing or malformed
    - Dimension sizes are not positive integers
    - Names are declared twice
    """
    pass


class ValidationError(GeoFlowNetCDFError):
    """
    Data or parameter validation failures.

    Raised when:
    - Header metadata is internally inconsistent
    - Input values are out of acceptable range
    """
    pass


class MetadataError(GeoFlowNetCDFError):
    """Failures while creating dimensions, variables or attributes."""
    pass


class UnknownTypeError(MetadataError):
    """Raised when the schema names a type that is not in the type table."""
    pass


class VariableNotFoundError(MetadataError):
    """Raised when a variable name has no schema or container entry."""
    pass


class UnknownDimensionError(MetadataError):
    """Raised when a dimension name was never declared or created."""
    pass


class DuplicateDimensionError(MetadataError):
    """Raised when a dimension is redefined with a conflicting size."""
    pass


class DuplicateVariableError(MetadataError):
    """Raised when a variable is redefined with a conflicting type or shape."""
    pass


class AttributeValueParseError(MetadataError):
    """
    Raised when an attribute's text value does not parse under its type.

    Non-fatal for a metadata run: the attribute is skipped and the error is
    reported to the caller.
    """

    def __init__(
        self,
        message: str,
        variable: Optional[str] = None,
        attribute: Optional[str] = None,
        type_name: Optional[str] = None,
        value: Optional[str] = None,
    ):
        super().__init__(message)
        self.variable = variable
        self.attribute = attribute
        self.type_name = type_name
        self.value = value


class DataBindingError(GeoFlowNetCDFError):
    """Failures while writing data values into a container variable."""
    pass


class ShapeMismatchError(DataBindingError):
    """Raised when the number of values differs from the variable's shape."""
    pass


class ElementTypeError(DataBindingError):
    """Raised when supplied values do not match the variable's element type."""
    pass


class ContainerIOError(GeoFlowNetCDFError):
    """
    Failures of the underlying NetCDF library.

    Raised when:
    - The container cannot be opened, created or closed
    - A dimension, variable, attribute or data write is rejected
    """
    pass


# =============================================================================
# Validation Helpers
# =============================================================================


def require(condition: bool, message: str, error_type: type = None) -> None:
    """
    Validate a condition, raising an exception if it fails.

    Args:
        condition: The condition that must be True
        message: Error message if condition is False
        error_type: Exception type to raise (default: ValidationError)

    Raises:
        ValidationError (or specified error_type) if condition is False

    Example:
        >>> require(size > 0, "Dimension size must be positive", SchemaError)
    """
    if error_type is None:
        error_type = ValidationError
    if not condition:
        raise error_type(message)


@contextmanager
def conversion_error_handler(
    operation: str,
    logger: Optional[logging.Logger] = None,
    reraise: bool = True,
    error_type: type = GeoFlowNetCDFError
):
    """
    Context manager for standardized error handling.

    Package errors are logged and re-raised unchanged; any other exception is
    logged and converted to ``error_type``.

    Args:
        operation: Description of the operation being performed (for logging)
        logger: Logger instance for error messages. If None, errors are not logged.
        reraise: Whether to re-raise the exception after handling (default: True)
        error_type: Exception type foreign exceptions are converted to

    Example:
        >>> with conversion_error_handler("open container", logger, error_type=ContainerIOError):
        ...     ds = netCDF4.Dataset(path, "r")
    """
    try:
        yield
    except GeoFlowNetCDFError:
        if logger:
            logger.error(f"Error during {operation}", exc_info=True)
        if reraise:
            raise
    except Exception as e:
        if logger:
            logger.error(f"Error during {operation}: {e}", exc_info=True)
        if reraise:
            raise error_type(f"Failed during {operation}: {e}") from e


# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Base
    'GeoFlowNetCDFError',
    # Domain exceptions
    'ConfigurationError',
    'SchemaError',
    'ValidationError',
    'MetadataError',
    'UnknownTypeError',
    'VariableNotFoundError',
    'UnknownDimensionError',
    'DuplicateDimensionError',
    'DuplicateVariableError',
    'AttributeValueParseError',
    'DataBindingError',
    'ShapeMismatchError',
    'ElementTypeError',
    'ContainerIOError',
    # Helpers
    'require',
    'conversion_error_handler',
]
