# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 GeoFLOW NetCDF Team

"""
GeoFLOW to NetCDF converter.

Converts a GeoFLOW dataset to a NetCDF file. A JSON schema with dimensions,
variable definitions and attributes drives the NetCDF metadata, and
collections of nodes (or plain values) supply the variable data.

Example:
    >>> with GToNetCDF("schema.json", "out.nc", FileMode.REPLACE) as conv:
    ...     conv.write_metadata()
    ...     conv.write_node_field("lat", nodes, "lat")
    ...     conv.write_scalar("timeCycle", header.time_cycle)
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..config import ConverterConfig
from ..core.exceptions import AttributeValueParseError, ConfigurationError
from ..header import GHeaderInfo
from .container import ContainerBinding, FileMode, VariableBinding
from .data_binding import DataBinder, FieldSelector
from .metadata import MetadataWriter
from .report import ConversionReport
from .schema import SchemaStore
from .types import TypeMapper, TypeTag

logger = logging.getLogger(__name__)

SchemaSource = Union[SchemaStore, Mapping[str, Any], str, Path]


def _load_schema(schema: SchemaSource) -> SchemaStore:
    if isinstance(schema, SchemaStore):
        return schema
    if isinstance(schema, Mapping):
        return SchemaStore(schema)
    return SchemaStore.from_file(schema)


class GToNetCDF:
    """Owns one schema and one open NetCDF file for a conversion run.

    Args:
        schema: SchemaStore, parsed JSON tree, or path to the JSON schema file
        nc_filename: NetCDF file to write (with extension, e.g. ``myfile.nc``)
        mode: ``read`` (file exists, open read-only),
              ``write`` (file exists, open for writing),
              ``replace`` (create new file, even if it exists),
              ``newFile`` (create new file, fail if it already exists)
        config: Optional settings (file format, attribute strictness,
            best-effort metadata, extra global attributes)
        type_mapper: Optional replacement type table
    """

    def __init__(
        self,
        schema: SchemaSource,
        nc_filename: Union[str, Path],
        mode: Union[str, FileMode] = FileMode.NEW_FILE,
        config: Optional[ConverterConfig] = None,
        type_mapper: Optional[TypeMapper] = None,
    ) -> None:
        self.config = config or ConverterConfig()
        self.schema = _load_schema(schema)
        self.type_mapper = type_mapper or TypeMapper()
        self.report = ConversionReport()

        self.container = ContainerBinding(nc_filename, mode, file_format=self.config.file_format)
        self.metadata = MetadataWriter(
            self.schema,
            self.container,
            type_mapper=self.type_mapper,
            report=self.report,
            strict_attributes=self.config.strict_attributes,
        )
        self.data = DataBinder(self.container)

    @classmethod
    def from_config(cls, config: ConverterConfig) -> "GToNetCDF":
        """Build a converter from a config naming the schema and output files.

        Raises:
            ConfigurationError: If either file is not configured
        """
        if not config.schema_file or not config.output_file:
            raise ConfigurationError("Config must set both schema_file and output_file")
        return cls(config.schema_file, config.output_file, config.mode, config=config)

    # ---- lifecycle ----

    def close(self) -> None:
        self.container.close()

    def __enter__(self) -> "GToNetCDF":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---- types ----

    def to_nc_type(self, type_name: str) -> TypeTag:
        """Resolve a schema type name to its tag."""
        return self.type_mapper.resolve(type_name)

    def get_variable_type(self, var_name: str) -> TypeTag:
        """Declared tag of a schema variable."""
        return self.metadata.get_variable_type(var_name)

    def put_attribute(self, var_name: str, name: str, value: str, tag: TypeTag) -> None:
        """Attach one attribute, converting its text ``value`` to ``tag``."""
        self.metadata.put_attribute(var_name, name, value, tag)

    # ---- metadata ----

    def write_dimensions(self) -> None:
        self.metadata.write_dimensions()

    def write_variable_definition(self, var_name: str) -> VariableBinding:
        return self.metadata.write_variable_definition(var_name)

    def write_variable_attributes(self, var_name: str) -> List[AttributeValueParseError]:
        return self.metadata.write_variable_attributes(var_name)

    def write_global_attributes(self) -> List[AttributeValueParseError]:
        return self.metadata.write_global_attributes(self.config.global_attributes)

    def write_metadata(self, best_effort: Optional[bool] = None) -> Dict[str, VariableBinding]:
        """Write every dimension, global attribute and variable of the schema.

        Args:
            best_effort: Override ``config.best_effort``

        Returns:
            Bindings of the variables that were written, by name
        """
        if best_effort is None:
            best_effort = self.config.best_effort
        return self.metadata.write_all(
            best_effort=best_effort,
            global_attributes=self.config.global_attributes,
        )

    # ---- data ----

    def write_node_field(self, var_name: str, nodes: Sequence[Any], field: FieldSelector) -> None:
        self.data.write_node_field(var_name, nodes, field)

    def write_scalar(self, var_name: str, value: Any) -> None:
        self.data.write_scalar(var_name, value)

    def write_values(self, var_name: str, values: Any) -> None:
        self.data.write_values(var_name, values)

    def write_header_scalars(self, header: GHeaderInfo, mapping: Mapping[str, str]) -> None:
        """Write selected header fields as scalar variables.

        Args:
            header: Header of the source GeoFLOW file
            mapping: Header field name -> variable name,
                e.g. ``{"time_cycle": "timeCycle"}``

        Raises:
            ConfigurationError: If a header field name does not exist
        """
        for field_name, var_name in mapping.items():
            if not hasattr(header, field_name):
                raise ConfigurationError(f"GHeaderInfo has no field '{field_name}'")
            value = getattr(header, field_name)
            self.write_scalar(var_name, int(value) if isinstance(value, bool) else value)
            logger.debug("Wrote header field %s to %s", field_name, var_name)

    def read_variable(self, var_name: str):
        """Read back a variable's contents."""
        return self.container.read_variable(var_name)
