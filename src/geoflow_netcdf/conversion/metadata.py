# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 GeoFLOW NetCDF Team

"""
Metadata writer.

Materializes the schema into the container in a fixed order:
  1. All dimensions, in declared order
  2. Global attributes
  3. For each variable: its definition, then its attributes

Attribute values that do not parse under their declared type are skipped,
logged and reported; every other failure stops the entity it concerns.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..core.exceptions import (
    AttributeValueParseError,
    MetadataError,
    UnknownDimensionError,
)
from .container import ContainerBinding, VariableBinding
from .report import ConversionReport
from .schema import SchemaStore
from .types import TypeMapper, TypeTag, parse_attribute_value

logger = logging.getLogger(__name__)


class MetadataWriter:
    """Writes dimensions, variable definitions and attributes.

    Args:
        schema: Parsed schema
        container: Open container to write into
        type_mapper: Type table (defaults to the CDL name table)
        report: Collector for non-fatal issues
        strict_attributes: Raise on the first unparseable attribute instead
            of skipping it
    """

    def __init__(
        self,
        schema: SchemaStore,
        container: ContainerBinding,
        type_mapper: Optional[TypeMapper] = None,
        report: Optional[ConversionReport] = None,
        strict_attributes: bool = False,
    ) -> None:
        self.schema = schema
        self.container = container
        self.type_mapper = type_mapper or TypeMapper()
        self.report = report if report is not None else ConversionReport()
        self.strict_attributes = strict_attributes

    # ---- dimensions ----

    def write_dimensions(self) -> None:
        """Create every schema dimension in declared order."""
        dimensions = self.schema.dimensions()
        for name, size in dimensions:
            self.container.create_dimension(name, size)
            logger.debug("Dimension %s = %d", name, size)
        logger.info("Wrote %d dimensions to %s", len(dimensions), self.container.path)

    # ---- variables ----

    def write_variable_definition(self, var_name: str) -> VariableBinding:
        """Create ``var_name`` with its declared type over its declared dims.

        Returns:
            The resolved binding of the new variable

        Raises:
            VariableNotFoundError: If the schema does not declare the variable
            UnknownTypeError: If its type is not in the type table
            UnknownDimensionError: If a dimension was never created
        """
        spec = self.schema.variable(var_name)
        tag = self.type_mapper.resolve(spec.type_name)

        for dim in spec.dims:
            if self.container.has_dimension(dim):
                continue
            if self.schema.has_dimension(dim):
                raise UnknownDimensionError(
                    f"Variable '{var_name}' needs dimension '{dim}', "
                    f"which has not been written yet"
                )
            raise UnknownDimensionError(
                f"Variable '{var_name}' references undeclared dimension '{dim}'"
            )

        self.container.create_variable(var_name, tag, spec.dims)
        binding = self.container.binding(var_name)
        logger.debug("Variable %s %s%s", spec.type_name, var_name, binding.shape)
        return binding

    def get_variable_type(self, var_name: str) -> TypeTag:
        """Declared tag of a schema variable."""
        return self.type_mapper.resolve(self.schema.variable(var_name).type_name)

    # ---- attributes ----

    def put_attribute(self, var_name: str, name: str, value: str, tag: TypeTag) -> None:
        """Convert ``value`` text to ``tag`` and attach it to ``var_name``.

        Raises:
            AttributeValueParseError: If the text does not parse under ``tag``
        """
        typed = parse_attribute_value(value, tag, variable=var_name, attribute=name)
        var = self.container.get_variable(var_name)
        self.container.put_attribute(var, name, typed)

    def write_variable_attributes(self, var_name: str) -> List[AttributeValueParseError]:
        """Attach every declared attribute of ``var_name``.

        Unparseable values are skipped (or raised when ``strict_attributes``).

        Returns:
            Parse errors for the attributes that were skipped
        """
        skipped: List[AttributeValueParseError] = []
        for name, type_name, value in self.schema.attributes_of(var_name):
            tag = self.type_mapper.resolve(type_name)
            try:
                self.put_attribute(var_name, name, value, tag)
            except AttributeValueParseError as exc:
                if self.strict_attributes:
                    raise
                self._skip(exc, f"{var_name}:{name}")
                skipped.append(exc)
        return skipped

    def write_global_attributes(
        self, extra: Optional[Mapping[str, Any]] = None
    ) -> List[AttributeValueParseError]:
        """Write schema-level attributes, then ``extra`` values as given."""
        skipped: List[AttributeValueParseError] = []
        for name, type_name, value in self.schema.global_attributes():
            tag = self.type_mapper.resolve(type_name)
            try:
                typed = parse_attribute_value(value, tag, attribute=name)
            except AttributeValueParseError as exc:
                if self.strict_attributes:
                    raise
                self._skip(exc, f":{name}")
                skipped.append(exc)
                continue
            self.container.put_global_attribute(name, typed)

        for name, value in (extra or {}).items():
            self.container.put_global_attribute(name, value)
        return skipped

    def _skip(self, exc: AttributeValueParseError, entity: str) -> None:
        logger.warning("Skipping attribute %s: %s", entity, exc)
        self.report.warning(entity, str(exc))

    # ---- whole schema ----

    def write_all(
        self,
        best_effort: bool = False,
        global_attributes: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, VariableBinding]:
        """Materialize the whole schema.

        Args:
            best_effort: Record a failing variable in the report and carry on
                with the others instead of raising
            global_attributes: Extra global attributes written after the
                schema's own

        Returns:
            Bindings of the variables that were created, by name (including
            ones whose attributes failed in best-effort mode)
        """
        self.write_dimensions()
        self.write_global_attributes(global_attributes)

        bindings: Dict[str, VariableBinding] = {}
        for var_name in self.schema.variable_names():
            try:
                bindings[var_name] = self.write_variable_definition(var_name)
            except MetadataError as exc:
                if not best_effort:
                    raise
                logger.error("Skipping variable %s: %s", var_name, exc)
                self.report.error(var_name, str(exc))
                continue

            # The variable exists from here on; attribute failures are
            # reported against its attributes
            try:
                self.write_variable_attributes(var_name)
            except MetadataError as exc:
                if not best_effort:
                    raise
                logger.error("Attributes of %s left incomplete: %s", var_name, exc)
                self.report.error(f"{var_name}:attributes", str(exc))

        logger.info(
            "Wrote %d of %d variables to %s",
            len(bindings), len(self.schema.variable_names()), self.container.path,
        )
        return bindings
