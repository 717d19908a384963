# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 GeoFLOW NetCDF Team

"""
Converter configuration model.

Settings may be given by field name or by their upper-case alias, so a YAML
file can read::

    GTONETCDF_SCHEMA_FILE: schema.json
    GTONETCDF_OUTPUT_FILE: out.nc
    GTONETCDF_MODE: replace
"""

from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .core.exceptions import ConfigurationError

# Standard ConfigDict for all config models
FROZEN_CONFIG = ConfigDict(extra='allow', populate_by_name=True, frozen=True)


class ConverterConfig(BaseModel):
    """GeoFLOW to NetCDF conversion settings."""
    model_config = FROZEN_CONFIG

    schema_file: Optional[str] = Field(
        default=None,
        alias='GTONETCDF_SCHEMA_FILE',
        description='JSON file with dimensions, variables and attributes'
    )
    output_file: Optional[str] = Field(
        default=None,
        alias='GTONETCDF_OUTPUT_FILE',
        description='NetCDF file to write (e.g. myfile.nc)'
    )
    mode: Literal['read', 'write', 'replace', 'newFile'] = Field(
        default='newFile',
        alias='GTONETCDF_MODE',
        description='File mode: read, write (existing), replace, newFile (fail if exists)'
    )
    file_format: Literal['NETCDF4', 'NETCDF4_CLASSIC', 'NETCDF3_CLASSIC', 'NETCDF3_64BIT_OFFSET'] = Field(
        default='NETCDF4',
        alias='GTONETCDF_FORMAT',
        description='netCDF4 file format for newly created files'
    )
    strict_attributes: bool = Field(
        default=False,
        alias='GTONETCDF_STRICT_ATTRIBUTES',
        description='Raise on the first unparseable attribute instead of skipping it'
    )
    best_effort: bool = Field(
        default=False,
        alias='GTONETCDF_BEST_EFFORT',
        description='Continue with remaining variables when one fails to materialize'
    )
    global_attributes: Dict[str, Any] = Field(
        default_factory=dict,
        alias='GTONETCDF_GLOBAL_ATTRIBUTES',
        description='Extra global attributes written after the schema ones'
    )

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConverterConfig":
        """Load settings from a YAML file, applying ``overrides`` on top.

        Raises:
            ConfigurationError: If the file cannot be read or is invalid
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Failed to load config {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config {path} must be a mapping, got {type(data).__name__}"
            )
        data.update(overrides or {})

        try:
            return cls(**data)
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid config {path}: {exc}") from exc
