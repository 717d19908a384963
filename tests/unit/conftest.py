"""Shared fixtures for geoflow_netcdf unit tests."""

import json

import pytest

from geoflow_netcdf.conversion.container import ContainerBinding, FileMode
from geoflow_netcdf.conversion.schema import SchemaStore
from geoflow_netcdf.nodes import GNode


@pytest.fixture
def schema_tree():
    """A small schema with scalar, 1-D and 2-D variables."""
    return {
        "dimensions": [
            {"name": "time", "size": 1},
            {"name": "node", "size": 3},
            {"name": "level", "size": 2},
        ],
        "variables": [
            {
                "name": "timeCycle",
                "type": "int",
                "dims": [],
                "attributes": [
                    {"name": "long_name", "type": "string", "value": "time cycle"},
                ],
            },
            {
                "name": "lat",
                "type": "double",
                "dims": ["node"],
                "attributes": [
                    {"name": "units", "type": "string", "value": "degrees_north"},
                    {"name": "valid_min", "type": "double", "value": "-90.0"},
                    {"name": "valid_max", "type": "double", "value": 90},
                ],
            },
            {
                "name": "temperature",
                "type": "float",
                "dims": ["level", "node"],
                "attributes": [
                    {"name": "units", "type": "string", "value": "K"},
                    {"name": "valid_range", "type": "float", "value": [150.0, 350.0]},
                ],
            },
            {
                "name": "nodeId",
                "type": "int64",
                "dims": ["node"],
                "attributes": [],
            },
        ],
        "attributes": [
            {"name": "Conventions", "type": "string", "value": "CF-1.8"},
            {"name": "format_version", "type": "short", "value": "1"},
        ],
    }


@pytest.fixture
def schema(schema_tree):
    return SchemaStore(schema_tree)


@pytest.fixture
def schema_file(tmp_path, schema_tree):
    """Write the schema tree to a JSON file and return its path."""
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(schema_tree))
    return path


@pytest.fixture
def nc_path(tmp_path):
    return tmp_path / "out.nc"


@pytest.fixture
def container(nc_path):
    """A freshly created, writable container closed after the test."""
    binding = ContainerBinding(nc_path, FileMode.NEW_FILE)
    yield binding
    binding.close()


@pytest.fixture
def nodes():
    """Three nodes with two fields each."""
    return [
        GNode(lat=10.0, lon=100.0, values=(1.5, 280.0)),
        GNode(lat=20.0, lon=110.0, values=(2.5, 285.0)),
        GNode(lat=30.0, lon=120.0, values=(3.5, 290.0)),
    ]
