"""Tests for the GToNetCDF converter facade."""

import netCDF4 as nc4
import numpy as np
import pytest

from geoflow_netcdf.config import ConverterConfig
from geoflow_netcdf.core.exceptions import (
    AttributeValueParseError,
    ConfigurationError,
    ContainerIOError,
)
from geoflow_netcdf.conversion.container import FileMode
from geoflow_netcdf.conversion.converter import GToNetCDF
from geoflow_netcdf.conversion.types import TypeTag
from geoflow_netcdf.header import GHeaderInfo


class TestConstruction:
    def test_from_schema_file(self, schema_file, nc_path):
        with GToNetCDF(schema_file, nc_path, FileMode.NEW_FILE) as conv:
            assert conv.schema.has_variable("lat")
        assert nc_path.exists()

    def test_from_tree(self, schema_tree, nc_path):
        with GToNetCDF(schema_tree, nc_path, "replace") as conv:
            assert conv.container.mode is FileMode.REPLACE

    def test_from_store(self, schema, nc_path):
        with GToNetCDF(schema, nc_path) as conv:
            assert conv.schema is schema

    def test_new_file_mode_refuses_existing(self, schema, nc_path):
        GToNetCDF(schema, nc_path).close()
        with pytest.raises(ContainerIOError):
            GToNetCDF(schema, nc_path, FileMode.NEW_FILE)

    def test_from_config(self, schema_file, nc_path):
        config = ConverterConfig(schema_file=str(schema_file), output_file=str(nc_path), mode="replace")
        with GToNetCDF.from_config(config) as conv:
            assert conv.config is config

    def test_from_config_requires_files(self):
        with pytest.raises(ConfigurationError):
            GToNetCDF.from_config(ConverterConfig())

    def test_unknown_mode(self, schema, nc_path):
        with pytest.raises(ConfigurationError, match="bogus"):
            GToNetCDF(schema, nc_path, "bogus")
        assert not nc_path.exists()


class TestTypeHelpers:
    def test_to_nc_type(self, schema, nc_path):
        with GToNetCDF(schema, nc_path) as conv:
            assert conv.to_nc_type("double") is TypeTag.FLOAT64

    def test_get_variable_type(self, schema, nc_path):
        with GToNetCDF(schema, nc_path) as conv:
            assert conv.get_variable_type("temperature") is TypeTag.FLOAT32

    def test_put_attribute(self, schema, nc_path):
        with GToNetCDF(schema, nc_path) as conv:
            conv.write_dimensions()
            conv.write_variable_definition("lat")
            conv.put_attribute("lat", "scale_factor", "0.5", TypeTag.FLOAT32)
        with nc4.Dataset(nc_path) as ds:
            value = ds.variables["lat"].getncattr("scale_factor")
            assert value == np.float32(0.5)
            assert value.dtype == np.float32


class TestWriteMetadata:
    def test_writes_everything(self, schema, nc_path):
        config = ConverterConfig(global_attributes={"source": "GeoFLOW"})
        with GToNetCDF(schema, nc_path, config=config) as conv:
            bindings = conv.write_metadata()
        assert set(bindings) == {"timeCycle", "lat", "temperature", "nodeId"}
        with nc4.Dataset(nc_path) as ds:
            assert ds.getncattr("source") == "GeoFLOW"
            assert ds.getncattr("Conventions") == "CF-1.8"
            assert ds.variables["temperature"].dimensions == ("level", "node")

    def test_best_effort_from_config(self, nc_path):
        tree = {
            "dimensions": [{"name": "node", "size": 2}],
            "variables": [
                {"name": "bad", "type": "double", "dims": ["bogus"]},
                {"name": "good", "type": "double", "dims": ["node"]},
            ],
        }
        with GToNetCDF(tree, nc_path, config=ConverterConfig(best_effort=True)) as conv:
            bindings = conv.write_metadata()
            assert list(bindings) == ["good"]
            assert conv.report.errors[0].entity == "bad"

    def test_strict_attributes_from_config(self, nc_path):
        tree = {
            "dimensions": [],
            "variables": [{"name": "s", "type": "int", "attributes": [
                {"name": "bad", "type": "int", "value": "x"}]}],
        }
        with GToNetCDF(tree, nc_path, config=ConverterConfig(strict_attributes=True)) as conv:
            conv.write_variable_definition("s")
            with pytest.raises(AttributeValueParseError):
                conv.write_variable_attributes("s")


class TestWriteData:
    def test_node_field_scalar_and_values(self, schema, nc_path, nodes):
        with GToNetCDF(schema, nc_path) as conv:
            conv.write_metadata()
            conv.write_node_field("lat", nodes, "lat")
            conv.write_node_field("temperature", nodes + nodes, 1)
            conv.write_scalar("timeCycle", 3)
            conv.write_values("nodeId", [100, 101, 102])
            np.testing.assert_array_equal(conv.read_variable("lat"), [10.0, 20.0, 30.0])

        with nc4.Dataset(nc_path) as ds:
            np.testing.assert_array_equal(ds.variables["nodeId"][:], [100, 101, 102])
            assert ds.variables["timeCycle"].getValue() == 3
            np.testing.assert_array_equal(
                ds.variables["temperature"][:],
                [[280.0, 285.0, 290.0], [280.0, 285.0, 290.0]],
            )

    def test_header_scalars(self, nc_path):
        tree = {
            "dimensions": [],
            "variables": [
                {"name": "timeCycle", "type": "uint64"},
                {"name": "timeStamp", "type": "uint64"},
                {"name": "nElems", "type": "int"},
            ],
        }
        header = GHeaderInfo.with_derived(
            version=1, dim=2, n_elems=16, poly_order=(4, 4), grid_type=0,
            time_cycle=120, time_stamp=3600,
        )
        with GToNetCDF(tree, nc_path) as conv:
            conv.write_metadata()
            conv.write_header_scalars(header, {
                "time_cycle": "timeCycle",
                "time_stamp": "timeStamp",
                "n_elems": "nElems",
            })
            assert conv.read_variable("timeCycle") == 120
            assert conv.read_variable("timeStamp") == 3600
            assert conv.read_variable("nElems") == 16

    def test_header_scalars_unknown_field(self, schema, nc_path):
        header = GHeaderInfo.with_derived(
            version=0, dim=2, n_elems=1, poly_order=(1, 1), grid_type=0,
            time_cycle=0, time_stamp=0,
        )
        with GToNetCDF(schema, nc_path) as conv:
            conv.write_metadata()
            with pytest.raises(ConfigurationError):
                conv.write_header_scalars(header, {"cycle": "timeCycle"})

