"""Tests for the schema store."""

import pytest

from geoflow_netcdf.core.exceptions import (
    SchemaError,
    UnknownDimensionError,
    VariableNotFoundError,
)
from geoflow_netcdf.conversion.schema import SchemaStore, VariableSpec


class TestDimensions:
    def test_declared_order_is_preserved(self, schema):
        assert schema.dimensions() == [("time", 1), ("node", 3), ("level", 2)]

    def test_order_round_trip_for_reversed_schema(self, schema_tree):
        schema_tree["dimensions"].reverse()
        store = SchemaStore(schema_tree)
        assert [name for name, _ in store.dimensions()] == ["level", "node", "time"]

    def test_dimension_size(self, schema):
        assert schema.dimension_size("node") == 3

    def test_unknown_dimension_size(self, schema):
        with pytest.raises(UnknownDimensionError):
            schema.dimension_size("bogus")


class TestVariables:
    def test_variable_lookup(self, schema):
        spec = schema.variable("temperature")
        assert isinstance(spec, VariableSpec)
        assert spec.type_name == "float"
        assert spec.dims == ("level", "node")

    def test_missing_variable(self, schema):
        with pytest.raises(VariableNotFoundError):
            schema.variable("pressure")

    def test_variable_names_in_order(self, schema):
        assert schema.variable_names() == ["timeCycle", "lat", "temperature", "nodeId"]

    def test_scalar_variable_has_no_dims(self, schema):
        assert schema.variable("timeCycle").dims == ()
        assert schema.variable("timeCycle").shape(schema) == ()

    def test_shape(self, schema):
        assert schema.variable("temperature").shape(schema) == (2, 3)

    def test_missing_dims_key_means_scalar(self):
        store = SchemaStore({"dimensions": [], "variables": [{"name": "t", "type": "int"}]})
        assert store.variable("t").dims == ()


class TestAttributes:
    def test_attributes_are_text(self, schema):
        assert schema.attributes_of("lat") == [
            ("units", "string", "degrees_north"),
            ("valid_min", "double", "-90.0"),
            ("valid_max", "double", "90"),
        ]

    def test_array_values_are_comma_separated(self, schema):
        assert ("valid_range", "float", "150.0,350.0") in schema.attributes_of("temperature")

    def test_boolean_value_rendering(self):
        store = SchemaStore({
            "dimensions": [],
            "variables": [{"name": "t", "type": "int", "attributes": [
                {"name": "flag", "type": "string", "value": True}]}],
        })
        assert store.attributes_of("t") == [("flag", "string", "true")]

    def test_global_attributes(self, schema):
        assert schema.global_attributes() == [
            ("Conventions", "string", "CF-1.8"),
            ("format_version", "short", "1"),
        ]

    def test_attributes_of_missing_variable(self, schema):
        with pytest.raises(VariableNotFoundError):
            schema.attributes_of("nope")


class TestValidation:
    @pytest.mark.parametrize("tree", [
        [],
        {"variables": []},
        {"dimensions": []},
        {"dimensions": [{"name": "x"}], "variables": []},
        {"dimensions": [{"name": "x", "size": 0}], "variables": []},
        {"dimensions": [{"name": "x", "size": "3"}], "variables": []},
        {"dimensions": [{"name": "x", "size": True}], "variables": []},
        {"dimensions": [{"name": "x", "size": 1}, {"name": "x", "size": 1}], "variables": []},
        {"dimensions": [], "variables": [{"name": "v"}]},
        {"dimensions": [], "variables": [{"name": "v", "type": "int"}, {"name": "v", "type": "int"}]},
        {"dimensions": [], "variables": [{"name": "v", "type": "int", "dims": "x"}]},
        {"dimensions": [], "variables": [
            {"name": "v", "type": "int", "attributes": [{"name": "a", "type": "int"}]}]},
        {"dimensions": [], "variables": [
            {"name": "v", "type": "int", "attributes": [{"name": "a", "type": "int", "value": {}}]}]},
    ])
    def test_malformed_trees(self, tree):
        with pytest.raises(SchemaError):
            SchemaStore(tree)

    def test_undeclared_dimension_is_deferred(self):
        store = SchemaStore({
            "dimensions": [{"name": "node", "size": 3}],
            "variables": [{"name": "v", "type": "double", "dims": ["bogus", "node"]}],
        })
        assert store.undeclared_dimensions() == {"v": ["bogus"]}

    def test_tree_is_copied(self, schema_tree):
        store = SchemaStore(schema_tree)
        schema_tree["dimensions"].append({"name": "extra", "size": 9})
        assert not store.has_dimension("extra")


class TestFromFile:
    def test_load(self, schema_file):
        store = SchemaStore.from_file(schema_file)
        assert store.has_variable("lat")

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaError, match="Failed to load schema"):
            SchemaStore.from_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(SchemaError):
            SchemaStore.from_file(path)
