"""Tests for node row projection and the document node source."""

import json

import pytest

from node_editor.core.domain_impl.json.node_types import Node, Row
from node_editor.core.exceptions import NodeBuildError, PathSyntaxError
from node_editor.services import node_rows_service as rows_svc

USER_ROWS = [
    {"key": "name", "value": "Alice", "type": "string"},
    {"key": "address", "value": 2, "type": "object"},
    {"key": "details", "value": "link", "type": "string"},
    {"key": "age", "value": 30, "type": "number"},
    {"key": "tags", "value": 3, "type": "array"},
    {"key": "active", "value": True, "type": "boolean"},
    {"key": "nickname", "value": None, "type": "null"},
]


class TestEditableRowPredicate:
    def test_keyed_scalar_is_editable(self):
        assert rows_svc.is_editable_row(Row(key="name", value="x", type="string"))

    @pytest.mark.parametrize("kind", ["array", "object"])
    def test_container_rows_excluded(self, kind):
        assert not rows_svc.is_editable_row(Row(key="nested", value=1, type=kind))

    def test_unkeyed_row_excluded(self):
        assert not rows_svc.is_editable_row(Row(key=None, value=5, type="number"))

    def test_empty_key_excluded(self):
        assert not rows_svc.is_editable_row(Row(key="", value=5, type="number"))

    def test_details_row_excluded(self):
        assert not rows_svc.is_editable_row({"key": "details", "value": "x", "type": "string"})

    def test_scalar_node_detection(self):
        assert rows_svc.is_scalar_node([{"value": 5, "type": "number"}])
        assert not rows_svc.is_scalar_node([{"key": "a", "value": 5, "type": "number"}])
        assert not rows_svc.is_scalar_node([{"value": 5}, {"value": 6}])
        assert not rows_svc.is_scalar_node([])


class TestProjectDisplay:
    def test_no_rows_is_empty_object(self):
        assert rows_svc.project_display([]) == "{}"
        assert rows_svc.project_display(None) == "{}"

    def test_scalar_node_prints_value_directly(self):
        assert rows_svc.project_display([{"value": "hello", "type": "string"}]) == "hello"
        assert rows_svc.project_display([{"value": 5, "type": "number"}]) == "5"

    def test_scalar_literals(self):
        assert rows_svc.project_display([{"value": None, "type": "null"}]) == "null"
        assert rows_svc.project_display([{"value": False, "type": "boolean"}]) == "false"

    def test_composite_keeps_only_editable_rows(self):
        shown = json.loads(rows_svc.project_display(USER_ROWS))
        assert shown == {"name": "Alice", "age": 30, "active": True, "nickname": None}

    def test_composite_is_pretty_printed(self):
        rows = [{"key": "name", "value": "Åsa", "type": "string"}]
        assert rows_svc.project_display(rows) == '{\n  "name": "Åsa"\n}'

    def test_composite_with_only_containers(self):
        rows = [{"key": "a", "value": 1, "type": "object"}]
        assert rows_svc.project_display(rows) == "{}"


class TestProjectEditBuffer:
    def test_seeds_editable_rows_by_index(self):
        assert rows_svc.project_edit_buffer(USER_ROWS) == {
            0: "Alice",
            3: "30",
            5: "true",
            6: "",
        }

    def test_scalar_node_is_not_seeded(self):
        assert rows_svc.project_edit_buffer([{"value": 5, "type": "number"}]) == {}

    def test_editable_rows_pairs(self):
        pairs = rows_svc.editable_rows(USER_ROWS)
        assert [idx for idx, _ in pairs] == [0, 3, 5, 6]
        assert pairs[0][1] == Row(key="name", value="Alice", type="string")


class TestFormatPath:
    def test_root(self):
        assert rows_svc.format_path([]) == "$"
        assert rows_svc.format_path(None) == "$"

    def test_mixed_segments(self):
        assert rows_svc.format_path(["a", 1, "b"]) == '$["a"][1]["b"]'

    def test_customer_example(self):
        assert rows_svc.format_path(["customer", 2, "name"]) == '$["customer"][2]["name"]'

    def test_keys_are_not_escaped(self):
        assert rows_svc.format_path(['say "hi"']) == '$["say "hi""]'


class TestParsePathText:
    def test_root(self):
        assert rows_svc.parse_path_text("$") == []
        assert rows_svc.parse_path_text("") == []

    def test_formatted_path(self):
        assert rows_svc.parse_path_text('$["customer"][2]["name"]') == ["customer", 2, "name"]

    def test_json_array(self):
        assert rows_svc.parse_path_text('["user", 0]') == ["user", 0]

    def test_inverse_of_format(self):
        path = ["a", 0, "b c", 12]
        assert rows_svc.parse_path_text(rows_svc.format_path(path)) == path

    @pytest.mark.parametrize("text", ["user", '$["a"', "$[x]", "[true]", "[-1]", "[1.5]", '{"a": 1}', "[oops"])
    def test_malformed(self, text):
        with pytest.raises(PathSyntaxError):
            rows_svc.parse_path_text(text)


class TestBuildNode:
    DOC = {"user": {"name": "Bob", "age": 30, "address": {"city": "Oslo"}, "tags": ["a", "b"]}, "count": 5, "xs": [1]}

    def test_object_node(self):
        node = rows_svc.build_node(self.DOC, ["user"])
        assert node.path == ["user"]
        assert node.rows == [
            Row(key="name", value="Bob", type="string"),
            Row(key="age", value=30, type="number"),
            Row(key="address", value=1, type="object"),
            Row(key="tags", value=2, type="array"),
        ]

    def test_scalar_node(self):
        node = rows_svc.build_node(self.DOC, ["count"])
        assert node.rows == [Row(key=None, value=5, type="number")]
        assert rows_svc.is_scalar_node(node.rows)

    def test_array_element_scalar(self):
        node = rows_svc.build_node(self.DOC, ["xs", 0])
        assert node.rows == [Row(key=None, value=1, type="number")]

    def test_array_node_rejected(self):
        with pytest.raises(NodeBuildError):
            rows_svc.build_node(self.DOC, ["xs"])

    def test_missing_path(self):
        with pytest.raises(KeyError):
            rows_svc.build_node(self.DOC, ["nope"])


class TestNodeTypes:
    def test_rows_normalized_from_mappings(self):
        node = Node(path=("a", 1), rows=[{"key": "k", "value": 1, "type": "number"}, {"value": "v"}])
        assert node.path == ["a", 1]
        assert node.rows == [Row(key="k", value=1, type="number"), Row(key=None, value="v", type="string")]
