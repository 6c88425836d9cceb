"""Tests for the node-editor command line."""

import json

import pytest

from node_editor import cli


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"indent": 2, "diag_log_enabled": False}), encoding="utf-8")
    return str(path)


@pytest.fixture
def doc_file(tmp_path):
    path = tmp_path / "doc.json"
    path.write_text(json.dumps({"user": {"name": "Bob", "age": 30, "tags": ["a"]}, "count": 5}), encoding="utf-8")
    return path


def run(settings_file, *args):
    return cli.main(["--settings", settings_file, *args])


def test_view_object_node(settings_file, doc_file, capsys):
    assert run(settings_file, "view", str(doc_file), "--path", '$["user"]') == 0
    out = capsys.readouterr().out
    path_line, _, body = out.partition("\n")
    assert path_line == '$["user"]'
    assert json.loads(body) == {"name": "Bob", "age": 30}


def test_view_scalar_node(settings_file, doc_file, capsys):
    assert run(settings_file, "view", str(doc_file), "--path", '["count"]') == 0
    assert capsys.readouterr().out == '$["count"]\n5\n'


def test_edit_object_fields(settings_file, doc_file):
    code = run(settings_file, "edit", str(doc_file), "--path", '$["user"]', "--set", "name=Carol", "--set", "age=31")
    assert code == 0
    assert json.loads(doc_file.read_text(encoding="utf-8")) == {
        "user": {"name": "Carol", "age": 31, "tags": ["a"]},
        "count": 5,
    }


def test_edit_scalar_value(settings_file, doc_file):
    assert run(settings_file, "edit", str(doc_file), "--path", '$["count"]', "--value", "9") == 0
    assert json.loads(doc_file.read_text(encoding="utf-8"))["count"] == 9


def test_dry_run_leaves_file(settings_file, doc_file, capsys):
    before = doc_file.read_text(encoding="utf-8")
    assert run(settings_file, "edit", str(doc_file), "--path", '$["user"]', "--set", "name=Eve", "--dry-run") == 0
    assert doc_file.read_text(encoding="utf-8") == before
    assert json.loads(capsys.readouterr().out)["user"]["name"] == "Eve"


def test_unknown_field_fails(settings_file, doc_file, capsys):
    assert run(settings_file, "edit", str(doc_file), "--path", '$["user"]', "--set", "tags=x") == 1
    assert "not an editable field" in capsys.readouterr().err


def test_scalar_value_on_object_fails(settings_file, doc_file):
    assert run(settings_file, "edit", str(doc_file), "--path", '$["user"]', "--value", "x") == 1


def test_array_node_fails(settings_file, doc_file, capsys):
    assert run(settings_file, "view", str(doc_file), "--path", '$["user"]["tags"]') == 1
    assert "is an array" in capsys.readouterr().err


def test_bad_path_fails(settings_file, doc_file):
    assert run(settings_file, "view", str(doc_file), "--path", "user") == 1


def test_missing_file_fails(settings_file, tmp_path):
    assert run(settings_file, "view", str(tmp_path / "none.json")) == 1
