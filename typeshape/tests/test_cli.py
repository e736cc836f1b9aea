import json

import pytest
from click.testing import CliRunner

from typeshape.cli import typeshape
from typeshape.cli_utils import reconstruct_command_line
from typeshape.config import DRAFT_2020_12

POINT_AST = {
    "_type": "struct",
    "fields": {
        "x": {"_type": "number", "constraints": {}},
        "y": {"_type": "number", "constraints": {}},
    },
    "required": ["x", "y"],
}

POINT_SCHEMA = {
    "type": "object",
    "properties": {"x": {"type": "number"}, "y": {"type": "number"}},
    "required": ["x", "y"],
    "additionalProperties": False,
}


def write_json(path, data):
    path.write_text(json.dumps(data))
    return str(path)


@pytest.fixture
def runner():
    return CliRunner()


def test_to_json_schema(runner, tmp_path):
    ast_path = write_json(tmp_path / "point.ast.json", POINT_AST)
    output = tmp_path / "point.schema.json"

    result = runner.invoke(
        typeshape,
        ["to-json-schema", ast_path, str(output), "--title", "Point", "--id", "https://example.com/point.json"],
    )

    assert result.exit_code == 0, result.output
    document = json.loads(output.read_text())
    assert document == {
        "$schema": DRAFT_2020_12,
        "$id": "https://example.com/point.json",
        "title": "Point",
        **POINT_SCHEMA,
    }


def test_to_json_schema_generation_comment(runner, tmp_path):
    ast_path = write_json(tmp_path / "point.ast.json", POINT_AST)
    config_path = write_json(tmp_path / "config.json", {"add_generation_comment": True})
    output = tmp_path / "point.schema.json"

    result = runner.invoke(typeshape, ["to-json-schema", ast_path, str(output), "--config", config_path])

    assert result.exit_code == 0, result.output
    document = json.loads(output.read_text())
    assert document["$comment"].startswith("Generated by typeshape to-json-schema point.ast.json")
    assert "--config config.json" in document["$comment"]


def test_to_json_schema_invalid_ast(runner, tmp_path):
    ast_path = write_json(tmp_path / "bad.json", {"_type": "bogus"})
    result = runner.invoke(typeshape, ["to-json-schema", ast_path, str(tmp_path / "out.json")])
    assert result.exit_code == 1
    assert "Invalid AST" in result.output


def test_to_ast(runner, tmp_path):
    schema_path = write_json(tmp_path / "point.schema.json", POINT_SCHEMA)
    output = tmp_path / "point.ast.json"

    result = runner.invoke(typeshape, ["to-ast", schema_path, str(output)])

    assert result.exit_code == 0, result.output
    assert json.loads(output.read_text()) == POINT_AST


def test_to_ast_unsupported(runner, tmp_path):
    schema_path = write_json(tmp_path / "ref.schema.json", {"$ref": "#/$defs/Point"})
    result = runner.invoke(typeshape, ["to-ast", schema_path, str(tmp_path / "out.json")])
    assert result.exit_code == 1
    assert "$ref is not supported" in result.output


def test_validate_ok(runner, tmp_path):
    schema_path = write_json(tmp_path / "point.schema.json", POINT_SCHEMA)
    data_path = write_json(tmp_path / "point.json", {"x": 1, "y": 2.5})

    result = runner.invoke(typeshape, ["validate", schema_path, data_path])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"x": 1, "y": 2.5}


def test_validate_error(runner, tmp_path):
    schema_path = write_json(tmp_path / "point.schema.json", POINT_SCHEMA)
    data_path = write_json(tmp_path / "point.json", {"x": 1, "y": "two"})

    result = runner.invoke(typeshape, ["validate", schema_path, data_path])

    assert result.exit_code == 1
    assert "Invalid: Field 'y': Expected number, got str" in result.output


def test_verbose_flag(runner, tmp_path):
    schema_path = write_json(tmp_path / "point.schema.json", POINT_SCHEMA)
    data_path = write_json(tmp_path / "point.json", {"x": 1, "y": 2})
    result = runner.invoke(typeshape, ["--verbose", "validate", schema_path, data_path])
    assert result.exit_code == 0, result.output


def test_reconstruct_command_line_without_context():
    """Without an active Click context only the program name is returned"""
    from typeshape.cli import to_json_schema

    assert reconstruct_command_line(to_json_schema) == "typeshape"


if __name__ == "__main__":
    pytest.main([__file__])
