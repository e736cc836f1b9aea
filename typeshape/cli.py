import json
import logging

import click

from .cli_utils import reconstruct_command_line
from .config import CodecConfig
from .errors import SchemaError, ValidationError
from .json_schema import generate_from_ast, json_schema_to_ast, parse


def load_config(config_path):
    if config_path is None:
        return CodecConfig()
    with open(config_path) as f:
        return CodecConfig.from_dict(json.load(f))


def load_json(path):
    with open(path) as f:
        return json.load(f)


def write_json(path, data):
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug messages to stderr")
def typeshape(verbose):
    """Convert between typeshape ASTs and JSON Schema, and validate data."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@typeshape.command("to-json-schema")
@click.option("--id", "schema_id", default=None, type=str, help="Value of $id (also emits $schema)")
@click.option("--title", default=None, type=str)
@click.option("--description", default=None, type=str)
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("ast_path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(resolve_path=True))
def to_json_schema(schema_id, title, description, config, ast_path, output):
    """Write the JSON Schema for the AST stored in AST_PATH to OUTPUT."""
    codec_config = load_config(config)
    ast = load_json(ast_path)

    try:
        document = generate_from_ast(ast, id=schema_id, title=title, description=description, config=codec_config)
    except SchemaError as e:
        raise click.ClickException(str(e)) from e

    if codec_config.add_generation_comment:
        document = {"$comment": f"Generated by {reconstruct_command_line(to_json_schema)}", **document}

    write_json(output, document)


@typeshape.command("to-ast")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("schema_path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(resolve_path=True))
def to_ast(config, schema_path, output):
    """Write the AST for the JSON Schema stored in SCHEMA_PATH to OUTPUT."""
    codec_config = load_config(config)
    document = load_json(schema_path)

    try:
        ast = json_schema_to_ast(document, codec_config)
    except SchemaError as e:
        raise click.ClickException(str(e)) from e

    write_json(output, ast)


@typeshape.command("validate")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("schema_path", type=click.Path(exists=True, resolve_path=True))
@click.argument("data_path", type=click.Path(exists=True, resolve_path=True))
def validate(config, schema_path, data_path):
    """Decode the JSON in DATA_PATH against the JSON Schema in SCHEMA_PATH."""
    codec_config = load_config(config)
    document = load_json(schema_path)
    data = load_json(data_path)

    try:
        schema = parse(document, codec_config)
    except SchemaError as e:
        raise click.ClickException(str(e)) from e

    try:
        decoded = schema.decode(data, codec_config)
    except ValidationError as e:
        click.echo(f"Invalid: {e.message}", err=True)
        raise SystemExit(1) from e

    click.echo(json.dumps(decoded, indent=2))
