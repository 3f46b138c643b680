import json
import logging

import click
import ijson

from .codec import CodecConfig, ScriptCodecError, ScriptReader, render_outline, serialize_pretty, serialize_to_string
from .codec.script_ast import Node


def load_config(config_path):
    if config_path is None:
        return CodecConfig()
    with open(config_path) as f:
        return CodecConfig.from_dict(json.load(f))


def read_document(ctx, path) -> Node:
    """Read a document, exiting with status 1 on failure."""
    try:
        with open(path, "rb") as f:
            return ScriptReader(ctx.obj["config"]).read(f)
    except (ScriptCodecError, ijson.JSONError) as e:
        click.echo(f"{path}: {e}", err=True)
        ctx.exit(1)


@click.group()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug messages")
@click.pass_context
def archetype_json(ctx, config, verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config)


@archetype_json.command()
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.pass_context
def check(ctx, path):
    """Check that a document is a valid script."""
    root = read_document(ctx, path)
    click.echo(f"{path}: ok ({root.kind})")


@archetype_json.command(name="format")
@click.option("--pretty", is_flag=True, default=False, help="Indent the output")
@click.option("--output", "-o", default=None, type=click.Path(resolve_path=True))
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.pass_context
def format_document(ctx, pretty, output, path):
    """Re-write a document in canonical form."""
    root = read_document(ctx, path)
    config = ctx.obj["config"]
    out = serialize_pretty(root, config) if pretty else serialize_to_string(root, config)
    if output is None:
        click.echo(out)
    else:
        with open(output, "w", encoding="utf-8") as f:
            f.write(out + "\n")


@archetype_json.command()
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.pass_context
def outline(ctx, path):
    """Print the outline of a document."""
    root = read_document(ctx, path)
    click.echo(render_outline(root), nl=False)
