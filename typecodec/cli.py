"""Command-line interface for inspecting type encodings."""

from __future__ import annotations

import json
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from typecodec.grammar import (
    Array,
    Block,
    Field,
    LayoutError,
    Object,
    ParseError,
    Pointer,
    Qualified,
    Scalar,
    Struct,
    TypeEncoding,
    Union,
    decode_type,
    encode,
    size_and_alignment,
)
from typecodec.members import Attributes, MethodTypeEncodings

_ROLES = ["return", "self", "_cmd"]

# Deeper nodes are shown by their encoding only, the console runs out of width
_MAX_TREE_DEPTH = 16


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug logging")
def cli(verbose: bool) -> None:
    """Objective-C type encoding inspector."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True))],
        )


def _label(item: TypeEncoding | Field) -> Text:
    """Describe one node of a type, without its nested types."""
    if isinstance(item, Field):
        name = "(unnamed)" if item.name is None else item.name
        return Text.assemble(("field ", "dim"), (name, "green"))
    if isinstance(item, Scalar):
        kind = item.kind.name.lower()
    elif isinstance(item, Object):
        kind = "object"
    elif isinstance(item, Qualified):
        kind = item.qualifier.name.lower()
    else:
        kind = type(item).__name__.lower()
    return Text.assemble((kind, "bold cyan"), " ", (repr(encode(item)), "yellow"))


def _children(item: TypeEncoding | Field) -> list[TypeEncoding | Field]:
    if isinstance(item, Field):
        return [] if item.type is None else [item.type]
    if isinstance(item, Block):
        return list(item.params or ())
    if isinstance(item, Array):
        return [] if item.element is None else [item.element]
    if isinstance(item, (Struct, Union)):
        return list(item.fields or ())
    if isinstance(item, Pointer):
        return [] if item.pointee is None else [item.pointee]
    if isinstance(item, Qualified):
        return [item.type]
    return []


def _tree(t: TypeEncoding) -> Tree:
    root = Tree(_label(t))
    pending = [(t, root, 0)]
    while pending:
        item, node, depth = pending.pop()
        if depth == _MAX_TREE_DEPTH:
            continue
        for child in _children(item):
            pending.append((child, node.add(_label(child)), depth + 1))
    return root


def _layout(t: TypeEncoding) -> tuple[int, int] | None:
    try:
        return size_and_alignment(t)
    except LayoutError:
        return None


@cli.command("type")
@click.argument("encoding")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def type_(encoding: str, output_json: bool) -> None:
    """Decode a single type encoding."""
    try:
        t = decode_type(encoding)
    except ParseError as e:
        print(f"Invalid type encoding: {e}")
        sys.exit(1)

    layout = _layout(t)

    if output_json:
        data = {
            "encoding": encode(t),
            "kind": type(t).__name__,
            "size": layout[0] if layout else None,
            "alignment": layout[1] if layout else None,
        }
        print(json.dumps(data, indent=2))
        return

    console = Console()
    console.print(_tree(t))
    if layout:
        console.print(f"[dim]Size[/dim] {layout[0]}  [dim]Alignment[/dim] {layout[1]}")


@cli.command()
@click.argument("encoding")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def method(encoding: str, output_json: bool) -> None:
    """Decode a method type encoding."""
    try:
        signature = MethodTypeEncodings.decode(encoding)
    except ParseError as e:
        print(f"Invalid method encoding: {e}")
        sys.exit(1)

    if output_json:
        print(json.dumps(signature.to_dict(), indent=2))
        return

    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("#", style="dim", justify="right")
    table.add_column("Role", style="white")
    table.add_column("Type", style="yellow")
    table.add_column("Offset", style="green", justify="right")

    for i, t in enumerate(signature.types):
        role = _ROLES[i] if i < len(_ROLES) else f"arg{i - len(_ROLES)}"
        offset = str(signature.offsets[i]) if signature.offsets else ""
        table.add_row(str(i), role, escape(encode(t)), offset)

    Console().print(table)


@cli.command()
@click.argument("attributes")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def attrs(attributes: str, output_json: bool) -> None:
    """Decode a property attribute string."""
    decoded = Attributes.parse(attributes)

    if output_json:
        print(json.dumps(decoded.to_dict(), indent=2))
        return

    table = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
    table.add_column("Label", style="dim")
    table.add_column("Value", style="white")

    table.add_row("Type", escape(encode(decoded.encoding)))
    table.add_row("Setter", decoded.setter_type.value)
    flags = [
        name
        for name, on in (
            ("readonly", decoded.read_only),
            ("nonatomic", decoded.non_atomic),
            ("dynamic", decoded.dynamic),
        )
        if on
    ]
    table.add_row("Flags", ", ".join(flags) or "-")
    for label, value in (
        ("Getter", decoded.custom_getter),
        ("Setter name", decoded.custom_setter),
        ("Ivar", decoded.ivar_name),
    ):
        if value is not None:
            table.add_row(label, escape(value))

    Console().print(table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
