"""CLI: pdum decode, pdum encode"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pdum.codec import body_object, build_content, decode_body, decode_capsule
from pdum.errors import DecodeError
from pdum.models.capsule import CAPSULE_VERSION, Body, Resource

console = Console()


def print_body(body: Body, title: str = "Body") -> None:
    console.print(f"[bold]{title}[/bold]")
    console.print(escape(body.text) if body.text else "[dim](empty)[/dim]")
    if body.quote is not None:
        console.print(f"[dim]quote: {escape(body.quote)}[/dim]")
    if body.resources:
        table = Table(title=f"Resources ({len(body.resources)})")
        table.add_column("#", style="bold")
        table.add_column("Format")
        table.add_column("URL")
        table.add_column("Checksum")
        table.add_column("Inline")
        for i, r in enumerate(body.resources):
            table.add_row(str(i), str(r.format), escape(r.url), escape(r.cs), f"{len(r.data)} bytes" if r.inline else "-")
        console.print(table)


@click.command("decode")
@click.argument("content")
@click.option("--json-output", "--json", is_flag=True)
def decode_cmd(content: str, json_output: bool):
    """Decode an envelope content string."""
    try:
        capsule = decode_capsule(content)
        body = decode_body(capsule)
    except DecodeError as e:
        console.print(f"[red]Cannot decode ({e.code}): {e}[/red]")
        raise SystemExit(1)
    if json_output:
        click.echo(json.dumps({"t": capsule.t, "v": capsule.v, "body": body_object(body)}, indent=2))
        return
    print_body(body, title=f"Capsule t={capsule.t} v={capsule.v}")


@click.command("encode")
@click.option("--text", required=True)
@click.option("--quote", default=None, help="Signature of the quoted envelope")
@click.option(
    "--resource", "resources", multiple=True, type=(int, str, str),
    metavar="FORMAT URL CS", help="Attach a remote resource",
)
@click.option("--type", "capsule_type", default=None, type=int)
@click.option("--version", "capsule_version", default=CAPSULE_VERSION, type=int)
def encode_cmd(text: str, quote: Optional[str], resources, capsule_type: Optional[int], capsule_version: int):
    """Build a content string ready for signing."""
    body = Body(
        text=text,
        quote=quote,
        resources=[Resource(format=fmt, url=url, cs=cs) for fmt, url, cs in resources],
    )
    click.echo(build_content(body, t=capsule_type, v=capsule_version))
