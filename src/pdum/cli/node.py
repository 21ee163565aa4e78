"""CLI: pdum fetch, pdum publish, pdum config"""

import json
from contextlib import nullcontext
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from pdum.codec import DecodedEnvelope
from pdum.errors import PdumError
from pdum.models.envelope import Envelope, parse_envelope
from pdum.transport.http import HttpClient

console = Console()


def _base_url(override: Optional[str]) -> str:
    from pdum.cli.main import _base_url
    return _base_url(override)


def _load_config() -> dict:
    from pdum.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from pdum.cli.main import _save_config
    _save_config(cfg)


def _run(coro):
    from pdum.cli.main import _run
    return _run(coro)


def _show(envelope: Envelope, json_output: bool) -> None:
    if json_output:
        click.echo(json.dumps(envelope.to_wire(), indent=2))
        return
    from pdum.cli.envelope import print_body

    console.print(f"[green]signature:[/green] {envelope.signature}")
    for ref in envelope.references:
        console.print(f"[dim]ref: {ref}[/dim]")
    body = DecodedEnvelope(envelope).try_body()
    if body is None:
        console.print("[yellow]content does not decode[/yellow]")
    else:
        print_body(body)


@click.command("fetch")
@click.argument("address")
@click.option("--base-url", default=None, help="Node URL")
@click.option("--json-output", "--json", is_flag=True)
def fetch_cmd(address: str, base_url: Optional[str], json_output: bool):
    """Fetch the latest envelope published by ADDRESS."""

    async def _fetch():
        async with HttpClient(_base_url(base_url)) as client:
            return await client.fetch_latest_envelope(address)

    try:
        with nullcontext() if json_output else console.status("Fetching..."):
            envelope = _run(_fetch())
    except PdumError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    _show(envelope, json_output)


@click.command("publish")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--base-url", default=None, help="Node URL")
def publish_cmd(path: Path, base_url: Optional[str]):
    """Publish a signed envelope stored as JSON in PATH."""
    try:
        raw = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        console.print(f"[red]{path} is not JSON: {e}[/red]")
        raise SystemExit(1)
    envelope = parse_envelope(raw)
    if envelope is None:
        console.print(f"[red]{path} does not hold a signed envelope[/red]")
        raise SystemExit(1)

    async def _publish():
        async with HttpClient(_base_url(base_url)) as client:
            return await client.publish_envelope(envelope)

    try:
        with console.status("Publishing..."):
            stored = _run(_publish())
    except PdumError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    console.print(f"[green]Published: {stored.signature}[/green]")


@click.group()
def config():
    """Local settings."""


@config.command("set-url")
@click.argument("url")
def config_set_url(url: str):
    """Save the node URL used by fetch and publish."""
    _save_config({**_load_config(), "base_url": url})
    console.print(f"[green]Node URL set to {url}[/green]")


@config.command("show")
def config_show():
    """Print the saved settings."""
    click.echo(json.dumps({"base_url": _base_url(None), **_load_config()}, indent=2))
