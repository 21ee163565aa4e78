"""
pdum CLI — `pdum` command.

Commands:
  pdum decode <content>        Show the body of an envelope's content
  pdum encode --text ...       Build a content string ready for signing
  pdum fetch <address>         Latest envelope of an address
  pdum publish <file>          Post a signed envelope (JSON file)
  pdum config set-url <url>    Save the node URL
"""

import asyncio
import json
from pathlib import Path

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install pdum[cli]")

from pdum.transport.http import DEFAULT_BASE_URL

console = Console()
CONFIG_FILE = Path.home() / ".pdum" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _base_url(override=None) -> str:
    return override or _load_config().get("base_url", DEFAULT_BASE_URL)


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
def main():
    """pdum — compose, inspect and exchange signed pdu envelopes."""


# Register subcommands from separate modules
from pdum.cli.envelope import decode_cmd, encode_cmd
from pdum.cli.node import config, fetch_cmd, publish_cmd

main.add_command(decode_cmd)
main.add_command(encode_cmd)
main.add_command(fetch_cmd)
main.add_command(publish_cmd)
main.add_command(config)


if __name__ == "__main__":
    main()
