"""
Open Data Library CLI

Developer convenience commands around the Python client.

Commands:
  genesis   - Create a local signing key
  whoami    - Show current wallet address
  normalize - Scale CSV columns into a fixed-point matrix and labels
  cid-hex   - Show the hex form of a content identifier
  upload    - Pin a scaled CSV table and print its CID
  schemas   - List schemas registered on the contract
  credits   - Show consumer credits for an address
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import structlog

from .config import ClientOptions
from .data.cid import cid_to_hex
from .data.storage import LocalDirStore
from .data.tabular import normalize as normalize_csv
from .errors import ODLError
from .identity.eth import generate_eoa, get_address, load_private_key, save_private_key

VERSION = "0.3.0"


def _fail(message: str) -> None:
    click.secho(f"ERROR: {message}", fg="red", err=True)
    sys.exit(1)


def _client(**kwargs):
    from .client import OpenDataLibrary

    try:
        return OpenDataLibrary(ClientOptions.from_env(), **kwargs)
    except Exception as exc:
        raise ODLError.wrap(exc) from exc


def configure_logging(verbose: bool = False) -> None:
    """Send log events to stderr so stdout only carries command output."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.INFO if verbose else logging.WARNING
        ),
        # sys.stderr is looked up per event; click swaps it in tests
        logger_factory=lambda *args: structlog.PrintLogger(sys.stderr),
    )


@click.group()
@click.version_option(version=VERSION, prog_name="odl")
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr")
def cli(verbose: bool) -> None:
    """Open Data Library client tools."""
    configure_logging(verbose)


# ============ Identity ============


@cli.command()
@click.option("--force", is_flag=True, help="Replace an existing key")
def genesis(force: bool) -> None:
    """Create a local signing key in ~/.odl/.env."""
    if not force:
        try:
            address = get_address(load_private_key())
            click.echo(f"Key already exists: {address}")
            click.echo("Use --force to replace it.")
            return
        except ValueError:
            pass

    private_key, address = generate_eoa()
    env_path = save_private_key(private_key)
    click.secho("Key created.", fg="green")
    click.echo(f"  Address: {address}")
    click.echo(f"  Stored:  {env_path}")


@cli.command()
def whoami() -> None:
    """Show current wallet identity."""
    try:
        address = get_address(load_private_key())
    except ValueError:
        click.echo("No wallet found.")
        click.echo("Run 'odl genesis' to create one.")
        sys.exit(1)
    click.echo(f"Address: {address}")


# ============ Data ============


@cli.command()
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--input", "-i", "input_columns", multiple=True, required=True, help="Input column (repeatable)")
@click.option("--label", "-l", "label_column", required=True, help="Label column")
def normalize(csv_path: Path, input_columns: tuple[str, ...], label_column: str) -> None:
    """Print the scaled input matrix and labels of CSV_PATH as JSON."""
    try:
        matrix, labels = normalize_csv(csv_path.read_bytes(), list(input_columns), label_column)
    except ODLError as exc:
        _fail(str(exc))
    click.echo(json.dumps({"data": matrix, "labels": labels}))


@cli.command("cid-hex")
@click.argument("cid")
def cid_hex(cid: str) -> None:
    """Print the hex encoding of CID."""
    try:
        click.echo(cid_to_hex(cid))
    except ODLError as exc:
        _fail(str(exc))


@cli.command()
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", default=None, help="Pin name (default: random UUID)")
@click.option(
    "--local-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Store locally instead of pinning to Pinata",
)
def upload(csv_path: Path, name: Optional[str], local_dir: Optional[Path]) -> None:
    """Pin the scaled table of CSV_PATH and print its CID."""
    store = LocalDirStore(root=local_dir) if local_dir else None
    try:
        cid = _client(store=store).upload_cid_data_to_ipfs(csv_path.read_bytes(), name=name)
    except ODLError as exc:
        _fail(str(exc))
    click.echo(cid)


# ============ Contract reads ============


@cli.command()
def schemas() -> None:
    """List schemas registered on the contract."""
    try:
        names = _client().get_all_schemas()
    except ODLError as exc:
        _fail(str(exc))
    if not names:
        click.echo("No schemas registered.")
        return
    for schema_name in names:
        click.echo(schema_name)


@cli.command()
@click.argument("address", required=False)
def credits(address: Optional[str]) -> None:
    """Show consumer credits for ADDRESS (default: your key)."""
    try:
        amount = _client().consumer_credits(address)
    except ODLError as exc:
        _fail(str(exc))
    click.echo(f"Credits: {amount}")


def main() -> None:
    """odl CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
