"""CLI entry point for shopcloud.

Invoked as::

    shopcloud [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m shopcloud.cli.main

Commands
--------
validate          Validate a JSON payload file
token issue       Issue a shop-bound token for a JSON payload file
token partner     Issue a partner token
token read        Decrypt a token issued for this shop
token inspect     Show a token's shop id and JWE header without decrypting

Shop credentials come from ``--shop-id`` / ``--secret`` or the
``SHOPCLOUD_SHOP_ID`` / ``SHOPCLOUD_SECRET`` environment variables.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

import click
import pydantic
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shopcloud.config import ENV_AUDIT_LOG, ENV_SECRET, ENV_SHOP_ID, ShopCloudConfig
from shopcloud.errors import ShopCloudError, ValidationError
from shopcloud.shop import ShopCloud, is_expired, split_token

console = Console()

country_option = click.option(
    "--country",
    "-c",
    "countries",
    multiple=True,
    help="Accepted country code (repeatable). Defaults to CAN and USA.",
)


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(package_name="shopcloud")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level.",
)
def cli(log_level: str) -> None:
    """Issue and read encrypted shop-bound identity tokens"""
    logging.basicConfig(level=getattr(logging, log_level.upper()))


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from shopcloud import __version__

    console.print(f"[bold]shopcloud[/bold] v{__version__}")


# ------------------------------------------------------------------
# validate
# ------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("payload_file", type=click.File("r"))
@country_option
def validate_command(payload_file: TextIO, countries: tuple[str, ...]) -> None:
    """Validate the JSON payload in PAYLOAD_FILE ("-" for stdin)."""
    from shopcloud.validation import COUNTRIES, PayloadValidator

    validator = PayloadValidator(countries or COUNTRIES)
    result = validator.validate(_load_json(payload_file))
    if result:
        console.print("[green]Payload is valid.[/green]")
        return

    _print_errors(result.errors)
    sys.exit(1)


# ------------------------------------------------------------------
# token command group
# ------------------------------------------------------------------


@cli.group(name="token")
@click.option("--shop-id", envvar=ENV_SHOP_ID, default=None, help="Shop identifier.")
@click.option("--secret", envvar=ENV_SECRET, default=None, help="Shop secret (sk_...).")
@click.option(
    "--audit-log",
    envvar=ENV_AUDIT_LOG,
    type=click.Path(dir_okay=False),
    default=None,
    help="Append token audit events to this JSONL file.",
)
@country_option
@click.pass_context
def token_group(
    ctx: click.Context,
    shop_id: str | None,
    secret: str | None,
    audit_log: str | None,
    countries: tuple[str, ...],
) -> None:
    """Issue and read tokens."""
    ctx.obj = {
        "shop_id": shop_id,
        "secret": secret,
        "audit_log": audit_log,
        "countries": countries,
    }


@token_group.command(name="issue")
@click.argument("payload_file", type=click.File("r"))
@click.option(
    "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the token to this file path.",
)
@click.pass_obj
def issue_command(obj: dict[str, Any], payload_file: TextIO, output: str | None) -> None:
    """Issue a token for the JSON payload in PAYLOAD_FILE ("-" for stdin)."""
    shop = _build_shop(obj)
    payload = _load_json(payload_file)

    try:
        token = shop.identified_token(payload)
    except ValidationError as exc:
        _print_errors(exc.errors)
        sys.exit(1)
    except ShopCloudError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    if output:
        Path(output).write_text(token + "\n", encoding="utf-8")
        console.print(f"[green]Token written to[/green] {output}")
    else:
        click.echo(token)


@token_group.command(name="partner")
@click.pass_obj
def partner_command(obj: dict[str, Any]) -> None:
    """Issue a partner token valid for one hour."""
    shop = _build_shop(obj)
    try:
        click.echo(shop.get_partner_token())
    except ShopCloudError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


@token_group.command(name="read")
@click.argument("token")
@click.pass_obj
def read_command(obj: dict[str, Any], token: str) -> None:
    """Decrypt TOKEN and print its payload as JSON."""
    shop = _build_shop(obj)
    try:
        payload = shop.read_token(token.strip())
    except ShopCloudError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    click.echo(json.dumps(payload, indent=2))
    if is_expired(payload):
        console.print("[yellow]Warning:[/yellow] token has expired.")


@token_group.command(name="inspect")
@click.argument("token")
def inspect_command(token: str) -> None:
    """Show TOKEN's shop id and protected header without decrypting it."""
    from shopcloud.codec import TokenCodec

    try:
        ciphertext, shop_id = split_token(token.strip())
        header = TokenCodec.read_header(ciphertext)
    except ShopCloudError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    table = Table(title="Token", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("shop_id", escape(shop_id))
    for key, value in sorted(header.items()):
        table.add_row(f"header.{key}", escape(str(value)))
    console.print(table)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _load_json(source: TextIO) -> Any:
    try:
        return json.load(source)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Error:[/red] payload is not valid JSON: {escape(str(exc))}")
        sys.exit(1)


def _build_shop(obj: dict[str, Any]) -> ShopCloud:
    settings: dict[str, Any] = {
        "shop_id": obj.get("shop_id") or "",
        "secret": obj.get("secret") or "",
        "audit_log": obj.get("audit_log"),
    }
    if obj.get("countries"):
        settings["countries"] = tuple(obj["countries"])
    try:
        config = ShopCloudConfig(**settings)
        return ShopCloud.from_config(config)
    except pydantic.ValidationError as exc:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        console.print(f"[red]Error:[/red] invalid configuration: {escape(messages)}")
        sys.exit(1)
    except ShopCloudError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


def _print_errors(errors: list[dict[str, str]]) -> None:
    table = Table(title="Validation errors", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Section", style="cyan")
    table.add_column("Message", style="red")
    for index, record in enumerate(errors, start=1):
        for section, message in record.items():
            table.add_row(str(index), section, escape(message))
    console.print(table)
    console.print(f"\n  [red]{len(errors)} error(s)[/red]")


if __name__ == "__main__":
    cli()
