"""Command-line helpers for sealing values and inspecting encrypted files."""

from __future__ import annotations

import sys

import click

from .._crypto import AesEncryptionEngine
from .._storage import FileConfigStorage
from .._types import ConfigError

_password_option = click.option(
    "--password",
    "-p",
    prompt=True,
    hide_input=True,
    help="Password used to derive the key (prompted when omitted).",
)


def _fail(error: ConfigError) -> None:
    click.secho(f"Error: {error}", fg="red", err=True)
    sys.exit(1)


@click.group("sealed-config")
def main():
    """Encrypted configuration helpers."""
    pass


@main.command("encrypt")
@click.argument("value")
@_password_option
def encrypt_cli(value: str, password: str) -> None:
    """Encrypt VALUE and print the packet.

    The packet can be pasted into a selectively encrypted config file.
    """
    try:
        click.echo(AesEncryptionEngine().encrypt(value, password))
    except ConfigError as e:
        _fail(e)


@main.command("decrypt")
@click.argument("packet")
@_password_option
def decrypt_cli(packet: str, password: str) -> None:
    """Decrypt PACKET and print the plaintext."""
    try:
        click.echo(AesEncryptionEngine().decrypt(packet, password))
    except ConfigError as e:
        _fail(e)


@main.command("unseal")
@click.argument("path", type=click.Path(dir_okay=False))
@_password_option
def unseal_cli(path: str, password: str) -> None:
    """Decrypt a whole-document config file and print its JSON.

    Examples:\n
        sealed-config unseal secure-config.json\n
        sealed-config unseal secure-config.json -p "$CONFIG_PASSWORD"\n
    """
    try:
        text = FileConfigStorage().read_text(path)
        click.echo(AesEncryptionEngine().decrypt(text.strip(), password))
    except ConfigError as e:
        _fail(e)
