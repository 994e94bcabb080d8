from __future__ import annotations

import logging
import os

import click

from .capacity import payload_capacity
from .config import OperationContext
from .errors import IOFailure, StegoError
from .image_utils import decode_cover
from .plugin import DctLsbPlugin


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Stegano-DCT CLI: hide/extract files in the DCT coefficients of images."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = DctLsbPlugin()


def _read_file(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise IOFailure(f"Cannot read {path}: {e.strerror or e}") from e


def _write_file(path: str, data: bytes) -> None:
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise IOFailure(f"Cannot write {path}: {e.strerror or e}") from e


@cli.command()
@click.option("--payload", "payload_path", required=True, type=click.Path(exists=True, dir_okay=False), help="File to hide")
@click.option("--cover", "cover_path", type=click.Path(exists=True, dir_okay=False), help="Cover image; a random one is generated if omitted")
@click.option("--out", "out_path", required=True, help="Output stego image (PNG/BMP/TIFF/PPM/TGA)")
@click.option("--compress/--no-compress", default=False, show_default=True, help="zlib-compress the payload first")
@click.option("--encrypt", is_flag=True, help="Encrypt the payload with AES-256-GCM")
@click.option("--password", envvar="STEGANO_PASSWORD", help="Password for encryption")
@click.pass_obj
def embed(plugin: DctLsbPlugin, payload_path: str, cover_path: str, out_path: str, compress: bool, encrypt: bool, password: str):
    """Hide a file inside an image."""
    if encrypt and not password:
        raise click.UsageError("--encrypt needs --password (or STEGANO_PASSWORD)")
    context = OperationContext(use_compression=compress, use_encryption=encrypt, password=password)
    try:
        payload = _read_file(payload_path)
        cover = _read_file(cover_path) if cover_path else None
        stego = plugin.embed(payload, os.path.basename(payload_path), cover, cover_path, out_path, context)
        _write_file(out_path, stego)
    except StegoError as e:
        raise click.ClickException(str(e))
    click.echo(f"Stego image saved to: {out_path}")


@cli.command()
@click.option("--in", "in_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Input stego image")
@click.option("--out", "out_path", help="Output file; defaults to the embedded file name")
@click.option("--password", envvar="STEGANO_PASSWORD", help="Password if the payload was encrypted")
@click.pass_obj
def extract(plugin: DctLsbPlugin, in_path: str, out_path: str, password: str):
    """Recover a hidden file from an image."""
    context = OperationContext(password=password)
    try:
        header, data = plugin.extract_with_header(_read_file(in_path), in_path, context)
    except StegoError as e:
        raise click.ClickException(str(e))

    if not out_path:
        out_path = os.path.basename(header.name)
        if out_path in ("", ".", ".."):
            raise click.UsageError(f"Embedded file name {header.name!r} is not usable; pass --out")
    try:
        _write_file(out_path, data)
    except StegoError as e:
        raise click.ClickException(str(e))
    click.echo(f"Recovered {len(data)} bytes to: {out_path}")


@cli.command()
@click.option("--cover", "cover_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Cover image")
@click.option("--name", "file_name", default="", help="File name that will be embedded with the payload")
def capacity(cover_path: str, file_name: str):
    """Show how many payload bytes a cover can hold."""
    try:
        image = decode_cover(_read_file(cover_path), cover_path)
    except StegoError as e:
        raise click.ClickException(str(e))
    click.echo(f"{payload_capacity(image, file_name.encode('utf-8'))} bytes")


@cli.command()
@click.pass_obj
def info(plugin: DctLsbPlugin):
    """Describe the embedding method."""
    click.echo(f"{plugin.name}: {plugin.description}")
    click.echo(plugin.usage)


if __name__ == "__main__":
    cli()
