"""Command line interface for pcapcodec."""

from __future__ import annotations

import json
import os
from itertools import islice
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Iterator, Optional

import click

from pcapcodec.errors import PcapError
from pcapcodec.format.header import ByteOrder, GlobalHeader, TimestampUnit
from pcapcodec.format.record import Record
from pcapcodec.logging_utils import configure_logging, get_logger
from pcapcodec.reader import CaptureReader
from pcapcodec.viz import render as render_timeline
from pcapcodec.writer import CaptureWriter

DEFAULT_DUMP_LIMIT = 0
DEFAULT_BYTE_ORDER = "keep"

ENV_SNAPLEN = "PCAPCODEC_SNAPLEN"
ENV_BYTE_ORDER = "PCAPCODEC_BYTE_ORDER"
ENV_DUMP_LIMIT = "PCAPCODEC_DUMP_LIMIT"

U32_MAX = 0xFFFFFFFF

BYTE_ORDER_CHOICES = ("keep", "big", "little", "native")
PRECISION_CHOICES = ("keep", "micro", "nano")

LOGGER = get_logger(__name__)


@click.group()
@click.option(
    "--verbose",
    is_flag=True,
    default=False,
    help="Enable debug logging output.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Inspect and rewrite pcap capture files."""

    configure_logging(verbose)
    ctx.obj = {"verbose": verbose}


def _resolve_config(value, env_var: str, default, cast):
    if value is not None:
        return value
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return cast(raw)
    except (ValueError, TypeError):
        LOGGER.warning("Invalid value for %s=%r; falling back to %s", env_var, raw, default)
        return default


def _byte_order_choice(raw: str) -> str:
    value = raw.strip().lower()
    if value not in BYTE_ORDER_CHOICES:
        raise ValueError(f"unknown byte order {raw!r}")
    return value


def _target_byte_order(choice: str, current: ByteOrder) -> ByteOrder:
    if choice == "big":
        return ByteOrder.BIG
    if choice == "little":
        return ByteOrder.LITTLE
    if choice == "native":
        return ByteOrder.native()
    return current


def _target_unit(choice: str, current: TimestampUnit) -> TimestampUnit:
    if choice == "micro":
        return TimestampUnit.MICROSECONDS
    if choice == "nano":
        return TimestampUnit.NANOSECONDS
    return current


def _rescale(records: Iterable[Record], source: TimestampUnit, target: TimestampUnit) -> Iterator[Record]:
    for index, record in enumerate(records):
        if source is not target:
            if target is TimestampUnit.NANOSECONDS:
                scaled = record.timestamp_fraction * 1000
                if scaled > U32_MAX:
                    raise click.ClickException(
                        f"record {index}: timestamp fraction {record.timestamp_fraction} "
                        "does not fit in 32 bits at nanosecond precision"
                    )
                record.timestamp_fraction = scaled
            else:
                record.timestamp_fraction //= 1000
        yield record


def _snap(records: Iterable[Record], snaplen: Optional[int]) -> Iterator[Record]:
    for record in records:
        if snaplen is not None and record.captured_length > snaplen:
            record.payload = record.payload[:snaplen]
            record.captured_length = snaplen
        yield record


def _slice(records: Iterable[Record], skip: int, count: Optional[int]) -> Iterator[Record]:
    stop = None if count is None else skip + count
    return islice(records, skip, stop)


def _check_distinct(input_path: Path, output_path: Path) -> None:
    if output_path.exists() and output_path.resolve() == input_path.resolve():
        raise click.BadParameter("output must not be the input capture", param_hint="--out")


def _header_summary(header: GlobalHeader) -> dict:
    return {
        "byte_order": header.byte_order.name.lower(),
        "timestamp_unit": header.timestamp_unit.name.lower(),
        "magic_number": f"0x{header.magic_number:08x}",
        "version": f"{header.version_major}.{header.version_minor}",
        "time_zone_offset": header.time_zone_offset,
        "timestamp_accuracy": header.timestamp_accuracy,
        "snapshot_length": header.snapshot_length,
        "link_type": header.link_type,
    }


@cli.command("info")
@click.option("--in", "input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True, help="PCAP input path")
def info_command(input_path: Path) -> None:
    """Print the global header and record totals of a capture."""

    total_records = 0
    captured_bytes = 0
    original_bytes = 0
    truncated_records = 0
    first_ts: Optional[float] = None
    last_ts: Optional[float] = None

    try:
        with input_path.open("rb") as handle:
            reader = CaptureReader(handle)
            unit = reader.header.timestamp_unit
            for record in reader:
                total_records += 1
                captured_bytes += record.captured_length
                original_bytes += record.original_length
                if record.is_truncated:
                    truncated_records += 1
                ts = record.timestamp(unit)
                if first_ts is None:
                    first_ts = ts
                last_ts = ts
    except PcapError as exc:
        raise click.ClickException(f"{input_path}: {exc}")

    click.echo(f"File: {input_path}")
    for key, value in _header_summary(reader.header).items():
        click.echo(f"  {key}: {value}")
    click.echo(f"Records: {total_records} (truncated: {truncated_records})")
    click.echo(f"Captured bytes: {captured_bytes}")
    click.echo(f"Original bytes: {original_bytes}")
    if first_ts is not None and last_ts is not None:
        click.echo(f"Time span: {first_ts:.6f} -> {last_ts:.6f} ({last_ts - first_ts:.6f}s)")


@cli.command("dump")
@click.option("--in", "input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True, help="PCAP input path")
@click.option(
    "--limit",
    default=None,
    type=int,
    help=f"Maximum records to print, 0 for all (default {DEFAULT_DUMP_LIMIT}; env {ENV_DUMP_LIMIT})",
)
@click.option("--payload", "with_payload", is_flag=True, default=False, help="Include the hex-encoded payload")
def dump_command(input_path: Path, limit: int | None, with_payload: bool) -> None:
    """Print one JSON object per record."""

    limit_value = _resolve_config(limit, ENV_DUMP_LIMIT, DEFAULT_DUMP_LIMIT, int)

    try:
        with input_path.open("rb") as handle:
            reader = CaptureReader(handle)
            records = islice(reader, limit_value) if limit_value > 0 else reader
            for index, record in enumerate(records):
                entry = {
                    "index": index,
                    "ts_sec": record.timestamp_seconds,
                    "ts_frac": record.timestamp_fraction,
                    "caplen": record.captured_length,
                    "len": record.original_length,
                }
                if with_payload:
                    entry["payload"] = record.payload.hex()
                click.echo(json.dumps(entry))
    except PcapError as exc:
        raise click.ClickException(f"{input_path}: {exc}")


@cli.command("convert")
@click.option("--in", "input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True, help="PCAP input path")
@click.option("--out", "output_path", type=click.Path(dir_okay=False, path_type=Path), required=True, help="PCAP output path")
@click.option(
    "--byte-order",
    default=None,
    type=click.Choice(BYTE_ORDER_CHOICES),
    help=f"Byte order of the output (default {DEFAULT_BYTE_ORDER}; env {ENV_BYTE_ORDER})",
)
@click.option("--precision", default="keep", show_default=True, type=click.Choice(PRECISION_CHOICES), help="Timestamp precision of the output")
def convert_command(input_path: Path, output_path: Path, byte_order: str | None, precision: str) -> None:
    """Rewrite a capture with a different byte order or timestamp precision."""

    order_choice = _resolve_config(byte_order, ENV_BYTE_ORDER, DEFAULT_BYTE_ORDER, _byte_order_choice)
    _check_distinct(input_path, output_path)

    try:
        with input_path.open("rb") as source, output_path.open("wb") as sink:
            reader = CaptureReader(source)
            header = reader.header.with_byte_order(
                _target_byte_order(order_choice, reader.header.byte_order)
            ).with_timestamp_unit(_target_unit(precision, reader.header.timestamp_unit))
            writer = CaptureWriter(sink, header)
            written = writer.write_records(
                _rescale(reader, reader.header.timestamp_unit, header.timestamp_unit)
            )
    except PcapError as exc:
        raise click.ClickException(f"{input_path}: {exc}")
    except click.ClickException:
        output_path.unlink(missing_ok=True)
        raise

    LOGGER.info("Converted %s records from %s to %s", written, input_path, output_path)
    click.echo(
        f"Wrote {written} records to {output_path} "
        f"({header.byte_order.name.lower()}-endian, {header.timestamp_unit.name.lower()})"
    )


@cli.command("filter")
@click.option("--in", "input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True, help="PCAP input path")
@click.option("--out", "output_path", type=click.Path(dir_okay=False, path_type=Path), required=True, help="PCAP output path")
@click.option("--skip", default=0, show_default=True, type=click.IntRange(min=0), help="Records to skip from the start")
@click.option("--count", default=None, type=click.IntRange(min=0), help="Maximum records to keep")
@click.option(
    "--snaplen",
    default=None,
    type=click.IntRange(min=0),
    help=f"Truncate payloads to this many bytes (env {ENV_SNAPLEN})",
)
def filter_command(
    input_path: Path,
    output_path: Path,
    skip: int,
    count: int | None,
    snaplen: int | None,
) -> None:
    """Copy a slice of a capture, optionally truncating payloads."""

    snaplen_value = _resolve_config(snaplen, ENV_SNAPLEN, None, int)
    _check_distinct(input_path, output_path)

    try:
        with input_path.open("rb") as source, output_path.open("wb") as sink:
            reader = CaptureReader(source)
            header = reader.header
            if snaplen_value is not None:
                header = replace(header, snapshot_length=min(header.snapshot_length, snaplen_value))
            writer = CaptureWriter(sink, header)
            written = writer.write_records(_snap(_slice(reader, skip, count), snaplen_value))
    except PcapError as exc:
        raise click.ClickException(f"{input_path}: {exc}")

    LOGGER.info("Filtered %s records from %s to %s", written, input_path, output_path)
    click.echo(f"Wrote {written} records to {output_path}")


@cli.command("plot")
@click.option("--in", "input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True, help="PCAP input path")
@click.option("--out-dir", "output_dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Directory for timeline.html (default: next to the capture)")
def plot_command(input_path: Path, output_dir: Path | None) -> None:
    """Render an interactive timeline of record sizes."""

    try:
        output_path = render_timeline(input_path, output_dir=output_dir)
    except PcapError as exc:
        raise click.ClickException(f"{input_path}: {exc}")
    click.echo(f"Timeline written to {output_path}")
    LOGGER.info("Rendered timeline from %s to %s", input_path, output_path)


if __name__ == "__main__":
    cli()
