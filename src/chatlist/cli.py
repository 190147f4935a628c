"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from chatlist.core.animated_sequence import AnimatedSequence
from chatlist.core.auto_scroll import AutoScrollAdvisor
from chatlist.core.diff import Change, EditOp, Insert, Move, Remove, diff
from chatlist.core.keying import key_of
from chatlist.domain.models import Item
from chatlist.domain.models.codec import items_from_list
from chatlist.errors import ChatListError, ItemDecodeError, OptionsError
from chatlist.settings import OptionsManager

app = typer.Typer(help="Inspect chat list reconciliation and animation")
console = Console()


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ItemDecodeError, OptionsError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except ChatListError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ItemDecodeError(f"{path}: {exc}") from exc


def _read_items(path: Path) -> List[Item]:
    payload = _read_json(path)
    if not isinstance(payload, list):
        raise ItemDecodeError(f"{path}: expected a JSON array of items")
    return items_from_list(payload)


def _describe(op: EditOp) -> tuple[str, str, str, str]:
    if isinstance(op, Insert):
        keys = ", ".join(str(key_of(item)) for item in op.items)
        return ("insert", str(op.position), str(op.count), keys)
    if isinstance(op, Remove):
        return ("remove", str(op.position), str(op.count), "")
    if isinstance(op, Move):
        return ("move", f"{op.from_index} -> {op.to_index}", "1", "")
    if isinstance(op, Change):
        return ("change", str(op.position), "1", str(key_of(op.payload)) if op.payload is not None else "")
    return (type(op).__name__, "", "", "")


def _ops_table(ops: List[EditOp], title: str) -> Table:
    table = Table(title=title)
    table.add_column("op")
    table.add_column("position")
    table.add_column("count", justify="right")
    table.add_column("keys")
    for op in ops:
        table.add_row(*_describe(op))
    return table


@app.command("diff")
@_handle_errors
def diff_command(
    old_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    new_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    detect_moves: bool = typer.Option(False, "--detect-moves", help="Report reorders as moves"),
    batch: bool = typer.Option(True, "--batch/--no-batch", help="Merge contiguous inserts and removals"),
) -> None:
    """Print the edit script turning OLD_FILE into NEW_FILE."""

    old = _read_items(old_file)
    new = _read_items(new_file)
    ops = diff(old, new, content_equals=lambda a, b: a == b, detect_moves=detect_moves, batch=batch)
    if not ops:
        print("[green]No changes")
        return
    console.print(_ops_table(ops, f"{len(old)} -> {len(new)} items"))


@app.command()
@_handle_errors
def simulate(
    snapshots_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    tick_ms: float = typer.Option(16.0, "--tick-ms", min=1.0, help="Frame interval"),
    user: Optional[str] = typer.Option(None, "--user", help="Local user id for auto-scroll advice"),
) -> None:
    """Replay successive item snapshots through an animated sequence."""

    payload = _read_json(snapshots_file)
    if not isinstance(payload, list) or not all(isinstance(entry, list) for entry in payload):
        raise ItemDecodeError(f"{snapshots_file}: expected a JSON array of item arrays")
    snapshots = [items_from_list(entry) for entry in payload]
    if not snapshots:
        print("[yellow]No snapshots")
        return

    sequence = AnimatedSequence(snapshots[0])
    advisor = AutoScrollAdvisor(user) if user else None
    table = Table(title=f"{len(snapshots)} snapshots at {tick_ms:g} ms/frame")
    table.add_column("step", justify="right")
    table.add_column("ops", justify="right")
    table.add_column("peak rows", justify="right")
    table.add_column("frames", justify="right")
    table.add_column("rows", justify="right")
    table.add_column("auto-scroll")

    for step, (old, new) in enumerate(zip(snapshots, snapshots[1:]), start=1):
        ops = diff(old, new, content_equals=lambda a, b: a == b)
        sequence.apply_ops(ops, old, new)
        peak = len(sequence)
        frames = 0
        while sequence.is_animating:
            sequence.tick(tick_ms)
            frames += 1
        advice = advisor.advise(old, new) if advisor is not None else None
        table.add_row(
            str(step),
            str(len(ops)),
            str(peak),
            str(frames),
            str(len(sequence)),
            f"after {advice.delay_ms} ms" if advice is not None else "-",
        )
    console.print(table)


@app.command("validate-options")
@_handle_errors
def validate_options_command(
    options_file: Path = typer.Argument(..., exists=True, dir_okay=False),
) -> None:
    """Validate a chat list options document."""

    manager = OptionsManager(options_file)
    manager.load()
    options = manager.options()
    print(f"[green]Options valid: threshold {options.on_end_reached_threshold:g}, last page {options.is_last_page}")


if __name__ == "__main__":  # pragma: no cover - manual invocation
    app()
