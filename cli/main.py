from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from app.runner import replay_file
from core.config import Settings, get_settings
from core.logging import configure_logging
from core.models import Detection
from intrinsic import IntrinsicEventError

app = typer.Typer(help="Directional-Change / Overshoot intrinsic event detector")


def _effective_settings(overrides: Dict[str, Any]) -> Settings:
    base = get_settings()
    update = {k: v for k, v in overrides.items() if v is not None}
    if not update:
        return base
    return Settings(**{**base.model_dump(), **update})


def _format_detection(detection: Detection) -> str:
    data = detection.data
    return (
        f"{detection.timestamp.isoformat()} {detection.symbol} {data['code']:+d} "
        f"{data['kind']} {data['direction']} extreme={data['extreme']} reference={data['reference']}"
    )


@app.command()
def replay(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV or JSON-lines quote file"),
    threshold_up: Optional[float] = typer.Option(None, help="Upward DC threshold"),
    threshold_down: Optional[float] = typer.Option(None, help="Downward DC threshold"),
    os_size_up: Optional[float] = typer.Option(None, help="Upward overshoot size"),
    os_size_down: Optional[float] = typer.Option(None, help="Downward overshoot size"),
    initial_mode: Optional[int] = typer.Option(None, help="Initial mode, 1 or -1"),
    relative: Optional[bool] = typer.Option(None, "--relative/--absolute", help="Log-ratio or linear moves"),
    price_scale: Optional[int] = typer.Option(None, help="Scale decimal quotes to integers"),
    check_order: Optional[bool] = typer.Option(None, "--check-order/--no-check-order", help="Reject out-of-order ticks"),
    symbol: Optional[List[str]] = typer.Option(None, "--symbol", "-s", help="Only replay these symbols"),
    as_json: bool = typer.Option(False, "--json", help="Print events as JSON lines"),
    log_level: Optional[str] = typer.Option(None, help="Log level"),
) -> None:
    """Replay a quote file through the detector and print every event."""
    try:
        settings = _effective_settings(
            {
                "threshold_up": threshold_up,
                "threshold_down": threshold_down,
                "os_size_up": os_size_up,
                "os_size_down": os_size_down,
                "initial_mode": initial_mode,
                "relative_moves": relative,
                "price_scale": price_scale,
                "check_order": check_order,
                "log_level": log_level,
            }
        )
    except ValueError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2)
    configure_logging(settings.log_level)

    def emit(detection: Detection) -> None:
        if as_json:
            payload = {
                "symbol": detection.symbol,
                "timestamp": detection.timestamp.isoformat(),
                **detection.data,
            }
            typer.echo(json.dumps(payload, default=str))
        else:
            typer.echo(_format_detection(detection))

    try:
        summary = replay_file(settings, path, symbols=symbol or None, on_detection=emit)
    except IntrinsicEventError as exc:
        typer.echo(f"Replay aborted: {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps({"summary": summary.to_dict()}))
    else:
        counts = ", ".join(f"{code:+d}: {n}" for code, n in sorted(summary.counts.items()))
        typer.echo(f"{summary.quotes} quotes, {len(summary.detections)} events ({counts or 'none'})")


@app.command()
def show_config() -> None:
    """Print the effective settings as JSON."""
    settings = get_settings()
    typer.echo(json.dumps(settings.model_dump(), indent=2))


if __name__ == "__main__":
    app()
