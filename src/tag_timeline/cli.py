from __future__ import annotations

from pathlib import Path

import typer

from tag_timeline.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from tag_timeline.features.frequency import (
    build_detection_table,
    build_tag_frequency_table,
    summarize_detections,
)
from tag_timeline.features.series import sort_series, tooltip_enabled_indexes
from tag_timeline.io.read import load_annotation_data, load_tag_universe
from tag_timeline.io.schema import AnnotationData
from tag_timeline.io.write import write_json, write_table
from tag_timeline.logging import configure_logging
from tag_timeline.paths import build_output_paths
from tag_timeline.report.presentation import Asset, build_chart_view

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _load_inputs(annotations: Path, tags: Path) -> tuple[AnnotationData, dict[str, int]]:
    try:
        annotation_data = load_annotation_data(annotations)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--annotations") from exc
    try:
        tag_universe = load_tag_universe(tags)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--tags") from exc
    return annotation_data, tag_universe


def _resolve_confidence(confidence: float | None, cfg: AppConfig) -> float:
    if confidence is None:
        return cfg.filtering.default_confidence
    return confidence


@app.command()
def frequency(
    annotations: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    tags: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    confidence: float | None = typer.Option(
        None,
        min=0.0,
        max=1.0,
        help="Minimum detection confidence. Falls back to filtering.default_confidence.",
    ),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    log_level: str | None = typer.Option(None, help="Logging level, e.g. DEBUG or INFO."),
) -> None:
    """Write the per-frame tag frequency table and a JSON summary."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    threshold = _resolve_confidence(confidence, cfg)
    annotation_data, tag_universe = _load_inputs(annotations, tags)
    paths = build_output_paths(out)

    frequency_table = build_tag_frequency_table(
        annotation_data=annotation_data,
        tag_universe=tag_universe,
        confidence=threshold,
    )
    series = sort_series(frequency_table)
    table_format = cfg.outputs.tables_format
    table_path = write_table(
        frequency_table,
        paths.tables / f"tag_frequency.{table_format}",
        fmt=table_format,
    )

    summary = {
        "confidence": threshold,
        "fps": annotation_data.fps,
        "n_frame_indexes": int(len(frequency_table.index)),
        "n_tags": int(len(tag_universe)),
        **summarize_detections(build_detection_table(annotation_data), tag_universe, threshold),
        "series_totals": [{"name": item.name, "total": item.total} for item in series],
        "tooltip_enabled_indexes": tooltip_enabled_indexes(series),
    }
    summary_path = write_json(summary, paths.summary / "tag_frequency.json")

    typer.echo("Tag frequency complete")
    typer.echo(f"- table: {table_path}")
    typer.echo(f"- summary: {summary_path}")
    typer.echo(f"- detections_counted: {summary['detections_counted']}")
    typer.echo(f"- detections_unknown_tag: {summary['detections_unknown_tag']}")


@app.command()
def chart(
    annotations: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    tags: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    confidence: float | None = typer.Option(
        None,
        min=0.0,
        max=1.0,
        help="Minimum detection confidence. Falls back to filtering.default_confidence.",
    ),
    asset_type: str = typer.Option("video", help="Type of the asset the annotations belong to."),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    log_level: str | None = typer.Option(None, help="Logging level, e.g. DEBUG or INFO."),
) -> None:
    """Write the renderer chart payload (series, options, tooltip indexes) as JSON."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    threshold = _resolve_confidence(confidence, cfg)
    annotation_data, tag_universe = _load_inputs(annotations, tags)

    view = build_chart_view(
        asset=Asset(asset_id=annotations.stem, asset_type=asset_type),
        annotation_data=annotation_data,
        tag_universe=tag_universe,
        confidence=threshold,
        config=cfg,
    )
    if view.chart is None:
        typer.echo(view.message or "No chart data.")
        return

    paths = build_output_paths(out)
    payload_path = write_json(view.chart.to_payload(), paths.charts / "tag_timeline.json")
    typer.echo(f"Chart payload written to: {payload_path}")


if __name__ == "__main__":
    app()
