"""CLI for color detection on image files."""

import json
import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

import click
from pydantic import BaseModel

from colordetect import config, nodes
from colordetect.models import Color, DetectConfig, ProcessingError, ProcessingStage
from colordetect.nodes.flood_fill import flood_fill, tint_painter
from colordetect.nodes.grid_scanner import mark_region, search_best_match
from colordetect.nodes.histogram import histogram, histogram_borders, stretch_contrast
from colordetect.nodes.pager import simple_pager
from colordetect.nodes.region_matcher import match_area
from colordetect.tracker import ColorTracking, Tracker
from colordetect.utils.raster import RasterBuffer, get_ref_color, load_image, save_image


def _parse_point(ctx: click.Context, param: click.Parameter, value: str | None) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        x, y = (int(part) for part in value.split(","))
    except ValueError:
        raise click.BadParameter("expected X,Y", ctx=ctx, param=param) from None
    return x, y


def _parse_color(ctx: click.Context, param: click.Parameter, value: str | None) -> Color | None:
    if value is None:
        return None
    try:
        return Color.from_hex(value)
    except ValueError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param) from None


def _fail(error: ProcessingError) -> NoReturn:
    click.echo(f"[{error.stage.value}] {error.message}", err=True)
    sys.exit(1)


def _load(path: Path) -> RasterBuffer:
    buffer = load_image(path)
    if isinstance(buffer, ProcessingError):
        _fail(buffer)
    return buffer


def _save(buffer: RasterBuffer, path: Path) -> None:
    result = save_image(buffer, path)
    if isinstance(result, ProcessingError):
        _fail(result)


def _reference_color(
    buffer: RasterBuffer,
    color: Color | None,
    pick: tuple[int, int] | None,
    radius: int,
) -> Color:
    """Explicit --color, or the block average around --pick."""
    if color is not None:
        return color
    if pick is None:
        raise click.UsageError("Provide --color or --pick")
    picked = get_ref_color(buffer, pick[0], pick[1], radius)
    if picked is None:
        _fail(
            ProcessingError(
                stage=ProcessingStage.INPUT,
                error_type="pick_out_of_bounds",
                recoverable=False,
                message=f"Cannot sample a reference color around {pick}",
                details={"x": pick[0], "y": pick[1], "radius": radius},
            )
        )
    logging.getLogger(__name__).info("Picked %s %s hsl=%s", picked, picked.to_hex(), picked.to_hsl())
    return picked


def _emit(result: BaseModel | dict[str, Any] | None, output: Path | None) -> None:
    if isinstance(result, BaseModel):
        payload: Any = result.model_dump(mode="json")
    else:
        payload = result
    text = json.dumps(payload, indent=2)
    if output:
        output.write_text(text)
    else:
        click.echo(text)


color_option = click.option(
    "--color", "color", callback=_parse_color, help="Reference color as #rrggbb"
)
pick_option = click.option(
    "--pick", callback=_parse_point, help="Sample the reference color around X,Y"
)
radius_option = click.option(
    "--radius",
    type=click.IntRange(min=1),
    default=config.DEFAULT_SAMPLE_RADIUS,
    show_default=True,
    help="Sample block radius",
)
output_option = click.option(
    "-o", "--output", type=click.Path(path_type=Path), help="Output JSON file"
)
image_argument = click.argument("image", type=click.Path(exists=True, path_type=Path))


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def main(verbose: bool) -> None:
    """Find and measure regions of a reference color in images."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@image_argument
@click.option("--at", "at", required=True, callback=_parse_point, help="Seed point X,Y")
@color_option
@pick_option
@radius_option
@output_option
def match(
    image: Path,
    at: tuple[int, int],
    color: Color | None,
    pick: tuple[int, int] | None,
    radius: int,
    output: Path | None,
) -> None:
    """Grow a region from a seed point."""
    buffer = _load(image)
    reference = _reference_color(buffer, color, pick, radius)
    region = match_area(reference, buffer, at[0], at[1], radius)
    if region is None:
        click.echo(f"No region matching {reference.to_hex()} at {at}", err=True)
        sys.exit(1)
    _emit(region, output)


@main.command()
@image_argument
@color_option
@pick_option
@radius_option
@click.option("--min-match", type=int, default=None, help="Stop at the first region this heavy")
@click.option(
    "--border", type=int, default=config.GRID_SCAN_BORDER, show_default=True, help="Edge margin"
)
@click.option(
    "--annotate", type=click.Path(path_type=Path), help="Write a copy with the region outlined"
)
@output_option
def scan(
    image: Path,
    color: Color | None,
    pick: tuple[int, int] | None,
    radius: int,
    min_match: int | None,
    border: int,
    annotate: Path | None,
    output: Path | None,
) -> None:
    """Grid-search the whole image for the best matching region."""
    buffer = _load(image)
    reference = _reference_color(buffer, color, pick, radius)
    region = search_best_match(reference, buffer, radius=radius, min_match=min_match, border=border)
    if region is None:
        click.echo(f"No region matching {reference.to_hex()}", err=True)
        sys.exit(1)
    if annotate:
        _save(mark_region(buffer, region), annotate)
    _emit(region, output)


@main.command()
@image_argument
@click.option("--color", "color", required=True, callback=_parse_color, help="Color as #rrggbb")
@click.option("--max", "max_count", type=int, default=None, help="Only report whether N were found")
def count(image: Path, color: Color, max_count: int | None) -> None:
    """Count pixels similar to a color."""
    buffer = _load(image)
    result = color.count_similars(buffer, max_count)
    if max_count is None or max_count <= 0:
        _emit({"color": color.to_hex(), "count": result}, None)
    else:
        _emit({"color": color.to_hex(), "max": max_count, "reached": result}, None)


@main.command(name="histogram")
@image_argument
@click.option("--ignore-transparent", is_flag=True, help="Skip fully transparent pixels")
@click.option("--borders", "show_borders", is_flag=True, help="Report signal bands instead")
@click.option("--threshold", type=float, default=config.HISTOGRAM_THRESHOLD, show_default=True)
@click.option("--border", type=int, default=config.HISTOGRAM_BORDER, show_default=True)
@output_option
def histogram_command(
    image: Path,
    ignore_transparent: bool,
    show_borders: bool,
    threshold: float,
    border: int,
    output: Path | None,
) -> None:
    """Channel histograms, or the detected signal band per channel."""
    buffer = _load(image)
    if show_borders:
        _emit(histogram_borders(buffer, threshold, border), output)
    else:
        _emit(histogram(buffer, ignore_transparent), output)


@main.command()
@image_argument
@click.option("-o", "--output", type=click.Path(path_type=Path), required=True, help="Output image")
@click.option("--threshold", type=float, default=config.HISTOGRAM_THRESHOLD, show_default=True)
@click.option("--border", type=int, default=config.HISTOGRAM_BORDER, show_default=True)
def stretch(image: Path, output: Path, threshold: float, border: int) -> None:
    """Stretch each channel's signal band to the full range."""
    buffer = _load(image)
    _save(stretch_contrast(buffer, threshold, border), output)


@main.command()
@image_argument
@click.option("--at", "at", required=True, callback=_parse_point, help="Seed point X,Y")
@click.option("--color", "color", required=True, callback=_parse_color, help="Fill color #rrggbb")
@click.option("--tint", type=click.FloatRange(0.0, 1.0), default=None, help="Blend instead of paint")
@click.option("-o", "--output", type=click.Path(path_type=Path), required=True, help="Output image")
def fill(image: Path, at: tuple[int, int], color: Color, tint: float | None, output: Path) -> None:
    """Flood fill from a seed point."""
    buffer = _load(image)
    if not buffer.in_bounds(*at):
        _fail(
            ProcessingError(
                stage=ProcessingStage.FILL,
                error_type="seed_out_of_bounds",
                recoverable=False,
                message=f"Seed {at} is outside the {buffer.width}x{buffer.height} image",
                details={"x": at[0], "y": at[1]},
            )
        )
    painter = tint_painter(tint) if tint is not None else None
    _save(flood_fill(buffer, at[0], at[1], color, painter=painter), output)


@main.command()
@image_argument
@click.option("--color", "color", required=True, callback=_parse_color, help="Color as #rrggbb")
@click.option("--threshold", type=int, default=config.PAGER_THRESHOLD, show_default=True)
def pager(image: Path, color: Color, threshold: int) -> None:
    """Report which edge bands of the image show the color."""
    buffer = _load(image)
    result = simple_pager(color, buffer, threshold=threshold)
    _emit({**result.model_dump(), "active": result.active}, None)


TRACKING_FUNCTIONS = {
    "count": nodes.count_similars,
    "pager": nodes.simple_pager,
    "scan": nodes.search_and_mark,
}


def _parse_colors(
    ctx: click.Context, param: click.Parameter, value: tuple[str, ...]
) -> tuple[Color, ...]:
    return tuple(_parse_color(ctx, param, v) for v in value)


@main.command()
@image_argument
@click.option(
    "--color", "colors", multiple=True, required=True, callback=_parse_colors, help="Color as #rrggbb"
)
@click.option(
    "--fn",
    "fn_name",
    type=click.Choice(sorted(TRACKING_FUNCTIONS)),
    default="pager",
    show_default=True,
    help="Tracking function run for every color",
)
@radius_option
@click.option("--min-match", type=int, default=None, help="Stop a scan at the first region this heavy")
@click.option("--threshold", type=int, default=config.PAGER_THRESHOLD, show_default=True)
def track(
    image: Path,
    colors: tuple[Color, ...],
    fn_name: str,
    radius: int,
    min_match: int | None,
    threshold: int,
) -> None:
    """Run one tracking per color over the image."""
    buffer = _load(image)
    detect_config = DetectConfig(radius=radius, min_match=min_match, pager_threshold=threshold)
    options = detect_config.tracking_options(mark=False)

    tracker = Tracker()
    for color in colors:
        tracker.add_tracking(
            ColorTracking(color, TRACKING_FUNCTIONS[fn_name], config=options), color.to_hex()
        )

    results = tracker.track(buffer)
    _emit(
        {
            ctid: result.model_dump(mode="json") if isinstance(result, BaseModel) else result
            for ctid, result in results.items()
        },
        None,
    )


if __name__ == "__main__":
    main()
