"""Command-line interface for bitdither.

Headless only: convert one image, render every algorithm into a folder,
or list the available algorithms. `--json` switches to structured output
for scripting.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from bitdither.core.options import ALGORITHM_DESCRIPTIONS, Algorithm, DitherOptions

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def _add_dither_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--serpentine",
        action="store_true",
        help="Alternate scan direction on odd rows (error diffusion only).",
    )
    parser.add_argument(
        "--matrix-size",
        type=int,
        default=8,
        help="Even-toned screening matrix size (default: 8).",
    )
    parser.add_argument(
        "--levels",
        type=int,
        default=2,
        help="Even-better screening output levels (default: 2).",
    )
    parser.add_argument(
        "--tm-size",
        type=int,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        default=(256, 256),
        help="Generated threshold modulation matrix size (default: 256 256).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random, ditherpunk and even-better algorithms.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error (with --json).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bitdither",
        description="Convert images to 1-bit black and white with a choice of dithering algorithms.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- convert subcommand ---
    convert = subparsers.add_parser(
        "convert",
        help="Dither a single image.",
    )
    convert.add_argument("input", help="Input image file path.")
    convert.add_argument(
        "-o", "--output",
        help="Output file path. Defaults to <input>_<algorithm>.png.",
    )
    convert.add_argument(
        "-a", "--algorithm",
        choices=[a.value for a in Algorithm if a != Algorithm.CUSTOM],
        default=Algorithm.FLOYD_STEINBERG.value,
        help="Dithering algorithm (default: floyd-steinberg).",
    )
    _add_dither_options(convert)

    # --- gallery subcommand ---
    gallery = subparsers.add_parser(
        "gallery",
        help="Render an image with every algorithm.",
    )
    gallery.add_argument("input", help="Input image file path.")
    gallery.add_argument(
        "-o", "--output-dir",
        default="gallery",
        help="Directory for the rendered images (default: ./gallery).",
    )
    _add_dither_options(gallery)

    # --- list subcommand ---
    subparsers.add_parser("list", help="List available algorithms.")

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _auto_output_path(input_path: Path, algorithm: Algorithm) -> Path:
    """Generate default output path from input."""
    return input_path.parent / f"{input_path.stem}_{algorithm.value}.png"


def _json_error(message: str, code: str) -> None:
    """Print JSON error to stderr and exit with code 1."""
    err = {"status": "error", "error": message, "code": code}
    print(json.dumps(err), file=sys.stderr)
    sys.exit(1)


def _fail(args: argparse.Namespace, message: str, code: str) -> None:
    if args.json:
        if args.debug:
            import traceback
            traceback.print_exc(file=sys.stderr)
        _json_error(message, code)
    console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


def _options_from_args(args: argparse.Namespace) -> DitherOptions:
    tm_width, tm_height = args.tm_size
    return DitherOptions(
        serpentine=args.serpentine,
        matrix_size=args.matrix_size,
        levels=args.levels,
        tm_width=tm_width,
        tm_height=tm_height,
        seed=args.seed,
    )


def _options_summary(options: DitherOptions) -> dict:
    return {
        "serpentine": options.serpentine,
        "matrix_size": options.matrix_size,
        "levels": options.levels,
        "tm_size": [options.tm_width, options.tm_height],
        "seed": options.seed,
    }


def _run_convert(args: argparse.Namespace) -> None:
    """Dither one file and save the result."""
    from bitdither.core.engine import dither
    from bitdither.core.errors import DitherError
    from bitdither.core.reader import load_bitmap
    from bitdither.core.writer import save_bitmap

    input_path = Path(args.input).resolve()
    algorithm = Algorithm.parse(args.algorithm)
    options = _options_from_args(args)

    try:
        bitmap = load_bitmap(input_path)
    except FileNotFoundError as e:
        _fail(args, str(e), "FILE_NOT_FOUND")
    except (ValueError, OSError) as e:
        _fail(args, str(e), "INVALID_INPUT")

    if args.output:
        output_path = Path(args.output).resolve()
    else:
        output_path = _auto_output_path(input_path, algorithm)

    try:
        dither(bitmap, algorithm, options)
    except DitherError as e:
        _fail(args, str(e), "INVALID_OPTIONS")

    try:
        save_bitmap(bitmap, output_path)
    except (ValueError, OSError) as e:
        _fail(args, str(e), "WRITE_FAILED")

    if not args.json:
        console.print(f"Saved to {output_path}")
        return

    result = {
        "status": "success",
        "input": str(input_path),
        "output": str(output_path),
        "algorithm": algorithm.value,
        "options": _options_summary(options),
        "metadata": {
            "width": bitmap.width,
            "height": bitmap.height,
        },
    }
    print(json.dumps(result, indent=2))


def _run_gallery(args: argparse.Namespace) -> None:
    """Render every algorithm into the output directory."""
    from bitdither.core.gallery import render_gallery

    input_path = Path(args.input).resolve()
    output_dir = Path(args.output_dir).resolve()
    options = _options_from_args(args)

    def on_progress(current: int, total: int) -> None:
        if not args.json:
            console.print(f"Rendered {current}/{total}", end="\r")

    try:
        gallery = render_gallery(input_path, output_dir, options, on_progress)
    except FileNotFoundError as e:
        _fail(args, str(e), "FILE_NOT_FOUND")
    except (ValueError, OSError) as e:
        _fail(args, str(e), "INVALID_INPUT")

    if not args.json:
        console.print(f"\nSaved {len(gallery.written)} images to {output_dir}")
        for algorithm, message in gallery.failed.items():
            console.print(f"[yellow]Skipped {algorithm.value}:[/yellow] {message}")
        return

    result = {
        "status": "partial" if gallery.failed else "success",
        "input": str(input_path),
        "output_dir": str(output_dir),
        "options": _options_summary(options),
        "outputs": {a.value: str(p) for a, p in gallery.written.items()},
        "failed": {a.value: message for a, message in gallery.failed.items()},
    }
    print(json.dumps(result, indent=2))


def _run_list() -> None:
    table = Table(title="Dithering algorithms")
    table.add_column("Name", style="bold")
    table.add_column("Family")
    table.add_column("Description")
    for algorithm in Algorithm:
        if algorithm == Algorithm.CUSTOM:
            continue
        table.add_row(
            algorithm.value, algorithm.family, ALGORITHM_DESCRIPTIONS[algorithm]
        )
    Console().print(table)


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Routing:
      bitdither convert <file> [opts]  → dither one image
      bitdither gallery <file> [opts]  → render every algorithm
      bitdither list                   → algorithm table
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "list":
        _run_list()
        return

    _configure_logging(args.verbose)
    if args.command == "convert":
        _run_convert(args)
    else:
        _run_gallery(args)
