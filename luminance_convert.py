#!/usr/bin/env python3
"""
luminance_convert.py
Recolour images by luminance tier: every pixel is replaced with the colour of
the tier its luminance falls in.

Usage:
  python luminance_convert.py --in INPUT [--out OUTPUT] -t 0,50 -c 000000,FFFFFF
  python luminance_convert.py --in FOLDER [--outdir DIR] --jobs N

Tiers:
  -t takes comma-separated upper bounds in percent (0..100), -c one hex colour
  per bound. Tier i covers (t[i], t[i+1]]; a final tier up to 100 reuses the
  last colour. Pure black (luminance 0) always takes the first colour.

Input:
  Any Pillow-readable image. Alpha is ignored.

Output:
  JPEG at quality 100 by default. If --out is omitted, writes
  <stem>_luminance.jpg next to INPUT. The suffix of --out picks the format.

Exit status:
  0 ok, 2 bad configuration or usage, 1 read/write or mapping failure.
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from luminance_map.config import ConverterSettings
from luminance_map.constants import DEFAULT_JOBS, INPUT_EXTS, OUTPUT_SUFFIX
from luminance_map.core_types import RGBTuple, rgb_to_hex
from luminance_map.errors import ConfigError, ImageIOError, LuminanceOutOfRangeError
from luminance_map.image_io import default_output_path, load_image_rgb, save_image_rgb
from luminance_map.luminance import luminance_grid
from luminance_map.mapper import map_image, tier_usage
from luminance_map.tier_table import TierTable
from luminance_map.utils import (
    # formatting
    format_percentage,
    format_seconds_compact,
    format_total_duration_compact,
    # pretty logging
    debug_log,
    enable_line_buffered_stdout,
    error,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)

# CLI args


def parse_cli_args(
    argv: Optional[Sequence[str]], settings: ConverterSettings
) -> argparse.Namespace:
    """
    Parse CLI arguments for luminance recolouring.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        out: optional output file (single-file mode)
        outdir: optional output directory
        thresholds / colours: tier configuration strings
        quality: JPEG quality
        jobs: parallel file workers
        workers: row-band threads per image
        debug: bool for verbose tier details
    """
    parser = argparse.ArgumentParser(
        prog="luminance-converter",
        description="Convert an image's pixels by their luminance.",
    )
    parser.add_argument(
        "--in",
        dest="src",
        type=Path,
        required=True,
        help="Image to convert, or a folder of images",
    )
    parser.add_argument(
        "--out", type=Path, default=None, help="Filename for the converted image"
    )
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "-t",
        "--thresholds",
        default=settings.thresholds,
        help="Comma-separated thresholds for each percent tier of luminance.",
    )
    parser.add_argument(
        "-c",
        "--colours",
        "--colors",
        dest="colours",
        default=settings.colours,
        help="Comma-separated hex values for the colour each tier is converted to.",
    )
    parser.add_argument(
        "--quality", type=int, default=settings.jpeg_quality, help="JPEG quality 1..100"
    )
    parser.add_argument(
        "--jobs", type=int, default=DEFAULT_JOBS, help="Files processed in parallel"
    )
    parser.add_argument(
        "--workers", type=int, default=settings.workers, help="Row-band threads per image"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose tier details")
    return parser.parse_args(argv)


# Per-file processing


@dataclass
class FileResult:
    """What one conversion produced; printed by the main thread."""

    src: Path
    dst: Path
    width: int
    height: int
    usage: List[Tuple[int, RGBTuple, int]]
    lum_range: Optional[Tuple[float, float]]
    t_load: float
    t_map: float
    t_save: float


def convert_file(
    src_path: Path,
    out_path: Path,
    table: TierTable,
    settings: ConverterSettings,
    debug: bool = False,
) -> FileResult:
    """
    Convert a single image end-to-end:
      load -> luminance -> tier lookup -> save.
    Nothing is written if loading or mapping fails.
    """
    t0 = time.perf_counter()
    rgb = load_image_rgb(src_path)
    t1 = time.perf_counter()

    mapped, idx = map_image(rgb, table, workers=settings.workers)
    t2 = time.perf_counter()

    save_image_rgb(out_path, mapped, quality=settings.jpeg_quality)
    t3 = time.perf_counter()

    lum_range: Optional[Tuple[float, float]] = None
    if debug and rgb.size:
        lum = luminance_grid(rgb)
        lum_range = (float(lum.min()), float(lum.max()))

    height, width = int(rgb.shape[0]), int(rgb.shape[1])
    return FileResult(
        src=src_path,
        dst=out_path,
        width=width,
        height=height,
        usage=tier_usage(idx, table),
        lum_range=lum_range,
        t_load=t1 - t0,
        t_map=t2 - t1,
        t_save=t3 - t2,
    )


def report_file(result: FileResult, debug: bool) -> None:
    """Print the per-file summary."""
    total_pixels = result.width * result.height
    log(f"Wrote {result.dst.name} | size={result.width}x{result.height}")
    log("Tiers used:")
    for i, rgb, count in result.usage:
        share = count / total_pixels if total_pixels else 0.0
        log(f"  tier {i}  {rgb_to_hex(rgb)}: {count:,} ({format_percentage(share)})")
    log(f"Total pixels: {total_pixels:,}")

    if debug:
        if result.lum_range is not None:
            debug_log(
                key_value_pairs_to_string(
                    [
                        ("Luminance min", result.lum_range[0]),
                        ("Luminance max", result.lum_range[1]),
                    ]
                )
            )
        if result.t_map > 0:
            rate_mpx_s = (total_pixels / result.t_map) / 1e6
            debug_log(
                f"throughput {rate_mpx_s:.2f} MPx/s  "
                f"({total_pixels / 1e6:.2f} MPx in {format_seconds_compact(result.t_map)})"
            )
        debug_log(
            f"load={format_seconds_compact(result.t_load)}, "
            f"map={format_seconds_compact(result.t_map)}, "
            f"save={format_seconds_compact(result.t_save)}"
        )
    total = result.t_load + result.t_map + result.t_save
    log(f"Total time {format_total_duration_compact(total)}")


def _list_folder_images(folder: Path) -> List[Path]:
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in INPUT_EXTS
        and not p.stem.endswith(OUTPUT_SUFFIX)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


def _log_tier_table(table: TierTable, debug: bool) -> None:
    if debug:
        debug_log(f"tiers ({table.tier_count}):")
        for line in table.describe():
            debug_log(f"  {line}")
    for after, up_to in table.coverage_gaps():
        warn(
            f"no tier covers luminance in ({after:g}, {up_to:g}]; "
            f"such pixels will fail the conversion"
        )


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while keeping the per-file output in name order.
    """
    enable_line_buffered_stdout()
    try:
        settings = ConverterSettings.from_env()
    except ConfigError as e:
        error(str(e))
        return 2
    args = parse_cli_args(argv, settings)

    try:
        settings = settings.with_overrides(
            thresholds=args.thresholds,
            colours=args.colours,
            jpeg_quality=args.quality,
            workers=args.workers,
        )
        table = settings.build_tier_table()
    except ConfigError as e:
        error(str(e))
        return 2

    print_config_line(
        "run",
        [
            ("CPU cores", os.cpu_count() or 1),
            ("Workers", settings.workers),
            ("Jobs", args.jobs),
            ("Tiers", table.tier_count),
        ],
        debug=False,
    )
    _log_tier_table(table, args.debug)

    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    if src.is_dir():
        if args.out is not None:
            error("--out takes a single file; use --outdir with a folder")
            return 2
        files = _list_folder_images(src)
        if args.debug:
            debug_log(key_value_pairs_to_string([("Images", len(files)), ("Jobs", args.jobs)]))
    else:
        files = [src]

    def dst_for(p: Path) -> Path:
        if args.out is not None:
            return args.out
        return default_output_path(p, args.outdir)

    failures = 0
    if args.jobs <= 1 or len(files) <= 1:
        for p in files:
            print_banner(p.name)
            try:
                report_file(convert_file(p, dst_for(p), table, settings, args.debug), args.debug)
            except (ImageIOError, LuminanceOutOfRangeError) as e:
                error(str(e))
                failures += 1
    else:
        with ThreadPoolExecutor(max_workers=args.jobs) as ex:
            futures = [
                (p, ex.submit(convert_file, p, dst_for(p), table, settings, args.debug))
                for p in files
            ]
            for p, fut in futures:
                print_banner(p.name)
                try:
                    report_file(fut.result(), args.debug)
                except (ImageIOError, LuminanceOutOfRangeError) as e:
                    error(str(e))
                    failures += 1

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
