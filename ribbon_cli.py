#!/usr/bin/env python3
"""
Command-line ribbon export.

Usage:
    python ribbon_cli.py <input path> <output> [options]

Input formats:
    .json   [[x, y], [x, y, z], ...] or {"points": [...], "closed": true}
    .csv    one "x,y" or "x,y,z" per line, '#' starts a comment

Output format is chosen by suffix: .obj, .stl or .json

Options:
    --width         Offset on each side of the centerline
    --closed        Treat the path as a loop (no start/end outline edges)
    --slice-angle   Cap fan slice in degrees (default: 10)
    --quality       Slice angle preset: coarse, standard, fine
    --config        Config JSON (default: <input>.ribbon_config.json)

Example:
    python ribbon_cli.py track.csv track.obj --width 0.5
"""

import sys
import os
import argparse
import csv
import json
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import RibbonConfig, SLICE_ANGLE_PRESETS
from geometry import RibbonError
from mesh import Mesh
from ribbon import build_ribbon


OUTPUT_FORMATS = ('.obj', '.stl', '.json')


def load_path(filepath: Path | str) -> tuple[list[list[float]], bool | None]:
    """
    Load a polyline from a JSON or CSV file.

    Args:
        filepath: Path file (.json or .csv)

    Returns:
        Tuple of (points, closed). closed is None when the file doesn't say.

    Raises:
        FileNotFoundError: if the file doesn't exist
        ValueError: if the file can't be parsed
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    suffix = filepath.suffix.lower()
    if suffix == '.json':
        with open(filepath, 'r') as f:
            data = json.load(f)
        if isinstance(data, dict):
            if "points" not in data:
                raise ValueError(f"{filepath}: JSON object has no 'points' key")
            return data["points"], data.get("closed")
        return data, None

    if suffix == '.csv':
        points = []
        with open(filepath, 'r', newline='') as f:
            for line_no, row in enumerate(csv.reader(f), start=1):
                if not row or row[0].strip().startswith('#'):
                    continue
                try:
                    points.append([float(c) for c in row if c.strip()])
                except ValueError:
                    raise ValueError(f"{filepath}:{line_no}: bad coordinate in {row}")
        return points, None

    raise ValueError(f"Unsupported path format '{suffix}' (expected .json or .csv)")


def export_ribbon(ribbon, output: Path | str, weld_tolerance: float = 1e-9) -> Mesh:
    """Write a ribbon to OBJ, STL or JSON depending on the output suffix."""
    output = Path(output)
    suffix = output.suffix.lower()
    if suffix not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format '{suffix}' (expected {', '.join(OUTPUT_FORMATS)})")

    mesh = Mesh.from_ribbon(ribbon, weld_tolerance=weld_tolerance)
    if suffix == '.obj':
        mesh.to_obj(str(output))
    elif suffix == '.stl':
        mesh.to_stl(str(output))
    else:
        mesh.to_json(str(output))
    return mesh


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Build a constant-width ribbon mesh along a polyline',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s path.json ribbon.obj --width 0.5
  %(prog)s loop.csv ribbon.stl --closed --quality fine
  %(prog)s path.json ribbon.json --config settings.json
        """
    )
    parser.add_argument('input', help='Input path file (.json or .csv)')
    parser.add_argument('output', help='Output mesh file (.obj, .stl or .json)')
    parser.add_argument('--width', type=float, default=None,
                        help='Offset on each side of the centerline')
    parser.add_argument('--closed', action='store_true', default=None,
                        help='Treat the path as a closed loop')
    parser.add_argument('--slice-angle', type=float, default=None,
                        help='Cap fan slice in degrees (default: 10)')
    parser.add_argument('--quality', choices=sorted(SLICE_ANGLE_PRESETS),
                        help='Slice angle preset')
    parser.add_argument('--config', default=None,
                        help='Config JSON (default: <input>.ribbon_config.json)')
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not os.path.exists(args.input):
        print(f"ERROR: Input file not found: {args.input}")
        return 1

    try:
        if args.config:
            config = RibbonConfig.load(args.config)
        else:
            config = RibbonConfig.load_for_path(args.input)

        print(f"Loading path: {args.input}")
        points, file_closed = load_path(args.input)
        print(f"Path: {len(points)} point(s)")

        # Command line overrides file settings, which override config
        if file_closed is not None:
            config.closed = file_closed
        if args.width is not None:
            config.width = args.width
        if args.closed:
            config.closed = True
        if args.quality:
            config.slice_angle = SLICE_ANGLE_PRESETS[args.quality]
        if args.slice_angle is not None:
            config.slice_angle = args.slice_angle

        errors = config.validate()
        if errors:
            for error in errors:
                print(f"ERROR: {error}")
            return 1

        print(f"Options: width={config.width}, closed={config.closed}, slice_angle={config.slice_angle}")

        print("Generating ribbon...")
        ribbon = build_ribbon(points, config.to_options())
        print(f"Ribbon: {len(ribbon.rectangles)} rectangle(s), {len(ribbon.stubs)} stub(s), "
              f"{len(ribbon.fans)} cap(s), {len(ribbon.triangles)} triangles")

        print(f"Exporting: {args.output}")
        mesh = export_ribbon(ribbon, args.output, weld_tolerance=config.weld_tolerance)

        file_size = os.path.getsize(args.output)
        print(f"SUCCESS: {len(mesh.vertices)} vertices, {len(mesh.faces)} faces "
              f"written to {args.output} ({file_size:,} bytes)")

    except (RibbonError, ValueError, OSError) as e:
        print(f"ERROR: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
