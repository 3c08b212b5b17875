# analyze_svg.py
"""
Survey an illustration before (re)calibrating the zone tables: prints
centroid bounds and a coarse head/chest/abs/legs/arm grouping per view,
plus every path that falls outside all coarse zones.

Usage:
    python scripts/analyze_svg.py data/body.svg
    python scripts/analyze_svg.py data/body.svg --whole
"""
import sys
from pathlib import Path

# Add Backend directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import settings
from body_data import load_svg_paths
from body_regions import BodyMapError, Bounds, compute_centroid, split_views, survey_paths


def report(title: str, paths: list[str], indices: list[int], y_axis_up: bool):
    print(f"\n--- {title} ({len(paths)} paths) ---")
    if not paths:
        return

    centroids = [compute_centroid(d) for d in paths]
    try:
        bounds = Bounds.from_centroids(centroids)
        print(f"Bounds: X[{bounds.min_x:.0f}-{bounds.max_x:.0f}], Y[{bounds.min_y:.0f}-{bounds.max_y:.0f}]")
    except BodyMapError as e:
        print(f"Bounds: {e}")

    survey = survey_paths(paths, y_axis_up=y_axis_up)
    for label, members in survey.groups().items():
        print(f"  {label:10} {[indices[i] for i in members]}")

    for item in survey.unresolved:
        nx, ny = item.normalized
        print(f"  Unclassified: ID {indices[item.index]} at {nx:.2f}, {ny:.2f} ({item.reason})")


def main():
    """Run the survey."""
    import argparse

    parser = argparse.ArgumentParser(description="Survey SVG path positions for zone calibration")
    parser.add_argument("source", nargs="?", default=settings.BODY_SVG_INPUT)
    parser.add_argument("--split-x", type=float, default=settings.BODY_SPLIT_X)
    parser.add_argument("--whole", action="store_true", help="Survey all paths as a single view")
    parser.add_argument("--y-down", action="store_true", help="Source Y axis grows downward")

    args = parser.parse_args()
    y_axis_up = not args.y_down

    try:
        paths = load_svg_paths(args.source)
    except (OSError, BodyMapError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Found {len(paths)} paths.")

    if args.whole:
        report("ALL", paths, list(range(len(paths))), y_axis_up)
        return

    front, back = split_views(paths, args.split_x)
    report("ANTERIOR", [paths[i] for i in front], front, y_axis_up)
    report("POSTERIOR", [paths[i] for i in back], back, y_axis_up)


if __name__ == "__main__":
    main()
