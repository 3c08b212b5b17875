# generate_body_data.py
"""
Classify the body illustration's paths into muscle regions and publish the
anterior/posterior body map consumed by the heatmap.

Fails (exit code 1, nothing written) when any path cannot be classified.

Usage:
    python scripts/generate_body_data.py data/body.svg -o data/body_data.json
"""
import sys
from pathlib import Path

# Add Backend directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import settings
from body_data import generate_body_data
from body_regions import BodyMapError, UnresolvedRegionsError


def main():
    """Generate the body map artifact."""
    import argparse

    parser = argparse.ArgumentParser(description="Generate the LiftLog body map from an SVG illustration")
    parser.add_argument("source", nargs="?", default=settings.BODY_SVG_INPUT, help="SVG or file embedding one")
    parser.add_argument("-o", "--output", default=settings.BODY_DATA_OUTPUT, help="Output JSON path")
    parser.add_argument("--split-x", type=float, default=settings.BODY_SPLIT_X,
                        help="X coordinate separating anterior and posterior views")
    parser.add_argument("--y-down", action="store_true",
                        help="Source Y axis grows downward (plain SVG without a flipping transform)")

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("BODY MAP GENERATION")
    print("=" * 60 + "\n")

    try:
        artifact = generate_body_data(
            source=args.source,
            output=args.output,
            split_x=args.split_x,
            y_axis_up=not args.y_down,
        )
    except UnresolvedRegionsError as e:
        print(f"\n❌ Body map NOT written: {len(e.unresolved)} path(s) need manual review")
        for item in e.unresolved:
            print(f"   - {item}")
        sys.exit(1)
    except BodyMapError as e:
        print(f"\n❌ {e}")
        sys.exit(1)

    counts: dict[str, int] = {}
    for entry in artifact.anterior + artifact.posterior:
        counts[entry.muscle] = counts.get(entry.muscle, 0) + 1

    print("\nRegions per label:")
    for label, count in sorted(counts.items()):
        print(f"  {label:20} {count}")

    print("\n✅ Body map generated")


if __name__ == "__main__":
    main()
