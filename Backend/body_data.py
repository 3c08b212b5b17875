"""
LiftLog Body Map Artifact
Builds the anterior/posterior body map from illustration paths and publishes it
as JSON. Publishing refuses incomplete classifications.
"""
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from body_regions import (
    BodyClassification, BodyMapError, UnresolvedRegionsError,
    ViewClassification, classify_body, extract_paths,
)
from config import settings
from models import BodyMapArtifact, BodyMapEntry


class ArtifactLockedError(BodyMapError):
    """Another generation run holds the output location."""


def load_svg_paths(source: str | Path) -> list[str]:
    """Read an SVG (or a source file embedding one) and return its path data."""
    text = Path(source).read_text(encoding="utf-8")
    paths = extract_paths(text)
    if not paths:
        raise BodyMapError(f"No path data found in {source}")
    return paths


def _entries(view: ViewClassification) -> list[BodyMapEntry]:
    return [BodyMapEntry(muscle=region.label, path=region.path) for region in view.regions]


def build_body_map(classification: BodyClassification) -> BodyMapArtifact:
    """Turn a complete classification into the publishable artifact."""
    if not classification.complete:
        raise UnresolvedRegionsError(classification.unresolved)

    return BodyMapArtifact(
        anterior=_entries(classification.anterior),
        posterior=_entries(classification.posterior),
    )


@contextmanager
def exclusive_output(output: Path):
    """Hold `<output>.lock` for the duration of a write."""
    lock_path = output.with_name(output.name + ".lock")
    try:
        fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
    except FileExistsError:
        raise ArtifactLockedError(f"{output} is being generated by another run ({lock_path} exists)")

    try:
        os.write(fd, str(os.getpid()).encode())
        os.close(fd)
        yield
    finally:
        lock_path.unlink(missing_ok=True)


def write_body_map(artifact: BodyMapArtifact, output: str | Path) -> Path:
    """Atomically replace `output` with the artifact's JSON."""
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)

    with exclusive_output(output):
        fd, tmp_name = tempfile.mkstemp(dir=output.parent, prefix=output.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(artifact.model_dump_json(indent=2))
            os.replace(tmp_name, output)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    return output


def load_body_map(path: str | Path) -> BodyMapArtifact:
    return BodyMapArtifact.model_validate_json(Path(path).read_text(encoding="utf-8"))


def generate_body_data(
        source: Optional[str | Path] = None,
        output: Optional[str | Path] = None,
        split_x: Optional[float] = None,
        y_axis_up: Optional[bool] = None,
) -> BodyMapArtifact:
    """
    Full offline pipeline: read paths, classify both views, publish.
    Nothing is written when any path is unresolved.
    """
    source = source or settings.BODY_SVG_INPUT
    output = output or settings.BODY_DATA_OUTPUT

    paths = load_svg_paths(source)
    print(f"[BodyMap] Found {len(paths)} paths in {source}")

    classification = classify_body(paths, split_x=split_x, y_axis_up=y_axis_up)
    for view in (classification.anterior, classification.posterior):
        for applied in view.corrections:
            print(f"[BodyMap] {view.view} path {applied.index}: {applied.from_label} -> "
                  f"{applied.to_label} ({applied.description})")

    artifact = build_body_map(classification)
    write_body_map(artifact, output)
    print(f"[BodyMap] Wrote {len(artifact.anterior)} anterior / "
          f"{len(artifact.posterior)} posterior regions to {output}")
    return artifact
