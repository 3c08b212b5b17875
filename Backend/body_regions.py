"""
LiftLog Body Region Classifier
Partitions anatomical illustration paths into muscle regions by position.

Each path is reduced to the centroid of its explicit move-to/line-to anchor
points. Centroids are normalized against the bounds of their view and run
through an ordered zone table (first matching rule wins). A separate ordered
list of corrections may then relabel boundary cases. Paths that match no rule
stay "unknown" and are reported, never guessed.
"""
import re
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Optional, Sequence

import numpy as np

from config import settings
from models import BodyView, MuscleType, UNKNOWN_REGION


CENTROID_DECIMALS = 3


class BodyMapError(Exception):
    """Body map generation failed."""


class UnresolvedRegionsError(BodyMapError):
    """Some paths could not be classified; the body map must not be published."""

    def __init__(self, unresolved: Sequence["UnresolvedPath"]):
        self.unresolved = list(unresolved)
        lines = "\n".join(f"  {item}" for item in self.unresolved)
        super().__init__(f"{len(self.unresolved)} unresolved path(s):\n{lines}")


# ============================================================
# Path Geometry
# ============================================================

_PATH_ATTR_RE = re.compile(r'(?<![\w-])d="([^"]*)"')
_TOKEN_RE = re.compile(r"[MmLlHhVvCcSsQqTtAaZz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

# Number of parameters per command and the offset of its end point
_PARAMS = {"m": 2, "l": 2, "h": 1, "v": 1, "c": 6, "s": 4, "q": 4, "t": 2, "a": 7, "z": 0}
_END_POINT = {"c": 4, "s": 2, "q": 2, "t": 0, "a": 5}


def extract_paths(svg_text: str) -> list[str]:
    """Pull every `d="..."` path attribute out of SVG (or SVG-embedding) text."""
    return _PATH_ATTR_RE.findall(svg_text)


def parse_anchor_points(d: str) -> list[tuple[float, float]]:
    """
    Explicit on-path anchor points of an SVG path: every move-to and line-to
    (M, L, H, V, absolute or relative, including implicit line-tos after a
    move-to). Curves and arcs advance the current point but contribute none.
    """
    points: list[tuple[float, float]] = []
    x = y = 0.0
    start_x = start_y = 0.0
    command = None
    params: list[float] = []

    def flush(cmd: str, args: list[float], first: bool) -> None:
        nonlocal x, y, start_x, start_y
        op = cmd.lower()
        relative = cmd.islower()

        if op in ("m", "l"):
            px, py = args
            if relative:
                px, py = x + px, y + py
            x, y = px, py
            if op == "m" and first:
                start_x, start_y = x, y
            points.append((x, y))
        elif op == "h":
            x = x + args[0] if relative else args[0]
            points.append((x, y))
        elif op == "v":
            y = y + args[0] if relative else args[0]
            points.append((x, y))
        else:
            offset = _END_POINT[op]
            ex, ey = args[offset], args[offset + 1]
            if relative:
                ex, ey = x + ex, y + ey
            x, y = ex, ey

    first_group = True
    for token in _TOKEN_RE.findall(d):
        if token.isalpha():
            command = token
            params = []
            first_group = True
            if command in "Zz":
                x, y = start_x, start_y
            continue
        if command is None or command in "Zz":
            continue

        params.append(float(token))
        if len(params) == _PARAMS[command.lower()]:
            flush(command, params, first_group)
            params = []
            first_group = False
            if command == "M":
                command = "L"
            elif command == "m":
                command = "l"

    return points


@dataclass(frozen=True)
class Centroid:
    x: float
    y: float
    anchors: int

    @property
    def valid(self) -> bool:
        return self.anchors > 0


def compute_centroid(d: str) -> Centroid:
    """Average of a path's anchor points; (0, 0) with no anchors."""
    points = parse_anchor_points(d)
    if not points:
        return Centroid(0.0, 0.0, 0)

    mean = np.asarray(points, dtype=float).mean(axis=0)
    return Centroid(
        x=round(float(mean[0]), CENTROID_DECIMALS),
        y=round(float(mean[1]), CENTROID_DECIMALS),
        anchors=len(points),
    )


@dataclass(frozen=True)
class Bounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @classmethod
    def from_centroids(cls, centroids: Iterable[Centroid]) -> "Bounds":
        coords = np.asarray([(c.x, c.y) for c in centroids if c.valid], dtype=float)
        if coords.size == 0:
            raise BodyMapError("Cannot compute bounds without any anchored path")
        mins = coords.min(axis=0)
        maxs = coords.max(axis=0)
        return cls(float(mins[0]), float(maxs[0]), float(mins[1]), float(maxs[1]))


def normalize(centroid: Centroid, bounds: Bounds, y_axis_up: bool = True) -> tuple[float, float]:
    """
    Map a centroid into the view's frame: nX in [-1, 1] around the horizontal
    center, nY in [0, 1] with 1 at the top of the illustration.
    """
    width = bounds.max_x - bounds.min_x
    height = bounds.max_y - bounds.min_y
    center_x = (bounds.min_x + bounds.max_x) / 2

    nx = (centroid.x - center_x) / width * 2 if width else 0.0
    if not height:
        ny = 0.0
    elif y_axis_up:
        ny = (centroid.y - bounds.min_y) / height
    else:
        ny = (bounds.max_y - centroid.y) / height
    return nx, ny


# ============================================================
# Zone Rules
# ============================================================

@dataclass(frozen=True)
class ZoneRule:
    """
    A positional band. Vertical limits: nY > min_y and nY <= max_y.
    Horizontal limits: |nX| < max_abs_x and |nX| > min_abs_x.
    `side` restricts to the viewer's left (-1) or right (+1) half.
    """
    label: str
    min_y: Optional[float] = None
    max_y: Optional[float] = None
    max_abs_x: Optional[float] = None
    min_abs_x: Optional[float] = None
    side: int = 0

    def matches(self, nx: float, ny: float) -> bool:
        if self.min_y is not None and not ny > self.min_y:
            return False
        if self.max_y is not None and not ny <= self.max_y:
            return False
        if self.max_abs_x is not None and not abs(nx) < self.max_abs_x:
            return False
        if self.min_abs_x is not None and not abs(nx) > self.min_abs_x:
            return False
        if self.side and nx * self.side <= 0:
            return False
        return True


def classify_zone(nx: float, ny: float, rules: Sequence[ZoneRule]) -> str:
    for rule in rules:
        if rule.matches(nx, ny):
            return rule.label
    return UNKNOWN_REGION


# Coarse survey of a single view, used to calibrate the per-view tables
COARSE_ZONES: tuple[ZoneRule, ...] = (
    ZoneRule("head", min_y=0.85),
    ZoneRule("chest", min_y=0.6, max_y=0.85, max_abs_x=0.3),
    ZoneRule("abs", min_y=0.4, max_y=0.6, max_abs_x=0.3),
    ZoneRule("legs", max_y=0.45, max_abs_x=0.4),
    ZoneRule("left-arm", min_y=0.4, min_abs_x=0.3, side=-1),
    ZoneRule("right-arm", min_y=0.4, min_abs_x=0.3, side=1),
)

# Thresholds are converted from the absolute cut points of the reference
# body illustration. They are dataset-specific; recalibrate them with
# scripts/analyze_svg.py for each new source.
ANTERIOR_ZONES: tuple[ZoneRule, ...] = (
    ZoneRule(MuscleType.HEAD.value, min_y=0.88),
    ZoneRule(MuscleType.NECK.value, min_y=0.83, max_abs_x=0.12),
    ZoneRule(MuscleType.SIDE_DELT.value, min_y=0.72, min_abs_x=0.42),
    ZoneRule(MuscleType.FRONT_DELT.value, min_y=0.72, min_abs_x=0.33),
    ZoneRule(MuscleType.UPPER_CHEST.value, min_y=0.79),
    ZoneRule(MuscleType.MID_CHEST.value, min_y=0.75),
    ZoneRule(MuscleType.LOWER_CHEST.value, min_y=0.72),
    ZoneRule(MuscleType.BICEP_LONG_HEAD.value, min_y=0.58, min_abs_x=0.45),
    ZoneRule(MuscleType.BICEP_SHORT_HEAD.value, min_y=0.58, min_abs_x=0.33),
    ZoneRule(MuscleType.BRACHIALIS.value, min_y=0.52, min_abs_x=0.45),
    ZoneRule(MuscleType.FOREARM.value, min_y=0.41, min_abs_x=0.48),
    ZoneRule(MuscleType.OBLIQUES.value, min_y=0.41, max_y=0.66, min_abs_x=0.2),
    ZoneRule(MuscleType.UPPER_ABS.value, min_y=0.52),
    ZoneRule(MuscleType.LOWER_ABS.value, min_y=0.41),
    ZoneRule(MuscleType.ADDUCTOR.value, min_y=0.22, max_abs_x=0.08),
    ZoneRule(MuscleType.QUADRICEPS.value, min_y=0.22, max_abs_x=0.5),
    ZoneRule(MuscleType.KNEES.value, min_y=0.17, max_abs_x=0.5),
    ZoneRule(MuscleType.CALVES.value, max_abs_x=0.5),
)

POSTERIOR_ZONES: tuple[ZoneRule, ...] = (
    ZoneRule(MuscleType.HEAD.value, min_y=0.9, max_abs_x=0.12),
    ZoneRule(MuscleType.NECK.value, min_y=0.86, max_abs_x=0.12),
    ZoneRule(MuscleType.TRAPEZIUS.value, min_y=0.84),
    ZoneRule(MuscleType.REAR_DELT.value, min_y=0.68, min_abs_x=0.42),
    ZoneRule(MuscleType.UPPER_BACK.value, min_y=0.68),
    ZoneRule(MuscleType.TRICEP_LONG_HEAD.value, min_y=0.54, min_abs_x=0.65),
    ZoneRule(MuscleType.TRICEP_SHORT_HEAD.value, min_y=0.54, min_abs_x=0.58),
    ZoneRule(MuscleType.LATS.value, min_y=0.54, min_abs_x=0.2),
    ZoneRule(MuscleType.LOWER_BACK.value, min_y=0.54),
    ZoneRule(MuscleType.FOREARM.value, min_y=0.43, min_abs_x=0.58),
    ZoneRule(MuscleType.GLUTEAL.value, min_y=0.43),
    ZoneRule(MuscleType.HAMSTRING.value, min_y=0.19, max_abs_x=0.58),
    ZoneRule(MuscleType.CALVES.value, max_abs_x=0.58),
)


# ============================================================
# Classification
# ============================================================

@dataclass(frozen=True)
class ClassifiedRegion:
    index: int
    label: str
    path: str
    centroid: Centroid
    normalized: tuple[float, float]

    @property
    def resolved(self) -> bool:
        return self.label != UNKNOWN_REGION


@dataclass(frozen=True)
class UnresolvedPath:
    index: int
    normalized: tuple[float, float]
    reason: str = "no matching zone"

    def __str__(self) -> str:
        nx, ny = self.normalized
        return f"unresolved path at index {self.index}, normalized position ({nx:.2f}, {ny:.2f}): {self.reason}"


@dataclass(frozen=True)
class Correction:
    """Relabels `from_label` regions satisfying `predicate`, after the primary pass."""
    description: str
    from_label: str
    to_label: str
    predicate: Callable[[ClassifiedRegion], bool]


@dataclass(frozen=True)
class AppliedCorrection:
    index: int
    from_label: str
    to_label: str
    description: str


POSTERIOR_CORRECTIONS: tuple[Correction, ...] = (
    Correction(
        "upper back below the scapula line is lats",
        MuscleType.UPPER_BACK.value,
        MuscleType.LATS.value,
        lambda region: region.normalized[1] <= 0.72,
    ),
)


@dataclass
class ViewClassification:
    view: str
    regions: list[ClassifiedRegion] = field(default_factory=list)
    corrections: list[AppliedCorrection] = field(default_factory=list)
    unanchored: frozenset = frozenset()

    @property
    def unresolved(self) -> list[UnresolvedPath]:
        return [
            UnresolvedPath(
                index=r.index,
                normalized=r.normalized,
                reason="no anchor points" if r.index in self.unanchored else "no matching zone",
            )
            for r in self.regions if not r.resolved
        ]

    @property
    def complete(self) -> bool:
        return all(r.resolved for r in self.regions)

    def groups(self) -> dict[str, list[int]]:
        """Source indices per label, in input order."""
        grouped: dict[str, list[int]] = {}
        for region in self.regions:
            grouped.setdefault(region.label, []).append(region.index)
        return grouped


@dataclass
class BodyClassification:
    anterior: ViewClassification
    posterior: ViewClassification

    @property
    def unresolved(self) -> list[UnresolvedPath]:
        return sorted(self.anterior.unresolved + self.posterior.unresolved, key=lambda u: u.index)

    @property
    def complete(self) -> bool:
        return self.anterior.complete and self.posterior.complete


def apply_corrections(
        regions: list[ClassifiedRegion],
        corrections: Sequence[Correction],
) -> tuple[list[ClassifiedRegion], list[AppliedCorrection]]:
    """Run each correction in order over the primary labels."""
    corrected = list(regions)
    applied = []
    for correction in corrections:
        for i, region in enumerate(corrected):
            if region.label == correction.from_label and correction.predicate(region):
                corrected[i] = replace(region, label=correction.to_label)
                applied.append(AppliedCorrection(region.index, correction.from_label,
                                                 correction.to_label, correction.description))
    return corrected, applied


def classify_paths(
        paths: Sequence[str],
        rules: Sequence[ZoneRule],
        view: str = "",
        bounds: Optional[Bounds] = None,
        y_axis_up: bool = True,
        corrections: Sequence[Correction] = (),
        indices: Optional[Sequence[int]] = None,
) -> ViewClassification:
    """
    Classify every path of one view, in input order.

    `indices` gives each path's position in the original source so reports
    point back at it; defaults to 0..n-1. Bounds default to the bounding box
    of the anchored centroids.
    """
    if indices is None:
        indices = range(len(paths))
    if len(indices) != len(paths):
        raise ValueError("indices and paths must have the same length")

    centroids = [compute_centroid(d) for d in paths]
    unanchored = frozenset(i for i, c in zip(indices, centroids) if not c.valid)

    if bounds is None and len(unanchored) < len(paths):
        bounds = Bounds.from_centroids(centroids)

    regions = []
    for index, d, centroid in zip(indices, paths, centroids):
        if not centroid.valid:
            regions.append(ClassifiedRegion(index, UNKNOWN_REGION, d, centroid, (0.0, 0.0)))
            continue
        nx, ny = normalize(centroid, bounds, y_axis_up)
        normalized = (round(nx, CENTROID_DECIMALS), round(ny, CENTROID_DECIMALS))
        regions.append(ClassifiedRegion(index, classify_zone(nx, ny, rules), d, centroid, normalized))

    regions, applied = apply_corrections(regions, corrections)
    return ViewClassification(view=view, regions=regions, corrections=applied, unanchored=unanchored)


def split_views(paths: Sequence[str], split_x: float) -> tuple[list[int], list[int]]:
    """
    Source indices of anterior (centroid x < split_x) and posterior paths.
    Unanchored paths go to the anterior view so they are still reported.
    """
    anterior, posterior = [], []
    for i, d in enumerate(paths):
        centroid = compute_centroid(d)
        if centroid.valid and centroid.x >= split_x:
            posterior.append(i)
        else:
            anterior.append(i)
    return anterior, posterior


def classify_body(
        paths: Sequence[str],
        split_x: Optional[float] = None,
        y_axis_up: Optional[bool] = None,
) -> BodyClassification:
    """Split a side-by-side illustration into views and classify each on its own table."""
    split_x = settings.BODY_SPLIT_X if split_x is None else split_x
    y_axis_up = settings.BODY_Y_AXIS_UP if y_axis_up is None else y_axis_up

    front, back = split_views(paths, split_x)
    anterior = classify_paths(
        [paths[i] for i in front], ANTERIOR_ZONES,
        view=BodyView.ANTERIOR.value, y_axis_up=y_axis_up, indices=front,
    )
    posterior = classify_paths(
        [paths[i] for i in back], POSTERIOR_ZONES,
        view=BodyView.POSTERIOR.value, y_axis_up=y_axis_up, indices=back,
        corrections=POSTERIOR_CORRECTIONS,
    )
    return BodyClassification(anterior=anterior, posterior=posterior)


def survey_paths(paths: Sequence[str], y_axis_up: Optional[bool] = None) -> ViewClassification:
    """Coarse head/chest/abs/legs/arm grouping of one view."""
    y_axis_up = settings.BODY_Y_AXIS_UP if y_axis_up is None else y_axis_up
    return classify_paths(paths, COARSE_ZONES, view="survey", y_axis_up=y_axis_up)
