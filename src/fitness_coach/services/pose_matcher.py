"""Frame-by-frame pose matching against a catalog of pose definitions."""

import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from fitness_coach.domain.pose import Keypoint, Point, PoseVerdict

CONFIDENCE_THRESHOLD = 0.5
EXTENSION_THRESHOLD_PX = 100.0
LEVEL_TOLERANCE_PX = 50.0

BODY_NOT_VISIBLE_FEEDBACK = "Make sure your full body is visible to the camera"

Predicate = Callable[[Mapping[str, Keypoint]], bool]

WRISTS = ("leftWrist", "rightWrist")
ANKLES = ("leftAnkle", "rightAnkle")
HIPS = ("leftHip", "rightHip")
SHOULDERS = ("leftShoulder", "rightShoulder")


@dataclass(frozen=True)
class PoseDefinition:
    """Declarative description of a target pose.

    A frame matches when every required keypoint is visible and every
    predicate holds.
    """

    name: str
    required_parts: tuple[str, ...]
    predicates: tuple[Predicate, ...]
    success_feedback: str
    failure_feedback: str


def average_y(points: Mapping[str, Keypoint], parts: Iterable[str]) -> float:
    """Return the mean y coordinate of the given parts."""
    values = [points[part].position.y for part in parts]
    return sum(values) / len(values)


def average_x(points: Mapping[str, Keypoint], parts: Iterable[str]) -> float:
    """Return the mean x coordinate of the given parts."""
    values = [points[part].position.x for part in parts]
    return sum(values) / len(values)


def higher_than(upper: tuple[str, ...], lower: tuple[str, ...]) -> Predicate:
    """Group ``upper`` sits higher on screen than group ``lower``."""

    def predicate(points: Mapping[str, Keypoint]) -> bool:
        return average_y(points, upper) < average_y(points, lower)

    return predicate


def extended(
    pairs: tuple[tuple[str, str], ...],
    threshold: float = EXTENSION_THRESHOLD_PX,
) -> Predicate:
    """Each (joint, anchor) pair is vertically displaced by at least ``threshold``."""

    def predicate(points: Mapping[str, Keypoint]) -> bool:
        return all(
            abs(points[joint].position.y - points[anchor].position.y) >= threshold
            for joint, anchor in pairs
        )

    return predicate


def below(pairs: tuple[tuple[str, str], ...]) -> Predicate:
    """Each joint sits lower on screen than its anchor."""

    def predicate(points: Mapping[str, Keypoint]) -> bool:
        return all(
            points[joint].position.y > points[anchor].position.y
            for joint, anchor in pairs
        )

    return predicate


def level(
    first: tuple[str, ...],
    second: tuple[str, ...],
    tolerance: float = LEVEL_TOLERANCE_PX,
) -> Predicate:
    """Both groups sit at roughly the same height."""

    def predicate(points: Mapping[str, Keypoint]) -> bool:
        return abs(average_y(points, first) - average_y(points, second)) <= tolerance

    return predicate


def spread(
    first: tuple[str, ...],
    second: tuple[str, ...],
    threshold: float = EXTENSION_THRESHOLD_PX,
) -> Predicate:
    """Both groups are horizontally apart by at least ``threshold``."""

    def predicate(points: Mapping[str, Keypoint]) -> bool:
        return abs(average_x(points, first) - average_x(points, second)) >= threshold

    return predicate


DOWNWARD_DOG = PoseDefinition(
    name="Downward Dog",
    required_parts=WRISTS + ANKLES + HIPS + SHOULDERS,
    predicates=(
        higher_than(HIPS, SHOULDERS),
        extended((("leftWrist", "leftShoulder"), ("rightWrist", "rightShoulder"))),
        extended((("leftAnkle", "leftHip"), ("rightAnkle", "rightHip"))),
    ),
    success_feedback="Great job! Your Downward Dog pose looks correct.",
    failure_feedback="Adjust your pose. Hips should be higher, arms and legs straight.",
)

MOUNTAIN_POSE = PoseDefinition(
    name="Mountain Pose",
    required_parts=WRISTS + ANKLES + HIPS + SHOULDERS,
    predicates=(
        higher_than(SHOULDERS, HIPS),
        higher_than(HIPS, ANKLES),
        extended((("leftAnkle", "leftHip"), ("rightAnkle", "rightHip"))),
        below((("leftWrist", "leftShoulder"), ("rightWrist", "rightShoulder"))),
    ),
    success_feedback="Great job! Your Mountain Pose looks correct.",
    failure_feedback=(
        "Stand tall. Keep your feet under your hips and your arms at your sides."
    ),
)

PLANK = PoseDefinition(
    name="Plank",
    required_parts=ANKLES + HIPS + SHOULDERS,
    predicates=(
        level(SHOULDERS, HIPS),
        level(HIPS, ANKLES),
        spread(SHOULDERS, ANKLES),
    ),
    success_feedback="Great job! Your Plank looks correct.",
    failure_feedback="Keep your body in a straight line from shoulders to ankles.",
)


class PoseCatalog:
    """Registry of supported poses keyed by name."""

    def __init__(self, definitions: Iterable[PoseDefinition] = ()) -> None:
        self._definitions: dict[str, PoseDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: PoseDefinition) -> None:
        """Add or replace a pose definition."""
        self._definitions[definition.name] = definition

    def get(self, name: str) -> PoseDefinition | None:
        """Return the definition for a pose name, if supported."""
        return self._definitions.get(name)

    def names(self) -> list[str]:
        """Return supported pose names in registration order."""
        return list(self._definitions)


def default_catalog() -> PoseCatalog:
    """Return the catalog of built-in poses."""
    return PoseCatalog([DOWNWARD_DOG, MOUNTAIN_POSE, PLANK])


@dataclass
class PoseMatcher:
    """Evaluates keypoints of a single frame against a target pose."""

    catalog: PoseCatalog = field(default_factory=default_catalog)
    confidence_threshold: float = CONFIDENCE_THRESHOLD

    def evaluate(
        self, pose_name: str, keypoints: Iterable[Keypoint] | None
    ) -> PoseVerdict:
        """Return the verdict for one frame. Never raises on malformed keypoints."""
        definition = self.catalog.get(pose_name)
        if definition is None:
            return PoseVerdict(
                is_correct=None, feedback_text=f"Analyzing {pose_name} pose..."
            )
        visible = self.visible_keypoints(keypoints)
        if any(part not in visible for part in definition.required_parts):
            return PoseVerdict(is_correct=False, feedback_text=BODY_NOT_VISIBLE_FEEDBACK)
        if all(predicate(visible) for predicate in definition.predicates):
            return PoseVerdict(
                is_correct=True, feedback_text=definition.success_feedback
            )
        return PoseVerdict(is_correct=False, feedback_text=definition.failure_feedback)

    def visible_keypoints(
        self, keypoints: Iterable[Keypoint] | None
    ) -> dict[str, Keypoint]:
        """Return the best-scoring well-formed keypoint per part above threshold."""
        visible: dict[str, Keypoint] = {}
        for keypoint in keypoints or ():
            if not _is_well_formed(keypoint):
                continue
            if keypoint.score < self.confidence_threshold:
                continue
            current = visible.get(keypoint.part)
            if current is None or keypoint.score > current.score:
                visible[keypoint.part] = keypoint
        return visible


def _is_well_formed(keypoint: object) -> bool:
    if not isinstance(keypoint, Keypoint) or not isinstance(keypoint.part, str):
        return False
    if not isinstance(keypoint.position, Point):
        return False
    return all(
        isinstance(value, int | float) and math.isfinite(value)
        for value in (keypoint.score, keypoint.position.x, keypoint.position.y)
    )
