"""Shared response helpers."""

from fitness_coach.domain.errors import FitnessCoachError


def error_body(exc: FitnessCoachError) -> dict[str, object]:
    """Return the JSON error payload for a failure."""
    body: dict[str, object] = {"error": exc.message}
    if exc.details is not None:
        body["details"] = exc.details
    return body
