from __future__ import annotations

from functools import lru_cache

from app.core.config.scoring import get_scoring_value

DEFAULT_INTENSITY = "medium"


@lru_cache(maxsize=1)
def _grade_bands() -> tuple[tuple[int, str], ...]:
    rows = get_scoring_value("letter_grades", []) or []
    bands = sorted(((int(row["min"]), str(row["grade"])) for row in rows), reverse=True)
    if not bands or bands[-1][0] > 0:
        raise RuntimeError("letter_grades in config/scoring.yaml must include a band starting at 0.")
    return tuple(bands)


def clamp_score(score: int) -> int:
    return max(0, min(100, int(score)))


def default_score() -> int:
    return int(get_scoring_value("score.default", 50))


def score_floor(intensity: str) -> int:
    floors = get_scoring_value("score.floors", {}) or {}
    if intensity in floors:
        return int(floors[intensity])
    return int(floors.get(DEFAULT_INTENSITY, 0))


def apply_score_floor(score: int, intensity: str) -> int:
    """Raise a sub-floor score to exactly the floor; never lowers a score."""
    return max(clamp_score(score), score_floor(intensity))


def letter_grade_for(score: int) -> str:
    value = clamp_score(score)
    for minimum, grade in _grade_bands():
        if value >= minimum:
            return grade
    return _grade_bands()[-1][1]


def grade_rank(grade: str) -> int:
    """Position of a grade in the band table, 0 for the lowest band."""
    letters = [grade for _, grade in reversed(_grade_bands())]
    return letters.index(grade)
