"""Category weight distributions that always sum to 100.

The redistribution engine keeps a fixed set of scoring categories consistent while a
single category is edited: the edited category takes the requested value and every
other category shares what is left in proportion to its previous weight. All results
are integer percentages; rounding drift is absorbed by the largest category.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from .common import slugify

TOTAL = 100

CATEGORIES: tuple[str, ...] = (
    "Clarity & Relevance",
    "Emotional Impact",
    "Curiosity Gap",
    "Visual Appeal",
    "SEO Strength",
)

Distribution = dict[str, int]

PRESETS: dict[str, tuple[int, ...]] = {
    "balanced": (20, 20, 20, 20, 20),
    "viral": (10, 35, 35, 15, 5),
    "seo": (30, 5, 5, 20, 40),
    "visual": (10, 10, 20, 50, 10),
}


class WeightsError(Exception):
    """Base class for weight distribution failures."""

    exit_code = 1

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class WeightsValidationError(WeightsError, ValueError):
    exit_code = 2


def default_weights(categories: Sequence[str] = CATEGORIES) -> Distribution:
    """Return the even split (20 each for the five standard categories)."""
    if not categories:
        raise WeightsValidationError("At least one category is required.")
    share = TOTAL / len(categories)
    return _round_with_drift_correction({category: share for category in categories}, categories)


def preset_weights(name: str) -> Distribution:
    """Return a copy of a named preset distribution."""
    key = name.strip().lower()
    if key not in PRESETS:
        allowed = ", ".join(PRESETS)
        raise WeightsValidationError(f"Unknown preset '{name}'. Choose one of: {allowed}.")
    return dict(zip(CATEGORIES, PRESETS[key], strict=True))


def clamp_weight(value: float) -> float:
    """Clamp a requested weight into the [0, 100] range; NaN and infinities are rejected."""
    if not math.isfinite(value):
        raise WeightsValidationError(f"Requested weight must be a finite number, got {value}.")
    return max(0.0, min(float(TOTAL), float(value)))


def resolve_category(value: str, categories: Sequence[str] = CATEGORIES) -> str:
    """Match a category by display name (case-insensitive) or slug."""
    needle = value.strip()
    for category in categories:
        if needle.lower() == category.lower() or slugify(needle) == slugify(category):
            return category
    allowed = ", ".join(categories)
    raise WeightsValidationError(f"Unknown category '{value}'. Choose one of: {allowed}.")


def redistribute(
    current: Mapping[str, int],
    changed_category: str,
    new_value: float,
    *,
    categories: Sequence[str] = CATEGORIES,
) -> Distribution:
    """Set one category and rescale the others so the total stays at 100.

    ``current`` must already be a valid distribution. ``new_value`` is clamped to
    [0, 100] and must be finite. The untouched categories keep their relative
    shares of the remaining budget; when the changed category previously held every
    point, the remainder is split evenly instead. Every category is then rounded to an
    integer and any rounding drift is added to the category with the largest rounded
    value (the first one in ``categories`` order on ties).
    """
    if changed_category not in categories:
        allowed = ", ".join(categories)
        raise WeightsValidationError(f"Unknown category '{changed_category}'. Choose one of: {allowed}.")
    current = validate_distribution(current, categories=categories)

    requested = clamp_weight(new_value)
    remaining = TOTAL - requested
    sum_of_others = TOTAL - current[changed_category]
    others = [category for category in categories if category != changed_category]

    values: dict[str, float] = {}
    for category in categories:
        if category == changed_category:
            values[category] = requested
        elif sum_of_others > 0:
            values[category] = current[category] / sum_of_others * remaining
        else:
            values[category] = remaining / len(others)

    return _round_with_drift_correction(values, categories)


def normalize(
    raw_scores: Mapping[str, int | float],
    *,
    categories: Sequence[str] = CATEGORIES,
) -> Distribution:
    """Scale independent raw scores into a distribution summing to 100.

    Missing categories count as zero. An all-zero input yields the even split.
    """
    unknown = [key for key in raw_scores if key not in categories]
    if unknown:
        raise WeightsValidationError(f"Unknown categories in scores: {', '.join(unknown)}.")

    scores = {category: float(raw_scores.get(category, 0)) for category in categories}
    negative = [category for category, score in scores.items() if score < 0]
    if negative:
        raise WeightsValidationError(f"Scores must not be negative: {', '.join(negative)}.")

    total = sum(scores.values())
    if total == 0:
        return default_weights(categories)

    factor = TOTAL / total
    return _round_with_drift_correction({category: score * factor for category, score in scores.items()}, categories)


def validate_distribution(
    weights: Mapping[str, object],
    *,
    categories: Sequence[str] = CATEGORIES,
) -> Distribution:
    """Return ``weights`` as an ordered distribution or raise if it is malformed."""
    if set(weights) != set(categories):
        expected = ", ".join(categories)
        raise WeightsValidationError(f"Weights must cover exactly these categories: {expected}.")

    result: Distribution = {}
    for category in categories:
        value = weights[category]
        if isinstance(value, bool) or not isinstance(value, int):
            raise WeightsValidationError(f"Weight for '{category}' must be an integer.")
        if not 0 <= value <= TOTAL:
            raise WeightsValidationError(f"Weight for '{category}' must be between 0 and {TOTAL}.")
        result[category] = value

    total = sum(result.values())
    if total != TOTAL:
        raise WeightsValidationError(f"Weights must sum to {TOTAL}, got {total}.")
    return result


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _round_with_drift_correction(values: Mapping[str, float], categories: Sequence[str]) -> Distribution:
    rounded: Distribution = {}
    rounded_sum = 0
    for category in categories:
        rounded[category] = _round_half_up(values[category])
        rounded_sum += rounded[category]

    diff = TOTAL - rounded_sum
    if diff != 0:
        # max() keeps the first maximum, so ties resolve in declared order.
        target = max(categories, key=lambda category: rounded[category])
        rounded[target] += diff
    return rounded


__all__ = [
    "CATEGORIES",
    "PRESETS",
    "TOTAL",
    "Distribution",
    "WeightsError",
    "WeightsValidationError",
    "clamp_weight",
    "default_weights",
    "normalize",
    "preset_weights",
    "redistribute",
    "resolve_category",
    "validate_distribution",
]
