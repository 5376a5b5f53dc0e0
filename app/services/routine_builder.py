"""
Routine builder: splices condition-specific steps into a base routine.

Morning/evening steps go in at index 2 (after cleansing), weekly steps are
appended. Rosacea replaces all three lists, so anything spliced before it is
lost while anything spliced after it lands in the rosacea lists.
"""

from dataclasses import dataclass
from typing import Optional

from app.schemas import Routine, TaskCategory, TaskRecord
from app.services.task_rules import build_tasks

SPLICE_INDEX = 2

BASE_ROUTINE = Routine(
    morning=[
        "Gentle cleanser",
        "Alcohol-free toner (optional)",
        "Lightweight moisturizer",
        "SPF 30+ sunscreen (crucial)",
    ],
    evening=[
        "Oil-based or micellar cleanser to remove makeup/sunscreen",
        "Gentle water-based cleanser",
        "Treatment product",
        "Moisturizer",
    ],
    weekly=[
        "Gentle exfoliation 1-2 times per week",
        "Hydrating mask once weekly",
    ],
)

ROSACEA_ROUTINE = Routine(
    morning=[
        "Lukewarm water rinse or extremely gentle cleanser",
        "Centella or green tea serum",
        "Barrier-strengthening moisturizer",
        "Mineral sunscreen SPF 30+",
    ],
    evening=[
        "Gentle micellar water or oil cleanser",
        "Lukewarm water rinse",
        "Centella, licorice, or azelaic acid product",
        "Rich barrier repair moisturizer",
    ],
    weekly=[
        "Gentle oat or centella mask",
        "No physical exfoliation",
    ],
)


@dataclass(frozen=True)
class ConditionSplice:
    morning: str
    evening: str
    weekly: Optional[str] = None


_ACNE_SPLICE = ConditionSplice(
    morning="Benzoyl peroxide spot treatment (2.5-5%)",
    evening="Adapalene gel or retinol",
)
_DEEP_ACNE_SPLICE = ConditionSplice(
    morning="Azelaic acid (15-20%)",
    evening="Prescription retinoid (if available)",
    weekly="Consult dermatologist for cortisone injections",
)

CONDITION_SPLICES: dict[str, ConditionSplice] = {
    "papules": _ACNE_SPLICE,
    "pustules": _ACNE_SPLICE,
    "comedones": ConditionSplice(
        morning="Salicylic acid serum (1-2%)",
        evening="Retinol or adapalene",
        weekly="Salicylic acid mask once weekly",
    ),
    "nodular": _DEEP_ACNE_SPLICE,
    "cystic": _DEEP_ACNE_SPLICE,
    "hormonal": ConditionSplice(
        morning="Niacinamide serum (10%)",
        evening="Azelaic acid or retinoid",
        weekly="Consider spearmint tea daily (may help with androgen levels)",
    ),
}

REPLACEMENT_ROUTINES: dict[str, Routine] = {
    "rosacea": ROSACEA_ROUTINE,
}


def get_recommended_routine(condition_ids: list[str]) -> Routine:
    """Build a routine for the given conditions, applied in the order given."""
    routine = BASE_ROUTINE.model_copy(deep=True)

    for condition_id in condition_ids:
        replacement = REPLACEMENT_ROUTINES.get(condition_id)
        if replacement is not None:
            routine = replacement.model_copy(deep=True)
            continue

        splice = CONDITION_SPLICES.get(condition_id)
        if splice is None:
            continue
        routine.morning.insert(SPLICE_INDEX, splice.morning)
        routine.evening.insert(SPLICE_INDEX, splice.evening)
        if splice.weekly:
            routine.weekly.append(splice.weekly)

    return routine


def routine_to_tasks(routine: Routine) -> list[TaskRecord]:
    """Flatten a routine into morning, evening, then weekly task records."""
    return (
        build_tasks(TaskCategory.MORNING, routine.morning)
        + build_tasks(TaskCategory.EVENING, routine.evening)
        + build_tasks(TaskCategory.WEEKLY, routine.weekly)
    )
