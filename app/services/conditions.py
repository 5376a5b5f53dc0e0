"""
Condition detection over free-text skin analyses.
"""

import logging

from app.schemas import TaskRecord
from app.services.routine_builder import get_recommended_routine, routine_to_tasks
from app.skin_conditions import SKIN_CONDITIONS, SYMPTOM_TO_CONDITIONS

logger = logging.getLogger(__name__)


def detect_conditions(text: str) -> list[str]:
    """Return catalog ids mentioned in the text, in catalog order.

    A condition matches when its display name, its id, or one of its aliases
    appears anywhere in the lowercased text. Plain substring containment, no
    word boundaries.
    """
    lower = text.lower()
    detected = [
        condition_id
        for condition_id, condition in SKIN_CONDITIONS.items()
        if any(term.lower() in lower for term in (condition.name, condition_id, *condition.aliases))
    ]
    if detected:
        logger.debug(f"Detected conditions: {', '.join(detected)}")
    return detected


def conditions_for_symptom(symptom: str) -> list[str]:
    """Candidate catalog ids for a symptom description ('black dots' → ['comedones'])."""
    candidates = SYMPTOM_TO_CONDITIONS.get(symptom.lower().strip(), ())
    return [c for c in candidates if c in SKIN_CONDITIONS]


def generate_personalized_tasks(ai_response: str) -> list[TaskRecord]:
    """Detect conditions in a narrative analysis and return the matching routine as tasks."""
    return routine_to_tasks(get_recommended_routine(detect_conditions(ai_response)))


def enhance_ai_response(ai_response: str) -> str:
    """Append treatment details and a routine for conditions found in the analysis."""
    detected = detect_conditions(ai_response)
    if not detected:
        return ai_response

    routine = get_recommended_routine(detected)

    lines: list[str] = [ai_response, "", "---", ""]
    lines.append("🔬 DETAILED TREATMENT INFORMATION:")
    lines.append("")
    lines.append(
        "Based on the analysis of your skin, here's more specific information "
        "about the identified condition(s):"
    )
    for condition_id in detected:
        condition = SKIN_CONDITIONS[condition_id]
        lines.append("")
        lines.append(f"• {condition.name}:")
        lines.append(f"  {condition.description}")
        lines.append(
            f"  Recommended ingredients: {', '.join(condition.treatments.topical[:3])}"
        )

    lines.append("")
    lines.append("💧 PERSONALIZED SKINCARE ROUTINE:")
    for title, steps in (
        ("Morning", routine.morning),
        ("Evening", routine.evening),
        ("Weekly", routine.weekly),
    ):
        lines.append("")
        lines.append(f"{title}:")
        lines.extend(f"• {step}" for step in steps)

    lines.append("")
    lines.append(
        "⚠️ Remember: This is personalized based on the image analysis, but a "
        "dermatologist can provide the most accurate diagnosis and treatment plan "
        "for your specific needs."
    )
    return "\n".join(lines)
