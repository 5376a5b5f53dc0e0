"""
Prompt templates for skin analysis and routine task extraction.

The BEGIN_<X>_TASKS / TASK: / END_<X>_TASKS tokens below are what
app.services.task_parser looks for. Keep them byte-identical.
"""

from typing import Optional

from app.skin_conditions import SKIN_CONDITIONS

ANALYSIS_SYSTEM_PROMPT = (
    "You are a dermatology AI assistant specialized in acne and skin conditions analysis. "
    "Provide detailed, specific, and personalized advice based on visual skin assessments. "
    "Always be thorough, empathetic, and practical in your recommendations."
)

# One system prompt per task-extraction attempt, each stricter than the last
TASK_SYSTEM_PROMPTS = (
    "You are a dermatology AI assistant specialized in creating personalized skincare routines "
    "based on facial analysis. Your primary goal is to create actionable, specific tasks for the "
    "user's skincare routine based on what you observe in their skin. DO NOT include any "
    "explanatory text - ONLY output the exact format with BEGIN/END markers as specified in the "
    "user's request. Any additional text will break the system.",
    "You are a dermatology AI assistant creating structured skincare routines. You MUST follow "
    "the EXACT format below with no deviations. Your entire response should ONLY contain these "
    "sections with tasks, nothing else.",
    "You are generating a skincare routine in a specific format. Output ONLY the exact format below.",
)

BASE_SKIN_CONCERNS = [
    "acne type identification (papules, pustules, nodules, cysts, comedones)",
    "severity assessment",
    "potential causes",
    "specific treatment recommendations",
    "personalized routine",
]


def _condition_reference() -> str:
    """Condensed catalog summary for the model."""
    return "; ".join(
        f"{c.name}: {c.description[:50]}... Key ingredients: {', '.join(c.treatments.topical[:2])}"
        for c in SKIN_CONDITIONS.values()
    )


def generate_analysis_prompt(user_concerns: Optional[list[str]] = None) -> str:
    concerns = user_concerns or BASE_SKIN_CONCERNS
    concerns_str = "\n".join(f"  - {c}" for c in concerns)

    return f"""Analyze this photo of my face and provide a detailed skin assessment with personalized recommendations. Please include:

1. SPECIFIC DIAGNOSIS: Identify the exact types of acne present (e.g., inflammatory papules, pustules, nodules, cystic acne, comedones, blackheads, whiteheads) and their specific locations on my face.

2. SEVERITY ASSESSMENT: Rate the severity on a scale from mild to severe and explain why.

3. ROOT CAUSES: Provide a detailed analysis of potential underlying causes including hormonal factors, diet, product usage, or environmental factors that might be contributing to my specific acne pattern.

4. PERSONALIZED TREATMENT PLAN: Recommend specific active ingredients (with percentages if relevant) and product types for my specific skin needs. Include morning and evening routines.

5. LIFESTYLE RECOMMENDATIONS: Suggest specific dietary changes, stress management techniques, or habit adjustments that would benefit my particular skin condition.

6. PROFESSIONAL TREATMENT OPTIONS: Suggest specific in-office treatments that would address my particular skin concerns if they appear moderate to severe.

Focus especially on:
{concerns_str}

Reference information on skin conditions: {_condition_reference()}

Make your advice extremely specific to what you observe in the image rather than generic. Use a compassionate but direct tone. Conclude with a brief encouraging message."""


def generate_task_extraction_prompt() -> str:
    return """Analyze this photo of my face and provide a personalized skincare routine tasks list. Focus on creating actionable tasks for treating the specific skin conditions you observe.

IMPORTANT: Please format your response in a specific structured format that our system can easily parse:

BEGIN_MORNING_TASKS
TASK: [Morning task 1]
TASK: [Morning task 2]
TASK: [Morning task 3]
END_MORNING_TASKS

BEGIN_EVENING_TASKS
TASK: [Evening task 1]
TASK: [Evening task 2]
TASK: [Evening task 3]
END_EVENING_TASKS

BEGIN_WEEKLY_TASKS
TASK: [Weekly task 1]
TASK: [Weekly task 2]
END_WEEKLY_TASKS

You MUST follow this exact format with the BEGIN/END markers and TASK: prefix for each task.

Include the following in your recommendations:
1. Morning routine - Include cleansing, treatment products, moisturizer, and sunscreen
2. Evening routine - Include makeup removal (if needed), cleansing, treatment products, and moisturizer
3. Weekly treatments - Include exfoliation, masks, or other occasional treatments

Be specific about product ingredients and concentrations (e.g., "Apply 2.5% benzoyl peroxide to affected areas").
Add specific emojis for visual cues: 🌞 for morning tasks, 🌙 for evening tasks, and 📅 for weekly tasks.

Base your recommendations on what you observe in the image - be specific about the type of acne or skin conditions present and tailor the tasks accordingly.

DO NOT include any text outside the BEGIN/END markers. Your response should ONLY contain the three sections with their BEGIN/END markers and the tasks within them. Any explanations or additional text will break the parsing system."""


TASK_RETRY_PROMPT = """Analyze this photo and create a structured skincare routine. Your response MUST follow this EXACT format, with no additional text or explanations:

BEGIN_MORNING_TASKS
TASK: Cleanse with gentle cleanser 🌞
TASK: Apply treatment product 🌞
TASK: Apply moisturizer 🌞
TASK: Apply sunscreen 🌞
END_MORNING_TASKS

BEGIN_EVENING_TASKS
TASK: Remove makeup/sunscreen 🌙
TASK: Cleanse face 🌙
TASK: Apply treatment 🌙
TASK: Apply moisturizer 🌙
END_EVENING_TASKS

BEGIN_WEEKLY_TASKS
TASK: Exfoliate once a week 📅
TASK: Use hydrating mask 📅
END_WEEKLY_TASKS"""


TASK_FINAL_PROMPT = """Look at this skin photo and provide ONLY this format with your recommendations - nothing else:

BEGIN_MORNING_TASKS
TASK: Task 1 🌞
TASK: Task 2 🌞
TASK: Task 3 🌞
END_MORNING_TASKS

BEGIN_EVENING_TASKS
TASK: Task 1 🌙
TASK: Task 2 🌙
TASK: Task 3 🌙
END_EVENING_TASKS

BEGIN_WEEKLY_TASKS
TASK: Task 1 📅
TASK: Task 2 📅
END_WEEKLY_TASKS"""


def task_prompt_for_attempt(attempt: int) -> str:
    """User prompt for a task-extraction attempt (0 = first call)."""
    if attempt <= 0:
        return generate_task_extraction_prompt()
    if attempt == 1:
        return TASK_RETRY_PROMPT
    return TASK_FINAL_PROMPT


def task_system_prompt_for_attempt(attempt: int) -> str:
    return TASK_SYSTEM_PROMPTS[min(max(attempt, 0), len(TASK_SYSTEM_PROMPTS) - 1)]
