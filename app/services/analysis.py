"""
SkinAnalysisService: runs the vision agents and turns their output into tasks.

Task extraction retries with stricter prompts while a response only parses to
the default list; the parser itself never fails, so the last attempt's parse
is always usable.
"""

import logging
from typing import Optional

from pydantic_ai import BinaryContent
from pydantic_ai.settings import ModelSettings

from app.agents.prompts import generate_analysis_prompt, task_prompt_for_attempt
from app.agents.skin_analyst import TaskAgentDeps, analysis_agent, task_agent
from app.config import Settings, get_settings
from app.schemas import ParseResult, TaskRecord
from app.services.conditions import enhance_ai_response
from app.services.task_parser import default_tasks, parse_tasks_with_stage

logger = logging.getLogger(__name__)

NO_ANALYSIS = "No analysis available"
ANALYSIS_TEMPERATURE = 0.7
# Lower temperature on each attempt for more consistent formatting
TASK_TEMPERATURES = (0.4, 0.3, 0.2)


class SkinAnalysisService:
    """Image → narrative analysis, and image → routine task list."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    async def analyze_image_with_enhancement(
        self,
        image_data: bytes,
        media_type: str = "image/jpeg",
        user_concerns: Optional[list[str]] = None,
    ) -> str:
        """Narrative analysis with treatment details for any detected conditions."""
        try:
            result = await analysis_agent.run(
                [
                    generate_analysis_prompt(user_concerns),
                    BinaryContent(data=image_data, media_type=media_type),
                ],
                model_settings=ModelSettings(
                    max_tokens=self.settings.max_tokens,
                    temperature=ANALYSIS_TEMPERATURE,
                ),
            )
            return enhance_ai_response(result.output or NO_ANALYSIS)
        except Exception as e:
            logger.error(f"Error in image analysis: {e}", exc_info=True)
            raise

    async def _request_tasks(
        self, image_data: bytes, media_type: str, attempt: int
    ) -> ParseResult:
        temperature = TASK_TEMPERATURES[min(attempt, len(TASK_TEMPERATURES) - 1)]
        result = await task_agent.run(
            [
                task_prompt_for_attempt(attempt),
                BinaryContent(data=image_data, media_type=media_type),
            ],
            deps=TaskAgentDeps(attempt=attempt),
            model_settings=ModelSettings(
                max_tokens=self.settings.max_tokens,
                temperature=temperature,
            ),
        )
        return parse_tasks_with_stage(result.output or NO_ANALYSIS)

    async def analyze_image_for_tasks(
        self, image_data: bytes, media_type: str = "image/jpeg"
    ) -> list[TaskRecord]:
        """Structured routine tasks for the photo. Never raises."""
        attempts = 1 + max(self.settings.max_task_retries, 0)
        try:
            parsed = await self._request_tasks(image_data, media_type, 0)
            for attempt in range(1, attempts):
                if not parsed.used_default:
                    break
                logger.warning(
                    f"Task attempt {attempt} returned no structured tasks, retrying with stricter prompt"
                )
                parsed = await self._request_tasks(image_data, media_type, attempt)

            logger.info(f"Generated {len(parsed.tasks)} tasks | Stage: {parsed.stage.value}")
            return parsed.tasks
        except Exception as e:
            logger.error(f"Error in image analysis for tasks: {e}", exc_info=True)
            return default_tasks()
