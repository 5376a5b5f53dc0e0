"""
Skin Analyst Agents: vision calls that read a skin photo.

analysis_agent returns a narrative assessment; task_agent returns the
BEGIN/END marker format consumed by the task parser. task_agent's system
prompt tightens with each retry attempt carried in TaskAgentDeps.
"""

import os
from dataclasses import dataclass

from pydantic_ai import Agent, RunContext

from app.agents.prompts import ANALYSIS_SYSTEM_PROMPT, task_system_prompt_for_attempt
from app.config import get_settings

settings = get_settings()

if not os.environ.get("ANTHROPIC_API_KEY") and settings.claude_api_key:
    os.environ["ANTHROPIC_API_KEY"] = settings.claude_api_key


@dataclass
class TaskAgentDeps:
    """Per-call state for task extraction."""

    attempt: int = 0


analysis_agent = Agent(
    settings.analysis_model,
    output_type=str,
    system_prompt=ANALYSIS_SYSTEM_PROMPT,
    defer_model_check=True,
)

task_agent = Agent(
    settings.analysis_model,
    deps_type=TaskAgentDeps,
    output_type=str,
    defer_model_check=True,
)


@task_agent.system_prompt
async def build_task_system_prompt(ctx: RunContext[TaskAgentDeps]) -> str:
    return task_system_prompt_for_attempt(ctx.deps.attempt)
