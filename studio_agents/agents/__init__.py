"""
Agents for the studio pipeline.

- PromptOrchestratorAgent: Planner then Writer
- StudioPipeline: top-level generate operation
"""

from studio_agents.agents.prompt_orchestrator import PromptOrchestratorAgent
from studio_agents.agents.studio_pipeline import StudioPipeline

__all__ = [
    "PromptOrchestratorAgent",
    "StudioPipeline",
]
