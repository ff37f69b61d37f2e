"""
Base agent class.

Agents in the studio pipeline are thin coordinators over services. The
base class tracks execution state and timing; agents raise StudioError
subclasses on failure instead of returning error results.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional
import time


class AgentState(Enum):
    """Agent execution states."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class BaseAgent(ABC):
    """
    Abstract base class for studio agents.

    - PromptOrchestratorAgent: Planner then Writer
    - StudioPipeline: classification, encoding, orchestration and fan-out
    """

    def __init__(self, name: str, description: str):
        """
        Initialize the base agent.

        Args:
            name: Unique identifier for the agent
            description: Human-readable description of the agent's purpose
        """
        self.name = name
        self.description = description
        self.state = AgentState.IDLE

        self._start_time: Optional[float] = None

    @abstractmethod
    async def run(self, *args: Any, **kwargs: Any) -> Any:
        """Execute the agent's primary task."""

    def _start_execution(self) -> None:
        """Mark the start of execution for timing."""
        self.state = AgentState.RUNNING
        self._start_time = time.time()

    def _end_execution(self, success: bool = True) -> int:
        """
        Mark the end of execution and return duration.

        Args:
            success: Whether execution was successful

        Returns:
            Duration in milliseconds
        """
        self.state = AgentState.COMPLETED if success else AgentState.FAILED
        if self._start_time:
            duration_ms = int((time.time() - self._start_time) * 1000)
            self._start_time = None
            return duration_ms
        return 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, state={self.state.value})"
