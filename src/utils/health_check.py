"""
Health check utilities for verifying service dependencies.
"""
import asyncio
from typing import Dict, Any

from config import settings
from src.utils.logger import get_logger
from studio_agents.core.config import get_config

logger = get_logger(__name__)


async def check_gemini_api() -> Dict[str, Any]:
    """Check that a Gemini API key is configured."""
    if not settings.gemini_api_key:
        return {"status": False, "error": "API key not configured"}

    # Simple check: verify the key format is reasonable without spending a request
    if len(settings.gemini_api_key) < 10:
        return {"status": False, "error": "API key appears invalid"}

    return {"status": True, "message": "API key configured"}


async def check_model_profiles() -> Dict[str, Any]:
    """Check that every stage has a model configured."""
    config = get_config()
    missing = [
        name
        for name in ("planner", "writer", "image")
        if not config.get_model_profile(name).model
    ]
    if missing:
        return {"status": False, "error": f"No model configured for: {', '.join(missing)}"}
    return {
        "status": True,
        "message": f"text={config.writer.model}, image={config.image.model}",
    }


async def perform_health_checks() -> Dict[str, Dict[str, Any]]:
    """
    Perform all health checks concurrently.

    Returns:
        Dictionary with health check results for each service
    """
    names = ("gemini_api", "model_profiles")
    results = await asyncio.gather(
        check_gemini_api(),
        check_model_profiles(),
        return_exceptions=True,
    )

    checks = {
        name: result if not isinstance(result, Exception) else {"status": False, "error": str(result)}
        for name, result in zip(names, results)
    }

    logger.info(
        "Health checks completed",
        all_healthy=all(check.get("status", False) for check in checks.values()),
        **{k: v.get("status") for k, v in checks.items()}
    )

    return checks
