"""
Event-driven entrypoint for GitStreak

Invoked by an external scheduler (hourly by default, see
STREAK_REFRESH_INTERVAL_SECONDS) or by a manual trigger.
"""

import asyncio
import logging
from typing import Dict, Any, Optional

from gitstreak.config.settings import settings
from gitstreak.jobs.streak_sync import (
    ACTION_REFRESH,
    ACTION_RENDER,
    ACTION_TEST_CONNECTION,
    apply_display_format,
    normalize_action,
    run_connection_test,
    run_streak_refresh,
)
from gitstreak.orchestrator import StreakOrchestrator

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# One orchestrator per execution environment keeps the last snapshot warm
orchestrator = StreakOrchestrator()


def lambda_handler(event: Optional[Dict[str, Any]], context: Any) -> Dict[str, Any]:
    """
    Dispatch a streak action.

    Expected event payloads:
    - {"action": "refresh", "username": "octocat"}
    - {"action": "test_connection"}
    - {"action": "render", "display_format": "custom", "custom_format": "%d|%l"}

    Default is "refresh" if no action is provided.
    """
    payload = event or {}
    raw_action = payload.get("action")
    action = normalize_action(raw_action)
    logger.info(f"Handler invoked with action: {raw_action or ACTION_REFRESH}")

    if action is None:
        error_msg = f"Unknown action: {raw_action}"
        logger.error(error_msg)
        return {
            "statusCode": 400,
            "action": raw_action,
            "error": error_msg,
        }

    try:
        if action == ACTION_REFRESH:
            result = asyncio.run(run_streak_refresh(orchestrator=orchestrator, username=payload.get("username")))

        elif action == ACTION_TEST_CONNECTION:
            result = asyncio.run(run_connection_test(orchestrator=orchestrator))

        else:
            result = apply_display_format(
                orchestrator,
                display_format=payload.get("display_format"),
                custom_format=payload.get("custom_format"),
            )

        logger.info(f"Action {action} completed: {result}")
        return {
            "statusCode": 200,
            "action": action,
            "result": result,
        }

    except Exception as e:
        logger.error(f"Handler execution failed: {e}", exc_info=True)
        return {
            "statusCode": 500,
            "action": action,
            "error": str(e),
        }


# Allow local runs via `python -m gitstreak.handler`
if __name__ == "__main__":
    print("=" * 60)
    print("GitStreak - Local Run")
    print("=" * 60)

    result = lambda_handler({"action": ACTION_REFRESH}, None)

    print("\nResult:")
    print(result)
    print("=" * 60)
