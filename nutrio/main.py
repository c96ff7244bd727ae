"""Command-line entry point for the nutrio progression engine

Usage:
    python -m nutrio.main replay EVENTS.json
    python -m nutrio.main rehydrate TOTAL_XP

EVENTS.json is a JSON list of requests, applied in order:
    {"type": "reward", "user_id": "42", "source": "meal_log",
     "multiplier": "premium", "context": {"is_premium": true}, "date": "2024-03-02"}
    {"type": "unlock", "user_id": "42", "achievement_id": "first_meal"}
    {"type": "progress", "user_id": "42", "achievement_id": "hydration_hero", "progress": 3}
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from nutrio.config import validate_config, LOG_LEVEL, ACHIEVEMENT_CATALOG_PATH
from nutrio.exceptions import NutrioError, ValidationError
from nutrio.gamification.achievement_system import AchievementCatalog
from nutrio.gamification.engine import ProgressionEngine
from nutrio.gamification.xp_system import rehydrate, snapshot
from nutrio.models.progression import RewardContext
from nutrio.services.progression_service import ProgressionService
from nutrio.services.state_store import InMemoryProgressionStore
from nutrio.utils.datetime_helpers import parse_iso_date

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL.upper())
)

logger = logging.getLogger(__name__)


def load_catalog(path: Optional[Path] = None) -> AchievementCatalog:
    """Achievement catalog from `path` or ACHIEVEMENT_CATALOG_PATH (empty if neither is set)"""
    path = path or ACHIEVEMENT_CATALOG_PATH
    if path is None:
        logger.info("No achievement catalog configured; unlock requests will fail")
        return AchievementCatalog()
    return AchievementCatalog.from_json_file(path)


async def apply_event(service: ProgressionService, event: Dict[str, Any]) -> Dict[str, Any]:
    """Run one replayed request through the service and return its outcome as a dict"""
    event_type = event.get("type")
    user_id = str(event["user_id"])

    if event_type == "reward":
        today = parse_iso_date(event["date"]) if event.get("date") else None
        outcome = await service.grant_reward(
            user_id,
            event["source"],
            base_amount=event.get("base_amount"),
            context=RewardContext(**event.get("context", {})),
            multiplier=event.get("multiplier", "none"),
            today=today,
        )
    elif event_type == "unlock":
        outcome = await service.unlock_achievement(user_id, event["achievement_id"])
    elif event_type == "progress":
        return await service.update_achievement_progress(
            user_id, event["achievement_id"], event["progress"]
        )
    else:
        raise ValidationError(
            message=f"Unknown event type: {event_type!r}",
            field="type",
            value=event_type,
        )

    return outcome.model_dump(mode="json")


async def replay(events: List[Dict[str, Any]], catalog: AchievementCatalog) -> Dict[str, Any]:
    """
    Replay a list of requests against a fresh in-memory store

    Returns:
        {user_id: stored progression document}
    """
    store = InMemoryProgressionStore()
    service = ProgressionService(store, engine=ProgressionEngine(catalog=catalog))

    user_ids = []
    for index, event in enumerate(events):
        result = await apply_event(service, event)
        logger.debug(f"Event {index}: {result}")
        if str(event["user_id"]) not in user_ids:
            user_ids.append(str(event["user_id"]))

    logger.info(f"Replayed {len(events)} events for {len(user_ids)} users")
    return {user_id: store.get_document(user_id) for user_id in user_ids}


def _replay_command(args: argparse.Namespace) -> int:
    events = json.loads(Path(args.events).read_text(encoding="utf-8"))
    if not isinstance(events, list):
        logger.error(f"{args.events} must contain a JSON list of events")
        return 1

    catalog = load_catalog(Path(args.catalog) if args.catalog else None)
    documents = asyncio.run(replay(events, catalog))
    print(json.dumps(documents, indent=2, ensure_ascii=False))
    return 0


def _rehydrate_command(args: argparse.Namespace) -> int:
    display = snapshot(rehydrate(args.total_xp))
    print(json.dumps(display.model_dump(mode="json"), indent=2, ensure_ascii=False))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run a subcommand"""
    parser = argparse.ArgumentParser(description="Nutrio progression engine tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay_parser = subparsers.add_parser("replay", help="Replay a JSON list of reward/unlock requests")
    replay_parser.add_argument("events", help="Path to the events JSON file")
    replay_parser.add_argument("--catalog", help="Achievement catalog JSON (default: ACHIEVEMENT_CATALOG_PATH)")
    replay_parser.set_defaults(handler=_replay_command)

    rehydrate_parser = subparsers.add_parser("rehydrate", help="Show the level for a lifetime XP total")
    rehydrate_parser.add_argument("total_xp", type=int, help="Lifetime XP")
    rehydrate_parser.set_defaults(handler=_rehydrate_command)

    args = parser.parse_args(argv)

    try:
        logger.info("Validating configuration...")
        validate_config()
        return args.handler(args)
    except NutrioError as e:
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
