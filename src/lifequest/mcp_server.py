"""MCP server for LifeQuest.

Exposes the game state as MCP tools so an assistant can check progress and
log study time mid-conversation.
Run via: python3 -m lifequest.mcp_server
"""
from __future__ import annotations

from dataclasses import asdict
from typing import Any

from mcp.server.fastmcp import FastMCP

from lifequest.models import STUDY_TYPES

mcp = FastMCP(name="lifequest")


def _get_db():
    from lifequest.config import get_db_path
    from lifequest.db import Database
    return Database(get_db_path())


def _get_engine(db):
    from lifequest.config import get_storage_key
    from lifequest.engine import GameEngine
    engine = GameEngine(db=db, storage_key=get_storage_key())
    engine.start()
    return engine


@mcp.tool()
def get_status() -> dict[str, Any]:
    """Get current level, XP, gold, streak, stats and active effects."""
    db = _get_db()
    try:
        engine = _get_engine(db)
        state = engine.state
        xp_in_level, xp_for_next = engine.xp_progress()
        return {
            "level": state.level, "xp": state.xp,
            "xp_in_level": xp_in_level, "xp_for_next": xp_for_next,
            "gold": state.gold, "current_day": state.current_day,
            "streak": state.streak, "iron_mode": state.iron_mode,
            "season_start_date": state.season_start_date,
            "stats": asdict(state.stats),
            "active_buffs": [b.name for b in state.buffs if b.active],
            "active_debuffs": [d.name for d in state.debuffs if d.active],
            "study_minutes_today": engine.study_minutes("today"),
            "study_minutes_week": engine.study_minutes("week"),
            "can_claim_reward": engine.can_claim_reward_today(),
            "can_complete_day": engine.can_complete_day(),
        }
    finally:
        db.close()


@mcp.tool()
def get_achievements() -> dict[str, Any]:
    """Get all achievements with unlock status and progress."""
    db = _get_db()
    try:
        from lifequest.achievements import achievement_progress
        engine = _get_engine(db)
        result = [
            {**row, "progress_pct": int(row["progress"] * 100)}
            for row in achievement_progress(engine.state)
        ]
        return {"achievements": result, "unlocked_count": sum(1 for a in result if a["unlocked"]),
                "total_count": len(result)}
    finally:
        db.close()


@mcp.tool()
def get_today_reward() -> dict[str, Any]:
    """Get today's daily login reward and whether it can still be claimed."""
    db = _get_db()
    try:
        from lifequest.rewards import day_in_cycle
        engine = _get_engine(db)
        reward = engine.today_reward()
        if reward is None:
            return {"error": "No reward is scheduled for today."}
        return {
            "day_in_cycle": day_in_cycle(engine.state.current_day),
            "reward": asdict(reward),
            "can_claim": engine.can_claim_reward_today(),
        }
    finally:
        db.close()


@mcp.tool()
def get_day_history(limit: int = 7) -> dict[str, Any]:
    """Get the most recent end-of-day records, newest first.

    limit: how many days to return (1-90).
    """
    if limit < 1 or limit > 90:
        return {"error": "limit must be between 1 and 90"}
    db = _get_db()
    try:
        engine = _get_engine(db)
        records = engine.state.day_records[-limit:][::-1]
        return {"days": [asdict(r) for r in records], "count": len(records),
                "total_days": len(engine.state.day_records)}
    finally:
        db.close()


@mcp.tool()
def log_study_session(
    subject: str,
    minutes: int,
    study_type: str = "theory",
    quality: int = 3,
    focus: int = 3,
    efficiency: int = 3,
    comment: str | None = None,
) -> dict[str, Any]:
    """Log a study session and return the XP earned plus any unlocks.

    study_type: theory or practice. quality, focus, efficiency: 1-5.
    """
    if study_type not in STUDY_TYPES:
        return {"error": f"Invalid study_type. Must be one of: {', '.join(STUDY_TYPES)}"}
    db = _get_db()
    try:
        engine = _get_engine(db)
        hours, rest = divmod(max(minutes, 0), 60)
        result = engine.log_study(subject, study_type, hours, rest, quality, focus, efficiency, comment)
        if not result.ok:
            return {"error": result.reason}
        return {
            "xp_earned": result.value.xp_earned,
            "level": engine.state.level,
            "xp": engine.state.xp,
            "events": [e.to_dict() for e in result.events],
        }
    finally:
        db.close()


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
