"""CLI commands for LifeQuest."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from pathlib import Path

from lifequest import events as ev
from lifequest.achievements import (
    achievement_progress,
    build_achievement_stats,
    check_achievements,
    get_closest_achievements,
)
from lifequest.catalog import SHOP_ITEMS
from lifequest.config import get_db_path, get_storage_key
from lifequest.db import Database
from lifequest.display import (
    console,
    print_achievements,
    print_dashboard,
    print_events,
    print_failure,
    print_goals,
    print_history,
    print_quests,
    print_reward,
    print_season_result,
    print_shop,
    print_stats,
    print_success,
)
from lifequest.engine import CommandResult, GameEngine
from lifequest.models import GOAL_TYPES, QUEST_TYPES, SPORT_TYPES, STAT_NAMES, STUDY_TYPES, Stats
from lifequest.rewards import day_in_cycle


def _parse_stat_pairs(pairs: list[str] | None) -> dict[str, int]:
    """Turn ["focus=5", "study=10"] into {"focus": 5, "study": 10}."""
    effects: dict[str, int] = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"expected STAT=VALUE, got {pair!r}")
        try:
            effects[name.strip()] = int(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"{pair!r}: value must be an integer") from exc
    return effects


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lifequest",
        description="Turn study, sport and habits into XP, levels and quests",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("dashboard", help="Show main dashboard")
    subparsers.add_parser("stats", help="Show the 8 stat meters")
    subparsers.add_parser("achievements", help="List all achievements")
    subparsers.add_parser("history", help="Show archived end-of-day records")

    study_p = subparsers.add_parser("study", help="Log a study session")
    study_p.add_argument("subject")
    study_p.add_argument("--type", dest="study_type", choices=STUDY_TYPES, default="theory")
    study_p.add_argument("--hours", type=int, default=0)
    study_p.add_argument("--minutes", type=int, default=0)
    study_p.add_argument("--quality", type=int, default=3)
    study_p.add_argument("--focus", type=int, default=3)
    study_p.add_argument("--efficiency", type=int, default=3)
    study_p.add_argument("--comment", default=None)

    goal_p = subparsers.add_parser("goal", help="Manage goals")
    goal_sub = goal_p.add_subparsers(dest="goal_command")
    goal_add = goal_sub.add_parser("add", help="Create a goal")
    goal_add.add_argument("title")
    goal_add.add_argument("--type", dest="goal_type", choices=GOAL_TYPES, default="daily")
    goal_add.add_argument("--hours", type=float, required=True, help="Planned hours")
    goal_add.add_argument("--deadline", default=None, help="YYYY-MM-DD")
    goal_update = goal_sub.add_parser("update", help="Update hours or complete a goal")
    goal_update.add_argument("goal_id")
    goal_update.add_argument("--actual", type=float, default=None, help="Hours spent so far")
    goal_update.add_argument("--planned", type=float, default=None, help="New planned hours")
    goal_update.add_argument("--complete", action="store_true")
    goal_sub.add_parser("list", help="List goals")

    quest_p = subparsers.add_parser("quest", help="Manage quests")
    quest_sub = quest_p.add_subparsers(dest="quest_command")
    quest_add = quest_sub.add_parser("add", help="Create a quest")
    quest_add.add_argument("title")
    quest_add.add_argument("--type", dest="quest_type", choices=QUEST_TYPES, default="daily")
    quest_add.add_argument("--xp", type=int, default=50)
    quest_add.add_argument("--effect", action="append", metavar="STAT=VALUE", help="Stat effect, repeatable")
    quest_add.add_argument("--description", default="")
    quest_add.add_argument("--deadline", default=None)
    quest_complete = quest_sub.add_parser("complete", help="Complete a quest")
    quest_complete.add_argument("quest_id")
    quest_delete = quest_sub.add_parser("delete", help="Delete a quest")
    quest_delete.add_argument("quest_id")
    quest_sub.add_parser("list", help="List quests")

    buff_p = subparsers.add_parser("buff", help="Toggle a buff")
    buff_p.add_argument("buff_id")
    debuff_p = subparsers.add_parser("debuff", help="Toggle a debuff")
    debuff_p.add_argument("debuff_id")
    subparsers.add_parser("iron-mode", help="Toggle iron mode")

    shop_p = subparsers.add_parser("shop", help="Browse and use the shop")
    shop_sub = shop_p.add_subparsers(dest="shop_command")
    shop_sub.add_parser("list", help="List shop items")
    shop_buy = shop_sub.add_parser("buy", help="Buy an item")
    shop_buy.add_argument("item_id")
    shop_use = shop_sub.add_parser("use", help="Use an owned item")
    shop_use.add_argument("item_id")

    reward_p = subparsers.add_parser("reward", help="Daily login reward")
    reward_sub = reward_p.add_subparsers(dest="reward_command")
    reward_sub.add_parser("show", help="Show today's reward")
    reward_sub.add_parser("claim", help="Claim today's reward")

    exam_p = subparsers.add_parser("exam", help="Record a practice test result")
    exam_p.add_argument("subject")
    exam_p.add_argument("score", type=float)
    exam_p.add_argument("max_score", type=float)
    exam_p.add_argument("--name", dest="test_name", default="Practice test")
    exam_p.add_argument("--notes", default=None)

    sport_p = subparsers.add_parser("sport", help="Log a workout")
    sport_p.add_argument("sport_type", choices=SPORT_TYPES)
    sport_p.add_argument("--duration", type=int, required=True, help="Minutes")
    sport_p.add_argument("--intensity", type=int, default=3)
    sport_p.add_argument("--reps", type=int, default=None)
    sport_p.add_argument("--distance", type=float, default=None, help="Kilometres")
    sport_p.add_argument("--notes", default=None)

    weight_p = subparsers.add_parser("weight", help="Record body weight")
    weight_p.add_argument("weight", type=float)
    weight_p.add_argument("--height", type=float, default=None)

    end_p = subparsers.add_parser("end-day", help="Close out today")
    end_p.add_argument("impressions")
    for name in STAT_NAMES:
        end_p.add_argument(f"--{name.replace('_', '-')}", dest=name, type=int, default=None)
    end_p.add_argument("--weight", type=float, default=None)

    subparsers.add_parser("season", help="Archive this season and start a new one")
    subparsers.add_parser("break-streak", help="Reset your streak to zero")

    export_p = subparsers.add_parser("export", help="Export the save to a JSON file")
    export_p.add_argument("--output", "-o", default=None, help="Output file path")
    import_p = subparsers.add_parser("import", help="Replace the save with a JSON file")
    import_p.add_argument("path")
    reset_p = subparsers.add_parser("reset", help="Delete all progress")
    reset_p.add_argument("--yes", action="store_true", help="Confirm the reset")
    return parser


def main() -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args()
    command = args.command or "dashboard"

    db = Database(get_db_path())
    try:
        engine = GameEngine(db=db, storage_key=get_storage_key())
        started = engine.start()
        greeting_shown = command == "dashboard"
        print_events([e for e in started.events if greeting_shown or e.kind != ev.GREETING])
        run_command(engine, command, args)
    finally:
        db.close()


def run_command(engine: GameEngine, command: str, args: argparse.Namespace) -> CommandResult | None:
    """Dispatch a parsed command to the engine."""
    if command == "dashboard":
        do_dashboard(engine)
    elif command == "stats":
        do_stats(engine)
    elif command == "achievements":
        do_achievements(engine)
    elif command == "history":
        do_history(engine)
    elif command == "study":
        return report(
            engine.log_study(
                args.subject, args.study_type, args.hours, args.minutes,
                args.quality, args.focus, args.efficiency, args.comment,
            ),
            lambda e: f"Logged {e.subject}: +{e.xp_earned} XP",
        )
    elif command == "goal":
        return do_goal(engine, args)
    elif command == "quest":
        return do_quest(engine, args)
    elif command == "buff":
        return report(engine.toggle_buff(args.buff_id), lambda b: f"{b.name}: {'on' if b.active else 'off'}")
    elif command == "debuff":
        return report(engine.toggle_debuff(args.debuff_id), lambda d: f"{d.name}: {'on' if d.active else 'off'}")
    elif command == "iron-mode":
        return report(engine.toggle_iron_mode(), lambda on: f"Iron mode {'on' if on else 'off'}")
    elif command == "shop":
        return do_shop(engine, args)
    elif command == "reward":
        return do_reward(engine, args)
    elif command == "exam":
        return report(
            engine.add_exam_result(args.subject, args.score, args.max_score, args.test_name, args.notes),
            lambda r: f"Recorded {r.test_name} ({r.subject}): {r.score:g}/{r.max_score:g}",
        )
    elif command == "sport":
        return report(
            engine.add_sport_entry(
                args.sport_type, args.duration, args.intensity, args.reps, args.distance, args.notes,
            ),
            lambda s: f"Logged {s.type}: {s.duration} min",
        )
    elif command == "weight":
        return report(engine.log_body_metrics(args.weight, args.height), lambda m: f"Weight {m.weight:g} kg")
    elif command == "end-day":
        return do_end_day(engine, args)
    elif command == "season":
        result = engine.start_new_season()
        print_season_result(asdict(result.value))
        return result
    elif command == "break-streak":
        return report(engine.break_streak(), lambda _: "Streak reset to 0")
    elif command == "export":
        return do_export(engine, output=args.output)
    elif command == "import":
        return do_import(engine, Path(args.path))
    elif command == "reset":
        return do_reset(engine, confirmed=args.yes)
    return None


def report(result: CommandResult, describe) -> CommandResult:
    """Print a command outcome and the events it produced."""
    if result.ok:
        print_success(describe(result.value))
    else:
        print_failure(result.reason)
    print_events(result.events)
    return result


def do_dashboard(engine: GameEngine) -> dict:
    """Show main dashboard with level, XP, streak and progress."""
    state = engine.state
    xp_in_level, xp_for_next = engine.xp_progress()
    statuses = check_achievements(build_achievement_stats(state))
    closest = [
        {"name": a.title, "progress": s.progress}
        for a, s in get_closest_achievements(state, statuses)
    ]
    active = [b.name for b in state.buffs if b.active] + [d.name for d in state.debuffs if d.active]
    data = {
        "level": state.level,
        "xp": state.xp,
        "xp_in_level": xp_in_level,
        "xp_for_next": xp_for_next,
        "gold": state.gold,
        "current_day": state.current_day,
        "streak": state.streak,
        "iron_mode": state.iron_mode,
        "study_today": engine.study_minutes("today"),
        "study_week": engine.study_minutes("week"),
        "active_effects": active,
        "closest_achievements": closest,
        "can_claim": engine.can_claim_reward_today(),
        "season_start_date": state.season_start_date,
    }
    print_dashboard(data)
    return data


def do_stats(engine: GameEngine) -> None:
    print_stats(asdict(engine.state.stats), asdict(engine.weekly_stats_average()))


def do_achievements(engine: GameEngine) -> None:
    print_achievements(achievement_progress(engine.state))


def do_history(engine: GameEngine) -> None:
    print_history([asdict(r) for r in engine.state.day_records])


def do_goal(engine: GameEngine, args: argparse.Namespace) -> CommandResult | None:
    sub = getattr(args, "goal_command", None)
    if sub == "add":
        return report(
            engine.add_goal(args.title, args.goal_type, args.hours, args.deadline),
            lambda g: f"Goal created: {g.title} ({g.id})",
        )
    if sub == "update":
        return report(
            engine.update_goal(
                args.goal_id, actual_hours=args.actual, planned_hours=args.planned,
                completed=True if args.complete else None,
            ),
            lambda g: f"Goal updated: {g.title}",
        )
    print_goals([asdict(g) for g in engine.state.goals])
    return None


def do_quest(engine: GameEngine, args: argparse.Namespace) -> CommandResult | None:
    sub = getattr(args, "quest_command", None)
    if sub == "add":
        try:
            effects = _parse_stat_pairs(args.effect)
        except argparse.ArgumentTypeError as exc:
            console.print(f"[red]✗[/] {exc}")
            return None
        return report(
            engine.add_quest(
                args.title, args.quest_type, args.xp, effects, args.description, args.deadline,
            ),
            lambda q: f"Quest created: {q.title} ({q.id})",
        )
    if sub == "complete":
        return report(engine.complete_quest(args.quest_id), lambda q: f"Completed {q.title}")
    if sub == "delete":
        return report(engine.delete_quest(args.quest_id), lambda q: f"Deleted {q.title}")
    print_quests([asdict(q) for q in engine.state.quests])
    return None


def do_shop(engine: GameEngine, args: argparse.Namespace) -> CommandResult | None:
    sub = getattr(args, "shop_command", None)
    if sub == "buy":
        return report(engine.buy_item(args.item_id), lambda inv: f"Bought {inv.item_id} (x{inv.quantity})")
    if sub == "use":
        return report(
            engine.use_item(args.item_id),
            lambda buff: f"Used {args.item_id}" + (f", {buff.name} active" if buff else ""),
        )
    owned = {i.item_id: i.quantity for i in engine.state.inventory}
    items = [
        {"id": i.id, "name": i.name, "icon": i.icon, "rarity": i.rarity.value, "price": i.price, "effect": i.effect}
        for i in SHOP_ITEMS
    ]
    print_shop(items, engine.state.gold, owned)
    return None


def do_reward(engine: GameEngine, args: argparse.Namespace) -> CommandResult | None:
    if getattr(args, "reward_command", None) == "claim":
        return report(
            engine.claim_daily_reward(),
            lambda r: f"+{r.gold_reward} gold" + (f", +1 {r.item_reward}" if r.item_reward else ""),
        )
    reward = engine.today_reward()
    print_reward(
        asdict(reward) if reward else None,
        day_in_cycle(engine.state.current_day),
        engine.can_claim_reward_today(),
    )
    return None


def do_end_day(engine: GameEngine, args: argparse.Namespace) -> CommandResult:
    """Close out today. Stats not given on the command line keep their current value."""
    current = asdict(engine.state.stats)
    daily = Stats(**{
        name: getattr(args, name) if getattr(args, name) is not None else current[name]
        for name in STAT_NAMES
    })
    return report(
        engine.end_day(args.impressions, daily, args.weight),
        lambda r: f"Day {r.day_number} archived",
    )


def do_export(engine: GameEngine, output: str | None = None) -> CommandResult:
    path = Path(output) if output else Path(engine.export_filename())
    path.write_text(engine.export_save() + "\n", encoding="utf-8")
    print_success(f"Save exported to {path}")
    return CommandResult(ok=True, value=path)


def do_import(engine: GameEngine, path: Path) -> CommandResult:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        result = CommandResult(ok=False, reason="invalid_save")
    else:
        result = engine.import_save(text)
    return report(result, lambda _: f"Save imported from {path}")


def do_reset(engine: GameEngine, confirmed: bool = False) -> CommandResult:
    if not confirmed:
        console.print("This deletes all progress. Re-run with [bold]--yes[/] to confirm.")
        return CommandResult(ok=False, reason="not_confirmed")
    return report(engine.reset_all(), lambda _: "All progress deleted")
