"""Rich terminal display for LifeQuest."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lifequest import events as ev
from lifequest.models import STAT_NAMES

console = Console()

_RARITY_COLORS: dict[str, str] = {
    "common": "grey70",
    "rare": "deep_sky_blue1",
    "epic": "purple",
    "legendary": "orange_red1",
}

_QUALITY_COLORS: dict[str, str] = {
    "poor": "red1",
    "good": "green",
    "excellent": "gold1",
}

_REASON_MESSAGES: dict[str, str] = {
    "already_claimed": "Today's reward has already been claimed.",
    "already_completed": "That is already completed.",
    "already_completed_today": "You have already ended today.",
    "blank_impressions": "Write a few words about your day first.",
    "blank_subject": "A subject is required.",
    "blank_title": "A title is required.",
    "insufficient_gold": "Not enough gold.",
    "invalid_duration": "Duration must be greater than zero.",
    "invalid_hours": "Hours must be positive.",
    "invalid_measurement": "Measurements must be positive.",
    "invalid_rating": "Ratings go from 1 to 5.",
    "invalid_reward": "Rewards cannot be negative.",
    "invalid_save": "That file is not a valid LifeQuest save.",
    "invalid_score": "Score must be between 0 and the maximum score.",
    "invalid_stat": "Unknown stat name.",
    "invalid_type": "Unknown type.",
    "no_reward": "No reward is scheduled for today.",
    "not_found": "Nothing with that id.",
    "not_owned": "You don't own that item.",
    "not_usable": "That item has no effect to use.",
    "unknown_item": "No such item in the shop.",
}


def stat_label(name: str) -> str:
    """focus -> Focus, time_management -> Time Management."""
    return name.replace("_", " ").title()


def format_number(n: int) -> str:
    """Format large numbers: 421543 -> '421.5K', 1200 -> '1,200', 1234567 -> '1.2M'."""
    if n >= 1_000_000:
        value = n / 1_000_000
        if value >= 100:
            return f"{value:.0f}M"
        return f"{value:.1f}M"
    if n >= 10_000:
        value = n / 1_000
        if value >= 1000:
            return f"{value:.0f}K"
        return f"{value:.1f}K"
    return f"{n:,}"


def _xp_bar(current: int, total: int, width: int = 20) -> str:
    """Render a progress bar as text: [████████░░░░░░░░░░░░]."""
    if total <= 0:
        return "[" + "█" * width + "]"
    ratio = max(0.0, min(current / total, 1.0))
    filled = int(ratio * width)
    empty = width - filled
    return "[" + "█" * filled + "░" * empty + "]"


def describe_reason(reason: str | None) -> str:
    return _REASON_MESSAGES.get(reason or "", reason or "Something went wrong.")


def print_failure(reason: str | None) -> None:
    console.print(f"[red]✗[/] {describe_reason(reason)}")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/] {message}")


def format_event(event: ev.Event) -> str:
    """One-line rich markup for a notification event."""
    if event.kind == ev.LEVEL_UP:
        return f"[bold gold1]⬆ LEVEL UP![/] You reached level {event.level}."
    if event.kind == ev.GREETING:
        return "[bold]Welcome back, hero.[/] Another day, another quest."
    if event.kind == ev.ACHIEVEMENT:
        return f"[bold magenta]\U0001f3c6 Achievement unlocked:[/] {event.achievement}"
    if event.kind == ev.DAILY_REWARD:
        return f"[bold cyan]\U0001f381 Daily reward claimed:[/] +{event.xp_reward} XP"
    if event.kind in (ev.QUEST_COMPLETE, ev.GOAL_COMPLETE):
        icon = "✅" if event.kind == ev.QUEST_COMPLETE else "\U0001f3af"
        return f"{icon} [bold]{event.title}[/] {event.message} (+{event.xp_reward} XP)"
    if event.kind == ev.DAY_END:
        color = _QUALITY_COLORS.get(event.day_quality or "", "white")
        return f"[bold {color}]\U0001f307 {event.title}[/] {event.message}"
    return event.kind


def print_events(events: list[ev.Event]) -> None:
    for event in events:
        console.print(format_event(event))


def print_dashboard(data: dict) -> None:
    """Print the main dashboard with level, XP, streak and today's progress."""
    level = data.get("level", 1)
    xp = data.get("xp", 0)
    xp_in_level = data.get("xp_in_level", 0)
    xp_for_next = data.get("xp_for_next", 0)

    lines: list[str] = []
    lines.append("")
    lines.append(f"  [bold gold1]Level {level}[/]  ·  Day {data.get('current_day', 1)}")
    bar = _xp_bar(xp_in_level, xp_for_next)
    lines.append(f"  {bar} {format_number(xp_in_level)}/{format_number(xp_for_next)} XP")
    lines.append(f"  Total: [bold]{format_number(xp)}[/] XP  |  \U0001fa99 Gold: {format_number(data.get('gold', 0))}")
    lines.append("")

    iron = "  \U0001f6e1️  IRON MODE" if data.get("iron_mode") else ""
    lines.append(f"  \U0001f525 Streak: {data.get('streak', 0)} days{iron}")
    lines.append(
        f"  \U0001f4da Today: {data.get('study_today', 0)} min  |  "
        f"Week: {data.get('study_week', 0)} min"
    )

    active = data.get("active_effects", [])
    if active:
        lines.append("")
        lines.append("  [bold]Active effects:[/]")
        for name in active:
            lines.append(f"  • {name}")

    closest = data.get("closest_achievements", [])
    if closest:
        lines.append("")
        lines.append("  [bold]Almost There:[/]")
        for ach in closest[:3]:
            pct = int(ach.get("progress", 0.0) * 100)
            lines.append(f"  ⏳ {ach['name']}: {pct}%")

    reward_state = "ready to claim" if data.get("can_claim") else "claimed"
    lines.append("")
    lines.append(f"  \U0001f381 Daily reward: {reward_state}")
    lines.append(f"  Season since: {data.get('season_start_date', 'unknown')}")
    lines.append("")

    panel = Panel(
        "\n".join(lines),
        title="[bold]LIFEQUEST[/]",
        box=box.ROUNDED,
        border_style="gold1",
        width=56,
    )
    console.print(panel)


def print_stats(stats: dict[str, int], weekly: dict[str, int] | None = None) -> None:
    """Print the 8 stat meters, with the weekly average when given."""
    table = Table(title="Stats", box=box.SIMPLE_HEAVY)
    table.add_column("Stat", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("", no_wrap=True)
    if weekly is not None:
        table.add_column("7-day avg", justify="right")
    for name in STAT_NAMES:
        value = stats.get(name, 0)
        row = [stat_label(name), str(value), _xp_bar(value, 100, width=10)]
        if weekly is not None:
            row.append(str(weekly.get(name, 0)))
        table.add_row(*row)
    console.print(table)


def print_achievements(rows: list[dict]) -> None:
    """Print all achievements with unlock state and progress."""
    table = Table(title="Achievements", box=box.SIMPLE_HEAVY)
    table.add_column("", width=2)
    table.add_column("Achievement", style="bold")
    table.add_column("Description")
    table.add_column("XP", justify="right")
    table.add_column("Progress", justify="right")
    for row in rows:
        mark = "✅" if row["unlocked"] else "\U0001f512"
        progress = "done" if row["unlocked"] else f"{int(row['progress'] * 100)}%"
        table.add_row(mark, row["title"], row["description"], str(row["xp_reward"]), progress)
    console.print(table)
    unlocked = sum(1 for r in rows if r["unlocked"])
    console.print(f"  {unlocked}/{len(rows)} unlocked")


def print_quests(quests: list[dict]) -> None:
    table = Table(title="Quests", box=box.SIMPLE_HEAVY)
    table.add_column("Id", style="dim")
    table.add_column("Type")
    table.add_column("Quest", style="bold")
    table.add_column("XP", justify="right")
    table.add_column("Effects")
    table.add_column("Done", justify="center")
    for q in quests:
        effects = ", ".join(f"{stat_label(k)} +{v}" for k, v in q.get("stat_effects", {}).items())
        table.add_row(
            q["id"], q["type"], q["title"], str(q["xp_reward"]), effects,
            "✅" if q["completed"] else "",
        )
    console.print(table)


def print_goals(goals: list[dict]) -> None:
    table = Table(title="Goals", box=box.SIMPLE_HEAVY)
    table.add_column("Id", style="dim")
    table.add_column("Type")
    table.add_column("Goal", style="bold")
    table.add_column("Hours", justify="right")
    table.add_column("Deadline")
    table.add_column("Done", justify="center")
    for g in goals:
        table.add_row(
            g["id"], g["type"], g["title"],
            f"{g['actual_hours']:g}/{g['planned_hours']:g}", g["deadline"],
            "✅" if g["completed"] else "",
        )
    console.print(table)


def print_shop(items: list[dict], gold: int, inventory: dict[str, int]) -> None:
    table = Table(title=f"Shop  ·  \U0001fa99 {format_number(gold)} gold", box=box.SIMPLE_HEAVY)
    table.add_column("Id", style="dim")
    table.add_column("Item", style="bold")
    table.add_column("Rarity")
    table.add_column("Price", justify="right")
    table.add_column("Effect")
    table.add_column("Owned", justify="right")
    for item in items:
        color = _RARITY_COLORS.get(item["rarity"], "white")
        table.add_row(
            item["id"], f"{item['icon']} {item['name']}", f"[{color}]{item['rarity']}[/]",
            str(item["price"]), item["effect"], str(inventory.get(item["id"], 0) or ""),
        )
    console.print(table)


def print_reward(reward: dict | None, day_in_cycle: int, can_claim: bool) -> None:
    if reward is None:
        console.print("No reward is scheduled for today.")
        return
    item = f" + {reward['item_reward']}" if reward.get("item_reward") else ""
    status = "[green]ready to claim[/]" if can_claim else "[dim]already claimed[/]"
    console.print(
        f"\U0001f381 Day {day_in_cycle}/30: {reward['gold_reward']} gold, "
        f"{reward['xp_reward']} XP{item}  ({status})"
    )


def print_history(records: list[dict]) -> None:
    if not records:
        console.print("No days recorded yet. End your first day with [bold]lifequest end-day[/].")
        return
    table = Table(title="Day history", box=box.SIMPLE_HEAVY)
    table.add_column("Day", justify="right")
    table.add_column("Date")
    table.add_column("Avg stats", justify="right")
    table.add_column("Study", justify="right")
    table.add_column("Quests", justify="right")
    table.add_column("Goals", justify="right")
    table.add_column("Impressions")
    for r in records:
        summary = r["stats_summary"]
        avg = sum(summary.values()) / len(summary) if summary else 0
        table.add_row(
            str(r["day_number"]), r["date"], f"{avg:.0f}", f"{r['total_study_hours']:g}h",
            str(r["completed_quests"]), str(r["completed_goals"]), r["impressions"],
        )
    console.print(table)


def print_season_result(record: dict) -> None:
    lines = [
        f"  {record['start_date']} → {record['end_date']}",
        f"  Days: {record['total_days']}  |  Max streak: {record['max_streak']}",
        f"  XP: {format_number(record['total_xp'])}  |  Final level: {record['final_level']}",
        f"  Study: {record['total_study_hours']:g} hours",
    ]
    console.print(Panel("\n".join(lines), title="[bold]Season archived[/]", box=box.ROUNDED, width=56))
