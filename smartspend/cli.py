"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date

from .advisor import (
    get_coach_advice,
    get_health_alert,
    get_meal_ideas,
    get_monthly_report,
)
from .ai import AIBackend, create_backend
from .config import SmartSpendConfig, load_config
from .db import ProfileStore, TransactionStore
from .goals import GoalProgress
from .tracker import Tracker


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="smartspend",
        description="Smart expense tracker with AI categorization and coaching",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the config file (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    add_parser = sub.add_parser("add", help="Log an expense and let the AI classify it")
    add_parser.add_argument("name", type=str, help="Item or service, e.g. \"McDonald's\"")
    add_parser.add_argument("amount", type=float, help="Amount spent")
    add_parser.add_argument(
        "--date", type=date.fromisoformat, default=None, help="YYYY-MM-DD (default: today)"
    )

    list_parser = sub.add_parser("list", help="Show logged transactions")
    list_parser.add_argument("--limit", type=int, default=20)
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    dash_parser = sub.add_parser("dashboard", help="This month's summary")
    dash_parser.add_argument("--json", action="store_true", help="Output as JSON")

    sub.add_parser("goals", help="Goal progress and challenges")
    sub.add_parser("coach", help="AI savings tips and health alert")
    sub.add_parser("meals", help="Healthier alternatives to this month's junk food")
    sub.add_parser("report", help="AI monthly report")

    settings_parser = sub.add_parser("settings", help="Show or change monthly limits")
    settings_parser.add_argument("--junk-limit", type=float, default=None)
    settings_parser.add_argument("--impulse-limit", type=float, default=None)
    settings_parser.add_argument("--savings-goal", type=float, default=None)

    sub.add_parser("daemon", help="Run the scheduled daily digest")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from dotenv import load_dotenv

    load_dotenv()
    try:
        config = load_config(args.config)
        backend = create_backend(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "daemon":
        _cmd_daemon(config, backend)
        return

    store = TransactionStore(config.database.path)
    profiles = ProfileStore(config.database.path)
    tracker = Tracker(
        store,
        profiles,
        backend,
        config.user.owner_id,
        defaults=config.profile.to_profile(),
        email=config.user.email,
    )
    try:
        with tracker:
            match args.command:
                case "add":
                    asyncio.run(_cmd_add(tracker, args))
                case "list":
                    _cmd_list(tracker, args)
                case "dashboard":
                    _cmd_dashboard(tracker, args)
                case "goals":
                    _cmd_goals(tracker)
                case "coach":
                    asyncio.run(_cmd_coach(tracker, config))
                case "meals":
                    asyncio.run(_cmd_meals(tracker))
                case "report":
                    asyncio.run(_cmd_report(tracker))
                case "settings":
                    _cmd_settings(tracker, args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        store.close()
        profiles.close()


def _print_notifications(tracker: Tracker) -> None:
    while tracker.notifications:
        n = tracker.notifications.popleft()
        stream = sys.stderr if n.type == "error" else sys.stdout
        print(n.message, file=stream)


async def _cmd_add(tracker: Tracker, args) -> None:
    print("✨ AI is analyzing...")
    tx = await tracker.add_transaction(args.name, args.amount, on=args.date)
    tags = [tx.category]
    if tx.food_tag:
        tags.append(tx.food_tag)
    if tx.is_impulse:
        tags.append("Impulse")
    print(f"  {tx.name}  ₹{tx.amount:.2f}  [{', '.join(tags)}]")
    _print_notifications(tracker)


def _cmd_list(tracker: Tracker, args) -> None:
    transactions = tracker.transactions[: args.limit]
    if args.json:
        print(json.dumps([t.to_dict() for t in transactions], ensure_ascii=False, indent=2))
        return
    if not transactions:
        print("No transactions yet.")
        return
    for t in transactions:
        tags = t.category + (f"/{t.food_tag}" if t.food_tag else "")
        impulse = " impulse" if t.is_impulse else ""
        print(f"  {t.date}  {t.name:<24} ₹{t.amount:>10.2f}  {tags}{impulse}")


def _cmd_dashboard(tracker: Tracker, args) -> None:
    a = tracker.analysis
    profile = tracker.profile
    if args.json:
        data = {
            "analysis": a.to_dict(),
            "streaks": {
                "noJunkFood": tracker.streaks.no_junk_food,
                "noImpulseSpending": tracker.streaks.no_impulse_spending,
            },
            "badges": [b.name for b in tracker.badges],
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    progress = tracker.goal_progress
    junk_state = "over limit" if progress.junk_over_limit else "ok"
    impulse_state = "over limit" if progress.impulse_over_limit else "ok"
    print(f"📅 {a.year}-{a.month:02d} summary")
    print(f"  Total spent          ₹{a.total_spent:.2f}")
    print(
        f"  Unnecessary spending ₹{a.unnecessary_spending:.2f} "
        f"({a.unnecessary_pct:.1f}% of total)"
    )
    print(
        f"  Junk food spending   ₹{a.junk_food_spending:.2f} "
        f"(limit ₹{profile.junk_food_limit:g}, {junk_state})"
    )
    print(
        f"  Impulse purchases    ₹{a.impulse_spending:.2f} "
        f"(limit ₹{profile.impulse_spending_limit:g}, {impulse_state})"
    )
    print(f"  Calories from food   {a.total_calories:,.0f} kcal")
    print()
    print(f"🥗 {tracker.streaks.no_junk_food} days without junk food")
    print(f"🛍️  {tracker.streaks.no_impulse_spending} days without impulse buys")
    badges = tracker.badges
    if badges:
        print("Badges: " + ", ".join(f"{b.icon} {b.name}" for b in badges))
    else:
        print("Keep up the good habits!")
    if a.category_breakdown:
        print()
        print("Spending by category:")
        for s in sorted(a.category_breakdown, key=lambda s: s.value, reverse=True):
            print(f"  {s.name:<14} ₹{s.value:.2f}")
    if tracker.transactions:
        print()
        print("Recent transactions:")
        for t in tracker.transactions[:5]:
            print(f"  {t.date}  {t.name:<24} -₹{t.amount:.2f}")


def _bar(pct: float, width: int = 20) -> str:
    filled = int(GoalProgress.clamped(pct) / 100 * width)
    return "█" * filled + "░" * (width - filled)


def _cmd_goals(tracker: Tracker) -> None:
    a = tracker.analysis
    profile = tracker.profile
    p = tracker.goal_progress
    print(
        f"Junk food budget  ₹{a.junk_food_spending:.0f} / ₹{profile.junk_food_limit:g}"
        f"  {_bar(p.junk_food_pct)}"
    )
    print(
        f"Impulse limit     ₹{a.impulse_spending:.0f} / ₹{profile.impulse_spending_limit:g}"
        f"  {_bar(p.impulse_pct)}"
    )
    print(f"Savings goal      save ₹{p.remaining_savings:.0f}  {_bar(p.savings_pct)}")
    print()
    for c in tracker.challenges:
        status = "✅" if c.completed else "⏳"
        print(f"{status} {c.icon} {c.name}: {c.description}")


async def _cmd_coach(tracker: Tracker, config: SmartSpendConfig) -> None:
    backend = tracker.backend
    alert = await get_health_alert(
        backend,
        tracker.transactions,
        date.today(),
        window_days=config.coach.alert_window_days,
        threshold=config.coach.alert_threshold,
    )
    if alert:
        print("💡 Health & Wellness Tip")
        print(alert)
        print()
    print("AI Savings Coach")
    print(
        await get_coach_advice(
            backend, tracker.transactions, config.coach.recent_transactions
        )
    )


async def _cmd_meals(tracker: Tracker) -> None:
    print(await get_meal_ideas(tracker.backend, tracker.analysis))


async def _cmd_report(tracker: Tracker) -> None:
    print("✨ Analyzing your month...")
    print(await get_monthly_report(tracker.backend, tracker.analysis))


def _cmd_settings(tracker: Tracker, args) -> None:
    partial = {
        key: value
        for key, value in (
            ("junk_food_limit", args.junk_limit),
            ("impulse_spending_limit", args.impulse_limit),
            ("savings_goal", args.savings_goal),
        )
        if value is not None
    }
    if partial and not tracker.update_settings(**partial):
        _print_notifications(tracker)
        sys.exit(1)
    _print_notifications(tracker)

    profile = tracker.profile
    print(f"  Junk food limit       ₹{profile.junk_food_limit:g}")
    print(f"  Impulse spending limit ₹{profile.impulse_spending_limit:g}")
    print(f"  Monthly savings goal  ₹{profile.savings_goal:g}")


def _cmd_daemon(config: SmartSpendConfig, backend: AIBackend) -> None:
    from .scheduler import DigestScheduler

    try:
        scheduler = DigestScheduler(config, backend=backend)
    except ImportError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    async def run() -> None:
        scheduler.start()
        try:
            await asyncio.Event().wait()
        finally:
            scheduler.stop()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass
