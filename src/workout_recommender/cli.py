#!/usr/bin/env python3
"""
Workout Recommender CLI.

Daily strength workout recommendations from a JSON snapshot of workout
history, exercise catalog, check-in and profile.

Usage:
    workout-recommender recommend snapshot.json
    workout-recommender recommend snapshot.json --now 2024-03-04T08:00:00 --json
    workout-recommender coverage snapshot.json
    workout-recommender features snapshot.json
    workout-recommender metrics snapshot.json --user u1 --date 2024-03-03
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime
from typing import List, Optional

from .config import get_settings
from .exceptions import RecommenderError
from .models.snapshot import EngineSnapshot, load_snapshot
from .recommendations.coverage import summarize_coverage
from .recommendations.engine import EngineResult, RecommendationEngine
from .services.daily_metrics import calculate_daily_metrics


# ANSI color codes
class Colors:
    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


def get_type_color(workout_type: str) -> str:
    """Get color for workout type."""
    colors = {
        "push": Colors.CYAN,
        "pull": Colors.BLUE,
        "legs": Colors.GREEN,
        "pt": Colors.YELLOW,
        "rest": Colors.RED,
    }
    return colors.get(workout_type, Colors.RESET)


def format_priority(priority: float) -> str:
    """Format a 0-1 priority with color."""
    if priority >= 0.8:
        color = Colors.RED
    elif priority >= 0.5:
        color = Colors.YELLOW
    else:
        color = Colors.GREEN
    return f"{color}{priority:.2f}{Colors.RESET}"


def parse_now(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO timestamp: {value!r}") from None


def run_engine(snapshot: EngineSnapshot, now: Optional[datetime]) -> EngineResult:
    return RecommendationEngine(settings=get_settings()).generate(snapshot, now=now)


def cmd_recommend(args, snapshot: EngineSnapshot):
    """Print today's recommendation."""
    result = run_engine(snapshot, args.now)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    output = result.output
    color = get_type_color(output.workout_type.value)
    print()
    print(f"{Colors.BOLD}Workout Recommender - Today's Plan{Colors.RESET}")
    print("=" * 50)
    print()
    print(f"Workout type: {color}{output.workout_type.value.upper()}{Colors.RESET}")
    print(f"Duration:     {output.estimated_duration} min")
    print(f"Confidence:   {output.confidence:.0%}")
    print()

    if output.exercises:
        print(f"{'#':<3} {'Exercise':<28} {'Sets x Reps':>11} {'Score':>6}")
        print("-" * 52)
        for i, exercise in enumerate(output.exercises, 1):
            volume = f"{exercise.suggested_sets} x {exercise.suggested_reps}"
            print(f"{i:<3} {exercise.exercise_name:<28} {volume:>11} {exercise.priority:>6.2f}")
            for note in exercise.reasoning:
                print(f"      - {note}")
        print()

    print("Why:")
    for line in output.reasoning:
        print(f"  - {line}")
    print()


def cmd_coverage(args, snapshot: EngineSnapshot):
    """Show muscle coverage, highest fill-gap priority first."""
    result = run_engine(snapshot, args.now)

    print()
    print(f"{Colors.BOLD}Workout Recommender - Muscle Coverage{Colors.RESET}")
    print("=" * 62)
    print()

    if not result.coverage_top:
        print("No muscles in the exercise catalog.")
        print()
        return

    print(f"{'Muscle':<16} {'7d':>9} {'30d':>9} {'Last (h)':>9} {'Gap':>8} {'Priority':>8}")
    print("-" * 62)
    for entry in result.coverage_top:
        hours = "never" if entry.last_stimulus is None else f"{entry.hours_since_stimulus:.0f}"
        flag = f" {Colors.YELLOW}*{Colors.RESET}" if entry.is_undertrained else ""
        print(
            f"{entry.muscle_name:<16} "
            f"{entry.stimulus_7d:>9.0f} "
            f"{entry.stimulus_30d:>9.0f} "
            f"{hours:>9} "
            f"{entry.gap:>8.0f} "
            f"{format_priority(entry.priority):>8}{flag}"
        )

    summary = summarize_coverage(result.coverage_top)
    print()
    print(f"Undertrained (*): {summary['undertrained_count']}")
    print()


def cmd_features(args, snapshot: EngineSnapshot):
    """Print the feature vector as canonical JSON."""
    result = run_engine(snapshot, args.now)
    print(result.features.to_json())


def cmd_metrics(args, snapshot: EngineSnapshot):
    """Show daily training metrics."""
    day = args.date or (args.now or datetime.now()).date()
    user_id = args.user
    if user_id is None and snapshot.workouts:
        user_id = snapshot.workouts[0].user_id
    if user_id is None:
        print("No workouts in snapshot and no --user given.")
        return

    checkin = snapshot.checkin if snapshot.checkin and snapshot.checkin.date == day else None
    metrics = calculate_daily_metrics(user_id, day, snapshot.workouts, checkin)

    print()
    print(f"{Colors.BOLD}Workout Recommender - Daily Metrics ({day.isoformat()}){Colors.RESET}")
    print("=" * 50)
    print()
    print(f"  Workouts:      {metrics.workout_count}")
    print(f"  Total volume:  {metrics.total_volume or 0:.0f}")
    intensity = f"{metrics.avg_intensity:.2f}" if metrics.avg_intensity is not None else "-"
    print(f"  Avg intensity: {intensity}")
    print(f"  Muscles hit:   {', '.join(metrics.muscle_groups_hit) or '-'}")
    if metrics.sleep_hours is not None:
        print(f"  Sleep:         {metrics.sleep_hours:g} h")
    if metrics.avg_soreness is not None:
        print(f"  Avg soreness:  {metrics.avg_soreness:.1f}")
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workout-recommender",
        description="Workout Recommender - daily strength training recommendations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  workout-recommender recommend snapshot.json
  workout-recommender recommend snapshot.json --now 2024-03-04T08:00:00 --json
  workout-recommender coverage snapshot.json
  workout-recommender features snapshot.json
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_snapshot_args(p):
        p.add_argument("snapshot", help="Path to a JSON snapshot")
        p.add_argument("--now", type=parse_now, help="Evaluation time (ISO 8601), defaults to now")

    # Recommend command
    recommend_p = subparsers.add_parser("recommend", help="Recommend today's workout")
    add_snapshot_args(recommend_p)
    recommend_p.add_argument("--json", action="store_true", help="Print the full result as JSON")

    # Coverage command
    coverage_p = subparsers.add_parser("coverage", help="Show muscle coverage gaps")
    add_snapshot_args(coverage_p)

    # Features command
    features_p = subparsers.add_parser("features", help="Print the model feature vector")
    add_snapshot_args(features_p)

    # Metrics command
    metrics_p = subparsers.add_parser("metrics", help="Show daily training metrics")
    add_snapshot_args(metrics_p)
    metrics_p.add_argument("--user", help="User id (defaults to the first workout's user)")
    metrics_p.add_argument("--date", type=date.fromisoformat, help="Day to summarize (YYYY-MM-DD)")

    return parser


COMMANDS = {
    "recommend": cmd_recommend,
    "coverage": cmd_coverage,
    "features": cmd_features,
    "metrics": cmd_metrics,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        snapshot = load_snapshot(args.snapshot)
        command(args, snapshot)
    except RecommenderError as e:
        print(f"{Colors.RED}Error: {e.message}{Colors.RESET}", file=sys.stderr)
        for error in e.details.get("errors", []):
            location = ".".join(str(part) for part in error.get("loc", ()))
            print(f"  {location}: {error.get('msg')}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
