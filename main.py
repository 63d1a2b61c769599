from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from fighters.fighter import Fighter
from fight_engine.bout import FightEngine, FightResult, Method
from fight_engine.config import load_config
from fight_engine.stats import FightStatistics, build_report, format_clock, write_ndjson

DATA_DIR = Path(__file__).parent / "data"
FIGHTERS_JSON = DATA_DIR / "fighters.json"

# UTF-8 console output
try:
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")
except AttributeError:
    pass


def load_fighters(path: Path = FIGHTERS_JSON) -> List[Fighter]:
    if not path.exists():
        print(f"[ERROR] Fighter file not found: {path}")
        sys.exit(1)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"[ERROR] Could not read {path}: {e}")
        sys.exit(1)

    records = data.get("fighters", []) if isinstance(data, dict) else data
    fighters = [Fighter.from_record(r) for r in records]
    if len(fighters) < 2:
        print(f"[ERROR] Need at least two fighters in {path}.")
        sys.exit(1)
    return fighters


def find_fighter(fighters: List[Fighter], key: Optional[str], exclude: Optional[Fighter] = None) -> Fighter:
    """Match by id or (case-insensitive) name; fall back to the first fighter that is not `exclude`."""
    if key:
        for f in fighters:
            if str(f.id) == key or f.name.lower() == key.lower():
                return f
        print(f"[WARNING] Fighter '{key}' not found, using a default.")
    return next(f for f in fighters if f is not exclude)


def print_fight_report(result: FightResult) -> None:
    a, b = result.fighter_names
    print("\n" + "=" * 70)
    print(f"FIGHT REPORT: {a} vs {b}")
    print("=" * 70 + "\n")

    if result.method is Method.DRAW:
        print(f"RESULT: Draw after {result.round_ended} rounds ({result.rounds_won[0]}-{result.rounds_won[1]})")
    elif result.method is Method.DECISION:
        won = max(result.rounds_won)
        lost = min(result.rounds_won)
        print(f"RESULT: {result.winner_name} def. {result.loser_name} by decision ({won}-{lost})")
    else:
        how = result.method.value
        if result.submission_type:
            how = f"{how} ({result.submission_type.replace('_', ' ')})"
        print(f"RESULT: {result.winner_name} def. {result.loser_name} by {how}, "
              f"round {result.round_ended}, {format_clock(result.end_time)} left")

    print("\nROUNDS:")
    for s in result.round_scores:
        who = result.fighter_names[s.winner] if s.winner is not None else "even"
        tb = " (tiebreak)" if s.tiebreak else ""
        print(f"   R{s.round}: {who}{tb} | health lost {s.health_lost[0]:.1f} / {s.health_lost[1]:.1f}")

    stats = FightStatistics.from_result(result)
    print("\nSTATISTICS:")
    for label, st in (("Red", stats.red), ("Blue", stats.blue)):
        print(f"   {label} - {st.name}")
        print(f"      Strikes: {st.strikes_landed}/{st.strikes_thrown} ({st.accuracy:.0%})"
              f" | crits {st.critical_strikes}")
        print(f"      Takedowns: {st.takedowns_landed}/{st.takedowns_attempted}"
              f" | submissions {st.submissions}/{st.submission_attempts}")
        print(f"      Damage dealt {st.damage_dealt:.1f} | absorbed {st.damage_absorbed:.1f}")

    print("\nHEALTH AT THE END:")
    for name, health, cap in zip(result.fighter_names, result.fighter_health, result.fighter_max_health):
        parts = ", ".join(f"{k} {v:.0f}/{cap[k]:.0f}" for k, v in health.items())
        print(f"   {name}: {parts}")
    print("\n" + "=" * 70 + "\n")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Simulate a three-round MMA bout.")
    p.add_argument("--fighters", type=str, default=str(FIGHTERS_JSON), help="Roster JSON file")
    p.add_argument("--a", dest="fighter_a", type=str, help="Red corner (id or name)")
    p.add_argument("--b", dest="fighter_b", type=str, help="Blue corner (id or name)")
    p.add_argument("--seed", type=int)
    p.add_argument("--config", type=str, help="YAML file with engine overrides")
    p.add_argument("--verbose", action="store_true", help="Log every event")
    p.add_argument(
        "--save-json",
        dest="save_json",
        type=lambda v: str(v).lower() not in ("0", "false", "no"),
        default=True,
        help="Save the report as JSON (default True)",
    )
    p.add_argument(
        "--json-path",
        type=str,
        default=str(Path("out") / "last_fight.json"),
        help="Report destination (default out/last_fight.json)",
    )
    p.add_argument("--events", type=str, help="Also write the event timeline as NDJSON to this path")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> Dict:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    fighters = load_fighters(Path(args.fighters))
    red = find_fighter(fighters, args.fighter_a)
    blue = find_fighter(fighters, args.fighter_b, exclude=red)
    if blue is red:
        blue = next(f for f in fighters if f is not red)

    print("\nMMA FIGHT ENGINE")
    print(f"   {red.name} ({red.fighting_style}, {red.record}) vs {blue.name} ({blue.fighting_style}, {blue.record})\n")

    engine = FightEngine(red, blue, config=load_config(args.config), seed=args.seed)
    result = engine.simulate()
    print_fight_report(result)

    report = build_report(result)
    if args.save_json:
        out_path = Path(args.json_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")
    if args.events:
        write_ndjson(engine.events, args.events)
    return report


if __name__ == "__main__":
    main()
