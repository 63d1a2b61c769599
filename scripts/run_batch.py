from __future__ import annotations
import argparse
import csv
import json
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional

from fighters.fighter import Fighter
from fight_engine.bout import FightEngine
from fight_engine.config import EngineConfig, load_config
from fight_engine.stats import FightStatistics

ROOT = Path(__file__).resolve().parents[1]
FIGHTERS_JSON = ROOT / "data" / "fighters.json"


def load_fighters(path: Path = FIGHTERS_JSON) -> Dict[str, Fighter]:
    data = json.loads(path.read_text(encoding="utf-8"))
    fighters = [Fighter.from_record(r) for r in data.get("fighters", [])]
    return {f.name: f for f in fighters}


def simulate_many(n: int = 200, fighter_a: Optional[str] = None, fighter_b: Optional[str] = None,
                  config: Optional[EngineConfig] = None) -> List[Dict]:
    fighters = load_fighters()
    names = list(fighters.keys())
    if fighter_a is None:
        fighter_a = names[0]
    if fighter_b is None:
        fighter_b = next((k for k in names if k != fighter_a), fighter_a)
    A, B = fighters[fighter_a], fighters[fighter_b]

    rows: List[Dict] = []
    for seed in range(n):
        result = FightEngine(A, B, config=config, seed=seed).simulate()
        stats = FightStatistics.from_result(result)
        rows.append({
            "seed": seed,
            "winner": result.winner_name or "",
            "method": result.method.value,
            "round": result.round_ended,
            "end_time": result.end_time,
            "submission": result.submission_type or "",
            "landed_a": stats.red.strikes_landed,
            "landed_b": stats.blue.strikes_landed,
            "takedowns_a": stats.red.takedowns_landed,
            "takedowns_b": stats.blue.takedowns_landed,
        })
    return rows


def write_csv(rows: List[Dict], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if not rows:
        return
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        w.writeheader()
        w.writerows(rows)


if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("-n", type=int, default=200)
    p.add_argument("--a", dest="fighter_a")
    p.add_argument("--b", dest="fighter_b")
    p.add_argument("--config")
    args = p.parse_args()
    data = simulate_many(n=args.n, fighter_a=args.fighter_a, fighter_b=args.fighter_b,
                         config=load_config(args.config))
    out = ROOT / "reports" / "batch_fights.csv"
    write_csv(data, out)
    methods = Counter(r["method"] for r in data)
    print(f"Wrote {len(data)} rows to {out}")
    print("Methods: " + ", ".join(f"{k} {v}" for k, v in methods.most_common()))
