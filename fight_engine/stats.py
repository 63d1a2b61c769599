# fight_engine/stats.py
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from fight_engine.bout import FightResult
from fight_engine.events import FightEvent
from fight_engine.reference import StrikeType

STRIKE_COUNTERS = ('thrown', 'landed', 'blocked', 'evaded', 'missed')


@dataclass
class FighterStats:
    name: str = ""
    strikes_thrown: int = 0
    strikes_landed: int = 0
    strikes_missed: int = 0
    punches_landed: int = 0
    kicks_landed: int = 0
    critical_strikes: int = 0
    knockdowns: int = 0
    takedowns_attempted: int = 0
    takedowns_landed: int = 0
    takedowns_defended: int = 0
    submission_attempts: int = 0
    submissions: int = 0
    damage_dealt: float = 0.0
    damage_absorbed: float = 0.0
    rounds_won: int = 0
    # per strike type: {'jab': {'thrown': 4, 'landed': 2, ...}}
    by_strike: Dict[str, Dict[str, int]] = field(default_factory=dict)

    @property
    def accuracy(self) -> float:
        if self.strikes_thrown <= 0:
            return 0.0
        return self.strikes_landed / self.strikes_thrown

    @classmethod
    def from_counters(cls, name: str, counters: Mapping[str, float], rounds_won: int = 0) -> 'FighterStats':
        def c(key: str) -> int:
            return int(counters.get(key, 0))

        by_strike = {}
        for strike in StrikeType:
            counts = {k: c(f'{strike.value}_{k}') for k in STRIKE_COUNTERS}
            if counts['thrown']:
                by_strike[strike.value] = counts
        return cls(
            name=name,
            strikes_thrown=c('strikes_thrown'),
            strikes_landed=c('strikes_landed'),
            strikes_missed=c('strikes_missed'),
            punches_landed=c('punch_landed'),
            kicks_landed=c('kick_landed'),
            critical_strikes=c('critical_strikes'),
            knockdowns=c('knockdowns'),
            # a clinch takedown counts as a takedown
            takedowns_attempted=c('takedown_attempts') + c('clinch_takedown_attempts'),
            takedowns_landed=c('takedown_success') + c('clinch_takedown_success'),
            takedowns_defended=c('takedown_defended') + c('clinch_takedown_defended'),
            submission_attempts=c('submission_attempts'),
            submissions=c('submissions'),
            damage_dealt=round(float(counters.get('damage_dealt', 0.0)), 2),
            damage_absorbed=round(float(counters.get('damage_absorbed', 0.0)), 2),
            rounds_won=rounds_won,
            by_strike=by_strike,
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['accuracy'] = round(self.accuracy, 3)
        return d


@dataclass
class FightStatistics:
    """Red corner is the first fighter, blue the second."""
    red: FighterStats
    blue: FighterStats

    @classmethod
    def from_result(cls, result: FightResult) -> 'FightStatistics':
        red, blue = (
            FighterStats.from_counters(name, counters, won)
            for name, counters, won in zip(result.fighter_names, result.fighter_stats, result.rounds_won)
        )
        return cls(red=red, blue=blue)

    def totals(self) -> Dict[str, Dict[str, int]]:
        return {
            'total_strikes': {'red': self.red.strikes_thrown, 'blue': self.blue.strikes_thrown},
            'strikes_landed': {'red': self.red.strikes_landed, 'blue': self.blue.strikes_landed},
            'takedowns': {'red': self.red.takedowns_landed, 'blue': self.blue.takedowns_landed},
            'submission_attempts': {'red': self.red.submission_attempts, 'blue': self.blue.submission_attempts},
        }

    def to_report_block(self) -> Dict[str, Any]:
        return {
            'red': self.red.to_dict(),
            'blue': self.blue.to_dict(),
            'totals': self.totals(),
        }


def format_clock(seconds: int) -> str:
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def build_report(result: FightResult) -> Dict[str, Any]:
    """Result plus the red/blue statistics block, ready for JSON."""
    report = result.to_dict()
    report['end_clock'] = format_clock(result.end_time)
    report['statistics'] = FightStatistics.from_result(result).to_report_block()
    return report


def _event_dicts(events: Iterable[Union[FightEvent, Mapping[str, Any]]]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for e in events:
        out.append(e.to_dict() if isinstance(e, FightEvent) else dict(e))
    return out


def write_ndjson(events: Iterable[Union[FightEvent, Mapping[str, Any]]], path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w', encoding='utf-8') as f:
        for rec in _event_dicts(events):
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")
    return path


def export(result: FightResult, events: Iterable[FightEvent], seed: Optional[int] = None,
           out_dir: Union[str, Path] = "out") -> Dict[str, str]:
    """Write fight_<seed>.ndjson (timeline) and stats_<seed>.json (report) into `out_dir`."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    if seed is None:
        seed = result.seed
    sid = str(seed) if seed is not None else 'na'

    ndjson_path = write_ndjson(events, out / f"fight_{sid}.ndjson")

    stats_path = out / f"stats_{sid}.json"
    with stats_path.open('w', encoding='utf-8') as f:
        json.dump(build_report(result), f, ensure_ascii=False, indent=2)
    return {"ndjson": str(ndjson_path), "stats": str(stats_path)}
