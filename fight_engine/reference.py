"""
Static reference tables: strikes, combo follow-ups, fighting styles and
the submission catalogue. Loaded once from YAML and never mutated.
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

import yaml

from fight_engine.positions import Position

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / 'data'
GENERIC = 'GENERIC'


class StrikeType(str, Enum):
    JAB = 'jab'
    CROSS = 'cross'
    HOOK = 'hook'
    UPPERCUT = 'uppercut'
    OVERHAND = 'overhand'
    SPINNING_BACKFIST = 'spinning_backfist'
    SUPERMAN_PUNCH = 'superman_punch'
    BODY_PUNCH = 'body_punch'
    HEAD_KICK = 'head_kick'
    BODY_KICK = 'body_kick'
    LEG_KICK = 'leg_kick'
    CLINCH_STRIKE = 'clinch_strike'
    GROUND_PUNCH = 'ground_punch'


class BodyRegion(str, Enum):
    HEAD = 'head'
    BODY = 'body'
    LEGS = 'legs'


# order of the punch/kick weight vectors in styles.yml
PUNCH_ORDER: Tuple[StrikeType, ...] = (
    StrikeType.JAB, StrikeType.CROSS, StrikeType.HOOK, StrikeType.UPPERCUT,
    StrikeType.OVERHAND, StrikeType.SPINNING_BACKFIST, StrikeType.SUPERMAN_PUNCH,
)
KICK_ORDER: Tuple[StrikeType, ...] = (StrikeType.LEG_KICK, StrikeType.BODY_KICK, StrikeType.HEAD_KICK)


@dataclass(frozen=True)
class StrikeSpec:
    strike: StrikeType
    damage: float
    target: BodyRegion
    category: str  # punch | kick | clinch | ground
    time: int
    stamina: float
    head_share: Optional[float] = None


@dataclass(frozen=True)
class FightingStyle:
    key: str
    name: str
    strength: str = ''
    weakness: str = ''
    characteristics: str = ''
    strike_chance: float = 1.0
    takedown_chance: float = 1.0
    clinch_chance: float = 1.0
    wait_chance: float = 1.0
    punch_preference: float = 1.0
    punch_weights: Tuple[float, ...] = (3, 3, 3, 2, 2, 1, 1)
    kick_weights: Tuple[float, ...] = (3, 2, 1)
    clinch: Mapping[str, float] = field(default_factory=dict)
    ground_top: Mapping[str, float] = field(default_factory=dict)
    ground_bottom: Mapping[str, float] = field(default_factory=dict)

    def weight_for(self, strike: StrikeType) -> float:
        """Style preference for a single strike type (used for combo follow-ups)."""
        if strike in PUNCH_ORDER:
            return float(self.punch_weights[PUNCH_ORDER.index(strike)])
        if strike in KICK_ORDER:
            return float(self.kick_weights[KICK_ORDER.index(strike)])
        return 1.0

    def action_weight(self, table: str, action: str) -> float:
        return float(getattr(self, table).get(action, 1.0))


@dataclass(frozen=True)
class SubmissionType:
    key: str
    name: str
    difficulty: float
    positions: FrozenSet[Position]


@dataclass(frozen=True)
class ReferenceData:
    strikes: Mapping[StrikeType, StrikeSpec]
    combos: Mapping[StrikeType, Tuple[StrikeType, ...]]
    styles: Mapping[str, FightingStyle]
    submissions: Mapping[str, SubmissionType]
    takedown_damage: float = 9.0
    takedown_target: BodyRegion = BodyRegion.BODY

    def strike(self, strike: StrikeType) -> StrikeSpec:
        return self.strikes[strike]

    def style(self, key: Optional[str]) -> FightingStyle:
        found = self.styles.get((key or GENERIC).upper())
        if found is None:
            logger.warning("unknown fighting style %r, using %s", key, GENERIC)
            return self.styles[GENERIC]
        return found

    def follow_ups(self, strike: StrikeType) -> Tuple[StrikeType, ...]:
        return self.combos.get(strike, ())

    def submissions_for(self, position: Position) -> Tuple[SubmissionType, ...]:
        return tuple(s for s in self.submissions.values() if position in s.positions)


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open('r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping")
    return data


def _parse_strikes(raw: Dict[str, Any]) -> Dict[StrikeType, StrikeSpec]:
    out: Dict[StrikeType, StrikeSpec] = {}
    for key, spec in (raw.get('strikes') or {}).items():
        strike = StrikeType(key)
        out[strike] = StrikeSpec(
            strike=strike,
            damage=float(spec['damage']),
            target=BodyRegion(spec['target']),
            category=str(spec['category']),
            time=int(spec['time']),
            stamina=float(spec['stamina']),
            head_share=spec.get('head_share'),
        )
    missing = set(StrikeType) - set(out)
    if missing:
        raise KeyError(f"strike table is missing {sorted(s.value for s in missing)}")
    return out


def _parse_styles(raw: Dict[str, Any]) -> Dict[str, FightingStyle]:
    defaults = raw.get('defaults') or {}
    out: Dict[str, FightingStyle] = {}
    for key, spec in (raw.get('styles') or {}).items():
        merged = dict(defaults)
        merged.update(spec or {})
        punch_w = tuple(float(w) for w in merged['punch_weights'])
        kick_w = tuple(float(w) for w in merged['kick_weights'])
        if len(punch_w) != len(PUNCH_ORDER) or len(kick_w) != len(KICK_ORDER):
            raise ValueError(f"style {key}: wrong number of punch/kick weights")
        tables = {}
        for table in ('clinch', 'ground_top', 'ground_bottom'):
            t = dict(defaults.get(table) or {})
            t.update((spec or {}).get(table) or {})
            tables[table] = MappingProxyType({k: float(v) for k, v in t.items()})
        out[key.upper()] = FightingStyle(
            key=key.upper(),
            name=str(merged.get('name', key)),
            strength=str(merged.get('strength', '')),
            weakness=str(merged.get('weakness', '')),
            characteristics=str(merged.get('characteristics', '')),
            strike_chance=float(merged['strike_chance']),
            takedown_chance=float(merged['takedown_chance']),
            clinch_chance=float(merged['clinch_chance']),
            wait_chance=float(merged['wait_chance']),
            punch_preference=float(merged['punch_preference']),
            punch_weights=punch_w,
            kick_weights=kick_w,
            **tables,
        )
    if GENERIC not in out:
        raise KeyError(f"style table has no {GENERIC} entry")
    return out


def _parse_submissions(raw: Dict[str, Any]) -> Dict[str, SubmissionType]:
    out: Dict[str, SubmissionType] = {}
    for key, spec in (raw.get('submissions') or {}).items():
        out[key] = SubmissionType(
            key=key,
            name=str(spec.get('name', key)),
            difficulty=float(spec.get('difficulty', 1.0)),
            positions=frozenset(Position(p) for p in spec.get('positions') or ()),
        )
    return out


def load_reference(data_dir: Optional[Path] = None) -> ReferenceData:
    """Read strikes.yml, styles.yml and submissions.yml from `data_dir`."""
    base = Path(data_dir) if data_dir is not None else DATA_DIR
    strikes_raw = _read_yaml(base / 'strikes.yml')
    strikes = _parse_strikes(strikes_raw)
    combos = {
        StrikeType(k): tuple(StrikeType(f) for f in v or ())
        for k, v in (strikes_raw.get('combos') or {}).items()
    }
    takedown = strikes_raw.get('takedown') or {}
    return ReferenceData(
        strikes=MappingProxyType(strikes),
        combos=MappingProxyType(combos),
        styles=MappingProxyType(_parse_styles(_read_yaml(base / 'styles.yml'))),
        submissions=MappingProxyType(_parse_submissions(_read_yaml(base / 'submissions.yml'))),
        takedown_damage=float(takedown.get('damage', 9.0)),
        takedown_target=BodyRegion(takedown.get('target', 'body')),
    )


@functools.lru_cache(maxsize=1)
def default_reference() -> ReferenceData:
    return load_reference()
