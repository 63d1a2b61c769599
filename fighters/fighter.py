"""Fighter input records: ratings, tendencies and identity."""
from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

_CAMEL = re.compile(r'(?<=[a-z0-9])(?=[A-Z])')
_REGIONS = ('head', 'body', 'legs')


def _snake(key: str) -> str:
    return _CAMEL.sub('_', key).lower()


def _pick_known(cls, raw: Optional[Mapping[str, Any]]) -> Dict[str, float]:
    """Keep only the keys `cls` declares, converting camelCase names."""
    known = {f.name for f in fields(cls)}
    out: Dict[str, float] = {}
    for key, value in (raw or {}).items():
        name = _snake(str(key))
        if name in known and value is not None:
            out[name] = float(value)
    return out


def _number(value: Any, default: float) -> float:
    return default if value is None else float(value)


def _health_caps(raw: Any) -> Optional[Dict[str, float]]:
    """A single number caps every region; a mapping caps only the regions it names."""
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        caps = {r: float(raw[r]) for r in _REGIONS if raw.get(r) is not None}
        return caps or None
    value = float(raw)
    return {r: value for r in _REGIONS}


@dataclass(frozen=True)
class Rating:
    """
    Skill attributes on a 0-100 scale. Anything missing from the source
    record is 0.
    """
    output: float = 0.0
    strength: float = 0.0
    speed: float = 0.0
    cardio: float = 0.0
    toughness: float = 0.0
    chin: float = 0.0
    striking: float = 0.0
    punch_power: float = 0.0
    hand_speed: float = 0.0
    punch_accuracy: float = 0.0
    kicking: float = 0.0
    kick_power: float = 0.0
    kick_speed: float = 0.0
    kick_accuracy: float = 0.0
    striking_defence: float = 0.0
    kick_defence: float = 0.0
    head_movement: float = 0.0
    footwork: float = 0.0
    takedown_offence: float = 0.0
    takedown_defence: float = 0.0
    clinch_offence: float = 0.0
    clinch_defence: float = 0.0
    clinch_striking: float = 0.0
    clinch_grappling: float = 0.0
    clinch_control: float = 0.0
    clinch_takedown: float = 0.0
    ground_offence: float = 0.0
    ground_defence: float = 0.0
    ground_control: float = 0.0
    ground_striking: float = 0.0
    submission_offence: float = 0.0
    submission_defence: float = 0.0
    get_up_ability: float = 0.0
    composure: float = 0.0
    fight_iq: float = 0.0

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> 'Rating':
        return cls(**_pick_known(cls, raw))

    def get(self, name: str) -> float:
        return float(getattr(self, name, 0.0))


@dataclass(frozen=True)
class Tendency:
    """How often a fighter reaches for each kind of action."""
    punch: float = 25.0
    kick: float = 25.0
    takedown: float = 25.0
    clinch: float = 25.0
    # clinch
    clinch_strike: float = 1.0
    clinch_takedown: float = 1.0
    clinch_exit: float = 1.0
    # ground
    ground_strike: float = 1.0
    position_advance: float = 1.0
    submission: float = 1.0
    sweep: float = 1.0
    escape: float = 1.0

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> 'Tendency':
        return cls(**_pick_known(cls, raw))

    def get(self, name: str) -> float:
        return float(getattr(self, name, 0.0))


@dataclass
class Fighter:
    """
    Competitor as handed to the engine.

    Attributes:
        id: Stable identifier (used in events)
        name: Display name
        rating: Skill block
        tendency: Action preferences
        fighting_style: Style key, e.g. 'MUAY_THAI'; unknown keys fall back to GENERIC
        max_health: Per-region health cap ({head, body, legs}); None uses the configured default
        stamina: Stamina at the opening bell
    """
    id: Any
    name: str
    rating: Rating = field(default_factory=Rating)
    tendency: Tendency = field(default_factory=Tendency)
    fighting_style: str = 'GENERIC'
    max_health: Optional[Dict[str, float]] = None
    stamina: float = 100.0
    wins: int = 0
    losses: int = 0
    weight_class: Optional[str] = None

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}"

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> 'Fighter':
        """Build a fighter from a loosely shaped dict (JSON roster entry)."""
        name = data.get('name')
        if not name:
            first = data.get('firstname') or data.get('first_name') or ''
            last = data.get('lastname') or data.get('last_name') or ''
            name = f"{first} {last}".strip() or 'Unknown'
        fighter_id = data.get('id', data.get('personid', name))
        style = data.get('fighting_style') or data.get('fightingStyle') or 'GENERIC'
        return cls(
            id=fighter_id,
            name=name,
            rating=Rating.from_mapping(data.get('rating') or data.get('Rating')),
            tendency=Tendency.from_mapping(data.get('tendency') or data.get('Tendency')),
            fighting_style=str(style).upper(),
            max_health=_health_caps(data.get('max_health', data.get('maxHealth'))),
            stamina=_number(data.get('stamina'), 100.0),
            wins=int(data.get('wins', 0) or 0),
            losses=int(data.get('losses', 0) or 0),
            weight_class=data.get('weight_class', data.get('weightClass')),
        )
