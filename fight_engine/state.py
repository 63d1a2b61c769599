"""Immutable per-bout fighter snapshots and resolution records."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from fighters.fighter import Fighter, Rating, Tendency
from fight_engine.events import Outcome
from fight_engine.positions import ActionKind, Position
from fight_engine.reference import BodyRegion, FightingStyle, ReferenceData, StrikeType


@dataclass(frozen=True)
class Health:
    head: float
    body: float
    legs: float

    @classmethod
    def full(cls, value: float) -> 'Health':
        return cls(value, value, value)

    @classmethod
    def capped(cls, caps: Optional[Mapping[str, float]], default: float) -> 'Health':
        """Per-region caps; regions not in `caps` get `default`."""
        caps = caps or {}
        return cls(*(float(caps.get(r.value, default)) for r in BodyRegion))

    def of(self, region: BodyRegion) -> float:
        return float(getattr(self, region.value))

    def damaged(self, region: BodyRegion, amount: float, cap: 'Health') -> 'Health':
        value = max(0.0, min(cap.of(region), self.of(region) - amount))
        return replace(self, **{region.value: value})

    def recovered(self, amount: float, cap: 'Health') -> 'Health':
        return Health(
            min(cap.head, self.head + amount),
            min(cap.body, self.body + amount),
            min(cap.legs, self.legs + amount),
        )

    @property
    def is_depleted(self) -> bool:
        return min(self.head, self.body, self.legs) <= 0

    @property
    def total(self) -> float:
        return self.head + self.body + self.legs

    def as_dict(self) -> Dict[str, float]:
        return {'head': round(self.head, 2), 'body': round(self.body, 2), 'legs': round(self.legs, 2)}


@dataclass(frozen=True)
class FighterState:
    index: int
    fighter_id: Any
    name: str
    rating: Rating
    tendency: Tendency
    style: FightingStyle
    health: Health
    max_health: Health
    stamina: float
    position: Position = Position.STANDING
    stats: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    rounds_won: int = 0
    tapped: bool = False
    stunned: bool = False

    @classmethod
    def from_fighter(cls, fighter: Fighter, index: int, reference: ReferenceData, *,
                     max_stamina: float = 100.0, max_health: float = 100.0) -> 'FighterState':
        caps = Health.capped(fighter.max_health, max_health)
        return cls(
            index=index,
            fighter_id=fighter.id,
            name=fighter.name,
            rating=fighter.rating,
            tendency=fighter.tendency,
            style=reference.style(fighter.fighting_style),
            health=caps,
            max_health=caps,
            stamina=max(0.0, min(max_stamina, float(fighter.stamina))),
        )

    @property
    def is_knocked_out(self) -> bool:
        return self.health.is_depleted

    @property
    def is_finished(self) -> bool:
        return self.is_knocked_out or self.tapped

    def stat(self, key: str) -> float:
        return self.stats.get(key, 0)

    def counted(self, **increments: float) -> 'FighterState':
        stats = dict(self.stats)
        for key, inc in increments.items():
            stats[key] = stats.get(key, 0) + inc
        return replace(self, stats=MappingProxyType(stats))

    def spend_stamina(self, amount: float, cap: float = 100.0) -> 'FighterState':
        """Negative amounts recover stamina."""
        return replace(self, stamina=max(0.0, min(cap, self.stamina - amount)))

    def take_damage(self, region: BodyRegion, amount: float) -> 'FighterState':
        return replace(self, health=self.health.damaged(region, amount, self.max_health))

    def knocked_out(self) -> 'FighterState':
        return replace(self, health=self.health.damaged(BodyRegion.HEAD, self.health.head, self.max_health))

    def moved_to(self, position: Position) -> 'FighterState':
        return replace(self, position=position)

    def with_(self, **changes: Any) -> 'FighterState':
        return replace(self, **changes)


@dataclass(frozen=True)
class ActionRecord:
    """One resolved step. Combos produce several records for one decision."""
    action: ActionKind
    outcome: Outcome
    time: int
    strike: Optional[StrikeType] = None
    damage: float = 0.0
    target: Optional[BodyRegion] = None
    position: Optional[Position] = None
    submission: Optional[str] = None
    combo_depth: int = 0
    knockout: bool = False
    stun: bool = False
    critical: bool = False


@dataclass(frozen=True)
class Resolution:
    attacker: FighterState
    defender: FighterState
    records: Tuple[ActionRecord, ...]
    invalid: bool = False
