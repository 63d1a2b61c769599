from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    FIGHT_START = 'fight_start'
    ROUND_START = 'round_start'
    ROUND_END = 'round_end'
    STRIKE = 'strike'
    TAKEDOWN = 'takedown'
    CLINCH = 'clinch'
    POSITION = 'position'
    SUBMISSION = 'submission'
    WAIT = 'wait'
    INVALID = 'invalid'
    RECOVERY = 'recovery'
    FIGHT_END = 'fight_end'


class Outcome(str, Enum):
    LANDED = 'landed'
    BLOCKED = 'blocked'
    EVADED = 'evaded'
    MISSED = 'missed'
    SUCCESS = 'success'
    FAILURE = 'failure'
    INVALID = 'invalid'


@dataclass(frozen=True)
class FightEvent:
    seq: int
    type: EventType
    round: int
    clock: int
    actor_id: Any = None
    opponent_id: Any = None
    action: Optional[str] = None
    outcome: Optional[Outcome] = None
    strike: Optional[str] = None
    damage: float = 0.0
    target: Optional[str] = None
    position: Optional[str] = None
    submission: Optional[str] = None
    details: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            'seq': self.seq,
            'type': self.type.value,
            'round': self.round,
            'clock': self.clock,
            'actor_id': self.actor_id,
            'opponent_id': self.opponent_id,
            'action': self.action,
            'outcome': self.outcome.value if self.outcome is not None else None,
        }
        if self.strike is not None:
            out['strike'] = self.strike
            out['damage'] = round(self.damage, 2)
            out['target'] = self.target
        if self.position is not None:
            out['position'] = self.position
        if self.submission is not None:
            out['submission'] = self.submission
        if self.details:
            out['details'] = dict(self.details)
        return out


class EventRecorder:
    """
    Append-only timeline of a single bout. Written by the engine, read by
    reporting; nothing in the simulation reads it back.
    """

    def __init__(self) -> None:
        self._events: List[FightEvent] = []

    def record(self, type: EventType, *, round: int, clock: int, **fields: Any) -> FightEvent:
        event = FightEvent(seq=len(self._events) + 1, type=type, round=round, clock=int(clock), **fields)
        self._events.append(event)
        logger.debug("r%d %3ds %s %s %s", round, event.clock, type.value,
                     event.action or '', event.outcome.value if event.outcome else '')
        return event

    @property
    def events(self) -> List[FightEvent]:
        return list(self._events)

    def of_type(self, type: EventType) -> List[FightEvent]:
        return [e for e in self._events if e.type is type]

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self._events]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[FightEvent]:
        return iter(list(self._events))
