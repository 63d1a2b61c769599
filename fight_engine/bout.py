from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from fighters.fighter import Fighter
from fight_engine.actions import ActionContext, Decision, resolve
from fight_engine.config import EngineConfig
from fight_engine.events import EventRecorder, EventType, FightEvent, Outcome
from fight_engine.fatigue import round_break_health, round_break_stamina
from fight_engine.positions import ActionKind, Position
from fight_engine.reference import ReferenceData, default_reference
from fight_engine.selector import choose_action, pick_actor
from fight_engine.state import ActionRecord, FighterState, Resolution

logger = logging.getLogger(__name__)


class Method(str, Enum):
    KNOCKOUT = 'knockout'
    SUBMISSION = 'submission'
    DECISION = 'decision'
    DRAW = 'draw'


_EVENT_FOR_ACTION = {
    ActionKind.PUNCH: EventType.STRIKE,
    ActionKind.KICK: EventType.STRIKE,
    ActionKind.CLINCH_STRIKE: EventType.STRIKE,
    ActionKind.GROUND_STRIKE: EventType.STRIKE,
    ActionKind.SEEK_FINISH: EventType.STRIKE,
    ActionKind.TAKEDOWN: EventType.TAKEDOWN,
    ActionKind.CLINCH_TAKEDOWN: EventType.TAKEDOWN,
    ActionKind.CLINCH: EventType.CLINCH,
    ActionKind.CLINCH_EXIT: EventType.CLINCH,
    ActionKind.POSITION_ADVANCE: EventType.POSITION,
    ActionKind.SWEEP: EventType.POSITION,
    ActionKind.ESCAPE: EventType.POSITION,
    ActionKind.SUBMISSION: EventType.SUBMISSION,
    ActionKind.WAIT: EventType.WAIT,
}


@dataclass(frozen=True)
class RoundScore:
    round: int
    winner: Optional[int]
    health_lost: Tuple[float, float]
    tiebreak: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'round': self.round,
            'winner': self.winner,
            'health_lost': [round(x, 2) for x in self.health_lost],
            'tiebreak': self.tiebreak,
        }


@dataclass(frozen=True)
class Stoppage:
    winner: int
    method: Method
    round: int
    clock: int
    submission: Optional[str] = None


@dataclass(frozen=True)
class FightResult:
    winner: Optional[int]
    winner_name: Optional[str]
    loser_name: Optional[str]
    method: Method
    round_ended: int
    end_time: int
    fighter_names: Tuple[str, str]
    rounds_won: Tuple[int, int]
    round_scores: Tuple[RoundScore, ...]
    fighter_stats: Tuple[Dict[str, float], Dict[str, float]]
    fighter_health: Tuple[Dict[str, float], Dict[str, float]]
    fighter_max_health: Tuple[Dict[str, float], Dict[str, float]]
    submission_type: Optional[str] = None
    seed: Optional[int] = None

    @property
    def is_stoppage(self) -> bool:
        return self.method in (Method.KNOCKOUT, Method.SUBMISSION)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'winner': self.winner,
            'winner_name': self.winner_name,
            'loser_name': self.loser_name,
            'method': self.method.value,
            'round_ended': self.round_ended,
            'end_time': self.end_time,
            'submission_type': self.submission_type,
            'fighters': list(self.fighter_names),
            'rounds_won': list(self.rounds_won),
            'round_scores': [s.to_dict() for s in self.round_scores],
            'fighter_stats': [dict(s) for s in self.fighter_stats],
            'fighter_health': [dict(h) for h in self.fighter_health],
            'fighter_max_health': [dict(h) for h in self.fighter_max_health],
            'seed': self.seed,
        }


class FightEngine:
    """
    Three-round bout between two fighters.

    The engine owns its RNG and the two fighter snapshots; every step goes
    through pick_actor -> choose_action -> resolve -> clock/events -> stoppage
    check. `simulate()` runs the whole fight; `start_round`, `execute` and
    `end_round` are exposed for step-by-step use and tests.
    """

    def __init__(self, fighter_a: Fighter, fighter_b: Fighter, *, config: Optional[EngineConfig] = None,
                 reference: Optional[ReferenceData] = None, seed: Optional[int] = None, rng=None,
                 recorder: Optional[EventRecorder] = None) -> None:
        self.config = config or EngineConfig()
        self.reference = reference or default_reference()
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.recorder = recorder if recorder is not None else EventRecorder()
        max_stamina = self.config.num('rules.max_stamina', 100.0)
        max_health = self.config.num('rules.max_health', 100.0)
        self.states: List[FighterState] = [
            FighterState.from_fighter(fighter_a, 0, self.reference, max_stamina=max_stamina, max_health=max_health),
            FighterState.from_fighter(fighter_b, 1, self.reference, max_stamina=max_stamina, max_health=max_health),
        ]
        self.rounds = int(self.config.get('rules.rounds', 3))
        self.round = 0
        self.clock = 0
        self.last_actor: Optional[int] = None
        self.stoppage: Optional[Stoppage] = None
        self.round_scores: List[RoundScore] = []
        self.result: Optional[FightResult] = None
        self._ctx = ActionContext(self.rng, self.config, self.reference)
        self._round_health: Tuple[float, float] = (0.0, 0.0)
        self._round_landed: Tuple[float, float] = (0.0, 0.0)

    @property
    def events(self) -> List[FightEvent]:
        return self.recorder.events

    def _event(self, type: EventType, **fields: Any) -> FightEvent:
        return self.recorder.record(type, round=self.round, clock=self.clock, **fields)

    # ————— round lifecycle —————

    def start_round(self, number: int) -> None:
        self.round = number
        self.clock = int(self.config.get('rules.round_seconds', 300))
        self.last_actor = None
        for i, s in enumerate(self.states):
            s = s.with_(position=Position.STANDING, stunned=False)
            self.states[i] = round_break_stamina(s, self.config)
        self._round_health = (self.states[0].health.total, self.states[1].health.total)
        self._round_landed = (self.states[0].stat('strikes_landed'), self.states[1].stat('strikes_landed'))
        self._event(EventType.ROUND_START,
                    details={'stamina': [round(s.stamina, 1) for s in self.states]})

    def execute(self, actor: int, decision: Decision) -> Resolution:
        """Resolve one decision for fighter `actor`, advance the clock and check for a stoppage."""
        attacker = self.states[actor]
        defender = self.states[1 - actor]
        if attacker.stunned:
            attacker = attacker.with_(stunned=False)
        res = resolve(self._ctx, attacker, defender, decision)
        self.states[actor] = res.attacker
        self.states[1 - actor] = res.defender
        for rec in res.records:
            self.clock = max(0, self.clock - rec.time)
            self._record_action(res.attacker, res.defender, rec)
        self.last_actor = actor
        self._check_stoppage(res.records[-1] if res.records else None)
        return res

    def _record_action(self, attacker: FighterState, defender: FighterState, rec: ActionRecord) -> None:
        if rec.outcome is Outcome.INVALID:
            type = EventType.INVALID
        else:
            type = _EVENT_FOR_ACTION[rec.action]
        details: Dict[str, Any] = {}
        if rec.combo_depth:
            details['combo_depth'] = rec.combo_depth
        for flag in ('knockout', 'stun', 'critical'):
            if getattr(rec, flag):
                details[flag] = True
        self._event(
            type,
            actor_id=attacker.fighter_id,
            opponent_id=defender.fighter_id,
            action=rec.action.value,
            outcome=rec.outcome,
            strike=rec.strike.value if rec.strike is not None else None,
            damage=rec.damage,
            target=rec.target.value if rec.target is not None else None,
            position=rec.position.value if rec.position is not None else None,
            submission=rec.submission,
            details=details,
        )

    def _check_stoppage(self, last: Optional[ActionRecord]) -> None:
        if self.stoppage is not None:
            return
        for s in self.states:
            other = 1 - s.index
            if s.is_knocked_out:
                self.stoppage = Stoppage(other, Method.KNOCKOUT, self.round, self.clock)
            elif s.tapped:
                sub = last.submission if last is not None else None
                self.stoppage = Stoppage(other, Method.SUBMISSION, self.round, self.clock, sub)
            if self.stoppage is not None:
                logger.info("stoppage: %s by %s in round %d (%ds left)", self.states[other].name,
                            self.stoppage.method.value, self.round, self.clock)
                return

    def _tiebreak(self) -> Optional[int]:
        mode = self.config.get('rules.round_tiebreak', 'coin_flip')
        if mode == 'coin_flip':
            return 0 if self.rng.random() < 0.5 else 1
        if mode == 'strikes_landed':
            landed = [s.stat('strikes_landed') - self._round_landed[s.index] for s in self.states]
            if landed[0] != landed[1]:
                return 0 if landed[0] > landed[1] else 1
        return None

    def end_round(self) -> RoundScore:
        """Score the round on health lost, then run between-round recovery if another round follows."""
        lost = (self._round_health[0] - self.states[0].health.total,
                self._round_health[1] - self.states[1].health.total)
        tiebreak = False
        if lost[0] < lost[1]:
            winner: Optional[int] = 0
        elif lost[1] < lost[0]:
            winner = 1
        else:
            tiebreak = True
            winner = self._tiebreak()
        if winner is not None:
            self.states[winner] = self.states[winner].with_(rounds_won=self.states[winner].rounds_won + 1)
        score = RoundScore(self.round, winner, lost, tiebreak)
        self.round_scores.append(score)
        self._event(EventType.ROUND_END, details=score.to_dict())
        logger.info("round %d to %s (health lost %.1f / %.1f)", self.round,
                    self.states[winner].name if winner is not None else 'nobody', lost[0], lost[1])

        if self.round < self.rounds:
            before = [s.health for s in self.states]
            self.states = list(round_break_health(self.states, self.config))
            for s, prev in zip(self.states, before):
                self._event(EventType.RECOVERY, actor_id=s.fighter_id,
                            details={'previous_health': prev.as_dict(), 'new_health': s.health.as_dict()})
        return score

    # ————— whole fight —————

    def simulate(self) -> FightResult:
        if self.result is not None:
            return self.result
        a, b = self.states
        self._event(EventType.FIGHT_START, actor_id=a.fighter_id, opponent_id=b.fighter_id,
                    details={'fighters': [a.name, b.name], 'styles': [a.style.key, b.style.key]})
        for number in range(1, self.rounds + 1):
            self.start_round(number)
            while self.clock > 0 and self.stoppage is None:
                actor = pick_actor(self.states, self.rng, self.config, self.last_actor)
                decision = choose_action(self.states[actor], self.states[1 - actor], self.rng,
                                         self.config, self.reference)
                self.execute(actor, decision)
            if self.stoppage is not None:
                break
            self.end_round()
        self.result = self.finish()
        return self.result

    def finish(self) -> FightResult:
        """Build the result from the current state: stoppage if there was one, else decision or draw."""
        a, b = self.states
        if self.stoppage is not None:
            winner: Optional[int] = self.stoppage.winner
            method = self.stoppage.method
            round_ended, end_time = self.stoppage.round, self.stoppage.clock
        else:
            round_ended, end_time = self.round, self.clock
            if a.rounds_won == b.rounds_won:
                winner, method = None, Method.DRAW
            else:
                winner = 0 if a.rounds_won > b.rounds_won else 1
                method = Method.DECISION
        result = FightResult(
            winner=winner,
            winner_name=self.states[winner].name if winner is not None else None,
            loser_name=self.states[1 - winner].name if winner is not None else None,
            method=method,
            round_ended=round_ended,
            end_time=end_time,
            fighter_names=(a.name, b.name),
            rounds_won=(a.rounds_won, b.rounds_won),
            round_scores=tuple(self.round_scores),
            fighter_stats=(dict(a.stats), dict(b.stats)),
            fighter_health=(a.health.as_dict(), b.health.as_dict()),
            fighter_max_health=(a.max_health.as_dict(), b.max_health.as_dict()),
            submission_type=self.stoppage.submission if self.stoppage is not None else None,
            seed=self.seed,
        )
        self._event(EventType.FIGHT_END,
                    actor_id=self.states[winner].fighter_id if winner is not None else None,
                    details={'winner': winner, 'winner_name': result.winner_name,
                             'loser_name': result.loser_name, 'method': method.value,
                             'submission_type': result.submission_type, 'round': round_ended})
        logger.info("%s vs %s: %s (%s, round %d)", a.name, b.name, result.winner_name or 'draw',
                    method.value, round_ended)
        return result


def simulate_fight(fighter_a: Fighter, fighter_b: Fighter, **kwargs: Any) -> FightResult:
    return FightEngine(fighter_a, fighter_b, **kwargs).simulate()
