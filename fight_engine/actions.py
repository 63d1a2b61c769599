"""
Action resolvers. Each takes immutable snapshots of the acting fighter and
the opponent and returns a Resolution; nothing here touches the fight clock
or the event log.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from fight_engine.combo import extend_combo
from fight_engine.config import EngineConfig
from fight_engine.events import Outcome
from fight_engine.fatigue import stamina_cost
from fight_engine.positions import ActionKind, transition
from fight_engine.probability import (
    contest_probability,
    elapsed_seconds,
    slam_damage,
    submission_probability,
)
from fight_engine.reference import PUNCH_ORDER, ReferenceData, StrikeType
from fight_engine.state import ActionRecord, FighterState, Resolution
from fight_engine.strikes import probabilities_for, throw_strike
from fight_engine.utils import weighted_choice


@dataclass(frozen=True)
class Decision:
    action: ActionKind
    strike: Optional[StrikeType] = None
    submission: Optional[str] = None


@dataclass(frozen=True)
class ActionContext:
    rng: object
    cfg: EngineConfig
    reference: ReferenceData

    def action_time(self, key: str) -> int:
        return elapsed_seconds(self.cfg.num(f'actions.{key}.time', 1), self.rng.random())

    def action_stamina(self, key: str) -> float:
        return self.cfg.num(f'actions.{key}.stamina', 0.0)


Resolver = Callable[[ActionContext, FighterState, FighterState, Decision], Resolution]

_STRIKE_CATEGORY = {
    ActionKind.PUNCH: 'punch',
    ActionKind.KICK: 'kick',
    ActionKind.CLINCH_STRIKE: 'clinch',
    ActionKind.GROUND_STRIKE: 'ground',
}
_DEFAULT_STRIKE = {
    ActionKind.PUNCH: StrikeType.JAB,
    ActionKind.KICK: StrikeType.LEG_KICK,
    ActionKind.CLINCH_STRIKE: StrikeType.CLINCH_STRIKE,
    ActionKind.GROUND_STRIKE: StrikeType.GROUND_PUNCH,
}


def invalid(ctx: ActionContext, attacker: FighterState, defender: FighterState, action: ActionKind) -> Resolution:
    """No-op turn: nothing changes except the clock."""
    record = ActionRecord(action=action, outcome=Outcome.INVALID,
                          time=max(1, int(ctx.cfg.get('actions.invalid.time', 1))),
                          position=attacker.position)
    return Resolution(attacker, defender, (record,), invalid=True)


def _spend(ctx: ActionContext, state: FighterState, key: str) -> FighterState:
    cost = stamina_cost(state, ctx.action_stamina(key))
    return state.spend_stamina(cost, ctx.cfg.num('rules.max_stamina', 100.0))


def resolve_strike(ctx, attacker, defender, decision):
    if transition(attacker.position, decision.action) is None:
        return invalid(ctx, attacker, defender, decision.action)
    strike = decision.strike or _DEFAULT_STRIKE[decision.action]
    spec = ctx.reference.strike(strike)
    if spec.category != _STRIKE_CATEGORY[decision.action]:
        return invalid(ctx, attacker, defender, decision.action)
    time = elapsed_seconds(spec.time, ctx.rng.random())
    attacker, defender, opener = throw_strike(attacker, defender, strike, ctx.rng, ctx.cfg, ctx.reference,
                                              time=time, action=decision.action)
    attacker, defender, follow = extend_combo(attacker, defender, opener, ctx.rng, ctx.cfg, ctx.reference)
    return Resolution(attacker, defender, (opener, *follow))


def _contest(ctx: ActionContext, attacker: FighterState, defender: FighterState, action: ActionKind,
             offence: float, defence: float, *, slam: bool = False) -> Resolution:
    moved = transition(attacker.position, action)
    if moved is None:
        return invalid(ctx, attacker, defender, action)
    key = action.value
    time = ctx.action_time(key)
    p = contest_probability(key, offence, defence, ctx.cfg, attacker_stamina=attacker.stamina)
    success = ctx.rng.random() < p
    attacker = _spend(ctx, attacker, key).counted(**{f'{key}_attempts': 1})
    if not success:
        defender = defender.counted(**{f'{key}_defended': 1})
        record = ActionRecord(action=action, outcome=Outcome.FAILURE, time=time, position=attacker.position)
        return Resolution(attacker, defender, (record,))

    damage = 0.0
    target = None
    if slam:
        target = ctx.reference.takedown_target
        damage = slam_damage(ctx.reference.takedown_damage, attacker.rating, defender.rating, target, ctx.cfg)
        defender = defender.take_damage(target, damage).counted(damage_absorbed=damage)
        attacker = attacker.counted(damage_dealt=damage)
    attacker = attacker.counted(**{f'{key}_success': 1}).moved_to(moved[0])
    defender = defender.moved_to(moved[1])
    record = ActionRecord(action=action, outcome=Outcome.SUCCESS, time=time, position=moved[0],
                          damage=damage, target=target, knockout=defender.is_knocked_out)
    return Resolution(attacker, defender, (record,))


def resolve_takedown(ctx, attacker, defender, decision):
    return _contest(ctx, attacker, defender, ActionKind.TAKEDOWN,
                    attacker.rating.takedown_offence, defender.rating.takedown_defence, slam=True)


def resolve_clinch(ctx, attacker, defender, decision):
    return _contest(ctx, attacker, defender, ActionKind.CLINCH,
                    attacker.rating.clinch_offence, defender.rating.clinch_defence)


def resolve_clinch_takedown(ctx, attacker, defender, decision):
    return _contest(ctx, attacker, defender, ActionKind.CLINCH_TAKEDOWN,
                    attacker.rating.clinch_takedown, defender.rating.takedown_defence, slam=True)


def resolve_clinch_exit(ctx, attacker, defender, decision):
    return _contest(ctx, attacker, defender, ActionKind.CLINCH_EXIT,
                    attacker.rating.clinch_defence, defender.rating.clinch_control)


def resolve_advance(ctx, attacker, defender, decision):
    return _contest(ctx, attacker, defender, ActionKind.POSITION_ADVANCE,
                    attacker.rating.ground_control, defender.rating.ground_defence)


def resolve_sweep(ctx, attacker, defender, decision):
    return _contest(ctx, attacker, defender, ActionKind.SWEEP,
                    attacker.rating.ground_offence, defender.rating.ground_control)


def resolve_escape(ctx, attacker, defender, decision):
    return _contest(ctx, attacker, defender, ActionKind.ESCAPE,
                    attacker.rating.get_up_ability, defender.rating.ground_control)


def resolve_submission(ctx, attacker, defender, decision):
    action = ActionKind.SUBMISSION
    options = ctx.reference.submissions_for(attacker.position)
    if transition(attacker.position, action) is None or not options:
        return invalid(ctx, attacker, defender, action)
    if decision.submission is not None:
        chosen = next((s for s in options if s.key == decision.submission), None)
        if chosen is None:
            return invalid(ctx, attacker, defender, action)
    else:
        chosen = weighted_choice(ctx.rng, options, [1.0 / max(0.1, s.difficulty) for s in options])
    time = ctx.action_time('submission')
    p = submission_probability(attacker.rating, defender.rating, attacker.position, chosen, ctx.cfg,
                               attacker_stamina=attacker.stamina, defender_stamina=defender.stamina)
    success = ctx.rng.random() < p
    attacker = _spend(ctx, attacker, 'submission').counted(submission_attempts=1)
    if success:
        attacker = attacker.counted(submissions=1)
        defender = defender.with_(tapped=True)
    else:
        defender = defender.counted(submissions_escaped=1)
    record = ActionRecord(action=action, outcome=Outcome.SUCCESS if success else Outcome.FAILURE,
                          time=time, position=attacker.position, submission=chosen.key)
    return Resolution(attacker, defender, (record,))


def resolve_wait(ctx, attacker, defender, decision):
    if transition(attacker.position, ActionKind.WAIT) is None:
        return invalid(ctx, attacker, defender, ActionKind.WAIT)
    time = ctx.action_time('wait')
    attacker = _spend(ctx, attacker, 'wait')
    record = ActionRecord(action=ActionKind.WAIT, outcome=Outcome.SUCCESS, time=time, position=attacker.position)
    return Resolution(attacker, defender, (record,))


def resolve_seek_finish(ctx, attacker, defender, decision):
    """Flurry of punches at a hit bonus; only makes sense against a stunned opponent."""
    action = ActionKind.SEEK_FINISH
    if transition(attacker.position, action) is None:
        return invalid(ctx, attacker, defender, action)
    time = ctx.action_time('seek_finish')
    attacker = _spend(ctx, attacker, 'seek_finish').counted(finish_attempts=1)
    bonus = ctx.cfg.num('seek_finish.hit_bonus', 0.2)
    records: List[ActionRecord] = []
    for i in range(max(1, int(ctx.cfg.get('seek_finish.strikes', 3)))):
        strike = weighted_choice(ctx.rng, PUNCH_ORDER, attacker.style.punch_weights)
        probs = probabilities_for(attacker, defender, strike, ctx.cfg, ctx.reference, hit_bonus=bonus)
        attacker, defender, rec = throw_strike(attacker, defender, strike, ctx.rng, ctx.cfg, ctx.reference,
                                               time=time if i == 0 else 1, depth=i,
                                               probabilities=probs, action=action)
        records.append(rec)
        if defender.is_knocked_out:
            break
    return Resolution(attacker, defender, tuple(records))


RESOLVERS: Dict[ActionKind, Resolver] = {
    ActionKind.PUNCH: resolve_strike,
    ActionKind.KICK: resolve_strike,
    ActionKind.CLINCH_STRIKE: resolve_strike,
    ActionKind.GROUND_STRIKE: resolve_strike,
    ActionKind.TAKEDOWN: resolve_takedown,
    ActionKind.CLINCH: resolve_clinch,
    ActionKind.CLINCH_TAKEDOWN: resolve_clinch_takedown,
    ActionKind.CLINCH_EXIT: resolve_clinch_exit,
    ActionKind.POSITION_ADVANCE: resolve_advance,
    ActionKind.SWEEP: resolve_sweep,
    ActionKind.ESCAPE: resolve_escape,
    ActionKind.SUBMISSION: resolve_submission,
    ActionKind.WAIT: resolve_wait,
    ActionKind.SEEK_FINISH: resolve_seek_finish,
}


def resolve(ctx: ActionContext, attacker: FighterState, defender: FighterState, decision: Decision) -> Resolution:
    return RESOLVERS[decision.action](ctx, attacker, defender, decision)
