"""Who acts next and what they try, given position, style and fatigue."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from fight_engine.actions import Decision
from fight_engine.config import EngineConfig
from fight_engine.positions import ActionKind, Position, available_actions
from fight_engine.reference import KICK_ORDER, PUNCH_ORDER, ReferenceData, StrikeType
from fight_engine.state import FighterState
from fight_engine.utils import weighted_choice

STANDING_ORDER: Tuple[ActionKind, ...] = (
    ActionKind.PUNCH, ActionKind.KICK, ActionKind.TAKEDOWN,
    ActionKind.CLINCH, ActionKind.WAIT, ActionKind.SEEK_FINISH,
)
CLINCH_ORDER: Tuple[ActionKind, ...] = (
    ActionKind.CLINCH_STRIKE, ActionKind.CLINCH_TAKEDOWN, ActionKind.CLINCH_EXIT,
)
GROUND_ORDER: Tuple[ActionKind, ...] = (
    ActionKind.GROUND_STRIKE, ActionKind.POSITION_ADVANCE, ActionKind.SUBMISSION,
    ActionKind.SWEEP, ActionKind.ESCAPE,
)


def pick_actor(states: Sequence[FighterState], rng, cfg: EngineConfig, last_actor: Optional[int] = None) -> int:
    """Index of the fighter who acts next, weighted by output."""
    penalty = cfg.num('selection.last_actor_penalty', 0.9)
    weights = []
    for s in states:
        w = max(0.0, s.rating.output)
        if last_actor is not None and s.index == last_actor:
            w *= penalty
        weights.append(w)
    if sum(weights) <= 0:
        return 0 if rng.random() < 0.5 else 1
    return weighted_choice(rng, [s.index for s in states], weights)


def standing_weights(actor: FighterState, opponent: FighterState, cfg: EngineConfig) -> List[float]:
    style = actor.style
    t = actor.tendency
    punch = t.punch * style.strike_chance * style.punch_preference
    kick = t.kick * style.strike_chance * max(0.0, 2.0 - style.punch_preference)
    takedown = t.takedown * style.takedown_chance
    clinch = t.clinch * style.clinch_chance
    wait = cfg.num('selection.wait_weight', 5.0) * style.wait_chance
    finish = cfg.num('selection.seek_finish_weight', 40.0) if opponent.stunned else 0.0
    if actor.stamina < cfg.num('selection.fatigue_threshold', 30.0):
        kick *= cfg.num('selection.fatigue_kick_mult', 0.6)
        takedown *= cfg.num('selection.fatigue_takedown_mult', 0.6)
        wait *= cfg.num('selection.fatigue_wait_mult', 2.0)
    return [punch, kick, takedown, clinch, wait, finish]


def _tendency_weights(actor: FighterState, options: Sequence[ActionKind], table: str) -> List[float]:
    return [actor.tendency.get(a.value) * actor.style.action_weight(table, a.value) for a in options]


def choose_punch(actor: FighterState, rng, cfg: EngineConfig) -> StrikeType:
    options = list(PUNCH_ORDER) + [StrikeType.BODY_PUNCH]
    weights = list(actor.style.punch_weights) + [cfg.num('selection.body_punch_weight', 2.0)]
    return weighted_choice(rng, options, weights)


def choose_kick(actor: FighterState, rng) -> StrikeType:
    return weighted_choice(rng, KICK_ORDER, actor.style.kick_weights)


def choose_action(actor: FighterState, opponent: FighterState, rng, cfg: EngineConfig,
                  reference: ReferenceData) -> Decision:
    position = actor.position
    allowed = available_actions(position, reference)

    if position is Position.STANDING:
        action = weighted_choice(rng, STANDING_ORDER, standing_weights(actor, opponent, cfg))
        if action is ActionKind.PUNCH:
            return Decision(action, strike=choose_punch(actor, rng, cfg))
        if action is ActionKind.KICK:
            return Decision(action, strike=choose_kick(actor, rng))
        return Decision(action)

    if position.is_clinch:
        options = [a for a in CLINCH_ORDER if a in allowed]
        table = 'clinch'
    else:
        options = [a for a in GROUND_ORDER if a in allowed]
        table = 'ground_top' if position.is_top else 'ground_bottom'
    action = weighted_choice(rng, options, _tendency_weights(actor, options, table))
    if action is ActionKind.CLINCH_STRIKE:
        return Decision(action, strike=StrikeType.CLINCH_STRIKE)
    if action is ActionKind.GROUND_STRIKE:
        return Decision(action, strike=StrikeType.GROUND_PUNCH)
    return Decision(action)
