from __future__ import annotations

from typing import Iterable, Tuple

from fight_engine.config import EngineConfig
from fight_engine.state import FighterState


def stamina_impact(stamina: float) -> float:
    """Effectiveness multiplier: 1.0 when fresh, 0.7 when empty."""
    s = max(0.0, min(100.0, float(stamina)))
    return 0.7 + 0.3 * s / 100.0


def stamina_cost(state: FighterState, base: float) -> float:
    """Cardio above 50 makes every action cheaper, below 50 dearer. Negative bases are recoveries."""
    if base <= 0:
        return base
    cardio = state.rating.cardio
    return base * (1.0 - (cardio - 50.0) / 200.0)


def round_break_stamina(state: FighterState, cfg: EngineConfig) -> FighterState:
    """Between-round stamina regen, scaled by cardio and capped at the configured amount."""
    cap = cfg.num('rules.round_stamina_recovery', 20.0)
    max_stamina = cfg.num('rules.max_stamina', 100.0)
    gain = cap * (1.0 + (state.rating.cardio - 50.0) / 100.0)
    gain = max(0.0, min(cap, gain))
    return state.with_(stamina=min(max_stamina, state.stamina + gain))


def round_break_health(states: Iterable[FighterState], cfg: EngineConfig) -> Tuple[FighterState, ...]:
    amount = cfg.num('rules.round_health_recovery', 10.0)
    return tuple(s.with_(health=s.health.recovered(amount, s.max_health)) for s in states)
