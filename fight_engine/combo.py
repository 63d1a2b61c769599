from __future__ import annotations

from typing import List, Tuple

from fight_engine.config import EngineConfig
from fight_engine.events import Outcome
from fight_engine.reference import ReferenceData
from fight_engine.state import ActionRecord, FighterState
from fight_engine.strikes import probabilities_for, throw_strike
from fight_engine.utils import weighted_choice


def continuation_chance(depth: int, cfg: EngineConfig) -> float:
    return cfg.num('combo.base_chance', 0.45) * cfg.num('combo.falloff', 0.7) ** (depth - 1)


def extend_combo(attacker: FighterState, defender: FighterState, opener: ActionRecord, rng, cfg: EngineConfig,
                 reference: ReferenceData) -> Tuple[FighterState, FighterState, List[ActionRecord]]:
    """
    Chain follow-ups after a landed opener. Each follow-up is rolled for,
    picked from the opener's follow-up table by style weight and thrown at
    a decayed hit chance. Returns only the follow-up records.
    """
    max_length = int(cfg.get('combo.max_length', 4))
    seconds = int(cfg.get('combo.seconds_per_strike', 1))
    decay = cfg.num('combo.hit_decay', 0.85)
    records: List[ActionRecord] = []
    last = opener
    depth = 1
    while 1 + len(records) < max_length:
        if last.outcome is not Outcome.LANDED or defender.is_knocked_out or last.strike is None:
            break
        options = reference.follow_ups(last.strike)
        if not options:
            break
        if rng.random() >= continuation_chance(depth, cfg):
            break
        strike = weighted_choice(rng, options, [attacker.style.weight_for(s) for s in options])
        probs = probabilities_for(attacker, defender, strike, cfg, reference).decayed(decay ** depth)
        attacker, defender, last = throw_strike(attacker, defender, strike, rng, cfg, reference,
                                                time=seconds, depth=depth, probabilities=probs)
        records.append(last)
        depth += 1
    if records:
        attacker = attacker.counted(combos=1)
    return attacker, defender, records
