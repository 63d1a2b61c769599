from __future__ import annotations

from typing import Optional, Tuple

from fight_engine.config import EngineConfig
from fight_engine.events import Outcome
from fight_engine.fatigue import stamina_cost
from fight_engine.positions import ActionKind
from fight_engine.probability import (
    StrikeProbabilities,
    knockout_probability,
    power_rating,
    strike_damage,
    strike_probabilities,
    stun_probability,
)
from fight_engine.reference import BodyRegion, ReferenceData, StrikeType
from fight_engine.state import ActionRecord, FighterState

_ACTION_FOR_CATEGORY = {
    'punch': ActionKind.PUNCH,
    'kick': ActionKind.KICK,
    'clinch': ActionKind.CLINCH_STRIKE,
    'ground': ActionKind.GROUND_STRIKE,
}


def probabilities_for(attacker: FighterState, defender: FighterState, strike: StrikeType, cfg: EngineConfig,
                      reference: ReferenceData, *, hit_bonus: float = 0.0) -> StrikeProbabilities:
    spec = reference.strike(strike)
    if defender.stunned:
        hit_bonus += cfg.num('damage.stunned_hit_bonus', 0.15)
    return strike_probabilities(spec.category, attacker.rating, defender.rating, cfg,
                                attacker_stamina=attacker.stamina, hit_bonus=hit_bonus)


def throw_strike(attacker: FighterState, defender: FighterState, strike: StrikeType, rng, cfg: EngineConfig,
                 reference: ReferenceData, *, time: int, depth: int = 0,
                 probabilities: Optional[StrikeProbabilities] = None,
                 action: Optional[ActionKind] = None) -> Tuple[FighterState, FighterState, ActionRecord]:
    """
    Resolve one strike. Random draws, in order: outcome, then for landed
    strikes damage variation, critical, target region (clinch/ground only),
    knockout and stun (head only).
    """
    spec = reference.strike(strike)
    probs = probabilities or probabilities_for(attacker, defender, strike, cfg, reference)
    outcome = probs.pick(rng.random())
    action = action or _ACTION_FOR_CATEGORY[spec.category]
    max_stamina = cfg.num('rules.max_stamina', 100.0)

    stamina_before = attacker.stamina
    attacker = attacker.spend_stamina(stamina_cost(attacker, spec.stamina), max_stamina)
    attacker = attacker.counted(strikes_thrown=1, **{f'{spec.category}_thrown': 1, f'{strike.value}_thrown': 1})
    if outcome is not Outcome.LANDED:
        attacker = attacker.counted(**{f'{spec.category}_{outcome.value}': 1, f'{strike.value}_{outcome.value}': 1})
        if outcome is Outcome.MISSED:
            attacker = attacker.counted(strikes_missed=1)
        if outcome is Outcome.BLOCKED:
            defender = defender.counted(strikes_blocked=1)
        elif outcome is Outcome.EVADED:
            defender = defender.counted(strikes_evaded=1)
        record = ActionRecord(action=action, outcome=outcome, time=time, strike=strike, combo_depth=depth)
        return attacker, defender, record

    variation_roll = rng.random()
    crit_roll = rng.random()
    region = spec.target
    if spec.head_share is not None:
        region = BodyRegion.HEAD if rng.random() < spec.head_share else BodyRegion.BODY

    damage, critical = strike_damage(spec, attacker.rating, defender.rating, region, cfg,
                                     attacker_stamina=stamina_before,
                                     variation_roll=variation_roll, crit_roll=crit_roll)
    head_before = defender.health.head
    defender = defender.take_damage(region, damage)
    attacker = attacker.counted(strikes_landed=1, damage_dealt=damage,
                                **{f'{spec.category}_landed': 1, f'{strike.value}_landed': 1})
    if critical:
        attacker = attacker.counted(critical_strikes=1)
    defender = defender.counted(strikes_absorbed=1, damage_absorbed=damage)

    knockout = stun = False
    if region is BodyRegion.HEAD and not defender.is_knocked_out:
        power = power_rating(spec, attacker.rating)
        ko_p = knockout_probability(power, defender.rating.chin, head_before, defender.max_health.head, damage,
                                    cfg, stunned=defender.stunned)
        if rng.random() < ko_p:
            knockout = True
            defender = defender.knocked_out()
        else:
            stun_p = stun_probability(power, defender.rating.chin, head_before, defender.max_health.head, damage, cfg)
            if rng.random() < stun_p:
                stun = True
                defender = defender.with_(stunned=True)
                attacker = attacker.counted(stuns=1)
    if knockout or defender.is_knocked_out:
        knockout = True
        attacker = attacker.counted(knockdowns=1)

    record = ActionRecord(action=action, outcome=outcome, time=time, strike=strike, damage=damage,
                          target=region, combo_depth=depth, knockout=knockout, stun=stun, critical=critical)
    return attacker, defender, record
