"""
Probability and damage model. Pure functions: every random draw is made
by the caller and passed in, so these can be tested with plain numbers.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from fighters.fighter import Rating
from fight_engine.config import EngineConfig
from fight_engine.fatigue import stamina_impact
from fight_engine.events import Outcome
from fight_engine.positions import Position
from fight_engine.reference import BodyRegion, StrikeSpec, SubmissionType
from fight_engine.utils import clamp

EPS = 1e-9


def normalize_pair(a: float, b: float) -> Tuple[float, float]:
    a = max(0.0, float(a))
    b = max(0.0, float(b))
    total = a + b
    if total <= EPS:
        return 0.5, 0.5
    return a / total, b / total


def success_ratio(offence: float, defence: float) -> float:
    return normalize_pair(offence, defence)[0]


@dataclass(frozen=True)
class StrikeProbabilities:
    hit: float
    block: float
    evade: float
    miss: float

    @classmethod
    def normalized(cls, hit: float, block: float, evade: float, miss: float) -> 'StrikeProbabilities':
        parts = [max(0.0, hit), max(0.0, block), max(0.0, evade), max(0.0, miss)]
        total = sum(parts)
        if total <= EPS:
            return cls(0.0, 0.0, 0.0, 1.0)
        return cls(*(p / total for p in parts))

    def decayed(self, factor: float) -> 'StrikeProbabilities':
        """Scale hit by `factor`, spreading the removed mass over block/evade/miss."""
        new_hit = self.hit * clamp(factor)
        removed = self.hit - new_hit
        rest = self.block + self.evade + self.miss
        if rest <= EPS:
            return StrikeProbabilities(new_hit, self.block, self.evade, self.miss + removed)
        return StrikeProbabilities(
            new_hit,
            self.block + removed * self.block / rest,
            self.evade + removed * self.evade / rest,
            self.miss + removed * self.miss / rest,
        )

    def pick(self, roll: float) -> Outcome:
        cumulative = 0.0
        for outcome, p in ((Outcome.LANDED, self.hit), (Outcome.BLOCKED, self.block),
                           (Outcome.EVADED, self.evade), (Outcome.MISSED, self.miss)):
            cumulative += p
            if roll < cumulative:
                return outcome
        return Outcome.MISSED

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.hit, self.block, self.evade, self.miss


def _profile_inputs(category: str, att: Rating, dfn: Rating) -> Tuple[float, float, float, float]:
    """(offence, defence, evasion, accuracy) on 0-1 scales for a strike category."""
    if category == 'kick':
        return (att.kicking * att.kick_speed / 1e4, dfn.kick_defence / 100.0,
                (dfn.head_movement + dfn.footwork) / 200.0, att.kick_accuracy / 100.0)
    if category == 'clinch':
        return (att.clinch_striking / 100.0, dfn.clinch_control / 100.0,
                dfn.head_movement / 100.0, att.punch_accuracy / 100.0)
    if category == 'ground':
        return (att.ground_striking / 100.0, dfn.ground_defence / 100.0,
                dfn.head_movement / 100.0, att.punch_accuracy / 100.0)
    return (att.striking * att.hand_speed / 1e4, dfn.striking_defence / 100.0,
            dfn.head_movement / 100.0, att.punch_accuracy / 100.0)


def strike_probabilities(category: str, att: Rating, dfn: Rating, cfg: EngineConfig, *,
                         attacker_stamina: float = 100.0, hit_bonus: float = 0.0) -> StrikeProbabilities:
    """Hit/block/evade/miss for one strike; always sums to 1."""
    prof = cfg.get(f'strike_profiles.{category}') or cfg.get('strike_profiles.punch')
    off, dfn_skill, evasion, acc = _profile_inputs(category, att, dfn)
    hit = (prof['hit'] + 0.2 * off + 0.1 * clamp(off - dfn_skill)) * acc
    hit = min(hit, prof['hit_max']) * stamina_impact(attacker_stamina)
    if hit > 0:
        hit = min(1.0, hit + hit_bonus)
    miss = prof['miss'] + 0.1 * (1.0 - acc)
    evade = prof['evade'] + 0.1 * evasion
    block = max(0.0, 1.0 - hit - miss - evade)
    return StrikeProbabilities.normalized(hit, block, evade, miss)


def power_rating(spec: StrikeSpec, att: Rating) -> float:
    if spec.category == 'kick':
        return att.kick_power
    if spec.category in ('clinch', 'ground'):
        return (att.punch_power + att.strength) / 2.0
    return att.punch_power


def mitigation(region: BodyRegion, dfn: Rating, cfg: EngineConfig) -> float:
    if region is BodyRegion.HEAD:
        return 1.0 - cfg.num('damage.chin_mitigation', 0.5) * dfn.chin / 100.0
    return 1.0 - cfg.num('damage.toughness_mitigation', 0.5) * dfn.toughness / 100.0


def strike_damage(spec: StrikeSpec, att: Rating, dfn: Rating, region: BodyRegion, cfg: EngineConfig, *,
                  attacker_stamina: float, variation_roll: float, crit_roll: float) -> Tuple[float, bool]:
    """Landed damage and whether it was a critical."""
    floor = cfg.num('damage.power_floor', 0.4)
    power = floor + (1.0 - floor) * power_rating(spec, att) / 100.0
    var = cfg.num('damage.variation', 0.25)
    variation = 1.0 + (2.0 * variation_roll - 1.0) * var
    critical = crit_roll < cfg.num('damage.crit_chance', 0.08)
    crit = cfg.num('damage.crit_mult', 1.5) if critical else 1.0
    dmg = spec.damage * power * variation * crit * mitigation(region, dfn, cfg) * stamina_impact(attacker_stamina)
    return max(0.0, dmg), critical


def slam_damage(base: float, att: Rating, dfn: Rating, region: BodyRegion, cfg: EngineConfig) -> float:
    floor = cfg.num('damage.power_floor', 0.4)
    power = floor + (1.0 - floor) * att.strength / 100.0
    return max(0.0, base * power * mitigation(region, dfn, cfg))


def _head_trauma_chance(section: str, power: float, chin: float, head_health: float, max_health: float,
                        damage: float, cfg: EngineConfig) -> float:
    lost = clamp(1.0 - head_health / max_health) if max_health > 0 else 1.0
    chin_weakness = 1.0 - clamp(chin / 100.0)
    p = (cfg.num(f'{section}.base')
         * (0.5 + clamp(power / 100.0))
         * (0.5 + chin_weakness)
         * (1.0 + 2.0 * lost)
         * (0.5 + damage / 10.0))
    return p


def knockout_probability(power: float, chin: float, head_health: float, max_health: float, damage: float,
                         cfg: EngineConfig, *, stunned: bool = False) -> float:
    """Chance a landed head strike finishes the fight outright."""
    p = _head_trauma_chance('knockout', power, chin, head_health, max_health, damage, cfg)
    if stunned:
        p *= cfg.num('knockout.stunned_mult', 2.0)
    return clamp(p, 0.0, cfg.num('knockout.max', 0.35))


def stun_probability(power: float, chin: float, head_health: float, max_health: float, damage: float,
                     cfg: EngineConfig) -> float:
    p = _head_trauma_chance('stun', power, chin, head_health, max_health, damage, cfg)
    return clamp(p, 0.0, cfg.num('stun.max', 0.5))


def contest_probability(kind: str, offence: float, defence: float, cfg: EngineConfig, *,
                        attacker_stamina: float = 100.0) -> float:
    """Takedowns, clinch entries/exits, advances, sweeps and escapes."""
    base = cfg.num(f'grappling.{kind}', 0.4)
    p = base * 2.0 * success_ratio(offence, defence) * stamina_impact(attacker_stamina)
    return clamp(p, 0.0, cfg.num('grappling.cap', 0.9))


def submission_probability(att: Rating, dfn: Rating, position: Position, submission: SubmissionType,
                           cfg: EngineConfig, *, attacker_stamina: float, defender_stamina: float) -> float:
    ratio = success_ratio(att.submission_offence, dfn.submission_defence)
    bonus = float((cfg.get('submission.position_bonus') or {}).get(position.value, 0.0))
    p = ratio * cfg.num('submission.scale', 0.35) + bonus
    p /= max(EPS, submission.difficulty)
    p *= math.exp(cfg.num('submission.stamina_k', 0.5) * (attacker_stamina - defender_stamina) / 100.0)
    if defender_stamina < cfg.num('submission.low_stamina_threshold', 20.0):
        p *= cfg.num('submission.low_stamina_mult', 1.25)
    return clamp(p, 0.0, cfg.num('submission.max', 0.6))


def elapsed_seconds(base: float, roll: float) -> int:
    """Action duration: the base time jittered by up to half a second, never below 1."""
    return max(1, int(round(base + roll - 0.5)))
