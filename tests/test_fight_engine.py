"""Bout orchestration: stoppages, decisions, clocks and reproducibility."""
from __future__ import annotations
import json
from dataclasses import replace
from pathlib import Path

import pytest

from fighters.fighter import Fighter, Rating, Tendency
from fight_engine.actions import RESOLVERS, Decision
from fight_engine.bout import FightEngine, Method, simulate_fight
from fight_engine.config import EngineConfig
from fight_engine.events import EventType, Outcome
from fight_engine.positions import ActionKind, Position
from fight_engine.selector import choose_action, pick_actor

ROSTER = Path(__file__).resolve().parents[1] / 'data' / 'fighters.json'


class ConstantRandom:
    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


def load_roster():
    data = json.loads(ROSTER.read_text(encoding='utf-8'))
    return [Fighter.from_record(r) for r in data['fighters']]


def _fighter(fid: int, name: str, tendency: Tendency = None, **rating) -> Fighter:
    return Fighter(id=fid, name=name, rating=Rating(**rating), tendency=tendency or Tendency())


def _action_events(engine):
    skip = (EventType.FIGHT_START, EventType.FIGHT_END, EventType.ROUND_START,
            EventType.ROUND_END, EventType.RECOVERY)
    return [e for e in engine.events if e.type not in skip]


def test_every_action_kind_has_a_resolver():
    assert set(RESOLVERS) == set(ActionKind)


def test_same_seed_same_fight():
    a, b = load_roster()[:2]
    e1 = FightEngine(a, b, seed=42)
    e2 = FightEngine(a, b, seed=42)
    r1, r2 = e1.simulate(), e2.simulate()
    assert r1.to_dict() == r2.to_dict()
    assert e1.recorder.to_dicts() == e2.recorder.to_dicts()


def test_max_power_head_strike_knocks_out():
    a = _fighter(1, 'Hammer', output=50, striking=100, hand_speed=100, punch_accuracy=100, punch_power=100)
    b = _fighter(2, 'Glass', chin=0)
    engine = FightEngine(a, b, rng=ConstantRandom(0.0))
    result = engine.simulate()
    assert result.method is Method.KNOCKOUT
    assert result.winner == 0
    assert result.winner_name == 'Hammer'
    assert result.loser_name == 'Glass'
    assert result.round_ended == 1
    last = _action_events(engine)[-1]
    assert last.type is EventType.STRIKE
    assert last.details.get('knockout') is True
    assert result.end_time == last.clock
    assert result.fighter_health[1]['head'] == 0


def test_back_control_submission_ends_fight():
    a = _fighter(1, 'Choker')
    b = _fighter(2, 'Victim')
    engine = FightEngine(a, b, rng=ConstantRandom(0.0))
    engine.start_round(1)
    engine.states[0] = engine.states[0].moved_to(Position.BACK_CONTROL_OFFENCE)
    engine.states[1] = engine.states[1].moved_to(Position.BACK_CONTROL_DEFENCE)
    engine.execute(0, Decision(ActionKind.SUBMISSION))
    assert engine.states[1].tapped
    result = engine.finish()
    assert result.method is Method.SUBMISSION
    assert result.winner == 0
    assert result.submission_type == 'rear_naked_choke'
    assert result.round_ended == 1
    assert result.end_time == 300 - 10
    sub = engine.recorder.of_type(EventType.SUBMISSION)[-1]
    assert sub.outcome is Outcome.SUCCESS


def test_tapped_flag_always_means_submission_win_for_opponent():
    a, b = _fighter(1, 'A'), _fighter(2, 'B')
    engine = FightEngine(a, b, seed=1)
    engine.start_round(2)
    engine.states[0] = engine.states[0].with_(tapped=True)
    engine.execute(1, Decision(ActionKind.WAIT))
    result = engine.finish()
    assert result.method is Method.SUBMISSION
    assert result.winner == 1
    assert result.round_ended == 2


def test_all_strikes_missing_goes_to_the_cards():
    only_punches = Tendency(punch=25, kick=0, takedown=0, clinch=0)
    cfg = EngineConfig().with_overrides({
        'rules': {'round_tiebreak': 'even'},
        'selection': {'wait_weight': 0},
    })
    a = _fighter(1, 'A', only_punches)
    b = _fighter(2, 'B', only_punches)
    engine = FightEngine(a, b, config=cfg, rng=ConstantRandom(0.9999))
    result = engine.simulate()
    assert result.method is Method.DRAW
    assert result.winner is None
    assert result.round_ended == 3
    assert result.rounds_won == (0, 0)
    strikes = engine.recorder.of_type(EventType.STRIKE)
    assert strikes
    assert all(e.outcome is Outcome.MISSED for e in strikes)
    for h in result.fighter_health:
        assert h == {'head': 100.0, 'body': 100.0, 'legs': 100.0}


def test_coin_flip_tiebreak_gives_a_decision():
    a, b = _fighter(1, 'A'), _fighter(2, 'B')
    result = FightEngine(a, b, rng=ConstantRandom(0.9999)).simulate()
    assert result.method is Method.DECISION
    assert result.winner == 1
    assert result.rounds_won == (0, 3)
    assert all(s.tiebreak for s in result.round_scores)


def test_invalid_request_is_a_one_second_no_op():
    a, b = _fighter(1, 'A'), _fighter(2, 'B')
    engine = FightEngine(a, b, seed=3)
    engine.start_round(1)
    before = list(engine.states)
    res = engine.execute(0, Decision(ActionKind.POSITION_ADVANCE))
    assert res.invalid
    assert engine.clock == 299
    for old, new in zip(before, engine.states):
        assert new.health == old.health
        assert new.stamina == old.stamina
        assert new.position is old.position
        assert dict(new.stats) == dict(old.stats)
    assert engine.events[-1].type is EventType.INVALID


def test_successful_takedown_moves_both_fighters():
    a = _fighter(1, 'Wrestler', takedown_offence=100)
    b = _fighter(2, 'Striker')
    engine = FightEngine(a, b, rng=ConstantRandom(0.0))
    engine.start_round(1)
    engine.execute(0, Decision(ActionKind.TAKEDOWN))
    assert engine.states[0].position is Position.FULL_GUARD_TOP
    assert engine.states[1].position is Position.FULL_GUARD_BOTTOM
    assert engine.states[1].health.body < 100
    assert engine.states[0].stat('takedown_success') == 1


def test_round_start_resets_position_and_stun():
    a, b = _fighter(1, 'A'), _fighter(2, 'B')
    engine = FightEngine(a, b, seed=9)
    engine.start_round(1)
    engine.states[0] = engine.states[0].moved_to(Position.MOUNT_TOP).with_(stunned=True)
    engine.states[1] = engine.states[1].moved_to(Position.MOUNT_BOTTOM)
    engine.end_round()
    engine.start_round(2)
    assert all(s.position is Position.STANDING for s in engine.states)
    assert not any(s.stunned for s in engine.states)
    assert engine.clock == 300


def test_between_round_recovery_is_capped():
    a, b = _fighter(1, 'A'), _fighter(2, 'B')
    engine = FightEngine(a, b, seed=9)
    engine.start_round(1)
    engine.states[1] = engine.states[1].take_damage(engine.reference.takedown_target, 25)
    score = engine.end_round()
    assert score.winner == 0
    assert engine.states[1].health.body == 85
    assert engine.states[0].health.body == 100
    recoveries = engine.recorder.of_type(EventType.RECOVERY)
    assert len(recoveries) == 2


def test_final_round_has_no_recovery():
    a, b = _fighter(1, 'A'), _fighter(2, 'B')
    engine = FightEngine(a, b, seed=9)
    engine.start_round(3)
    engine.end_round()
    assert engine.recorder.of_type(EventType.RECOVERY) == []


@pytest.mark.parametrize("seed", range(25))
def test_fight_invariants(seed):
    roster = load_roster()
    a = roster[seed % len(roster)]
    b = roster[(seed + 1) % len(roster)]
    engine = FightEngine(a, b, seed=seed)
    result = engine.simulate()

    assert 1 <= result.round_ended <= 3
    assert result.method in Method
    if result.method is Method.DRAW:
        assert result.winner is None
    else:
        assert result.winner in (0, 1)

    for health, cap in zip(result.fighter_health, result.fighter_max_health):
        assert all(0 <= v <= cap[k] for k, v in health.items())
    for s in engine.states:
        assert 0 <= s.stamina <= 100

    events = engine.events
    assert [e.seq for e in events] == list(range(1, len(events) + 1))
    assert events[0].type is EventType.FIGHT_START
    assert events[-1].type is EventType.FIGHT_END

    last_clock = {}
    for e in _action_events(engine):
        assert 0 <= e.clock <= 300
        if e.round in last_clock:
            assert e.clock <= last_clock[e.round]
        last_clock[e.round] = e.clock

    if result.method is Method.KNOCKOUT:
        loser = engine.states[1 - result.winner]
        assert loser.is_knocked_out
        assert result.end_time == _action_events(engine)[-1].clock
    if result.method is Method.SUBMISSION:
        assert engine.states[1 - result.winner].tapped
        assert result.submission_type is not None
    if not result.is_stoppage:
        assert result.round_ended == 3
        assert len(result.round_scores) == 3


def test_simulate_fight_helper_and_idempotent_simulate():
    a, b = load_roster()[2:4]
    result = simulate_fight(a, b, seed=5)
    engine = FightEngine(a, b, seed=5)
    assert engine.simulate().to_dict() == result.to_dict()
    assert engine.simulate() is engine.result


def test_configured_max_health_is_the_default_cap():
    cfg = EngineConfig().with_overrides({'rules': {'max_health': 50.0}})
    a = _fighter(1, 'A')
    b = Fighter(id=2, name='B', max_health={'head': 80.0})
    engine = FightEngine(a, b, config=cfg, seed=1)
    assert engine.states[0].max_health.as_dict() == {'head': 50.0, 'body': 50.0, 'legs': 50.0}
    assert engine.states[0].health == engine.states[0].max_health
    assert engine.states[1].max_health.as_dict() == {'head': 80.0, 'body': 50.0, 'legs': 50.0}


@pytest.mark.parametrize("seed", range(5))
def test_health_stays_within_region_caps_after_every_step(seed):
    caps = {'head': 80.0, 'body': 120.0, 'legs': 100.0}
    roster = load_roster()
    a, b = (replace(f, max_health=caps) for f in roster[seed:seed + 2])
    engine = FightEngine(a, b, seed=seed)
    for number in range(1, engine.rounds + 1):
        engine.start_round(number)
        while engine.clock > 0 and engine.stoppage is None:
            actor = pick_actor(engine.states, engine.rng, engine.config, engine.last_actor)
            decision = choose_action(engine.states[actor], engine.states[1 - actor], engine.rng,
                                     engine.config, engine.reference)
            engine.execute(actor, decision)
            for s in engine.states:
                for region, value in s.health.as_dict().items():
                    assert 0 <= value <= caps[region]
        if engine.stoppage is not None:
            break
        engine.end_round()
        for s in engine.states:
            assert all(0 <= v <= caps[k] for k, v in s.health.as_dict().items())
    result = engine.finish()
    assert result.fighter_max_health == (caps, caps)
    assert result.to_dict()['fighter_max_health'] == [caps, caps]
