from __future__ import annotations

from fighters.fighter import Fighter, Rating, Tendency


def test_from_record_accepts_camel_case():
    f = Fighter.from_record({
        'personid': 77,
        'firstname': 'Ana',
        'lastname': 'Lima',
        'fightingStyle': 'bjj',
        'Rating': {'punchPower': 70, 'fightIQ': 88, 'getUpAbility': 60, 'bogus': 5},
        'Tendency': {'punch': 10, 'takedown': 50},
    })
    assert f.id == 77
    assert f.name == 'Ana Lima'
    assert f.fighting_style == 'BJJ'
    assert f.rating.punch_power == 70
    assert f.rating.fight_iq == 88
    assert f.rating.get_up_ability == 60
    assert f.rating.chin == 0
    assert f.tendency.punch == 10
    assert f.tendency.kick == 25
    assert f.max_health is None
    assert f.stamina == 100.0


def test_missing_blocks_get_defaults():
    f = Fighter.from_record({'name': 'Nobody'})
    assert f.rating == Rating()
    assert f.tendency == Tendency()
    assert f.fighting_style == 'GENERIC'
    assert f.id == 'Nobody'
    assert f.record == '0-0'


def test_snake_case_keys_pass_through():
    r = Rating.from_mapping({'punch_power': 55, 'kick_defence': 40.5})
    assert r.punch_power == 55
    assert r.kick_defence == 40.5


def test_max_health_accepts_number_or_region_map():
    per_region = Fighter.from_record({'id': 1, 'name': 'A', 'maxHealth': {'head': 80, 'body': 120, 'legs': 100}})
    assert per_region.max_health == {'head': 80.0, 'body': 120.0, 'legs': 100.0}
    flat = Fighter.from_record({'name': 'B', 'max_health': 90})
    assert flat.max_health == {'head': 90.0, 'body': 90.0, 'legs': 90.0}
    partial = Fighter.from_record({'name': 'C', 'maxHealth': {'head': 70, 'legs': None}})
    assert partial.max_health == {'head': 70.0}


def test_null_fields_fall_back_to_defaults():
    f = Fighter.from_record({'name': 'D', 'maxHealth': None, 'stamina': None})
    assert f.max_health is None
    assert f.stamina == 100.0
