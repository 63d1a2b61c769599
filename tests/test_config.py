from __future__ import annotations
import shutil

import pytest

from fight_engine.config import DEFAULTS, EngineConfig, load_config
from fight_engine.positions import Position
from fight_engine.reference import DATA_DIR, GENERIC, StrikeType, default_reference, load_reference


def test_defaults_and_dotted_lookup():
    cfg = EngineConfig()
    assert cfg.get('rules.rounds') == 3
    assert cfg.get('rules.round_seconds') == 300
    assert cfg.get('rules.nope', 'x') == 'x'
    assert cfg.num('combo.max_length') == 4.0
    # defaults are copied, not shared
    cfg.data['rules']['rounds'] = 5
    assert DEFAULTS['rules']['rounds'] == 3


def test_yaml_overlay_is_deep_merged(tmp_path):
    path = tmp_path / "engine.yml"
    path.write_text("rules:\n  rounds: 5\nknockout:\n  max: 0.5\n", encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg.get('rules.rounds') == 5
    assert cfg.get('rules.round_seconds') == 300
    assert cfg.get('knockout.max') == 0.5
    assert cfg.get('knockout.base') == DEFAULTS['knockout']['base']


def test_missing_config_file_gives_defaults(tmp_path):
    cfg = load_config(str(tmp_path / "absent.yml"))
    assert cfg.data == DEFAULTS
    assert load_config(None).data == DEFAULTS


@pytest.mark.parametrize("body", ["- just\n- a list\n", "rules:\n  round_tiebreak: judges\n"])
def test_bad_config_rejected(tmp_path, body):
    path = tmp_path / "bad.yml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_reference_tables_complete():
    ref = default_reference()
    assert set(ref.strikes) == set(StrikeType)
    assert len(ref.styles) == 20
    assert GENERIC in ref.styles
    assert ref.follow_ups(StrikeType.HEAD_KICK) == ()
    assert StrikeType.CROSS in ref.follow_ups(StrikeType.JAB)
    assert [s.key for s in ref.submissions_for(Position.BACK_CONTROL_OFFENCE)] == ['rear_naked_choke']
    assert ref.submissions_for(Position.FULL_GUARD_TOP) == ()


def test_unknown_style_falls_back_to_generic(caplog):
    ref = default_reference()
    assert ref.style('NINJUTSU') is ref.styles[GENERIC]
    assert ref.style(None) is ref.styles[GENERIC]
    assert ref.style('muay_thai').key == 'MUAY_THAI'
    assert 'NINJUTSU' in caplog.text


def test_style_weights():
    ref = default_reference()
    tkd = ref.style('TAEKWONDO')
    assert tkd.weight_for(StrikeType.HEAD_KICK) == 5
    assert tkd.weight_for(StrikeType.CLINCH_STRIKE) == 1.0
    # tables not given in the file come from the defaults block
    assert ref.style('SWITCH_HITTER').action_weight('ground_top', 'submission') == 1.0
    assert ref.style('BJJ').action_weight('ground_top', 'submission') > 1.0


def test_reference_rejects_incomplete_strike_table(tmp_path):
    for name in ('styles.yml', 'submissions.yml'):
        shutil.copy(DATA_DIR / name, tmp_path / name)
    (tmp_path / 'strikes.yml').write_text(
        "strikes:\n  jab: {damage: 2, target: head, category: punch, time: 2, stamina: 1}\n",
        encoding="utf-8",
    )
    with pytest.raises(KeyError):
        load_reference(tmp_path)
