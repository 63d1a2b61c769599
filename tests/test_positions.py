from __future__ import annotations
import pytest

from fight_engine.positions import (
    ActionKind,
    LEGAL_ACTIONS,
    Position,
    available_actions,
    legal_actions,
    transition,
)
from fight_engine.reference import default_reference


def test_every_position_has_legal_actions():
    for p in Position:
        assert legal_actions(p), p


def test_mirror_is_an_involution():
    for p in Position:
        assert p.mirror.mirror is p
    assert Position.STANDING.mirror is Position.STANDING
    assert Position.MOUNT_TOP.mirror is Position.MOUNT_BOTTOM
    assert Position.BACK_CONTROL_OFFENCE.mirror is Position.BACK_CONTROL_DEFENCE


def test_transitions_are_always_mirrored():
    for p in Position:
        for a in ActionKind:
            moved = transition(p, a)
            if moved is None:
                continue
            actor, opponent = moved
            assert opponent is actor.mirror


def test_standing_actions():
    assert legal_actions(Position.STANDING) == {
        ActionKind.PUNCH, ActionKind.KICK, ActionKind.TAKEDOWN,
        ActionKind.CLINCH, ActionKind.WAIT, ActionKind.SEEK_FINISH,
    }
    assert transition(Position.STANDING, ActionKind.TAKEDOWN) == (Position.FULL_GUARD_TOP, Position.FULL_GUARD_BOTTOM)
    assert transition(Position.STANDING, ActionKind.CLINCH) == (Position.CLINCH_OFFENCE, Position.CLINCH_DEFENCE)


def test_clinch_sides_differ():
    assert ActionKind.CLINCH_TAKEDOWN in LEGAL_ACTIONS[Position.CLINCH_OFFENCE]
    assert ActionKind.CLINCH_EXIT not in LEGAL_ACTIONS[Position.CLINCH_OFFENCE]
    assert ActionKind.CLINCH_EXIT in LEGAL_ACTIONS[Position.CLINCH_DEFENCE]
    assert transition(Position.CLINCH_DEFENCE, ActionKind.CLINCH_EXIT) == (Position.STANDING, Position.STANDING)
    assert transition(Position.CLINCH_OFFENCE, ActionKind.CLINCH_TAKEDOWN)[0] is Position.FULL_GUARD_TOP


def test_advance_chain_ends_at_back_control():
    chain = [Position.FULL_GUARD_TOP]
    while True:
        moved = transition(chain[-1], ActionKind.POSITION_ADVANCE)
        if moved is None:
            break
        chain.append(moved[0])
    assert chain == [
        Position.FULL_GUARD_TOP, Position.HALF_GUARD_TOP, Position.SIDE_CONTROL_TOP,
        Position.MOUNT_TOP, Position.BACK_CONTROL_OFFENCE,
    ]


@pytest.mark.parametrize("position,action", [
    (Position.BACK_CONTROL_OFFENCE, ActionKind.POSITION_ADVANCE),
    (Position.SIDE_CONTROL_BOTTOM, ActionKind.SWEEP),
    (Position.BACK_CONTROL_DEFENCE, ActionKind.SWEEP),
    (Position.MOUNT_TOP, ActionKind.PUNCH),
    (Position.STANDING, ActionKind.SUBMISSION),
    (Position.FULL_GUARD_BOTTOM, ActionKind.POSITION_ADVANCE),
])
def test_untargeted_or_illegal_requests_return_none(position, action):
    assert transition(position, action) is None


def test_sweeps_and_escapes():
    assert transition(Position.MOUNT_BOTTOM, ActionKind.SWEEP) == (Position.FULL_GUARD_TOP, Position.FULL_GUARD_BOTTOM)
    assert transition(Position.HALF_GUARD_BOTTOM, ActionKind.SWEEP)[0] is Position.HALF_GUARD_TOP
    for p in Position:
        if p.is_bottom:
            assert transition(p, ActionKind.ESCAPE) == (Position.STANDING, Position.STANDING)


def test_non_positional_actions_keep_the_pair_in_place():
    assert transition(Position.MOUNT_TOP, ActionKind.GROUND_STRIKE) == (Position.MOUNT_TOP, Position.MOUNT_BOTTOM)
    assert transition(Position.STANDING, ActionKind.WAIT) == (Position.STANDING, Position.STANDING)


def test_available_actions_drop_dead_ends():
    ref = default_reference()
    assert available_actions(Position.BACK_CONTROL_OFFENCE, ref) == {ActionKind.GROUND_STRIKE, ActionKind.SUBMISSION}
    assert available_actions(Position.BACK_CONTROL_DEFENCE, ref) == {ActionKind.ESCAPE}
    # no catalogued submission from inside the guard
    assert ActionKind.SUBMISSION not in available_actions(Position.FULL_GUARD_TOP, ref)
    assert ActionKind.SUBMISSION in available_actions(Position.FULL_GUARD_BOTTOM, ref)
    assert available_actions(Position.SIDE_CONTROL_BOTTOM, ref) == {ActionKind.ESCAPE}
