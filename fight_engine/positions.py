"""Position state machine: legal actions per position and mirrored transitions."""
from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple


class Position(str, Enum):
    STANDING = 'standing'
    CLINCH_OFFENCE = 'clinch_offence'
    CLINCH_DEFENCE = 'clinch_defence'
    FULL_GUARD_TOP = 'ground_full_guard_top'
    FULL_GUARD_BOTTOM = 'ground_full_guard_bottom'
    HALF_GUARD_TOP = 'ground_half_guard_top'
    HALF_GUARD_BOTTOM = 'ground_half_guard_bottom'
    SIDE_CONTROL_TOP = 'ground_side_control_top'
    SIDE_CONTROL_BOTTOM = 'ground_side_control_bottom'
    MOUNT_TOP = 'ground_mount_top'
    MOUNT_BOTTOM = 'ground_mount_bottom'
    BACK_CONTROL_OFFENCE = 'ground_back_control_offence'
    BACK_CONTROL_DEFENCE = 'ground_back_control_defence'

    @property
    def mirror(self) -> 'Position':
        return _MIRROR[self]

    @property
    def is_ground(self) -> bool:
        return self.value.startswith('ground_')

    @property
    def is_clinch(self) -> bool:
        return self in (Position.CLINCH_OFFENCE, Position.CLINCH_DEFENCE)

    @property
    def is_top(self) -> bool:
        return self.value.endswith('_top') or self is Position.BACK_CONTROL_OFFENCE

    @property
    def is_bottom(self) -> bool:
        return self.value.endswith('_bottom') or self is Position.BACK_CONTROL_DEFENCE


_MIRROR: Dict[Position, Position] = {
    Position.STANDING: Position.STANDING,
    Position.CLINCH_OFFENCE: Position.CLINCH_DEFENCE,
    Position.CLINCH_DEFENCE: Position.CLINCH_OFFENCE,
    Position.FULL_GUARD_TOP: Position.FULL_GUARD_BOTTOM,
    Position.FULL_GUARD_BOTTOM: Position.FULL_GUARD_TOP,
    Position.HALF_GUARD_TOP: Position.HALF_GUARD_BOTTOM,
    Position.HALF_GUARD_BOTTOM: Position.HALF_GUARD_TOP,
    Position.SIDE_CONTROL_TOP: Position.SIDE_CONTROL_BOTTOM,
    Position.SIDE_CONTROL_BOTTOM: Position.SIDE_CONTROL_TOP,
    Position.MOUNT_TOP: Position.MOUNT_BOTTOM,
    Position.MOUNT_BOTTOM: Position.MOUNT_TOP,
    Position.BACK_CONTROL_OFFENCE: Position.BACK_CONTROL_DEFENCE,
    Position.BACK_CONTROL_DEFENCE: Position.BACK_CONTROL_OFFENCE,
}


class ActionKind(str, Enum):
    PUNCH = 'punch'
    KICK = 'kick'
    TAKEDOWN = 'takedown'
    CLINCH = 'clinch'
    WAIT = 'wait'
    SEEK_FINISH = 'seek_finish'
    CLINCH_STRIKE = 'clinch_strike'
    CLINCH_TAKEDOWN = 'clinch_takedown'
    CLINCH_EXIT = 'clinch_exit'
    GROUND_STRIKE = 'ground_strike'
    POSITION_ADVANCE = 'position_advance'
    SUBMISSION = 'submission'
    SWEEP = 'sweep'
    ESCAPE = 'escape'


# actions that move the pair to a new position when they succeed
POSITIONAL = frozenset({
    ActionKind.TAKEDOWN, ActionKind.CLINCH, ActionKind.CLINCH_TAKEDOWN, ActionKind.CLINCH_EXIT,
    ActionKind.POSITION_ADVANCE, ActionKind.SWEEP, ActionKind.ESCAPE,
})

_STANDING = frozenset({
    ActionKind.PUNCH, ActionKind.KICK, ActionKind.TAKEDOWN,
    ActionKind.CLINCH, ActionKind.WAIT, ActionKind.SEEK_FINISH,
})
_TOP = frozenset({ActionKind.GROUND_STRIKE, ActionKind.POSITION_ADVANCE, ActionKind.SUBMISSION})
_BOTTOM = frozenset({ActionKind.SWEEP, ActionKind.SUBMISSION, ActionKind.ESCAPE})

LEGAL_ACTIONS: Dict[Position, FrozenSet[ActionKind]] = {
    Position.STANDING: _STANDING,
    Position.CLINCH_OFFENCE: frozenset({ActionKind.CLINCH_STRIKE, ActionKind.CLINCH_TAKEDOWN}),
    Position.CLINCH_DEFENCE: frozenset({ActionKind.CLINCH_STRIKE, ActionKind.CLINCH_EXIT}),
}
for _p in Position:
    if _p.is_top:
        LEGAL_ACTIONS[_p] = _TOP
    elif _p.is_bottom:
        LEGAL_ACTIONS[_p] = _BOTTOM

# (position, action) -> actor's position afterwards; the opponent takes the mirror
TRANSITIONS: Dict[Tuple[Position, ActionKind], Position] = {
    (Position.STANDING, ActionKind.TAKEDOWN): Position.FULL_GUARD_TOP,
    (Position.STANDING, ActionKind.CLINCH): Position.CLINCH_OFFENCE,
    (Position.CLINCH_OFFENCE, ActionKind.CLINCH_TAKEDOWN): Position.FULL_GUARD_TOP,
    (Position.CLINCH_DEFENCE, ActionKind.CLINCH_EXIT): Position.STANDING,
    (Position.FULL_GUARD_TOP, ActionKind.POSITION_ADVANCE): Position.HALF_GUARD_TOP,
    (Position.HALF_GUARD_TOP, ActionKind.POSITION_ADVANCE): Position.SIDE_CONTROL_TOP,
    (Position.SIDE_CONTROL_TOP, ActionKind.POSITION_ADVANCE): Position.MOUNT_TOP,
    (Position.MOUNT_TOP, ActionKind.POSITION_ADVANCE): Position.BACK_CONTROL_OFFENCE,
    (Position.FULL_GUARD_BOTTOM, ActionKind.SWEEP): Position.FULL_GUARD_TOP,
    (Position.HALF_GUARD_BOTTOM, ActionKind.SWEEP): Position.HALF_GUARD_TOP,
    (Position.MOUNT_BOTTOM, ActionKind.SWEEP): Position.FULL_GUARD_TOP,
}
for _p in Position:
    if _p.is_bottom:
        TRANSITIONS[(_p, ActionKind.ESCAPE)] = Position.STANDING


def legal_actions(position: Position) -> FrozenSet[ActionKind]:
    return LEGAL_ACTIONS[position]


def transition(position: Position, action: ActionKind) -> Optional[Tuple[Position, Position]]:
    """
    (actor, opponent) positions after `action` succeeds from `position`.
    Non-positional actions leave the pair where it is. None when the
    action is illegal here or has no target (e.g. advancing from the back).
    """
    if action not in LEGAL_ACTIONS[position]:
        return None
    if action not in POSITIONAL:
        return position, position.mirror
    target = TRANSITIONS.get((position, action))
    if target is None:
        return None
    return target, target.mirror


def available_actions(position: Position, reference=None) -> FrozenSet[ActionKind]:
    """Legal actions that can actually be attempted from `position`."""
    out = set()
    for action in LEGAL_ACTIONS[position]:
        if transition(position, action) is None:
            continue
        if action is ActionKind.SUBMISSION and reference is not None and not reference.submissions_for(position):
            continue
        out.add(action)
    return frozenset(out)
