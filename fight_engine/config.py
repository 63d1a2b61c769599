from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


DEFAULTS: Dict[str, Any] = {
    'rules': {
        'rounds': 3,
        'round_seconds': 300,
        'max_health': 100.0,
        'max_stamina': 100.0,
        'round_stamina_recovery': 20.0,
        'round_health_recovery': 10.0,
        # coin_flip | strikes_landed | even
        'round_tiebreak': 'coin_flip',
    },
    'selection': {
        'last_actor_penalty': 0.9,
        'fatigue_threshold': 30.0,
        'fatigue_kick_mult': 0.6,
        'fatigue_takedown_mult': 0.6,
        'fatigue_wait_mult': 2.0,
        'wait_weight': 5.0,
        'seek_finish_weight': 40.0,
        'body_punch_weight': 2.0,
    },
    'strike_profiles': {
        'punch': {'hit': 0.30, 'hit_max': 0.50, 'miss': 0.20, 'evade': 0.20},
        'kick': {'hit': 0.25, 'hit_max': 0.45, 'miss': 0.25, 'evade': 0.25},
        'clinch': {'hit': 0.35, 'hit_max': 0.55, 'miss': 0.15, 'evade': 0.15},
        'ground': {'hit': 0.35, 'hit_max': 0.55, 'miss': 0.15, 'evade': 0.15},
    },
    'damage': {
        'variation': 0.25,
        'crit_chance': 0.08,
        'crit_mult': 1.5,
        'power_floor': 0.4,
        'chin_mitigation': 0.5,
        'toughness_mitigation': 0.5,
        'stunned_hit_bonus': 0.15,
    },
    'knockout': {'base': 0.006, 'max': 0.35, 'stunned_mult': 2.0},
    'stun': {'base': 0.03, 'max': 0.5},
    'grappling': {
        'cap': 0.9,
        'takedown': 0.40,
        'clinch': 0.50,
        'clinch_takedown': 0.45,
        'clinch_exit': 0.55,
        'position_advance': 0.40,
        'sweep': 0.25,
        'escape': 0.30,
    },
    'submission': {
        'scale': 0.35,
        'position_bonus': {
            'ground_back_control_offence': 0.10,
            'ground_mount_top': 0.08,
            'ground_side_control_top': 0.05,
            'ground_half_guard_top': 0.02,
        },
        'stamina_k': 0.5,
        'low_stamina_threshold': 20.0,
        'low_stamina_mult': 1.25,
        'max': 0.6,
    },
    'combo': {
        'base_chance': 0.45,
        'falloff': 0.7,
        'hit_decay': 0.85,
        'max_length': 4,
        'seconds_per_strike': 1,
    },
    'seek_finish': {'strikes': 3, 'hit_bonus': 0.2},
    # seconds / stamina per non-strike action
    'actions': {
        'takedown': {'time': 8, 'stamina': 7},
        'clinch': {'time': 3, 'stamina': 4},
        'clinch_takedown': {'time': 7, 'stamina': 6},
        'clinch_exit': {'time': 2, 'stamina': 3},
        'position_advance': {'time': 6, 'stamina': 5},
        'sweep': {'time': 6, 'stamina': 7},
        'escape': {'time': 6, 'stamina': 6},
        'submission': {'time': 10, 'stamina': 10},
        'wait': {'time': 5, 'stamina': -2},
        'seek_finish': {'time': 2, 'stamina': 15},
        'invalid': {'time': 1, 'stamina': 0},
    },
}


def _merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


@dataclass(frozen=True)
class EngineConfig:
    """Tuning knobs, read through dotted paths: cfg.get('rules.rounds')."""
    data: Dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEFAULTS))

    def get(self, path: str, default: Any = None) -> Any:
        cur: Any = self.data
        for part in path.split('.'):
            if isinstance(cur, dict) and part in cur:
                cur = cur[part]
            else:
                return default
        return cur

    def num(self, path: str, default: float = 0.0) -> float:
        return float(self.get(path, default))

    def with_overrides(self, overrides: Dict[str, Any]) -> 'EngineConfig':
        return EngineConfig(_merge(self.data, overrides))


def load_config(path: Optional[str] = None) -> EngineConfig:
    """
    Defaults deep-merged with an optional YAML overlay. A missing path
    gives plain defaults; a file that is not a mapping is rejected.
    """
    cfg = EngineConfig()
    if path is None:
        return cfg
    if not os.path.exists(path):
        logger.warning("config file %s not found, using defaults", path)
        return cfg
    with open(path, 'r', encoding='utf-8') as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"{path}: expected a mapping at top level, got {type(loaded).__name__}")
    tiebreak = _merge(cfg.data, loaded)['rules'].get('round_tiebreak')
    if tiebreak not in ('coin_flip', 'strikes_landed', 'even'):
        raise ValueError(f"{path}: unknown rules.round_tiebreak {tiebreak!r}")
    return cfg.with_overrides(loaded)
