"""Fight simulation engine and its components."""
from fight_engine.bout import FightEngine, FightResult, Method, simulate_fight
from fight_engine.config import EngineConfig, load_config
from fight_engine.events import EventRecorder, EventType, FightEvent, Outcome
from fight_engine.positions import ActionKind, Position
from fight_engine.reference import default_reference, load_reference

__all__ = [
    'FightEngine', 'FightResult', 'Method', 'simulate_fight',
    'EngineConfig', 'load_config',
    'EventRecorder', 'EventType', 'FightEvent', 'Outcome',
    'ActionKind', 'Position',
    'default_reference', 'load_reference',
]
