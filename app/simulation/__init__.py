from .constraint_evaluator import ConstraintEvaluator
from .engine_adapter import BackgroundRun, EngineAdapter, EngineHandle, RunOutcome
from .net_mapper import NetMapper
from .quantity_extractor import QuantityExtractor
from .view_bridge import ViewBridge

__all__ = [
    'BackgroundRun',
    'ConstraintEvaluator',
    'EngineAdapter',
    'EngineHandle',
    'NetMapper',
    'QuantityExtractor',
    'RunOutcome',
    'ViewBridge',
]
