"""Service modules"""
from .health import HealthFactorCalculator
from .liquidation import LiquidationEngine
from .engine import CoreEngine
from .simulator import Simulator, StepResult, load_scenario

__all__ = [
    "HealthFactorCalculator",
    "LiquidationEngine",
    "CoreEngine",
    "Simulator",
    "StepResult",
    "load_scenario",
]
