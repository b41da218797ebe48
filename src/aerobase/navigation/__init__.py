"""Flight plan validation, route evaluation and performance calculations.

Typical usage:
    from aerobase.navigation import RouteEvaluator, RouteValidator

    result = RouteValidator().validate(plan, snapshot)
    if result:
        route = RouteEvaluator().evaluate(plan, snapshot)
"""

from aerobase.navigation import calculator
from aerobase.navigation.evaluator import RouteEvaluator
from aerobase.navigation.validator import (
    RouteValidator,
    ValidationFailure,
    ValidationResult,
)

__all__ = [
    "RouteEvaluator",
    "RouteValidator",
    "ValidationFailure",
    "ValidationResult",
    "calculator",
]
