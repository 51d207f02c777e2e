from .value_default import (
    WORLD,
    BUDGET,
    ITERATION,
    VALIDATION_RULES,
    ConfigurationError,
    get_parameter_config,
    get_defaults,
    validate_parameter_set
)
from .world_config import WorldConfig, BudgetConfig

__all__ = [
    'WORLD',
    'BUDGET',
    'ITERATION',
    'VALIDATION_RULES',
    'ConfigurationError',
    'get_parameter_config',
    'get_defaults',
    'validate_parameter_set',
    'WorldConfig',
    'BudgetConfig'
]
