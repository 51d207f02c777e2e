from .error_handler import (
    synthesis_handler,
    scheduling_handler,
    configuration_handler,
    host_handler,
    export_handler,
    memory_critical_handler,
    toggle_error_handler,
    toggle_error_category,
    get_error_statistics
)
from .performance_utils import PerformanceMonitor, performance_tracked

__all__ = [
    'synthesis_handler',
    'scheduling_handler',
    'configuration_handler',
    'host_handler',
    'export_handler',
    'memory_critical_handler',
    'toggle_error_handler',
    'toggle_error_category',
    'get_error_statistics',
    'PerformanceMonitor',
    'performance_tracked'
]
