"""
Build-agent task interface: inputs, diagnostics, variables and results.
"""

from .lib import (
    TaskResult,
    TaskContext,
    format_command,
    input_env_name,
)

__all__ = [
    "TaskResult",
    "TaskContext",
    "format_command",
    "input_env_name",
]
