"""
Build-agent task interface.

A task reads its inputs from the environment, reports diagnostics, publishes
variables for later steps and finishes with a result. The agent understands
these through logging commands written to stdout:

    ##vso[task.debug]Trying to get (Flutter,3.13.0-stable, linux) tool from local cache
    ##vso[task.setvariable variable=FlutterToolPath;issecret=false;]/opt/tools/...
    ##vso[task.complete result=Succeeded;]Installed

Inputs named ``channel`` are read from ``INPUT_CHANNEL``; explicit overrides
(from the command line) take precedence over the environment.
"""

import enum
import logging
import os
import sys
from typing import Dict, Mapping, Optional, TextIO

from flutterinstall.core.exceptions import InputRequiredError

logger = logging.getLogger(__name__)


class TaskResult(enum.Enum):
    """Terminal status of a task run."""

    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


def escape_data(value: str) -> str:
    """Escape a logging command message."""
    return value.replace("%", "%AZP25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a logging command property value."""
    return escape_data(value).replace("]", "%5D").replace(";", "%3B")


def format_command(
    command: str, properties: Optional[Mapping[str, str]] = None, message: str = ""
) -> str:
    """
    Format a logging command line.

    Args:
        command: Command name (e.g., "task.setvariable")
        properties: Command properties, emitted in insertion order
        message: Command data

    Returns:
        The command line without trailing newline

    Example:
        >>> format_command("task.complete", {"result": "Failed"}, "boom")
        '##vso[task.complete result=Failed;]boom'
    """
    line = f"##vso[{command}"
    if properties:
        line += " " + "".join(
            f"{key}={escape_property(str(value))};"
            for key, value in properties.items()
        )
    return f"{line}]{escape_data(message)}"


def input_env_name(name: str) -> str:
    """
    Environment variable name carrying a task input.

    Example:
        >>> input_env_name("customVersion")
        'INPUT_CUSTOMVERSION'
    """
    return "INPUT_" + name.replace(" ", "_").upper()


class TaskContext:
    """
    Inputs, diagnostics and results of one task run.

    Attributes:
        result: Result set by the last set_result() call, or None
        message: Message of the last set_result() call
        variables: Variables published during the run
    """

    def __init__(
        self,
        inputs: Optional[Mapping[str, Optional[str]]] = None,
        environ: Optional[Mapping[str, str]] = None,
        stream: Optional[TextIO] = None,
    ):
        """
        Initialize task context.

        Args:
            inputs: Explicit input values; None values are treated as unset
            environ: Environment to read INPUT_* variables from (default: os.environ)
            stream: Where logging commands are written (default: sys.stdout)
        """
        self._inputs = {k: v for k, v in (inputs or {}).items() if v is not None}
        self._environ = environ if environ is not None else os.environ
        self._stream = stream
        self.result: Optional[TaskResult] = None
        self.message = ""
        self.variables: Dict[str, str] = {}

    def _emit(self, line: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(line + "\n")
        stream.flush()

    def get_input(self, name: str, required: bool = False) -> Optional[str]:
        """
        Read a task input.

        Args:
            name: Input name (e.g., "channel")
            required: Raise if the input is missing or blank

        Returns:
            Stripped input value, or None if unset and not required

        Raises:
            InputRequiredError: If required and the input is missing or blank
        """
        if name in self._inputs:
            value = self._inputs[name]
        else:
            value = self._environ.get(input_env_name(name))

        value = value.strip() if value else ""
        if not value:
            if required:
                raise InputRequiredError(name)
            return None

        self.debug(f"{name}={value}")
        return value

    def debug(self, message: str) -> None:
        """Write a debug diagnostic."""
        logger.debug(message)
        self._emit(format_command("task.debug", message=message))

    def set_variable(self, name: str, value: str, secret: bool = False) -> None:
        """
        Publish a variable to later steps and to this process's environment.

        Args:
            name: Variable name
            value: Variable value
            secret: Mask the value in agent logs
        """
        self.variables[name] = value
        os.environ[name] = value

        if not secret:
            logger.debug(f"Set variable {name}={value}")
        self._emit(
            format_command(
                "task.setvariable",
                {"variable": name, "issecret": "true" if secret else "false"},
                value,
            )
        )

    def set_result(self, result: TaskResult, message: str) -> None:
        """
        Finish the task with a result.

        Args:
            result: Succeeded or Failed
            message: Human-readable outcome
        """
        self.result = result
        self.message = message

        if result == TaskResult.FAILED:
            logger.error(message)
            self._emit(format_command("task.logissue", {"type": "error"}, message))
        else:
            logger.info(message)

        self._emit(format_command("task.complete", {"result": result.value}, message))

    @property
    def succeeded(self) -> bool:
        """True once the task has finished successfully."""
        return self.result == TaskResult.SUCCEEDED


__all__ = [
    "TaskResult",
    "TaskContext",
    "escape_data",
    "escape_property",
    "format_command",
    "input_env_name",
]
