"""
Install command implementation.

Runs the Flutter install task. Command-line options take precedence over the
INPUT_* environment variables set by the build agent.
"""

from flutterinstall.cli.utils import create_tool_cache, load_cli_settings
from flutterinstall.core.exceptions import ConfigurationError
from flutterinstall.sdk.installer import FlutterInstaller
from flutterinstall.task.lib import TaskContext, TaskResult


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    task = TaskContext(
        inputs={
            "channel": args.channel,
            "version": args.sdk_version,
            "customVersion": args.custom_version,
        }
    )

    try:
        settings = load_cli_settings(args)
    except ConfigurationError as e:
        task.set_result(TaskResult.FAILED, str(e))
        return 1

    installer = FlutterInstaller(
        task, tool_cache=create_tool_cache(settings), settings=settings
    )
    result = installer.run()

    return 0 if result == TaskResult.SUCCEEDED else 1
