"""
Resolve command implementation.

Prints the cache version and archive URL a channel/version pair resolves to.
"""

import logging

from flutterinstall.cli.utils import load_cli_settings, resolve_architecture
from flutterinstall.core.exceptions import FlutterInstallError
from flutterinstall.sdk.releases import resolve_sdk

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    settings = load_cli_settings(args)
    arch = resolve_architecture(args)

    try:
        sdk_info = resolve_sdk(args.channel, arch, args.sdk_version, settings=settings)
    except FlutterInstallError as e:
        logger.error(str(e))
        return 1

    print(f"Version: {sdk_info.version}")
    print(f"Architecture: {arch}")
    print(f"URL: {sdk_info.download_url}")
    return 0
