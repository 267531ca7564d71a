"""
Host platform detection for flutterinstall.

Flutter publishes one release manifest per host operating system, and the
tool cache keys installs by the same identifier. This module maps the
running interpreter's platform onto that three-way identifier.

Usage:
    from flutterinstall.core.platform import detect_architecture

    arch = detect_architecture()
    print(f"Installing Flutter for {arch}")
"""

import functools
import platform

MACOS = "macos"
LINUX = "linux"
WINDOWS = "windows"

SUPPORTED_ARCHITECTURES = (LINUX, MACOS, WINDOWS)


def architecture_for_system(system: str) -> str:
    """
    Map a platform.system() value onto a Flutter architecture identifier.

    Args:
        system: System name as reported by platform.system() (any case)

    Returns:
        'macos' for Darwin, 'linux' for Linux, 'windows' for anything else

    Example:
        >>> architecture_for_system("Darwin")
        'macos'
        >>> architecture_for_system("FreeBSD")
        'windows'
    """
    system = system.lower()

    if system == "darwin":
        return MACOS
    elif system == "linux":
        return LINUX
    return WINDOWS


@functools.lru_cache(maxsize=1)
def detect_architecture() -> str:
    """
    Detect the Flutter architecture identifier of the current host.

    This function is cached - it only runs detection once per process.

    Returns:
        One of 'linux', 'macos', 'windows'
    """
    return architecture_for_system(platform.system())


def clear_platform_cache():
    """
    Clear the architecture detection cache.

    Useful for testing when platform.system() is patched.
    """
    detect_architecture.cache_clear()


__all__ = [
    "MACOS",
    "LINUX",
    "WINDOWS",
    "SUPPORTED_ARCHITECTURES",
    "architecture_for_system",
    "detect_architecture",
    "clear_platform_cache",
]
