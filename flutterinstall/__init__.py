"""
flutterinstall - install a Flutter SDK into a build agent's tool cache.

Resolves a channel and version against Flutter's release manifest, caches
the SDK by (tool, version, architecture) and publishes its bin directory as
the FlutterToolPath variable.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("flutterinstall")
except PackageNotFoundError:
    __version__ = "0.1.0"
