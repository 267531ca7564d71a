"""
Entry point for running flutterinstall as a module.

Usage: python -m flutterinstall [command] [options]
"""

from flutterinstall.cli.parser import main

if __name__ == "__main__":
    main()
