"""
List command implementation.

Lists Flutter versions present in the tool cache.
"""

from flutterinstall.cli.utils import (
    create_tool_cache,
    load_cli_settings,
    resolve_architecture,
)


def run(args) -> int:
    """List cached Flutter versions for --arch or the host architecture."""
    settings = load_cli_settings(args)
    arch = resolve_architecture(args)
    cache = create_tool_cache(settings)

    versions = cache.find_local_tool_versions(settings.tool_name, arch)
    if not versions:
        print(f"No cached {settings.tool_name} versions for {arch} in {cache.tools_dir}")
        return 0

    print(f"Cached {settings.tool_name} versions for {arch}:")
    for version in versions:
        print(f"  {version}")
    return 0
