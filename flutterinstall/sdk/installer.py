"""
Flutter SDK install task.

Orchestrates one run:
1. Detect the host architecture
2. Read the channel and version inputs
3. Resolve the release to install
4. Look the release up in the tool cache
5. On a miss, download, extract and cache it, then look it up again
6. Publish FlutterToolPath and finish the task
"""

import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional

from flutterinstall.config.settings import DEFAULT_SETTINGS, Settings, load_settings
from flutterinstall.core.download import DownloadProgress, get_json
from flutterinstall.core.platform import detect_architecture
from flutterinstall.core.tool_cache import ToolCache
from flutterinstall.sdk.releases import SdkInfo, resolve_sdk
from flutterinstall.task.lib import TaskContext, TaskResult

logger = logging.getLogger(__name__)

CUSTOM_VERSION = "custom"
INSTALLED_MESSAGE = "Installed"
TOOL_PATH_NOT_FOUND_MESSAGE = "Download succedeeded but ToolPath not found."


class FlutterInstaller:
    """
    Installs a Flutter SDK into the tool cache and publishes its location.

    Example:
        >>> task = TaskContext(inputs={"channel": "stable", "version": "latest"})
        >>> FlutterInstaller(task).run()
        <TaskResult.SUCCEEDED: 'Succeeded'>
        >>> task.variables["FlutterToolPath"]
        '/opt/hostedtoolcache/Flutter/3.13.0-stable/linux/flutter/bin'
    """

    def __init__(
        self,
        task: TaskContext,
        tool_cache: Optional[ToolCache] = None,
        settings: Settings = DEFAULT_SETTINGS,
        fetch_json: Callable[..., Any] = get_json,
        architecture: Optional[str] = None,
    ):
        """
        Initialize installer.

        Args:
            task: Task context supplying inputs and receiving results
            tool_cache: Tool cache. If None, one is built from settings.
            settings: Settings for tool identity, manifest URL and directories
            fetch_json: JSON fetcher used for the release manifest
            architecture: Architecture override. If None, detected from the host.
        """
        self.task = task
        self.settings = settings
        self.tool_cache = tool_cache or ToolCache(
            tools_dir=settings.tools_directory,
            temp_dir=settings.temp_directory,
            request_timeout=settings.request_timeout,
        )
        self.fetch_json = fetch_json
        self.architecture = architecture

    def read_version_selector(self) -> str:
        """Read the version input, following "custom" to customVersion."""
        version = self.task.get_input("version", required=True)
        if version == CUSTOM_VERSION:
            version = self.task.get_input("customVersion", required=True)
        return version

    def install(self) -> Optional[Path]:
        """
        Run the install sequence and report the task result.

        Returns:
            Published executable directory, or None if the tool path could
            not be found after downloading

        Raises:
            FlutterInstallError: Any input, resolution, download, extraction
                or cache failure. Use run() to report these as task failures.
        """
        tool_name = self.settings.tool_name

        arch = self.architecture or detect_architecture()

        channel = self.task.get_input("channel", required=True)
        version = self.read_version_selector()

        sdk_info = resolve_sdk(
            channel, arch, version, settings=self.settings, fetch_json=self.fetch_json
        )

        self.task.debug(
            f"Trying to get ({tool_name},{sdk_info.version}, {arch}) tool from local cache"
        )
        tool_path = self.tool_cache.find_local_tool(tool_name, sdk_info.version, arch)

        if not tool_path:
            self._download_and_cache(sdk_info, arch)

            self.task.debug(
                f"Trying again to get ({tool_name},{sdk_info.version}, {arch}) "
                "tool from local cache"
            )
            tool_path = self.tool_cache.find_local_tool(
                tool_name, sdk_info.version, arch
            )

        if not tool_path:
            self.task.set_result(TaskResult.FAILED, TOOL_PATH_NOT_FOUND_MESSAGE)
            return None

        full_path = Path(tool_path) / self.settings.exe_relative_path
        variable = self.settings.tool_path_variable
        self.task.debug(f"Set {variable} with '{full_path}'")
        self.task.set_variable(variable, str(full_path))
        self.task.set_result(TaskResult.SUCCEEDED, INSTALLED_MESSAGE)
        return full_path

    def _download_and_cache(self, sdk_info: SdkInfo, arch: str) -> None:
        tool_name = self.settings.tool_name
        url = sdk_info.download_url

        self.task.debug(f"Downloading archive from '{url}'")
        archive = self.tool_cache.download_tool(
            url, progress_callback=self._report_download_progress
        )
        self.task.debug(f"Downloaded '{archive}' archive from '{url}'")

        self.task.debug(f"Extracting '{url}' archive")
        bundle_dir = self.tool_cache.extract_archive(archive)
        self.task.debug(f"Extracted '{url}' archive to '{bundle_dir}'")

        self.task.debug(
            f"Adding '{bundle_dir}' to cache ({tool_name},{sdk_info.version}, {arch})"
        )
        self.tool_cache.cache_directory(bundle_dir, tool_name, sdk_info.version, arch)

    def _report_download_progress(self, progress: DownloadProgress) -> None:
        logger.info(f"Downloading {self.settings.tool_name}: {progress}")

    def run(self) -> TaskResult:
        """
        Run install() and report any failure as a task failure.

        Returns:
            The task's final result
        """
        try:
            self.install()
        except Exception as e:
            logger.debug("Install failed", exc_info=True)
            self.task.set_result(TaskResult.FAILED, str(e))

        return self.task.result


def main():
    """Run the install task with inputs and directories taken from the environment."""
    task = TaskContext()
    result = FlutterInstaller(task, settings=load_settings()).run()
    sys.exit(0 if result == TaskResult.SUCCEEDED else 1)


__all__ = [
    "CUSTOM_VERSION",
    "INSTALLED_MESSAGE",
    "TOOL_PATH_NOT_FOUND_MESSAGE",
    "FlutterInstaller",
    "main",
]


if __name__ == "__main__":
    main()
