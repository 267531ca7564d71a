"""
Pytest configuration and shared fixtures for flutterinstall tests.
"""

import io
import tarfile
import zipfile
from pathlib import Path

import pytest

from flutterinstall.core.platform import clear_platform_cache
from flutterinstall.core.tool_cache import ToolCache
from flutterinstall.task.lib import TaskContext

BASE_URL = "https://storage.example.com/flutter_infra/releases"


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if config.getoption("--integration"):
        return
    skip_integration = pytest.mark.skip(reason="need --integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def _reset_platform_cache():
    """Architecture detection is cached per process; reset around each test."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch, tmp_path):
    """Keep agent variables from the host out of tests."""
    for name in (
        "INPUT_CHANNEL",
        "INPUT_VERSION",
        "INPUT_CUSTOMVERSION",
        "AGENT_TOOLSDIRECTORY",
        "AGENT_TEMPDIRECTORY",
        "RUNNER_TOOL_CACHE",
        "RUNNER_TEMP",
    ):
        monkeypatch.delenv(name, raising=False)

    # set_variable writes os.environ directly; setenv first so teardown restores it
    monkeypatch.setenv("FlutterToolPath", "")
    monkeypatch.delenv("FlutterToolPath")
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("USERPROFILE", str(tmp_path / "home"))


# ============================================================================
# Release Manifest Fixtures
# ============================================================================


def make_manifest(base_url: str = BASE_URL) -> dict:
    """A trimmed-down Flutter release manifest."""
    return {
        "base_url": base_url,
        "current_release": {
            "stable": "stablehash2",
            "beta": "betahash1",
            "dev": "devhash1",
        },
        "releases": [
            {
                "hash": "betahash1",
                "channel": "beta",
                "version": "2.11.0-0.1.pre",
                "release_date": "2022-02-01T00:00:00.000Z",
                "archive": "beta/linux/flutter_linux_2.11.0-0.1.pre-beta.tar.xz",
                "sha256": "b" * 64,
            },
            {
                "hash": "stablehash2",
                "channel": "stable",
                "version": "v2.10.0",
                "release_date": "2022-02-03T00:00:00.000Z",
                "archive": "stable/linux/flutter_linux_v2.10.0-stable.tar.xz",
                "sha256": "a" * 64,
            },
            {
                "hash": "devhash1",
                "channel": "dev",
                "version": "2.10.0",
                "release_date": "2022-01-20T00:00:00.000Z",
                "archive": "dev/linux/flutter_linux_2.10.0-dev.tar.xz",
                "sha256": "d" * 64,
            },
            {
                "hash": "stablehash1",
                "channel": "stable",
                "version": "v1.12.13+hotfix.9",
                "release_date": "2020-04-01T00:00:00.000Z",
                "archive": "stable/linux/flutter_linux_v1.12.13+hotfix.9-stable.tar.xz",
                "sha256": "c" * 64,
            },
        ],
    }


@pytest.fixture
def manifest() -> dict:
    """Release manifest document."""
    return make_manifest()


@pytest.fixture
def fetch_json(manifest):
    """JSON fetcher returning the manifest fixture and recording requested URLs."""

    def _fetch(url, timeout=30):
        _fetch.urls.append(url)
        return manifest

    _fetch.urls = []
    return _fetch


# ============================================================================
# Task and Cache Fixtures
# ============================================================================


@pytest.fixture
def output() -> io.StringIO:
    """Captures logging commands written by a TaskContext."""
    return io.StringIO()


@pytest.fixture
def make_task(output):
    """Factory for TaskContext instances with explicit inputs."""

    def _make(**inputs):
        return TaskContext(inputs=inputs, environ={}, stream=output)

    return _make


@pytest.fixture
def tool_cache(tmp_path) -> ToolCache:
    """ToolCache rooted in a temporary directory."""
    return ToolCache(tools_dir=tmp_path / "tools", temp_dir=tmp_path / "temp")


# ============================================================================
# Archive Fixtures
# ============================================================================


def build_sdk_tree(root: Path) -> Path:
    """Create a minimal flutter/ tree with an executable launcher."""
    bin_dir = root / "flutter" / "bin"
    bin_dir.mkdir(parents=True, exist_ok=True)
    launcher = bin_dir / "flutter"
    launcher.write_text("#!/bin/sh\necho flutter\n")
    launcher.chmod(0o755)
    (root / "flutter" / "version").write_text("2.10.0\n")
    return root


@pytest.fixture
def sdk_zip(tmp_path) -> Path:
    """Zip archive of a minimal SDK with Unix permissions recorded."""
    archive = tmp_path / "archives" / "flutter_macos_2.10.0-stable.zip"
    archive.parent.mkdir(parents=True)

    with zipfile.ZipFile(archive, "w") as zf:
        info = zipfile.ZipInfo("flutter/bin/flutter")
        info.external_attr = (0o100755 & 0xFFFF) << 16
        zf.writestr(info, "#!/bin/sh\necho flutter\n")
        zf.writestr("flutter/version", "2.10.0\n")

    return archive


@pytest.fixture
def sdk_tar_xz(tmp_path) -> Path:
    """tar.xz archive of a minimal SDK."""
    source = build_sdk_tree(tmp_path / "sdk_source")
    archive = tmp_path / "archives" / "flutter_linux_2.10.0-stable.tar.xz"
    archive.parent.mkdir(parents=True, exist_ok=True)

    with tarfile.open(archive, "w:xz") as tar:
        tar.add(source / "flutter", arcname="flutter")

    return archive


@pytest.fixture
def sdk_tree(tmp_path) -> Path:
    """Extracted SDK directory ready to be cached."""
    return build_sdk_tree(tmp_path / "extracted")
