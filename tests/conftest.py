"""
Shared fixtures for the antigravity_agent tests.

Path setup is handled by pyproject.toml [tool.pytest.ini_options] pythonpath.
"""

from pathlib import Path

import pytest

from antigravity_agent.paths import SystemDirectories


class FakeProcess:
    def __init__(self, pid, name, exe):
        self.info = {"pid": pid, "name": name, "exe": exe}


class FakeProcessTable:
    """Stands in for psutil.process_iter"""

    def __init__(self, entries=()):
        self.entries = list(entries)
        self.calls = 0

    def __call__(self, attrs=None):
        self.calls += 1
        return iter([FakeProcess(*entry) for entry in self.entries])


class FakeRunner:
    """Stands in for the kill subprocess; results are keyed by pattern"""

    def __init__(self, results):
        self.results = results
        self.calls = []

    async def __call__(self, argv):
        self.calls.append(list(argv))
        result = self.results[argv[-1]]
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def make_file(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def dirs(home):
    """Linux-like directories rooted in a temp home"""
    return SystemDirectories(
        config_dir=home / ".config",
        data_dir=home / ".local" / "share",
        data_local_dir=home / ".local" / "share",
        home_dir=home,
    )


@pytest.fixture
def config_dir(tmp_path):
    return tmp_path / "agent-config"


@pytest.fixture(autouse=True)
def no_config_override(monkeypatch):
    monkeypatch.delenv("ANTIGRAVITY_AGENT_CONFIG_DIR", raising=False)
