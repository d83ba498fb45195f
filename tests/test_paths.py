"""Tests for PathResolver."""

from pathlib import Path

import pytest

from antigravity_agent.paths import (
    CONFIG_DIR_ENV,
    PathResolver,
    SystemDirectories,
    companion_config_dir,
)
from antigravity_agent.platform_profile import build_profile

from conftest import make_file

SYSTEMS = ["Windows", "Darwin", "Linux", "Plan9"]


def resolver_for(system, **dirs):
    return PathResolver.for_profile(build_profile(system, "x86_64"), SystemDirectories(**dirs))


def test_linux_prefers_config_dir():
    resolver = resolver_for("Linux", config_dir=Path("/home/u/.config"))
    assert resolver.data_dir() == Path("/home/u/.config/Antigravity/User/globalStorage")


def test_linux_falls_back_to_data_dir_without_config_dir():
    resolver = resolver_for("Linux", data_dir=Path("/home/u/.local/share"))
    assert resolver.data_dir() == Path("/home/u/.local/share/Antigravity/User/globalStorage")


def test_linux_config_dir_wins_when_both_known():
    resolver = resolver_for(
        "Linux", config_dir=Path("/home/u/.config"), data_dir=Path("/home/u/.local/share")
    )
    assert resolver.data_dir() == Path("/home/u/.config/Antigravity/User/globalStorage")


def test_windows_uses_config_dir():
    resolver = resolver_for(
        "Windows", config_dir=Path("/roaming"), data_dir=Path("/data")
    )
    assert resolver.data_dir() == Path("/roaming/Antigravity/User/globalStorage")


@pytest.mark.parametrize("system", ["Darwin", "Plan9"])
def test_macos_and_other_use_data_dir(system):
    resolver = resolver_for(system, config_dir=Path("/config"), data_dir=Path("/data"))
    assert resolver.data_dir() == Path("/data/Antigravity/User/globalStorage")


@pytest.mark.parametrize("system", SYSTEMS)
def test_database_path_is_state_vscdb_in_data_dir(system):
    resolver = resolver_for(system, config_dir=Path("/config"), data_dir=Path("/data"))
    assert resolver.database_path() == resolver.data_dir() / "state.vscdb"


@pytest.mark.parametrize("system", SYSTEMS)
def test_missing_directories_resolve_to_none(system):
    resolver = resolver_for(system)
    assert resolver.data_dir() is None
    assert resolver.database_path() is None
    assert resolver.search_directories() == []


def test_windows_without_config_dir_is_not_found():
    resolver = resolver_for("Windows", data_dir=Path("/data"))
    assert resolver.data_dir() is None


def test_search_directories_order():
    resolver = resolver_for("Linux", config_dir=Path("/config"), data_dir=Path("/data"))
    assert resolver.search_directories() == [
        Path("/data/Antigravity"),
        Path("/config/Antigravity"),
    ]


def test_search_directories_reported_once_when_bases_coincide():
    base = Path("/Users/u/Library/Application Support")
    resolver = resolver_for("Darwin", config_dir=base, data_dir=base)
    assert resolver.search_directories() == [base / "Antigravity"]


def test_stray_databases_scans_one_level(dirs):
    resolver = PathResolver.for_profile(build_profile("Linux", "x86_64"), dirs)
    direct = make_file(dirs.data_dir / "Antigravity" / "state.vscdb")
    make_file(dirs.data_dir / "Antigravity" / "other.db")
    make_file(dirs.config_dir / "Antigravity" / "User" / "state.vscdb")

    assert resolver.stray_databases() == [direct]


def test_stray_databases_skips_missing_roots(dirs):
    resolver = PathResolver.for_profile(build_profile("Linux", "x86_64"), dirs)
    assert resolver.stray_databases() == []


def test_stray_database_directory_is_ignored(dirs):
    resolver = PathResolver.for_profile(build_profile("Linux", "x86_64"), dirs)
    (dirs.config_dir / "Antigravity" / "state.vscdb").mkdir(parents=True)
    assert resolver.stray_databases() == []


def test_companion_config_dir(monkeypatch, tmp_path):
    dirs = SystemDirectories(config_dir=Path("/config"))
    assert companion_config_dir(dirs) == Path("/config/antigravity-agent")

    monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path))
    assert companion_config_dir(dirs) == tmp_path


def test_detect_fills_directories():
    dirs = SystemDirectories.detect()
    assert dirs.config_dir is not None
    assert dirs.data_dir is not None
    assert set(dirs.as_dict()) == {"config_dir", "data_dir", "home_dir"}
