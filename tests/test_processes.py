"""Tests for ProcessController."""

import asyncio
import os
import re
import shutil
import subprocess
import sys
import time
from pathlib import Path

import psutil
import pytest

from antigravity_agent.errors import (
    ProcessEnumerationError,
    TerminationError,
    UnsupportedPlatformError,
)
from antigravity_agent.platforms import (
    PKILL_PATTERNS,
    LinuxPlatform,
    OtherPlatform,
    WindowsPlatform,
)
from antigravity_agent.processes import ProcessController, ProcessMatch

from conftest import FakeProcessTable, FakeRunner, make_file


@pytest.fixture
def exe(tmp_path):
    return make_file(tmp_path / "Antigravity" / "Antigravity.exe")


def test_find_running_by_names_matches_exact_names_in_pattern_order(tmp_path, exe):
    other_exe = make_file(tmp_path / "bin" / "antigravity")
    table = FakeProcessTable(
        [
            (10, "antigravity", str(other_exe)),
            (11, "Antigravity", str(exe)),
            (12, "Antigravity Helper", str(exe)),
        ]
    )
    controller = ProcessController(LinuxPlatform(), process_iter=table)

    matches = controller.find_running_by_names(["Antigravity", "antigravity"])

    assert matches == [
        ProcessMatch(pid=11, name="Antigravity", executable_path=exe),
        ProcessMatch(pid=10, name="antigravity", executable_path=other_exe),
    ]
    assert table.calls == 1


def test_unvalidated_matches_are_dropped(tmp_path, exe):
    table = FakeProcessTable(
        [
            (1, "Antigravity.exe", None),
            (2, "Antigravity.exe", str(tmp_path / "gone.exe")),
            (3, "Antigravity.exe", str(tmp_path)),
            (4, "Antigravity.exe", str(exe)),
        ]
    )
    controller = ProcessController(WindowsPlatform(), process_iter=table)

    assert [m.pid for m in controller.find_running()] == [4]


def test_is_running(exe):
    running = ProcessController(
        WindowsPlatform(), process_iter=FakeProcessTable([(7, "Antigravity", str(exe))])
    )
    idle = ProcessController(WindowsPlatform(), process_iter=FakeProcessTable())
    assert running.is_running()
    assert not idle.is_running()


def test_enumeration_failure_is_reported():
    def broken(attrs=None):
        raise psutil.AccessDenied()

    controller = ProcessController(LinuxPlatform(), process_iter=broken)
    with pytest.raises(ProcessEnumerationError):
        controller.find_running()


def test_terminate_first_success_wins():
    runner = FakeRunner({"A": (0, ""), "B": (0, "")})
    controller = ProcessController(LinuxPlatform(), runner=runner)

    message = asyncio.run(controller.terminate_by_names(["A", "B"]))

    assert "A" in message
    assert runner.calls == [["pkill", "-f", "A"]]


def test_terminate_falls_back_to_next_pattern():
    runner = FakeRunner({"A": (1, "no process A"), "B": (0, "")})
    controller = ProcessController(LinuxPlatform(), runner=runner)

    message = asyncio.run(controller.terminate_by_names(["A", "B"]))

    assert message == "Closed Antigravity process (pattern: B)"
    assert [call[-1] for call in runner.calls] == ["A", "B"]


def test_terminate_reports_only_last_failure():
    runner = FakeRunner({"A": (1, "error from A"), "B": (1, "error from B")})
    controller = ProcessController(LinuxPlatform(), runner=runner)

    with pytest.raises(TerminationError) as excinfo:
        asyncio.run(controller.terminate_by_names(["A", "B"]))

    assert "error from B" in str(excinfo.value)
    assert "error from A" not in str(excinfo.value)
    assert excinfo.value.pattern == "B"


def test_terminate_windows_uses_taskkill_with_default_patterns():
    runner = FakeRunner({"Antigravity.exe": (128, "not found"), "Antigravity": (0, "")})
    controller = ProcessController(WindowsPlatform(), runner=runner)

    message = asyncio.run(controller.terminate_by_names())

    assert message == "Closed Antigravity process (Antigravity)"
    assert runner.calls == [
        ["taskkill", "/F", "/IM", "Antigravity.exe"],
        ["taskkill", "/F", "/IM", "Antigravity"],
    ]


def test_terminate_unsupported_platform_attempts_nothing():
    runner = FakeRunner({})
    controller = ProcessController(OtherPlatform(), runner=runner)

    with pytest.raises(UnsupportedPlatformError, match="unsupported operating system"):
        asyncio.run(controller.terminate_by_names(["A"]))
    assert runner.calls == []


def test_terminate_aborts_when_kill_tool_cannot_start():
    runner = FakeRunner({"A": FileNotFoundError("pkill"), "B": (0, "")})
    controller = ProcessController(LinuxPlatform(), runner=runner)

    with pytest.raises(TerminationError, match="Failed to run pkill"):
        asyncio.run(controller.terminate_by_names(["A", "B"]))
    assert len(runner.calls) == 1


def test_terminate_with_no_patterns_fails():
    controller = ProcessController(LinuxPlatform(), runner=FakeRunner({}))
    with pytest.raises(TerminationError):
        asyncio.run(controller.terminate_by_names([]))


def test_match_keeps_path_type(exe):
    controller = ProcessController(
        LinuxPlatform(), process_iter=FakeProcessTable([(5, "antigravity", str(exe))])
    )
    assert isinstance(controller.find_running()[0].executable_path, Path)


@pytest.mark.parametrize(
    "cmdline",
    [
        "/usr/share/antigravity/antigravity --type=renderer",
        "/opt/Antigravity/antigravity",
        "/Applications/Antigravity.app/Contents/MacOS/Electron",
        "/usr/bin/antigravity",
    ],
)
def test_kill_patterns_match_the_target_app(cmdline):
    assert any(re.search(p, cmdline) for p in PKILL_PATTERNS)


@pytest.mark.parametrize(
    "cmdline",
    [
        "/usr/bin/python3 /usr/local/bin/antigravity-agent kill",
        "/usr/bin/python3 /usr/local/bin/antigravity-agent-gui",
        "/usr/bin/python3 -m antigravity_agent.cli kill",
        "/bin/sh -c pkill -f [a]ntigravity($|[^-_a-zA-Z])",
        "/usr/bin/AntigravityAgent",
    ],
)
def test_kill_patterns_never_match_the_companion(cmdline):
    assert not any(re.search(p, cmdline) for p in PKILL_PATTERNS)


@pytest.mark.skipif(
    os.name == "nt" or shutil.which("pkill") is None, reason="needs pkill"
)
def test_pkill_fallback_spares_companion_processes():
    decoys = [
        subprocess.Popen(
            [sys.executable, "-c", "import time; time.sleep(30)", argv_tail]
        )
        for argv_tail in ("/usr/bin/antigravity-agent-gui", "antigravity_agent.main")
    ]
    try:
        time.sleep(0.2)
        try:
            asyncio.run(ProcessController(LinuxPlatform()).terminate_by_names())
        except TerminationError:
            pass
        time.sleep(0.2)
        assert [d.poll() for d in decoys] == [None, None]
    finally:
        for decoy in decoys:
            decoy.kill()
            decoy.wait()
