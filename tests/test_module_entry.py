"""Module entry stories ensuring ``python -m sesmail`` mirrors the CLI."""

from __future__ import annotations

import runpy
import sys

import pytest

from sesmail import __init__conf__, entry
from sesmail.adapters.cli import main


@pytest.mark.os_agnostic
def test_module_entry_shows_help_and_exits_zero(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    managed_traceback_state: None,
    clear_config_cache: None,
) -> None:
    monkeypatch.setattr(sys, "argv", ["sesmail"], raising=False)

    with pytest.raises(SystemExit) as exc:
        runpy.run_module("sesmail.__main__", run_name="__main__")

    assert exc.value.code == 0
    assert __init__conf__.shell_command in capsys.readouterr().out


@pytest.mark.os_agnostic
def test_console_script_returns_the_exit_code(
    monkeypatch: pytest.MonkeyPatch,
    managed_traceback_state: None,
    clear_config_cache: None,
) -> None:
    monkeypatch.setattr(sys, "argv", ["sesmail", "--version"], raising=False)

    assert entry.main() == 0


@pytest.mark.os_agnostic
def test_unknown_command_returns_usage_exit_code(managed_traceback_state: None) -> None:
    from sesmail.composition import build_testing

    assert main(["no-such-command"], services_factory=build_testing) == 2


@pytest.mark.os_agnostic
def test_main_requires_a_services_factory() -> None:
    with pytest.raises(ValueError):
        main([])
