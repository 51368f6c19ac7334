"""ClickShell output: everything on stderr, verbs right-aligned, labelled messages."""

from __future__ import annotations

import pytest

from crate_edit.adapters.shell import ClickShell


@pytest.fixture
def shell() -> ClickShell:
    return ClickShell(color=False)


@pytest.mark.os_agnostic
def test_when_a_status_is_printed_the_verb_is_right_aligned(
    shell: ClickShell, capsys: pytest.CaptureFixture[str]
) -> None:
    """Status verbs line up in a twelve character column, as cargo prints them."""
    shell.status("Removing", "serde from dependencies")
    shell.status("Checking", "demo's dependencies")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.splitlines() == [
        "    Removing serde from dependencies",
        "    Checking demo's dependencies",
    ]


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("method", "label"),
    [("warn", "warning"), ("note", "note"), ("error", "error")],
)
def test_when_a_message_is_labelled_it_goes_to_stderr(
    shell: ClickShell, capsys: pytest.CaptureFixture[str], method: str, label: str
) -> None:
    """Warnings, notes, and errors carry their label prefix."""
    getattr(shell, method)("aborting remove due to dry run")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == f"{label}: aborting remove due to dry run\n"


@pytest.mark.os_agnostic
def test_when_report_lines_are_written_stdout_stays_clean(
    shell: ClickShell, capsys: pytest.CaptureFixture[str]
) -> None:
    """Report tables go to stderr line by line."""
    shell.write_lines(["name  old req", "====  ======="])

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "name  old req\n====  =======\n"


@pytest.mark.os_agnostic
def test_when_colour_is_forced_styles_are_emitted(capsys: pytest.CaptureFixture[str]) -> None:
    """``color=True`` keeps ANSI styling even when stderr is not a terminal."""
    ClickShell(color=True).error("boom")

    assert "\x1b[" in capsys.readouterr().err
