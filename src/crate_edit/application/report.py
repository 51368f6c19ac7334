"""Render upgrade decisions as an aligned table plus a summary note.

Rows that changed, carry no reason, or whose old requirement no longer
matches the latest version are "interesting" and go into the table. The
rest are folded into one note grouped by reason, unless verbose output was
requested.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass

from ..domain.enums import Reason
from ..domain.errors import UnparsableRequirement
from ..domain.semver import Version, VersionReq

__all__ = ["DecisionRecord", "UpgradeReport", "render_upgrade_report"]

_HEADER = ("name", "old req", "locked", "latest", "new req", "note")
_UNDERLINE = ("====", "=======", "======", "======", "=======", "====")
VERBOSE_HINT = "Re-run with `--verbose` to show all dependencies"


@dataclass(frozen=True, slots=True)
class DecisionRecord:
    """What the upgrade engine decided for one dependency entry.

    Example:
        >>> record = DecisionRecord("serde", "1.2", None, "1.5.0", "1.5", None)
        >>> record.is_interesting
        True
    """

    name: str
    old_req: str
    locked: str | None
    latest: str | None
    new_req: str
    reason: Reason | None

    @property
    def req_changed(self) -> bool:
        return self.new_req != self.old_req

    @property
    def old_req_matches_latest(self) -> bool:
        """False only when both sides parse and the latest version falls outside."""
        if self.latest is None:
            return True
        try:
            latest = Version.parse(self.latest)
            requirement = VersionReq.parse(self.old_req)
        except UnparsableRequirement:
            return True
        return requirement.matches(latest)

    @property
    def is_interesting(self) -> bool:
        return self.reason is None or self.req_changed or not self.old_req_matches_latest

    def cells(self) -> tuple[str, str, str, str, str, str]:
        return (
            self.name,
            self.old_req,
            self.locked or "-",
            self.latest or "-",
            self.new_req,
            self.reason.short if self.reason is not None else "",
        )


@dataclass(frozen=True, slots=True)
class UpgradeReport:
    """Table lines and the optional summary note for one package."""

    lines: tuple[str, ...]
    note: str | None


def _render_table(records: Sequence[DecisionRecord]) -> tuple[str, ...]:
    rows = [_HEADER, _UNDERLINE, *(record.cells() for record in records)]
    widths = [max(len(row[column]) for row in rows) for column in range(5)]
    note_width = max(len(row[5]) for row in rows[2:])
    if note_width:
        widths.append(max(note_width, len(_HEADER[5])))
    return tuple(" ".join(cell.ljust(width) for cell, width in zip(row, widths)) for row in rows)


def _summarise(records: Sequence[DecisionRecord]) -> str:
    groups: defaultdict[str, set[str]] = defaultdict(set)
    for record in records:
        reason = record.reason.long if record.reason is not None else ""
        groups[reason].add(record.name)
    note = VERBOSE_HINT
    for reason in sorted(groups):
        note += f"\n  {reason}: " + ", ".join(sorted(groups[reason]))
    return note


def render_upgrade_report(records: Sequence[DecisionRecord], *, verbose: bool) -> UpgradeReport:
    """Partition ``records`` and render them.

    Example:
        >>> rows = [
        ...     DecisionRecord("serde", "1.2", "1.2.0", "1.5.0", "1.5", None),
        ...     DecisionRecord("rand", "=0.8.0", "0.8.0", "0.8.0", "=0.8.0", Reason.PINNED),
        ... ]
        >>> report = render_upgrade_report(rows, verbose=False)
        >>> report.lines[2]
        'serde 1.2     1.2.0  1.5.0  1.5    '
        >>> print(report.note)
        Re-run with `--verbose` to show all dependencies
          pinned: rand
    """
    if verbose:
        interesting, uninteresting = list(records), []
    else:
        interesting = [record for record in records if record.is_interesting]
        uninteresting = [record for record in records if not record.is_interesting]
    lines = _render_table(interesting) if interesting else ()
    note = _summarise(uninteresting) if uninteresting else None
    return UpgradeReport(lines=lines, note=note)
