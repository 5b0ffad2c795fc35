"""Parser for whitespace-delimited text reports with a marked header line.

NDBC realtime files look like::

    #YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP
    #yr  mo dy hr mn degT m/s  m/s     m   sec   sec degT   hPa  degC  degC
    2024 01 15 12 00 180  5.1  6.2    MM    MM    MM  MM 1016.2  22.3  24.1

The first marker line (optionally one containing a required column) names the
columns; every other non-blank, non-marker line is a data row.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from marineboard.exceptions import MalformedReport

DEFAULT_MARKER = "#"
DEFAULT_MISSING = ("MM",)


@dataclass(frozen=True)
class TabularReport:
    """A parsed report: a column index plus lazily split data rows."""

    columns: dict[str, int]
    lines: tuple[str, ...] = field(repr=False)
    marker: str = DEFAULT_MARKER
    missing: frozenset[str] = frozenset(DEFAULT_MISSING)

    def index(self, name: str) -> int:
        """Return the column position for *name*, or -1 if not present."""
        return self.columns.get(name, -1)

    def rows(self) -> Iterator[list[str]]:
        """Yield the raw token list of each data line in report order."""
        for line in self.lines:
            stripped = line.strip()
            if not stripped or stripped.startswith(self.marker):
                continue
            yield stripped.split()

    def text(self, row: list[str], name: str) -> str | None:
        """Return the raw token for *name* in *row*, or None if absent."""
        idx = self.index(name)
        if idx < 0 or idx >= len(row):
            return None
        token = row[idx]
        if token in self.missing:
            return None
        return token

    def number(self, row: list[str], name: str) -> float | None:
        """Return the token for *name* as a finite float, or None."""
        token = self.text(row, name)
        if token is None:
            return None
        try:
            value = float(token)
        except ValueError:
            return None
        return value if math.isfinite(value) else None

    def first_number(self, name: str) -> float | None:
        """Return the first usable value for *name* scanning rows in order."""
        for row in self.rows():
            value = self.number(row, name)
            if value is not None:
                return value
        return None


def parse_report(
    text: str,
    marker: str = DEFAULT_MARKER,
    require: str | None = None,
    missing: Iterable[str] = DEFAULT_MISSING,
) -> TabularReport:
    """Locate the header line of *text* and build a TabularReport.

    Raises:
        MalformedReport: No line starts with *marker* (and contains *require*).
    """
    lines = tuple(text.splitlines())
    for line in lines:
        stripped = line.strip()
        if not stripped.startswith(marker):
            continue
        names = stripped[len(marker):].split()
        if require is not None and require not in names:
            continue
        columns: dict[str, int] = {}
        for position, name in enumerate(names):
            columns.setdefault(name, position)
        return TabularReport(
            columns=columns,
            lines=lines,
            marker=marker,
            missing=frozenset(missing),
        )
    wanted = f" containing {require!r}" if require else ""
    raise MalformedReport(f"No header line starting with {marker!r}{wanted}")
