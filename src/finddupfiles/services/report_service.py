"""Render duplicate groups as report lines."""

import sys
from typing import Iterable, TextIO

from finddupfiles.services.duplicate_service import DuplicateGroup

REPORT_PREFIX = "DUPLICATES:"


def format_duplicate_line(group: DuplicateGroup) -> str:
    """Format a group as 'DUPLICATES: /path/a /path/b'."""
    return " ".join([REPORT_PREFIX, *group.paths])


def write_report(groups: Iterable[DuplicateGroup], out: TextIO | None = None) -> int:
    """
    Write one line per duplicate group.

    Groups with fewer than two members are skipped.

    Returns:
        Number of lines written
    """
    if out is None:
        out = sys.stdout
    lines = 0
    for group in groups:
        if len(group.members) < 2:
            continue
        out.write(format_duplicate_line(group) + "\n")
        lines += 1
    return lines
