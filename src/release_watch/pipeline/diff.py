"""Diff freshly parsed entries against what is already stored."""

from typing import Iterable, List

from ..ingestion.interfaces import Entry
from ..storage.interfaces import StoredEntry


def known_links(stored: Iterable[StoredEntry]) -> set:
    """Return the set of links already present in storage."""
    return {entry.link for entry in stored}


def diff_entries(entries: Iterable[Entry], stored: Iterable[StoredEntry]) -> List[Entry]:
    """Return entries whose link is not stored yet, in input order.

    Only the link takes part in the comparison; a changed title or date on
    a known link is not a new entry.
    """
    known = known_links(stored)
    return [entry for entry in entries if entry.link not in known]
