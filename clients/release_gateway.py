#!/usr/bin/env python3
"""Capability interface for the remote release host.

The agent depends only on these five operations, so the HTTP client can be
swapped for an in-memory implementation in tests.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from utils.release_models import GeneratedNotes, ReleaseRecord


class ReleaseGateway(Protocol):
    def get_latest_release(self) -> Optional[ReleaseRecord]:
        """Most recent published release, or None when the repository has none."""
        ...

    def list_releases(self) -> List[ReleaseRecord]:
        """All releases in the API's native order (most recent first)."""
        ...

    def delete_release(self, release_id: int) -> None:
        ...

    def generate_notes(self, tag: str, previous_tag: Optional[str]) -> GeneratedNotes:
        """Notes for commits after ``previous_tag`` up to and including ``tag``.

        A ``previous_tag`` of None or the sentinel version means from the
        start of history.
        """
        ...

    def create_release(self, tag: str, name: str, body: str) -> ReleaseRecord:
        ...
