"""Shared test configuration and fixtures for the release changelog test suite."""

import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add project root to Python path so the top-level packages import
project_dir = str(Path(__file__).parent.parent)
if project_dir not in sys.path:
    sys.path.insert(0, project_dir)

from utils.release_models import GeneratedNotes, ReleaseRecord  # noqa: E402


class FakeGateway:
    """In-memory release host recording every call in order."""

    def __init__(self, tags: Optional[List[str]] = None, latest: Optional[str] = None):
        self.releases = [
            ReleaseRecord(id=index + 1, tag_name=tag, name=tag) for index, tag in enumerate(tags or [])
        ]
        self.latest = latest
        self.calls: List[tuple] = []
        self.notes_body = "Fixed ABC-123 bug"

    def get_latest_release(self) -> Optional[ReleaseRecord]:
        self.calls.append(("get_latest_release",))
        if self.latest is None:
            return None
        return ReleaseRecord(id=999, tag_name=self.latest)

    def list_releases(self) -> List[ReleaseRecord]:
        self.calls.append(("list_releases",))
        return list(self.releases)

    def delete_release(self, release_id: int) -> None:
        self.calls.append(("delete_release", release_id))
        self.releases = [r for r in self.releases if r.id != release_id]

    def generate_notes(self, tag: str, previous_tag: Optional[str]) -> GeneratedNotes:
        self.calls.append(("generate_notes", tag, previous_tag))
        return GeneratedNotes(name=tag, body=self.notes_body)

    def create_release(self, tag: str, name: str, body: str) -> ReleaseRecord:
        self.calls.append(("create_release", tag, name, body))
        release = ReleaseRecord(id=1000 + len(self.calls), tag_name=tag, name=name, body=body)
        self.releases.insert(0, release)
        return release

    @property
    def mutations(self) -> List[tuple]:
        return [c for c in self.calls if c[0] in ("delete_release", "create_release")]

    def deleted_tags(self, original: List[str]) -> List[str]:
        ids = [c[1] for c in self.calls if c[0] == "delete_release"]
        return [original[i - 1] for i in ids]


@pytest.fixture
def fake_gateway():
    return FakeGateway


@pytest.fixture
def github_output(tmp_path, monkeypatch):
    """Point GITHUB_OUTPUT at a temp file and return its path."""
    path = tmp_path / "github_output"
    path.write_text("", encoding="utf-8")
    monkeypatch.setenv("GITHUB_OUTPUT", str(path))
    return path
