#!/usr/bin/env python3
"""Pydantic models for GitHub release records and generated notes.

These are transient copies of remote state, fetched per call and never
cached across runs.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Disposition(str, Enum):
    """Kind of release event represented by the incoming tag."""
    RELEASE = "release"
    ROLLBACK = "rollback"
    RERELEASE = "rerelease"

    @property
    def release_type(self) -> str:
        """Value reported to the CI output channel.

        Re-releases are reported with the same label as forward releases.
        """
        if self is Disposition.ROLLBACK:
            return "rollback"
        return "release"


class ReleaseRecord(BaseModel):
    """A release as returned by the GitHub Releases API."""

    id: int = Field(..., description="Release identifier")
    tag_name: str = Field(..., description="Tag the release points at")
    name: Optional[str] = Field(None, description="Display name")
    body: Optional[str] = Field(None, description="Release body text")
    html_url: Optional[str] = Field(None, description="GitHub URL for the release")
    draft: bool = Field(False, description="Whether the release is a draft")
    prerelease: bool = Field(False, description="Whether the release is a prerelease")

    model_config = {"extra": "ignore"}


class GeneratedNotes(BaseModel):
    """Name and body synthesized by POST /releases/generate-notes."""

    name: str = Field(..., description="Suggested release name")
    body: str = Field("", description="Generated changelog body")

    model_config = {"extra": "ignore"}
