#!/usr/bin/env python3
"""Semantic version helpers for classifying a pushed tag against the latest release."""

from __future__ import annotations

import semver

from configs.config import Config
from utils.release_models import Disposition

SENTINEL_VERSION = Config.SENTINEL_VERSION


class InvalidVersionError(ValueError):
    """Raised when a tag is not a valid semantic version."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"Not a valid semantic version: {tag!r}")
        self.tag = tag


def strip_tag_prefix(ref: str, prefix: str = Config.TAG_REF_PREFIX) -> str:
    """Turn ``refs/tags/v1.2.3`` into ``v1.2.3``; other values pass through."""
    if ref and ref.startswith(prefix):
        return ref[len(prefix):]
    return ref


def parse_version(tag: str) -> semver.Version:
    """Parse a tag such as ``v1.4.0`` or ``1.4.0-rc.1``.

    A single leading ``v`` or ``=`` is accepted, as git tags usually carry one.
    """
    text = (tag or "").strip()
    if text[:1] in ("v", "V", "="):
        text = text[1:]
    try:
        return semver.Version.parse(text)
    except (ValueError, TypeError):
        raise InvalidVersionError(tag)


def is_release(version: str, latest_version: str) -> bool:
    return parse_version(version) > parse_version(latest_version)


def is_rerelease(version: str, latest_version: str) -> bool:
    return parse_version(version) == parse_version(latest_version)


def is_rollback(version: str, latest_version: str) -> bool:
    return parse_version(version) < parse_version(latest_version)


def classify(version: str, latest_version: str) -> Disposition:
    """Return the single disposition for ``version`` relative to ``latest_version``."""
    current = parse_version(version)
    latest = parse_version(latest_version)
    if current == latest:
        return Disposition.RERELEASE
    if current < latest:
        return Disposition.ROLLBACK
    return Disposition.RELEASE
