#!/usr/bin/env python3
"""Rewrite generated release notes so issue-tracker keys become links.

Each line has its issue keys moved to a trailing ``(KEY-1 KEY-2)`` group,
then every key left in the text is rendered as a markdown link to the
tracker. Running it twice wraps the links again; callers transform raw
generated notes only.
"""

from __future__ import annotations

import logging
import re
from typing import List

from configs.config import Config

logger = logging.getLogger(__name__)

ISSUE_KEY_PATTERN = re.compile(r"([a-z]{3,10}-[0-9]+)", re.IGNORECASE | re.ASCII)


def extract_issue_keys(line: str) -> List[str]:
	"""All non-overlapping issue keys in ``line``, left to right, duplicates kept."""
	return ISSUE_KEY_PATTERN.findall(line or "")


def collect_line_issues(line: str) -> str:
	issues = extract_issue_keys(line)
	if not issues:
		return line
	new_line = line
	for issue in issues:
		new_line = new_line.replace(issue, "", 1)
	return f"{new_line} ({' '.join(issues)})"


def link_issue_keys(text: str, tracker_url: str = Config.ISSUE_TRACKER_URL) -> str:
	base = tracker_url.rstrip("/")
	return ISSUE_KEY_PATTERN.sub(lambda m: f"[{m.group(0)}]({base}/browse/{m.group(0)})", text)


def transform_release_notes(body: str, tracker_url: str = Config.ISSUE_TRACKER_URL) -> str:
	"""Collect issue keys per line, then hyperlink every key in the result.

	Args:
		body: Raw notes as returned by the generate-notes endpoint
		tracker_url: Issue tracker base URL; links point at ``<url>/browse/<KEY>``

	Returns:
		Display text for the release body
	"""
	notes = "\n".join(collect_line_issues(line) for line in (body or "").split("\n"))
	release_notes = link_issue_keys(notes, tracker_url)

	logger.info("Final release notes:")
	logger.info(release_notes)
	return release_notes
