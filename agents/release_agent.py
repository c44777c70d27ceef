#!/usr/bin/env python3
"""Release changelog agent, run by CI when a version tag is pushed.

Compares the pushed tag with the latest GitHub release and either creates a
release with generated notes, rolls releases back to the pushed tag, or does
nothing for a re-pushed tag. The outcome is reported as the ``release_type``
step output.
"""

import logging
import sys
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

# Load environment variables from .env file in the working directory
load_dotenv(find_dotenv(usecwd=True))

from clients.github_client import GithubApiError, GithubReleaseClient  # noqa: E402
from clients.release_gateway import ReleaseGateway  # noqa: E402
from configs.config import Config, ConfigError, load_settings  # noqa: E402
from utils.action_io import set_failed, set_output  # noqa: E402
from utils.note_transformer import transform_release_notes  # noqa: E402
from utils.release_models import Disposition, GeneratedNotes, ReleaseRecord  # noqa: E402
from utils.versioning import InvalidVersionError, SENTINEL_VERSION, classify, parse_version, strip_tag_prefix  # noqa: E402

# Set up logging
logger = logging.getLogger(__name__)


class DryRunGateway:
	"""Gateway wrapper that performs reads and only logs mutations."""

	def __init__(self, inner: ReleaseGateway):
		self._inner = inner

	def get_latest_release(self) -> Optional[ReleaseRecord]:
		return self._inner.get_latest_release()

	def list_releases(self) -> List[ReleaseRecord]:
		return self._inner.list_releases()

	def generate_notes(self, tag: str, previous_tag: Optional[str]) -> GeneratedNotes:
		return self._inner.generate_notes(tag, previous_tag)

	def delete_release(self, release_id: int) -> None:
		logger.info(f"[dry-run] Would delete release id={release_id}")

	def create_release(self, tag: str, name: str, body: str) -> ReleaseRecord:
		logger.info(f"[dry-run] Would create release {tag} ({name})")
		return ReleaseRecord(id=0, tag_name=tag, name=name, body=body)


class ReleaseAgent:
	"""Classifies the pushed tag and drives the matching release bookkeeping."""

	def __init__(self, gateway: ReleaseGateway, *, tracker_url: str = Config.ISSUE_TRACKER_URL):
		"""Initialize the agent.

		Args:
			gateway: Release host operations (GitHub client or a test double)
			tracker_url: Issue tracker base URL used when linking issue keys
		"""
		self.gateway = gateway
		self.tracker_url = tracker_url

	def latest_version(self) -> str:
		latest = self.gateway.get_latest_release()
		if latest is None:
			# No releases yet
			return SENTINEL_VERSION
		return latest.tag_name

	def run(self, version: str) -> Disposition:
		"""Process one pushed tag and report its release type.

		Raises:
			InvalidVersionError: If ``version`` or a remote tag is not semver
			GithubApiError: If any remote call fails
		"""
		logger.info("Starting release changelog")
		version = strip_tag_prefix(version)
		parse_version(version)

		latest_version = self.latest_version()
		logger.info(f"Latest release version {latest_version}")

		disposition = classify(version, latest_version)
		if disposition is Disposition.RERELEASE:
			self.handle_rerelease()
		elif disposition is Disposition.ROLLBACK:
			self.handle_rollback(version)
		else:
			self.handle_release(version, latest_version)
		return disposition

	def handle_rerelease(self) -> None:
		logger.info("Release type: rerelease")
		set_output("release_type", Disposition.RERELEASE.release_type)

	def handle_release(self, version: str, latest_version: str) -> ReleaseRecord:
		logger.info("Release type: release")
		logger.info(f"Creating release for version {version}")
		set_output("release_type", Disposition.RELEASE.release_type)
		return self._create_release(version, latest_version)

	def handle_rollback(self, version: str) -> Optional[ReleaseRecord]:
		logger.info("Release type: rollback")
		set_output("release_type", Disposition.ROLLBACK.release_type)

		new_latest = self.delete_newer_releases(version)
		if new_latest is None:
			logger.info(f"No release at or below {version} remains; nothing to create")
			return None

		if parse_version(new_latest.tag_name) < parse_version(version):
			logger.info(f"Creating rollback release for version {version}")
			return self._create_release(version, new_latest.tag_name)

		logger.info(f"Release {new_latest.tag_name} already exists; nothing to create")
		return None

	def delete_newer_releases(self, version: str) -> Optional[ReleaseRecord]:
		"""Delete releases newer than ``version`` in list order.

		Returns:
			The first release at or below ``version`` (kept), or None if the
			list runs out first
		"""
		target = parse_version(version)
		count = 0
		new_latest = None
		for release in self.gateway.list_releases():
			if parse_version(release.tag_name) > target:
				self.gateway.delete_release(release.id)
				logger.info(f"Removed release {release.tag_name}")
				count += 1
				continue
			new_latest = release
			break

		logger.info(f"Deleted {count} releases")
		return new_latest

	def _create_release(self, version: str, previous_version: str) -> ReleaseRecord:
		notes = self.gateway.generate_notes(version, previous_version)
		changelog_text = transform_release_notes(notes.body, self.tracker_url)
		return self.gateway.create_release(version, notes.name, changelog_text)


def main(argv: Optional[List[str]] = None) -> int:
	"""CLI entry point for the release changelog agent."""
	import argparse

	parser = argparse.ArgumentParser(
		description="Release changelog - create, regenerate or roll back GitHub releases for a pushed tag",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  GITHUB_REF=refs/tags/v1.4.0 GITHUB_REPOSITORY=tfso/app python -m agents.release_agent
  python -m agents.release_agent --owner tfso --repo app --version v1.3.0 --dry-run
		"""
	)
	parser.add_argument("--version", dest="tag", help="Tag to process (defaults to GITHUB_REF without refs/tags/)")
	parser.add_argument("--owner", help="Repository owner (defaults to GITHUB_REPOSITORY)")
	parser.add_argument("--repo", help="Repository name (defaults to GITHUB_REPOSITORY)")
	parser.add_argument("--token", help="GitHub token (defaults to GITHUB_TOKEN)")
	parser.add_argument("--dry-run", action="store_true", default=None, help="Log deletions and creations without performing them")
	parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

	args = parser.parse_args(argv)

	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.INFO,
		format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
	)

	client = None
	try:
		settings = load_settings(
			version=args.tag,
			owner=args.owner,
			repo=args.repo,
			token=args.token,
			dry_run=args.dry_run,
		)
		client = GithubReleaseClient.from_settings(settings)
		gateway = DryRunGateway(client) if settings.dry_run else client
		agent = ReleaseAgent(gateway, tracker_url=settings.tracker_url)
		disposition = agent.run(settings.version)
		logger.info(f"✓ Done: {disposition.value} for {settings.full_name}@{settings.version}")
		return 0
	except (ConfigError, InvalidVersionError, GithubApiError) as e:
		logger.error(f"Release changelog failed: {e}")
		set_failed(str(e))
		return 1
	finally:
		if client is not None:
			client.close()


if __name__ == "__main__":
	sys.exit(main())
