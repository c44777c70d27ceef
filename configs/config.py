import os
from dataclasses import dataclass
from typing import Dict, Any, Mapping, Optional

from utils.action_io import get_input


class ConfigError(Exception):
	"""Raised when required run settings cannot be resolved."""
	pass


class Config:
	"""Static configuration for the release changelog action."""

	# GitHub REST configuration
	GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip('/')
	HTTP_TIMEOUT_S = int(os.getenv("HTTP_TIMEOUT_S", "30"))
	USER_AGENT = "release-changelog-action/1.0"

	# Issue tracker links
	ISSUE_TRACKER_URL = os.getenv("ISSUE_TRACKER_URL", "https://24so.atlassian.net").rstrip('/')

	# Tags
	TAG_REF_PREFIX = "refs/tags/"
	SENTINEL_VERSION = "v0.0.0"

	# GitHub rejects release bodies above this size
	RELEASE_BODY_MAX_CHARS = int(os.getenv("RELEASE_BODY_MAX_CHARS", "125000"))

	# Pagination for GET /releases
	RELEASES_PER_PAGE = 100
	RELEASES_MAX_PAGES = 50

	@classmethod
	def get_github_config(cls) -> Dict[str, Any]:
		"""Get GitHub configuration for the REST client."""
		return {
			"api_url": cls.GITHUB_API_URL,
			"timeout_s": cls.HTTP_TIMEOUT_S,
			"user_agent": cls.USER_AGENT,
		}


@dataclass(frozen=True)
class ReleaseSettings:
	"""Per-run values resolved once at the entry point."""

	owner: str
	repo: str
	token: str
	version: str
	api_url: str = Config.GITHUB_API_URL
	tracker_url: str = Config.ISSUE_TRACKER_URL
	timeout_s: int = Config.HTTP_TIMEOUT_S
	body_max_chars: int = Config.RELEASE_BODY_MAX_CHARS
	dry_run: bool = False

	@property
	def full_name(self) -> str:
		return f"{self.owner}/{self.repo}"


def _truthy(value: str) -> bool:
	return value.strip().lower() in {"1", "true", "yes", "on"}


def load_settings(
	environ: Optional[Mapping[str, str]] = None,
	*,
	version: Optional[str] = None,
	owner: Optional[str] = None,
	repo: Optional[str] = None,
	token: Optional[str] = None,
	dry_run: Optional[bool] = None,
) -> ReleaseSettings:
	"""Resolve run settings from explicit values, action inputs and the CI environment.

	Explicit keyword values win, then ``INPUT_*`` action inputs, then the
	standard GitHub Actions variables (``GITHUB_REF``, ``GITHUB_TOKEN``,
	``GITHUB_REPOSITORY``). Tunables are read from ``environ`` at call time so
	values loaded from a ``.env`` file after import still apply.

	Raises:
		ConfigError: If the version, token or repository cannot be determined
	"""
	env = os.environ if environ is None else environ

	resolved_version = version or get_input("version", env)
	if not resolved_version:
		ref = env.get("GITHUB_REF", "")
		if ref.startswith(Config.TAG_REF_PREFIX):
			resolved_version = ref[len(Config.TAG_REF_PREFIX):]
	if not resolved_version:
		raise ConfigError("No version given and GITHUB_REF is not a tag ref")

	resolved_token = token or get_input("GITHUB_TOKEN", env) or env.get("GITHUB_TOKEN", "")
	if not resolved_token:
		raise ConfigError("GitHub token is required (GITHUB_TOKEN input or env var)")

	repo_owner, _, repo_name = env.get("GITHUB_REPOSITORY", "").partition("/")
	resolved_owner = owner or get_input("owner", env) or repo_owner
	resolved_repo = repo or get_input("repo", env) or repo_name
	if not resolved_owner or not resolved_repo:
		raise ConfigError("Repository owner/name unknown (set GITHUB_REPOSITORY or owner/repo inputs)")

	if dry_run is None:
		dry_run = _truthy(get_input("dry_run", env))

	return ReleaseSettings(
		owner=resolved_owner,
		repo=resolved_repo,
		token=resolved_token,
		version=resolved_version,
		api_url=(env.get("GITHUB_API_URL") or Config.GITHUB_API_URL).rstrip('/'),
		tracker_url=(get_input("issue_tracker_url", env) or env.get("ISSUE_TRACKER_URL") or Config.ISSUE_TRACKER_URL).rstrip('/'),
		timeout_s=int(env.get("HTTP_TIMEOUT_S") or Config.HTTP_TIMEOUT_S),
		body_max_chars=int(env.get("RELEASE_BODY_MAX_CHARS") or Config.RELEASE_BODY_MAX_CHARS),
		dry_run=dry_run,
	)
