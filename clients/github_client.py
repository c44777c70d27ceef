#!/usr/bin/env python3
"""GitHub REST client for the Releases API of a single repository.

Implements the ReleaseGateway operations over ``requests``. Every call is a
single blocking round trip; nothing is retried here.
"""

import logging
from typing import Dict, List, Any, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from configs.config import Config, ReleaseSettings
from utils.release_models import GeneratedNotes, ReleaseRecord

# Set up logging
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class GithubApiError(Exception):
    """Raised when GitHub API operations fail, with a typed code."""

    def __init__(self, message: str, code: str = "UNKNOWN", status: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.status = status


class GithubAuthError(GithubApiError):
    """Raised when GitHub API authentication fails."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, code="UNAUTHORIZED", status=status)


class ReleaseBodyTooLargeError(GithubApiError):
    """Raised before posting a release body GitHub would reject."""

    def __init__(self, length: int, limit: int):
        super().__init__(f"Release body exceeds limit: len={length} max={limit}", code="VALIDATION")
        self.length = length
        self.limit = limit


class GithubReleaseClient:
    """Releases API client scoped to one owner/repo pair."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        *,
        api_url: Optional[str] = None,
        timeout_s: Optional[int] = None,
        body_max_chars: int = Config.RELEASE_BODY_MAX_CHARS,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name
            token: Pre-issued GitHub token
            api_url: REST base URL (defaults to Config.GITHUB_API_URL)
            timeout_s: Transport timeout in seconds (defaults to Config.HTTP_TIMEOUT_S)
            body_max_chars: Largest release body accepted by create_release
            session: Optional pre-built session, mainly for tests

        Raises:
            GithubAuthError: If no token is provided
        """
        github_config = Config.get_github_config()
        if not token:
            raise GithubAuthError("GitHub token is required (GITHUB_TOKEN input or env var)")
        self.owner = owner
        self.repo = repo
        self.base_url = (api_url or github_config["api_url"]).rstrip("/")
        self.timeout_s = timeout_s or github_config["timeout_s"]
        self.body_max_chars = body_max_chars

        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {token}',
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
            'User-Agent': github_config["user_agent"],
        })

        logger.info(f"GitHub release client initialized for {owner}/{repo}")

    @classmethod
    def from_settings(cls, settings: ReleaseSettings) -> "GithubReleaseClient":
        return cls(
            settings.owner,
            settings.repo,
            settings.token,
            api_url=settings.api_url,
            timeout_s=settings.timeout_s,
            body_max_chars=settings.body_max_chars,
        )

    @property
    def releases_url(self) -> str:
        return f"{self.base_url}/repos/{self.owner}/{self.repo}/releases"

    # -------- ReleaseGateway --------
    def get_latest_release(self) -> Optional[ReleaseRecord]:
        """Fetch the latest published release.

        Returns:
            The release, or None when the repository has no releases (HTTP 404)

        Raises:
            GithubApiError: For any other failure
        """
        logger.info(f"Fetching latest release: {self.owner}/{self.repo}")
        data = self._request("GET", f"{self.releases_url}/latest", allow_not_found=True)
        if data is None:
            logger.info("No latest release found")
            return None
        return _parse(ReleaseRecord, data)

    def list_releases(self) -> List[ReleaseRecord]:
        """List releases in GitHub's order (most recent first), following pagination."""
        logger.info(f"Listing releases: {self.owner}/{self.repo}")
        all_releases: List[ReleaseRecord] = []
        page = 1
        while True:
            params = {'page': page, 'per_page': Config.RELEASES_PER_PAGE}
            page_releases = self._request("GET", self.releases_url, params=params)
            if not page_releases:
                break
            all_releases.extend(_parse(ReleaseRecord, r) for r in page_releases)
            if len(page_releases) < Config.RELEASES_PER_PAGE:
                break
            page += 1
            if page > Config.RELEASES_MAX_PAGES:
                logger.warning(f"More than {Config.RELEASES_MAX_PAGES} pages of releases, truncating")
                break
        logger.debug(f"✓ Retrieved {len(all_releases)} releases")
        return all_releases

    def delete_release(self, release_id: int) -> None:
        logger.debug(f"Deleting release id={release_id}")
        self._request("DELETE", f"{self.releases_url}/{release_id}")

    def generate_notes(self, tag: str, previous_tag: Optional[str]) -> GeneratedNotes:
        payload: Dict[str, Any] = {"tag_name": tag}
        if previous_tag and previous_tag != Config.SENTINEL_VERSION:
            payload["previous_tag_name"] = previous_tag
        logger.info(f"Generating notes for {tag} (previous: {payload.get('previous_tag_name', 'none')})")
        data = self._request("POST", f"{self.releases_url}/generate-notes", payload)
        return _parse(GeneratedNotes, data)

    def create_release(self, tag: str, name: str, body: str) -> ReleaseRecord:
        if len(body or "") > self.body_max_chars:
            raise ReleaseBodyTooLargeError(len(body), self.body_max_chars)
        payload = {"tag_name": tag, "name": name, "body": body}
        data = self._request("POST", self.releases_url, payload)
        release = _parse(ReleaseRecord, data)
        logger.debug(f"✓ Created release {release.tag_name} id={release.id}")
        return release

    # -------- HTTP helpers --------
    def _request(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
        *,
        params: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> Any:
        try:
            r = self.session.request(method, url, params=params, json=payload, timeout=self.timeout_s)
        except requests.Timeout as e:
            raise GithubApiError(f"{method} {url} timed out: {e}", code="TIMEOUT")
        except requests.RequestException as e:
            raise GithubApiError(f"{method} {url} failed: {e}", code="NETWORK")

        sc = r.status_code
        logger.debug(f"{method} {url} -> HTTP {sc}")
        if sc == 401 or sc == 403:
            raise GithubAuthError("Invalid GitHub token or insufficient permissions", status=sc)
        if sc == 404:
            if allow_not_found:
                return None
            raise GithubApiError(f"Not found: {method} {url}", code="NOT_FOUND", status=sc)
        if sc == 429:
            raise GithubApiError("Rate limited", code="RATE_LIMIT", status=sc)
        if sc >= 500:
            raise GithubApiError(f"GitHub server error: HTTP {sc}", code="NETWORK", status=sc)
        if sc >= 400:
            raise GithubApiError(f"GitHub API error: HTTP {sc}", status=sc)
        if sc == 204 or not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise GithubApiError(f"Invalid JSON from {method} {url}: {e}", status=sc)

    def close(self) -> None:
        """Close the GitHub client session."""
        if self.session:
            self.session.close()
            logger.debug("GitHub release client session closed")


def _parse(model: Type[ModelT], data: Any) -> ModelT:
    """Validate an API payload, reporting unexpected shapes as GithubApiError."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise GithubApiError(f"Unexpected {model.__name__} payload from GitHub: {e}")
