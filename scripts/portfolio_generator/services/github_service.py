#------------------------------------------------------------
#                      github_service.py
#             Handles GitHub API requests for repo
#              listings and per-repo enrichment.

import sys
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote
import requests
from ..config import (
    GITHUB_API_ACCEPT_HEADER,
    GITHUB_API_BASE_URL,
    GITHUB_CONTRIBUTOR_PER_PAGE,
    GITHUB_RAW_ACCEPT_HEADER,
    GITHUB_REPOS_PER_PAGE,
    GITHUB_REPOS_SORT,
    GITHUB_REQUEST_TIMEOUT_SECONDS,
    GITHUB_USER_AGENT,
)
from ..errors import UpstreamError
from ..models import Contributor, EnrichmentResult, GeneratorConfig

USER_REPOS_ENDPOINT_TEMPLATE = "/users/{username}/repos"
README_ENDPOINT_TEMPLATE = "/repos/{full_name}/readme"
CONTRIBUTORS_ENDPOINT_TEMPLATE = "/repos/{full_name}/contributors?per_page={per_page}"
REPO_QUERY_TEMPLATE = "{base}?per_page={per_page}&page={page}&sort={sort}"

PAGE_RESULT_MESSAGE = "Page {page}: Found {count} repositories"
HTTP_ERROR_MESSAGE = "HTTP {status} {url}"
RATE_LIMIT_MESSAGE = "GitHub API rate limit hit (HTTP 403). Provide a token or run the generator locally."
USER_NOT_FOUND_MESSAGE = "GitHub user not found: {username}"
TRANSPORT_ERROR_MESSAGE = "Request to {url} failed: {error}"
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected GitHub response from {url}"
ENRICHMENT_SKIPPED_WARNING = "WARNING: {what} unavailable for {full_name}: {reason}"


class GitHubService:

    # This function does initialize the service with a reusable HTTP session.
    # A session may be injected so callers can substitute a fake transport.
    def __init__(
        self,
        config: GeneratorConfig,
        session: Optional[requests.Session] = None,
        accept_header: str = GITHUB_API_ACCEPT_HEADER,
        verbose: bool = True,
    ):
        self.config = config
        self.owns_session = session is None
        self.session = session or requests.Session()
        self.accept_header = accept_header
        self.verbose = verbose

    def __enter__(self) -> "GitHubService":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # This function does release the HTTP session.
    # Injected sessions belong to the caller and are left open.
    def close(self) -> None:
        if self.owns_session:
            self.session.close()

    # This function does build request headers for GitHub API calls.
    # It adds auth headers when a token is configured.
    def headers(self, accept: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "Accept": accept or self.accept_header,
            "User-Agent": GITHUB_USER_AGENT,
        }
        if self.config.github_token:
            headers["Authorization"] = f"Bearer {self.config.github_token}"
        return headers

    def _get(self, url: str, accept: Optional[str] = None) -> requests.Response:
        return self.session.get(url, headers=self.headers(accept), timeout=GITHUB_REQUEST_TIMEOUT_SECONDS)

    def _log(self, message: str, **kwargs) -> None:
        if self.verbose:
            print(message, **kwargs)

    # This function does fetch every repository of the configured account.
    # Pages are requested one at a time until a short page comes back;
    # any failed page aborts the whole listing.
    def fetch_repos(self) -> List[dict]:
        username = self.config.github_username
        base_url = f"{GITHUB_API_BASE_URL}{USER_REPOS_ENDPOINT_TEMPLATE.format(username=quote(username, safe=''))}"
        repos: List[dict] = []
        page = 1

        while True:
            url = REPO_QUERY_TEMPLATE.format(
                base=base_url,
                per_page=GITHUB_REPOS_PER_PAGE,
                page=page,
                sort=GITHUB_REPOS_SORT,
            )
            try:
                response = self._get(url)
            except requests.RequestException as exc:
                raise UpstreamError(TRANSPORT_ERROR_MESSAGE.format(url=url, error=exc), url=url) from exc

            if not 200 <= response.status_code < 300:
                raise UpstreamError(self._status_message(response.status_code, url), status=response.status_code, url=url)

            try:
                data = response.json()
            except ValueError as exc:
                raise UpstreamError(UNEXPECTED_RESPONSE_MESSAGE.format(url=url), status=response.status_code, url=url) from exc
            if not isinstance(data, list):
                raise UpstreamError(UNEXPECTED_RESPONSE_MESSAGE.format(url=url), status=response.status_code, url=url)

            self._log(PAGE_RESULT_MESSAGE.format(page=page, count=len(data)))
            repos.extend(data)
            if len(data) < GITHUB_REPOS_PER_PAGE:
                break
            page += 1

        return repos

    def _status_message(self, status: int, url: str) -> str:
        if status == 403:
            return RATE_LIMIT_MESSAGE
        if status == 404:
            return USER_NOT_FOUND_MESSAGE.format(username=self.config.github_username)
        return HTTP_ERROR_MESSAGE.format(status=status, url=url)

    # This function does fetch the raw README text of a repository.
    # Failures are reported in the result and never raised.
    def fetch_readme(self, full_name: str) -> EnrichmentResult[str]:
        url = f"{GITHUB_API_BASE_URL}{README_ENDPOINT_TEMPLATE.format(full_name=full_name)}"
        try:
            response = self._get(url, accept=GITHUB_RAW_ACCEPT_HEADER)
        except requests.RequestException as exc:
            return self._unavailable("README", full_name, str(exc))

        if not 200 <= response.status_code < 300:
            return self._unavailable("README", full_name, HTTP_ERROR_MESSAGE.format(status=response.status_code, url=url))

        text = response.text or ""
        if not text.strip():
            return self._unavailable("README", full_name, "empty README")
        return EnrichmentResult.available(text)

    # This function does fetch the top contributors of a repository.
    # Upstream ordering by contribution count is kept as-is.
    def fetch_contributors(self, full_name: str) -> EnrichmentResult[Tuple[Contributor, ...]]:
        url = f"{GITHUB_API_BASE_URL}{CONTRIBUTORS_ENDPOINT_TEMPLATE.format(full_name=full_name, per_page=GITHUB_CONTRIBUTOR_PER_PAGE)}"
        try:
            response = self._get(url)
        except requests.RequestException as exc:
            return self._unavailable("contributors", full_name, str(exc))

        if not 200 <= response.status_code < 300:
            return self._unavailable("contributors", full_name, HTTP_ERROR_MESSAGE.format(status=response.status_code, url=url))

        try:
            data = response.json()
        except ValueError:
            return self._unavailable("contributors", full_name, UNEXPECTED_RESPONSE_MESSAGE.format(url=url))
        if not isinstance(data, list) or not data:
            return self._unavailable("contributors", full_name, "no contributors returned")

        contributors = tuple(
            Contributor.from_dict(item)
            for item in data[:GITHUB_CONTRIBUTOR_PER_PAGE]
            if isinstance(item, dict)
        )
        return EnrichmentResult.available(contributors)

    def _unavailable(self, what: str, full_name: str, reason: str) -> EnrichmentResult:
        self._log(ENRICHMENT_SKIPPED_WARNING.format(what=what, full_name=full_name, reason=reason), file=sys.stderr)
        return EnrichmentResult.unavailable(reason)
