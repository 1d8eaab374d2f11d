"""
GitHub Actions Client
=====================
Run History Provider backed by the GitHub REST API.

Endpoints:
    GET /repos/{owner}/{repo}/actions/runs                 — workflow_runs
    GET /repos/{owner}/{repo}/actions/runs/{run_id}/jobs   — jobs

Every failure (transport error, timeout, non-2xx status, malformed payload) is
raised as ProviderError. Nothing is retried: a re-run of the CI job is the
retry mechanism.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from last_success.core.config import GITHUB_API_URL, HTTP_TIMEOUT
from last_success.core.errors import ProviderError
from last_success.models.job import Job
from last_success.models.workflow_run import WorkflowRun
from last_success.services.run_history import RunHistoryProvider

logger = logging.getLogger(__name__)


class GitHubActionsClient(RunHistoryProvider):
    """
    Synchronous client for the Actions run/job listings.

    Use as a context manager so the underlying connection pool is closed:

        with GitHubActionsClient(token) as client:
            runs = client.list_workflow_runs("o", "r", "main")
    """

    def __init__(
        self,
        github_token: str,
        base_url: str = GITHUB_API_URL,
        timeout: float = HTTP_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "last-success-sha",
        }
        if github_token:
            self.headers["Authorization"] = f"Bearer {github_token}"

        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=self.headers,
            timeout=timeout,
            transport=transport,
            # renamed / transferred repositories answer 301
            follow_redirects=True,
        )

    def __enter__(self) -> "GitHubActionsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _get(self, path: str, params: Dict[str, Any], data_key: str) -> List[Dict[str, Any]]:
        """GET ``path`` and return the list stored under ``data_key``."""
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as http_err:
            raise self._status_error(http_err.response) from http_err
        except httpx.TimeoutException as e:
            raise ProviderError(f"Timed out calling {path}: {e}") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Network error calling {path}: {e}") from e
        except ValueError as e:
            raise ProviderError(f"Invalid JSON response from {path}: {e}") from e

        items = data.get(data_key) if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise ProviderError(f"Malformed response from {path}: missing '{data_key}' list")
        return items

    @staticmethod
    def _status_error(response: httpx.Response) -> ProviderError:
        status_code = response.status_code
        try:
            body = response.json()
            detail = body.get("message", "") if isinstance(body, dict) else ""
        except ValueError:
            detail = response.text
        if status_code in (403, 429) and response.headers.get("x-ratelimit-remaining") == "0":
            reason = "rate limit exceeded"
        elif status_code in (401, 403):
            reason = "authentication failed"
        elif status_code == 404:
            reason = "repository or run not found"
        else:
            reason = "request failed"
        message = f"GitHub API {reason} (HTTP {status_code})"
        if detail:
            message += f": {detail}"
        return ProviderError(message, status_code=status_code)

    def list_workflow_runs(
        self,
        owner: str,
        repo: str,
        branch: str,
        status: Optional[str] = None,
        page: int = 1,
        per_page: int = 30,
    ) -> List[WorkflowRun]:
        params: Dict[str, Any] = {"branch": branch, "page": page, "per_page": per_page}
        if status:
            params["status"] = status
        path = f"/repos/{owner}/{repo}/actions/runs"
        logger.debug("Listing workflow runs: %s %s", path, params)
        items = self._get(path, params, "workflow_runs")
        try:
            return [WorkflowRun.model_validate(item) for item in items]
        except ValidationError as e:
            raise ProviderError(f"Unexpected workflow run payload: {e}") from e

    def list_jobs_for_run(
        self,
        owner: str,
        repo: str,
        run_id: int,
        page: int = 1,
        per_page: int = 30,
    ) -> List[Job]:
        path = f"/repos/{owner}/{repo}/actions/runs/{run_id}/jobs"
        logger.debug("Listing jobs: %s page=%d", path, page)
        # every attempt, so a re-run does not hide an earlier successful attempt
        params = {"filter": "all", "page": page, "per_page": per_page}
        items = self._get(path, params, "jobs")
        try:
            return [Job.model_validate(item) for item in items]
        except ValidationError as e:
            raise ProviderError(f"Unexpected job payload: {e}") from e
