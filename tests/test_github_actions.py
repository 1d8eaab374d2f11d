"""
Unit Tests — GitHub Actions Client
==================================
Requests are answered by httpx.MockTransport; nothing leaves the process.
"""
import httpx
import pytest

from last_success.core.errors import ProviderError
from last_success.services.github_actions import GitHubActionsClient

RUN_PAYLOAD = {
    "id": 42,
    "head_sha": "abc123",
    "status": "completed",
    "conclusion": "success",
    "head_branch": "main",
    "name": "CI",
    "html_url": "https://github.com/o/r/actions/runs/42",
}

JOB_PAYLOAD = {
    "id": 7,
    "run_id": 42,
    "name": "test",
    "status": "completed",
    "conclusion": "success",
    "steps": [],
}


def client_with(handler):
    return GitHubActionsClient("fake", base_url="https://api.example.test", transport=httpx.MockTransport(handler))


def test_list_workflow_runs_sends_filters():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"total_count": 1, "workflow_runs": [RUN_PAYLOAD]})

    with client_with(handler) as client:
        runs = client.list_workflow_runs("o", "r", "main", status="success", page=1, per_page=1)

    assert seen["path"] == "/repos/o/r/actions/runs"
    assert seen["params"] == {"branch": "main", "status": "success", "page": "1", "per_page": "1"}
    assert seen["auth"] == "Bearer fake"
    assert len(runs) == 1
    assert runs[0].id == 42
    assert runs[0].head_sha == "abc123"
    assert runs[0].is_completed


def test_list_workflow_runs_without_status_omits_filter():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"workflow_runs": []})

    with client_with(handler) as client:
        assert client.list_workflow_runs("o", "r", "dev", page=3, per_page=100) == []
    assert "status" not in seen["params"]
    assert seen["params"]["page"] == "3"


def test_list_jobs_for_run():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"total_count": 1, "jobs": [JOB_PAYLOAD]})

    with client_with(handler) as client:
        jobs = client.list_jobs_for_run("o", "r", 42, page=2, per_page=50)
    assert seen["path"] == "/repos/o/r/actions/runs/42/jobs"
    assert seen["params"] == {"filter": "all", "page": "2", "per_page": "50"}
    assert jobs[0].name == "test"
    assert jobs[0].succeeded()


def test_jobs_from_every_attempt_are_returned():
    first_attempt = dict(JOB_PAYLOAD, id=7, conclusion="success")
    rerun = dict(JOB_PAYLOAD, id=8, conclusion="failure")

    def handler(request):
        if request.url.params.get("filter") != "all":
            return httpx.Response(200, json={"jobs": [rerun]})
        return httpx.Response(200, json={"jobs": [rerun, first_attempt]})

    with client_with(handler) as client:
        jobs = client.list_jobs_for_run("o", "r", 42)
    assert [job.id for job in jobs] == [8, 7]
    assert any(job.succeeded() for job in jobs)


def test_moved_repository_redirect_is_followed():
    def handler(request):
        if request.url.path == "/repos/o/r/actions/runs":
            return httpx.Response(
                301,
                headers={"Location": "https://api.example.test/repositories/99/actions/runs?branch=main"},
                json={"message": "Moved Permanently"},
            )
        assert request.url.path == "/repositories/99/actions/runs"
        return httpx.Response(200, json={"workflow_runs": [RUN_PAYLOAD]})

    with client_with(handler) as client:
        runs = client.list_workflow_runs("o", "r", "main")
    assert [run.head_sha for run in runs] == ["abc123"]


def test_error_detail_is_kept_verbatim():
    def handler(request):
        return httpx.Response(422, json={"message": "Validation Failed: "})

    with client_with(handler) as client:
        with pytest.raises(ProviderError) as exc:
            client.list_workflow_runs("o", "r", "main")
    assert str(exc.value) == "GitHub API request failed (HTTP 422): Validation Failed: "


def test_error_without_detail_has_no_trailing_separator():
    def handler(request):
        return httpx.Response(500, content=b"")

    with client_with(handler) as client:
        with pytest.raises(ProviderError) as exc:
            client.list_workflow_runs("o", "r", "main")
    assert str(exc.value) == "GitHub API request failed (HTTP 500)"


def test_pending_job_has_no_conclusion():
    payload = dict(JOB_PAYLOAD, status="in_progress", conclusion=None)

    def handler(request):
        return httpx.Response(200, json={"jobs": [payload]})

    with client_with(handler) as client:
        job = client.list_jobs_for_run("o", "r", 42)[0]
    assert job.conclusion is None
    assert not job.succeeded()


@pytest.mark.parametrize("status_code,fragment", [
    (401, "authentication failed"),
    (404, "not found"),
    (500, "request failed"),
])
def test_http_errors_raise_provider_error(status_code, fragment):
    def handler(request):
        return httpx.Response(status_code, json={"message": "nope"})

    with client_with(handler) as client:
        with pytest.raises(ProviderError) as exc:
            client.list_workflow_runs("o", "r", "main")
    assert exc.value.status_code == status_code
    assert fragment in str(exc.value)
    assert "nope" in str(exc.value)


def test_rate_limit_is_reported():
    def handler(request):
        return httpx.Response(403, headers={"x-ratelimit-remaining": "0"}, json={"message": "API rate limit exceeded"})

    with client_with(handler) as client:
        with pytest.raises(ProviderError, match="rate limit exceeded"):
            client.list_jobs_for_run("o", "r", 1)


def test_network_error_raises_provider_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with client_with(handler) as client:
        with pytest.raises(ProviderError, match="Network error"):
            client.list_workflow_runs("o", "r", "main")


def test_timeout_raises_provider_error():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    with client_with(handler) as client:
        with pytest.raises(ProviderError, match="Timed out"):
            client.list_workflow_runs("o", "r", "main")


def test_invalid_json_raises_provider_error():
    def handler(request):
        return httpx.Response(200, content=b"<html>")

    with client_with(handler) as client:
        with pytest.raises(ProviderError, match="Invalid JSON"):
            client.list_workflow_runs("o", "r", "main")


def test_missing_list_raises_provider_error():
    def handler(request):
        return httpx.Response(200, json={"message": "odd"})

    with client_with(handler) as client:
        with pytest.raises(ProviderError, match="workflow_runs"):
            client.list_workflow_runs("o", "r", "main")


def test_invalid_run_payload_raises_provider_error():
    def handler(request):
        return httpx.Response(200, json={"workflow_runs": [{"id": 1}]})

    with client_with(handler) as client:
        with pytest.raises(ProviderError, match="Unexpected workflow run payload"):
            client.list_workflow_runs("o", "r", "main")
