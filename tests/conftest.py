"""
Shared fixtures: an in-memory run history that records every call made to it.
"""
import pytest

from last_success.core.config import ActionConfig
from last_success.core.errors import ProviderError
from last_success.models.job import Job
from last_success.models.workflow_run import WorkflowRun
from last_success.services.run_history import RunHistoryProvider


def make_run(run_id, sha, status="completed", conclusion="success", branch="main"):
    return WorkflowRun(
        id=run_id, head_sha=sha, status=status, conclusion=conclusion, head_branch=branch
    )


def make_job(run_id, name, status="completed", conclusion="success", job_id=None):
    return Job(
        id=job_id if job_id is not None else run_id * 100 + len(name),
        run_id=run_id,
        name=name,
        status=status,
        conclusion=conclusion,
    )


class FakeRunHistory(RunHistoryProvider):
    """
    Fixture-backed provider. ``runs`` is newest first; ``jobs`` maps run id
    to its job list. Setting ``fail_on`` to "runs" or "jobs" raises
    ProviderError from that call.
    """

    def __init__(self, runs=None, jobs=None, fail_on=None):
        self.runs = list(runs or [])
        self.jobs = dict(jobs or {})
        self.fail_on = fail_on
        self.run_calls = []
        self.job_calls = []

    def list_workflow_runs(self, owner, repo, branch, status=None, page=1, per_page=30):
        self.run_calls.append({"branch": branch, "status": status, "page": page, "per_page": per_page})
        if self.fail_on == "runs":
            raise ProviderError("boom", status_code=500)
        runs = [r for r in self.runs if r.head_branch == branch]
        if status == "success":
            runs = [r for r in runs if r.conclusion == "success"]
        elif status:
            runs = [r for r in runs if r.status == status]
        start = (page - 1) * per_page
        return runs[start:start + per_page]

    def list_jobs_for_run(self, owner, repo, run_id, page=1, per_page=30):
        self.job_calls.append(run_id)
        if self.fail_on == "jobs":
            raise ProviderError("boom", status_code=502)
        jobs = self.jobs.get(run_id, [])
        start = (page - 1) * per_page
        return jobs[start:start + per_page]


@pytest.fixture
def config_factory():
    def factory(**kwargs):
        values = {"token": "fake", "owner": "o", "repo": "r"}
        values.update(kwargs)
        return ActionConfig(**values)
    return factory
