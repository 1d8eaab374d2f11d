"""
Commit Resolver
===============
Finds the commit of the latest green run on a branch.

Modes:
    no job name  → head commit of the newest run with status "success"
    job name     → walk runs newest → oldest; the first completed run holding
                   a job of that name with conclusion "success" wins

When nothing matches the result is the empty string (first run ever, or the
job never succeeded). For job lookups the NoMatchFallback may instead select
the newest run's commit.

Requests are made strictly in sequence and stop at the first match, so a
recently green job costs one run page and a handful of job pages.
"""
import logging
from typing import Iterator, Optional

from last_success.core.config import RUNS_PER_PAGE
from last_success.core.constants import CONCLUSION_SUCCESS, NO_MATCH, NoMatchFallback
from last_success.models.job import Job
from last_success.models.workflow_run import WorkflowRun
from last_success.services.run_history import RunHistoryProvider

logger = logging.getLogger(__name__)


class CommitResolver:
    """
    Resolves commit hashes for one repository against a RunHistoryProvider.

    Holds no state between calls: the same history always yields the same
    answer.
    """

    def __init__(
        self,
        provider: RunHistoryProvider,
        owner: str,
        repo: str,
        per_page: int = RUNS_PER_PAGE,
        fallback: NoMatchFallback = NoMatchFallback.EMPTY,
    ) -> None:
        self.provider = provider
        self.owner = owner
        self.repo = repo
        self.per_page = per_page
        self.fallback = fallback

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------
    def _iter_runs(self, branch: str) -> Iterator[WorkflowRun]:
        """Yield every run on ``branch``, newest first, one page at a time."""
        page = 1
        while True:
            runs = self.provider.list_workflow_runs(
                self.owner, self.repo, branch, page=page, per_page=self.per_page
            )
            yield from runs
            if len(runs) < self.per_page:
                return
            page += 1

    def _iter_jobs(self, run_id: int) -> Iterator[Job]:
        page = 1
        while True:
            jobs = self.provider.list_jobs_for_run(
                self.owner, self.repo, run_id, page=page, per_page=self.per_page
            )
            yield from jobs
            if len(jobs) < self.per_page:
                return
            page += 1

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------
    def resolve_latest_successful_run(self, branch: str) -> str:
        runs = self.provider.list_workflow_runs(
            self.owner, self.repo, branch, status=CONCLUSION_SUCCESS, page=1, per_page=1
        )
        if not runs:
            logger.info("No successful workflow runs found, defaulting to empty string")
            return NO_MATCH

        sha = runs[0].head_sha
        logger.info("Latest successful workflow run commit hash: %s", sha)
        return sha

    def run_has_successful_job(self, run: WorkflowRun, job_name: str) -> bool:
        """True if any job record named ``job_name`` in ``run`` succeeded."""
        for job in self._iter_jobs(run.id):
            logger.debug(
                "Job name: %s, status: %s, conclusion: %s", job.name, job.status, job.conclusion
            )
            if job.name == job_name and job.succeeded():
                return True
        return False

    def resolve_job_success(self, branch: str, job_name: str) -> str:
        newest: Optional[WorkflowRun] = None

        for run in self._iter_runs(branch):
            if newest is None:
                newest = run
            if not run.is_completed:
                logger.debug("Skipping run %d (status: %s)", run.id, run.status)
                continue

            logger.info("Checking all jobs in commit of hash: %s", run.head_sha)
            if self.run_has_successful_job(run, job_name):
                logger.info(
                    "The hash of the latest commit in which the specified job was successful: %s",
                    run.head_sha,
                )
                return run.head_sha

        if self.fallback == NoMatchFallback.LATEST and newest is not None:
            logger.info(
                "Unable to find job %r in successful state in any previous workflow run, "
                "defaulting to the latest commit hash %s",
                job_name,
                newest.head_sha,
            )
            return newest.head_sha

        logger.info(
            "Unable to find job %r in successful state in any previous workflow run, "
            "defaulting to empty string",
            job_name,
        )
        return NO_MATCH

    def resolve(self, branch: str, job_name: Optional[str] = None) -> str:
        """Dispatch to the job lookup when a job name is given, else the run lookup."""
        if not job_name:
            logger.info(
                "Job name not provided, checking for the commit hash of the latest "
                "successful workflow run instead"
            )
            return self.resolve_latest_successful_run(branch)

        logger.info("Checking for the commit hash of the latest successful run of job: %s", job_name)
        return self.resolve_job_success(branch, job_name)
