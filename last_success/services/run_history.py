"""
Run History Provider
====================
The capability the commit resolver is written against: a paginated,
newest-first source of workflow runs and their jobs.

GitHubActionsClient is the production binding; tests use an in-memory one.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from last_success.models.job import Job
from last_success.models.workflow_run import WorkflowRun


class RunHistoryProvider(ABC):

    @abstractmethod
    def list_workflow_runs(
        self,
        owner: str,
        repo: str,
        branch: str,
        status: Optional[str] = None,
        page: int = 1,
        per_page: int = 30,
    ) -> List[WorkflowRun]:
        """
        Return one page of runs on ``branch``, newest first.

        ``status`` narrows the listing (e.g. "success", "completed"); None
        lists every run. An empty list means the page is past the end.
        """

    @abstractmethod
    def list_jobs_for_run(
        self,
        owner: str,
        repo: str,
        run_id: int,
        page: int = 1,
        per_page: int = 30,
    ) -> List[Job]:
        """Return one page of the jobs belonging to ``run_id``."""
