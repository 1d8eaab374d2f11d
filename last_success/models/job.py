"""
Job Model
=========
Pydantic model for a single job of a workflow run.

Fields:
    id          — job identifier
    run_id      — owning workflow run
    name        — job name as shown in the workflow UI (matrix suffix included)
    status      — queued / in_progress / completed
    conclusion  — success / failure / cancelled / skipped / ...; None until completed
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict

from last_success.core.constants import CONCLUSION_SUCCESS, STATUS_COMPLETED


class Job(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    run_id: int
    name: str
    status: str
    conclusion: Optional[str] = None

    def succeeded(self) -> bool:
        """True only for a completed job whose conclusion is success."""
        return self.status == STATUS_COMPLETED and self.conclusion == CONCLUSION_SUCCESS
