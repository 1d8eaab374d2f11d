"""
Workflow Run Model
Pydantic model for one execution of a workflow, as listed by the Actions API.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict

from last_success.core.constants import STATUS_COMPLETED


class WorkflowRun(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    head_sha: str
    status: str
    head_branch: Optional[str] = None
    conclusion: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED
