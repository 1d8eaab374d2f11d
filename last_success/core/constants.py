"""
Constants
Centralised storage for GitHub Actions status values, event names and output keys.
"""
from enum import Enum

# Run / job status values reported by the Actions API
STATUS_QUEUED = "queued"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"

# Conclusion of a completed run / job. Also accepted by the runs endpoint as a
# status filter.
CONCLUSION_SUCCESS = "success"

PULL_REQUEST_EVENT = "pull_request"

# refs/heads/<branch>
BRANCH_REF_SEGMENT = 2

OUTPUT_KEY = "sha"
NO_MATCH = ""


class NoMatchFallback(str, Enum):
    """What a job lookup resolves to when no run ever had the job succeed."""

    EMPTY = "empty"
    LATEST = "latest"
