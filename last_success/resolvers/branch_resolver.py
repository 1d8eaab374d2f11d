"""
Branch Resolver
===============
Works out which branch triggered the current workflow.

    pull_request event  → GITHUB_HEAD_REF (the PR's source branch)
    anything else       → third segment of GITHUB_REF (refs/heads/<branch>)
"""
import logging

from last_success.core.config import ActionConfig
from last_success.core.constants import BRANCH_REF_SEGMENT, PULL_REQUEST_EVENT
from last_success.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def branch_from_ref(ref: str) -> str:
    """
    Take the branch out of a full ref path.

    Only the third segment is returned, so ``refs/heads/feature/x`` yields
    ``feature``.
    """
    segments = (ref or "").split("/")
    if len(segments) <= BRANCH_REF_SEGMENT or not segments[BRANCH_REF_SEGMENT]:
        raise ConfigurationError("ref", f"Could not get branch name from GITHUB_REF {ref!r}")
    return segments[BRANCH_REF_SEGMENT]


def resolve_branch(config: ActionConfig) -> str:
    if config.event_name == PULL_REQUEST_EVENT:
        logger.info("Event is pull request, using GITHUB_HEAD_REF")
        if not config.head_ref:
            raise ConfigurationError("head_ref", "Could not get branch name from GITHUB_HEAD_REF")
        return config.head_ref

    logger.info("Event is %s, using GITHUB_REF", config.event_name or "unknown")
    return branch_from_ref(config.ref)
