"""
Configuration
=============
Loads environment variables from .env file using python-dotenv and builds the
ActionConfig that is passed explicitly into every component.

Environment Variables:
    INPUT_JOB            — Job name to look for (empty → latest successful run)
    INPUT_TOKEN          — GitHub token (GITHUB_TOKEN is accepted as well)
    INPUT_FALLBACK       — "empty" (default) or "latest", see NoMatchFallback
    GITHUB_REPOSITORY    — owner/name of the repository
    GITHUB_EVENT_NAME    — Name of the triggering event
    GITHUB_HEAD_REF      — PR head branch (pull_request events only)
    GITHUB_REF           — Full ref of the triggering event (refs/heads/main)
    GITHUB_OUTPUT        — File the sha output is appended to
    GITHUB_API_URL       — REST API base (default: https://api.github.com)
    RUNS_PER_PAGE        — Page size when walking run/job history (default: 100)
    HTTP_TIMEOUT         — Seconds before an API request is abandoned (default: 30)
    LOG_LEVEL            — Root log level (default: INFO)
    LOG_FILE             — Optional path of an additional plain-text log file

Inputs are read exactly once, at process start. Nothing below main.py touches
os.environ.
"""
import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from last_success.core.constants import NoMatchFallback
from last_success.core.errors import ConfigurationError

load_dotenv()

GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
RUNS_PER_PAGE = int(os.getenv("RUNS_PER_PAGE", 100))
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", 30))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "")

# GitHub refuses page sizes above this
MAX_PER_PAGE = 100


class ActionConfig(BaseModel):
    """Everything one resolution needs, validated once."""

    model_config = ConfigDict(frozen=True)

    token: str
    owner: str
    repo: str
    job: str = ""
    fallback: NoMatchFallback = NoMatchFallback.EMPTY
    event_name: str = ""
    head_ref: str = ""
    ref: str = ""
    output_path: str = ""
    api_url: str = GITHUB_API_URL
    per_page: int = Field(default=RUNS_PER_PAGE, ge=1, le=MAX_PER_PAGE)
    timeout: float = HTTP_TIMEOUT


def input_env_name(name: str) -> str:
    """Map an action input to its variable, e.g. "job name" → INPUT_JOB_NAME."""
    return "INPUT_" + name.upper().replace(" ", "_")


def get_input(name: str, env: Mapping[str, str], required: bool = False) -> str:
    """
    Read an action input the way the Actions runner exposes it.

    Raises
    ------
    ConfigurationError
        When ``required`` is set and the value is blank.
    """
    value = env.get(input_env_name(name), "")
    if required and not value.strip():
        raise ConfigurationError(name, f"Input required and not supplied: {name}")
    return value.strip()


def split_repository(repository: str) -> tuple[str, str]:
    """Split "owner/name" into its two parts."""
    parts = (repository or "").strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise ConfigurationError(
            "repository", f"Expected repository as owner/name, got {repository!r}"
        )
    return parts[0], parts[1]


def parse_fallback(value: Optional[str]) -> NoMatchFallback:
    if not value:
        return NoMatchFallback.EMPTY
    try:
        return NoMatchFallback(value.strip().lower())
    except ValueError:
        allowed = ", ".join(f.value for f in NoMatchFallback)
        raise ConfigurationError(
            "fallback", f"Unknown fallback {value!r} (expected one of: {allowed})"
        )


def load_config(
    env: Optional[Mapping[str, str]] = None,
    **overrides: Optional[str],
) -> ActionConfig:
    """
    Build the ActionConfig from environment variables and CLI overrides.

    Parameters
    ----------
    env : Mapping[str, str], optional
        Source of environment variables. Defaults to ``os.environ``.
    **overrides
        Values given explicitly on the command line. ``None`` means
        "not given" and falls through to the environment.

    Returns
    -------
    ActionConfig
    """
    env = os.environ if env is None else env

    def pick(key: str, *names: str) -> str:
        explicit = overrides.get(key)
        if explicit is not None:
            return explicit.strip()
        for name in names:
            if env.get(name):
                return env[name].strip()
        return ""

    token = overrides.get("token") or get_input("token", env) or env.get("GITHUB_TOKEN", "")
    if not token.strip():
        raise ConfigurationError("token", "Input required and not supplied: token")

    owner, repo = split_repository(pick("repository", "GITHUB_REPOSITORY"))

    job = overrides.get("job")
    if job is None:
        job = get_input("job", env)

    fallback = overrides.get("fallback")
    if fallback is None:
        fallback = get_input("fallback", env)

    settings = dict(
        token=token.strip(),
        owner=owner,
        repo=repo,
        job=job.strip(),
        fallback=parse_fallback(fallback),
        event_name=pick("event_name", "GITHUB_EVENT_NAME"),
        head_ref=pick("head_ref", "GITHUB_HEAD_REF"),
        ref=pick("ref", "GITHUB_REF"),
        output_path=pick("output_path", "GITHUB_OUTPUT"),
        api_url=pick("api_url", "GITHUB_API_URL") or GITHUB_API_URL,
    )
    per_page = pick("per_page", "RUNS_PER_PAGE")
    if per_page:
        try:
            settings["per_page"] = int(per_page)
        except ValueError:
            raise ConfigurationError("per_page", f"Page size must be an integer, got {per_page!r}")
        if not 1 <= settings["per_page"] <= MAX_PER_PAGE:
            raise ConfigurationError(
                "per_page", f"Page size must be between 1 and {MAX_PER_PAGE}, got {per_page}"
            )
    return ActionConfig(**settings)
