import logging
import sys

import click

from last_success.core.config import LOG_FILE, LOG_LEVEL, load_config
from last_success.core.constants import OUTPUT_KEY, NoMatchFallback
from last_success.core.errors import ConfigurationError, ProviderError
from last_success.resolvers.branch_resolver import resolve_branch
from last_success.resolvers.commit_resolver import CommitResolver
from last_success.services.github_actions import GitHubActionsClient
from last_success.services.output_sink import OutputSink
from last_success.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def run(config) -> str:
    """Resolve the branch, then the commit, then publish it."""
    branch = resolve_branch(config)
    logger.info("Current branch: %s", branch)

    with GitHubActionsClient(config.token, base_url=config.api_url, timeout=config.timeout) as client:
        resolver = CommitResolver(
            client,
            config.owner,
            config.repo,
            per_page=config.per_page,
            fallback=config.fallback,
        )
        sha = resolver.resolve(branch, config.job)

    OutputSink(config.output_path).emit(OUTPUT_KEY, sha)
    return sha


@click.command()
@click.option("--job", default=None, help="Job name to look for (omit for the latest successful run)")
@click.option("--token", default=None, help="GitHub token (defaults to INPUT_TOKEN / GITHUB_TOKEN)")
@click.option(
    "--fallback",
    type=click.Choice([f.value for f in NoMatchFallback]),
    default=None,
    help="Result when the job never succeeded: empty string or latest run's commit",
)
@click.option("--repository", default=None, help="owner/name (defaults to GITHUB_REPOSITORY)")
@click.option("--event-name", default=None, help="Triggering event (defaults to GITHUB_EVENT_NAME)")
@click.option("--head-ref", default=None, help="Pull request head branch (defaults to GITHUB_HEAD_REF)")
@click.option("--ref", default=None, help="Full ref, e.g. refs/heads/main (defaults to GITHUB_REF)")
@click.option("--output", "output_path", default=None, help="Output file (defaults to GITHUB_OUTPUT)")
@click.option("--api-url", default=None, help="GitHub REST API base URL")
@click.option("--per-page", default=None, help="Page size when walking run history (1-100)")
@click.option("--debug", is_flag=True, default=False, help="Log every job inspected")
def cli(job, token, fallback, repository, event_name, head_ref, ref, output_path, api_url, per_page, debug):
    """Print the commit of the latest green run on the current branch."""
    setup_logging(level="DEBUG" if debug else LOG_LEVEL, log_file=LOG_FILE)
    logger.info("Starting the action")

    try:
        config = load_config(
            job=job,
            token=token,
            fallback=fallback,
            repository=repository,
            event_name=event_name,
            head_ref=head_ref,
            ref=ref,
            output_path=output_path,
            api_url=api_url,
            per_page=per_page,
        )
        run(config)
    except ConfigurationError as e:
        logger.error("Invalid configuration (%s): %s", e.field, e)
        sys.exit(1)
    except ProviderError as e:
        logger.error("Error getting workflow history: %s", e)
        sys.exit(1)
    except OSError as e:
        logger.error("Failed to write output: %s", e)
        sys.exit(1)

    logger.info("Done")


if __name__ == "__main__":
    cli()
