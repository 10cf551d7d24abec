import sys

import click
from dotenv import load_dotenv

from auto_commit import __version__
from auto_commit.config import AutoCommitConfig
from auto_commit.context import ContextAssembler
from auto_commit.delivery import CommitDelivery
from auto_commit.errors import ConfigurationError
from auto_commit.git import GitRepository
from auto_commit.llm import ChatAutoCommit
from auto_commit.settings import (
    auto_commit_logger,
    is_verbose,
    level_from_verbosity,
    set_auto_commit_log_level,
)

from .controller import AutoCommitController


logger = auto_commit_logger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="auto-commit")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Output the generated message, but don't create a commit.",
)
@click.option(
    "-r",
    "--review",
    is_flag=True,
    help=(
        "Edit the generated commit message before committing. The message is piped "
        "to git, so use an editor that opens its own window (GIT_EDITOR)."
    ),
)
@click.option(
    "-f", "--force", is_flag=True, help="Don't ask for confirmation before committing."
)
@click.option("-v", "--verbose", count=True, help="More log output (repeatable).")
@click.option("-q", "--quiet", count=True, help="Less log output (repeatable).")
def run_auto_commit(
    dry_run: bool, review: bool, force: bool, verbose: int, quiet: int
) -> None:
    """Automagically generate commit messages from staged changes.

    \b
    Environment:
      OPENAI_API_KEY      required, may also come from a .env file
      AUTO_COMMIT_MODEL   model override (default: gpt-4.1-nano)
    """
    level = level_from_verbosity(verbose, quiet)
    set_auto_commit_log_level(level)
    load_dotenv()

    try:
        config = AutoCommitConfig.from_env()
    except ConfigurationError as exc:
        click.echo(f"❌ {exc}", err=True)
        sys.exit(1)

    logger.debug("Using configuration: %s", config)

    repository = GitRepository()
    controller = AutoCommitController(
        agent_factory=lambda: ChatAutoCommit(config=config),
        assembler=ContextAssembler(repository, token_limit=config.token_limit),
        delivery=CommitDelivery(
            repository, dry_run=dry_run, review=review, force=force
        ),
        show_progress=not dry_run and not is_verbose(level),
    )

    sys.exit(controller.run())
