import logging
import warnings
from typing import Callable, ContextManager, Optional

import click

from auto_commit.context import ContextAssembler
from auto_commit.delivery import CommitDelivery
from auto_commit.errors import AutoCommitError, EmptyChangeSetWarning
from auto_commit.llm import ChatAutoCommit
from auto_commit.schemas import ChangeSet
from auto_commit.settings import auto_commit_logger

from .progress import spinner


class AutoCommitController:
    """Main controller orchestrating the CLI workflow."""

    def __init__(
        self,
        agent_factory: Callable[[], ChatAutoCommit],
        assembler: ContextAssembler,
        delivery: CommitDelivery,
        *,
        show_progress: bool = False,
        progress: Callable[..., ContextManager[None]] = spinner,
        logger: Optional[logging.Logger] = None,
        echo: Callable[..., None] = click.echo,
        echo_err: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._logger = logger or auto_commit_logger(__name__)
        self._agent_factory = agent_factory
        self._assembler = assembler
        self._delivery = delivery
        self._show_progress = show_progress
        self._progress = progress
        self._echo = echo
        self._echo_err = echo_err or (lambda message: self._echo(message, err=True))

    # --- Public API ---
    def run(self) -> int:
        self._logger.debug("Starting CLI controller run")

        try:
            # Builds the client and checks the API key before touching git.
            agent = self._agent_factory()

            change_set = self._collect_change_set()
            context = self._assembler.build_context(change_set)

            self._logger.info("Loading Data...")
            with self._progress(
                "Analyzing Codebase...",
                enabled=self._show_progress,
                done_message="Finished Analyzing!",
            ):
                proposal = agent.invoke(context)

            self._delivery.deliver(proposal)
            return 0
        except AutoCommitError as exc:
            self._logger.debug("Run failed", exc_info=True)
            self._echo_err(f"❌ {exc}")
            return 1
        except Exception as exc:
            self._logger.debug("Unexpected failure", exc_info=True)
            self._echo_err(f"❌ An error occurred: {exc}")
            return 1

    # --- Private helpers ---
    def _collect_change_set(self) -> ChangeSet:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", EmptyChangeSetWarning)
            change_set = self._assembler.collect_change_set()

        for warning in caught:
            if issubclass(warning.category, EmptyChangeSetWarning):
                self._echo_err(f"⚠️  {warning.message}")
            else:
                warnings.showwarning(
                    warning.message, warning.category, warning.filename, warning.lineno
                )

        return change_set
