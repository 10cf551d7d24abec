import logging
from enum import Enum
from typing import Callable, Optional

import click

from auto_commit.errors import CommitMutationError, UserDeclinedError
from auto_commit.git import GitRepository
from auto_commit.schemas import CommitProposal
from auto_commit.settings import auto_commit_logger


SEPARATOR = "-" * 30


class DeliveryState(str, Enum):
    PROPOSED = "proposed"
    PRINTED = "printed"
    COMMITTING = "committing"
    COMMITTED = "committed"
    ABORTED = "aborted"
    FAILED = "failed"


class CommitDelivery:
    """Print, confirm and commit a proposal.

    One instance handles one proposal: it moves from PROPOSED to exactly one
    of PRINTED, COMMITTED, ABORTED or FAILED and never retries a commit.
    """

    def __init__(
        self,
        repository: GitRepository,
        *,
        dry_run: bool = False,
        review: bool = False,
        force: bool = False,
        confirm: Callable[..., bool] = click.confirm,
        echo: Callable[..., None] = click.echo,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._logger = logger or auto_commit_logger(__name__)
        self._repository = repository
        self._confirm = confirm
        self._echo = echo
        self.dry_run = dry_run
        self.review = review
        self.force = force
        self.state = DeliveryState.PROPOSED

    # --- Public API ---
    def deliver(self, proposal: CommitProposal) -> DeliveryState:
        """Deliver *proposal* according to the mode flags.

        Raises:
            UserDeclinedError: If the confirmation is answered with "no".
            CommitMutationError: If `git commit` fails.
        """
        if self.state is not DeliveryState.PROPOSED:
            raise RuntimeError(f"Proposal already delivered (state: {self.state.value})")

        message = proposal.render()

        if self.dry_run:
            self._logger.debug("Dry run, printing message only")
            self._echo(message)
            self.state = DeliveryState.PRINTED
            return self.state

        self._echo(f"Proposed Commit:\n{SEPARATOR}\n{message}\n{SEPARATOR}")

        if not self.force and not self._ask_confirmation():
            self.state = DeliveryState.ABORTED
            self._logger.info("Commit aborted by user")
            raise UserDeclinedError("Commit aborted by user.")

        self.state = DeliveryState.COMMITTING
        self._logger.info("Committing message%s...", " for review" if self.review else "")
        result = self._repository.commit(message, review=self.review)

        if not result.succeeded:
            self.state = DeliveryState.FAILED
            self._logger.debug("git commit failed: %s", result.output)
            detail = _failure_reason(result.output)
            raise CommitMutationError(
                f"git commit exited with status {result.exit_status}: {detail}"
            )

        self.state = DeliveryState.COMMITTED
        if result.output:
            self._echo(result.output)
        return self.state

    # --- Private helpers ---
    def _ask_confirmation(self) -> bool:
        try:
            return self._confirm("Do you want to continue?", default=True)
        except click.Abort:
            self._logger.debug("Confirmation prompt aborted")
            return False


def _failure_reason(output: str) -> str:
    # git prints the reason last, after the status summary.
    lines = [line.strip() for line in output.splitlines() if line.strip()]
    return lines[-1] if lines else "no output"
