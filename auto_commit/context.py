import logging
import warnings
from typing import Optional

from auto_commit.config import DEFAULT_TOKEN_LIMIT
from auto_commit.errors import EmptyChangeSetWarning, NotARepositoryError
from auto_commit.git import GitRepository
from auto_commit.schemas import ChangeSet
from auto_commit.settings import auto_commit_logger
from auto_commit.utils import truncate_to_n_tokens


NO_STAGED_CHANGES = (
    "There are no staged files to commit. Try running `git add` to stage some files."
)


class ContextAssembler:
    """Collect staged changes and turn them into a bounded prompt context."""

    def __init__(
        self,
        repository: GitRepository,
        token_limit: int = DEFAULT_TOKEN_LIMIT,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._logger = logger or auto_commit_logger(__name__)
        self._repository = repository
        self.token_limit = token_limit

    # --- Public API ---
    def collect_change_set(self) -> ChangeSet:
        """Read the staged paths and diff.

        Raises:
            NotARepositoryError: If the current directory is not a work tree.
            RepositoryAccessError: If git cannot be run.
        """
        self._logger.debug("Collecting staged changes...")

        if not self._repository.is_inside_repository():
            raise NotARepositoryError(
                "It looks like you are not in a git repository. "
                "Run this command inside a repository, or create one with `git init`."
            )

        change_set = ChangeSet(
            paths=self._repository.list_changed_paths(),
            raw_diff=self._repository.read_staged_diff(),
        )
        self._logger.debug(
            "Collected %d changed paths, diff length: %d",
            len(change_set.paths),
            len(change_set.raw_diff),
        )

        if change_set.is_empty:
            self._logger.debug("No staged changes detected")
            warnings.warn(NO_STAGED_CHANGES, EmptyChangeSetWarning, stacklevel=2)

        return change_set

    def build_context(self, change_set: ChangeSet) -> str:
        context = truncate_to_n_tokens(change_set.render(), self.token_limit)
        self._logger.debug(
            "Context length: %d chars (token limit: %d)", len(context), self.token_limit
        )
        return context
