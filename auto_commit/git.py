"""Thin wrapper around the git executable.

Read-only queries go through an injectable ``run_process`` callable; the commit
itself is spawned with ``Popen`` so the message can be streamed through stdin.
"""

import logging
import subprocess
import threading
from dataclasses import dataclass
from typing import IO, Callable, Optional, Sequence

from auto_commit.errors import CommitMutationError, RepositoryAccessError
from auto_commit.settings import auto_commit_logger


RunProcess = Callable[[Sequence[str]], subprocess.CompletedProcess[str]]


@dataclass(frozen=True)
class CommitResult:
    """Exit status and combined output of a `git commit` run."""

    exit_status: int
    output: str

    @property
    def succeeded(self) -> bool:
        return self.exit_status == 0


class StdinWriter(threading.Thread):
    """Write a payload into a child's stdin, then close it.

    Runs on its own thread so the parent can wait for the child at the same
    time; a child that stops reading cannot block the parent on a full pipe.
    """

    def __init__(self, stream: IO[str], payload: str) -> None:
        super().__init__(name="auto-commit-stdin-writer", daemon=True)
        self._stream = stream
        self._payload = payload
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            self._stream.write(self._payload)
        except (BrokenPipeError, OSError, ValueError) as exc:
            self.error = exc
        finally:
            try:
                self._stream.close()
            except OSError as exc:
                if self.error is None:
                    self.error = exc


class GitRepository:
    """Queries and mutates the git repository in the current directory."""

    def __init__(
        self,
        run_process: Optional[RunProcess] = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._logger = logger or auto_commit_logger(__name__)
        self._run_process = run_process or self._default_run_process
        self._popen = popen

    # --- Public API ---
    def is_inside_repository(self) -> bool:
        result = self._run(["git", "rev-parse", "--is-inside-work-tree"])
        inside = result.returncode == 0 and result.stdout.strip() == "true"
        self._logger.debug("Inside git work tree: %s", inside)
        return inside

    def list_changed_paths(self) -> tuple[str, ...]:
        output = self._run_git_command(["git", "diff", "--name-only", "--staged"])
        return tuple(line for line in output.splitlines() if line.strip())

    def read_staged_diff(self) -> str:
        return self._run_git_command(["git", "diff", "--staged"])

    def commit(self, message: str, *, review: bool = False) -> CommitResult:
        """Run `git commit -F -` and stream *message* through its stdin.

        With *review*, git opens the editor on the message (``-e``) and the
        child keeps the terminal, so no output is captured.

        Raises:
            RepositoryAccessError: If git cannot be started.
            CommitMutationError: If the message could not be delivered.
        """
        args = ["git", "commit", *(["-e"] if review else []), "-F", "-"]
        capture = None if review else subprocess.PIPE

        self._logger.debug("Running command: %s", " ".join(args))
        try:
            process = self._popen(
                args,
                stdin=subprocess.PIPE,
                stdout=capture,
                stderr=capture,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            raise RepositoryAccessError(f"Could not run git: {exc}") from exc

        # Hand stdin to the writer; communicate() must not touch it.
        stdin, process.stdin = process.stdin, None
        writer = StdinWriter(stdin, message)
        writer.start()

        stdout, stderr = process.communicate()
        writer.join()

        output = "\n".join(part.strip() for part in (stdout, stderr) if part and part.strip())
        result = CommitResult(exit_status=process.returncode, output=output)
        self._logger.debug("git commit exited with status %d", result.exit_status)

        if result.succeeded and writer.error is not None:
            raise CommitMutationError(
                f"Failed to write the commit message to git: {writer.error}"
            ) from writer.error

        return result

    # --- Private helpers ---
    def _run(self, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
        self._logger.debug("Running command: %s", " ".join(args))
        try:
            return self._run_process(args)
        except OSError as exc:
            self._logger.debug("Could not start %s", args[0], exc_info=True)
            raise RepositoryAccessError(
                f"Could not run git ({exc.strerror or exc}). Is git installed and on PATH?"
            ) from exc

    def _run_git_command(self, args: Sequence[str]) -> str:
        result = self._run(args)
        if result.returncode != 0:
            stderr = result.stderr.strip() if result.stderr else ""
            self._logger.debug("%s failed: %s", " ".join(args), stderr)
            first_line = stderr.splitlines()[0] if stderr else "unknown error"
            raise RepositoryAccessError(f"`{' '.join(args)}` failed: {first_line}")

        self._logger.debug("Command output length: %d", len(result.stdout))
        return result.stdout

    # --- Static helpers ---
    @staticmethod
    def _default_run_process(
        args: Sequence[str],
    ) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
