class AutoCommitError(Exception):
    """Base exception for auto-commit errors."""


class ConfigurationError(AutoCommitError):
    """Raised when an environment override holds an invalid value."""


class RepositoryAccessError(AutoCommitError):
    """Raised when git cannot be invoked or a read-only query fails."""


class NotARepositoryError(AutoCommitError):
    """Raised when running outside of a git working tree."""


class AuthenticationError(AutoCommitError):
    """Raised when the OpenAI credential is missing or rejected."""


class ApiKeyMissingError(AuthenticationError):
    """Raised when OPENAI_API_KEY is not found."""


class RemoteUnavailableError(AutoCommitError):
    """Raised when the completion service cannot be reached or fails."""


class MalformedResponseError(AutoCommitError):
    """Raised when the model does not return a valid commit tool call."""


class UserDeclinedError(AutoCommitError):
    """Raised when the user answers "no" to the commit confirmation."""


class CommitMutationError(AutoCommitError):
    """Raised when `git commit` exits with a non-zero status."""


class EmptyChangeSetWarning(UserWarning):
    """Issued when there are no staged changes to describe."""
