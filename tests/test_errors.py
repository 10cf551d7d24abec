import pytest

from auto_commit.errors import (
    ApiKeyMissingError,
    AuthenticationError,
    AutoCommitError,
    CommitMutationError,
    ConfigurationError,
    EmptyChangeSetWarning,
    MalformedResponseError,
    NotARepositoryError,
    RemoteUnavailableError,
    RepositoryAccessError,
    UserDeclinedError,
)


@pytest.mark.parametrize(
    "error",
    [
        ConfigurationError,
        RepositoryAccessError,
        NotARepositoryError,
        AuthenticationError,
        RemoteUnavailableError,
        MalformedResponseError,
        UserDeclinedError,
        CommitMutationError,
    ],
)
def test_fatal_errors_share_base_exception(error):
    """Every fatal condition is an AutoCommitError."""

    assert issubclass(error, AutoCommitError)
    assert issubclass(AutoCommitError, Exception)


def test_missing_key_is_an_authentication_error():
    assert issubclass(ApiKeyMissingError, AuthenticationError)


def test_empty_change_set_is_a_warning_not_an_error():
    assert issubclass(EmptyChangeSetWarning, UserWarning)
    assert not issubclass(EmptyChangeSetWarning, AutoCommitError)
