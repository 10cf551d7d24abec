import os
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from auto_commit.errors import ConfigurationError


API_KEY_ENV_VAR = "OPENAI_API_KEY"
MODEL_ENV_VAR = "AUTO_COMMIT_MODEL"
TOKEN_LIMIT_ENV_VAR = "AUTO_COMMIT_TOKEN_LIMIT"
TIMEOUT_ENV_VAR = "AUTO_COMMIT_TIMEOUT"

DEFAULT_MODEL = "gpt-4.1-nano"
DEFAULT_TOKEN_LIMIT = 20_000
DEFAULT_TEMPERATURE = 0.0
DEFAULT_MAX_OUTPUT_TOKENS = 2000
DEFAULT_REQUEST_TIMEOUT = 120.0
DEFAULT_MAX_RETRIES = 0

SYSTEM_PROMPT = "You are an experienced programmer who writes great commit messages."

CONTEXT_TOOL_NAME = "get_diff"
CONTEXT_TOOL_DESCRIPTION = "Returns the output of `git diff HEAD` as a string."
CONTEXT_TOOL_CALL_ID = "call_get_diff"

COMMIT_TOOL_NAME = "commit"
COMMIT_TOOL_DESCRIPTION = "Creates a commit with the given title and a description."


def get_model_from_env(get_env: Callable[[str], Optional[str]] = os.getenv) -> str:
    """Return the model named by AUTO_COMMIT_MODEL, or DEFAULT_MODEL when unset."""

    return get_env(MODEL_ENV_VAR) or DEFAULT_MODEL


class AutoCommitConfig(BaseModel):
    """Tunable settings for context budgeting and the completion request."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    token_limit: int = Field(default=DEFAULT_TOKEN_LIMIT, ge=0)
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=DEFAULT_MAX_OUTPUT_TOKENS, gt=0)
    request_timeout: Optional[float] = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)

    @classmethod
    def from_env(
        cls, get_env: Callable[[str], Optional[str]] = os.getenv
    ) -> "AutoCommitConfig":
        """Build a config from AUTO_COMMIT_* environment overrides.

        Raises:
            ConfigurationError: If an override cannot be parsed.
        """
        overrides: dict[str, object] = {"model": get_model_from_env(get_env)}

        token_limit = get_env(TOKEN_LIMIT_ENV_VAR)
        if token_limit:
            overrides["token_limit"] = token_limit

        timeout = get_env(TIMEOUT_ENV_VAR)
        if timeout:
            overrides["request_timeout"] = timeout

        try:
            return cls(**overrides)
        except ValidationError as exc:
            fields = ", ".join(
                str(error["loc"][0]) for error in exc.errors() if error["loc"]
            )
            raise ConfigurationError(
                f"Invalid auto-commit configuration ({fields}). "
                f"Check {TOKEN_LIMIT_ENV_VAR} and {TIMEOUT_ENV_VAR}."
            ) from exc
