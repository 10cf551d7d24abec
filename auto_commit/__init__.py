"""Generate commit messages for staged changes with a forced OpenAI tool call."""

__version__ = "0.3.0"
