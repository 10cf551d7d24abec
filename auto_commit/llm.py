#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Module for requesting structured commit proposals from OpenAI's chat models."""

import logging
import os
from typing import Any, Callable, List, Optional, Union

import openai
from pydantic import ValidationError
from langchain_openai import ChatOpenAI
from langchain_core.runnables import Runnable
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, SystemMessage, ToolMessage

from auto_commit.config import (
    API_KEY_ENV_VAR,
    COMMIT_TOOL_DESCRIPTION,
    COMMIT_TOOL_NAME,
    CONTEXT_TOOL_CALL_ID,
    CONTEXT_TOOL_DESCRIPTION,
    CONTEXT_TOOL_NAME,
    SYSTEM_PROMPT,
    AutoCommitConfig,
)
from auto_commit.errors import (
    ApiKeyMissingError,
    AuthenticationError,
    MalformedResponseError,
    RemoteUnavailableError,
)
from auto_commit.schemas import CommitProposal, ToolContract
from auto_commit.settings import auto_commit_logger


class ChatAutoCommit:
    """Obtain exactly one commit proposal from a chat model.

    The conversation pretends the model already asked for the staged diff
    through a ``get_diff`` tool and received it; the request then forces the
    model to answer by calling the ``commit`` tool, whose parameters are the
    ``CommitProposal`` schema. The reply is therefore a tool call with JSON
    arguments rather than prose, and anything else is rejected.

    Attributes:
        config (AutoCommitConfig): Model name and generation parameters.
        model (str): The OpenAI model name to use.
        tools (List[ToolContract]): Tools declared to the model.
        llm (BaseChatModel): The language model instance.
        tool_llm (Runnable): The model bound to the tools with the commit
            tool forced.
    """

    # --- Initialization ---
    def __init__(
        self,
        config: Optional[AutoCommitConfig] = None,
        llm: Optional[Union[ChatOpenAI, BaseChatModel]] = None,
        tool_llm: Optional[Runnable] = None,
        get_env: Callable[[str], Optional[str]] = os.getenv,
        validate_api_key: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize ChatAutoCommit with configuration and dependencies.

        Args:
            config: Model name and generation parameters.
            llm: Pre-configured language model instance.
            tool_llm: Pre-configured runnable with the tools already bound.
            get_env: Function to retrieve environment variables.
            validate_api_key: Whether to validate the API key during
                initialization.
            logger: Logger override.

        Raises:
            ApiKeyMissingError: If OPENAI_API_KEY is not found and validation
                is enabled.
        """
        self._logger = logger or auto_commit_logger(__name__)

        self.config = config or AutoCommitConfig()
        self.model = self.config.model
        self._get_env = get_env
        self._api_key: Optional[str] = None

        self._logger.debug("Initializing ChatAutoCommit with model: %s", self.model)

        if validate_api_key:
            self._api_key = self._validate_api_key()

        self.tools = self._build_tool_contracts()

        # Use injected dependencies or create defaults
        self.llm = llm or self._build_model()
        self.tool_llm = tool_llm or self._build_tool_llm()

    # --- Public methods ---
    def invoke(self, context: str) -> CommitProposal:
        """Request a commit proposal for the given diff context.

        Args:
            context: Bounded diff context.

        Returns:
            The validated CommitProposal.

        Raises:
            AuthenticationError: If the service rejects the credential.
            RemoteUnavailableError: If the service cannot be reached or fails.
            MalformedResponseError: If the reply is not a valid commit call.
        """
        self._logger.debug("Starting commit proposal request")
        self._logger.debug("Context length: %d characters", len(context))

        messages = self._build_messages(context)
        response = self._request(messages)
        proposal = self._extract_proposal(response)

        self._logger.debug("Received commit proposal: %s", proposal.title)
        return proposal

    # --- Private methods ---
    def _request(self, messages: List[BaseMessage]) -> Any:
        """Send the conversation and translate SDK failures.

        Args:
            messages: Conversation built by _build_messages.

        Returns:
            The chat model's reply.

        Raises:
            AuthenticationError: On 401/403 responses.
            RemoteUnavailableError: On any other OpenAI API failure.
        """
        self._logger.debug("Sending %d messages to %s", len(messages), self.model)

        try:
            return self.tool_llm.invoke(messages)
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            self._logger.debug("Credential rejected", exc_info=True)
            raise AuthenticationError(
                f"OpenAI rejected the API key. Check {API_KEY_ENV_VAR}."
            ) from exc
        except openai.APIError as exc:
            self._logger.debug("Completion request failed", exc_info=True)
            raise RemoteUnavailableError(
                f"Couldn't complete the request to {self.model}: {_first_line(exc)}"
            ) from exc

    def _extract_proposal(self, response: Any) -> CommitProposal:
        """Find the commit tool call in the reply and validate its arguments.

        Args:
            response: Chat model reply, normally an AIMessage.

        Returns:
            The validated CommitProposal.

        Raises:
            MalformedResponseError: If there is no commit call, its arguments
                are not JSON, or they do not match CommitProposal.
        """
        for call in getattr(response, "tool_calls", None) or []:
            if call.get("name") != COMMIT_TOOL_NAME:
                continue

            try:
                return CommitProposal.model_validate(call.get("args"))
            except ValidationError as exc:
                self._logger.debug("Invalid commit arguments: %s", call.get("args"))
                raise MalformedResponseError(
                    "Couldn't parse model response: "
                    f"{_summarize_validation_error(exc)}"
                ) from exc

        for call in getattr(response, "invalid_tool_calls", None) or []:
            if call.get("name") == COMMIT_TOOL_NAME:
                self._logger.debug("Unparseable commit arguments: %s", call.get("args"))
                raise MalformedResponseError(
                    "Couldn't parse model response: the commit arguments are not valid JSON."
                )

        raise MalformedResponseError(
            "Couldn't parse model response: the model did not call the commit tool."
        )

    def _build_model(self) -> ChatOpenAI:
        """Build ChatOpenAI model instance.

        Returns:
            Configured ChatOpenAI instance.
        """
        self._logger.debug("Building ChatOpenAI model with name: %s", self.model)

        kwargs: dict[str, Any] = {
            "model": self.model,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_output_tokens,
            "timeout": self.config.request_timeout,
            "max_retries": self.config.max_retries,
        }
        if self._api_key:
            kwargs["api_key"] = self._api_key

        llm = ChatOpenAI(**kwargs)
        self._logger.debug(
            "Using LLM: %s with temperature: %.1f",
            llm.model_name,
            self.config.temperature,
        )
        return llm

    def _build_tool_llm(self) -> Runnable:
        """Bind the declared tools and force the commit tool.

        Returns:
            Runnable that always answers with a commit tool call.
        """
        self._logger.debug(
            "Binding tools %s, forcing %s",
            [tool.name for tool in self.tools],
            COMMIT_TOOL_NAME,
        )

        return self.llm.bind_tools(
            [tool.to_openai_tool() for tool in self.tools],
            tool_choice=COMMIT_TOOL_NAME,
        )

    def _validate_api_key(self) -> str:
        """Validate that OPENAI_API_KEY is available.

        Returns:
            The API key.

        Raises:
            ApiKeyMissingError: If OPENAI_API_KEY is not found.
        """
        self._logger.debug("Validating %s", API_KEY_ENV_VAR)

        api_key = self._get_env(API_KEY_ENV_VAR)
        if not api_key:
            error_msg = f"Please set the {API_KEY_ENV_VAR} environment variable."
            self._logger.debug(error_msg)
            raise ApiKeyMissingError(error_msg)

        self._logger.debug("%s found", API_KEY_ENV_VAR)
        return api_key

    # --- Internal helpers ---
    @staticmethod
    def _build_tool_contracts() -> List[ToolContract]:
        return [
            ToolContract(name=CONTEXT_TOOL_NAME, description=CONTEXT_TOOL_DESCRIPTION),
            ToolContract.for_model(
                COMMIT_TOOL_NAME, COMMIT_TOOL_DESCRIPTION, CommitProposal
            ),
        ]

    @staticmethod
    def _build_messages(
        context: str, system_prompt: str = SYSTEM_PROMPT
    ) -> List[BaseMessage]:
        """Build the three-message conversation for a diff context.

        Args:
            context: Bounded diff context.
            system_prompt: System prompt for the LLM.

        Returns:
            System prompt, a get_diff call and its result.
        """
        return [
            SystemMessage(content=system_prompt),
            AIMessage(
                content="",
                tool_calls=[
                    {
                        "name": CONTEXT_TOOL_NAME,
                        "args": {},
                        "id": CONTEXT_TOOL_CALL_ID,
                        "type": "tool_call",
                    }
                ],
            ),
            ToolMessage(content=context, tool_call_id=CONTEXT_TOOL_CALL_ID),
        ]

    # --- Dunder methods ---
    def __repr__(self) -> str:
        """Return a machine-readable representation of ChatAutoCommit."""
        return (
            f"{self.__class__.__name__}(model={self.model!r}, "
            f"temperature={self.config.temperature}, "
            f"max_output_tokens={self.config.max_output_tokens})"
        )

    def __str__(self) -> str:
        """Return a human-readable description of ChatAutoCommit."""
        return f"ChatAutoCommit using {self.model}"


def _first_line(exc: BaseException) -> str:
    text = str(exc).strip()
    return text.splitlines()[0] if text else exc.__class__.__name__


def _summarize_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
