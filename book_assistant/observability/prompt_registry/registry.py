"""
Langfuse prompt registry for versioned prompt management.

Singleton registry that versions LangChain chat templates in Langfuse with
their model configuration, and fetches them back as templates.

Dependencies: langfuse, langchain_core, book_assistant.configs
System role: Prompt version control and retrieval
"""

import logging
import re
from typing import Any

from langchain_core.prompts import ChatPromptTemplate
from langchain_core.prompts.chat import (
    AIMessagePromptTemplate,
    HumanMessagePromptTemplate,
    SystemMessagePromptTemplate,
)
from langfuse import Langfuse

from book_assistant.configs import get_settings
from book_assistant.observability.prompt_registry.models import ModelConfig

logger = logging.getLogger(__name__)

_SINGLE_BRACE_VARIABLE = re.compile(r"(?<!\{)\{([^{}]+)\}(?!\})")


def to_langfuse_variables(content: str) -> str:
    """
    Convert LangChain variable syntax to Langfuse format.

    LangChain uses {variable} while Langfuse uses {{variable}}.
    """
    return _SINGLE_BRACE_VARIABLE.sub(r"{{\1}}", content)


def convert_chat_template(template: ChatPromptTemplate) -> list[dict[str, str]]:
    """
    Convert a ChatPromptTemplate to Langfuse chat messages.

    Args:
        template: LangChain chat template

    Returns:
        list[dict]: [{"role": ..., "content": ...}] with Langfuse variables

    Raises:
        ValueError: If a message has no string template
    """
    messages = []
    for message in template.messages:
        prompt = getattr(message, "prompt", None)
        content = getattr(prompt, "template", None)
        if not isinstance(content, str):
            raise ValueError(f"Unsupported message type: {type(message)}")
        role = _message_role(message)
        messages.append({"role": role, "content": to_langfuse_variables(content)})
    return messages


def _message_role(message: Any) -> str:
    if isinstance(message, SystemMessagePromptTemplate):
        return "system"
    if isinstance(message, HumanMessagePromptTemplate):
        return "user"
    if isinstance(message, AIMessagePromptTemplate):
        return "assistant"
    raise ValueError(f"Unsupported message type: {type(message)}")


class PromptRegistry:
    """
    Singleton registry for Langfuse prompt management.

    Inactive (every call is a no-op returning None) when Langfuse is
    disabled or its keys are not configured.
    """

    _instance: "PromptRegistry | None" = None
    _client: Langfuse | None = None
    _enabled: bool = False

    def __new__(cls) -> "PromptRegistry":
        """Singleton pattern for registry instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self) -> None:
        """Initialize Langfuse client with configuration."""
        obs_settings = get_settings().observability

        if not obs_settings.enable_tracing:
            logger.info("Langfuse disabled, prompt registry inactive")
            self._enabled = False
            return

        if not obs_settings.public_key or not obs_settings.secret_key:
            logger.warning("Langfuse keys not configured, prompt registry inactive")
            self._enabled = False
            return

        self._client = Langfuse(
            public_key=obs_settings.public_key,
            secret_key=obs_settings.secret_key,
            host=obs_settings.host,
        )
        self._enabled = True
        logger.info("Prompt registry initialized: host=%s", obs_settings.host)

    @property
    def is_enabled(self) -> bool:
        """Check if registry is active."""
        return self._enabled

    def register_prompt(
        self,
        name: str,
        template: ChatPromptTemplate,
        config: ModelConfig,
        labels: list[str] | None = None,
    ) -> Any:
        """
        Register a chat prompt, creating a new version if the name exists.

        Args:
            name: Unique prompt identifier
            template: LangChain chat template
            config: Model configuration to store with prompt
            labels: Optional labels (e.g., ["production", "staging"])

        Returns:
            Created Langfuse prompt, or None if disabled
        """
        if not self._enabled or self._client is None:
            logger.debug("Prompt registry disabled, skipping registration: name=%s", name)
            return None

        labels = labels or []
        prompt = self._client.create_prompt(
            name=name,
            type="chat",
            prompt=convert_chat_template(template),
            config=config.to_langfuse_config(),
            labels=labels,
        )
        logger.info(
            "Registered chat prompt: name=%s version=%s labels=%s",
            name, prompt.version, labels,
        )
        return prompt

    def get_langchain_prompt(
        self,
        name: str,
        label: str | None = None,
    ) -> ChatPromptTemplate | None:
        """
        Fetch a prompt from Langfuse as a ChatPromptTemplate.

        Args:
            name: Prompt identifier
            label: Optional label filter

        Returns:
            ChatPromptTemplate, or None if disabled or not found
        """
        if not self._enabled or self._client is None:
            logger.debug("Prompt registry disabled, cannot fetch: name=%s", name)
            return None

        kwargs: dict[str, Any] = {"name": name}
        if label:
            kwargs["label"] = label

        try:
            prompt = self._client.get_prompt(**kwargs)
        except Exception as e:
            logger.warning("Prompt fetch failed: name=%s error=%s", name, type(e).__name__)
            return None
        if prompt is None:
            return None

        template = ChatPromptTemplate.from_messages(prompt.get_langchain_prompt())
        template.metadata = {"langfuse_prompt": prompt}
        logger.debug("Fetched prompt: name=%s version=%s", name, prompt.version)
        return template
