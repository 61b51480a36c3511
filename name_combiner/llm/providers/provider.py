"""
LLM client abstraction supporting multiple providers.

A provider sends one prompt and returns the text of the reply, nothing more.
It raises NoTextResponse when the reply carries no text and lets any
SDK/transport error propagate untouched. There are no retries.
"""

from abc import ABC, abstractmethod
from typing import Any

from name_combiner.configuration import ConfigValue
from name_combiner.utility import Registry


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    _registry_key: str = "undefined"

    @property
    def key(self) -> str:
        return getattr(self, "_registry_key", "undefined")

    @abstractmethod
    async def complete(self, prompt: str, roles: dict[str, str] | None = None, **kwargs) -> str:
        """Send `prompt` as a user message and return the reply text"""

    @abstractmethod
    def get_options_keys(self) -> list[tuple[str, Any]]:
        """Return a list of supported option keys and their default values"""

    def resolve_options(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        """Explicit options win over keyword arguments, which win over config and defaults"""
        opts: dict[str, Any] = dict(kwargs.get("options") or {})
        for k, default in self.get_options_keys():
            if k in opts:
                continue
            if k in kwargs:
                opts[k] = kwargs[k]
                continue
            opts[k] = ConfigValue(f"llm.{self.key}.options.{k},llm.options.{k}", default=default).resolve()
        return opts

    def generate_message_list(self, prompt: str, roles: dict[str, str] | None = None) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = [{"role": k, "content": v} for k, v in (roles or {}).items() if k != "user"]
        messages.append({"role": "user", "content": prompt})
        return messages


class ProviderRegistry(Registry):

    items: dict[str, type[LLMProvider]] = {}
