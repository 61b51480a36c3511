from typing import Any

import ollama

from name_combiner.configuration import ConfigValue
from name_combiner.errors import NoTextResponse

from . import Providers
from .provider import LLMProvider


@Providers.register(key="ollama")
class OllamaProvider(LLMProvider):
    """Ollama local LLM provider"""

    def __init__(self, host: str | None = None, model: str | None = None) -> None:
        self.host: str | None = host or ConfigValue(f"llm.{self.key}.host").resolve()
        self.model: str | None = model or ConfigValue(f"llm.{self.key}.model").resolve()
        self.timeout: int = ConfigValue(f"llm.{self.key}.timeout", default=30).resolve()
        self.client: ollama.AsyncClient = ollama.AsyncClient(host=self.host, timeout=self.timeout)

    async def complete(self, prompt: str, roles: dict[str, str] | None = None, **kwargs) -> str:
        messages: list[dict[str, Any]] = self.generate_message_list(prompt, roles)
        response: ollama.ChatResponse = await self.client.chat(
            model=self.model,
            messages=messages,
            options=self.resolve_options(kwargs),
            stream=False,
        )
        content: str | None = response.message.content
        if not content:
            raise NoTextResponse("No text response from Ollama")
        return content

    def get_options_keys(self) -> list[tuple[str, Any]]:
        return [("num_predict", 1024)]
