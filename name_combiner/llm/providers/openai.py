from typing import Any

from openai import AsyncOpenAI
from openai.types.chat.chat_completion import ChatCompletion

from name_combiner.configuration import ConfigValue
from name_combiner.errors import NoTextResponse

from . import Providers
from .provider import LLMProvider


@Providers.register(key="openai")
class OpenAIProvider(LLMProvider):
    """OpenAI API provider"""

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:

        api_key = api_key or ConfigValue(f"llm.{self.key}.api_key").resolve() or None
        self.model: str = model or ConfigValue(f"llm.{self.key}.model", default="gpt-4o-mini").resolve()

        self.client = AsyncOpenAI(api_key=api_key)

    async def complete(self, prompt: str, roles: dict[str, str] | None = None, **kwargs) -> str:
        messages: list[dict[str, Any]] = self.generate_message_list(prompt, roles)
        response: ChatCompletion = await self.client.chat.completions.create(
            model=self.model, messages=messages, **self.resolve_options(kwargs)
        )  # type: ignore
        if not response.choices or not response.choices[0].message.content:
            raise NoTextResponse("No text response from OpenAI")
        return response.choices[0].message.content

    def get_options_keys(self) -> list[tuple[str, Any]]:
        return [("max_tokens", 1024)]
