from typing import Any

from anthropic import AsyncAnthropic
from anthropic.types import Message
from loguru import logger

from name_combiner.configuration import ConfigValue
from name_combiner.errors import NoTextResponse

from . import Providers
from .provider import LLMProvider

DEFAULT_MODEL: str = "claude-sonnet-4-20250514"


@Providers.register(key="anthropic")
class AnthropicProvider(LLMProvider):
    """Anthropic Claude Messages API provider"""

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        api_key = api_key or ConfigValue(f"llm.{self.key}.api_key").resolve() or None
        self.model: str = model or ConfigValue(f"llm.{self.key}.model", default=DEFAULT_MODEL).resolve()
        self.client: AsyncAnthropic = AsyncAnthropic(api_key=api_key)

    async def complete(self, prompt: str, roles: dict[str, str] | None = None, **kwargs) -> str:
        args: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            **self.resolve_options(kwargs),
        }
        # Claude takes the system prompt as a parameter, not as a message
        if roles and roles.get("system"):
            args["system"] = roles["system"]

        response: Message = await self.client.messages.create(**args)

        for block in response.content:
            if block.type == "text":
                return block.text

        logger.warning(f"Claude reply held no text block ({len(response.content)} blocks)")
        raise NoTextResponse("No text response from Claude")

    def get_options_keys(self) -> list[tuple[str, Any]]:
        return [("max_tokens", 1024)]
