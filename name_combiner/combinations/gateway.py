"""Prompt/response gateway for the text generation service"""

from jinja2 import BaseLoader, Environment, Template
from loguru import logger

from name_combiner.configuration import ConfigValue
from name_combiner.llm.providers import LLMProvider, create_provider

JINJA = Environment(loader=BaseLoader(), autoescape=False, keep_trailing_newline=True)

DEFAULT_PROMPT_TEMPLATE: str = """\
Combine the two names "{{ name1 }}" and "{{ name2 }}" into new names.

Create up to 10 creative combinations, for example by blending syllables,
merging the beginning of one name with the ending of the other, or
interleaving sounds. Rate each combination with a "goodness" score from 0.0
to 5.0 (one decimal) judging how natural, pronounceable and appealing it is.

Respond ONLY with a JSON array and no other text, in this exact format:
[{"name": "<combined name>", "goodness": <score>}]
"""


class NameCombinationGateway:
    """Sends one prompt per name pair and returns the raw reply text.

    The model, token budget and prompt template come from configuration.
    Provider errors are not caught here.
    """

    def __init__(self, provider: LLMProvider | None = None, prompt_template: str | None = None) -> None:
        self.provider: LLMProvider = provider or create_provider()
        self.prompt_template: str = (
            prompt_template or ConfigValue("llm.prompts.name_combinations").resolve() or DEFAULT_PROMPT_TEMPLATE
        )

    def build_prompt(self, name1: str, name2: str) -> str:
        template: Template = JINJA.from_string(self.prompt_template)
        return template.render(name1=name1, name2=name2)

    async def generate(self, name1: str, name2: str) -> str:
        prompt: str = self.build_prompt(name1, name2)
        logger.info(f"Requesting name combinations for '{name1}' + '{name2}' from {self.provider.key}")
        return await self.provider.complete(prompt=prompt)
