from loguru import logger

from .gateway import NameCombinationGateway
from .models import GeneratedName
from .normalizer import parse_name_combinations


async def generate_name_combinations(
    name1: str, name2: str, gateway: NameCombinationGateway | None = None
) -> list[GeneratedName]:
    """Generate scored combinations of two trimmed, non-empty names.

    Raises NoTextResponse or MalformedReply; provider errors propagate unchanged.
    """
    gateway = gateway or NameCombinationGateway()
    raw_text: str = await gateway.generate(name1, name2)
    results: list[GeneratedName] = parse_name_combinations(raw_text)
    logger.info(f"Generated {len(results)} name combinations for '{name1}' + '{name2}'")
    return results
