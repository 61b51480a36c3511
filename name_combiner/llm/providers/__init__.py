import importlib
import pkgutil
from pathlib import Path

from loguru import logger

from name_combiner.configuration import ConfigValue

from .provider import LLMProvider, ProviderRegistry

Providers: ProviderRegistry = ProviderRegistry()

package_dir = Path(__file__).parent

# Import every provider module so that each registers itself
for module_info in pkgutil.iter_modules([str(package_dir)]):
    if module_info.name not in ["__init__", "provider"]:
        try:
            importlib.import_module(f".{module_info.name}", package=__name__)
        except ImportError as e:
            logger.warning(f"Could not import provider module {module_info.name}: {e}")


def create_provider(key: str | None = None) -> LLMProvider:
    """Instantiate the provider registered under `key`, or the configured one"""
    key = key or ConfigValue("llm.provider", default="anthropic").resolve()
    return Providers.get(key)()
