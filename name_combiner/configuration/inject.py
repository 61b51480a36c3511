from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Self, TypeVar

from .config import Config, ConfigFactory

T = TypeVar("T")

# pylint: disable=global-statement


class ConfigProvider(ABC):
    """Abstract configuration provider for dependency injection"""

    @abstractmethod
    def get_config(self, context: str | None = None) -> Config:
        """Get configuration for the given context"""

    @abstractmethod
    def is_configured(self, context: str | None = None) -> bool:
        """Check if configuration exists for the given context"""


class SingletonConfigProvider(ConfigProvider):
    """Production config provider backed by the ConfigStore singleton"""

    def get_config(self, context: str | None = None) -> Config:
        return ConfigStore.get_instance().config(context)

    def is_configured(self, context: str | None = None) -> bool:
        return ConfigStore.get_instance().is_configured(context)


class MockConfigProvider(ConfigProvider):
    """Test config provider with controllable configuration"""

    def __init__(self, config: Config, context: str = "default"):
        self._config: Config = config
        self._context: str = context

    def get_config(self, context: str | None = None) -> Config:
        return self._config

    def is_configured(self, context: str | None = None) -> bool:
        return self._config is not None


_current_provider: ConfigProvider = SingletonConfigProvider()
_provider_lock = threading.Lock()


def get_config_provider() -> ConfigProvider:
    return _current_provider


def set_config_provider(provider: ConfigProvider) -> ConfigProvider:
    """Swap the current provider, returning the previous one"""
    global _current_provider
    with _provider_lock:
        old_provider: ConfigProvider = _current_provider
        _current_provider = provider
        return old_provider


def reset_config_provider() -> None:
    global _current_provider
    with _provider_lock:
        _current_provider = SingletonConfigProvider()


@dataclass
class ConfigValue(Generic[T]):
    """A value resolved lazily from the current configuration.

    `key` is a dot path; several comma separated paths are tried in order.
    """

    key: str
    default: T | None = None
    mandatory: bool = False

    def resolve(self, context: str | None = None) -> T:
        config: Config = get_config_provider().get_config(context)
        paths: list[str] = self.key.split(",")
        if self.mandatory and self.default is None and not config.exists(*paths):
            raise ValueError(f"ConfigValue {self.key} is mandatory but missing from config")
        return config.get(*paths, default=self.default)


class ConfigStore:
    """Holds one Config per named context"""

    _instance: "ConfigStore | None" = None
    _lock = threading.Lock()

    def __init__(self):
        if ConfigStore._instance is not None:
            raise RuntimeError("ConfigStore is a singleton. Use get_instance()")
        self.store: dict[str, Config | None] = {"default": None}
        self.context: str = "default"

    @classmethod
    def get_instance(cls) -> Self:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton and provider, used by tests"""
        with cls._lock:
            cls._instance = None
            reset_config_provider()

    def is_configured(self, context: str | None = None) -> bool:
        return isinstance(self.store.get(context or self.context), Config)

    def config(self, context: str | None = None) -> Config:
        if not self.is_configured(context):
            raise ValueError(f"Config context {context or self.context} not properly initialized")
        return self.store[context or self.context]

    def configure_context(
        self,
        *,
        context: str = "default",
        source: Config | str | dict | None = None,
        env_filename: str | None = None,
        env_prefix: str | None = None,
        switch_to_context: bool = True,
    ) -> Config:
        if source is None:
            if isinstance(self.store.get(context), Config):
                return self.store[context]
            raise ValueError(f"Config context {context} undefined, cannot initialize")

        cfg: Config = ConfigFactory().load(source=source, context=context, env_filename=env_filename, env_prefix=env_prefix)

        self.store[context] = cfg
        if switch_to_context:
            self.context = context
        return cfg
