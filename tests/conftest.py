import asyncio
import os
from pathlib import Path
from typing import Any, Generator
from unittest.mock import AsyncMock, MagicMock

import psycopg
import pytest

from name_combiner.configuration import Config, ConfigFactory, ConfigStore, MockConfigProvider, reset_config_provider, setup_config_store

# pylint: disable=unused-argument, redefined-outer-name

TESTS_FOLDER: Path = Path(__file__).parent
TEST_CONFIG_FILE: str = str(TESTS_FOLDER / "config.yml")


def pytest_sessionstart(session) -> None:
    """Hook to run before any tests are executed."""
    os.environ["CONFIG_FILE"] = TEST_CONFIG_FILE
    os.environ["ENV_FILE"] = str(TESTS_FOLDER / ".env")
    asyncio.run(setup_config_store(TEST_CONFIG_FILE))


@pytest.fixture(autouse=True)
def setup_reset_config() -> Generator[None, Any, None]:
    """Reset Config Store and provider before each test"""
    ConfigStore.reset_instance()
    reset_config_provider()
    yield
    ConfigStore.reset_instance()
    reset_config_provider()


def create_connection_mock(**method_returns: Any) -> tuple[AsyncMock, AsyncMock]:
    """
    Create an async psycopg connection mock whose cursor methods return given values.

    Example:
        connection, cursor = create_connection_mock(
            fetchall=[{"id": 1, "name1": "John"}],
            fetchone={"id": 2},
        )
    """
    connection = AsyncMock(spec=psycopg.AsyncConnection)
    cursor = AsyncMock(spec=psycopg.AsyncCursor)

    for method_name, return_value in method_returns.items():
        method = getattr(cursor, method_name)
        if isinstance(return_value, list) and method_name != "fetchall":
            method.side_effect = return_value
        else:
            method.return_value = return_value

    cursor_context = MagicMock()
    cursor_context.__aenter__ = AsyncMock(return_value=cursor)
    cursor_context.__aexit__ = AsyncMock(return_value=None)
    connection.cursor = MagicMock(return_value=cursor_context)

    transaction_context = MagicMock()
    transaction_context.__aenter__ = AsyncMock(return_value=None)
    transaction_context.__aexit__ = AsyncMock(return_value=None)
    connection.transaction = MagicMock(return_value=transaction_context)

    return connection, cursor


class ExtendedMockConfigProvider(MockConfigProvider):
    """MockConfigProvider that can install a connection mock in the runtime config"""

    def create_connection_mock(self, **kwargs) -> AsyncMock:
        connection, cursor = create_connection_mock(**kwargs)

        async def connection_factory() -> AsyncMock:
            return connection

        self.get_config().update({"runtime:connection": connection, "runtime:connection_factory": connection_factory})
        self.cursor_mock = cursor  # pylint: disable=attribute-defined-outside-init
        return connection

    @property
    def connection_mock(self) -> AsyncMock:
        return self.get_config().get("runtime:connection")


@pytest.fixture
def test_config() -> Config:
    """Provide test configuration"""
    factory: ConfigFactory = ConfigFactory()
    return factory.load(source=TEST_CONFIG_FILE, context="default")


@pytest.fixture
def test_provider(test_config: Config) -> ExtendedMockConfigProvider:
    """Provide a config provider with the test configuration"""
    return ExtendedMockConfigProvider(test_config)
