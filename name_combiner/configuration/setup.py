import os

import dotenv
import psycopg
from loguru import logger

from name_combiner.utility import configure_logging, create_db_uri

from .config import Config
from .inject import ConfigStore, get_config_provider

ENV_PREFIX: str = "NAME_COMBINER"

dotenv.load_dotenv(dotenv_path=os.getenv("ENV_FILE", ".env"))


async def setup_config_store(filename: str = "config.yml") -> None:

    config_file: str = os.getenv("CONFIG_FILE", filename)
    store: ConfigStore = ConfigStore.get_instance()

    if store.is_configured():
        return

    store.configure_context(source=config_file, env_filename=os.getenv("ENV_FILE", ".env"), env_prefix=ENV_PREFIX)

    cfg: Config = store.config()
    cfg.update({"runtime:config_file": config_file})

    configure_logging(cfg.get("logging") or {})

    _setup_connection_factory(cfg)

    logger.info(f"Config Store initialized from {config_file}")


def _setup_connection_factory(cfg: Config) -> None:
    db_opts: dict = cfg.get("options:database", mandatory=True)
    dsn: str = create_db_uri(**db_opts)

    async def connection_factory() -> psycopg.AsyncConnection:
        connection: psycopg.AsyncConnection | None = cfg.get("runtime:connection")
        if connection is None or connection.closed:
            logger.info(f"Creating new database connection to {db_opts.get('host')}/{db_opts.get('dbname')}")
            connection = await psycopg.AsyncConnection.connect(dsn, autocommit=True)
            cfg.update({"runtime:connection": connection})
        return connection

    cfg.update(
        {
            "runtime:connection": None,
            "runtime:dsn": dsn,
            "runtime:connection_factory": connection_factory,
        }
    )


async def get_connection() -> psycopg.AsyncConnection:
    """Get the shared database connection, creating it on first use"""
    cfg: Config = get_config_provider().get_config()
    connection_factory = cfg.get("runtime:connection_factory")
    if not connection_factory:
        raise ValueError("Connection factory is not configured")
    return await connection_factory()


async def close_connection() -> None:
    cfg: Config = get_config_provider().get_config()
    connection: psycopg.AsyncConnection | None = cfg.get("runtime:connection")
    if connection is not None:
        await connection.close()
        cfg.update({"runtime:connection": None})
        logger.info("Database connection closed")


async def open_connection() -> psycopg.AsyncConnection:
    """Open a new connection owned by the caller, who must close it.

    The connection is in autocommit mode, each `connection.transaction()`
    block commits on exit.
    """
    cfg: Config = get_config_provider().get_config()
    dsn: str = cfg.get("runtime:dsn", mandatory=True)
    return await psycopg.AsyncConnection.connect(dsn, autocommit=True)
