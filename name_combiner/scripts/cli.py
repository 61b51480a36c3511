#!/usr/bin/env python3
"""
Command line tools for the name combination service.

Usage:
    python -m name_combiner.scripts.cli init-db [--config-file config.yml]
    python -m name_combiner.scripts.cli generate NAME1 NAME2 [--config-file config.yml]
"""

import asyncio
import json
import sys

import click
import psycopg
from loguru import logger

from name_combiner.combinations.models import GeneratedName
from name_combiner.combinations.service import generate_name_combinations
from name_combiner.configuration import close_connection, get_connection, setup_config_store
from name_combiner.errors import NameCombinerError
from name_combiner.utility import load_resource_text


async def apply_schema(config_file: str) -> None:
    await setup_config_store(config_file)
    connection: psycopg.AsyncConnection = await get_connection()
    try:
        async with connection.transaction():
            await connection.execute(load_resource_text("schema.sql"))
    finally:
        await close_connection()


async def generate_combinations(config_file: str, name1: str, name2: str) -> list[GeneratedName]:
    await setup_config_store(config_file)
    return await generate_name_combinations(name1, name2)


@click.group()
def cli() -> None:
    """Name combination service tools"""


@cli.command("init-db")
@click.option("--config-file", default="config.yml", show_default=True, help="YAML configuration file")
def init_db(config_file: str) -> None:
    """Create the database tables if they do not exist"""
    asyncio.run(apply_schema(config_file))
    logger.info("Database schema applied")


@cli.command("generate")
@click.argument("name1", type=str)
@click.argument("name2", type=str)
@click.option("--config-file", default="config.yml", show_default=True, help="YAML configuration file")
def generate(name1: str, name2: str, config_file: str) -> None:
    """Generate combinations of NAME1 and NAME2 and print them as JSON"""
    if not name1.strip() or not name2.strip():
        raise click.BadParameter("names must be non-empty")

    try:
        results: list[GeneratedName] = asyncio.run(generate_combinations(config_file, name1.strip(), name2.strip()))
    except NameCombinerError as e:
        logger.error(f"Generation failed: {e}")
        sys.exit(1)

    click.echo(json.dumps([r.model_dump() for r in results], indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()  # pylint: disable=no-value-for-parameter
