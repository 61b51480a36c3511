"""
FastAPI router for the name combination service.
"""

import json
from typing import Any, AsyncIterator

import psycopg
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from loguru import logger

from name_combiner.auth import authenticate
from name_combiner.combinations.models import CombinationSet, GeneratedName
from name_combiner.combinations.repository import CombinationRepository
from name_combiner.combinations.service import generate_name_combinations
from name_combiner.configuration import Config, get_config_provider, open_connection, setup_config_store

# pylint: disable=unused-argument


async def get_config_dependency() -> Config:
    if not get_config_provider().is_configured():
        logger.info("Config Store is not configured, setting up...")
        await setup_config_store()
    return get_config_provider().get_config()


async def get_repository(config: Config = Depends(get_config_dependency)) -> AsyncIterator[CombinationRepository]:
    """One connection per request, closed when the response is done"""
    connection: psycopg.AsyncConnection = await open_connection()
    try:
        yield CombinationRepository(connection)
    finally:
        await connection.close()


def unauthorized() -> JSONResponse:
    return JSONResponse({"error": "Unauthorized"}, status_code=401)


def _validate_name(body: dict[str, Any], key: str) -> str | None:
    """Return the trimmed name, or None if it is missing, not a string or blank"""
    value: Any = body.get(key)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def serialize_set(combination_set: CombinationSet) -> dict[str, Any]:
    return combination_set.model_dump(mode="json", by_alias=True)


router = APIRouter()


@router.get("/is_alive")
async def is_alive(config: Config = Depends(get_config_dependency)) -> dict[str, str]:
    """Health check endpoint"""
    return {"status": "alive"}


@router.post("/api/name-combinations")
async def create_name_combinations(request: Request, repository: CombinationRepository = Depends(get_repository)) -> JSONResponse:
    """
    Generate combinations of two names and store them in the user's history.

    Request body: {"name1": "John", "name2": "Jacob"}

    Response:
        {
            "id": 1,
            "name1": "John",
            "name2": "Jacob",
            "createdAt": "2026-01-01T00:00:00Z",
            "results": [{"id": 10, "name": "Jocob", "goodness": 4.2}]
        }

    Error responses:
    - 400: body is not a JSON object, name1/name2 missing or blank
    - 401: no valid session
    - 500: generation or storage failed
    """
    user_id: str | None = await authenticate(request, repository)
    if not user_id:
        return unauthorized()

    try:
        body: Any = json.loads(await request.body())
    except (ValueError, RecursionError):
        return JSONResponse({"error": "Invalid JSON in request body"}, status_code=400)
    if not isinstance(body, dict):
        return JSONResponse({"error": "Invalid JSON in request body"}, status_code=400)

    name1: str | None = _validate_name(body, "name1")
    if name1 is None:
        return JSONResponse({"error": "name1 is required and must be a non-empty string"}, status_code=400)

    name2: str | None = _validate_name(body, "name2")
    if name2 is None:
        return JSONResponse({"error": "name2 is required and must be a non-empty string"}, status_code=400)

    try:
        combinations: list[GeneratedName] = await generate_name_combinations(name1, name2)
        combination_set: CombinationSet = await repository.create_set(user_id, name1, name2, combinations)
        return JSONResponse(serialize_set(combination_set))
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception(f"Error generating name combinations: {e}")
        return JSONResponse({"error": "Failed to generate name combinations. Please try again."}, status_code=500)


@router.get("/api/name-combinations")
async def list_name_combinations(request: Request, repository: CombinationRepository = Depends(get_repository)) -> JSONResponse:
    """Return the user's combination history, newest first"""
    user_id: str | None = await authenticate(request, repository)
    if not user_id:
        return unauthorized()

    try:
        combination_sets: list[CombinationSet] = await repository.list_sets(user_id)
        return JSONResponse([serialize_set(s) for s in combination_sets])
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception(f"Error fetching name combinations: {e}")
        return JSONResponse({"error": "Failed to fetch name combinations"}, status_code=500)
