"""
Session authentication for the API.

Clients send `Authorization: Bearer <session token>`. The token is looked up
in the `sessions` table and must not be expired.
"""

from fastapi import Request
from loguru import logger

from name_combiner.combinations.repository import CombinationRepository


def get_session_token(request: Request) -> str | None:
    header: str = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def authenticate(request: Request, repository: CombinationRepository) -> str | None:
    """Return the authenticated user id, or None"""
    token: str | None = get_session_token(request)
    if not token:
        return None
    user_id: str | None = await repository.get_session_user(token)
    if not user_id:
        logger.info("Rejected unknown or expired session token")
    return user_id
