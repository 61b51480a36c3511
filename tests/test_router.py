"""
Unit tests for the API router endpoints.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from name_combiner.api.router import get_repository, router
from name_combiner.combinations.models import CombinationSet, GeneratedName, StoredName
from name_combiner.combinations.repository import CombinationRepository
from name_combiner.configuration import MockConfigProvider
from name_combiner.errors import MalformedReply
from tests.decorators import with_test_config

# pylint: disable=unused-argument, redefined-outer-name

URL = "/api/name-combinations"
AUTH = {"Authorization": "Bearer token-abc"}

SAMPLE_SET = CombinationSet(
    id=1,
    name1="John",
    name2="Jane",
    created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    user_id="user-123",
    results=[StoredName(id=10, name="Jocob", goodness=4.2)],
)


@pytest.fixture
def repository() -> AsyncMock:
    mock_repository = AsyncMock(spec=CombinationRepository)
    mock_repository.get_session_user.return_value = "user-123"
    mock_repository.create_set.return_value = SAMPLE_SET
    mock_repository.list_sets.return_value = [SAMPLE_SET]
    return mock_repository


@pytest.fixture
def app(repository: AsyncMock) -> FastAPI:
    test_app = FastAPI()
    test_app.include_router(router)
    test_app.dependency_overrides[get_repository] = lambda: repository
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def mock_generate():
    with patch("name_combiner.api.router.generate_name_combinations", new_callable=AsyncMock) as mocked:
        mocked.return_value = [GeneratedName(name="Jocob", goodness=4.2)]
        yield mocked


class TestHealthCheck:

    @with_test_config
    def test_is_alive(self, client: TestClient, test_provider: MockConfigProvider):
        response = client.get("/is_alive")
        assert response.status_code == 200
        assert response.json() == {"status": "alive"}


class TestAuthentication:

    @pytest.mark.parametrize("method", ["get", "post"])
    def test_missing_header(self, method, client: TestClient, repository: AsyncMock):
        response = client.request(method, URL, json={"name1": "John", "name2": "Jane"})
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        repository.get_session_user.assert_not_awaited()

    @pytest.mark.parametrize("header", ["Basic abc", "Bearer", "Bearer   ", "token-abc"])
    def test_malformed_header(self, header, client: TestClient):
        response = client.get(URL, headers={"Authorization": header})
        assert response.status_code == 401

    @pytest.mark.parametrize("method", ["get", "post"])
    def test_unknown_session(self, method, client: TestClient, repository: AsyncMock):
        repository.get_session_user.return_value = None
        response = client.request(method, URL, headers=AUTH, json={"name1": "John", "name2": "Jane"})
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        repository.get_session_user.assert_awaited_once_with("token-abc")


class TestPostValidation:

    def test_invalid_json(self, client: TestClient, mock_generate: AsyncMock):
        response = client.post(URL, headers=AUTH | {"Content-Type": "application/json"}, content="not valid json")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON in request body"}
        mock_generate.assert_not_awaited()

    def test_deeply_nested_body(self, client: TestClient, mock_generate: AsyncMock):
        response = client.post(URL, headers=AUTH | {"Content-Type": "application/json"}, content="[" * 100000 + "]" * 100000)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON in request body"}
        mock_generate.assert_not_awaited()

    @pytest.mark.parametrize("body", [[1, 2], "text", None])
    def test_body_not_an_object(self, body, client: TestClient, mock_generate: AsyncMock):
        response = client.post(URL, headers=AUTH, json=body)
        assert response.status_code == 400
        assert "invalid json" in response.json()["error"].lower()

    @pytest.mark.parametrize(
        "body, field",
        [
            ({"name2": "Jane"}, "name1"),
            ({"name1": "", "name2": "Jane"}, "name1"),
            ({"name1": "   ", "name2": "Jane"}, "name1"),
            ({"name1": 42, "name2": "Jane"}, "name1"),
            ({"name1": "John"}, "name2"),
            ({"name1": "John", "name2": ""}, "name2"),
            ({"name1": "John", "name2": "  \t "}, "name2"),
            ({"name1": "John", "name2": ["Jane"]}, "name2"),
        ],
    )
    def test_invalid_names(self, body, field, client: TestClient, mock_generate: AsyncMock):
        response = client.post(URL, headers=AUTH, json=body)
        assert response.status_code == 400
        assert response.json() == {"error": f"{field} is required and must be a non-empty string"}
        mock_generate.assert_not_awaited()


class TestPostSuccess:

    def test_generates_with_trimmed_names(self, client: TestClient, mock_generate: AsyncMock, repository: AsyncMock):
        response = client.post(URL, headers=AUTH, json={"name1": "  John ", "name2": "Jane  "})
        assert response.status_code == 200
        mock_generate.assert_awaited_once_with("John", "Jane")
        repository.create_set.assert_awaited_once_with("user-123", "John", "Jane", [GeneratedName(name="Jocob", goodness=4.2)])

    def test_response_shape(self, client: TestClient, mock_generate: AsyncMock):
        response = client.post(URL, headers=AUTH, json={"name1": "John", "name2": "Jane"})
        body = response.json()
        assert body == {
            "id": 1,
            "name1": "John",
            "name2": "Jane",
            "createdAt": "2026-01-01T00:00:00Z",
            "results": [{"id": 10, "name": "Jocob", "goodness": 4.2}],
        }
        assert sorted(body["results"][0].keys()) == ["goodness", "id", "name"]

    def test_internal_whitespace_and_case_preserved(self, client: TestClient, mock_generate: AsyncMock):
        client.post(URL, headers=AUTH, json={"name1": "Mary  Ann", "name2": "mcDONALD"})
        mock_generate.assert_awaited_once_with("Mary  Ann", "mcDONALD")


class TestPostErrors:

    @pytest.mark.parametrize("error", [MalformedReply(), RuntimeError("API rate limit exceeded")])
    def test_generation_failure(self, error, client: TestClient, mock_generate: AsyncMock, repository: AsyncMock):
        mock_generate.side_effect = error
        response = client.post(URL, headers=AUTH, json={"name1": "John", "name2": "Jane"})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate name combinations. Please try again."}
        repository.create_set.assert_not_awaited()

    def test_storage_failure(self, client: TestClient, mock_generate: AsyncMock, repository: AsyncMock):
        repository.create_set.side_effect = RuntimeError("database unavailable")
        response = client.post(URL, headers=AUTH, json={"name1": "John", "name2": "Jane"})
        assert response.status_code == 500
        assert "failed to generate" in response.json()["error"].lower()


class TestGetHistory:

    def test_returns_users_history(self, client: TestClient, repository: AsyncMock):
        response = client.get(URL, headers=AUTH)
        assert response.status_code == 200
        body = response.json()
        assert isinstance(body, list)
        assert len(body) == 1
        assert body[0] == {
            "id": 1,
            "name1": "John",
            "name2": "Jane",
            "createdAt": "2026-01-01T00:00:00Z",
            "results": [{"id": 10, "name": "Jocob", "goodness": 4.2}],
        }
        repository.list_sets.assert_awaited_once_with("user-123")

    def test_empty_history(self, client: TestClient, repository: AsyncMock):
        repository.list_sets.return_value = []
        response = client.get(URL, headers=AUTH)
        assert response.status_code == 200
        assert response.json() == []

    def test_failure(self, client: TestClient, repository: AsyncMock):
        repository.list_sets.side_effect = RuntimeError("database unavailable")
        response = client.get(URL, headers=AUTH)
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch name combinations"}


class TestRepositoryDependency:

    @pytest.mark.asyncio
    @with_test_config
    async def test_connection_per_request(self, test_provider: MockConfigProvider):
        connections = [AsyncMock(name="first"), AsyncMock(name="second")]
        with patch("name_combiner.api.router.open_connection", new_callable=AsyncMock, side_effect=connections):
            first = get_repository(test_provider.get_config())
            second = get_repository(test_provider.get_config())
            first_repository = await anext(first)
            second_repository = await anext(second)

            assert first_repository.connection is connections[0]
            assert second_repository.connection is connections[1]
            connections[0].close.assert_not_awaited()

            with pytest.raises(StopAsyncIteration):
                await anext(first)
            with pytest.raises(StopAsyncIteration):
                await anext(second)

        connections[0].close.assert_awaited_once()
        connections[1].close.assert_awaited_once()

    @pytest.mark.asyncio
    @with_test_config
    async def test_connection_closed_on_error(self, test_provider: MockConfigProvider):
        connection = AsyncMock()
        with patch("name_combiner.api.router.open_connection", new_callable=AsyncMock, return_value=connection):
            dependency = get_repository(test_provider.get_config())
            await anext(dependency)
            with pytest.raises(RuntimeError):
                await dependency.athrow(RuntimeError("request failed"))
        connection.close.assert_awaited_once()
