"""End-to-end tests through the ASGI application.

These exercise routing, dependencies, exception handlers and middleware
together against the in-memory database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from tests.conftest import API, DEFAULT_PASSWORD

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient

    RegisterUser = Callable[..., Awaitable[dict[str, Any]]]


class TestUsersApi:
    @pytest.mark.asyncio
    async def test_register_and_profile(
        self, client: AsyncClient, register_user: RegisterUser
    ) -> None:
        account = await register_user("ada")

        assert account["user"]["username"] == "ada"
        assert "password_hash" not in account["user"]

        response = await client.get(f"{API}/users/profile", headers=account["headers"])
        assert response.status_code == 200
        assert response.json()["email"] == "ada@example.com"

    @pytest.mark.asyncio
    async def test_duplicate_registration(
        self, client: AsyncClient, register_user: RegisterUser
    ) -> None:
        await register_user("ada")

        response = await client.post(
            f"{API}/users/register",
            json={"username": "ada2", "email": "ada@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 409
        body = response.json()
        assert body["type"] == "user-exists"
        assert body["field"] == "email"

    @pytest.mark.asyncio
    async def test_login_with_bad_password(
        self, client: AsyncClient, register_user: RegisterUser
    ) -> None:
        await register_user("ada")

        response = await client.post(
            f"{API}/users/login", json={"email": "ada@example.com", "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["type"] == "invalid-credentials"

    @pytest.mark.asyncio
    async def test_profile_requires_token(self, client: AsyncClient) -> None:
        response = await client.get(f"{API}/users/profile")

        assert response.status_code == 401
        assert response.json()["type"] == "missing-credentials"

    @pytest.mark.asyncio
    async def test_refresh_issues_new_pair(
        self, client: AsyncClient, register_user: RegisterUser
    ) -> None:
        account = await register_user("ada")

        response = await client.post(
            f"{API}/users/refresh", json={"refresh_token": account["tokens"]["refresh_token"]},
        )
        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"

        # access tokens are signed with a different secret
        rejected = await client.post(
            f"{API}/users/refresh", json={"refresh_token": account["tokens"]["access_token"]},
        )
        assert rejected.status_code == 401


class TestProjectsApi:
    @pytest.mark.asyncio
    async def test_crud(self, client: AsyncClient, register_user: RegisterUser) -> None:
        owner = await register_user("ada")
        headers = owner["headers"]

        created = await client.post(
            f"{API}/projects/", json={"name": "Engine", "description": "Analytical"}, headers=headers,
        )
        assert created.status_code == 201
        project = created.json()
        assert project["owner_id"] == owner["user"]["id"]

        fetched = await client.get(f"{API}/projects/{project['id']}")
        assert fetched.json()["name"] == "Engine"

        updated = await client.put(
            f"{API}/projects/{project['id']}", json={"description": "Difference"}, headers=headers,
        )
        assert updated.status_code == 200
        assert updated.json()["name"] == "Engine"
        assert updated.json()["description"] == "Difference"

        deleted = await client.delete(f"{API}/projects/{project['id']}", headers=headers)
        assert deleted.status_code == 204

        missing = await client.get(f"{API}/projects/{project['id']}")
        assert missing.status_code == 404
        assert missing.json()["type"] == "not-found"

    @pytest.mark.asyncio
    async def test_non_owner_cannot_update(
        self, client: AsyncClient, register_user: RegisterUser
    ) -> None:
        owner = await register_user("ada")
        other = await register_user("grace")
        project = (
            await client.post(f"{API}/projects/", json={"name": "Mine"}, headers=owner["headers"])
        ).json()

        response = await client.put(
            f"{API}/projects/{project['id']}", json={"name": "Ours"}, headers=other["headers"],
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_may_update(
        self,
        client: AsyncClient,
        register_user: RegisterUser,
        auth_headers_for: Callable[..., dict[str, str]],
    ) -> None:
        owner = await register_user("ada")
        project = (
            await client.post(f"{API}/projects/", json={"name": "Mine"}, headers=owner["headers"])
        ).json()

        response = await client.put(
            f"{API}/projects/{project['id']}",
            json={"name": "Audited"},
            headers=auth_headers_for(owner["user"]["id"] + 100, role="admin"),
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Audited"

    @pytest.mark.asyncio
    async def test_delete_removes_tasks(
        self, client: AsyncClient, register_user: RegisterUser
    ) -> None:
        owner = await register_user("ada")
        headers = owner["headers"]
        project = (await client.post(f"{API}/projects/", json={"name": "P"}, headers=headers)).json()
        await client.post(f"{API}/tasks/", json={"title": "t", "projectId": project["id"]}, headers=headers)

        await client.delete(f"{API}/projects/{project['id']}", headers=headers)

        remaining = await client.get(f"{API}/tasks/", params={"projectId": project["id"]})
        assert remaining.json() == []

    @pytest.mark.asyncio
    async def test_filter_by_owner(self, client: AsyncClient, register_user: RegisterUser) -> None:
        ada = await register_user("ada")
        grace = await register_user("grace")
        await client.post(f"{API}/projects/", json={"name": "A"}, headers=ada["headers"])
        await client.post(f"{API}/projects/", json={"name": "G"}, headers=grace["headers"])

        response = await client.get(f"{API}/projects/", params={"ownerId": grace["user"]["id"]})

        assert [p["name"] for p in response.json()] == ["G"]


class TestTasksApi:
    @pytest.mark.asyncio
    async def test_filters_use_camel_case_params(
        self, client: AsyncClient, register_user: RegisterUser
    ) -> None:
        ada = await register_user("ada")
        grace = await register_user("grace")
        headers = ada["headers"]
        project = (await client.post(f"{API}/projects/", json={"name": "P"}, headers=headers)).json()
        for title, assignee in (("one", grace["user"]["id"]), ("two", None)):
            response = await client.post(
                f"{API}/tasks/",
                json={"title": title, "projectId": project["id"], "assigneeId": assignee},
                headers=headers,
            )
            assert response.status_code == 201

        response = await client.get(
            f"{API}/tasks/", params={"projectId": project["id"], "assigneeId": grace["user"]["id"]},
        )

        assert [t["title"] for t in response.json()] == ["one"]

    @pytest.mark.asyncio
    async def test_create_in_missing_project(
        self, client: AsyncClient, register_user: RegisterUser
    ) -> None:
        ada = await register_user("ada")

        response = await client.post(
            f"{API}/tasks/", json={"title": "t", "projectId": 404}, headers=ada["headers"],
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_validation_problem_detail(
        self, client: AsyncClient, register_user: RegisterUser
    ) -> None:
        ada = await register_user("ada")

        response = await client.post(f"{API}/tasks/", json={"title": ""}, headers=ada["headers"])

        assert response.status_code == 422
        body = response.json()
        assert body["type"] == "validation-error"
        fields = {error["field"] for error in body["errors"]}
        assert {"body.title", "body.projectId"} <= fields


class TestPlatform:
    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client: AsyncClient) -> None:
        response = await client.get(f"{API}/projects/", headers={"X-Request-ID": "abc-123"})

        assert response.headers["x-request-id"] == "abc-123"
        assert "x-process-time" in response.headers

    @pytest.mark.asyncio
    async def test_request_id_generated(self, client: AsyncClient) -> None:
        response = await client.get(f"{API}/projects/")

        assert response.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_metrics_endpoint(self, client: AsyncClient) -> None:
        await client.get(f"{API}/projects/")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text


class TestGraphQLOverHttp:
    @pytest.mark.asyncio
    async def test_query_and_mutation(
        self, client: AsyncClient, register_user: RegisterUser
    ) -> None:
        ada = await register_user("ada")

        created = await client.post(
            "/graphql/",
            json={
                "query": 'mutation { createProject(input: {name: "Via GraphQL"}) '
                "{ ... on ProjectSuccess { project { id } } } }",
            },
            headers=ada["headers"],
        )
        assert created.status_code == 200
        project_id = created.json()["data"]["createProject"]["project"]["id"]

        response = await client.post(
            "/graphql/",
            json={
                "query": "query($id: Int!) { project(id: $id) { name owner { username } tasks { id } } me { id } }",
                "variables": {"id": project_id},
            },
            headers=ada["headers"],
        )

        assert response.status_code == 200
        assert response.json()["data"] == {
            "project": {"name": "Via GraphQL", "owner": {"username": "ada"}, "tasks": []},
            "me": {"id": ada["user"]["id"]},
        }

    @pytest.mark.asyncio
    async def test_anonymous_me_is_null(self, client: AsyncClient) -> None:
        response = await client.post("/graphql/", json={"query": "{ me { id } }"})

        assert response.json() == {"data": {"me": None}}
