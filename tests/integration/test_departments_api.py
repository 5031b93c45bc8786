# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for Departments API endpoints."""

import pytest

pytestmark = pytest.mark.integration

BASE = "/api/v1/departments"


class TestDepartmentsAPI:
    """Tests for the department registry over HTTP."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, client, admin_headers):
        """Test create answers 201 and the department reads back."""
        created = await client.post(
            BASE,
            json={"name": "Science", "description": "Physics and chemistry"},
            headers=admin_headers,
        )
        fetched = await client.get(f"{BASE}/{created.json()['id']}", headers=admin_headers)

        assert created.status_code == 201
        assert fetched.status_code == 200
        assert fetched.json()["_count"] == {"sections": 0}
        assert fetched.json()["description"] == "Physics and chemistry"

    @pytest.mark.asyncio
    async def test_duplicate_name_is_400(self, client, admin_headers, make_department):
        """Test a taken name answers 400."""
        await make_department("Science")

        response = await client.post(BASE, json={"name": "Science"}, headers=admin_headers)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_envelope(self, client, teacher_headers, make_department):
        """Test list answers with data and pagination."""
        await make_department("Science")
        await make_department("Humanities", is_active=False)

        response = await client.get(
            BASE, params={"include_inactive": "false"}, headers=teacher_headers
        )

        body = response.json()
        assert [d["name"] for d in body["data"]] == ["Science"]
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}

    @pytest.mark.asyncio
    async def test_delete_missing_is_404(self, client, admin_headers, unknown_id):
        """Test deleting an unknown department."""
        response = await client.delete(f"{BASE}/{unknown_id}", headers=admin_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_reset(self, client, admin_headers, make_department):
        """Test global reset message."""
        await make_department("Science")

        response = await client.post(f"{BASE}/reset", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "All departments have been reset to inactive status"


class TestClassDepartmentsAPI:
    """Tests for per-class department activation over HTTP."""

    @pytest.mark.asyncio
    async def test_class_setup_upserts(
        self, client, admin_headers, make_class, make_department
    ):
        """Test activating then deactivating Science for Eight keeps one row."""
        eight = await make_class("Eight")
        science = await make_department("Science")
        payload = {
            "class_id": eight.id,
            "departments": [{"department_id": science.id, "is_active": True}],
        }

        first = await client.post(f"{BASE}/class-setup", json=payload, headers=admin_headers)
        payload["departments"][0]["is_active"] = False
        second = await client.post(f"{BASE}/class-setup", json=payload, headers=admin_headers)

        assert first.status_code == 200
        assert first.json()[0]["is_active"] is True
        assert first.json()[0]["department"]["name"] == "Science"
        assert second.json()[0]["id"] == first.json()[0]["id"]
        assert second.json()[0]["is_active"] is False

    @pytest.mark.asyncio
    async def test_class_setup_view_uses_class_key(
        self, client, teacher_headers, make_class, make_department, make_class_department
    ):
        """Test the status view names the class under "class"."""
        nine = await make_class("Nine")
        science = await make_department("Science")
        await make_department("Humanities")
        await make_class_department(nine.id, science.id)

        response = await client.get(f"{BASE}/class-setup/{nine.id}", headers=teacher_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["class"]["name"] == "Nine"
        states = {d["name"]: d["is_active"] for d in body["departments"]}
        assert states == {"Humanities": False, "Science": True}
        assert all("_count" in d for d in body["departments"])

    @pytest.mark.asyncio
    async def test_class_setup_unknown_department(
        self, client, admin_headers, make_class, unknown_id
    ):
        """Test unknown departments answer 400 with their ids."""
        nine = await make_class("Nine")

        response = await client.post(
            f"{BASE}/class-setup",
            json={
                "class_id": nine.id,
                "departments": [{"department_id": unknown_id, "is_active": True}],
            },
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["missing_ids"] == [unknown_id]

    @pytest.mark.asyncio
    async def test_by_class_lists_active_only(
        self, client, teacher_headers, make_class, make_department, make_class_department
    ):
        """Test only departments switched on for the class are listed."""
        nine = await make_class("Nine")
        science = await make_department("Science")
        arts = await make_department("Humanities")
        await make_class_department(nine.id, science.id)
        await make_class_department(nine.id, arts.id, is_active=False)

        response = await client.get(f"{BASE}/by-class/{nine.id}", headers=teacher_headers)

        assert [d["name"] for d in response.json()] == ["Science"]

    @pytest.mark.asyncio
    async def test_class_reset(
        self, client, admin_headers, make_class, make_department, make_class_department
    ):
        """Test reset for one class."""
        nine = await make_class("Nine")
        science = await make_department("Science")
        await make_class_department(nine.id, science.id)

        response = await client.post(f"{BASE}/class-reset/{nine.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "message": "All departments for class Nine have been reset to inactive status",
            "affected": 1,
        }
