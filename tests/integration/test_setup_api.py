# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the setup screen endpoints."""

import pytest

pytestmark = pytest.mark.integration

BASE = "/api/v1/setup"


class TestSetupAPI:
    """Tests for the three setup screens over HTTP."""

    @pytest.mark.asyncio
    async def test_class_screen(self, client, admin_headers, make_class):
        """Test the class screen lists, saves and resets."""
        one = await make_class("One")
        await make_class("Two", is_active=False)

        listed = await client.get(f"{BASE}/classes", headers=admin_headers)
        saved = await client.post(
            f"{BASE}/classes/save",
            json={"classes": [{"id": one.id, "is_active": False}]},
            headers=admin_headers,
        )
        reset = await client.post(f"{BASE}/classes/reset", headers=admin_headers)

        assert [(c["name"], c["is_active"]) for c in listed.json()] == [
            ("One", True),
            ("Two", False),
        ]
        assert listed.json()[0]["_count"] == {"sections": 0}
        assert saved.json() == {"message": "Class setup saved successfully", "updated_count": 1}
        assert reset.json() == {"message": "Class setup reset successfully", "affected": 2}

    @pytest.mark.asyncio
    async def test_department_screen(self, client, admin_headers, make_class, make_department):
        """Test the department screen of one class."""
        nine = await make_class("Nine")
        science = await make_department("Science")

        saved = await client.post(
            f"{BASE}/departments/save",
            json={"class_id": nine.id, "departments": [{"id": science.id, "is_active": True}]},
            headers=admin_headers,
        )
        view = await client.get(
            f"{BASE}/departments", params={"class_id": nine.id}, headers=admin_headers
        )
        reset = await client.post(f"{BASE}/departments/reset/{nine.id}", headers=admin_headers)

        assert saved.json() == {
            "message": "Department setup saved successfully",
            "updated_count": 1,
        }
        assert view.json()["class"]["name"] == "Nine"
        assert view.json()["departments"][0]["is_active"] is True
        assert reset.json() == {"message": "Department setup reset successfully", "affected": 1}

    @pytest.mark.asyncio
    async def test_department_screen_requires_class(self, client, admin_headers):
        """Test class_id is a required query parameter."""
        response = await client.get(f"{BASE}/departments", headers=admin_headers)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_section_screen(self, client, admin_headers, make_class, make_department):
        """Test the section screen of one (class, department) scope."""
        eight = await make_class("Eight")
        science = await make_department("Science")

        saved = await client.post(
            f"{BASE}/sections/save",
            json={
                "class_id": eight.id,
                "department_id": science.id,
                "sections": [{"name": "A"}, {"name": "B"}],
            },
            headers=admin_headers,
        )
        view = await client.get(
            f"{BASE}/sections",
            params={"class_id": eight.id, "department_id": science.id},
            headers=admin_headers,
        )
        reset = await client.post(
            f"{BASE}/sections/reset",
            json={"class_id": eight.id, "department_id": science.id},
            headers=admin_headers,
        )

        assert saved.json() == {"message": "Section setup saved successfully", "updated_count": 2}
        body = view.json()
        assert body["class"]["name"] == "Eight"
        assert body["department"]["name"] == "Science"
        assert [s["name"] for s in body["sections"]] == ["A", "B"]
        assert reset.json() == {"message": "Section setup reset successfully", "affected": 2}

    @pytest.mark.asyncio
    async def test_section_screen_duplicate_batch_is_400(self, client, admin_headers, make_class):
        """Test a repeated name in one save answers 400."""
        one = await make_class("One")

        response = await client.post(
            f"{BASE}/sections/save",
            json={"class_id": one.id, "sections": [{"name": "A"}, {"name": "A"}]},
            headers=admin_headers,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_teacher_cannot_save(self, client, teacher_headers, make_class):
        """Test setup saves require an admin."""
        one = await make_class("One")

        response = await client.post(
            f"{BASE}/classes/save",
            json={"classes": [{"id": one.id, "is_active": False}]},
            headers=teacher_headers,
        )

        assert response.status_code == 403
