# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Class service."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from src.domains.class_.service import (
    ClassHasStudentsError,
    ClassNameExistsError,
    ClassNotFoundError,
    ClassService,
    ClassesNotFoundError,
)
from src.domains.errors import ConflictError, InvalidReferenceError, NotFoundError
from src.infrastructure.database.models import Class, ClassDepartment, Medium, Section
from src.models.class_ import ClassConfig, ClassCreateRequest, ClassUpdateRequest


@pytest.fixture
def class_service(db_session):
    """Create class service bound to the test database."""
    return ClassService(db=db_session)


class TestClassServiceCreate:
    """Tests for class creation."""

    @pytest.mark.asyncio
    async def test_create_class_success(self, class_service):
        """Test successful class creation."""
        result = await class_service.create_class(
            ClassCreateRequest(name="Eight", medium=Medium.ENGLISH)
        )

        assert result.name == "Eight"
        assert result.medium == Medium.ENGLISH
        assert result.is_active is True
        assert result.sections == []
        assert result.counts.sections == 0

    @pytest.mark.asyncio
    async def test_create_class_defaults_to_bangla(self, class_service):
        """Test medium defaults to BANGLA."""
        result = await class_service.create_class(ClassCreateRequest(name="Play"))

        assert result.medium == Medium.BANGLA

    @pytest.mark.asyncio
    async def test_create_class_duplicate_name(self, class_service, db_session, make_class):
        """Test creation fails when the name is taken and nothing is written."""
        await make_class("Eight")

        with pytest.raises(ClassNameExistsError) as exc_info:
            await class_service.create_class(ClassCreateRequest(name="Eight"))

        assert isinstance(exc_info.value, ConflictError)
        assert "Eight" in exc_info.value.message
        count = await db_session.scalar(select(func.count()).select_from(Class))
        assert count == 1

    @pytest.mark.asyncio
    async def test_create_class_loses_race_for_name(
        self, class_service, db_session, make_class, monkeypatch
    ):
        """Test a duplicate committed after the name check still reads as a conflict."""
        await make_class("Eight")
        monkeypatch.setattr(class_service, "_get_by_name", AsyncMock(return_value=None))

        with pytest.raises(ClassNameExistsError):
            await class_service.create_class(ClassCreateRequest(name="Eight"))

        assert await db_session.scalar(select(func.count()).select_from(Class)) == 1


class TestClassServiceRead:
    """Tests for class listing and lookup."""

    @pytest.mark.asyncio
    async def test_get_class_with_sections_and_counts(
        self, class_service, make_class, make_department, make_section, make_student
    ):
        """Test class detail embeds sections with student counts."""
        class_ = await make_class("Eight")
        science = await make_department("Science")
        section_a = await make_section("A", class_.id, science.id)
        await make_section("B", class_.id)
        await make_student(section_a.id)
        await make_student(section_a.id, first_name="Karim")

        result = await class_service.get_class(class_.id)

        assert result.counts.sections == 2
        assert [s.name for s in result.sections] == ["A", "B"]
        assert result.sections[0].counts.students == 2
        assert result.sections[0].department.name == "Science"
        assert result.sections[1].department is None

    @pytest.mark.asyncio
    async def test_get_class_not_found(self, class_service, unknown_id):
        """Test lookup of a missing class."""
        with pytest.raises(ClassNotFoundError) as exc_info:
            await class_service.get_class(unknown_id)

        assert isinstance(exc_info.value, NotFoundError)
        assert unknown_id in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_list_classes_paginates_by_name(self, class_service, make_class):
        """Test list is ordered by name and paginated."""
        for name in ["Two", "One", "Three"]:
            await make_class(name)

        first_page, total = await class_service.list_classes(page=1, limit=2)
        second_page, _ = await class_service.list_classes(page=2, limit=2)

        assert total == 3
        assert [c.name for c in first_page] == ["One", "Three"]
        assert [c.name for c in second_page] == ["Two"]

    @pytest.mark.asyncio
    async def test_list_classes_excludes_inactive(self, class_service, make_class):
        """Test include_inactive=False filters inactive classes."""
        await make_class("One")
        await make_class("Two", is_active=False)

        classes, total = await class_service.list_classes(include_inactive=False)

        assert total == 1
        assert [c.name for c in classes] == ["One"]

    @pytest.mark.asyncio
    async def test_list_by_medium(self, class_service, make_class):
        """Test medium filter."""
        await make_class("One", medium=Medium.BANGLA)
        await make_class("Two", medium=Medium.ENGLISH)

        english = await class_service.list_by_medium(Medium.ENGLISH)
        everything = await class_service.list_by_medium()

        assert [c.name for c in english] == ["Two"]
        assert len(everything) == 2


class TestClassServiceUpdate:
    """Tests for class updates."""

    @pytest.mark.asyncio
    async def test_update_only_sent_fields(self, class_service, make_class):
        """Test partial update keeps unsent fields."""
        class_ = await make_class("Eight", medium=Medium.ENGLISH)

        result = await class_service.update_class(
            class_.id, ClassUpdateRequest(is_active=False)
        )

        assert result.is_active is False
        assert result.name == "Eight"
        assert result.medium == Medium.ENGLISH

    @pytest.mark.asyncio
    async def test_update_to_taken_name(self, class_service, make_class):
        """Test renaming to another class's name fails."""
        await make_class("Seven")
        eight = await make_class("Eight")

        with pytest.raises(ClassNameExistsError):
            await class_service.update_class(eight.id, ClassUpdateRequest(name="Seven"))

    @pytest.mark.asyncio
    async def test_update_to_own_name(self, class_service, make_class):
        """Test sending the current name is not a conflict."""
        eight = await make_class("Eight")

        result = await class_service.update_class(eight.id, ClassUpdateRequest(name="Eight"))

        assert result.name == "Eight"

    @pytest.mark.asyncio
    async def test_update_not_found(self, class_service, unknown_id):
        """Test update of a missing class."""
        with pytest.raises(ClassNotFoundError):
            await class_service.update_class(unknown_id, ClassUpdateRequest(name="X"))


class TestClassServiceDelete:
    """Tests for class deletion."""

    @pytest.mark.asyncio
    async def test_delete_removes_sections_and_associations(
        self,
        class_service,
        db_session,
        make_class,
        make_department,
        make_class_department,
        make_section,
    ):
        """Test deleting an empty class removes its sections and associations."""
        class_ = await make_class("Nine")
        science = await make_department("Science")
        await make_class_department(class_.id, science.id)
        await make_section("A", class_.id, science.id)

        result = await class_service.delete_class(class_.id)

        assert result.id == class_.id
        assert await db_session.scalar(select(func.count()).select_from(Class)) == 0
        assert await db_session.scalar(select(func.count()).select_from(Section)) == 0
        assert await db_session.scalar(select(func.count()).select_from(ClassDepartment)) == 0

    @pytest.mark.asyncio
    async def test_delete_blocked_by_students(
        self, class_service, db_session, make_class, make_section, make_student
    ):
        """Test class with students cannot be deleted and stays intact."""
        class_ = await make_class("Nine")
        section = await make_section("A", class_.id)
        await make_student(section.id)

        with pytest.raises(ClassHasStudentsError) as exc_info:
            await class_service.delete_class(class_.id)

        assert exc_info.value.student_count == 1
        assert await db_session.scalar(select(func.count()).select_from(Section)) == 1

    @pytest.mark.asyncio
    async def test_delete_not_found(self, class_service, unknown_id):
        """Test deleting a missing class."""
        with pytest.raises(ClassNotFoundError):
            await class_service.delete_class(unknown_id)


class TestClassServiceBulk:
    """Tests for setup, bulk update and reset."""

    @pytest.mark.asyncio
    async def test_setup_applies_each_state(self, class_service, make_class):
        """Test per-class activation states are applied."""
        one = await make_class("One")
        two = await make_class("Two", is_active=False)

        result = await class_service.setup_classes(
            [ClassConfig(id=one.id, is_active=False), ClassConfig(id=two.id, is_active=True)]
        )

        states = {c.name: c.is_active for c in result}
        assert states == {"One": False, "Two": True}

    @pytest.mark.asyncio
    async def test_setup_medium_filters_reply(self, class_service, make_class):
        """Test medium only narrows the returned classes."""
        one = await make_class("One", medium=Medium.BANGLA)
        two = await make_class("Two", medium=Medium.ENGLISH)

        result = await class_service.setup_classes(
            [ClassConfig(id=one.id, is_active=False), ClassConfig(id=two.id, is_active=False)],
            medium=Medium.ENGLISH,
        )

        assert [c.name for c in result] == ["Two"]
        fetched = await class_service.get_class(one.id)
        assert fetched.is_active is False

    @pytest.mark.asyncio
    async def test_bulk_update_with_missing_id_changes_nothing(
        self, class_service, make_class, unknown_id
    ):
        """Test one unknown id aborts the whole batch."""
        one = await make_class("One")
        two = await make_class("Two")

        with pytest.raises(ClassesNotFoundError) as exc_info:
            await class_service.bulk_set_active([one.id, unknown_id, two.id], False)

        assert isinstance(exc_info.value, InvalidReferenceError)
        assert exc_info.value.missing_ids == [unknown_id]
        assert unknown_id in exc_info.value.message
        for class_id in (one.id, two.id):
            assert (await class_service.get_class(class_id)).is_active is True

    @pytest.mark.asyncio
    async def test_bulk_update_success(self, class_service, make_class):
        """Test every listed class gets the new state."""
        one = await make_class("One")
        two = await make_class("Two")

        result = await class_service.bulk_set_active([one.id, two.id], False)

        assert all(c.is_active is False for c in result)
        assert len(result) == 2

    @pytest.mark.asyncio
    async def test_reset_all(self, class_service, make_class):
        """Test reset deactivates every class."""
        await make_class("One")
        await make_class("Two", medium=Medium.ENGLISH)

        result = await class_service.reset_classes()

        assert result.affected == 2
        classes, _ = await class_service.list_classes()
        assert all(c.is_active is False for c in classes)

    @pytest.mark.asyncio
    async def test_reset_by_medium(self, class_service, make_class):
        """Test reset limited to one medium leaves the other untouched."""
        await make_class("One", medium=Medium.BANGLA)
        await make_class("Two", medium=Medium.ENGLISH)

        result = await class_service.reset_classes(Medium.ENGLISH)

        assert result.affected == 1
        assert "ENGLISH" in result.message
        states = {c.name: c.is_active for c in await class_service.list_by_medium()}
        assert states == {"One": True, "Two": False}
