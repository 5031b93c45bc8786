# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the setup screens service."""

import pytest

from src.domains.class_.service import ClassesNotFoundError, ClassNotFoundError
from src.domains.department.service import DepartmentNotFoundError
from src.domains.section.service import SectionNameExistsError
from src.domains.setup.service import SetupService
from src.infrastructure.database.models import Medium
from src.models.class_ import ClassConfig
from src.models.department import DepartmentConfig
from src.models.section import SectionConfig


@pytest.fixture
def setup_service(db_session):
    """Create setup service bound to the test database."""
    return SetupService(db=db_session)


class TestClassSetup:
    """Tests for the class setup screen."""

    @pytest.mark.asyncio
    async def test_get_classes_includes_inactive(self, setup_service, make_class, make_section):
        """Test every class is listed with section counts."""
        one = await make_class("One")
        await make_class("Two", is_active=False, medium=Medium.ENGLISH)
        await make_section("A", one.id)

        items = await setup_service.get_classes_for_setup()
        english = await setup_service.get_classes_for_setup(Medium.ENGLISH)

        assert [(c.name, c.is_active) for c in items] == [("One", True), ("Two", False)]
        assert items[0].counts.sections == 1
        assert [c.name for c in english] == ["Two"]

    @pytest.mark.asyncio
    async def test_save_class_setup(self, setup_service, make_class):
        """Test save reports the number of entries."""
        one = await make_class("One")
        two = await make_class("Two")

        result = await setup_service.save_class_setup(
            [ClassConfig(id=one.id, is_active=False), ClassConfig(id=two.id, is_active=True)]
        )

        assert result.message == "Class setup saved successfully"
        assert result.updated_count == 2
        items = await setup_service.get_classes_for_setup()
        assert {c.name: c.is_active for c in items} == {"One": False, "Two": True}

    @pytest.mark.asyncio
    async def test_save_class_setup_unknown_id(self, setup_service, unknown_id):
        """Test unknown class ids are rejected."""
        with pytest.raises(ClassesNotFoundError):
            await setup_service.save_class_setup([ClassConfig(id=unknown_id, is_active=True)])

    @pytest.mark.asyncio
    async def test_reset_class_setup(self, setup_service, make_class):
        """Test reset message and count."""
        await make_class("One")
        await make_class("Two")

        result = await setup_service.reset_class_setup()

        assert result.message == "Class setup reset successfully"
        assert result.affected == 2


class TestDepartmentSetup:
    """Tests for the department setup screen."""

    @pytest.mark.asyncio
    async def test_save_and_read_department_setup(
        self, setup_service, make_class, make_department
    ):
        """Test saved states show up on the screen of that class only."""
        nine = await make_class("Nine")
        ten = await make_class("Ten")
        science = await make_department("Science")
        arts = await make_department("Humanities")

        result = await setup_service.save_department_setup(
            nine.id,
            [
                DepartmentConfig(id=science.id, is_active=True),
                DepartmentConfig(id=arts.id, is_active=False),
            ],
        )

        assert result.message == "Department setup saved successfully"
        assert result.updated_count == 2
        view = await setup_service.get_departments_for_setup(nine.id)
        assert view.class_info.name == "Nine"
        assert {d.name: d.is_active for d in view.departments} == {
            "Humanities": False,
            "Science": True,
        }
        other = await setup_service.get_departments_for_setup(ten.id)
        assert all(d.is_active is False for d in other.departments)

    @pytest.mark.asyncio
    async def test_reset_department_setup(
        self, setup_service, make_class, make_department, make_class_department
    ):
        """Test reset switches off every department of the class."""
        nine = await make_class("Nine")
        science = await make_department("Science")
        await make_class_department(nine.id, science.id)

        result = await setup_service.reset_department_setup(nine.id)

        assert result.message == "Department setup reset successfully"
        assert result.affected == 1

    @pytest.mark.asyncio
    async def test_department_setup_unknown_class(self, setup_service, unknown_id):
        """Test the screen of a missing class."""
        with pytest.raises(ClassNotFoundError):
            await setup_service.get_departments_for_setup(unknown_id)


class TestSectionSetup:
    """Tests for the section setup screen."""

    @pytest.mark.asyncio
    async def test_get_sections_view(
        self, setup_service, make_class, make_department, make_section
    ):
        """Test the view carries class, department and the scope's sections."""
        eight = await make_class("Eight")
        science = await make_department("Science")
        await make_section("A", eight.id, science.id)
        await make_section("B", eight.id, science.id, is_active=False)
        await make_section("C", eight.id)

        view = await setup_service.get_sections_for_setup(eight.id, science.id)
        plain = await setup_service.get_sections_for_setup(eight.id)

        assert view.class_info.name == "Eight"
        assert view.department.name == "Science"
        assert [s.name for s in view.sections] == ["A", "B"]
        assert plain.department is None
        assert [s.name for s in plain.sections] == ["C"]

    @pytest.mark.asyncio
    async def test_get_sections_unknown_department(self, setup_service, make_class, unknown_id):
        """Test the screen of a missing department."""
        eight = await make_class("Eight")

        with pytest.raises(DepartmentNotFoundError):
            await setup_service.get_sections_for_setup(eight.id, unknown_id)

    @pytest.mark.asyncio
    async def test_save_section_setup(self, setup_service, make_class):
        """Test new sections are created through the screen."""
        one = await make_class("One")

        result = await setup_service.save_section_setup(
            one.id, None, [SectionConfig(name="A"), SectionConfig(name="B")]
        )

        assert result.message == "Section setup saved successfully"
        assert result.updated_count == 2
        view = await setup_service.get_sections_for_setup(one.id)
        assert [s.name for s in view.sections] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_save_section_setup_duplicate_names(self, setup_service, make_class):
        """Test a repeated name in one batch fails and writes nothing."""
        one = await make_class("One")
        one_id = one.id

        with pytest.raises(SectionNameExistsError):
            await setup_service.save_section_setup(
                one_id, None, [SectionConfig(name="A"), SectionConfig(name="A")]
            )

        view = await setup_service.get_sections_for_setup(one_id)
        assert view.sections == []

    @pytest.mark.asyncio
    async def test_reset_section_setup(self, setup_service, make_class, make_section):
        """Test reset message and count."""
        one = await make_class("One")
        await make_section("A", one.id)
        await make_section("B", one.id)

        result = await setup_service.reset_section_setup(one.id)

        assert result.message == "Section setup reset successfully"
        assert result.affected == 2
