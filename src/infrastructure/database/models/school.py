# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School structure models.

Hierarchy:
    Class ──< ClassDepartment >── Department
      │                              │
      └──────────< Section >─────────┘ (department optional)
                      │
                      └──< Student

Every level carries its own ``is_active`` flag. ``ClassDepartment`` holds
the per-class activation of a globally defined department; a missing row
means the department is not offered for that class.
"""

import enum

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Medium(str, enum.Enum):
    """Language track of instruction attached to a class."""

    BANGLA = "BANGLA"
    ENGLISH = "ENGLISH"


class Class(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Academic grade (Play, Nursery, One ... Twelve)."""

    __tablename__ = "classes"

    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    medium: Mapped[Medium] = mapped_column(
        Enum(Medium, name="medium", native_enum=False, length=16),
        nullable=False,
        default=Medium.BANGLA,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    sections: Mapped[list["Section"]] = relationship(
        back_populates="class_",
        passive_deletes=True,
        order_by="Section.name",
    )
    class_departments: Mapped[list["ClassDepartment"]] = relationship(
        back_populates="class_",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Class {self.name} ({self.medium.value})>"


class Department(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Subject track (Science, Humanities ...), independent of any class."""

    __tablename__ = "departments"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    sections: Mapped[list["Section"]] = relationship(
        back_populates="department",
        passive_deletes=True,
    )
    class_departments: Mapped[list["ClassDepartment"]] = relationship(
        back_populates="department",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Department {self.name}>"


class ClassDepartment(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Per-class activation of a department."""

    __tablename__ = "class_departments"
    __table_args__ = (
        UniqueConstraint(
            "class_id", "department_id", name="uq_class_departments_class_department"
        ),
    )

    class_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    department_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("departments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    class_: Mapped[Class] = relationship(back_populates="class_departments")
    department: Mapped[Department] = relationship(back_populates="class_departments")


class Section(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Teaching group of a class, optionally scoped to one department."""

    __tablename__ = "sections"
    __table_args__ = (
        UniqueConstraint(
            "class_id",
            "department_id",
            "name",
            name="uq_sections_class_department_name",
        ),
        # NULL department_id is one identity, not "distinct from everything"
        Index(
            "uq_sections_class_name_without_department",
            "class_id",
            "name",
            unique=True,
            postgresql_where=text("department_id IS NULL"),
            sqlite_where=text("department_id IS NULL"),
        ),
    )

    name: Mapped[str] = mapped_column(String(20), nullable=False)
    class_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    department_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("departments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    capacity: Mapped[int] = mapped_column(
        Integer, nullable=False, default=30, server_default=text("30")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    class_: Mapped[Class] = relationship(back_populates="sections")
    department: Mapped[Department | None] = relationship(back_populates="sections")
    students: Mapped[list["Student"]] = relationship(
        back_populates="section",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Section {self.name} class={self.class_id} department={self.department_id}>"


class Student(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Student enrolled in a section.

    Only the fields the activation model depends on are mapped here.
    """

    __tablename__ = "students"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    roll_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    section_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sections.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    section: Mapped[Section] = relationship(back_populates="students")
