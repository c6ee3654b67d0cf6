"""
Database models for the blog (read-only mappings).

The ``posts`` and ``categories`` tables are owned by the publishing side of
the blog; this service only reads them. The mappings are also used to create
the schema in tests.
"""

from datetime import datetime

from sqlalchemy import (
    DateTime,
    ForeignKeyConstraint,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models."""

    metadata = MetaData(naming_convention=naming_convention)


class Categories(Base):
    __tablename__ = "categories"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="categories_pkey"),
        UniqueConstraint("name", name="categories_name_key"),
    )

    id: Mapped[int] = mapped_column(Integer)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    posts: Mapped[list["Posts"]] = relationship("Posts", uselist=True, back_populates="category")


class Posts(Base):
    __tablename__ = "posts"
    __table_args__ = (
        ForeignKeyConstraint(
            ["category_id"],
            ["categories.id"],
            ondelete="SET NULL",
            name="posts_category_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="posts_pkey"),
    )

    id: Mapped[int] = mapped_column(Integer)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    contents: Mapped[str | None] = mapped_column(Text)
    pub_date: Mapped[datetime] = mapped_column(
        DateTime(True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )
    open: Mapped[int] = mapped_column(SmallInteger, nullable=False, server_default=text("0"))
    category_id: Mapped[int | None] = mapped_column(Integer)

    category: Mapped["Categories | None"] = relationship("Categories", back_populates="posts")
