"""SQLAlchemy models for the category tree.

Categories are stored as nested sets: every row knows the id of its
tree root, its level and its left/right bounds, so a whole tree can be
read without recursion.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pim.infrastructure.database import Base


class CategoryModel(Base):
    """Category row.

    Attributes:
        id: Database identifier.
        code: Unique category code.
        parent_id: Parent category id (None for a root).
        root: Id of the tree root (a root's own id).
        lvl: Depth in the tree (0 = root).
        lft: Nested-set left bound.
        rgt: Nested-set right bound.
        created: Creation timestamp.
    """

    __tablename__ = "pim_catalog_category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("pim_catalog_category.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    root: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    lvl: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lft: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rgt: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    parent: Mapped["CategoryModel | None"] = relationship(
        "CategoryModel",
        remote_side="CategoryModel.id",
        back_populates="children",
    )
    children: Mapped[list["CategoryModel"]] = relationship(
        "CategoryModel",
        back_populates="parent",
        cascade="all, delete-orphan",
    )
    translations: Mapped[list["CategoryTranslationModel"]] = relationship(
        "CategoryTranslationModel",
        back_populates="category",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<CategoryModel(id={self.id}, code={self.code})>"

    def to_dict(self) -> dict:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "code": self.code,
            "parent_id": self.parent_id,
            "root": self.root,
            "level": self.lvl,
            "labels": {t.locale: t.label for t in self.translations},
        }


class CategoryTranslationModel(Base):
    """Label of a category in one locale."""

    __tablename__ = "pim_catalog_category_translation"
    __table_args__ = (UniqueConstraint("foreign_key", "locale"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    foreign_key: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("pim_catalog_category.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label: Mapped[str | None] = mapped_column(String(100), nullable=True)
    locale: Mapped[str] = mapped_column(String(20), nullable=False)

    category: Mapped["CategoryModel"] = relationship(
        "CategoryModel", back_populates="translations"
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<CategoryTranslationModel(locale={self.locale}, label={self.label})>"
