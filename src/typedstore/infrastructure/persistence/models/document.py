"""SQLAlchemy model for the documents table.

Every logical collection shares this one table. The document body is stored
as JSON text; id and revision live in their own columns so revision checks
do not need to parse the body. Deleted documents stay as tombstone rows.
"""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from typedstore.infrastructure.persistence.models.base import Base


class DocumentModel(Base):
    """SQLAlchemy model for the documents table.

    Attributes:
        id: Document ID (``_id``).
        rev: Current revision token (``_rev``), ``<generation>-<hex>``.
        deleted: Whether the latest write was a tombstone.
        doc: JSON body without ``_id``/``_rev``/``_deleted``.
    """

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    rev: Mapped[str] = mapped_column(String(64), nullable=False)
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    doc: Mapped[str] = mapped_column(Text, nullable=False, default="{}")

    def __repr__(self) -> str:
        return f"<DocumentModel(id={self.id}, rev={self.rev}, deleted={self.deleted})>"
