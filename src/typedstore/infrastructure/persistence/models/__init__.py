"""SQLAlchemy models for the typedstore document table."""

from typedstore.infrastructure.persistence.models.base import Base
from typedstore.infrastructure.persistence.models.document import DocumentModel

__all__ = ["Base", "DocumentModel"]
