"""Persistence repositories for collection operations."""

from typedstore.infrastructure.persistence.repositories.document_collection import (
    DocumentCollection,
)

__all__ = ["DocumentCollection"]
