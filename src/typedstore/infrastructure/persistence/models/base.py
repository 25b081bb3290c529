"""Declarative base for the document store tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for typedstore SQLAlchemy models."""

    pass
