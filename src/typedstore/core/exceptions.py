"""Exception hierarchy for typedstore.

Engine errors (not found, uninitialized collection, rejected validation) and
store errors (revision conflicts, missing documents, bad selectors) share the
``TypedStoreError`` base so callers can catch everything from one place.
"""

from typing import Any


class TypedStoreError(Exception):
    """Base class for all typedstore errors."""

    pass


class DocumentNotFoundError(TypedStoreError):
    """Raised by the ``*_or_fail`` finders when nothing matches."""

    def __init__(self, collection_type: str, selector: dict[str, Any] | None) -> None:
        self.collection_type = collection_type
        self.selector = selector
        super().__init__(f"{collection_type} of criteria {selector!r} does not exist")


class UninitializedCollectionError(TypedStoreError):
    """Raised when a collection does not become ready within the wait window."""

    def __init__(self, collection_type: str) -> None:
        self.collection_type = collection_type
        super().__init__(
            f"Cannot perform operations on uninitialized collection {collection_type}"
        )


class ValidationRejectedError(TypedStoreError):
    """Raised under ON_AND_REJECT when a document fails validation."""

    def __init__(self, violations: list[Any]) -> None:
        self.violations = violations
        summary = "; ".join(str(v) for v in violations)
        super().__init__(f"Document failed validation: {summary}")


class ValidatorUnavailableError(TypedStoreError):
    """Raised when validation is enabled but no validator was provided."""

    pass


class UpsertAbortedError(TypedStoreError):
    """Raised when a before-upsert hook aborts the write."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class StoreError(TypedStoreError):
    """Base class for failures reported by the document store."""

    error = "store_error"

    def __init__(self, message: str, doc_id: str | None = None) -> None:
        self.doc_id = doc_id
        self.reason = message
        super().__init__(message)


class RevisionConflictError(StoreError):
    """Raised when the supplied revision does not match the stored one."""

    error = "conflict"

    def __init__(self, doc_id: str) -> None:
        super().__init__("Document update conflict", doc_id)


class DocumentMissingError(StoreError):
    """Raised when deleting a document the store does not hold."""

    error = "not_found"

    def __init__(self, doc_id: str) -> None:
        super().__init__("missing", doc_id)


class InvalidDocumentError(StoreError):
    """Raised when a document cannot be stored (no id, not serializable)."""

    error = "bad_request"


class InvalidSelectorError(StoreError):
    """Raised when a selector uses an unknown operator or a malformed field."""

    error = "invalid_selector"
