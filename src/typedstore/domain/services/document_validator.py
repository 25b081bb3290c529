"""Document validation capability.

Collections validate documents through an injected ``Validator`` before a
write. ``PydanticValidator`` checks documents against a pydantic model,
typically a ``Document`` subclass.
"""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError

from typedstore.core.exceptions import ValidationRejectedError


@dataclass
class DocumentViolation:
    """A single document validation error."""

    field: str
    message: str
    code: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@runtime_checkable
class Validator(Protocol):
    """Validation engine used by collections."""

    def validate(self, document: dict[str, Any]) -> list[DocumentViolation]:
        ...

    def validate_or_reject(self, document: dict[str, Any]) -> None:
        ...


class PydanticValidator:
    """Validate documents against a pydantic model.

    Example:
        class User(Document):
            name: str

        validator = PydanticValidator(User)
        validator.validate({"age": 3})
        # [DocumentViolation(field="name", message="Field required", code="missing")]
    """

    def __init__(self, model: type[BaseModel]) -> None:
        self.model = model

    def validate(self, document: dict[str, Any]) -> list[DocumentViolation]:
        try:
            self.model.model_validate(document)
        except ValidationError as e:
            return [
                DocumentViolation(
                    field=".".join(str(part) for part in error["loc"]) or "__root__",
                    message=error["msg"],
                    code=error["type"],
                )
                for error in e.errors()
            ]
        return []

    def validate_or_reject(self, document: dict[str, Any]) -> None:
        violations = self.validate(document)
        if violations:
            raise ValidationRejectedError(violations)
