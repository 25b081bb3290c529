"""Unit tests for PydanticValidator."""

import pytest

from typedstore.core.exceptions import ValidationRejectedError
from typedstore.domain.entities.document import Document
from typedstore.domain.services.document_validator import (
    DocumentViolation,
    PydanticValidator,
    Validator,
)


class User(Document):
    name: str
    age: int = 0


class TestPydanticValidator:
    def test_valid_document(self) -> None:
        validator = PydanticValidator(User)

        assert validator.validate({"_id": "u1", "name": "Ann", "age": 3}) == []

    def test_missing_field(self) -> None:
        validator = PydanticValidator(User)

        violations = validator.validate({"age": 3})

        assert len(violations) == 1
        assert violations[0].field == "name"
        assert violations[0].code == "missing"

    def test_wrong_type(self) -> None:
        validator = PydanticValidator(User)

        violations = validator.validate({"name": "Ann", "age": "old"})

        assert [v.field for v in violations] == ["age"]

    def test_validate_or_reject_raises(self) -> None:
        validator = PydanticValidator(User)

        with pytest.raises(ValidationRejectedError) as exc_info:
            validator.validate_or_reject({"age": 3})

        assert exc_info.value.violations[0].field == "name"
        assert "name" in str(exc_info.value)

    def test_validate_or_reject_passes(self) -> None:
        PydanticValidator(User).validate_or_reject({"name": "Ann"})

    def test_satisfies_protocol(self) -> None:
        assert isinstance(PydanticValidator(User), Validator)


def test_violation_str() -> None:
    violation = DocumentViolation(field="name", message="Field required", code="missing")

    assert str(violation) == "name: Field required"
