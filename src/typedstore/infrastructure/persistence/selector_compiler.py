"""SQL compiler for document selectors.

Compiles Mongo-style selectors to SQLite WHERE clause fragments over the
JSON body of the documents table, with parameterized values. Field paths are
rendered as literal ``json_extract`` expressions so that queries match the
expression indexes created for the same fields.
"""

import json
import re
from typing import Any, Sequence, Union

from typedstore.core.exceptions import InvalidSelectorError
from typedstore.domain.entities.document import (
    COLLECTION_TYPE_FIELD,
    ID_FIELD,
    REV_FIELD,
    TIMESTAMP_FIELD,
)

# Dotted paths of plain segments; "$" is allowed for reserved fields
FIELD_PATTERN = re.compile(r"^[A-Za-z0-9_$\-]+(\.[A-Za-z0-9_$\-]+)*$")

COLUMN_FIELDS = {ID_FIELD: "id", REV_FIELD: "rev"}
RESERVED_FIELDS = {TIMESTAMP_FIELD, COLLECTION_TYPE_FIELD}

SortSpec = Sequence[Union[str, dict[str, str]]]


def json_path(field: str) -> str:
    """Build the SQLite JSON path for a dotted field name.

    Example:
        json_path("address.city")  # '$."address"."city"'
    """
    if not isinstance(field, str) or not FIELD_PATTERN.match(field):
        raise InvalidSelectorError(f"Invalid field name: {field!r}")
    return "$" + "".join(f'."{part}"' for part in field.split("."))


def field_expression(field: str) -> str:
    """SQL expression reading ``field`` from a document row."""
    if field in COLUMN_FIELDS:
        return COLUMN_FIELDS[field]
    return f"json_extract(doc, '{json_path(field)}')"


class SelectorCompiler:
    """Compiles selectors to SQL WHERE clauses."""

    COMPARISON_OPERATORS = {
        "$eq": "=",
        "$ne": "!=",
        "$gt": ">",
        "$gte": ">=",
        "$lt": "<",
        "$lte": "<=",
    }
    LOGICAL_OPERATORS = {"$and": " AND ", "$or": " OR "}

    def __init__(self) -> None:
        self.param_counter = 0
        self.params: dict[str, Any] = {}

    def compile(self, selector: dict[str, Any] | None) -> tuple[str, dict[str, Any]]:
        """Compile a selector to a SQL WHERE clause.

        Args:
            selector: Mapping of field names to values or operator mappings.

        Returns:
            Tuple of (SQL fragment, parameter bindings)

        Raises:
            InvalidSelectorError: If the selector is malformed.
        """
        self.param_counter = 0
        self.params = {}

        sql = self._compile_selector(selector or {})
        return sql, self.params

    def compile_sort(self, sort: SortSpec | None) -> str:
        """Compile a sort spec to an ORDER BY fragment (without the keywords).

        Entries are field names (ascending) or single-key mappings
        ``{field: "asc" | "desc"}``.
        """
        parts = []
        for entry in sort or []:
            if isinstance(entry, str):
                field, direction = entry, "asc"
            elif isinstance(entry, dict) and len(entry) == 1:
                field, direction = next(iter(entry.items()))
            else:
                raise InvalidSelectorError(f"Invalid sort entry: {entry!r}")

            direction = str(direction).lower()
            if direction not in ("asc", "desc"):
                raise InvalidSelectorError(f"Invalid sort direction: {direction!r}")

            parts.append(f"{field_expression(field)} {direction.upper()}")

        return ", ".join(parts)

    def _compile_selector(self, selector: Any) -> str:
        if not isinstance(selector, dict):
            raise InvalidSelectorError("Selector must be a mapping")

        clauses: list[str] = []
        for key, condition in selector.items():
            if key in self.LOGICAL_OPERATORS:
                if not isinstance(condition, list) or not condition:
                    raise InvalidSelectorError(f"{key} requires a non-empty list of selectors")
                nested = [f"({self._compile_selector(sub)})" for sub in condition]
                clauses.append(f"({self.LOGICAL_OPERATORS[key].join(nested)})")
                continue
            if isinstance(key, str) and key.startswith("$") and key not in RESERVED_FIELDS:
                raise InvalidSelectorError(f"Unsupported top-level operator: {key}")

            expr = field_expression(key)
            if self._is_operator_mapping(condition):
                for op, expected in condition.items():
                    clauses.append(self._compile_operator(key, expr, op, expected))
            else:
                clauses.append(self._compile_equality(expr, condition))

        if not clauses:
            return "1 = 1"
        return " AND ".join(clauses)

    @staticmethod
    def _is_operator_mapping(condition: Any) -> bool:
        return (
            isinstance(condition, dict)
            and bool(condition)
            and all(isinstance(k, str) and k.startswith("$") for k in condition)
        )

    def _compile_operator(self, field: str, expr: str, op: str, expected: Any) -> str:
        if op == "$exists":
            if field in COLUMN_FIELDS:
                return "1 = 1" if expected else "0 = 1"
            path = json_path(field)
            return f"json_type(doc, '{path}') IS {'NOT ' if expected else ''}NULL"

        if op in ("$in", "$nin"):
            if not isinstance(expected, (list, tuple, set)):
                raise InvalidSelectorError(f"{op} requires a list of values")
            if not expected:
                return "0 = 1" if op == "$in" else "1 = 1"
            placeholders = ", ".join(self._bind(value) for value in expected)
            negate = "NOT " if op == "$nin" else ""
            return f"{expr} {negate}IN ({placeholders})"

        sql_op = self.COMPARISON_OPERATORS.get(op)
        if not sql_op:
            raise InvalidSelectorError(f"Unsupported operator: {op}")

        if op == "$eq":
            return self._compile_equality(expr, expected)
        if expected is None:
            if op == "$ne":
                return f"{expr} IS NOT NULL"
            raise InvalidSelectorError(f"{op} cannot compare against null")
        if isinstance(expected, (dict, list)):
            return f"{expr} {sql_op} json({self._bind(json.dumps(expected))})"
        return f"{expr} {sql_op} {self._bind(expected)}"

    def _compile_equality(self, expr: str, expected: Any) -> str:
        if expected is None:
            return f"{expr} IS NULL"
        if isinstance(expected, (dict, list)):
            return f"{expr} = json({self._bind(json.dumps(expected))})"
        return f"{expr} = {self._bind(expected)}"

    def _bind(self, value: Any) -> str:
        param_name = f"param_{self.param_counter}"
        self.param_counter += 1
        self.params[param_name] = value
        return f":{param_name}"
