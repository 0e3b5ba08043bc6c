# travel_ledger/infrastructure/ledger/selector.py

"""
Selector language for ledger rich queries.

A query is a JSON document ``{"selector": {...}}`` (an optional
``use_index`` hint is accepted and ignored). Inside a selector:

- ``{"field": value}`` matches on equality;
- ``{"field": {"$eq"|"$gt"|"$gte"|"$lt"|"$lte"|"$regex"|"$in": ...}}``
  applies operators, all of which must hold;
- ``{"$or": [selector, ...]}`` and ``{"$and": [selector, ...]}`` compose;
- dotted field names walk into nested objects.
"""

import json
import re
from typing import Any, Dict, Union

from travel_ledger.domain.exceptions import LedgerQueryError

_MISSING = object()


def parse_query(query: Union[str, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(query, str):
        try:
            query = json.loads(query)
        except json.JSONDecodeError as exc:
            raise LedgerQueryError(f"malformed query: {exc}") from exc

    if not isinstance(query, dict) or not isinstance(query.get("selector"), dict):
        raise LedgerQueryError("query must be an object with a 'selector' object")
    return query["selector"]


def matches(document: Dict[str, Any], selector: Dict[str, Any]) -> bool:
    for field, condition in selector.items():
        if field == "$or":
            if not _subselectors(field, condition):
                return False
            if not any(matches(document, sub) for sub in condition):
                return False
        elif field == "$and":
            if not all(matches(document, sub) for sub in _subselectors(field, condition)):
                return False
        elif field.startswith("$"):
            raise LedgerQueryError(f"unsupported combination operator {field}")
        elif not _match_field(_lookup(document, field), condition):
            return False
    return True


def _subselectors(operator: str, condition: Any) -> list:
    if not isinstance(condition, list) or not all(isinstance(c, dict) for c in condition):
        raise LedgerQueryError(f"{operator} expects a list of selectors")
    return condition


def _lookup(document: Dict[str, Any], field: str) -> Any:
    value: Any = document
    for part in field.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _match_field(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and any(k.startswith("$") for k in condition):
        return all(
            _apply_operator(operator, value, operand)
            for operator, operand in condition.items()
        )
    return value is not _MISSING and value == condition


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _comparable(value: Any, operand: Any) -> bool:
    if _is_number(value) and _is_number(operand):
        return True
    return isinstance(value, str) and isinstance(operand, str)


def _apply_operator(operator: str, value: Any, operand: Any) -> bool:
    if value is _MISSING:
        return False

    if operator == "$eq":
        return value == operand
    if operator == "$in":
        if not isinstance(operand, list):
            raise LedgerQueryError("$in expects a list")
        return value in operand
    if operator == "$regex":
        if not isinstance(operand, str):
            raise LedgerQueryError("$regex expects a string pattern")
        try:
            return isinstance(value, str) and re.search(operand, value) is not None
        except re.error as exc:
            raise LedgerQueryError(f"invalid $regex pattern: {exc}") from exc
    if operator in ("$gt", "$gte", "$lt", "$lte"):
        if not _comparable(value, operand):
            return False
        if operator == "$gt":
            return value > operand
        if operator == "$gte":
            return value >= operand
        if operator == "$lt":
            return value < operand
        return value <= operand

    raise LedgerQueryError(f"unsupported operator {operator}")
