"""Segment condition model.

A segment's audience is described by a flat group of field/operator/value
conditions joined by a single AND/OR combinator. The front end only builds
and renders these groups; the backend evaluates them.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Tuple

COMBINATORS = ("AND", "OR")
OPERATORS = (">", "<", "=", ">=", "<=")

FIELD_OPTIONS: Dict[str, str] = {
    "totalSpending": "Total Spending",
    "visits": "Number of Visits",
    "lastVisit": "Last Visit",
}

_NUMERIC_OPERATORS: List[Tuple[str, str]] = [(op, op) for op in OPERATORS]

OPERATOR_OPTIONS: Dict[str, List[Tuple[str, str]]] = {
    "totalSpending": _NUMERIC_OPERATORS,
    "visits": _NUMERIC_OPERATORS,
    "lastVisit": [
        (">", "More than"),
        ("<", "Less than"),
        ("=", "Exactly"),
    ],
}

DEFAULT_FIELD = "totalSpending"


class ParseError(ValueError):
    """Raised when a stored conditions string cannot be turned back into a group."""


def validate_option_tables() -> None:
    missing = [f for f in FIELD_OPTIONS if not OPERATOR_OPTIONS.get(f)]
    if missing:
        raise RuntimeError(f"No operators configured for fields: {missing}")
    for f, options in OPERATOR_OPTIONS.items():
        if f not in FIELD_OPTIONS:
            raise RuntimeError(f"Operators configured for unknown field: {f}")
        unknown = [op for op, _ in options if op not in OPERATORS]
        if unknown:
            raise RuntimeError(f"Unknown operators for {f}: {unknown}")


validate_option_tables()


def allowed_operators(field_name: str) -> List[str]:
    return [op for op, _ in OPERATOR_OPTIONS.get(field_name, [])]


def field_label(field_name: str) -> str:
    return FIELD_OPTIONS.get(field_name, field_name)


def operator_label(field_name: str, operator: str) -> str:
    for op, label in OPERATOR_OPTIONS.get(field_name, []):
        if op == operator:
            return label
    return operator


@dataclass
class Condition:
    field: str = DEFAULT_FIELD
    operator: str = ">"
    value: str = ""


@dataclass
class ConditionGroup:
    operator: str = "AND"
    conditions: List[Condition] = field(default_factory=lambda: [Condition()])

    def set_combinator(self, op: str) -> None:
        if op not in COMBINATORS:
            raise ValueError(f"Combinator must be one of {COMBINATORS}, got {op!r}")
        self.operator = op

    def add_condition(self) -> Condition:
        cond = Condition()
        self.conditions.append(cond)
        return cond

    def update_condition(self, index: int, **patch: str) -> Condition:
        """Apply a partial update to the condition at ``index``.

        Changing ``field`` also resets ``operator`` to the first operator the
        new field allows and clears ``value``, whatever else the patch says.
        An operator the field does not allow raises ValueError and leaves the
        condition untouched.
        """
        if not 0 <= index < len(self.conditions):
            raise IndexError(f"No condition at index {index}")
        unknown = set(patch) - {"field", "operator", "value"}
        if unknown:
            raise TypeError(f"Unknown condition attributes: {sorted(unknown)}")

        current = self.conditions[index]
        updated = Condition(**{**asdict(current), **patch})
        if "field" in patch and patch["field"] != current.field:
            ops = allowed_operators(updated.field)
            if not ops:
                raise ValueError(f"Unknown field {updated.field!r}")
            updated.operator = ops[0]
            updated.value = ""
        elif "operator" in patch and updated.operator not in allowed_operators(updated.field):
            raise ValueError(f"Operator {updated.operator!r} is not allowed for {updated.field!r}")
        self.conditions[index] = updated
        return updated

    def to_dict(self) -> dict:
        return {
            "operator": self.operator,
            "conditions": [asdict(c) for c in self.conditions],
        }


def format_condition(condition: Condition) -> str:
    return (
        f"{field_label(condition.field)} "
        f"{operator_label(condition.field, condition.operator)} "
        f"{condition.value}"
    )


def serialize(group: ConditionGroup) -> str:
    return json.dumps(group.to_dict())


def group_from_dict(data: object) -> ConditionGroup:
    if not isinstance(data, dict):
        raise ParseError("Conditions must be a JSON object")
    op = data.get("operator")
    if op not in COMBINATORS:
        raise ParseError(f"Invalid combinator: {op!r}")
    raw_conditions = data.get("conditions")
    if not isinstance(raw_conditions, list) or not raw_conditions:
        raise ParseError("Conditions must be a non-empty list")

    conditions = []
    for item in raw_conditions:
        if not isinstance(item, dict):
            raise ParseError(f"Condition must be an object, got {item!r}")
        values = [item.get(k) for k in ("field", "operator", "value")]
        if not all(isinstance(v, str) for v in values):
            raise ParseError(f"Condition has missing or non-string attributes: {item!r}")
        conditions.append(Condition(*values))
    return ConditionGroup(operator=op, conditions=conditions)


def deserialize(raw: str) -> ConditionGroup:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Conditions are not valid JSON: {e}") from e
    return group_from_dict(data)
