"""Field compiler -- turns one cron field into an ascending tuple of values.

Pipeline for a single field:
    1. alias substitution (month and day_of_week only)
    2. character validation
    3. wildcard expansion ('*' -> '<min>-<max>')
    4. list split, atoms ordered by their digits
    5. per-atom resolution (scalar, range, stepped range)
    6. merge into the result, keeping only values above the running maximum

Examples:
    compile_field("hour", "0-9,23")      -> (0, 1, ..., 9, 23)
    compile_field("day_of_week", "mon-fri") -> (1, 2, 3, 4, 5)
    compile_field("minute", "0-9/3")     -> (2, 5, 8)
"""

from __future__ import annotations

import logging
import re

from core.errors import (
    ConstraintRange,
    InvalidAlias,
    InvalidCharacter,
    InvalidRange,
    InvalidStep,
)
from core.models.expression import ALIASES, CONSTRAINTS, FieldConstraint

logger = logging.getLogger(__name__)

_ALIAS_RE = re.compile(r"[a-z]{1,3}", re.IGNORECASE)
_VALID_RE = re.compile(r"[\d|/*,\-]+")
_NON_DIGIT_RE = re.compile(r"\D")
_INT_RE = re.compile(r"-?\d+")
_UINT_RE = re.compile(r"\d+")

# An atom resolves to a single value or to the values of a (stepped) range.
Resolved = int | tuple[int, ...]


def substitute_aliases(field: str, raw: str) -> str:
    """Replace month/weekday names with their numbers."""
    aliases = ALIASES.get(field)
    if aliases is None:
        return raw

    def replacer(match: re.Match) -> str:
        name = match.group(0).lower()
        if name not in aliases:
            raise InvalidAlias(
                f"Cannot resolve alias {name!r} for {field}", field=field, value=name
            )
        return str(aliases[name])

    return _ALIAS_RE.sub(replacer, raw)


def expand_wildcard(value: str, constraint: FieldConstraint) -> str:
    return value.replace("*", constraint.span)


def sort_atoms(atoms: list[str]) -> list[str]:
    """Order list atoms by the number formed from all of their digits."""

    def key(atom: str) -> int:
        digits = _NON_DIGIT_RE.sub("", atom)
        return int(digits) if digits else -1

    return sorted(atoms, key=key)


def step_range(start: int, stop: int, step: int) -> tuple[int, ...]:
    """Walk start..stop inclusive, emitting an index each time a counter
    (starting at 1) reaches a multiple of step, then resetting it to 1.

    step_range(0, 9, 3) -> (2, 5, 8)
    """
    emitted: list[int] = []
    counter = 1
    for index in range(start, stop + 1):
        if counter % step == 0:
            emitted.append(index)
            counter = 1
        else:
            counter += 1
    return tuple(emitted)


def _scalar(field: str, text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise InvalidCharacter(
            f"Invalid value for {field}: {text!r}", field=field, value=text
        )
    return int(text)


def _parse_step(field: str, text: str) -> int:
    if not _UINT_RE.fullmatch(text) or int(text) <= 0:
        raise InvalidStep(
            f"Cannot repeat {field} at every {text!r}", field=field, value=text
        )
    return int(text)


def _resolve_range(field: str, text: str, step: str, constraint: FieldConstraint) -> Resolved:
    bounds = text.split("-")
    if len(bounds) < 2:
        return _scalar(field, text)

    # Missing lower bound: read the whole thing as a number
    if not bounds[0]:
        return _scalar(field, text)

    low, high = bounds[0], bounds[1]
    if not (_UINT_RE.fullmatch(low) and _UINT_RE.fullmatch(high)):
        raise InvalidRange(f"Invalid range for {field}: {text!r}", field=field, value=text)

    start, stop = int(low), int(high)
    if start < constraint.min or stop > constraint.max:
        raise ConstraintRange(
            f"Constraint error for {field}, got range {start}-{stop} "
            f"expected range {constraint.span}",
            field=field,
            value=text,
        )
    if start >= stop:
        raise InvalidRange(f"Invalid range for {field}: {text!r}", field=field, value=text)

    return step_range(start, stop, _parse_step(field, step))


def resolve_atom(field: str, atom: str, constraint: FieldConstraint) -> Resolved:
    """Resolve one list atom: 'n', 'a-b', 'a/n' or 'a-b/n'."""
    parts = atom.split("/")
    if len(parts) > 1:
        base, step = parts[0], parts[-1]
        if base and "-" not in base:
            # 'a/n' runs from a up to the field maximum
            base = f"{base}-{constraint.max}"
        return _resolve_range(field, base, step, constraint)
    return _resolve_range(field, atom, "1", constraint)


def _check_constraint(field: str, value: int, constraint: FieldConstraint) -> None:
    if not constraint.contains(value):
        raise ConstraintRange(
            f"Constraint error for {field}, got value {value} "
            f"expected range {constraint.span}",
            field=field,
            value=value,
        )


def merge_values(
    field: str,
    collected: tuple[int, ...],
    resolved: Resolved,
    constraint: FieldConstraint,
) -> tuple[int, ...]:
    """Append resolved values that exceed the running maximum of collected.

    Values at or below the running maximum are dropped, so the result stays
    ascending and duplicate-free. A day_of_week scalar of 7 becomes 0.
    """
    running_max = collected[-1] if collected else -1
    merged = list(collected)

    if isinstance(resolved, int):
        _check_constraint(field, resolved, constraint)
        value = resolved % 7 if field == "day_of_week" else resolved
        if value > running_max:
            merged.append(value)
        return tuple(merged)

    for value in resolved:
        _check_constraint(field, value, constraint)
        if value > running_max:
            merged.append(value)
            running_max = value
    return tuple(merged)


def compile_field(
    field: str,
    raw: str,
    constraint: FieldConstraint | None = None,
) -> tuple[int, ...]:
    """Compile a single field's text into its ascending value tuple.

    Args:
        field: field name, one of FIELD_NAMES
        raw: the field text, e.g. '*/15' or 'mon-fri'
        constraint: bounds to enforce (defaults to the field's standard bounds)

    Raises:
        ParseError subclass on any invalid input.
    """
    if constraint is None:
        constraint = CONSTRAINTS[field]

    value = substitute_aliases(field, raw)

    if not _VALID_RE.fullmatch(value):
        raise InvalidCharacter(
            f"Invalid characters in {field}, got value: {value!r}", field=field, value=raw
        )

    value = expand_wildcard(value, constraint)

    atoms = value.split(",")
    if len(atoms) > 1:
        atoms = sort_atoms(atoms)

    collected: tuple[int, ...] = ()
    for atom in atoms:
        collected = merge_values(field, collected, resolve_atom(field, atom, constraint), constraint)

    logger.debug("Compiled %s %r -> %s", field, raw, collected)
    return collected
