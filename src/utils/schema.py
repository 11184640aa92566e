"""Declarative rule chains for validating nested registration records.

A schema maps field names to one of:

- ``Field``: an ordered chain of ``Rule`` objects, evaluated until the first
  failure. Later rules can rely on earlier ones having passed (a prefix check
  only runs once the length check succeeded).
- ``ArrayOf``: a list of nested records with optional length bounds.
- ``Schema``: a nested record.

``Schema.validate`` returns ``{dotted_path: message}`` for every failing field.
Passing ``only`` restricts evaluation to paths under the given prefixes so an
unfinished part of the record never blocks the part being edited.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from src.utils.field_paths import in_scope, join_path


@dataclass(frozen=True)
class Rule:
    """Single predicate with the message reported when it fails."""

    predicate: Callable[[Any], bool]
    message: str

    def check(self, value: Any) -> Optional[str]:
        """Return the failure message, or None if the value passes."""
        return None if self.predicate(value) else self.message


def is_blank(value: Any) -> bool:
    """Treat None and whitespace-only strings as missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def required(message: str) -> Rule:
    return Rule(lambda value: not is_blank(value), message)


def length(exact: int, message: str) -> Rule:
    return Rule(lambda value: isinstance(value, str) and len(value) == exact, message)


def min_length(minimum: int, message: str) -> Rule:
    return Rule(lambda value: isinstance(value, str) and len(value) >= minimum, message)


def max_length(maximum: int, message: str) -> Rule:
    return Rule(lambda value: isinstance(value, str) and len(value) <= maximum, message)


def pattern(regex: str, message: str) -> Rule:
    compiled = re.compile(regex)
    return Rule(lambda value: isinstance(value, str) and compiled.fullmatch(value) is not None, message)


def one_of(choices: Iterable[Any], message: str) -> Rule:
    allowed = tuple(choices)
    return Rule(lambda value: value in allowed, message)


def refine(predicate: Callable[[Any], bool], message: str) -> Rule:
    return Rule(predicate, message)


@dataclass
class Field:
    """Leaf field with an ordered rule chain."""

    rules: Sequence[Rule] = ()
    optional: bool = False

    def first_error(self, value: Any) -> Optional[str]:
        if self.optional and is_blank(value):
            return None
        for rule in self.rules:
            message = rule.check(value)
            if message:
                return message
        return None


@dataclass
class ArrayOf:
    """List of nested records; length errors are reported at the list's own path."""

    item: "Schema"
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    min_message: str = ""
    max_message: str = ""

    def length_error(self, items: List[Any]) -> Optional[str]:
        if self.min_items is not None and len(items) < self.min_items:
            return self.min_message
        if self.max_items is not None and len(items) > self.max_items:
            return self.max_message
        return None


@dataclass
class Refinement:
    """Cross-field check over a whole (sub)record, reported at ``path``."""

    path: str
    predicate: Callable[[Dict[str, Any]], bool]
    message: str


@dataclass
class Schema:
    """Nested record schema."""

    fields: Dict[str, Union[Field, ArrayOf, "Schema"]]
    refinements: List[Refinement] = field(default_factory=list)

    def validate(self, values: Optional[Dict[str, Any]], only: Optional[Iterable[str]] = None) -> Dict[str, str]:
        """
        Validate a record.

        Args:
            values: Record in wire shape (nested dicts and lists)
            only: Path prefixes to evaluate; None evaluates everything

        Returns:
            Dict of dotted path → first failing message; empty when valid
        """
        prefixes = list(only) if only is not None else None
        errors: Dict[str, str] = {}
        self._collect(values if isinstance(values, dict) else {}, "", prefixes, errors)
        return errors

    def _collect(self, values: Dict[str, Any], base: str, only: Optional[List[str]], errors: Dict[str, str]) -> None:
        for name, spec in self.fields.items():
            path = join_path(base, name)
            value = values.get(name)

            if isinstance(spec, Field):
                if in_scope(path, only):
                    message = spec.first_error(value)
                    if message:
                        errors[path] = message

            elif isinstance(spec, ArrayOf):
                items = value if isinstance(value, list) else []
                if in_scope(path, only):
                    message = spec.length_error(items)
                    if message:
                        errors[path] = message
                for index, item in enumerate(items):
                    spec.item._collect(
                        item if isinstance(item, dict) else {},
                        join_path(path, index),
                        only,
                        errors,
                    )

            elif isinstance(spec, Schema):
                spec._collect(value if isinstance(value, dict) else {}, path, only, errors)

        for refinement in self.refinements:
            path = join_path(base, refinement.path)
            if not in_scope(path, only) or path in errors:
                continue
            if not refinement.predicate(values):
                errors[path] = refinement.message
