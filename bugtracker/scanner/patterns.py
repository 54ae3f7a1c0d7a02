"""
Pattern Registry
================
Ordered, read-only table of bug categories used by the line scanner.

Each BugPattern pairs a category name with a line predicate and a
remediation hint. The scanner only ever calls `predicate.matches(line)`,
so regex rules, token rules or AST-backed rules are interchangeable.

Registry order is fixed at construction and defines the order of findings
reported for the same line. Extending the registry returns a new registry;
the default one is never mutated.
"""
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Protocol, Tuple, Union, runtime_checkable


# ---------------------------------------------------------------------------
# Line Predicates
# ---------------------------------------------------------------------------
@runtime_checkable
class LinePredicate(Protocol):
    def matches(self, line: str) -> bool:
        ...


@dataclass(frozen=True)
class RegexPredicate:
    """Case-insensitive regex searched anywhere in the line."""
    pattern: re.Pattern

    @classmethod
    def compile(cls, expression: str) -> "RegexPredicate":
        return cls(re.compile(expression, re.I))

    def matches(self, line: str) -> bool:
        return self.pattern.search(line) is not None


# ---------------------------------------------------------------------------
# Bug Pattern
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class BugPattern:
    """Immutable category + rule + hint."""
    category: str
    predicate: LinePredicate
    hint: str

    def matches(self, line: str) -> bool:
        return self.predicate.matches(line)


def regex_pattern(category: str, expression: str, hint: str) -> BugPattern:
    return BugPattern(category=category, predicate=RegexPredicate.compile(expression), hint=hint)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
class PatternRegistry:
    """Ordered collection of BugPattern with unique category names."""

    def __init__(self, patterns: Iterable[BugPattern]) -> None:
        self._patterns: Tuple[BugPattern, ...] = tuple(patterns)
        seen: set[str] = set()
        for p in self._patterns:
            if p.category in seen:
                raise ValueError(f"Duplicate bug pattern category: {p.category}")
            seen.add(p.category)

    def extended(self, *patterns: BugPattern) -> "PatternRegistry":
        return PatternRegistry(self._patterns + patterns)

    def get(self, category: str) -> BugPattern:
        for p in self._patterns:
            if p.category == category:
                return p
        raise KeyError(category)

    @property
    def categories(self) -> Tuple[str, ...]:
        return tuple(p.category for p in self._patterns)

    def __iter__(self) -> Iterator[BugPattern]:
        return iter(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __getitem__(self, index: Union[int, slice]):
        return self._patterns[index]


# ---------------------------------------------------------------------------
# Default taxonomy
# ---------------------------------------------------------------------------
SYNTAX_ERROR = "Syntax Error"
REFERENCE_ERROR = "Reference Error"
LOGICAL_ERROR = "Logical Error"
WORKFLOW_ISSUE = "Workflow Issue"

DEFAULT_PATTERNS: Tuple[BugPattern, ...] = (
    regex_pattern(
        SYNTAX_ERROR,
        r"SyntaxError|unexpected token|missing",
        "Check syntax and missing characters.",
    ),
    regex_pattern(
        REFERENCE_ERROR,
        r"ReferenceError|undefined variable|is not defined",
        "Ensure variables and functions are defined before use.",
    ),
    regex_pattern(
        LOGICAL_ERROR,
        r"divide by zero|division by zero|infinite loop"
        r"|while\s*\(\s*true\s*\)|for\s*\(\s*;\s*;\s*\)",
        "Fix incorrect logic and loop conditions.",
    ),
    regex_pattern(
        WORKFLOW_ISSUE,
        r"deprecated|unhandled promise",
        "Update deprecated methods and handle promises properly.",
    ),
)

DEFAULT_REGISTRY = PatternRegistry(DEFAULT_PATTERNS)
