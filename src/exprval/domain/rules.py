"""Turns a value expression into an OR-of-AND rule set.

``&`` binds tighter than ``|``::

    gte=-20 & lte=-10 | gte=10 & lte=20
    -> ((gte=-20, lte=-10), (gte=10, lte=20))

Parameters keep their internal whitespace (``one_of = a, b , c`` yields
the parameter ``"a, b , c"``); predicates that take token lists split
them on commas themselves.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from exprval.domain.errors import ExpressionSyntaxError

OR_OPERATOR = "|"
AND_OPERATOR = "&"
PARAM_SEPARATOR = "="

_RULE_NAME = re.compile(r"[A-Za-z0-9_]+")


@dataclass(frozen=True)
class Rule:
    """One named check plus its raw parameter string."""

    name: str
    param: str = ""

    def __str__(self) -> str:
        return f"{self.name}{PARAM_SEPARATOR}{self.param}" if self.param else self.name


@dataclass(frozen=True)
class RuleSet:
    """Ordered OR-groups, each an ordered sequence of AND-rules.

    An empty rule set is trivially satisfied.
    """

    groups: tuple[tuple[Rule, ...], ...] = ()

    def __bool__(self) -> bool:
        return bool(self.groups)

    def __iter__(self) -> Iterator[tuple[Rule, ...]]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    def rules(self) -> Iterator[Rule]:
        """Iterate every rule in evaluation order."""
        for group in self.groups:
            yield from group

    def __str__(self) -> str:
        return f" {OR_OPERATOR} ".join(
            f" {AND_OPERATOR} ".join(str(rule) for rule in group) for group in self.groups
        )


def parse_rule(text: str, *, expression: str = "") -> Rule:
    """Parse a single ``name[=param]`` candidate."""
    name, sep, param = text.partition(PARAM_SEPARATOR)
    name = name.strip()
    if not _RULE_NAME.fullmatch(name):
        raise ExpressionSyntaxError(
            expression=expression or text,
            near=text.strip(),
            comment="could not parse rule name",
        )
    return Rule(name=name, param=param.strip() if sep else "")


def parse(expression: str) -> RuleSet:
    """Parse a value expression into a :class:`RuleSet`.

    Blank candidates and blank groups are dropped, so ``""`` and ``"&|&"``
    both yield an empty rule set.

    Raises:
        ExpressionSyntaxError: a rule name is not made of ``[A-Za-z0-9_]``.
    """
    groups: list[tuple[Rule, ...]] = []
    for entry_or in expression.split(OR_OPERATOR):
        rules = tuple(
            parse_rule(entry_and, expression=expression)
            for entry_and in entry_or.split(AND_OPERATOR)
            if entry_and.strip()
        )
        if rules:
            groups.append(rules)
    return RuleSet(groups=tuple(groups))
