"""math plugin — safe arithmetic via a recursive-descent parser.

Grammar::

    expression := term (('+' | '-') term)*
    term       := factor (('*' | '/') factor)*
    factor     := '(' expression ')' | number

Division by zero and malformed input raise :class:`MathEvaluationError`;
nothing is ever passed to ``eval``.
"""

from __future__ import annotations

import re

from context_agent.engine.models import MathResult
from context_agent.errors import MathEvaluationError
from context_agent.tools.base import Plugin

_CANDIDATE_RUN = re.compile(r"[0-9+\-*/().\s]+")
_ALLOWED = re.compile(r"^[0-9+\-*/.()]+$")
_DIGIT = re.compile(r"\d")
_NUMBER_CHARS = frozenset("0123456789.")


def extract_expression(message: str) -> str | None:
    """Return the longest arithmetic-looking run in ``message``, spaces removed."""
    best = ""
    for match in _CANDIDATE_RUN.finditer(message):
        run = match.group().strip()
        if _DIGIT.search(run) and len(run) > len(best):
            best = run
    if not best:
        return None
    return re.sub(r"\s+", "", best)


class _Parser:
    def __init__(self, expr: str) -> None:
        self.expr = expr
        self.pos = 0

    def parse(self) -> float:
        if not self.expr:
            raise MathEvaluationError("Empty expression")
        value = self.expression()
        if self.pos != len(self.expr):
            raise MathEvaluationError(
                f"Unexpected '{self.expr[self.pos]}' at position {self.pos}"
            )
        return value

    def _peek(self) -> str | None:
        return self.expr[self.pos] if self.pos < len(self.expr) else None

    def expression(self) -> float:
        value = self.term()
        while self._peek() in ("+", "-"):
            op = self.expr[self.pos]
            self.pos += 1
            right = self.term()
            value = value + right if op == "+" else value - right
        return value

    def term(self) -> float:
        value = self.factor()
        while self._peek() in ("*", "/"):
            op = self.expr[self.pos]
            self.pos += 1
            right = self.factor()
            if op == "*":
                value *= right
            elif right == 0:
                raise MathEvaluationError("Division by zero")
            else:
                value /= right
        return value

    def factor(self) -> float:
        if self._peek() == "(":
            self.pos += 1
            value = self.expression()
            if self._peek() != ")":
                raise MathEvaluationError("Missing closing parenthesis")
            self.pos += 1
            return value

        start = self.pos
        while self.pos < len(self.expr) and self.expr[self.pos] in _NUMBER_CHARS:
            self.pos += 1
        literal = self.expr[start:self.pos]
        if not literal:
            raise MathEvaluationError(f"Expected a number at position {start}")
        try:
            return float(literal)
        except ValueError:
            raise MathEvaluationError(f"Invalid number '{literal}'") from None


def evaluate_expression(expr: str) -> float | int:
    """Evaluate ``expr``; integral results come back as ``int``."""
    expr = re.sub(r"\s+", "", expr)
    if not _ALLOWED.match(expr):
        raise MathEvaluationError("Invalid characters in expression")
    value = _Parser(expr).parse()
    if value.is_integer():
        return int(value)
    return value


class MathPlugin(Plugin):
    _PATTERNS = (
        re.compile(r"\d+\s*[+\-*/]\s*\d+"),
        re.compile(r"calculate|math|compute", re.IGNORECASE),
    )

    @property
    def name(self) -> str:
        return "math"

    @property
    def intent_patterns(self) -> tuple[re.Pattern[str], ...]:
        return self._PATTERNS

    async def run(self, message: str) -> MathResult:
        expr = extract_expression(message)
        if expr is None:
            raise MathEvaluationError("No valid mathematical expression found")
        return MathResult(expression=expr, answer=evaluate_expression(expr))

    def describe_error(self, exc: Exception) -> str:
        return f"Math evaluation failed: {exc}"
