"""
Formula engine (interpreter layer for footprint expressions).

Two operations matter to the rest of the package:

    substitute(expression, assignments)
        Textual replacement of known identifiers by their resolved values.
        Unknown identifiers are left untouched, which is what allows
        partial resolution across several passes.

    evaluate(expression)
        Parse and evaluate a small grammar:
            numbers, + - * /, unary + -, parentheses,
            and a single comparison (< <= > >= == !=).
        Never raises. Invalid input produces an EvaluationFailure value.

Grammar (lowest precedence first):

    comparison     := additive [ comp_op additive ]
    additive       := multiplicative { ("+" | "-") multiplicative }
    multiplicative := unary { ("*" | "/") unary }
    unary          := ("+" | "-") unary | primary
    primary        := NUMBER | IDENTIFIER | "(" comparison ")"
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List, Mapping, Tuple, Union

from footprint.expressions import (
    Expression,
    BinaryExpression,
    BinaryOperator,
    VariableReference,
    Literal,
    UnaryExpression,
    UnaryOperator,
)


class FormulaError(Exception):
    """Raised when an expression cannot be evaluated."""
    pass


class FormulaSyntaxError(FormulaError):
    """Raised when an expression cannot be parsed."""
    pass


@dataclass(frozen=True)
class EvaluationFailure:
    """
    Typed failure returned by evaluate().

    Callers aggregate over many formulas, so a failure is a value
    they can test for rather than an exception they must catch.

    Properties:
        expression: The (substituted) expression that failed
        reason: Human-readable cause
    """

    expression: str
    reason: str


EvaluationResult = Union[float, bool, EvaluationFailure]

# An identifier must not start inside a number ("1e5") or after a dot.
_IDENTIFIER_RE = re.compile(r"(?<![\w.])[A-Za-z_][A-Za-z0-9_]*")
_PLAIN_NUMBER_RE = re.compile(r"(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_TOKEN_RE = re.compile(
    r"""\s*(?:
        (?P<number>(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)
      | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
      | (?P<op>==|!=|<=|>=|<|>|\+|-|\*|/|\(|\))
      | (?P<bad>\S)
    )""",
    re.VERBOSE,
)

_COMPARISON_OPS = {
    '==': BinaryOperator.EQUALS,
    '!=': BinaryOperator.NOT_EQUALS,
    '<': BinaryOperator.LESS_THAN,
    '>': BinaryOperator.GREATER_THAN,
    '<=': BinaryOperator.LESS_EQUAL,
    '>=': BinaryOperator.GREATER_EQUAL,
}

Token = Tuple[str, str]

_TOO_DEEP = "Expression nested too deeply"


def format_number(value: Union[int, float, bool]) -> str:
    """Canonical string form of a number as stored in the assignment table."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def _as_text(value) -> str:
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def substitute(expression: str, assignments: Mapping[str, object]) -> str:
    """
    Replace every identifier found in `assignments` by its value.

    Only whole identifier tokens are replaced. Values that are not plain
    non-negative numbers are parenthesised so the host expression keeps
    its precedence ("V*2" with V="1+1" becomes "(1+1)*2").

    Args:
        expression: Formula, choice value or condition text
        assignments: Lookup table (name -> value)

    Returns:
        The substituted expression text
    """
    if not expression:
        return ""

    def _replace(match: re.Match) -> str:
        name = match.group(0)
        if name not in assignments:
            return name
        text = _as_text(assignments[name]).strip()
        if _PLAIN_NUMBER_RE.fullmatch(text):
            return text
        return f"({text})"

    return _IDENTIFIER_RE.sub(_replace, expression)


def find_identifiers(expression: str) -> List[str]:
    """Identifier tokens in `expression`, in order of first appearance."""
    if not expression:
        return []
    seen: List[str] = []
    for match in _IDENTIFIER_RE.finditer(expression):
        if match.group(0) not in seen:
            seen.append(match.group(0))
    return seen


def _tokenize(expression: str) -> List[Token]:
    """Tokenize expression string into (kind, text) pairs."""
    tokens: List[Token] = []
    for match in _TOKEN_RE.finditer(expression):
        kind = match.lastgroup
        if kind is None:
            continue
        text = match.group(kind)
        if kind == 'bad':
            raise FormulaSyntaxError(f"Unexpected character '{text}'")
        tokens.append((kind, text))
    if not tokens:
        raise FormulaSyntaxError("Empty expression")
    return tokens


def _peek_op(tokens: List[Token], pos: int) -> str | None:
    if pos < len(tokens) and tokens[pos][0] == 'op':
        return tokens[pos][1]
    return None


def _parse_comparison(tokens: List[Token], pos: int) -> tuple:
    """Parse a single, non-chained comparison."""
    left, pos = _parse_additive(tokens, pos)

    op = _peek_op(tokens, pos)
    if op in _COMPARISON_OPS:
        right, pos = _parse_additive(tokens, pos + 1)
        left = BinaryExpression(_COMPARISON_OPS[op], left, right)

    return left, pos


def _parse_additive(tokens: List[Token], pos: int) -> tuple:
    left, pos = _parse_multiplicative(tokens, pos)

    while _peek_op(tokens, pos) in ('+', '-'):
        operator = BinaryOperator(tokens[pos][1])
        right, pos = _parse_multiplicative(tokens, pos + 1)
        left = BinaryExpression(operator, left, right)

    return left, pos


def _parse_multiplicative(tokens: List[Token], pos: int) -> tuple:
    left, pos = _parse_unary(tokens, pos)

    while _peek_op(tokens, pos) in ('*', '/'):
        operator = BinaryOperator(tokens[pos][1])
        right, pos = _parse_unary(tokens, pos + 1)
        left = BinaryExpression(operator, left, right)

    return left, pos


def _parse_unary(tokens: List[Token], pos: int) -> tuple:
    op = _peek_op(tokens, pos)
    if op in ('+', '-'):
        operand, pos = _parse_unary(tokens, pos + 1)
        return UnaryExpression(UnaryOperator(op), operand), pos

    return _parse_primary(tokens, pos)


def _parse_primary(tokens: List[Token], pos: int) -> tuple:
    """Parse primary expression (number, identifier or parenthesized)."""
    if pos >= len(tokens):
        raise FormulaSyntaxError("Unexpected end of expression")

    kind, text = tokens[pos]

    if kind == 'op' and text == '(':
        expr, pos = _parse_comparison(tokens, pos + 1)
        if _peek_op(tokens, pos) != ')':
            raise FormulaSyntaxError("Missing closing parenthesis")
        return expr, pos + 1

    if kind == 'number':
        return Literal(float(text)), pos + 1

    if kind == 'name':
        return VariableReference(text), pos + 1

    raise FormulaSyntaxError(f"Unexpected token: {text}")


def parse_formula(expression: str) -> Expression:
    """
    Parse expression text into an AST.

    Raises:
        FormulaSyntaxError: If the text is empty or malformed
    """
    if expression is None or not expression.strip():
        raise FormulaSyntaxError("Empty expression")

    tokens = _tokenize(expression)
    try:
        ast, remaining = _parse_comparison(tokens, 0)
    except RecursionError:
        raise FormulaSyntaxError(_TOO_DEEP) from None

    if remaining < len(tokens):
        leftover = " ".join(text for _, text in tokens[remaining:])
        raise FormulaSyntaxError(f"Unexpected tokens after parsing: {leftover}")

    return ast


def _number(value) -> float:
    if isinstance(value, bool):
        raise FormulaError("Boolean operand in arithmetic or comparison")
    return value


def _evaluate_node(node: Expression):
    if isinstance(node, Literal):
        return node.value

    if isinstance(node, VariableReference):
        raise FormulaError(f"Unresolved identifier '{node.name}'")

    if isinstance(node, UnaryExpression):
        operand = _number(_evaluate_node(node.operand))
        return -operand if node.operator == UnaryOperator.NEGATE else operand

    if isinstance(node, BinaryExpression):
        left = _number(_evaluate_node(node.left))
        right = _number(_evaluate_node(node.right))
        op = node.operator

        if op == BinaryOperator.ADD:
            return left + right
        if op == BinaryOperator.SUBTRACT:
            return left - right
        if op == BinaryOperator.MULTIPLY:
            return left * right
        if op == BinaryOperator.DIVIDE:
            if right == 0:
                raise FormulaError("Division by zero")
            return left / right
        if op == BinaryOperator.EQUALS:
            return left == right
        if op == BinaryOperator.NOT_EQUALS:
            return left != right
        if op == BinaryOperator.LESS_THAN:
            return left < right
        if op == BinaryOperator.LESS_EQUAL:
            return left <= right
        if op == BinaryOperator.GREATER_THAN:
            return left > right
        if op == BinaryOperator.GREATER_EQUAL:
            return left >= right

    raise FormulaError(f"Unsupported expression node: {type(node).__name__}")


def evaluate(expression: str) -> EvaluationResult:
    """
    Evaluate a fully substituted expression.

    Returns:
        A float for arithmetic, a bool for comparisons, or an
        EvaluationFailure when the expression is malformed, still
        references an identifier, divides by zero or is not finite.
    """
    try:
        result = _evaluate_node(parse_formula(expression))
    except FormulaError as e:
        return EvaluationFailure(expression=expression or "", reason=str(e))
    except RecursionError:
        return EvaluationFailure(expression=expression, reason=_TOO_DEEP)

    if not isinstance(result, bool) and not math.isfinite(result):
        return EvaluationFailure(expression=expression, reason="Non-finite result")

    return result
