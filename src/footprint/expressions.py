"""
Expression AST for footprint formulas.

Formulas, choice values and display conditions are stored in the
questionnaire as plain strings. Before evaluation they are parsed into the
immutable node types defined here.

ARCHITECTURAL RULE:
    These nodes are structure only.
    Parsing and evaluation live in footprint.formula.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum


class Expression(ABC):
    """
    Base class for all AST expressions.

    Intentionally minimal. It exists to give the node hierarchy a common type.
    """
    pass


class BinaryOperator(Enum):
    """
    Binary operators supported in footprint expressions.

    Keep this minimal: arithmetic for footprint formulas and comparisons
    for display conditions. Nothing else.
    """

    # Arithmetic operators
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    # Comparison operators
    EQUALS = "=="
    NOT_EQUALS = "!="
    GREATER_THAN = ">"
    GREATER_EQUAL = ">="
    LESS_THAN = "<"
    LESS_EQUAL = "<="

    @property
    def is_comparison(self) -> bool:
        return self not in _ARITHMETIC


_ARITHMETIC = frozenset({
    BinaryOperator.ADD,
    BinaryOperator.SUBTRACT,
    BinaryOperator.MULTIPLY,
    BinaryOperator.DIVIDE,
})


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Represents a binary arithmetic or comparison expression.

    Example:
        CAR_KM * 0.17

    Becomes:
        BinaryExpression(
            operator=BinaryOperator.MULTIPLY,
            left=VariableReference("CAR_KM"),
            right=Literal(0.17)
        )

    IMPORTANT:
        This object is immutable (frozen=True).
        It does NOT evaluate itself.
    """

    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class VariableReference(Expression):
    """
    An identifier left in an expression after substitution.

    A fully resolved formula contains none of these. Evaluating one is
    an "unresolved identifier" failure.
    """

    name: str


@dataclass(frozen=True)
class Literal(Expression):
    """A numeric literal, e.g. 52 or 0.17 or 1e-05."""

    value: float


class UnaryOperator(Enum):
    """Unary sign operators."""
    NEGATE = "-"
    PLUS = "+"


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Represents a signed operand.

    Example:
        10 - -5

    The right-hand side becomes:
        UnaryExpression(
            operator=UnaryOperator.NEGATE,
            operand=Literal(5)
        )
    """

    operator: UnaryOperator
    operand: Expression
