"""
Questionnaire Analyzer: authoring diagnostics for questionnaire configs.

The engine tolerates malformed configuration at runtime (a bad formula just
contributes 0). This module finds those problems up front:
    - Variable-name collisions and duplicate ids/keys
    - Undefined references and unused constants
    - Expressions that do not parse
    - Reference chains deeper than the two-pass resolver resolves
    - Reference cycles between answer-bound variables

IMPORTANT: It does NOT modify the questionnaire. It only produces read-only reports.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set, Tuple

from footprint.conditions import normalize_operator
from footprint.formula import find_identifiers, parse_formula, FormulaSyntaxError
from footprint.model import Questionnaire

SUPPORTED_OPERATORS = frozenset({"==", "!=", "<", "<=", ">", ">="})


def _find_cycles_dfs(graph: Dict[str, Set[str]], start: str, visited: Set[str],
                     rec_stack: Set[str], path: List[str]) -> Optional[List[str]]:
    """DFS to find a cycle starting from a node."""
    visited.add(start)
    rec_stack.add(start)
    path.append(start)

    for neighbor in sorted(graph.get(start, ())):
        if neighbor not in visited:
            cycle = _find_cycles_dfs(graph, neighbor, visited, rec_stack, path[:])
            if cycle:
                return cycle
        elif neighbor in rec_stack:
            cycle_start_idx = path.index(neighbor)
            return path[cycle_start_idx:] + [neighbor]

    rec_stack.remove(start)
    return None


def _deep_chain(graph: Dict[str, Set[str]], start: str, limit: int = 3,
                path: Tuple[str, ...] = ()) -> Optional[List[str]]:
    """First acyclic reference chain of `limit` names starting at `start`, if any."""
    path = path + (start,)
    if len(path) == limit:
        return list(path)
    for neighbor in sorted(graph.get(start, ())):
        if neighbor in path:
            continue
        chain = _deep_chain(graph, neighbor, limit, path)
        if chain:
            return chain
    return None



@dataclass
class QuestionnaireReport:
    """Analysis report for a questionnaire."""

    questionnaire_name: str
    total_questions: int = 0
    total_choices: int = 0
    total_constants: int = 0
    total_conditions: int = 0

    # Identity
    duplicate_question_ids: Set[str] = field(default_factory=set)
    duplicate_variable_names: Set[str] = field(default_factory=set)
    duplicate_choice_keys: Dict[str, Set[str]] = field(default_factory=dict)
    shadowed_constants: Set[str] = field(default_factory=set)

    # References
    variable_usage: Dict[str, int] = field(default_factory=dict)
    undefined_references: Set[str] = field(default_factory=set)
    unused_constants: Set[str] = field(default_factory=set)

    # Expressions
    invalid_expressions: Dict[str, str] = field(default_factory=dict)
    invalid_operators: Dict[str, str] = field(default_factory=dict)

    # Resolution depth
    unresolvable_chains: Dict[str, List[str]] = field(default_factory=dict)
    has_cycles: bool = False
    cycle_example: Optional[List[str]] = None

    # Coverage
    questions_without_choices: List[str] = field(default_factory=list)
    disabled_questions: List[str] = field(default_factory=list)
    questions_with_condition: int = 0
    condition_coverage_percent: float = 0.0

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_questionnaire(questionnaire: Questionnaire, constants: Mapping[str, float]) -> QuestionnaireReport:
    """
    Perform static analysis of a questionnaire against its constants.

    Returns a QuestionnaireReport with metrics and warnings.
    """
    report = QuestionnaireReport(questionnaire_name=questionnaire.name)

    report.total_questions = len(questionnaire.questions)
    report.total_constants = len(constants)

    # =========================================================================
    # 1. IDENTITY
    # =========================================================================

    seen_ids: Set[str] = set()
    seen_vars: Set[str] = set()
    for question in questionnaire.questions:
        if question.id in seen_ids:
            report.duplicate_question_ids.add(question.id)
        seen_ids.add(question.id)

        for name in (question.variable_name, question.related_variable_name):
            if not name:
                continue
            if name in seen_vars:
                report.duplicate_variable_names.add(name)
            seen_vars.add(name)

        keys: Set[str] = set()
        for choice in question.choices:
            if choice.key in keys:
                report.duplicate_choice_keys.setdefault(question.id, set()).add(choice.key)
            keys.add(choice.key)

        report.total_choices += len(question.choices)
        report.total_conditions += len(question.display_condition)

    report.shadowed_constants = seen_vars & set(constants)

    # =========================================================================
    # 2. REFERENCES AND EXPRESSIONS
    # =========================================================================

    known = set(constants) | seen_vars
    usage: Dict[str, int] = defaultdict(int)
    # answer-bound variable -> answer-bound variables its values reference
    dependencies: Dict[str, Set[str]] = defaultdict(set)

    def _check(location: str, text: Optional[str], owner: Optional[str] = None) -> None:
        if text is None:
            return
        try:
            parse_formula(text)
        except FormulaSyntaxError as e:
            report.invalid_expressions[location] = str(e)
        for name in find_identifiers(text):
            usage[name] += 1
            if name not in known:
                report.undefined_references.add(name)
            elif owner and name in seen_vars:
                dependencies[owner].add(name)

    for question in questionnaire.questions:
        _check(f"{question.id}.formula", question.formula)

        for choice in question.choices:
            _check(f"{question.id}.{choice.key}.value", choice.value, owner=question.variable_name)
            if question.related_variable_name:
                _check(
                    f"{question.id}.{choice.key}.related_value",
                    choice.related_value,
                    owner=question.related_variable_name,
                )

        for index, condition in enumerate(question.display_condition):
            location = f"{question.id}.display_condition[{index}]"
            operator = normalize_operator(condition.operator)
            if operator not in SUPPORTED_OPERATORS:
                report.invalid_operators[location] = condition.operator
            _check(location, f"{condition.variable_name} {operator} {condition.value}")

    report.variable_usage = dict(usage)
    report.unused_constants = set(constants) - set(usage)

    # =========================================================================
    # 3. RESOLUTION DEPTH
    # =========================================================================

    # Two passes resolve a reference to one other answer-bound variable.
    # Anything longer stays partially unresolved.
    for name in sorted(dependencies):
        chain = _deep_chain(dependencies, name)
        if chain:
            report.unresolvable_chains[name] = chain

    visited: Set[str] = set()
    for name in sorted(dependencies):
        if name not in visited:
            cycle = _find_cycles_dfs(dependencies, name, visited, set(), [])
            if cycle:
                report.has_cycles = True
                report.cycle_example = cycle
                break

    # =========================================================================
    # 4. COVERAGE
    # =========================================================================

    for question in questionnaire.questions:
        if not question.choices:
            report.questions_without_choices.append(question.id)
        if question.disabled:
            report.disabled_questions.append(question.id)
        if question.display_condition:
            report.questions_with_condition += 1

    if report.total_questions > 0:
        report.condition_coverage_percent = (report.questions_with_condition / report.total_questions) * 100

    # =========================================================================
    # 5. WARNING FLAGS
    # =========================================================================

    if report.duplicate_question_ids:
        report.add_warning(f"Duplicate question ids: {', '.join(sorted(report.duplicate_question_ids))}")

    if report.duplicate_variable_names:
        report.add_warning(
            f"Variable names bound by more than one question: {', '.join(sorted(report.duplicate_variable_names))}"
        )

    for question_id, keys in sorted(report.duplicate_choice_keys.items()):
        report.add_warning(f"Duplicate choice keys in {question_id}: {', '.join(sorted(keys))}")

    if report.shadowed_constants:
        report.add_warning(
            f"Answer variables shadow constants: {', '.join(sorted(report.shadowed_constants))}"
        )

    if report.undefined_references:
        report.add_warning(f"Undefined references: {', '.join(sorted(report.undefined_references))}")

    if report.unused_constants:
        report.add_warning(f"Unused constants: {', '.join(sorted(report.unused_constants))}")

    for location, reason in sorted(report.invalid_expressions.items()):
        report.add_warning(f"Invalid expression at {location}: {reason}")

    for location, operator in sorted(report.invalid_operators.items()):
        report.add_warning(f"Unsupported operator at {location}: {operator}")

    for name, chain in sorted(report.unresolvable_chains.items()):
        report.add_warning(f"Reference chain too deep to resolve: {' -> '.join(chain)}")

    if report.has_cycles:
        report.add_warning(f"Reference cycle detected: {' -> '.join(report.cycle_example)}")

    if report.questions_without_choices:
        report.add_warning(f"Questions without choices: {', '.join(report.questions_without_choices)}")

    return report
