"""
Serialization helpers for questionnaire objects.

Provides JSON/YAML round-trip via an intermediate dict representation, and
loading of questionnaire files. Output always uses snake_case keys; input
also accepts the camelCase keys of the questions.json format
(questionText, variableName, choiceTranslationKey, choiceValue, ...).
"""
from __future__ import annotations

import json
import os
import warnings
from typing import Any, Dict, List, Optional

import yaml

from footprint.model import (
    Questionnaire,
    Question,
    Choice,
    Condition,
)


class QuestionnaireLoadError(Exception):
    """Raised when a questionnaire definition is structurally invalid."""
    pass


def _get(d: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key wins (snake_case, then camelCase aliases)."""
    for key in keys:
        if key in d and d[key] is not None:
            return d[key]
    return default


def _expr_text(value: Any) -> Optional[str]:
    """Choice values may be written as JSON numbers."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def choice_to_dict(c: Choice) -> Dict[str, Any]:
    return {"key": c.key, "text": c.text, "value": c.value, "related_value": c.related_value}


def choice_from_dict(d: Dict[str, Any]) -> Choice:
    key = _get(d, "key", "choiceTranslationKey")
    if key is None:
        raise QuestionnaireLoadError(f"Choice without key: {d}")
    return Choice(
        key=str(key),
        text=_get(d, "text", "choiceText", default=""),
        value=_expr_text(_get(d, "value", "choiceValue", default="0")),
        related_value=_expr_text(_get(d, "related_value", "relatedValue")),
    )


def condition_to_dict(c: Condition) -> Dict[str, Any]:
    return {"variable_name": c.variable_name, "operator": c.operator, "value": c.value}


def condition_from_dict(d: Dict[str, Any]) -> Optional[Condition]:
    variable = _get(d, "variable_name", "variableName")
    operator = _get(d, "operator")
    value = _expr_text(_get(d, "value", "comparisonValue"))
    if variable is None or operator is None or value is None:
        return None
    return Condition(variable_name=variable, operator=operator, value=value)


def question_to_dict(q: Question) -> Dict[str, Any]:
    return {
        "id": q.id,
        "text": q.text,
        "label": q.label,
        "variable_name": q.variable_name,
        "related_variable_name": q.related_variable_name,
        "formula": q.formula,
        "display_condition": [condition_to_dict(c) for c in q.display_condition],
        "choices": [choice_to_dict(c) for c in q.choices],
        "sort_key": q.sort_key,
        "disabled": q.disabled,
    }


def question_from_dict(d: Dict[str, Any]) -> Question:
    question_id = _get(d, "id")
    variable_name = _get(d, "variable_name", "variableName")
    if question_id is None or variable_name is None:
        raise QuestionnaireLoadError(f"Question requires id and variable name: {d}")
    question_id = str(question_id)

    conditions: List[Condition] = []
    for raw in _get(d, "display_condition", "displayCondition", default=[]):
        condition = condition_from_dict(raw)
        if condition is None:
            warnings.warn(f"Invalid display condition for {question_id}: {raw}", UserWarning)
            continue
        conditions.append(condition)

    return Question(
        id=question_id,
        text=_get(d, "text", "questionText", default=""),
        label=_get(d, "label"),
        variable_name=variable_name,
        related_variable_name=_get(d, "related_variable_name", "relatedVariableName"),
        formula=_expr_text(_get(d, "formula", default="")),
        display_condition=conditions,
        choices=[choice_from_dict(c) for c in _get(d, "choices", default=[])],
        sort_key=str(_get(d, "sort_key", "sortKey", default="")),
        disabled=bool(_get(d, "disabled", default=False)),
    )


def questionnaire_to_dict(q: Questionnaire) -> Dict[str, Any]:
    return {
        "name": q.name,
        "questions": [question_to_dict(question) for question in q.questions],
        "metadata": q.metadata,
    }


def questionnaire_from_dict(d: Any, name: str = "") -> Questionnaire:
    # A bare list is the questions.json layout
    if isinstance(d, list):
        d = {"name": name, "questions": d}
    if not isinstance(d, dict):
        raise QuestionnaireLoadError(f"Expected a mapping or a list, got {type(d).__name__}")

    q = Questionnaire(name=d.get("name", name) or name)
    q.questions = [question_from_dict(question) for question in d.get("questions", [])]
    q.metadata = d.get("metadata", {})
    return q


def questionnaire_to_json(q: Questionnaire) -> str:
    return json.dumps(questionnaire_to_dict(q), sort_keys=True)


def questionnaire_from_json(s: str) -> Questionnaire:
    d = json.loads(s)
    return questionnaire_from_dict(d)


def questionnaire_to_yaml(q: Questionnaire) -> str:
    return yaml.safe_dump(questionnaire_to_dict(q))


def questionnaire_from_yaml(s: str) -> Questionnaire:
    d = yaml.safe_load(s)
    return questionnaire_from_dict(d)


def load_questionnaire(filepath: str, name: Optional[str] = None) -> Questionnaire:
    """
    Load a questionnaire from a .json, .yaml or .yml file.

    Args:
        filepath: Path to the file
        name: Optional name (defaults to the file name)

    Raises:
        FileNotFoundError: If the file doesn't exist
        QuestionnaireLoadError: If the content is invalid
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        content = f.read()

    if name is None:
        name = os.path.splitext(os.path.basename(filepath))[0]

    ext = os.path.splitext(filepath)[1].lower()
    if ext == '.json':
        data = json.loads(content)
    elif ext in ('.yaml', '.yml'):
        data = yaml.safe_load(content)
    else:
        raise QuestionnaireLoadError(f"Unsupported questionnaire file type: {filepath}")

    return questionnaire_from_dict(data, name=name)
