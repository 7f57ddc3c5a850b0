"""
Constant store: named emission factors and other fixed numbers.

Constants are loaded once from a mapping or a JSON/YAML file and are
read-only afterwards.
"""
from __future__ import annotations

import json
import logging
import os
import re
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

import yaml

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ConstantLoadError(Exception):
    """Raised when constants cannot be read or are malformed."""
    pass


def _read_constants_file(path: str) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        content = f.read()
    ext = os.path.splitext(path)[1].lower()
    if ext in ('.yaml', '.yml'):
        return yaml.safe_load(content)
    if ext == '.json':
        return json.loads(content)
    raise ConstantLoadError(f"Unsupported constants file type: {path}")


def _validate(raw: Any) -> dict:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ConstantLoadError(f"Constants must be a mapping, got {type(raw).__name__}")

    constants = {}
    for name, value in raw.items():
        if not isinstance(name, str) or not _NAME_RE.match(name):
            raise ConstantLoadError(f"Invalid constant name: {name!r}")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConstantLoadError(f"Constant {name} is not numeric: {value!r}")
        constants[name] = float(value)
    return constants


class ConstantStore:
    """
    Holds the immutable constant mapping.

    The source is either an in-memory mapping or a path to a JSON/YAML
    file. load() reads it on first call and returns the same read-only
    mapping on every later call.

    Example:
        store = ConstantStore({"CAR_KG_PER_KM": 0.17})
        store.load()["CAR_KG_PER_KM"]   # 0.17
    """

    def __init__(self, source: Union[Mapping[str, float], str, os.PathLike]):
        self._source = source
        self._constants: Optional[Mapping[str, float]] = None

    @classmethod
    def from_file(cls, path: Union[str, os.PathLike]) -> "ConstantStore":
        return cls(path)

    def load(self) -> Mapping[str, float]:
        """
        Load constants once.

        Returns:
            Read-only mapping of constant name -> value

        Raises:
            OSError: If the file cannot be read
            ConstantLoadError: If the content is malformed
        """
        if self._constants is not None:
            return self._constants

        if isinstance(self._source, Mapping):
            raw = self._source
        else:
            path = os.fspath(self._source)
            raw = _read_constants_file(path)
            logger.debug("Loaded constants from %s", path)

        self._constants = MappingProxyType(_validate(raw))
        return self._constants
