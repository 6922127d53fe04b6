"""YAML text helpers for monitor documents.

The monitors API echoes documents back with sorted keys, server-side defaults
and re-rendered durations (``30m0s`` for ``30m``). These helpers let callers
tell such formatting drift apart from real changes.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_DURATION_PATTERN = re.compile(r"\d+h(?:\d+m)?(?:\d+s)?|\d+m(?:\d+s)?|\d+s")
_DURATION_COMPONENT = re.compile(r"(\d+)([hms])")
_UNIT_SECONDS = {"h": 3600, "m": 60, "s": 1}

# (fields that must be present, field to default, default value)
_DEFAULT_RULES: tuple[tuple[tuple[str, ...], str, Any], ...] = ((("title", "model"), "isPaused", False),)


def _load(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as error:
        raise ValueError(f"invalid YAML: {error}") from error


def _dump(document: Any, *, sort_keys: bool) -> str:
    return yaml.safe_dump(document, sort_keys=sort_keys, allow_unicode=True, default_flow_style=False)


def normalize_yaml(text: str) -> str:
    """Re-render a YAML document with keys sorted at every level.

    Empty text stays empty. Raises ``ValueError`` for invalid YAML.
    """
    if text == "":
        return ""
    return _dump(_load(text), sort_keys=True)


def filter_yaml_keys_based_on_template(source: str, template: str) -> str:
    """Keep only the mapping keys of ``source`` that also appear in ``template``.

    Every item of a sequence is filtered with the keys of the template's first
    item. Scalars in the template keep whatever the source holds.
    """
    if source == "":
        return ""
    if template == "":
        return source
    filtered = _filter(_load(source), _shape(_load(template)))
    return _dump(filtered, sort_keys=False)


def _shape(node: Any) -> Any:
    if isinstance(node, dict):
        return {key: _shape(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_shape(node[0])] if node else []
    return None


def _filter(source: Any, shape: Any) -> Any:
    if isinstance(shape, dict) and isinstance(source, dict):
        return {key: _filter(value, shape[key]) for key, value in source.items() if key in shape}
    if isinstance(shape, list) and shape and isinstance(source, list):
        return [_filter(item, shape[0]) for item in source]
    return source


def normalize_duration(text: str) -> str:
    """Rewrite every duration in ``text`` without zero components (``1h0m0s`` -> ``1h``)."""
    return _DURATION_PATTERN.sub(_render_duration, text)


def _render_duration(match: re.Match[str]) -> str:
    total = sum(int(amount) * _UNIT_SECONDS[unit] for amount, unit in _DURATION_COMPONENT.findall(match.group(0)))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    parts = [f"{value}{unit}" for value, unit in ((hours, "h"), (minutes, "m"), (seconds, "s")) if value]
    return "".join(parts) or "0s"


def _canonical(node: Any) -> Any:
    if isinstance(node, dict):
        result = {key: _canonical(value) for key, value in node.items()}
        for required, field, default in _DEFAULT_RULES:
            if field not in result and all(name in result for name in required):
                result[field] = default
        return result
    if isinstance(node, list):
        return [_canonical(item) for item in node]
    if isinstance(node, str):
        return normalize_duration(node)
    return node


def _deep_equal(left: Any, right: Any) -> bool:
    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(_deep_equal(left[key], right[key]) for key in left)
    if isinstance(left, list) and isinstance(right, list):
        if len(left) != len(right):
            return False
        return all(_deep_equal(a, b) for a, b in zip(left, right))
    return type(left) is type(right) and left == right


def compare_yaml_semantically(left: str, right: str) -> bool:
    """Return True when both documents describe the same monitor.

    Key order, formatting and duration spelling are ignored, and a monitor
    without ``isPaused`` is treated as not paused. Scalars must match in type:
    ``1`` does not equal ``1.0`` or ``true``. Raises ``ValueError`` when either
    side is not valid YAML.
    """
    if left == right:
        return True
    return _deep_equal(_canonical(_load(left)), _canonical(_load(right)))


def yaml_equivalent_to_template(template: str, candidate: str) -> bool:
    """Compare ``candidate`` to ``template`` after dropping keys the template does not set."""
    try:
        filtered = filter_yaml_keys_based_on_template(candidate, template)
    except ValueError as error:
        logger.warning("unable to filter YAML by template, comparing the full document: %s", error)
        filtered = candidate
    try:
        return compare_yaml_semantically(normalize_yaml(template), normalize_yaml(filtered))
    except ValueError as error:
        logger.warning("unable to compare YAML documents semantically, comparing text: %s", error)
        return template == filtered


def keep_equivalent_yaml(planned: str | None, server: str) -> str:
    """Prefer the caller's document when the server copy only differs in formatting or defaults."""
    if planned is None or planned == "":
        return server
    if yaml_equivalent_to_template(planned, server):
        logger.debug("YAML documents are semantically equal, keeping planned document")
        return planned
    logger.debug("YAML documents differ semantically, using server document")
    return server
