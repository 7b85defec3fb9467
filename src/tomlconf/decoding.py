# src/tomlconf/decoding.py
"""
TOML decoding and overlay of documents onto configuration objects.

An *overlay* decodes a document on top of an already populated object and
only changes the fields present in the document. Supported targets:

- ``pydantic.BaseModel`` instances. Keys match whatever pydantic accepts
  for the field: ``validation_alias`` (including ``AliasChoices`` and
  ``AliasPath`` into nested tables), ``alias``, and the field name when no
  alias is declared or the model validates by name. The merged result is
  validated by pydantic before any attribute is assigned.
- Standard library dataclass instances, matched by field name and
  validated through ``pydantic.TypeAdapter``.
- Any ``MutableMapping``; tables are merged recursively in place.
- Objects implementing :class:`SupportsOverlay`.

Keys the target does not know about are ignored.
"""

import copy
import dataclasses
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Protocol, runtime_checkable

from pydantic import AliasChoices, AliasPath, BaseModel, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo

try:
    import tomllib
except ImportError:  # Python < 3.11
    import tomli as tomllib

from .exceptions import ConfigDecodeError

logger = logging.getLogger(__name__)


@runtime_checkable
class SupportsOverlay(Protocol):
    """Configuration objects that apply a parsed TOML document themselves."""

    def overlay(self, data: Mapping[str, Any]) -> None: ...


def parse_document(content: str | bytes, source: str = "<string>") -> dict[str, Any]:
    """
    Parse TOML text into a dictionary.

    Args:
        content: TOML document, as text or UTF-8 encoded bytes.
        source: Where the document came from, used in error messages.

    Raises:
        ConfigDecodeError: If the content is not valid UTF-8 or not valid TOML.
    """
    try:
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        return tomllib.loads(content)
    except UnicodeDecodeError as e:
        raise ConfigDecodeError(source, f"invalid UTF-8: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigDecodeError(source, str(e)) from e


def decode(content: str | bytes, target: Any, source: str = "<string>") -> dict[str, Any]:
    """Parse ``content`` and overlay it onto ``target``. Returns the parsed document."""
    document = parse_document(content, source)
    overlay(target, document, source)
    logger.debug(f"Applied {len(document)} top-level key(s) from {source}")
    return document


def overlay(target: Any, data: Mapping[str, Any], source: str = "<string>") -> None:
    """
    Overlay a parsed document onto ``target`` in place.

    Raises:
        TypeError: If ``target`` supports none of the decoding capabilities.
        ConfigDecodeError: If the target rejects a value from the document.
    """
    if isinstance(target, BaseModel):
        apply = _overlay_model
    elif dataclasses.is_dataclass(target) and not isinstance(target, type):
        apply = _overlay_dataclass
    elif isinstance(target, MutableMapping):
        apply = _overlay_mapping
    elif isinstance(target, SupportsOverlay):
        apply = _overlay_custom
    else:
        raise TypeError(
            f"Cannot decode TOML into {type(target).__name__!r}: expected a pydantic model, "
            "a dataclass instance, a mutable mapping or an object with an overlay() method"
        )

    try:
        apply(target, data)
    except ValidationError as e:
        raise ConfigDecodeError(source, _format_validation_error(e)) from e
    except (TypeError, ValueError) as e:
        raise ConfigDecodeError(source, str(e)) from e


def _overlay_model(target: BaseModel, data: Mapping[str, Any]) -> None:
    model_cls = type(target)
    config = model_cls.model_config
    by_alias = config.get("validate_by_alias", True) is not False
    by_name = bool(config.get("populate_by_name") or config.get("validate_by_name"))

    # Current values are passed back as objects, keyed by a path pydantic
    # accepts for the field, so no serialization alias is involved.
    model_input: dict[str, Any] = {}
    present: list[str] = []
    for name, field in model_cls.model_fields.items():
        paths = _input_paths(name, field, by_alias, by_name)
        current = getattr(target, name)
        found, incoming = _lookup_first(data, paths)
        if found:
            present.append(name)
            current = _merge_value(current, incoming)
        if paths:
            _place(model_input, paths[0], current)

    validated = model_cls.model_validate(model_input)
    for name in present:
        setattr(target, name, getattr(validated, name))


def _overlay_dataclass(target: Any, data: Mapping[str, Any]) -> None:
    dc_cls = type(target)
    dc_input: dict[str, Any] = {}
    present: list[str] = []
    for f in dataclasses.fields(dc_cls):
        if not f.init:
            continue
        current = getattr(target, f.name)
        if f.name in data:
            present.append(f.name)
            current = _merge_value(current, data[f.name])
        dc_input[f.name] = current

    validated = TypeAdapter(dc_cls).validate_python(dc_input)
    for name in present:
        setattr(target, name, getattr(validated, name))


def _overlay_mapping(target: MutableMapping, data: Mapping[str, Any]) -> None:
    for key, value in data.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, MutableMapping):
            _overlay_mapping(existing, value)
        else:
            target[key] = value


def _overlay_custom(target: SupportsOverlay, data: Mapping[str, Any]) -> None:
    try:
        target.overlay(data)
    except (TypeError, ValueError):
        raise
    except Exception as e:
        # A document the object cannot use is a decode failure like any other
        raise ValueError(f"{type(e).__name__}: {e}") from e


def _merge_value(current: Any, incoming: Any) -> Any:
    """Return the value a field gets when ``incoming`` is overlaid on ``current``.

    Nested models and dataclasses are overlaid on a copy, so the target is
    only touched once the whole document has validated.
    """
    if not isinstance(incoming, Mapping):
        return incoming
    if isinstance(current, BaseModel):
        nested = current.model_copy(deep=True)
        _overlay_model(nested, incoming)
        return nested
    if dataclasses.is_dataclass(current) and not isinstance(current, type):
        nested = copy.deepcopy(current)
        _overlay_dataclass(nested, incoming)
        return nested
    if isinstance(current, dict):
        return _deep_merge(current, dict(incoming))
    return incoming


def _input_paths(
    name: str, field: FieldInfo, by_alias: bool, by_name: bool
) -> list[tuple[str, ...]]:
    """
    List every key path pydantic accepts for a field, in the order it tries them.

    Covers ``validation_alias`` (a string, an ``AliasPath`` or
    ``AliasChoices``), ``alias``, and the field name when the model
    validates by name or declares no alias. ``AliasPath`` entries with list
    indexes have no TOML table equivalent and are left out.
    """
    choices: list[Any] = []
    alias = field.validation_alias if field.validation_alias is not None else field.alias
    if isinstance(alias, AliasChoices):
        choices.extend(alias.choices)
    elif alias is not None:
        choices.append(alias)
    if not by_alias:
        choices = []

    paths: list[tuple[str, ...]] = []
    for choice in choices:
        if isinstance(choice, str):
            paths.append((choice,))
        elif isinstance(choice, AliasPath) and all(isinstance(p, str) for p in choice.path):
            paths.append(tuple(choice.path))

    if by_name or not by_alias or alias is None:
        paths.append((name,))
    return list(dict.fromkeys(paths))


def _lookup_first(data: Mapping[str, Any], paths: list[tuple[str, ...]]) -> tuple[bool, Any]:
    for path in paths:
        node: Any = data
        for key in path:
            if not isinstance(node, Mapping) or key not in node:
                break
            node = node[key]
        else:
            return True, node
    return False, None


def _place(target: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    for key in path[:-1]:
        target = target.setdefault(key, {})
    target[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries, with override taking precedence.

    Args:
        base: Base dictionary
        override: Override dictionary (values take precedence)

    Returns:
        Merged dictionary
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}" if loc else err.get("msg", ""))
    return "; ".join(parts) or str(error)
