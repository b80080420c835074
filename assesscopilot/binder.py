from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Tuple, Union

from pydantic import BaseModel


class TemplateError(LookupError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot bind '{path}': {reason}")
        self.path = path
        self.reason = reason


@dataclass(frozen=True)
class Text:
    literal: str


@dataclass(frozen=True)
class Field:
    path: str


@dataclass(frozen=True)
class Each:
    path: str
    body: "Template"


Segment = Union[Text, Field, Each]


@dataclass(frozen=True)
class Template:
    segments: Tuple[Segment, ...]

    @classmethod
    def of(cls, *segments: Segment) -> "Template":
        return cls(segments=tuple(segments))


def _lookup(value: Any, name: str, path: str) -> Any:
    if isinstance(value, BaseModel):
        fields = type(value).model_fields
        if name in fields:
            return getattr(value, name)
        for attr, info in fields.items():
            if info.alias == name:
                return getattr(value, attr)
        raise TemplateError(path, f"{type(value).__name__} has no field '{name}'")
    if isinstance(value, Mapping):
        if name not in value:
            raise TemplateError(path, f"missing key '{name}'")
        return value[name]
    raise TemplateError(path, f"cannot read '{name}' from {type(value).__name__}")


def resolve(value: Any, path: str) -> Any:
    """Resolve a dotted ``path``; ``"."`` is the value itself."""
    if path == ".":
        return value
    current = value
    for name in path.split("."):
        current = _lookup(current, name, path)
    return current


def _render_into(parts: list[str], template: Template, value: Any) -> None:
    for segment in template.segments:
        if isinstance(segment, Text):
            parts.append(segment.literal)
        elif isinstance(segment, Field):
            parts.append(str(resolve(value, segment.path)))
        elif isinstance(segment, Each):
            items = resolve(value, segment.path)
            if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
                raise TemplateError(segment.path, f"expected a sequence, got {type(items).__name__}")
            for item in items:
                _render_into(parts, segment.body, item)
        else:
            raise TypeError(f"unknown template segment: {segment!r}")


def render(template: Template, value: Any) -> str:
    parts: list[str] = []
    _render_into(parts, template, value)
    return "".join(parts)
