from dataclasses import dataclass, field
from typing import Any, Generic, List, TypeVar, Union

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T


@dataclass(frozen=True)
class Invalid:
    errors: List[str] = field(default_factory=list)


def _error_lines(exc: ValidationError) -> list[str]:
    lines: list[str] = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error["loc"]) or "<root>"
        lines.append(f"{loc}: {error['msg']}")
    return lines


def validate_contract(model: type[T], raw: Any) -> Union[Valid[T], Invalid]:
    """Check ``raw`` against ``model`` without raising.

    Anything that is not a mapping (or an instance of ``model``) is rejected
    before pydantic sees it.
    """
    if not isinstance(raw, (dict, model)):
        return Invalid(errors=[f"<root>: expected an object, got {type(raw).__name__}"])
    try:
        return Valid(value=model.model_validate(raw))
    except ValidationError as exc:
        return Invalid(errors=_error_lines(exc))
