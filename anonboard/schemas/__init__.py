from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import BadInput

M = TypeVar("M", bound=BaseModel)


def parse(model: Type[M], data: Mapping[str, Any]) -> M:
    """Validate a request body, turning pydantic errors into BadInput."""
    try:
        return model.model_validate(dict(data or {}))
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ())) or "body"
        raise BadInput(f"{field}: {first.get('msg', 'invalid')}") from e
