from typing import Any, Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire. Inputs accept either."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def errors_from_pydantic(errors: Iterable[dict]) -> List[Tuple[str, str]]:
    """
    Flatten pydantic error dicts into (field, reason) pairs.

    Leading request locations ("body", "query", ...) are dropped so the field
    reads the same whether the error came from FastAPI or a direct call.
    """
    pairs = []
    for error in errors:
        loc: Tuple[Any, ...] = tuple(error.get("loc", ()))
        if len(loc) > 1 and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        reason = error.get("msg", "Invalid value")
        if reason.startswith("Value error, "):
            reason = reason[len("Value error, "):]
        pairs.append((field, reason))
    return pairs
