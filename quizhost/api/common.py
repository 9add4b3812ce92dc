"""
Request helpers shared by the routers
"""
from enum import Enum
from typing import Type, TypeVar

from fastapi import HTTPException


E = TypeVar("E", bound=Enum)


def require(request: dict, *names: str):
    """Return the first present field among names (snake_case / camelCase spellings)"""
    for name in names:
        value = request.get(name)
        if value is not None and value != "":
            return value
    raise HTTPException(status_code=400, detail=f"{names[0]} required")


def parse_enum(enum_cls: Type[E], value) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(item.value for item in enum_cls)
        raise HTTPException(status_code=400, detail=f"Invalid value '{value}'. Expected one of: {allowed}")
