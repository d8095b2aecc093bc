"""Domain entity for movie records.

`Movie` validates its fields strictly on construction and on assignment so an
invalid record can never reach the in-memory store.
"""

from __future__ import annotations

import uuid
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, StringConstraints

NonEmptyStr = Annotated[StrictStr, StringConstraints(min_length=1)]


def _new_id() -> str:
    return str(uuid.uuid4())


class Movie(BaseModel):
    """A movie nominated for (and possibly winning) the award."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: str = Field(default_factory=_new_id, frozen=True)
    year: StrictInt
    title: NonEmptyStr
    studios: list[NonEmptyStr] = Field(..., min_length=1)
    producers: list[NonEmptyStr] = Field(..., min_length=1)
    winner: StrictBool = False
