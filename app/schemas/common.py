from __future__ import annotations

from typing import Annotated, Optional

from pydantic import AfterValidator, StringConstraints

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _blank_to_none(value: str | None) -> str | None:
    return value or None


# Trimmed free text; blank input is stored as null
OptionalText = Annotated[
    Optional[Annotated[str, StringConstraints(strip_whitespace=True)]],
    AfterValidator(_blank_to_none),
]
