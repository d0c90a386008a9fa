"""Map raw SQLite failures onto the storage error kinds.

This is the only module that looks at engine error text; everything above
it works with the classified exception types.
"""

from __future__ import annotations

import re
from typing import Optional, Union

from promptbox.errors import ConstraintViolationError, QueryFailedError

_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: (.+)")


def classify(
    error: BaseException, query: Optional[str] = None
) -> Union[QueryFailedError, ConstraintViolationError]:
    message = str(error)

    if "UNIQUE constraint" in message:
        match = _UNIQUE_RE.search(message)
        constraint = match.group(1).strip() if match else "UNIQUE"
        return ConstraintViolationError(constraint=constraint, reason=message)

    if "FOREIGN KEY constraint" in message:
        return ConstraintViolationError(constraint="FOREIGN KEY", reason=message)

    return QueryFailedError(reason=message, query=query)
