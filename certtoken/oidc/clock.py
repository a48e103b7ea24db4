"""Time and unique-id source for assertion claims."""

from datetime import UTC, datetime
from typing import Protocol

import uuid_utils


class Clock(Protocol):
    """Supplies `nbf` and `jti` values for a new assertion."""

    def now(self) -> int: ...

    def new_jti(self) -> str: ...


class SystemClock:
    """UTC wall clock with random UUIDv4 identifiers."""

    def now(self) -> int:
        return int(datetime.now(UTC).timestamp())

    def new_jti(self) -> str:
        return str(uuid_utils.uuid4())
