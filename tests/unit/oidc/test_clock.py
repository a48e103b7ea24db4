"""Tests for the system clock and id source."""

import time
import uuid

from certtoken.oidc.clock import SystemClock


class TestSystemClock:
    """Tests for wall-clock time and jti generation."""

    def test_now_is_unix_seconds(self) -> None:
        now = SystemClock().now()
        assert isinstance(now, int)
        assert abs(now - time.time()) < 5

    def test_jti_is_uuid4(self) -> None:
        jti = SystemClock().new_jti()
        assert uuid.UUID(jti).version == 4

    def test_unique_jti(self) -> None:
        clock = SystemClock()
        jtis = {clock.new_jti() for _ in range(100)}
        assert len(jtis) == 100
