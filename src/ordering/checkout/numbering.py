"""Human-readable order numbers: ``ORD-YYYYMMDD-XXXXXX``.

The random suffix only makes collisions unlikely. Uniqueness itself is
enforced by the order store.
"""

import secrets
import string
from collections.abc import Callable
from datetime import UTC, datetime

SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
SUFFIX_LENGTH = 6


class OrderNumberGenerator:
    def __init__(self, prefix: str = "ORD", clock: Callable[[], datetime] | None = None) -> None:
        self.prefix = prefix
        self._clock = clock or (lambda: datetime.now(UTC))

    def __call__(self) -> str:
        stamp = self._clock().strftime("%Y%m%d")
        suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
        return f"{self.prefix}-{stamp}-{suffix}"
