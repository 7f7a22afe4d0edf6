import enum
import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

CODE_TTL_SECONDS = 600
CODE_MIN = 100000
CODE_MAX = 999999


@dataclass(frozen=True)
class VerificationRecord:
    identifier: str
    code: str
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class VerifyStatus(enum.Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    MISMATCH = "mismatch"

    @property
    def verified(self) -> bool:
        return self is VerifyStatus.SUCCESS


class VerificationStore:
    """In-memory one-time codes keyed by email."""

    def __init__(
        self,
        ttl_seconds: float = CODE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._rng = rng or random.SystemRandom()
        self._records: dict[str, VerificationRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def generate_code(self) -> str:
        return str(self._rng.randint(CODE_MIN, CODE_MAX))

    def issue(self, identifier: str, code: str | None = None) -> str:
        code = code or self.generate_code()
        now = self._clock()
        record = VerificationRecord(
            identifier=identifier,
            code=code,
            created_at=now,
            expires_at=now + self.ttl_seconds,
        )
        with self._lock:
            replaced = identifier in self._records
            self._records[identifier] = record
        logger.info(
            "Issued verification code for %s (replaced=%s)", identifier, replaced
        )
        return code

    def get(self, identifier: str) -> VerificationRecord | None:
        with self._lock:
            return self._records.get(identifier)

    def verify(self, identifier: str, code: str) -> VerifyStatus:
        with self._lock:
            record = self._records.get(identifier)
            if record is None:
                status = VerifyStatus.NOT_FOUND
            elif record.is_expired(self._clock()):
                del self._records[identifier]
                status = VerifyStatus.EXPIRED
            elif record.code != code:
                status = VerifyStatus.MISMATCH
            else:
                del self._records[identifier]
                status = VerifyStatus.SUCCESS
        logger.info("Verification for %s: %s", identifier, status.value)
        return status

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [k for k, r in self._records.items() if r.is_expired(now)]
            for identifier in expired:
                del self._records[identifier]
        if expired:
            logger.info("Purged %d expired verification codes", len(expired))
        return len(expired)
