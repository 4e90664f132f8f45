"""Process-wide single-flight gate for scans."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class ScanInProgressError(RuntimeError):
    """Raised when a scan is requested while another one holds the gate."""

    def __init__(self, message: str = "A scan is already in progress."):
        super().__init__(message)


class ScanLease:
    """Ownership of the gate; released exactly once, on context exit or :meth:`release`."""

    def __init__(self, guard: "ScanGuard"):
        self._guard = guard
        self.released = False

    def release(self) -> None:
        if not self.released:
            self.released = True
            self._guard._release(self)

    def __enter__(self) -> "ScanLease":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class ScanGuard:
    """Capacity-one semaphore with a non-blocking acquire.

    All callers run on one event loop and :meth:`acquire` never awaits, so the
    check and the claim happen in the same step.
    """

    def __init__(self):
        self._lease: Optional[ScanLease] = None

    @property
    def is_scanning(self) -> bool:
        return self._lease is not None

    def acquire(self) -> ScanLease:
        if self._lease is not None:
            raise ScanInProgressError()
        self._lease = ScanLease(self)
        logger.debug("Scan gate acquired")
        return self._lease

    def _release(self, lease: ScanLease) -> None:
        if self._lease is lease:
            self._lease = None
            logger.debug("Scan gate released")
