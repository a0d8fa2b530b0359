"""Timing helpers that log the duration of report builds and other operations."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Iterator, Optional


@dataclass
class _Timer:
    label: str
    logger: logging.Logger
    level: int
    unit: str
    count: int = 0
    start: float = field(default_factory=perf_counter)

    def add(self, amount: int = 1) -> None:
        self.count += amount

    def finish(self, success: bool = True) -> None:
        elapsed = perf_counter() - self.start
        if success:
            message = f"{self.label} completed in {elapsed:.3f}s"
            if self.count:
                message += f" ({self.count:,} {self.unit})"
            self.logger.log(self.level, message)
        else:
            fail_message = f"{self.label} failed after {elapsed:.3f}s"
            if self.count:
                fail_message += f" ({self.count:,} {self.unit})"
            self.logger.error(fail_message)


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
    unit: str = "rows",
) -> Iterator[_Timer]:
    """Time the wrapped block and log its outcome.

    Args:
        label: Description of the operation being timed
        logger: Logger instance to use (defaults to "hrpanel.timer")
        level: Logging level for the success message
        unit: Unit name used when the block reports processed items via ``add``
    """
    log = logger or logging.getLogger("hrpanel.timer")
    timer = _Timer(label=label, logger=log, level=level, unit=unit)
    try:
        yield timer
    except Exception:
        timer.finish(success=False)
        raise
    else:
        timer.finish(success=True)
