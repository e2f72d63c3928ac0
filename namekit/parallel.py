#!/usr/bin/env python3
"""
Parallel Fan-Out
================
Thread-pool fan-out / fan-in for AI validation and per-TLD domain lookups.

Every fan-out has a deadline. Work that has not finished by then, or that
raised, is reported as missing so the caller can fall back to a degraded
value for that item.

Usage:
    from namekit.parallel import ParallelConfig, fan_out

    config = ParallelConfig()
    results = fan_out(validate, names,
                      max_workers=config.ai_workers,
                      timeout=config.validation_timeout)
    for name in names:
        print(name, results.get(name))
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, Optional

from namekit.settings import get_setting

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class ParallelConfig:
    """Configuration for parallel fan-out."""
    ai_workers: Optional[int] = None            # Concurrent AI validation calls
    domain_workers: Optional[int] = None        # Concurrent TLD lookups per name
    validation_timeout: Optional[float] = None  # Budget for one validation fan-out
    domain_timeout: Optional[float] = None      # Budget for one domain fan-out

    def __post_init__(self):
        cfg = get_setting("parallel", {}) or {}
        if self.ai_workers is None:
            self.ai_workers = cfg.get("ai_workers")
        if self.domain_workers is None:
            self.domain_workers = cfg.get("domain_workers")
        if self.validation_timeout is None:
            self.validation_timeout = cfg.get("validation_timeout")
        if self.domain_timeout is None:
            self.domain_timeout = cfg.get("domain_timeout")

        missing = [
            name for name, value in (
                ("ai_workers", self.ai_workers),
                ("domain_workers", self.domain_workers),
                ("validation_timeout", self.validation_timeout),
                ("domain_timeout", self.domain_timeout),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"parallel settings missing in app.yaml: {', '.join(missing)}")


# =============================================================================
# Fan-out
# =============================================================================

def fan_out(func: Callable[[Any], Any],
            items: Iterable[Hashable],
            max_workers: int,
            timeout: Optional[float] = None,
            label: str = "task") -> Dict[Hashable, Any]:
    """
    Run func(item) for every item concurrently and wait for all of them.

    Args:
        func: Callable applied to each item
        items: Hashable work items (duplicates are run once)
        max_workers: Thread pool size
        timeout: Seconds to wait for the whole set; None waits forever
        label: Used in log messages

    Returns:
        Mapping item -> result for every call that finished in time
        without raising. Missing keys mean failed or timed out.
    """
    unique = list(dict.fromkeys(items))
    if not unique:
        return {}

    results: Dict[Hashable, Any] = {}
    executor = ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(unique))))
    try:
        future_to_item = {executor.submit(func, item): item for item in unique}
        done, not_done = wait(future_to_item, timeout=timeout)

        for future in done:
            item = future_to_item[future]
            try:
                results[item] = future.result()
            except Exception as e:
                logger.warning(f"{label} failed for {item}: {e}")

        if not_done:
            logger.warning(f"{label}: {len(not_done)} of {len(unique)} calls "
                           f"did not finish within {timeout}s")
            for future in not_done:
                future.cancel()
    finally:
        # Don't block on stragglers; their results are discarded
        executor.shutdown(wait=False)

    return results


__all__ = [
    'ParallelConfig',
    'fan_out',
]
