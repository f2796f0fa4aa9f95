"""Scheduler providers.

AsyncioScheduler is the production scheduler.  Tests use a manual scheduler
with a hand-advanced clock (see ``tests/conftest.py``).
"""

from quicksearch.providers.scheduler.asyncio_scheduler import AsyncioScheduler

__all__ = ["AsyncioScheduler"]
