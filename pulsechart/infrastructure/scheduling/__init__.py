from pulsechart.infrastructure.scheduling.asyncio_scheduler import AsyncioScheduler

__all__ = ["AsyncioScheduler"]
