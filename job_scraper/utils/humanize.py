import asyncio
import random


async def random_delay(min_seconds: float = 1.0, max_seconds: float = 3.0) -> float:
    """Sleep for a random duration to simulate human behavior."""
    delay = random.uniform(min_seconds, max_seconds)
    await asyncio.sleep(delay)
    return delay
