"""
Shared driver for the HTTP load scripts (write_load.py, read_load.py).

A fixed pool of worker tasks pulls request indices from a queue and calls
one `hit(client, i)` coroutine per index over a single pooled
`httpx.AsyncClient`. `hit` returns True when the response was what the
script expected.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

import httpx

Hit = Callable[[httpx.AsyncClient, int], Awaitable[bool]]


@dataclass
class LoadReport:
    label: str
    requested: int
    ok: int = 0
    failed: int = 0
    elapsed_s: float = 0.0
    started_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def rate(self) -> float:
        return self.ok / self.elapsed_s if self.elapsed_s > 0 else 0.0

    def summary(self) -> str:
        return "\n".join([
            f"START: {self.started_at}",
            f"TOTAL: {self.elapsed_s:.3f} s",
            f"OPS:   {self.label}={self.requested}, ok={self.ok}, fail={self.failed}",
            f"RATE:  {self.rate:.1f} req/s",
        ])


async def run_load(
    label: str,
    count: int,
    concurrency: int,
    hit: Hit,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> LoadReport:
    """
    Issue `count` calls of `hit` with at most `concurrency` in flight.

    Transport errors and undecodable bodies count as failed requests.
    """
    report = LoadReport(label=label, requested=count)
    queue: "asyncio.Queue[int]" = asyncio.Queue()
    for i in range(count):
        queue.put_nowait(i)

    async def worker(client: httpx.AsyncClient) -> None:
        while True:
            try:
                i = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                passed = await hit(client, i)
            except (httpx.HTTPError, ValueError):
                passed = False
            if passed:
                report.ok += 1
            else:
                report.failed += 1

    limits = httpx.Limits(max_connections=concurrency, max_keepalive_connections=concurrency)
    t0 = time.perf_counter()
    async with httpx.AsyncClient(limits=limits, timeout=10, transport=transport) as client:
        await asyncio.gather(*(worker(client) for _ in range(max(1, min(concurrency, count)))))
    report.elapsed_s = time.perf_counter() - t0
    return report
