from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from shared.diagnostics import log_memory_usage, log_thread_status
from tiles.processor import TileProcessor

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Sequence

    import numpy as np

    from domain.models import ShadeSettings
    from tiles.sink import TileSink
    from tiles.source import TileSource

logger = logging.getLogger(__name__)

T = TypeVar('T')


async def run_tiles(
    tiles: Iterable[tuple[int, int]],
    *,
    render_one: Callable[[int, int], T | None],
    concurrency: int,
    progress_step: Callable[[int], Awaitable[None]] | None = None,
) -> list[T | None]:
    """
    Run render_one for every tile origin, at most `concurrency` at a time.

    render_one is synchronous and CPU-bound; it runs in a worker thread. A
    tile whose render raises is logged and reported as None, the rest of
    the batch continues. Results follow the order of `tiles`.
    """
    sem = asyncio.Semaphore(concurrency)

    async def worker(idx: int, tx: int, ty: int) -> T | None:
        async with sem:
            try:
                result = await asyncio.to_thread(render_one, tx, ty)
            except Exception:
                logger.exception('Tile #%d at (%d, %d) failed', idx, tx, ty)
                result = None
        if progress_step:
            await progress_step(1)
        return result

    return list(
        await asyncio.gather(*(worker(i, x, y) for i, (x, y) in enumerate(tiles)))
    )


@dataclass
class BatchResult:
    """Outcome of render_batch."""

    tiles: list[np.ndarray | None]
    written: list[Any]

    @property
    def produced(self) -> int:
        return sum(t is not None for t in self.tiles)

    @property
    def skipped(self) -> int:
        return len(self.tiles) - self.produced


async def render_batch(
    source: TileSource,
    origins: Sequence[tuple[int, int]],
    settings: ShadeSettings,
    *,
    sink: TileSink | None = None,
    extents: Sequence[Any] | None = None,
) -> BatchResult:
    """
    Render many tiles from one source and optionally hand them to a sink.

    extents, when given, must match origins one to one; otherwise the
    origin itself is passed to the sink as the extent.
    """
    if extents is not None and len(extents) != len(origins):
        msg = f'Got {len(extents)} extents for {len(origins)} tiles'
        raise ValueError(msg)

    processor = TileProcessor(source, settings)
    log_memory_usage('before tile batch')
    log_thread_status('before tile batch')
    logger.info(
        'Tile batch: %d tiles, mode=%s, concurrency=%d',
        len(origins),
        settings.render_mode.value,
        settings.concurrency,
    )

    tiles = await run_tiles(
        origins,
        render_one=processor.process,
        concurrency=settings.concurrency,
    )

    written: list[Any] = []
    if sink is not None:
        for i, tile in enumerate(tiles):
            if tile is None:
                continue
            extent = extents[i] if extents is not None else origins[i]
            written.append(sink.write(tile, extent, settings.filter_factor))

    result = BatchResult(tiles=tiles, written=written)
    logger.info(
        'Tile batch done: produced=%d, skipped=%d', result.produced, result.skipped
    )
    log_memory_usage('after tile batch')
    log_thread_status('after tile batch')
    return result
