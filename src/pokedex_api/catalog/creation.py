"""
Single-writer queue for record creation.

Requests enqueue a job and await its future; one background worker
allocates the id and inserts each record in turn, inside its own store
session. Two concurrent creations therefore never read the same max id.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, AsyncContextManager, Callable, Dict, Optional

from ..api.models import PokemonCreate
from ..db.pokemon_store import PokemonStore
from .allocator import create_pokemon

logger = logging.getLogger("pokedex.creation")

StoreFactory = Callable[[], AsyncContextManager[PokemonStore]]


@dataclass
class CreationJob:
    """A pending create request and the future its caller awaits."""
    draft: PokemonCreate
    future: "asyncio.Future[Dict[str, Any]]"


class PokemonCreationQueue:
    """Serializes id allocation and insertion through one worker task."""

    def __init__(self, store_factory: StoreFactory) -> None:
        self._store_factory = store_factory
        self._queue: Optional[asyncio.Queue[CreationJob]] = None
        self._worker: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self) -> None:
        """Start the worker on the running event loop."""
        if self.running:
            return
        self._queue = asyncio.Queue()
        self._worker = asyncio.create_task(self._run(), name="pokemon-creation-worker")
        logger.info("Creation worker started.")

    async def stop(self) -> None:
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

        # Jobs left behind would otherwise hang their callers forever
        while self._queue is not None and not self._queue.empty():
            job = self._queue.get_nowait()
            if not job.future.done():
                job.future.set_exception(RuntimeError("Creation queue stopped"))
        logger.info("Creation worker stopped.")

    async def submit(self, draft: PokemonCreate) -> Dict[str, Any]:
        """
        Enqueue a creation and wait for the stored record.

        Errors raised while allocating or inserting are re-raised here.
        """
        if not self.running:
            raise RuntimeError("Creation queue is not running")

        future = asyncio.get_running_loop().create_future()
        await self._queue.put(CreationJob(draft=draft, future=future))
        return await future

    async def _run(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                await self._process(job)
            finally:
                self._queue.task_done()

    async def _process(self, job: CreationJob) -> None:
        try:
            async with self._store_factory() as store:
                record = await create_pokemon(store, job.draft)
        except asyncio.CancelledError:
            # The job is already off the queue, so stop() cannot drain it
            if not job.future.done():
                job.future.set_exception(RuntimeError("Creation queue stopped"))
            raise
        except Exception as exc:
            logger.warning("Failed to create pokemon %r: %s", job.draft.name.english, exc)
            if not job.future.done():
                job.future.set_exception(exc)
            return

        logger.info("Created pokemon %s (%s)", record["id"], record["name"]["english"])
        if not job.future.done():
            job.future.set_result(record)
