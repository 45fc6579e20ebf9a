# src/services/search_controller.py

"""Debounced pull queries with last-issued-wins reconciliation."""

import asyncio
import logging

from src.config.settings import Settings
from src.models.product import Product
from src.models.query import SearchQuery
from src.services.catalog_client import CatalogClient, CatalogQueryError
from src.services.scheduling import Scheduler, TimerHandle
from src.ui.renderer import Renderer

logger = logging.getLogger("catalog_sync.search")

QUERY_ERROR_MESSAGE = "Error loading products."


class SearchController:
    """Owns the search inputs and feeds query results to the renderer.

    Typed input is debounced: every keystroke cancels the pending timer
    and schedules a new one, so a query only fires after
    ``SEARCH_DEBOUNCE`` seconds of quiet.  Category changes fire at once.

    Several queries can be in flight together.  Each one is stamped with
    a monotonically increasing sequence number and its response is only
    rendered if no newer query has been issued since; late answers to
    superseded queries are dropped.
    """

    def __init__(
        self,
        client: CatalogClient,
        renderer: Renderer,
        scheduler: Scheduler,
        debounce: float | None = None,
    ) -> None:
        self.client = client
        self.renderer = renderer
        self.scheduler = scheduler
        self.debounce: float = (
            Settings.SEARCH_DEBOUNCE if debounce is None else debounce
        )
        self.term: str = ""
        self.category: str = ""
        self.issued: list[SearchQuery] = []
        self.last_results: list[Product] | None = None
        self._sequence: int = 0
        self._debounce_handle: TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    # ── Input events ─────────────────────────────────────

    def on_input_changed(self, term: str) -> None:
        """Record the typed term and (re)start the debounce timer."""
        self.term = term
        self._cancel_debounce()
        self._debounce_handle = self.scheduler.call_later(
            self.debounce, self._debounce_elapsed
        )

    def on_category_changed(self, category: str | None) -> None:
        """Record the category and query immediately."""
        self.category = category or ""
        self._cancel_debounce()
        self.trigger()

    def refresh(self) -> None:
        """Re-run the current query now (manual retry)."""
        self._cancel_debounce()
        self.trigger()

    # ── Query dispatch ───────────────────────────────────

    def current_query(self) -> SearchQuery:
        return SearchQuery(
            term=self.term or None, category=self.category or None,
        )

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    @property
    def pending(self) -> bool:
        """True while a debounced query is waiting to fire."""
        return self._debounce_handle is not None

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def trigger(self) -> asyncio.Task[None]:
        """Start ``fetch_and_render`` as a background task."""
        task = asyncio.ensure_future(self.fetch_and_render())
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    async def fetch_and_render(self) -> None:
        """Issue the current query and render it unless superseded."""
        query = self.current_query()
        self._sequence += 1
        sequence = self._sequence
        self.issued.append(query)
        logger.debug("Issuing query #%d %s", sequence, query.to_params())

        try:
            products: list[Product] = await asyncio.to_thread(
                self.client.search, query
            )
        except CatalogQueryError as exc:
            if sequence != self._sequence:
                logger.debug(
                    "Dropping failure of superseded query #%d: %s",
                    sequence,
                    exc,
                )
                return
            logger.error(
                "Query #%d %s failed: %s",
                sequence,
                query.to_params(),
                exc,
                exc_info=exc,
            )
            self.renderer.render_error(QUERY_ERROR_MESSAGE)
            return

        if sequence != self._sequence:
            logger.debug(
                "Dropping stale response for query #%d (latest is #%d)",
                sequence,
                self._sequence,
            )
            return

        self.last_results = products
        self.renderer.render(products)

    async def wait_idle(self) -> None:
        """Wait until every in-flight query has settled."""
        while self._tasks:
            await asyncio.gather(
                *list(self._tasks), return_exceptions=True
            )

    def close(self) -> None:
        """Cancel the pending debounce and any in-flight queries."""
        self._cancel_debounce()
        for task in list(self._tasks):
            task.cancel()

    # ── Private helpers ──────────────────────────────────

    def _debounce_elapsed(self) -> None:
        self._debounce_handle = None
        self.trigger()

    def _cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def _task_done(self, task: "asyncio.Task[None]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Unexpected error while refreshing the grid: %s",
                exc,
                exc_info=exc,
            )
