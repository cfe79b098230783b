from __future__ import annotations

import logging
from datetime import date
from typing import Protocol

from comps.config import PipelineConfig
from comps.data_models import Listing
from comps.export import export_filename, export_rows, to_csv
from comps.normalization import normalize_batch
from comps.offer import offer_clipboard_text
from comps.pipeline import PipelineParams, PipelineResult, run_pipeline
from service.marketcheck import DataSourceError, ListingSource, SearchQuery

logger = logging.getLogger(__name__)


class FileMaterializer(Protocol):
    def __call__(self, name: str, text: str) -> None: ...


class ClipboardWriter(Protocol):
    def __call__(self, text: str) -> None: ...


class ComparablesSession:
    """Owns the working set of canonical listings for one operator.

    Each search is tagged with a generation number. A response that comes
    back after a newer search has started is dropped, so the working set
    always reflects the latest search issued.
    """

    def __init__(self, source: ListingSource, config: PipelineConfig | None = None) -> None:
        self.source = source
        self.config = config or PipelineConfig()
        self._listings: tuple[Listing, ...] = ()
        self._generation = 0

    @property
    def listings(self) -> tuple[Listing, ...]:
        return self._listings

    @property
    def generation(self) -> int:
        return self._generation

    def default_params(self) -> PipelineParams:
        return PipelineParams.from_config(self.config)

    async def search(self, query: SearchQuery) -> bool:
        """Fetch and normalize a batch. Returns False if the result was superseded."""
        self._generation += 1
        generation = self._generation
        try:
            raw = await self.source.fetch(query)
        except DataSourceError:
            logger.exception(
                "Comparables search failed; keeping existing listings",
                extra={"extra_data": {"generation": generation, "listings": len(self._listings)}},
            )
            raise

        if generation != self._generation:
            logger.info(
                "Discarding stale search result",
                extra={"extra_data": {"generation": generation, "current_generation": self._generation}},
            )
            return False

        self._listings = tuple(normalize_batch(raw))
        logger.info(
            "Working set replaced",
            extra={"extra_data": {"generation": generation, "listings": len(self._listings)}},
        )
        return True

    def clear(self) -> None:
        self._generation += 1
        self._listings = ()

    def view(self, params: PipelineParams | None = None) -> PipelineResult:
        return run_pipeline(self._listings, params or self.default_params())

    def export_csv(self, params: PipelineParams | None = None, today: date | None = None) -> tuple[str, str]:
        result = self.view(params)
        text = to_csv(export_rows(result.view))
        name = export_filename(today or date.today(), prefix=self.config.export_filename_prefix)
        return name, text

    def save_csv(
        self,
        materialize_file: FileMaterializer,
        params: PipelineParams | None = None,
        today: date | None = None,
    ) -> str | None:
        name, text = self.export_csv(params, today)
        if not text:
            return None
        materialize_file(name, text)
        return name

    def copy_offer(self, write_clipboard: ClipboardWriter, params: PipelineParams | None = None) -> str | None:
        text = offer_clipboard_text(self.view(params).offer)
        if not text:
            return None
        write_clipboard(text)
        return text
