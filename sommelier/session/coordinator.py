from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from ..credentials.store import CredentialStore
from ..errors import CredentialValidationError
from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import AIConsultResult, CredentialMissing, Degraded, Suggestions, consult
from ..pairings.data_store import Catalog
from ..pairings.models import AIPairing, CatalogPairing, CategoryFilter
from ..pairings.retrieval import filter_pairings, normalize_query
from .browse import render_browse_view
from .models import AIFailure, AITaskStatus, ViewMode, ViewStateSnapshot

logger = logging.getLogger(__name__)

ConsultFn = Callable[[str], Awaitable[AIConsultResult]]

NO_RESULTS_MESSAGE = "No pairings found. Try exploring different flavors."
AI_RESULTS_MESSAGE = "Nothing on our list yet. Here is what the AI sommelier suggests."
CREDENTIAL_MISSING_MESSAGE = "Add your API key in settings to consult the AI sommelier."
DEGRADED_MESSAGE = "The AI sommelier could not help right now. Try again or check your API key."
CREDENTIAL_SAVED_MESSAGE = "API key saved."


@dataclass(frozen=True)
class SessionContext:
    catalog: Catalog
    credentials: CredentialStore
    consult: ConsultFn


def build_context(
    catalog: Catalog,
    credentials: CredentialStore,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> SessionContext:
    async def _consult(query: str) -> AIConsultResult:
        return await consult(query, credentials, config)

    return SessionContext(catalog=catalog, credentials=credentials, consult=_consult)


class SessionCoordinator:
    """
    Owns the view state and applies the user triggers to it.

    Browse is shown whenever the query is blank and the category is ``all``; any
    other input is Filtered. An AI consult is only offered for a Filtered view with
    no results, and its suggestions last until the next input change.
    """

    def __init__(self, context: SessionContext) -> None:
        self._ctx = context
        self._query = ""
        self._category = CategoryFilter.all
        self._mode = ViewMode.browse
        self._results: tuple[CatalogPairing | AIPairing, ...] = ()
        self._status: str | None = None
        self._ai_status = AITaskStatus.idle
        self._ai_failure: AIFailure | None = None
        # Bumped on every input change so late AI replies can be recognised as stale.
        self._revision = 0

    @property
    def context(self) -> SessionContext:
        return self._ctx

    @property
    def ai_consult_available(self) -> bool:
        return (
            self._mode == ViewMode.filtered
            and not self._results
            and self._ai_status != AITaskStatus.pending
            and bool(normalize_query(self._query))
        )

    def snapshot(self) -> ViewStateSnapshot:
        return ViewStateSnapshot(
            mode=self._mode,
            query=self._query,
            category=self._category,
            results=list(self._results),
            status_message=self._status,
            ai_status=self._ai_status,
            ai_failure=self._ai_failure,
            ai_consult_available=self.ai_consult_available,
            has_credential=self._ctx.credentials.has_credential(),
            browse=render_browse_view() if self._mode == ViewMode.browse else None,
        )

    # ── Input triggers ──────────────────────────────────────────────────

    def query_changed(self, query: str) -> ViewStateSnapshot:
        # A blank query is stored as "" so Browse always reports an empty query.
        self._query = query if normalize_query(query) else ""
        self._apply_input()
        return self.snapshot()

    def category_selected(self, category: CategoryFilter | str) -> ViewStateSnapshot:
        self._category = CategoryFilter(category)
        self._apply_input()
        return self.snapshot()

    def back(self) -> ViewStateSnapshot:
        self._query = ""
        self._category = CategoryFilter.all
        self._apply_input()
        return self.snapshot()

    def _apply_input(self) -> None:
        self._revision += 1
        if self._ai_status != AITaskStatus.pending:
            self._ai_status = AITaskStatus.idle
        self._ai_failure = None

        previous = self._mode
        if not normalize_query(self._query) and self._category == CategoryFilter.all:
            self._mode = ViewMode.browse
            self._results = ()
            self._status = None
        else:
            self._mode = ViewMode.filtered
            self._results = tuple(filter_pairings(self._ctx.catalog, self._query, self._category))
            self._status = None if self._results else NO_RESULTS_MESSAGE

        if previous != self._mode:
            logger.debug("View %s -> %s", previous.value, self._mode.value)

    # ── AI consult ──────────────────────────────────────────────────────

    async def consult_ai(self) -> ViewStateSnapshot:
        if self._ai_status == AITaskStatus.pending:
            logger.debug("AI consult already in flight, ignoring request")
            return self.snapshot()
        if not self.ai_consult_available:
            return self.snapshot()

        revision = self._revision
        query = self._query
        self._ai_status = AITaskStatus.pending
        self._ai_failure = None
        try:
            result = await self._ctx.consult(query)
        except Exception:
            logger.warning("AI consult raised, treating as degraded", exc_info=True)
            result = Degraded("consult raised")

        if revision != self._revision:
            logger.info("Input changed during AI consult for %r, dropping result", query)
            self._ai_status = AITaskStatus.idle
            return self.snapshot()

        self._apply_consult_result(result)
        return self.snapshot()

    def _apply_consult_result(self, result: AIConsultResult) -> None:
        if isinstance(result, Suggestions) and result.items:
            self._mode = ViewMode.ai_augmented
            self._results = result.items
            self._status = AI_RESULTS_MESSAGE
            self._ai_status = AITaskStatus.succeeded
            self._ai_failure = None
            logger.debug("View filtered -> ai_augmented (%d suggestions)", len(result.items))
            return

        self._ai_status = AITaskStatus.failed
        if isinstance(result, CredentialMissing):
            self._ai_failure = AIFailure.credential_missing
            self._status = CREDENTIAL_MISSING_MESSAGE
        else:
            self._ai_failure = AIFailure.degraded
            self._status = DEGRADED_MESSAGE

    # ── Settings ────────────────────────────────────────────────────────

    def credential_saved(self, key: str) -> bool:
        """Persist a new API key. Returns False and sets a status message if rejected."""
        try:
            self._ctx.credentials.save(key)
        except CredentialValidationError as exc:
            self._status = str(exc)
            return False

        self._status = CREDENTIAL_SAVED_MESSAGE
        if self._ai_failure == AIFailure.credential_missing:
            self._ai_status = AITaskStatus.idle
            self._ai_failure = None
        return True
