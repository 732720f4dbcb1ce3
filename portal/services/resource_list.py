"""
resource_list.py - Resource list controller
Single responsibility: keep one screen's list in sync with the backend.

One controller per screen instance. It owns the filter state, the fetched
items, the selection and the pending flags; views only read ``state`` and
call the operations below.
"""

import logging
from typing import Any, Awaitable, Callable, Protocol

from portal.api.errors import ApiError
from portal.config import DEBOUNCE_SECONDS
from portal.domain.filters import FilterState, build_query
from portal.domain.models import (
    MODAL_CREATE,
    MODAL_DELETE,
    MODAL_EDIT,
    ResourceSpec,
    ScreenState,
    Selection,
)
from portal.services.debounce import Debouncer, Spawner
from portal.services.normalize import normalize_list

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ResourceListController:
    def __init__(
        self,
        spec: ResourceSpec,
        client,
        notifier: Notifier,
        guard: Callable[[], bool] | None = None,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        spawn: Spawner | None = None,
    ):
        self.spec = spec
        self.client = client
        self.notifier = notifier
        self._guard = guard
        self.state = ScreenState(filter_state=FilterState.defaults(spec.facets))
        self._listeners: list[Callable[[ScreenState], None]] = []
        self._fetch_seq = 0
        self._debouncer = Debouncer(
            self.refetch, delay=debounce_seconds, guard=guard, spawn=spawn
        )

    # ------------------------------------------------------------------
    # Change listeners
    # ------------------------------------------------------------------

    def on_change(self, listener: Callable[[ScreenState], None]) -> None:
        self._listeners.append(listener)

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self):
        """Screen mount: schedule the first fetch through the debounce path."""
        return self._debouncer.trigger()

    def dispose(self) -> None:
        """Screen teardown: disarm the timer and drop listeners."""
        self._debouncer.close()
        self._listeners.clear()

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def build_request(self) -> tuple[str, dict[str, str]]:
        params = build_query(
            self.state.filter_state, self.spec.facets, self.spec.fixed_params
        )
        return self.spec.list_path, params

    def set_search(self, text: str | None):
        return self.set_filter(search_text=text or "")

    def set_filter(self, search_text: str | None = None, **facets):
        """Apply a partial filter change and (re)arm the debounced fetch."""
        known = {f.name for f in self.spec.facets}
        unknown = set(facets) - known
        if unknown:
            raise KeyError(f"Unknown facet(s) for {self.spec.key}: {sorted(unknown)}")
        if search_text is not None:
            self.state.filter_state.search_text = search_text
        self.state.filter_state.facets.update(facets)
        self._changed()
        return self._debouncer.trigger()

    def reset_filters(self):
        self.state.filter_state = FilterState.defaults(self.spec.facets)
        self._changed()
        return self._debouncer.trigger()

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    async def refetch(self) -> list:
        """Fetch the list for the current filters and replace ``state.items``.

        Only the most recently issued fetch may write the list; an older
        response arriving late is dropped.
        """
        if self._guard is not None and not self._guard():
            logger.debug("Fetch of %s skipped by guard", self.spec.plural)
            return self.state.items
        self._fetch_seq += 1
        seq = self._fetch_seq
        path, params = self.build_request()
        self.state.loading = True
        self._changed()
        try:
            body = await self.client.get(path, params=params)
        except ApiError as exc:
            if seq != self._fetch_seq:
                logger.debug("Dropping stale failure for %s (#%s)", path, seq)
                return self.state.items
            logger.error("Error fetching %s: %s", self.spec.plural, exc)
            self.state.items = []
            self.notifier.error(exc.user_message(self.spec.load_failure))
        else:
            if seq != self._fetch_seq:
                logger.debug("Dropping stale response for %s (#%s)", path, seq)
                return self.state.items
            records = normalize_list(body)
            items = [r for r in records if isinstance(r, dict)]
            if len(items) != len(records):
                logger.debug(
                    "Skipped %d malformed %s records",
                    len(records) - len(items),
                    self.spec.plural,
                )
            if self.spec.transform:
                items = [self.spec.transform(item) for item in items]
            if self.spec.order:
                items = self.spec.order(items)
            self.state.items = items
        finally:
            if seq == self._fetch_seq:
                self.state.loading = False
                self._changed()
        return self.state.items

    # ------------------------------------------------------------------
    # Selection / modal
    # ------------------------------------------------------------------

    def open_create(self) -> None:
        self.state.selection = None
        self.state.modal = MODAL_CREATE
        self._changed()

    def open_edit(self, record: dict) -> None:
        self.state.selection = Selection(MODAL_EDIT, record)
        self.state.modal = MODAL_EDIT
        self._changed()

    def open_delete(self, record: dict) -> None:
        self.state.selection = Selection(MODAL_DELETE, record)
        self.state.modal = MODAL_DELETE
        self._changed()

    def close_modal(self) -> None:
        self.state.modal = None
        self.state.selection = None
        self._changed()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def _submit(self, action: str, call: Callable[[], Awaitable[Any]]) -> bool:
        self.state.submitting = True
        self._changed()
        ok = False
        try:
            await call()
            ok = True
        except ApiError as exc:
            logger.error("Failed to %s %s: %s", action, self.spec.label, exc)
            self.notifier.error(exc.user_message(self.spec.message(action, ok=False)))
        finally:
            self.state.submitting = False
            self._changed()

        if ok:
            self.notifier.success(self.spec.message(action, ok=True))
            self.close_modal()
            await self.refetch()
        return ok

    async def create(self, payload: dict) -> bool:
        return await self._submit(
            "create", lambda: self.client.post(self.spec.new_path, payload)
        )

    async def update(self, record_id, payload: dict) -> bool:
        composite = self.spec.composite
        if composite is None:
            return await self._submit(
                "update",
                lambda: self.client.patch(self.spec.path_for(record_id), payload),
            )

        async def composite_call():
            account, profile = composite.split(payload)
            await self.client.patch(self.spec.path_for(record_id), account)
            if not profile:
                return
            try:
                await self.client.patch(
                    f"{self.spec.path_for(record_id)}/{composite.profile_path}",
                    profile,
                )
            except ApiError:
                # No rollback: the account change is already stored server-side
                logger.warning(
                    "%s %s partially updated: account saved, %s profile rejected",
                    self.spec.label,
                    record_id,
                    composite.profile_path,
                )
                raise

        return await self._submit("update", composite_call)

    async def remove(self, record_id) -> bool:
        return await self._submit(
            "delete", lambda: self.client.delete(self.spec.path_for(record_id))
        )
