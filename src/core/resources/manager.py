"""ResourceManager: resolución por locale y carga secuencial.

Por qué secuencial:
- Un solo recurso en vuelo por manager acota la actividad de red simultánea y
  mantiene los contadores de progreso monótonos y deterministas.
- El orden de carga es el orden de registro (FIFO).

Flujo:
1) `register(key)` resuelve la clave con el locale actual y encola el recurso.
2) `load()` drena la cola con un único bucle: `initialize()` del primero,
   espera a su `unregister()`, y continúa hasta vaciarla.
3) Al terminar emite el estado Idle, dispara `load_completed` y llama al
   callback de un solo uso.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable

from core.domain.locale import language_of
from core.domain.resource_state import ResourceLoaderState, ResourceState
from core.errors import ResourceManagerUndefinedError
from core.interfaces.fetcher import ContentFetcher
from core.interfaces.url_proxy import UrlProxy
from core.resources.events import ResourceManagerEvent
from core.resources.resource import Resource

if TYPE_CHECKING:
    from core.scene.model import Model

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[bool], None]

ALL_LOADED_STATUS = "All Resources Loaded."
SOME_FAILED_STATUS = "One or More Resources Failed To Load."
STARTING_STATUS = "Starting Resource Load"


class ResourceManager:
    """Load pipeline for the resources of exactly one model."""

    def __init__(
        self,
        model: Model | None = None,
        *,
        fetcher: ContentFetcher | None = None,
        url_proxy: UrlProxy | None = None,
    ) -> None:
        self.model = model
        self.local_resource_path: str | None = None
        self.current_locale_id: str | None = None
        self.pending_resources: list[Resource] = []
        self.pending_resource_count = 0
        self.total_resource_count = 0
        self.number_loaded = 0
        self.listener_event: ResourceManagerEvent[ResourceState] = ResourceManagerEvent()
        self.load_completed: ResourceManagerEvent[bool] = ResourceManagerEvent()
        self.completion_callback: CompletionCallback | None = None
        self.resource_failed = False
        self.url_proxy = url_proxy
        self.fetcher = fetcher
        self._step: asyncio.Future[bool] | None = None
        self._current: Resource | None = None
        self._lock: asyncio.Lock | None = None

    def get_fetcher(self) -> ContentFetcher:
        """Configured fetcher, or a default HTTP/filesystem one built on demand."""

        if self.fetcher is None:
            from adapters.http_client import HttpContentFetcher  # noqa: PLC0415

            self.fetcher = HttpContentFetcher()
        return self.fetcher

    def _resources(self) -> list[Resource]:
        if self.model is None:
            raise ResourceManagerUndefinedError("resource manager is not attached to a model")
        return self.model.resources

    # ------------------------------------------------------------------
    # Resource collection
    # ------------------------------------------------------------------
    def add(self, resource: Resource) -> None:
        resource.resource_manager = self
        self._resources().append(resource)

    def merge(self, resource: Resource) -> Resource:
        """Upsert by (key, locale presence); returns the resource kept in the model."""

        resources = self._resources()
        replaced: Resource | None = None
        for existing in resources:
            if not resource.key or not existing.matches_key(resource.key):
                continue
            if resource.locale:
                if existing.locale and existing.locale.lower() == resource.locale.lower():
                    replaced = existing
            elif not existing.locale:
                replaced = existing
            if replaced is not None:
                replaced.uri = resource.uri
                break
        if replaced is not None:
            return replaced
        resource.resource_manager = self
        resources.append(resource)
        return resource

    # ------------------------------------------------------------------
    # Locale resolution
    # ------------------------------------------------------------------
    def find_best_resource(self, key: str, locale: str | None) -> Resource | None:
        """Best resource for `key` following the locale fallback tiers.

        1. exact key and locale
        2. key with the bare language of the request (`en` for `en-US`)
        3. key with another region of the same language (`en-GB`)
        4. bare-language request matched against regional variants
        5. key with no locale
        6. key with any locale
        """

        resources = self._resources()
        language: str | None = None

        if locale:
            for compare in resources:
                if compare.matches_full(key, locale):
                    return compare

            if "-" in locale:
                language = language_of(locale)
                for compare in resources:
                    if compare.matches_full(key, language):
                        return compare

            if "-" in locale:
                language = language_of(locale)
                for compare in resources:
                    if compare.matches_language(key, language):
                        return compare

            # Kept for parity with tier 3: `language` is only set when the
            # locale has a region, so this branch cannot match today.
            if "-" not in locale and language:
                for compare in resources:
                    if compare.matches_language(key, language):
                        return compare

        for compare in resources:
            if compare.matches_generic(key):
                return compare

        for compare in resources:
            if compare.matches_key(key):
                return compare

        return None

    def get(self, key: str, locale_id: str | None = None) -> Resource | None:
        locale = locale_id if locale_id else self.current_locale_id
        return self.find_best_resource(key, locale)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(self, key: str) -> None:
        """Queue the best match for `key`; unknown keys are ignored."""

        resource = self.get(key, self.current_locale_id)
        if resource is None:
            logger.debug("No resource matches key %r (locale %r)", key, self.current_locale_id)
            return
        if resource.resource_manager is None:
            resource.resource_manager = self
        if resource.type == "text" and not resource.uri:
            # Inline text needs no retrieval.
            resource.available = True
            return
        # Only `registered` is checked: a resource loaded in an earlier pass
        # is queued again and then skipped by the drain loop.
        if not resource.registered:
            resource.registered = True
            self.pending_resources.append(resource)
            self.pending_resource_count += 1
            self.total_resource_count += 1

    def unregister(self, resource: Resource, success: bool) -> None:
        """Completion funnel; every resource calls this once per attempt."""

        if resource not in self.pending_resources:
            logger.warning("Ignoring completion of %r: not pending", resource)
            return

        self.pending_resources.remove(resource)
        resource.registered = False
        self.pending_resource_count -= 1
        if success:
            resource.available = True
            resource.error = False
            self.number_loaded += 1
            code = ResourceLoaderState.RESOURCE_COMPLETE
        else:
            resource.error = True
            resource.available = False
            self.resource_failed = True
            code = ResourceLoaderState.RESOURCE_FAILED
            logger.warning("Resource %r failed to load (%s)", resource.key, resource.uri or "embedded")

        self._notify(code, resource.uri or resource.key or "")

        # Only the resource in flight may advance the drain loop.
        if resource is self._current and self._step is not None and not self._step.done():
            self._step.set_result(success)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def _notify(self, code: ResourceLoaderState, status: str) -> None:
        state = ResourceState(self.number_loaded, self.total_resource_count, code, status)
        logger.debug("%s", state)
        self.listener_event.trigger(self, state)

    def oncomplete(self, success: bool) -> bool:
        self._notify(
            ResourceLoaderState.IDLE,
            ALL_LOADED_STATUS if success else SOME_FAILED_STATUS,
        )
        self.load_completed.trigger(self, success)
        callback = self.completion_callback
        if callback is not None:
            callback(success)
        return success

    def _next_pending(self) -> Resource | None:
        to_load = [res for res in self.pending_resources if not res.available]
        self.pending_resource_count = len(to_load)
        return to_load[0] if to_load else None

    async def load(self, callback: CompletionCallback | None = None) -> bool:
        """Load every registered resource, one at a time.

        Returns the aggregated result (False if any resource failed) and
        also hands it to `callback`.
        """

        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            self.resource_failed = False
            self.completion_callback = callback
            if self.pending_resource_count == 0:
                return self.oncomplete(True)

            self._notify(ResourceLoaderState.LOADING, STARTING_STATUS)
            loop = asyncio.get_running_loop()
            while True:
                resource = self._next_pending()
                if resource is None:
                    # Only already-available leftovers: still report failures of this pass.
                    return self.oncomplete(not self.resource_failed)

                self._notify(ResourceLoaderState.RESOURCE_START, resource.uri or resource.key or "")
                self._step = loop.create_future()
                self._current = resource
                try:
                    await resource.initialize()
                    # Resolved by unregister(); never resolving means the
                    # resource implementation forgot to report back.
                    await self._step
                finally:
                    self._step = None
                    self._current = None

                if self.pending_resource_count == 0:
                    return self.oncomplete(not self.resource_failed)
