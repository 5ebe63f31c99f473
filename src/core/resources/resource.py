"""Tipo base de recurso.

Un recurso es una referencia declarada (clave + locale opcional) a contenido
externo, localizado o embebido. Arranca sin registrar ni disponible; el
ResourceManager lo encola, llama a `initialize()` y el recurso informa el
resultado con `manager.unregister(self, success)` exactamente una vez.
"""

from __future__ import annotations

import logging
import weakref
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from core.errors import ResourceManagerUndefinedError
from core.resources.paths import resolve_location

if TYPE_CHECKING:
    from core.resources.manager import ResourceManager
    from core.scene.model import Model

logger = logging.getLogger(__name__)


class Resource(ABC):
    """Declared, possibly not yet loaded, piece of model content."""

    #: Type tag used in serialized documents and in the type registry.
    TYPE: str = ""

    def __init__(
        self,
        key: str | None = None,
        uri: str | None = None,
        locale: str | None = None,
    ) -> None:
        self.type = self.TYPE
        self.key = key
        self.locale = locale
        self.uri = uri
        self.registered = False
        self.available = False
        self.error = False
        self._manager_ref: weakref.ReferenceType[ResourceManager] | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self.key!r}, locale={self.locale!r}, uri={self.uri!r})"

    # Back-reference used only to route completion; the model owns the manager.
    @property
    def resource_manager(self) -> ResourceManager | None:
        if self._manager_ref is None:
            return None
        return self._manager_ref()

    @resource_manager.setter
    def resource_manager(self, manager: ResourceManager | None) -> None:
        self._manager_ref = weakref.ref(manager) if manager is not None else None

    def require_manager(self) -> ResourceManager:
        manager = self.resource_manager
        if manager is None:
            raise ResourceManagerUndefinedError(f"resource {self.key!r} is not bound to a manager")
        return manager

    # ------------------------------------------------------------------
    # Copy / serialization
    # ------------------------------------------------------------------
    def clone(self) -> Resource:
        o = self.__class__()
        self.clone_to(o)
        return o

    def clone_to(self, o: Resource) -> None:
        if self.type:
            o.type = self.type
        if self.key:
            o.key = self.key
        if self.locale:
            o.locale = self.locale
        if self.uri:
            o.uri = self.uri

    def parse(self, o: dict[str, Any]) -> None:
        if o.get("key"):
            self.key = str(o["key"])
        if o.get("locale"):
            self.locale = str(o["locale"])
        if o.get("uri"):
            self.uri = str(o["uri"])

    def serialize(self) -> dict[str, Any]:
        o: dict[str, Any] = {"type": self.type}
        if self.key:
            o["key"] = self.key
        if self.locale:
            o["locale"] = self.locale
        if self.uri:
            o["uri"] = self.uri
        return o

    def add_to(self, model: Model) -> Resource:
        model.resource_manager.merge(self)
        return self

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------
    def matches_key(self, key: str) -> bool:
        if not self.key:
            return False
        return self.key.lower() == key.lower()

    def matches_full(self, key: str, locale: str) -> bool:
        """Same key and same full locale (`en-US` == `en-us`)."""

        if not self.matches_key(key):
            return False
        if self.locale and locale:
            return self.locale.lower() == locale.lower()
        return False

    def matches_language(self, key: str, language: str) -> bool:
        """Same key and a locale of the given language with any region."""

        if not self.matches_key(key):
            return False
        if self.locale and language:
            prefix = language.lower() + "-"
            return self.locale.lower()[: len(prefix)] == prefix
        return False

    def matches_generic(self, key: str) -> bool:
        """Same key and no locale at all."""

        if not self.matches_key(key):
            return False
        return not self.locale

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------
    def has_embedded_content(self) -> bool:
        """True when the payload is already in memory and no I/O is needed."""

        return False

    @abstractmethod
    async def load(self, location: str) -> bool:
        """Retrieve the payload from a resolved location."""

    async def retrieve(self) -> bool:
        """Resolve `uri` by prefix, sign it if a proxy is set, then `load` it."""

        manager = self.require_manager()
        if not self.uri:
            logger.warning("Resource %r has no uri and no embedded content", self.key)
            return False

        model = manager.model
        resolved = resolve_location(
            self.uri,
            base_path=model.base_path if model is not None else None,
            local_resource_path=manager.local_resource_path,
        )
        if resolved is None:
            logger.warning("Cannot resolve %r for resource %r (no base path or resource folder)", self.uri, self.key)
            return False

        location = resolved.location
        if resolved.use_proxy and manager.url_proxy is not None:
            signed = await manager.url_proxy.get_url(location)
            if not signed:
                logger.warning("URL proxy refused %r", location)
                return False
            location = signed

        return await self.load(location)

    async def initialize(self) -> None:
        """Start retrieval; always ends with exactly one `unregister` call."""

        manager = self.require_manager()
        if self.has_embedded_content():
            manager.unregister(self, True)
            return
        success = await self.retrieve()
        manager.unregister(self, success)
