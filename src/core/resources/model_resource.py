"""Recurso cuyo contenido es un modelo completo (embebido o externo).

Un `ModelResource` solo está listo cuando el modelo anidado terminó de cargar
todos sus propios recursos: cada modelo tiene su ResourceManager y la señal de
"listo" sube de las hojas a la raíz.
"""

from __future__ import annotations

import logging
from typing import Any

from core.domain.size import Size
from core.errors import ResourceInvalidError, ResourceKeyUndefinedError
from core.resources.manager import ResourceManager
from core.resources.resource import Resource
from core.scene.model import Model

logger = logging.getLogger(__name__)


def _inherit_collaborators(parent: ResourceManager, child: ResourceManager) -> None:
    if child.fetcher is None:
        child.fetcher = parent.get_fetcher()
    if child.url_proxy is None:
        child.url_proxy = parent.url_proxy


class ModelResource(Resource):
    TYPE = "model"

    def __init__(
        self,
        key: str | None = None,
        uri: str | None = None,
        locale: str | None = None,
        model: Model | None = None,
    ) -> None:
        super().__init__(key=key, uri=uri, locale=locale)
        self.model = model
        self.size: Size | None = None

    @classmethod
    def create(
        cls,
        key: str,
        uri_or_model: str | Model,
        locale: str | None = None,
    ) -> "ModelResource":
        """Referenced model from a uri, or embedded copy of an existing model."""

        if isinstance(uri_or_model, str):
            return cls(key=key, uri=uri_or_model, locale=locale)
        return cls(key=key, model=uri_or_model.clone(), locale=locale)

    def clone(self) -> "ModelResource":
        if not self.key:
            raise ResourceKeyUndefinedError("cannot clone a model resource without key")
        if self.model is not None:
            o = ModelResource.create(self.key, self.model, self.locale)
        elif self.uri:
            o = ModelResource.create(self.key, self.uri, self.locale)
        else:
            raise ResourceInvalidError(f"model resource {self.key!r} has no model or uri")
        self.clone_to(o)
        o.size = self.size
        return o

    def parse(self, o: dict[str, Any]) -> None:
        super().parse(o)
        if o.get("model"):
            self.model = Model.from_dict(o["model"])
        if o.get("size"):
            self.size = Size.parse(o["size"])

    def serialize(self) -> dict[str, Any]:
        o = super().serialize()
        # The uri stays authoritative once the external model has been fetched.
        if self.model is not None and not self.uri:
            o["model"] = self.model.serialize()
        if self.size:
            o["size"] = str(self.size)
        return o

    async def load(self, location: str) -> bool:
        """Fetch and parse the external model, then prepare its resources."""

        manager = self.require_manager()
        fetcher = manager.get_fetcher()

        parent_base = manager.model.base_path if manager.model is not None else ""
        if parent_base and location.startswith(parent_base):
            base_path, relative = parent_base, location[len(parent_base):]
        else:
            base_path, relative = "", location

        sub_model = await Model.load(base_path, relative, fetcher=fetcher)
        if sub_model is None:
            logger.warning("Nested model %r could not be loaded from %s", self.key, location)
            return False

        self.model = sub_model
        _inherit_collaborators(manager, sub_model.resource_manager)
        return await sub_model.prepare_resources(manager.current_locale_id)

    async def initialize(self) -> None:
        manager = self.require_manager()

        if self.model is not None:
            # Embedded (or already fetched): no retrieval, only the subtree.
            if manager.model is not None:
                self.model.set_base_path(manager.model.base_path)
            _inherit_collaborators(manager, self.model.resource_manager)
            success = await self.model.prepare_resources(manager.current_locale_id)
            manager.unregister(self, success)
            return

        success = await self.retrieve()
        manager.unregister(self, success)
