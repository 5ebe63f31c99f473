"""Modelo: elementos ordenados + recursos compartidos + su ResourceManager.

Por qué el modelo orquesta la carga:
- Solo el modelo sabe qué claves referencian realmente su relleno y sus
  elementos; registra esas claves y delega la carga en su manager.
- Un modelo y su manager nacen y mueren juntos; los modelos anidados (vía
  `ModelResource`) tienen su propio manager independiente.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterator

from pydantic import ValidationError

from core.domain.documents import ModelDocument, entry_payload
from core.domain.size import Size
from core.errors import ElementAlreadyExistsError, ModelDocumentError
from core.interfaces.fetcher import ContentFetcher
from core.interfaces.url_proxy import UrlProxy
from core.resources.manager import ResourceManager
from core.resources.registry import ResourceRegistry, default_registry
from core.resources.resource import Resource
from core.scene.element_registry import ElementRegistry, default_element_registry
from core.scene.elements import ElementBase

logger = logging.getLogger(__name__)

MODEL_FILE_NAME = "model.json"


class Model(ElementBase):
    """Container of rendered elements and the resources they reference."""

    TYPE = "model"
    FIELDS = ElementBase.FIELDS + ("resources", "elements")

    def __init__(
        self,
        type_tag: str | None = None,
        *,
        fetcher: ContentFetcher | None = None,
        url_proxy: UrlProxy | None = None,
    ) -> None:
        super().__init__(type_tag)
        self.base_path = "/"
        self.model_path: str | None = None
        self.elements: list[ElementBase] = []
        self.resources: list[Resource] = []
        self.resource_manager = ResourceManager(self, fetcher=fetcher, url_proxy=url_proxy)

    # ------------------------------------------------------------------
    # Construction / parsing
    # ------------------------------------------------------------------
    @classmethod
    def create(cls, width: float, height: float) -> "Model":
        model = cls()
        model.size = Size(width, height)
        return model

    @classmethod
    def from_dict(
        cls,
        data: Any,
        *,
        resource_registry: ResourceRegistry | None = None,
        element_registry: ElementRegistry | None = None,
    ) -> "Model":
        """Build a model from a decoded JSON document.

        Resource and element entries with unknown type tags are skipped.
        """

        try:
            document = ModelDocument.model_validate(data)
        except ValidationError as exc:
            raise ModelDocumentError(f"invalid model document: {exc}") from exc

        resource_registry = resource_registry or default_registry()
        element_registry = element_registry or default_element_registry()

        model = cls()
        # Field parsers (sizes, nested models) raise plain ValueError/KeyError/TypeError.
        try:
            model.parse(document.header())

            for entry in document.resources:
                resource = resource_registry.create(entry.type)
                if resource is None:
                    logger.debug("Skipping resource %r of unknown type %r", entry.key, entry.type)
                    continue
                resource.parse(entry_payload(entry))
                model.resource_manager.add(resource)

            for entry in document.elements:
                element = element_registry.create(entry.type)
                if element is None:
                    logger.debug("Skipping element of unknown type %r", entry.type)
                    continue
                element.parse(entry_payload(entry))
                model.add(element)
        except (ValueError, KeyError, TypeError) as exc:
            raise ModelDocumentError(f"invalid model document: {exc!r}") from exc

        return model

    @classmethod
    def parse_json(cls, text: str, **kwargs: Any) -> "Model":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ModelDocumentError(f"model document is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ModelDocumentError("model document must be a JSON object")
        return cls.from_dict(data, **kwargs)

    @classmethod
    async def load(
        cls,
        base_path: str,
        uri: str,
        *,
        fetcher: ContentFetcher | None = None,
    ) -> "Model | None":
        """Fetch and parse `<base_path><uri>`; None when retrieval or parsing fails.

        A `uri` ending in `/` designates a folder holding `model.json`.
        """

        if uri.endswith("/"):
            model_path = base_path + uri
            model_file = model_path + MODEL_FILE_NAME
        else:
            model_path = base_path + uri[: uri.rfind("/") + 1]
            model_file = base_path + uri

        if fetcher is None:
            from adapters.http_client import HttpContentFetcher  # noqa: PLC0415

            fetcher = HttpContentFetcher()

        text = await fetcher.fetch_text(model_file)
        if text is None:
            logger.warning("Model document not retrieved: %s", model_file)
            return None
        try:
            model = cls.parse_json(text)
        except ModelDocumentError as exc:
            logger.warning("Model document %s rejected: %s", model_file, exc)
            return None

        model.set_base_path(base_path)
        model.set_model_path(model_path)
        model.resource_manager.fetcher = fetcher
        return model

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def set_base_path(self, base_path: str) -> None:
        self.base_path = base_path

    def set_model_path(self, path: str, resource_folder: str | None = None) -> None:
        """Set the model folder; private resources live in it or in `resource_folder`."""

        if path and not path.endswith("/"):
            path += "/"
        self.model_path = path
        if resource_folder:
            folder = resource_folder if resource_folder.endswith("/") else resource_folder + "/"
            self.resource_manager.local_resource_path = path + folder
        else:
            self.resource_manager.local_resource_path = path

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------
    def add(self, element: ElementBase) -> int:
        if any(existing is element for existing in self.elements):
            raise ElementAlreadyExistsError(f"{element!r} is already in the model")
        element.model = self
        self.elements.append(element)
        return len(self.elements) - 1

    def add_bottom(self, element: ElementBase) -> int:
        if any(existing is element for existing in self.elements):
            raise ElementAlreadyExistsError(f"{element!r} is already in the model")
        element.model = self
        self.elements.insert(0, element)
        return 0

    def remove(self, element: ElementBase) -> int:
        for index, existing in enumerate(self.elements):
            if existing is element:
                element.model = None
                del self.elements[index]
                return index
        return -1

    def element_with_id(self, element_id: str) -> ElementBase | None:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------
    def _fill_keys(self) -> list[str]:
        return ElementBase.get_resource_keys(self)

    def _referenced_keys(self) -> Iterator[str]:
        yield from self._fill_keys()
        for element in self.elements:
            yield from element.get_resource_keys()

    def get_resource_key_reference_counts(self, locale_id: str | None = None) -> dict[str, int]:
        """Histogram of referenced keys; registers nothing."""

        self.resource_manager.current_locale_id = locale_id
        counts: dict[str, int] = {}
        for key in self._referenced_keys():
            counts[key] = counts.get(key, 0) + 1
        return counts

    async def prepare_resources(
        self,
        locale_id: str | None = None,
        callback: Callable[[bool], None] | None = None,
    ) -> bool:
        """Register every referenced resource for `locale_id` and load them.

        Returns True only if every registered resource (nested models
        included) loaded.
        """

        rm = self.resource_manager
        rm.current_locale_id = locale_id
        for key in self._fill_keys():
            rm.register(key)
        for element in self.elements:
            element.register_resources(rm)
        return await rm.load(callback)

    # ------------------------------------------------------------------
    # Copy / serialization
    # ------------------------------------------------------------------
    def clone(self) -> "Model":
        m = Model()
        self.clone_to(m)
        m.base_path = self.base_path
        for resource in self.resources:
            m.resource_manager.add(resource.clone())
        for element in self.elements:
            m.add(element.clone())
        return m

    def serialize(self) -> dict[str, Any]:
        o = super().serialize()
        if self.resources:
            o["resources"] = [r.serialize() for r in self.resources]
        if self.elements:
            o["elements"] = [e.serialize() for e in self.elements]
        return o

    def formatted_json(self) -> str:
        return json.dumps(self.serialize(), ensure_ascii=False, indent=1)

    def raw_json(self) -> str:
        return json.dumps(self.serialize(), ensure_ascii=False, separators=(",", ":"))
