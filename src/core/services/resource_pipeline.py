"""Model preparation orchestration utilities.

The CLI delegates loading, collaborator wiring and result aggregation to
these helpers, which keeps side-effects (printing, progress bars) out of the
core logic and makes the flow reusable from tests or other entry-points.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from adapters.http_client import HttpContentFetcher
from adapters.url_proxy import SigningServiceProxy
from core.config import AppSettings
from core.domain.resource_state import ResourceState
from core.errors import ModelLoadError
from core.interfaces.fetcher import ContentFetcher
from core.interfaces.url_proxy import UrlProxy
from core.resources.manager import ResourceManager
from core.resources.model_resource import ModelResource
from core.resources.paths import is_remote
from core.scene.model import Model


@dataclass
class PrepareRequest:
    """Parameters that control a preparation run."""

    source: str
    locale: str | None = None


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    warning: Callable[[str], None] | None = None
    progress: Callable[[ResourceState], None] | None = None


@dataclass
class PipelineResult:
    """Output of a pipeline invocation."""

    model: Model
    success: bool
    failed_keys: list[str] = field(default_factory=list)
    states: list[ResourceState] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def split_source(source: str) -> tuple[str, str]:
    """Split a model location into `(base_path, uri)` for `Model.load`.

    A folder (trailing `/` or an existing local directory) keeps the
    trailing `/` in `uri` so that `model.json` is looked up inside it.
    """

    if is_remote(source):
        folder = source.endswith("/")
        trimmed = source.rstrip("/")
    else:
        path = Path(source).expanduser().resolve()
        folder = path.is_dir()
        trimmed = path.as_posix()

    index = trimmed.rfind("/")
    base_path = trimmed[: index + 1]
    uri = trimmed[index + 1:]
    if folder:
        uri += "/"
    return base_path, uri


def build_fetcher(settings: AppSettings) -> ContentFetcher:
    return HttpContentFetcher(settings)


def build_url_proxy(settings: AppSettings) -> UrlProxy | None:
    if not settings.signing_endpoint:
        return None
    return SigningServiceProxy(settings.signing_endpoint, settings)


async def load_model(
    *,
    settings: AppSettings,
    source: str,
    fetcher: ContentFetcher | None = None,
    url_proxy: UrlProxy | None = None,
) -> Model:
    """Load the model at `source` and wire fetcher, proxy and resource folder."""

    fetcher = fetcher or build_fetcher(settings)
    base_path, uri = split_source(source)
    model = await Model.load(base_path, uri, fetcher=fetcher)
    if model is None:
        raise ModelLoadError(f"model could not be loaded from {source}")

    if settings.resource_folder and model.model_path is not None:
        model.set_model_path(model.model_path, settings.resource_folder)
    model.resource_manager.url_proxy = url_proxy if url_proxy is not None else build_url_proxy(settings)
    return model


def collect_failed_resources(model: Model) -> list[str]:
    """Keys of resources left in error, nested ones as `outer/inner`."""

    failed: list[str] = []
    for resource in model.resources:
        if resource.error:
            failed.append(resource.key or "")
        if isinstance(resource, ModelResource) and resource.model is not None:
            failed.extend(f"{resource.key}/{key}" for key in collect_failed_resources(resource.model))
    return failed


async def prepare(
    *,
    settings: AppSettings,
    request: PrepareRequest,
    hooks: PipelineHooks | None = None,
    fetcher: ContentFetcher | None = None,
    url_proxy: UrlProxy | None = None,
) -> PipelineResult:
    hooks = hooks or PipelineHooks()
    warnings: list[str] = []
    states: list[ResourceState] = []

    model = await load_model(settings=settings, source=request.source, fetcher=fetcher, url_proxy=url_proxy)

    def on_state(_manager: ResourceManager, state: ResourceState) -> None:
        states.append(state)
        if hooks.progress:
            hooks.progress(state)

    model.resource_manager.listener_event.add(on_state)
    locale = request.locale or settings.default_locale
    try:
        success = await model.prepare_resources(locale)
    finally:
        model.resource_manager.listener_event.remove(on_state)

    failed_keys = collect_failed_resources(model)
    for key in failed_keys:
        message = f"Resource '{key}' failed to load."
        warnings.append(message)
        if hooks.warning:
            hooks.warning(message)

    return PipelineResult(
        model=model,
        success=success,
        failed_keys=failed_keys,
        states=states,
        warnings=warnings,
    )


async def reference_counts(
    *,
    settings: AppSettings,
    request: PrepareRequest,
    fetcher: ContentFetcher | None = None,
) -> dict[str, int]:
    """Histogram of resource keys the model references; loads no resources."""

    model = await load_model(settings=settings, source=request.source, fetcher=fetcher)
    return model.get_resource_key_reference_counts(request.locale or settings.default_locale)
