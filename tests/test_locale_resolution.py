from __future__ import annotations

from core.domain.locale import has_region, language_of
from core.resources.text import TextResource
from core.scene.model import Model


def _model(*locales: str | None) -> Model:
    model = Model.create(1, 1)
    for locale in locales:
        model.resource_manager.add(TextResource.from_uri("title", f"{locale or 'generic'}.txt", locale=locale))
    return model


def _uri(model: Model, key: str, locale: str | None) -> str | None:
    res = model.resource_manager.get(key, locale)
    return res.uri if res is not None else None


def test_exact_locale_wins():
    model = _model(None, "en", "en-GB", "fr-FR")
    assert _uri(model, "title", "en-GB") == "en-GB.txt"
    assert _uri(model, "TITLE", "EN-gb") == "en-GB.txt"


def test_bare_language_beats_other_region():
    model = _model(None, "en-GB", "en")
    assert _uri(model, "title", "en-US") == "en.txt"


def test_other_region_of_same_language():
    model = _model(None, "fr-FR", "en-GB")
    assert _uri(model, "title", "en-US") == "en-GB.txt"


def test_generic_entry_when_language_is_absent():
    model = _model("fr-FR", None, "en")
    assert _uri(model, "title", "de-DE") == "generic.txt"


def test_bare_language_request_does_not_match_regions():
    # A region-less request never reaches the regional variants; it falls
    # through to the first entry with the key.
    model = _model("fr-FR", "en-GB")
    assert _uri(model, "title", "en") == "fr-FR.txt"


def test_no_locale_uses_generic_then_any():
    assert _uri(_model("en", None), "title", None) == "generic.txt"
    assert _uri(_model("en", "fr"), "title", None) == "en.txt"


def test_current_locale_is_the_default():
    model = _model("en", "fr")
    model.resource_manager.current_locale_id = "fr-CA"
    assert model.resource_manager.get("title").uri == "fr.txt"


def test_unknown_key():
    assert _model("en").resource_manager.get("body", "en") is None


def test_locale_helpers():
    assert has_region("en-US") is True
    assert has_region("en") is False
    assert language_of("en-US") == "en"
    assert language_of("en") is None
