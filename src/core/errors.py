"""Excepciones del Core.

Solo se lanzan ante errores de programación o documentos inválidos. Un fallo
de descarga de un recurso nunca lanza: se refleja en `Resource.error` y en el
resultado booleano de la carga.
"""

from __future__ import annotations


class ModelResError(Exception):
    """Base exception for the resource pipeline."""


class ModelDocumentError(ModelResError):
    """Raised when a serialized model is not valid JSON or has the wrong shape."""


class ResourceKeyUndefinedError(ModelResError):
    """Raised when an operation needs a resource key that was never set."""


class ResourceInvalidError(ModelResError):
    """Raised when a resource has neither an embedded payload nor a uri."""


class ResourceManagerUndefinedError(ModelResError):
    """Raised when a resource is initialized before being bound to a manager."""


class ElementAlreadyExistsError(ModelResError):
    """Raised when the same element instance is added to a model twice."""


class ModelLoadError(ModelResError):
    """Raised by the pipeline when a model document cannot be retrieved or parsed."""
