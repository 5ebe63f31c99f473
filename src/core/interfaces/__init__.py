"""Contratos (Protocol) entre el Core y los adaptadores.

- `ContentFetcher`: bytes/texto desde HTTP o disco.
- `UrlProxy`: firma de rutas de recursos antes de descargarlas.
"""
