"""Tipos de valor del dominio.

Por qué:
- Estructuras pequeñas e inmutables compartidas por recursos, escena y CLI.
- No conocen HTTP ni el sistema de ficheros.
"""
