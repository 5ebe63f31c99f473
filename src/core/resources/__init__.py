"""Recursos de modelo y su pipeline de carga.

Por qué un paquete:
- Agrupa el tipo base, las variantes concretas (text/bitmap/model), el
  registro de tipos y el ResourceManager.
- Cada modelo posee exactamente un ResourceManager.
"""
