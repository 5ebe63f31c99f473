"""Modelo declarativo de escena (elementos + recursos).

El dibujo queda fuera: aquí solo vive lo que el pipeline de recursos necesita
saber de un modelo (qué claves referencia y cómo se serializa).
"""
