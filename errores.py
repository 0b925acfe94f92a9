"""Excepciones del motor de montaje de imágenes.

Las rutas traducen cada tipo a un código HTTP: configuración, falta de
imágenes y decodificación son errores del cliente (400); el render es un
error interno (500).
"""

from __future__ import annotations


class ErrorMontaje(Exception):
    """Base de todos los errores del montaje."""

    status_code = 500


class ErrorConfiguracion(ErrorMontaje, ValueError):
    """Parámetros del modo ausentes o inválidos, o un diseño que no cabe."""

    status_code = 400


class ErrorSinImagenes(ErrorMontaje):
    status_code = 400


class ErrorDecodificacion(ErrorMontaje):
    """No se pudieron leer las dimensiones de una imagen."""

    status_code = 400


class ErrorRender(ErrorMontaje):
    """Fallo al incrustar o pintar una imagen; aborta el documento completo."""

    status_code = 500
