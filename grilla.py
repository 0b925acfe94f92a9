"""Planificación de grillas (filas x columnas).

Dos políticas:

* ``grilla_collage``: grilla casi cuadrada proporcional al contenedor, sin
  columnas vacías al final. Siempre entra todo.
* ``grilla_fija`` / ``capacidad_repeticion``: la grilla viene dada (o se
  calcula por repetición) y lo que no entra se descarta con advertencia.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from errores import ErrorConfiguracion
from modelos import Grilla, Imagen

logger = logging.getLogger(__name__)

VERTICAL = "vertical"
HORIZONTAL = "horizontal"


def grilla_collage(n: int, contenedor_ancho: float, contenedor_alto: float) -> Grilla:
    if n <= 0:
        return Grilla(0, 0)
    if n == 1:
        return Grilla(1, 1)

    if n <= 4:
        cols = math.ceil(math.sqrt(n))
        rows = math.ceil(n / cols)
    else:
        if contenedor_ancho <= 0 or contenedor_alto <= 0:
            raise ErrorConfiguracion("El contenedor del collage no tiene área útil")
        cols = math.ceil(math.sqrt(n * contenedor_ancho / contenedor_alto))
        rows = math.ceil(n / cols)
        # quita la última fila/columna completamente vacía
        while cols * rows - n >= cols:
            cols += 1
            rows = math.ceil(n / cols)

    logger.info("Grilla collage para %d imágenes: %d columnas x %d filas", n, cols, rows)
    return Grilla(cols, rows)


def capacidad_repeticion(disponible: float, tamano: float, espaciado: float) -> int:
    """Cuántos elementos de ``tamano`` entran en ``disponible`` con ``espaciado`` entre ellos."""
    if tamano <= 0:
        raise ErrorConfiguracion("El tamaño de la imagen debe ser mayor que cero")
    return max(int(math.floor((disponible + espaciado) / (tamano + espaciado))), 0)


def grilla_fija(
    columnas: Optional[int],
    filas: Optional[int],
    items: Sequence,
) -> Tuple[Grilla, List, List]:
    """Reparte ``items`` en una grilla explícita.

    Devuelve ``(grilla, colocables, sobrantes)``. Los sobrantes no se dibujan;
    el llamador debe reportarlos.
    """
    try:
        cols = int(columnas)
        rows = int(filas)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ErrorConfiguracion("Filas y columnas deben ser números enteros") from exc
    if cols <= 0 or rows <= 0:
        raise ErrorConfiguracion("Filas y columnas deben ser mayores que cero")

    grilla = Grilla(cols, rows)
    colocables = list(items[: grilla.capacidad])
    sobrantes = list(items[grilla.capacidad:])
    if sobrantes:
        logger.warning(
            "Grilla %dx%d llena: se ignoran %d elementos", cols, rows, len(sobrantes)
        )
    return grilla, colocables, sobrantes


def orientacion_objetivo(imagenes: Sequence[Imagen], forzada: Optional[str] = None) -> str:
    """Orientación común: la forzada o la de la mayoría (empate -> horizontal)."""
    if forzada in (VERTICAL, HORIZONTAL):
        return forzada
    verticales = sum(1 for img in imagenes if img.es_vertical)
    return VERTICAL if verticales > len(imagenes) / 2 else HORIZONTAL


def necesita_rotacion(imagen: Imagen, objetivo: str) -> bool:
    return (objetivo == VERTICAL and imagen.es_horizontal) or (
        objetivo == HORIZONTAL and imagen.es_vertical
    )
