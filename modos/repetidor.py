"""Repetidor: una sola imagen repetida en grilla sobre la página.

Dos formas de fijar el tamaño:

* ``ancho_mm`` / ``alto_mm``: tamaño físico fijo; filas y columnas salen de
  cuántas copias entran en el área útil.
* sin tamaño: grilla explícita ``columnas x filas`` que divide el área útil en
  celdas iguales; la imagen se ajusta y centra en cada una.

La grilla arranca en el margen superior izquierdo. Con ``centrar`` el bloque
completo se centra en el área útil (variante "pattern").
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional, Tuple

from errores import ErrorConfiguracion
from geometria import ajustar_en_celda, centrar_en_celda, tamano_celda
from grilla import capacidad_repeticion, grilla_fija
from modelos import Colocacion, Grilla, Modo, PlanMontaje, SolicitudMontaje
from unidades import mm_to_pt

from .base import BaseModo
from .common import exigir_imagenes, reportar_sobrantes, rotacion_total

logger = logging.getLogger(__name__)

COLUMNAS_POR_DEFECTO = 3
FILAS_POR_DEFECTO = 4


def _positivo(valor: Any, nombre: str, cero_es_vacio: bool = False) -> Optional[float]:
    if valor is None or valor == "":
        return None
    try:
        numero = float(valor)
    except (TypeError, ValueError) as exc:
        raise ErrorConfiguracion(f"'{nombre}' debe ser numérico") from exc
    if cero_es_vacio and numero == 0:
        return None
    if not math.isfinite(numero) or numero <= 0:
        raise ErrorConfiguracion(f"'{nombre}' debe ser mayor que cero")
    return numero


def tamano_item(ancho_mm: Optional[float], alto_mm: Optional[float], proporcion: float) -> Tuple[float, float]:
    """Tamaño en puntos de cada copia respetando la proporción de la imagen."""
    if ancho_mm and alto_mm:
        return ajustar_en_celda(mm_to_pt(ancho_mm), mm_to_pt(alto_mm), proporcion)
    if ancho_mm:
        ancho = mm_to_pt(ancho_mm)
        return ancho, ancho / proporcion
    alto = mm_to_pt(alto_mm)
    return alto * proporcion, alto


def _dimension_pedida(valor: Any, nombre: str, maximo: int) -> int:
    if not valor:
        return maximo
    try:
        pedida = int(valor)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ErrorConfiguracion(f"'{nombre}' debe ser un número entero") from exc
    if pedida < 1:
        raise ErrorConfiguracion(f"'{nombre}' debe ser mayor que cero")
    if pedida > maximo:
        raise ErrorConfiguracion(f"Se pidieron {pedida} {nombre} pero sólo entran {maximo}")
    return pedida


def _grilla_pedida(params: Mapping[str, Any], disponible: Grilla) -> Grilla:
    """Columnas y filas pedidas, sin superar lo que entra; 0 o vacío usa el máximo."""
    return Grilla(
        _dimension_pedida(params.get("columnas"), "columnas", disponible.columnas),
        _dimension_pedida(params.get("filas"), "filas", disponible.filas),
    )


class RepetidorModo(BaseModo):
    def planificar(self, solicitud: SolicitudMontaje) -> PlanMontaje:
        imagenes = exigir_imagenes(solicitud)
        params = solicitud.parametros
        config = solicitud.pagina
        plan = PlanMontaje(Modo.REPETIDOR)

        imagen = imagenes[0]
        reportar_sobrantes(plan, imagenes[1:], "el repetidor usa una sola imagen")

        rotacion = rotacion_total(imagen, params.get("rotacion", 0))
        proporcion = imagen.proporcion(rotacion)

        pagina = plan.nueva_pagina(*config.tamano_pt)
        ax, ay, aw, ah = config.area_util()
        sep = config.espaciado_pt

        ancho_mm = _positivo(params.get("ancho_mm"), "widthMM")
        # con ancho dado, alto 0 significa "calcular por proporción"
        alto_mm = _positivo(params.get("alto_mm"), "heightMM", cero_es_vacio=bool(ancho_mm))

        if ancho_mm or alto_mm:
            ancho, alto = tamano_item(ancho_mm, alto_mm, proporcion)
            disponible = Grilla(
                capacidad_repeticion(aw, ancho, sep),
                capacidad_repeticion(ah, alto, sep),
            )
            if disponible.capacidad == 0:
                raise ErrorConfiguracion("La imagen no cabe en la página con ese tamaño")
            grilla = _grilla_pedida(params, disponible)
            celda_ancho, celda_alto = ancho, alto
        else:
            grilla, _, _ = grilla_fija(
                params.get("columnas") or COLUMNAS_POR_DEFECTO,
                params.get("filas") or FILAS_POR_DEFECTO,
                [],
            )
            celda_ancho = tamano_celda(aw, grilla.columnas, sep)
            celda_alto = tamano_celda(ah, grilla.filas, sep)
            ancho, alto = ajustar_en_celda(celda_ancho, celda_alto, proporcion)

        plan.grilla = grilla
        logger.info(
            "[REPETIDOR] %dx%d copias de %.1fx%.1f pt", grilla.columnas, grilla.filas, ancho, alto
        )

        desplaz_x = desplaz_y = 0.0
        if params.get("centrar"):
            bloque_ancho = grilla.columnas * celda_ancho + (grilla.columnas - 1) * sep
            bloque_alto = grilla.filas * celda_alto + (grilla.filas - 1) * sep
            desplaz_x = (aw - bloque_ancho) / 2
            desplaz_y = (ah - bloque_alto) / 2

        dx, dy = centrar_en_celda(celda_ancho, celda_alto, ancho, alto)
        tope = ay + ah - desplaz_y
        for fila in range(grilla.filas):
            for col in range(grilla.columnas):
                x = ax + desplaz_x + col * (celda_ancho + sep) + dx
                y = tope - fila * (celda_alto + sep) - celda_alto + dy
                plan.colocaciones.append(
                    Colocacion(imagen, pagina, x, y, ancho, alto, rotacion)
                )
        return plan
