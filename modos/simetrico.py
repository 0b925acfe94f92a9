"""Simétrico: grilla fija ``imagenes_por_fila x filas_por_pagina`` en una página.

Antes de ajustar, las imágenes se giran 90° para compartir una orientación
común (la forzada o la de la mayoría). Las que no entran se descartan.
"""

from __future__ import annotations

import logging
import math

from geometria import tamano_celda
from grilla import grilla_fija, necesita_rotacion, orientacion_objetivo
from modelos import Modo, PlanMontaje, SolicitudMontaje

from .base import BaseModo
from .common import (
    colocar_en_celda,
    exigir_imagenes,
    origen_celda,
    reportar_sobrantes,
    rotacion_total,
)

logger = logging.getLogger(__name__)

IMAGENES_POR_FILA_POR_DEFECTO = 2
SIN_ROTACION = "ninguna"


class SimetricoModo(BaseModo):
    def planificar(self, solicitud: SolicitudMontaje) -> PlanMontaje:
        imagenes = exigir_imagenes(solicitud)
        params = solicitud.parametros
        config = solicitud.pagina
        plan = PlanMontaje(Modo.SIMETRICO)

        columnas = params.get("imagenes_por_fila") or IMAGENES_POR_FILA_POR_DEFECTO
        filas = params.get("filas_por_pagina")
        if not filas:
            try:
                filas = math.ceil(len(imagenes) / int(columnas))
            except (TypeError, ValueError):
                filas = None
        grilla, colocables, sobrantes = grilla_fija(columnas, filas, imagenes)
        plan.grilla = grilla
        reportar_sobrantes(
            plan,
            sobrantes,
            f"exceden la grilla de {grilla.columnas}x{grilla.filas}",
        )

        forzada = params.get("orientacion")
        objetivo = None
        if forzada != SIN_ROTACION:
            objetivo = orientacion_objetivo(imagenes, forzada)
            logger.info("[SIMETRICO] Orientación objetivo: %s", objetivo)

        pagina = plan.nueva_pagina(*config.tamano_pt)
        area = config.area_util()
        _ax, _ay, aw, ah = area
        sep = config.espaciado_pt
        celda_ancho = tamano_celda(aw, grilla.columnas, sep)
        celda_alto = tamano_celda(ah, grilla.filas, sep)

        for i, imagen in enumerate(colocables):
            extra = 90 if objetivo and necesita_rotacion(imagen, objetivo) else 0
            fila, col = divmod(i, grilla.columnas)
            x, y = origen_celda(area, celda_ancho, celda_alto, sep, col, fila)
            plan.colocaciones.append(
                colocar_en_celda(
                    imagen,
                    pagina,
                    x,
                    y,
                    celda_ancho,
                    celda_alto,
                    rotacion_total(imagen, extra),
                )
            )
        return plan
