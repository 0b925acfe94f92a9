from __future__ import annotations

import logging

from geometria import tamano_celda
from grilla import grilla_collage
from modelos import Grilla, Modo, PlanMontaje, SolicitudMontaje

from .base import BaseModo
from .common import colocar_en_celda, exigir_imagenes, origen_celda, rotacion_total

logger = logging.getLogger(__name__)


class CollageModo(BaseModo):
    """Varias imágenes distintas en una sola página, una por celda.

    Con una sola imagen no se arma grilla: la imagen ocupa toda el área útil.
    """

    def planificar(self, solicitud: SolicitudMontaje) -> PlanMontaje:
        imagenes = exigir_imagenes(solicitud)
        config = solicitud.pagina
        plan = PlanMontaje(Modo.COLLAGE)
        pagina = plan.nueva_pagina(*config.tamano_pt)
        area = config.area_util()
        ax, ay, aw, ah = area
        sep = config.espaciado_pt

        if len(imagenes) == 1:
            imagen = imagenes[0]
            plan.grilla = Grilla(1, 1)
            plan.colocaciones.append(
                colocar_en_celda(imagen, pagina, ax, ay, aw, ah, rotacion_total(imagen))
            )
            return plan

        grilla = grilla_collage(len(imagenes), aw, ah)
        plan.grilla = grilla
        celda_ancho = tamano_celda(aw, grilla.columnas, sep)
        celda_alto = tamano_celda(ah, grilla.filas, sep)
        logger.info(
            "[COLLAGE] Celda: %.1fx%.1f pt", celda_ancho, celda_alto
        )

        for i, imagen in enumerate(imagenes):
            fila, col = divmod(i, grilla.columnas)
            x, y = origen_celda(area, celda_ancho, celda_alto, sep, col, fila)
            plan.colocaciones.append(
                colocar_en_celda(
                    imagen, pagina, x, y, celda_ancho, celda_alto, rotacion_total(imagen)
                )
            )
        return plan
