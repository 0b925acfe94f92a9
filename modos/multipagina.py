from __future__ import annotations

import logging

from errores import ErrorConfiguracion
from modelos import Modo, PlanMontaje, SolicitudMontaje
from unidades import dimensiones_pagina

from .base import BaseModo
from .common import colocar_en_celda, exigir_imagenes, rotacion_total

logger = logging.getLogger(__name__)

AJUSTE_ROTAR = "rotar"
AJUSTE_PAGINA = "pagina"


class MultipaginaModo(BaseModo):
    """Una imagen por página, ajustada a toda el área útil.

    Si la orientación de la imagen no coincide con la del área útil se gira
    la imagen 90° (``ajuste="rotar"``) o se gira la página
    (``ajuste="pagina"``). Las imágenes cuadradas nunca se giran.
    """

    def planificar(self, solicitud: SolicitudMontaje) -> PlanMontaje:
        imagenes = exigir_imagenes(solicitud)
        config = solicitud.pagina
        ajuste = solicitud.parametros.get("ajuste") or AJUSTE_ROTAR
        if ajuste not in (AJUSTE_ROTAR, AJUSTE_PAGINA):
            raise ErrorConfiguracion(f"Ajuste de orientación inválido: {ajuste}")

        plan = PlanMontaje(Modo.MULTIPAGINA)
        for imagen in imagenes:
            vertical = config.vertical
            extra = 0
            _x, _y, aw, ah = config.area_util(vertical)
            area_horizontal = aw > ah
            cuadrada = not imagen.es_horizontal and not imagen.es_vertical
            if not cuadrada and imagen.es_horizontal != area_horizontal:
                if ajuste == AJUSTE_PAGINA:
                    vertical = not vertical
                else:
                    extra = 90

            pagina = plan.nueva_pagina(*dimensiones_pagina(config.tamano_papel, vertical))
            ax, ay, aw, ah = config.area_util(vertical)
            plan.colocaciones.append(
                colocar_en_celda(imagen, pagina, ax, ay, aw, ah, rotacion_total(imagen, extra))
            )
            logger.info(
                "[MULTIPAGINA] %s -> página %d (%s, rot %d)",
                imagen.nombre,
                pagina + 1,
                "vertical" if vertical else "horizontal",
                rotacion_total(imagen, extra),
            )
        return plan
