from __future__ import annotations

import logging
from typing import Tuple

from errores import ErrorSinImagenes
from modelos import PlanMontaje, SolicitudMontaje
from modos import get_modo
from render_pdf import renderizar_pdf

logger = logging.getLogger(__name__)


def planificar_montaje(solicitud: SolicitudMontaje) -> PlanMontaje:
    """Calcula dónde va cada imagen sin generar el PDF.

    Es determinista: la misma solicitud produce siempre el mismo plan.
    """
    if not solicitud.imagenes:
        raise ErrorSinImagenes("No se seleccionaron imágenes")

    modo = get_modo(solicitud.modo)
    plan = modo.planificar(solicitud)
    logger.info(
        "[%s] %d imágenes -> %d colocaciones en %d páginas",
        solicitud.modo.value.upper(),
        len(solicitud.imagenes),
        len(plan.colocaciones),
        len(plan.paginas),
    )
    return plan


def generar_documento(
    solicitud: SolicitudMontaje,
    workers: int = 4,
    calidad_jpeg: int = 95,
) -> Tuple[bytes, PlanMontaje]:
    """Planifica y renderiza. Devuelve ``(pdf_bytes, plan)``."""
    plan = planificar_montaje(solicitud)
    pdf = renderizar_pdf(
        plan,
        workers=workers,
        calidad_jpeg=calidad_jpeg,
        titulo=f"Montaje {solicitud.modo.value}",
    )
    return pdf, plan
