from __future__ import annotations

import logging
from typing import Sequence, Tuple

from errores import ErrorSinImagenes
from geometria import ajustar_en_celda, centrar_en_celda
from modelos import Colocacion, Imagen, PlanMontaje, SolicitudMontaje

logger = logging.getLogger(__name__)


def exigir_imagenes(solicitud: SolicitudMontaje) -> Tuple[Imagen, ...]:
    if not solicitud.imagenes:
        raise ErrorSinImagenes("No se seleccionaron imágenes")
    return solicitud.imagenes


def rotacion_total(imagen: Imagen, extra: int = 0) -> int:
    return (imagen.rotacion + int(extra or 0)) % 360


def origen_celda(
    area: Tuple[float, float, float, float],
    celda_ancho: float,
    celda_alto: float,
    espaciado: float,
    columna: int,
    fila: int,
) -> Tuple[float, float]:
    """Esquina inferior izquierda de la celda (columna, fila); la fila 0 es la de arriba."""
    ax, ay, _aw, ah = area
    x = ax + columna * (celda_ancho + espaciado)
    y = ay + ah - fila * (celda_alto + espaciado) - celda_alto
    return x, y


def colocar_en_celda(
    imagen: Imagen,
    pagina: int,
    x: float,
    y: float,
    celda_ancho: float,
    celda_alto: float,
    rotacion: int = 0,
) -> Colocacion:
    """Ajusta la imagen (ya rotada) a la celda y la centra dentro de ella."""
    ancho, alto = ajustar_en_celda(celda_ancho, celda_alto, imagen.proporcion(rotacion))
    dx, dy = centrar_en_celda(celda_ancho, celda_alto, ancho, alto)
    return Colocacion(
        imagen=imagen,
        pagina=pagina,
        x=x + dx,
        y=y + dy,
        ancho=ancho,
        alto=alto,
        rotacion=rotacion,
    )


def reportar_sobrantes(plan: PlanMontaje, sobrantes: Sequence[Imagen], motivo: str) -> None:
    if not sobrantes:
        return
    nombres = [img.nombre for img in sobrantes]
    plan.descartadas.extend(nombres)
    mensaje = f"Se ignoraron {len(nombres)} imágenes: {motivo}"
    plan.advertencias.append(mensaje)
    logger.warning("[%s] %s (%s)", plan.modo.value.upper(), mensaje, ", ".join(nombres))
