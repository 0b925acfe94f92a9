"""Render del plan de montaje a PDF con reportlab.

Cada par (imagen, rotación) se prepara una sola vez con Pillow: se rota y se
reencodea (PNG se conserva como PNG para mantener la transparencia, el resto
se aplana a JPEG). La preparación puede ir en paralelo; el canvas se escribe
desde un solo hilo y sólo se guarda cuando todas las imágenes están listas.
"""

from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Tuple

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from errores import ErrorRender
from modelos import Imagen, PlanMontaje

logger = logging.getLogger(__name__)

Clave = Tuple[str, int]


def preparar_imagen(imagen: Imagen, rotacion: int, calidad_jpeg: int = 95) -> ImageReader:
    """Decodifica, rota (sentido horario) y reencodea la imagen para incrustarla."""
    try:
        with Image.open(io.BytesIO(imagen.datos)) as src:
            es_png = src.format == "PNG"
            img = src.copy()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ErrorRender(f"No se pudo decodificar {imagen.nombre}: {exc}") from exc

    if rotacion:
        img = img.rotate(-rotacion, expand=True)

    buffer = io.BytesIO()
    if es_png:
        if img.mode not in ("RGB", "RGBA", "L"):
            img = img.convert("RGBA")
        img.save(buffer, format="PNG")
    else:
        if img.mode != "RGB":
            img = img.convert("RGB")
        img.save(buffer, format="JPEG", quality=calidad_jpeg)
    buffer.seek(0)
    return ImageReader(buffer)


def _preparar_todas(
    plan: PlanMontaje, workers: int, calidad_jpeg: int
) -> Dict[Clave, ImageReader]:
    pendientes: Dict[Clave, Imagen] = {}
    for col in plan.colocaciones:
        pendientes.setdefault((col.imagen.nombre, col.rotacion), col.imagen)

    if workers <= 1 or len(pendientes) <= 1:
        return {
            clave: preparar_imagen(img, clave[1], calidad_jpeg)
            for clave, img in pendientes.items()
        }

    with ThreadPoolExecutor(max_workers=workers) as ex:
        futuros = {
            clave: ex.submit(preparar_imagen, img, clave[1], calidad_jpeg)
            for clave, img in pendientes.items()
        }
        # result() propaga el primer error y aborta el documento
        return {clave: fut.result() for clave, fut in futuros.items()}


def renderizar_pdf(
    plan: PlanMontaje,
    workers: int = 4,
    calidad_jpeg: int = 95,
    titulo: str = "Montaje de imágenes",
) -> bytes:
    """Pinta cada colocación en su página y devuelve los bytes del PDF.

    Cualquier fallo lanza :class:`ErrorRender`; nunca se devuelve un PDF parcial.
    """
    if not plan.paginas:
        raise ErrorRender("El plan no tiene páginas")

    try:
        lectores = _preparar_todas(plan, workers, calidad_jpeg)
    except ErrorRender:
        raise
    except Exception as exc:
        raise ErrorRender(f"Fallo preparando imágenes: {exc}") from exc

    salida = io.BytesIO()
    try:
        c = canvas.Canvas(salida, pagesize=plan.paginas[0])
        c.setTitle(titulo)
        c.setCreator("Montaje de imágenes")
        for indice, (ancho, alto) in enumerate(plan.paginas):
            c.setPageSize((ancho, alto))
            for col in plan.colocaciones_de(indice):
                c.drawImage(
                    lectores[(col.imagen.nombre, col.rotacion)],
                    col.x,
                    col.y,
                    width=col.ancho,
                    height=col.alto,
                    mask="auto",
                )
            c.showPage()
        c.save()
    except Exception as exc:
        logger.exception("Fallo pintando el PDF")
        raise ErrorRender(f"Fallo generando el PDF: {exc}") from exc

    logger.info(
        "PDF generado: %d páginas, %d imágenes", len(plan.paginas), len(plan.colocaciones)
    )
    return salida.getvalue()
