"""Lectura de dimensiones intrínsecas (px) de una imagen a partir de sus bytes.

JPEG y PNG se leen directamente de la cabecera; el resto de formatos pasa por
la lectura perezosa de Pillow, que sólo decodifica la cabecera. Si nada
funciona se devuelve un tamaño por defecto marcado como ``estimada`` para que
el llamador decida si puede trabajar en modo degradado.
"""

from __future__ import annotations

import io
import logging
import struct
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from errores import ErrorDecodificacion

logger = logging.getLogger(__name__)

DIMENSIONES_POR_DEFECTO = (800, 600)

PNG_FIRMA = b"\x89PNG\r\n\x1a\n"

# Marcadores SOF con dimensiones (se excluyen DHT=C4, JPG=C8 y DAC=CC)
_MARCADORES_SOF = {
    0xC0, 0xC1, 0xC2, 0xC3,
    0xC5, 0xC6, 0xC7,
    0xC9, 0xCA, 0xCB,
    0xCD, 0xCE, 0xCF,
}
# Marcadores sin segmento de longitud
_MARCADORES_SOLOS = {0x01, 0xD0, 0xD1, 0xD2, 0xD3, 0xD4, 0xD5, 0xD6, 0xD7, 0xD8, 0xD9}


def leer_dimensiones_png(datos: bytes) -> Optional[Tuple[int, int]]:
    if len(datos) < 24 or not datos.startswith(PNG_FIRMA):
        return None
    ancho, alto = struct.unpack(">II", datos[16:24])
    if ancho <= 0 or alto <= 0:
        return None
    return ancho, alto


def leer_dimensiones_jpeg(datos: bytes) -> Optional[Tuple[int, int]]:
    """Recorre los segmentos JPEG hasta el primer SOF y lee alto/ancho."""
    if len(datos) < 4 or datos[0] != 0xFF or datos[1] != 0xD8:
        return None
    i = 2
    n = len(datos)
    while i + 1 < n:
        if datos[i] != 0xFF:
            i += 1
            continue
        marcador = datos[i + 1]
        if marcador == 0xFF:
            # byte de relleno
            i += 1
            continue
        if marcador in _MARCADORES_SOLOS:
            i += 2
            continue
        if i + 4 > n:
            return None
        longitud = (datos[i + 2] << 8) | datos[i + 3]
        if marcador in _MARCADORES_SOF:
            if i + 9 > n:
                return None
            alto, ancho = struct.unpack(">HH", datos[i + 5:i + 9])
            if ancho <= 0 or alto <= 0:
                return None
            return ancho, alto
        if longitud < 2:
            return None
        i += 2 + longitud
    return None


def _leer_con_pillow(datos: bytes) -> Optional[Tuple[int, int]]:
    try:
        with Image.open(io.BytesIO(datos)) as img:
            ancho, alto = img.size
    except (UnidentifiedImageError, OSError, ValueError):
        return None
    if ancho <= 0 or alto <= 0:
        return None
    return ancho, alto


def sondear_dimensiones(
    datos: bytes,
    mimetype: Optional[str] = None,
    nombre: str = "",
    estricto: bool = False,
) -> Tuple[int, int, bool]:
    """Devuelve ``(ancho_px, alto_px, estimada)``.

    ``estimada`` es ``True`` cuando no se pudo leer la imagen y se usó
    :data:`DIMENSIONES_POR_DEFECTO`. Con ``estricto`` ese caso lanza
    :class:`ErrorDecodificacion`.
    """
    tipo = (mimetype or "").lower()
    lectores = [leer_dimensiones_png, leer_dimensiones_jpeg]
    if "jpeg" in tipo or "jpg" in tipo:
        lectores.reverse()

    for lector in lectores:
        dims = lector(datos)
        if dims:
            return dims[0], dims[1], False

    dims = _leer_con_pillow(datos)
    if dims:
        return dims[0], dims[1], False

    if estricto:
        raise ErrorDecodificacion(f"No se pudieron leer las dimensiones de {nombre or 'la imagen'}")
    logger.warning(
        "No se pudieron leer las dimensiones de %s (%s); se usa %dx%d",
        nombre or "imagen",
        mimetype,
        *DIMENSIONES_POR_DEFECTO,
    )
    ancho, alto = DIMENSIONES_POR_DEFECTO
    return ancho, alto, True
