"""Normalización de archivos subidos: expande zips y sondea cada imagen."""

from __future__ import annotations

import io
import logging
import mimetypes
import posixpath
import zipfile
from dataclasses import dataclass
from typing import Iterable, List, Optional

from errores import ErrorConfiguracion, ErrorSinImagenes
from modelos import Imagen
from sondeo_imagen import sondear_dimensiones

logger = logging.getLogger(__name__)

EXTENSIONES_IMAGEN = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
}


@dataclass
class ArchivoSubido:
    nombre: str
    datos: bytes
    mimetype: str


def _extension(nombre: str) -> str:
    return posixpath.splitext(nombre.lower())[1]


def _mimetype_imagen(nombre: str, declarado: Optional[str]) -> Optional[str]:
    if declarado and declarado.startswith("image/"):
        return declarado
    return EXTENSIONES_IMAGEN.get(_extension(nombre))


def _es_zip(nombre: str, mimetype: Optional[str]) -> bool:
    return mimetype in ("application/zip", "application/x-zip-compressed") or _extension(nombre) == ".zip"


def _entradas_imagen(zf: zipfile.ZipFile, nombre_zip: str) -> List[zipfile.ZipInfo]:
    entradas = []
    for info in zf.infolist():
        if info.is_dir():
            continue
        nombre = posixpath.basename(info.filename)
        if not nombre or nombre.startswith(".") or info.filename.startswith("__MACOSX/"):
            continue
        if _extension(nombre) not in EXTENSIONES_IMAGEN:
            logger.info("Se ignora %s dentro de %s: no es una imagen", info.filename, nombre_zip)
            continue
        entradas.append(info)
    return entradas


def _leer_zip(
    datos: bytes,
    nombre_zip: str,
    max_entradas: Optional[int] = None,
    max_bytes: Optional[int] = None,
) -> List[ArchivoSubido]:
    """Extrae las imágenes del zip; los límites se validan antes de descomprimir."""
    try:
        with zipfile.ZipFile(io.BytesIO(datos)) as zf:
            entradas = _entradas_imagen(zf, nombre_zip)
            if max_entradas is not None and len(entradas) > max_entradas:
                raise ErrorConfiguracion(
                    f"{nombre_zip} contiene demasiadas imágenes ({len(entradas)})"
                )
            total = sum(info.file_size for info in entradas)
            if max_bytes is not None and total > max_bytes:
                raise ErrorConfiguracion(
                    f"{nombre_zip} descomprimido ocupa demasiado ({total} bytes)"
                )
            return [
                ArchivoSubido(
                    posixpath.basename(info.filename),
                    zf.read(info),
                    EXTENSIONES_IMAGEN[_extension(info.filename)],
                )
                for info in entradas
            ]
    except zipfile.BadZipFile as exc:
        raise ErrorConfiguracion(f"El archivo {nombre_zip} no es un zip válido") from exc


def expandir_archivos(
    subidos: Iterable,
    max_imagenes: Optional[int] = None,
    max_bytes: Optional[int] = None,
) -> List[ArchivoSubido]:
    """Convierte los ``FileStorage`` recibidos en archivos de imagen en memoria.

    Los zip se expanden ignorando lo que no sea imagen; un archivo suelto que
    no es imagen es un error de configuración. ``max_imagenes`` y ``max_bytes``
    acotan el total ya expandido.
    """
    archivos: List[ArchivoSubido] = []
    total_bytes = 0
    for f in subidos:
        nombre = f.filename or ""
        datos = f.read()
        declarado = f.mimetype or mimetypes.guess_type(nombre)[0]
        if not nombre and not datos:
            continue
        if _es_zip(nombre, declarado):
            nuevos = _leer_zip(
                datos,
                nombre,
                max_entradas=None if max_imagenes is None else max_imagenes - len(archivos),
                max_bytes=None if max_bytes is None else max_bytes - total_bytes,
            )
        else:
            mimetype = _mimetype_imagen(nombre, declarado)
            if mimetype is None:
                raise ErrorConfiguracion(f"Solo se permiten archivos de imagen ({nombre})")
            nuevos = [ArchivoSubido(nombre, datos, mimetype)]
        archivos.extend(nuevos)
        total_bytes += sum(len(a.datos) for a in nuevos)
        if max_imagenes is not None and len(archivos) > max_imagenes:
            raise ErrorConfiguracion(
                f"Se recibieron más de {max_imagenes} imágenes"
            )
        if max_bytes is not None and total_bytes > max_bytes:
            raise ErrorConfiguracion("Las imágenes descomprimidas superan el tamaño máximo")
    return archivos


def _nombre_unico(nombre: str, vistos: set) -> str:
    if nombre not in vistos:
        return nombre
    n = 2
    while f"{nombre}#{n}" in vistos:
        n += 1
    return f"{nombre}#{n}"


def construir_imagenes(
    archivos: Iterable[ArchivoSubido],
    estricto: bool = False,
    max_imagenes: Optional[int] = None,
) -> List[Imagen]:
    """Sondea cada archivo y arma las ``Imagen`` con nombres únicos."""
    archivos = list(archivos)
    if not archivos:
        raise ErrorSinImagenes("No se seleccionaron imágenes")
    if max_imagenes and len(archivos) > max_imagenes:
        raise ErrorConfiguracion(
            f"Se recibieron {len(archivos)} imágenes; el máximo es {max_imagenes}"
        )

    imagenes: List[Imagen] = []
    vistos: set = set()
    for archivo in archivos:
        nombre = _nombre_unico(archivo.nombre or f"imagen_{len(imagenes) + 1}", vistos)
        if nombre != archivo.nombre:
            logger.warning("Nombre repetido %s; se usa %s", archivo.nombre, nombre)
        vistos.add(nombre)
        ancho, alto, estimada = sondear_dimensiones(
            archivo.datos, archivo.mimetype, nombre=nombre, estricto=estricto
        )
        imagenes.append(
            Imagen(
                nombre=nombre,
                ancho_px=ancho,
                alto_px=alto,
                datos=archivo.datos,
                mimetype=archivo.mimetype,
                estimada=estimada,
            )
        )
    return imagenes
