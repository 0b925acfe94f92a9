"""Traducción de los parámetros recibidos por HTTP a una ``SolicitudMontaje``.

Se aceptan las claves camelCase de los formularios del front (``pageSize``,
``imagesPerRow``, ``widthMM``...), tanto como campos sueltos del formulario
como dentro de un JSON en ``config``, ``layout`` o ``pageSettings``. Las
secciones anidadas ``pageSettings``, ``image`` y ``grid`` se aplanan.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

from errores import ErrorConfiguracion
from grilla import HORIZONTAL, VERTICAL
from modelos import ROTACIONES_VALIDAS, ConfigPagina, Imagen, Modo, SolicitudMontaje

logger = logging.getLogger(__name__)

ALIAS_MODO = {
    "repetidor": Modo.REPETIDOR,
    "auto-repetidor": Modo.REPETIDOR,
    "repetidor-simetrico": Modo.REPETIDOR,
    "pattern": Modo.REPETIDOR,
    "collage": Modo.COLLAGE,
    "simetrico": Modo.SIMETRICO,
    "plantilla": Modo.PLANTILLA,
    "layout": Modo.PLANTILLA,
    "multi-pagina": Modo.MULTIPAGINA,
    "multipagina": Modo.MULTIPAGINA,
}

ESPACIADO_POR_MODO = {
    Modo.REPETIDOR: 2.0,
    Modo.COLLAGE: 2.0,
    Modo.SIMETRICO: 5.0,
    Modo.PLANTILLA: 5.0,
    Modo.MULTIPAGINA: 0.0,
}

MARGEN_POR_DEFECTO = 10.0
CAMPOS_JSON = ("config", "layout", "pageSettings")
SECCIONES = ("pageSettings", "image", "grid")

ORIENTACION_FORZADA = {
    "portrait": VERTICAL,
    "vertical": VERTICAL,
    "landscape": HORIZONTAL,
    "horizontal": HORIZONTAL,
    "auto": None,
    "": None,
    "none": "ninguna",
    "ninguna": "ninguna",
}


def parsear_modo(nombre: str) -> Modo:
    modo = ALIAS_MODO.get((nombre or "").strip().lower())
    if modo is None:
        raise ErrorConfiguracion(f"Modo desconocido: {nombre}")
    return modo


def _vacio(valor: Any) -> bool:
    return valor is None or (isinstance(valor, str) and not valor.strip())


def _primero(datos: Mapping[str, Any], *claves: str) -> Any:
    for clave in claves:
        valor = datos.get(clave)
        if not _vacio(valor):
            return valor
    return None


def _numero(valor: Any, clave: str, defecto: Optional[float] = None) -> Optional[float]:
    if _vacio(valor):
        return defecto
    try:
        numero = float(valor)
    except (TypeError, ValueError) as exc:
        raise ErrorConfiguracion(f"'{clave}' debe ser numérico") from exc
    if not math.isfinite(numero):
        raise ErrorConfiguracion(f"'{clave}' debe ser un número finito")
    return numero


def _entero(valor: Any, clave: str) -> Optional[int]:
    numero = _numero(valor, clave)
    if numero is None:
        return None
    if numero != int(numero):
        raise ErrorConfiguracion(f"'{clave}' debe ser un número entero")
    return int(numero)


def _booleano(valor: Any) -> bool:
    if isinstance(valor, str):
        return valor.strip().lower() in {"1", "true", "yes", "on", "si", "sí"}
    return bool(valor)


def _rotacion(valor: Any) -> int:
    rot = _entero(valor, "rotation") or 0
    rot %= 360
    if rot not in ROTACIONES_VALIDAS:
        raise ErrorConfiguracion("La rotación debe ser 0, 90, 180 o 270")
    return rot


def leer_configuracion(form: Mapping[str, Any]) -> Dict[str, Any]:
    """Une los campos sueltos del formulario con los JSON de configuración."""
    datos: Dict[str, Any] = {k: v for k, v in form.items() if k not in CAMPOS_JSON}
    for campo in CAMPOS_JSON:
        crudo = form.get(campo)
        if _vacio(crudo):
            continue
        if isinstance(crudo, (str, bytes)):
            try:
                crudo = json.loads(crudo)
            except ValueError as exc:
                raise ErrorConfiguracion(f"El campo '{campo}' no es un JSON válido") from exc
        if not isinstance(crudo, dict):
            raise ErrorConfiguracion(f"El campo '{campo}' debe ser un objeto JSON")
        if campo == "pageSettings":
            datos.setdefault("pageSettings", {}).update(crudo)
        else:
            datos.update(crudo)
    return aplanar(datos)


def aplanar(datos: Mapping[str, Any]) -> Dict[str, Any]:
    plano = {k: v for k, v in datos.items() if k not in SECCIONES or not isinstance(v, dict)}
    for seccion in SECCIONES:
        valor = datos.get(seccion)
        if isinstance(valor, dict):
            plano.update(valor)
    return plano


def parsear_config_pagina(datos: Mapping[str, Any], modo: Modo) -> ConfigPagina:
    tamano = str(_primero(datos, "pageSize", "tamano_papel") or "letter").strip().lower()
    orientacion = str(_primero(datos, "orientation", "orientacion") or "portrait").strip().lower()
    if orientacion in ("portrait", "vertical"):
        vertical = True
    elif orientacion in ("landscape", "horizontal"):
        vertical = False
    else:
        raise ErrorConfiguracion(f"Orientación inválida: {orientacion}")

    return ConfigPagina(
        tamano_papel=tamano,
        vertical=vertical,
        margen_mm=_numero(_primero(datos, "margin", "margen"), "margin", MARGEN_POR_DEFECTO),
        espaciado_mm=_numero(
            _primero(datos, "spacing", "espaciado"), "spacing", ESPACIADO_POR_MODO[modo]
        ),
        media_pagina=_booleano(_primero(datos, "useHalfPage", "media_pagina")),
    )


def _celda(celda: Mapping[str, Any]) -> Dict[str, Any]:
    imagen = celda.get("image")
    nombre = celda.get("imageName") or celda.get("imagen")
    rotacion = celda.get("rotation", celda.get("rotacion"))
    if isinstance(imagen, dict):
        nombre = nombre or imagen.get("name")
        if rotacion is None:
            rotacion = imagen.get("rotation")
    elif isinstance(imagen, str):
        nombre = nombre or imagen
    return {
        "imagen": nombre,
        "col": celda.get("col"),
        "fila": celda.get("row", celda.get("fila")),
        "col_span": celda.get("colSpan", celda.get("col_span", 1)),
        "fila_span": celda.get("rowSpan", celda.get("fila_span", 1)),
        "rotacion": rotacion or 0,
    }


def _paginas_plantilla(datos: Mapping[str, Any]) -> List[Dict[str, Any]]:
    paginas = datos.get("pages")
    if paginas is None:
        # editor de layout de una sola página
        paginas = [{"cells": datos.get("cells") or []}]
    if not isinstance(paginas, list):
        raise ErrorConfiguracion("'pages' debe ser una lista")

    normalizadas = []
    for pagina in paginas:
        if not isinstance(pagina, dict):
            raise ErrorConfiguracion("Cada página de la plantilla debe ser un objeto")
        celdas = pagina.get("cells", pagina.get("celdas")) or []
        if not isinstance(celdas, list):
            raise ErrorConfiguracion("'cells' debe ser una lista")
        normalizadas.append(
            {
                "columnas_base": _primero(pagina, "baseCols", "columnas_base")
                or _primero(datos, "baseCols", "columnas_base"),
                "filas_base": _primero(pagina, "baseRows", "filas_base")
                or _primero(datos, "baseRows", "filas_base"),
                "celdas": [_celda(c) for c in celdas if isinstance(c, dict)],
            }
        )
    return normalizadas


def parsear_parametros_modo(datos: Mapping[str, Any], modo: Modo) -> Dict[str, Any]:
    if modo is Modo.REPETIDOR:
        return {
            "ancho_mm": _numero(_primero(datos, "widthMM", "imageWidth", "ancho_mm"), "widthMM"),
            "alto_mm": _numero(_primero(datos, "heightMM", "imageHeight", "alto_mm"), "heightMM"),
            "rotacion": _rotacion(_primero(datos, "rotation", "rotacion")),
            "columnas": _entero(_primero(datos, "cols", "imagesPerRow", "columnas"), "cols"),
            "filas": _entero(_primero(datos, "rows", "rowsPerPage", "filas"), "rows"),
            "centrar": _booleano(_primero(datos, "centrar", "center")),
        }
    if modo is Modo.SIMETRICO:
        crudo = str(_primero(datos, "forceOrientation", "orientacion_forzada") or "auto")
        crudo = crudo.strip().lower()
        if crudo not in ORIENTACION_FORZADA:
            raise ErrorConfiguracion(f"forceOrientation inválido: {crudo}")
        return {
            "imagenes_por_fila": _entero(
                _primero(datos, "imagesPerRow", "imagenes_por_fila"), "imagesPerRow"
            ),
            "filas_por_pagina": _entero(
                _primero(datos, "rowsPerPage", "filas_por_pagina"), "rowsPerPage"
            ),
            "orientacion": ORIENTACION_FORZADA[crudo],
        }
    if modo is Modo.PLANTILLA:
        return {"paginas": _paginas_plantilla(datos)}
    if modo is Modo.MULTIPAGINA:
        return {"ajuste": str(_primero(datos, "ajuste", "fit") or "rotar").strip().lower()}
    return {}


def construir_solicitud(
    modo: Modo,
    datos: Mapping[str, Any],
    imagenes: Iterable[Imagen],
    extra: Optional[Mapping[str, Any]] = None,
) -> SolicitudMontaje:
    """Arma la solicitud completa; ``extra`` pisa parámetros del modo (p. ej. ``centrar``)."""
    parametros = parsear_parametros_modo(datos, modo)
    if extra:
        parametros.update(extra)
    solicitud = SolicitudMontaje(
        pagina=parsear_config_pagina(datos, modo),
        modo=modo,
        imagenes=tuple(imagenes),
        parametros=parametros,
    )
    logger.debug("Solicitud %s: %s", modo.value, parametros)
    return solicitud
