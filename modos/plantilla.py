"""Plantilla / editor de layout: celdas libres sobre una grilla base por página.

Cada página define ``columnas_base x filas_base`` y una lista de celdas que
nombran una imagen, un ancla ``(col, fila)`` y un tamaño ``(col_span,
fila_span)`` en unidades de grilla. Las celdas cuya imagen no se subió se
saltean; las páginas sin ninguna imagen disponible no se generan.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from errores import ErrorConfiguracion, ErrorDecodificacion, ErrorSinImagenes
from geometria import tamano_celda
from modelos import ROTACIONES_VALIDAS, Grilla, Imagen, Modo, PlanMontaje, SolicitudMontaje

from .base import BaseModo
from .common import colocar_en_celda, exigir_imagenes, rotacion_total

logger = logging.getLogger(__name__)


def _entero(celda: Mapping[str, Any], clave: str, defecto: Optional[int] = None) -> int:
    valor = celda.get(clave, defecto)
    try:
        return int(valor)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ErrorConfiguracion(f"Valor inválido para '{clave}' en una celda") from exc


def _validar_celda(celda: Mapping[str, Any], grilla: Grilla) -> Dict[str, int]:
    col = _entero(celda, "col")
    fila = _entero(celda, "fila")
    col_span = _entero(celda, "col_span", 1)
    fila_span = _entero(celda, "fila_span", 1)
    rotacion = _entero(celda, "rotacion", 0) % 360

    if col < 0 or fila < 0:
        raise ErrorConfiguracion("Las celdas no pueden tener posición negativa")
    if col_span < 1 or fila_span < 1:
        raise ErrorConfiguracion("El tamaño de una celda debe ser al menos 1x1")
    if col + col_span > grilla.columnas or fila + fila_span > grilla.filas:
        raise ErrorConfiguracion(
            f"La celda ({col},{fila}) de {col_span}x{fila_span} excede la grilla "
            f"{grilla.columnas}x{grilla.filas}"
        )
    if rotacion not in ROTACIONES_VALIDAS:
        raise ErrorConfiguracion("La rotación debe ser 0, 90, 180 o 270")
    return {
        "col": col,
        "fila": fila,
        "col_span": col_span,
        "fila_span": fila_span,
        "rotacion": rotacion,
    }


def _grilla_base(pagina: Mapping[str, Any]) -> Grilla:
    cols = _entero(pagina, "columnas_base")
    filas = _entero(pagina, "filas_base")
    if cols <= 0 or filas <= 0:
        raise ErrorConfiguracion("La grilla base debe tener al menos una fila y una columna")
    return Grilla(cols, filas)


class PlantillaModo(BaseModo):
    def planificar(self, solicitud: SolicitudMontaje) -> PlanMontaje:
        exigir_imagenes(solicitud)
        config = solicitud.pagina
        paginas = solicitud.parametros.get("paginas") or []
        if not isinstance(paginas, list):
            raise ErrorConfiguracion("'pages' debe ser una lista")

        por_nombre = solicitud.imagen_por_nombre()
        plan = PlanMontaje(Modo.PLANTILLA)
        ax, ay, aw, ah = config.area_util()
        sep = config.espaciado_pt

        for n, datos_pagina in enumerate(paginas):
            grilla = _grilla_base(datos_pagina)
            celdas: List[tuple] = []
            for celda in datos_pagina.get("celdas") or []:
                nombre = celda.get("imagen")
                if not nombre:
                    continue
                geometria = _validar_celda(celda, grilla)
                imagen: Optional[Imagen] = por_nombre.get(nombre)
                if imagen is None:
                    logger.warning("[PLANTILLA] Imagen '%s' no encontrada; se omite la celda", nombre)
                    continue
                if imagen.estimada:
                    raise ErrorDecodificacion(
                        f"No se pudieron leer las dimensiones de {nombre}"
                    )
                celdas.append((imagen, geometria))

            if not celdas:
                logger.info("[PLANTILLA] Página %d sin imágenes disponibles; se omite", n + 1)
                continue

            if plan.grilla is None:
                plan.grilla = grilla
            pagina = plan.nueva_pagina(*config.tamano_pt)
            celda_ancho = tamano_celda(aw, grilla.columnas, sep)
            celda_alto = tamano_celda(ah, grilla.filas, sep)
            tope = ay + ah

            for imagen, g in celdas:
                ancho = g["col_span"] * celda_ancho + (g["col_span"] - 1) * sep
                alto = g["fila_span"] * celda_alto + (g["fila_span"] - 1) * sep
                x = ax + g["col"] * (celda_ancho + sep)
                y = tope - g["fila"] * (celda_alto + sep) - alto
                plan.colocaciones.append(
                    colocar_en_celda(
                        imagen, pagina, x, y, ancho, alto, rotacion_total(imagen, g["rotacion"])
                    )
                )

        if not plan.paginas:
            raise ErrorSinImagenes("Ninguna celda de la plantilla usa una imagen subida")
        return plan
