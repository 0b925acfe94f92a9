from __future__ import annotations

from typing import Dict, Tuple

from errores import ErrorConfiguracion

MM_POR_PT = 0.352778

# Tamaños de papel en puntos (72 dpi), orientación vertical
PAPEL_PT: Dict[str, Tuple[float, float]] = {
    "letter": (612.0, 792.0),
    "legal": (612.0, 1008.0),
}


def mm_to_pt(mm: float) -> float:
    return mm / MM_POR_PT


def pt_to_mm(pt: float) -> float:
    return pt * MM_POR_PT


def dimensiones_pagina(tamano: str, vertical: bool = True) -> Tuple[float, float]:
    """Devuelve (ancho, alto) en puntos del papel indicado.

    En horizontal se intercambian ancho y alto.
    """
    clave = (tamano or "letter").strip().lower()
    dims = PAPEL_PT.get(clave)
    if dims is None:
        raise ErrorConfiguracion(f"Tamaño de papel inválido: {tamano}")
    ancho, alto = dims
    if not vertical:
        return alto, ancho
    return ancho, alto
