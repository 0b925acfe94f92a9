from __future__ import annotations

import math
from typing import Tuple

from errores import ErrorConfiguracion


def ajustar_en_celda(celda_ancho: float, celda_alto: float, proporcion: float) -> Tuple[float, float]:
    """Rectángulo máximo con la proporción ``ancho/alto`` dada que entra en la celda.

    Si la imagen es relativamente más ancha que la celda se ajusta por ancho,
    si no por alto.
    """
    if not (math.isfinite(celda_ancho) and math.isfinite(celda_alto)) or celda_ancho <= 0 or celda_alto <= 0:
        raise ErrorConfiguracion(
            f"El diseño no cabe: celda de {celda_ancho:.2f}x{celda_alto:.2f} pt"
        )
    if not math.isfinite(proporcion) or proporcion <= 0:
        raise ErrorConfiguracion("Proporción de imagen inválida")

    if proporcion > celda_ancho / celda_alto:
        return celda_ancho, celda_ancho / proporcion
    return celda_alto * proporcion, celda_alto


def centrar_en_celda(celda_ancho: float, celda_alto: float, ancho: float, alto: float) -> Tuple[float, float]:
    return (celda_ancho - ancho) / 2, (celda_alto - alto) / 2


def tamano_celda(disponible: float, divisiones: int, espaciado: float) -> float:
    """Tamaño de cada una de ``divisiones`` celdas iguales separadas por ``espaciado``."""
    if divisiones <= 0:
        raise ErrorConfiguracion("La grilla necesita al menos una fila y una columna")
    tamano = (disponible - (divisiones - 1) * espaciado) / divisiones
    if not math.isfinite(tamano) or tamano <= 0:
        raise ErrorConfiguracion(
            "El diseño no cabe en la página: reduzca filas/columnas, márgenes o espaciado"
        )
    return tamano
