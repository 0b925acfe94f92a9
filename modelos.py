"""Entidades del montaje. Todas viven sólo durante una solicitud."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from errores import ErrorConfiguracion
from unidades import dimensiones_pagina, mm_to_pt, pt_to_mm

ROTACIONES_VALIDAS = (0, 90, 180, 270)


class Modo(str, Enum):
    REPETIDOR = "repetidor"
    COLLAGE = "collage"
    SIMETRICO = "simetrico"
    PLANTILLA = "plantilla"
    MULTIPAGINA = "multipagina"


@dataclass(frozen=True)
class ConfigPagina:
    tamano_papel: str = "letter"
    vertical: bool = True
    margen_mm: float = 10.0
    espaciado_mm: float = 2.0
    media_pagina: bool = False

    def __post_init__(self):
        if not math.isfinite(self.margen_mm) or self.margen_mm < 0:
            raise ErrorConfiguracion("El margen debe ser un número finito no negativo")
        if not math.isfinite(self.espaciado_mm) or self.espaciado_mm < 0:
            raise ErrorConfiguracion("El espaciado debe ser un número finito no negativo")
        # valida el tamaño de papel al construir
        dimensiones_pagina(self.tamano_papel, self.vertical)

    @property
    def tamano_pt(self) -> Tuple[float, float]:
        return dimensiones_pagina(self.tamano_papel, self.vertical)

    @property
    def margen_pt(self) -> float:
        return mm_to_pt(self.margen_mm)

    @property
    def espaciado_pt(self) -> float:
        return mm_to_pt(self.espaciado_mm)

    def area_util(self, vertical: Optional[bool] = None) -> Tuple[float, float, float, float]:
        """Área dibujable ``(x, y, ancho, alto)`` en puntos, origen inferior izquierdo.

        En media página el alto se reduce a la mitad y el área queda pegada al
        margen superior.
        """
        if vertical is None:
            vertical = self.vertical
        ancho_pag, alto_pag = dimensiones_pagina(self.tamano_papel, vertical)
        margen = self.margen_pt
        ancho = ancho_pag - 2 * margen
        alto = alto_pag - 2 * margen
        if self.media_pagina:
            alto /= 2
        if ancho <= 0 or alto <= 0:
            raise ErrorConfiguracion("Los márgenes no dejan área útil en la página")
        y = alto_pag - margen - alto
        return margen, y, ancho, alto


@dataclass(frozen=True)
class Imagen:
    nombre: str
    ancho_px: int
    alto_px: int
    datos: bytes = field(repr=False, default=b"")
    mimetype: str = ""
    rotacion: int = 0
    estimada: bool = False

    def __post_init__(self):
        if self.ancho_px <= 0 or self.alto_px <= 0:
            raise ErrorConfiguracion(f"Dimensiones inválidas para {self.nombre}")
        if self.rotacion not in ROTACIONES_VALIDAS:
            raise ErrorConfiguracion("La rotación debe ser 0, 90, 180 o 270")

    @property
    def es_horizontal(self) -> bool:
        return self.proporcion(self.rotacion) > 1

    @property
    def es_vertical(self) -> bool:
        return self.proporcion(self.rotacion) < 1

    def proporcion(self, rotacion: int = 0) -> float:
        """Ancho/alto tras aplicar ``rotacion`` grados."""
        if rotacion % 180 == 90:
            return self.alto_px / self.ancho_px
        return self.ancho_px / self.alto_px


@dataclass(frozen=True)
class Colocacion:
    imagen: Imagen
    pagina: int
    x: float
    y: float
    ancho: float
    alto: float
    rotacion: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "archivo": self.imagen.nombre,
            "pagina": self.pagina,
            "x_pt": round(self.x, 3),
            "y_pt": round(self.y, 3),
            "w_pt": round(self.ancho, 3),
            "h_pt": round(self.alto, 3),
            "x_mm": round(pt_to_mm(self.x), 3),
            "y_mm": round(pt_to_mm(self.y), 3),
            "w_mm": round(pt_to_mm(self.ancho), 3),
            "h_mm": round(pt_to_mm(self.alto), 3),
            "rot_deg": self.rotacion,
        }


@dataclass(frozen=True)
class Grilla:
    columnas: int
    filas: int

    @property
    def capacidad(self) -> int:
        return self.columnas * self.filas


@dataclass(frozen=True)
class SolicitudMontaje:
    pagina: ConfigPagina
    modo: Modo
    imagenes: Tuple[Imagen, ...]
    parametros: Mapping[str, Any] = field(default_factory=dict)

    def imagen_por_nombre(self) -> Dict[str, Imagen]:
        return {img.nombre: img for img in self.imagenes}


@dataclass
class PlanMontaje:
    modo: Modo
    paginas: List[Tuple[float, float]] = field(default_factory=list)
    colocaciones: List[Colocacion] = field(default_factory=list)
    grilla: Optional[Grilla] = None
    advertencias: List[str] = field(default_factory=list)
    descartadas: List[str] = field(default_factory=list)

    def nueva_pagina(self, ancho_pt: float, alto_pt: float) -> int:
        self.paginas.append((ancho_pt, alto_pt))
        return len(self.paginas) - 1

    def colocaciones_de(self, pagina: int) -> List[Colocacion]:
        return [c for c in self.colocaciones if c.pagina == pagina]

    def resumen(self) -> Dict[str, Any]:
        return {
            "modo": self.modo.value,
            "paginas": [
                {"ancho_pt": w, "alto_pt": h, "ancho_mm": round(pt_to_mm(w), 2), "alto_mm": round(pt_to_mm(h), 2)}
                for w, h in self.paginas
            ],
            "grid": (
                {"filas": self.grilla.filas, "columnas": self.grilla.columnas}
                if self.grilla
                else None
            ),
            "colocadas": len(self.colocaciones),
            "descartadas": list(self.descartadas),
            "advertencias": list(self.advertencias),
            "positions": [c.to_dict() for c in self.colocaciones],
        }
