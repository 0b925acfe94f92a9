from __future__ import annotations

from typing import Dict, Type

from errores import ErrorConfiguracion
from modelos import Modo

from .base import BaseModo
from .collage import CollageModo
from .multipagina import MultipaginaModo
from .plantilla import PlantillaModo
from .repetidor import RepetidorModo
from .simetrico import SimetricoModo

MODO_CLASSES: Dict[Modo, Type[BaseModo]] = {
    Modo.REPETIDOR: RepetidorModo,
    Modo.COLLAGE: CollageModo,
    Modo.SIMETRICO: SimetricoModo,
    Modo.PLANTILLA: PlantillaModo,
    Modo.MULTIPAGINA: MultipaginaModo,
}


def get_modo(modo: Modo) -> BaseModo:
    cls = MODO_CLASSES.get(modo)
    if cls is None:
        raise ErrorConfiguracion(f"Modo desconocido: {modo}")
    return cls()
