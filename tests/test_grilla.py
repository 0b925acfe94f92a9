from pathlib import Path

import sys
sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from errores import ErrorConfiguracion
from grilla import (
    HORIZONTAL,
    VERTICAL,
    capacidad_repeticion,
    grilla_collage,
    grilla_fija,
    necesita_rotacion,
    orientacion_objetivo,
)
from modelos import Grilla, Imagen


def test_collage_cinco_imagenes_en_carta():
    assert grilla_collage(5, 190, 257) == Grilla(2, 3)


@pytest.mark.parametrize("n, esperado", [(0, (0, 0)), (1, (1, 1)), (2, (2, 1)), (3, (2, 2)), (4, (2, 2))])
def test_collage_pocas_imagenes(n, esperado):
    g = grilla_collage(n, 190, 257)
    assert (g.columnas, g.filas) == esperado


@pytest.mark.parametrize("contenedor", [(190, 257), (257, 190), (100, 100), (500, 50)])
def test_collage_siempre_entra_todo(contenedor):
    for n in range(1, 41):
        g = grilla_collage(n, *contenedor)
        assert g.capacidad >= n
        # no queda una fila entera vacía
        assert g.capacidad - n < g.columnas


def test_capacidad_repeticion():
    assert capacidad_repeticion(190, 50, 1) == 3
    assert capacidad_repeticion(257, 50, 1) == 5
    assert capacidad_repeticion(40, 50, 1) == 0
    with pytest.raises(ErrorConfiguracion):
        capacidad_repeticion(100, 0, 1)


def test_grilla_fija_descarta_sobrantes():
    grilla, colocables, sobrantes = grilla_fija(2, 2, list("abcde"))
    assert grilla == Grilla(2, 2)
    assert colocables == list("abcd")
    assert sobrantes == ["e"]


@pytest.mark.parametrize("cols, filas", [(0, 2), (2, -1), ("x", 2), (None, 2)])
def test_grilla_fija_invalida(cols, filas):
    with pytest.raises(ErrorConfiguracion):
        grilla_fija(cols, filas, [])


def _img(nombre, w, h, rot=0):
    return Imagen(nombre, w, h, rotacion=rot)


def test_orientacion_por_mayoria():
    verticales = [_img("a", 3, 4), _img("b", 3, 4), _img("c", 4, 3)]
    assert orientacion_objetivo(verticales) == VERTICAL
    empate = [_img("a", 3, 4), _img("b", 4, 3)]
    assert orientacion_objetivo(empate) == HORIZONTAL
    assert orientacion_objetivo(verticales, HORIZONTAL) == HORIZONTAL


def test_necesita_rotacion():
    assert necesita_rotacion(_img("h", 4, 3), VERTICAL)
    assert not necesita_rotacion(_img("v", 3, 4), VERTICAL)
    assert necesita_rotacion(_img("v", 3, 4), HORIZONTAL)
    # la rotación base cuenta para la orientación
    assert not necesita_rotacion(_img("h", 4, 3, rot=90), VERTICAL)
    # las cuadradas nunca se giran
    assert not necesita_rotacion(_img("c", 5, 5), VERTICAL)
    assert not necesita_rotacion(_img("c", 5, 5), HORIZONTAL)
