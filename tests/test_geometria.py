from pathlib import Path

import sys
sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from errores import ErrorConfiguracion
from geometria import ajustar_en_celda, centrar_en_celda, tamano_celda


@pytest.mark.parametrize(
    "celda, proporcion",
    [
        ((100.0, 50.0), 4 / 3),
        ((100.0, 50.0), 3.0),
        ((50.0, 100.0), 1.0),
        ((80.0, 80.0), 0.5),
    ],
)
def test_ajuste_respeta_celda_y_proporcion(celda, proporcion):
    cw, ch = celda
    w, h = ajustar_en_celda(cw, ch, proporcion)
    assert w <= cw + 1e-9 and h <= ch + 1e-9
    assert w / h == pytest.approx(proporcion)
    # al menos un lado toca el borde de la celda
    assert w == pytest.approx(cw) or h == pytest.approx(ch)


def test_ajuste_por_alto_cuando_la_imagen_es_mas_angosta():
    assert ajustar_en_celda(100, 50, 4 / 3) == pytest.approx((50 * 4 / 3, 50))


@pytest.mark.parametrize(
    "cw, ch, r",
    [
        (0, 10, 1),
        (10, -1, 1),
        (10, 10, 0),
        (float("nan"), 10, 1),
        (10, float("inf"), 1),
        (10, 10, float("nan")),
    ],
)
def test_ajuste_degenerado(cw, ch, r):
    with pytest.raises(ErrorConfiguracion):
        ajustar_en_celda(cw, ch, r)


def test_centrado():
    assert centrar_en_celda(100, 50, 60, 50) == (20, 0)


def test_tamano_celda():
    assert tamano_celda(100, 3, 5) == pytest.approx(30)
    with pytest.raises(ErrorConfiguracion):
        tamano_celda(10, 5, 5)
    with pytest.raises(ErrorConfiguracion):
        tamano_celda(100, 0, 5)
