from pathlib import Path

import sys
sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from conftest import imagen_bytes
from errores import ErrorDecodificacion
from sondeo_imagen import (
    DIMENSIONES_POR_DEFECTO,
    leer_dimensiones_jpeg,
    leer_dimensiones_png,
    sondear_dimensiones,
)


def test_png_desde_cabecera():
    datos = imagen_bytes(37, 21, "PNG")
    assert leer_dimensiones_png(datos) == (37, 21)
    assert leer_dimensiones_jpeg(datos) is None


def test_jpeg_desde_sof():
    datos = imagen_bytes(37, 21, "JPEG")
    assert leer_dimensiones_jpeg(datos) == (37, 21)
    assert leer_dimensiones_png(datos) is None


def test_jpeg_progresivo():
    import io
    from PIL import Image

    buf = io.BytesIO()
    Image.new("RGB", (64, 48), (0, 120, 0)).save(buf, format="JPEG", progressive=True)
    assert leer_dimensiones_jpeg(buf.getvalue()) == (64, 48)


def test_otros_formatos_con_pillow():
    datos = imagen_bytes(30, 20, "GIF", modo="P", color=1)
    assert sondear_dimensiones(datos, "image/gif") == (30, 20, False)


def test_mimetype_equivocado_igual_se_lee():
    datos = imagen_bytes(30, 20, "PNG")
    assert sondear_dimensiones(datos, "image/jpeg") == (30, 20, False)


def test_bytes_ilegibles_usan_tamano_por_defecto():
    ancho, alto, estimada = sondear_dimensiones(b"no soy una imagen", "image/png", "x.png")
    assert (ancho, alto) == DIMENSIONES_POR_DEFECTO
    assert estimada is True


def test_modo_estricto():
    with pytest.raises(ErrorDecodificacion):
        sondear_dimensiones(b"\xff\xd8\xff", "image/jpeg", "roto.jpg", estricto=True)
