import io
from pathlib import Path

import sys
sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest
from PIL import Image


def imagen_bytes(ancho, alto, formato="PNG", modo="RGB", color=(200, 30, 30)):
    if modo == "RGBA" and len(color) == 3:
        color = color + (128,)
    buf = io.BytesIO()
    Image.new(modo, (ancho, alto), color).save(buf, format=formato)
    return buf.getvalue()


@pytest.fixture
def png_horizontal():
    return imagen_bytes(400, 300, "PNG")


@pytest.fixture
def jpg_vertical():
    return imagen_bytes(300, 400, "JPEG")
