import base64
import io
import json
import zipfile
from pathlib import Path

import sys
sys.path.append(str(Path(__file__).resolve().parents[1]))

import fitz
import pytest

from app import app
from conftest import imagen_bytes


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def _post(client, url, imagenes, **form):
    data = dict(form)
    data["images"] = [(io.BytesIO(datos), nombre) for nombre, datos in imagenes]
    return client.post(url, data=data, content_type="multipart/form-data")


def _paginas(resp):
    doc = fitz.open(stream=resp.data, filetype="pdf")
    try:
        return [(p.rect.width, p.rect.height) for p in doc]
    finally:
        doc.close()


def test_collage_devuelve_pdf(client):
    imagenes = [(f"{n}.png", imagen_bytes(40, 30)) for n in range(3)]
    resp = _post(client, "/generate-collage", imagenes, orientation="landscape", margin="5", spacing="2")
    assert resp.status_code == 200
    assert resp.mimetype == "application/pdf"
    assert "collage.pdf" in resp.headers["Content-Disposition"]
    assert resp.headers["X-Montaje-Advertencias"] == "0"
    assert _paginas(resp) == [(792.0, 612.0)]


def test_sin_imagenes(client):
    resp = client.post("/generate-collage", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False


def test_papel_invalido(client):
    resp = _post(client, "/generate-simetrico", [("a.png", imagen_bytes(10, 10))], pageSize="a4")
    assert resp.status_code == 400
    assert "papel" in resp.get_json()["error"]


def test_repetidor_advierte_imagenes_sobrantes(client):
    imagenes = [("a.png", imagen_bytes(30, 30)), ("b.png", imagen_bytes(30, 30))]
    resp = _post(client, "/generate-repetidor", imagenes, imageWidth="50")
    assert resp.status_code == 200
    assert resp.headers["X-Montaje-Advertencias"] == "1"


def test_auto_repetidor_con_config_json(client):
    config = {
        "pageSettings": {"pageSize": "legal", "orientation": "portrait", "margin": 10},
        "image": {"widthMM": 60, "heightMM": 40, "rotation": 0},
        "grid": {"cols": 2, "rows": 2, "spacing": 5},
    }
    data = {
        "image": (io.BytesIO(imagen_bytes(60, 40, "JPEG")), "logo.jpg"),
        "config": json.dumps(config),
    }
    resp = client.post("/generate-auto-repetidor", data=data, content_type="multipart/form-data")
    assert resp.status_code == 200
    assert _paginas(resp) == [(612.0, 1008.0)]


def test_multi_pagina_desde_zip(client):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("a.png", imagen_bytes(40, 30))
        zf.writestr("b.jpg", imagen_bytes(30, 40, "JPEG"))
        zf.writestr("leeme.txt", b"ignorar")
    buf.seek(0)
    resp = client.post(
        "/generate-multi-pagina",
        data={"images": (buf, "fotos.zip"), "pageSettings": json.dumps({"margin": 0})},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    assert len(_paginas(resp)) == 2


def test_plantilla_con_celdas(client):
    config = {
        "pageSettings": {"pageSize": "letter", "orientation": "portrait", "margin": 10, "spacing": 5},
        "pages": [
            {"baseCols": 2, "baseRows": 2, "cells": [
                {"image": {"name": "a.png", "rotation": 90}, "col": 0, "row": 0, "colSpan": 2, "rowSpan": 1},
            ]},
            {"baseCols": 1, "baseRows": 1, "cells": [
                {"image": {"name": "falta.png"}, "col": 0, "row": 0, "colSpan": 1, "rowSpan": 1},
            ]},
        ],
    }
    resp = _post(
        client, "/generate-plantilla", [("a.png", imagen_bytes(40, 30))], config=json.dumps(config)
    )
    assert resp.status_code == 200
    assert len(_paginas(resp)) == 1


def test_layout_celda_fuera_de_grilla(client):
    layout = {
        "pageSettings": {"baseCols": 2, "baseRows": 2, "margin": 10, "spacing": 5},
        "cells": [{"imageName": "a.png", "col": 1, "row": 0, "colSpan": 2, "rowSpan": 1}],
    }
    resp = _post(client, "/generate-layout", [("a.png", imagen_bytes(40, 30))], layout=json.dumps(layout))
    assert resp.status_code == 400


def test_api_plan(client):
    imagenes = [(f"{n}.png", imagen_bytes(40, 30)) for n in range(5)]
    resp = _post(client, "/api/plan/collage", imagenes, margin="10", spacing="2")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["ok"] is True
    assert data["modo"] == "collage"
    assert data["colocadas"] == 5
    assert len(data["positions"]) == 5
    assert {"archivo", "x_mm", "y_mm", "w_mm", "h_mm", "rot_deg"} <= set(data["positions"][0])


def test_api_plan_pattern_centra(client):
    resp = _post(client, "/api/plan/pattern", [("a.png", imagen_bytes(30, 30))], widthMM="50")
    pos = resp.get_json()["positions"]
    izquierda = min(p["x_mm"] for p in pos)
    derecha = 215.9 - max(p["x_mm"] + p["w_mm"] for p in pos)
    assert izquierda == pytest.approx(derecha, abs=0.01)


def test_api_plan_modo_desconocido(client):
    resp = _post(client, "/api/plan/poster", [("a.png", imagen_bytes(10, 10))])
    assert resp.status_code == 400


def test_api_preview(client):
    resp = _post(client, "/api/preview/simetrico", [("a.png", imagen_bytes(30, 40))])
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["paginas"] == 1
    prefijo = "data:image/png;base64,"
    assert data["preview"].startswith(prefijo)
    png = base64.b64decode(data["preview"][len(prefijo):])
    assert png.startswith(b"\x89PNG")


def test_error_de_render_es_500(client, monkeypatch):
    import render_pdf
    from errores import ErrorRender

    def falla(*args, **kwargs):
        raise ErrorRender("sin memoria")

    monkeypatch.setattr(render_pdf, "preparar_imagen", falla)
    resp = _post(client, "/generate-collage", [("a.png", imagen_bytes(10, 10))])
    assert resp.status_code == 500
    assert resp.get_json() == {"ok": False, "error": "sin memoria"}


def test_payload_demasiado_grande(client, monkeypatch):
    monkeypatch.setitem(app.config, "MAX_CONTENT_LENGTH", 1024)
    resp = _post(client, "/generate-collage", [("a.png", b"0" * 4096)])
    assert resp.status_code == 413
    assert resp.get_json()["ok"] is False


def test_generate_pdf_es_collage(client):
    imagenes = [(f"{n}.png", imagen_bytes(40, 30)) for n in range(2)]
    resp = _post(client, "/generate-pdf", imagenes)
    assert resp.status_code == 200
    assert "collage.pdf" in resp.headers["Content-Disposition"]
    assert _paginas(resp) == [(612.0, 792.0)]


@pytest.mark.parametrize(
    "url, campos",
    [
        ("/api/plan/collage", {"spacing": "nan"}),
        ("/api/plan/collage", {"margin": "inf"}),
        ("/api/plan/simetrico", {"imagesPerRow": "nan"}),
        ("/api/plan/repetidor", {"widthMM": "nan"}),
        ("/api/plan/repetidor", {"widthMM": "50", "cols": "1e400"}),
    ],
)
def test_numeros_no_finitos_son_400(client, url, campos):
    resp = _post(client, url, [("a.png", imagen_bytes(30, 30))], **campos)
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False


def test_auto_repetidor_alto_cero(client):
    config = {"image": {"widthMM": 50, "heightMM": 0}, "grid": {"cols": 0, "rows": 0}}
    resp = _post(
        client, "/api/plan/auto-repetidor", [("a.png", imagen_bytes(40, 20))], config=json.dumps(config)
    )
    assert resp.status_code == 200
    pos = resp.get_json()["positions"][0]
    assert pos["w_mm"] == pytest.approx(50, abs=0.01)
    assert pos["h_mm"] == pytest.approx(25, abs=0.01)


def test_zip_con_demasiadas_imagenes(client, monkeypatch):
    monkeypatch.setitem(app.config, "MAX_IMAGENES", 3)
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for n in range(4):
            zf.writestr(f"{n}.png", imagen_bytes(10, 10))
    buf.seek(0)
    resp = client.post(
        "/generate-collage", data={"images": (buf, "fotos.zip")}, content_type="multipart/form-data"
    )
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False
