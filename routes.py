import base64
import io

from flask import Blueprint, current_app, jsonify, request, send_file
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from archivos import construir_imagenes, expandir_archivos
from errores import ErrorConfiguracion, ErrorMontaje
from montaje_imagenes import generar_documento, planificar_montaje
from parametros import construir_solicitud, leer_configuracion, parsear_modo
from vista_previa import generar_vista_previa_png

routes_bp = Blueprint("routes", __name__)

CAMPOS_ARCHIVOS = ("images", "image")

# Parámetros fijos por alias de ruta.
EXTRA_POR_ALIAS = {
    "pattern": {"centrar": True},
}


def _json_error(msg, code=400):
    return jsonify(ok=False, error=msg), code


@routes_bp.app_errorhandler(RequestEntityTooLarge)
def _too_large(e):
    return _json_error("Payload demasiado grande. Reduce el tamaño o la cantidad de imágenes.", 413)


def _cargar_solicitud(alias):
    modo = parsear_modo(alias)
    datos = leer_configuracion(request.form)
    subidos = []
    for campo in CAMPOS_ARCHIVOS:
        subidos.extend(request.files.getlist(campo))
    archivos = expandir_archivos(
        subidos,
        max_imagenes=current_app.config.get("MAX_IMAGENES"),
        max_bytes=current_app.config.get("MAX_CONTENT_LENGTH"),
    )
    imagenes = construir_imagenes(
        archivos,
        estricto=current_app.config.get("SONDEO_ESTRICTO", False),
        max_imagenes=current_app.config.get("MAX_IMAGENES"),
    )
    current_app.logger.info(
        "[%s] %d imágenes recibidas (%d archivos subidos)",
        alias.upper(),
        len(imagenes),
        len(subidos),
    )
    return construir_solicitud(modo, datos, imagenes, EXTRA_POR_ALIAS.get(alias))


def _ejecutar(alias, accion):
    """Corre ``accion`` traduciendo los errores del montaje a respuestas JSON."""
    try:
        return accion()
    except ErrorMontaje as e:
        if e.status_code >= 500:
            current_app.logger.exception("[%s] Error generando el montaje", alias.upper())
        else:
            current_app.logger.info("[%s] Solicitud rechazada: %s", alias.upper(), e)
        return _json_error(str(e), e.status_code)
    except HTTPException:
        raise
    except Exception as e:
        current_app.logger.exception("[%s] Error inesperado", alias.upper())
        return _json_error(f"Error generando PDF: {str(e)}", 500)


def _generar(solicitud):
    return generar_documento(
        solicitud,
        workers=current_app.config.get("RENDER_WORKERS", 4),
        calidad_jpeg=current_app.config.get("JPEG_QUALITY", 95),
    )


def _responder_pdf(alias, nombre_descarga):
    def accion():
        pdf, plan = _generar(_cargar_solicitud(alias))
        resp = send_file(
            io.BytesIO(pdf),
            mimetype="application/pdf",
            as_attachment=True,
            download_name=nombre_descarga,
        )
        resp.headers["X-Montaje-Advertencias"] = str(len(plan.advertencias))
        return resp

    return _ejecutar(alias, accion)


@routes_bp.route("/generate-collage", methods=["POST"])
def generate_collage():
    return _responder_pdf("collage", "collage.pdf")


@routes_bp.route("/generate-pdf", methods=["POST"])
def generate_pdf():
    return _responder_pdf("collage", "collage.pdf")


@routes_bp.route("/generate-simetrico", methods=["POST"])
def generate_simetrico():
    return _responder_pdf("simetrico", "simetrico.pdf")


@routes_bp.route("/generate-repetidor", methods=["POST"])
def generate_repetidor():
    return _responder_pdf("repetidor", "repetidor.pdf")


@routes_bp.route("/generate-repetidor-simetrico", methods=["POST"])
def generate_repetidor_simetrico():
    return _responder_pdf("repetidor-simetrico", "repetidor-simetrico.pdf")


@routes_bp.route("/generate-auto-repetidor", methods=["POST"])
def generate_auto_repetidor():
    return _responder_pdf("auto-repetidor", "auto-repetidor.pdf")


@routes_bp.route("/generate-pdf/pattern", methods=["POST"])
def generate_pattern():
    return _responder_pdf("pattern", "pattern.pdf")


@routes_bp.route("/generate-layout", methods=["POST"])
def generate_layout():
    return _responder_pdf("layout", "layout.pdf")


@routes_bp.route("/generate-plantilla", methods=["POST"])
def generate_plantilla():
    return _responder_pdf("plantilla", "plantilla.pdf")


@routes_bp.route("/generate-multi-pagina", methods=["POST"])
def generate_multi_pagina():
    return _responder_pdf("multi-pagina", "multi-pagina.pdf")


@routes_bp.route("/api/plan/<modo>", methods=["POST"])
def api_plan(modo):
    """Devuelve las posiciones calculadas sin generar el PDF."""

    def accion():
        plan = planificar_montaje(_cargar_solicitud(modo))
        return jsonify(ok=True, **plan.resumen()), 200

    return _ejecutar(modo, accion)


@routes_bp.route("/api/preview/<modo>", methods=["POST"])
def api_preview(modo):
    def accion():
        try:
            pagina = int(request.form.get("pagina", 1)) - 1
        except ValueError as exc:
            raise ErrorConfiguracion("'pagina' debe ser un número entero") from exc
        pdf, plan = _generar(_cargar_solicitud(modo))
        png = generar_vista_previa_png(
            pdf, pagina=pagina, dpi=current_app.config.get("PREVIEW_DPI", 72)
        )
        return jsonify(
            ok=True,
            preview="data:image/png;base64," + base64.b64encode(png).decode("ascii"),
            pagina=pagina + 1,
            paginas=len(plan.paginas),
            advertencias=plan.advertencias,
        ), 200

    return _ejecutar(modo, accion)
