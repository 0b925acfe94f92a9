from __future__ import annotations

import fitz  # PyMuPDF

from errores import ErrorConfiguracion, ErrorRender


def generar_vista_previa_png(pdf_bytes: bytes, pagina: int = 0, dpi: int = 72) -> bytes:
    """Rasteriza una página del PDF generado y devuelve el PNG."""
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as exc:
        raise ErrorRender(f"No se pudo abrir el PDF para la vista previa: {exc}") from exc
    try:
        if pagina < 0 or pagina >= doc.page_count:
            raise ErrorConfiguracion(
                f"La página {pagina + 1} no existe (el documento tiene {doc.page_count})"
            )
        pix = doc[pagina].get_pixmap(dpi=dpi)
        return pix.tobytes("png")
    finally:
        doc.close()
