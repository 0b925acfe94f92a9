import os


def _env_bool(name: str, default: str = "false") -> bool:
    value = os.environ.get(name, default)
    if value is None:
        return False
    return value.lower() in {"1", "true", "yes", "y"}


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


MAX_CONTENT_LENGTH = _env_int("MAX_CONTENT_LENGTH", 100 * 1024 * 1024)  # 100MB
MAX_IMAGENES = _env_int("MAX_IMAGENES", 100)

# Si está activo, una imagen cuyas dimensiones no se pueden leer corta la
# solicitud en lugar de usar el tamaño por defecto (800x600).
SONDEO_ESTRICTO = _env_bool("SONDEO_ESTRICTO")

RENDER_WORKERS = _env_int("RENDER_WORKERS", 4)
JPEG_QUALITY = _env_int("JPEG_QUALITY", 95)
PREVIEW_DPI = _env_int("PREVIEW_DPI", 72)
