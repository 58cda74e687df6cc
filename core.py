"""
Utilidades de entrada para el servidor del aparcamiento.

Version del paquete y saneado de los valores que llegan por HTTP antes de
tocar el asignador. Devuelven "" o None cuando el valor no es valido, para que
la capa HTTP decida el mensaje y el codigo.
"""

from __future__ import annotations

import re

__version__ = "1.0.0"


REGISTRATION_RE = re.compile(r"^[A-Z0-9-]+$")
_DIGITS_RE = re.compile(r"^[+-]?[0-9]+$")


def sanitize_registration(registration: object) -> str:
    """Matricula tal cual si cumple ^[A-Z0-9-]+$; "" en otro caso.

    No se normaliza (ni mayusculas ni espacios): "ka-01" es invalida.
    """
    if not isinstance(registration, str):
        return ""
    return registration if REGISTRATION_RE.fullmatch(registration) else ""


def sanitize_text(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value if value else ""


def parse_int(value: object) -> int | None:
    """Entero JSON o cadena de digitos. Los booleanos no cuentan como enteros."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _DIGITS_RE.fullmatch(value.strip()):
        return int(value.strip())
    return None


def parse_positive_int(value: object) -> int | None:
    n = parse_int(value)
    return n if n is not None and n >= 1 else None
