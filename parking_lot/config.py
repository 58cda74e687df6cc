"""Configuracion basica del servidor del aparcamiento.

Valores por defecto sobreescribibles con variables de entorno:
- LOT_HOST (por defecto 127.0.0.1)
- PORT (por defecto 3000)
- LOG_LEVEL (por defecto INFO)
- LOT_STRICT (1/true/yes: comprobar invariantes tras cada mutacion)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(env.get(name, str(default)))
    except ValueError:
        return default


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class LotServerConfig:
    """Config del servidor HTTP."""
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    strict: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "LotServerConfig":
        env = os.environ if env is None else env
        level = env.get("LOG_LEVEL", cls.log_level).strip().upper()
        port = _env_int(env, "PORT", cls.port)
        return cls(
            host=env.get("LOT_HOST", cls.host).strip() or cls.host,
            port=port if 0 < port < 65536 else cls.port,
            log_level=level if level in LOG_LEVELS else cls.log_level,
            strict=_env_bool(env, "LOT_STRICT", cls.strict),
        )
