# src/boamp_mcp/config.py

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from boamp_mcp.collectors.boamp_client import BOAMP_API_URL, DEFAULT_TIMEOUT

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class BoampSettings:
    """
    Configuration du serveur, lue depuis l'environnement (ou un fichier .env).

    - BOAMP_API_URL   : endpoint "records" du jeu de données BOAMP
    - BOAMP_TIMEOUT   : timeout HTTP en secondes (0 = pas de timeout)
    - BOAMP_LOG_LEVEL : niveau de log (INFO par défaut)
    """

    api_url: str = BOAMP_API_URL
    timeout: Optional[float] = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BoampSettings":
        env = os.environ if environ is None else environ

        api_url = env.get("BOAMP_API_URL", "").strip() or BOAMP_API_URL

        raw_timeout = env.get("BOAMP_TIMEOUT", "").strip()
        timeout: Optional[float] = DEFAULT_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as exc:
                raise ValueError(f"BOAMP_TIMEOUT invalide: {raw_timeout!r}") from exc
            if timeout < 0:
                raise ValueError(f"BOAMP_TIMEOUT négatif: {raw_timeout!r}")
            if timeout == 0:
                timeout = None

        log_level = env.get("BOAMP_LOG_LEVEL", "").strip().upper() or "INFO"
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"BOAMP_LOG_LEVEL invalide: {log_level!r}")

        return cls(api_url=api_url, timeout=timeout, log_level=log_level)


def configure_logging(level: str = "INFO") -> None:
    # stdout transporte le protocole MCP : les logs vont sur stderr
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=sys.stderr,
    )
