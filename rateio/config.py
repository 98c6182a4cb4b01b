# rateio/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError

CSV_URL_VAR = "RATEIO_CSV_URL"
LOG_LEVEL_VAR = "RATEIO_LOG_LEVEL"
ASSETS_DIR_VAR = "RATEIO_ASSETS_DIR"


@dataclass(frozen=True)
class Settings:
    csv_url: str
    log_level: str = "INFO"
    assets_dir: Optional[Path] = None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Lê a configuração do ambiente. Sem ``environ`` explícito carrega antes o
    ``.env`` do diretório atual (sem sobrescrever variáveis já definidas).
    A URL do CSV é obrigatória: sem ela nenhum carregamento é tentado.
    """
    if environ is None:
        load_dotenv(Path.cwd() / ".env", override=False)
        environ = os.environ

    csv_url = (environ.get(CSV_URL_VAR) or "").strip()
    if not csv_url:
        raise ConfigError(f"{CSV_URL_VAR} não definida")

    log_level = (environ.get(LOG_LEVEL_VAR) or "INFO").strip() or "INFO"
    assets_raw = (environ.get(ASSETS_DIR_VAR) or "").strip()
    return Settings(
        csv_url=csv_url,
        log_level=log_level,
        assets_dir=Path(assets_raw) if assets_raw else None,
    )
