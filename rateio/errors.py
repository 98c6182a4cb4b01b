# rateio/errors.py
from __future__ import annotations

from typing import Optional


class RateioError(Exception):
    """Erro base do pacote."""


class ConfigError(RateioError):
    """Configuração obrigatória ausente ou inválida (fatal na inicialização)."""


class FetchError(RateioError):
    """Falha ao baixar o CSV: status HTTP != 200 ou erro de rede (status=None)."""

    def __init__(self, status: Optional[int] = None, detail: str = "") -> None:
        self.status = status
        self.detail = detail
        label = status if status is not None else "sem resposta"
        super().__init__(f"Erro ao baixar CSV: {label}")
