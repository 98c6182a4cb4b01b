from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

@dataclass(frozen=True)
class Registro:
    mes: str                       # rótulo do mês como no CSV ("Março, 2024")
    pessoa: str
    valor: float                   # 0.0 quando o texto não é um número
    pago: bool                     # True só para "sim"
    mes_dt: date                   # primeiro dia do mês (parsed)
    data_pagamento: Optional[str] = None  # texto livre, None se vazio


@dataclass(frozen=True)
class ParseIssue:
    linha: int       # linha de dados (1 = primeira após o cabeçalho)
    coluna: str
    valor: str
    motivo: str


@dataclass(frozen=True)
class Snapshot:
    """Resultado imutável de um carregamento completo."""
    registros: Tuple[Registro, ...]
    mes_vigente: Optional[str]
    carregado_em: datetime
    issues: Tuple[ParseIssue, ...] = ()
