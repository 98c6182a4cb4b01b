# rateio/derive.py
"""
Visões derivadas do conjunto de registros: histórico filtrado, agrupamento por
ano, KPIs e cards do mês vigente. Funções puras, nunca alteram os registros.
"""
from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import Registro

# Sentinelas dos filtros
TODAS = "Todas"
TODOS = "Todos"
PAGO = "Pago"
PENDENTE = "Pendente"
STATUS_OPCOES: Tuple[str, ...] = (TODOS, PAGO, PENDENTE)


@dataclass(frozen=True)
class DashboardView:
    mes_vigente: Optional[str]
    historico: Tuple[Registro, ...]
    historico_por_ano: Tuple[Tuple[int, Tuple[Registro, ...]], ...]
    total_pago: float
    total_membros: int
    pendencias: int
    status_vigente: Tuple[Registro, ...]
    pessoas: Tuple[str, ...]


# ------------------ histórico ------------------
def filtrar_historico(
    registros: Sequence[Registro],
    pessoa: str = TODAS,
    status: str = TODOS,
) -> List[Registro]:
    """Filtra por pessoa/status e ordena do mais recente ao mais antigo."""
    rows: Iterable[Registro] = registros
    if pessoa != TODAS:
        rows = [r for r in rows if r.pessoa == pessoa]
    if status != TODOS:
        want_paid = status == PAGO
        rows = [r for r in rows if r.pago == want_paid]
    # sort estável: empates mantêm a ordem de entrada
    return sorted(rows, key=lambda r: r.mes_dt, reverse=True)


def agrupar_por_ano(historico: Sequence[Registro]) -> List[Tuple[int, List[Registro]]]:
    grupos: Dict[int, List[Registro]] = {}
    for r in historico:
        grupos.setdefault(r.mes_dt.year, []).append(r)
    return list(grupos.items())


# ------------------ KPIs (sempre sobre o conjunto completo) ------------------
def total_pago(registros: Sequence[Registro]) -> float:
    return sum((r.valor for r in registros if r.pago), 0.0)


def total_membros(registros: Sequence[Registro]) -> int:
    return len({r.pessoa for r in registros})


def _mes_dt_de(registros: Sequence[Registro], mes_vigente: Optional[str]):
    if not mes_vigente:
        return None
    return next((r.mes_dt for r in registros if r.mes == mes_vigente), None)


def pendentes_ate(registros: Sequence[Registro], mes_vigente: Optional[str]) -> int:
    """Não pagos com mês <= mês vigente; 0 sem mês vigente."""
    limite = _mes_dt_de(registros, mes_vigente)
    if limite is None:
        return 0
    return sum(1 for r in registros if not r.pago and r.mes_dt <= limite)


def registros_do_mes(registros: Sequence[Registro], mes_vigente: Optional[str]) -> List[Registro]:
    if not mes_vigente:
        return []
    return [r for r in registros if r.mes == mes_vigente]


def _collate_key(nome: str) -> Tuple[str, str]:
    base = unicodedata.normalize("NFD", nome)
    base = "".join(ch for ch in base if not unicodedata.combining(ch))
    return base.casefold(), nome


def lista_pessoas(registros: Sequence[Registro]) -> List[str]:
    """Opções do filtro de pessoa: "Todas" + nomes distintos em ordem alfabética."""
    return [TODAS] + sorted({r.pessoa for r in registros}, key=_collate_key)


def build_dashboard(
    registros: Sequence[Registro],
    mes_vigente: Optional[str],
    pessoa: str = TODAS,
    status: str = TODOS,
) -> DashboardView:
    historico = filtrar_historico(registros, pessoa, status)
    return DashboardView(
        mes_vigente=mes_vigente or None,
        historico=tuple(historico),
        historico_por_ano=tuple((ano, tuple(rows)) for ano, rows in agrupar_por_ano(historico)),
        total_pago=total_pago(registros),
        total_membros=total_membros(registros),
        pendencias=pendentes_ate(registros, mes_vigente),
        status_vigente=tuple(registros_do_mes(registros, mes_vigente)),
        pessoas=tuple(lista_pessoas(registros)),
    )


# ------------------ estado de colapso por ano (UI) ------------------
def anos_colapsados_iniciais(registros: Sequence[Registro], mes_vigente: Optional[str]) -> Dict[int, bool]:
    """Todos os anos colapsados, exceto o do mês vigente."""
    vigente_dt = _mes_dt_de(registros, mes_vigente)
    ano_vigente = vigente_dt.year if vigente_dt else None
    return {r.mes_dt.year: r.mes_dt.year != ano_vigente for r in registros}


def alternar_ano(colapsados: Dict[int, bool], ano: int) -> Dict[int, bool]:
    novo = dict(colapsados)
    novo[ano] = not novo.get(ano, False)
    return novo


def alternar_todos(anos: Iterable[int], colapsados: Dict[int, bool]) -> Dict[int, bool]:
    """Se todos os anos listados estão colapsados expande tudo, senão colapsa tudo."""
    anos = list(anos)
    todos_colapsados = all(colapsados.get(a) is True for a in anos)
    return {a: not todos_colapsados for a in anos}
