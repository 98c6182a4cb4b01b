import io
import warnings
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from .logging_setup import get_logger
from .models import ParseIssue, Registro
from .parsing import is_mes_valido, is_valor_valido, parse_mes_pt, parse_pago, parse_valor_br

logger = get_logger("rateio.io_csv")

# Colunas reconhecidas (match exato depois da limpeza do cabeçalho)
COL_MES = "Mes"
COL_PESSOA = "Pessoa"
COL_VALOR = "Valor"
COL_PAGO = "Pago"
COL_DATA_PAGAMENTO = "DataPagamento"  # opcional


def _clean_header(col: object) -> str:
    """Remove BOM, aspas soltas e espaços do nome da coluna."""
    return str(col or "").replace("\ufeff", "").replace('"', "").strip()


def _read_frame(text: str) -> pd.DataFrame:
    # linha com campos a mais é pulada pelo pandas com ParserWarning: vira log
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", pd.errors.ParserWarning)
        df = pd.read_csv(
            io.StringIO(text),
            sep=",",
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
            on_bad_lines="warn",
        )
    for w in caught:
        if not issubclass(w.category, pd.errors.ParserWarning):
            warnings.warn_explicit(w.message, w.category, w.filename, w.lineno)
            continue
        for line in str(w.message).splitlines():
            if line.strip():
                logger.warning("CSV: %s", line.strip())
    df = df.rename(columns=_clean_header)
    # linhas curtas ficam com NaN mesmo com keep_default_na=False
    return df.fillna("")


def load_rateio_csv(
    text: str,
    *,
    today: Optional[date] = None,
    issues: Optional[List[ParseIssue]] = None,
) -> List[Registro]:
    """
    Converte o texto CSV (Mes,Pessoa,Valor,Pago,DataPagamento) em Registros
    ordenados por mês (crescente, estável).

    Linhas sem ``Mes`` são descartadas, assim como as que o pandas rejeita por
    trazerem campos a mais (ficam registradas no log); qualquer outro problema
    cai no valor padrão do parser correspondente. Se ``issues`` for uma
    lista, recebe um ``ParseIssue`` para cada mês ou valor não reconhecido.
    """
    if not text or not text.strip():
        return []
    try:
        df = _read_frame(text)
    except pd.errors.EmptyDataError:
        return []

    if COL_MES not in df.columns:
        logger.warning("CSV sem coluna %r: nenhuma linha aproveitada (colunas: %s)", COL_MES, list(df.columns))
        return []

    registros: List[Registro] = []
    descartadas = 0
    for pos, (_, row) in enumerate(df.iterrows(), start=1):
        fields: Dict[str, str] = {k: str(v) for k, v in row.items()}
        mes = fields.get(COL_MES, "").strip()
        if not mes:
            descartadas += 1
            logger.debug("Linha %d descartada: %s vazio", pos, COL_MES)
            continue

        valor_raw = fields.get(COL_VALOR, "")
        valor = parse_valor_br(valor_raw)
        if not is_mes_valido(mes):
            _report(issues, ParseIssue(pos, COL_MES, mes, "mês não reconhecido, usando o mês atual"))
        if not is_valor_valido(valor_raw):
            _report(issues, ParseIssue(pos, COL_VALOR, valor_raw, "valor não numérico, usando 0"))

        data_pag = fields.get(COL_DATA_PAGAMENTO, "").strip()
        registros.append(Registro(
            mes=mes,
            pessoa=fields.get(COL_PESSOA, "").strip(),
            valor=valor,
            pago=parse_pago(fields.get(COL_PAGO, "")),
            mes_dt=parse_mes_pt(mes, today=today),
            data_pagamento=data_pag or None,
        ))

    if descartadas:
        logger.info("%d linha(s) sem %s descartada(s)", descartadas, COL_MES)
    return sorted(registros, key=lambda r: r.mes_dt)


def _report(issues: Optional[List[ParseIssue]], issue: ParseIssue) -> None:
    logger.warning("Linha %d, %s=%r: %s", issue.linha, issue.coluna, issue.valor, issue.motivo)
    if issues is not None:
        issues.append(issue)
