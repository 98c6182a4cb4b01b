from __future__ import annotations

import logging
from datetime import date

import pandas as pd
import pytest

from rateio.io_csv import load_rateio_csv
from rateio.models import ParseIssue


COLS = ["Mes", "Pessoa", "Valor", "Pago", "DataPagamento"]
TODAY = date(2024, 3, 10)


def _csv_text(rows):
    return pd.DataFrame(rows, columns=COLS).to_csv(index=False)


def test_load_rateio_csv_drops_rows_without_month_and_sorts():
    text = _csv_text([
        {"Mes": "Fevereiro, 2024", "Pessoa": " Bia ", "Valor": "1.234,56", "Pago": "não", "DataPagamento": ""},
        {"Mes": "", "Pessoa": "Fantasma", "Valor": "10,00", "Pago": "Sim", "DataPagamento": ""},
        {"Mes": "Janeiro, 2024", "Pessoa": "Ana", "Valor": "10,50", "Pago": "Sim", "DataPagamento": " 05/01/2024 "},
    ])

    registros = load_rateio_csv(text, today=TODAY)

    assert [r.mes for r in registros] == ["Janeiro, 2024", "Fevereiro, 2024"]
    ana, bia = registros
    assert ana.pessoa == "Ana"
    assert ana.valor == pytest.approx(10.5)
    assert ana.pago is True
    assert ana.data_pagamento == "05/01/2024"
    assert ana.mes_dt == date(2024, 1, 1)

    assert bia.pessoa == "Bia"
    assert bia.valor == pytest.approx(1234.56)
    assert bia.pago is False
    assert bia.data_pagamento is None


def test_load_rateio_csv_is_stable_on_same_month():
    text = _csv_text([
        {"Mes": "Março, 2024", "Pessoa": "Caio", "Valor": "1", "Pago": "sim", "DataPagamento": ""},
        {"Mes": "Janeiro, 2024", "Pessoa": "Ana", "Valor": "1", "Pago": "sim", "DataPagamento": ""},
        {"Mes": "Marco, 2024", "Pessoa": "Bia", "Valor": "1", "Pago": "sim", "DataPagamento": ""},
    ])
    registros = load_rateio_csv(text, today=TODAY)
    assert [r.pessoa for r in registros] == ["Ana", "Caio", "Bia"]


def test_load_rateio_csv_cleans_bom_and_quoted_headers_without_optional_column():
    text = '\ufeff"Mes"," Pessoa ","Valor","Pago"\n"Março, 2024",Ana,"10,50",Sim\n'
    registros = load_rateio_csv(text, today=TODAY)

    assert len(registros) == 1
    r = registros[0]
    assert r.mes == "Março, 2024"
    assert r.pessoa == "Ana"
    assert r.valor == pytest.approx(10.5)
    assert r.pago is True
    assert r.data_pagamento is None


def test_load_rateio_csv_degrades_short_and_malformed_rows():
    text = (
        "Mes,Pessoa,Valor,Pago,DataPagamento\n"
        '"Janeiro, 2024",Ana\n'
        '"Blah, 2024",Bia,abc,talvez,\n'
    )
    issues = []
    registros = load_rateio_csv(text, today=TODAY, issues=issues)

    assert len(registros) == 2
    ana = next(r for r in registros if r.pessoa == "Ana")
    assert ana.valor == 0
    assert ana.pago is False
    assert ana.data_pagamento is None

    bia = next(r for r in registros if r.pessoa == "Bia")
    assert bia.mes_dt == date(2024, 3, 1)  # fallback: mês de referência
    assert bia.valor == 0
    assert bia.pago is False

    assert ParseIssue(2, "Mes", "Blah, 2024", "mês não reconhecido, usando o mês atual") in issues
    assert {(i.linha, i.coluna) for i in issues} == {(2, "Mes"), (2, "Valor")}


def test_load_rateio_csv_logs_warning_for_fallbacks(caplog):
    text = 'Mes,Pessoa,Valor,Pago\n"Xyz, 2024",Ana,"1,00",sim\n'
    with caplog.at_level(logging.WARNING, logger="rateio"):
        load_rateio_csv(text, today=TODAY)
    assert any("Xyz, 2024" in rec.getMessage() for rec in caplog.records)


def test_load_rateio_csv_without_month_column_returns_empty():
    text = "Pessoa,Valor,Pago\nAna,\"10,00\",sim\n"
    assert load_rateio_csv(text, today=TODAY) == []


def test_load_rateio_csv_empty_input():
    assert load_rateio_csv("", today=TODAY) == []
    assert load_rateio_csv("   \n", today=TODAY) == []
    assert load_rateio_csv("Mes,Pessoa,Valor,Pago,DataPagamento\n", today=TODAY) == []


def test_load_rateio_csv_is_idempotent():
    text = _csv_text([
        {"Mes": "Abril, 2024", "Pessoa": "Ana", "Valor": "30,00", "Pago": "Sim", "DataPagamento": "01/04"},
        {"Mes": "Janeiro, 2024", "Pessoa": "Bia", "Valor": "30,00", "Pago": "", "DataPagamento": ""},
    ])
    assert load_rateio_csv(text, today=TODAY) == load_rateio_csv(text, today=TODAY)


def test_load_rateio_csv_keeps_row_with_stray_quote():
    text = (
        "Mes,Pessoa,Valor,Pago\n"
        '"Janeiro, 2024,Ana,"10,00",sim\n'
        '"Fevereiro, 2024",Bia,1,sim\n'
    )
    registros = load_rateio_csv(text, today=TODAY)

    assert len(registros) == 2
    assert registros[0].mes.startswith("Janeiro, 2024")
    assert registros[0].mes_dt == date(2024, 1, 1)
    assert registros[1].pessoa == "Bia"


def test_load_rateio_csv_logs_rows_with_extra_fields(caplog):
    text = (
        "Mes,Pessoa,Valor,Pago\n"
        '"Janeiro, 2024",Ana,1,sim,x,y,z\n'
        '"Fevereiro, 2024",Bia,1,sim\n'
    )
    with caplog.at_level(logging.WARNING, logger="rateio"):
        registros = load_rateio_csv(text, today=TODAY)

    assert [r.pessoa for r in registros] == ["Bia"]
    assert any(rec.name == "rateio.io_csv" and rec.getMessage().startswith("CSV:") for rec in caplog.records)
