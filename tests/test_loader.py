from datetime import date, datetime

import pytest

from rateio.errors import FetchError
from rateio.loader import RateioLoader
from rateio.models import Snapshot

CSV_V1 = (
    "Mes,Pessoa,Valor,Pago,DataPagamento\n"
    '"Janeiro, 2024",Ana,"10,00",Sim,05/01\n'
    '"Fevereiro, 2024",Ana,"10,00",Não,\n'
)
CSV_V2 = CSV_V1 + '"Março, 2024",Bia,"12,00",Sim,10/03\n'


class ScriptedFetch:
    """Devolve (ou levanta) os itens na ordem."""

    def __init__(self, *results):
        self.results = list(results)
        self.urls = []

    def __call__(self, url):
        self.urls.append(url)
        item = self.results.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _loader(*results):
    fetch = ScriptedFetch(*results)
    return RateioLoader("https://example.com/r.csv", fetch=fetch, clock=lambda: date(2024, 3, 10)), fetch


def test_load_builds_snapshot_with_current_month():
    loader, fetch = _loader(CSV_V1)

    assert loader.load() is True
    snap = loader.snapshot
    assert fetch.urls == ["https://example.com/r.csv"]
    assert [r.mes for r in snap.registros] == ["Janeiro, 2024", "Fevereiro, 2024"]
    assert snap.mes_vigente == "Fevereiro, 2024"  # março ainda não existe no CSV
    assert snap.issues == ()
    assert loader.erro is None


def test_reload_replaces_whole_snapshot():
    loader, _ = _loader(CSV_V1, CSV_V2)
    loader.load()
    first = loader.snapshot
    loader.load()

    assert loader.snapshot is not first
    assert len(loader.snapshot.registros) == 3
    assert loader.snapshot.mes_vigente == "Março, 2024"
    assert len(first.registros) == 2


def test_fetch_error_keeps_previous_snapshot():
    loader, _ = _loader(CSV_V1, FetchError(500), CSV_V2)
    loader.load()
    previous = loader.snapshot

    assert loader.load() is True
    assert loader.snapshot is previous
    assert loader.erro == "Erro ao baixar CSV: 500"

    loader.load()
    assert loader.erro is None
    assert len(loader.snapshot.registros) == 3


def test_fetch_error_on_first_load_leaves_no_snapshot():
    loader, _ = _loader(FetchError(403))
    loader.load()
    assert loader.snapshot is None
    assert loader.erro == "Erro ao baixar CSV: 403"


def test_stale_completion_is_discarded():
    loader, _ = _loader()
    old_token = loader.begin()
    new_token = loader.begin()
    new_snap = Snapshot(registros=(), mes_vigente=None, carregado_em=datetime(2024, 3, 10, 12))
    old_snap = Snapshot(registros=(), mes_vigente="Janeiro, 2024", carregado_em=datetime(2024, 3, 10, 11))

    assert loader.finish(new_token, new_snap) is True
    assert loader.finish(old_token, old_snap) is False
    assert loader.fail(old_token, FetchError(500)) is False
    assert loader.snapshot is new_snap
    assert loader.erro is None


def test_unexpected_errors_propagate():
    loader, _ = _loader(ValueError("bug"))
    with pytest.raises(ValueError):
        loader.load()
