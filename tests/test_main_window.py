import os
from datetime import date

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PyQt6.QtWidgets")

from rateio.errors import FetchError
from rateio.loader import RateioLoader
from rateio_ui.main_window import DashboardWindow

CSV = (
    "Mes,Pessoa,Valor,Pago,DataPagamento\n"
    '"Março, 2024",Ana,"10,00",Sim,05/03\n'
)


@pytest.fixture(scope="module")
def qapp():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def dialogs(monkeypatch):
    shown = []
    monkeypatch.setattr(
        QtWidgets.QMessageBox, "critical",
        lambda parent, title, text: shown.append((title, text)),
    )
    return shown


def _window(fetch):
    loader = RateioLoader("https://example.com/r.csv", fetch=fetch, clock=lambda: date(2024, 3, 10))
    return DashboardWindow(loader)


def test_reload_shows_unexpected_errors_instead_of_raising(qapp, dialogs):
    def broken(url):
        raise RuntimeError("disco cheio")

    win = _window(broken)
    win.reload()

    assert dialogs == [("Erro", "disco cheio")]
    assert "disco cheio" in win.message.text()
    assert win.btn_reload.isEnabled()
    assert QtWidgets.QApplication.overrideCursor() is None


def test_reload_keeps_fetch_errors_inline(qapp, dialogs):
    def unavailable(url):
        raise FetchError(503)

    win = _window(unavailable)
    win.reload()

    assert dialogs == []
    assert win.message.text() == "Erro ao baixar CSV: 503"


def test_reload_renders_loaded_snapshot(qapp, dialogs):
    win = _window(lambda url: CSV)
    win.reload()

    assert dialogs == []
    assert win.view.mes_vigente == "Março, 2024"
    assert win.kpi_membros.text() == "1"
    assert win.windowTitle() == "Rateio Spotify · Dashboard (leitura)"
