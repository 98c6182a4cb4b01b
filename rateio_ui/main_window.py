# rateio_ui/main_window.py
from pathlib import Path
from typing import Dict, Optional

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QPushButton, QLabel, QComboBox, QFrame, QScrollArea, QSizePolicy,
    QTreeWidget, QTreeWidgetItem, QApplication, QHeaderView, QMessageBox,
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QBrush, QColor, QFont

from rateio.derive import (
    STATUS_OPCOES, TODAS, TODOS, DashboardView,
    alternar_ano, alternar_todos, anos_colapsados_iniciais, build_dashboard,
)
from rateio.loader import RateioLoader
from rateio.logging_setup import get_logger
from rateio.parsing import format_brl
from .assets import avatar_pixmap, load_lato_family
from .styles import (
    STYLE_LIGHT, PENDING_ROW_BG, VIGENTE_ROW_BG, YEAR_ROW_BG,
    CARD_PAID_BORDER, CARD_PENDING_BORDER,
)

logger = get_logger("rateio_ui.main_window")

# ------ Layout constants ------
CHIP_HEIGHT = 56
CHIP_RADIUS = 12
AVATAR_SIZE = 48
CARDS_PER_ROW = 4
HISTORY_COLUMNS = ["Mês", "Pessoa", "Valor", "Status", "DataPagamento"]


def make_chip(inner: QWidget, border: str = "#e9eef5") -> QFrame:
    """Chip branco com borda fina."""
    chip = QFrame()
    chip.setObjectName("Chip")
    chip.setStyleSheet(f"""
        QFrame#Chip {{
            background: #ffffff;
            border: 1px solid {border};
            border-radius: {CHIP_RADIUS}px;
        }}
    """)
    lay = QHBoxLayout(chip)
    lay.setContentsMargins(12, 8, 12, 8)
    lay.setSpacing(8)
    lay.setAlignment(Qt.AlignmentFlag.AlignVCenter)
    lay.addWidget(inner, 0, Qt.AlignmentFlag.AlignVCenter)
    chip.setMinimumHeight(CHIP_HEIGHT)
    return chip


def make_kpi(title: str) -> tuple:
    box = QWidget()
    lay = QVBoxLayout(box)
    lay.setContentsMargins(0, 0, 0, 0)
    lay.setSpacing(2)
    lbl_title = QLabel(title)
    lbl_title.setObjectName("KpiTitle")
    lbl_value = QLabel("-")
    lbl_value.setObjectName("KpiValue")
    lay.addWidget(lbl_title)
    lay.addWidget(lbl_value)
    return make_chip(box), lbl_value


class DashboardWindow(QMainWindow):
    def __init__(self, loader: RateioLoader, assets_dir: Optional[Path] = None):
        super().__init__()
        self.loader = loader
        self.assets_dir = assets_dir
        self.setWindowTitle("Rateio Spotify · Dashboard (leitura)")
        self.resize(1100, 900)

        self.font_family, _ = load_lato_family(assets_dir, fallback_family="Arial")
        self.setFont(QFont(self.font_family, 10))
        self.setStyleSheet(STYLE_LIGHT + f"""
            QMainWindow, QWidget {{ font-family: "{self.font_family}"; }}
        """)

        # ===== Estado de UI =====
        self.pessoa = TODAS
        self.status = TODOS
        self.collapsed: Dict[int, bool] = {}
        self.view: Optional[DashboardView] = None

        # ---------- Header ----------
        title = QLabel("🎵 Rateio Spotify")
        title.setObjectName("SectionTitle")
        subtitle = QLabel("Dashboard (leitura)")
        subtitle.setStyleSheet("color:#6b7280;")
        title_box = QWidget()
        tb = QVBoxLayout(title_box)
        tb.setContentsMargins(0, 0, 0, 0)
        tb.addWidget(title)
        tb.addWidget(subtitle)

        self.btn_reload = QPushButton("Recarregar")
        self.btn_reload.setCursor(Qt.CursorShape.PointingHandCursor)

        header = QWidget()
        hl = QHBoxLayout(header)
        hl.setContentsMargins(0, 0, 0, 0)
        hl.addWidget(title_box, 1)
        hl.addWidget(self.btn_reload, 0, Qt.AlignmentFlag.AlignVCenter)

        self.message = QLabel("Carregando…")
        self.message.setWordWrap(True)

        # ---------- Mês vigente ----------
        self.vigente_title = QLabel("Mês vigente")
        self.vigente_title.setObjectName("SectionTitle")
        self.cards_host = QWidget()
        self.cards_grid = QGridLayout(self.cards_host)
        self.cards_grid.setContentsMargins(0, 0, 0, 0)
        self.cards_grid.setSpacing(12)

        # ---------- KPIs ----------
        chip_total, self.kpi_total = make_kpi("💰 Total pago (geral)")
        chip_membros, self.kpi_membros = make_kpi("👥 Total membros")
        chip_pend, self.kpi_pendencias = make_kpi("❌ Pendências em aberto")
        kpis = QWidget()
        kl = QHBoxLayout(kpis)
        kl.setContentsMargins(0, 0, 0, 0)
        kl.setSpacing(16)
        for chip in (chip_total, chip_membros, chip_pend):
            kl.addWidget(chip, 1)

        # ---------- Filtros ----------
        self.pessoa_combo = QComboBox()
        self.pessoa_combo.addItem(TODAS)
        self.pessoa_combo.setSizeAdjustPolicy(QComboBox.SizeAdjustPolicy.AdjustToContents)
        self.status_combo = QComboBox()
        self.status_combo.addItems(list(STATUS_OPCOES))

        filters = QWidget()
        fl = QHBoxLayout(filters)
        fl.setContentsMargins(0, 0, 0, 0)
        fl.setSpacing(16)
        fl.addWidget(make_chip(self._labeled("Pessoa (Histórico)", self.pessoa_combo)))
        fl.addWidget(make_chip(self._labeled("Status (Histórico)", self.status_combo)))
        fl.addWidget(make_chip(QLabel("Histórico completo (filtros por pessoa/status)")), 1)

        # ---------- Histórico ----------
        hist_title = QLabel("Histórico (filtrado)")
        hist_title.setObjectName("SectionTitle")
        self.btn_toggle_all = QPushButton("Expandir / Colapsar todos")
        self.tree = QTreeWidget()
        self.tree.setColumnCount(len(HISTORY_COLUMNS))
        self.tree.setHeaderLabels(HISTORY_COLUMNS)
        self.tree.setRootIsDecorated(False)
        self.tree.setItemsExpandable(False)
        self.tree.setMinimumHeight(420)
        self.tree.header().setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
        self.tree.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

        footer = QLabel("Fonte: CSV remoto (somente leitura).")
        footer.setStyleSheet("color:#6b7280;")

        # ---------- Conteúdo rolável ----------
        content = QWidget()
        root = QVBoxLayout(content)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(12)
        root.addWidget(header)
        root.addWidget(self.message)
        root.addWidget(self.vigente_title)
        root.addWidget(self.cards_host)
        root.addWidget(kpis)
        root.addWidget(filters)
        root.addWidget(hist_title)
        root.addWidget(self.btn_toggle_all, 0, Qt.AlignmentFlag.AlignLeft)
        root.addWidget(self.tree, 1)
        root.addWidget(footer)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        scroll.setWidget(content)
        self.setCentralWidget(scroll)

        # Signals
        self.btn_reload.clicked.connect(self.reload)
        self.btn_toggle_all.clicked.connect(self.on_toggle_all)
        self.pessoa_combo.currentTextChanged.connect(self.on_pessoa_changed)
        self.status_combo.currentTextChanged.connect(self.on_status_changed)
        self.tree.itemClicked.connect(self.on_item_clicked)

    @staticmethod
    def _labeled(text: str, widget: QWidget) -> QWidget:
        wrap = QWidget()
        lay = QHBoxLayout(wrap)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(8)
        lbl = QLabel(text)
        lbl.setStyleSheet("color:#374151;")
        lay.addWidget(lbl)
        lay.addWidget(widget)
        return wrap

    # ===== Actions =====
    def reload(self):
        self.btn_reload.setEnabled(False)
        QApplication.setOverrideCursor(Qt.CursorShape.WaitCursor)
        try:
            try:
                applied = self.loader.load()
            finally:
                QApplication.restoreOverrideCursor()
                self.btn_reload.setEnabled(True)
        except Exception as e:
            # FetchError já vem tratado pelo loader; aqui só o inesperado
            logger.exception("Falha inesperada ao recarregar")
            self.message.setText(f"Erro inesperado: {e}")
            self.message.setStyleSheet("color:#b91c1c;")
            QMessageBox.critical(self, "Erro", str(e) or e.__class__.__name__)
            return
        if not applied:
            return

        snap = self.loader.snapshot
        if self.loader.erro:
            logger.warning("Recarregar falhou: %s", self.loader.erro)
            self.message.setText(self.loader.erro if snap is None else f"{self.loader.erro} (exibindo dados anteriores)")
            self.message.setStyleSheet("color:#b91c1c;")
            if snap is None:
                return
        else:
            self.message.setStyleSheet("color:#6b7280;")
            avisos = f" · {len(snap.issues)} aviso(s) de formato" if snap.issues else ""
            self.message.setText(
                f"Carregado: {len(snap.registros)} registros às {snap.carregado_em:%H:%M:%S}{avisos}"
            )
            self.collapsed = anos_colapsados_iniciais(snap.registros, snap.mes_vigente)
        self.render()

    def on_pessoa_changed(self, text: str):
        self.pessoa = text or TODAS
        self.render()

    def on_status_changed(self, text: str):
        self.status = text or TODOS
        self.render()

    def on_item_clicked(self, item: QTreeWidgetItem, _column: int):
        ano = item.data(0, Qt.ItemDataRole.UserRole)
        if item.parent() is None and isinstance(ano, int):
            self.collapsed = alternar_ano(self.collapsed, ano)
            self.render_history()

    def on_toggle_all(self):
        if self.view is None:
            return
        self.collapsed = alternar_todos([ano for ano, _ in self.view.historico_por_ano], self.collapsed)
        self.render_history()

    # ===== Render =====
    def render(self):
        snap = self.loader.snapshot
        if snap is None:
            return
        self.view = build_dashboard(snap.registros, snap.mes_vigente, self.pessoa, self.status)
        self._sync_pessoas(self.view.pessoas)
        self.render_vigente()
        self.render_kpis()
        self.render_history()

    def _sync_pessoas(self, pessoas):
        current = self.pessoa if self.pessoa in pessoas else TODAS
        self.pessoa_combo.blockSignals(True)
        self.pessoa_combo.clear()
        self.pessoa_combo.addItems(list(pessoas))
        self.pessoa_combo.setCurrentText(current)
        self.pessoa_combo.blockSignals(False)
        if current != self.pessoa:
            self.pessoa = current
            self.view = build_dashboard(
                self.loader.snapshot.registros, self.loader.snapshot.mes_vigente, self.pessoa, self.status
            )

    def render_vigente(self):
        view = self.view
        self.vigente_title.setText(f"Mês vigente ({view.mes_vigente})" if view.mes_vigente else "Mês vigente")
        while self.cards_grid.count():
            w = self.cards_grid.takeAt(0).widget()
            if w is not None:
                w.deleteLater()

        if not view.status_vigente:
            empty = QLabel("Sem dados para o mês vigente.")
            empty.setStyleSheet("color:#6b7280;")
            self.cards_grid.addWidget(empty, 0, 0)
            return

        for idx, r in enumerate(view.status_vigente):
            body = QWidget()
            bl = QHBoxLayout(body)
            bl.setContentsMargins(0, 0, 0, 0)
            bl.setSpacing(10)

            avatar = QLabel()
            avatar.setFixedSize(AVATAR_SIZE, AVATAR_SIZE)
            pix = avatar_pixmap(r.pessoa, AVATAR_SIZE, self.assets_dir)
            if not pix.isNull():
                avatar.setPixmap(pix)
            else:
                avatar.setText((r.pessoa[:1] or "?").upper())
                avatar.setAlignment(Qt.AlignmentFlag.AlignCenter)
            bl.addWidget(avatar)

            info = QWidget()
            il = QVBoxLayout(info)
            il.setContentsMargins(0, 0, 0, 0)
            il.setSpacing(2)
            name = QLabel(r.pessoa)
            name.setStyleSheet("font-weight: 600;")
            badge = QLabel("Pago" if r.pago else "Pendente")
            badge.setObjectName("BadgeOk" if r.pago else "BadgeNo")
            il.addWidget(name)
            il.addWidget(QLabel(format_brl(r.valor)))
            il.addWidget(badge, 0, Qt.AlignmentFlag.AlignLeft)
            bl.addWidget(info, 1)

            card = make_chip(body, border=CARD_PAID_BORDER if r.pago else CARD_PENDING_BORDER)
            self.cards_grid.addWidget(card, idx // CARDS_PER_ROW, idx % CARDS_PER_ROW)

    def render_kpis(self):
        self.kpi_total.setText(format_brl(self.view.total_pago))
        self.kpi_membros.setText(str(self.view.total_membros))
        self.kpi_pendencias.setText(str(self.view.pendencias))

    def render_history(self):
        view = self.view
        if view is None:
            return
        self.tree.clear()
        if not view.historico:
            empty = QTreeWidgetItem(["Sem dados com esses filtros."])
            self.tree.addTopLevelItem(empty)
            empty.setFirstColumnSpanned(True)
            return

        year_font = QFont(self.font_family, 10)
        year_font.setBold(True)
        for ano, rows in view.historico_por_ano:
            is_collapsed = self.collapsed.get(ano) is True
            year_item = QTreeWidgetItem([f"{'▶' if is_collapsed else '▼'} {ano}"])
            year_item.setData(0, Qt.ItemDataRole.UserRole, ano)
            year_item.setFont(0, year_font)
            for col in range(len(HISTORY_COLUMNS)):
                year_item.setBackground(col, QBrush(QColor(YEAR_ROW_BG)))
            self.tree.addTopLevelItem(year_item)
            year_item.setFirstColumnSpanned(True)

            for r in rows:
                is_vigente = r.mes == view.mes_vigente
                child = QTreeWidgetItem([
                    f"{r.mes}  · Vigente" if is_vigente else r.mes,
                    r.pessoa,
                    format_brl(r.valor),
                    "Sim" if r.pago else "Nao",
                    r.data_pagamento or "-",
                ])
                child.setTextAlignment(2, Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
                bg = VIGENTE_ROW_BG if is_vigente else (PENDING_ROW_BG if not r.pago else None)
                if bg:
                    for col in range(len(HISTORY_COLUMNS)):
                        child.setBackground(col, QBrush(QColor(bg)))
                year_item.addChild(child)
            year_item.setExpanded(not is_collapsed)
