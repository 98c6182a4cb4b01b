# rateio_ui/styles.py
STYLE_LIGHT = """
QMainWindow, QWidget {
    background-color: #ffffff;
    color: #111111;
    font-family: Segoe UI, Arial;
    font-size: 14px;
}
QPushButton {
    background-color: #f1f1f1;
    border: 1px solid #cccccc;
    padding: 4px 10px;
    border-radius: 6px;
}
QPushButton:hover {
    background-color: #eaeaea;
}
QComboBox, QLabel {
    background-color: #ffffff;
    color: #111111;
}
QLabel#SectionTitle {
    font-weight: 700;
    font-size: 18px;
    margin-top: 6px;
}
QLabel#KpiTitle {
    color: #6b7280;
    font-size: 13px;
}
QLabel#KpiValue {
    font-weight: 700;
    font-size: 20px;
}
QLabel#BadgeOk {
    background: #dcfce7;
    color: #166534;
    border-radius: 8px;
    padding: 2px 8px;
}
QLabel#BadgeNo {
    background: #fee2e2;
    color: #991b1b;
    border-radius: 8px;
    padding: 2px 8px;
}
QTreeWidget {
    border: 1px solid #e9eef5;
    border-radius: 12px;
}
"""

# Cores das linhas do histórico
PENDING_ROW_BG = "#fff7f7"
VIGENTE_ROW_BG = "#eef6ff"
YEAR_ROW_BG = "#f3f4f6"
CARD_PAID_BORDER = "#22c55e"
CARD_PENDING_BORDER = "#ef4444"
