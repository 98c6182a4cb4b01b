# rateio_ui/app.py
import sys

from PyQt6.QtWidgets import QApplication

from rateio.config import load_settings
from rateio.errors import ConfigError
from rateio.loader import RateioLoader
from rateio.logging_setup import configure_logging, get_logger
from .main_window import DashboardWindow

logger = get_logger("rateio_ui.app")


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as e:
        # sem URL não há o que mostrar: aborta antes de abrir a janela
        configure_logging()
        logger.critical("%s", e)
        raise SystemExit(f"Configuração inválida: {e}")

    configure_logging(settings.log_level)
    app = QApplication(sys.argv)
    window = DashboardWindow(RateioLoader(settings.csv_url), assets_dir=settings.assets_dir)
    window.show()
    window.reload()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
