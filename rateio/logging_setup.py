"""Logging dos pacotes ``rateio`` e ``rateio_ui``.

Os módulos só pedem loggers; quem instala o handler é o entrypoint, com o
nível vindo de ``Settings.log_level``.
"""

import logging
import sys
from typing import Optional, TextIO, Union

LOGGERS = ("rateio", "rateio_ui")
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# sem configuração (uso como biblioteca, testes) nada é impresso
for _name in LOGGERS:
    logging.getLogger(_name).addHandler(logging.NullHandler())


def nivel_de_log(level: Union[int, str]) -> int:
    """"debug", "20", 30 -> nível numérico; nome desconhecido vira INFO."""
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(level: Union[int, str] = "INFO", stream: Optional[TextIO] = None) -> logging.Handler:
    """Troca os handlers dos loggers do projeto por um único StreamHandler."""
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, "%H:%M:%S"))
    for name in LOGGERS:
        logger = logging.getLogger(name)
        for old in list(logger.handlers):
            logger.removeHandler(old)
        logger.addHandler(handler)
        logger.setLevel(nivel_de_log(level))
        logger.propagate = False
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
