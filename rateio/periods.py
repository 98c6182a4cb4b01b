# rateio/periods.py
from datetime import date
from typing import Iterable, List, Optional

from .logging_setup import get_logger
from .parsing import mes_label, parse_mes_pt

logger = get_logger("rateio.periods")


def pick_mes_vigente(meses: Iterable[str], today: Optional[date] = None) -> Optional[str]:
    """
    Escolhe o mês vigente entre os rótulos disponíveis.
    - se o mês corrente de ``today`` ("Outubro, 2025") existe, é ele;
    - senão o rótulo mais recente (ordem estável em caso de empate);
    - sem rótulos: None.
    """
    ref = today or date.today()
    distintos: List[str] = list(dict.fromkeys(meses))
    if not distintos:
        return None

    atual = mes_label(ref)
    if atual in distintos:
        return atual

    ordenados = sorted(distintos, key=lambda m: parse_mes_pt(m, today=ref))
    escolhido = ordenados[-1]
    logger.info("Sem dados para %s, usando o mês mais recente: %s", atual, escolhido)
    return escolhido
