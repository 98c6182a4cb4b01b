# rateio/loader.py
from __future__ import annotations

from datetime import date, datetime
from typing import Callable, List, Optional

from .errors import FetchError
from .fetch import fetch_csv_text
from .io_csv import load_rateio_csv
from .logging_setup import get_logger
from .models import ParseIssue, Snapshot
from .periods import pick_mes_vigente

logger = get_logger("rateio.loader")


class RateioLoader:
    """
    Um carregamento = download + parse + mês vigente, num Snapshot imutável
    que substitui o anterior por inteiro.

    Cada carregamento recebe um token crescente (``begin``); uma conclusão
    só é aplicada se o token for mais novo que o último aplicado, então uma
    resposta atrasada nunca sobrescreve dados mais recentes. Em caso de erro
    o Snapshot anterior é mantido e ``erro`` guarda a mensagem para a UI.
    """

    def __init__(
        self,
        url: str,
        fetch: Callable[[str], str] = fetch_csv_text,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.url = url
        self._fetch = fetch
        self._clock = clock
        self._next_token = 0
        self._applied_token = 0
        self.snapshot: Optional[Snapshot] = None
        self.erro: Optional[str] = None

    def begin(self) -> int:
        self._next_token += 1
        return self._next_token

    def _is_stale(self, token: int) -> bool:
        if token <= self._applied_token:
            logger.info("Carregamento %d descartado (já aplicado %d)", token, self._applied_token)
            return True
        return False

    def build_snapshot(self, text: str) -> Snapshot:
        today = self._clock()
        issues: List[ParseIssue] = []
        registros = load_rateio_csv(text, today=today, issues=issues)
        mes_vigente = pick_mes_vigente((r.mes for r in registros), today=today)
        return Snapshot(
            registros=tuple(registros),
            mes_vigente=mes_vigente,
            carregado_em=datetime.now(),
            issues=tuple(issues),
        )

    def finish(self, token: int, snapshot: Snapshot) -> bool:
        if self._is_stale(token):
            return False
        self._applied_token = token
        self.snapshot = snapshot
        self.erro = None
        logger.info(
            "Carregados %d registros, mês vigente: %s",
            len(snapshot.registros), snapshot.mes_vigente or "-",
        )
        return True

    def fail(self, token: int, error: Exception) -> bool:
        if self._is_stale(token):
            return False
        self._applied_token = token
        self.erro = str(error) or "Erro"
        return True

    def load(self) -> bool:
        """Ciclo completo síncrono. Só FetchError é tratado aqui."""
        token = self.begin()
        try:
            text = self._fetch(self.url)
        except FetchError as e:
            return self.fail(token, e)
        return self.finish(token, self.build_snapshot(text))
