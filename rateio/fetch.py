# rateio/fetch.py
from __future__ import annotations

import time
from typing import Callable, Optional

import requests

from .errors import FetchError
from .logging_setup import get_logger

logger = get_logger("rateio.fetch")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


def fetch_csv_text(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: float = 30.0,
    now: Optional[Callable[[], float]] = None,
) -> str:
    """
    Baixa o CSV sem cache: acrescenta ``t=<epoch ms>`` à query e pede
    resposta não cacheada. Status != 200 -> FetchError(status);
    erro de rede -> FetchError(None).
    """
    clock = now or time.time
    params = {"t": str(int(clock() * 1000))}
    http = session or requests
    try:
        resp = http.get(url, params=params, headers=NO_CACHE_HEADERS, timeout=timeout)
    except requests.RequestException as e:
        logger.error("Falha de rede ao baixar %s: %s", url, e)
        raise FetchError(None, str(e)) from e

    if resp.status_code != 200:
        logger.error("CSV retornou status %s (%s)", resp.status_code, url)
        raise FetchError(resp.status_code)

    text = resp.content.decode("utf-8-sig", errors="replace")
    logger.debug("CSV baixado: %d bytes", len(resp.content))
    return text
