import math
import re
import unicodedata
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

# =====================
# Valores em Real (pt-BR)
# =====================

CENTAVO = Decimal("0.01")


def parse_valor_br(value: Optional[str]) -> float:
    """
    "1.234,56" -> 1234.56. Remove os pontos de milhar e troca a vírgula
    decimal por ponto. Vazio ou texto não numérico -> 0.0 (nunca levanta).
    Não remove símbolo de moeda: "R$ 10,00" -> 0.0.
    """
    n = _valor_ou_none(value)
    return 0.0 if n is None else n


def _valor_ou_none(value: Optional[str]) -> Optional[float]:
    normalized = str(value or "").strip().replace(".", "").replace(",", ".", 1)
    if not normalized or "_" in normalized:
        return None
    try:
        n = float(normalized)
    except ValueError:
        return None
    return n if math.isfinite(n) else None


def is_valor_valido(value: Optional[str]) -> bool:
    """Vazio conta como válido (0 esperado); texto não numérico não."""
    return not str(value or "").strip() or _valor_ou_none(value) is not None


def format_brl(n: float) -> str:
    """Formata como moeda brasileira: 1234.56 -> "R$ 1.234,56" (espaço não separável)."""
    # meio centavo arredonda para longe do zero: 0.125 -> 0,13
    rounded = Decimal(str(float(n))).quantize(CENTAVO, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    body = f"{abs(rounded):,.2f}"
    # 1,234.56 -> 1.234,56
    body = body.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$\u00a0{body}"


# =====================
# Status de pagamento
# =====================

def parse_pago(value: Optional[str]) -> bool:
    """Só "sim" (qualquer caixa, com espaços) conta como pago."""
    return str(value or "").strip().lower() == "sim"


# =====================
# Mês de referência
# =====================

MESES_PT: List[str] = [
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
]

_MES_IDX: Dict[str, int] = {nome: i for i, nome in enumerate(MESES_PT)}
_MES_IDX["marco"] = 2  # grafia sem acento


def _split_mes(value: Optional[str]):
    raw = unicodedata.normalize("NFC", str(value or "")).strip()
    parts = [p.strip() for p in raw.split(",")]
    nome = parts[0] if parts else ""
    ano = parts[1] if len(parts) > 1 else ""
    return nome, ano


def _mes_ou_none(value: Optional[str]) -> Optional[date]:
    nome, ano_txt = _split_mes(value)
    idx = _MES_IDX.get(nome.lower())
    if idx is None or not re.fullmatch(r"[+-]?\d+", ano_txt):
        return None
    try:
        return date(int(ano_txt), idx + 1, 1)
    except ValueError:
        # ano fora do intervalo suportado por date
        return None


def parse_mes_pt(value: Optional[str], today: Optional[date] = None) -> date:
    """
    "Março, 2024" -> date(2024, 3, 1).
    Nome do mês em português (sem distinção de caixa; "Marco" aceito) e ano
    inteiro separados por vírgula. Quando não reconhecido devolve o primeiro
    dia do mês de ``today`` (padrão: hoje): nunca levanta.
    """
    parsed = _mes_ou_none(value)
    if parsed is not None:
        return parsed
    ref = today or date.today()
    return date(ref.year, ref.month, 1)


def is_mes_valido(value: Optional[str]) -> bool:
    return _mes_ou_none(value) is not None


def mes_label(d: date) -> str:
    """date(2025, 10, 5) -> "Outubro, 2025" (mesma convenção do CSV)."""
    nome = MESES_PT[d.month - 1]
    return f"{nome[0].upper()}{nome[1:]}, {d.year}"


# =====================
# Slug (chave de avatar)
# =====================

def slugify(value: Optional[str]) -> str:
    """"  João da Silva " -> "joao-da-silva"."""
    s = str(value or "").strip().lower()
    s = unicodedata.normalize("NFD", s)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-")
