# rateio_ui/assets.py
from __future__ import annotations
import sys
from pathlib import Path
from typing import List, Optional, Set, Tuple

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFontDatabase, QPixmap

from rateio.parsing import slugify

DEFAULT_AVATAR = "default.png"


def _asset_roots(assets_dir: Optional[Path]) -> List[Path]:
    """Pastas candidatas em ordem de prioridade (caminhos absolutos)."""
    module_dir = Path(__file__).resolve().parent
    roots: List[Path] = []
    if assets_dir is not None:
        roots.append(Path(assets_dir).resolve())
    roots += [
        module_dir / "assets",
        module_dir.parent / "assets",
        Path.cwd() / "assets",
    ]
    # suporte PyInstaller
    if hasattr(sys, "_MEIPASS"):
        roots.append(Path(sys._MEIPASS) / "assets")
    return roots


def avatar_path(pessoa: str, assets_dir: Optional[Path] = None) -> Optional[Path]:
    """avatars/<slug>.png da pessoa, senão avatars/default.png, senão None."""
    names = [f"{slugify(pessoa)}.png", DEFAULT_AVATAR] if slugify(pessoa) else [DEFAULT_AVATAR]
    for name in names:
        for root in _asset_roots(assets_dir):
            p = root / "avatars" / name
            if p.exists():
                return p
    return None


def avatar_pixmap(pessoa: str, size: int, assets_dir: Optional[Path] = None) -> QPixmap:
    path = avatar_path(pessoa, assets_dir)
    pix = QPixmap(str(path)) if path else QPixmap()
    if pix.isNull():
        return pix
    return pix.scaled(
        size, size,
        Qt.AspectRatioMode.KeepAspectRatioByExpanding,
        Qt.TransformationMode.SmoothTransformation,
    )


def load_lato_family(assets_dir: Optional[Path] = None, fallback_family: str = "Arial") -> Tuple[str, Set[str]]:
    """
    Carrega Lato (Regular/Bold) de <assets>/fonts se existir.
    Retorna (family_name, pesos disponíveis); sem arquivos usa o fallback.
    """
    files = [("Normal", "Lato-Regular.ttf"), ("Bold", "Lato-Bold.ttf")]
    families: List[str] = []
    available: Set[str] = set()
    for weight, filename in files:
        found = next(
            (root / "fonts" / filename for root in _asset_roots(assets_dir) if (root / "fonts" / filename).exists()),
            None,
        )
        if found is None:
            continue
        font_id = QFontDatabase.addApplicationFont(str(found))
        if font_id != -1:
            fams = QFontDatabase.applicationFontFamilies(font_id)
            if fams:
                families.extend(fams)
                available.add(weight)

    family = families[0] if families else fallback_family
    return family, (available or {"Normal"})
