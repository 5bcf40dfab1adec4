from __future__ import annotations

import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from pygments.styles import get_all_styles

from mdpreview.domain.interfaces import IAppConfig
from mdpreview.services.config.ini_config_service import IniConfigService
from mdpreview.services.exporters.pdf_encoder import MM_TO_PT, PdfPageSetup
from mdpreview.services.markdown_renderer import PreviewSettings
from mdpreview.utils.constants import FONT_SIZE_MAX, FONT_SIZE_MIN

_VERSION_RE = re.compile(r"^v?(\d+\.\d+\.\d+)(?:[-+].*)?$", re.IGNORECASE)


def _project_root_fallback() -> Path:
    """
    Best-effort project root resolution that also works in PyInstaller:
      - PyInstaller onefile/onedir uses sys._MEIPASS as bundle root
      - dev mode uses this file location to walk upward
    """
    meipass = getattr(sys, "_MEIPASS", None)  # type: ignore[attr-defined]
    if meipass:
        return Path(meipass)

    # mdpreview/services/config/app_config.py -> parents[3] = repository root
    return Path(__file__).resolve().parents[3]


def _read_version_file(version_path: Path) -> str | None:
    try:
        raw = version_path.read_text(encoding="utf-8").strip()
    except OSError:
        return None

    m = _VERSION_RE.match(raw)
    return m.group(1) if m else None


@dataclass(frozen=True)
class AppConfig(IAppConfig):
    """
    Wraps IniConfigService, adds get_version() from <root>/version and builds
    the typed settings objects for the preview and the PDF encoder.

    Out-of-range or malformed values fall back to defaults.
    """

    ini: IniConfigService
    project_root: Path

    def get_version(self) -> str:
        v = _read_version_file(self.project_root / "version")
        if v:
            return v

        v2 = (self.ini.app_version() or "").strip()
        if v2:
            m = _VERSION_RE.match(v2)
            return m.group(1) if m else v2

        return "0.0.0"

    def preview_settings(self) -> PreviewSettings:
        d = PreviewSettings()
        style = self.ini.get("preview", "style", d.style) or d.style
        if style not in set(get_all_styles()):
            style = d.style
        size = self.ini.get_int("preview", "font_size", d.font_size)
        if size is None or not FONT_SIZE_MIN <= size <= FONT_SIZE_MAX:
            size = d.font_size
        dark = self.ini.get_bool("preview", "dark_mode", d.dark_mode)
        return PreviewSettings(style=style, font_size=size, dark_mode=bool(dark))

    def pdf_setup(self) -> PdfPageSetup:
        d = PdfPageSetup()
        font_size = self.ini.get_float("pdf", "font_size", d.font_size)
        factor = self.ini.get_float("pdf", "line_height_factor", d.line_height_factor)
        margin_mm = self.ini.get_float("pdf", "margin_mm", d.margin_left / MM_TO_PT)
        family = self.ini.get("pdf", "font_family", d.font_family) or d.font_family

        if font_size is None or not 4.0 <= font_size <= 72.0:
            font_size = d.font_size
        if factor is None or not 0.8 <= factor <= 4.0:
            factor = d.line_height_factor
        if margin_mm is None or not 0.0 <= margin_mm <= 50.0:
            margin_mm = d.margin_left / MM_TO_PT

        margin = margin_mm * MM_TO_PT
        return PdfPageSetup(
            margin_left=margin,
            margin_top=margin,
            margin_bottom=margin,
            font_family=family,
            font_size=font_size,
            line_height_factor=factor,
        )

    # ---- delegate IniConfigService methods ----

    def get(self, section: str, key: str, default: str | None = None) -> str | None:
        return self.ini.get(section, key, default)

    def get_int(self, section: str, key: str, default: int | None = None) -> int | None:
        return self.ini.get_int(section, key, default)

    def get_float(self, section: str, key: str, default: float | None = None) -> float | None:
        return self.ini.get_float(section, key, default)

    def get_bool(self, section: str, key: str, default: bool | None = None) -> bool | None:
        return self.ini.get_bool(section, key, default)

    def as_dict(self) -> Mapping[str, Mapping[str, str]]:
        return self.ini.as_dict()

    def app_version(self) -> str:
        return self.ini.app_version()

    @property
    def loaded_from(self) -> Path | None:
        return self.ini.loaded_from


def build_app_config(
    *, explicit_ini: Path | None = None, project_root: Path | None = None
) -> AppConfig:
    root = project_root or _project_root_fallback()
    ini = IniConfigService(explicit_path=explicit_ini, project_root=root)
    return AppConfig(ini=ini, project_root=root)
