"""App constants and utilities."""

from .constants import (
    APP_NAME,
    APP_ORG,
    CSS_PREVIEW,
    DRAFT_KEY,
    EXPORT_BASENAME,
    EXPORT_HTML_TEMPLATE,
    HTML_TEMPLATE,
    PDF_BASENAME,
)

__all__ = [
    "APP_ORG",
    "APP_NAME",
    "CSS_PREVIEW",
    "DRAFT_KEY",
    "EXPORT_BASENAME",
    "EXPORT_HTML_TEMPLATE",
    "HTML_TEMPLATE",
    "PDF_BASENAME",
]
