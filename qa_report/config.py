"""
config.py — Report configuration loader.

Reads ``config.yaml`` (brand colours, page layout, output paths) and merges
it over the built-in defaults, so every module can be used without a config
file on disk.
"""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: dict[str, Any] = {
    "report": {
        "title": "RELATÓRIO DE BUGS ENCONTRADOS",
        "subtitle": "Análise QA Sênior",
        "brand": {
            "primary": "3366CC",
            "text": "1A1A1A",
            "light": "EEF2FA",
            "zebra": "F5F6F8",
            "muted": "808080",
            "rule": "E6E6E6",
            "red": "CC3333",
            "critical": "CC1A1A",
            "high": "E6801A",
            "medium": "E6B31A",
            "low": "339933",
        },
        "layout": {
            "page_width": 595,
            "page_height": 842,
            "margin": 50,
            "header_height": 30,
            "footer_height": 20,
            "safety": 10,
            "line_height": 14,
            "section_spacing": 20,
            "body_size": 11,
            "small_size": 9,
            "heading_size": 16,
        },
    },
    "paths": {
        "output_dir": "data/output",
        "log_dir": "logs",
        "pdf_filename": "{project}_relatorio_bugs_{date}.pdf",
        "text_filename": "{project}_testes_reprovados_{date}.txt",
        "markdown_filename": "{project}_testes_reprovados_{date}.md",
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load the report configuration.

    Args:
        config_path: Path to a YAML file. ``None`` returns the defaults.

    Returns:
        Configuration dictionary with every default key present.

    Raises:
        FileNotFoundError: If ``config_path`` is given but does not exist.
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_path, "r", encoding="utf-8") as fh:
        cfg = yaml.safe_load(fh) or {}

    logger.debug("Loaded configuration from %s", config_path)
    return _deep_merge(DEFAULT_CONFIG, cfg)
