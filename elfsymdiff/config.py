"""
Settings for one run.

A JSON config file (--config) may set any option; flags given on the
command line override it. All config fields are optional:

    {
      "binaries": ["old.elf", "new.elf"],
      "show_all_sections": false,
      "type_sort_order": "BySize",
      "sections": [".text", ".rodata"],
      "readable": false,
      "no_color": false,
      "csv_output_dir": "out/csv",
      "chart_path": "out/sections.png",
      "verbose": false
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .errors import ConfigError
from .model import SortOrder

logger = logging.getLogger(__name__)

CONFIG_KEYS = {
    "binaries", "show_all_sections", "type_sort_order", "sections", "readable",
    "no_color", "csv_output_dir", "chart_path", "verbose",
}


@dataclass
class Settings:
    binaries: List[str] = field(default_factory=list)
    show_all_sections: bool = False
    type_sort_order: SortOrder = SortOrder.BY_SIZE_DIFFERENCE
    sections: List[str] = field(default_factory=list)
    readable: bool = False
    color: bool = True
    csv_output_dir: Optional[str] = None
    chart_path: Optional[str] = None
    verbose: bool = False


def load_config(path: Optional[str]) -> dict:
    if not path:
        return {}
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e
    try:
        cfg = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config {path}: {e}") from e
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config {path} must contain a JSON object")
    unknown = sorted(set(cfg) - CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config key(s) in {path}: {', '.join(unknown)}")
    return cfg


def _str_list(cfg: dict, key: str) -> List[str]:
    val = cfg.get(key, [])
    if not isinstance(val, list) or not all(isinstance(v, str) for v in val):
        raise ConfigError(f"Config field '{key}' must be a list of strings")
    return list(val)


def _str_opt(cfg: dict, key: str) -> Optional[str]:
    val = cfg.get(key)
    if val is not None and not isinstance(val, str):
        raise ConfigError(f"Config field '{key}' must be a string")
    return val


def _flag(cfg: dict, key: str) -> bool:
    val = cfg.get(key, False)
    if not isinstance(val, bool):
        raise ConfigError(f"Config field '{key}' must be true or false")
    return val


def parse_sort_order(value: str) -> SortOrder:
    try:
        return SortOrder.from_name(value)
    except ValueError as e:
        choices = ", ".join(o.value for o in SortOrder)
        raise ConfigError(f"Invalid type sort order {value!r} (choose from {choices})") from e


def build_settings(args, cfg: dict) -> Settings:
    """Merge: CLI overrides config."""
    binaries = list(args.binaries) if args.binaries else _str_list(cfg, "binaries")
    sections = list(args.section) if args.section else _str_list(cfg, "sections")
    csv_output_dir = _str_opt(cfg, "csv_output_dir")
    chart_path = _str_opt(cfg, "chart_path")

    sort_name = args.type_sort_order or cfg.get("type_sort_order") or SortOrder.BY_SIZE_DIFFERENCE.value
    if not isinstance(sort_name, str):
        raise ConfigError("Config field 'type_sort_order' must be a string")

    show_all_sections = args.show_all_sections or _flag(cfg, "show_all_sections")
    if show_all_sections and sections:
        logger.warning(f"Ignoring sections {', '.join(sections)}: show_all_sections compares every section")

    return Settings(
        binaries=binaries,
        show_all_sections=show_all_sections,
        type_sort_order=parse_sort_order(sort_name),
        sections=sections,
        readable=args.readable or _flag(cfg, "readable"),
        color=not (args.no_color or _flag(cfg, "no_color")),
        csv_output_dir=args.csv_output_dir or csv_output_dir,
        chart_path=args.chart_path or chart_path,
        verbose=args.verbose or _flag(cfg, "verbose"),
    )
