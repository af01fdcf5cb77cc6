# src/app/settings.py
#!/usr/bin/env python3
"""
Front-end settings.

Each value comes from an environment variable and can be overridden on the
command line as --name=value:

    GRIDPATH_LOG_LEVEL      --log-level=   INFO
    GRIDPATH_STEPS_PER_SEC  --steps=       8      (viewer)
    GRIDPATH_DELAY_MS       --delay=       1      (console, per frame)
    GRIDPATH_MAP_DIR        --maps=        <repo>/maps
    GRIDPATH_SEED           --seed=        unset
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

REPO_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_MAP_DIR = REPO_ROOT / "maps"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    log_level: str = "INFO"
    steps_per_sec: int = 8
    delay_ms: int = 1
    map_dir: Path = DEFAULT_MAP_DIR
    seed: Optional[int] = None


def resolve_option(name: str, env: Optional[str], argv: List[str]) -> Optional[str]:
    value = os.getenv(env) if env else None
    for arg in argv:
        if arg.startswith(f"--{name}="):
            value = arg.split("=", 1)[1]
    return value


def load_settings(argv: Optional[List[str]] = None) -> Settings:
    argv = sys.argv[1:] if argv is None else argv
    s = Settings()
    level = resolve_option("log-level", "GRIDPATH_LOG_LEVEL", argv)
    if level:
        s.log_level = level.upper()
    steps = resolve_option("steps", "GRIDPATH_STEPS_PER_SEC", argv)
    if steps:
        s.steps_per_sec = max(1, min(60, int(steps)))
    delay = resolve_option("delay", "GRIDPATH_DELAY_MS", argv)
    if delay:
        s.delay_ms = max(0, int(delay))
    map_dir = resolve_option("maps", "GRIDPATH_MAP_DIR", argv)
    if map_dir:
        s.map_dir = Path(map_dir)
    seed = resolve_option("seed", "GRIDPATH_SEED", argv)
    if seed:
        s.seed = int(seed)
    return s


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level, None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    logging.getLogger(__name__).debug("settings: %s", settings)
