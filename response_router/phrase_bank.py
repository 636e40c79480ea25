from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from .config import DEFAULT_PHRASE_BANK_PATH, PHRASE_BANK_PATH, PhraseBanks


def _read_bank(path: Path) -> PhraseBanks:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    return PhraseBanks.model_validate(raw)


@lru_cache(maxsize=8)
def load_phrase_banks(path: Optional[Path] = None) -> PhraseBanks:
    """
    Cached load of the wording tables.

    ``path`` defaults to ``config.PHRASE_BANK_PATH`` (``ROUTER_PHRASE_BANK``).
    A custom file that is missing or invalid is reported and replaced by the
    packaged default; the packaged default itself must load.
    """
    path = Path(path) if path is not None else PHRASE_BANK_PATH

    if path.resolve() != DEFAULT_PHRASE_BANK_PATH.resolve():
        if not path.exists():
            logger.warning("Phrase bank {} not found; using packaged default.", path)
        else:
            try:
                bank = _read_bank(path)
                logger.info("Loaded phrase banks from {}", path)
                return bank
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                logger.warning("Failed to load phrase banks from {}: {}; using packaged default.", path, e)

    bank = _read_bank(DEFAULT_PHRASE_BANK_PATH)
    logger.info("Loaded phrase banks from {}", DEFAULT_PHRASE_BANK_PATH)
    return bank
