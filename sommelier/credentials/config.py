from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _default_db_path() -> Path:
    raw = os.getenv("SOMMELIER_KV_PATH")
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".sommelier" / "kv.db"


@dataclass(frozen=True)
class CredentialConfig:
    db_path: Path = field(default_factory=_default_db_path)
    key_name: str = "sommelier.api_key"


DEFAULT_CREDENTIAL_CONFIG = CredentialConfig()
