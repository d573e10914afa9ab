from __future__ import annotations
import json
from pathlib import Path
from typing import List
from .types import Question
BANK_PATH = Path(__file__).with_name("data") / "bank.json"
def load_bank(path: Path | None = None) -> List[Question]:
    raw = json.loads((path or BANK_PATH).read_text(encoding="utf-8"))
    return [Question(**r) for r in raw]
