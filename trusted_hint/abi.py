import json
from pathlib import Path
from typing import Dict, List

from .constants import REGISTRY_ABI_FILE

ABI_DIR = Path(__file__).parent / "abis"

_ABI_CACHE: Dict[str, List[dict]] = {}


def load_abi(name: str = REGISTRY_ABI_FILE) -> List[dict]:
    """Load a bundled ABI JSON file, cached per process."""
    if name not in _ABI_CACHE:
        _ABI_CACHE[name] = json.loads((ABI_DIR / name).read_text())
    return _ABI_CACHE[name]


def function_names(name: str = REGISTRY_ABI_FILE) -> List[str]:
    return sorted({e["name"] for e in load_abi(name) if e.get("type") == "function"})
