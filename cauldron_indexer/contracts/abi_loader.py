# cauldron_indexer/contracts/abi_loader.py

import json
from pathlib import Path
from typing import Optional, List, Dict, Any

from ..core.errors import ConfigurationError
from ..core.logging import LoggingMixin

ABI_DIR = Path(__file__).parent / "abis"


class ABILoader(LoggingMixin):
    """Loads contract ABIs from the packaged abis/ directory with caching"""

    def __init__(self, abi_base_path: Optional[Path] = None):
        self.abi_base_path = abi_base_path or ABI_DIR
        self._abi_cache: Dict[str, List[Dict[str, Any]]] = {}

        self.log_debug("ABI loader initialized", abi_base_path=str(self.abi_base_path))

    def load_abi(self, name: str) -> List[Dict[str, Any]]:
        if name in self._abi_cache:
            return self._abi_cache[name]

        abi_path = self.abi_base_path / f"{name}.json"
        if not abi_path.exists():
            self.log_error("ABI file not found", abi_path=str(abi_path))
            raise ConfigurationError(f"ABI file not found: {abi_path}")

        try:
            with open(abi_path, 'r') as f:
                abi_data = json.load(f)
        except json.JSONDecodeError as e:
            self.log_error("Invalid JSON in ABI file", abi_path=str(abi_path), error=str(e))
            raise ConfigurationError(f"Invalid JSON in ABI file {abi_path}: {e}") from e

        # Handle different ABI file formats
        if isinstance(abi_data, dict) and 'abi' in abi_data:
            abi_data = abi_data['abi']

        if not isinstance(abi_data, list):
            raise ConfigurationError(f"ABI is not a list: {abi_path}")

        self._abi_cache[name] = abi_data

        self.log_debug("ABI loaded successfully",
                     abi_path=str(abi_path),
                     abi_functions=len([item for item in abi_data if item.get('type') == 'function']),
                     abi_events=len([item for item in abi_data if item.get('type') == 'event']))

        return abi_data

    def event_abis(self, name: str) -> List[Dict[str, Any]]:
        return [item for item in self.load_abi(name) if item.get('type') == 'event']
