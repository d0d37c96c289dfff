"""
OUI (Organizationally Unique Identifier) lookup for hardware address vendors.

The catalog reads a tab-separated resource of ``XX:XX:XX<TAB>Vendor Name``
lines. The packaged ``data/oui.tsv`` is used unless another path is given.
"""

from pathlib import Path
from typing import Dict, Optional, Union

from ..utils.logger import Logger, get_logger
from ..utils.network_utils import hardware_prefix

DEFAULT_OUI_PATH = Path(__file__).resolve().parent.parent / "data" / "oui.tsv"


class OUICatalog:
    """
    Read-only mapping from OUI prefix to vendor name.

    The resource is loaded on first use and kept for the lifetime of the
    object. A missing file leaves the catalog empty; lookups then return None.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, logger: Optional[Logger] = None):
        """
        Initialize the catalog without reading the resource yet.

        Args:
            path: Path to the tab-separated OUI resource (defaults to the packaged file)
            logger: Logger instance for load diagnostics
        """
        self.path = Path(path) if path else DEFAULT_OUI_PATH
        self.logger = logger or get_logger(__name__)
        self._entries: Optional[Dict[str, str]] = None

    @property
    def loaded(self) -> bool:
        return self._entries is not None

    def load(self) -> "OUICatalog":
        """Load the resource if it has not been loaded yet."""
        if self._entries is not None:
            return self

        entries: Dict[str, str] = {}
        if not self.path.exists():
            self.logger.warning(f"OUI database not found at {self.path}; vendor names will be empty")
            self._entries = entries
            return self

        skipped = 0
        try:
            with open(self.path, 'r', encoding='utf-8', errors='replace') as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line or line.startswith('#'):
                        continue

                    parts = line.split('\t', 1)
                    prefix = hardware_prefix(parts[0]) if len(parts) == 2 else None
                    vendor = parts[1].strip() if len(parts) == 2 else ""
                    if not prefix or not vendor or len(parts[0].strip()) > 8:
                        skipped += 1
                        self.logger.debug(f"Skipping malformed OUI line {line_number}: {line!r}")
                        continue

                    entries.setdefault(prefix, vendor)
        except OSError as e:
            self.logger.warning(f"Failed to read OUI database {self.path}: {e}")

        self._entries = entries
        self.logger.debug(f"OUI database loaded: {len(entries)} prefixes, {skipped} lines skipped")
        return self

    def lookup(self, hardware_address: str) -> Optional[str]:
        """
        Look up the vendor for a hardware address.

        Args:
            hardware_address: Address in any common notation
                ("aa:bb:cc:11:22:33", "AA-BB-CC-11-22-33", "aabb.cc11.2233")

        Returns:
            Vendor name or None if the prefix is unknown
        """
        self.load()
        prefix = hardware_prefix(hardware_address)
        if not prefix:
            return None
        return self._entries.get(prefix)

    def __len__(self) -> int:
        self.load()
        return len(self._entries)
