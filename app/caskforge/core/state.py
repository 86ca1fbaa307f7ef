"""Receipt persistence for installed applications.

Each installed recipe has one JSON receipt file named after its token.
"""

import json
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

from caskforge.core.paths import ensure_receipts_dir, get_receipts_dir
from caskforge.models.receipt import InstallReceipt

logger = logging.getLogger(__name__)


class ReceiptStore:
    """Reads and writes install receipts.

    Storage location: ~/.local/state/caskforge/receipts/<token>.json
    """

    def __init__(self, receipts_dir: Path | None = None) -> None:
        """Initialize ReceiptStore.

        Args:
            receipts_dir: Optional override for the receipts directory.
        """
        self._receipts_dir = receipts_dir if receipts_dir is not None else get_receipts_dir()

    def receipt_path(self, token: str) -> Path:
        """Path of the receipt file for a token."""
        return self._receipts_dir / f"{token}.json"

    def save(self, receipt: InstallReceipt) -> Path:
        """Write a receipt atomically, replacing any previous one.

        Raises:
            RuntimeError: If the receipts directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._receipts_dir == get_receipts_dir():
            ensure_receipts_dir()
        else:
            self._receipts_dir.mkdir(parents=True, exist_ok=True)

        path = self.receipt_path(receipt.token)
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._receipts_dir,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                json.dump(receipt.to_dict(), f, indent=2, sort_keys=True)
            os.replace(str(tmp_path), str(path))
        except OSError:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise

        logger.debug("Saved receipt %s", path)
        return path

    def load(self, token: str) -> InstallReceipt | None:
        """Load the receipt for a token.

        Returns:
            The receipt, or None if the token is not installed or the
            receipt is unreadable.
        """
        path = self.receipt_path(token)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return InstallReceipt.from_dict(data)
        except (OSError, json.JSONDecodeError, KeyError, ValueError) as e:
            logger.warning("Ignoring unreadable receipt %s: %s", path, e)
            return None

    def delete(self, token: str) -> bool:
        """Delete the receipt for a token.

        Returns:
            True if a receipt was removed, False if none existed.
        """
        path = self.receipt_path(token)
        if not path.exists():
            return False
        path.unlink()
        return True

    def list_installed(self) -> list[InstallReceipt]:
        """Return all readable receipts sorted by token."""
        if not self._receipts_dir.is_dir():
            return []
        receipts: list[InstallReceipt] = []
        for path in sorted(self._receipts_dir.glob("*.json")):
            receipt = self.load(path.stem)
            if receipt is not None:
                receipts.append(receipt)
        return receipts
