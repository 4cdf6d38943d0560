import json
import logging
import os
import platform
from pathlib import Path
from typing import Optional, Dict

from settings import TOKEN_FILE, REFRESH_TOKEN_KEY

logger = logging.getLogger(__name__)


class RefreshTokenStorage:
    """Single named secret slot backed by a JSON file with owner-only permissions

    Holds at most one refresh token under ``key``. The file may be shared with
    other slots; only this slot is ever read or written.
    """

    def __init__(self, token_file: Optional[str] = None, key: str = REFRESH_TOKEN_KEY):
        self.token_path = Path(token_file if token_file else TOKEN_FILE).expanduser()
        self.key = key
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.token_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def _load(self) -> Dict[str, str]:
        if not self.token_path.exists():
            return {}

        try:
            data = json.loads(self.token_path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to read credential file {self.token_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Ignoring malformed credential file {self.token_path}")
            return {}
        return data

    def _write(self, data: Dict[str, str]):
        try:
            self._ensure_secure_directory()
            self.token_path.write_text(json.dumps(data, indent=2))
            # Set file permissions to 600 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(self.token_path, 0o600)
        except OSError as e:
            logger.error(f"Failed to write credential file {self.token_path}: {e}")
            raise

    def get(self) -> Optional[str]:
        """Return the stored secret, or None if the slot is empty"""
        value = self._load().get(self.key)
        if isinstance(value, str) and value:
            return value
        return None

    def set(self, value: str):
        """Store ``value`` in the slot, overwriting any prior value"""
        data = self._load()
        data[self.key] = value
        self._write(data)
        logger.debug(f"Saved '{self.key}' to {self.token_path}")

    def delete(self):
        """Erase the slot. Removes the file once no other slot remains."""
        data = self._load()
        if self.key not in data:
            return

        del data[self.key]
        if data:
            self._write(data)
        else:
            try:
                self.token_path.unlink()
            except FileNotFoundError:
                pass
        logger.debug(f"Removed '{self.key}' from {self.token_path}")

    @property
    def token_file(self) -> Path:
        """Get the credential file path"""
        return self.token_path
