"""
Sync token persistence for the desktop collector.

The token issued by POST /auth/token is pasted once during
`python -m chronos setup` and kept on disk with owner-only permissions:

    Directory: 0700 (rwx------)
    File:      0600 (rw-------)

Tokens expire after 30 days; re-run setup with a fresh one when the server
starts answering 401.
"""
import os
import stat
from pathlib import Path

TOKEN_FILE_NAME = "sync_token.txt"


class NoTokenError(RuntimeError):
    """Raised when no token has been saved yet."""


class TokenStore:
    """Reads and writes the collector's sync token."""

    def __init__(self, directory: Path):
        self._directory = Path(directory)
        self._token_file = self._directory / TOKEN_FILE_NAME

    @property
    def path(self) -> Path:
        return self._token_file

    def has_token(self) -> bool:
        return self._token_file.exists()

    def save(self, token: str) -> None:
        token = token.strip()
        if not token:
            raise ValueError("Token cannot be empty")
        self._directory.mkdir(parents=True, exist_ok=True)
        os.chmod(self._directory, stat.S_IRWXU)  # 0700

        self._token_file.write_text(token)
        os.chmod(self._token_file, stat.S_IRUSR | stat.S_IWUSR)  # 0600

    def load(self) -> str:
        """
        Raises:
            NoTokenError: if no token file exists or it is empty.
        """
        if not self._token_file.exists():
            raise NoTokenError(
                f"No sync token found at {self._token_file}. "
                "Run `python -m chronos setup` to add one."
            )
        token = self._token_file.read_text().strip()
        if not token:
            raise NoTokenError(f"Sync token file {self._token_file} is empty.")
        return token

    def clear(self) -> None:
        """Delete the token file (does not raise if already absent)."""
        if self._token_file.exists():
            self._token_file.unlink()
