"""Persistent storage for the kasactl credential record.

The record is a flat TOML document holding the cloud username, password and
the most recent session token::

    username = "me@example.com"
    password = "hunter2"
    token = "a1b2c3"

Writes go through a temporary file that replaces the record, so a reader never
sees a partial document. There is no locking: two kasactl processes sharing a
record path race on it, which is acceptable for an interactive single-user
tool but not for concurrent automation.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, ConfigDict, ValidationError

from .exception import CredentialStorageError

logger = logging.getLogger(__name__)

RECORD_FILE_MODE = 0o600


class CredentialRecord(BaseModel):
    """Saved cloud credentials and the last token issued for them."""

    username: str
    password: str
    token: str | None = None  # absent until the first successful login

    model_config = ConfigDict(extra="ignore")

    def __repr__(self) -> str:
        """Return a representation that does not leak secrets."""
        has_token = self.token is not None
        return f"CredentialRecord(username={self.username!r}, token={has_token})"


class CredentialStorage:
    """Reads and writes the credential record at a fixed path."""

    def __init__(self, path: Path | str):
        """Initialize the storage for the record at ``path``."""
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Location of the record on disk."""
        return self._path

    def exists(self) -> bool:
        """Return True when a record file is present."""
        return self._path.is_file()

    def load(self) -> CredentialRecord | None:
        """Read the record, returning None when no file exists."""
        if not self.exists():
            return None

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CredentialStorageError(
                f"Could not read credential record {self._path}: {exc}"
            ) from exc

        try:
            return CredentialRecord.model_validate(tomllib.loads(raw))
        except (tomllib.TOMLDecodeError, ValidationError) as exc:
            raise CredentialStorageError(
                f"Could not parse credential record {self._path}: {exc}"
            ) from exc

    def save(self, record: CredentialRecord) -> None:
        """Write the record atomically, replacing any existing file."""
        document = tomli_w.dumps(record.model_dump(exclude_none=True))
        tmp_file = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # A leftover temp file may have looser permissions; O_EXCL needs it gone
            tmp_file.unlink(missing_ok=True)
            fd = os.open(
                tmp_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, RECORD_FILE_MODE
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(document)
            tmp_file.replace(self._path)
        except OSError as exc:
            tmp_file.unlink(missing_ok=True)
            raise CredentialStorageError(
                f"Could not write credential record {self._path}: {exc}"
            ) from exc

        logger.debug("Saved credential record for %s to %s", record.username, self._path)
