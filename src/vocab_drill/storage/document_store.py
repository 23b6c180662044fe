"""Persistence transports for JSON documents."""

import copy
import fcntl
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from vocab_drill.exceptions import MalformedDocument, StorageUnavailable


class DocumentStore(ABC):
    """Key/value store of JSON objects."""

    @abstractmethod
    def load(self, key: str) -> dict[str, Any] | None:
        """Load a document. Returns None if nothing is stored under ``key``.

        Raises:
            StorageUnavailable: The medium cannot be read.
            MalformedDocument: Stored data is not a JSON object.
        """

    @abstractmethod
    def save(self, key: str, document: dict[str, Any]) -> None:
        """Replace the document stored under ``key``.

        Raises:
            StorageUnavailable: The medium cannot be written.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the document under ``key`` if present.

        Raises:
            StorageUnavailable: The medium cannot be written.
        """


class JsonFileStore(DocumentStore):
    """One ``<key>.json`` file per document (fcntl.flock + atomic write).

    Args:
        directory: Folder holding the documents; created on first write.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> dict[str, Any] | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, "rb") as f:
                fcntl.flock(f, fcntl.LOCK_SH)
                raw = f.read()
                fcntl.flock(f, fcntl.LOCK_UN)
        except OSError as e:
            raise StorageUnavailable(key, str(e)) from e
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedDocument(key, str(e)) from e
        if not isinstance(data, dict):
            raise MalformedDocument(key, f"expected a JSON object, got {type(data).__name__}")
        return data

    def save(self, key: str, document: dict[str, Any]) -> None:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            lock_path = self.directory / f"{key}.json.lock"
            with open(lock_path, "w") as lock_file:
                fcntl.flock(lock_file, fcntl.LOCK_EX)
                tmp = tempfile.NamedTemporaryFile(
                    "w", dir=self.directory, delete=False, suffix=".json", encoding="utf-8"
                )
                try:
                    with tmp:
                        json.dump(document, tmp, indent=2, ensure_ascii=False)
                    os.replace(tmp.name, path)
                except Exception:
                    # Leave no half-written temp file next to the documents
                    Path(tmp.name).unlink(missing_ok=True)
                    raise
        except OSError as e:
            raise StorageUnavailable(key, str(e)) from e

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailable(key, str(e)) from e


class MemoryStore(DocumentStore):
    """Dict-backed store for tests and ephemeral profiles."""

    def __init__(self, documents: dict[str, dict[str, Any]] | None = None):
        self.documents: dict[str, dict[str, Any]] = documents if documents is not None else {}

    def load(self, key: str) -> dict[str, Any] | None:
        document = self.documents.get(key)
        return copy.deepcopy(document) if document is not None else None

    def save(self, key: str, document: dict[str, Any]) -> None:
        self.documents[key] = copy.deepcopy(document)

    def delete(self, key: str) -> None:
        self.documents.pop(key, None)
