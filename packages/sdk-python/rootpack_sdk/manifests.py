"""
Manifest Files
==============

Reads and writes composer.json style documents.

The written document is formatted the way Composer formats it: four space
indentation, unescaped slashes and unicode, trailing newline.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

from rootpack_common.errors import ManifestWriteError, NotFoundError, ValidationError
from rootpack_common.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


def encode_document(document: Any) -> bytes:
    """Encode a document the way it is written to disk."""
    return (json.dumps(document, indent=4, ensure_ascii=False) + "\n").encode("utf-8")


class JsonManifestFile:
    """Reads and writes JSON manifest documents."""

    @staticmethod
    def exists(path: PathLike) -> bool:
        return Path(path).is_file()

    @staticmethod
    def read(path: PathLike) -> Any:
        """
        Read and decode a JSON document.

        Raises:
            NotFoundError: If the file does not exist
            ValidationError: If the file cannot be read or is not valid JSON
        """
        file_path = Path(path)
        if not file_path.exists():
            raise NotFoundError(f"File not found: {file_path}", path=str(file_path))
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {file_path}: {e}")
        except OSError as e:
            raise ValidationError(f"Could not read {file_path}: {e}")

    @staticmethod
    def write(path: PathLike, document: Dict[str, Any]) -> int:
        """
        Write a document, replacing the target atomically.

        Returns:
            Number of bytes written

        Raises:
            ManifestWriteError: If the document could not be fully written
        """
        file_path = Path(path)
        content = encode_document(document)
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{file_path.name}.", suffix=".tmp", dir=str(file_path.parent)
            )
            with os.fdopen(fd, "wb") as f:
                written = f.write(content)
            if written != len(content):
                raise ManifestWriteError(
                    f"Short write to {file_path}: {written} of {len(content)} bytes",
                    path=str(file_path),
                )
            os.replace(tmp_path, file_path)
            tmp_path = None
        except OSError as e:
            raise ManifestWriteError(f"Could not write {file_path}: {e}", path=str(file_path))
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.info("Wrote manifest", path=str(file_path), bytes=written)
        return written
