"""
Settings file I/O.

Reads go through tomllib and return plain data. Edits go through tomlkit so
a user's comments and layout in settings.toml survive ``muxi plugins add``.
"""

import tomllib
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit import TOMLDocument
from tomlkit.exceptions import ParseError


class TOMLError(Exception):
    """Raised when a settings file cannot be read, parsed or written."""

    pass


def read_toml(file_path: Path) -> dict[str, Any]:
    """
    Parse a settings file into plain Python data.

    Args:
        file_path: settings.toml location

    Returns:
        Top-level table

    Raises:
        TOMLError: If the file is missing, unreadable or not valid TOML
    """
    try:
        content = file_path.read_bytes().decode("utf-8")
    except FileNotFoundError as e:
        raise TOMLError(f"Settings file {file_path} does not exist") from e
    except (OSError, UnicodeDecodeError) as e:
        raise TOMLError(f"Cannot read {file_path}: {e}") from e

    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise TOMLError(f"Failed to parse TOML in {file_path}: {e}") from e


def read_document(file_path: Path) -> TOMLDocument:
    """
    Load a settings file for editing. A missing file yields an empty document.

    Raises:
        TOMLError: If the file exists but cannot be loaded
    """
    if not file_path.exists():
        return tomlkit.document()

    try:
        return tomlkit.parse(file_path.read_text(encoding="utf-8"))
    except ParseError as e:
        raise TOMLError(f"Failed to parse TOML in {file_path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise TOMLError(f"Cannot read {file_path}: {e}") from e


def write_document(file_path: Path, document: TOMLDocument) -> None:
    """Write an edited document, creating the muxi directory if needed."""
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(tomlkit.dumps(document), encoding="utf-8")
    except OSError as e:
        raise TOMLError(f"Cannot write {file_path}: {e}") from e
