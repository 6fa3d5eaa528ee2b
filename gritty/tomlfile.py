"""Reading and writing TOML documents with canonical error translation."""

import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from gritty.exceptions import DeserializationError, SerializationError, error_from_os_error


def loads(text: str, source: str | Path = "<string>") -> dict[str, Any]:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise DeserializationError(f"Invalid TOML in {source}: {e}") from e


def dumps(data: dict[str, Any]) -> str:
    try:
        return tomli_w.dumps(data)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot serialize to TOML: {e}") from e


def read(path: str | Path) -> dict[str, Any]:
    """
    Read and parse a TOML file.

    Raises:
        NotFoundError: If the file does not exist
        DeserializationError: If the file is not valid TOML
        GrittyError: On other I/O failures
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise error_from_os_error(e) from e
    return loads(text, path)


def write(path: str | Path, data: dict[str, Any]) -> None:
    """
    Serialize ``data`` and write it to ``path``, creating parent directories.

    The file is rewritten in place; there is no protection against a crash
    mid-write or against concurrent writers.
    """
    text = dumps(data)
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise error_from_os_error(e) from e
