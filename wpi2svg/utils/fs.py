"""Filesystem helpers for conversion inputs and outputs.

Provides:
    - Atomic writes: tmp file → fsync → rename (no half-written SVG on failure)
    - YAML loading for the converter config
    - Output path derivation (input extension replaced by the vector suffix)

All paths use pathlib.Path for cross-platform compatibility.

Usage:
    from wpi2svg.utils import fs
    out = fs.derive_output_path("notes/page1.wpi")   # notes/page1.svg
    fs.atomic_write_text(out, svg_text)
"""

import os
from pathlib import Path
from typing import Any, Dict, Union

import yaml


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory if it doesn't exist, return Path object.

    Parameters
    ----------
    p : Union[str, Path]
        Directory path

    Returns
    -------
    Path
        Path object (guaranteed to exist)
    """
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(
    path: Union[str, Path],
    data: bytes,
    tmp_suffix: str = ".tmp"
) -> None:
    """Write bytes to file atomically (tmp → fsync → rename).

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    data : bytes
        Data to write
    tmp_suffix : str
        Temporary file suffix, default ".tmp"

    Raises
    ------
    OSError
        If the temporary file cannot be written or renamed. The temporary
        file is removed before the error propagates.

    Notes
    -----
    Uses same directory for tmp file to ensure atomic rename on same filesystem.
    """
    path = Path(path)
    ensure_dir(path.parent)

    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        # Atomic rename (overwrites existing file on POSIX)
        tmp_path.replace(path)
    except OSError:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def atomic_write_text(
    path: Union[str, Path],
    text: str,
    encoding: str = "utf-8"
) -> None:
    """Write text to file atomically.

    Convenience wrapper around atomic_write_bytes.
    """
    atomic_write_bytes(path, text.encode(encoding))


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content (None for an empty file)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e


def derive_output_path(
    input_path: Union[str, Path],
    suffix: str = ".svg"
) -> Path:
    """Replace the extension of *input_path* with *suffix*.

    Parameters
    ----------
    input_path : Union[str, Path]
        Source capture file, e.g. ``page1.wpi``
    suffix : str
        Output extension including the dot, default ".svg"

    Returns
    -------
    Path
        Sibling path with the new extension. A path without extension
        simply gains *suffix*.

    Raises
    ------
    ValueError
        If *input_path* has no file name (e.g. ``.`` or ``/``)

    Examples
    --------
    >>> derive_output_path("notes/page1.WPI")
    PosixPath('notes/page1.svg')
    """
    return Path(input_path).with_suffix(suffix)
