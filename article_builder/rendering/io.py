"""Writing of the generated document."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from ..core.errors import OutputWriteError
from ..core.models import BuildConfiguration

logger = logging.getLogger(__name__)


def ensure_output_dir(config: BuildConfiguration) -> Path:
    """Create the resolved output directory and its parents if missing.

    Args:
        config: Loaded configuration with a concrete ``output.dir``

    Returns:
        The output directory
    """
    output_dir = Path(config.output.dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(output_dir, "create-directory", exc) from exc
    return output_dir


def atomic_write_text(path: Path, text: str, mode: int = 0o644) -> None:
    """Write text to a file atomically using a temporary file.

    Args:
        path: Destination file path
        text: Text content to write
        mode: File permissions (octal)
    """
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    except OSError as exc:
        raise OutputWriteError(path, "open", exc) from exc

    try:
        tmp = os.fdopen(fd, "w", encoding="utf-8")
        try:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        except OSError as exc:
            tmp.close()
            raise OutputWriteError(path, "write", exc) from exc

        try:
            tmp.close()
        except OSError as exc:
            raise OutputWriteError(path, "close", exc) from exc

        try:
            os.replace(tmp_name, path)
            os.chmod(path, mode)
        except OSError as exc:
            raise OutputWriteError(path, "replace", exc) from exc
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


def write_output(config: BuildConfiguration, text: str) -> Path:
    """Create or overwrite ``output.dir/output.filename`` with ``text``.

    Returns:
        The written file path
    """
    output_dir = ensure_output_dir(config)
    output_path = output_dir / config.output.filename
    atomic_write_text(output_path, text)
    logger.info(f"Wrote {output_path}")
    return output_path
