"""
Output helpers
"""
from pathlib import Path
from typing import Iterable, Union
import logging

from .errors import OutputWriteError

logger = logging.getLogger(__name__)


def format_lines(lines: Iterable[str]) -> str:
    """Newline-joined, no header and no trailing newline"""
    return '\n'.join(lines)


def write_text(content: str, output_path: Union[str, Path]) -> None:
    """Write UTF-8 text, creating the parent directory if needed"""
    path = Path(output_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
    except OSError as e:
        raise OutputWriteError(f"Failed to write output file {path}: {e}") from e
    logger.info(f"Writing output: {path}")


def write_lines(lines: Iterable[str], output_path: Union[str, Path]) -> None:
    write_text(format_lines(lines), output_path)
