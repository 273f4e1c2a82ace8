"""Loading raw stylesheet text."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from graph.model import SourceFile
from pipeline.log import get_logger


logger = get_logger("reader")


def read_text(file_path: Path) -> Tuple[Optional[str], Optional[str]]:
    """
    Read a stylesheet as UTF-8 text, dropping a leading byte-order mark.

    Args:
        file_path: Path to the file to read.

    Returns:
        (content, None) on success, (None, reason) if the file cannot be read.
    """
    try:
        return file_path.read_text(encoding="utf-8-sig"), None
    except UnicodeDecodeError as e:
        return None, f"not valid UTF-8: {e.reason}"
    except OSError as e:
        return None, e.strerror or str(e)


def read_sources(files: List[SourceFile], workers: int = 1) -> Dict[Path, str]:
    """
    Attach content to every file that can be read.

    Reads are independent, so several workers may run them at once; results
    are applied in the order of `files` either way.

    Args:
        files: Scanned files, content is set in place.
        workers: Number of reader threads.

    Returns:
        Read failures, keyed by file path.
    """
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(read_text, [f.path for f in files]))
    else:
        results = [read_text(f.path) for f in files]

    failures: Dict[Path, str] = {}
    for source_file, (content, reason) in zip(files, results):
        if content is None:
            failures[source_file.path] = reason or "unreadable"
            logger.debug("Could not read %s: %s", source_file.relative_path, reason)
            continue
        source_file.set_content(content)
    return failures
