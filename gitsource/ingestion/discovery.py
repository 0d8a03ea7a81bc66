"""
File discovery under a mirror root using glob patterns.
"""

import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Pattern, Union

from gitsource.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ("**",)


@lru_cache(maxsize=128)
def compile_pattern(pattern: str) -> Pattern:
    """
    Translate a glob pattern into a regular expression.

    ``*`` and ``?`` never cross a path separator; ``**`` matches any
    number of path segments.
    """
    pattern = pattern.strip()
    if pattern.startswith("./"):
        pattern = pattern[2:]
    regex = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if pattern.startswith("**/", i):
            regex.append("(?:.*/)?")
            i += 3
            continue
        if pattern.startswith("**", i):
            regex.append(".*")
            i += 2
            continue
        if char == "*":
            regex.append("[^/]*")
        elif char == "?":
            regex.append("[^/]")
        elif char == "[":
            # A "]" right after "[" or "[!" is a literal member of the set
            j = i + 1
            if j < len(pattern) and pattern[j] == "!":
                j += 1
            if j < len(pattern) and pattern[j] == "]":
                j += 1
            end = pattern.find("]", j)
            if end == -1:
                regex.append(re.escape(char))
            else:
                body = pattern[i + 1:end].replace("\\", "\\\\")
                body = re.sub(r"([&~|])", r"\\\1", body)
                if body.startswith("!"):
                    body = "^" + body[1:]
                elif body.startswith("^"):
                    body = "\\" + body
                regex.append(f"[{body}]")
                i = end
        else:
            regex.append(re.escape(char))
        i += 1
    try:
        return re.compile("^" + "".join(regex) + "$")
    except re.error as e:
        raise ConfigurationError(
            f"Invalid file pattern: {pattern}",
            details={"pattern": pattern, "error": str(e)},
        )


def _is_hidden(relative: str) -> bool:
    return any(part.startswith(".") for part in relative.split("/"))


def discover_files(
    root: Union[str, Path],
    patterns: Union[str, Iterable[str]] = DEFAULT_PATTERNS,
) -> List[Path]:
    """
    Discover regular files under root matching the given patterns.

    Patterns prefixed with ``!`` exclude matches. Dot-files and anything
    under a dot-directory, including ``.git``, are never returned.

    Args:
        root: Mirror root directory.
        patterns: One pattern or several.

    Returns:
        Sorted absolute paths.
    """
    root = Path(root).resolve()
    if isinstance(patterns, str):
        patterns = [patterns]

    include, exclude = [], []
    for pattern in patterns:
        if pattern.startswith("!"):
            exclude.append(compile_pattern(pattern[1:]))
        else:
            include.append(compile_pattern(pattern))

    files = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        current = Path(dirpath)

        for filename in filenames:
            file_path = current / filename
            relative = file_path.relative_to(root).as_posix()

            if _is_hidden(relative) or not file_path.is_file():
                continue
            if not any(p.match(relative) for p in include):
                continue
            if any(p.match(relative) for p in exclude):
                continue

            files.append(file_path)

    logger.debug(f"Discovered {len(files)} files in {root}")
    return sorted(files)
