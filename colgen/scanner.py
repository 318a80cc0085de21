from __future__ import annotations

import logging
from pathlib import Path

from colgen.replacer import INJECTION_PREFIX
from colgen.utils.types import DirectiveLines

logger = logging.getLogger(__name__)

COLGEN_PREFIX = "//colgen:"
ASSISTANT_PREFIX = "//colgen@ai:"
PACKAGE_PREFIX = "package "


def scan_source(text: str) -> DirectiveLines:
    """Collect colgen directives from Go source.

    Rule lines lose their prefix; injection lines are kept verbatim because
    they are replaced literally later on.
    """
    result = DirectiveLines()
    for raw in text.splitlines():
        line = raw.rstrip("\r")
        if line.startswith(PACKAGE_PREFIX) and not result.package_name:
            parts = line[len(PACKAGE_PREFIX):].split()
            result.package_name = parts[0] if parts else ""
        elif line.startswith(ASSISTANT_PREFIX):
            logger.debug("skipping assistant directive: %s", line)
            result.assistant.append(line[len(ASSISTANT_PREFIX):])
        elif line.startswith(INJECTION_PREFIX):
            result.injections.append(line)
        elif line.startswith(COLGEN_PREFIX):
            result.lines.append(line[len(COLGEN_PREFIX):])
    return result


def read_directives(path: Path) -> DirectiveLines:
    return scan_source(path.read_text(encoding="utf-8"))


def output_path_for(source_path: Path, suffix: str = "_colgen.go") -> Path:
    return source_path.with_name(source_path.stem + suffix)
