from __future__ import annotations

from typing import Optional


class ColgenError(RuntimeError):
    kind = "colgen error"

    def __init__(self, subject: str, where: Optional[str] = None) -> None:
        self.subject = subject
        self.where = where
        message = f"{self.kind}: {subject}"
        if where:
            message = f"{message} ({where})"
        super().__init__(message)


class UnknownLineError(ColgenError):
    kind = "unknown line"


class MissingArgError(ColgenError):
    kind = "missing arg"


class MissingTypeError(ColgenError):
    kind = "missing type"


class MissingFieldError(ColgenError):
    kind = "missing field"


class MissingEntityError(ColgenError):
    kind = "missing main entity"

    def __init__(self, entity: str, rule_name: str) -> None:
        self.entity = entity
        self.rule_name = rule_name
        super().__init__(f"{entity} for {rule_name or '<field>'}")


class FormatError(ColgenError):
    kind = "format failed"


class GoParseError(ColgenError):
    kind = "go parse failed"


class PackageLoadError(ColgenError):
    kind = "failed to load package"
