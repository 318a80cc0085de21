from .formatter import format_source
from .generator import Generator

__all__ = ["Generator", "format_source"]
