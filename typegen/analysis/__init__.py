"""Static analysis of Tauri Rust sources."""

from .analyzer import CommandAnalyzer
from .channels import ChannelParser
from .commands import CommandParser
from .dependency_graph import DependencyGraph
from .events import EventParser
from .structs import StructParser
from .syntax_cache import ParsedFile, SyntaxCache, SyntaxParseError
from .type_parser import parse_type_structure

__all__ = [
    "ChannelParser",
    "CommandAnalyzer",
    "CommandParser",
    "DependencyGraph",
    "EventParser",
    "ParsedFile",
    "StructParser",
    "SyntaxCache",
    "SyntaxParseError",
    "parse_type_structure",
]
