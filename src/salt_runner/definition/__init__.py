"""SALT.md definition documents: block tree, tokenizer and parser.

Public API:
    parse: Reduce a block sequence into a ProjectDefinition
    parse_file: Tokenize and parse a SALT.md file
    tokenize: Markdown text to block sequence
    ProjectDefinition, Command, ProjectOptions: Parsed types
"""

from salt_runner.definition.models import (
    DEFAULT_HELP,
    DEFAULT_KIND,
    Command,
    ProjectDefinition,
    ProjectOptions,
)
from salt_runner.definition.parser import ParseMode, parse, parse_file
from salt_runner.definition.tokenizer import tokenize, tokenize_file

DEFINITION_FILENAME = "SALT.md"

__all__ = [
    "DEFAULT_HELP",
    "DEFAULT_KIND",
    "DEFINITION_FILENAME",
    "Command",
    "ParseMode",
    "ProjectDefinition",
    "ProjectOptions",
    "parse",
    "parse_file",
    "tokenize",
    "tokenize_file",
]
