"""
LaTeX Pattern Constants

Centralized LaTeX pattern strings used for scanning template source.
Organized into frozen dataclasses by category for immutability and clear grouping.

These patterns are the whole contract with LaTeX syntax: the engine does
targeted substitution on them and never interprets anything else.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentPatterns:
    """
    Document-level LaTeX markers.

    Used for structural validation and body extraction.
    """
    DOCUMENTCLASS: str = r'\documentclass'
    BEGIN_DOCUMENT: str = r'\begin{document}'
    END_DOCUMENT: str = r'\end{document}'


@dataclass(frozen=True)
class RegexPatterns:
    """
    Regular expressions for targeted scanning.

    PACKAGE: group 1 = options (may be None), group 2 = package name(s)
    IMAGE: group 1 = bracketed options (may be None), group 2 = image path
    DOCUMENTCLASS: full \\documentclass[...]{...} declaration
    DOCUMENTCLASS_LINE: the \\documentclass line including its newline
    DOCUMENT_BODY: group 1 = everything between begin/end document
    SECTION: group 1 = section title
    """
    PACKAGE: str = r'\\usepackage(?:\[(.*?)\])?\{(.*?)\}'
    IMAGE: str = r'\\includegraphics(\[.*?\])?\{([^}]+)\}'
    DOCUMENTCLASS: str = r'\\documentclass(\[.*?\])?\{.*?\}'
    DOCUMENTCLASS_LINE: str = r'\\documentclass.*?\n'
    DOCUMENT_BODY: str = r'\\begin\{document\}([\s\S]*?)\\end\{document\}'
    SECTION: str = r'\\section\{([^}]+)\}'
    SETMAINFONT: str = r'\\setmainfont'
    COLOR_COMMAND: str = r'\\(textcolor|color)\{'


PACKAGE_RE = re.compile(RegexPatterns.PACKAGE)
IMAGE_RE = re.compile(RegexPatterns.IMAGE)
DOCUMENTCLASS_RE = re.compile(RegexPatterns.DOCUMENTCLASS)
DOCUMENTCLASS_LINE_RE = re.compile(RegexPatterns.DOCUMENTCLASS_LINE)
DOCUMENT_BODY_RE = re.compile(RegexPatterns.DOCUMENT_BODY)
SECTION_RE = re.compile(RegexPatterns.SECTION)
SETMAINFONT_RE = re.compile(RegexPatterns.SETMAINFONT)
COLOR_COMMAND_RE = re.compile(RegexPatterns.COLOR_COMMAND)


@dataclass(frozen=True)
class CommentPatterns:
    """
    Comment lines injected into transformed content.
    """
    FONT_WARNING: str = '% Warning: Template requires {font} font package'
    IMAGE_FAILURE: str = '% Failed to process image: {path}'
    IMAGE_FALLBACK: str = '% Using default placeholder'
