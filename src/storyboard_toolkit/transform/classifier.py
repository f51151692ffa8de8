"""
Module: transform.classifier

Purpose:
    Classify a single Events-section line as an object definition, an
    indented command or anything else, and split it into positional fields.

Key Functions:
    - classify(): Build a ClassifiedLine from raw text

Used By:
    - transform.rewriter: Dispatch by line kind
    - transform.collector: Find Sprite/Animation image paths
"""

from __future__ import annotations

import re

from storyboard_toolkit.core.models import ClassifiedLine, LineKind

OBJECT_PREFIXES = ("Sprite", "Animation")
INDENT_CHARS = " _"

# Indentation may mix spaces and underscores (nested loop/trigger commands)
_INDENT_PATTERN = re.compile(r"[ _]+")


def classify(line: str) -> ClassifiedLine:
    """
    Classify one storyboard line.

    Rules:
    - Lines starting with "Sprite" or "Animation" are object definitions.
    - Lines whose first character is a space or underscore are commands;
      the command code is the first field with all indentation removed.
    - Everything else is OTHER and carries no fields.

    Never raises: short or malformed lines simply have fewer fields.

    Example:
        >>> classify(" M,0,100,200,10,50,20,430").code
        'M'
        >>> classify("//Background and Video events").kind
        <LineKind.OTHER: 'other'>
    """
    if line.startswith(OBJECT_PREFIXES):
        return ClassifiedLine(line, LineKind.OBJECT, tuple(line.split(",")))

    if line[:1] and line[0] in INDENT_CHARS:
        fields = tuple(line.split(","))
        code = _INDENT_PATTERN.sub("", fields[0])
        return ClassifiedLine(line, LineKind.COMMAND, fields, code)

    return ClassifiedLine(line, LineKind.OTHER)
