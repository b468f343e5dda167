# topmark:header:start
#
#   project      : TS Analyzer
#   file         : styling.py
#   file_relpath : src/tsanalyzer/rendering/styling.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Re-derive styles from rendered text.

Rendered blocks are plain text. Terminal colors (`colorize`) and editor
highlight groups (`style_spans`) are recovered by scanning each line, so the
text stays byte-identical whatever the output surface.

`style_spans` splits a line into ``(text, StyleTag)`` chunks whose
concatenation is always the original line.
"""

from __future__ import annotations

import re
from typing import Final

from yachalk import chalk

from tsanalyzer.constants import NO_ERRORS_MESSAGE, SUMMARY_PREFIX
from tsanalyzer.diagnostic.model import Severity
from tsanalyzer.rendering.colored_enum import ColoredStrEnum
from tsanalyzer.rendering.frame import (
    BORDER_GLYPH,
    CONNECTOR_GLYPH,
    FOOTER_CORNER,
    HEADER_CLOSE,
    HEADER_OPEN,
    MESSAGE_GLYPH,
    RULE_GLYPH,
)


class StyleTag(ColoredStrEnum):
    """Style of one chunk of a rendered line."""

    CODE = "code", chalk.magenta_bright
    SEVERITY = "severity", chalk.red_bright.bold
    BORDER = "border", chalk.gray
    LOCATION = "location", chalk.cyan
    SOURCE = "source", chalk.white
    POINTER = "pointer", chalk.red_bright.bold
    MESSAGE = "message", chalk.white
    HELP = "help", chalk.green
    NOTE = "note", chalk.blue_bright
    SUMMARY = "summary", chalk.bold
    PLAIN = "plain", chalk.reset


StyledChunk = tuple[str, StyleTag]

_SEVERITY_LABELS: Final[str] = "|".join(sev.label for sev in Severity)

# Each rule is a line pattern plus the style of each of its groups, in order.
# The groups of a pattern must cover the whole line.
_RULES: Final[tuple[tuple[re.Pattern[str], tuple[tuple[str, StyleTag], ...]], ...]] = (
    (
        re.compile(rf"^(?P<rule>{RULE_GLYPH}+{FOOTER_CORNER})$"),
        (("rule", StyleTag.BORDER),),
    ),
    (
        re.compile(rf"^(?P<open>\s*{re.escape(HEADER_OPEN)} )(?P<loc>.*?)(?P<close> {re.escape(HEADER_CLOSE)})$"),
        (("open", StyleTag.BORDER), ("loc", StyleTag.LOCATION), ("close", StyleTag.BORDER)),
    ),
    (
        re.compile(rf"^(?P<gutter>\d+ {BORDER_GLYPH} ?)(?P<src>.*)$"),
        (("gutter", StyleTag.BORDER), ("src", StyleTag.SOURCE)),
    ),
    (
        re.compile(rf"^(?P<rail>\s+{BORDER_GLYPH} )(?P<lead>[ \t]*)(?P<mark>{MESSAGE_GLYPH})(?P<msg>.*)$"),
        (("rail", StyleTag.BORDER), ("lead", StyleTag.PLAIN), ("mark", StyleTag.POINTER), ("msg", StyleTag.MESSAGE)),
    ),
    (
        re.compile(rf"^(?P<rail>\s+{BORDER_GLYPH} )(?P<lead>[ \t]*)(?P<mark>{CONNECTOR_GLYPH}|\S+)(?P<rest>.*)$"),
        (("rail", StyleTag.BORDER), ("lead", StyleTag.PLAIN), ("mark", StyleTag.POINTER), ("rest", StyleTag.PLAIN)),
    ),
    (
        re.compile(r"^(?P<lead>\s+= )(?P<kind>help:)(?P<msg>.*)$"),
        (("lead", StyleTag.BORDER), ("kind", StyleTag.HELP), ("msg", StyleTag.MESSAGE)),
    ),
    (
        re.compile(r"^(?P<lead>\s+= )(?P<kind>note:)(?P<msg>.*)$"),
        (("lead", StyleTag.BORDER), ("kind", StyleTag.NOTE), ("msg", StyleTag.MESSAGE)),
    ),
    (
        re.compile(rf"^(?P<code>\[[^\]\s]+\])?(?P<gap> ?)(?P<sev>(?:{_SEVERITY_LABELS}):)(?P<msg>.*)$"),
        (("code", StyleTag.CODE), ("gap", StyleTag.PLAIN), ("sev", StyleTag.SEVERITY), ("msg", StyleTag.MESSAGE)),
    ),
    (
        re.compile(rf"^(?P<summary>{re.escape(SUMMARY_PREFIX)}.*|{re.escape(NO_ERRORS_MESSAGE)})$"),
        (("summary", StyleTag.SUMMARY),),
    ),
)


def style_spans(line: str) -> list[StyledChunk]:
    """Split one rendered line into style-tagged chunks.

    Args:
        line (str): A single line of rendered block or report text.

    Returns:
        list[StyledChunk]: Non-empty chunks; their concatenation equals ``line``.
    """
    if not line:
        return []
    for pattern, groups in _RULES:
        m: re.Match[str] | None = pattern.match(line)
        if m is None:
            continue
        chunks: list[StyledChunk] = []
        for name, tag in groups:
            text: str | None = m.group(name)
            if text:
                chunks.append((text, tag))
        return chunks
    return [(line, StyleTag.PLAIN)]


def _paint(text: str, tag: StyleTag) -> str:
    if tag is StyleTag.PLAIN:
        return text
    if tag is StyleTag.SEVERITY:
        try:
            return Severity(text.rstrip(":").lower()).color(text)
        except ValueError:
            pass
    return tag.color(text)


def colorize(rendered_text: str) -> str:
    """Return ``rendered_text`` with terminal colors applied (via yachalk)."""
    return "\n".join(
        "".join(_paint(text, tag) for text, tag in style_spans(line))
        for line in rendered_text.split("\n")
    )
