#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Markdown renderer
=================
Renders note content to an HTML fragment that can be embedded in a page
without further escaping.

Supported syntax (a deliberately small subset):
  - ```lang fenced code blocks   — content shown verbatim
  - # H1 … ###### H6             — headings
  - "- item" / "* item"          — flat unordered lists
  - **bold**, *italic*, `code`, [label](https://…)
  - blank-line separated paragraphs, single newlines become <br>

Anything else, raw HTML included, comes out escaped.

The work is an ordered pipeline of pure passes.  Each pass takes the text
produced by the previous one and returns new text.  Fenced code blocks are
lifted out first and handed to the last pass in a ``CodeBlockTable``; no
state outlives a single ``render()`` call.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field


# Bump this whenever the render pipeline changes so cached note HTML is
# automatically discarded and re-rendered on next view.
RENDERER_VERSION = 1
_CACHE_STAMP = f'<!--rv:{RENDERER_VERSION}-->'

# Private-use code point: html.escape() leaves it alone and no Markdown
# pattern below matches it.
_PH_MARK = "\ue000"


# -----------------------------------------------------------------------------
# Code block side table
# -----------------------------------------------------------------------------

@dataclass
class CodeBlockTable:
    """Fenced code blocks lifted out of the text, keyed by placeholder index.

    ``marker`` is chosen per call so that it never occurs in the input; a
    placeholder is ``marker + index + _PH_MARK``.
    """
    marker: str
    blocks: dict[int, str] = field(default_factory=dict)

    def add(self, fragment: str) -> str:
        idx = len(self.blocks)
        self.blocks[idx] = fragment
        return self.token(idx)

    def token(self, idx: int) -> str:
        return f"{self.marker}{idx}{_PH_MARK}"

    @property
    def pattern(self) -> re.Pattern:
        return re.compile(re.escape(self.marker) + r"(\d+)" + re.escape(_PH_MARK))


_PH_RUN_RE = re.compile(_PH_MARK + "+")


def _choose_marker(text: str) -> str:
    # One mark longer than any run already in the text, so it cannot occur there.
    longest = max((len(run) for run in _PH_RUN_RE.findall(text)), default=0)
    return _PH_MARK * (longest + 1) + "CODE"


# -----------------------------------------------------------------------------
# Pass 1: line endings
# -----------------------------------------------------------------------------

def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


# -----------------------------------------------------------------------------
# Pass 2: fenced code extraction (expects raw, normalized text)
# -----------------------------------------------------------------------------

_FENCE_OPEN_RE = re.compile(r"```([a-z0-9+\-_]*)\n", re.IGNORECASE)
_FENCE_CLOSE   = "\n```"


def extract_code_blocks(text: str) -> tuple[str, CodeBlockTable]:
    """Replace every fenced block with a placeholder on a line of its own.

    Returns the rewritten text and the table that owns the escaped
    ``<pre><code>`` fragments.  The placeholder is padded with blank lines
    so later passes always see it as a standalone block.

    A block ends at the first newline followed by three backticks after its
    opening line.  Once no closer is left, no later opener can close either,
    so the scan stops there.
    """
    table = CodeBlockTable(marker=_choose_marker(text))
    out: list[str] = []
    pos = 0

    while True:
        m = _FENCE_OPEN_RE.search(text, pos)
        if not m:
            break
        end = text.find(_FENCE_CLOSE, m.end())
        if end < 0:
            break
        lang = m.group(1).lower()
        code = html.escape(text[m.end():end])
        cls  = f' class="lang-{html.escape(lang)}"' if lang else ""
        token = table.add(f"<pre><code{cls}>{code}</code></pre>")
        out.append(text[pos:m.start()])
        out.append(f"\n\n{token}\n\n")
        pos = end + len(_FENCE_CLOSE)

    out.append(text[pos:])
    return "".join(out), table


# -----------------------------------------------------------------------------
# Pass 3: global escaping
# -----------------------------------------------------------------------------

def escape_html(text: str) -> str:
    """Escape ``& < > " '``.  Placeholders pass through untouched."""
    return html.escape(text, quote=True)


# -----------------------------------------------------------------------------
# Pass 4: headings (expects escaped text)
# -----------------------------------------------------------------------------

# Longest marker run first; each pattern wants exactly N hashes.
_HEADING_RES = [
    (level, re.compile(rf"^#{{{level}}}[ \t]+(\S.*)$", re.MULTILINE))
    for level in range(6, 0, -1)
]
_HSPACE = " \t"


def _heading(level: int):
    def _build(m: re.Match) -> str:
        return f"<h{level}>{m.group(1).rstrip(_HSPACE)}</h{level}>"
    return _build


def render_headings(text: str) -> str:
    for level, pattern in _HEADING_RES:
        text = pattern.sub(_heading(level), text)
    return text


# -----------------------------------------------------------------------------
# Pass 5: unordered lists (expects escaped text)
# -----------------------------------------------------------------------------

_LIST_ITEM_RE = re.compile(r"^[ \t]*[-*][ \t]+(\S.*)$")


def render_lists(text: str) -> str:
    """Group runs of ``- item`` / ``* item`` lines into one ``<ul>`` each.

    Indentation is ignored, so there is no nesting.  Any other line closes
    the open list; a list still open at the end is closed too.
    """
    out: list[str] = []
    in_list = False

    for line in text.split("\n"):
        m = _LIST_ITEM_RE.match(line)
        if m:
            if not in_list:
                out.append("<ul>")
                in_list = True
            out.append(f"<li>{m.group(1).rstrip()}</li>")
            continue
        if in_list:
            out.append("</ul>")
            in_list = False
        out.append(line)

    if in_list:
        out.append("</ul>")
    return "\n".join(out)


# -----------------------------------------------------------------------------
# Pass 6: inline spans (expects escaped text, block tags on their own lines)
# -----------------------------------------------------------------------------

_BLOCK_LINE_RE = re.compile(r"^</?(?:h[1-6]|ul|li|pre|blockquote)\b")

_STRONG_EM_RE = re.compile(r"(?<!\*)\*\*\*(?!\*)(.+?)(?<!\*)\*\*\*(?!\*)", re.DOTALL)
_BOLD_RE      = re.compile(r"\*\*(.+?)\*\*", re.DOTALL)
_ITALIC_RE    = re.compile(r"(?<!\*)\*(?!\*)(.+?)(?<!\*)\*(?!\*)", re.DOTALL)
_CODE_RE      = re.compile(r"`([^`\n]+)`")
_LINK_RE      = re.compile(r"\[([^\[\]\n]+)\]\((https?://[^\s)<>]+)\)")

_TAG_RE = re.compile(r"<(/?)([a-z][a-z0-9]*)\b[^>]*>")


def _balanced(fragment: str) -> bool:
    """True if every tag opened in *fragment* is closed in it, in order.

    Only tags emitted by this module can appear here; user markup has
    already been escaped.
    """
    stack: list[str] = []
    for m in _TAG_RE.finditer(fragment):
        closing, name = m.groups()
        if not closing:
            stack.append(name)
        elif not stack or stack.pop() != name:
            return False
    return not stack


def _sub_balanced(pattern: re.Pattern, build, text: str) -> str:
    """``pattern.sub`` that leaves a match literal if wrapping it would
    interleave with tags from an earlier span."""
    def _replace(m: re.Match) -> str:
        if not all(_balanced(g) for g in m.groups()):
            return m.group(0)
        return build(m)
    return pattern.sub(_replace, text)


def _spans(text: str) -> str:
    text = _sub_balanced(_STRONG_EM_RE, lambda m: f"<strong><em>{m.group(1)}</em></strong>", text)
    text = _sub_balanced(_BOLD_RE,      lambda m: f"<strong>{m.group(1)}</strong>", text)
    text = _sub_balanced(_ITALIC_RE,    lambda m: f"<em>{m.group(1)}</em>", text)
    text = _sub_balanced(_CODE_RE,      lambda m: f"<code>{m.group(1)}</code>", text)
    text = _sub_balanced(
        _LINK_RE,
        lambda m: f'<a href="{m.group(2)}" target="_blank" rel="noopener noreferrer">{m.group(1)}</a>',
        text,
    )
    return text


def render_inline(text: str) -> str:
    """Apply bold, italic, inline code and http(s) links.

    Spans may cross single newlines inside a run of plain lines but never a
    blank line or a heading / list line, so the tags they emit always nest
    inside the surrounding block.
    """
    out: list[str] = []
    run: list[str] = []

    def _flush() -> None:
        if run:
            out.append(_spans("\n".join(run)))
            run.clear()

    for line in text.split("\n"):
        if not line:
            _flush()
            out.append(line)
        elif _BLOCK_LINE_RE.match(line):
            _flush()
            out.append(_spans(line))
        else:
            run.append(line)
    _flush()

    return "\n".join(out)


# -----------------------------------------------------------------------------
# Pass 7: paragraphs
# -----------------------------------------------------------------------------

_PARA_SPLIT_RE = re.compile(r"\n{2,}")


def wrap_paragraphs(text: str, table: CodeBlockTable) -> str:
    """Wrap plain text blocks in ``<p>`` and turn single newlines into ``<br>``.

    Heading, list and placeholder lines are emitted as they are; plain lines
    around them inside the same block get a paragraph of their own.  The
    check is per line, not per block: a block that merely starts with a
    block tag is not passed through whole, so "# T\\nbody" yields
    ``<h1>T</h1>`` followed by ``<p>body</p>`` rather than bare text.
    """
    text = text.strip()
    if not text:
        return ""

    placeholder = table.pattern
    out: list[str] = []

    for block in _PARA_SPLIT_RE.split(text):
        run: list[str] = []
        for line in block.split("\n"):
            if _BLOCK_LINE_RE.match(line) or placeholder.fullmatch(line):
                if run:
                    out.append(f"<p>{'<br>'.join(run)}</p>")
                    run = []
                out.append(line)
            else:
                run.append(line)
        if run:
            out.append(f"<p>{'<br>'.join(run)}</p>")

    return "\n".join(out)


# -----------------------------------------------------------------------------
# Pass 8: code block restoration
# -----------------------------------------------------------------------------

def restore_code_blocks(text: str, table: CodeBlockTable) -> str:
    """Swap each placeholder for its stored fragment (unknown index → "")."""
    return table.pattern.sub(lambda m: table.blocks.get(int(m.group(1)), ""), text)


# -----------------------------------------------------------------------------
# Public render function
# -----------------------------------------------------------------------------

def render(text: str) -> str:
    """Render Markdown *text* to a sanitized HTML fragment.

    Never raises for string input: malformed or unmatched syntax is left as
    escaped literal text.
    """
    text = normalize_newlines(text)
    text, table = extract_code_blocks(text)
    text = escape_html(text)
    text = render_headings(text)
    text = render_lists(text)
    text = render_inline(text)
    text = wrap_paragraphs(text, table)
    return restore_code_blocks(text, table)


# -----------------------------------------------------------------------------
# Render cache stamp
# -----------------------------------------------------------------------------

def stamp(fragment: str) -> str:
    """Prefix *fragment* with the current renderer version for caching."""
    return _CACHE_STAMP + fragment


def is_cache_valid(rendered: str | None) -> bool:
    """Return True only if *rendered* was produced by the current renderer version."""
    return rendered is not None and rendered.startswith(_CACHE_STAMP)


def unstamp(rendered: str) -> str:
    return rendered[len(_CACHE_STAMP):] if is_cache_valid(rendered) else rendered


# -----------------------------------------------------------------------------
