"""Reference extraction and rewriting for markdown notes.

Pure string functions, independent of any vault. Recognized forms:

    ![[file.png]]          wiki embed
    [[file.png|caption]]   wiki link with alias
    [[note#Heading]]       wiki link to a heading
    ![alt](file.png)       markdown image
    [text](dir/file.png)   markdown link

Fenced code blocks and inline code spans are left alone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Tuple
from urllib.parse import quote, unquote


WIKI_LINK_RE = re.compile(r"(?P<embed>!?)\[\[(?P<inner>[^\[\]\n]+?)\]\]")
MD_LINK_RE = re.compile(
    r"(?P<embed>!?)\[(?P<label>[^\]\n]*)\]\(\s*"
    r"(?P<target><[^>\n]+>|[^)\s]+)"
    r"(?P<title>\s+\"[^\"\n]*\")?\s*\)"
)
URL_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
FENCE_RE = re.compile(r"^[ \t]*([`~]{3,})")
INLINE_CODE_RE = re.compile(r"(?<!`)(`+)(?!`).+?(?<!`)\1(?!`)")


@dataclass(frozen=True)
class Link:
    """A reference found in a note.

    ``target`` has the alias removed and markdown escaping undone, but keeps
    any ``#heading`` or ``^block`` suffix.
    """

    target: str
    embed: bool
    wiki: bool
    start: int


def _inline(text: str) -> Iterator[Tuple[str, bool]]:
    pos = 0
    for m in INLINE_CODE_RE.finditer(text):
        if m.start() > pos:
            yield text[pos:m.start()], False
        yield m.group(0), True
        pos = m.end()
    if pos < len(text):
        yield text[pos:], False


def _segments(text: str) -> Iterator[Tuple[str, bool]]:
    """Split text into (chunk, is_code) pieces along fenced blocks and code spans."""

    buf: List[str] = []
    fence = None
    for line in text.splitlines(keepends=True):
        m = FENCE_RE.match(line)
        if fence is None and m:
            if buf:
                yield from _inline("".join(buf))
            buf = [line]
            fence = m.group(1)[0] * 3
        elif fence is not None and m and m.group(1).startswith(fence):
            buf.append(line)
            yield "".join(buf), True
            buf = []
            fence = None
        else:
            buf.append(line)
    if fence is not None:
        yield "".join(buf), True
    elif buf:
        yield from _inline("".join(buf))


def _wiki_parts(inner: str) -> Tuple[str, str]:
    """Split ``target|alias`` into (target, ``|alias`` or "")."""

    target, sep, alias = inner.partition("|")
    # Aliases inside tables are written as \|
    if sep and target.endswith("\\"):
        target = target[:-1]
        sep = "\\|"
    return target.strip(), f"{sep}{alias}" if sep else ""


def _md_target(raw: str) -> str:
    if raw.startswith("<") and raw.endswith(">"):
        raw = raw[1:-1]
    return unquote(raw).strip()


def split_link_target(target: str) -> str:
    """Return the file part of a link target, dropping alias, heading and block."""

    target = target.split("|", 1)[0]
    target = target.split("#", 1)[0]
    target = target.split("^", 1)[0]
    return target.strip()


def _suffix(target: str) -> str:
    file_part = split_link_target(target)
    return target.strip()[len(file_part):]


def extract_links(text: str) -> List[Link]:
    """Return every wiki and markdown reference in document order."""

    links: List[Link] = []
    offset = 0
    for chunk, is_code in _segments(text):
        if not is_code:
            for m in WIKI_LINK_RE.finditer(chunk):
                target, _ = _wiki_parts(m.group("inner"))
                if target:
                    links.append(
                        Link(target, bool(m.group("embed")), True, offset + m.start())
                    )
            for m in MD_LINK_RE.finditer(chunk):
                target = _md_target(m.group("target"))
                if not target or target.startswith("#") or URL_SCHEME_RE.match(target):
                    continue
                links.append(
                    Link(target, bool(m.group("embed")), False, offset + m.start())
                )
        offset += len(chunk)
    links.sort(key=lambda link: link.start)
    return links


def extract_link_targets(text: str) -> List[str]:
    """Return raw link targets (alias removed) of a note body in document order."""

    return [link.target for link in extract_links(text)]


def retarget_links(text: str, old_target: str, new_target: str) -> str:
    """Point every reference to ``old_target`` at ``new_target`` instead.

    Matching compares file parts only, so ``[[a.png#x|cap]]`` matches
    ``a.png``; alias, heading, embed marker and markdown label are kept.
    """

    old_file = split_link_target(old_target)

    def wiki_sub(m: re.Match) -> str:
        target, alias = _wiki_parts(m.group("inner"))
        if split_link_target(target) != old_file:
            return m.group(0)
        return f"{m.group('embed')}[[{new_target}{_suffix(target)}{alias}]]"

    def md_sub(m: re.Match) -> str:
        raw = m.group("target")
        target = _md_target(raw)
        if split_link_target(target) != old_file:
            return m.group(0)
        new_raw = f"{new_target}{_suffix(target)}"
        if raw.startswith("<"):
            new_raw = f"<{new_raw}>"
        else:
            new_raw = quote(new_raw, safe="/#^()!$&'*+,;=:@-._~")
        title = m.group("title") or ""
        return f"{m.group('embed')}[{m.group('label')}]({new_raw}{title})"

    out: List[str] = []
    for chunk, is_code in _segments(text):
        if not is_code:
            chunk = WIKI_LINK_RE.sub(wiki_sub, chunk)
            chunk = MD_LINK_RE.sub(md_sub, chunk)
        out.append(chunk)
    return "".join(out)
