"""
Tokenizer for urpc documents.

Only three block kinds are recognized, each a matched open/close tag pair
(shown with the default ``u`` prefix)::

    <u-url>https://node.example</u-url>
    <u-directory>
      <var>stETH:0xae7ab96520DE3A18E5e111B5EaAb095312D7fE84</var>
      <var>balanceOf(address):0x70a08231</var>
    </u-directory>
    <u-c key="supply">$stETH.balanceOf($stETH).18</u-c>

Everything else in the document is opaque text. Each block is reported with
its exact source span so callers can rewrite it without touching the bytes
around it.
"""
import html
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from .config import DEFAULT_TAG_PREFIX
from .directory import parse_declaration
from .exceptions import MalformedDocumentError

_ATTR_RE = re.compile(
    r"""([A-Za-z_:][-A-Za-z0-9_:.]*)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?"""
)
_VAR_RE = re.compile(r"<var(\s[^<>]*)?>(.*?)</var\s*>", re.IGNORECASE | re.DOTALL)
_VAR_OPEN_RE = re.compile(r"<var(\s[^<>]*)?>", re.IGNORECASE)


class BlockKind(str, Enum):
    """Kinds of recognized blocks."""
    ENDPOINT = "url"
    DIRECTORY = "directory"
    CALL = "c"


@dataclass
class Block:
    """
    A recognized block in a document.

    Attributes:
        kind: Which of the three block kinds this is
        attributes: Attributes of the open tag, values unescaped
        inner_text: Raw text between the open and close tags
        span: (start, end) offsets of the whole block, tags included
    """
    kind: BlockKind
    attributes: Dict[str, str] = field(default_factory=dict)
    inner_text: str = ""
    span: Tuple[int, int] = (0, 0)


def parse_attributes(text: str) -> Dict[str, str]:
    """Parse the attribute part of an open tag."""
    attributes = {}
    for match in _ATTR_RE.finditer(text or ""):
        name, dq, sq, bare = match.groups()
        value = next((v for v in (dq, sq, bare) if v is not None), "")
        attributes[name.lower()] = html.unescape(value)
    return attributes


def tokenize(text: str, tag_prefix: str = DEFAULT_TAG_PREFIX) -> List[Block]:
    """
    Find every recognized block in a document, in document order.

    Args:
        text: Full document text
        tag_prefix: Prefix of the recognized tags

    Returns:
        Blocks ordered by position

    Raises:
        MalformedDocumentError: If a recognized tag is unterminated, nested in
            another recognized block, or closed without being opened
    """
    tags = {f"{tag_prefix}-{kind.value}".lower(): kind for kind in BlockKind}
    alternatives = "|".join(re.escape(tag) for tag in sorted(tags, key=len, reverse=True))
    open_re = re.compile(rf"<({alternatives})(\s[^<>]*)?>", re.IGNORECASE)
    close_re = re.compile(rf"</({alternatives})\s*>", re.IGNORECASE)

    blocks = []
    pos = 0
    while True:
        opening = open_re.search(text, pos)
        if opening is None:
            break
        tag = opening.group(1).lower()

        stray = close_re.search(text, pos, opening.start())
        if stray is not None:
            raise MalformedDocumentError(f"Unexpected </{stray.group(1)}> at offset {stray.start()}")

        closing = close_re.search(text, opening.end())
        if closing is None:
            raise MalformedDocumentError(f"Unterminated <{tag}> block at offset {opening.start()}")

        inner = text[opening.end():closing.start()]
        nested = open_re.search(inner)
        if nested is not None:
            raise MalformedDocumentError(
                f"<{nested.group(1)}> nested inside <{tag}> at offset {opening.end() + nested.start()}"
            )
        if closing.group(1).lower() != tag:
            raise MalformedDocumentError(f"Unterminated <{tag}> block at offset {opening.start()}")

        blocks.append(Block(
            kind=tags[tag],
            attributes=parse_attributes(opening.group(2)),
            inner_text=inner,
            span=(opening.start(), closing.end()),
        ))
        pos = closing.end()

    stray = close_re.search(text, pos)
    if stray is not None:
        raise MalformedDocumentError(f"Unexpected </{stray.group(1)}> at offset {stray.start()}")
    return blocks


def directory_entries(block: Block) -> List[Tuple[str, str]]:
    """
    Read the ``<var>`` entries of a directory block, in order.

    Entries are ``<var>name:value</var>`` or ``<var name="name">value</var>``.

    Raises:
        MalformedDocumentError: If a ``<var>`` is unterminated or has no name
    """
    entries = []
    for match in _VAR_RE.finditer(block.inner_text):
        attributes = parse_attributes(match.group(1))
        content = html.unescape(match.group(2)).strip()
        if "name" in attributes:
            name = attributes["name"].strip()
            if not name:
                raise MalformedDocumentError(f"Directory entry with empty name: {match.group(0)!r}")
            entries.append((name, content))
        else:
            entries.append(parse_declaration(content))

    opened = len(_VAR_OPEN_RE.findall(block.inner_text))
    if opened != len(entries):
        raise MalformedDocumentError("Unterminated <var> in directory block")
    return entries
