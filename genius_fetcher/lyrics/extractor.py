"""
Lyric text extraction from Genius song pages

The Genius API never returns lyric text, so the text is taken from the
public song page. The page is parsed with BeautifulSoup and walked twice:

1. Locate: find the lyric container (a div with id "lyrics-root"). Matches
   are not descended into, but the walk carries on through the rest of the
   document, so when a page holds several containers the last one in
   document order is used. The header block injected as the container's
   first child and the footer block injected as its last child are removed.
2. Linearize: every text node below the container is emitted followed by a
   newline, in document order.

The result is trimmed and a trailing "Embed" (the label of the floating
embed button rendered into the markup) is dropped. Nothing else is touched.

Both walks use an explicit stack instead of recursion, so deeply nested
markup cannot hit the interpreter's recursion limit.
"""

from typing import Callable, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    PageElement,
    ProcessingInstruction,
    Tag,
)

from ..config.settings import get_settings
from ..exceptions import LyricsContainerNotFoundError, LyricsParseError
from ..utils.logger import get_logger

# Node kinds that are neither elements nor text; never visited or descended into
SKIPPED_NODES = (Comment, Doctype, Declaration, ProcessingInstruction, CData)

# Visitor returns False to keep the walk out of the node's children
Visitor = Callable[[PageElement], bool]


def walk(root: PageElement, visit: Visitor) -> None:
    """
    Depth-first, pre-order traversal with pruning

    Args:
        root: Node to start from (visited first)
        visit: Called once per node; returning False skips that node's children
               while the rest of the tree is still visited
    """
    stack: List[PageElement] = [root]

    while stack:
        node = stack.pop()
        if isinstance(node, SKIPPED_NODES):
            continue

        if not visit(node):
            continue

        if isinstance(node, Tag):
            # Snapshot children so the visitor may edit the node it just matched
            stack.extend(reversed(list(node.children)))


def _attribute_values(node: PageElement) -> List[str]:
    """Flatten a node's attribute values; multi-valued attributes such as class are split"""
    if not isinstance(node, Tag):
        return []

    values = []
    for value in node.attrs.values():
        if isinstance(value, (list, tuple)):
            values.extend(str(v) for v in value)
        else:
            values.append(str(value))
    return values


def _has_marker(node: Optional[PageElement], marker: str) -> bool:
    return node is not None and any(marker in value for value in _attribute_values(node))


def _first_child(tag: Tag) -> Optional[PageElement]:
    return tag.contents[0] if tag.contents else None


def _last_child(tag: Tag) -> Optional[PageElement]:
    return tag.contents[-1] if tag.contents else None


class LyricsExtractor:
    """
    Extracts clean lyric text from the HTML of a Genius song page

    Attributes:
        container_id: id attribute of the lyric container div
        header_marker: attribute substring identifying the header child
        footer_marker: attribute substring identifying the footer child
        embed_suffix: trailing artifact removed from the final text
        first_match: stop at the first container instead of keeping the last
    """

    def __init__(
        self,
        container_id: Optional[str] = None,
        header_marker: Optional[str] = None,
        footer_marker: Optional[str] = None,
        embed_suffix: Optional[str] = None,
        first_match: Optional[bool] = None
    ):
        config = get_settings().lyrics
        self.logger = get_logger(__name__)

        self.container_id = container_id if container_id is not None else config.container_id
        self.header_marker = header_marker if header_marker is not None else config.header_marker
        self.footer_marker = footer_marker if footer_marker is not None else config.footer_marker
        self.embed_suffix = embed_suffix if embed_suffix is not None else config.embed_suffix
        self.first_match = first_match if first_match is not None else config.first_match

    def extract(self, markup: Union[bytes, str]) -> str:
        """
        Extract lyric text from a song page

        Args:
            markup: Raw HTML of the page

        Returns:
            Lyric text, one line per text node

        Raises:
            LyricsParseError: If the markup cannot be parsed
            LyricsContainerNotFoundError: If the page has no lyric container
        """
        try:
            soup = BeautifulSoup(markup, "html.parser")
        except Exception as e:
            raise LyricsParseError(f"Failed to parse song page: {e}") from e

        container = self.locate(soup)
        if container is None:
            raise LyricsContainerNotFoundError(
                f"No lyrics container found (div#{self.container_id})",
                details={'container_id': self.container_id}
            )

        return self.clean(self.linearize(container))

    def locate(self, root: PageElement) -> Optional[Tag]:
        """
        Find the lyric container and strip its header and footer

        Returns:
            The last matching container in document order (the first one when
            first_match is set), or None
        """
        matches: List[Tag] = []

        def find_container(node: PageElement) -> bool:
            if self.first_match and matches:
                return False

            if not self._is_container(node):
                return True

            self._strip_boilerplate(node)
            matches.append(node)
            return False

        walk(root, find_container)

        if not matches:
            return None

        if len(matches) > 1:
            self.logger.debug(
                f"Found {len(matches)} lyrics containers, using the "
                f"{'first' if self.first_match else 'last'}"
            )
        return matches[0] if self.first_match else matches[-1]

    def linearize(self, container: Tag) -> str:
        """Concatenate every text node under the container, each followed by a newline"""
        parts: List[str] = []

        def collect_text(node: PageElement) -> bool:
            if isinstance(node, NavigableString):
                parts.append(f"{node}\n")
            return True

        walk(container, collect_text)
        return "".join(parts)

    def clean(self, text: str) -> str:
        """Trim whitespace and drop the trailing embed label"""
        text = text.strip()

        if self.embed_suffix and text.endswith(self.embed_suffix):
            text = text[:-len(self.embed_suffix)]
            self.logger.debug(f"{self.embed_suffix} found at end of lyrics")

        return text

    def _is_container(self, node: PageElement) -> bool:
        return (
            isinstance(node, Tag)
            and node.name == 'div'
            and node.get('id') == self.container_id
        )

    def _strip_boilerplate(self, container: Tag) -> None:
        first = _first_child(container)
        if _has_marker(first, self.header_marker):
            first.extract()

        last = _last_child(container)
        if _has_marker(last, self.footer_marker):
            last.extract()


def extract_lyrics(markup: Union[bytes, str], **options) -> str:
    """Shortcut for LyricsExtractor(**options).extract(markup)"""
    return LyricsExtractor(**options).extract(markup)
