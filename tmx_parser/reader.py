"""
Pull-style XML event cursor and tag dispatcher.

=============================================================================
WHY A PULL CURSOR?
=============================================================================

TMX files are decoded top-down: each constructor reads the attributes of
its own tag, then walks its children until its end tag. A pull cursor fits
that shape exactly - the call stack mirrors the element nesting.

    <objectgroup>              ObjectGroup.from_xml
        <object x= y=>           Object.from_xml
            <polygon points=/>     polygon handler
        </object>
    </objectgroup>

EventReader wraps xml.etree.ElementTree.XMLPullParser and hands out one
event at a time:

    START         tag name + attributes as (name, value) pairs
    END           tag name + element text
    END_DOCUMENT  nothing left to read

The reader keeps track of its nesting depth. parse_tag() uses it to skip
whatever part of a child element its handler left unread, so unknown or
partially handled tags can never desynchronise the parent.

=============================================================================
"""

import io
import logging
import xml.etree.ElementTree as ET
from collections import deque
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Dict, Optional, TextIO, Union

from .attributes import Attributes
from .errors import PrematureEnd, XmlDecodingError

logger = logging.getLogger(__name__)

START = 'start'
END = 'end'
END_DOCUMENT = 'end_document'

Handler = Callable[[Attributes], None]


def _local_name(name: str) -> str:
    # "{http://example.com/ns}tileset" -> "tileset"
    if name.startswith('{'):
        return name.rpartition('}')[2]
    return name


@dataclass
class XmlEvent:
    kind: str                                        # START, END or END_DOCUMENT
    name: str = ""                                   # Local tag name
    attributes: Attributes = field(default_factory=list)
    text: str = ""                                   # Element text (END only)


class EventReader:
    """
    Event cursor over one XML document.

    Owned by exactly one call stack; it never rewinds. A second document
    (an external tileset) gets its own EventReader.
    """

    CHUNK_SIZE = 64 * 1024

    def __init__(self, source: Union[BinaryIO, TextIO, bytes, str]):
        if isinstance(source, str):
            source = io.StringIO(source)
        elif isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        self._source = source
        self._parser = ET.XMLPullParser(events=(START, END))
        self._pending = deque()
        self._open = 0          # Elements opened by expat but not yet closed
        self._elements = []     # Elements opened by the consumer, outermost first
        self._error = None      # ParseError delivered after the pending events
        self._finished = False
        self.depth = 0          # Nesting depth as seen by the consumer

    # -------------------------------------------------------------------------
    # EVENT STREAM
    # -------------------------------------------------------------------------

    def next(self) -> XmlEvent:
        """Return the next START/END event, or END_DOCUMENT when exhausted."""
        while not self._pending:
            if self._error is not None:
                raise XmlDecodingError(self._error) from self._error
            if self._finished:
                return XmlEvent(END_DOCUMENT)
            self._fill()

        kind, elem = self._pending.popleft()
        name = _local_name(elem.tag)

        if kind == START:
            self.depth += 1
            self._elements.append(elem)
            attributes = [(_local_name(k), v) for k, v in elem.attrib.items()]
            return XmlEvent(START, name, attributes)

        self.depth -= 1
        self._elements.pop()
        text = elem.text or ""
        # Children were already handed out; detach the element from its
        # parent too, so memory stays bounded by depth
        elem.clear()
        if self._elements:
            self._elements[-1].remove(elem)
        return XmlEvent(END, name, text=text)

    def _fill(self):
        chunk = self._source.read(self.CHUNK_SIZE)
        try:
            if chunk:
                self._parser.feed(chunk)
            else:
                self._finished = True
                self._parser.close()
        except ET.ParseError as e:
            if self._finished and self._open > 0:
                # Stream ran out inside an open element: END_DOCUMENT follows
                # the pending events and the caller reports a premature end.
                logger.debug("document truncated with %d open element(s): %s",
                             self._open, e)
            else:
                self._error = e

        # feed() queues syntax errors; read_events() raises them after the
        # events that precede the error
        try:
            for kind, elem in self._parser.read_events():
                self._open += 1 if kind == START else -1
                self._pending.append((kind, elem))
        except ET.ParseError as e:
            self._error = e

    # -------------------------------------------------------------------------
    # NAVIGATION HELPERS
    # -------------------------------------------------------------------------

    def seek_start(self, name: str, error: str) -> XmlEvent:
        """
        Advance to the first START event named `name`.

        Anything before it (declarations, other elements) is passed over.
        Raises PrematureEnd(error) if the document ends first.
        """
        while True:
            event = self.next()
            if event.kind == START and event.name == name:
                return event
            if event.kind == END_DOCUMENT:
                raise PrematureEnd(error)

    def finish_element(self, depth: int, name: str):
        """Consume events until the element opened at `depth` is closed."""
        while self.depth >= depth:
            if self.next().kind == END_DOCUMENT:
                raise PrematureEnd(f"document ended before <{name}> was closed")

    def read_text(self, name: str) -> str:
        """Consume the current element and return its text content."""
        depth = self.depth
        while True:
            event = self.next()
            if event.kind == END and self.depth == depth - 1:
                return event.text
            if event.kind == END_DOCUMENT:
                raise PrematureEnd(f"document ended before <{name}> was closed")


def parse_tag(reader: EventReader, tag: str,
              handlers: Optional[Dict[str, Handler]] = None):
    """
    Walk the children of `tag` until its end tag.

    Parameters:
    -----------
    reader : EventReader
        Positioned just after <tag ...>
    tag : str
        Name of the element being walked (used in error messages)
    handlers : dict of name -> callable(attributes)
        Called for each child START whose name matches. Errors propagate.

    Children without a handler are skipped together with their subtree.
    A handler may consume its child up to the end tag or leave it; the
    remainder is skipped either way. On return the reader is positioned
    just past </tag>.
    """
    handlers = handlers or {}

    while True:
        event = reader.next()

        if event.kind == START:
            depth = reader.depth
            handler = handlers.get(event.name)
            if handler is None:
                logger.debug("skipping unknown <%s> inside <%s>", event.name, tag)
            else:
                handler(event.attributes)
            reader.finish_element(depth, event.name)

        elif event.kind == END:
            # Every child has been finished, so this END closes `tag`
            return

        else:
            raise PrematureEnd(f"document ended before <{tag}> was closed")
