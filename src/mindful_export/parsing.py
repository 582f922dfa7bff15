"""Streaming scan of an Apple Health export for mindful session records."""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Mapping, Optional, Union

from .config import ExtractorSettings
from .errors import InputReadError, ParseError
from .models import RawMindfulRecord

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes, bytearray, BinaryIO]

# Attribute name -> RawMindfulRecord field ("activity" is only used for matching).
ATTRIBUTE_FIELDS: dict[str, str] = {
    "type": "activity",
    "sourceName": "app",
    "startDate": "start",
    "endDate": "end",
}


class EventKind(str, Enum):
    START = "start"
    EMPTY = "empty"
    END = "end"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class DocumentEvent:
    """A structural event of the source document.

    ``attributes`` is only guaranteed to be populated until the producing
    iterator is advanced; the decoder recycles finished elements.
    """

    kind: EventKind
    name: str = ""
    attributes: Mapping[str, str] = field(default_factory=dict)


def iter_document_events(source: Source) -> Iterator[DocumentEvent]:
    """Yield the structural events of an XML document, ending with ``EOF``.

    An element with neither children nor text is reported as a single
    ``EMPTY`` event instead of a ``START``/``END`` pair.
    """
    stream = io.BytesIO(bytes(source)) if isinstance(source, (bytes, bytearray)) else source
    pending: Optional[ET.Element] = None
    root: Optional[ET.Element] = None
    depth = 0
    try:
        for event, elem in ET.iterparse(stream, events=("start", "end")):
            if event == "start":
                if root is None:
                    root = elem
                depth += 1
                if pending is not None:
                    yield DocumentEvent(EventKind.START, pending.tag, pending.attrib)
                pending = elem
                continue

            depth -= 1
            if elem is pending:
                pending = None
                if elem.text is None:
                    yield DocumentEvent(EventKind.EMPTY, elem.tag, elem.attrib)
                else:
                    yield DocumentEvent(EventKind.START, elem.tag, elem.attrib)
                    yield DocumentEvent(EventKind.END, elem.tag)
            else:
                yield DocumentEvent(EventKind.END, elem.tag)
            elem.clear()
            if depth == 1 and root is not None:
                # Finished top-level records would otherwise pile up under the root.
                del root[:]
    except ET.ParseError as exc:
        line, column = exc.position
        raise ParseError(
            f"Malformed XML at line {line}, column {column}: {exc}", line, column
        ) from exc
    except OSError as exc:
        name = getattr(source, "name", source)
        raise InputReadError(f"Could not read {name}: {exc}") from exc
    yield DocumentEvent(EventKind.EOF)


def decode_attributes(attributes: Mapping[str, str]) -> dict[str, str]:
    """Pick the known attributes out of an element; missing ones become ``""``."""
    decoded = dict.fromkeys(ATTRIBUTE_FIELDS.values(), "")
    for key, value in attributes.items():
        field_name = ATTRIBUTE_FIELDS.get(key)
        if field_name is not None:
            decoded[field_name] = value
    return decoded


def filter_mindful_sessions(
    events: Iterable[DocumentEvent], settings: Optional[ExtractorSettings] = None
) -> Iterator[RawMindfulRecord]:
    """Yield a ``RawMindfulRecord`` for every self-closing mindful session record."""
    settings = settings or ExtractorSettings()
    matched = 0
    skipped = 0
    for event in events:
        if event.kind is EventKind.EOF:
            break
        if event.kind is not EventKind.EMPTY or event.name != settings.record_tag:
            continue

        decoded = decode_attributes(event.attributes)
        if decoded["activity"] != settings.session_type:
            skipped += 1
            continue

        matched += 1
        yield RawMindfulRecord(
            app=decoded["app"], start=decoded["start"], end=decoded["end"]
        )
    logger.debug("Scan finished: %d mindful sessions, %d other records.", matched, skipped)


def read_mindful_sessions(
    source: Source, settings: Optional[ExtractorSettings] = None
) -> Iterator[RawMindfulRecord]:
    return filter_mindful_sessions(iter_document_events(source), settings)
