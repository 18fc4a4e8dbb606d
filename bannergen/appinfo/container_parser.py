from __future__ import annotations
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from struct import Struct
from types import MappingProxyType
from typing import BinaryIO, Dict, Iterator, List, Mapping as MappingT, Tuple

from bannergen.appinfo.keyvalues import DocumentError, Node, parse_document

logger = logging.getLogger(__name__)

APPINFO_MAGIC = 0x07564428
DEFAULT_MAX_RECORD_BYTES = 64 * 1024 * 1024

_CONTAINER_HEADER = Struct("<II")            # magic, universe
_APP_ID = Struct("<I")
_RECORD_HEADER = Struct("<IIIQ20sI20s")      # totals 64 bytes

# size counts every header byte after itself, then the payload
RECORD_HEADER_SIZE = _RECORD_HEADER.size
_SIZE_OVERHEAD = RECORD_HEADER_SIZE - 4


class FormatError(ValueError):
    """The container stream cannot be framed; nothing after it is trustworthy."""

    def __init__(self, reason: str, detail: str = ""):
        self.reason = reason
        super().__init__(f"{reason}: {detail}" if detail else reason)


@dataclass(frozen=True)
class ContainerHeader:
    magic: int
    universe: int


@dataclass(frozen=True)
class RecordHeader:
    size: int
    state: int
    last_updated: int
    access_token: int
    hash: bytes
    change_number: int
    data_hash: bytes

    @classmethod
    def unpack(cls, raw: bytes) -> "RecordHeader":
        return cls(*_RECORD_HEADER.unpack(raw))

    @property
    def payload_length(self) -> int:
        return self.size - _SIZE_OVERHEAD


@dataclass(frozen=True)
class ApplicationEntry:
    id: int
    header: RecordHeader
    document: Node


@dataclass(frozen=True, eq=False)
class Container(Mapping):
    """Read-only app id -> ApplicationEntry, built once by ``parse``."""
    header: ContainerHeader
    entries: MappingT[int, ApplicationEntry] = field(default_factory=dict)
    failed_ids: Tuple[int, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))
        object.__setattr__(self, "failed_ids", tuple(self.failed_ids))

    def __getitem__(self, app_id: int) -> ApplicationEntry:
        return self.entries[app_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def _read_exact(stream: BinaryIO, n: int, what: str) -> bytes:
    data = stream.read(n)
    if data is None or len(data) != n:
        got = 0 if not data else len(data)
        raise FormatError("truncated stream", f"wanted {n} bytes for {what}, got {got}")
    return data


def parse(stream: BinaryIO, max_record_bytes: int = DEFAULT_MAX_RECORD_BYTES) -> Container:
    """
    Read an appinfo container from a forward-only binary stream.

    Records whose KeyValues payload fails to deserialize are left out and
    their ids collected in ``failed_ids``; framing problems raise FormatError.
    """
    magic, universe = _CONTAINER_HEADER.unpack(
        _read_exact(stream, _CONTAINER_HEADER.size, "container header"))
    if magic != APPINFO_MAGIC:
        raise FormatError("bad magic", f"0x{magic:08X} (expected 0x{APPINFO_MAGIC:08X})")

    entries: Dict[int, ApplicationEntry] = {}
    failed_ids: List[int] = []

    (app_id,) = _APP_ID.unpack(_read_exact(stream, _APP_ID.size, "app id"))
    while app_id != 0:
        header = RecordHeader.unpack(
            _read_exact(stream, RECORD_HEADER_SIZE, f"record header of app {app_id}"))

        length = header.payload_length
        if length < 0 or length > max_record_bytes:
            raise FormatError("invalid payload length", f"app {app_id} declares {length} bytes")

        payload = _read_exact(stream, length, f"payload of app {app_id}")
        try:
            document = parse_document(payload)
        except DocumentError as e:
            logger.warning("Failed to parse app info for %d: %s", app_id, e)
            failed_ids.append(app_id)
        else:
            entries[app_id] = ApplicationEntry(app_id, header, document)

        (app_id,) = _APP_ID.unpack(_read_exact(stream, _APP_ID.size, "next app id"))

    logger.debug("Parsed %d app entries (%d failed)", len(entries), len(failed_ids))
    return Container(ContainerHeader(magic, universe), entries, failed_ids)


def parse_file(path: Path, max_record_bytes: int = DEFAULT_MAX_RECORD_BYTES) -> Container:
    with open(path, "rb") as f:
        return parse(f, max_record_bytes=max_record_bytes)
