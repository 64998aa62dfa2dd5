"""SSH wire format cursors.

All integers are 32-bit big-endian; a "chunk" is a uint32 length followed by
that many bytes. Private key blobs are padded to an 8-byte boundary with the
filler ``01 02 03 04 05 06 07``.

ReadBuffer does not bound a declared chunk length except against the bytes
actually remaining, so callers handling network input must cap the size of
what they hand in (see ``config.MAX_INPUT_BYTES``).
"""
from __future__ import annotations

import struct
from typing import Iterable, List

from ..errors import InvalidEncoding, InvalidFormat, OutOfData

PADDING = bytes([1, 2, 3, 4, 5, 6, 7])
BLOCK_SIZE = 8

_U32 = struct.Struct(">I")


def padding_needed(length: int) -> int:
    return -length % BLOCK_SIZE


class ReadBuffer:
    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.position = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.position

    @property
    def at_end(self) -> bool:
        return self.position == len(self.data)

    def expect_end(self, what: str = "buffer") -> None:
        if not self.at_end:
            raise InvalidFormat(f"{self.remaining} trailing bytes after {what}")

    def read(self, n: int) -> bytes:
        if n < 0 or n > self.remaining:
            raise OutOfData(f"need {n} bytes, {self.remaining} remain")
        out = self.data[self.position : self.position + n]
        self.position += n
        return out

    def read_uint32(self) -> int:
        return _U32.unpack(self.read(4))[0]

    def read_chunk(self) -> bytes:
        return self.read(self.read_uint32())

    def read_chunks(self) -> List[bytes]:
        chunks = []
        while not self.at_end:
            chunks.append(self.read_chunk())
        return chunks

    def read_cstring(self) -> str:
        end = self.data.find(b"\x00", self.position)
        if end < 0:
            raise OutOfData("unterminated string")
        raw = self.read(end - self.position)
        self.position += 1  # NUL
        return _utf8(raw)

    def read_string(self) -> str:
        return _utf8(self.read_chunk())

    def expect_padding(self) -> None:
        n = padding_needed(self.position)
        if self.read(n) != PADDING[:n]:
            raise InvalidFormat("bad padding")


class WriteBuffer:
    def __init__(self) -> None:
        self._parts = bytearray()

    def __len__(self) -> int:
        return len(self._parts)

    def getvalue(self) -> bytes:
        return bytes(self._parts)

    def write(self, data: bytes) -> None:
        self._parts += data

    def write_uint32(self, n: int) -> None:
        if not 0 <= n <= 0xFFFFFFFF:
            raise ValueError(f"uint32 out of range: {n}")
        self._parts += _U32.pack(n)

    def write_chunk(self, chunk: bytes) -> None:
        self.write_uint32(len(chunk))
        self.write(chunk)

    def write_empty_chunk(self) -> None:
        self.write_uint32(0)

    def write_chunks(self, chunks: Iterable[bytes]) -> None:
        for chunk in chunks:
            self.write_chunk(chunk)

    def write_cstring(self, s: str) -> None:
        self.write(s.encode("utf-8") + b"\x00")

    def write_string(self, s: str) -> None:
        self.write_chunk(s.encode("utf-8"))

    def write_padding(self) -> None:
        self.write(PADDING[: padding_needed(len(self._parts))])


def read_chunks(data: bytes) -> List[bytes]:
    return ReadBuffer(data).read_chunks()


def write_chunks(chunks: Iterable[bytes]) -> bytes:
    buf = WriteBuffer()
    buf.write_chunks(chunks)
    return buf.getvalue()


def _utf8(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncoding("string is not valid UTF-8") from e


__all__ = ["ReadBuffer", "WriteBuffer", "read_chunks", "write_chunks", "PADDING", "padding_needed"]
