"""PEM-style armor: ``-----BEGIN <LABEL>-----`` / base64 body / ``-----END <LABEL>-----``."""
from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from ..config import load_settings
from ..errors import InvalidFormat
from ..utils.logging import get_logger

log = get_logger()

ARMOR_RE = re.compile(r"-----BEGIN ([A-Z0-9 -]+)-----\r?\n([\s\S]+?)\r?\n-----END \1-----")


def check_input_size(text: str | bytes) -> None:
    limit = load_settings().max_input_bytes
    size = len(text.encode("utf-8")) if isinstance(text, str) else len(text)
    if limit and size > limit:
        raise InvalidFormat(f"input is {size} bytes, limit is {limit}")


def wrap(s: str, width: int) -> str:
    return "\n".join(s[i : i + width] for i in range(0, len(s), width))


@dataclass(frozen=True)
class ArmorBlock:
    label: str
    body: bytes

    @classmethod
    def parse(cls, text: str) -> "ArmorBlock":
        check_input_size(text)
        m = ARMOR_RE.search(text)
        if not m:
            log.debug("armor: no BEGIN/END block found")
            raise InvalidFormat("no armored block found")
        label, b64 = m.group(1), m.group(2)
        b64 = b64.replace("\r", "").replace("\n", "")
        try:
            body = base64.b64decode(b64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidFormat("armor body is not valid base64") from e
        return cls(label=label, body=body)

    @classmethod
    def expect(cls, text: str, label: str) -> "ArmorBlock":
        block = cls.parse(text)
        if block.label != label:
            raise InvalidFormat(f"expected {label!r} block, got {block.label!r}")
        return block

    def serialize(self) -> str:
        b64 = base64.b64encode(self.body).decode("ascii")
        width = load_settings().armor_line_width
        return f"-----BEGIN {self.label}-----\n{wrap(b64, width)}\n-----END {self.label}-----"

    def __str__(self) -> str:
        return self.serialize()


__all__ = ["ArmorBlock", "check_input_size"]
