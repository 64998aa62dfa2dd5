"""Drunken-bishop occupancy grid for fingerprint visualisation.

This module only produces the grid; turning cell counts into characters and
borders belongs to whatever renders it. Walk rules follow
http://www.dirk-loss.de/sshvis/drunken_bishop.pdf: start in the centre,
consume each digest byte two bits at a time (least significant pair first),
move diagonally, stay inside the walls, count visits up to 14, then mark the
start cell 15 and the end cell 16.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from ..crypto.digest import HashAlgorithm, HashIdentity
from ..crypto.provider import CryptoProvider

WIDTH = 17
HEIGHT = 9
MAX_VISITS = 14
START_MARK = 15
END_MARK = 16


def bit_pairs(data: bytes) -> Iterator[int]:
    for byte in data:
        for shift in (0, 2, 4, 6):
            yield (byte >> shift) & 0b11


def walk(digest: bytes) -> Tuple[int, ...]:
    field = [0] * (WIDTH * HEIGHT)
    x, y = WIDTH // 2, HEIGHT // 2
    start = x + y * WIDTH
    for pair in bit_pairs(digest):
        x += 1 if pair & 0b01 else -1
        y += 1 if pair & 0b10 else -1
        x = max(0, min(x, WIDTH - 1))
        y = max(0, min(y, HEIGHT - 1))
        pos = x + y * WIDTH
        if field[pos] < MAX_VISITS:
            field[pos] += 1
    field[start] = START_MARK
    field[x + y * WIDTH] = END_MARK
    return tuple(field)


@dataclass(frozen=True)
class RandomArtGrid:
    algorithm_name: str  # e.g. "ED25519", empty for a bare digest
    bits: int
    hash_name: str       # e.g. "SHA256"
    field: Tuple[int, ...]

    @classmethod
    def from_hash(cls, identity: HashIdentity, algorithm_name: str = "", bits: int = 0) -> "RandomArtGrid":
        return cls(algorithm_name=algorithm_name, bits=bits, hash_name=str(identity.algorithm),
                   field=walk(identity.digest))

    @property
    def title(self) -> str:
        """Top border text, as ssh-keygen prints it."""
        if not self.algorithm_name:
            return ""
        return f"{self.algorithm_name} {self.bits}"

    def rows(self) -> List[Tuple[int, ...]]:
        return [self.field[r * WIDTH : (r + 1) * WIDTH] for r in range(HEIGHT)]


def randomart_grid(public, algorithm: HashAlgorithm = HashAlgorithm.SHA256,
                   provider: Optional[CryptoProvider] = None) -> RandomArtGrid:
    """Renderer input for a public key material: algorithm, bits, hash name and grid."""
    identity = public.fingerprint(algorithm, provider)
    return RandomArtGrid.from_hash(identity, public.algorithm.hash_name, public.key_bits())


__all__ = ["RandomArtGrid", "randomart_grid", "walk", "bit_pairs", "WIDTH", "HEIGHT"]
