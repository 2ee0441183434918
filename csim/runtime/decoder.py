from __future__ import annotations
from typing import NamedTuple

from ..config import Geometry


class DecodedAddress(NamedTuple):
    tag: int
    set_index: int
    block_offset: int


class AddressDecoder:
    """Splits addresses into tag, set index and block offset for a fixed geometry."""

    def __init__(self, geometry: Geometry):
        self.geometry = geometry

        # Calculate bit shifts and masks for address decomposition
        self.offset_bits = geometry.block_offset_bits
        self.index_bits = geometry.set_index_bits
        self.offset_mask = (1 << self.offset_bits) - 1
        self.index_mask = (1 << self.index_bits) - 1
        self.tag_shift = self.offset_bits + self.index_bits

    def decode(self, address: int) -> DecodedAddress:
        """Decomposes an address into tag, index, and offset."""
        offset = address & self.offset_mask
        index = (address >> self.offset_bits) & self.index_mask
        tag = address >> self.tag_shift
        return DecodedAddress(tag, index, offset)

    def reconstruct(self, tag: int, set_index: int) -> int:
        """Reconstructs the block start address from tag and index."""
        return (tag << self.tag_shift) | (set_index << self.offset_bits)


def decode(address: int, geometry: Geometry) -> DecodedAddress:
    return AddressDecoder(geometry).decode(address)
