from typing import List

import self_documenting_struct as struct

from ..Exceptions import FormatError
from .Cel import Cel

## The most cels a loop can declare (one unsigned byte).
MAX_CELS = 0xFF

## A series of cels, usually the animation frames for one direction a
## character can face. The cels are stored in drawing order.
##
## A loop header is laid out like this:
##  Cel count
##  |  Cel header offsets (relative to the start of the loop header)
##  |  |
##  xx xx xx xx xx .. xx xx
class Loop:
    ## Reads a loop and all its cel headers.
    ## \param[in] source - A ByteSource over the whole resource. If None, an
    ##            empty loop is created and cels can be added with append.
    ## \param[in] offset - The absolute offset of the loop header.
    def __init__(self, source = None, offset: int = 0):
        self.offset = offset
        self.cels: List[Cel] = []
        if source is None:
            return

        # READ THE CEL HEADER OFFSETS.
        # These are stored relative to the loop header, so they are converted to
        # absolute offsets (wrapping the same way a 16-bit offset would).
        source.seek(offset)
        cel_count = struct.unpack.uint8(source)
        cel_header_offsets = []
        for _ in range(cel_count):
            relative_offset = struct.unpack.uint16_le(source)
            cel_header_offsets.append((offset + relative_offset) & 0xFFFF)

        # READ THE CEL HEADERS.
        for cel_header_offset in cel_header_offsets:
            self.cels.append(Cel(source, cel_header_offset))

    ## Adds a cel to the end of this loop.
    def append(self, cel: Cel):
        if len(self.cels) >= MAX_CELS:
            raise FormatError(f'A loop cannot hold more than {MAX_CELS} cels')
        self.cels.append(cel)

    @property
    def num_cels(self) -> int:
        return len(self.cels)

    def __repr__(self):
        return f'<Loop at 0x{self.offset:04x}, {self.num_cels} cel(s)>'
