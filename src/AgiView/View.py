from io import BytesIO
import os
from typing import List

import self_documenting_struct as struct
from asset_extraction_framework.File import File

from .Assets.Loop import Loop
from .Exceptions import FormatError, SourceUnavailableError
from .Resource.ByteSource import ByteSource

## The most loops a view can declare (one unsigned byte).
MAX_LOOPS = 0xFF

## An AGI VIEW resource: a set of loops, each holding a set of cels.
##
## The resource has no signature and no total length. Everything is found
## through fixed offsets and the offsets stored in the resource itself:
##  - 0x02: The number of loops (1 byte).
##  - 0x05: The absolute offset of each loop header (2 bytes each, little-endian).
##  - Each loop header lists the offsets of its cel headers, relative to the loop header.
##  - Each cel header (width, height, info) is followed directly by the cel's
##    compressed pixel rows.
## The whole structure is read when the view is opened. The pixel rows are left
## in place and read by the compositor when the view is drawn.
class View(File):
    LOOP_COUNT_OFFSET = 0x02
    LOOP_OFFSETS_OFFSET = 0x05

    ## Opens and decodes a view.
    ## \param[in] - filepath: The filepath of the view, if it exists on the filesystem.
    ## \param[in] - stream: A BytesIO-like object that holds the view data, if the view does
    ##                      not exist on the filesystem.
    def __init__(self, filepath: str = None, stream = None):
        # OPEN THE FILE FOR READING.
        try:
            if (filepath is not None) and os.path.isfile(filepath) and (os.path.getsize(filepath) == 0):
                # An empty file cannot be memory-mapped, but it is still a (truncated) view.
                super().__init__(stream = BytesIO())
                self.filepath = filepath
            else:
                super().__init__(filepath, stream)
        except OSError as error:
            raise SourceUnavailableError(f'Could not open view file {filepath}: {error.strerror or error}') from error
        self.source = ByteSource(self.stream)
        self.loops: List[Loop] = []

        # READ THE LOOPS.
        # The mapped file must not outlive a failed decode.
        try:
            self._read_loops()
        except Exception:
            self.close()
            raise

    def _read_loops(self):
        # READ THE LOOP OFFSETS.
        self.source.seek(View.LOOP_COUNT_OFFSET)
        loop_count = struct.unpack.uint8(self.source)
        self.source.seek(View.LOOP_OFFSETS_OFFSET)
        loop_offsets = [struct.unpack.uint16_le(self.source) for _ in range(loop_count)]

        # READ EACH LOOP.
        for loop_offset in loop_offsets:
            self.append(Loop(self.source, loop_offset))

    ## Adds a loop to the end of this view.
    def append(self, loop: Loop):
        if len(self.loops) >= MAX_LOOPS:
            raise FormatError(f'A view cannot hold more than {MAX_LOOPS} loops')
        self.loops.append(loop)

    @property
    def num_loops(self) -> int:
        return len(self.loops)

    ## Releases the memory-mapped view data. The view structure stays
    ## readable, but the cels can no longer be drawn.
    def close(self):
        if not self.stream.closed:
            self.stream.close()

    ## Prints the decoded structure of this view, for debugging.
    def print_structure(self):
        print(f'INFO: {self.filepath}: {self.num_loops} loop(s)')
        for loop_index, loop in enumerate(self.loops):
            print(f'INFO:  Loop {loop_index}: {loop}')
            for cel in loop.cels:
                print(f'INFO:   {cel}')
