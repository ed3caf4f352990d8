from typing import List, NamedTuple

import self_documenting_struct as struct

from ..Exceptions import FormatError

## The largest width or height a cel can declare (one unsigned byte).
MAX_CEL_DIMENSION = 0xFF

## Marks the end of one row of compressed pixels.
END_OF_ROW = 0x00

## One run of identically-colored pixels, as stored in the compressed cel data.
class PixelRun(NamedTuple):
    color: int
    is_transparent: bool
    count: int

## Reads the pixel runs for one row of a cel.
##
## Each byte in the row packs a palette index into the high nibble
## and a repetition count into the low nibble:
##  Color
##  | Count
##  | |
##  c n
## A zero byte ends the row; it is consumed but not returned.
## A non-zero byte whose count nibble is zero is a real (empty) run,
## not an end-of-row marker, and is returned as a run of zero pixels.
## \param[in] source - A binary stream positioned at the start of the row.
## \param[in] transparency_color - The palette index drawn as transparent in this cel.
def read_pixel_runs(source, transparency_color: int) -> List[PixelRun]:
    runs = []
    while True:
        run = struct.unpack.uint8(source)
        if run == END_OF_ROW:
            return runs

        color = (run >> 4) & 0x0F
        count = run & 0x0F
        runs.append(PixelRun(color, color == transparency_color, count))

## A single image in a loop.
class Cel:
    ## The cel header info byte packs three fields:
    ##  bit 7    - The cel is mirrored.
    ##  bits 6-4 - The loop that holds the unmirrored copy of this cel.
    ##  bits 3-0 - The transparency color.
    MIRRORED_MASK = 0x80
    UNMIRRORED_LOOP_MASK = 0x70
    TRANSPARENCY_COLOR_MASK = 0x0F

    ## Reads a cel header from the given absolute offset.
    ## The compressed pixels are not read here; they begin right after the
    ## header and are decoded on demand with read_pixel_runs.
    ## \param[in] source - A ByteSource over the whole resource. If None, the
    ##            cel is built from keyword arguments instead (width, height,
    ##            transparency_color, is_mirrored, unmirrored_loop_num, data_offset).
    ## \param[in] header_offset - The absolute offset of the cel header.
    def __init__(self, source = None, header_offset: int = 0, **kwargs):
        self.header_offset = header_offset
        if source is not None:
            # READ THE CEL HEADER.
            source.seek(header_offset)
            self.width: int = struct.unpack.uint8(source)
            self.height: int = struct.unpack.uint8(source)
            info = struct.unpack.uint8(source)
            self.is_mirrored, self.unmirrored_loop_num, self.transparency_color = Cel.decode_info(info)
            # The compressed pixels start right after the header.
            self.data_offset: int = source.tell()
        else:
            self.width = kwargs.get('width', 0)
            self.height = kwargs.get('height', 0)
            self.transparency_color = kwargs.get('transparency_color', 0)
            self.is_mirrored = kwargs.get('is_mirrored', False)
            self.unmirrored_loop_num = kwargs.get('unmirrored_loop_num', 0)
            self.data_offset = kwargs.get('data_offset', 0)

            # VERIFY THE VALUES FIT IN THE FORMAT.
            if (self.width > MAX_CEL_DIMENSION) or (self.height > MAX_CEL_DIMENSION):
                raise FormatError(f'Cel dimensions {self.width}x{self.height} exceed the maximum of {MAX_CEL_DIMENSION}x{MAX_CEL_DIMENSION}')
            if self.transparency_color > Cel.TRANSPARENCY_COLOR_MASK:
                raise FormatError(f'Transparency color {self.transparency_color} is not a valid palette index')

    ## Splits the info byte from the cel header into its named fields.
    ## \return A tuple of (is_mirrored, unmirrored_loop_num, transparency_color).
    @staticmethod
    def decode_info(info: int) -> tuple:
        is_mirrored = bool(info & Cel.MIRRORED_MASK)
        unmirrored_loop_num = (info & Cel.UNMIRRORED_LOOP_MASK) >> 4
        transparency_color = info & Cel.TRANSPARENCY_COLOR_MASK
        return (is_mirrored, unmirrored_loop_num, transparency_color)

    ## \return True if this cel must be drawn flipped when it appears in the given loop.
    ## A mirrored cel is only flipped when drawn as part of a loop other than
    ## the one holding its original artwork.
    def is_flipped_in_loop(self, loop_index: int) -> bool:
        return self.is_mirrored and (self.unmirrored_loop_num != loop_index)

    def __repr__(self):
        return (f'<Cel {self.width}x{self.height} at 0x{self.header_offset:04x}, '
                f'data 0x{self.data_offset:04x}, transparent {self.transparency_color}, '
                f'mirrored {self.is_mirrored} (loop {self.unmirrored_loop_num})>')
