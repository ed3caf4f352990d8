import os
from typing import Optional, Tuple

from asset_extraction_framework.Asset.Image import RectangularBitmap

from .Assets.Cel import Cel, read_pixel_runs
from .Assets.Loop import Loop
from .Assets.Palette import PALETTE, AgiPalette
from .Exceptions import EncodeFailureError
from .View import View

## AGI pixels are twice as wide as they are tall, so every source pixel
## is drawn as this many pixels side by side.
PIXEL_WIDTH_MULTIPLIER = 2

## An RGBA raster holding every cel of a view.
class ViewBitmap(RectangularBitmap):
    BYTES_PER_PIXEL = 4

    ## Creates a fully transparent bitmap.
    def __init__(self, width: int, height: int, name: Optional[str] = None):
        super().__init__()
        self.name = name
        self._width = width
        self._height = height
        self._bits_per_pixel = ViewBitmap.BYTES_PER_PIXEL * 8
        # Every byte (including alpha) starts at zero.
        self._pixels = bytearray(width * height * ViewBitmap.BYTES_PER_PIXEL)

    ## Sets one pixel. Pixels outside the bitmap are silently dropped,
    ## so a cel whose rows overrun the canvas is clipped rather than wrapped.
    def write_pixel(self, x: int, y: int, rgba: tuple):
        if (0 <= x < self._width) and (0 <= y < self._height):
            start = (y * self._width + x) * ViewBitmap.BYTES_PER_PIXEL
            self._pixels[start:start + ViewBitmap.BYTES_PER_PIXEL] = bytes(rgba)

    ## Builds the image Pillow will encode from the current pixels.
    ## The raw export format writes these same pixels.
    def finalize(self):
        self._pixels = bytes(self._pixels)
        self._raw = self._pixels
        self.create_exportable_image_from_pixels(image_mode = 'RGBA')

    ## \return The Pillow image built by finalize, or None before then.
    @property
    def image(self):
        return self._exportable_image

    ## \return The path the image will be written to for the given export settings.
    def export_filepath(self, root_directory_path: str, bitmap_format: str) -> str:
        filename = os.path.join(root_directory_path, self.name) if self.name is not None else root_directory_path
        if bitmap_format == 'raw':
            return f'{filename}.{self.width}.{self.height}'
        return f'{filename}.{bitmap_format}'

    ## Writes the bitmap. If the write fails, no partial file is left behind.
    def export(self, root_directory_path: str, command_line_arguments):
        if command_line_arguments.bitmap_format == 'none':
            return

        # VERIFY THERE IS SOMETHING TO WRITE.
        if (self.width == 0) or (self.height == 0):
            raise EncodeFailureError(f'The view has no visible pixels ({self.width}x{self.height}), so no image was written.')

        # WRITE THE IMAGE.
        filepath = self.export_filepath(root_directory_path, command_line_arguments.bitmap_format)
        try:
            super().export(root_directory_path, command_line_arguments)
        except (OSError, ValueError, KeyError) as error:
            # REMOVE ANY PARTIAL OUTPUT.
            if os.path.exists(filepath):
                os.remove(filepath)
            raise EncodeFailureError(f'Could not write {filepath}: {error}') from error

## \return The (total width, total height) of one loop in source pixels:
## the cels are laid side by side, so the widths add and the tallest cel wins.
def get_loop_size(loop: Loop) -> Tuple[int, int]:
    total_width = sum(cel.width for cel in loop.cels)
    total_height = max((cel.height for cel in loop.cels), default = 0)
    return (total_width, total_height)

## \return The (width, height) in output pixels of a canvas that fits every loop
## of the view, one loop per row. The width accounts for double-wide pixels.
def get_canvas_size(view: View) -> Tuple[int, int]:
    loop_sizes = [get_loop_size(loop) for loop in view.loops]
    width = max((loop_width for loop_width, _ in loop_sizes), default = 0)
    height = sum(loop_height for _, loop_height in loop_sizes)
    return (width * PIXEL_WIDTH_MULTIPLIER, height)

## Draws every cel of a view into one bitmap:
##  - Each loop occupies its own row, top to bottom in loop order.
##    Each row is as tall as the tallest cel in that loop.
##  - The cels of a loop are placed left to right in cel order.
##  - Mirrored cels are drawn flipped horizontally, except in the loop
##    that holds their original artwork.
class ViewCompositor:
    def __init__(self, view: View, palette: AgiPalette = PALETTE):
        self.view = view
        self.palette = palette

    ## \param[in] name - The name of the exported image, relative to the export directory.
    ##            When None, the image is named after the export path itself.
    ## \return A ViewBitmap ready for export.
    def composite(self, name: Optional[str] = None) -> ViewBitmap:
        # CREATE THE CANVAS.
        width, height = get_canvas_size(self.view)
        bitmap = ViewBitmap(width, height, name)

        # DRAW EACH LOOP.
        cel_y = 0
        for loop_index, loop in enumerate(self.view.loops):
            cel_x = 0
            for cel in loop.cels:
                self.draw_cel(bitmap, cel, loop_index, cel_x, cel_y)
                cel_x += cel.width * PIXEL_WIDTH_MULTIPLIER
            _, loop_height = get_loop_size(loop)
            cel_y += loop_height

        bitmap.finalize()
        return bitmap

    ## Decodes one cel's compressed rows and writes them to the bitmap.
    ## \param[in] loop_index - The index of the loop being drawn, which decides
    ##            whether a mirrored cel is flipped.
    ## \param[in] cel_x, cel_y - The top-left corner of the cel on the canvas.
    def draw_cel(self, bitmap: ViewBitmap, cel: Cel, loop_index: int, cel_x: int, cel_y: int):
        source = self.view.source
        source.seek(cel.data_offset)
        flipped = cel.is_flipped_in_loop(loop_index)
        for y in range(cel_y, cel_y + cel.height):
            # FIND WHERE THIS ROW STARTS.
            if flipped:
                x = cel_x + (cel.width * PIXEL_WIDTH_MULTIPLIER) - 1
                step = -1
            else:
                x = cel_x
                step = 1

            # DRAW THE RUNS.
            for run in read_pixel_runs(source, cel.transparency_color):
                rgba = AgiPalette.TRANSPARENT_PIXEL if run.is_transparent else self.palette.rgba(run.color)
                for _ in range(run.count * PIXEL_WIDTH_MULTIPLIER):
                    bitmap.write_pixel(x, y, rgba)
                    x += step
