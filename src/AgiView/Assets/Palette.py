from io import BytesIO

from asset_extraction_framework.Asset.Palette import RgbPalette

## The colors AGI draws with. These are the 16 standard EGA colors,
## in RGB order, three bytes per entry.
EGA_PALETTE_RGB = bytes([
    0x00, 0x00, 0x00, # Black
    0x00, 0x00, 0xAA, # Blue
    0x00, 0xAA, 0x00, # Green
    0x00, 0xAA, 0xAA, # Cyan
    0xAA, 0x00, 0x00, # Red
    0xAA, 0x00, 0xAA, # Magenta
    0xAA, 0x55, 0x00, # Brown
    0xAA, 0xAA, 0xAA, # Light gray
    0x55, 0x55, 0x55, # Dark gray
    0x55, 0x55, 0xFF, # Light blue
    0x55, 0xFF, 0x55, # Light green
    0x55, 0xFF, 0xFF, # Light cyan
    0xFF, 0x55, 0x55, # Light red
    0xFF, 0x55, 0xFF, # Light magenta
    0xFF, 0xFF, 0x55, # Yellow
    0xFF, 0xFF, 0xFF, # White
])

## The fixed 16-color palette shared by every VIEW resource.
## Unlike most palettes, this one is never read from a file.
class AgiPalette(RgbPalette):
    TOTAL_ENTRIES = 16
    OPAQUE = 0xFF
    TRANSPARENT_PIXEL = (0x00, 0x00, 0x00, 0x00)

    def __init__(self):
        super().__init__(BytesIO(EGA_PALETTE_RGB), has_entry_alignment = False, total_palette_entries = AgiPalette.TOTAL_ENTRIES)

    ## \return The (red, green, blue, alpha) tuple for the given color index.
    ## Palette colors are always fully opaque.
    def rgba(self, color_index: int) -> tuple:
        if not (0 <= color_index < AgiPalette.TOTAL_ENTRIES):
            raise IndexError(f'AGI color index must be between 0 and {AgiPalette.TOTAL_ENTRIES - 1}, received {color_index}')
        start = color_index * 3
        red, green, blue = self.raw_rgb_bytes()[start:start + 3]
        return (red, green, blue, AgiPalette.OPAQUE)

PALETTE = AgiPalette()
