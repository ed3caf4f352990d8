from typing import List, NamedTuple, Optional

import pytest
import self_documenting_struct as struct

## Describes one cel to be encoded into a test view.
## Each row is the run bytes for that row, without the terminating zero.
class CelData(NamedTuple):
    width: int
    height: int
    rows: Optional[List[bytes]] = None
    transparency_color: int = 0
    is_mirrored: bool = False
    unmirrored_loop_num: int = 0

    @property
    def info(self) -> int:
        return (0x80 if self.is_mirrored else 0x00) | (self.unmirrored_loop_num << 4) | self.transparency_color

    def encode(self) -> bytes:
        # Cels without explicit rows get one empty row per line.
        rows = self.rows if self.rows is not None else [b''] * self.height
        return bytes([self.width, self.height, self.info]) + b''.join(row + b'\x00' for row in rows)

## Encodes a complete VIEW resource from a list of loops, each a list of cels.
def encode_view(loops: List[List[CelData]]) -> bytes:
    # WRITE THE VIEW HEADER.
    # Bytes 0, 1, 3, and 4 are not used by the decoder.
    header = bytearray(5 + 2 * len(loops))
    header[2] = len(loops)

    # WRITE THE LOOPS.
    body = bytearray()
    for loop_index, cels in enumerate(loops):
        loop_offset = len(header) + len(body)
        header[5 + 2 * loop_index:7 + 2 * loop_index] = struct.pack.uint16_le(loop_offset)

        encoded_cels = [cel.encode() for cel in cels]
        relative_offset = 1 + 2 * len(cels)
        relative_offsets = []
        for encoded_cel in encoded_cels:
            relative_offsets.append(relative_offset)
            relative_offset += len(encoded_cel)

        body += bytes([len(cels)])
        body += b''.join(struct.pack.uint16_le(offset) for offset in relative_offsets)
        body += b''.join(encoded_cels)

    return bytes(header + body)

@pytest.fixture
def write_view(tmp_path):
    ## Writes an encoded view to a file in the temporary directory and returns its path.
    def write(filename: str, data: bytes) -> str:
        filepath = tmp_path / filename
        filepath.write_bytes(data)
        return str(filepath)
    return write
