from io import BytesIO

import pytest

from AgiView.Assets.Cel import Cel, PixelRun, read_pixel_runs
from AgiView.Assets.Loop import Loop, MAX_CELS
from AgiView.Exceptions import FormatError, SourceUnavailableError, TruncatedError
from AgiView.Resource.ByteSource import ByteSource
from AgiView.View import View

from conftest import CelData, encode_view

def source_for(data: bytes) -> ByteSource:
    return ByteSource(BytesIO(data))

## RUN-LENGTH DECODING.
def test_immediate_terminator_yields_empty_row():
    source = source_for(b'\x00')
    assert read_pixel_runs(source, transparency_color = 0) == []
    assert source.tell() == 1

def test_single_run():
    source = source_for(b'\x31\x00')
    assert read_pixel_runs(source, transparency_color = 0) == [PixelRun(color = 3, is_transparent = False, count = 1)]
    assert source.tell() == 2

def test_run_nibbles():
    runs = read_pixel_runs(source_for(b'\xa5\x00'), transparency_color = 0)
    assert runs == [PixelRun(10, False, 5)]

def test_zero_count_run_does_not_end_row():
    runs = read_pixel_runs(source_for(b'\x30\x21\x00'), transparency_color = 0)
    assert runs == [PixelRun(3, False, 0), PixelRun(2, False, 1)]

def test_transparency_flag():
    runs = read_pixel_runs(source_for(b'\x43\x53\x00'), transparency_color = 4)
    assert [run.is_transparent for run in runs] == [True, False]

def test_rows_are_read_one_at_a_time():
    source = source_for(b'\x11\x00\x22\x00')
    assert read_pixel_runs(source, 0) == [PixelRun(1, False, 1)]
    assert read_pixel_runs(source, 0) == [PixelRun(2, False, 2)]

def test_row_without_terminator_is_truncated():
    with pytest.raises(TruncatedError):
        read_pixel_runs(source_for(b'\x11\x22'), 0)

## STRUCTURE DECODING.
def test_decode_info_byte():
    assert Cel.decode_info(0xC5) == (True, 4, 5)
    assert Cel.decode_info(0x0F) == (False, 0, 15)
    assert Cel.decode_info(0x70) == (False, 7, 0)

def test_decode_view_structure():
    data = encode_view([
        [CelData(3, 2, transparency_color = 5), CelData(1, 4)],
        [CelData(2, 1, is_mirrored = True, unmirrored_loop_num = 0, transparency_color = 15)],
    ])
    view = View(stream = BytesIO(data))

    assert view.num_loops == 2
    first_loop, second_loop = view.loops
    assert first_loop.offset == 9
    assert first_loop.num_cels == 2
    assert second_loop.num_cels == 1

    # Cel header offsets are stored relative to the loop, but kept as absolute offsets.
    first_cel = first_loop.cels[0]
    assert first_cel.header_offset == first_loop.offset + 5
    assert (first_cel.width, first_cel.height) == (3, 2)
    assert first_cel.transparency_color == 5
    assert not first_cel.is_mirrored
    assert first_cel.data_offset == first_cel.header_offset + 3
    assert data[first_cel.header_offset:first_cel.header_offset + 3] == bytes([3, 2, 5])

    mirrored_cel = second_loop.cels[0]
    assert mirrored_cel.is_mirrored
    assert mirrored_cel.unmirrored_loop_num == 0
    assert mirrored_cel.transparency_color == 15
    assert mirrored_cel.is_flipped_in_loop(1)
    assert not mirrored_cel.is_flipped_in_loop(0)

def test_view_without_loops():
    view = View(stream = BytesIO(b'\x00\x00\x00\x00\x00'))
    assert view.loops == []

def test_loop_without_cels():
    view = View(stream = BytesIO(encode_view([[]])))
    assert view.num_loops == 1
    assert view.loops[0].cels == []

def test_cel_offsets_wrap_at_16_bits():
    # A loop at 0x0007 pointing 0xfff9 bytes ahead wraps around to 0x0000,
    # so the cel header overlaps the view header (and its loop count of 1).
    data = bytearray(encode_view([[CelData(1, 1)]]))
    data[8:10] = b'\xf9\xff'
    data[0:2] = bytes([2, 1])
    view = View(stream = BytesIO(bytes(data)))
    cel = view.loops[0].cels[0]
    assert cel.header_offset == 0x0000
    assert (cel.width, cel.height, cel.transparency_color) == (2, 1, 1)
    assert cel.data_offset == 0x0003

@pytest.mark.parametrize("length", [0, 2, 3, 6, 10, 12, 14])
def test_truncated_structure(length):
    data = encode_view([[CelData(1, 1, rows = [b'\x11'])], [CelData(1, 1, rows = [b'\x11'])]])
    with pytest.raises(TruncatedError):
        View(stream = BytesIO(data[:length]))

def test_truncated_error_is_format_error():
    with pytest.raises(FormatError):
        View(stream = BytesIO(b'\x00\x00'))

def test_failed_decode_releases_stream():
    stream = BytesIO(b'\x00\x00\x01\x00\x00')
    with pytest.raises(TruncatedError):
        View(stream = stream)
    assert stream.closed

def test_loop_offset_past_end_is_truncated():
    # One loop, whose header is at 0x1000.
    with pytest.raises(TruncatedError):
        View(stream = BytesIO(b'\x00\x00\x01\x00\x00\x00\x10'))

## LIMITS.
def test_loop_rejects_too_many_cels():
    loop = Loop()
    for _ in range(MAX_CELS):
        loop.append(Cel(width = 1, height = 1))
    with pytest.raises(FormatError):
        loop.append(Cel(width = 1, height = 1))

def test_view_rejects_too_many_loops():
    # Every loop offset points at the same empty loop header in the last byte (0x0203).
    view = View(stream = BytesIO(b'\x00\x00\xff\x00\x00' + b'\x03\x02' * 0xff + b'\x00'))
    assert view.num_loops == 0xff
    with pytest.raises(FormatError):
        view.append(Loop())

def test_cel_rejects_oversized_values():
    with pytest.raises(FormatError):
        Cel(width = 256, height = 1)
    with pytest.raises(FormatError):
        Cel(width = 1, height = 1, transparency_color = 16)

## FILE HANDLING.
def test_missing_file_is_unavailable(tmp_path):
    with pytest.raises(SourceUnavailableError):
        View(str(tmp_path / 'VIEW.404'))

def test_directory_is_unavailable(tmp_path):
    with pytest.raises(SourceUnavailableError):
        View(str(tmp_path))

def test_empty_file_is_truncated(write_view):
    with pytest.raises(TruncatedError):
        View(write_view('VIEW.000', b''))

def test_view_from_file(write_view):
    view = View(write_view('VIEW.001', encode_view([[CelData(4, 3)]])))
    try:
        assert view.filename == 'VIEW.001'
        assert view.loops[0].cels[0].width == 4
    finally:
        view.close()
    assert view.stream.closed
