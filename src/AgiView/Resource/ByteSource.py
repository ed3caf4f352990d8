import os

from ..Exceptions import TruncatedError

## A random-access reader over the bytes of one resource.
##
## AGI resources carry no total length of their own; every offset in them
## is trusted as-is. The only protection available is to refuse reads that
## run past the end of the underlying data, which is what this class does.
## The decoders pass this object anywhere a binary stream is expected
## (for instance, to self_documenting_struct), so every read goes through
## the bounds check below.
class ByteSource:
    ## \param[in] stream - A binary stream that supports the read, seek, and tell methods.
    ##            Both mmap objects and BytesIO objects work.
    def __init__(self, stream):
        self.stream = stream

        # FIND THE END OF THE DATA.
        self.stream.seek(0, os.SEEK_END)
        self.length: int = self.stream.tell()
        self.position: int = 0
        self.stream.seek(0)

    ## Moves the read position to an absolute byte offset.
    ## Seeking past the end is allowed (mmap is not), so the position is
    ## tracked here and the next read fails instead.
    def seek(self, offset: int):
        self.position = offset

    def tell(self) -> int:
        return self.position

    ## Reads exactly the given number of bytes, or raises a TruncatedError
    ## if fewer bytes remain. To keep the call sites self-documenting, a byte
    ## count must always be provided.
    def read(self, number_of_bytes: int) -> bytes:
        # VERIFY WE WILL NOT READ PAST THE END OF THE RESOURCE.
        new_end_pointer = self.position + number_of_bytes
        attempted_read_past_end = (new_end_pointer > self.length)
        self.stream.seek(min(self.position, self.length))
        if attempted_read_past_end:
            raise TruncatedError(
                f'Attempted to read {number_of_bytes} byte(s) at 0x{self.position:04x}, '
                f'but the resource is only 0x{self.length:04x} bytes long.',
                self.stream)

        # READ THE REQUESTED DATA.
        data = self.stream.read(number_of_bytes)
        self.position = new_end_pointer
        return data

    ## \return The number of bytes from the current position to the end of the resource.
    @property
    def bytes_remaining_count(self) -> int:
        return max(0, self.length - self.position)
