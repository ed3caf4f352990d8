from asset_extraction_framework.Exceptions import BinaryParsingError

## The number of bytes of hexdump context shown before and after the
## failing position, when a stream is available.
HEXDUMP_CONTEXT_LENGTH = 0x20

## Raised when the VIEW resource is structurally invalid.
class FormatError(BinaryParsingError):
    ## \param[in] message - A description of the problem.
    ## \param[in] stream - The binary stream being parsed, if any. When provided,
    ##            a hexdump of the bytes around the current position is appended.
    def __init__(self, message: str, stream = None):
        if stream is None:
            super().__init__(message)
        else:
            # The hexdump cannot start before the beginning of the stream.
            context_length_before = min(HEXDUMP_CONTEXT_LENGTH, stream.tell())
            super().__init__(message, stream, context_length_before = context_length_before,
                             context_length_after = HEXDUMP_CONTEXT_LENGTH)

## Raised when a read asks for more bytes than remain in the resource.
class TruncatedError(FormatError):
    pass

## Raised when the input cannot be opened or read at all.
class SourceUnavailableError(Exception):
    pass

## Raised when the composed raster cannot be written to an image file.
class EncodeFailureError(Exception):
    pass
