"""
Compressor: RLE and LZ77 compression of binary streams

This module wires the byte codecs of `rle` and `lz77` to readable and writable binary streams, and provides the
`compressor` command line tool.

Functions
---------
- `rle_compress(source, sink)` / `rle_decompress(source, sink)`
    Run-Length Encoding of a whole stream.

- `lz_compress(source, sink)` / `lz_decompress(source, sink)`
    Simplified LZ77 encoding of a whole stream.

- `process(operation, algorithm, source, sink)`
    Dispatch to one of the above by name.

Usage
-----
    compressor compress input.txt output.cmp --rle
    compressor decompress output.cmp - --rle

Notes
-----
- Streams are read entirely into memory and the result is computed before anything is written, so a failed
  decompression leaves the sink untouched.
- I/O errors are not caught here: they propagate as `OSError`.
"""
import argparse
import contextlib
import io
import logging
import sys
from typing import BinaryIO, Callable, Dict, Optional, Sequence, Tuple

from codec_errors import CodecError
from lz77 import lz77_decode, lz77_encode
from rle import run_length_decode, run_length_encode

logger = logging.getLogger(__name__)

ByteCodec = Callable[[bytes], bytes]

CODECS: Dict[str, Tuple[ByteCodec, ByteCodec]] = {
    "rle": (run_length_encode, run_length_decode),
    "lz": (lz77_encode, lz77_decode),
}
OPERATIONS = ("compress", "decompress")
CODEC_NAMES = {"rle": "RLE", "lz": "LZ77"}


def get_codec(algorithm: str) -> Tuple[ByteCodec, ByteCodec]:
    """Return the (encode, decode) pair registered under `algorithm`."""
    try:
        return CODECS[algorithm]
    except KeyError:
        raise ValueError(f"Unknown algorithm: {algorithm!r}, expected one of {sorted(CODECS)}") from None


def _transform(function: ByteCodec, source: BinaryIO, sink: BinaryIO) -> int:
    data = source.read()
    logger.info("Read %d bytes from input", len(data))
    result = function(data)
    sink.write(result)
    logger.info("Wrote %d bytes to output", len(result))
    return len(result)


def rle_compress(source: BinaryIO, sink: BinaryIO) -> int:
    """RLE-compress everything readable from `source` into `sink`. Returns the number of bytes written."""
    return _transform(run_length_encode, source, sink)


def rle_decompress(source: BinaryIO, sink: BinaryIO) -> int:
    """RLE-decompress `source` into `sink`. Raises `MalformedInputError` before writing anything if invalid."""
    return _transform(run_length_decode, source, sink)


def lz_compress(source: BinaryIO, sink: BinaryIO) -> int:
    """LZ77-compress everything readable from `source` into `sink`. Returns the number of bytes written."""
    return _transform(lz77_encode, source, sink)


def lz_decompress(source: BinaryIO, sink: BinaryIO) -> int:
    """LZ77-decompress `source` into `sink`. Raises a `CodecError` subclass before writing anything if invalid."""
    return _transform(lz77_decode, source, sink)


def process(operation: str, algorithm: str, source: BinaryIO, sink: BinaryIO) -> int:
    """
    Compress or decompress `source` into `sink`.

    Parameters
    ----------
    operation : str
        Either "compress" or "decompress".
    algorithm : str
        Name of the codec, a key of `CODECS`.
    source : BinaryIO
        Readable binary stream.
    sink : BinaryIO
        Writable binary stream.

    Returns
    -------
    int
        Number of bytes written to `sink`.
    """
    if operation not in OPERATIONS:
        raise ValueError(f"Unknown operation: {operation!r}, expected one of {OPERATIONS}")
    encode, decode = get_codec(algorithm)
    logger.info("Starting %s %s", CODEC_NAMES.get(algorithm, algorithm), operation)
    return _transform(encode if operation == "compress" else decode, source, sink)


@contextlib.contextmanager
def open_source(filename: Optional[str] = None):
    """Open `filename` for binary reading, or use stdin if it is None or '-'."""
    if filename and filename != '-':
        fh = open(filename, 'rb')
    else:
        fh = sys.stdin.buffer
    try:
        yield fh
    finally:
        if fh is not sys.stdin.buffer:
            fh.close()


@contextlib.contextmanager
def open_sink(filename: Optional[str] = None):
    """Open `filename` for binary writing, or use stdout if it is None or '-'."""
    if filename and filename != '-':
        fh = open(filename, 'wb')
    else:
        fh = sys.stdout.buffer
    try:
        yield fh
        fh.flush()
    finally:
        if fh is not sys.stdout.buffer:
            fh.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='compressor',
                                     description='A compression tool implementing RLE and LZ77 algorithms')
    parser.add_argument("operation", type=str, choices=OPERATIONS,
                        help="compress or decompress")
    parser.add_argument("input", type=str,
                        help="path to input file, '-' for stdin")
    parser.add_argument("output", type=str,
                        help="path to output file, '-' for stdout")
    algorithm = parser.add_mutually_exclusive_group()
    algorithm.add_argument("--rle", dest="algorithm", action="store_const", const="rle",
                           help="use Run-Length Encoding")
    algorithm.add_argument("--lz", dest="algorithm", action="store_const", const="lz",
                           help="use simplified LZ77")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log progress to stderr")
    parser.add_argument("--version", action="version", version="%(prog)s 1.0.0")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    if args.algorithm is None:
        print(f"Please specify {args.operation}ion algorithm (--rle or --lz)", file=sys.stderr)
        return 1

    # The output is only opened once processing succeeded, so a bad input never truncates it
    try:
        with open_source(args.input) as infile:
            source = io.BytesIO(infile.read())
        sink = io.BytesIO()
        process(args.operation, args.algorithm, source, sink)
        with open_sink(args.output) as outfile:
            outfile.write(sink.getvalue())
    except (CodecError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info("%s %s to %s", "Compressed" if args.operation == "compress" else "Decompressed",
                args.input, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
