"""
Simplified LZ77 compression of byte data.

The encoded data is a sequence of tokens:

- Literal: `0x00` followed by one raw byte.
- Match: `0x01` followed by a one-byte distance back into the already decoded output and a one-byte length.

The encoder only looks `WINDOW_SIZE` bytes back and never emits matches shorter than `MIN_MATCH_LENGTH`, since a
three-byte match token saves nothing over one or two literal tokens. A match may be longer than its distance: the
decoder copies one byte at a time, so the bytes it has just written feed the rest of the same match.

Usage
-----
    from lz77 import lz77_encode, lz77_decode

    encoded = lz77_encode(b"ABABABABABAB")   # b"\\x00A\\x00B\\x01\\x02\\n"
    assert lz77_decode(encoded) == b"ABABABABABAB"
"""
from typing import Tuple, Union

import numpy as np

from codec_errors import InvalidDistanceError, TruncatedLiteralError, TruncatedMatchError, UnknownTokenError

WINDOW_SIZE = 20 # Maximum look-back distance searched by the encoder
MAX_MATCH_LENGTH = 255 # Length is stored in a single byte
MIN_MATCH_LENGTH = 3 # Shorter matches are emitted as literals
LITERAL_TAG = 0x00
MATCH_TAG = 0x01


def find_longest_match(data: np.ndarray, pos: int) -> Tuple[int, int]:
    """
    Find the longest match for `data[pos:]` starting in the window before `pos`.

    Candidates are scanned from the oldest to the newest offset, and only a strictly longer match replaces the best
    one found so far, so among equally long matches the one furthest back wins. The compared span may run past `pos`.

    Parameters
    ----------
    data : np.ndarray[np.uint8]
        The whole input buffer.
    pos : int
        Position of the first byte not encoded yet.

    Returns
    -------
    Tuple[int, int]
        Distance back from `pos` and length of the best match, or (0, 0) if there is no candidate.
    """
    best_distance, best_length = 0, 0
    limit = min(MAX_MATCH_LENGTH, len(data) - pos)
    lookahead = data[pos:pos + limit]
    for offset in range(max(0, pos - WINDOW_SIZE), pos):
        mismatches = np.flatnonzero(data[offset:offset + limit] != lookahead)
        length = int(mismatches[0]) if mismatches.size else limit
        if length > best_length:
            best_distance, best_length = pos - offset, length
    return best_distance, best_length


def lz77_encode(input_buffer: Union[bytes, bytearray]) -> bytes:
    """
    Perform LZ77 encoding on a byte-like object.

    Parameters
    ----------
    bytes or bytearray
        input_buffer : The byte data to encode.

    Returns
    -------
    bytes
        The encoded token stream.
    """
    if not input_buffer:
        return b""
    data = np.frombuffer(bytes(input_buffer), dtype=np.uint8)
    output = bytearray()
    pos = 0
    while pos < len(data):
        distance, length = find_longest_match(data, pos)
        if length >= MIN_MATCH_LENGTH:
            output.extend((MATCH_TAG, distance, length))
            pos += length
        else:
            output.extend((LITERAL_TAG, int(data[pos])))
            pos += 1
    return bytes(output)


def lz77_decode(encoded_buffer: Union[bytes, bytearray]) -> bytes:
    """
    Decode an LZ77 encoded byte-like object.

    Parameters
    ----------
    bytes or bytearray
        encoded_buffer : The encoded token stream.

    Returns
    -------
    bytes
        The decoded data.

    Raises
    ------
    TruncatedLiteralError
        If the stream ends right after a literal tag.
    TruncatedMatchError
        If the stream ends before the distance and length of a match.
    InvalidDistanceError
        If a match has distance 0 or reaches back before the start of the output.
    UnknownTokenError
        If a tag byte is neither `LITERAL_TAG` nor `MATCH_TAG`.
    """
    output = bytearray()
    pos = 0
    while pos < len(encoded_buffer):
        tag = encoded_buffer[pos]
        if tag == LITERAL_TAG:
            if pos + 1 >= len(encoded_buffer):
                raise TruncatedLiteralError("Invalid LZ77 buffer: missing literal byte", position=pos)
            output.append(encoded_buffer[pos + 1])
            pos += 2
        elif tag == MATCH_TAG:
            if pos + 2 >= len(encoded_buffer):
                raise TruncatedMatchError("Invalid LZ77 buffer: incomplete match token", position=pos)
            distance = encoded_buffer[pos + 1]
            length = encoded_buffer[pos + 2]
            if distance == 0:
                raise InvalidDistanceError("Invalid LZ77 buffer: match distance must be at least 1", position=pos)
            if distance > len(output):
                raise InvalidDistanceError(
                        f"Invalid LZ77 buffer: distance {distance} exceeds current output length {len(output)}",
                        position=pos
                    )
            # Byte by byte: source and destination overlap when distance < length
            start = len(output) - distance
            for i in range(length):
                output.append(output[start + i])
            pos += 3
        else:
            raise UnknownTokenError(
                    f"Invalid LZ77 buffer: expected tag 0x00 or 0x01, got 0x{tag:02x}",
                    position=pos
                )
    return bytes(output)


def test_lz77(num_tests=10, buffer_size=1000, out=None, seed=None):
    from rle import generate_random_buffer

    rng = np.random.default_rng(seed)

    for _ in range(num_tests):
        original_data = generate_random_buffer(buffer_size, rng=rng)

        encoded_data = lz77_encode(original_data)
        decoded_data = lz77_decode(encoded_data)
        if out is not None:
            print('Encoded/Len: ', len(encoded_data), file=out)
            print('Decoded/Len: ', len(decoded_data), file=out)
            print('Compression ratio: ', len(original_data)/len(encoded_data), file=out)
        assert original_data == decoded_data, "LZ77: Decoded data does not match original data"

    if out is not None:
        print("All tests passed!", file=out)


if __name__ == "__main__":
    import sys
    test_lz77(out=sys.stdout)
