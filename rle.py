"""
This module provides Run-Length Encoding (RLE) and decoding of byte data.

Each run of identical bytes is stored as a (count, value) pair of bytes, count first. Runs longer than
`MAX_RUN_LENGTH` are split into several pairs for the same value, so a run of 256 bytes becomes (255, v), (1, v).

Both functions operate on byte-like objects and return encoded or decoded data as bytes.
"""
from typing import Union

import numpy as np

from codec_errors import MalformedInputError

MAX_RUN_LENGTH = 255 # Count is stored in a single byte


def run_length_encode(input_buffer: Union[bytes, bytearray]) -> bytes:
    """
    Perform Run-Length Encoding on a byte-like object.

    Parameters
    ----------
    bytes or bytearray
        input_buffer : The byte data to encode.

    Returns
    -------
    bytes
        The run-length encoded data, as a sequence of (count, value) pairs.
    """
    if not input_buffer:
        return b""
    output = bytearray()
    count = 1
    prev_symb = input_buffer[0]
    for symb in input_buffer[1:]:
        if symb == prev_symb and count < MAX_RUN_LENGTH:
            count += 1
        else:
            output.append(count)
            output.append(prev_symb)
            count = 1
        prev_symb = symb
    output.append(count)
    output.append(prev_symb)
    return bytes(output)


def run_length_decode(encoded_buffer: Union[bytes, bytearray]) -> bytes:
    """
    Decode a Run-Length Encoded byte-like object.

    Parameters
    ----------
    bytes or bytearray
        encoded_buffer : The run-length encoded data.

    Returns
    -------
    bytes
        The decoded data.

    Raises
    ------
    MalformedInputError
        If the encoded data has an odd length, i.e., the last count has no value.
    """
    if len(encoded_buffer) % 2 != 0:
        raise MalformedInputError(
                f"Invalid RLE buffer: odd length {len(encoded_buffer)}, no value found for last count",
                position=len(encoded_buffer) - 1
            )
    if not encoded_buffer:
        return b""
    pairs = np.frombuffer(bytes(encoded_buffer), dtype=np.uint8).reshape((-1, 2))
    return np.repeat(pairs[:, 1], pairs[:, 0]).tobytes()


def generate_random_buffer(size, unique_elements=5, max_run_length=16, singleton_probability=0.5, rng=None):
    """Random buffer made of short runs over a small alphabet."""
    rng = np.random.default_rng() if rng is None else rng
    buffer = bytearray()
    buffer_size = 0
    while buffer_size < size:
        if rng.random() < singleton_probability:
            run_length = 1
        else:
            run_length = int(rng.integers(1, min(max_run_length, size - buffer_size), endpoint=True))
        buffer_size += run_length
        buffer.extend(bytes([int(rng.integers(0, unique_elements))]) * run_length)
    return bytes(buffer)


def test_rle(num_tests=10, buffer_size=1000, out=None, seed=None):
    rng = np.random.default_rng(seed)

    for _ in range(num_tests):
        original_data = generate_random_buffer(buffer_size, max_run_length=600, rng=rng)

        encoded_data = run_length_encode(original_data)
        decoded_data = run_length_decode(encoded_data)
        if out is not None:
            print('Encoded/Len: ', len(encoded_data), file=out)
            print('Decoded/Len: ', len(decoded_data), file=out)
            print('Compression ratio: ', len(original_data)/len(encoded_data), file=out)
        assert original_data == decoded_data, "RLE: Decoded data does not match original data"

    if out is not None:
        print("All tests passed!", file=out)


if __name__ == "__main__":
    import sys
    test_rle(out=sys.stdout)
