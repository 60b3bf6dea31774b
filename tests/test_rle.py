"""Tests for Run-Length Encoding and decoding."""

import io

import numpy as np
import pytest

from codec_errors import CodecError, MalformedInputError
import rle
from rle import MAX_RUN_LENGTH, generate_random_buffer, run_length_decode, run_length_encode


class TestEncode:
    def test_empty(self):
        assert run_length_encode(b"") == b""

    def test_single_byte(self):
        assert run_length_encode(b"A") == b"\x01A"

    def test_runs_are_count_then_value(self):
        assert run_length_encode(b"AAAABBBCCCC") == b"\x04A\x03B\x04C"

    def test_maximum_run_is_one_token(self):
        assert run_length_encode(b"A" * 255) == b"\xffA"

    def test_run_of_256_is_split(self):
        """A run one byte over the limit yields (255, v) then (1, v)."""
        assert run_length_encode(b"\x07" * 256) == bytes([255, 7, 1, 7])

    def test_long_run_token_count(self):
        encoded = run_length_encode(b"z" * 1000)
        # ceil(1000 / 255) tokens
        assert len(encoded) == 2 * 4
        assert encoded == bytes([255, ord("z")] * 3 + [235, ord("z")])

    def test_separate_runs_of_same_value_are_not_merged(self):
        assert run_length_encode(b"AABAA") == b"\x02A\x01B\x02A"

    def test_accepts_bytearray(self):
        assert run_length_encode(bytearray(b"\x00\x00\xff")) == b"\x02\x00\x01\xff"


class TestDecode:
    def test_empty(self):
        assert run_length_decode(b"") == b""

    def test_pairs(self):
        assert run_length_decode(b"\x04A\x03B\x04C") == b"AAAABBBCCCC"

    def test_zero_count_expands_to_nothing(self):
        assert run_length_decode(b"\x00A\x02B") == b"BB"

    def test_odd_length_is_malformed(self):
        with pytest.raises(MalformedInputError) as excinfo:
            run_length_decode(bytes([1, 2, 3]))
        assert excinfo.value.position == 2

    def test_malformed_is_a_codec_error_and_value_error(self):
        with pytest.raises(CodecError):
            run_length_decode(b"\x05")
        with pytest.raises(ValueError):
            run_length_decode(b"\x05")


class TestRoundTrip:
    @pytest.mark.parametrize(
        "data",
        [
            b"A",
            b"AAAABBBCCCC",
            b"A" * 255,
            b"A" * 256,
            b"A" * 511,
            bytes(range(256)),
            b"\x00" * 10 + b"\xff" * 300 + b"\x00",
        ],
    )
    def test_fixed_inputs(self, data):
        assert run_length_decode(run_length_encode(data)) == data

    @pytest.mark.parametrize("seed", range(5))
    def test_random_buffers(self, seed):
        rng = np.random.default_rng(seed)
        data = generate_random_buffer(2000, max_run_length=700, rng=rng)
        encoded = run_length_encode(data)
        assert run_length_decode(encoded) == data
        assert max(encoded[0::2]) <= MAX_RUN_LENGTH

    def test_random_noise(self):
        data = np.random.default_rng(7).integers(0, 256, 4096, dtype=np.uint8).tobytes()
        assert run_length_decode(run_length_encode(data)) == data


def test_generate_random_buffer_size():
    data = generate_random_buffer(500, rng=np.random.default_rng(1))
    assert len(data) == 500
    assert set(data) <= set(range(5))


def test_self_check_reports():
    out = io.StringIO()
    rle.test_rle(num_tests=3, buffer_size=300, out=out, seed=0)
    assert out.getvalue().endswith("All tests passed!\n")
