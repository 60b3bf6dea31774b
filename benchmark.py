import sys

import numpy as np

from lz77 import lz77_decode, lz77_encode
from rle import generate_random_buffer, run_length_decode, run_length_encode

TEST_CASES = ('runs', 'long_runs', 'text', 'noise')
CODECS = {
    'RLE': (run_length_encode, run_length_decode),
    'LZ77': (lz77_encode, lz77_decode),
}


def make_test_case(name, size, rng):
    if name == 'runs':
        return generate_random_buffer(size, rng=rng)
    if name == 'long_runs':
        return generate_random_buffer(size, unique_elements=3, max_run_length=1000, singleton_probability=0.1, rng=rng)
    if name == 'text':
        words = [b'the ', b'quick ', b'brown ', b'fox ', b'jumps ', b'over ', b'lazy ', b'dog ']
        text = b''.join(words[i] for i in rng.integers(0, len(words), size))
        return text[:size]
    if name == 'noise':
        return rng.integers(0, 256, size, dtype=np.uint8).tobytes()
    raise ValueError(f"Unknown test case: {name}")


def file_size_fmt(size, suffix="B"):
    for unit in ("", "Ki", "Mi", "Gi", "Ti"):
        if abs(size) < 1024.0:
            return f"{size:3.1f}{unit}{suffix}"
        size /= 1024.0
    return f"{size:.1f}Pi{suffix}"


def run_benchmark(out=sys.stdout, size=10000, seed=42):
    rng = np.random.default_rng(seed)
    results = []
    original_size_total = 0
    encoded_size_total = dict.fromkeys(CODECS, 0)

    for tc in TEST_CASES:
        original_data = make_test_case(tc, size, rng)
        original_size = len(original_data)
        original_size_total += original_size
        print('Test case: ', tc, file=out)
        print('Original size: ', original_size, file_size_fmt(original_size), file=out)

        for codec_name, (encode, decode) in CODECS.items():
            encoded_data = encode(original_data)

            # Checks if the decoded data is equal to the original one
            assert decode(encoded_data) == original_data, f"{codec_name}: Decoded data does not match original data"

            encoded_size = len(encoded_data)
            encoded_size_total[codec_name] += encoded_size
            print(f'{codec_name} encoded size: ', encoded_size, file_size_fmt(encoded_size), file=out)
            print(f'{codec_name} compression ratio: ', original_size/encoded_size, file=out)
            results.append((tc, codec_name, original_size, encoded_size))
        print(file=out)

    print('Total original size: ', original_size_total, file_size_fmt(original_size_total), file=out)
    for codec_name, encoded_size in encoded_size_total.items():
        print(f'Total {codec_name} encoded size: ', encoded_size, file_size_fmt(encoded_size), file=out)
        print(f'Total {codec_name} compression ratio: ', original_size_total/encoded_size, file=out)
    return results


if __name__ == "__main__":
    run_benchmark()
