"""
Tests for the Hamming(7,4) bit-level codec
"""
import unittest
from itertools import product

import numpy as np

from data_link_layer.hamming import (
    PARITY_INDICES, DATA_INDICES, GROUP_INDICES,
    is_parity_index, in_parity_group, parity_index,
    parity_check, calculate_syndrome,
    encode_nibble, decode_nibble,
    encode_block_array, decode_block_array, block_syndromes,
)

ALL_NIBBLES = [list(t) for t in product((0, 1), repeat=4)]


def flipped(bits, *indices):
    out = list(bits)
    for i in indices:
        out[i] ^= 1
    return out

# ---------------------------------------------------------------------------

class IndexPredicateTests(unittest.TestCase):

    def test_parity_indices(self):
        self.assertEqual(PARITY_INDICES, (0, 1, 3))
        self.assertEqual(DATA_INDICES, (2, 4, 5, 6))
        self.assertEqual([i for i in range(16) if is_parity_index(i)],
                         [0, 1, 3, 7, 15])

    def test_parity_index(self):
        self.assertEqual([parity_index(p) for p in range(3)], [0, 1, 3])

    def test_group_membership(self):
        groups = [[i for i in range(7) if in_parity_group(i, p)]
                  for p in range(3)]
        self.assertEqual(groups, [[0, 2, 4, 6], [1, 2, 5, 6], [3, 4, 5, 6]])

    def test_each_group_contains_its_parity_bit(self):
        for p in range(3):
            self.assertTrue(in_parity_group(parity_index(p), p))
            for q in range(3):
                if q != p:
                    self.assertFalse(in_parity_group(parity_index(p), q))

# ---------------------------------------------------------------------------

class ParityCheckTests(unittest.TestCase):

    def test_simple(self):
        # data bits only, parity slots still zero
        bits = [0, 0, 1, 0, 0, 1, 1]
        self.assertEqual(parity_check(bits, 0), 0)
        self.assertEqual(parity_check(bits, 1), 1)
        self.assertEqual(parity_check(bits, 2), 0)
        # complete codeword: every group is even
        bits[1] = 1
        for p in range(3):
            self.assertEqual(parity_check(bits, p), 0)

    def test_empty_group(self):
        self.assertEqual(parity_check([1, 1, 1], 2), 0)
        self.assertEqual(parity_check([], 0), 0)
        self.assertEqual(parity_check([1] * 7, 5), 0)

    def test_sums_exactly_the_group_members(self):
        rng = np.random.default_rng(3)
        for n in range(17):
            bits = [int(b) for b in rng.integers(0, 2, size=n)]
            for p in range(5):
                expected = 0
                for i in range(n):
                    if in_parity_group(i, p):
                        expected ^= bits[i]
                self.assertEqual(parity_check(bits, p), expected)

    def test_group_columns(self):
        self.assertEqual(GROUP_INDICES,
                         ((0, 2, 4, 6), (1, 2, 5, 6), (3, 4, 5, 6)))

    def test_short_array(self):
        # group 1 over 3 bits covers indices 1 and 2
        self.assertEqual(parity_check([0, 1, 0], 1), 1)
        self.assertEqual(parity_check([0, 1, 1], 1), 0)

    def test_numpy_input(self):
        a = np.array([1, 0, 1, 0, 1, 0, 1], dtype=np.uint8)
        self.assertEqual(parity_check(a, 0), 0)
        self.assertEqual(parity_check(a, 2), 0)

# ---------------------------------------------------------------------------

class SyndromeTests(unittest.TestCase):

    def test_zero_on_valid_codewords(self):
        for nib in ALL_NIBBLES:
            self.assertEqual(calculate_syndrome(encode_nibble(nib)), 0)

    def test_syndrome_is_error_position(self):
        for nib in ALL_NIBBLES:
            c = list(encode_nibble(nib))
            for i in range(7):
                self.assertEqual(calculate_syndrome(flipped(c, i)), i + 1)

    def test_range(self):
        for bits in product((0, 1), repeat=7):
            s = calculate_syndrome(bits)
            self.assertTrue(0 <= s <= 7)

    def test_short_input(self):
        self.assertEqual(calculate_syndrome([]), 0)
        self.assertEqual(calculate_syndrome([1]), 1)
        # positions 1..3: only groups 0 and 1 exist
        self.assertEqual(calculate_syndrome([0, 0, 1]), 3)

# ---------------------------------------------------------------------------

class EncodeNibbleTests(unittest.TestCase):

    def test_example(self):
        c = encode_nibble([1, 0, 1, 1])
        self.assertEqual(list(c), [0, 1, 1, 0, 0, 1, 1])

    def test_zero_and_ones(self):
        self.assertEqual(list(encode_nibble([0, 0, 0, 0])), [0] * 7)
        self.assertEqual(list(encode_nibble([1, 1, 1, 1])), [1] * 7)

    def test_data_positions(self):
        for nib in ALL_NIBBLES:
            c = encode_nibble(nib)
            self.assertEqual([int(c[i]) for i in DATA_INDICES], nib)

    def test_out_buffer_overwritten(self):
        out = [1, 1, 1, 1, 1, 1, 1]
        res = encode_nibble([0, 0, 0, 0], out)
        self.assertTrue(res is out)
        self.assertEqual(out, [0] * 7)

    def test_all_codewords_distinct(self):
        codewords = {tuple(encode_nibble(nib)) for nib in ALL_NIBBLES}
        self.assertEqual(len(codewords), 16)

    def test_minimum_distance(self):
        codewords = [np.array(encode_nibble(nib)) for nib in ALL_NIBBLES]
        d = min(int(np.count_nonzero(a != b))
                for i, a in enumerate(codewords) for b in codewords[i + 1:])
        self.assertEqual(d, 3)

    def test_wrong_length(self):
        self.assertRaises(ValueError, encode_nibble, [1, 0, 1])
        self.assertRaises(ValueError, encode_nibble, [1, 0, 1, 1], [0] * 6)

# ---------------------------------------------------------------------------

class DecodeNibbleTests(unittest.TestCase):

    def test_round_trip(self):
        for nib in ALL_NIBBLES:
            self.assertEqual(list(decode_nibble(encode_nibble(nib))), nib)

    def test_single_flip_corrected(self):
        for nib in ALL_NIBBLES:
            c = list(encode_nibble(nib))
            for i in range(7):
                self.assertEqual(list(decode_nibble(flipped(c, i))), nib)

    def test_corrects_in_place(self):
        rx = [0, 1, 1, 0, 1, 1, 1]
        self.assertEqual(calculate_syndrome(rx), 5)
        self.assertEqual(list(decode_nibble(rx)), [1, 0, 1, 1])
        self.assertEqual(rx, [0, 1, 1, 0, 0, 1, 1])

    def test_valid_codeword_untouched(self):
        rx = [0, 1, 1, 0, 0, 1, 1]
        decode_nibble(rx)
        self.assertEqual(rx, [0, 1, 1, 0, 0, 1, 1])

    def test_double_error_miscorrected(self):
        # two flips look like a single flip at a third, clean position
        c = [0, 1, 1, 0, 0, 1, 1]
        rx = flipped(c, 0, 2)
        self.assertEqual(rx, [1, 1, 0, 0, 0, 1, 1])
        s = calculate_syndrome(rx)
        self.assertEqual(s, 2)
        self.assertNotIn(s - 1, (0, 2))
        self.assertEqual(list(decode_nibble(rx)), [0, 0, 1, 1])
        self.assertNotEqual(list(decode_nibble(flipped(c, 0, 2))), [1, 0, 1, 1])

    def test_double_errors_never_recover(self):
        for nib in ALL_NIBBLES:
            c = list(encode_nibble(nib))
            for i in range(7):
                for j in range(i + 1, 7):
                    rx = flipped(c, i, j)
                    s = calculate_syndrome(rx)
                    self.assertNotEqual(s, 0)
                    self.assertNotIn(s - 1, (i, j))

    def test_negative_syndrome_flips_nothing(self):
        # a bit value outside {0, 1} drives the syndrome below zero
        rx = [-1, 0, 0, 0, 0, 0, 0]
        self.assertLess(calculate_syndrome(rx), 0)
        self.assertEqual(list(decode_nibble(rx)), [0, 0, 0, 0])
        self.assertEqual(rx, [-1, 0, 0, 0, 0, 0, 0])
        self.assertEqual(list(decode_block_array([-1, 0, 0, 0, 0, 0, 0])),
                         [0, 0, 0, 0])

    def test_syndrome_past_block_flips_nothing(self):
        rx = [0, 0, 0, 0, 0, 0, 2]
        # groups 0, 1, 2 each see the value 2
        self.assertEqual(calculate_syndrome(rx), 2 | 4 | 8)
        decode_nibble(rx)
        self.assertEqual(rx, [0, 0, 0, 0, 0, 0, 2])

    def test_out_buffer(self):
        out = np.ones(4, dtype=np.uint8)
        res = decode_nibble([0, 0, 0, 0, 0, 0, 0], out)
        self.assertTrue(res is out)
        self.assertEqual(list(out), [0, 0, 0, 0])

    def test_wrong_length(self):
        self.assertRaises(ValueError, decode_nibble, [0] * 8)
        self.assertRaises(ValueError, decode_nibble, [0] * 7, [0] * 3)

# ---------------------------------------------------------------------------

class BlockArrayTests(unittest.TestCase):

    def test_concatenation(self):
        a, b = [1, 0, 1, 1], [0, 1, 0, 0]
        enc = encode_block_array(a + b)
        self.assertEqual(len(enc), 14)
        self.assertEqual(list(enc),
                         list(encode_nibble(a)) + list(encode_nibble(b)))
        dec = decode_block_array(enc)
        self.assertEqual(list(dec), a + b)

    def test_decode_concatenation(self):
        ca = list(encode_nibble([1, 1, 0, 0]))
        cb = list(encode_nibble([0, 0, 1, 1]))
        self.assertEqual(list(decode_block_array(ca + cb)),
                         list(decode_nibble(list(ca))) + list(decode_nibble(list(cb))))

    def test_all_nibbles(self):
        bits = [b for nib in ALL_NIBBLES for b in nib]
        enc = encode_block_array(np.array(bits, dtype=np.uint8))
        self.assertEqual(len(enc), 16 * 7)
        self.assertEqual(list(decode_block_array(enc)), bits)

    def test_encode_matches_single_block_codec(self):
        bits = [b for nib in ALL_NIBBLES for b in nib]
        expected = [int(b) for nib in ALL_NIBBLES for b in encode_nibble(nib)]
        self.assertEqual(list(encode_block_array(bits)), expected)
        self.assertEqual(list(encode_block_array(np.array(bits, dtype=np.uint8))),
                         expected)

    def test_decode_matches_single_block_codec(self):
        words = [list(w) for w in product((0, 1), repeat=7)]
        flat = [b for w in words for b in w]
        expected = [int(b) for w in words for b in decode_nibble(list(w))]
        self.assertEqual(list(decode_block_array(flat)), expected)
        self.assertEqual(list(decode_block_array(np.array(flat, dtype=np.uint8))),
                         expected)
        self.assertEqual(list(block_syndromes(flat)),
                         [calculate_syndrome(w) for w in words])

    def test_one_error_per_block(self):
        bits = [b for nib in ALL_NIBBLES for b in nib]
        enc = encode_block_array(bits)
        for k in range(16):
            enc[k * 7 + k % 7] ^= 1
        self.assertEqual(list(block_syndromes(enc)),
                         [k % 7 + 1 for k in range(16)])
        self.assertEqual(list(decode_block_array(enc)), bits)

    def test_input_not_mutated(self):
        enc = encode_block_array([1, 0, 1, 1])
        enc[4] ^= 1
        before = enc.copy()
        decode_block_array(enc)
        self.assertTrue(np.array_equal(enc, before))

    def test_out_buffers(self):
        out = np.full(7, 9, dtype=np.uint8)
        self.assertTrue(encode_block_array([1, 0, 1, 1], out) is out)
        self.assertEqual(list(out), [0, 1, 1, 0, 0, 1, 1])
        dec = [9, 9, 9, 9]
        self.assertTrue(decode_block_array(out, dec) is dec)
        self.assertEqual(dec, [1, 0, 1, 1])

    def test_empty(self):
        self.assertEqual(len(encode_block_array([])), 0)
        self.assertEqual(len(decode_block_array([])), 0)

    def test_bad_lengths(self):
        self.assertRaises(ValueError, encode_block_array, [1, 0, 1])
        self.assertRaises(ValueError, decode_block_array, [0] * 8)
        self.assertRaises(ValueError, block_syndromes, [0] * 6)
        self.assertRaises(ValueError, encode_block_array, [0] * 4, [0] * 8)
        self.assertRaises(ValueError, decode_block_array, [0] * 7, [0] * 5)


if __name__ == '__main__':
    unittest.main()
