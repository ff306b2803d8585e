# data_link_layer/byte_stream.py
"""
Byte <-> Hamming(7,4) bitstream framing.

Byte k yields nibble 2k = byte >> 4 and nibble 2k+1 = byte & 0x0F; each nibble
goes to the encoder MSB first. One byte therefore occupies 14 coded bits.
"""

from __future__ import annotations
import numpy as np

from common.utils import nibble_to_bits, bits_to_nibble
from data_link_layer.hamming import (
    NIBBLE_LEN, CODEWORD_LEN, encode_nibble, decode_nibble,
)

BITS_PER_BYTE = 2 * CODEWORD_LEN  # 14

def encode_bytes(data, out=None) -> np.ndarray:
    """Encode a bytes-like buffer into len(data) * 14 coded bits."""
    raw = bytes(data)
    n_bits = len(raw) * BITS_PER_BYTE
    if out is None:
        out = np.zeros(n_bits, dtype=np.uint8)
    elif len(out) != n_bits:
        raise ValueError(f"output buffer must hold {n_bits} bits, got {len(out)}")

    nib = np.zeros(NIBBLE_LEN, dtype=np.uint8)
    block = np.zeros(CODEWORD_LEN, dtype=np.uint8)
    for i in range(len(raw) * 2):
        # high nibble for even i, low nibble for odd i
        if i % 2 == 0:
            value = raw[i // 2] >> 4
        else:
            value = raw[i // 2] & 0x0F
        nibble_to_bits(value, nib)
        encode_nibble(nib, block)
        out[i * CODEWORD_LEN:(i + 1) * CODEWORD_LEN] = block
    return out

def decode_bytes(bits) -> bytes:
    """Inverse of encode_bytes; single-bit errors per 7-bit block are corrected."""
    c = np.array(bits, dtype=np.uint8).reshape(-1)
    if len(c) % BITS_PER_BYTE != 0:
        raise ValueError(f"coded length {len(c)} is not a multiple of {BITS_PER_BYTE}")

    out = bytearray(len(c) // BITS_PER_BYTE)
    nib = np.zeros(NIBBLE_LEN, dtype=np.uint8)
    for k in range(len(out)):
        base = k * BITS_PER_BYTE
        hi = bits_to_nibble(decode_nibble(c[base:base + CODEWORD_LEN], nib))
        lo = bits_to_nibble(decode_nibble(c[base + CODEWORD_LEN:base + BITS_PER_BYTE], nib))
        out[k] = (hi << 4) | lo
    return bytes(out)
