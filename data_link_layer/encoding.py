# data_link_layer/encoding.py
from __future__ import annotations
from typing import List, Tuple
import os
import numpy as np

from common.config import CodecConfig
from common.utils import (
    bytes_to_bits, bits_to_bytes, append_crc32, verify_and_strip_crc32,
)
from data_link_layer.byte_stream import BITS_PER_BYTE, encode_bytes, decode_bytes
from data_link_layer.error_correction import make_fec, Hamming74FEC
from data_link_layer.hamming import CODEWORD_LEN, block_syndromes

# 環境変数 BER_TQDM=1 でフレーム単位の進捗バーを表示（任意）
_USE_TQDM = str(os.getenv("BER_TQDM", "0")).strip().lower() in {"1", "true", "yes", "y", "on"}
if _USE_TQDM:
    try:
        from tqdm.auto import tqdm as _tqdm
    except ImportError:
        _USE_TQDM = False
        _tqdm = None
else:
    _tqdm = None

def _progress(total: int, desc: str):
    if _USE_TQDM and _tqdm is not None:
        return _tqdm(total=total, desc=desc, unit="frm")
    return None

def segment_payload(data: bytes, mtu_bytes: int) -> List[bytes]:
    if mtu_bytes < 1:
        raise ValueError(f"mtu_bytes must be >= 1, got {mtu_bytes}")
    return [data[i:i+mtu_bytes] for i in range(0, len(data), mtu_bytes)]

# ---------- TX ----------
def protect_frames(frames: List[bytes], codec: CodecConfig) -> Tuple[List[np.ndarray], List[int]]:
    """
    Optional CRC-32, then FEC. hamming74 uses the byte-stream framing
    (high nibble, low nibble, MSB first); other schemes run on the raw bitstream.
    Returns (coded frames, original bit length per frame).
    """
    fec = make_fec(codec.fec_scheme, repeat_k=codec.repeat_k, workers=codec.workers)
    enc_frames: List[np.ndarray] = []
    orig_bit_lengths: List[int] = []
    bar = _progress(len(frames), "encode (frames)")
    for fr in frames:
        blob = append_crc32(fr) if codec.append_crc else fr
        orig_bit_lengths.append(len(blob) * 8)
        if isinstance(fec, Hamming74FEC) and fec.workers == 1:
            enc = encode_bytes(blob)
        else:
            enc = fec.encode(bytes_to_bits(blob))
        enc_frames.append(enc)
        if bar is not None:
            bar.update(1)
    if bar is not None:
        bar.close()
    return enc_frames, orig_bit_lengths

# ---------- RX ----------
def recover_frames(coded_frames: List[np.ndarray], orig_bit_lengths: List[int],
                   codec: CodecConfig, verbose: bool = False) -> Tuple[bytes, dict]:
    fec = make_fec(codec.fec_scheme, repeat_k=codec.repeat_k, workers=codec.workers)
    data = bytearray()
    n_bad = 0
    n_corrected = 0
    bar = _progress(len(coded_frames), "decode (frames)")
    for idx, enc in enumerate(coded_frames):
        Lbits = orig_bit_lengths[idx]
        if isinstance(fec, Hamming74FEC) and fec.workers == 1:
            c = np.asarray(enc, dtype=np.uint8)
            c = c[: (len(c) // BITS_PER_BYTE) * BITS_PER_BYTE]
            n_corrected += int(np.count_nonzero(block_syndromes(c)))
            blob = decode_bytes(c)
        else:
            dec, nc = fec.decode_with_stats(enc)
            n_corrected += nc
            if len(dec) > Lbits: dec = dec[:Lbits]
            blob = bits_to_bytes(dec)
        blob = blob[: (Lbits + 7) // 8]

        if codec.append_crc:
            ok, payload = verify_and_strip_crc32(blob)
            if not ok:
                n_bad += 1
                if verbose: print(f"[WARN] frame {idx}/{len(coded_frames)} CRC failed")
        else:
            payload = blob
        data.extend(payload)
        if bar is not None:
            bar.update(1)
    if bar is not None:
        bar.close()

    stats = {
        "n_frames": len(coded_frames),
        "n_bad_frames": int(n_bad),
        "all_crc_ok": bool(codec.append_crc and n_bad == 0),
        "n_corrected_blocks": int(n_corrected),
        "n_blocks": int(sum(len(e) for e in coded_frames) // CODEWORD_LEN)
                    if isinstance(fec, Hamming74FEC) else 0,
    }
    return bytes(data), stats
