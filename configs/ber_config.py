# configs/ber_config.py
from __future__ import annotations
import os
from common.config import SimulationConfig, CodecConfig, ChannelConfig

OUTPUT_ROOT = "outputs"
FEC_SCHEMES = ("none", "repeat", "hamming74")

# preset -> (channel_type, flip_prob, burst_len)
CHANNEL_TABLE = {
    "clean": ("bsc",   0.0,  1),
    "bsc":   ("bsc",   1e-2, 1),
    "burst": ("burst", 2e-3, 3),
}

def _env_flag(name: str, default: str = "0") -> bool:
    v = str(os.getenv(name, default)).strip().lower()
    return v in {"1", "true", "yes", "y", "on"}

def build_config() -> SimulationConfig:
    fec = os.getenv("HAMMING_FEC", "hamming74").strip().lower()
    if fec not in FEC_SCHEMES:
        print(f"[WARN] FEC '{fec}' unsupported here. Fell back to 'hamming74'.")
        fec = "hamming74"
    preset = os.getenv("HAMMING_CHANNEL", "bsc").strip().lower()
    if preset not in CHANNEL_TABLE:
        raise ValueError(f"Unknown channel preset: {preset}")
    ch, p, burst = CHANNEL_TABLE[preset]

    return SimulationConfig(
        payload_bytes=1024,
        payload_seed=2024,
        codec=CodecConfig(
            fec_scheme=fec,
            repeat_k=3,
            workers=int(os.getenv("HAMMING_WORKERS", "1")),
            append_crc=True,
        ),
        chan=ChannelConfig(
            channel_type=ch,
            flip_prob=p,     # override with --flip_prob
            burst_len=burst,
            seed=12345,
        ),
        output_root=OUTPUT_ROOT,
        verbose=_env_flag("HAMMING_VERBOSE"),
    )
