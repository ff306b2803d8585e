# common/run_utils.py
from __future__ import annotations
import os, json, re, datetime
from dataclasses import asdict

def _sanitize(s: str) -> str:
    return re.sub(r'[^0-9A-Za-z_.-]+', '-', str(s)).strip('-')

def run_tag(cfg) -> str:
    fec = cfg.codec.fec_scheme
    if fec == "repeat":
        fec = f"repeat{cfg.codec.repeat_k}"
    ch = cfg.chan.channel_type
    burst_tag = f"_L{cfg.chan.burst_len}" if ch == "burst" else ""
    crc_tag = "_crc" if cfg.codec.append_crc else ""
    return _sanitize(
        f"{fec}{crc_tag}__{ch}{burst_tag}_p{cfg.chan.flip_prob:g}"
        f"_n{cfg.payload_bytes}_seed{cfg.chan.seed}"
    )

def make_output_dir(cfg, output_root: str = "outputs") -> str:
    ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    base = os.path.join(output_root, f"{ts}__{run_tag(cfg)}")
    os.makedirs(base, exist_ok=True)

    meta = asdict(cfg)
    meta.update({"output_dir": base})
    with open(os.path.join(base, "run_meta.json"), "w", encoding="utf-8") as f:
        json.dump(meta, f, ensure_ascii=False, indent=2)
    return base

def write_json(path: str, obj) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
