# experiments.py
# Compression experiments for the Huffman text codec

"""
Experiment driver: Huffman coding vs a fixed-width code

Runs repeated experiments over synthetic text and records timing,
compression and correctness for each run.

Outputs (in --outdir):
  - metrics.csv     (raw row per run)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --size_kb 64 --max_kb 1024
  python experiments.py --outdir results --generators uniform,zipf,english_like --no_exp2
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import string
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple, Callable

import matplotlib.pyplot as plt

import huffman as huff
from codec import encode_text, decode_text, compression_stats


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


# Synthetic text generators

ALPHABET = string.ascii_letters + string.digits + string.punctuation + " \n"

def _sample_cdf(rng: random.Random, cdf: List[float]) -> int:
    r = rng.random()
    lo, hi = 0, len(cdf) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if r <= cdf[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo

def _weighted_text(size: int, chars: str, weights: List[float], rng: random.Random) -> str:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)
    return "".join(chars[_sample_cdf(rng, cdf)] for _ in range(size))

def gen_uniform(size: int, alphabet: int = len(ALPHABET), seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = ALPHABET[:alphabet]
    return "".join(rng.choice(chars) for _ in range(size))

def gen_repetitive(size: int, dominant: str = "A", dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    others = [c for c in ALPHABET if c != dominant]
    return "".join(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 64, s: float = 1.2, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = ALPHABET[:alphabet]
    weights = [1.0 / ((i + 1) ** s) for i in range(len(chars))]
    return _weighted_text(size, chars, weights, rng)

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = " etaoinshrdlcumwfgypbvkjxqETAOINSHRDLCUMWFGYPBVKJXQ\n"
    weights = []
    for ch in chars:
        if ch == " ":
            weights.append(13.0)
        elif ch == "\n":
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)
    return _weighted_text(size, chars, weights, rng)

def gen_single_symbol(size: int, seed: int = 0) -> str:
    return "a" * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform": lambda size, seed: gen_uniform(size, seed=seed),
    "uniform16": lambda size, seed: gen_uniform(size, alphabet=16, seed=seed),
    "zipf": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "single_symbol": lambda size, seed: gen_single_symbol(size, seed=seed),
}

def generate_dataset(name: str, size: int, seed: int) -> Tuple[str, str]:
    """
    Unknown generator names fall back to uniform text so a typo in
    --generators still produces a run; the returned name records the fallback.
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform", gen_uniform(size, seed=seed)
    return name, fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    text_size: int
    run_id: int
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    encoded_bits: int
    fixed_width_bits: int
    packed_bytes: int
    pad_bits: int
    compression_ratio: float  # encoded bits / fixed-width bits
    avg_code_length: float
    entropy: float
    correctness_ok: int  # 1 or 0


def run_one(text: str) -> MetricRow:
    # tree build
    t0 = now_ns()
    ft = huff.freq_table(text)
    root = huff.build_huffman_tree(ft)
    huff.generate_huffman_codes(root)
    t1 = now_ns()
    build_ms = ns_to_ms(t1 - t0)

    # encode (rebuilds the table, as a host calling encode() would)
    t2 = now_ns()
    encoded = encode_text(text)
    t3 = now_ns()
    encode_ms = ns_to_ms(t3 - t2)

    # decode
    t4 = now_ns()
    decoded = decode_text(encoded.bits, encoded.table)
    t5 = now_ns()
    decode_ms = ns_to_ms(t5 - t4)

    stats = compression_stats(encoded)
    packed, pad_bits = huff.pack_bits(encoded.bits)
    packed_ok = huff.unpack_bits(packed, pad_bits) == encoded.bits

    return MetricRow(
        exp_name="",
        dataset_name="",
        text_size=len(text),
        run_id=0,
        unique_symbols=stats.unique_symbols,
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        encoded_bits=stats.encoded_bits,
        fixed_width_bits=stats.fixed_width_bits,
        packed_bytes=stats.packed_bytes,
        pad_bits=stats.pad_bits,
        compression_ratio=stats.ratio_vs_fixed,
        avg_code_length=stats.average_code_length,
        entropy=stats.entropy,
        correctness_ok=1 if decoded == text and packed_ok else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


SUMMARY_METRICS = ("compression_ratio", "avg_code_length", "entropy", "encode_ms", "decode_ms", "build_ms", "total_ms")

def group_summary(rows: List[MetricRow], out_path: Path) -> List[Dict[str, object]]:
    """
    Group by exp_name, dataset_name, text_size and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.text_size)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "text_size", "n_runs"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    summary = []
    for key, items in sorted(key_to.items()):
        exp_name, dataset_name, size = key
        row: Dict[str, object] = {
            "exp_name": exp_name,
            "dataset_name": dataset_name,
            "text_size": size,
            "n_runs": len(items),
        }
        for m in SUMMARY_METRICS:
            row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
        row["correctness_ok_rate"] = sum(x.correctness_ok for x in items) / len(items)
        summary.append(row)

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        w.writerows(summary)
    return summary



# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    plt.figure()
    plt.plot(x, [mean_for(d, "avg_code_length") for d in datasets], marker="o", label="huffman")
    plt.plot(x, [mean_for(d, "entropy") for d in datasets], marker="x", linestyle="--", label="entropy")
    plt.plot(x, [mean_for(d, "fixed_width_bits") / mean_for(d, "text_size") for d in datasets],
             marker="s", linestyle=":", label="fixed-width")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Code Length by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_bits_per_symbol.png", dpi=200)
    plt.close()

    plt.figure()
    plt.plot(x, [mean_for(d, "compression_ratio") for d in datasets], marker="o")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Huffman Bits / Fixed-Width Bits")
    plt.title("Experiment 1: Compression Ratio by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "exp1_compression_ratio.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    distributions = sorted(set(r.dataset_name for r in exp_rows))

    for dist in distributions:
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.text_size for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.text_size == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        plt.plot(sizes, [mean_size(s, "encode_ms") for s in sizes], marker="o", label="encode")
        plt.plot(sizes, [mean_size(s, "decode_ms") for s in sizes], marker="o", label="decode")
        plt.xlabel("Text Size (symbols)")
        plt.ylabel("Time (ms)")
        plt.title(f"Experiment 2: Encode/Decode Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_time_{dist}.png", dpi=200)
        plt.close()



# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")

    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")
    ap.add_argument("--no_plots", action="store_true", help="Write CSV files only")

    # Experiment 1 controls
    ap.add_argument("--size_kb", type=int, default=64, help="Experiment 1 fixed text size in KB")
    ap.add_argument("--generators", type=str, default="uniform,zipf,repetitive90,english_like,single_symbol",
                    help="Comma-separated generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--min_kb", type=int, default=4, help="Experiment 2 min size in KB (power-of-two growth)")
    ap.add_argument("--max_kb", type=int, default=512, help="Experiment 2 max size in KB (power-of-two growth)")
    ap.add_argument("--exp2_generators", type=str, default="uniform,english_like",
                    help="Comma-separated generator names for experiment 2")
    return ap

def main(argv: List[str] = None) -> int:
    args = build_parser().parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.size_kb) * 1024
        for gen_name in parse_csv_list(args.generators):
            for run_id in range(1, args.runs + 1):
                dataset_name, text = generate_dataset(gen_name, fixed_size, args.seed + run_id)
                row = run_one(text)
                row.exp_name = "exp1_distribution"
                row.dataset_name = dataset_name
                row.run_id = run_id
                rows.append(row)

    # Experiment 2: size scaling (powers of 2)
    if not args.no_exp2:
        sizes: List[int] = []
        s = max(1, args.min_kb) * 1024
        while s <= max(1, args.max_kb) * 1024:
            sizes.append(s)
            s *= 2

        for gen_name in parse_csv_list(args.exp2_generators):
            for size in sizes:
                for run_id in range(1, args.runs + 1):
                    dataset_name, text = generate_dataset(gen_name, size, args.seed + 10_000 + size + run_id)
                    row = run_one(text)
                    row.exp_name = "exp2_size_scaling"
                    row.dataset_name = dataset_name
                    row.run_id = run_id
                    rows.append(row)

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_experiment_1(rows, outdir)
        plot_experiment_2(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0 if ok_rate == 1.0 or not rows else 1


if __name__ == "__main__":
    raise SystemExit(main())
