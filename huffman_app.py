# huffman_app.py
# Command-line front end for the text codec: load a text file, encode it,
# save or print the encoded bits, and check the round trip.

"""
How to run:
  python huffman_app.py encode notes.txt -o notes.bits --stats
  python huffman_app.py roundtrip notes.txt
  python huffman_app.py codes notes.txt
  cat notes.txt | python huffman_app.py encode -
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import huffman as huff
from codec import HuffmanCodec, CompressionStats, code_table


def read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def write_text(dest: str, text: str) -> None:
    Path(dest).write_text(text, encoding="utf-8")


def print_stats(stats: CompressionStats) -> None:
    print(f"Symbols: {stats.symbols} ({stats.unique_symbols} distinct)")
    print(f"Encoded bits: {stats.encoded_bits} (fixed-width baseline {stats.fixed_width_bits})")
    print(f"Packed size: {stats.packed_bytes} bytes, {stats.pad_bits} pad bits")
    print(f"Ratio vs fixed-width: {stats.ratio_vs_fixed:.3f}")
    print(f"Average code length: {stats.average_code_length:.3f} bits/symbol (entropy {stats.entropy:.3f})")


def _display_symbol(symbol: str) -> str:
    return repr(symbol) if not symbol.isprintable() or symbol == " " else symbol


def cmd_encode(args: argparse.Namespace) -> int:
    text = read_text(args.input)
    if not text:
        print("Status: Input text is empty.", file=sys.stderr)
        return 1

    codec = HuffmanCodec()
    bits = codec.encode(text)
    if args.output:
        write_text(args.output, bits)
        print("Status: File saved.")
    else:
        print(bits)
    if args.stats:
        print_stats(codec.stats())
    print("Status: Encoding completed.")
    return 0


def cmd_roundtrip(args: argparse.Namespace) -> int:
    text = read_text(args.input)
    if not text:
        print("Status: Input text is empty.", file=sys.stderr)
        return 1

    codec = HuffmanCodec()
    bits = codec.encode(text)
    decoded = codec.decode(bits)
    print_stats(codec.stats())
    if decoded != text:
        print("Status: Decoded text does not match input.", file=sys.stderr)
        return 1
    print("Status: Decoding completed.")
    return 0


def cmd_codes(args: argparse.Namespace) -> int:
    text = read_text(args.input)
    if not text:
        print("Status: Input text is empty.", file=sys.stderr)
        return 1

    codec = HuffmanCodec()
    codec.encode(text)
    for symbol, count, code in code_table(codec.table):
        print(f"{_display_symbol(symbol)}\t{count}\t{code}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Huffman text encoder")
    sub = ap.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="Encode a text file into a string of 0/1 bits")
    enc.add_argument("input", help="Text file to encode ('-' for stdin)")
    enc.add_argument("-o", "--output", type=str, default=None, help="Write the encoded bits here instead of stdout")
    enc.add_argument("--stats", action="store_true", help="Print compression statistics")
    enc.set_defaults(func=cmd_encode)

    rt = sub.add_parser("roundtrip", help="Encode then decode in one session and verify")
    rt.add_argument("input", help="Text file to check ('-' for stdin)")
    rt.set_defaults(func=cmd_roundtrip)

    codes = sub.add_parser("codes", help="Print the codeword assigned to every symbol")
    codes.add_argument("input", help="Text file to analyze ('-' for stdin)")
    codes.set_defaults(func=cmd_codes)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except huff.HuffmanError as e:
        print(f"Status: Error during {args.command}: {e}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"Status: File error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
