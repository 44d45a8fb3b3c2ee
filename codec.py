"""
Text-level Huffman codec.

encode_text/decode_text are stateless and carry the tree explicitly.
HuffmanCodec wraps them for hosts that only want encode(text) and
decode(bits) and keeps the most recently built tree between the two calls.
"""

import hashlib
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import huffman as huff


@dataclass(frozen=True)
class HuffmanTable:
    root: huff.HuffmanNode
    code_map: Dict[str, str]
    frequencies: Dict[str, int]


@dataclass(frozen=True)
class EncodedText:
    bits: str
    table: HuffmanTable


@dataclass
class CompressionStats:
    symbols: int
    unique_symbols: int
    encoded_bits: int
    fixed_width_bits: int  # same message under a fixed-length code
    packed_bytes: int
    pad_bits: int
    ratio_vs_fixed: float
    average_code_length: float
    entropy: float


def build_table(text: str) -> HuffmanTable:
    frequencies = huff.freq_table(text)
    root = huff.build_huffman_tree(frequencies)
    code_map = huff.generate_huffman_codes(root)
    return HuffmanTable(root=root, code_map=code_map, frequencies=frequencies)


def encode_text(text: str) -> EncodedText:
    if not text:
        raise huff.EmptyInputError("input text is empty")
    table = build_table(text)
    return EncodedText(bits=huff.huffman_encode(text, table.code_map), table=table)


def decode_text(bits: str, table: HuffmanTable) -> str:
    return "".join(huff.huffman_decode(bits, table.root))


def compression_stats(encoded: EncodedText) -> CompressionStats:
    frequencies = encoded.table.frequencies
    symbols = sum(frequencies.values())
    baseline = symbols * huff.fixed_width_bits(len(frequencies))
    packed, pad_bits = huff.pack_bits(encoded.bits)
    return CompressionStats(
        symbols=symbols,
        unique_symbols=len(frequencies),
        encoded_bits=len(encoded.bits),
        fixed_width_bits=baseline,
        packed_bytes=len(packed),
        pad_bits=pad_bits,
        ratio_vs_fixed=len(encoded.bits) / baseline,
        average_code_length=huff.average_code_length(frequencies, encoded.table.code_map),
        entropy=huff.entropy_bits(frequencies),
    )


def code_table(table: HuffmanTable) -> List[Tuple[str, int, str]]:
    """Rows of (symbol, count, codeword), shortest codewords first."""
    rows = [(symbol, table.frequencies[symbol], code) for symbol, code in table.code_map.items()]
    rows.sort(key=lambda row: (len(row[2]), row[0]))
    return rows


def _digest(bits: str) -> str:
    return hashlib.sha256(bits.encode("ascii", errors="replace")).hexdigest()


class HuffmanCodec:
    """
    Session facade: decode() is only valid for the stream returned by the
    latest successful encode() on the same instance. Not safe to share
    across threads.
    """

    def __init__(self):
        self.last: Optional[EncodedText] = None
        self._last_digest: Optional[str] = None

    @property
    def table(self) -> Optional[HuffmanTable]:
        return self.last.table if self.last is not None else None

    def encode(self, text: str) -> str:
        encoded = encode_text(text)
        self.last = encoded
        self._last_digest = _digest(encoded.bits)
        return encoded.bits

    def decode(self, bits: str) -> str:
        if self.last is None:
            raise huff.StaleTreeError("decode called before any successful encode")
        decoded = decode_text(bits, self.last.table)
        # A stream that walks cleanly can still belong to another tree
        if _digest(bits) != self._last_digest:
            raise huff.StaleTreeError("stream was not produced by the most recent encode")
        return decoded

    def stats(self) -> CompressionStats:
        if self.last is None:
            raise huff.StaleTreeError("no message has been encoded yet")
        return compression_stats(self.last)
