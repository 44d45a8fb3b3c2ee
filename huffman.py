import heapq
import math
from collections import Counter
from typing import Dict, Hashable, Iterable, List, Sequence, Tuple


class HuffmanError(ValueError):
    """Base class for every failure raised by the codec."""


class EmptyInputError(HuffmanError):
    pass


class EmptyAlphabetError(HuffmanError):
    pass


class UnknownSymbolError(HuffmanError):
    pass


class StaleTreeError(HuffmanError):
    pass


class MalformedStreamError(HuffmanError):
    pass


class HuffmanNode: # Node for Huffman tree
    __slots__ = ("weight",)

    def __init__(self, weight: int):
        self.weight = weight # sum of the frequencies below this node

    @property
    def is_leaf(self) -> bool:
        return False


class Leaf(HuffmanNode):
    __slots__ = ("symbol",)

    def __init__(self, symbol, weight: int):
        super().__init__(weight)
        self.symbol = symbol

    @property
    def is_leaf(self) -> bool:
        return True

    def __repr__(self):
        return f"Leaf({self.symbol!r}, {self.weight})"


class Internal(HuffmanNode):
    __slots__ = ("left", "right")

    def __init__(self, left: HuffmanNode, right: HuffmanNode):
        super().__init__(left.weight + right.weight)
        self.left = left
        self.right = right

    def __repr__(self):
        return f"Internal({self.weight}, {self.left!r}, {self.right!r})"


def freq_table(symbols: Iterable[Hashable]) -> Dict[Hashable, int]:
    return dict(Counter(symbols))


def build_huffman_tree(frequency_table: Dict[Hashable, int]) -> HuffmanNode: # frequency_table: dict of symbol -> frequency
    """
    Greedy Huffman merge.

    Heap entries are (weight, seq, node). Leaves get seq in ascending symbol
    order and each merged node gets the next seq, so equal weights always
    pop in the same order and the tree is reproducible.
    """
    if not frequency_table:
        raise EmptyAlphabetError("frequency table has no symbols")

    priority_queue: List[Tuple[int, int, HuffmanNode]] = []
    for seq, (symbol, frequency) in enumerate(sorted(frequency_table.items())):
        if frequency < 1:
            raise HuffmanError(f"frequency for {symbol!r} must be >= 1, got {frequency}")
        priority_queue.append((frequency, seq, Leaf(symbol, frequency)))
    heapq.heapify(priority_queue)

    seq = len(priority_queue)
    while len(priority_queue) > 1:
        _, _, left = heapq.heappop(priority_queue)
        _, _, right = heapq.heappop(priority_queue)
        merged_node = Internal(left, right)
        heapq.heappush(priority_queue, (merged_node.weight, seq, merged_node))
        seq += 1

    return priority_queue[0][2] # root of the tree


def generate_huffman_codes(root: HuffmanNode) -> Dict[Hashable, str]: # root: root of the Huffman tree
    # Lone leaf root: the walk never descends, so the sole symbol gets "0"
    if root.is_leaf:
        return {root.symbol: "0"}

    codes = {}
    stack = [(root, "")]
    while stack:
        node, current_code = stack.pop()
        if node.is_leaf:
            codes[node.symbol] = current_code
            continue
        stack.append((node.right, current_code + "1"))
        stack.append((node.left, current_code + "0"))
    return codes


def huffman_encode(symbols: Iterable[Hashable], code_map: Dict[Hashable, str]) -> str:
    parts = []
    for symbol in symbols:
        code = code_map.get(symbol)
        if code is None:
            raise UnknownSymbolError(f"no codeword for symbol {symbol!r}")
        parts.append(code)
    return "".join(parts)


def huffman_decode(bitstring: str, root: HuffmanNode) -> list: # bitstring: the encoded string of '0's and '1's
    decoded = []

    if root.is_leaf:
        for position, bit in enumerate(bitstring):
            if bit != "0":
                raise MalformedStreamError(f"unexpected {bit!r} at bit {position} for a single-symbol tree")
            decoded.append(root.symbol)
        return decoded

    current_node = root
    for position, bit in enumerate(bitstring):
        if bit == "0":
            current_node = current_node.left
        elif bit == "1":
            current_node = current_node.right
        else:
            raise MalformedStreamError(f"invalid character {bit!r} at bit {position}")

        if current_node is None:
            raise MalformedStreamError(f"bit {position} leads to a missing child")
        if current_node.is_leaf: # reached a leaf
            decoded.append(current_node.symbol)
            current_node = root

    if current_node is not root:
        raise MalformedStreamError("stream ends in the middle of a codeword")
    return decoded


def pack_bits(bitstring: str) -> Tuple[bytes, int]:
    """
    Packs a '0'/'1' string MSB-first into bytes.
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for ch in bitstring:
        if ch not in "01":
            raise MalformedStreamError(f"invalid character {ch!r} in bitstring")
        acc = (acc << 1) | (1 if ch == "1" else 0)
        acc_bits += 1
        if acc_bits == 8:
            out.append(acc)
            acc = 0
            acc_bits = 0

    pad_bits = 0
    if acc_bits != 0:
        pad_bits = 8 - acc_bits
        out.append((acc << pad_bits) & 0xFF)

    return bytes(out), pad_bits


def unpack_bits(packed: bytes, pad_bits: int) -> str:
    if not 0 <= pad_bits <= 7:
        raise MalformedStreamError(f"pad_bits must be in 0..7, got {pad_bits}")
    if pad_bits and not packed:
        raise MalformedStreamError("padding declared for an empty payload")

    total_bits = len(packed) * 8 - pad_bits
    bits = "".join(format(byte, "08b") for byte in packed)
    return bits[:total_bits]


def fixed_width_bits(alphabet_size: int) -> int:
    # bits per symbol for a plain fixed-length code over the same alphabet
    if alphabet_size < 1:
        raise EmptyAlphabetError("alphabet is empty")
    return max(1, math.ceil(math.log2(alphabet_size)))


def average_code_length(frequency_table: Dict[Hashable, int], code_map: Dict[Hashable, str]) -> float:
    total = sum(frequency_table.values())
    if total == 0:
        raise EmptyAlphabetError("frequency table has no symbols")
    return sum(count * len(code_map[symbol]) for symbol, count in frequency_table.items()) / total


def entropy_bits(frequency_table: Dict[Hashable, int]) -> float:
    """Shannon entropy of the empirical distribution, in bits per symbol."""
    total = sum(frequency_table.values())
    if total == 0:
        raise EmptyAlphabetError("frequency table has no symbols")
    return -sum((count / total) * math.log2(count / total) for count in frequency_table.values())


def is_prefix_free(codewords: Sequence[str]) -> bool:
    # after sorting, a prefix always sits directly before some word it prefixes
    ordered = sorted(codewords)
    return all(not ordered[i + 1].startswith(ordered[i]) for i in range(len(ordered) - 1))
