import heapq

import pytest

import huffman as huff


ABRACADABRA = "abracadabra"


def _walk(root):
    leaves, internals = 0, 0
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf:
            leaves += 1
        else:
            internals += 1
            stack.extend((node.left, node.right))
    return leaves, internals


def _optimal_cost(frequencies):
    heap = list(frequencies)
    heapq.heapify(heap)
    cost = 0
    while len(heap) > 1:
        merged = heapq.heappop(heap) + heapq.heappop(heap)
        cost += merged
        heapq.heappush(heap, merged)
    return cost


def test_freq_table_counts():
    assert huff.freq_table(ABRACADABRA) == {"a": 5, "b": 2, "r": 2, "c": 1, "d": 1}
    assert huff.freq_table("") == {}


def test_build_tree_empty_raises():
    with pytest.raises(huff.EmptyAlphabetError):
        huff.build_huffman_tree({})


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        huff.build_huffman_tree({})


def test_build_tree_rejects_zero_frequency():
    with pytest.raises(huff.HuffmanError):
        huff.build_huffman_tree({"a": 0, "b": 3})


def test_tree_shape_is_full_binary():
    root = huff.build_huffman_tree(huff.freq_table(ABRACADABRA))
    leaves, internals = _walk(root)
    assert leaves == 5
    assert internals == leaves - 1
    assert root.weight == len(ABRACADABRA)


def test_abracadabra_codes_are_deterministic():
    root = huff.build_huffman_tree(huff.freq_table(ABRACADABRA))
    codes = huff.generate_huffman_codes(root)
    assert codes == {"a": "0", "c": "100", "d": "101", "b": "110", "r": "111"}

    bits = huff.huffman_encode(ABRACADABRA, codes)
    assert bits == "01101110100010101101110"
    assert len(bits) <= 3 * len(ABRACADABRA)
    assert "".join(huff.huffman_decode(bits, root)) == ABRACADABRA


def test_same_input_same_stream():
    text = "the quick brown fox jumps over the lazy dog"
    first = huff.generate_huffman_codes(huff.build_huffman_tree(huff.freq_table(text)))
    second = huff.generate_huffman_codes(huff.build_huffman_tree(huff.freq_table(text)))
    assert first == second


@pytest.mark.parametrize("text", [
    ABRACADABRA,
    "ab",
    "mississippi river",
    "héllo wörld ✓✓",
    "\0a\0b\0",
    "line one\nline two\r\n\ttabbed",
])
def test_roundtrip(text):
    root = huff.build_huffman_tree(huff.freq_table(text))
    codes = huff.generate_huffman_codes(root)
    assert huff.is_prefix_free(list(codes.values()))
    bits = huff.huffman_encode(text, codes)
    assert "".join(huff.huffman_decode(bits, root)) == text


def test_null_character_is_an_ordinary_symbol():
    root = huff.build_huffman_tree({"\0": 3, "x": 1})
    codes = huff.generate_huffman_codes(root)
    assert set(codes) == {"\0", "x"}


def test_single_symbol_tree():
    root = huff.build_huffman_tree(huff.freq_table("aaaa"))
    assert root.is_leaf
    codes = huff.generate_huffman_codes(root)
    assert codes == {"a": "0"}
    bits = huff.huffman_encode("aaaa", codes)
    assert bits == "0000"
    assert huff.huffman_decode(bits, root) == ["a"] * 4


def test_single_symbol_tree_rejects_one_bits():
    root = huff.build_huffman_tree({"a": 2})
    with pytest.raises(huff.MalformedStreamError):
        huff.huffman_decode("01", root)


@pytest.mark.parametrize("frequencies", [
    {"a": 5, "b": 2, "r": 2, "c": 1, "d": 1},
    {"a": 1, "b": 1, "c": 1, "d": 1},
    {"x": 45, "y": 13, "z": 12, "w": 16, "v": 9, "u": 5},
    {"p": 1, "q": 1, "r": 2, "s": 3, "t": 5, "u": 8, "v": 13},
])
def test_code_length_is_optimal(frequencies):
    root = huff.build_huffman_tree(frequencies)
    codes = huff.generate_huffman_codes(root)
    weighted = sum(count * len(codes[s]) for s, count in frequencies.items())
    assert weighted == _optimal_cost(frequencies.values())

    avg = huff.average_code_length(frequencies, codes)
    entropy = huff.entropy_bits(frequencies)
    assert entropy <= avg + 1e-9
    assert avg < entropy + 1


def test_skewed_tree_does_not_hit_recursion_limit():
    n = 1500
    frequencies = {chr(0x100 + i): 2 ** i for i in range(n)}
    root = huff.build_huffman_tree(frequencies)
    codes = huff.generate_huffman_codes(root)
    assert max(len(c) for c in codes.values()) == n - 1
    assert huff.is_prefix_free(list(codes.values()))

    deepest = chr(0x100)
    assert huff.huffman_decode(codes[deepest] * 3, root) == [deepest] * 3


def test_encode_unknown_symbol():
    with pytest.raises(huff.UnknownSymbolError):
        huff.huffman_encode("az", {"a": "0"})


def test_decode_truncated_stream():
    root = huff.build_huffman_tree(huff.freq_table(ABRACADABRA))
    bits = huff.huffman_encode(ABRACADABRA, huff.generate_huffman_codes(root))
    with pytest.raises(huff.MalformedStreamError):
        huff.huffman_decode(bits[:-2], root)


def test_decode_rejects_non_binary_characters():
    root = huff.build_huffman_tree(huff.freq_table(ABRACADABRA))
    with pytest.raises(huff.MalformedStreamError):
        huff.huffman_decode("0120", root)


def test_decode_empty_stream_is_empty():
    root = huff.build_huffman_tree(huff.freq_table(ABRACADABRA))
    assert huff.huffman_decode("", root) == []


def test_pack_bits():
    assert huff.pack_bits("") == (b"", 0)
    assert huff.pack_bits("1") == (b"\x80", 7)
    assert huff.pack_bits("01101110100010101101110") == (b"\x6e\x8a\xdc", 1)
    assert huff.pack_bits("11111111") == (b"\xff", 0)


def test_unpack_bits():
    assert huff.unpack_bits(b"\x80", 7) == "1"
    assert huff.unpack_bits(b"\x6e\x8a\xdc", 1) == "01101110100010101101110"
    assert huff.unpack_bits(b"", 0) == ""


@pytest.mark.parametrize("packed,pad_bits", [(b"\x00", 8), (b"\x00", -1), (b"", 3)])
def test_unpack_bits_rejects_bad_padding(packed, pad_bits):
    with pytest.raises(huff.MalformedStreamError):
        huff.unpack_bits(packed, pad_bits)


def test_pack_bits_rejects_non_binary_characters():
    with pytest.raises(huff.MalformedStreamError):
        huff.pack_bits("01x")


@pytest.mark.parametrize("size,expected", [(1, 1), (2, 1), (3, 2), (5, 3), (8, 3), (9, 4), (256, 8)])
def test_fixed_width_bits(size, expected):
    assert huff.fixed_width_bits(size) == expected


def test_fixed_width_bits_empty_alphabet():
    with pytest.raises(huff.EmptyAlphabetError):
        huff.fixed_width_bits(0)


def test_entropy_of_uniform_distribution():
    assert huff.entropy_bits({"a": 3, "b": 3, "c": 3, "d": 3}) == pytest.approx(2.0)
    assert huff.entropy_bits({"a": 7}) == 0.0


def test_is_prefix_free():
    assert huff.is_prefix_free(["0", "10", "110", "111"])
    assert not huff.is_prefix_free(["0", "01", "11"])
    assert not huff.is_prefix_free(["10", "0", "101"])
