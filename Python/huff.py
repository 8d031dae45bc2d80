#Brad Arrington
import io
import sys
from typing import BinaryIO, Optional

from bitio import CompressorBitio

BITS_PER_WORD = 8
BITS_PER_INT = 32
ALPH_SIZE = 1 << BITS_PER_WORD
END_OF_STREAM = ALPH_SIZE
HUFF_NUMBER = 0xFACE8200
HUFF_TREE = HUFF_NUMBER | 1
MAX_NODES = 2 * (END_OF_STREAM + 1) - 1
COMPRESSION_NAME = "static order 0 model with Huffman coding, tree header"
USAGE = "infile outfile [-d]\n\nSpecifying -d will dump the modeling data\n"


class FormatError(Exception):
    """Compressed input is not a well formed Huffman tree-header stream."""


class Node:
    # Nodes 0..END_OF_STREAM are the leaves for their own symbol, anything
    # past that is an internal node appended while the tree is built.
    def __init__(self):
        self.count = 0
        self.saved_count = 0
        self.child_0 = 0
        self.child_1 = 0


class Code:
    def __init__(self):
        self.code = 0
        self.code_bits = 0


def is_leaf(node: int) -> bool:
    return node <= END_OF_STREAM


def new_node_table() -> list[Node]:
    return [Node() for _ in range(END_OF_STREAM + 1)]


def compress_file(input_bit_file: 'CompressorBitio.BitFile', output_bit_file: 'CompressorBitio.BitFile', argc: int, argv: list[str]):
    if not input_bit_file.seekable():
        raise io.UnsupportedOperation("compression needs a rewindable input")

    counts = count_bytes(input_bit_file)
    nodes = scale_counts(counts)
    root_node = build_tree(nodes)
    codes = [Code() for _ in range(END_OF_STREAM + 1)]
    convert_tree_to_code(nodes, codes, 0, 0, root_node)

    if "-d" in argv[:argc]:
        print_model(nodes, codes, root_node)

    output_bit_file.output_bits(HUFF_TREE, BITS_PER_INT)
    output_tree(output_bit_file, nodes, root_node)

    input_bit_file.reset()
    compress_data(input_bit_file, output_bit_file, codes)

    report_unknown_arguments(argc, argv)


def expand_file(input_bit_file: 'CompressorBitio.BitFile', output_file: BinaryIO, argc: int, argv: list[str]):
    magic = input_magic(input_bit_file)
    if magic != HUFF_TREE:
        raise FormatError(f"illegal header starts with {magic:#010x}")

    nodes, root_node = input_tree(input_bit_file)

    if "-d" in argv[:argc]:
        print_model(nodes, None, root_node)

    expand_data(input_bit_file, output_file, nodes, root_node)

    report_unknown_arguments(argc, argv)


def compress(input_stream: BinaryIO, output_stream: BinaryIO, argv: Optional[list[str]] = None):
    """Compress one open binary stream into another, closing both.

    The input is read twice, so it has to be seekable.
    """
    argv = argv or []
    input_bit_file = CompressorBitio.BitFile(input_stream, True)
    output_bit_file = CompressorBitio.BitFile(output_stream, False)
    try:
        compress_file(input_bit_file, output_bit_file, len(argv), argv)
    finally:
        try:
            output_bit_file.close_bit_file()
        finally:
            input_bit_file.close_bit_file()


def decompress(input_stream: BinaryIO, output_stream: BinaryIO, argv: Optional[list[str]] = None):
    argv = argv or []
    input_bit_file = CompressorBitio.BitFile(input_stream, True)
    try:
        expand_file(input_bit_file, output_stream, len(argv), argv)
    finally:
        try:
            output_stream.close()
        finally:
            input_bit_file.close_bit_file()


def report_unknown_arguments(argc: int, argv: list[str]):
    for arg in argv[:argc]:
        if arg != "-d":
            print(f"Unknown argument: {arg}")


def count_bytes(input_bit_file) -> list[int]:
    counts = [0] * (END_OF_STREAM + 1)
    while True:
        try:
            c = input_bit_file.input_bits(BITS_PER_WORD)
        except EOFError:
            break
        counts[c] += 1

    counts[END_OF_STREAM] = 1
    return counts


def scale_counts(counts: list[int]) -> list[Node]:
    nodes = new_node_table()
    for i in range(END_OF_STREAM + 1):
        nodes[i].count = counts[i]

    # An empty input only has the end of stream symbol, so byte 0 is added
    # to give the tree its second leaf.
    if not any(counts[:END_OF_STREAM]):
        nodes[0].count = 1

    return nodes


def build_tree(nodes: list[Node]) -> int:
    """Merge the two lightest live nodes until a single root is left.

    Ties go to the node created first: leaves in symbol order, then internal
    nodes in the order they were merged. The first node picked becomes
    child_0.
    """
    while True:
        min_1 = None
        min_2 = None

        for i in range(len(nodes)):
            if nodes[i].count != 0:
                if min_1 is None or nodes[i].count < nodes[min_1].count:
                    min_2 = min_1
                    min_1 = i
                elif min_2 is None or nodes[i].count < nodes[min_2].count:
                    min_2 = i

        if min_2 is None:
            break

        node = Node()
        node.count = nodes[min_1].count + nodes[min_2].count
        node.child_0 = min_1
        node.child_1 = min_2

        # Save counts and zero them out to prevent re-selection
        nodes[min_1].saved_count = nodes[min_1].count
        nodes[min_1].count = 0
        nodes[min_2].saved_count = nodes[min_2].count
        nodes[min_2].count = 0

        nodes.append(node)

    if min_1 is None or is_leaf(min_1):
        raise ValueError("a Huffman tree needs at least two leaves")

    nodes[min_1].saved_count = nodes[min_1].count
    return min_1


def convert_tree_to_code(nodes: list[Node], codes: list[Code], code_so_far: int, bits: int, node: int):
    if is_leaf(node):
        codes[node].code = code_so_far
        codes[node].code_bits = bits
        return

    code_so_far <<= 1
    bits = bits + 1
    convert_tree_to_code(nodes, codes, code_so_far, bits, nodes[node].child_0)
    convert_tree_to_code(nodes, codes, code_so_far | 1, bits, nodes[node].child_1)


def output_tree(output_bit_file, nodes: list[Node], node: int):
    if is_leaf(node):
        output_bit_file.output_bit(1)
        output_bit_file.output_bits(node, BITS_PER_WORD + 1)
        return

    output_bit_file.output_bit(0)
    output_tree(output_bit_file, nodes, nodes[node].child_0)
    output_tree(output_bit_file, nodes, nodes[node].child_1)


def input_magic(input_bit_file) -> int:
    try:
        return input_bit_file.input_bits(BITS_PER_INT)
    except EOFError:
        raise FormatError("input is too short to hold a magic number") from None


def input_header_bits(input_bit_file, count: int) -> int:
    try:
        return input_bit_file.input_bits(count)
    except EOFError:
        raise FormatError("tree header ends before the tree is complete") from None


def input_tree(input_bit_file):
    nodes = new_node_table()
    root_node = input_node(input_bit_file, nodes, set())
    if is_leaf(root_node):
        raise FormatError("tree header holds a single leaf")
    return nodes, root_node


def input_node(input_bit_file, nodes: list[Node], leaves: set) -> int:
    if input_header_bits(input_bit_file, 1) == 1:
        value = input_header_bits(input_bit_file, BITS_PER_WORD + 1)
        if value > END_OF_STREAM:
            raise FormatError(f"leaf value {value} is not a symbol")
        if value in leaves:
            raise FormatError(f"symbol {value} appears twice in the tree header")
        leaves.add(value)
        return value

    if len(nodes) >= MAX_NODES:
        raise FormatError("tree header has too many internal nodes")

    index = len(nodes)
    node = Node()
    nodes.append(node)
    node.child_0 = input_node(input_bit_file, nodes, leaves)
    node.child_1 = input_node(input_bit_file, nodes, leaves)
    return index


def compress_data(input_bit_file, output_bit_file, codes: list[Code]):
    while True:
        try:
            c = input_bit_file.input_bits(BITS_PER_WORD)
        except EOFError:
            break
        output_bit_file.output_bits(codes[c].code, codes[c].code_bits)

    output_bit_file.output_bits(codes[END_OF_STREAM].code, codes[END_OF_STREAM].code_bits)


def expand_data(input_bit_file, output_file: BinaryIO, nodes: list[Node], root_node: int):
    while True:
        node = root_node

        while not is_leaf(node):
            try:
                bit = input_bit_file.input_bit()
            except EOFError:
                raise FormatError("compressed data ends before the end of stream code") from None
            node = nodes[node].child_1 if bit else nodes[node].child_0

        if node == END_OF_STREAM:
            break

        output_file.write(bytes([node]))


def print_char(c: int):
    if 0x20 <= c < 127:
        print(f"'{chr(c)}'", end="")
    elif c == END_OF_STREAM:
        print("EOF", end="")
    else:
        print(f"{c:3d}", end="")


def file_print_binary(file, code: int, bits: int):
    mask = 1 << (bits - 1)
    while mask != 0:
        file.write("1" if code & mask else "0")
        mask >>= 1


def print_node(node: int):
    if is_leaf(node):
        print_char(node)
    else:
        print(f"{node:3d}", end="")


def print_model(nodes: list[Node], codes: Optional[list[Code]], node: int):
    """Dump the tree below ``node`` in preorder, one line per node."""
    print("node=", end="")
    print_node(node)
    print(f"  count={nodes[node].saved_count:3d}", end="")

    if is_leaf(node):
        if codes is not None:
            print("  Huffman code=", end="")
            file_print_binary(sys.stdout, codes[node].code, codes[node].code_bits)
        print()
        return

    print("  child_0=", end="")
    print_node(nodes[node].child_0)
    print("  child_1=", end="")
    print_node(nodes[node].child_1)
    print()

    print_model(nodes, codes, nodes[node].child_0)
    print_model(nodes, codes, nodes[node].child_1)
