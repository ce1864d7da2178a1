import heapq

from .errors import MalformedContainer


### HUFFMAN NODE CLASS ###
class HuffmanNode:
    """Represents a node in the Huffman tree."""
    def __init__(self, symbol=None, freq=0, left=None, right=None, order=0):
        # symbol: The byte value (0-255). None for internal nodes.
        self.symbol = symbol
        self.freq = freq
        self.left = left
        self.right = right
        # order: insertion counter, breaks frequency ties in the heap
        self.order = order

    def is_leaf(self):
        return self.symbol is not None

    # Equal frequencies fall back to insertion order so the tree is reproducible.
    def __lt__(self, other):
        return (self.freq, self.order) < (other.freq, other.order)


### FREQUENCY COUNTING ###
def calculate_frequency(data):
    """Counts how often each byte occurs in data."""
    frequency = {}
    for byte in data:
        frequency[byte] = frequency.get(byte, 0) + 1
    return frequency


### TREE AND CODE GENERATION ###
def build_tree(frequency):
    """
    Builds the Huffman tree from a byte -> count mapping.
    Returns the root node, or None when the mapping is empty.
    """
    priority_queue = []
    order = 0
    # Leaves enter the heap in ascending symbol order
    for symbol in sorted(frequency):
        heapq.heappush(priority_queue, HuffmanNode(symbol=symbol, freq=frequency[symbol], order=order))
        order += 1

    if not priority_queue:
        return None

    while len(priority_queue) > 1:
        left = heapq.heappop(priority_queue)
        right = heapq.heappop(priority_queue)

        parent = HuffmanNode(freq=left.freq + right.freq, left=left, right=right, order=order)
        order += 1
        heapq.heappush(priority_queue, parent)

    return priority_queue[0]


def generate_codes(root):
    """
    Walks the tree and returns the code table {symbol: '0'/'1' string}.
    A tree made of a single leaf gets the one-bit code '0'.
    """
    huffman_codes = {}

    def generate_codes_recursive(node, current_code):
        if node is None:
            return
        if node.is_leaf():
            huffman_codes[node.symbol] = current_code or '0'
            return

        generate_codes_recursive(node.left, current_code + '0')
        generate_codes_recursive(node.right, current_code + '1')

    generate_codes_recursive(root, "")
    return huffman_codes


def rebuild_tree(huffman_codes):
    """
    Rebuilds a decoding tree from a code table by inserting every code
    as a path from the root, creating internal nodes on demand.
    """
    root = HuffmanNode()

    for symbol, code in huffman_codes.items():
        if not code:
            raise MalformedContainer(f"Empty code for symbol {symbol}")

        current = root
        for bit in code:
            if current.is_leaf():
                raise MalformedContainer(f"Code {code!r} passes through another symbol's leaf")
            if bit == '0':
                if current.left is None:
                    current.left = HuffmanNode()
                current = current.left
            elif bit == '1':
                if current.right is None:
                    current.right = HuffmanNode()
                current = current.right
            else:
                raise MalformedContainer(f"Invalid character {bit!r} in code")

        if current.is_leaf() or current.left is not None or current.right is not None:
            raise MalformedContainer(f"Code {code!r} is not prefix-free")
        current.symbol = symbol

    return root


### ENCODING / DECODING ###
def encode(data, huffman_codes):
    """Concatenates the code of every byte of data into one bit string."""
    return ''.join(huffman_codes[byte] for byte in data)


def decode(bitstring, root):
    """
    Decodes a bit string by walking the tree from the root, emitting a
    byte at every leaf and starting over at the root.
    """
    decoded_bytes = bytearray()
    current_node = root

    for bit in bitstring:
        current_node = current_node.left if bit == '0' else current_node.right
        if current_node is None:
            raise MalformedContainer("Bit sequence does not match any code")

        if current_node.is_leaf():
            decoded_bytes.append(current_node.symbol)
            current_node = root

    if current_node is not root:
        raise MalformedContainer("Payload ends in the middle of a code")

    return bytes(decoded_bytes)
