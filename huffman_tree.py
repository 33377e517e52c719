import heapq
import itertools
import logging

from errors import EmptyInputError

logger = logging.getLogger(__name__)


### HUFFMAN NODE CLASS ###
class TreeNode:
    """A node in the Huffman tree arena. Children are indices into HuffmanTree.nodes."""

    __slots__ = ("weight", "symbol", "left", "right", "placeholder")

    def __init__(self, weight, symbol=None, left=None, right=None, placeholder=False):
        # symbol: the byte value (0-255). None for internal nodes and the placeholder.
        self.weight = weight
        self.symbol = symbol
        self.left = left
        self.right = right
        self.placeholder = placeholder

    @property
    def is_leaf(self):
        return self.left is None and self.right is None

    def __repr__(self):
        if self.placeholder:
            return "TreeNode(placeholder)"
        if self.is_leaf:
            return f"TreeNode(symbol={self.symbol}, weight={self.weight})"
        return f"TreeNode(weight={self.weight}, left={self.left}, right={self.right})"


### PRIORITY QUEUE ###
class PriorityQueue:
    """
    Min-heap of items keyed by weight.

    Items of equal weight come out in the order they were pushed, so every
    tree built from the same frequencies has the same shape.
    """

    def __init__(self):
        self._heap = []
        self._counter = itertools.count()

    def push(self, weight, item):
        heapq.heappush(self._heap, (weight, next(self._counter), item))

    def pop(self):
        """Removes and returns the item with the smallest weight."""
        if not self._heap:
            raise IndexError("pop from an empty PriorityQueue")
        return heapq.heappop(self._heap)[2]

    def __len__(self):
        return len(self._heap)


### HUFFMAN TREE ###
class HuffmanTree:
    """Flat arena of TreeNodes; `root` is the index of the root node."""

    def __init__(self):
        self.nodes = []
        self.root = None

    def add_leaf(self, symbol, weight):
        self.nodes.append(TreeNode(weight, symbol=symbol))
        return len(self.nodes) - 1

    def add_placeholder(self):
        self.nodes.append(TreeNode(0, placeholder=True))
        return len(self.nodes) - 1

    def merge(self, left, right):
        weight = self.nodes[left].weight + self.nodes[right].weight
        self.nodes.append(TreeNode(weight, left=left, right=right))
        return len(self.nodes) - 1

    def __getitem__(self, index):
        return self.nodes[index]

    @property
    def root_node(self):
        return self.nodes[self.root]

    def leaves(self):
        return [node for node in self.nodes if node.is_leaf]

    def depth(self):
        """Length of the longest root-to-leaf path."""
        deepest = 0
        stack = [(self.root, 0)]
        while stack:
            index, level = stack.pop()
            node = self.nodes[index]
            if node.is_leaf:
                deepest = max(deepest, level)
            else:
                stack.append((node.left, level + 1))
                stack.append((node.right, level + 1))
        return deepest


def build_tree(table):
    """
    Builds the Huffman tree for a FrequencyTable.

    Leaves are queued in ascending byte order and the two lightest nodes are
    merged until one root remains; the first node extracted becomes the left
    child. A table with a single symbol gets a zero-weight placeholder sibling
    so that symbol still receives a one-bit code.
    """
    tree = HuffmanTree()
    queue = PriorityQueue()

    for symbol, freq in table.items():
        queue.push(freq, tree.add_leaf(symbol, freq))

    if len(queue) == 0:
        raise EmptyInputError("Cannot build a tree from an empty frequency table")
    if len(queue) == 1:
        queue.push(0, tree.add_placeholder())

    while len(queue) > 1:
        left = queue.pop()
        right = queue.pop()
        merged = tree.merge(left, right)
        queue.push(tree[merged].weight, merged)

    tree.root = queue.pop()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Built tree with %d nodes, depth %d", len(tree.nodes), tree.depth())
    return tree
