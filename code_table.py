from errors import UnknownSymbolError


### CODE TABLE ###
class CodeTable:
    """Maps byte values to their Huffman code, a string of '0'/'1' characters."""

    def __init__(self, codes=None):
        self.codes = dict(codes or {})

    def __getitem__(self, symbol):
        try:
            return self.codes[symbol]
        except KeyError:
            raise UnknownSymbolError(symbol) from None

    def __contains__(self, symbol):
        return symbol in self.codes

    def __len__(self):
        return len(self.codes)

    def __iter__(self):
        return iter(self.codes)

    def items(self):
        return self.codes.items()

    def lengths(self):
        """Code length in bits for every symbol."""
        return {symbol: len(code) for symbol, code in self.codes.items()}

    def weighted_length(self, table):
        """Number of body bits needed to encode the input counted in `table`."""
        return sum(len(self[symbol]) * freq for symbol, freq in table.items())

    def is_prefix_free(self):
        # after sorting, a code that prefixes another sorts directly before
        # some code it prefixes
        ordered = sorted(self.codes.values())
        return all(not b.startswith(a) for a, b in zip(ordered, ordered[1:]))


def build_code_table(tree):
    """
    Walks the tree depth-first and records the path to every symbol leaf.

    Descending left appends '0', descending right appends '1'. The
    placeholder leaf of a single-symbol tree gets no code.
    """
    codes = {}
    stack = [(tree.root, "")]
    while stack:
        index, code = stack.pop()
        node = tree[index]

        if node.is_leaf:
            if node.placeholder:
                continue
            if node.symbol is None:
                raise RuntimeError(f"Leaf node {index} carries no symbol")
            codes[node.symbol] = code
            continue

        # right pushed first so the left subtree is visited first
        stack.append((node.right, code + "1"))
        stack.append((node.left, code + "0"))

    return CodeTable(codes)
