from typing import Iterable

from bpe.vocabulary import Composite, Vocabulary


def render(vocabulary: Vocabulary, symbol_id: int) -> bytes:
    """Expand a symbol id into the bytes it stands for.

    A literal renders to its byte and a composite to the rendering of its left symbol
    followed by that of its right symbol. The expansion uses an explicit stack instead
    of recursion so that deeply nested merges cannot exhaust the call stack.
    """
    out = bytearray()
    stack = [symbol_id]
    while stack:
        symbol = vocabulary[stack.pop()]
        if isinstance(symbol, Composite):
            # Push right first so that left is expanded first
            stack.append(symbol.right)
            stack.append(symbol.left)
        else:
            out.append(symbol.byte)
    return bytes(out)


def decode_bytes(vocabulary: Vocabulary, ids: Iterable[int]) -> bytes:
    return b"".join(render(vocabulary, idx) for idx in ids)


def render_tokens(vocabulary: Vocabulary, ids: Iterable[int]) -> bytes:
    """Render every token wrapped in square brackets, e.g. b"[aa][a][b]"."""
    return b"".join(b"[" + render(vocabulary, idx) + b"]" for idx in ids)
