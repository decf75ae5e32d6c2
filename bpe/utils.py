"""Utility functions for counting, selecting and merging token pairs."""

import torch

from bpe.errors import NoPairsAvailable, VocabularyOverflow


def get_pair_counts(
    ids: list[int], pair_counts: dict[tuple[int, int], int] | None = None
) -> dict[tuple[int, int], int]:
    """Count the occurrences of each pair of consecutive integers in the list.

    Overlapping pairs are counted independently, e.g. [7, 7, 7] contains the pair
    (7, 7) twice even though only one of them can be merged.

    Args:
        ids: the list of integers in which to count pairs.
        pair_counts: a dictionary to update with the counts.

    Returns:
        A dictionary that maps each pair of integers to the number of times it occurs.
    """
    pair_counts = {} if pair_counts is None else pair_counts
    for pair in zip(ids, ids[1:]):  # Iterate over consecutive elements
        pair_counts[pair] = pair_counts.get(pair, 0) + 1
    return pair_counts


def get_top_pair(pair_counts: dict[tuple[int, int], int]) -> tuple[int, int]:
    """Return the most frequent pair. Ties go to the smallest (left, right) pair."""
    if not pair_counts:
        raise NoPairsAvailable("Need at least two tokens to find a pair to merge")

    # `min` ranks by (negated count, pair) so the highest count wins and the pair
    # itself decides between equal counts, independent of dictionary order.
    return min(pair_counts, key=lambda pair: (-pair_counts[pair], pair))


def check_packable(vocab_size: int) -> None:
    """Raise `VocabularyOverflow` if pairs of ids below `vocab_size` overflow int64 keys."""
    if vocab_size * vocab_size > torch.iinfo(torch.int64).max:
        raise VocabularyOverflow(
            f"A vocabulary of {vocab_size} symbols is too large for the torch backend"
        )


def get_top_pair_tensor(ids: list[int], base: int) -> tuple[tuple[int, int], int]:
    """Find the most frequent pair with a vectorised scan over `ids`.

    Each pair is packed into the single integer `left * base + right`, where `base`
    is larger than every id (i.e. the current vocabulary size). Packed keys then sort
    exactly like (left, right) tuples. `torch.unique` returns its keys sorted and
    `argmax` returns the first maximum, so ties resolve to the smallest pair, just like
    `get_top_pair`.

    Returns:
        The most frequent pair and its count.
    """
    if len(ids) < 2:
        raise NoPairsAvailable("Need at least two tokens to find a pair to merge")
    check_packable(base)

    tokens = torch.tensor(ids, dtype=torch.int64)
    keys = tokens[:-1] * base + tokens[1:]
    unique_keys, counts = torch.unique(keys, sorted=True, return_counts=True)
    top = torch.argmax(counts)
    key = unique_keys[top].item()
    return (key // base, key % base), counts[top].item()


def merge_new_token(ids: list[int], pair: tuple[int, int], idx: int) -> list[int]:
    """Replace all non-overlapping occurrences of `pair` in `ids` with `idx`.

    The scan goes left to right and the list is compacted in place: the read cursor
    always stays ahead of (or level with) the write cursor. Once two tokens are merged
    they cannot take part in another merge during the same pass, so [7, 7, 7] with
    pair (7, 7) becomes [idx, 7].

    Args:
        ids: the list of integers (token indices) to update in place.
        pair: the pair of integers to merge.
        idx: the token index to replace the pair with.

    Returns:
        The same list, now shortened by the number of replacements.
    """
    left, right = pair
    n = len(ids)
    read = 0
    write = 0
    while read < n:
        # If we are NOT at the last position AND the pair matches, replace it
        if read < n - 1 and ids[read] == left and ids[read + 1] == right:
            ids[write] = idx
            read += 2
        else:
            ids[write] = ids[read]
            read += 1
        write += 1
    del ids[write:]
    return ids
