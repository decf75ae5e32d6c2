import logging
from dataclasses import dataclass
from typing import Callable

from bpe.config import TrainingConfig
from bpe.errors import NoPairsAvailable
from bpe.utils import (
    check_packable,
    get_pair_counts,
    get_top_pair,
    get_top_pair_tensor,
    merge_new_token,
)
from bpe.vocabulary import Vocabulary

RoundCallback = Callable[[int, tuple[int, int], list[int]], None]


@dataclass
class TrainingResult:
    vocabulary: Vocabulary
    tokens: list[int]
    rounds_completed: int
    exhausted: bool = False


class BPETrainer:
    """Learn a byte pair encoding vocabulary from raw bytes.

    Every round counts the pairs of consecutive tokens, picks the most frequent one,
    appends it to the vocabulary as a new token and replaces its occurrences in the
    token sequence. Rounds are strictly sequential: the counts of a round depend on the
    sequence rewritten by the previous one.
    """

    def __init__(self, config: TrainingConfig, on_round: RoundCallback | None = None):
        config.validate()
        self.config = config
        self.on_round = on_round

    def train(self, data: bytes) -> TrainingResult:
        """Run up to `config.num_merges` merge rounds over `data`.

        If the token sequence runs out of pairs before all rounds are done, training
        either stops early and returns what it has (`on_exhausted="stop"`) or raises
        `NoPairsAvailable` (`on_exhausted="error"`).
        """
        num_merges = self.config.num_merges
        vocabulary = Vocabulary.initialize(id_bits=self.config.id_bits)
        self.check_capacity(vocabulary)

        # Each byte is already an integer in the range 0-255, which is its literal id
        tokens = list(data)

        for i in range(num_merges):
            try:
                top_pair, count = self._select_pair(tokens, base=len(vocabulary))
            except NoPairsAvailable as e:
                if self.config.on_exhausted == "error":
                    raise NoPairsAvailable(
                        f"No pairs left to merge in round {i + 1} of {num_merges} "
                        f"(sequence length {len(tokens)})"
                    ) from e
                logging.warning(
                    f"Stopping after {i} of {num_merges} merges: "
                    f"sequence length {len(tokens)} has no pairs left"
                )
                return TrainingResult(vocabulary, tokens, rounds_completed=i, exhausted=True)

            idx = vocabulary.append(top_pair)
            merge_new_token(tokens, top_pair, idx)

            if self.config.log_every and (i + 1) % self.config.log_every == 0:
                logging.info(
                    f"Merging pair={top_pair} ({count=}) into a new token with {idx=} | "
                    f"Tokens: {len(tokens)}"
                )
            if self.on_round is not None:
                self.on_round(i, top_pair, tokens)

        return TrainingResult(vocabulary, tokens, rounds_completed=num_merges)

    def check_capacity(self, vocabulary: Vocabulary | None = None) -> None:
        """Raise `VocabularyOverflow` before any work if the merges would not fit."""
        if vocabulary is None:
            vocabulary = Vocabulary.initialize(id_bits=self.config.id_bits)
        vocabulary.ensure_capacity(self.config.num_merges)
        if self.config.backend == "torch":
            check_packable(len(vocabulary) + self.config.num_merges)

    def _select_pair(self, tokens: list[int], base: int) -> tuple[tuple[int, int], int]:
        if self.config.backend == "torch":
            return get_top_pair_tensor(tokens, base)

        pair_counts = get_pair_counts(tokens)
        top_pair = get_top_pair(pair_counts)
        return top_pair, pair_counts[top_pair]
