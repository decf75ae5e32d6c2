from dataclasses import replace

from bpe.config import TrainingConfig
from bpe.renderer import decode_bytes
from bpe.trainer import BPETrainer, TrainingResult
from bpe.utils import get_pair_counts, merge_new_token
from bpe.vocabulary import Vocabulary


class BytePairEncodingTokenizer:
    """Byte-level tokenizer built on the byte pair encoding (BPE) algorithm.

    Training starts from the 256 possible byte values. It repeatedly finds the pair of
    consecutive tokens that occurs the most, defines a new token for it, and substitutes
    it in the training sequence. The learned vocabulary can then encode arbitrary bytes
    into tokens and decode tokens back into bytes.
    """

    def __init__(self, config: TrainingConfig | None = None):
        self.config = config
        self.vocab = Vocabulary.initialize()

    def train(self, data: bytes | str, num_merges: int | None = None) -> TrainingResult:
        """Train the tokenizer on `data`. A string is encoded with UTF-8 first.

        Args:
            data: the training text or raw bytes.
            num_merges: number of merge rounds. Overrides `config.num_merges` when the
                tokenizer was created with a config.

        Returns:
            The training result, whose `tokens` are the encoding of `data`.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")

        if self.config is None:
            if num_merges is None:
                raise ValueError("num_merges is required when no config is given!")
            config = TrainingConfig(num_merges=num_merges)
        elif num_merges is not None:
            config = replace(self.config, num_merges=num_merges)
        else:
            config = self.config

        result = BPETrainer(config).train(data)
        self.vocab = result.vocabulary
        return result

    def encode(self, data: bytes | str) -> list[int]:
        if isinstance(data, str):
            data = data.encode("utf-8")
        tokens = list(data)
        merges = self.vocab.merges

        while len(tokens) >= 2:  # Need at least two tokens, otherwise `min` will fail
            pair_counts = get_pair_counts(tokens)

            # Merges must be replayed in the order they were learned, so pick the pair
            # with the lowest token index. Pairs that were never merged rank last.
            pair = min(pair_counts, key=lambda p: merges.get(p, float("inf")))
            if pair not in merges:
                break

            merge_new_token(tokens, pair, merges[pair])

        return tokens

    def decode_bytes(self, ids: list[int]) -> bytes:
        return decode_bytes(self.vocab, ids)

    def decode(self, ids: list[int]) -> str:
        """Convert a sequence of token indices to a string.

        Not every byte sequence is valid UTF-8 (a token may hold part of a multi-byte
        character), so invalid bytes become the Unicode replacement character.
        """
        return self.decode_bytes(ids).decode("utf-8", errors="replace")
