from dataclasses import dataclass
from typing import Iterator

from bpe.errors import VocabularyOverflow


@dataclass(frozen=True)
class Literal:
    byte: int


@dataclass(frozen=True)
class Composite:
    left: int
    right: int


Symbol = Literal | Composite


class Vocabulary:
    """Append-only table mapping a symbol id to its definition.

    The first 256 entries are the literals, one per byte value, so that the id of a
    literal equals its byte value. Every merge appends a `Composite` whose components
    are ids that already exist. Ids are handed out sequentially, hence both components
    of a composite are strictly smaller than its own id. The table is therefore a
    forest of binary merges over the 256 literal leaves and expanding any id always
    terminates.
    """

    def __init__(self, id_bits: int = 32):
        self.id_bits = id_bits
        self.max_size = 2**id_bits  # Ids run from 0 to 2**id_bits - 1
        self._symbols: list[Symbol] = []
        self.merges: dict[tuple[int, int], int] = {}  # Map merged pair to token index

    @classmethod
    def initialize(cls, id_bits: int = 32) -> "Vocabulary":
        vocabulary = cls(id_bits=id_bits)
        vocabulary._symbols = [Literal(byte) for byte in range(256)]
        return vocabulary

    def __len__(self) -> int:
        return len(self._symbols)

    def __getitem__(self, idx: int) -> Symbol:
        if idx < 0:
            raise IndexError(f"Symbol id {idx} must be non-negative!")
        return self._symbols[idx]

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols)

    def ensure_capacity(self, num_merges: int) -> None:
        """Raise `VocabularyOverflow` if `num_merges` more entries would not fit."""
        if len(self) + num_merges > self.max_size:
            raise VocabularyOverflow(
                f"A vocabulary of {len(self)} + {num_merges} symbols does not fit in "
                f"{self.id_bits}-bit ids (at most {self.max_size} symbols)"
            )

    def append(self, pair: tuple[int, int]) -> int:
        """Add a new composite symbol for `pair` and return its id."""
        idx = len(self)
        if idx >= self.max_size:
            raise VocabularyOverflow(
                f"Symbol id {idx} does not fit in {self.id_bits}-bit ids"
            )

        left, right = pair
        for component in (left, right):
            if not 0 <= component < idx:
                raise ValueError(
                    f"Cannot merge {pair}: symbol {component} is not in the vocabulary!"
                )

        self._symbols.append(Composite(left, right))
        self.merges[(left, right)] = idx
        return idx
