import unittest

from bpe.errors import VocabularyOverflow
from bpe.vocabulary import Composite, Literal, Vocabulary


class TestVocabulary(unittest.TestCase):
    def setUp(self):
        self.vocabulary = Vocabulary.initialize()

    def test_initialize(self):
        self.assertEqual(len(self.vocabulary), 256)
        for idx, symbol in enumerate(self.vocabulary):
            self.assertEqual(symbol, Literal(idx), msg="Literal id must equal its byte!")
        self.assertEqual(self.vocabulary.merges, {})

    def test_append(self):
        idx = self.vocabulary.append((97, 97))
        self.assertEqual(idx, 256)
        self.assertEqual(self.vocabulary[256], Composite(97, 97))

        # Composites can reference earlier composites
        idx = self.vocabulary.append((256, 98))
        self.assertEqual(idx, 257)
        self.assertEqual(self.vocabulary[257], Composite(256, 98))
        self.assertEqual(len(self.vocabulary), 258)
        self.assertEqual(self.vocabulary.merges, {(97, 97): 256, (256, 98): 257})

    def test_append_rejects_unknown_components(self):
        with self.assertRaises(ValueError):
            self.vocabulary.append((256, 1))  # 256 would reference itself
        with self.assertRaises(ValueError):
            self.vocabulary.append((1, -1))
        self.assertEqual(len(self.vocabulary), 256, msg="Failed append must not grow!")

    def test_negative_index(self):
        with self.assertRaises(IndexError):
            self.vocabulary[-1]

    def test_ensure_capacity(self):
        vocabulary = Vocabulary.initialize(id_bits=9)  # Room for 512 symbols
        vocabulary.ensure_capacity(256)
        with self.assertRaises(VocabularyOverflow):
            vocabulary.ensure_capacity(257)

    def test_append_overflow(self):
        vocabulary = Vocabulary.initialize(id_bits=9)
        for _ in range(256):
            vocabulary.append((0, 0))
        self.assertEqual(len(vocabulary), 512)
        with self.assertRaises(VocabularyOverflow):
            vocabulary.append((0, 0))

    def test_entries_cannot_be_replaced(self):
        entries = list(self.vocabulary)
        entries[0] = Composite(1, 2)
        self.assertEqual(self.vocabulary[0], Literal(0))
        with self.assertRaises(TypeError):
            self.vocabulary[0] = Composite(1, 2)

    def test_symbols_are_immutable(self):
        with self.assertRaises(AttributeError):
            self.vocabulary[0].byte = 1
