#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
import tempfile
import unittest

from tpcodec.dictionary import WordDictionary
from tpcodec.errors import MalformedDictionarySource
from tpcodec.variation import Variation

SAMPLE_CSV = "tp,tp_S,tp_ZH\nmi,mi_s,我\na,,啊\nsina,,\n"


class WordDictionaryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.d = WordDictionary.from_csv(SAMPLE_CSV)

    def test_from_csv_reads_words_and_variations(self) -> None:
        self.assertEqual(len(self.d), 3)
        self.assertEqual(self.d.words, ("mi", "a", "sina"))
        self.assertEqual(self.d.variations, (Variation.TIPUNSIN, Variation.HANZI))

    def test_spelling_prefers_variant(self) -> None:
        self.assertEqual(self.d.spelling(0, Variation.HANZI), "我")
        self.assertEqual(self.d.spelling(0, Variation.TIPUNSIN), "mi_s")
        self.assertEqual(self.d.spelling(0, Variation.DEFAULT), "mi")

    def test_spelling_falls_back_to_default_when_variant_missing(self) -> None:
        for pos in range(len(self.d)):
            if pos == 0:
                continue
            self.assertEqual(self.d.spelling(pos, Variation.TIPUNSIN), self.d.spelling(pos, Variation.DEFAULT))
        self.assertEqual(self.d.spelling(2, Variation.HANZI), "sina")

    def test_spelling_unknown_variation_uses_default(self) -> None:
        d = WordDictionary.from_csv("tp\nmi\n")
        self.assertEqual(d.spelling(0, Variation.HANZI), "mi")

    def test_lookup_only_searches_default_table(self) -> None:
        self.assertEqual(self.d.lookup("sina"), 2)
        self.assertIsNone(self.d.lookup("我"))
        self.assertIsNone(self.d.lookup("nope"))

    def test_lookup_in_only_searches_that_variation(self) -> None:
        self.assertEqual(self.d.lookup_in("我", Variation.HANZI), 0)
        self.assertEqual(self.d.lookup_in("啊", Variation.HANZI), 1)
        self.assertIsNone(self.d.lookup_in("mi", Variation.HANZI))
        self.assertIsNone(self.d.lookup_in("我", Variation.TIPUNSIN))
        self.assertEqual(self.d.lookup_in("mi", Variation.DEFAULT), 0)

    def test_lookup_in_unknown_variation_returns_none(self) -> None:
        d = WordDictionary.from_csv("tp,tp_ZH\nmi,我\n")
        self.assertIsNone(d.lookup_in("mi", Variation.TIPUNSIN))

    def test_repeated_spelling_resolves_to_first_position(self) -> None:
        d = WordDictionary(["ale", "ali"], {Variation.HANZI: ["全", "全"]})
        self.assertEqual(d.lookup_in("全", Variation.HANZI), 0)
        self.assertEqual(d.spelling(1, Variation.HANZI), "全")

    def test_short_rows_keep_columns_aligned(self) -> None:
        d = WordDictionary.from_csv("tp,tp_S,tp_ZH\nmi\na,,啊\n")
        self.assertEqual(d.spelling(0, Variation.HANZI), "mi")
        self.assertEqual(d.spelling(1, Variation.HANZI), "啊")
        self.assertEqual(d.lookup_in("啊", Variation.HANZI), 1)

    def test_crlf_and_blank_lines(self) -> None:
        d = WordDictionary.from_csv("tp,tp_ZH\r\nmi,我\r\n\r\na,\r\n")
        self.assertEqual(d.words, ("mi", "a"))
        self.assertEqual(d.spelling(0, Variation.HANZI), "我")
        self.assertEqual(d.spelling(1, Variation.HANZI), "a")

    def test_header_must_start_with_default_variation(self) -> None:
        with self.assertRaises(MalformedDictionarySource):
            WordDictionary.from_csv("tp_ZH,tp\n我,mi\n")

    def test_unknown_variation_rejected(self) -> None:
        with self.assertRaises(MalformedDictionarySource):
            WordDictionary.from_csv("tp,tp_XX\nmi,x\n")

    def test_duplicate_variation_rejected(self) -> None:
        with self.assertRaises(MalformedDictionarySource):
            WordDictionary.from_csv("tp,tp_S,tp_S\nmi,,\n")
        with self.assertRaises(MalformedDictionarySource):
            WordDictionary.from_csv("tp,tp\nmi,mi\n")

    def test_empty_default_spelling_rejected(self) -> None:
        with self.assertRaises(MalformedDictionarySource):
            WordDictionary.from_csv("tp,tp_ZH\n,我\n")

    def test_extra_fields_rejected(self) -> None:
        with self.assertRaises(MalformedDictionarySource):
            WordDictionary.from_csv("tp\nmi,extra\n")

    def test_empty_source_rejected(self) -> None:
        with self.assertRaises(MalformedDictionarySource):
            WordDictionary.from_csv("")

    def test_variant_table_length_must_match(self) -> None:
        with self.assertRaises(MalformedDictionarySource):
            WordDictionary(["mi", "a"], {Variation.HANZI: ["我"]})

    def test_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "extra.csv")
            with open(path, "w", encoding="utf-8") as f:
                f.write(SAMPLE_CSV)
            d = WordDictionary.from_file(path)
        self.assertEqual(d.words, self.d.words)
        self.assertEqual(d.lookup_in("我", Variation.HANZI), 0)


if __name__ == "__main__":
    unittest.main()
