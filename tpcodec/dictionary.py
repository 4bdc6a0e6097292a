#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Word dictionaries.

A dictionary stores toki pona words in the default orthography, plus
optional spellings for other orthographic systems (tipunsin, hanzi, ...),
aligned by position. The position of a word is its identity inside the
dictionary.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import MalformedDictionarySource
from .variation import Variation

FIELD_SEPARATOR = ","


def _build_lookup(words: Sequence[Optional[str]]) -> Dict[str, int]:
    lookup: Dict[str, int] = {}
    for idx, word in enumerate(words):
        if word is None:
            continue
        # First position wins when a spelling repeats.
        if word not in lookup:
            lookup[word] = idx
    return lookup


class WordDictionary:
    """Immutable table of words with per-variation spellings."""

    def __init__(
        self,
        words: Sequence[str],
        variations: Optional[Mapping[Variation, Sequence[Optional[str]]]] = None,
    ) -> None:
        base: Tuple[str, ...] = tuple(str(w) for w in words)
        for idx, word in enumerate(base):
            if not word:
                raise MalformedDictionarySource(f"empty default spelling at row {idx}")
        variant_tables: Dict[Variation, Tuple[Optional[str], ...]] = {}
        for variation, spellings in (variations or {}).items():
            if variation is Variation.DEFAULT:
                raise MalformedDictionarySource("default variation cannot have a variant table")
            table = tuple((s if s else None) for s in spellings)
            if len(table) != len(base):
                raise MalformedDictionarySource(
                    f"variation {variation.value} has {len(table)} entries, expected {len(base)}"
                )
            variant_tables[variation] = table

        self._words = base
        self._variations = variant_tables
        self._lookup = _build_lookup(base)
        self._variation_lookup: Dict[Variation, Dict[str, int]] = {
            variation: _build_lookup(table) for variation, table in variant_tables.items()
        }

    @classmethod
    def from_csv(cls, text: str) -> "WordDictionary":
        """Parse a dictionary from comma-separated text.

        The first row lists the variations, starting with the default one
        ("tp"). Each following row is one word: the default spelling, then
        one cell per variation. An empty cell means the word has no special
        spelling in that variation. Quoting is not supported.
        """
        lines = [line.rstrip("\r") for line in str(text).split("\n")]
        rows = [line for line in lines if line.strip()]
        if not rows:
            raise MalformedDictionarySource("expected headers listing variations")
        headers = rows[0].split(FIELD_SEPARATOR)
        if headers[0].strip() != Variation.DEFAULT.value:
            raise MalformedDictionarySource(
                f"expected default variation {Variation.DEFAULT.value!r} first, got {headers[0]!r}"
            )

        variation_names: List[Variation] = []
        for code in headers[1:]:
            try:
                variation = Variation.from_code(code)
            except ValueError:
                raise MalformedDictionarySource(f"not a known variation: {code!r}") from None
            if variation is Variation.DEFAULT or variation in variation_names:
                raise MalformedDictionarySource(f"duplicate variation column: {code!r}")
            variation_names.append(variation)

        words: List[str] = []
        columns: List[List[Optional[str]]] = [[] for _ in variation_names]
        for line_no, record in enumerate(rows[1:], start=2):
            cells = record.split(FIELD_SEPARATOR)
            if len(cells) > len(headers):
                raise MalformedDictionarySource(
                    f"line {line_no}: {len(cells)} fields, header has {len(headers)}"
                )
            base = cells[0].strip()
            if not base:
                raise MalformedDictionarySource(f"line {line_no}: empty default spelling")
            words.append(base)
            for col, column in enumerate(columns, start=1):
                item = cells[col].strip() if col < len(cells) else ""
                column.append(item if item else None)

        return cls(words, dict(zip(variation_names, columns)))

    @classmethod
    def from_file(cls, path: str) -> "WordDictionary":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_csv(f.read())

    def __len__(self) -> int:
        return len(self._words)

    @property
    def words(self) -> Tuple[str, ...]:
        return self._words

    @property
    def variations(self) -> Tuple[Variation, ...]:
        return tuple(self._variations.keys())

    def spelling(self, position: int, variation: Variation = Variation.DEFAULT) -> str:
        base = self._words[position]
        if variation is Variation.DEFAULT:
            return base
        table = self._variations.get(variation)
        if table is None:
            return base
        word = table[position]
        return base if word is None else word

    def lookup(self, spelling: str) -> Optional[int]:
        return self._lookup.get(spelling)

    def lookup_in(self, spelling: str, variation: Variation) -> Optional[int]:
        if variation is Variation.DEFAULT:
            return self._lookup.get(spelling)
        table = self._variation_lookup.get(variation)
        if table is None:
            return None
        return table.get(spelling)

    def __repr__(self) -> str:
        names = ",".join(v.value for v in self._variations)
        return f"WordDictionary(words={len(self._words)}, variations=[{names}])"
