#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .dictionary import WordDictionary
from .errors import InvalidByte, UnsupportedEncodingRange
from .variation import Variation

BASE_OFFSET = 0x22
SINGLE_BYTE_CAPACITY = 0x100 - BASE_OFFSET

DICTS_DIR = os.path.join(os.path.dirname(__file__), "dicts")
DEFAULT_DICT_FILES = ("pu.csv",)

_DEFAULT_SET_CACHE: Optional["DictionarySet"] = None


@dataclass(frozen=True)
class WordIdentifier:
    """Names a word inside one DictionarySet: (dictionary index, position)."""

    dict: int
    word: int


class DictionarySet:
    """Indexes words from several dictionaries in one flat code space.

    Word codes are assigned by concatenating the dictionaries in list order,
    so appending a dictionary never renumbers existing words.
    """

    def __init__(self, dictionaries: Sequence[WordDictionary]) -> None:
        self._dicts: Tuple[WordDictionary, ...] = tuple(dictionaries)

    @property
    def dictionaries(self) -> Tuple[WordDictionary, ...]:
        return self._dicts

    def __len__(self) -> int:
        return sum(len(d) for d in self._dicts)

    def extended(self, dictionary: WordDictionary) -> "DictionarySet":
        return DictionarySet(self._dicts + (dictionary,))

    def fits_single_byte(self) -> bool:
        return len(self) <= SINGLE_BYTE_CAPACITY

    def get_identifier(self, spelling: str) -> Optional[WordIdentifier]:
        """Look up a word written in the default orthography."""
        for dict_idx, d in enumerate(self._dicts):
            pos = d.lookup(spelling)
            if pos is not None:
                return WordIdentifier(dict=dict_idx, word=pos)
        return None

    def resolve(self, spelling: str, variation: Variation = Variation.DEFAULT) -> Optional[WordIdentifier]:
        """Look up a word written in the given variation.

        Variant tables of every dictionary are searched before falling back
        to the default orthography.
        """
        if variation is Variation.DEFAULT:
            return self.get_identifier(spelling)
        for dict_idx, d in enumerate(self._dicts):
            pos = d.lookup_in(spelling, variation)
            if pos is not None:
                return WordIdentifier(dict=dict_idx, word=pos)
        return self.get_identifier(spelling)

    def spelling_of(self, identifier: WordIdentifier, variation: Variation = Variation.DEFAULT) -> str:
        return self._dicts[identifier.dict].spelling(identifier.word, variation)

    def global_index(self, identifier: WordIdentifier) -> int:
        if not 0 <= identifier.dict < len(self._dicts):
            raise UnsupportedEncodingRange(f"no base dictionary {identifier.dict} in set")
        if not 0 <= identifier.word < len(self._dicts[identifier.dict]):
            raise UnsupportedEncodingRange(f"word {identifier.word} out of range for dictionary {identifier.dict}")
        return sum(len(d) for d in self._dicts[: identifier.dict]) + identifier.word

    def identifier_at(self, index: int) -> Optional[WordIdentifier]:
        if index < 0:
            return None
        dict_idx = 0
        while dict_idx < len(self._dicts):
            size = len(self._dicts[dict_idx])
            if index < size:
                return WordIdentifier(dict=dict_idx, word=index)
            index -= size
            dict_idx += 1
        return None

    def encode(self, identifier: WordIdentifier) -> bytes:
        """Return the wire bytes for a word."""
        code = self.global_index(identifier) + BASE_OFFSET
        if code > 0xFF:
            # TODO: multi-byte codes for vocabularies past SINGLE_BYTE_CAPACITY.
            raise UnsupportedEncodingRange(f"word index {code - BASE_OFFSET} does not fit a single byte")
        return bytes([code])

    def decode(self, data: bytes) -> WordIdentifier:
        raw = bytes(data)
        if len(raw) != 1:
            raise UnsupportedEncodingRange(f"multi-byte word codes are not supported ({len(raw)} bytes)")
        b = raw[0]
        if b < BASE_OFFSET:
            raise InvalidByte(b, reason="not a word code:")
        identifier = self.identifier_at(b - BASE_OFFSET)
        if identifier is None:
            raise InvalidByte(b, reason="word code outside vocabulary:")
        return identifier

    def iter_words(self) -> Iterator[Tuple[WordIdentifier, str]]:
        for dict_idx, d in enumerate(self._dicts):
            for pos, word in enumerate(d.words):
                yield WordIdentifier(dict=dict_idx, word=pos), word

    def __repr__(self) -> str:
        return f"DictionarySet(dicts={len(self._dicts)}, words={len(self)})"


def load_dict_set(paths: Sequence[str]) -> DictionarySet:
    return DictionarySet([WordDictionary.from_file(p) for p in paths])


def load_default_dict_set() -> DictionarySet:
    """Return the bundled dictionary set, parsed once per process."""
    global _DEFAULT_SET_CACHE
    if _DEFAULT_SET_CACHE is not None:
        return _DEFAULT_SET_CACHE
    paths: List[str] = [os.path.join(DICTS_DIR, name) for name in DEFAULT_DICT_FILES]
    _DEFAULT_SET_CACHE = load_dict_set(paths)
    return _DEFAULT_SET_CACHE
