#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Streaming encoder/decoder for the toki pona byte encoding.

A passage is a list of instructions. Each instruction either prints a word
from the dictionary set using the active variation, or alters session state:

    0x21        attach the next word to the previous one (no space)
    0x22..0xFF  one word, code = byte - 0x22 in the set's flat index

Spaces between words are implicit. The encoder only emits 0x21 when a space
it expected before a word was missing from the input.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Union

from .dict_set import BASE_OFFSET, DictionarySet, WordIdentifier
from .errors import InvalidByte, UnknownWord
from .variation import Variation

ATTACH_BYTE = 0x21
MAX_PENDING_CHARS = 16
SEPARATOR = " "


@dataclass(frozen=True)
class EmitWord:
    word: WordIdentifier

    def encode(self, dict_set: DictionarySet) -> bytes:
        return dict_set.encode(self.word)


@dataclass(frozen=True)
class AttachToPrevious:
    def encode(self, dict_set: DictionarySet) -> bytes:
        return bytes([ATTACH_BYTE])


Instruction = Union[EmitWord, AttachToPrevious]


def iter_instructions(data: bytes, dict_set: DictionarySet) -> Iterator[Instruction]:
    for b in bytes(data):
        if b == ATTACH_BYTE:
            yield AttachToPrevious()
        elif b >= BASE_OFFSET:
            yield EmitWord(word=dict_set.decode(bytes([b])))
        else:
            raise InvalidByte(b)


@dataclass
class EncodingState:
    variation: Variation = Variation.DEFAULT
    # Before printing the next word, a space is owed.
    prepend_space: bool = False


class Encoder:
    """Encodes text and writes instruction bytes to `writer`.

    Call finish() once all text is written, or use the encoder as a context
    manager; otherwise a trailing word stays in the buffer.
    """

    def __init__(
        self,
        writer,
        dict_set: DictionarySet,
        variation: Variation = Variation.DEFAULT,
    ) -> None:
        self.writer = writer
        self.dict_set = dict_set
        self.state = EncodingState(variation=variation)
        self._unencoded: List[str] = []

    def __enter__(self) -> "Encoder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.finish()

    @property
    def pending(self) -> str:
        return "".join(self._unencoded)

    def write_text(self, text: str) -> None:
        for ch in text:
            self.write_character(ch)

    def write_character(self, ch: str) -> None:
        if ch == SEPARATOR or len(self._unencoded) >= MAX_PENDING_CHARS:
            self._flush()
        self._unencoded.append(ch)

    def finish(self) -> None:
        self._flush()

    def _flush(self) -> None:
        if not self._unencoded:
            return
        try:
            chars = self._unencoded
            attach = False
            if self.state.prepend_space:
                if chars[0] == SEPARATOR:
                    # The owed space is implicit on the wire.
                    chars = chars[1:]
                else:
                    attach = True
            fragment = "".join(chars)
            word = self.dict_set.resolve(fragment, self.state.variation) if fragment else None
            if word is None:
                raise UnknownWord(fragment)
            out = bytearray()
            if attach:
                out.extend(AttachToPrevious().encode(self.dict_set))
            out.extend(EmitWord(word=word).encode(self.dict_set))
            self.writer.write(bytes(out))
            self.state.prepend_space = True
        finally:
            self._unencoded.clear()


class Decoder:
    """Decodes instruction bytes and writes text to `writer`."""

    def __init__(
        self,
        writer,
        dict_set: DictionarySet,
        variation: Variation = Variation.DEFAULT,
    ) -> None:
        self.writer = writer
        self.dict_set = dict_set
        self.state = EncodingState(variation=variation)

    def __enter__(self) -> "Decoder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.finish()

    def read_bytes(self, data: Iterable[int]) -> None:
        for b in data:
            self.read_byte(b)

    def read_byte(self, b: int) -> None:
        b = int(b)
        if b == ATTACH_BYTE:
            self.execute(AttachToPrevious())
        elif BASE_OFFSET <= b <= 0xFF:
            self.execute(EmitWord(word=self.dict_set.decode(bytes([b]))))
        else:
            raise InvalidByte(b)

    def execute(self, instruction: Instruction) -> None:
        if isinstance(instruction, AttachToPrevious):
            self.state.prepend_space = False
            return
        if self.state.prepend_space:
            self.writer.write(SEPARATOR)
        self.writer.write(self.dict_set.spelling_of(instruction.word, self.state.variation))
        self.state.prepend_space = True

    def finish(self) -> None:
        # Nothing is buffered on the decode side.
        return None


def encode_text(
    text: str,
    dict_set: DictionarySet,
    variation: Variation = Variation.DEFAULT,
) -> bytes:
    buf = io.BytesIO()
    with Encoder(buf, dict_set, variation=variation) as enc:
        enc.write_text(text)
    return buf.getvalue()


def decode_bytes(
    data: bytes,
    dict_set: DictionarySet,
    variation: Variation = Variation.DEFAULT,
) -> str:
    buf = io.StringIO()
    with Decoder(buf, dict_set, variation=variation) as dec:
        dec.read_bytes(bytes(data))
    return buf.getvalue()
