#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import unittest

from tpcodec.block import (
    MODE_BZ2,
    MODE_DEFLATE,
    MODE_LZMA,
    MODE_RAW,
    MODE_ZLIB,
    MODE_ZSTD,
    SUPPORTED_MODES,
    _crc8,
    looks_like_block,
    mode_from_name,
    mode_name,
    pack_passage,
    pack_passage_best,
    pack_stream,
    unpack_passage,
    unpack_stream,
)
from tpcodec.dict_set import DictionarySet, load_default_dict_set
from tpcodec.dictionary import WordDictionary
from tpcodec.errors import BlockCRCError, BlockFormatError
from tpcodec.variation import Variation


def _small_set() -> DictionarySet:
    return DictionarySet([WordDictionary(["mi", "a"], {Variation.HANZI: ["我", None]})])


class PassageBlockTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ds = _small_set()

    def test_raw_layout(self) -> None:
        blob = pack_passage("mi a", self.ds)
        self.assertEqual(blob[:5], b"TP\x01\x00\x00")
        self.assertEqual(blob[5:-1], b"\x22\x23")
        self.assertEqual(blob[-1], _crc8(blob[:-1]))

    def test_roundtrip_all_modes(self) -> None:
        ds = load_default_dict_set()
        text = "mi wile toki e ni jan ale li pona " * 4 + "a"
        for mode in SUPPORTED_MODES:
            blob = pack_passage(text, ds, mode=mode)
            self.assertEqual(blob[3], mode)
            self.assertEqual(unpack_passage(blob, ds), text)

    def test_roundtrip_empty(self) -> None:
        for mode in SUPPORTED_MODES:
            self.assertEqual(unpack_passage(pack_passage("", self.ds, mode=mode), self.ds), "")

    def test_variation_recorded_and_used_for_rendering(self) -> None:
        blob = pack_passage("我 a", self.ds, variation=Variation.HANZI)
        self.assertEqual(blob[4], 2)
        self.assertEqual(unpack_passage(blob, self.ds), "我 a")
        self.assertEqual(unpack_passage(blob, self.ds, variation=Variation.DEFAULT), "mi a")

    def test_unpack_stream_returns_instruction_bytes(self) -> None:
        stream, variation = unpack_stream(pack_stream(b"\x22\x21\x23", Variation.TIPUNSIN, MODE_ZLIB))
        self.assertEqual(stream, b"\x22\x21\x23")
        self.assertIs(variation, Variation.TIPUNSIN)

    def test_best_mode_keeps_short_passages_raw(self) -> None:
        blob, mode = pack_passage_best("mi a", self.ds)
        self.assertEqual(mode, MODE_RAW)
        self.assertEqual(blob, pack_passage("mi a", self.ds))

    def test_best_mode_is_smallest(self) -> None:
        text = " ".join(["mi a"] * 60)
        blob, mode = pack_passage_best(text, self.ds)
        for m in SUPPORTED_MODES:
            self.assertLessEqual(len(blob), len(pack_passage(text, self.ds, mode=m)))
        self.assertEqual(unpack_passage(blob, self.ds), text)
        self.assertNotEqual(mode, MODE_RAW)

    def test_invalid_crc(self) -> None:
        blob = bytearray(pack_passage("mi a", self.ds))
        blob[-1] ^= 0x01
        with self.assertRaises(BlockCRCError):
            unpack_passage(bytes(blob), self.ds)

    def test_invalid_magic(self) -> None:
        blob = bytearray(pack_passage("mi a", self.ds))
        blob[0] = 0x00
        with self.assertRaises(BlockFormatError):
            unpack_passage(bytes(blob), self.ds)

    def test_invalid_version(self) -> None:
        blob = bytearray(pack_passage("mi a", self.ds))
        blob[2] = 0x7F
        blob[-1] = _crc8(bytes(blob[:-1]))
        with self.assertRaises(BlockFormatError):
            unpack_passage(bytes(blob), self.ds)

    def test_invalid_mode_and_variation(self) -> None:
        for idx in (3, 4):
            blob = bytearray(pack_passage("mi a", self.ds))
            blob[idx] = 0x7F
            blob[-1] = _crc8(bytes(blob[:-1]))
            with self.assertRaises(BlockFormatError):
                unpack_stream(bytes(blob))

    def test_corrupt_compressed_payload(self) -> None:
        body = b"TP\x01" + bytes([MODE_ZLIB, 0]) + b"\x00\x01\x02"
        with self.assertRaises(BlockFormatError):
            unpack_stream(body + bytes([_crc8(body)]))

    def test_too_short(self) -> None:
        with self.assertRaises(BlockFormatError):
            unpack_stream(b"TP\x01\x00")

    def test_plain_stream_is_not_a_block(self) -> None:
        stream = b"\x22\x23"
        self.assertFalse(looks_like_block(stream))
        self.assertTrue(looks_like_block(pack_stream(stream)))
        with self.assertRaises(BlockFormatError):
            unpack_passage(stream, self.ds)

    def test_mode_name_labels(self) -> None:
        self.assertEqual(mode_name(MODE_RAW), "tp_raw")
        self.assertEqual(mode_name(MODE_DEFLATE), "tp_deflate")
        self.assertEqual(mode_name(MODE_ZLIB), "tp_zlib")
        self.assertEqual(mode_name(MODE_BZ2), "tp_bz2")
        self.assertEqual(mode_name(MODE_LZMA), "tp_lzma")
        self.assertEqual(mode_name(MODE_ZSTD), "tp_zstd")
        self.assertEqual(mode_name(99), "tp_unknown")

    def test_mode_from_name(self) -> None:
        self.assertEqual(mode_from_name("zstd"), MODE_ZSTD)
        self.assertEqual(mode_from_name("TP_LZMA"), MODE_LZMA)
        self.assertEqual(mode_from_name(""), MODE_RAW)
        with self.assertRaises(BlockFormatError):
            mode_from_name("brotli")


if __name__ == "__main__":
    unittest.main()
