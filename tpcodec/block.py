#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Self-describing passage blocks.

    magic(2) "TP" | version(1) | mode(1) | variation id(1) | payload | crc8(1)

The payload is the instruction stream from tpcodec.encoding, optionally
run through a general-purpose compressor. The variation id records the
orthography the passage was written in; it is the default rendering on
unpack.
"""

from __future__ import annotations

import bz2
import lzma
import zlib
from typing import Dict, Optional, Tuple

import zstandard

from .dict_set import DictionarySet
from .encoding import decode_bytes, encode_text
from .errors import BlockCRCError, BlockFormatError
from .variation import Variation, variation_from_id, variation_to_id

MAGIC = b"TP"
VERSION = 1
HEADER_LEN = 5

MODE_RAW = 0
MODE_DEFLATE = 1
MODE_ZLIB = 2
MODE_BZ2 = 3
MODE_LZMA = 4
MODE_ZSTD = 5
SUPPORTED_MODES = (
    MODE_RAW,
    MODE_DEFLATE,
    MODE_ZLIB,
    MODE_BZ2,
    MODE_LZMA,
    MODE_ZSTD,
)
MODE_TO_NAME: Dict[int, str] = {
    MODE_RAW: "tp_raw",
    MODE_DEFLATE: "tp_deflate",
    MODE_ZLIB: "tp_zlib",
    MODE_BZ2: "tp_bz2",
    MODE_LZMA: "tp_lzma",
    MODE_ZSTD: "tp_zstd",
}
NAME_TO_MODE: Dict[str, int] = {
    "raw": MODE_RAW,
    "deflate": MODE_DEFLATE,
    "zlib": MODE_ZLIB,
    "bz2": MODE_BZ2,
    "lzma": MODE_LZMA,
    "zstd": MODE_ZSTD,
}


def _crc8(data: bytes, poly: int = 0x07, init: int = 0x00) -> int:
    crc = init & 0xFF
    for b in data:
        crc ^= b
        for _ in range(8):
            if crc & 0x80:
                crc = ((crc << 1) ^ poly) & 0xFF
            else:
                crc = (crc << 1) & 0xFF
    return crc & 0xFF


def mode_name(mode: int) -> str:
    return MODE_TO_NAME.get(int(mode), "tp_unknown")


def mode_from_name(name: str) -> int:
    key = str(name or "raw").strip().lower()
    if key.startswith("tp_"):
        key = key[3:]
    if key not in NAME_TO_MODE:
        raise BlockFormatError(f"unknown block mode: {name!r}")
    return NAME_TO_MODE[key]


def _compress_payload(raw: bytes, mode: int) -> bytes:
    if mode == MODE_RAW:
        return raw
    if mode == MODE_DEFLATE:
        cobj = zlib.compressobj(level=9, wbits=-15)
        return cobj.compress(raw) + cobj.flush()
    if mode == MODE_ZLIB:
        return zlib.compress(raw, level=9)
    if mode == MODE_BZ2:
        return bz2.compress(raw, compresslevel=9)
    if mode == MODE_LZMA:
        return lzma.compress(raw, preset=9)
    if mode == MODE_ZSTD:
        return zstandard.ZstdCompressor(level=10).compress(raw)
    raise BlockFormatError(f"unsupported block mode: {mode}")


def _decompress_payload(data: bytes, mode: int) -> bytes:
    try:
        if mode == MODE_RAW:
            return data
        if mode == MODE_DEFLATE:
            return zlib.decompress(data, wbits=-15)
        if mode == MODE_ZLIB:
            return zlib.decompress(data)
        if mode == MODE_BZ2:
            return bz2.decompress(data)
        if mode == MODE_LZMA:
            return lzma.decompress(data)
        if mode == MODE_ZSTD:
            return zstandard.ZstdDecompressor().decompress(data)
    except (zlib.error, OSError, EOFError, ValueError, lzma.LZMAError, zstandard.ZstdError) as e:
        raise BlockFormatError(f"corrupt {mode_name(mode)} payload: {e}") from e
    raise BlockFormatError(f"unsupported block mode: {mode}")


def pack_stream(stream: bytes, variation: Variation = Variation.DEFAULT, mode: int = MODE_RAW) -> bytes:
    """Wrap an already encoded instruction stream in a block."""
    data = _compress_payload(bytes(stream), int(mode))
    header = bytes([MAGIC[0], MAGIC[1], VERSION, int(mode) & 0xFF, variation_to_id(variation) & 0xFF])
    crc = _crc8(header + data)
    return header + data + bytes([crc])


def unpack_stream(blob: bytes) -> Tuple[bytes, Variation]:
    if not isinstance(blob, (bytes, bytearray)):
        raise BlockFormatError("blob must be bytes")
    raw = bytes(blob)
    if len(raw) < HEADER_LEN + 1:
        raise BlockFormatError("block too short")
    if raw[:2] != MAGIC:
        raise BlockFormatError("invalid MAGIC")
    ver = raw[2]
    if ver != VERSION:
        raise BlockFormatError(f"unsupported version: {ver}")
    mode = raw[3]
    if mode not in SUPPORTED_MODES:
        raise BlockFormatError(f"unsupported mode: {mode}")
    try:
        variation = variation_from_id(raw[4])
    except KeyError:
        raise BlockFormatError(f"unknown variation id: {raw[4]}") from None
    if _crc8(raw[:-1]) != raw[-1]:
        raise BlockCRCError("CRC8 mismatch")
    return _decompress_payload(raw[HEADER_LEN:-1], mode), variation


def pack_passage(
    text: str,
    dict_set: DictionarySet,
    variation: Variation = Variation.DEFAULT,
    mode: int = MODE_RAW,
) -> bytes:
    return pack_stream(encode_text(text, dict_set, variation=variation), variation=variation, mode=mode)


def pack_passage_best(
    text: str,
    dict_set: DictionarySet,
    variation: Variation = Variation.DEFAULT,
) -> Tuple[bytes, int]:
    """Encode once and keep the smallest block over all modes.

    Ties go to the lower mode id, so short passages stay raw.
    """
    stream = encode_text(text, dict_set, variation=variation)
    candidates = [(pack_stream(stream, variation=variation, mode=m), m) for m in SUPPORTED_MODES]
    return min(candidates, key=lambda item: (len(item[0]), item[1]))


def unpack_passage(
    blob: bytes,
    dict_set: DictionarySet,
    variation: Optional[Variation] = None,
) -> str:
    stream, written_in = unpack_stream(blob)
    return decode_bytes(stream, dict_set, variation=written_in if variation is None else variation)


def looks_like_block(data: bytes) -> bool:
    if not isinstance(data, (bytes, bytearray)):
        return False
    raw = bytes(data)
    if len(raw) < HEADER_LEN + 1:
        return False
    if raw[:2] != MAGIC:
        return False
    if raw[2] != VERSION:
        return False
    if raw[3] not in SUPPORTED_MODES:
        return False
    return raw[4] in (variation_to_id(v) for v in Variation)
