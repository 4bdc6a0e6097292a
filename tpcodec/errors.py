#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations


class CodecError(ValueError):
    pass


class UnknownWord(CodecError):
    def __init__(self, fragment: str) -> None:
        super().__init__(f"encoding failed for character sequence [{fragment}]")
        self.fragment = fragment


class InvalidByte(CodecError):
    def __init__(self, byte: int, reason: str = "unexpected byte") -> None:
        super().__init__(f"{reason} 0x{int(byte):02x}")
        self.byte = int(byte)


class UnsupportedEncodingRange(CodecError):
    """Word codes that need more than one byte are not implemented yet."""


class MalformedDictionarySource(CodecError):
    pass


class BlockFormatError(CodecError):
    pass


class BlockCRCError(CodecError):
    pass
