#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
tpcodec package

Compact byte encoding for toki pona text. Each known word is one byte; the
spacing between words is implicit and only a missing space costs an extra
0x21 marker. tpCodec.py is the command-line entrypoint.
"""

from __future__ import annotations

from .dict_set import DictionarySet, WordIdentifier, load_default_dict_set
from .dictionary import WordDictionary
from .encoding import Decoder, Encoder, decode_bytes, encode_text
from .errors import (
    BlockCRCError,
    BlockFormatError,
    CodecError,
    InvalidByte,
    MalformedDictionarySource,
    UnknownWord,
    UnsupportedEncodingRange,
)
from .variation import Variation

__version__ = "0.1.0"
