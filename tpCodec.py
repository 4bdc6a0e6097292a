#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import binascii
import sys
from typing import Dict, List, Optional

from tpcodec import __version__
from tpcodec.block import mode_from_name, mode_name, pack_passage, pack_passage_best, unpack_passage
from tpcodec.dict_set import BASE_OFFSET, DictionarySet, load_default_dict_set
from tpcodec.dictionary import WordDictionary
from tpcodec.encoding import decode_bytes, encode_text
from tpcodec.errors import CodecError, UnsupportedEncodingRange
from tpcodec.storage import Storage, load_storage, ts_local
from tpcodec.variation import Variation

EXIT_OK = 0
EXIT_CODEC_ERROR = 2

_STORAGE: Optional[Storage] = None
_QUIET = False


def out(msg: str) -> None:
    sys.stdout.write(msg + "\n")
    sys.stdout.flush()


def log(msg: str) -> None:
    line = f"{ts_local()} {msg}"
    if not _QUIET:
        sys.stderr.write(line + "\n")
        sys.stderr.flush()
    if _STORAGE is not None:
        _STORAGE.append_runtime_log(line)


def parse_variation(code: str) -> Variation:
    try:
        return Variation.from_code(code)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"unknown variation {code!r} (known: {', '.join(v.value for v in Variation)})"
        ) from None


def build_dict_set(extra_paths: List[str]) -> DictionarySet:
    dict_set = load_default_dict_set()
    for path in extra_paths:
        dict_set = dict_set.extended(WordDictionary.from_file(path))
        log(f"DICT: loaded {path} words_total={len(dict_set)}")
    if not dict_set.fits_single_byte():
        log(f"DICT: {len(dict_set)} words, codes past index {0xFF - BASE_OFFSET} cannot be encoded")
    return dict_set


def parse_hex(text: str) -> bytes:
    cleaned = "".join(ch for ch in text if ch not in " \t\r\n,:")
    if cleaned.lower().startswith("0x"):
        cleaned = cleaned[2:]
    return binascii.unhexlify(cleaned)


def list_words(dict_set: DictionarySet, variation: Variation) -> None:
    for ident, _word in dict_set.iter_words():
        try:
            code_txt = dict_set.encode(ident).hex()
        except UnsupportedEncodingRange:
            code_txt = "--"
        out(f"{code_txt}  {ident.dict}:{ident.word}  {dict_set.spelling_of(ident, variation)}")


def main(argv: Optional[List[str]] = None) -> int:
    global _STORAGE, _QUIET

    DEFAULTS: Dict[str, object] = {
        "config": "tpcodec.json",
    }

    ap = argparse.ArgumentParser(
        prog="tpCodec.py",
        description="Encode toki pona text to the one-byte-per-word encoding and back.",
    )
    ap.add_argument("--config", default=DEFAULTS["config"], help=f"JSON config file (default: {DEFAULTS['config']}).")
    ap.add_argument("--encode", metavar="TEXT", default=None, help="text to encode (default: read stdin).")
    ap.add_argument("--decode", metavar="HEX", default=None, help="hex bytes to decode.")
    ap.add_argument("--variation", type=parse_variation, default=None, help="orthography of the input text (tp, tp_S, tp_ZH).")
    ap.add_argument("--render", type=parse_variation, default=None, help="orthography used for decoded text.")
    ap.add_argument("--block", action="store_true", help="wrap output in / read input as a framed block.")
    ap.add_argument("--mode", default=None, help="block mode: raw, deflate, zlib, bz2, lzma, zstd or best.")
    ap.add_argument("--dict", dest="dicts", action="append", default=[], help="extra dictionary CSV, appended after the bundled one.")
    ap.add_argument("--save-config", action="store_true", help="write the effective variation, mode and dictionaries to the config file and exit.")
    ap.add_argument("--clear-log", action="store_true", help="empty the runtime log file and exit.")
    ap.add_argument("--list-words", action="store_true", help="print every word with its code and exit.")
    ap.add_argument("--quiet", action="store_true", help="no runtime log lines on stderr.")
    ap.add_argument("--version", action="store_true", help="print version and exit.")
    args = ap.parse_args(argv)

    if args.version:
        out(f"tpCodec.py v{__version__}")
        return EXIT_OK

    _QUIET = bool(args.quiet)
    _STORAGE, cfg = load_storage(args.config)

    try:
        variation = args.variation or Variation.from_code(str(cfg["variation"]))
    except ValueError:
        log(f"CONFIG: unknown variation {cfg['variation']!r}, using tp")
        variation = Variation.DEFAULT
    render = args.render or variation

    if args.clear_log:
        _STORAGE.clear_runtime_log()
        out(f"cleared {_STORAGE.runtime_log_file}")
        return EXIT_OK

    try:
        dict_set = build_dict_set(list(cfg["dicts"]) + list(args.dicts))  # type: ignore[arg-type]

        if args.save_config:
            mode_arg = str(args.mode or cfg["mode"]).strip().lower()
            if mode_arg != "best":
                mode_from_name(mode_arg)
            cfg["variation"] = variation.value
            cfg["mode"] = mode_arg
            dicts: List[str] = list(cfg["dicts"])  # type: ignore[call-overload]
            cfg["dicts"] = dicts + [p for p in args.dicts if p not in dicts]
            _STORAGE.save_config(cfg)
            log(f"CONFIG: saved {args.config}")
            return EXIT_OK

        if args.list_words:
            list_words(dict_set, render)
            return EXIT_OK

        if args.decode is not None:
            try:
                data = parse_hex(args.decode)
            except (binascii.Error, ValueError) as e:
                log(f"DECODE: bad hex input: {e}")
                return EXIT_CODEC_ERROR
            if args.block:
                text = unpack_passage(data, dict_set, variation=args.render)
            else:
                text = decode_bytes(data, dict_set, variation=render)
            log(f"DECODE: bytes={len(data)} chars={len(text)}")
            out(text)
            return EXIT_OK

        text = args.encode if args.encode is not None else sys.stdin.read().rstrip("\r\n")
        mode_arg = str(args.mode or cfg["mode"])
        if args.block and mode_arg.strip().lower() == "best":
            blob, mode = pack_passage_best(text, dict_set, variation=variation)
        elif args.block:
            mode = mode_from_name(mode_arg)
            blob = pack_passage(text, dict_set, variation=variation, mode=mode)
        else:
            mode = -1
            blob = encode_text(text, dict_set, variation=variation)
        plain = len(text.encode("utf-8"))
        label = mode_name(mode) if mode >= 0 else "stream"
        log(f"ENCODE: {label} plain={plain} encoded={len(blob)}")
        out(blob.hex())
        return EXIT_OK
    except CodecError as e:
        log(f"ERROR: {e}")
        return EXIT_CODEC_ERROR
    except OSError as e:
        log(f"ERROR: {e}")
        return EXIT_CODEC_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
