#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import json
import os
import sys
import threading
import time
from typing import Dict, Optional, Tuple

CONFIG_FILE = "tpcodec.json"
RUNTIME_LOG_FILE = "tpcodec.log"

DEFAULT_CONFIG: Dict[str, object] = {
    "variation": "tp",
    "mode": "raw",
    "dicts": [],
    "runtime_log": False,
    "runtime_log_file": RUNTIME_LOG_FILE,
}


def harden_dir(path: str) -> None:
    if not path:
        return
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        return
    if sys.platform.startswith("win"):
        return
    try:
        os.chmod(path, 0o700)
    except OSError:
        pass


def harden_file(path: str) -> None:
    if not path:
        return
    if sys.platform.startswith("win"):
        return
    try:
        os.chmod(path, 0o600)
    except OSError:
        pass


def ts_local() -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())


def merge_config(raw: Dict[str, object]) -> Dict[str, object]:
    """Overlay a loaded config on DEFAULT_CONFIG, dropping values of the wrong type."""
    cfg: Dict[str, object] = dict(DEFAULT_CONFIG)
    cfg["dicts"] = list(DEFAULT_CONFIG["dicts"])  # type: ignore[arg-type]
    if not isinstance(raw, dict):
        return cfg
    for key in ("variation", "mode", "runtime_log_file"):
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            cfg[key] = value.strip()
    if isinstance(raw.get("runtime_log"), bool):
        cfg["runtime_log"] = raw["runtime_log"]
    dicts = raw.get("dicts")
    if isinstance(dicts, list):
        cfg["dicts"] = [str(p) for p in dicts if isinstance(p, str) and p]
    return cfg


class Storage:
    def __init__(self, config_file: str = CONFIG_FILE, runtime_log_file: str = RUNTIME_LOG_FILE) -> None:
        self.config_file = config_file
        self.runtime_log_file = runtime_log_file
        self.runtime_log_enabled = False
        self._runtime_log_lock = threading.Lock()

    def set_runtime_log_enabled(self, enabled: bool) -> None:
        self.runtime_log_enabled = bool(enabled)

    def load_config(self) -> Dict[str, object]:
        if not os.path.isfile(self.config_file):
            return {}
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = json.loads(f.read())
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def save_config(self, cfg: Dict[str, object]) -> None:
        tmp = self.config_file + ".tmp"
        harden_dir(os.path.dirname(self.config_file) or ".")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(cfg, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.config_file)
        harden_file(self.config_file)

    def append_runtime_log(self, line: str) -> None:
        if not line:
            return
        if not self.runtime_log_enabled:
            return
        try:
            harden_dir(os.path.dirname(self.runtime_log_file) or ".")
            with self._runtime_log_lock:
                with open(self.runtime_log_file, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            harden_file(self.runtime_log_file)
        except OSError:
            pass

    def clear_runtime_log(self) -> None:
        try:
            harden_dir(os.path.dirname(self.runtime_log_file) or ".")
            with self._runtime_log_lock:
                with open(self.runtime_log_file, "w", encoding="utf-8") as f:
                    f.write("")
            harden_file(self.runtime_log_file)
        except OSError:
            pass


def load_storage(config_file: Optional[str] = None) -> Tuple[Storage, Dict[str, object]]:
    """Open storage for `config_file` and return it with the merged config."""
    storage = Storage(config_file=config_file or CONFIG_FILE)
    cfg = merge_config(storage.load_config())
    storage.runtime_log_file = str(cfg["runtime_log_file"])
    storage.set_runtime_log_enabled(bool(cfg["runtime_log"]))
    return storage, cfg
