#!/usr/bin/env python3
"""Run-directory helpers for reproducible export runs.

Functions:
- make_run_dir(short_title, base_dir)
- atomic_write_json(obj, path)
- compute_config_hash(obj)
- timestamped_logger(name, log_path)
"""
from __future__ import annotations
import os
import sys
import json
import hashlib
import logging
import datetime
from typing import Dict, Any

TS_FMT = "%Y%m%d_%H%M%S"

def now_ts():
    return datetime.datetime.now(datetime.timezone.utc).strftime(TS_FMT)

def make_run_dir(short_title: str, base_dir: str = "examples/runs") -> str:
    ts = now_ts()
    run_id = f"{ts}_{short_title}".lower()
    path = os.path.join(base_dir, run_id)
    os.makedirs(path, exist_ok=False)
    os.makedirs(os.path.join(path, "encounters"), exist_ok=True)
    os.makedirs(os.path.join(path, "items"), exist_ok=True)
    return path

def atomic_write_json(obj: Dict[str,Any], path: str):
    tmp = path + ".tmp"
    with open(tmp, 'w') as f:
        json.dump(obj, f, indent=2, sort_keys=True, default=str)
    os.replace(tmp, path)

def compute_config_hash(obj: Dict[str,Any]) -> str:
    s = json.dumps(obj, sort_keys=True)
    return hashlib.md5(s.encode()).hexdigest()

def timestamped_logger(name: str, log_path: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    if not logger.handlers:
        fh = logging.FileHandler(log_path)
        sh = logging.StreamHandler(sys.stdout)
        fmt = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
        fh.setFormatter(fmt)
        sh.setFormatter(fmt)
        logger.addHandler(fh)
        logger.addHandler(sh)
    logger.propagate = False
    return logger

__all__ = [
    'make_run_dir','atomic_write_json','timestamped_logger','compute_config_hash','now_ts'
]
