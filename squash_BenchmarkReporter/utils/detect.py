# squash_BenchmarkReporter/utils/detect.py
from __future__ import annotations
from pathlib import Path
from dataclasses import dataclass
from typing import Literal
from urllib.parse import urlparse

SourceKind = Literal["url", "file", "unknown"]

@dataclass(frozen=True)
class DetectedSource:
    location: str     # URL or resolved path
    kind: SourceKind

def detect_kind(source: str) -> SourceKind:
    """
    Classify a benchmark document location.
    - http:// or https://  -> 'url'
    - existing file        -> 'file'
    else                   -> 'unknown'
    """
    scheme = urlparse(source).scheme.lower()
    if scheme in ("http", "https"):
        return "url"
    p = Path(source)
    if p.is_file():
        return "file"
    return "unknown"

def detect_source(source: str | Path) -> DetectedSource:
    """If 'source' is a directory, look for the benchmark's ``data.json`` inside it."""
    text = str(source)
    if urlparse(text).scheme.lower() not in ("http", "https"):
        p = Path(text)
        if p.is_dir():
            p = p / "data.json"
        text = str(p.resolve()) if p.exists() else str(p)
    return DetectedSource(text, detect_kind(text))
