# squash_BenchmarkReporter/loaders/json_loader.py
from __future__ import annotations
from pathlib import Path
import json, logging, numbers
from typing import Any
import requests

from ..core.errors import LoadError
from ..core.model import Dataset, MeasurementRecord
from ..utils.detect import detect_source

_LOG = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0
SIZE_KEY = "uncompressed-size"

# ---------- fetch ----------
def _timeout(cfg: dict | None) -> float:
    inp = (cfg or {}).get("input") or {}
    return float(inp.get("timeout_s", DEFAULT_TIMEOUT_S))

def fetch_document(source: str | Path, cfg: dict | None = None) -> bytes:
    """Single fetch of the raw document; every failure becomes LoadError."""
    detected = detect_source(source)
    if detected.kind == "url":
        try:
            resp = requests.get(detected.location, timeout=_timeout(cfg))
            resp.raise_for_status()
        except requests.Timeout as e:
            raise LoadError(f"timed out fetching {detected.location}",
                            context={"source": detected.location}) from e
        except requests.RequestException as e:
            raise LoadError(f"failed to fetch {detected.location}: {e}",
                            context={"source": detected.location}) from e
        return resp.content
    if detected.kind == "file":
        try:
            return Path(detected.location).read_bytes()
        except OSError as e:
            raise LoadError(f"failed to read {detected.location}: {e}",
                            context={"source": detected.location}) from e
    raise LoadError(f"benchmark document not found: {detected.location}",
                    context={"source": detected.location})

# ---------- schema ----------
def _number(obj: dict, key: str, where: str, required: bool = True) -> float | None:
    v = obj.get(key)
    if v is None and not required:
        return None
    if isinstance(v, bool) or not isinstance(v, numbers.Real):
        raise LoadError(f"{where}: field '{key}' must be a number, got {v!r}")
    try:
        return float(v)
    except OverflowError as e:
        raise LoadError(f"{where}: field '{key}' is out of range") from e

def _string(obj: dict, key: str, where: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise LoadError(f"{where}: field '{key}' must be a string, got {v!r}")
    return v

def _record_from_json(obj: Any, where: str) -> MeasurementRecord:
    if not isinstance(obj, dict):
        raise LoadError(f"{where}: record must be an object")
    return MeasurementRecord(
        plugin=_string(obj, "plugin", where),
        codec=_string(obj, "codec", where),
        size=_number(obj, "size", where),
        compress_cpu=_number(obj, "compress_cpu", where),
        decompress_cpu=_number(obj, "decompress_cpu", where),
        compress_wall=_number(obj, "compress_wall", where, required=False),
        decompress_wall=_number(obj, "decompress_wall", where, required=False),
    )

def _dataset_from_json(name: str, obj: Any) -> Dataset:
    if not isinstance(obj, dict) or SIZE_KEY not in obj:
        # pre-aggregated documents (bare record lists with ratio/cpu) carry no size to normalize by
        raise LoadError(f"dataset '{name}': missing '{SIZE_KEY}'; only the "
                        f"{{'{SIZE_KEY}': n, 'data': [...]}} layout is supported",
                        context={"dataset": name})
    size = _number(obj, SIZE_KEY, f"dataset '{name}'")
    data = obj.get("data")
    if not isinstance(data, list):
        raise LoadError(f"dataset '{name}': 'data' must be a list", context={"dataset": name})
    records = tuple(_record_from_json(e, f"dataset '{name}' record {i}") for i, e in enumerate(data))
    return Dataset(name=name, uncompressed_size=size, records=records)

def parse_document(raw: bytes | str) -> dict[str, Dataset]:
    try:
        doc = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise LoadError(f"benchmark document is not valid JSON: {e}") from e
    if not isinstance(doc, dict):
        raise LoadError("benchmark document must be a JSON object keyed by dataset name")
    # dict preserves document order
    return {name: _dataset_from_json(name, obj) for name, obj in doc.items()}

# ---------- public loader ----------
def load(source: str | Path, cfg: dict | None = None) -> dict[str, Dataset]:
    """
    Accepts: a local data.json (or a folder holding one) or an http(s) URL.
    Returns: dataset name -> Dataset, in document order. Raises LoadError.
    """
    raw = fetch_document(source, cfg)
    datasets = parse_document(raw)
    _LOG.info("loaded %d dataset(s) from %s", len(datasets), source)
    return datasets
