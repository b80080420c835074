import json
import os
import secrets
from datetime import datetime, timezone
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from pydantic import BaseModel


def make_timestamp() -> str:
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
    return f"{timestamp}_{os.getpid()}_{secrets.token_hex(3)}"


def ensure_runs_dir(path: str = "runs") -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def _atomic_write(path: Path, content: str) -> None:
    with NamedTemporaryFile("w", encoding="utf-8", dir=path.parent, delete=False) as tmp_file:
        tmp_file.write(content)
        tmp_path = Path(tmp_file.name)
    os.replace(tmp_path, path)


def _canonicalize(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return _canonicalize(value.model_dump(by_alias=True))
    if isinstance(value, dict):
        canonical_dict = {key: _canonicalize(val) for key, val in value.items()}
        return dict(sorted(canonical_dict.items(), key=lambda item: item[0]))
    if isinstance(value, list):
        return [_canonicalize(item) for item in value]
    return value


def _compact_json(value: Any) -> str:
    return json.dumps(
        _canonicalize(value),
        separators=(",", ":"),
        sort_keys=True,
        ensure_ascii=False,
    )


def save_run(
    operation: str,
    request: Any,
    envelope: dict[str, Any],
    runs_dir: str = "runs",
) -> dict[str, str]:
    ensure_runs_dir(runs_dir)
    ts = make_timestamp()

    request_path = Path(runs_dir) / f"{operation}_request_{ts}.json"
    result_path = Path(runs_dir) / f"{operation}_result_{ts}.json"

    _atomic_write(request_path, _compact_json(request))
    _atomic_write(result_path, _compact_json(envelope))

    return {
        "request_path": str(request_path),
        "result_path": str(result_path),
    }


def save_json_error(raw: str, error: str, kind: str, runs_dir: str = "runs") -> str:
    ensure_runs_dir(runs_dir)
    ts = make_timestamp()
    err_path = Path(runs_dir) / f"json_error_{ts}.txt"

    contents = (
        f"MODEL_OUTPUT_FAILURE\n"
        f"kind: {kind}\n"
        f"error: {error}\n\n"
        f"---- RAW OUTPUT ----\n{raw}"
    )
    _atomic_write(err_path, contents)
    return str(err_path)
