# logging_utils.py
from __future__ import annotations

import json
from typing import Any, Dict, TextIO, Optional


class JsonLinesLogger:
    """
    JSON Lines event log:
    - One event per line.
    - No wall-clock time: events carry a monotonically increasing seq,
      so two runs over the same input produce identical bytes.
    - sort_keys=True for a deterministic format.
    """

    def __init__(self, file: TextIO):
        self._file = file
        self._seq = 0

    def log_event(
        self,
        *,
        event: str,
        number: Optional[int] = None,
        block_hash: Optional[bytes] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        record: Dict[str, Any] = {
            "seq": self._seq,
            "event": event,
        }
        self._seq += 1
        if number is not None:
            record["number"] = number
        if block_hash is not None:
            record["hash"] = block_hash.hex()
        if extra:
            record.update(extra)

        line = json.dumps(record, sort_keys=True)
        self._file.write(line + "\n")
        self._file.flush()
