from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

HEADER = (
    "Model,Tokens,Batch size,Concurrency,Min (ms),Median (ms),"
    "P90 (ms),P99 (ms),Max (ms),Throughput"
)


@dataclass(slots=True)
class ResultLog:
    path: Path

    def __post_init__(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, row: str) -> None:
        with self.path.open("a", encoding="utf-8") as fh:
            if fh.tell() == 0:
                fh.write(HEADER + "\n")
            fh.write(row + "\n")
