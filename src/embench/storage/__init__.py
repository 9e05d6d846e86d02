from __future__ import annotations

from pathlib import Path

from embench.storage.csv_log import HEADER, ResultLog


def default_result_log() -> ResultLog:
    return ResultLog(Path("result.csv"))


__all__ = ["HEADER", "ResultLog", "default_result_log"]
