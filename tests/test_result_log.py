from __future__ import annotations

from pathlib import Path

from embench.storage import HEADER, ResultLog


def test_header_written_once(tmp_path: Path) -> None:
    log = ResultLog(tmp_path / "result.csv")
    log.append("m,20,1,1,1,1.00,1.00,1.00,1,1.00")
    log.append("m,40,2,1,1,1.00,1.00,1.00,1,1.00")
    lines = log.path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == HEADER
    assert len(lines) == 3
    assert lines[2].startswith("m,40")


def test_appends_to_existing_log(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "result.csv"
    ResultLog(path).append("a")
    ResultLog(path).append("b")
    assert path.read_text(encoding="utf-8") == f"{HEADER}\na\nb\n"
