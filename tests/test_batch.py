import json
from pathlib import Path

import pytest

from mmi_parser.batch import (
    BatchOptions,
    convert_json_file,
    convert_text_file,
    discover_files,
    output_path_for,
    run_batch,
)
from mmi_parser.errors import BatchError

from conftest import BROKEN_TRIGGERS, FISCAL_YEARS, LUNG_CANCER


def _read_jsonl(path):
    return [json.loads(x) for x in path.read_text(encoding="utf-8").splitlines()]


def test_output_path_for():
    assert output_path_for(Path("data/MMI_sample.txt")) == Path("data/MMI_sample_parsed.jsonl")
    assert output_path_for(Path("data/notes.json")) == Path("data/notes_parsed.json")


def test_discover_files(tmp_path):
    for name in ("b.txt", "a.txt", "a_parsed.jsonl", "c.json", "c_parsed.json", "notes.md"):
        (tmp_path / name).write_text("", encoding="utf-8")
    assert [p.name for p in discover_files(tmp_path, "txt")] == ["a.txt", "b.txt"]
    assert [p.name for p in discover_files(tmp_path, "json")] == ["c.json"]


def test_discover_files_errors(tmp_path):
    with pytest.raises(BatchError):
        discover_files(tmp_path / "missing", "txt")
    with pytest.raises(BatchError):
        discover_files(tmp_path, "csv")


def test_malformed_middle_line_keeps_positions(mmi_folder):
    report = convert_text_file(mmi_folder / "sample.txt", BatchOptions(folder=mmi_folder))
    rows = _read_jsonl(report.output)
    assert len(rows) == 3
    assert rows[0]["variant"] == "MMI"
    assert rows[1]["variant"] == "Error"
    assert rows[1]["category"] == "MalformedCandidateList"
    assert rows[1]["line_no"] == 2
    assert rows[2]["variant"] == "MMI"
    assert report.lines == 3
    assert report.errors == 1
    assert report.error_kinds == {"MalformedCandidateList": 1}


def test_small_chunks_and_threads(tmp_path):
    lines = [LUNG_CANCER, BROKEN_TRIGGERS, FISCAL_YEARS, "", "junk"] * 7
    src = tmp_path / "many.txt"
    src.write_text("\n".join(lines) + "\n", encoding="utf-8")
    report = convert_text_file(src, BatchOptions(folder=tmp_path, workers=3, chunk_size=4))
    rows = _read_jsonl(report.output)
    assert len(rows) == len(lines)
    errors = [r for r in rows if r["variant"] == "Error"]
    assert [r["line_no"] for r in errors] == [i for i, x in enumerate(lines, 1) if x in (BROKEN_TRIGGERS, "", "junk")]


def test_convert_json_file(tmp_path):
    doc = {
        "encounter": {
            "e1": {"scm-notes": [{"id": "n1", "metamap_output": [LUNG_CANCER, "junk"]}]},
            "e2": {"scm-notes": [{"id": "n2", "metamap_output": [FISCAL_YEARS]}]},
        }
    }
    src = tmp_path / "notes.json"
    src.write_text(json.dumps(doc), encoding="utf-8")
    report = convert_json_file(src, BatchOptions(folder=tmp_path, input_type="json"))
    out = json.loads(report.output.read_text(encoding="utf-8"))
    n1 = out["encounter"]["e1"]["scm-notes"][0]
    assert n1["metamap_output"] == [LUNG_CANCER, "junk"]
    assert [e["variant"] for e in n1["mmi_output"]] == ["MMI", "Error"]
    assert out["encounter"]["e2"]["scm-notes"][0]["mmi_output"][0]["variant"] == "AA"
    assert report.lines == 3
    assert report.errors == 1


@pytest.mark.parametrize("doc", [
    {"notes": []},
    {"encounter": {"e1": {}}},
    {"encounter": {"e1": {"scm-notes": [{"metamap_output": "not a list"}]}}},
])
def test_convert_json_file_rejects_other_layouts(tmp_path, doc):
    src = tmp_path / "notes.json"
    src.write_text(json.dumps(doc), encoding="utf-8")
    with pytest.raises(BatchError):
        convert_json_file(src, BatchOptions(folder=tmp_path, input_type="json"))


def test_invalid_json_document(tmp_path):
    src = tmp_path / "notes.json"
    src.write_text("{not json", encoding="utf-8")
    with pytest.raises(BatchError):
        convert_json_file(src, BatchOptions(folder=tmp_path, input_type="json"))


def test_run_batch(mmi_folder):
    (mmi_folder / "second.txt").write_text(FISCAL_YEARS + "\n", encoding="utf-8")
    summary = run_batch(BatchOptions(folder=mmi_folder, progress=False))
    assert [f.path.name for f in summary.files] == ["sample.txt", "second.txt"]
    assert summary.lines == 4
    assert summary.errors == 1
    assert (mmi_folder / "second_parsed.jsonl").exists()


def test_undecodable_bytes_still_get_an_entry(tmp_path):
    src = tmp_path / "bad.txt"
    src.write_bytes(
        LUNG_CANCER.encode("utf-8") + b"\n\xff\xfe junk\n" + FISCAL_YEARS.encode("utf-8") + b"\n"
    )
    report = convert_text_file(src, BatchOptions(folder=tmp_path))
    rows = _read_jsonl(report.output)
    assert [r["variant"] for r in rows] == ["MMI", "Error", "AA"]
    assert rows[1]["category"] == "UnrecognizedShape"
    assert "�" in rows[1]["line"]


def test_undecodable_json_document(tmp_path):
    src = tmp_path / "notes.json"
    src.write_bytes(b'{"encounter": "\xff"}')
    with pytest.raises(BatchError):
        convert_json_file(src, BatchOptions(folder=tmp_path, input_type="json"))
