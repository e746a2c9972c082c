from __future__ import annotations

from pathlib import Path

import pytest

from character_dms.csv_io import export_file, import_file, import_lines, parse_report_line
from character_dms.ranking import top_n
from character_dms.results import DataFileError, FailureKind
from character_dms.store import CharacterStore

VALID_LINES = [
    "1,Doofnita,NA,Troll,3,500,80,true",
    "2,AnitaBath,NA,Catfish,5,1000,95,true",
    "3,LouLou,EU,Gangster,2,200,40,false",
]


def test_import_one_malformed_line_among_valid_ones():
    store = CharacterStore()
    lines = VALID_LINES[:2] + ["4,Broken,NA,Troll,lots,0,0,true"] + VALID_LINES[2:]

    report = import_lines(store, lines)

    assert report.added == 3
    assert report.skipped == 1
    assert [f.line_number for f in report.failures] == [3]
    assert report.failures[0].kind is FailureKind.PARSE
    assert [c.handle for c in store.all()] == ["Doofnita", "AnitaBath", "LouLou"]
    assert report.summary() == "Loaded: 3 added, 1 skipped."


def test_import_tallies_validation_and_duplicate_failures():
    store = CharacterStore()
    lines = VALID_LINES + [
        "9,TooWanted,AS,Racer,7,0,0,true",
        "1,SameId,AS,Racer,1,0,0,true",
        "10,doofnita,AS,Racer,1,0,0,true",
    ]

    report = import_lines(store, lines)

    assert (report.added, report.skipped) == (3, 3)
    assert [f.kind for f in report.failures] == [
        FailureKind.VALIDATION,
        FailureKind.DUPLICATE,
        FailureKind.DUPLICATE,
    ]
    assert len(store) == 3


def test_import_skips_header_and_blank_lines_without_counting():
    store = CharacterStore()
    lines = [
        "",
        "id,handle,server,occupation,wantedLevel,bountyCents,reputation,active\n",
        VALID_LINES[0] + "\n",
        "   \n",
        VALID_LINES[1] + "\r\n",
    ]

    report = import_lines(store, lines)

    assert (report.added, report.skipped) == (2, 0)


def test_header_only_recognized_on_first_data_line():
    store = CharacterStore()
    header = "id,handle,server,occupation,wantedLevel,bountyCents,reputation,active"

    report = import_lines(store, [VALID_LINES[0], header])

    assert (report.added, report.skipped) == (1, 1)


def test_parse_report_line_drops_score_and_marks_active():
    result = parse_report_line("2,High,NA,Courier,5,91000,-10,1420")

    assert result
    assert result.value.active is True
    assert result.value.bounty_cents == 91000
    assert parse_report_line("2,High,NA").kind is FailureKind.PARSE


def test_export_then_reimport_reproduces_fields(tmp_path: Path, store):
    entries = top_n(10, store.all())
    out = export_file(tmp_path / "reports" / "top.csv", entries)

    reloaded = CharacterStore()
    report = import_file(reloaded, out)

    assert report.added == len(entries)
    fields = ["id", "handle", "server", "occupation", "wanted_level", "bounty_cents", "reputation"]
    for entry in entries:
        again = reloaded.find_by_id(entry.character.id)
        assert again.model_dump(include=set(fields)) == entry.character.model_dump(include=set(fields))


def test_import_file_reads_from_disk(tmp_path: Path):
    path = tmp_path / "characters.csv"
    path.write_text("\n".join(["id,handle,server,occupation,wantedLevel,bountyCents,reputation,active", *VALID_LINES]), encoding="utf-8")
    store = CharacterStore()

    report = import_file(store, path)

    assert report.added == 3
    assert store.find_by_id(3).active is False


def test_import_file_missing_raises_data_file_error(tmp_path: Path):
    with pytest.raises(DataFileError) as excinfo:
        import_file(CharacterStore(), tmp_path / "nope.csv")

    assert excinfo.value.path == tmp_path / "nope.csv"
    assert excinfo.value.report.added == 0


def test_import_file_broken_stream_keeps_partial_progress(tmp_path: Path):
    path = tmp_path / "broken.csv"
    path.write_bytes(("\n".join(VALID_LINES[:2]) + "\n").encode("utf-8") + b"3,\xff\xfe\xfa,NA,x,1,1,1,true\n" * 4000)
    store = CharacterStore()

    with pytest.raises(DataFileError) as excinfo:
        import_file(store, path)

    assert excinfo.value.report is not None
    assert len(store) == excinfo.value.report.added


def test_import_lines_propagates_stream_errors():
    def lines():
        yield VALID_LINES[0]
        raise OSError("disk gone")

    with pytest.raises(OSError):
        import_lines(CharacterStore(), lines())


def test_export_file_unwritable_path_raises(tmp_path: Path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(DataFileError):
        export_file(blocker / "sub" / "top.csv", [])


def test_export_then_reimport_keeps_commas_in_text_fields(tmp_path: Path, make_character):
    store = CharacterStore()
    assert store.add(make_character(1, "Neo", occupation="Courier, part-time"))
    assert store.add(make_character(2, "Smith, Agent", occupation="Fixer"))
    entries = top_n(10, store.all())

    out = export_file(tmp_path / "top.csv", entries)
    reloaded = CharacterStore()
    report = import_file(reloaded, out)

    assert (report.added, report.skipped) == (2, 0)
    assert reloaded.find_by_id(1).occupation == "Courier, part-time"
    assert reloaded.find_by_handle("smith, agent").id == 2
    assert '1,Neo,NA,"Courier, part-time",1,500,10,105' in out.read_text(encoding="utf-8")


def test_import_lines_accepts_quoted_fields():
    store = CharacterStore()

    report = import_lines(store, ['7,"Ghost, Jr.",EU,"Medic, field",2,0,0,true'])

    assert report.added == 1
    assert store.find_by_id(7).handle == "Ghost, Jr."
    assert store.find_by_id(7).occupation == "Medic, field"
