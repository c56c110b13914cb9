import datetime
from pathlib import Path

from conftest import FakeBear

from bear_notes import (
    FooterFlags,
    Mode,
    build_creation_footer,
    build_update_footer,
)
from bear_notes.tools.fs import (
    BatchStats,
    batch_reconcile,
    batch_update,
    find_note_files,
)

ALL_FLAGS = FooterFlags(creation_date=True, add_id=True)


def _setup_folder(folder: Path, bear: FakeBear) -> dict[str, Path]:
    """
    Create files without id, with id of existing note and with id of
    deleted note.
    """
    bear.notes["AAA-1"] = "Old B"

    files = {
        "plain": folder / "a.md",
        "existing": folder / "b.md",
        "deleted": folder / "c.md",
    }

    files["plain"].write_text("A body\n")
    files["existing"].write_text("B body\n\n---\n<!-- Note ID: AAA-1 -->\n")
    files["deleted"].write_text("C body\n\n---\n<!-- Note ID: DDD-4 -->\n")

    return files


def test_batch(tmp_path: Path, bear: FakeBear, now: datetime.datetime):
    files = _setup_folder(tmp_path, bear)

    stats = batch_update(
        find_note_files(tmp_path), bear, flags=ALL_FLAGS, now=now
    )

    assert stats == BatchStats(
        file_count=3, processed=2, updated=1, created=1, skipped=1, errored=0
    )
    assert stats.complete is False

    # file without id untouched
    assert files["plain"].read_text() == "A body\n"
    assert len(bear.notes) == 2

    assert files["existing"].read_text() == "B body" + build_update_footer(
        "AAA-1", include_created=True, include_id=True, now=now
    )
    assert bear.notes["AAA-1"] == files["existing"].read_text()

    # new note created, footer keeps original id
    assert files["deleted"].read_text() == "C body" + build_creation_footer(
        "DDD-4", include_created=True, include_id=True, now=now
    )
    assert "DDD-4" not in bear.notes
    assert bear.notes["C0FFEE-0001"] == files["deleted"].read_text()


def test_batch_mode(tmp_path: Path, bear: FakeBear, now: datetime.datetime):
    _setup_folder(tmp_path, bear)

    batch_update(
        find_note_files(tmp_path),
        bear,
        flags=ALL_FLAGS,
        mode=Mode.REPLACE,
        now=now,
    )

    assert [c[2] for c in bear.calls if c[0] == "AAA-1"] == [Mode.REPLACE]


def test_batch_no_write(tmp_path: Path, bear: FakeBear, now: datetime.datetime):
    files = _setup_folder(tmp_path, bear)

    stats = batch_update(
        find_note_files(tmp_path), bear, flags=ALL_FLAGS, write=False, now=now
    )

    assert stats.updated == 1
    assert files["existing"].read_text() == (
        "B body\n\n---\n<!-- Note ID: AAA-1 -->\n"
    )
    assert bear.notes["AAA-1"] != "Old B"


def test_batch_dry_run(tmp_path: Path, bear: FakeBear, now: datetime.datetime):
    files = _setup_folder(tmp_path, bear)
    contents = {k: p.read_text() for k, p in files.items()}

    stats = batch_update(
        find_note_files(tmp_path), bear, flags=ALL_FLAGS, dry_run=True, now=now
    )

    assert stats.processed == 2
    assert stats.skipped == 1
    assert stats.updated == stats.created == 0
    assert bear.calls == []
    assert {k: p.read_text() for k, p in files.items()} == contents


def test_batch_write_failure(
    tmp_path: Path, bear: FakeBear, now: datetime.datetime
):
    """
    File is left untouched if the note couldn't be written.
    """
    files = _setup_folder(tmp_path, bear)
    original = files["existing"].read_text()
    bear.apply_error = True

    stats = batch_update(
        find_note_files(tmp_path), bear, flags=ALL_FLAGS, now=now
    )

    assert stats.errored == 2
    assert stats.skipped == 1
    assert stats.processed == 0
    assert files["existing"].read_text() == original


def test_batch_error_isolation(
    tmp_path: Path, bear: FakeBear, now: datetime.datetime
):
    files = _setup_folder(tmp_path, bear)
    missing = tmp_path / "missing.md"

    stats = batch_update(
        [missing, files["existing"]], bear, flags=ALL_FLAGS, now=now
    )

    assert stats.file_count == 2
    assert stats.errored == 1
    assert stats.updated == 1


def test_batch_lookup_failure(
    tmp_path: Path, bear: FakeBear, now: datetime.datetime
):
    """
    Notes which can't be looked up are assumed missing and recreated.
    """
    files = _setup_folder(tmp_path, bear)
    bear.lookup_error = True

    stats = batch_update(
        [files["existing"]], bear, flags=ALL_FLAGS, now=now
    )

    assert stats.created == 1
    assert stats.errored == 0


def test_batch_reconcile(bear: FakeBear, now: datetime.datetime):
    bear.notes["AAA-1"] = "Old"

    stats = batch_reconcile(
        [
            (Path("x.md"), "X\n<!-- Note ID: AAA-1 -->"),
            (Path("y.md"), "Y"),
        ],
        bear,
        flags=FooterFlags(add_id=True),
        write=False,
        now=now,
    )

    assert stats.complete is False
    assert stats.updated == 1
    assert stats.skipped == 1
    assert bear.notes["AAA-1"] == "X\n\n---\n<!-- Note ID: AAA-1 -->"
