from pathlib import Path

from click.testing import Result
from conftest import FakeBear
from pytest import MonkeyPatch, fixture
from typer.testing import CliRunner

from bear_notes import NoteInfo, detect, detect_all
from bear_notes.tools.cli.main import RootContext, app

runner = CliRunner()

B_BODY = "B body\n\n---\n<!-- Note ID: AAA-1 -->\n"


@fixture(autouse=True)
def setup_cli(monkeypatch: MonkeyPatch, tmp_path: Path, bear: FakeBear):
    """
    Run commands in an empty folder against the fake session.
    """
    monkeypatch.chdir(tmp_path)

    for var in ["BEAR_XCALL", "BEAR_TOKEN", "BEAR_NOTES_CONFIG_FILE"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.setattr(
        RootContext, "create_session", lambda self, **kwargs: bear
    )


def test_create(bear: FakeBear):
    result = _run(["create", "Hello world", "--add-id"])

    assert "C0FFEE-0001" in result.stdout
    assert bear.notes == {
        "C0FFEE-0001": "Hello world\n\n---\n<!-- Note ID: C0FFEE-0001 -->"
    }


def test_create_write_back(tmp_path: Path, bear: FakeBear):
    path = tmp_path / "note.md"
    path.write_text("# Note\nBody\n")

    args = ["create", "-f", "note.md", "--add-id", "--creation-date", "-w"]

    _run(args)

    assert detect(path.read_text()) == "C0FFEE-0001"
    assert bear.notes["C0FFEE-0001"] == path.read_text()

    # embedded id now used to update the same note
    _run(args)

    assert list(bear.notes) == ["C0FFEE-0001"]
    assert "*Last Updated: " in path.read_text()
    assert detect_all(path.read_text()) == ["C0FFEE-0001"]


def test_create_errors(bear: FakeBear):
    # write back without file
    _run(["create", "-w", "Text"], exit_code=2)

    # no text
    _run(["create"], exit_code=2)

    # missing file
    _run(["create", "-f", "missing.md"], exit_code=2)

    # empty note
    _run(["create", "   "], exit_code=1)

    assert bear.notes == {}


def test_add_text(bear: FakeBear):
    bear.notes["ABC-1"] = "# Title\nBody"

    result = _run(["add-text", "More", "--id", "ABC-1"])

    assert bear.notes["ABC-1"] == "# Title\nBody\nMore"
    assert "More" in result.stdout

    _run(["add-text", "Again", "--title", "Title", "--add-id"])

    assert bear.notes["ABC-1"] == (
        "# Title\nBody\nMore\nAgain\n\n---\n<!-- Note ID: ABC-1 -->"
    )


def test_add_text_errors(bear: FakeBear):
    bear.notes["ABC-1"] = "# Title\nBody"

    _run(["add-text", "More"], exit_code=2)
    _run(["add-text", "More", "--id", "FFF-9"], exit_code=1)
    _run(["add-text", "More", "--title", "Other"], exit_code=1)

    assert bear.notes == {"ABC-1": "# Title\nBody"}


def test_update(bear: FakeBear):
    bear.notes["ABC-1"] = "# Title\nBody"

    _run(
        [
            "update",
            "# Title\nNew",
            "--id",
            "ABC-1",
            "--mode",
            "replace_all",
            "--add-id",
            "-y",
        ]
    )

    assert bear.notes["ABC-1"] == "# Title\nNew\n\n---\n<!-- Note ID: ABC-1 -->"


def test_update_cancel(bear: FakeBear):
    bear.notes["ABC-1"] = "# Title\nBody"

    result = _run(["update", "New", "--id", "ABC-1"], input="n\n")

    assert "Update cancelled" in result.stdout
    assert bear.notes["ABC-1"] == "# Title\nBody"
    assert bear.calls == []


def test_update_search(bear: FakeBear):
    bear.notes["ABC-1"] = "# Title\nBody"
    bear.search_results = [NoteInfo(identifier="ABC-1", title="Title")]

    _run(["update", "Top", "-s", "Title", "--mode", "prepend", "-y"])

    assert bear.notes["ABC-1"] == "Top\n# Title\nBody"

    bear.search_results = []
    _run(["update", "Top", "-s", "Nothing", "-y"], exit_code=2)

    # no way to identify note
    _run(["update", "Top", "-y"], exit_code=2)


def test_search(bear: FakeBear):
    bear.search_results = [
        NoteInfo(identifier="A-1", title="One"),
        NoteInfo(identifier="B-2", title="Two"),
    ]

    result = _run(["search", "meet"])

    assert "One" in result.stdout
    assert "B-2" in result.stdout

    bear.search_results = []
    result = _run(["search", "meet"])

    assert "No notes found" in result.stdout


def test_search_detect_embedded(bear: FakeBear):
    bear.notes["ABC-1"] = "# One\nText\n\n---\n<!-- Note ID: ABC-1 -->"
    bear.notes["DEF-2"] = "# Two\n<!-- Note ID: ABC-1 -->"
    bear.notes["FED-3"] = "# Three\nNo id"

    result = _run(["search", "--detect-embedded"])

    assert "mismatched" in result.stdout
    assert "Found 2 note(s) with embedded ids" in result.stdout


def test_batch_update(tmp_path: Path, bear: FakeBear):
    folder = _setup_folder(tmp_path, bear)

    result = _run(["batch-update", "notes", "--add-id", "--creation-date"])

    assert "Batch update summary" in result.stdout
    assert (folder / "a.md").read_text() == "A body\n"
    assert "*Last Updated: " in (folder / "b.md").read_text()
    assert bear.notes["AAA-1"] == (folder / "b.md").read_text()

    # subfolder only processed if recursive
    assert (folder / "sub" / "c.md").read_text() == B_BODY

    _run(["batch-update", "notes", "-r", "--no-write-back"])
    assert (folder / "sub" / "c.md").read_text() == B_BODY


def test_batch_update_config(tmp_path: Path, bear: FakeBear):
    folder = _setup_folder(tmp_path, bear)

    (tmp_path / "bear-notes.yaml").write_text(
        "footer:\n  add_id: true\nbatch:\n  write_back: false\n"
    )

    _run(["batch-update", "notes"])

    assert (folder / "b.md").read_text() == B_BODY
    assert bear.notes["AAA-1"] == "B body\n\n---\n<!-- Note ID: AAA-1 -->"


def test_batch_update_errors(tmp_path: Path, bear: FakeBear):
    _run(["batch-update", "missing"], exit_code=2)

    (tmp_path / "empty").mkdir()
    result = _run(["batch-update", "empty"])
    assert "No files found" in result.stdout

    _setup_folder(tmp_path, bear)
    bear.apply_error = True

    _run(["batch-update", "notes"], exit_code=1)


def test_search_token(monkeypatch: MonkeyPatch, bear: FakeBear):
    tokens: list[str | None] = []

    def create_session(self: RootContext, *, token: str | None = None):
        tokens.append(token or self.token)
        return bear

    monkeypatch.setattr(RootContext, "create_session", create_session)

    _run(["--token", "TOKEN-1", "search", "x"])
    _run(["--token", "TOKEN-1", "search", "x", "--token", "TOKEN-2"])

    assert tokens == ["TOKEN-1", "TOKEN-2"]


def test_config_file(tmp_path: Path):
    _run(["--config-file", "missing.yaml", "search", "x"], exit_code=2)

    (tmp_path / "bad.yaml").write_text("- not\n- a mapping\n")
    _run(["--config-file", "bad.yaml", "search", "x"], exit_code=2)


def _setup_folder(tmp_path: Path, bear: FakeBear) -> Path:
    folder = tmp_path / "notes"
    (folder / "sub").mkdir(parents=True)

    (folder / "a.md").write_text("A body\n")
    (folder / "b.md").write_text(B_BODY)
    (folder / "sub" / "c.md").write_text(B_BODY)

    bear.notes["AAA-1"] = "Old B"

    return folder


def _run(
    cmd: list[str | Path], exit_code: int = 0, input: str | None = None
) -> Result:
    """
    Run command and verify exit code.
    """
    result = runner.invoke(
        app, args=[str(c) for c in cmd], input=input, catch_exceptions=False
    )

    assert result.exit_code == exit_code, result.output
    return result
