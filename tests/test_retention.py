import os

from portwatch.retention import cleanup_destination, relocate_file, wait_for_file_ready


def make_files(folder, names, ext=".zip"):
    paths = []
    for i, name in enumerate(names):
        p = folder / f"{name}{ext}"
        p.write_bytes(b"x")
        os.utime(p, (1_000_000 + i, 1_000_000 + i))
        paths.append(p)
    return paths


def test_cleanup_keeps_newest(tmp_path):
    paths = make_files(tmp_path, ["a", "b", "c", "d", "e"])
    (tmp_path / "notes.txt").write_text("keep me")
    deleted = cleanup_destination(tmp_path, ".zip", max_files=5, keep=2)
    assert deleted == paths[:3]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["d.zip", "e.zip", "notes.txt"]


def test_cleanup_below_max_does_nothing(tmp_path):
    make_files(tmp_path, ["a", "b"])
    assert cleanup_destination(tmp_path, ".zip", max_files=3, keep=1) == []
    assert len(list(tmp_path.iterdir())) == 2


def test_cleanup_missing_folder(tmp_path):
    assert cleanup_destination(tmp_path / "nope", ".zip", max_files=1, keep=0) == []


def test_wait_for_missing_file_times_out(tmp_path):
    assert wait_for_file_ready(tmp_path / "later.zip", poll=0.01, timeout=0.05) is False


def test_relocate_copies_and_trims(tmp_path):
    src = tmp_path / "in"
    dest = tmp_path / "out"
    src.mkdir()
    dest.mkdir()
    make_files(dest, ["old1", "old2"])
    new_file = src / "new.zip"
    new_file.write_bytes(b"payload")

    result = relocate_file(new_file, dest, ".zip", max_files=3, keep=2, poll=0.01, timeout=1.0)
    assert result == dest / "new.zip"
    assert result.read_bytes() == b"payload"
    assert len(list(dest.glob("*.zip"))) == 2
    assert not (dest / "old1.zip").exists()
