import io
import tarfile
from pathlib import Path

import pytest

from mkrepo.templates import TemplateError, TemplateNotFound, TemplateStore


def _write_archive(path: Path, files: dict[str, str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as tar:
        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))


def test_archive_path_uses_tar_gz_suffix(tmp_path) -> None:
    store = TemplateStore(tmp_path)

    assert store.archive_path("typescript") == tmp_path / "typescript.tar.gz"


@pytest.mark.parametrize("name", ["", "..", "nested/name"])
def test_archive_path_rejects_invalid_names(tmp_path, name) -> None:
    with pytest.raises(TemplateError, match="Invalid template name"):
        TemplateStore(tmp_path).archive_path(name)


def test_extract_writes_template_files(tmp_path) -> None:
    templates = tmp_path / "templates"
    _write_archive(
        templates / "python.tar.gz",
        {"README.md": "# Project\n", "src/main.py": "print('hi')\n"},
    )
    destination = tmp_path / "repo"
    destination.mkdir()

    TemplateStore(templates).extract("python", destination)

    assert (destination / "README.md").read_text(encoding="utf-8") == "# Project\n"
    assert (destination / "src" / "main.py").is_file()


def test_extract_missing_template(tmp_path) -> None:
    with pytest.raises(TemplateNotFound, match="'rust' not found"):
        TemplateStore(tmp_path).extract("rust", tmp_path / "repo")


def test_extract_corrupt_archive(tmp_path) -> None:
    (tmp_path / "broken.tar.gz").write_bytes(b"not a tarball")

    with pytest.raises(TemplateError, match="Failed to extract"):
        TemplateStore(tmp_path).extract("broken", tmp_path / "repo")


def test_extract_rejects_members_outside_destination(tmp_path) -> None:
    templates = tmp_path / "templates"
    _write_archive(templates / "evil.tar.gz", {"../escape.txt": "nope"})
    destination = tmp_path / "repo"
    destination.mkdir()

    with pytest.raises(TemplateError):
        TemplateStore(templates).extract("evil", destination)

    assert not (tmp_path / "escape.txt").exists()


def test_default_template_dir_is_under_home(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    assert TemplateStore().template_dir == tmp_path / ".mkrepo" / "templates"
