import pytest

from typwork.errors import ExternalPackageError, NotFoundLocalError
from typwork.fonts import FontManager
from typwork.local import path_to_uri
from typwork.package import FileId, FullFileId, PackageId, PackageSpec, VirtualPath
from typwork.project import Project
from typwork.workspace import Workspace


@pytest.fixture
def root(tmp_path):
    (tmp_path / "main.typ").write_text("#import \"lib.typ\"")
    (tmp_path / "logo.svg").write_bytes(b"<svg/>")
    return tmp_path


@pytest.fixture
def project(root):
    workspace = Workspace([path_to_uri(root)], fonts=FontManager.builder().build())
    return Project(PackageId.new_current(path_to_uri(root)), workspace)


def test_fill_id_uses_current_package(root, project):
    file_id = FileId(None, VirtualPath("/main.typ"))
    assert project.fill_id(file_id) == FullFileId(
        PackageId.new_current(path_to_uri(root)), VirtualPath("/main.typ")
    )


def test_fill_id_keeps_external_package(project):
    spec = PackageSpec("preview", "example", "0.1.0")
    full_id = project.fill_id(FileId(spec, VirtualPath("/lib.typ")))
    assert full_id.package == PackageId.new_external(spec)
    assert full_id.spec == spec


def test_full_id_to_uri(root, project):
    full_id = project.fill_id(FileId(None, VirtualPath("/main.typ")))
    assert project.full_id_to_uri(full_id) == path_to_uri(root / "main.typ")


def test_read_by_id(project):
    source = project.read_source_by_id(FileId(None, VirtualPath("/main.typ")))
    assert source.text == "#import \"lib.typ\""
    assert source.file_id == FileId(None, VirtualPath("/main.typ"))
    assert project.read_bytes_by_id(FileId(None, VirtualPath("/logo.svg"))) == b"<svg/>"


def test_read_by_uri(root, project):
    source = project.read_source_by_uri(path_to_uri(root / "main.typ"))
    assert source.file_id.vpath == VirtualPath("/main.typ")


def test_missing_file(project):
    with pytest.raises(NotFoundLocalError):
        project.read_source_by_id(FileId(None, VirtualPath("/lib.typ")))


def test_external_package_without_provider(project):
    spec = PackageSpec("preview", "example", "0.1.0")
    with pytest.raises(ExternalPackageError):
        project.read_bytes_by_id(FileId(spec, VirtualPath("/lib.typ")))


def test_write_raw_then_read(root, project):
    uri = path_to_uri(root / "out.pdf")
    project.write_raw(uri, b"%PDF")
    assert project.read_bytes_by_id(FileId(None, VirtualPath("/out.pdf"))) == b"%PDF"


def test_fonts_come_from_workspace(project):
    assert project.font_book() == project.workspace.font_manager.book
    assert project.font(0) is None