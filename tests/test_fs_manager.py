import pytest

from typwork.errors import NotFoundLocalError, NotSourceError
from typwork.fs_manager import FsManager
from typwork.local import path_to_uri
from typwork.package import VirtualPath
from typwork.package_manager import PackageManager
from typwork.source import PositionEncoding, TextChange


@pytest.fixture
def root(tmp_path):
    (tmp_path / "main.typ").write_text("hello")
    (tmp_path / "data.txt").write_text("data")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "chapter.typ").write_text("chapter")
    return tmp_path


@pytest.fixture
def pm(root):
    return PackageManager([path_to_uri(root)])


def test_read_source_from_disk(root, pm):
    fs = FsManager()
    source = fs.read_source(path_to_uri(root / "main.typ"), pm)
    assert source.text == "hello"
    assert source.file_id.vpath == VirtualPath("/main.typ")


def test_open_document_overrides_disk_until_closed(root, pm):
    fs = FsManager()
    uri = path_to_uri(root / "main.typ")
    fs.open_lsp(uri, "from editor", pm)
    assert fs.read_source(uri, pm).text == "from editor"
    assert fs.read_bytes(uri, pm) == b"from editor"
    fs.close_lsp(uri)
    assert fs.read_source(uri, pm).text == "hello"


def test_non_source_file(root, pm):
    fs = FsManager()
    uri = path_to_uri(root / "data.txt")
    assert fs.read_bytes(uri, pm) == b"data"
    with pytest.raises(NotSourceError):
        fs.read_source(uri, pm)


def test_missing_file(root, pm):
    fs = FsManager()
    with pytest.raises(NotFoundLocalError):
        fs.read_source(path_to_uri(root / "missing.typ"), pm)


def test_register_files_finds_sources(root):
    fs = FsManager()
    fs.register_files(path_to_uri(root))
    assert fs.known_uris() == {
        path_to_uri(root / "main.typ"),
        path_to_uri(root / "sub" / "chapter.typ"),
    }


def test_write_is_hidden_by_cache_until_invalidated(root, pm):
    fs = FsManager()
    uri = path_to_uri(root / "data.txt")
    assert fs.read_bytes(uri, pm) == b"data"
    fs.write_raw(uri, b"changed")
    assert (root / "data.txt").read_bytes() == b"changed"
    assert fs.read_bytes(uri, pm) == b"data"
    fs.invalidate_local(uri)
    assert fs.read_bytes(uri, pm) == b"changed"


def test_new_and_delete_local(root):
    fs = FsManager()
    uri = path_to_uri(root / "new.typ")
    fs.new_local(uri)
    assert uri in fs.known_uris()
    fs.delete_local(uri)
    assert uri not in fs.known_uris()


def test_edit_open_document(root, pm):
    fs = FsManager()
    uri = path_to_uri(root / "main.typ")
    fs.open_lsp(uri, "hello world", pm)
    fs.edit_lsp(uri, [TextChange("howdy", ((0, 0), (0, 5)))], PositionEncoding.UTF16)
    assert fs.read_source(uri, pm).text == "howdy world"


def test_edit_unopened_document_is_ignored(root, pm):
    fs = FsManager()
    uri = path_to_uri(root / "main.typ")
    fs.edit_lsp(uri, [TextChange("replaced")], PositionEncoding.UTF8)
    assert fs.read_source(uri, pm).text == "hello"


def test_known_uris_include_open_documents(root, pm, tmp_path_factory):
    outside = tmp_path_factory.mktemp("outside") / "loose.typ"
    fs = FsManager()
    uri = path_to_uri(outside)
    fs.open_lsp(uri, "loose", pm)
    assert uri in fs.known_uris()


def test_clear_drops_everything(root, pm):
    fs = FsManager()
    fs.register_files(path_to_uri(root))
    uri = path_to_uri(root / "main.typ")
    fs.open_lsp(uri, "edited", pm)
    fs.clear()
    assert fs.known_uris() == set()
    assert fs.read_source(uri, pm).text == "hello"