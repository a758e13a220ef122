import pytest

from typwork.errors import SchemeIsNotFileError
from typwork.fonts import FontManager
from typwork.local import path_to_uri
from typwork.package import PackageId, VirtualPath
from typwork.source import PositionEncoding, TextChange
from typwork.workspace import Workspace


@pytest.fixture
def root(tmp_path):
    (tmp_path / "main.typ").write_text("= Title")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "chapter.typ").write_text("chapter")
    (tmp_path / "image.bin").write_bytes(b"\x00\x01")
    return tmp_path


def make_workspace(*roots):
    return Workspace([path_to_uri(r) for r in roots], fonts=FontManager.builder().build())


def test_register_files(root):
    workspace = make_workspace(root)
    workspace.register_files()
    assert workspace.known_uris() == {
        path_to_uri(root / "main.typ"),
        path_to_uri(root / "sub" / "chapter.typ"),
    }


def test_full_id_and_uri_round_trip(root):
    workspace = make_workspace(root)
    uri = path_to_uri(root / "sub" / "chapter.typ")
    full_id = workspace.full_id(uri)
    assert full_id.package == PackageId.new_current(path_to_uri(root))
    assert full_id.vpath == VirtualPath("/sub/chapter.typ")
    assert workspace.uri(full_id) == uri


def test_read_source_and_bytes(root):
    workspace = make_workspace(root)
    source = workspace.read_source(path_to_uri(root / "main.typ"))
    assert source.text == "= Title"
    assert source.file_id.vpath == VirtualPath("/main.typ")
    assert workspace.read_bytes(path_to_uri(root / "image.bin")) == b"\x00\x01"


def test_removed_folder_no_longer_used(root):
    workspace = make_workspace(root, root / "sub")
    workspace.handle_workspace_folders_change_event([], [path_to_uri(root / "sub")])
    full_id = workspace.full_id(path_to_uri(root / "sub" / "chapter.typ"))
    assert full_id.package == PackageId.new_current(path_to_uri(root))


def test_change_event_clears_cache_and_reregisters(root):
    workspace = make_workspace(root)
    workspace.register_files()
    uri = path_to_uri(root / "image.bin")
    assert workspace.read_bytes(uri) == b"\x00\x01"
    workspace.write_raw(uri, b"new")
    assert workspace.read_bytes(uri) == b"\x00\x01"
    before = workspace.known_uris()
    workspace.handle_workspace_folders_change_event([], [])
    assert workspace.read_bytes(uri) == b"new"
    assert workspace.known_uris() == before


def test_open_edit_close(root):
    workspace = make_workspace(root)
    uri = path_to_uri(root / "main.typ")
    workspace.open_lsp(uri, "= Title")
    workspace.edit_lsp(uri, [TextChange("Heading", ((0, 2), (0, 7)))], PositionEncoding.UTF8)
    assert workspace.read_source(uri).text == "= Heading"
    workspace.close_lsp(uri)
    assert workspace.read_source(uri).text == "= Title"


def test_clear_drops_open_documents(root):
    workspace = make_workspace(root)
    uri = path_to_uri(root / "main.typ")
    workspace.open_lsp(uri, "edited")
    assert workspace.read_source(uri).text == "edited"
    workspace.clear()
    assert workspace.read_source(uri).text == "= Title"


def test_local_notifications(root):
    workspace = make_workspace(root)
    uri = path_to_uri(root / "fresh.typ")
    workspace.new_local(uri)
    assert uri in workspace.known_uris()
    (root / "fresh.typ").write_text("fresh")
    workspace.invalidate_local(uri)
    assert workspace.read_source(uri).text == "fresh"
    workspace.delete_local(uri)
    assert uri not in workspace.known_uris()


def test_font_manager_is_kept():
    fonts = FontManager.builder().build()
    workspace = Workspace([], fonts=fonts)
    assert workspace.font_manager is fonts


def test_register_files_rejects_non_file_root():
    workspace = Workspace(["untitled:folder"], fonts=FontManager.builder().build())
    with pytest.raises(SchemeIsNotFileError):
        workspace.register_files()