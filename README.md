# typwork

`typwork` models the workspace of a Typst language server: the folders a user
has open, the files in them, the documents the editor is currently editing, and
the fonts available to the compiler. It has no dependencies outside the
standard library. URIs are plain strings such as `file:///home/me/notes/a.typ`.

## Modules

- `typwork.package`: `VirtualPath` (a normalized, rooted path inside a
  package), `PackageSpec`, `FileId`, `Package`, `PackageId` and `FullFileId`,
  plus `join_rooted` and `make_relative_rooted` for moving between
  package-relative paths and URIs. `FileId.fill(current)` names the package of
  an ID fully; `FullFileId.to_file_id()` goes back.
- `typwork.package_manager.PackageManager`: gives the canonical `FullFileId`
  for a URI. Among the workspace folders that contain the URI it picks the
  most specific one; if none does, the file's own directory is taken as the
  package root. `handle_change_event(added, removed)` updates the folders.
- `typwork.local`: `LocalFs` reads and writes files on disk and finds `.typ`
  sources under a root with `search_sources`; the helpers `uri_to_path`,
  `path_to_uri`, `is_typst`, `read_path_raw`, `read_path_string` and
  `write_path_raw`.
- `typwork.source`: `Source` (a file ID and its text), `TextChange`,
  `PositionEncoding` (`UTF8` or `UTF16`) and `range_to_offsets`, which maps an
  editor range of `(line, character)` pairs onto string offsets.
- `typwork.lsp_fs.LspFs`: documents opened by the editor, with whole or
  ranged edits applied in order.
- `typwork.cache.Cache`: reads through an inner provider once per URI until
  the entry is invalidated; `known_uris()` lists cached local `.typ` files.
- `typwork.fs_manager.FsManager`: editor documents first, then the cached
  local disk.
- `typwork.fonts`: `FontBuilder` (from `FontManager.builder()`) collects font
  faces from files and directories (`with_paths`) or the system's font
  directories (`with_system`); `FontManager.book` describes them as
  `FontInfo`s and `FontManager.font(i)` loads the face on first use, returning
  None if it cannot. `read_font_infos(data)` reads the faces of a TrueType or
  OpenType file or collection.
- `typwork.workspace.Workspace` and `typwork.project.Project`: tie the above
  together. `Workspace(root_uris, fonts=..., external=...)` searches the
  system's fonts when no `fonts` are given.
- `typwork.world.ProjectWorld`: what one compilation sees — a project, its
  main source, fonts, files, and a clock (`typwork.clock.Now`) that is read
  once and then kept fixed.
- `typwork.typst_thread.TypstThread`: runs work one item at a time on a
  dedicated thread; `await thread.run(f)` and
  `await thread.run_with_world(project, main, f)` return the result or raise
  the exception of `f`. It is a context manager; `close()` stops it.

## Installation

```
pip install .
```

## Example

```python
from typwork.local import path_to_uri
from typwork.package_manager import PackageManager

root = path_to_uri("/home/me/notes")
manager = PackageManager([root])
full_id = manager.full_id(path_to_uri("/home/me/notes/chapters/one.typ"))
print(full_id.vpath.as_rooted_path())   # /chapters/one.typ
```

Errors are raised as subclasses of `typwork.errors.FsError`; call
`to_file_error(file_id)` on one to get the `typwork.errors.FileError` reported
to the compiler. `ProjectWorld.source` and `ProjectWorld.file` raise that
`FileError` directly.

## What it does not do

- It is not a language server: there is no command, no protocol handling and
  no compiler. It supplies the workspace model such a server works against.
- It ships no fonts of its own; only fonts found on disk are available.
- It does not fetch external packages. Pass an `external` object with
  `package(spec)` and `full_id(uri)` to `PackageManager` or `Workspace` to
  provide them; without one, asking for an external package raises
  `ExternalPackageError`.

## Tests

```
pip install ".[test]"
pytest
```