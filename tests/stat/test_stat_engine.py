import io
import unittest

from gdrivestat.errors import (
    AggregatedError,
    ApiError,
    NotFoundError,
    PageStreamError,
    PermissionError,
    PermissionFetchError,
)
from gdrivestat.models import DepthBudget, DriveObject, PermissionEntry, ReportOptions
from gdrivestat.stat import PageStream, StatEngine, StreamSink
from gdrivestat.stat.engine import join_display_path, sort_for_checksums
from gdrivestat.util.mime import FOLDER_MIME


def _file(file_id: str, name: str, md5: str = "") -> DriveObject:
    return DriveObject(
        id=file_id,
        name=name,
        mime_type="text/plain",
        md5_checksum=md5,
        original_filename=name,
        copyable=True,
    )


def _folder(file_id: str, name: str) -> DriveObject:
    return DriveObject(
        id=file_id,
        name=name,
        mime_type=FOLDER_MIME,
        is_dir=True,
        original_filename=name,
    )


class FakeRemote:
    def __init__(self) -> None:
        self.by_path: dict[str, DriveObject] = {}
        self.by_id: dict[str, DriveObject] = {}
        self.children: dict[str, list[DriveObject]] = {}
        self.perms: dict[str, list[PermissionEntry]] = {}
        self.perm_errors: set[str] = set()
        self.list_errors: set[str] = set()
        self.listed: list[tuple[str, bool]] = []

    def add(self, path: str, obj: DriveObject, parent: DriveObject | None = None) -> DriveObject:
        self.by_path[path] = obj
        self.by_id[obj.id] = obj
        if parent is not None:
            self.children.setdefault(parent.id, []).append(obj)
        return obj

    def find_by_path(self, path: str) -> DriveObject:
        if path not in self.by_path:
            raise NotFoundError(f"{path}: no such file or folder")
        return self.by_path[path]

    def find_by_id(self, file_id: str) -> DriveObject:
        if file_id not in self.by_id:
            raise NotFoundError(f"file {file_id} not found")
        return self.by_id[file_id]

    def list_children(self, parent_id: str, *, include_hidden: bool = False) -> PageStream:
        self.listed.append((parent_id, include_hidden))
        return PageStream(self._pages, parent_id, include_hidden=include_hidden)

    def list_permissions(self, file_id: str) -> list[PermissionEntry]:
        if file_id in self.perm_errors:
            raise PermissionError("insufficient permissions")
        return list(self.perms.get(file_id, []))

    def _pages(self, parent_id: str, include_hidden: bool):
        if parent_id in self.list_errors:
            raise ApiError("backend unavailable")
        children = self.children.get(parent_id, [])
        if not include_hidden:
            children = [c for c in children if not c.name.startswith(".")]
        # two children per page
        for i in range(0, len(children), 2):
            yield children[i : i + 2]


def _engine(remote: FakeRemote, **options) -> tuple[StatEngine, io.StringIO]:
    out = io.StringIO()
    engine = StatEngine(remote, ReportOptions(**options), StreamSink(out))
    return engine, out


class TestDisplayPaths(unittest.TestCase):
    def test_join_display_path_collapses_separators(self) -> None:
        self.assertEqual(join_display_path("a", "b"), "a/b")
        self.assertEqual(join_display_path("a//", "b"), "a/b")
        self.assertEqual(join_display_path("/a", "b"), "/a/b")
        self.assertEqual(join_display_path("", "b"), "/b")

    def test_sort_for_checksums_puts_empty_checksums_first(self) -> None:
        children = [_file("1", "x", "b"), _file("2", "y", ""), _file("3", "z", "a")]
        ordered = sort_for_checksums(children)
        self.assertEqual([c.name for c in ordered], ["y", "z", "x"])

    def test_sort_for_checksums_breaks_ties_by_name(self) -> None:
        children = [_file("1", "b", "same"), _file("2", "a", "same")]
        self.assertEqual([c.name for c in sort_for_checksums(children)], ["a", "b"])


class TestStatEngineChecksumMode(unittest.TestCase):
    def test_end_to_end_folder_with_one_file(self) -> None:
        remote = FakeRemote()
        a = remote.add("/a", _folder("A", "a"))
        remote.add("/a/b", _file("B", "b", "deadbeef"), parent=a)

        engine, out = _engine(remote, checksum_only=True, depth=1)
        summary = engine.stat_by_path(["/a"])

        self.assertEqual(out.getvalue(), "%32s  a/b\n" % "deadbeef")
        self.assertEqual(out.getvalue().strip(), "deadbeef  a/b")
        self.assertEqual(summary.sources, ["/a"])
        self.assertEqual(summary.objects_rendered, 2)

    def test_children_rendered_in_checksum_then_name_order(self) -> None:
        remote = FakeRemote()
        root = remote.add("/d", _folder("D", "d"))
        remote.add("/d/x", _file("X", "x", "b"), parent=root)
        remote.add("/d/y", _file("Y", "y", ""), parent=root)
        remote.add("/d/z", _file("Z", "z", "a"), parent=root)

        engine, out = _engine(remote, checksum_only=True, depth=1)
        engine.stat_by_path(["/d"])

        lines = [line.strip() for line in out.getvalue().splitlines()]
        self.assertEqual(lines, ["a  d/z", "b  d/x"])

    def test_root_folder_is_listed_without_label(self) -> None:
        remote = FakeRemote()
        root = remote.add("/", _folder("ROOT", "My Drive"))
        remote.add("/b", _file("B", "b", "deadbeef"), parent=root)

        engine, out = _engine(
            remote, checksum_only=True, depth=-1, root_path_is_trivial=True
        )
        engine.stat_by_path(["/"])

        self.assertEqual(out.getvalue().strip(), "deadbeef  b")

    def test_stat_by_id_labels_with_object_name(self) -> None:
        remote = FakeRemote()
        remote.add("/docs/report.pdf", _file("F1", "report.pdf", "0123"))

        engine, out = _engine(remote, checksum_only=True)
        engine.stat_by_id(["F1"])

        self.assertEqual(out.getvalue().strip(), "0123  report.pdf")

    def test_folder_without_checksum_emits_nothing(self) -> None:
        remote = FakeRemote()
        remote.add("/a", _folder("A", "a"))

        engine, out = _engine(remote, checksum_only=True, depth=1)
        engine.stat_by_path(["/a"])

        self.assertEqual(out.getvalue(), "")


class TestStatEngineDepth(unittest.TestCase):
    def _chain(self, levels: int) -> FakeRemote:
        # folder f0 holds leaf0 and f1, f1 holds leaf1 and f2, ...
        remote = FakeRemote()
        parent = remote.add("/f0", _folder("F0", "f0"))
        path = "/f0"
        for level in range(levels):
            remote.add(f"{path}/leaf{level}", _file(f"L{level}", f"leaf{level}", f"md5-{level}"), parent=parent)
            path = f"{path}/f{level + 1}"
            parent = remote.add(path, _folder(f"F{level + 1}", f"f{level + 1}"), parent=parent)
        return remote

    def test_depth_zero_renders_only_the_start_object(self) -> None:
        remote = FakeRemote()
        a = remote.add("/a", _folder("A", "a"))
        remote.add("/a/b", _file("B", "b", "deadbeef"), parent=a)

        engine, out = _engine(remote)
        engine.stat("/a", a, DepthBudget.finite(0))

        self.assertEqual(remote.listed, [])
        self.assertIn("/a", out.getvalue())
        self.assertNotIn("deadbeef", out.getvalue())

    def test_depth_n_stops_after_n_levels(self) -> None:
        remote = self._chain(4)

        engine, out = _engine(remote, checksum_only=True)
        engine.stat("f0", remote.find_by_path("/f0"), 2)

        # Folders have no checksum, so each sub-folder is visited before its
        # sibling leaf.
        lines = [line.strip() for line in out.getvalue().splitlines()]
        self.assertEqual(lines, ["md5-1  f0/f1/leaf1", "md5-0  f0/leaf0"])
        self.assertNotIn("leaf2", out.getvalue())
        self.assertEqual([p for p, _ in remote.listed], ["F0", "F1"])

    def test_unlimited_depth_reaches_the_bottom(self) -> None:
        remote = self._chain(4)

        engine, out = _engine(remote, checksum_only=True, depth=-1)
        engine.stat_by_path(["/f0"])

        self.assertIn("md5-3  f0/f1/f2/f3/leaf3", [l.strip() for l in out.getvalue().splitlines()])

    def test_include_hidden_is_passed_to_listing(self) -> None:
        remote = FakeRemote()
        a = remote.add("/a", _folder("A", "a"))
        remote.add("/a/.env", _file("H", ".env", "hidden"), parent=a)

        engine, out = _engine(remote, checksum_only=True, depth=1)
        engine.stat_by_path(["/a"])
        self.assertEqual(out.getvalue(), "")
        self.assertEqual(remote.listed, [("A", False)])

        engine, out = _engine(remote, checksum_only=True, depth=1, include_hidden=True)
        engine.stat_by_path(["/a"])
        self.assertEqual(out.getvalue().strip(), "hidden  a/.env")


class TestStatEngineVerboseAndCsv(unittest.TestCase):
    def test_folder_report_has_no_checksum_or_copyable(self) -> None:
        remote = FakeRemote()
        a = remote.add("/a", _folder("A", "a"))

        engine, out = _engine(remote)
        engine.stat("/a", a, 0)

        self.assertIn("DirType", out.getvalue())
        self.assertNotIn("Md5Checksum", out.getvalue())
        self.assertNotIn("Copyable", out.getvalue())

    def test_permissions_follow_metadata(self) -> None:
        remote = FakeRemote()
        f = remote.add("/f", _file("F", "f", "abc"))
        remote.perms["F"] = [PermissionEntry("Ann", "ann@example.com", "owner", "user")]

        engine, out = _engine(remote)
        engine.stat_by_path(["/f"])

        text = out.getvalue()
        self.assertLess(text.index("Md5Checksum"), text.index("Name: Ann <ann@example.com>"))

    def test_permission_failure_is_raised_after_metadata(self) -> None:
        remote = FakeRemote()
        a = remote.add("/a", _folder("A", "a"))
        remote.add("/a/b", _file("B", "b"), parent=a)
        remote.perm_errors.add("A")

        engine, out = _engine(remote, depth=1)
        with self.assertRaises(PermissionFetchError) as ctx:
            engine.stat("/a", a, 1)

        self.assertIn("Filename", out.getvalue())
        self.assertIsInstance(ctx.exception.cause, PermissionError)
        self.assertEqual(ctx.exception.status_code, PermissionError.status_code)
        self.assertEqual(remote.listed, [])

    def test_csv_permission_failure_does_not_stop_traversal(self) -> None:
        remote = FakeRemote()
        a = remote.add("/a", _folder("A", "a"))
        remote.add("/a/b", _file("B", "b"), parent=a)
        remote.perm_errors.add("A")
        remote.perms["B"] = [PermissionEntry("Bob", "bob@example.com", "reader", "user")]

        engine, out = _engine(remote, csv=True, depth=1)
        engine.stat_by_path(["/a"])

        rows = out.getvalue().splitlines()
        self.assertEqual(rows[0], "File Name, Type, Name, Email, Role, AccountType")
        self.assertEqual(len(rows), 2)
        self.assertTrue(rows[1].startswith("b"))

    def test_csv_header_emitted_once_per_invocation(self) -> None:
        remote = FakeRemote()
        for name in ("p", "q"):
            remote.add(f"/{name}", _file(name.upper(), name))
            remote.perms[name.upper()] = [
                PermissionEntry("Ann", "ann@example.com", "owner", "user"),
                PermissionEntry("Bob", "bob@example.com", "reader", "user"),
            ]

        engine, out = _engine(remote, csv=True)
        engine.stat_by_path(["/p", "/q"])

        text = out.getvalue()
        self.assertEqual(text.count("File Name, Type, Name, Email, Role, AccountType"), 1)
        self.assertEqual(len(text.splitlines()), 5)

        # A new invocation on the same engine starts with a fresh header guard.
        engine.stat_by_path(["/p"])
        self.assertEqual(out.getvalue().count("File Name, Type"), 2)


class TestStatEngineErrors(unittest.TestCase):
    def test_failed_sources_are_aggregated(self) -> None:
        remote = FakeRemote()
        remote.add("good", _file("G", "good", "c0ffee"))

        engine, out = _engine(remote, checksum_only=True)
        with self.assertRaises(AggregatedError) as ctx:
            engine.stat_by_path(["good", "bad1", "bad2"])

        err = ctx.exception
        self.assertEqual(out.getvalue().strip(), "c0ffee  good")
        self.assertEqual(len(err.messages), 2)
        self.assertIn("stat: bad1 err: bad1: no such file or folder", str(err))
        self.assertIn("stat: bad2 err: bad2: no such file or folder", str(err))
        self.assertEqual(err.status_code, NotFoundError.status_code)
        self.assertEqual(err.details["summary"].sources, ["good"])

    def test_stat_by_id_failures_use_stat_by_id_prefix(self) -> None:
        engine, _ = _engine(FakeRemote())
        with self.assertRaises(AggregatedError) as ctx:
            engine.stat_by_id(["nope"])
        self.assertTrue(str(ctx.exception).startswith("statById: nope err:"))

    def test_listing_failure_of_source_propagates(self) -> None:
        remote = FakeRemote()
        a = remote.add("/a", _folder("A", "a"))
        remote.list_errors.add("A")

        engine, _ = _engine(remote, checksum_only=True, depth=1)
        with self.assertRaises(PageStreamError) as ctx:
            engine.stat("a", a, 1)
        self.assertIsInstance(ctx.exception.cause, ApiError)

        with self.assertRaises(AggregatedError) as agg:
            engine.stat_by_path(["/a"])
        self.assertIsInstance(agg.exception.errors[0], PageStreamError)
        self.assertEqual(agg.exception.status_code, ApiError.status_code)

    def test_subtree_failure_does_not_stop_siblings(self) -> None:
        remote = FakeRemote()
        a = remote.add("/a", _folder("A", "a"))
        remote.add("/a/broken", _folder("BR", "broken"), parent=a)
        remote.add("/a/z", _file("Z", "z", "ffff"), parent=a)
        remote.list_errors.add("BR")

        engine, out = _engine(remote, checksum_only=True, depth=-1)
        summary = engine.stat_by_path(["/a"])

        self.assertEqual(out.getvalue().strip(), "ffff  a/z")
        self.assertFalse(summary.complete)
        self.assertEqual(len(summary.subtree_errors), 1)
        self.assertEqual(summary.subtree_errors[0].details["path"], "a/broken")
        self.assertIsInstance(summary.subtree_errors[0].cause, PageStreamError)


if __name__ == "__main__":
    unittest.main()
