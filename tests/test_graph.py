"""Tests for the import graph model and resolution ordering."""

import pytest
from pathlib import Path

from graph.model import FileStatus, ImportGraph, SourceFile
from graph.order import resolve_order, strongly_connected_components


def make_files(*names):
    """Build SourceFiles under a fake root, in the given scan order."""
    root = Path("/repo")
    return [SourceFile(path=root / name, relative_path=name) for name in names]


def order_names(resolution):
    return [f.relative_path for f in resolution.order]


class TestSourceFile:
    """Tests for SourceFile."""

    def test_identity_is_path(self):
        """Two values with the same path are the same file."""
        a = SourceFile(path=Path("/repo/a.less"), relative_path="a.less")
        b = SourceFile(path=Path("/repo/a.less"), relative_path="other/a.less")

        assert a == b
        assert len({a, b}) == 1

    def test_set_content(self):
        """Content sets size and checksum."""
        source = SourceFile(path=Path("/repo/a.less"), relative_path="a.less")
        source.set_content("@x: 1;")

        assert source.content == "@x: 1;"
        assert source.size == 6
        assert len(source.checksum) == 64
        assert source.status is FileStatus.PENDING


class TestImportGraph:
    """Tests for ImportGraph class."""

    def test_empty_graph(self):
        """Test empty graph initialization."""
        graph = ImportGraph()
        assert len(graph) == 0
        assert graph.files == []
        assert graph.edges == {}

    def test_add_node_once(self):
        """Adding the same file twice keeps one node."""
        a, = make_files("a.less")
        graph = ImportGraph()

        assert graph.add_node(a) == 0
        assert graph.add_node(a) == 0
        assert len(graph) == 1
        assert a.path in graph

    def test_add_edge(self):
        """Test adding edges."""
        a, b = make_files("a.less", "b.less")
        graph = ImportGraph([a, b])

        graph.add_edge(a.path, b.path)

        assert b.path in graph.get_targets(a.path)
        assert a.path in graph.get_sources(b.path)
        assert graph.successors(0) == [1]

    def test_duplicate_edges_collapse(self):
        """Importing the same file twice gives one edge."""
        a, b = make_files("a.less", "b.less")
        graph = ImportGraph([a, b])

        graph.add_edge(a.path, b.path)
        graph.add_edge(a.path, b.path)

        assert list(graph.iter_edges()) == [(a.path, b.path)]

    def test_get_roots(self):
        """Roots are files nobody imports."""
        theme, base, mixins = make_files("theme.less", "base.less", "mixins.less")
        graph = ImportGraph([theme, base, mixins])

        graph.add_edge(theme.path, base.path)
        graph.add_edge(base.path, mixins.path)

        assert graph.get_roots() == {theme.path}

    def test_missing_and_remote(self):
        """Unresolved and url imports are tracked apart from edges."""
        a, = make_files("a.less")
        graph = ImportGraph([a])

        graph.add_missing(a.path, "nowhere")
        graph.add_remote(a.path, "https://cdn.example.com/x.less")

        assert graph.has_missing()
        assert graph.get_missing(a.path) == {"nowhere"}
        assert list(graph.iter_missing()) == [(a.path, "nowhere")]
        assert list(graph.iter_remote()) == [(a.path, "https://cdn.example.com/x.less")]
        assert graph.edges == {}

    def test_missing_property_is_copy(self):
        """Modifying the copy shouldn't affect the original."""
        a, = make_files("a.less")
        graph = ImportGraph([a])
        graph.add_missing(a.path, "missing")

        missing = graph.missing
        missing[a.path].add("other")

        assert graph.get_missing(a.path) == {"missing"}

    def test_repr(self):
        """Test string representation."""
        a, b = make_files("a.less", "b.less")
        graph = ImportGraph([a, b])
        graph.add_edge(a.path, b.path)

        assert "nodes=2" in repr(graph)
        assert "edges=1" in repr(graph)
        assert "missing=0" in repr(graph)


class TestResolutionOrder:
    """Tests for topological ordering and cycle detection."""

    def test_dependency_first(self):
        """An imported file comes before its importer."""
        theme, base = make_files("a-theme.less", "base.less")
        graph = ImportGraph([theme, base])
        graph.add_edge(theme.path, base.path)

        resolution = resolve_order(graph)

        assert order_names(resolution) == ["base.less", "a-theme.less"]
        assert resolution.cycles == []

    def test_unconstrained_keeps_scan_order(self):
        """Files with no imports between them keep scan order."""
        graph = ImportGraph(make_files("a.less", "b.less", "c.less"))

        resolution = resolve_order(graph)

        assert order_names(resolution) == ["a.less", "b.less", "c.less"]

    def test_chain_and_diamond(self):
        """Every file follows all of its dependencies."""
        app, left, right, core = make_files("app.less", "left.less", "right.less", "core.less")
        graph = ImportGraph([app, left, right, core])
        graph.add_edge(app.path, left.path)
        graph.add_edge(app.path, right.path)
        graph.add_edge(left.path, core.path)
        graph.add_edge(right.path, core.path)

        order = order_names(resolve_order(graph))

        assert order == ["core.less", "left.less", "right.less", "app.less"]

    def test_tie_break_prefers_earliest_scanned(self):
        """Among ready files the earliest scanned goes first."""
        a, b, c = make_files("a.less", "b.less", "c.less")
        graph = ImportGraph([a, b, c])
        # a needs c; b is free
        graph.add_edge(a.path, c.path)

        assert order_names(resolve_order(graph)) == ["b.less", "c.less", "a.less"]

    def test_two_file_cycle(self):
        """A mutual import is reported once and both files are still ordered."""
        a, b = make_files("a.less", "b.less")
        graph = ImportGraph([a, b])
        graph.add_edge(a.path, b.path)
        graph.add_edge(b.path, a.path)

        resolution = resolve_order(graph)

        assert len(resolution.cycles) == 1
        assert resolution.cycles[0].paths == ["a.less", "b.less"]
        assert order_names(resolution) == ["a.less", "b.less"]

    def test_self_import_is_cycle(self):
        """A file importing itself is a cycle of one."""
        a, b = make_files("a.less", "b.less")
        graph = ImportGraph([a, b])
        graph.add_edge(a.path, a.path)

        resolution = resolve_order(graph)

        assert [c.paths for c in resolution.cycles] == [["a.less"]]
        assert order_names(resolution) == ["a.less", "b.less"]

    def test_cycle_placed_after_its_dependencies(self):
        """A cyclic component still follows what it imports from outside."""
        a, b, base, top = make_files("a.less", "b.less", "base.less", "top.less")
        graph = ImportGraph([a, b, base, top])
        graph.add_edge(a.path, b.path)
        graph.add_edge(b.path, a.path)
        graph.add_edge(b.path, base.path)
        graph.add_edge(top.path, a.path)

        resolution = resolve_order(graph)

        assert order_names(resolution) == ["base.less", "a.less", "b.less", "top.less"]
        assert resolution.cyclic_files() == {a, b}

    def test_one_report_per_component(self):
        """Separate cycles are reported separately, each once."""
        files = make_files("a.less", "b.less", "c.less", "x.less", "y.less")
        a, b, c, x, y = files
        graph = ImportGraph(files)
        for source, target in [(a, b), (b, c), (c, a), (x, y), (y, x)]:
            graph.add_edge(source.path, target.path)

        resolution = resolve_order(graph)

        assert [cycle.paths for cycle in resolution.cycles] == [
            ["a.less", "b.less", "c.less"],
            ["x.less", "y.less"],
        ]
        assert len(resolution.order) == 5

    def test_deep_chain_does_not_recurse(self):
        """Long import chains are handled without hitting recursion limits."""
        files = make_files(*[f"f{i:04d}.less" for i in range(3000)])
        graph = ImportGraph(files)
        for i in range(len(files) - 1):
            graph.add_edge(files[i].path, files[i + 1].path)

        resolution = resolve_order(graph)

        assert resolution.order[0].relative_path == "f2999.less"
        assert resolution.order[-1].relative_path == "f0000.less"

    def test_scc_members_sorted(self):
        """Components list members in scan order."""
        a, b = make_files("a.less", "b.less")
        graph = ImportGraph([a, b])
        graph.add_edge(b.path, a.path)
        graph.add_edge(a.path, b.path)

        assert strongly_connected_components(graph) == [[0, 1]]

    def test_deterministic(self):
        """Repeated ordering of the same graph is identical."""
        files = make_files("d.less", "c.less", "b.less", "a.less")
        graph = ImportGraph(files)
        graph.add_edge(files[0].path, files[3].path)
        graph.add_edge(files[1].path, files[3].path)

        first = order_names(resolve_order(graph))
        second = order_names(resolve_order(graph))

        assert first == second == ["b.less", "a.less", "d.less", "c.less"]
