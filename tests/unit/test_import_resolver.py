"""
Tests for import graph resolution: naming, revisits, missing imports, collisions.
"""

import pytest

from scripthost.module_system.directives import AnnotationDirectiveExtractor, StaticDirectiveExtractor
from scripthost.module_system.import_resolver import ImportGraphResolver
from scripthost.module_system.script_node import ScriptNode
from scripthost.shared.errors import InvalidLocationError, NameCollisionError, UnresolvedImportError
from scripthost.utils.config import HostConfig


def imports(*paths):
    return "".join(f'@file:Import("{p}")\n' for p in paths)


class RecordingExtractor(AnnotationDirectiveExtractor):
    """Annotation extractor that remembers which scripts it was asked about."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def extract(self, path, source):
        self.calls.append(path)
        return super().extract(path, source)


class TestBasicResolution:

    def test_single_script(self, write_script):
        main = write_script("main.custom.kts", "val x = 1\n")
        graph = ImportGraphResolver().resolve(main)

        assert len(graph) == 1
        assert graph.root == main
        assert graph.root_node.name == "Main"
        assert graph.root_node.resolved_imports == ()
        assert graph.frozen

    def test_chain_with_parent_relative_import(self, write_script):
        main = write_script("main.custom.kts", imports("lib/util.custom.kts"))
        util = write_script("lib/util.custom.kts", imports("../shared/consts.custom.kts"))
        consts = write_script("shared/consts.custom.kts", "val pi = 3.14\n")

        graph = ImportGraphResolver().resolve(main)

        assert graph.names() == {main: "Main", util: "LibUtil", consts: "SharedConsts"}
        assert graph[main].resolved_imports == (util,)
        assert graph[util].resolved_imports == (consts,)
        assert graph[consts].resolved_imports == ()

    def test_node_keeps_source_and_directives(self, write_script):
        text = imports("a.custom.kts") + "val y = 2\n"
        main = write_script("main.custom.kts", text)
        write_script("a.custom.kts")

        node = ImportGraphResolver().resolve(main).root_node
        assert isinstance(node, ScriptNode)
        assert node.source == text
        assert [d.path for d in node.directives] == ["a.custom.kts"]

    def test_declaration_order_preserved(self, write_script):
        main = write_script("main.custom.kts", imports("b.custom.kts", "a.custom.kts"))
        a = write_script("a.custom.kts")
        b = write_script("b.custom.kts")

        graph = ImportGraphResolver().resolve(main)
        assert graph[main].resolved_imports == (b, a)
        assert [n.name for n in graph.imports_of(graph.root_node)] == ["B", "A"]

    def test_duplicate_imports_collapse_by_resolved_path(self, write_script):
        main = write_script("main.custom.kts", imports("a.custom.kts", "./a.custom.kts", "lib/../a.custom.kts"))
        a = write_script("a.custom.kts")

        graph = ImportGraphResolver().resolve(main)
        assert len(graph[main].directives) == 3
        assert graph[main].resolved_imports == (a,)
        assert len(graph) == 2

    def test_diamond_resolves_shared_script_once(self, write_script):
        main = write_script("main.custom.kts", imports("a.custom.kts", "b.custom.kts"))
        write_script("a.custom.kts", imports("c.custom.kts"))
        write_script("b.custom.kts", imports("c.custom.kts"))
        c = write_script("c.custom.kts")

        extractor = RecordingExtractor()
        graph = ImportGraphResolver(extractor=extractor).resolve(main)

        assert len(graph) == 4
        assert extractor.calls.count(c) == 1
        assert graph.by_name("C").path == c

    def test_static_extractor(self, write_script):
        main = write_script("main.custom.kts")
        dep = write_script("dep.custom.kts")
        extractor = StaticDirectiveExtractor({main: ["dep.custom.kts"]})

        graph = ImportGraphResolver(extractor=extractor).resolve(main)
        assert graph[main].resolved_imports == (dep,)


class TestRevisits:
    """Cyclic declarations terminate"""

    def test_mutual_imports_terminate(self, write_script):
        a = write_script("a.custom.kts", imports("b.custom.kts"))
        b = write_script("b.custom.kts", imports("a.custom.kts"))

        graph = ImportGraphResolver().resolve(a)

        assert len(graph) == 2
        assert graph[a].resolved_imports == (b,)
        assert graph[b].resolved_imports == (a,)

    def test_self_import_terminates(self, write_script):
        a = write_script("a.custom.kts", imports("a.custom.kts"))
        graph = ImportGraphResolver().resolve(a)
        assert len(graph) == 1
        assert graph[a].resolved_imports == (a,)

    def test_longer_cycle(self, write_script):
        a = write_script("a.custom.kts", imports("b.custom.kts"))
        write_script("b.custom.kts", imports("c.custom.kts"))
        write_script("c.custom.kts", imports("a.custom.kts"))

        extractor = RecordingExtractor()
        graph = ImportGraphResolver(extractor=extractor).resolve(a)
        assert len(graph) == 3
        assert len(extractor.calls) == 3

    def test_idempotent(self, write_script):
        a = write_script("a.custom.kts", imports("b.custom.kts", "lib/c.custom.kts"))
        write_script("b.custom.kts", imports("a.custom.kts"))
        write_script("lib/c.custom.kts")

        resolver = ImportGraphResolver()
        first = resolver.resolve(a)
        second = resolver.resolve(a)
        assert first is not second
        assert first.names() == second.names()


class TestMissingImports:

    def test_missing_import_skipped(self, write_script, caplog):
        main = write_script("main.custom.kts", imports("missing.custom.kts", "a.custom.kts"))
        a = write_script("a.custom.kts")

        with caplog.at_level("WARNING"):
            graph = ImportGraphResolver().resolve(main)

        assert graph[main].resolved_imports == (a,)
        assert len(graph[main].directives) == 2
        assert "missing.custom.kts" in caplog.text

    def test_directory_is_not_a_script(self, write_script, scripts_root):
        (scripts_root / "folder.custom.kts").mkdir()
        main = write_script("main.custom.kts", imports("folder.custom.kts"))
        graph = ImportGraphResolver().resolve(main)
        assert graph[main].resolved_imports == ()

    def test_strict_mode_raises(self, write_script):
        main = write_script("main.custom.kts", imports("missing.custom.kts"))
        resolver = ImportGraphResolver.from_config(HostConfig(strict_imports=True))

        with pytest.raises(UnresolvedImportError) as exc_info:
            resolver.resolve(main)
        assert exc_info.value.import_path == "missing.custom.kts"
        assert exc_info.value.declared_in == main
        assert exc_info.value.location.line == 1

    def test_missing_root(self, scripts_root):
        with pytest.raises(UnresolvedImportError):
            ImportGraphResolver().resolve(scripts_root / "nope.custom.kts")


class TestResolutionFailures:

    def test_name_collision(self, write_script):
        main = write_script("main.custom.kts", imports("a_b/c.custom.kts", "a/b_c.custom.kts"))
        first = write_script("a_b/c.custom.kts")
        second = write_script("a/b_c.custom.kts")

        with pytest.raises(NameCollisionError) as exc_info:
            ImportGraphResolver().resolve(main)
        assert exc_info.value.name == "ABC"
        assert exc_info.value.existing == first
        assert exc_info.value.incoming == second

    def test_root_outside_marker_fails_before_any_import_io(self, project_root):
        outside = project_root / "other" / "main.custom.kts"
        outside.parent.mkdir()
        outside.write_text(imports("a.custom.kts"), encoding="utf-8")

        extractor = RecordingExtractor()
        with pytest.raises(InvalidLocationError):
            ImportGraphResolver(extractor=extractor).resolve(outside)
        assert extractor.calls == []

    def test_import_outside_marker(self, write_script, project_root):
        outside = project_root / "outside.custom.kts"
        outside.write_text("", encoding="utf-8")
        main = write_script("main.custom.kts", imports("../outside.custom.kts"))

        with pytest.raises(InvalidLocationError):
            ImportGraphResolver().resolve(main)

    def test_graph_frozen_after_resolution(self, write_script):
        main = write_script("main.custom.kts")
        graph = ImportGraphResolver().resolve(main)
        with pytest.raises(RuntimeError):
            graph.add(ScriptNode(path=main.parent / "x.custom.kts", name="X", source=""))
