"""
Cross-validation of the hand-written reference chunkers.

For identical input the legacy chunker and the table-driven GenericChunker
must agree on chunk counts, names and hierarchy. Because chunk ids are
positional, agreement is checked on ids directly.
"""

import pytest
from conftest import make_source

from chunkforge.chunking.legacy import LegacyGoChunker, LegacyPythonChunker
from chunkforge.core.cancellation import CancellationToken
from chunkforge.core.exceptions import CancelledError
from chunkforge.core.models import ChunkResult

pytestmark = pytest.mark.grammar

PYTHON_SOURCES = {
    "simple": (
        "class Greeter:\n"
        "    def hello(self):\n"
        "        return 'hi'\n"
        "\n"
        "def main():\n"
        "    Greeter().hello()\n"
    ),
    "nested": (
        "class Outer:\n"
        "    class Inner:\n"
        "        def inner_method(self):\n"
        "            pass\n"
        "\n"
        "    def outer_method(self):\n"
        "        pass\n"
    ),
    "decorated": (
        "import functools\n"
        "\n"
        "@functools.total_ordering\n"
        "class Version:\n"
        "    @property\n"
        "    def major(self):\n"
        "        return 1\n"
        "\n"
        "    @staticmethod\n"
        "    def parse(text):\n"
        "        def helper():\n"
        "            pass\n"
        "        return helper\n"
    ),
    "conditional": (
        "try:\n"
        "    import ujson as json\n"
        "except ImportError:\n"
        "    def dumps(obj):\n"
        "        return str(obj)\n"
        "\n"
        "class Config:\n"
        "    if True:\n"
        "        def enabled(self):\n"
        "            return True\n"
    ),
    "async": "async def fetch(url):\n    return url\n",
    "no_declarations": "x = 1\ny = 2\n",
}

GO_SOURCES = {
    "receiver": (
        "package main\n"
        "\n"
        "type Server struct {\n"
        "\tport int\n"
        "}\n"
        "\n"
        "func (s *Server) Start() error {\n"
        "\treturn nil\n"
        "}\n"
        "\n"
        "func main() {}\n"
    ),
    "grouped_types": (
        "package shapes\n"
        "\n"
        "type (\n"
        "\tPoint struct{ X, Y int }\n"
        "\tShape interface {\n"
        "\t\tArea() float64\n"
        "\t}\n"
        ")\n"
        "\n"
        "func (p Point) Area() float64 { return 0 }\n"
    ),
    "functions_only": (
        "package util\n"
        "\n"
        "func Add(a, b int) int { return a + b }\n"
        "\n"
        "func Sub(a, b int) int { return a - b }\n"
    ),
}


def _shape(result: ChunkResult):
    names = {c.id: c.name for c in result.chunks}
    return [
        (
            c.level.value,
            c.name,
            names.get(c.parent_id),
            c.start_line,
            c.end_line,
            c.id,
        )
        for c in result.chunks
    ]


class TestLegacyPython:
    @pytest.mark.parametrize("case", sorted(PYTHON_SOURCES))
    def test_matches_generic(self, registry, case):
        source = make_source(f"{case}.py", PYTHON_SOURCES[case], language="python")

        generic = registry.pick(".py").chunk(source)
        legacy = registry.legacy_chunker("python").chunk(source)

        assert _shape(legacy) == _shape(generic)

    def test_nested_classes_flattened(self, engine):
        source = make_source("nested.py", PYTHON_SOURCES["nested"])

        result = LegacyPythonChunker(engine).chunk(source)

        file_id = result.file_chunk.id
        classes = {c.name: c for c in result.chunks if c.level.value == "class"}
        assert classes["Outer"].parent_id == file_id
        assert classes["Inner"].parent_id == file_id

    def test_empty_input(self, engine):
        result = LegacyPythonChunker(engine).chunk(make_source("e.py", ""))

        assert result.chunks == []

    def test_checks_token(self, engine):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(CancelledError):
            LegacyPythonChunker(engine).chunk(make_source("a.py", "x = 1\n"), token)


class TestLegacyGo:
    @pytest.mark.parametrize("case", sorted(GO_SOURCES))
    def test_matches_generic(self, registry, case):
        source = make_source(f"{case}.go", GO_SOURCES[case], language="go")

        generic = registry.pick(".go").chunk(source)
        legacy = registry.legacy_chunker("go").chunk(source)

        assert _shape(legacy) == _shape(generic)

    def test_grouped_type_specs(self, engine):
        source = make_source("shapes.go", GO_SOURCES["grouped_types"])

        result = LegacyGoChunker(engine).chunk(source)

        classes = [c.name for c in result.chunks if c.level.value == "class"]
        assert classes == ["Point", "Shape"]

    def test_methods_parent_to_file(self, engine):
        source = make_source("server.go", GO_SOURCES["receiver"])

        result = LegacyGoChunker(engine).chunk(source)

        methods = [c for c in result.chunks if c.level.value == "method"]
        assert [m.name for m in methods] == ["Start", "main"]
        assert all(m.parent_id == result.file_chunk.id for m in methods)

    def test_empty_input(self, engine):
        result = LegacyGoChunker(engine).chunk(make_source("e.go", "  \n"))

        assert len(result) == 0
