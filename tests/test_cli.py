"""
End-to-end tests for the extraction pipeline and the command line interface.
"""

import json

import pytest

from semantic_graph import build_semantic_graph_from_openapi
from semantic_graph.cli import main
from semantic_graph.document import SpecDocument
from semantic_graph.errors import SpecLoadError
from semantic_graph.pipeline import SemanticGraphExtractor


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SEMANTIC_GRAPH_OUTPUT_DIR", "SEMANTIC_GRAPH_IDENTIFIER_SUFFIX",
                 "SEMANTIC_GRAPH_REQUIRE_PROVIDER", "SEMANTIC_GRAPH_BOOTSTRAP_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def spec_file(tmp_path, sample_spec):
    path = tmp_path / "rest-api.json"
    path.write_text(json.dumps(sample_spec))
    return str(path)


@pytest.fixture
def graph_file(tmp_path, spec_file):
    output = tmp_path / "graph.json"
    assert main(["extract", spec_file, "-o", str(output)]) == 0
    return str(output)


# ============================================================================
# PIPELINE
# ============================================================================


def test_extract_from_path_matches_in_memory(spec_file, graph):
    from_file = SemanticGraphExtractor(verbose=False).extract(spec_file)
    assert list(from_file.operations) == list(graph.operations)
    assert from_file.edges == graph.edges


def test_extract_prints_phase_banners(document, capsys):
    SemanticGraphExtractor().extract(document)
    out = capsys.readouterr().out
    assert "SEMANTIC GRAPH EXTRACTOR" in out
    assert "[PHASE 2] Building dependency graph" in out
    assert "Found 8 dependencies" in out


def test_extract_missing_spec_raises(tmp_path):
    with pytest.raises(SpecLoadError):
        SemanticGraphExtractor(verbose=False).extract(str(tmp_path / "missing.yaml"))


def test_document_without_paths_gives_empty_graph():
    graph = SemanticGraphExtractor(verbose=False).extract(SpecDocument({"openapi": "3.0.0"}))
    assert graph.operations == {}
    assert graph.edges == []
    assert graph.root_dependency_analysis.bootstrap_sequences == []
    assert graph.cross_contamination_map == {}


def test_export_all_requires_extraction():
    with pytest.raises(RuntimeError):
        SemanticGraphExtractor(verbose=False).export_all()


def test_build_semantic_graph_from_openapi(spec_file, tmp_path, capsys):
    output_dir = tmp_path / "output"
    graph = build_semantic_graph_from_openapi(spec_file, output_dir=str(output_dir))
    assert len(graph.edges) == 8
    assert (output_dir / "operation-dependency-graph.json").exists()
    assert (output_dir / "dependency-summary.md").exists()
    assert (output_dir / "graph.dot").exists()
    assert "required: " in capsys.readouterr().out


# ============================================================================
# CLI
# ============================================================================


def test_cli_extract_writes_all_outputs(spec_file, tmp_path):
    output = tmp_path / "graph.json"
    report = tmp_path / "summary.md"
    dot = tmp_path / "graph.dot"
    code = main(["extract", spec_file, "-o", str(output),
                 "--report", str(report), "--dot", str(dot)])
    assert code == 0
    assert json.loads(output.read_text())["metadata"]["totalDependencies"] == 8
    assert report.read_text().startswith("# Operation Dependency Graph Summary")
    assert dot.read_text().startswith("digraph")


def test_cli_extract_missing_spec(tmp_path, capsys):
    code = main(["extract", str(tmp_path / "missing.yaml"), "-o", str(tmp_path / "g.json")])
    assert code == 1
    assert "Error:" in capsys.readouterr().err


def test_cli_analyze(graph_file, tmp_path, capsys):
    report = tmp_path / "analysis.md"
    assert main(["analyze", graph_file, "-o", str(report), "--strict-clusters"]) == 0
    out = capsys.readouterr().out
    lines = [line.split() for line in out.splitlines()]
    assert ["Dependencies:", "8"] in lines
    assert ["Entry", "points:", "3"] in lines
    assert "- Cluster: createProcessInstance, getProcessInstance" in report.read_text()


def test_cli_validate_ok(graph_file, capsys):
    code = main(["validate", graph_file,
                 "--operation", "createProcessInstance",
                 "--semantic-type", "ProcessInstanceKey"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Graph integrity: OK" in out
    assert "Operation createProcessInstance: present" in out


def test_cli_validate_missing_entries(graph_file, capsys):
    code = main(["validate", graph_file, "--operation", "createUser",
                 "--semantic-type", "UserKey"])
    assert code == 1
    out = capsys.readouterr().out
    assert "Operation createUser: MISSING" in out
    assert "Semantic type UserKey: MISSING" in out


def test_cli_validate_integrity_problem(graph_file, capsys):
    with open(graph_file) as f:
        data = json.load(f)
    data["edges"][0]["semanticType"] = "Bogus"
    with open(graph_file, "w") as f:
        json.dump(data, f)
    assert main(["validate", graph_file]) == 1
    assert "unknown semantic type" in capsys.readouterr().out


def test_cli_validate_malformed_file(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text("{")
    assert main(["validate", str(path)]) == 1
    assert "Error:" in capsys.readouterr().err


def test_cli_requires_subcommand():
    with pytest.raises(SystemExit):
        main([])


def test_cli_extract_unreadable_spec(tmp_path, capsys):
    path = tmp_path / "binary.yaml"
    path.write_bytes(b"\xff\xfe\x00")
    assert main(["extract", str(path), "-o", str(tmp_path / "g.json")]) == 1
    assert "Error:" in capsys.readouterr().err
