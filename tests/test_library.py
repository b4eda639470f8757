"""
Unit tests for the semantic type library and cross-contamination analysis.
"""

import pytest

from semantic_graph.config import ExtractorConfig
from semantic_graph.contamination import CrossContaminationAnalyzer
from semantic_graph.document import SpecDocument
from semantic_graph.enums import InvalidationType, RiskLevel
from semantic_graph.library import (
    IDENTIFIER_DEFAULT_EXAMPLES,
    PLACEHOLDER_EXAMPLE,
    SemanticTypeLibraryBuilder,
)
from semantic_graph.semantic_type import SemanticType


@pytest.fixture
def library(graph):
    return graph.semantic_type_library


# ============================================================================
# LIBRARY
# ============================================================================


def test_library_covers_every_semantic_type(graph, library):
    assert set(library.semantic_types) == set(graph.semantic_types)


def test_valid_examples_schema_example_first(library):
    assert library.get("ProcessInstanceKey").valid_examples == [
        "2251799813685249", "12345", "-67890", "1", "999999999"]


def test_valid_examples_from_numeric_pattern(library):
    examples = library.get("ProcessDefinitionKey").valid_examples
    assert "-67890" in examples
    assert "999999999" in examples


def test_valid_examples_placeholder_for_unknown_pattern(library):
    assert library.get("TenantId").valid_examples == [PLACEHOLDER_EXAMPLE]


def test_valid_examples_identifier_default():
    builder = SemanticTypeLibraryBuilder(SpecDocument({}))
    assert builder.valid_examples(SemanticType("JobKey")) == IDENTIFIER_DEFAULT_EXAMPLES


def test_invalid_examples(library):
    invalid = library.get("ProcessInstanceKey").invalid_examples
    by_type = {}
    for example in invalid:
        by_type.setdefault(example.invalidation_type, []).append(example.value)
    assert by_type[InvalidationType.WRONG_TYPE] == [12345, True, None]
    assert by_type[InvalidationType.WRONG_FORMAT] == ["invalid_format"]
    assert by_type[InvalidationType.OUT_OF_BOUNDS] == ["", "x" * 26]


def test_invalid_examples_non_string_type():
    invalid = SemanticTypeLibraryBuilder.invalid_examples(
        SemanticType("Retries", base_type="integer"))
    assert invalid == []


def test_cross_contamination_sources_ignore_pattern(library):
    assert library.get("ProcessInstanceKey").cross_contamination_sources == [
        "ProcessDefinitionKey", "DeploymentKey", "TenantId"]


def test_generation_rules(library):
    rules = [(r.type, r.rule) for r in library.get("ProcessInstanceKey").generation_rules]
    assert rules == [("pattern", "^-?[0-9]+$"), ("random", "numeric_string")]
    rules = [(r.type, r.rule) for r in library.get("TenantId").generation_rules]
    assert rules == [("pattern", "^[\\w\\.-]{1,31}$")]


def test_library_round_trips_through_dict(library):
    from semantic_graph.library import SemanticTypeLibrary
    assert SemanticTypeLibrary.from_dict(library.to_dict()).to_dict() == library.to_dict()


# ============================================================================
# CROSS-CONTAMINATION
# ============================================================================


def test_contamination_map(graph):
    assert graph.cross_contamination_map == {
        "ProcessInstanceKey": ["ProcessDefinitionKey", "DeploymentKey"],
        "ProcessDefinitionKey": ["ProcessInstanceKey", "DeploymentKey"],
        "DeploymentKey": ["ProcessInstanceKey", "ProcessDefinitionKey"],
    }


def test_contamination_is_symmetric(graph):
    contamination = graph.cross_contamination_map
    for target, sources in contamination.items():
        for source in sources:
            assert target in contamination[source]


def test_contamination_groups_by_format():
    types = {
        "StartDate": SemanticType("StartDate", format="date-time"),
        "EndDate": SemanticType("EndDate", format="date-time"),
        "Name": SemanticType("Name"),
    }
    analyzer = CrossContaminationAnalyzer()
    assert analyzer.find_contamination_opportunities(types) == {
        "StartDate": ["EndDate"],
        "EndDate": ["StartDate"],
    }


def test_scenarios_use_first_three_valid_examples(library):
    analyzer = CrossContaminationAnalyzer()
    (scenario,) = analyzer.generate_scenarios(
        "ProcessInstanceKey", ["ProcessDefinitionKey", "Unknown"], library)
    assert scenario.contaminant_values == ["12345", "-67890", "1"]
    assert scenario.expected_behavior == "rejection"
    assert scenario.to_dict()["contaminantSemanticType"] == "ProcessDefinitionKey"


@pytest.mark.parametrize("target,count,expected", [
    ("JobKey", 5, RiskLevel.HIGH),
    ("TenantId", 5, RiskLevel.MEDIUM),
    ("JobKey", 2, RiskLevel.MEDIUM),
    ("JobKey", 1, RiskLevel.LOW),
])
def test_classify_risk(target, count, expected):
    contaminants = [f"Type{i}Key" for i in range(count)]
    assert CrossContaminationAnalyzer().classify_risk(target, contaminants) == expected


def test_severity_analysis(graph):
    analysis = CrossContaminationAnalyzer().analyze_severity(graph.cross_contamination_map)
    assert analysis.total_opportunities == 6
    assert analysis.high_risk == []
    assert [r.target_type for r in analysis.medium_risk] == [
        "ProcessInstanceKey", "ProcessDefinitionKey", "DeploymentKey"]
    assert analysis.medium_risk[0].count == 2


def test_identifier_suffix_is_configurable():
    config = ExtractorConfig(identifier_suffix="Id")
    assert config.looks_like_identifier("TenantId")
    assert CrossContaminationAnalyzer(config).classify_risk(
        "TenantId", ["a", "b", "c", "d", "e"]) == RiskLevel.HIGH
