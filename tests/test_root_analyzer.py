"""
Unit tests for root dependency analysis and bootstrap sequences.
"""

from semantic_graph.config import BootstrapTemplate, ExtractorConfig
from semantic_graph.enums import HTTPMethod, OperationType
from semantic_graph.operation import Operation
from semantic_graph.root_analyzer import RootDependencyAnalyzer, RootOperationAnalysis


def test_root_analysis_attached_to_graph(graph):
    analysis = graph.root_dependency_analysis
    assert analysis.deployment_operations == ["createDeployment"]
    assert analysis.setup_operations == ["createDeployment", "createProcessInstance"]
    assert analysis.entry_point_operations == [
        "createDeployment", "searchProcessDefinitions", "getTopology"]


def test_bootstrap_sequences_only_when_operations_exist(graph):
    names = [s.name for s in graph.root_dependency_analysis.bootstrap_sequences]
    assert names == [
        "deployment_setup",
        "process_definition_search",
        "process_instance_workflow_setup",
    ]
    workflow = graph.root_dependency_analysis.bootstrap_sequences[2]
    assert workflow.operations == [
        "createDeployment", "searchProcessDefinitions", "createProcessInstance"]
    assert "ProcessInstanceKey" in workflow.produces


def test_deployment_detection_rules():
    analyzer = RootDependencyAnalyzer()
    by_tag = Operation("uploadForm", HTTPMethod.POST, "/forms", OperationType.CREATE,
                       tags=["Resource"])
    by_tag_get = Operation("getForm", HTTPMethod.GET, "/forms", OperationType.READ,
                           tags=["Resource"])
    by_name = Operation("redeployAll", HTTPMethod.PUT, "/all", OperationType.UPDATE)
    assert analyzer.is_deployment_operation(by_tag)
    assert not analyzer.is_deployment_operation(by_tag_get)
    assert analyzer.is_deployment_operation(by_name)


def test_setup_detection_rules():
    analyzer = RootDependencyAnalyzer()
    assert analyzer.is_setup_operation(
        Operation("configureCluster", HTTPMethod.PUT, "/cluster", OperationType.UPDATE))
    assert analyzer.is_setup_operation(
        Operation("bootstrap", HTTPMethod.POST, "/b", OperationType.SETUP))
    assert not analyzer.is_setup_operation(
        Operation("getUser", HTTPMethod.GET, "/users", OperationType.READ))


def test_custom_templates_with_requires(graph):
    config = ExtractorConfig(bootstrap_templates=[
        BootstrapTemplate("instance_only", "", ["createProcessInstance"],
                          requires=["createProcessInstance", "getTopology"]),
        BootstrapTemplate("needs_missing", "", ["createUser"]),
    ])
    analysis = RootDependencyAnalyzer(config).analyze(graph)
    assert [s.name for s in analysis.bootstrap_sequences] == ["instance_only"]


def test_implicit_dependencies(graph):
    implicit = RootDependencyAnalyzer().find_implicit_dependencies(
        list(graph.operations.values()))
    assert implicit == {
        "createProcessInstance": ["process_definition_setup"],
        "getProcessInstance": ["process_definition_setup"],
        "deleteProcessInstance": ["process_definition_setup"],
    }


def test_root_analysis_round_trips_through_dict(graph):
    analysis = graph.root_dependency_analysis
    assert RootOperationAnalysis.from_dict(analysis.to_dict()) == analysis
