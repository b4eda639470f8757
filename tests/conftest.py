"""
Shared fixtures: a small process-engine style OpenAPI document with
semantic type annotations, and the graph extracted from it.

Expected graph (8 edges):
    createDeployment         -> createProcessInstance   ProcessDefinitionKey
    searchProcessDefinitions -> createProcessInstance   ProcessDefinitionKey, TenantId
    createProcessInstance    -> getProcessInstance      ProcessInstanceKey
    createProcessInstance    -> deleteProcessInstance   ProcessInstanceKey
    getProcessInstance       -> deleteProcessInstance   ProcessInstanceKey
    getProcessInstance       -> createProcessInstance   ProcessDefinitionKey, TenantId
"""

import copy

import pytest

from semantic_graph.document import SpecDocument
from semantic_graph.pipeline import SemanticGraphExtractor


def _ref(name):
    return {"$ref": f"#/components/schemas/{name}"}


def _json(schema):
    return {"content": {"application/json": {"schema": schema}}}


NUMERIC_KEY = "^-?[0-9]+$"

SAMPLE_SPEC = {
    "openapi": "3.0.3",
    "info": {"title": "Process Engine API", "version": "1.0.0"},
    "paths": {
        "/deployments": {
            "post": {
                "operationId": "createDeployment",
                "summary": "Deploy resources",
                "tags": ["Resource"],
                "requestBody": {
                    "required": True,
                    "content": {
                        "multipart/form-data": {
                            "schema": {
                                "type": "object",
                                "properties": {
                                    "resources": {
                                        "type": "array",
                                        "items": {"type": "string", "format": "binary"},
                                    }
                                },
                            }
                        }
                    },
                },
                "responses": {
                    "200": {"description": "Deployed", **_json(_ref("DeploymentResult"))},
                    "400": {"description": "Bad request"},
                },
            }
        },
        "/process-definitions/search": {
            "post": {
                "operationId": "searchProcessDefinitions",
                "summary": "Search process definitions",
                "x-eventually-consistent": True,
                "requestBody": _json({
                    "type": "object",
                    "properties": {"page": {"type": "object"}},
                }),
                "responses": {
                    "200": {
                        "description": "Search result",
                        **_json({
                            "type": "object",
                            "properties": {
                                "items": {"type": "array", "items": _ref("ProcessDefinition")},
                            },
                        }),
                    }
                },
            }
        },
        "/process-instances": {
            "post": {
                "operationId": "createProcessInstance",
                "summary": "Create process instance",
                "x-operation-kind": {"kind": "create", "duplicatePolicy": "conflict"},
                "requestBody": {
                    "required": True,
                    **_json(_ref("CreateProcessInstanceRequest")),
                },
                "responses": {
                    "200": {"description": "Created",
                            **_json(_ref("CreateProcessInstanceResult"))},
                },
            }
        },
        "/process-instances/{processInstanceKey}": {
            "get": {
                "operationId": "getProcessInstance",
                "description": "Get a process instance by key",
                "parameters": [
                    {
                        "name": "processInstanceKey",
                        "in": "path",
                        "schema": _ref("ProcessInstanceKey"),
                    }
                ],
                "responses": {
                    "200": {"description": "Found", **_json(_ref("ProcessInstance"))},
                    "404": {"description": "Not found", **_json(_ref("ProcessInstance"))},
                },
            }
        },
        "/process-instances/{processInstanceKey}/deletion": {
            "post": {
                "operationId": "deleteProcessInstance",
                "parameters": [
                    {
                        "name": "processInstanceKey",
                        "in": "path",
                        "required": True,
                        "schema": _ref("ProcessInstanceKey"),
                    }
                ],
                "responses": {"204": {"description": "Deleted"}},
            }
        },
        "/topology": {
            "get": {
                "operationId": "getTopology",
                "responses": {
                    "200": {
                        "description": "Cluster topology",
                        **_json({"type": "object",
                                 "properties": {"brokers": {"type": "integer"}}}),
                    }
                },
            }
        },
    },
    "components": {
        "schemas": {
            "ProcessInstanceKey": {
                "type": "string",
                "x-semantic-type": "ProcessInstanceKey",
                "description": "System-generated key for a process instance",
                "pattern": NUMERIC_KEY,
                "minLength": 1,
                "maxLength": 25,
                "example": "2251799813685249",
            },
            "ProcessDefinitionKey": {
                "type": "string",
                "x-semantic-type": "ProcessDefinitionKey",
                "description": "System-generated key for a process definition",
                "pattern": NUMERIC_KEY,
                "minLength": 1,
                "maxLength": 25,
            },
            "DeploymentKey": {
                "type": "string",
                "x-semantic-type": "DeploymentKey",
                "pattern": NUMERIC_KEY,
            },
            "TenantId": {
                "type": "string",
                "x-semantic-type": "TenantId",
                "description": "Tenant identifier",
                "pattern": "^[\\w\\.-]{1,31}$",
            },
            "DeploymentResult": {
                "type": "object",
                "properties": {
                    "deploymentKey": _ref("DeploymentKey"),
                    "deployments": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "processDefinition": {
                                    "type": "object",
                                    "properties": {
                                        "processDefinitionKey": _ref("ProcessDefinitionKey"),
                                    },
                                }
                            },
                        },
                    },
                },
            },
            "ProcessDefinition": {
                "type": "object",
                "properties": {
                    "processDefinitionKey": _ref("ProcessDefinitionKey"),
                    "tenantId": _ref("TenantId"),
                },
            },
            "CreateProcessInstanceRequest": {
                "type": "object",
                "required": ["processDefinitionKey"],
                "properties": {
                    "processDefinitionKey": _ref("ProcessDefinitionKey"),
                    "tenantId": _ref("TenantId"),
                },
            },
            "CreateProcessInstanceResult": {
                "type": "object",
                "properties": {
                    "processInstanceKey": {
                        "allOf": [_ref("ProcessInstanceKey")],
                        "x-semantic-provider": True,
                    },
                    "processDefinitionKey": _ref("ProcessDefinitionKey"),
                },
            },
            "ProcessInstance": {
                "type": "object",
                "properties": {
                    "processInstanceKey": _ref("ProcessInstanceKey"),
                    "processDefinitionKey": _ref("ProcessDefinitionKey"),
                    "tenantId": _ref("TenantId"),
                },
            },
        }
    },
}

OPERATION_IDS = [
    "createDeployment",
    "searchProcessDefinitions",
    "createProcessInstance",
    "getProcessInstance",
    "deleteProcessInstance",
    "getTopology",
]


@pytest.fixture
def sample_spec():
    return copy.deepcopy(SAMPLE_SPEC)


@pytest.fixture
def document(sample_spec):
    return SpecDocument(sample_spec, source="sample.json")


@pytest.fixture
def graph(document):
    return SemanticGraphExtractor(verbose=False).extract(document)


@pytest.fixture
def edge_index(graph):
    """(source, target, semantic type) -> list of edges"""
    index = {}
    for edge in graph.edges:
        key = (edge.source_operation_id, edge.target_operation_id, edge.semantic_type)
        index.setdefault(key, []).append(edge)
    return index
