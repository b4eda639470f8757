"""
Extractor configuration.

Annotation keys, naming heuristics and the hand-curated bootstrap sequence
table live here so they can be overridden from the environment or from a
YAML file without touching the analyzers.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import yaml

from .errors import SpecLoadError


@dataclass
class BootstrapTemplate:
    """A named sequence of operations, emitted only when all `requires` exist."""
    name: str
    description: str
    operations: List[str]
    produces: List[str] = field(default_factory=list)
    requires: List[str] = field(default_factory=list)

    def required_operations(self) -> List[str]:
        return self.requires or self.operations

    @classmethod
    def from_dict(cls, data: Dict) -> "BootstrapTemplate":
        return cls(
            name=data['name'],
            description=data.get('description', ''),
            operations=list(data.get('operations', [])),
            produces=list(data.get('produces', [])),
            requires=list(data.get('requires', [])),
        )


DEFAULT_BOOTSTRAP_TEMPLATES: List[BootstrapTemplate] = [
    BootstrapTemplate(
        name='deployment_setup',
        description='Deploy resources and obtain all available keys from deployment result',
        operations=['createDeployment'],
        produces=['ProcessDefinitionKey', 'DecisionDefinitionKey', 'FormKey', 'DeploymentKey'],
    ),
    BootstrapTemplate(
        name='process_definition_search',
        description='Deploy and search for specific process definitions',
        operations=['createDeployment', 'searchProcessDefinitions'],
        produces=['ProcessDefinitionKey', 'DeploymentKey'],
    ),
    BootstrapTemplate(
        name='decision_definition_search',
        description='Deploy and search for specific decision definitions',
        operations=['createDeployment', 'searchDecisionDefinitions'],
        produces=['DecisionDefinitionKey', 'DeploymentKey'],
    ),
    BootstrapTemplate(
        name='tenant_setup',
        description='Create tenant for multi-tenancy testing',
        operations=['createTenant'],
    ),
    BootstrapTemplate(
        name='user_setup',
        description='Create user for authentication testing',
        operations=['createUser'],
    ),
    BootstrapTemplate(
        name='process_instance_workflow_setup',
        description='Complete process setup and create instance',
        operations=['createDeployment', 'searchProcessDefinitions', 'createProcessInstance'],
        produces=['ProcessDefinitionKey', 'DeploymentKey', 'ProcessInstanceKey'],
    ),
]


def load_bootstrap_templates(path: str) -> List[BootstrapTemplate]:
    """Load a bootstrap template table from a YAML file (a list of mappings)."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f) or []
    except (OSError, yaml.YAMLError) as e:
        raise SpecLoadError(f"Cannot read bootstrap templates from {path}: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get('bootstrapSequences', raw.get('sequences', []))
    if not isinstance(raw, list):
        raise SpecLoadError(f"Bootstrap template file {path} must contain a list")

    try:
        return [BootstrapTemplate.from_dict(entry) for entry in raw]
    except (KeyError, TypeError, AttributeError) as e:
        raise SpecLoadError(f"Malformed bootstrap template in {path}: {e}") from e


@dataclass
class ExtractorConfig:
    """Settings shared by every stage of the extraction pipeline."""

    semantic_type_key: str = 'x-semantic-type'
    provider_key: str = 'x-semantic-provider'
    eventually_consistent_key: str = 'x-eventually-consistent'
    operation_kind_key: str = 'x-operation-kind'
    conditional_idempotency_key: str = 'x-conditional-idempotency'

    identifier_suffix: str = 'Key'
    numeric_identifier_pattern: str = '^-?[0-9]+$'
    require_provider_for_name_fallback: bool = True

    output_dir: str = './output'

    setup_keywords: List[str] = field(
        default_factory=lambda: ['create', 'setup', 'initialize', 'configure'])
    setup_operation_ids: List[str] = field(
        default_factory=lambda: ['createTenant', 'createUser', 'createGroup', 'createRole'])
    deployment_keyword: str = 'deploy'
    deployment_path_segment: str = '/deployment'
    resource_tag: str = 'Resource'

    bootstrap_templates: List[BootstrapTemplate] = field(
        default_factory=lambda: list(DEFAULT_BOOTSTRAP_TEMPLATES))
    implicit_dependency_rules: Dict[str, str] = field(
        default_factory=lambda: {'process': 'process_definition_setup'})

    @classmethod
    def from_env(cls, bootstrap_file: Optional[str] = None) -> "ExtractorConfig":
        """Build a config from SEMANTIC_GRAPH_* environment variables."""
        config = cls(
            output_dir=os.getenv('SEMANTIC_GRAPH_OUTPUT_DIR', './output'),
            identifier_suffix=os.getenv('SEMANTIC_GRAPH_IDENTIFIER_SUFFIX', 'Key'),
            require_provider_for_name_fallback=os.getenv(
                'SEMANTIC_GRAPH_REQUIRE_PROVIDER', 'true').lower() not in ('0', 'false', 'no'),
        )
        bootstrap_file = bootstrap_file or os.getenv('SEMANTIC_GRAPH_BOOTSTRAP_FILE')
        if bootstrap_file:
            config.bootstrap_templates = load_bootstrap_templates(bootstrap_file)
        return config

    def looks_like_identifier(self, name: str) -> bool:
        """True when a semantic type name suggests an identifier role."""
        return self.identifier_suffix in name
