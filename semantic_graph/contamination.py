import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .config import ExtractorConfig
from .enums import RiskLevel
from .library import SemanticTypeLibrary
from .semantic_type import SemanticType
from .utils import unique

logger = logging.getLogger(__name__)

SCENARIO_EXAMPLE_COUNT = 3


@dataclass
class ContaminationScenario:
    target_semantic_type: str
    contaminant_semantic_type: str
    contaminant_values: List[Any]
    expected_behavior: str = 'rejection'  # rejection | acceptance | unknown
    description: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'targetSemanticType': self.target_semantic_type,
            'contaminantSemanticType': self.contaminant_semantic_type,
            'contaminantValues': self.contaminant_values,
            'expectedBehavior': self.expected_behavior,
            'description': self.description,
        }


@dataclass
class ContaminationRisk:
    target_type: str
    contaminants: List[str]

    @property
    def count(self) -> int:
        return len(self.contaminants)


@dataclass
class ContaminationSeverityAnalysis:
    high_risk: List[ContaminationRisk] = field(default_factory=list)
    medium_risk: List[ContaminationRisk] = field(default_factory=list)
    low_risk: List[ContaminationRisk] = field(default_factory=list)
    total_opportunities: int = 0


class CrossContaminationAnalyzer:
    """
    Find semantic types that could be substituted for one another by mistake
    because they look the same on the wire.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()

    @staticmethod
    def characteristic_key(semantic_type: SemanticType) -> Tuple[str, str, str]:
        return (semantic_type.base_type,
                semantic_type.format or 'no-format',
                semantic_type.pattern or 'no-pattern')

    def group_by_characteristics(self, semantic_types: Dict[str, SemanticType]
                                 ) -> Dict[Tuple[str, str, str], List[str]]:
        groups: Dict[Tuple[str, str, str], List[str]] = {}
        for name, semantic_type in semantic_types.items():
            groups.setdefault(self.characteristic_key(semantic_type), []).append(name)
        return groups

    def find_contamination_opportunities(self, semantic_types: Dict[str, SemanticType]
                                         ) -> Dict[str, List[str]]:
        """Map of semantic type -> candidate contaminants; types without any are left out."""
        groups = self.group_by_characteristics(semantic_types)
        contamination_map = {}
        for name, semantic_type in semantic_types.items():
            contaminants = self.find_contaminants(semantic_type, groups)
            if contaminants:
                contamination_map[name] = contaminants
        logger.debug("Found contamination opportunities for %d semantic types",
                     len(contamination_map))
        return contamination_map

    def find_contaminants(self, target: SemanticType,
                          groups: Dict[Tuple[str, str, str], List[str]]) -> List[str]:
        same_shape = [name for name in groups.get(self.characteristic_key(target), [])
                      if name != target.name]
        return unique(same_shape + self._similar_identifier_types(target, groups))

    def _similar_identifier_types(self, target: SemanticType,
                                  groups: Dict[Tuple[str, str, str], List[str]]) -> List[str]:
        # identifier types sharing the numeric pattern look identical on the wire
        pattern = self.config.numeric_identifier_pattern
        if target.pattern != pattern or not self.config.looks_like_identifier(target.name):
            return []
        similar = []
        for key, names in groups.items():
            if key[2] != pattern:
                continue
            similar.extend(name for name in names
                           if name != target.name and self.config.looks_like_identifier(name))
        return similar

    def generate_scenarios(self, target_type: str, contaminants: List[str],
                           library: SemanticTypeLibrary) -> List[ContaminationScenario]:
        scenarios = []
        for contaminant in contaminants:
            definition = library.get(contaminant)
            if definition is None or not definition.valid_examples:
                continue
            scenarios.append(ContaminationScenario(
                target_semantic_type=target_type,
                contaminant_semantic_type=contaminant,
                contaminant_values=definition.valid_examples[:SCENARIO_EXAMPLE_COUNT],
                description=f"Test {target_type} field with valid {contaminant} values",
            ))
        return scenarios

    def classify_risk(self, target_type: str, contaminants: List[str]) -> RiskLevel:
        if len(contaminants) >= 5 and self.config.looks_like_identifier(target_type):
            return RiskLevel.HIGH
        if len(contaminants) >= 2:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def analyze_severity(self, contamination_map: Dict[str, List[str]]
                         ) -> ContaminationSeverityAnalysis:
        analysis = ContaminationSeverityAnalysis()
        buckets = {
            RiskLevel.HIGH: analysis.high_risk,
            RiskLevel.MEDIUM: analysis.medium_risk,
            RiskLevel.LOW: analysis.low_risk,
        }
        for target_type, contaminants in contamination_map.items():
            analysis.total_opportunities += len(contaminants)
            risk = ContaminationRisk(target_type, list(contaminants))
            buckets[self.classify_risk(target_type, contaminants)].append(risk)
        return analysis
