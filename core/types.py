from dataclasses import dataclass, field
from typing import Protocol, List, Dict, Any, Optional

@dataclass
class PatientData:
    name: Optional[str] = None
    sex: Optional[str] = None  # "Male"/"Female"/"Other"
    age: Optional[float] = None
    answers: Dict[str, Any] = field(default_factory=dict)  # questionnaire, camelCase keys
    history: List[Any] = field(default_factory=list)  # previously saved scores

@dataclass
class ResultItem:
    metric: str
    value: Optional[float] | str
    interpretation: str
    severity: str  # "low" | "moderate" | "high" | "critical" | "info"

class HealthModule(Protocol):
    id: str
    title: str
    def inputs(self, data: PatientData) -> PatientData: ...
    def compute(self, data: PatientData) -> List[ResultItem]: ...
    def render(self, results: List[ResultItem]) -> None: ...
    def to_pdf(self, results: List[ResultItem]) -> List[list[str]]: ...
