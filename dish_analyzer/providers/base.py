from abc import ABC, abstractmethod
from typing import Union

from dish_analyzer.models import AnalysisRequest, Caption, RawAnalysis

ProviderOutput = Union[RawAnalysis, Caption]


class ImageAnalysisProvider(ABC):
    """
    One external AI backend in the cascade.

    ``analyze`` returns either structured text to normalize (RawAnalysis) or a
    bare caption for the lexicon (Caption). Any problem is raised as
    AdapterFailure so the cascade can log it and move on.
    """

    name: str = "provider"

    @abstractmethod
    def analyze(self, request: AnalysisRequest) -> ProviderOutput:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
