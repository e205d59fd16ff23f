"""Abstract contracts for the external collaborators of the analysis pipeline."""

from abc import ABC, abstractmethod
import logging

from models.metrics import RawMetrics
from models.responses import Feedback
from models.scoring import ScoringResult

logger = logging.getLogger(__name__)


class MetricsExtractor(ABC):
    """Turns a CV document into the RawMetrics record.

    Implementations raise ExtractionError when the service fails and
    MalformedMetrics when its answer does not fit the schema.
    """

    name: str = ""

    @abstractmethod
    async def extract(self, document: bytes, mime_type: str) -> RawMetrics:
        """Extract metrics from the raw document bytes."""


class FeedbackGenerator(ABC):
    """Produces narrative feedback for an already-scored CV.

    Implementations raise FeedbackError on failure.
    """

    name: str = ""

    @abstractmethod
    async def generate(self, document: bytes, mime_type: str, scoring: ScoringResult) -> Feedback:
        """Generate summary, strengths, weaknesses and recommendations."""
