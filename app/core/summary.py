from dataclasses import dataclass
from typing import Optional

from app.core.repository import MeasurementRepository
from app.models.measurement import Measurement


@dataclass(frozen=True)
class MeasurementSummary:
    latest: Optional[Measurement]
    total: int


def summarize(repository: MeasurementRepository) -> MeasurementSummary:
    # "latest" follows the same ordering as the measurement list
    return MeasurementSummary(latest=repository.latest(), total=repository.count())
