"""Analysis criteria: scalar scores for positions and trading records."""

from qanalytics.criteria.base import AnalysisCriterion, EquityCurveCriterion
from qanalytics.criteria.counts import (
    NumberOfBreakEvenPositionsCriterion,
    NumberOfLosingPositionsCriterion,
    NumberOfPositionsCriterion,
    NumberOfWinningPositionsCriterion,
)
from qanalytics.criteria.drawdown import (
    MaximumAbsoluteDrawdownCriterion,
    MaximumDrawdownCriterion,
    ReturnOverMaxDrawdownCriterion,
)
from qanalytics.criteria.pnl import (
    AverageLossCriterion,
    AverageProfitCriterion,
    GrossProfitLossCriterion,
    LossCriterion,
    NetProfitLossCriterion,
    ProfitCriterion,
    ProfitLossCriterion,
    ProfitLossRatioCriterion,
    ReturnCriterion,
)
from qanalytics.criteria.ratios import InPositionPercentageCriterion, SamplingFrequency, SharpeRatioCriterion
from qanalytics.criteria.streaks import MaxConsecutiveLossCriterion, MaxConsecutiveProfitCriterion

__all__ = [
    "AnalysisCriterion",
    "AverageLossCriterion",
    "AverageProfitCriterion",
    "EquityCurveCriterion",
    "GrossProfitLossCriterion",
    "InPositionPercentageCriterion",
    "LossCriterion",
    "MaxConsecutiveLossCriterion",
    "MaxConsecutiveProfitCriterion",
    "MaximumAbsoluteDrawdownCriterion",
    "MaximumDrawdownCriterion",
    "NetProfitLossCriterion",
    "NumberOfBreakEvenPositionsCriterion",
    "NumberOfLosingPositionsCriterion",
    "NumberOfPositionsCriterion",
    "NumberOfWinningPositionsCriterion",
    "ProfitCriterion",
    "ProfitLossCriterion",
    "ProfitLossRatioCriterion",
    "ReturnCriterion",
    "ReturnOverMaxDrawdownCriterion",
    "SamplingFrequency",
    "SharpeRatioCriterion",
]
