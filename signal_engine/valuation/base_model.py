"""
Base Valuation Model
Abstract base class for intrinsic valuation methods.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, Union

from utils.unified_schema import MetricsSnapshot, RiskLevel


class BaseValuationModel(ABC):
    """
    Abstract base class for valuation models.

    Implementations turn the latest metrics snapshot into either a
    ValuationSummary or a ValuationFailure; they never raise for missing data.
    """

    @abstractmethod
    def intrinsic_value(
        self,
        latest: MetricsSnapshot,
        risk_level: RiskLevel,
        current_price: Optional[Decimal] = None,
    ) -> Union["ValuationSummary", "ValuationFailure"]:
        """
        Value the business from its latest snapshot.

        Args:
            latest: Most recent metrics snapshot
            risk_level: Assumption tier selecting growth, discount and multiple
            current_price: Latest close, used for the margin of safety

        Returns:
            ValuationSummary, or ValuationFailure when inputs are missing
        """
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """
        Return the identifier for this model.

        Returns:
            Model name (e.g., 'dcf')
        """
        pass

    def get_model_display_name(self) -> str:
        return self.get_model_name().upper()
