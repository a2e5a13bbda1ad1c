# backend/modules/feedback/services/aggregation_service.py

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.query_logger import log_query_performance
from modules.businesses.models.business_models import BusinessProfile
from modules.feedback.models.feedback_models import Review

logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    """Result of a business rating recompute"""
    business_id: int
    total_reviews: int
    average_rating: float
    last_updated: datetime


@dataclass
class ReconciliationSummary:
    checked: int = 0
    corrected: int = 0
    failed: int = 0
    corrected_ids: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "checked": self.checked,
            "corrected": self.corrected,
            "failed": self.failed,
            "corrected_ids": list(self.corrected_ids),
        }


def round_rating(value) -> float:
    """Round a mean rating half-up to one decimal; no reviews means 0.0"""
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class BusinessRatingAggregator:
    """
    Keeps ``BusinessProfile.average_rating`` and ``total_reviews`` in step
    with the business's reviews.

    Every review mutation calls ``recompute`` before committing. The work
    happens inside a SAVEPOINT so a failure here is logged and rolled back
    on its own, leaving the caller's review write intact. Stale aggregates
    left behind by such failures are repaired by ``reconcile_all``.
    """

    def __init__(self, db: Session):
        self.db = db

    def recompute(self, business_id: int) -> Optional[AggregationResult]:
        """Recompute the aggregate for one business. Never raises."""
        try:
            savepoint = self.db.begin_nested()
        except Exception as e:
            logger.error(
                f"Could not open savepoint for business {business_id} rating update: {e}",
                exc_info=True,
            )
            return None

        try:
            business = (
                self.db.query(BusinessProfile)
                .filter(BusinessProfile.id == business_id)
                .with_for_update()
                .first()
            )
            if business is None:
                savepoint.rollback()
                logger.warning(f"Rating update skipped: business {business_id} not found")
                return None

            average, count = self._compute_stats(business_id)

            business.average_rating = average
            business.total_reviews = count
            business.updated_at = datetime.utcnow()
            self.db.flush()
            savepoint.commit()

            logger.info(
                f"Updated rating for business {business_id}: {average} ({count} reviews)"
            )
            return AggregationResult(
                business_id=business_id,
                total_reviews=count,
                average_rating=average,
                last_updated=business.updated_at,
            )

        except Exception as e:
            savepoint.rollback()
            logger.error(
                f"Failed to update rating for business {business_id}: {e}",
                exc_info=True,
            )
            return None

    def reconcile_all(self) -> Dict[str, Any]:
        """
        Recompute every business and report which stored aggregates drifted.

        Commits once at the end.
        """
        summary = ReconciliationSummary()

        with log_query_performance("reconcile_business_ratings"):
            rows = self.db.query(
                BusinessProfile.id,
                BusinessProfile.average_rating,
                BusinessProfile.total_reviews,
            ).all()

            for business_id, stored_average, stored_count in rows:
                summary.checked += 1
                result = self.recompute(business_id)
                if result is None:
                    summary.failed += 1
                    continue

                if (
                    result.total_reviews != stored_count
                    or result.average_rating != round_rating(stored_average)
                ):
                    summary.corrected += 1
                    summary.corrected_ids.append(business_id)

            self.db.commit()

        if summary.corrected or summary.failed:
            logger.warning(f"Rating reconciliation: {summary.to_dict()}")
        else:
            logger.info(f"Rating reconciliation found no drift across {summary.checked} businesses")

        return summary.to_dict()

    def _compute_stats(self, business_id: int) -> Tuple[float, int]:
        average, count = (
            self.db.query(func.avg(Review.rating), func.count(Review.id))
            .filter(Review.business_profile_id == business_id)
            .one()
        )
        count = int(count or 0)
        return (round_rating(average) if count else 0.0), count
