"""
SM-2 spaced repetition calculator.

This is a pure computation module with no I/O.
"""

from flashstudy.domain.constants import (
    FIRST_INTERVAL_DAYS,
    LAPSE_INTERVAL_DAYS,
    MAX_QUALITY,
    MIN_EASINESS_FACTOR,
    MIN_QUALITY,
    PASSING_QUALITY,
    SECOND_INTERVAL_DAYS,
)
from flashstudy.domain.exceptions import InvalidArgumentError
from flashstudy.domain.models import SRResult


class SRCalculator:
    """
    Computes the next SM-2 schedule for a single review.

    Stateless and side-effect free.
    """

    def calculate(
        self,
        quality: int,
        previous_easiness_factor: float,
        previous_interval: int,
        previous_repetitions: int,
    ) -> SRResult:
        """
        SM-2 scheduling step.

        Args:
            quality:                  Recall quality 0-5 (< 3 means a lapse)
            previous_easiness_factor: EF before this review; raised to 1.3 if lower
            previous_interval:        Interval in days before this review
            previous_repetitions:     Consecutive correct reviews before this one

        Returns:
            SRResult with the new easiness factor, interval and repetitions.

        Raises:
            InvalidArgumentError: quality outside 0-5, or a negative interval/repetitions.
        """
        if isinstance(quality, bool) or not isinstance(quality, int):
            raise InvalidArgumentError(f"Quality must be an integer, got {quality!r}")
        if not (MIN_QUALITY <= quality <= MAX_QUALITY):
            raise InvalidArgumentError(f"Quality must be 0-5, got {quality}")
        if previous_interval < 0 or previous_repetitions < 0:
            raise InvalidArgumentError(
                "Previous interval and repetitions cannot be negative "
                f"(interval={previous_interval}, repetitions={previous_repetitions})"
            )

        ease = max(MIN_EASINESS_FACTOR, previous_easiness_factor)

        # EF' = EF + (0.1 - (5-q) * (0.08 + (5-q) * 0.02))
        miss = MAX_QUALITY - quality
        new_ease = max(MIN_EASINESS_FACTOR, ease + (0.1 - miss * (0.08 + miss * 0.02)))

        if quality < PASSING_QUALITY:
            return SRResult(
                easiness_factor=new_ease,
                interval=LAPSE_INTERVAL_DAYS,
                repetitions=0,
            )

        new_repetitions = previous_repetitions + 1
        if new_repetitions == 1:
            new_interval = FIRST_INTERVAL_DAYS
        elif new_repetitions == 2:
            new_interval = SECOND_INTERVAL_DAYS
        else:
            new_interval = round(previous_interval * new_ease)

        return SRResult(
            easiness_factor=new_ease,
            interval=new_interval,
            repetitions=new_repetitions,
        )
