"""
Hybrid Synthesis Service

Builds the transit-based route options from one set of ranked transit
itineraries and one taxi estimate:

- Saver: the provider's best itinerary, as is.
- Smart: a taxi "jump" replaces the walk/bus lead-in of an itinerary and the
  rider boards its last bus/subway leg (the anchor). The jump's time and fare
  are estimated from the lead-in; no extra routing call is made.

Everything here is a pure function of its inputs.
"""

import logging
from functools import reduce
from typing import List, NamedTuple, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from waitstop.schemas.options import DisplayStep, OptionKind, RouteOption
from waitstop.schemas.taxi import TaxiEstimate
from waitstop.schemas.transit import TransitItinerary, TransitSegment, TransportMode
from waitstop.utils.numbers import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_MAX_CANDIDATES = 5
DEFAULT_MIN_LEAD_IN_MINUTES = 10
TRANSFER_STATION_LABEL = "환승역"


class JumpEstimate(NamedTuple):
    duration_minutes: int
    fare_amount: int


class JumpEstimationPolicy(BaseModel):
    """
    Closed-form estimate of the taxi jump that replaces a lead-in.

    duration = round(lead_in * time_ratio) + time_buffer_minutes
    fare     = round(taxi_fare * lead_in / itinerary_total) + fare_surcharge

    The taxi is assumed to cover the lead-in in a fraction of the transit
    time, plus a fixed buffer for boarding and alighting. The fare is the
    lead-in's share of the full point-to-point fare plus a surcharge for the
    minimum fare and detours.
    """

    model_config = ConfigDict(frozen=True)

    time_ratio: float = 0.5
    time_buffer_minutes: int = 3
    fare_surcharge: int = 3000

    def estimate(
        self, lead_in_minutes: int, itinerary: TransitItinerary, taxi_estimate: TaxiEstimate
    ) -> JumpEstimate:
        duration = round_half_up(lead_in_minutes * self.time_ratio) + self.time_buffer_minutes
        share = lead_in_minutes / itinerary.total_duration_minutes
        fare = round_half_up(taxi_estimate.fare_amount * share) + self.fare_surcharge
        return JumpEstimate(duration_minutes=duration, fare_amount=fare)


class SynthesisResult(NamedTuple):
    saver: Optional[RouteOption]
    smart: Optional[RouteOption]


class _StepFold(NamedTuple):
    steps: Tuple[DisplayStep, ...]
    fare_assigned: bool


def segments_to_steps(segments: Sequence[TransitSegment], total_fare: int) -> List[DisplayStep]:
    """
    Convert segments to display steps.

    The whole fare is attributed to the first bus/subway step; later transit
    steps ride on a free transfer and walks are always free.
    """

    def fold(acc: _StepFold, segment: TransitSegment) -> _StepFold:
        charge = segment.is_transit and not acc.fare_assigned
        step = DisplayStep(
            mode=segment.mode,
            name=segment.display_name,
            description=segment.description,
            duration_minutes=segment.duration_minutes,
            fare_amount=total_fare if charge else 0,
        )
        return _StepFold(acc.steps + (step,), acc.fare_assigned or charge)

    return list(reduce(fold, segments, _StepFold((), False)).steps)


def find_anchor_index(segments: Sequence[TransitSegment]) -> Optional[int]:
    """Index of the last bus/subway segment, or None for a walk-only itinerary."""
    for index in range(len(segments) - 1, -1, -1):
        if segments[index].is_transit:
            return index
    return None


def build_saver(itinerary: TransitItinerary) -> RouteOption:
    return RouteOption(
        kind=OptionKind.SAVER,
        label="Saver",
        tag="지갑 수호자",
        duration_minutes=itinerary.total_duration_minutes,
        fare_amount=itinerary.total_fare,
        summary="최저가 이동",
        detail=f"환승 {itinerary.transfer_count}회",
        steps=segments_to_steps(itinerary.segments, itinerary.total_fare),
    )


class HybridSynthesisEngine:
    """Produces the Saver and, when feasible, the Smart option."""

    def __init__(
        self,
        policy: Optional[JumpEstimationPolicy] = None,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
        min_lead_in_minutes: int = DEFAULT_MIN_LEAD_IN_MINUTES,
    ):
        self.policy = policy or JumpEstimationPolicy()
        self.max_candidates = max_candidates
        self.min_lead_in_minutes = min_lead_in_minutes

    def synthesize(
        self, itineraries: Sequence[TransitItinerary], taxi_estimate: Optional[TaxiEstimate]
    ) -> SynthesisResult:
        if not itineraries:
            return SynthesisResult(saver=None, smart=None)
        return SynthesisResult(
            saver=build_saver(itineraries[0]),
            smart=self.build_smart(itineraries, taxi_estimate),
        )

    def build_smart(
        self, itineraries: Sequence[TransitItinerary], taxi_estimate: Optional[TaxiEstimate]
    ) -> Optional[RouteOption]:
        """
        Build the Smart option from the first eligible top-ranked itinerary.

        Returns None when there is no taxi estimate, when no candidate has a
        long enough lead-in, or when synthesis fails on bad data.
        """
        if taxi_estimate is None:
            return None

        try:
            for rank, itinerary in enumerate(itineraries[: self.max_candidates]):
                anchor = find_anchor_index(itinerary.segments)
                if anchor is None:
                    continue
                lead_in = sum(s.duration_minutes for s in itinerary.segments[:anchor])
                if lead_in < self.min_lead_in_minutes:
                    continue
                logger.debug("Smart jump on candidate #%d, lead-in %d min", rank, lead_in)
                return self._synthesize(itinerary, anchor, lead_in, taxi_estimate)
        except Exception as e:  # pylint: disable=broad-except
            logger.warning("Smart option synthesis failed: %s", str(e))
            return None

        return None

    def _synthesize(
        self,
        itinerary: TransitItinerary,
        anchor: int,
        lead_in_minutes: int,
        taxi_estimate: TaxiEstimate,
    ) -> RouteOption:
        jump = self.policy.estimate(lead_in_minutes, itinerary, taxi_estimate)
        remaining = itinerary.segments[anchor:]
        hub_segment = remaining[0]
        hub_station = hub_segment.start_station_name or TRANSFER_STATION_LABEL

        jump_step = DisplayStep(
            mode=TransportMode.TAXI,
            name="택시로 이동",
            description=f"{hub_station}까지 택시 약 {jump.duration_minutes}분",
            duration_minutes=jump.duration_minutes,
            fare_amount=jump.fare_amount,
        )
        transit_steps = segments_to_steps(remaining, itinerary.total_fare)
        transit_steps[0] = transit_steps[0].model_copy(
            update={
                "name": f"{hub_station} 환승",
                "description": f"{hub_station}에서 {hub_segment.display_name} 탑승",
                "is_transfer_hub": True,
            }
        )

        duration = jump.duration_minutes + sum(s.duration_minutes for s in remaining)
        time_saved = itinerary.total_duration_minutes - duration
        skipped_transfers = max(0, itinerary.transfer_count - 1)
        anchor_line = hub_segment.line_name or "지하철"

        return RouteOption(
            kind=OptionKind.SMART,
            label="Smart",
            tag="가성비 전술가",
            badge=f"{time_saved}분 단축" if time_saved > 0 else None,
            duration_minutes=duration,
            fare_amount=jump.fare_amount + itinerary.total_fare,
            summary=f"환승 {skipped_transfers}회 생략",
            detail=f"택시({jump.duration_minutes}분) + {anchor_line}",
            steps=[jump_step, *transit_steps],
        )
