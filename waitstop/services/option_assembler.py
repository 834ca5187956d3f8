from typing import List, Optional

from waitstop.schemas.options import DisplayStep, OptionKind, RouteOption
from waitstop.schemas.taxi import TaxiEstimate
from waitstop.schemas.transit import TransportMode


def build_vip(taxi_estimate: TaxiEstimate) -> RouteOption:
    """Taxi door to door."""
    return RouteOption(
        kind=OptionKind.VIP,
        label="VIP",
        tag="리치 모드",
        duration_minutes=taxi_estimate.duration_minutes,
        fare_amount=taxi_estimate.fare_amount,
        summary="프라이빗하고 편안한 이동",
        detail=f"택시 이동 약 {taxi_estimate.duration_minutes}분",
        steps=[
            DisplayStep(
                mode=TransportMode.TAXI,
                name="택시",
                description=f"목적지까지 택시 약 {taxi_estimate.duration_minutes}분",
                duration_minutes=taxi_estimate.duration_minutes,
                fare_amount=taxi_estimate.fare_amount,
            )
        ],
    )


def assemble_options(
    saver: Optional[RouteOption],
    smart: Optional[RouteOption],
    taxi_estimate: Optional[TaxiEstimate],
) -> List[RouteOption]:
    """
    Collect the available options in display order: saver, smart, vip.

    An empty list is the "no route" outcome and is left to the caller.
    """
    vip = build_vip(taxi_estimate) if taxi_estimate is not None else None
    return [option for option in (saver, smart, vip) if option is not None]
