from waitstop.api.deps import build_trip_planner
from waitstop.core.config import Settings


def test_build_trip_planner_uses_settings():
    planner = build_trip_planner(
        Settings(
            SMART_MAX_CANDIDATES=3,
            SMART_MIN_LEAD_IN_MINUTES=15,
            SMART_JUMP_TIME_RATIO=0.4,
            SMART_JUMP_FARE_SURCHARGE=2000,
        )
    )

    assert planner.engine.max_candidates == 3
    assert planner.engine.min_lead_in_minutes == 15
    assert planner.engine.policy.time_ratio == 0.4
    assert planner.engine.policy.time_buffer_minutes == 3
    assert planner.engine.policy.fare_surcharge == 2000


def test_cors_origins_list():
    settings = Settings(CORS_ORIGINS="https://a.example.com, https://b.example.com")

    assert settings.cors_origins_list == ["https://a.example.com", "https://b.example.com"]
