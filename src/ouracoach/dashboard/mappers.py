"""Map raw Oura records to the dashboard payloads the frontend renders."""

from datetime import date
from typing import Any

from ouracoach.schemas.dashboard import (
    ActivitySummary,
    Contributors,
    DashboardSnapshot,
    DashboardWeek,
    DayActivity,
    DayScore,
    DaySleepDetails,
    HeartRateSample,
    HeartRateSummary,
    ScoreSummary,
    SleepDetails,
    Spo2Summary,
    StressSummary,
    YesterdaySummary,
)

# Most recent heart rate readings kept for the sparkline
HEART_RATE_SAMPLE_LIMIT = 48

Record = dict[str, Any]


def _safe_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def _safe_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def _safe_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _first(records: list[Record]) -> Record:
    return records[0] if records else {}


def _contributors(record: Record) -> Contributors | None:
    raw = record.get("contributors")
    if not isinstance(raw, dict):
        return None
    return {str(name): _safe_int(value) for name, value in raw.items()}


def map_score(record: Record) -> ScoreSummary:
    return ScoreSummary(
        score=_safe_int(record.get("score")),
        contributors=_contributors(record),
    )


def map_sleep_details(period: Record) -> SleepDetails:
    return SleepDetails(
        bedtime_start=_safe_str(period.get("bedtime_start")),
        bedtime_end=_safe_str(period.get("bedtime_end")),
        total_sleep=_safe_int(period.get("total_sleep_duration")),
        deep_sleep=_safe_int(period.get("deep_sleep_duration")),
        rem_sleep=_safe_int(period.get("rem_sleep_duration")),
        light_sleep=_safe_int(period.get("light_sleep_duration")),
        awake_time=_safe_int(period.get("awake_time")),
        avg_hr=_safe_float(period.get("average_heart_rate")),
        lowest_hr=_safe_int(period.get("lowest_heart_rate")),
        avg_hrv=_safe_float(period.get("average_hrv")),
        efficiency=_safe_int(period.get("efficiency")),
    )


def map_heart_rate(samples: list[Record]) -> HeartRateSummary:
    """Keep the most recent readings; `latest` is the last reading overall."""
    recent = samples[-HEART_RATE_SAMPLE_LIMIT:]
    return HeartRateSummary(
        samples=[
            HeartRateSample(bpm=_safe_int(s.get("bpm")), time=_safe_str(s.get("timestamp")))
            for s in recent
        ],
        latest=_safe_int(samples[-1].get("bpm")) if samples else None,
    )


def map_today(
    day: date,
    sleep: list[Record],
    readiness: list[Record],
    activity: list[Record],
    stress: list[Record],
    spo2: list[Record],
    heart_rate: list[Record],
    sleep_periods: list[Record],
) -> DashboardSnapshot:
    """Build the "today" dashboard from the `data` arrays of each Oura call.

    An empty list for any category yields nulls for that category's fields.
    The last sleep period in the window is treated as last night's sleep.
    """
    activity_day = _first(activity)
    stress_day = _first(stress)

    spo2_pct = _first(spo2).get("spo2_percentage")
    spo2_avg = _safe_float(spo2_pct.get("average")) if isinstance(spo2_pct, dict) else None

    return DashboardSnapshot(
        date=day.isoformat(),
        sleep=map_score(_first(sleep)),
        readiness=map_score(_first(readiness)),
        activity=ActivitySummary(
            score=_safe_int(activity_day.get("score")),
            steps=_safe_int(activity_day.get("steps")),
            active_calories=_safe_int(activity_day.get("active_calories")),
            total_calories=_safe_int(activity_day.get("total_calories")),
            contributors=_contributors(activity_day),
        ),
        stress=StressSummary(
            stress_high=_safe_int(stress_day.get("stress_high")),
            recovery_high=_safe_int(stress_day.get("recovery_high")),
            summary=_safe_str(stress_day.get("day_summary")),
        ),
        spo2=Spo2Summary(average=spo2_avg),
        heart_rate=map_heart_rate(heart_rate),
        sleep_details=map_sleep_details(sleep_periods[-1]) if sleep_periods else None,
    )


def map_week(
    start: date,
    end: date,
    sleep: list[Record],
    readiness: list[Record],
    activity: list[Record],
    sleep_periods: list[Record],
) -> DashboardWeek:
    """Build the 7-day dashboard. Days the vendor did not return are not filled in."""
    return DashboardWeek(
        start_date=start.isoformat(),
        end_date=end.isoformat(),
        sleep=[DayScore(day=str(d.get("day", "")), score=_safe_int(d.get("score"))) for d in sleep],
        readiness=[
            DayScore(day=str(d.get("day", "")), score=_safe_int(d.get("score"))) for d in readiness
        ],
        activity=[
            DayActivity(
                day=str(d.get("day", "")),
                score=_safe_int(d.get("score")),
                steps=_safe_int(d.get("steps")),
                active_calories=_safe_int(d.get("active_calories")),
            )
            for d in activity
        ],
        sleep_details=[
            DaySleepDetails(
                day=str(s.get("day", "")),
                avg_hrv=_safe_float(s.get("average_hrv")),
                avg_hr=_safe_float(s.get("average_heart_rate")),
                total_sleep=_safe_int(s.get("total_sleep_duration")),
                deep_sleep=_safe_int(s.get("deep_sleep_duration")),
                rem_sleep=_safe_int(s.get("rem_sleep_duration")),
            )
            for s in sleep_periods
        ],
    )


def map_yesterday_summary(
    day: date, sleep: list[Record], readiness: list[Record]
) -> YesterdaySummary:
    return YesterdaySummary(
        day=day.isoformat(),
        sleep=map_score(_first(sleep)),
        readiness=map_score(_first(readiness)),
    )
