"""Dashboard payloads rendered directly by the frontend.

Every field is always present in the JSON output; values the vendor did not
provide are serialized as null.
"""

from ouracoach.schemas.base import CamelModel

Contributors = dict[str, int | None]


class ScoreSummary(CamelModel):
    score: int | None = None
    contributors: Contributors | None = None


class ActivitySummary(CamelModel):
    score: int | None = None
    steps: int | None = None
    active_calories: int | None = None
    total_calories: int | None = None
    contributors: Contributors | None = None


class StressSummary(CamelModel):
    stress_high: int | None = None
    recovery_high: int | None = None
    summary: str | None = None


class Spo2Summary(CamelModel):
    average: float | None = None


class HeartRateSample(CamelModel):
    bpm: int | None = None
    time: str | None = None


class HeartRateSummary(CamelModel):
    samples: list[HeartRateSample] = []
    latest: int | None = None


class SleepDetails(CamelModel):
    bedtime_start: str | None = None
    bedtime_end: str | None = None
    total_sleep: int | None = None
    deep_sleep: int | None = None
    rem_sleep: int | None = None
    light_sleep: int | None = None
    awake_time: int | None = None
    avg_hr: float | None = None
    lowest_hr: int | None = None
    avg_hrv: float | None = None
    efficiency: int | None = None


class DashboardSnapshot(CamelModel):
    date: str
    sleep: ScoreSummary
    readiness: ScoreSummary
    activity: ActivitySummary
    stress: StressSummary
    spo2: Spo2Summary
    heart_rate: HeartRateSummary
    sleep_details: SleepDetails | None = None


class DayScore(CamelModel):
    day: str
    score: int | None = None


class DayActivity(CamelModel):
    day: str
    score: int | None = None
    steps: int | None = None
    active_calories: int | None = None


class DaySleepDetails(CamelModel):
    day: str
    avg_hrv: float | None = None
    avg_hr: float | None = None
    total_sleep: int | None = None
    deep_sleep: int | None = None
    rem_sleep: int | None = None


class DashboardWeek(CamelModel):
    start_date: str
    end_date: str
    sleep: list[DayScore]
    readiness: list[DayScore]
    activity: list[DayActivity]
    sleep_details: list[DaySleepDetails]


class SyncResponse(CamelModel):
    success: bool = True


class YesterdaySummary(CamelModel):
    day: str
    sleep: ScoreSummary
    readiness: ScoreSummary
