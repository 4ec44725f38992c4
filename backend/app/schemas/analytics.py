"""Analytics result schemas for the instructor views."""

import enum
from datetime import datetime
from typing import Any, Dict, Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator


class ScoreBucket(str, enum.Enum):
    """The five fixed score ranges, ordered lowest first."""

    RANGE_0_20 = "0-20"
    RANGE_21_40 = "21-40"
    RANGE_41_60 = "41-60"
    RANGE_61_80 = "61-80"
    RANGE_81_100 = "81-100"

    @property
    def position(self) -> int:
        return _BUCKET_ORDER.index(self)

    @property
    def upper_bound(self) -> float:
        return _UPPER_BOUNDS[self]

    @classmethod
    def classify(cls, score: float) -> "ScoreBucket":
        """
        Place a score in its bucket. Upper bounds are inclusive, so 20 is
        in 0-20 and 40 in 21-40. Anything above 80 (including values over
        100 and NaN) falls through to 81-100.
        """
        for bucket in _BUCKET_ORDER[:-1]:
            if score <= bucket.upper_bound:
                return bucket
        return cls.RANGE_81_100


_BUCKET_ORDER: Tuple[ScoreBucket, ...] = tuple(ScoreBucket)
_UPPER_BOUNDS: Dict[ScoreBucket, float] = {
    ScoreBucket.RANGE_0_20: 20,
    ScoreBucket.RANGE_21_40: 40,
    ScoreBucket.RANGE_41_60: 60,
    ScoreBucket.RANGE_61_80: 80,
    ScoreBucket.RANGE_81_100: 100,
}


class ScoreDistribution(BaseModel):
    """Student counts per score bucket, stored positionally in bucket order."""

    model_config = ConfigDict(frozen=True)

    counts: Tuple[int, int, int, int, int] = (0, 0, 0, 0, 0)

    @classmethod
    def from_buckets(cls, buckets: Iterable[ScoreBucket]) -> "ScoreDistribution":
        counts = [0] * len(_BUCKET_ORDER)
        for bucket in buckets:
            counts[bucket.position] += 1
        return cls(counts=tuple(counts))

    def count(self, bucket: ScoreBucket) -> int:
        return self.counts[bucket.position]

    def increment(self, bucket: ScoreBucket) -> "ScoreDistribution":
        """Return a copy with one more student in `bucket`."""
        counts = list(self.counts)
        counts[bucket.position] += 1
        return self.model_copy(update={"counts": tuple(counts)})

    @property
    def total(self) -> int:
        return sum(self.counts)

    def as_dict(self) -> Dict[str, int]:
        return {bucket.value: self.counts[bucket.position] for bucket in _BUCKET_ORDER}

    @model_validator(mode="before")
    @classmethod
    def from_labels(cls, data: Any) -> Any:
        """Accept the serialized `{"0-20": n, ...}` form as well as `counts`."""
        if isinstance(data, dict) and "counts" not in data:
            unknown = set(data) - {bucket.value for bucket in _BUCKET_ORDER}
            if unknown:
                raise ValueError(f"Unknown score buckets: {sorted(unknown)}")
            return {"counts": tuple(data.get(bucket.value, 0) for bucket in _BUCKET_ORDER)}
        return data

    @model_serializer
    def serialize(self) -> Dict[str, int]:
        return self.as_dict()


class CourseAnalytics(BaseModel):
    course_id: str
    total_students: int
    average_attendance: float
    assignment_completion: Dict[str, float]
    performance_distribution: ScoreDistribution
    weekly_engagement: List[int]


class CourseEngagement(BaseModel):
    course_id: str
    title: str
    total_students: int
    average_attendance: float
    weekly_engagement: List[int]


class RecentSubmission(BaseModel):
    course_id: str
    assignment_id: str
    assignment_title: str
    student_id: str
    submitted_at: datetime
    total_score: float


class DashboardAnalytics(BaseModel):
    total_students: int = 0
    average_performance: float = 0.0
    course_engagement: List[CourseEngagement] = Field(default_factory=list)
    recent_submissions: List[RecentSubmission] = Field(default_factory=list)
    failed_courses: List[str] = Field(default_factory=list)
