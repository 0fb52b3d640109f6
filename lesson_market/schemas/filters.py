from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Toggle(str, Enum):
    """State of a pair of on/off filter flags."""

    ONLY_A = "only_a"
    ONLY_B = "only_b"
    BOTH = "both"
    NEITHER = "neither"

    @classmethod
    def from_flags(cls, a: bool, b: bool) -> "Toggle":
        if a and b:
            return cls.BOTH
        if a:
            return cls.ONLY_A
        if b:
            return cls.ONLY_B
        return cls.NEITHER


class PriceBucket(BaseModel):
    """Named price range, max=None is unbounded."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    min: int
    max: int | None = None

    def contains(self, price: int) -> bool:
        return price >= self.min and (self.max is None or price <= self.max)


SINGLE_COURSE_PRICE_BUCKETS: tuple[PriceBucket, ...] = (
    PriceBucket(id="under1000", label="〜1,000円", min=0, max=1000),
    PriceBucket(id="1000to3000", label="1,000円〜3,000円", min=1000, max=3000),
    PriceBucket(id="3000to5000", label="3,000円〜5,000円", min=3000, max=5000),
    PriceBucket(id="5000to10000", label="5,000円〜10,000円", min=5000, max=10000),
    PriceBucket(id="over10000", label="10,000円以上", min=10000),
)

MONTHLY_PRICE_BUCKETS: tuple[PriceBucket, ...] = (
    PriceBucket(id="under5000", label="5,000円/月", min=0, max=5000),
    PriceBucket(id="5000to10000", label="5,000円〜10,000円/月", min=5000, max=10000),
    PriceBucket(id="10000to20000", label="10,000円〜20,000円/月", min=10000, max=20000),
    PriceBucket(id="over20000", label="20,000円以上/月", min=20000),
)

AREAS: tuple[str, ...] = (
    "豊中市", "吹田市", "茨木市", "高槻市", "箕面市", "摂津市", "島本町", "豊能町", "能勢町",
)


class FilterCriteria(BaseModel):
    """Active catalog filters chosen by a learner."""

    model_config = ConfigDict(frozen=True)

    keyword: str = ""
    category: str | None = None
    subcategories: frozenset[str] = frozenset()
    monthly: bool = True
    single_course: bool = True
    online: bool = True
    in_person: bool = True
    areas: frozenset[str] = frozenset()
    all_dates: bool = True
    start_date: date | None = None
    end_date: date | None = None
    monthly_buckets: frozenset[str] = frozenset()
    single_course_buckets: frozenset[str] = frozenset()
    min_price: int | None = Field(None, ge=0)
    max_price: int | None = Field(None, ge=0)

    @property
    def lesson_types(self) -> Toggle:
        return Toggle.from_flags(self.monthly, self.single_course)

    @property
    def location_types(self) -> Toggle:
        return Toggle.from_flags(self.online, self.in_person)

    @property
    def date_range(self) -> tuple[date, date] | None:
        if self.all_dates or self.start_date is None or self.end_date is None:
            return None
        return self.start_date, self.end_date


class FilterOptions(BaseModel):
    """Choices offered by the catalog filter panel."""

    areas: tuple[str, ...] = AREAS
    monthly_price_buckets: tuple[PriceBucket, ...] = MONTHLY_PRICE_BUCKETS
    single_course_price_buckets: tuple[PriceBucket, ...] = SINGLE_COURSE_PRICE_BUCKETS
