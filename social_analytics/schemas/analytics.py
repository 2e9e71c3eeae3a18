from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Platform = Literal["instagram", "facebook", "twitter", "linkedin", "tiktok", "youtube"]
MediaType = Literal["image", "video", "carousel", "reel", "story"]


class CamelModel(BaseModel):
    """Serialized with camelCase keys, accepts either spelling on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PostFilters(BaseModel):
    """
    Normalized /posts query. Every field has already been through the validators;
    None means "no filter".
    """
    platform: Optional[Platform] = None
    media_type: Optional[MediaType] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    sort_field: str = "posted_at"
    sort_order: Literal["asc", "desc"] = "desc"
    search: Optional[str] = None


class PostCreate(CamelModel):
    # No owner field: the owner is always the authenticated user
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    platform: Platform
    media_type: MediaType
    posted_at: str
    caption: Optional[str] = None
    thumbnail_url: Optional[str] = None
    permalink: Optional[str] = None
    likes: Optional[int] = Field(default=None, ge=0)
    comments: Optional[int] = Field(default=None, ge=0)
    shares: Optional[int] = Field(default=None, ge=0)
    saves: Optional[int] = Field(default=None, ge=0)
    impressions: Optional[int] = Field(default=None, ge=0)
    reach: Optional[int] = Field(default=None, ge=0)
    engagement_rate: Optional[float] = Field(default=None, ge=0)


class PostUpdate(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    likes: Optional[int] = Field(default=None, ge=0)
    comments: Optional[int] = Field(default=None, ge=0)
    shares: Optional[int] = Field(default=None, ge=0)
    saves: Optional[int] = Field(default=None, ge=0)
    impressions: Optional[int] = Field(default=None, ge=0)
    reach: Optional[int] = Field(default=None, ge=0)
    engagement_rate: Optional[float] = Field(default=None, ge=0)


class TopPost(CamelModel):
    id: str
    caption: str
    engagement: int
    posted_at: Optional[str] = None


class MetricChanges(CamelModel):
    total_posts: float = 0
    total_views: float = 0
    total_engagements: float = 0
    average_engagement_rate: float = 0
    total_reach: float = 0
    total_likes: float = 0
    total_comments: float = 0
    total_shares: float = 0


class PeriodMetrics(CamelModel):
    total_posts: int = 0
    total_views: int = 0
    total_likes: int = 0
    total_comments: int = 0
    total_shares: int = 0
    total_reach: int = 0
    total_engagements: int = 0
    average_engagement_rate: float = 0


class AnalyticsSummary(CamelModel):
    total_posts: int = 0
    total_views: int = 0
    total_engagements: int = 0
    average_engagement_rate: float = 0
    total_reach: int = 0
    total_likes: int = 0
    total_comments: int = 0
    total_shares: int = 0
    top_post: Optional[TopPost] = None
    changes: MetricChanges = Field(default_factory=MetricChanges)


class Credentials(BaseModel):
    """Raw login/signup body. Types are checked by the credential validators."""
    model_config = ConfigDict(extra="ignore")

    email: Any = None
    password: Any = None


class UserInfo(BaseModel):
    id: str
    email: Optional[str] = None
    created_at: Optional[str] = None


class SignupUserInfo(UserInfo):
    email_confirmed_at: Optional[str] = None
