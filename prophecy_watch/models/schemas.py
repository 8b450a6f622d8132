from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Any
from datetime import datetime


class NewsItemResponse(BaseModel):
    source: str = Field(..., description="Configured feed source name")
    title: str = Field(..., description="Item headline ('Untitled' when the feed omits it)")
    link: Optional[str] = Field(None, description="Canonical article URL")
    isoDate: Optional[str] = Field(None, description="Publication time in ISO-8601 UTC, null when unknown")
    topics: List[str] = Field(default_factory=list, description="Matched topic identifiers in ruleset order")


class NewsResponse(BaseModel):
    items: List[NewsItemResponse] = Field(..., description="Classified items, newest first")


class VerseResponse(BaseModel):
    ref: str = Field(..., description="Citation label")
    text: str = Field(..., description="Passage text")


class TopicVersesResponse(BaseModel):
    label: str = Field(..., description="Display label of the topic")
    verses: List[VerseResponse] = Field(..., description="Reference passages associated with the topic")


class PublicKeyResponse(BaseModel):
    publicKey: Optional[str] = Field(None, description="VAPID public key, null when push is disabled")


class PushSubscriptionKeys(BaseModel):
    model_config = ConfigDict(extra="allow")

    p256dh: Optional[str] = Field(None, description="Client public key")
    auth: Optional[str] = Field(None, description="Client auth secret")


class PushSubscription(BaseModel):
    """Browser PushSubscription JSON; unknown fields are kept as sent."""
    model_config = ConfigDict(extra="allow")

    endpoint: str = Field(..., min_length=1, description="Push service endpoint URL")
    expirationTime: Optional[Any] = Field(None, description="Expiry reported by the browser")
    keys: Optional[PushSubscriptionKeys] = Field(None, description="Encryption keys for the payload")


class SubscribeResponse(BaseModel):
    ok: bool = Field(True, description="True once the subscription is registered")


class HealthResponse(BaseModel):
    status: str = Field(..., description="Overall API status ('ok' or 'unhealthy')")
    message: str = Field(..., description="Descriptive health message")
    timestamp: datetime = Field(..., description="Timestamp of health check (UTC)")
    push_enabled: bool = Field(..., description="True if VAPID credentials are configured")
    subscriptions: int = Field(..., description="Number of live push subscriptions")
    last_notified: Optional[str] = Field(None, description="Publication time of the last item a notification was sent for")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error message returned from the server")

