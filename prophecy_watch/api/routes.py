from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
import json
import logging
from datetime import datetime, timezone
from typing import Dict

from ..core.exceptions import InvalidSubscriptionError
from ..core.topics import TOPICS
from ..models.schemas import (
    NewsItemResponse, NewsResponse,
    TopicVersesResponse, VerseResponse,
    PublicKeyResponse, PushSubscription, SubscribeResponse,
    HealthResponse, ErrorResponse,
)
from ..services.classifier import ordered_topics
from ..services.news_cache import news_cache
from ..services.notifier import news_notifier
from ..services.push_service import push_service
from pydantic import ValidationError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/news", response_model=NewsResponse, responses={500: {"model": ErrorResponse}})
async def get_news():
    """Classified news items from all feeds, newest first"""
    try:
        news = await news_cache.get_news()
    except Exception as e:
        logger.error(f"Error fetching news: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch news"})

    return NewsResponse(items=[
        NewsItemResponse(
            source=item.source,
            title=item.title,
            link=item.link or None,
            isoDate=item.iso_date,
            topics=ordered_topics(item.topics),
        )
        for item in news
    ])


@router.get("/verses", response_model=Dict[str, TopicVersesResponse])
async def get_verses():
    """Topic labels and their reference passages"""
    return {
        topic_id: TopicVersesResponse(
            label=topic.label,
            verses=[VerseResponse(ref=v.ref, text=v.text) for v in topic.verses],
        )
        for topic_id, topic in TOPICS.items()
    }


@router.get("/vapidPublicKey", response_model=PublicKeyResponse)
async def get_vapid_public_key():
    return PublicKeyResponse(publicKey=push_service.public_key)


@router.post("/subscribe", response_model=SubscribeResponse, responses={400: {"model": ErrorResponse}})
async def subscribe(request: Request):
    """Register a browser push subscription"""
    invalid = JSONResponse(status_code=400, content={"error": "Invalid subscription"})
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return invalid
    if not isinstance(body, dict):
        return invalid

    try:
        subscription = PushSubscription.model_validate(body)
        push_service.subscribe(subscription.model_dump(exclude_none=True))
    except (ValidationError, InvalidSubscriptionError) as e:
        logger.info(f"Rejected push subscription: {e}")
        return invalid

    return SubscribeResponse(ok=True)


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Enhanced health check with push and notifier status"""
    try:
        last = news_notifier.last_notified
        return HealthResponse(
            status="ok",
            message="Service is healthy",
            timestamp=datetime.now(timezone.utc),
            push_enabled=push_service.enabled,
            subscriptions=len(push_service),
            last_notified=last.isoformat() if last else None,
        )
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "message": str(e)}
        )
