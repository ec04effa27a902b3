"""Per-request usage records and their aggregation.

``summarize_analytics`` is a pure function over already-loaded records so it
can serve both the admin dashboard and per-user usage views.
"""
from __future__ import annotations

import math
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from loguru import logger
from sqlmodel import Session, select

from chthon.models.analytics_record import AnalyticsRecord
from chthon.models.enums import RequestType
from chthon.schemas.analytics import (
    AnalyticsRecordOut,
    AnalyticsSummary,
    ProviderBucket,
    UsageBucket,
)

ANONYMOUS_TIER = 'anonymous'


def record_analytics(
    session: Session,
    *,
    user_id: Optional[str],
    provider: str,
    model: str,
    request_type: RequestType,
    success: bool,
    processing_time: float,
    user_tier: Optional[str],
    cost: float = 0.0,
    tokens: int = 0,
    prompt_tokens: int = 0,
    completion_tokens: int = 0,
    error: Optional[str] = None,
    provider_details: Optional[dict[str, Any]] = None,
    request_size: Optional[int] = None,
    response_size: Optional[int] = None,
) -> Optional[AnalyticsRecord]:
    """Persist one analytics entry; storage failures are logged, not raised."""
    record = AnalyticsRecord(
        user_id=user_id,
        provider=provider,
        model=model,
        type=request_type,
        cost=cost,
        tokens=tokens,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        processing_time=processing_time,
        success=success,
        error=error,
        user_tier=user_tier,
        provider_details=provider_details,
        request_size=request_size,
        response_size=response_size,
    )
    try:
        session.add(record)
        session.commit()
        session.refresh(record)
    except Exception:  # noqa: BLE001
        session.rollback()
        logger.exception('analytics.save_failed', provider=provider, user_id=user_id)
        return None
    logger.info(
        'analytics.saved',
        provider=provider,
        model=model,
        type=request_type.value,
        cost=cost,
        tokens=tokens,
        success=success,
        user_tier=user_tier,
    )
    return record


def list_analytics(
    session: Session,
    *,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    provider: Optional[str] = None,
    user_id: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[AnalyticsRecord]:
    statement = select(AnalyticsRecord)
    if since is not None:
        statement = statement.where(AnalyticsRecord.created_at >= since)
    if until is not None:
        statement = statement.where(AnalyticsRecord.created_at < until)
    if provider:
        statement = statement.where(AnalyticsRecord.provider == provider)
    if user_id:
        statement = statement.where(AnalyticsRecord.user_id == user_id)
    statement = statement.order_by(AnalyticsRecord.created_at.desc())
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def since_days(days: Optional[int]) -> Optional[datetime]:
    if not days:
        return None
    return datetime.now(timezone.utc) - timedelta(days=days)


def to_record_out(record: AnalyticsRecord) -> AnalyticsRecordOut:
    return AnalyticsRecordOut.model_validate(record, from_attributes=True)


class _Accumulator:
    __slots__ = ('requests', 'successes', 'costs', 'tokens')

    def __init__(self) -> None:
        self.requests = 0
        self.successes = 0
        self.costs: list[float] = []
        self.tokens = 0

    def add(self, cost: float, tokens: int, success: bool = True) -> None:
        self.requests += 1
        self.successes += int(success)
        self.costs.append(cost)
        self.tokens += tokens

    def bucket(self) -> UsageBucket:
        return UsageBucket(requests=self.requests, cost=math.fsum(self.costs), tokens=self.tokens)

    def provider_bucket(self) -> ProviderBucket:
        return ProviderBucket(
            requests=self.requests,
            cost=math.fsum(self.costs),
            tokens=self.tokens,
            success_rate=_rate(self.successes, self.requests),
        )


def _rate(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole else 0.0


def _value(record: Any, key: str) -> Any:
    if isinstance(record, dict):
        return record.get(key)
    return getattr(record, key)


def _day(created_at: Any) -> str:
    if isinstance(created_at, datetime):
        return created_at.date().isoformat()
    return str(created_at).split('T')[0]


def _detail_tokens(details: dict[str, Any]) -> int:
    return int(
        details.get('total_tokens')
        or (details.get('prompt_tokens') or 0) + (details.get('completion_tokens') or 0)
        or details.get('tokens')
        or 0
    )


def summarize_analytics(records: Iterable[Any]) -> AnalyticsSummary:
    """Aggregate records (ORM objects or plain dicts) in a single pass.

    Float sums go through ``math.fsum`` so the result does not depend on the
    order of ``records``.
    """
    totals = _Accumulator()
    providers: dict[str, _Accumulator] = defaultdict(_Accumulator)
    models: dict[str, _Accumulator] = defaultdict(_Accumulator)
    types: dict[str, _Accumulator] = {kind.value: _Accumulator() for kind in RequestType}
    tiers: dict[str, _Accumulator] = defaultdict(_Accumulator)
    days: dict[str, _Accumulator] = defaultdict(_Accumulator)
    details_summary: dict[str, _Accumulator] = defaultdict(_Accumulator)

    for record in records:
        cost = float(_value(record, 'cost') or 0.0)
        tokens = int(_value(record, 'tokens') or 0)
        success = bool(_value(record, 'success'))
        request_type = _value(record, 'type')
        request_type = request_type.value if isinstance(request_type, RequestType) else str(request_type)

        totals.add(cost, tokens, success)
        providers[_value(record, 'provider')].add(cost, tokens, success)
        models[_value(record, 'model')].add(cost, tokens, success)
        types.setdefault(request_type, _Accumulator()).add(cost, tokens, success)
        tiers[_value(record, 'user_tier') or ANONYMOUS_TIER].add(cost, tokens, success)
        days[_day(_value(record, 'created_at'))].add(cost, tokens, success)

        for name, details in (_value(record, 'provider_details') or {}).items():
            if isinstance(details, dict):
                details_summary[name].add(float(details.get('cost') or 0.0), _detail_tokens(details))
            else:
                details_summary[name].add(0.0, 0)

    return AnalyticsSummary(
        total_cost=math.fsum(totals.costs),
        total_tokens=totals.tokens,
        total_requests=totals.requests,
        successful_requests=totals.successes,
        failed_requests=totals.requests - totals.successes,
        success_rate=_rate(totals.successes, totals.requests),
        provider_stats={name: acc.provider_bucket() for name, acc in sorted(providers.items())},
        model_stats={name: acc.bucket() for name, acc in sorted(models.items())},
        type_stats={name: acc.bucket() for name, acc in types.items()},
        tier_stats={name: acc.bucket() for name, acc in sorted(tiers.items())},
        daily_usage={name: acc.bucket() for name, acc in sorted(days.items())},
        provider_details_summary={name: acc.bucket() for name, acc in sorted(details_summary.items())},
    )
