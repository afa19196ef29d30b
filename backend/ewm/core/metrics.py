"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Event lifecycle metrics
event_state_transitions = Counter(
    'ewm_event_state_transitions_total',
    'Event state transitions applied',
    ['action']  # PUBLISH_EVENT, REJECT_EVENT, SEND_TO_REVIEW, CANCEL_REVIEW
)

# Participation request metrics
participation_requests = Counter(
    'ewm_participation_requests_total',
    'Participation requests created',
    ['status']  # PENDING, CONFIRMED
)

moderation_outcomes = Counter(
    'ewm_moderation_outcomes_total',
    'Participation requests decided by moderation',
    ['outcome']  # confirmed, rejected
)

# Stats client metrics
stats_calls = Counter(
    'ewm_stats_calls_total',
    'Calls made to the stats service',
    ['operation', 'result']  # hit/stats, success/error
)

stats_latency = Histogram(
    'ewm_stats_call_latency_seconds',
    'Stats service call latency',
    ['operation'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

views_refreshed = Counter(
    'ewm_views_refreshed_total',
    'Events whose cached view count was refreshed from the stats service'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_state_transition(action: str):
    event_state_transitions.labels(action=action).inc()


def record_participation_request(status: str):
    participation_requests.labels(status=status).inc()


def record_moderation(confirmed: int, rejected: int):
    """Record how many requests a moderation batch confirmed and rejected."""
    if confirmed:
        moderation_outcomes.labels(outcome="confirmed").inc(confirmed)
    if rejected:
        moderation_outcomes.labels(outcome="rejected").inc(rejected)


def record_stats_call(operation: str, success: bool, duration: float):
    result = "success" if success else "error"
    stats_calls.labels(operation=operation, result=result).inc()
    stats_latency.labels(operation=operation).observe(duration)


def record_views_refreshed(count: int):
    views_refreshed.inc(count)
