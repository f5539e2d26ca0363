"""
Record Classifiers

Predicates deciding whether one order record counts toward a metric.
Records are raw Admin API nodes (plain dicts).
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

Record = Dict[str, Any]

REVIEW_TAG_MARKERS = ("review", "reviewed", "has-review", "review-submitted")

COD_STATUSES = frozenset({"PENDING", "PARTIALLY_PAID", "AUTHORIZED"})
PREPAID_STATUSES = frozenset({"PAID", "PARTIALLY_REFUNDED"})

MORNING_HOURS = range(6, 12)
AFTERNOON_HOURS = range(12, 18)
EVENING_HOURS = range(18, 24)
WEEKEND_DAYS = (5, 6)  # Saturday, Sunday


def actor_id(record: Record) -> Optional[str]:
    """Customer id of an order, or None for guest/anonymous orders."""
    customer = record.get("customer") or {}
    return customer.get("id") or None


def parse_amount(value: Any) -> Decimal:
    """
    Parse a decimal money string.
    
    Malformed or missing values parse as zero.
    """
    if value is None or value == "":
        return Decimal("0")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not amount.is_finite():
        return Decimal("0")
    return amount


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


# =============================================================================
# ENGAGEMENT
# =============================================================================

def has_review_signal(record: Record) -> bool:
    """Review tag, review note, or review custom attribute (case-insensitive)."""
    for tag in record.get("tags") or []:
        lowered = str(tag).lower()
        if any(marker in lowered for marker in REVIEW_TAG_MARKERS):
            return True
    
    note = record.get("note") or ""
    if "review" in note.lower():
        return True
    
    for attribute in record.get("customAttributes") or []:
        key = (attribute.get("key") or "").lower()
        value = (attribute.get("value") or "").lower()
        if "review" in key or "review" in value:
            return True
    
    return False


def discount_amount(record: Record) -> Decimal:
    shop_money = ((record.get("totalDiscountsSet") or {}).get("shopMoney")) or {}
    return parse_amount(shop_money.get("amount"))


def has_discount(record: Record) -> bool:
    return discount_amount(record) > 0


# =============================================================================
# ORDER BEHAVIOR
# =============================================================================

def is_cod(record: Record) -> bool:
    return record.get("displayFinancialStatus") in COD_STATUSES


def is_prepaid(record: Record) -> bool:
    return record.get("displayFinancialStatus") in PREPAID_STATUSES


def is_cancelled(record: Record) -> bool:
    return record.get("cancelledAt") is not None


# =============================================================================
# PURCHASE TIMING (UTC)
# =============================================================================

def _created_utc(record: Record):
    created = parse_timestamp(record.get("createdAt"))
    return created.utctimetuple() if created else None


def _hour_in(record: Record, hours: range) -> bool:
    created = _created_utc(record)
    return created is not None and created.tm_hour in hours


def is_morning(record: Record) -> bool:
    return _hour_in(record, MORNING_HOURS)


def is_afternoon(record: Record) -> bool:
    return _hour_in(record, AFTERNOON_HOURS)


def is_evening(record: Record) -> bool:
    return _hour_in(record, EVENING_HOURS)


def is_weekend(record: Record) -> bool:
    created = _created_utc(record)
    return created is not None and created.tm_wday in WEEKEND_DAYS
