"""
Aggregation Errors

Failure taxonomy for paged metric aggregation.
"""

from datetime import date
from enum import Enum
from typing import Optional


class DataCategory(str, Enum):
    """Remote data categories that may be protected"""
    ORDER = "ORDER"
    CUSTOMER = "CUSTOMER"


class AnalyticsError(Exception):
    """Base class for aggregation failures"""


class ProtectedDataAccessDenied(AnalyticsError):
    """
    The remote source refused access to a protected data category.
    
    Fatal to the whole aggregation call; never retried and never
    accompanied by a partial result.
    """
    
    def __init__(self, category: DataCategory = DataCategory.ORDER, message: Optional[str] = None):
        self.category = category
        self.remote_message = message
        super().__init__(self.code)
    
    @property
    def code(self) -> str:
        return f"PROTECTED_{self.category.value}_DATA_ACCESS_DENIED"


class QueryFailure(AnalyticsError):
    """Any other server-reported GraphQL error"""
    
    def __init__(self, message: Optional[str] = None):
        self.message = message or "Unknown GraphQL error"
        super().__init__(self.message)


class PerPointFetchFailure(AnalyticsError):
    """A failure scoped to one time-series point, recovered as count 0"""
    
    def __init__(self, point_date: date, cause: Exception):
        self.point_date = point_date
        self.cause = cause
        super().__init__(f"Failed to compute point {point_date.isoformat()}: {cause}")
