"""
Unit Tests - Dashboard API
"""
from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from analytics_buddy.config import get_settings
from analytics_buddy.main import app
from analytics_buddy.metrics.date_range import resolve_range
from analytics_buddy.serving.api.dependencies import get_admin_client, get_date_range

BASE = "/api/v1/dashboard"


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def shop_client(fake_client, make_order):
    fake_client.orders = [
        make_order(_utc(2026, 2, 13, 10), customer="1", tags=["reviewed"], financial_status="PENDING"),
        make_order(_utc(2026, 3, 10, 9), customer="2", note="Great review", discount="5.00"),
        make_order(_utc(2026, 3, 11, 16), customer="3", cancelled_at=_utc(2026, 3, 12)),
    ]
    return fake_client


@pytest.fixture
def client(shop_client, now):
    def fixed_range(dateRange: str = "30days"):
        return resolve_range(dateRange, now)
    
    app.dependency_overrides[get_admin_client] = lambda: shop_client
    app.dependency_overrides[get_date_range] = fixed_range
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestMetricEndpoints:
    """Tests for metric card endpoints"""
    
    def test_metric_series(self, client):
        response = client.get(f"{BASE}/metrics/reviewers", params={"dateRange": "30days"})
        
        assert response.status_code == 200
        assert response.json() == {
            "count": 2,
            "dataPoints": [
                {"date": "2026-02-13", "count": 1},
                {"date": "2026-03-15", "count": 2},
            ],
        }
    
    def test_customer_metric(self, client, shop_client):
        response = client.get(f"{BASE}/metrics/new-customers")
        
        assert response.status_code == 200
        assert response.json()["count"] == 0
    
    def test_unknown_metric(self, client):
        response = client.get(f"{BASE}/metrics/wishlist-users")
        assert response.status_code == 404
    
    def test_metric_catalog(self, client):
        response = client.get(f"{BASE}/metrics")
        
        names = {info["name"]: info for info in response.json()}
        assert response.status_code == 200
        assert names["reviewers"]["listable"] is True
        assert names["weekend-purchases"]["listable"] is False
        assert names["returning-customers"]["listable"] is True
    
    def test_protected_data_is_403(self, client, shop_client):
        shop_client.always_errors = [{"message": "This app is not approved to access the Order object"}]
        
        response = client.get(f"{BASE}/metrics/reviewers")
        
        assert response.status_code == 403
        assert response.json() == {"error": "PROTECTED_ORDER_DATA_ACCESS_DENIED"}
    
    def test_total_failure_is_500(self, client, shop_client):
        shop_client.errors_on_call[3] = [{"message": "Internal error"}]
        
        response = client.get(f"{BASE}/metrics/reviewers")
        
        assert response.status_code == 500
        assert response.json() == {"error": "Internal error"}
    
    def test_network_failure_is_500(self, client, shop_client):
        shop_client.raise_on_call[1] = httpx.ConnectError("connection refused")
        
        response = client.get(f"{BASE}/order-behavior")
        
        assert response.status_code == 500
        assert response.json() == {"error": "connection refused"}


class TestSummaryEndpoints:
    """Tests for section summaries and lists"""
    
    def test_order_behavior(self, client):
        response = client.get(f"{BASE}/order-behavior")
        
        assert response.status_code == 200
        assert response.json() == {
            "codOrders": {"count": 1},
            "prepaidOrders": {"count": 2},
            "cancelledOrders": {"count": 1},
            "abandonedOrders": {"count": 0},
        }
    
    def test_engagement_patterns(self, client):
        body = client.get(f"{BASE}/engagement-patterns").json()
        
        assert body["reviewers"] == {"count": 2}
        assert body["discountUsers"] == {"count": 1}
    
    def test_purchase_timing(self, client):
        body = client.get(f"{BASE}/purchase-timing").json()
        
        assert body == {
            "morningPurchases": {"count": 2},
            "afternoonPurchases": {"count": 1},
            "eveningPurchases": {"count": 0},
            "weekendPurchases": {"count": 0},
        }
    
    def test_cancelled_list(self, client):
        body = client.get(f"{BASE}/metrics/cancelled-orders/list").json()
        
        assert body["total"] == 1
        assert body["orders"][0]["cancelledAt"] == "2026-03-12"
    
    def test_cod_list(self, client):
        body = client.get(f"{BASE}/metrics/cod-orders/list").json()
        
        assert body["total"] == 1
        assert body["orders"][0]["status"] == "PENDING"
        assert body["orders"][0]["createdAt"] == "2026-02-13"
    
    def test_customer_overview_list(self, client):
        response = client.get(f"{BASE}/metrics/new-customers/list")
        
        assert response.status_code == 200
        assert response.json() == {"customers": [], "total": 0}
    
    def test_unlisted_metric(self, client):
        response = client.get(f"{BASE}/metrics/morning-purchases/list")
        assert response.status_code == 404

    def test_customer_segmentation_chart(self, client):
        response = client.get(f"{BASE}/visual-analytics/customer-segmentation")
        
        assert response.status_code == 200
        chart = response.json()["chartData"]
        assert chart["labels"][0] == "COD Orders"
        assert chart["datasets"][0]["data"] == [1, 2, 1, 0]
    
    def test_behavioral_breakdown_chart(self, client):
        chart = client.get(f"{BASE}/visual-analytics/behavioral-breakdown").json()["chartData"]
        
        assert chart["labels"][2] == "Reviewers"
        assert chart["datasets"][0]["data"] == [1, 0, 2, 0]
    
    def test_visual_analytics(self, client):
        body = client.get(f"{BASE}/visual-analytics").json()
        
        assert set(body) == {"orderTypeData", "engagementData"}
        assert body["engagementData"]["datasets"][0]["label"] == "Number of Users"


class TestSession:
    """Tests for session resolution"""
    
    def test_missing_session_is_401(self, monkeypatch):
        monkeypatch.delenv("SHOPIFY_SHOP_DOMAIN", raising=False)
        monkeypatch.delenv("SHOPIFY_ACCESS_TOKEN", raising=False)
        get_settings.cache_clear()
        try:
            with TestClient(app) as test_client:
                response = test_client.get(f"{BASE}/metrics/reviewers")
        finally:
            get_settings.cache_clear()
        
        assert response.status_code == 401


class TestHealth:
    """Tests for health endpoints"""
    
    def test_health(self, client):
        response = client.get("/api/v1/health")
        
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers
    
    def test_request_id_is_echoed(self, client):
        response = client.get("/api/v1/health/live", headers={"X-Request-ID": "abc123"})
        
        assert response.json() == {"status": "alive"}
        assert response.headers["X-Request-ID"] == "abc123"
