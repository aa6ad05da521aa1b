from unittest import mock

import pytest
from django.db import DatabaseError

pytestmark = pytest.mark.django_db


def test_health_ok_when_every_component_answers(client):
    with mock.patch("config.health.redis.Redis.ping", return_value=True):
        response = client.get("/health/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert set(body["components"]) == {"db", "redis", "media"}


def test_health_degraded_without_redis(client):
    with mock.patch(
        "config.health.redis.Redis.ping", side_effect=ConnectionError("refused")
    ):
        response = client.get("/health/")
    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "degraded"
    assert body["components"]["redis"] == {"ok": False, "error": "refused"}
    assert body["components"]["db"] == {"ok": True}


def test_health_down_without_database(client):
    with (
        mock.patch("config.health.redis.Redis.ping", return_value=True),
        mock.patch.dict(
            "config.health.CHECKS",
            {"db": mock.Mock(side_effect=DatabaseError("gone"))},
        ),
    ):
        response = client.get("/health/")
    assert response.status_code == 503
    assert response.json()["status"] == "down"
