"""Tests for webhook idempotency utilities."""

import pytest
from django.db import IntegrityError

from apps.core.models import ProcessedWebhook
from apps.core.webhooks import is_webhook_processed, mark_webhook_processed


@pytest.mark.django_db
class TestProcessedWebhookModel:
    """Tests for ProcessedWebhook model."""

    def test_creates_record(self) -> None:
        """Should create a processed webhook record."""
        webhook = ProcessedWebhook.objects.create(source="stripe", event_id="evt_123")

        assert webhook.source == "stripe"
        assert webhook.event_id == "evt_123"
        assert webhook.processed_at is not None

    def test_str_representation(self) -> None:
        """Should return source:event_id format."""
        webhook = ProcessedWebhook.objects.create(source="stripe", event_id="evt_456")

        assert str(webhook) == "stripe:evt_456"

    def test_unique_constraint(self) -> None:
        """Should prevent duplicate source/event_id combinations."""
        ProcessedWebhook.objects.create(source="stripe", event_id="evt_123")

        with pytest.raises(IntegrityError):
            ProcessedWebhook.objects.create(source="stripe", event_id="evt_123")

    def test_allows_same_event_id_different_sources(self) -> None:
        """Should allow same event_id with different sources."""
        ProcessedWebhook.objects.create(source="stripe", event_id="evt_123")
        ProcessedWebhook.objects.create(source="other", event_id="evt_123")

        assert ProcessedWebhook.objects.filter(event_id="evt_123").count() == 2


@pytest.mark.django_db
class TestIsWebhookProcessed:
    """Tests for is_webhook_processed function."""

    def test_returns_false_for_new_event(self) -> None:
        assert is_webhook_processed("stripe", "evt_new") is False

    def test_returns_true_for_processed_event(self) -> None:
        ProcessedWebhook.objects.create(source="stripe", event_id="evt_existing")

        assert is_webhook_processed("stripe", "evt_existing") is True

    def test_checks_source_separately(self) -> None:
        """Should check source when determining if processed."""
        ProcessedWebhook.objects.create(source="stripe", event_id="evt_123")

        assert is_webhook_processed("other", "evt_123") is False


@pytest.mark.django_db
class TestMarkWebhookProcessed:
    """Tests for mark_webhook_processed function."""

    def test_marks_new_event(self) -> None:
        assert mark_webhook_processed("stripe", "evt_new") is True
        assert ProcessedWebhook.objects.filter(source="stripe", event_id="evt_new").exists()

    def test_returns_false_when_already_marked(self) -> None:
        """Concurrent deliveries: the second insert loses and reports False."""
        mark_webhook_processed("stripe", "evt_dup")

        assert mark_webhook_processed("stripe", "evt_dup") is False
        assert ProcessedWebhook.objects.filter(event_id="evt_dup").count() == 1
