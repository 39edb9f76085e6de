"""Integration tests for the Celery configuration."""

import pytest

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _celery_eager(settings):
    """Run tasks synchronously in the test process."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


class TestCeleryConfig:
    def test_celery_app_is_importable(self):
        from config.celery import app

        assert app.main == "storefront"

    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "storefront"

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_RESULT_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_celery_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE

    def test_outbox_sweep_is_scheduled(self, settings):
        entry = settings.CELERY_BEAT_SCHEDULE["publish-outbox-events"]
        assert entry["task"] == "core.publish_outbox_events"


class TestDebugTask:
    def test_debug_task_direct_call(self):
        from modules.core.tasks import debug_task

        assert debug_task() == {"status": "ok", "message": "Celery is working"}

    def test_publish_outbox_events_with_nothing_pending(self):
        from modules.core.tasks import publish_outbox_events

        assert publish_outbox_events() == {"published": 0, "failed": 0}
