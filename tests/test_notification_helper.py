"""Tests for notification helper functions."""

from unittest.mock import AsyncMock, patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import async_mock_service

from custom_components.muslim_companion.notification_helper import (
    async_send_notification,
    split_notify_service,
)


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ("notify.mobile_app_phone", ("notify", "mobile_app_phone")),
        ("mobile_app_phone", ("notify", "mobile_app_phone")),
        ("script.announce", ("script", "announce")),
    ],
)
def test_split_notify_service(target: str, expected: tuple[str, str]) -> None:
    """Targets without a domain default to notify."""
    assert split_notify_service(target) == expected


async def test_send_notification(hass: HomeAssistant) -> None:
    """The payload carries title, message and extra data."""
    calls = async_mock_service(hass, "notify", "mobile_app_phone")

    sent = await async_send_notification(
        hass,
        "notify.mobile_app_phone",
        "Suhoor Time",
        "45 minutes until Imsak (05:20). Time for Suhoor!",
        extra_data={"tag": "muslim_companion-suhoor-1"},
    )

    assert sent is True
    assert len(calls) == 1
    assert calls[0].data == {
        "title": "Suhoor Time",
        "message": "45 minutes until Imsak (05:20). Time for Suhoor!",
        "data": {"tag": "muslim_companion-suhoor-1"},
    }


async def test_send_without_extra_data(hass: HomeAssistant) -> None:
    """No data key is sent when there is no extra data."""
    calls = async_mock_service(hass, "notify", "mobile_app_phone")

    await async_send_notification(hass, "mobile_app_phone", "Iftar Time!", "Now")

    assert "data" not in calls[0].data


async def test_empty_service_is_skipped(hass: HomeAssistant) -> None:
    """An empty target sends nothing."""
    assert await async_send_notification(hass, "", "Iftar Time!", "Now") is False


async def test_missing_service_logs_warning(
    hass: HomeAssistant, caplog: pytest.LogCaptureFixture
) -> None:
    """A service that does not exist is reported and skipped."""
    sent = await async_send_notification(
        hass, "notify.nobody", "Iftar Time!", "Now"
    )

    assert sent is False
    assert "notify.nobody' not available" in caplog.text


async def test_service_error_is_logged(
    hass: HomeAssistant, caplog: pytest.LogCaptureFixture
) -> None:
    """A failing notify call is logged instead of raised."""
    async_mock_service(hass, "notify", "mobile_app_phone")

    with patch(
        "homeassistant.core.ServiceRegistry.async_call",
        new=AsyncMock(side_effect=RuntimeError("boom")),
    ):
        sent = await async_send_notification(
            hass, "notify.mobile_app_phone", "Iftar Time!", "Now"
        )

    assert sent is False
    assert "Unexpected error sending notification" in caplog.text
