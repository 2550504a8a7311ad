"""Tests for Muslim Companion config flow."""

from typing import Any
from unittest.mock import patch

from homeassistant import config_entries
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.muslim_companion import const


def user_input(**overrides: Any) -> dict[str, Any]:
    """Return valid user step input with optional overrides."""
    data = {
        const.CONF_LATITUDE: 1.3521,
        const.CONF_LONGITUDE: 103.8198,
        const.CONF_CALCULATION_METHOD: str(const.DEFAULT_CALCULATION_METHOD),
        const.CONF_SCHOOL: str(const.DEFAULT_SCHOOL),
        const.CONF_AUTHORITY_URL: "https://timetable.example/{year}/{month}",
    }
    data.update(overrides)
    return data


async def test_form_shown(hass: HomeAssistant) -> None:
    """Test the user step shows the location form."""
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == const.CONFIG_FLOW_STEP_USER
    assert result.get("errors") == {}


async def test_form_creates_entry(hass: HomeAssistant) -> None:
    """Test a valid form creates the entry with default options."""
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    with patch(
        "custom_components.muslim_companion.async_setup_entry",
        return_value=True,
    ) as mock_setup_entry:
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"), user_input=user_input()
        )
        await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert result.get("title") == const.MUSLIM_COMPANION_TITLE
    assert result.get("data") == {
        const.CONF_LATITUDE: 1.3521,
        const.CONF_LONGITUDE: 103.8198,
        const.CONF_CALCULATION_METHOD: const.DEFAULT_CALCULATION_METHOD,
        const.CONF_SCHOOL: const.DEFAULT_SCHOOL,
        const.CONF_AUTHORITY_URL: "https://timetable.example/{year}/{month}",
    }
    assert result.get("options") == {
        const.CONF_UPDATE_INTERVAL: const.DEFAULT_UPDATE_INTERVAL,
        const.CONF_NOTIFY_SERVICE: const.DEFAULT_NOTIFY_SERVICE,
        const.CONF_SUHOOR_REMINDER_MINUTES: const.DEFAULT_SUHOOR_REMINDER_MINUTES,
    }
    assert len(mock_setup_entry.mock_calls) == 1


async def test_authority_url_optional(hass: HomeAssistant) -> None:
    """Test an empty timetable URL is accepted."""
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    with patch(
        "custom_components.muslim_companion.async_setup_entry",
        return_value=True,
    ):
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"),
            user_input=user_input(**{const.CONF_AUTHORITY_URL: ""}),
        )
        await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert result["data"][const.CONF_AUTHORITY_URL] == ""


async def test_invalid_coordinates(hass: HomeAssistant) -> None:
    """Test out-of-range coordinates re-show the form with errors."""
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    result = await hass.config_entries.flow.async_configure(
        result.get("flow_id"),
        user_input=user_input(
            **{const.CONF_LATITUDE: 95.0, const.CONF_LONGITUDE: -200.0}
        ),
    )

    assert result.get("type") == FlowResultType.FORM
    assert result.get("errors") == {
        const.CONF_LATITUDE: const.ERROR_INVALID_COORDINATES,
        const.CONF_LONGITUDE: const.ERROR_INVALID_COORDINATES,
    }


async def test_invalid_authority_url(hass: HomeAssistant) -> None:
    """Test a non-http timetable URL is rejected."""
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    result = await hass.config_entries.flow.async_configure(
        result.get("flow_id"),
        user_input=user_input(**{const.CONF_AUTHORITY_URL: "ftp://timetable"}),
    )

    assert result.get("type") == FlowResultType.FORM
    assert result.get("errors") == {
        const.CONF_AUTHORITY_URL: const.ERROR_INVALID_AUTHORITY_URL
    }


async def test_single_instance(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """Test a second entry is refused."""
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result.get("type") == FlowResultType.ABORT
    assert result.get("reason") == const.ERROR_SINGLE_INSTANCE
