# File: sensor.py
"""Sensors for the Muslim Companion integration.

Every sensor is a read-only view over a coordinator query; none of them
stores state of its own.

Sensors Defined in This File (8):

# Prayer Time Sensors (3)
01. CurrentPrayerSensor
02. NextPrayerSensor
03. CountdownSensor

# Ramadan Window Sensors (2)
04. RamadanStatusSensor
05. RamadanDaySensor

# Tracker Statistics Sensors (3)
06. FastingStreakSensor
07. OverallScoreSensor
08. QuranProgressSensor
"""

from datetime import datetime, timedelta
from typing import Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import PERCENTAGE, UnitOfTime
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.event import async_track_time_interval

from . import const
from .coordinator import MuslimCompanionCoordinator
from .entity import MuslimCompanionCoordinatorEntity
from .type_defs import CountdownTarget

# Clock-driven sensors re-evaluate on their own cadence between coordinator refreshes
PRAYER_REFRESH_INTERVAL = timedelta(minutes=1)
COUNTDOWN_REFRESH_INTERVAL = timedelta(seconds=const.COUNTDOWN_REFRESH_SECONDS)


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities
):
    """Set up sensors for Muslim Companion integration."""
    data = hass.data[const.DOMAIN][entry.entry_id]
    coordinator: MuslimCompanionCoordinator = data[const.COORDINATOR]

    async_add_entities(
        [
            CurrentPrayerSensor(coordinator, entry),
            NextPrayerSensor(coordinator, entry),
            CountdownSensor(coordinator, entry),
            RamadanStatusSensor(coordinator, entry),
            RamadanDaySensor(coordinator, entry),
            FastingStreakSensor(coordinator, entry),
            OverallScoreSensor(coordinator, entry),
            QuranProgressSensor(coordinator, entry),
        ]
    )


# ------------------------------------------------------------------------------------------
class ClockDrivenSensor(MuslimCompanionCoordinatorEntity, SensorEntity):
    """Base for sensors whose value moves with the wall clock.

    Writes state on a fixed interval in addition to coordinator updates.
    """

    _refresh_interval = PRAYER_REFRESH_INTERVAL

    async def async_added_to_hass(self) -> None:
        """Start the refresh timer when the entity is added."""
        await super().async_added_to_hass()
        self.async_on_remove(
            async_track_time_interval(
                self.hass, self._async_handle_tick, self._refresh_interval
            )
        )

    @callback
    def _async_handle_tick(self, now: datetime) -> None:
        self.async_write_ha_state()


# ------------------------------------------------------------------------------------------
class CurrentPrayerSensor(ClockDrivenSensor):
    """Sensor for the prayer period the current moment falls into."""

    _attr_icon = "mdi:mosque"

    def __init__(self, coordinator: MuslimCompanionCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_CURRENT_PRAYER)

    @property
    def native_value(self) -> str:
        """Return the display name of the current period."""
        return self.coordinator.get_current_period().display_name

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose today's boundary set and where it came from."""
        result = self.coordinator.get_current_period()
        data = self.coordinator.data or {}
        attributes: dict[str, Any] = {
            const.ATTR_PERIOD: result.period.value,
            "is_previous_cycle": result.is_previous_cycle,
            const.ATTR_LOW_CONFIDENCE: data.get("low_confidence", True),
            const.ATTR_SOURCE: data.get("sources", {}),
        }
        attributes.update(data.get("times") or {})
        return attributes


# ------------------------------------------------------------------------------------------
class NextPrayerSensor(ClockDrivenSensor):
    """Sensor for the next prayer boundary, including sunrise."""

    _attr_icon = "mdi:clock-outline"

    def __init__(self, coordinator: MuslimCompanionCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_NEXT_PRAYER)

    @property
    def native_value(self) -> str:
        """Return the display name of the next boundary."""
        upcoming = self.coordinator.get_next_prayer()
        return const.PRAYER_DISPLAY_NAMES.get(upcoming.name, upcoming.name)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the boundary time and the minutes remaining."""
        upcoming = self.coordinator.get_next_prayer()
        return {
            const.ATTR_PERIOD: upcoming.name,
            const.ATTR_TIME: upcoming.time,
            const.ATTR_MINUTES_UNTIL: upcoming.minutes_until,
            const.ATTR_IS_TOMORROW: upcoming.is_tomorrow,
        }


# ------------------------------------------------------------------------------------------
class CountdownSensor(ClockDrivenSensor):
    """Live countdown to Imsak or Maghrib, whichever comes next.

    Refreshes every second. The state is the compact display ("5h12m");
    remaining seconds are exposed as an attribute for templates.
    """

    _attr_icon = "mdi:timer-sand"
    _refresh_interval = COUNTDOWN_REFRESH_INTERVAL

    def __init__(self, coordinator: MuslimCompanionCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_COUNTDOWN)

    @property
    def native_value(self) -> str:
        """Return the remaining time display."""
        return self.coordinator.get_countdown().remaining_display

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the target boundary and raw remaining seconds."""
        result = self.coordinator.get_countdown()
        target = (
            const.PRAYER_IMSAK
            if result.next_target == CountdownTarget.FIRST
            else const.PRAYER_MAGHRIB
        )
        return {
            const.ATTR_NEXT_TARGET: target,
            const.ATTR_REMAINING_SECONDS: result.remaining_seconds,
            const.ATTR_FIRST_BOUNDARY: result.first_boundary_time,
            const.ATTR_SECOND_BOUNDARY: result.second_boundary_time,
            const.ATTR_IS_TOMORROW: result.is_tomorrow,
        }


# ------------------------------------------------------------------------------------------
class RamadanStatusSensor(MuslimCompanionCoordinatorEntity, SensorEntity):
    """Sensor for the Ramadan window state: active, approaching or inactive."""

    _attr_icon = "mdi:moon-waning-crescent"

    def __init__(self, coordinator: MuslimCompanionCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_RAMADAN_STATUS)

    @property
    def native_value(self) -> str:
        """Return the window state."""
        return self.coordinator.get_detection().state

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the full detection result."""
        return self.coordinator.get_detection().as_dict()


# ------------------------------------------------------------------------------------------
class RamadanDaySensor(MuslimCompanionCoordinatorEntity, SensorEntity):
    """Sensor for today's ordinal day inside the Ramadan window."""

    _attr_icon = "mdi:calendar-today"

    def __init__(self, coordinator: MuslimCompanionCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_RAMADAN_DAY)

    @property
    def native_value(self) -> int | None:
        """Return the ordinal day, or None outside the window."""
        detection = self.coordinator.get_detection()
        if not detection.is_in_window:
            return None
        return detection.current_day

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose window length and the special-night flags for today."""
        detection = self.coordinator.get_detection()
        day = detection.current_day if detection.is_in_window else 0
        engine = self.coordinator.schedule_engine
        return {
            "total_days": detection.total_days,
            "days_remaining": max(0, detection.total_days - day),
            "days_until_start": detection.days_until_start,
            "is_last_ten_nights": engine.is_last_ten_nights(day),
            "is_special_night": engine.is_special_night(day),
        }


# ------------------------------------------------------------------------------------------
class FastingStreakSensor(MuslimCompanionCoordinatorEntity, SensorEntity):
    """Sensor for the current run of consecutive fasted days."""

    _attr_icon = "mdi:fire"
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = UnitOfTime.DAYS

    def __init__(self, coordinator: MuslimCompanionCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_FASTING_STREAK)

    @property
    def native_value(self) -> int:
        """Return the current fasting streak (0 without a tracker)."""
        stats = self.coordinator.get_stats()
        return stats.fasting_streak if stats else const.DEFAULT_ZERO

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose fasting counts."""
        stats = self.coordinator.get_stats()
        if stats is None:
            return {}
        return {
            "longest_fasting_streak": stats.longest_fasting_streak,
            "days_fasted": stats.days_fasted,
            "days_missed": stats.days_missed,
            "days_excused": stats.days_excused,
            "days_not_logged": stats.days_not_logged,
            "qada_days_needed": stats.qada_days_needed,
        }


# ------------------------------------------------------------------------------------------
class OverallScoreSensor(MuslimCompanionCoordinatorEntity, SensorEntity):
    """Sensor for the weighted Ramadan score.

    Weights fasting, Tarawih and Quran progress; the attributes carry every
    aggregate plus a plain-text share summary.
    """

    _attr_icon = "mdi:star-crescent"
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = PERCENTAGE

    def __init__(self, coordinator: MuslimCompanionCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_OVERALL_SCORE)

    @property
    def native_value(self) -> int:
        """Return the overall score (0 without a tracker)."""
        stats = self.coordinator.get_stats()
        return stats.overall_score if stats else const.DEFAULT_ZERO

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose all aggregates and the share summary."""
        stats = self.coordinator.get_stats()
        if stats is None:
            return {}
        attributes = stats.as_dict()
        attributes[const.ATTR_SHARE_SUMMARY] = self.coordinator.get_share_summary()
        return dict(sorted(attributes.items()))


# ------------------------------------------------------------------------------------------
class QuranProgressSensor(MuslimCompanionCoordinatorEntity, SensorEntity):
    """Sensor for the share of the 30 juz completed."""

    _attr_icon = "mdi:book-open-variant"
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = PERCENTAGE

    def __init__(self, coordinator: MuslimCompanionCoordinator, entry: ConfigEntry):
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_QURAN_PROGRESS)

    @property
    def native_value(self) -> int:
        """Return the Quran progress percentage."""
        stats = self.coordinator.get_stats()
        return stats.quran_progress if stats else const.DEFAULT_ZERO

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose completed juz and pages read."""
        stats = self.coordinator.get_stats()
        if stats is None:
            return {}
        return {
            "juz_completed": stats.juz_completed,
            "total_juz": const.TOTAL_JUZ,
            "total_pages_read": stats.total_pages_read,
        }
