# File: const.py
"""Constants for the Muslim Companion integration.

This file centralizes configuration keys, defaults, storage keys, upstream
endpoints, prayer names, tracker vocabularies and notification texts for
consistency across the integration.
"""

import logging

import homeassistant.util.dt as dt_util
from homeassistant.const import Platform

from .utils import dt_utils


def set_default_timezone(hass):
    """Set the default timezone based on the Home Assistant configuration."""
    global DEFAULT_TIME_ZONE
    DEFAULT_TIME_ZONE = dt_util.get_time_zone(hass.config.time_zone)
    if DEFAULT_TIME_ZONE is not None:
        dt_utils.set_default_timezone(DEFAULT_TIME_ZONE)


# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
MUSLIM_COMPANION_TITLE = "Muslim Companion"

# Integration Domain
DOMAIN = "muslim_companion"

# Logger
LOGGER = logging.getLogger(__package__)

# Device
DEVICE_MANUFACTURER = "Muslim Companion"
DEVICE_MODEL = "Ramadan Tracker"

# Supported Platforms
PLATFORMS = [
    Platform.SENSOR,
]

# Default timezone (replaced at setup by set_default_timezone)
DEFAULT_TIME_ZONE = None

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage Manager
STORAGE_MANAGER = "storage_manager"

# Managers stored next to the coordinator in hass.data
TRACKER_MANAGER = "tracker_manager"
NOTIFICATION_MANAGER = "notification_manager"

# Storage Key
STORAGE_KEY = "muslim_companion_data"

# Storage Version
STORAGE_VERSION = 1
SCHEMA_VERSION = 1

# Update Interval (minutes)
DEFAULT_UPDATE_INTERVAL = 30

# Misc
DEFAULT_ZERO = 0


# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_LATITUDE = "latitude"
CONF_LONGITUDE = "longitude"
CONF_CALCULATION_METHOD = "calculation_method"
CONF_SCHOOL = "school"
CONF_AUTHORITY_URL = "authority_url"
CONF_UPDATE_INTERVAL = "update_interval"
CONF_NOTIFY_SERVICE = "notify_service"
CONF_SUHOOR_REMINDER_MINUTES = "suhoor_reminder_minutes"

# Defaults (Singapore)
DEFAULT_LATITUDE = 1.3521
DEFAULT_LONGITUDE = 103.8198
DEFAULT_CALCULATION_METHOD = 11  # Majlis Ugama Islam Singapura
DEFAULT_SCHOOL = 0  # Shafi
DEFAULT_AUTHORITY_URL = ""
DEFAULT_NOTIFY_SERVICE = ""

CALCULATION_METHODS = {
    1: "University of Islamic Sciences, Karachi",
    2: "Islamic Society of North America",
    3: "Muslim World League",
    4: "Umm Al-Qura University, Makkah",
    5: "Egyptian General Authority of Survey",
    11: "Majlis Ugama Islam Singapura",
    15: "Moonsighting Committee Worldwide",
    17: "JAKIM, Malaysia",
    20: "KEMENAG, Indonesia",
}
SCHOOLS = {0: "Shafi", 1: "Hanafi"}

# Config Flow
CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"
ERROR_SINGLE_INSTANCE = "single_instance_allowed"
ERROR_INVALID_AUTHORITY_URL = "invalid_authority_url"
ERROR_INVALID_NOTIFY_SERVICE = "invalid_notify_service"
ERROR_INVALID_COORDINATES = "invalid_coordinates"


# ------------------------------------------------------------------------------------------------
# Upstream Providers
# ------------------------------------------------------------------------------------------------
API_TIMEOUT = 10  # seconds

# Provider A: astronomical calculation (Aladhan)
ALADHAN_BASE_URL = "https://api.aladhan.com/v1"
ALADHAN_TIMINGS_URL = ALADHAN_BASE_URL + "/timings/{date}"
ALADHAN_CALENDAR_URL = ALADHAN_BASE_URL + "/calendar/{year}/{month}"
ALADHAN_HIJRI_URL = ALADHAN_BASE_URL + "/gToH/{date}"
ALADHAN_DATE_FORMAT = "%d-%m-%Y"

# Aladhan timing name -> boundary key
ALADHAN_TIMING_KEYS = {
    "Imsak": "imsak",
    "Fajr": "subuh",
    "Sunrise": "syuruk",
    "Dhuhr": "zohor",
    "Asr": "asar",
    "Maghrib": "maghrib",
    "Isha": "isyak",
}

# Provider B: local authority timetable. The URL may contain {year} and
# {month} placeholders and returns a list of records dated "D/M/YYYY".
AUTHORITY_DATE_FIELD = "date"
AUTHORITY_RECORDS_FIELD = "data"

# Fetch error kinds
FETCH_ERROR_NETWORK = "network"
FETCH_ERROR_TIMEOUT = "timeout"
FETCH_ERROR_BAD_RESPONSE = "bad_response"
FETCH_ERROR_NOT_AVAILABLE = "not_available"
FETCH_ERROR_NOT_CONFIGURED = "not_configured"


# ------------------------------------------------------------------------------------------------
# Prayer Boundaries
# ------------------------------------------------------------------------------------------------
PRAYER_IMSAK = "imsak"
PRAYER_SUBUH = "subuh"
PRAYER_SYURUK = "syuruk"
PRAYER_ZOHOR = "zohor"
PRAYER_ASAR = "asar"
PRAYER_MAGHRIB = "maghrib"
PRAYER_ISYAK = "isyak"
PRAYER_NONE = "none"

# Strictly increasing order within one day (Dawn .. Night)
BOUNDARY_KEYS = (
    PRAYER_SUBUH,
    PRAYER_SYURUK,
    PRAYER_ZOHOR,
    PRAYER_ASAR,
    PRAYER_MAGHRIB,
    PRAYER_ISYAK,
)

PRAYER_DISPLAY_NAMES = {
    PRAYER_IMSAK: "Imsak",
    PRAYER_SUBUH: "Subuh",
    PRAYER_SYURUK: "Syuruk",
    PRAYER_ZOHOR: "Zohor",
    PRAYER_ASAR: "Asar",
    PRAYER_MAGHRIB: "Maghrib",
    PRAYER_ISYAK: "Isyak",
    PRAYER_NONE: "None",
}

# Regional fallback boundary set (Singapore)
FALLBACK_TIMES = {
    PRAYER_IMSAK: "05:20",
    PRAYER_SUBUH: "05:30",
    PRAYER_SYURUK: "07:00",
    PRAYER_ZOHOR: "13:00",
    PRAYER_ASAR: "16:30",
    PRAYER_MAGHRIB: "19:10",
    PRAYER_ISYAK: "20:20",
}

# Reconciliation
IMSAK_OFFSET_MINUTES = 10
IMSAK_VALIDATION_THRESHOLD_MINUTES = 2

# Reconciliation sources
SOURCE_CALCULATED = "calculated"
SOURCE_AUTHORITY = "authority"
SOURCE_AUTHORITY_DERIVED = "authority_derived"
SOURCE_LAST_KNOWN = "last_known"
SOURCE_FALLBACK = "fallback"

# "Near a prayer time" window
PRAYER_TIME_WINDOW_MINUTES = 15


# ------------------------------------------------------------------------------------------------
# Lunar Calendar Window
# ------------------------------------------------------------------------------------------------
RAMADAN_HIJRI_MONTH = 9
SHABAN_HIJRI_MONTH = 8
SHAWWAL_HIJRI_MONTH = 10
HIJRI_MONTH_UNKNOWN = 0
HIJRI_MONTH_DAYS = 30
RAMADAN_DEFAULT_TOTAL_DAYS = 30
APPROACHING_THRESHOLD_DAYS = 3
DAYS_UNTIL_UNKNOWN = -1

# Official start/end dates keyed by Hijri year. Update yearly when the
# authority announces the dates.
OFFICIAL_RAMADAN_DATES = {
    1447: {"start": "2026-02-19", "end": "2026-03-20"},
}

# Transliterations returned by the lunar-calendar oracle
HIJRI_MONTH_NAMES = {
    "Muḥarram": 1,
    "Muharram": 1,
    "Ṣafar": 2,
    "Safar": 2,
    "Rabīʿ al-awwal": 3,
    "Rabi al-Awwal": 3,
    "Rabi' al-Awwal": 3,
    "Rabīʿ al-thānī": 4,
    "Rabi al-Thani": 4,
    "Rabi' al-Thani": 4,
    "Jumādá al-ūlá": 5,
    "Jumada al-Ula": 5,
    "Jumada al-Awwal": 5,
    "Jumādá al-ākhirah": 6,
    "Jumada al-Akhirah": 6,
    "Jumada al-Thani": 6,
    "Rajab": 7,
    "Shaʿbān": 8,
    "Sha'ban": 8,
    "Shaban": 8,
    "Ramaḍān": 9,
    "Ramadan": 9,
    "Ramadhan": 9,
    "Shawwāl": 10,
    "Shawwal": 10,
    "Dhū al-Qaʿdah": 11,
    "Dhu al-Qa'dah": 11,
    "Dhul Qadah": 11,
    "Dhū al-Ḥijjah": 12,
    "Dhu al-Hijjah": 12,
    "Dhul Hijjah": 12,
}

# Prefix heuristics for the target month and its neighbours
HIJRI_MONTH_PREFIXES = (
    ("ram", RAMADAN_HIJRI_MONTH),
    ("sha'", SHABAN_HIJRI_MONTH),
    ("shab", SHABAN_HIJRI_MONTH),
    ("shaw", SHAWWAL_HIJRI_MONTH),
)


# ------------------------------------------------------------------------------------------------
# Special Nights
# ------------------------------------------------------------------------------------------------
LAYLATUL_QADR_NIGHTS = (21, 23, 25, 27, 29)
LAST_TEN_NIGHTS_START = 21


# ------------------------------------------------------------------------------------------------
# Tracker (Storage)
# ------------------------------------------------------------------------------------------------
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"
DATA_META_CREATED_AT = "created_at"
DATA_TRACKER = "tracker"
DATA_NOTIFICATION_PREFS = "notification_prefs"
DATA_LAST_KNOWN_TIMES = "last_known_times"
DATA_SCHEDULED_NOTIFICATIONS = "scheduled_notifications"
DATA_FLAGS = "flags"
DATA_FLAG_AUTO_INITIALIZED_YEAR = "auto_initialized_year"

DATA_TRACKER_YEAR = "year"
DATA_TRACKER_START_DATE = "start_date"
DATA_TRACKER_END_DATE = "end_date"
DATA_TRACKER_TOTAL_DAYS = "total_days"
DATA_TRACKER_FASTING_LOG = "fasting_log"
DATA_TRACKER_TARAWIH_LOG = "tarawih_log"
DATA_TRACKER_QURAN_LOG = "quran_log"
DATA_TRACKER_CREATED_AT = "created_at"

DATA_LOG_DAY = "day"
DATA_LOG_JUZ = "juz"
DATA_LOG_STATUS = "status"
DATA_LOG_MISSED_REASON = "missed_reason"
DATA_LOG_NOTES = "notes"
DATA_LOG_LOCATION = "location"
DATA_LOG_MOSQUE_NAME = "mosque_name"
DATA_LOG_PAGES_READ = "pages_read"
DATA_LOG_LOGGED_AT = "logged_at"
DATA_LOG_UPDATED_AT = "updated_at"
DATA_LOG_COMPLETED_AT = "completed_at"

DATA_LAST_KNOWN_DATE = "date"
DATA_LAST_KNOWN_VALUES = "times"

DATA_SCHEDULED_LAST_DATE = "last_scheduled_date"
DATA_SCHEDULED_COUNT = "scheduled_count"
DATA_SCHEDULED_ITEMS = "items"

# Fasting vocabulary
FASTING_STATUS_FASTED = "fasted"
FASTING_STATUS_MISSED = "missed"
FASTING_STATUS_EXCUSED = "excused"
FASTING_STATUS_NOT_LOGGED = "not_logged"
FASTING_STATUSES = [
    FASTING_STATUS_FASTED,
    FASTING_STATUS_MISSED,
    FASTING_STATUS_EXCUSED,
    FASTING_STATUS_NOT_LOGGED,
]

MISSED_REASON_ILLNESS = "illness"
MISSED_REASON_TRAVEL = "travel"
MISSED_REASON_MENSTRUATION = "menstruation"
MISSED_REASON_OTHER = "other"
MISSED_REASONS = [
    MISSED_REASON_ILLNESS,
    MISSED_REASON_TRAVEL,
    MISSED_REASON_MENSTRUATION,
    MISSED_REASON_OTHER,
]

# Tarawih vocabulary
TARAWIH_STATUS_PRAYED = "prayed"
TARAWIH_STATUS_MISSED = "missed"
TARAWIH_LOCATION_MOSQUE = "mosque"
TARAWIH_LOCATION_HOME = "home"
TARAWIH_LOCATIONS = [TARAWIH_LOCATION_MOSQUE, TARAWIH_LOCATION_HOME]

# Quran vocabulary
QURAN_STATUS_COMPLETED = "completed"
QURAN_STATUS_IN_PROGRESS = "in_progress"
TOTAL_JUZ = 30
PAGES_PER_JUZ = 20

# Composite score weights (must sum to 1.0)
SCORE_WEIGHT_FASTING = 0.4
SCORE_WEIGHT_TARAWIH = 0.3
SCORE_WEIGHT_QURAN = 0.3


# ------------------------------------------------------------------------------------------------
# Notification Preferences
# ------------------------------------------------------------------------------------------------
PREF_SUHOOR_REMINDER = "suhoor_reminder"
PREF_SUHOOR_REMINDER_MINUTES = "suhoor_reminder_minutes"
PREF_IFTAR_ALERT = "iftar_alert"
PREF_TARAWIH_REMINDER = "tarawih_reminder"
PREF_LAST_TEN_NIGHTS = "last_ten_nights"
PREF_LAYLATUL_QADR_EMPHASIS = "laylatul_qadr_emphasis"

SUHOOR_REMINDER_OPTIONS = [30, 45, 60]
DEFAULT_SUHOOR_REMINDER_MINUTES = 45

DEFAULT_NOTIFICATION_PREFS = {
    PREF_SUHOOR_REMINDER: True,
    PREF_SUHOOR_REMINDER_MINUTES: DEFAULT_SUHOOR_REMINDER_MINUTES,
    PREF_IFTAR_ALERT: True,
    PREF_TARAWIH_REMINDER: True,
    PREF_LAST_TEN_NIGHTS: True,
    PREF_LAYLATUL_QADR_EMPHASIS: True,
}


# ------------------------------------------------------------------------------------------------
# Reminders
# ------------------------------------------------------------------------------------------------
REMINDER_DAYS_AHEAD = 5
TARAWIH_REMINDER_OFFSET_MINUTES = 30
SPECIAL_NIGHT_REMINDER_OFFSET_MINUTES = 5

REMINDER_SUHOOR = "suhoor"
REMINDER_IFTAR = "iftar"
REMINDER_TARAWIH = "tarawih"
REMINDER_LAST_TEN = "last_ten"
REMINDER_LAYLATUL_QADR = "laylatul_qadr"

REMINDER_TITLE_SUHOOR = "Suhoor Time"
REMINDER_TITLE_IFTAR = "Iftar Time!"
REMINDER_TITLE_TARAWIH = "Tarawih Reminder"
REMINDER_TITLE_LAST_TEN = "Last 10 Nights"
REMINDER_TITLE_LAYLATUL_QADR = "Laylatul Qadr Night"

REMINDER_MESSAGE_SUHOOR = (
    "{minutes} minutes until Imsak ({imsak}). Time for Suhoor! {dua}"
)
REMINDER_MESSAGE_IFTAR = "It's Maghrib. Break your fast. {dua}"
REMINDER_MESSAGE_TARAWIH = "Night {day}: Time for Tarawih prayers."
REMINDER_MESSAGE_TARAWIH_LAST_TEN = "Night {day}: Last 10 nights! Don't miss Tarawih."
REMINDER_MESSAGE_LAST_TEN = (
    "Night {day} of the last 10 nights. Increase your worship and dua."
)
REMINDER_MESSAGE_LAYLATUL_QADR = (
    "Night {day}: Potential Laylatul Qadr! "
    "This night is better than a thousand months."
)

IFTAR_DUA = (
    "Dhahaba-dh-dhama'u wa-btallatil-'uruqu wa thabatal-ajru in sha'Allah"
)
SUHOOR_DUA = "Wa bisawmi ghadin nawaitu min shahri Ramadan"

# Notify service payload keys
NOTIFY_DOMAIN = "notify"
NOTIFY_TITLE = "title"
NOTIFY_MESSAGE = "message"
NOTIFY_DATA = "data"
DISPLAY_DOT = "."


# ------------------------------------------------------------------------------------------------
# Sharing Summary
# ------------------------------------------------------------------------------------------------
SHARE_SUMMARY_FOOTER = "Tracked with Muslim Companion"


# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_LOG_FASTING = "log_fasting"
SERVICE_LOG_TARAWIH = "log_tarawih"
SERVICE_LOG_QURAN_PROGRESS = "log_quran_progress"
SERVICE_MARK_JUZ_COMPLETE = "mark_juz_complete"
SERVICE_UNMARK_JUZ_COMPLETE = "unmark_juz_complete"
SERVICE_INITIALIZE_TRACKER = "initialize_tracker"
SERVICE_RESET_TRACKER = "reset_tracker"
SERVICE_UPDATE_NOTIFICATION_PREFS = "update_notification_prefs"
SERVICE_RESCHEDULE_REMINDERS = "reschedule_reminders"

FIELD_DAY = "day"
FIELD_STATUS = "status"
FIELD_MISSED_REASON = "missed_reason"
FIELD_NOTES = "notes"
FIELD_PRAYED = "prayed"
FIELD_LOCATION = "location"
FIELD_MOSQUE_NAME = "mosque_name"
FIELD_JUZ = "juz"
FIELD_PAGES_READ = "pages_read"
FIELD_YEAR = "year"
FIELD_START_DATE = "start_date"
FIELD_TOTAL_DAYS = "total_days"
FIELD_FORCE = "force"

MSG_NO_ENTRY_FOUND = "No Muslim Companion entry found"
ERROR_TRACKER_NOT_INITIALIZED = (
    "Ramadan tracker is not initialized yet; the entry was not recorded"
)
ERROR_DAY_OUT_OF_RANGE_FMT = "Day {} is outside the tracked window (1..{})"
ERROR_JUZ_OUT_OF_RANGE_FMT = "Juz {} is outside 1..{}"
ERROR_PAGES_OUT_OF_RANGE_FMT = "Pages read {} is outside 0..{}"
ERROR_NO_WINDOW_DETECTED = (
    "Ramadan start date is unknown; pass year and start_date to initialize"
)


# ------------------------------------------------------------------------------------------------
# Sensors
# ------------------------------------------------------------------------------------------------
SENSOR_KEY_CURRENT_PRAYER = "current_prayer"
SENSOR_KEY_NEXT_PRAYER = "next_prayer"
SENSOR_KEY_RAMADAN_STATUS = "ramadan_status"
SENSOR_KEY_RAMADAN_DAY = "ramadan_day"
SENSOR_KEY_COUNTDOWN = "countdown"
SENSOR_KEY_FASTING_STREAK = "fasting_streak"
SENSOR_KEY_OVERALL_SCORE = "overall_score"
SENSOR_KEY_QURAN_PROGRESS = "quran_progress"

RAMADAN_STATE_ACTIVE = "active"
RAMADAN_STATE_APPROACHING = "approaching"
RAMADAN_STATE_INACTIVE = "inactive"

ATTR_PERIOD = "period"
ATTR_NEXT_TARGET = "next_target"
ATTR_FIRST_BOUNDARY = "first_boundary_time"
ATTR_SECOND_BOUNDARY = "second_boundary_time"
ATTR_REMAINING_SECONDS = "remaining_seconds"
ATTR_TIME = "time"
ATTR_MINUTES_UNTIL = "minutes_until"
ATTR_IS_TOMORROW = "is_tomorrow"
ATTR_LOW_CONFIDENCE = "low_confidence"
ATTR_SOURCE = "source"
ATTR_SHARE_SUMMARY = "share_summary"

# Countdown sensor refresh cadence (seconds)
COUNTDOWN_REFRESH_SECONDS = 1


# ------------------------------------------------------------------------------------------------
# Manager Events (instance-scoped dispatcher signals)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_TRACKER_INITIALIZED = "tracker_initialized"
SIGNAL_SUFFIX_TRACKER_RESET = "tracker_reset"
SIGNAL_SUFFIX_PREFS_UPDATED = "notification_prefs_updated"

# Daily reminder rescheduling time (local)
REMINDER_RESCHEDULE_HOUR = 0
REMINDER_RESCHEDULE_MINUTE = 5
