# File: api.py
"""Upstream clients for the Muslim Companion integration.

Two independent providers feed the integration:

- Provider A (Aladhan): astronomical calculation. Publishes Imsak directly
  plus the six prayer boundaries, and converts Gregorian dates to Hijri.
- Provider B (local authority timetable): publishes the six boundaries, but
  no Imsak. Configured with a URL template containing {year} and {month}.

Transport failures never leave this module as exceptions. Every fetch returns
a FetchResult carrying either the value or an error kind, so the coordinator
can fall through to the next source without a try/except per call.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import aiohttp
from homeassistant.exceptions import HomeAssistantError

from . import const
from .engines.calendar_window_engine import HijriDate
from .utils.clock_utils import ParseError, clean_raw_time
from .utils.dt_utils import dt_parse_date

if TYPE_CHECKING:
    from datetime import date

    from .type_defs import BoundaryTimes, RawPayload

T = TypeVar("T")


class UpstreamUnavailable(HomeAssistantError):
    """Raised inside the clients when a provider cannot be used.

    Always converted into a failed FetchResult before leaving this module.
    """

    def __init__(self, kind: str, message: str) -> None:
        """Initialize with an error kind (const.FETCH_ERROR_*)."""
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True, slots=True)
class FetchResult(Generic[T]):
    """Outcome of one upstream fetch: a value or an error kind."""

    value: T | None = None
    error: str | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        """Return True when the fetch produced a value."""
        return self.error is None

    @classmethod
    def success(cls, value: T) -> FetchResult[T]:
        """Wrap a value."""
        return cls(value=value)

    @classmethod
    def failure(cls, kind: str, message: str = "") -> FetchResult[T]:
        """Wrap an error kind."""
        return cls(error=kind, message=message)

    def unwrap(self) -> T:
        """Return the value or raise UpstreamUnavailable."""
        if self.error is not None or self.value is None:
            raise UpstreamUnavailable(
                self.error or const.FETCH_ERROR_NOT_AVAILABLE, self.message
            )
        return self.value


async def _async_get_json(
    session: aiohttp.ClientSession,
    url: str,
    params: dict[str, Any] | None = None,
) -> Any:
    """GET a URL and decode its JSON body.

    Raises:
        UpstreamUnavailable: On timeout, transport failure or a non-200 status.
    """
    try:
        async with asyncio.timeout(const.API_TIMEOUT):
            async with session.get(url, params=params) as response:
                if response.status != 200:
                    raise UpstreamUnavailable(
                        const.FETCH_ERROR_BAD_RESPONSE,
                        f"HTTP {response.status} fetching {url}",
                    )
                return await response.json(content_type=None)
    except TimeoutError as err:
        raise UpstreamUnavailable(
            const.FETCH_ERROR_TIMEOUT, f"Timed out fetching {url}"
        ) from err
    except aiohttp.ClientError as err:
        raise UpstreamUnavailable(
            const.FETCH_ERROR_NETWORK, f"Failed to fetch {url}: {err}"
        ) from err
    except ValueError as err:
        raise UpstreamUnavailable(
            const.FETCH_ERROR_BAD_RESPONSE, f"Invalid JSON from {url}: {err}"
        ) from err


def _clean_times(raw: dict[str, Any], key_map: dict[str, str]) -> BoundaryTimes:
    """Normalize raw upstream times, dropping values that cannot be parsed."""
    times: BoundaryTimes = {}
    for raw_key, key in key_map.items():
        value = raw.get(raw_key)
        if not value:
            continue
        try:
            times[key] = clean_raw_time(str(value))
        except ParseError as err:
            const.LOGGER.warning(
                "WARNING: Dropping malformed upstream time %s='%s': %s",
                raw_key,
                value,
                err,
            )
    return times


# ==============================================================================
# Provider A: Aladhan
# ==============================================================================


class AladhanClient:
    """Client for the Aladhan prayer-time and calendar API."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        latitude: float = const.DEFAULT_LATITUDE,
        longitude: float = const.DEFAULT_LONGITUDE,
        method: int = const.DEFAULT_CALCULATION_METHOD,
        school: int = const.DEFAULT_SCHOOL,
    ) -> None:
        """Initialize the client."""
        self._session = session
        self.latitude = latitude
        self.longitude = longitude
        self.method = method
        self.school = school

    @property
    def _params(self) -> dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "method": self.method,
            "school": self.school,
        }

    async def async_fetch_timings(self, day: date) -> FetchResult[BoundaryTimes]:
        """Fetch Imsak and the six boundaries for one date."""
        url = const.ALADHAN_TIMINGS_URL.format(
            date=day.strftime(const.ALADHAN_DATE_FORMAT)
        )
        try:
            payload = await _async_get_json(self._session, url, self._params)
            timings = self._data(payload).get("timings")
            if not isinstance(timings, dict):
                raise UpstreamUnavailable(
                    const.FETCH_ERROR_BAD_RESPONSE, "Missing timings in response"
                )
        except UpstreamUnavailable as err:
            return self._failed("timings", day, err)

        times = _clean_times(timings, const.ALADHAN_TIMING_KEYS)
        const.LOGGER.debug("DEBUG: Aladhan timings for %s: %s", day, times)
        return FetchResult.success(times)

    async def async_fetch_calendar(
        self, year: int, month: int
    ) -> FetchResult[dict[date, BoundaryTimes]]:
        """Fetch a whole Gregorian month of timings keyed by date."""
        url = const.ALADHAN_CALENDAR_URL.format(year=year, month=month)
        try:
            payload = await _async_get_json(self._session, url, self._params)
            records = payload.get("data") if isinstance(payload, dict) else None
            if not isinstance(records, list):
                raise UpstreamUnavailable(
                    const.FETCH_ERROR_BAD_RESPONSE, "Missing calendar data in response"
                )
        except UpstreamUnavailable as err:
            return self._failed("calendar", f"{year}-{month:02d}", err)

        by_date: dict[date, BoundaryTimes] = {}
        for record in records:
            if not isinstance(record, dict):
                continue
            date_info = record.get("date")
            gregorian = (
                date_info.get("gregorian") if isinstance(date_info, dict) else None
            )
            record_date = (
                dt_parse_date(gregorian.get("date"))
                if isinstance(gregorian, dict)
                else None
            )
            timings = record.get("timings")
            if record_date is None or not isinstance(timings, dict):
                const.LOGGER.debug("DEBUG: Skipping calendar record %s", record)
                continue
            by_date[record_date] = _clean_times(timings, const.ALADHAN_TIMING_KEYS)
        return FetchResult.success(by_date)

    async def async_fetch_hijri_date(self, day: date) -> FetchResult[HijriDate]:
        """Convert a Gregorian date to its Hijri reading."""
        url = const.ALADHAN_HIJRI_URL.format(
            date=day.strftime(const.ALADHAN_DATE_FORMAT)
        )
        try:
            payload = await _async_get_json(self._session, url)
            hijri = self._data(payload).get("hijri")
            if not isinstance(hijri, dict):
                raise UpstreamUnavailable(
                    const.FETCH_ERROR_BAD_RESPONSE, "Missing hijri in response"
                )
            reading = HijriDate(
                day=int(hijri["day"]),
                month_name=str(hijri["month"]["en"]),
                year=int(hijri["year"]),
            )
        except (KeyError, TypeError, ValueError) as err:
            return self._failed(
                "hijri date",
                day,
                UpstreamUnavailable(const.FETCH_ERROR_BAD_RESPONSE, str(err)),
            )
        except UpstreamUnavailable as err:
            return self._failed("hijri date", day, err)

        return FetchResult.success(reading)

    @staticmethod
    def _data(payload: Any) -> RawPayload:
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise UpstreamUnavailable(
                const.FETCH_ERROR_BAD_RESPONSE, "Missing data in response"
            )
        return data

    @staticmethod
    def _failed(what: str, key: Any, err: UpstreamUnavailable) -> FetchResult[Any]:
        const.LOGGER.warning(
            "WARNING: Aladhan %s fetch failed for %s (%s): %s", what, key, err.kind, err
        )
        return FetchResult.failure(err.kind, str(err))


# ==============================================================================
# Provider B: Local authority timetable
# ==============================================================================


class AuthorityTimetableClient:
    """Client for a monthly authority timetable.

    The endpoint returns either a list of records or an object holding the
    list under "data". Each record carries a "D/M/YYYY" date plus the six
    boundary times keyed subuh..isyak.
    """

    def __init__(self, session: aiohttp.ClientSession, url_template: str) -> None:
        """Initialize the client with a URL template (may be empty)."""
        self._session = session
        self.url_template = url_template.strip() if url_template else ""

    @property
    def configured(self) -> bool:
        """Return True when a URL template was provided."""
        return bool(self.url_template)

    async def async_fetch_month(
        self, year: int, month: int
    ) -> FetchResult[dict[date, BoundaryTimes]]:
        """Fetch one month of authority times keyed by date."""
        if not self.configured:
            return FetchResult.failure(
                const.FETCH_ERROR_NOT_CONFIGURED, "No authority URL configured"
            )

        url = self.url_template.format(year=year, month=month)
        try:
            payload = await _async_get_json(self._session, url)
        except UpstreamUnavailable as err:
            const.LOGGER.warning(
                "WARNING: Authority timetable fetch failed for %s-%02d (%s): %s",
                year,
                month,
                err.kind,
                err,
            )
            return FetchResult.failure(err.kind, str(err))

        records = (
            payload.get(const.AUTHORITY_RECORDS_FIELD)
            if isinstance(payload, dict)
            else payload
        )
        if not isinstance(records, list):
            const.LOGGER.warning(
                "WARNING: Authority timetable for %s-%02d has no record list",
                year,
                month,
            )
            return FetchResult.failure(
                const.FETCH_ERROR_BAD_RESPONSE, "Missing record list"
            )

        key_map = {key: key for key in const.BOUNDARY_KEYS}
        by_date: dict[date, BoundaryTimes] = {}
        for record in records:
            if not isinstance(record, dict):
                continue
            record_date = dt_parse_date(record.get(const.AUTHORITY_DATE_FIELD))
            if record_date is None:
                const.LOGGER.debug("DEBUG: Skipping authority record %s", record)
                continue
            by_date[record_date] = _clean_times(record, key_map)
        return FetchResult.success(by_date)

    async def async_fetch_day(self, day: date) -> FetchResult[BoundaryTimes]:
        """Fetch the authority times for one date."""
        month = await self.async_fetch_month(day.year, day.month)
        if not month.ok:
            return FetchResult.failure(month.error or "", month.message)

        times = (month.value or {}).get(day)
        if not times:
            const.LOGGER.debug("DEBUG: Authority timetable has no entry for %s", day)
            return FetchResult.failure(
                const.FETCH_ERROR_NOT_AVAILABLE, f"No authority entry for {day}"
            )
        return FetchResult.success(times)
