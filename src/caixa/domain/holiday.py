"""Holiday calendar domain service."""

from datetime import date
from typing import Optional

import structlog

from caixa.database.base import Database
from caixa.domain.entities import Holiday
from caixa.domain.errors import ConflictError, NotFoundError, ValidationError, holiday_not_found

logger = structlog.get_logger()


class HolidayService:
    """Service for managing the holiday calendar used by card settlement."""

    def __init__(self, db: Database):
        """Initialize holiday service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_holiday(self, day: date, name: str) -> int:
        """Register a holiday.

        Returns:
            Holiday ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a holiday already exists on that date
        """
        if not name or not name.strip():
            raise ValidationError("Holiday name is required")
        existing = self.db.get_holiday(day)
        if existing is not None:
            raise ConflictError(
                f"Holiday '{existing.name}' already registered on {day.isoformat()}"
            )
        holiday_id = self.db.create_holiday(day, name.strip())
        logger.info("holiday_added", date=day.isoformat(), name=name.strip())
        return holiday_id

    def remove_holiday(self, day: date) -> None:
        """Remove the holiday registered on a date.

        Raises:
            NotFoundError: If no holiday exists on that date
        """
        holiday = self.db.get_holiday(day)
        if holiday is None:
            raise NotFoundError(holiday_not_found(day))
        self.db.delete_holiday(holiday.id)
        logger.info("holiday_removed", date=day.isoformat())

    def list_holidays(self, year: Optional[int] = None) -> list[Holiday]:
        """List holidays, optionally restricted to one year."""
        if year is None:
            return self.db.list_holidays()
        return self.db.list_holidays(date(year, 1, 1), date(year, 12, 31))

    def is_holiday(self, day: date) -> bool:
        """True if a holiday is registered on the date."""
        return self.db.get_holiday(day) is not None
