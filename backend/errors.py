"""
errors.py
---------
Exception taxonomy shared by the store, planning modules and API layer.

Every class carries the HTTP status the API layer answers with; the
exception handlers in api/server.py turn them into {"message": ...}.

  ValidationError            400  malformed / out-of-range input
  NotFoundError              404  park, trip or activity catalog missing
  GenerationError            —    generation capability failed; never surfaced
  PersistenceError           —    a day / activity could not be written
  RollbackSucceededError     500  write failed, rollback left no data behind
  InconsistentStateError     500  write failed AND rollback failed
  ReferentialIntegrityError  500  join found a dangling catalog reference
"""

from __future__ import annotations


class PlannerError(Exception):
    """Base for every error this service raises on purpose."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PlannerError):
    status_code = 400


class NotFoundError(PlannerError):
    status_code = 404


class NoActivitiesError(NotFoundError):
    def __init__(self, park_id: int) -> None:
        super().__init__("No activities found for this park")
        self.park_id = park_id


class GenerationError(PlannerError):
    """Generation capability failed, timed out or returned unusable content."""


class PersistenceError(PlannerError):
    """A TripDay or TripActivity could not be written."""


class RollbackSucceededError(PlannerError):
    def __init__(self, trip_id: int, cause: str) -> None:
        super().__init__(
            f"Failed to generate itinerary for trip {trip_id}: {cause}. "
            "No data was retained."
        )
        self.trip_id = trip_id
        self.cause = cause


class InconsistentStateError(PlannerError):
    def __init__(self, trip_id: int, cause: str, rollback_error: str) -> None:
        super().__init__(
            f"Failed to generate itinerary for trip {trip_id} and rollback failed "
            f"({rollback_error}). The store may contain orphaned records for this "
            "trip; operator attention required."
        )
        self.trip_id = trip_id
        self.cause = cause
        self.rollback_error = rollback_error


class ReferentialIntegrityError(PlannerError):
    def __init__(self, trip_activity_id: int, activity_id: int) -> None:
        super().__init__(
            f"Trip activity {trip_activity_id} references missing park activity "
            f"{activity_id}; possible data corruption."
        )
        self.trip_activity_id = trip_activity_id
        self.activity_id = activity_id
