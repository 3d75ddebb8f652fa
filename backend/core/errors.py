"""Booking and cancellation failures, rendered by FastAPI as ``{"detail": ...}``."""

from fastapi import HTTPException, status


class AppointmentError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'Appointment request failed.'

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(status_code=type(self).status_code, detail=detail or self.message)


class ValidationError(AppointmentError):
    message = 'Validation fails.'


class InvalidProviderError(AppointmentError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = 'You can only create appointments with providers.'


class PastDateError(AppointmentError):
    message = 'Past dates are not permitted.'


class SlotUnavailableError(AppointmentError):
    message = 'Appointment date is not available.'


class NotFoundError(AppointmentError):
    status_code = status.HTTP_404_NOT_FOUND
    message = 'Appointment not found.'


class AlreadyCanceledError(AppointmentError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = 'This appointment has already been canceled.'


class ForbiddenError(AppointmentError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "You don't have permission to cancel this appointment."


class TooLateToCancelError(AppointmentError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = 'You can only cancel appointments 2 hours in advance.'
