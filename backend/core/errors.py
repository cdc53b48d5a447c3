"""Domain errors raised by the appointment service.

Each error carries the user-facing message and the HTTP status the API
answers with. Nothing beyond the message is exposed to clients.
"""

from fastapi import status


class AppointmentError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'Appointment request failed.'

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(AppointmentError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'Invalid appointment data.'


class NotFoundError(AppointmentError):
    status_code = status.HTTP_404_NOT_FOUND
    message = 'Not found.'


class AppointmentNotActiveError(NotFoundError):
    message = 'Appointment is already canceled.'


class InvalidTimeError(AppointmentError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = 'Appointments must be booked for the current hour or later.'


class SlotTakenError(AppointmentError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'This time is not available.'


class InvalidProviderError(AppointmentError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = 'Providers cannot book appointments with themselves.'


class ForbiddenError(AppointmentError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = 'You do not have permission to cancel this appointment.'


class CancellationWindowExpiredError(AppointmentError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = 'Appointments can only be canceled up to 2 hours in advance.'
