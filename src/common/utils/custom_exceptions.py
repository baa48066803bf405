class NotFoundException(Exception):
    def __init__(self, resource: str, identifier: str, status_code: int = 404):
        self.resource = resource
        self.identifier = identifier
        self.status_code = status_code

    def __str__(self):
        return f"{self.resource} '{self.identifier}' not found"


class InvalidArgument(ValueError):
    pass


class BookingNotCancellable(Exception):
    def __init__(self, booking_id: str, status: str = None):
        self.booking_id = booking_id
        self.status = status

    def __str__(self):
        if self.status:
            return f"booking '{self.booking_id}' cannot be cancelled in status '{self.status}'"
        return f"booking '{self.booking_id}' is no longer cancellable"


class ForbiddenAction(Exception):
    pass
