"""Exception handlers for malformed requests: missing fields, bad values and rejected uploads."""
# pylint: disable=too-few-public-methods


class RequestError( Exception ):
    """Base class for some custom exceptions for request validation."""


class RequestMissingFieldsError( RequestError ):
    """Exception for a payload without the fields an endpoint requires."""

    def __init__( self, message='Please provide all required fields' ):
        super().__init__()
        self.message = message


class RequestImproperFieldError( RequestError ):
    """Exception for a payload field with a value of the wrong type or out of range."""

    def __init__( self, message='Improper field in request.' ):
        super().__init__()
        self.message = message


class RequestInvalidStatusError( RequestError ):
    """Exception for a status that is not one of the allowed values."""

    def __init__( self, allowed ):
        super().__init__()
        self.allowed = allowed
        self.message = 'Status must be one of: {}'.format( ', '.join( allowed ) )


class RequestUploadError( RequestError ):
    """Exception for a missing, oversized or wrongly typed upload."""

    def __init__( self, message='File upload error.' ):
        super().__init__()
        self.message = message
