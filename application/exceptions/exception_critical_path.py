"""Exception handlers for the side channel path errors: email delivery and notifications."""
# pylint: disable=too-few-public-methods


class CriticalPathError( Exception ):
    """Base class for some custom exceptions for handling critical path errors."""

    def __init__( self, errors=None, where=None ):
        super().__init__()
        self.errors = errors
        self.where = where


class EmailHTTPStatusError( CriticalPathError ):
    """Exception for an email API response that was not HTTP 200."""

    def __init__( self, status_code ):
        super().__init__( where='send_email' )
        self.status_code = status_code
        self.message = '***** Critical path error: email API returned status code {}.'.format( status_code )


class EmailSendPathError( CriticalPathError ):
    """Exception for an email that could not be handed to the email API."""

    def __init__( self, errors=None ):
        super().__init__( errors, where='send_email' )
        self.message = '***** Critical path error: error sending email {}.'.format( errors )


class NotificationBuildPathError( CriticalPathError ):
    """Exception for a notification row that could not be saved."""

    def __init__( self, errors=None ):
        super().__init__( errors, where='create_notification' )
        self.message = '***** Critical path error: error building notification {}.'.format( errors )
