"""A helper module to define mocks for the transactional email API."""
# pylint: disable=too-few-public-methods
import requests

EMAIL_API_URL = 'https://email.example.org/send'


class MockResponse:
    """Stands in for requests.Response: only the status code is read."""

    def __init__( self, status_code ):
        self.status_code = status_code


def mock_email_accepted( *args, **kwargs ):  # pylint: disable=unused-argument
    """The email API accepts the message."""

    return MockResponse( 202 )


def mock_email_server_error( *args, **kwargs ):  # pylint: disable=unused-argument
    """The email API answers with an error status."""

    return MockResponse( 500 )


def mock_email_connection_error( *args, **kwargs ):
    """The email API cannot be reached."""

    raise requests.exceptions.ConnectionError( 'Connection refused' )
