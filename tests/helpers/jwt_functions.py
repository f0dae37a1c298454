"""A helper module to build the Authorization headers the endpoints expect."""
from application.helpers.authorization import issue_access_token


def get_auth_headers( user ):
    """Bearer token headers for the user: call inside an application context.

    :param user: The UserModel to authenticate as.
    :return: The request headers.
    """

    return {
        'Content-Type': 'application/json',
        'Authorization': 'Bearer {}'.format( issue_access_token( user ) )
    }
