"""Exception handlers for authentication and authorization."""
# pylint: disable=too-few-public-methods


class AuthError( Exception ):
    """Base class for some custom exceptions for authentication and authorization."""


class AuthInvalidCredentialsError( AuthError ):
    """Exception for a login with an unknown email or a wrong password."""

    def __init__( self, message='Invalid credentials' ):
        super().__init__()
        self.message = message


class AuthEmailNotVerifiedError( AuthError ):
    """Exception for a login before the email address has been verified."""

    def __init__( self ):
        super().__init__()
        self.message = 'Please verify your email before logging in'


class AuthInvalidTokenError( AuthError ):
    """Exception for a verification or password reset token that is unknown or expired."""

    def __init__( self, message='Invalid or expired token' ):
        super().__init__()
        self.message = message


class AuthRoleError( AuthError ):
    """Exception for a user whose role does not grant the capability."""

    def __init__( self, role=None, resource=None, action=None ):
        super().__init__()
        self.role = role
        self.message = 'User role {} is not authorized to {} {}'.format( role, action, resource )


class AuthOwnershipError( AuthError ):
    """Exception for a user acting on a record that belongs to someone else."""

    def __init__( self, message='Not authorized to access this resource' ):
        super().__init__()
        self.message = message
