"""Capability based authorization: which roles may perform which action on which resource.

Each protected Flask-RESTful handler is decorated with requires_capability( resource, action ). The decorator
verifies the bearer token, loads the user and checks the role against CAPABILITIES before the handler runs.
A capability of None admits any authenticated user; ownership rules that depend on the row, e.g. a donor
reading their own donation, are checked by the controllers.
"""
import functools

from flask import jsonify
from flask_jwt_extended import create_access_token
from flask_jwt_extended import current_user
from flask_jwt_extended import verify_jwt_in_request

from application.exceptions.exception_auth import AuthOwnershipError
from application.exceptions.exception_auth import AuthRoleError
from application.models.user import UserModel

ADMIN = frozenset( [ 'admin' ] )
ADMIN_OR_MANAGER = frozenset( [ 'admin', 'orphanage_manager' ] )
APPLICANTS = frozenset( [ 'volunteer', 'donor' ] )
ANY_AUTHENTICATED = None

CAPABILITIES = {
    ( 'auth', 'read' ): ANY_AUTHENTICATED,
    ( 'auth', 'update' ): ANY_AUTHENTICATED,
    ( 'orphanages', 'create' ): ANY_AUTHENTICATED,
    ( 'orphanages', 'update' ): ANY_AUTHENTICATED,
    ( 'reviews', 'create' ): ANY_AUTHENTICATED,
    ( 'reviews', 'delete' ): ANY_AUTHENTICATED,
    ( 'orphans', 'create' ): ADMIN_OR_MANAGER,
    ( 'orphans', 'update' ): ADMIN_OR_MANAGER,
    ( 'orphans', 'delete' ): ADMIN,
    ( 'orphan_updates', 'create' ): ADMIN_OR_MANAGER,
    ( 'campaigns', 'create' ): ADMIN_OR_MANAGER,
    ( 'campaigns', 'update' ): ADMIN_OR_MANAGER,
    ( 'campaigns', 'stats' ): ADMIN,
    ( 'donations', 'create' ): ANY_AUTHENTICATED,
    ( 'donations', 'read' ): ANY_AUTHENTICATED,
    ( 'donations', 'update_status' ): ADMIN,
    ( 'donations', 'upload_receipt' ): ANY_AUTHENTICATED,
    ( 'donations', 'stats' ): ADMIN,
    ( 'sponsorships', 'create' ): ANY_AUTHENTICATED,
    ( 'sponsorships', 'read' ): ANY_AUTHENTICATED,
    ( 'sponsorships', 'update_status' ): ANY_AUTHENTICATED,
    ( 'sponsorships', 'payment' ): ANY_AUTHENTICATED,
    ( 'sponsorships', 'stats' ): ADMIN,
    ( 'deliveries', 'create' ): ADMIN,
    ( 'deliveries', 'update' ): ADMIN,
    ( 'deliveries', 'read' ): ANY_AUTHENTICATED,
    ( 'opportunities', 'create' ): ADMIN_OR_MANAGER,
    ( 'opportunities', 'update' ): ADMIN_OR_MANAGER,
    ( 'opportunities', 'delete' ): ADMIN_OR_MANAGER,
    ( 'applications', 'create' ): APPLICANTS,
    ( 'applications', 'list' ): ADMIN_OR_MANAGER,
    ( 'applications', 'update_status' ): ADMIN_OR_MANAGER,
    ( 'applications', 'upload_resume' ): ANY_AUTHENTICATED,
    ( 'volunteers', 'stats' ): ADMIN,
    ( 'notifications', 'read' ): ANY_AUTHENTICATED,
    ( 'notifications', 'update' ): ANY_AUTHENTICATED,
    ( 'notifications', 'delete' ): ANY_AUTHENTICATED
}


def is_allowed( role, resource, action ):
    """Whether the role holds the capability. Unknown capabilities are denied."""

    key = ( resource, action )
    if key not in CAPABILITIES:
        return False
    allowed_roles = CAPABILITIES[ key ]
    return allowed_roles is None or role in allowed_roles


def requires_capability( resource, action ):
    """Decorator for Resource methods: authenticate the bearer token, then authorize the user's role.

    :param str resource: The resource name in CAPABILITIES.
    :param str action: The action name in CAPABILITIES.
    :return: The decorator.
    """

    def decorator( handler ):
        @functools.wraps( handler )
        def wrapper( *args, **kwargs ):
            verify_jwt_in_request()
            if not is_allowed( current_user.role, resource, action ):
                raise AuthRoleError( current_user.role, resource, action )
            return handler( *args, **kwargs )
        return wrapper
    return decorator


def get_current_user():
    """The user loaded for the bearer token of this request."""

    return current_user


def is_admin( user ):
    """Whether the user is an administrator."""

    return user is not None and user.role == 'admin'


def ensure_owner_or_admin( user, owner_id ):
    """Raise unless the user owns the row or is an administrator."""

    if not is_admin( user ) and user.id != owner_id:
        raise AuthOwnershipError()


def issue_access_token( user ):
    """The bearer token returned by register and login: the identity is the user ID, the role is a claim."""

    return create_access_token( identity=str( user.id ), additional_claims={ 'role': user.role } )


def jwt_error_response( message ):
    """The error envelope for authentication failures."""

    response = jsonify( { 'success': False, 'message': message } )
    response.status_code = 401
    return response


def register_jwt_callbacks( jwt ):
    """Wire the JWTManager to the users table and to the error envelope.

    :param jwt: The JWTManager from flask_essentials.
    :return:
    """

    @jwt.user_lookup_loader
    def user_lookup( _jwt_header, jwt_data ):  # pylint: disable=unused-variable
        try:
            user_id = int( jwt_data[ 'sub' ] )
        except ( TypeError, ValueError ):
            return None
        return UserModel.query.filter_by( id=user_id ).one_or_none()

    @jwt.user_lookup_error_loader
    def user_lookup_error( _jwt_header, _jwt_data ):  # pylint: disable=unused-variable
        return jwt_error_response( 'User not found' )

    @jwt.unauthorized_loader
    def missing_token( reason ):  # pylint: disable=unused-variable,unused-argument
        return jwt_error_response( 'Not authorized to access this route' )

    @jwt.invalid_token_loader
    def invalid_token( reason ):  # pylint: disable=unused-variable,unused-argument
        return jwt_error_response( 'Invalid token' )

    @jwt.expired_token_loader
    def expired_token( _jwt_header, _jwt_data ):  # pylint: disable=unused-variable
        return jwt_error_response( 'Token has expired' )
