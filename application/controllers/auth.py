"""Controllers for Flask-RESTful resources: registration, login and account management."""
import logging
import secrets
from datetime import timedelta

from flask import current_app

from application.exceptions.exception_auth import AuthEmailNotVerifiedError
from application.exceptions.exception_auth import AuthInvalidCredentialsError
from application.exceptions.exception_auth import AuthInvalidTokenError
from application.exceptions.exception_ledger import EmailAlreadyRegisteredError
from application.exceptions.exception_model import ModelUserNotFoundError
from application.exceptions.exception_request import RequestImproperFieldError
from application.flask_essentials import database
from application.helpers.authorization import issue_access_token
from application.helpers.email import build_password_reset_email
from application.helpers.email import build_verification_email
from application.helpers.email import send_email_best_effort
from application.helpers.general_helper_functions import utc_now
from application.helpers.general_helper_functions import validate_choice
from application.helpers.general_helper_functions import validate_required_fields
from application.helpers.ledger import ledger_transaction
from application.models.user import REGISTRATION_ROLES
from application.models.user import UserModel

MINIMUM_PASSWORD_LENGTH = 6
PROFILE_FIELDS = ( 'first_name', 'last_name', 'phone', 'address' )


def validate_password( password ):
    """Raise if the password is too short."""

    if not isinstance( password, str ) or len( password ) < MINIMUM_PASSWORD_LENGTH:
        raise RequestImproperFieldError(
            'Password must be at least {} characters long'.format( MINIMUM_PASSWORD_LENGTH )
        )


def normalize_email( email ):
    """Emails are compared case insensitively."""

    if not isinstance( email, str ) or '@' not in email:
        raise RequestImproperFieldError( 'Please provide a valid email' )
    return email.strip().lower()


def build_public_url( path ):
    """Absolute URL to an API path for links in emails."""

    return '{}/api/v1{}'.format( current_app.config.get( 'PUBLIC_BASE_URL', '' ).rstrip( '/' ), path )


def register_user( payload ):
    """Create a user with an unverified email and send the verification link.

    :param dict payload: email, password, first_name, last_name and optionally role, phone and address.
    :return: The user and a bearer token.
    """

    validate_required_fields( payload, [ 'email', 'password', 'first_name', 'last_name' ] )
    email = normalize_email( payload[ 'email' ] )
    validate_password( payload[ 'password' ] )
    role = validate_choice( payload.get( 'role', 'donor' ), REGISTRATION_ROLES, 'role' )

    if UserModel.query.filter_by( email=email ).one_or_none():
        raise EmailAlreadyRegisteredError()

    user = UserModel(
        email=email,
        first_name=payload[ 'first_name' ],
        last_name=payload[ 'last_name' ],
        role=role,
        phone=payload.get( 'phone' ),
        address=payload.get( 'address' ),
        verification_token=secrets.token_hex( 20 )
    )
    user.set_password( payload[ 'password' ] )
    with ledger_transaction():
        database.session.add( user )
    logging.info( 'Registered user %s with role %s.', user.id, user.role )

    verification_url = build_public_url( '/auth/verify-email/{}'.format( user.verification_token ) )
    send_email_best_effort( user.email, *build_verification_email( user, verification_url ) )

    return user, issue_access_token( user )


def login_user( payload ):
    """Check the credentials and return a bearer token.

    :param dict payload: email and password.
    :return: The user and a bearer token.
    """

    validate_required_fields( payload, [ 'email', 'password' ], 'Please provide an email and password' )
    user = UserModel.query.filter_by( email=str( payload[ 'email' ] ).strip().lower() ).one_or_none()
    if not user or not user.check_password( payload[ 'password' ] ):
        raise AuthInvalidCredentialsError()
    if not user.is_verified:
        raise AuthEmailNotVerifiedError()
    return user, issue_access_token( user )


def verify_email( token ):
    """Mark the email that the token was sent to as verified."""

    user = UserModel.query.filter_by( verification_token=token ).one_or_none()
    if not user:
        raise AuthInvalidTokenError( 'Invalid verification token' )
    with ledger_transaction():
        user.is_verified = True
        user.verification_token = None
    return user


def forgot_password( payload ):
    """Issue a password reset token and email the reset link.

    :param dict payload: email.
    :return: The user.
    """

    validate_required_fields( payload, [ 'email' ], 'Please provide an email' )
    user = UserModel.query.filter_by( email=str( payload[ 'email' ] ).strip().lower() ).one_or_none()
    if not user:
        raise ModelUserNotFoundError()

    expires_seconds = int( current_app.config.get( 'PASSWORD_RESET_EXPIRES', 3600 ) )
    with ledger_transaction():
        user.reset_password_token = secrets.token_hex( 20 )
        user.reset_password_expires = utc_now() + timedelta( seconds=expires_seconds )

    reset_url = build_public_url( '/auth/reset-password/{}'.format( user.reset_password_token ) )
    send_email_best_effort( user.email, *build_password_reset_email( user, reset_url, expires_seconds // 60 ) )
    return user


def reset_password( token, payload ):
    """Set a new password with a reset token that has not expired."""

    validate_required_fields( payload, [ 'password' ] )
    validate_password( payload[ 'password' ] )
    user = UserModel.query.filter_by( reset_password_token=token ).one_or_none()
    if not user or not user.reset_password_expires or user.reset_password_expires < utc_now():
        raise AuthInvalidTokenError()

    with ledger_transaction():
        user.set_password( payload[ 'password' ] )
        user.reset_password_token = None
        user.reset_password_expires = None
    return user, issue_access_token( user )


def update_details( user, payload ):
    """Update the profile fields and, if it is free, the email.

    :param user: The authenticated user.
    :param dict payload: Any of email, first_name, last_name, phone and address.
    :return: The user.
    """

    payload = payload or {}
    email = None
    if payload.get( 'email' ):
        email = normalize_email( payload[ 'email' ] )
        existing = UserModel.query.filter_by( email=email ).one_or_none()
        if existing and existing.id != user.id:
            raise EmailAlreadyRegisteredError()

    with ledger_transaction():
        if email:
            user.email = email
        for field in PROFILE_FIELDS:
            if field in payload:
                setattr( user, field, payload[ field ] )
    return user


def update_password( user, payload ):
    """Change the password after checking the current one."""

    validate_required_fields( payload, [ 'currentPassword', 'newPassword' ] )
    if not user.check_password( payload[ 'currentPassword' ] ):
        raise AuthInvalidCredentialsError( 'Password is incorrect' )
    validate_password( payload[ 'newPassword' ] )
    with ledger_transaction():
        user.set_password( payload[ 'newPassword' ] )
    return user, issue_access_token( user )
