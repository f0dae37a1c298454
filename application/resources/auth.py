"""Resource entry point for registration, login and account endpoints."""
# pylint: disable=too-few-public-methods
# pylint: disable=no-self-use
from http import HTTPStatus

from flask import request
from flask_restful import Resource

from application.controllers.auth import forgot_password
from application.controllers.auth import login_user
from application.controllers.auth import register_user
from application.controllers.auth import reset_password
from application.controllers.auth import update_details
from application.controllers.auth import update_password
from application.controllers.auth import verify_email
from application.helpers.authorization import get_current_user
from application.helpers.authorization import requires_capability
from application.helpers.general_helper_functions import get_request_payload
from application.schemas.user import UserSchema


def token_response( user, token ):
    """The body returned with a new bearer token."""

    return { 'success': True, 'token': token, 'data': UserSchema().dump( user ) }


class AuthRegister( Resource ):
    """Flask-RESTful resource endpoint to register a user."""

    def post( self ):
        """Endpoint to register a donor, volunteer or orphanage manager."""

        user, token = register_user( get_request_payload( request ) )
        return token_response( user, token ), HTTPStatus.CREATED


class AuthLogin( Resource ):
    """Flask-RESTful resource endpoint to log in."""

    def post( self ):
        """Endpoint to exchange an email and password for a bearer token."""

        user, token = login_user( get_request_payload( request ) )
        return token_response( user, token ), HTTPStatus.OK


class AuthVerifyEmail( Resource ):
    """Flask-RESTful resource endpoint for the link in the verification email."""

    def get( self, token ):
        """Endpoint to verify an email address."""

        verify_email( token )
        return { 'success': True, 'message': 'Email verified successfully' }, HTTPStatus.OK


class AuthForgotPassword( Resource ):
    """Flask-RESTful resource endpoint to request a password reset email."""

    def post( self ):
        """Endpoint to send a password reset link."""

        forgot_password( get_request_payload( request ) )
        return { 'success': True, 'message': 'Password reset email sent' }, HTTPStatus.OK


class AuthResetPassword( Resource ):
    """Flask-RESTful resource endpoint to set a new password with a reset token."""

    def put( self, token ):
        """Endpoint to reset the password."""

        user, access_token = reset_password( token, get_request_payload( request ) )
        return token_response( user, access_token ), HTTPStatus.OK


class AuthMe( Resource ):
    """Flask-RESTful resource endpoint for the authenticated user."""

    @requires_capability( 'auth', 'read' )
    def get( self ):
        """Endpoint to retrieve the authenticated user."""

        return { 'success': True, 'data': UserSchema().dump( get_current_user() ) }, HTTPStatus.OK


class AuthUpdateDetails( Resource ):
    """Flask-RESTful resource endpoint to update the profile."""

    @requires_capability( 'auth', 'update' )
    def put( self ):
        """Endpoint to update the authenticated user's details."""

        user = update_details( get_current_user(), get_request_payload( request ) )
        return { 'success': True, 'data': UserSchema().dump( user ) }, HTTPStatus.OK


class AuthUpdatePassword( Resource ):
    """Flask-RESTful resource endpoint to change the password."""

    @requires_capability( 'auth', 'update' )
    def put( self ):
        """Endpoint to change the authenticated user's password."""

        user, token = update_password( get_current_user(), get_request_payload( request ) )
        return token_response( user, token ), HTTPStatus.OK


class AuthLogout( Resource ):
    """Flask-RESTful resource endpoint to log out: tokens are stateless, the client discards its copy."""

    def get( self ):
        """Endpoint to log out."""

        return { 'success': True, 'data': {} }, HTTPStatus.OK
