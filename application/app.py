"""The main application module with create_app(), resources and error handlers."""
import importlib
import logging
from logging.config import dictConfig
import os
import sys

from flask import Flask
from flask import jsonify
from flask_restful import Api
from marshmallow.exceptions import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from application.exceptions.exception_auth import AuthEmailNotVerifiedError
from application.exceptions.exception_auth import AuthInvalidCredentialsError
from application.exceptions.exception_auth import AuthInvalidTokenError
from application.exceptions.exception_auth import AuthOwnershipError
from application.exceptions.exception_auth import AuthRoleError
from application.exceptions.exception_critical_path import CriticalPathError
from application.exceptions.exception_ledger import LedgerConflictError
from application.exceptions.exception_ledger import LedgerStateError
from application.exceptions.exception_model import ModelNotFoundError
from application.exceptions.exception_request import RequestError
from application.flask_essentials import database
from application.flask_essentials import jwt
from application.flask_essentials import marshmallow
from application.helpers.authorization import register_jwt_callbacks
from application.logging_configuration import get_logging_configuration
from application.resources.app_health import Heartbeat
from application.resources.auth import AuthForgotPassword
from application.resources.auth import AuthLogin
from application.resources.auth import AuthLogout
from application.resources.auth import AuthMe
from application.resources.auth import AuthRegister
from application.resources.auth import AuthResetPassword
from application.resources.auth import AuthUpdateDetails
from application.resources.auth import AuthUpdatePassword
from application.resources.auth import AuthVerifyEmail
from application.resources.campaign import CampaignById
from application.resources.campaign import CampaignDonations
from application.resources.campaign import Campaigns
from application.resources.campaign import CampaignStats
from application.resources.delivery import Deliveries
from application.resources.delivery import DeliveryById
from application.resources.donation import DonationById
from application.resources.donation import DonationReceipt
from application.resources.donation import Donations
from application.resources.donation import DonationStats
from application.resources.donation import DonationStatus
from application.resources.notification import NotificationById
from application.resources.notification import NotificationRead
from application.resources.notification import Notifications
from application.resources.notification import NotificationsReadAll
from application.resources.orphan import OrphanById
from application.resources.orphan import Orphans
from application.resources.orphan import OrphanUpdates
from application.resources.orphanage import OrphanageById
from application.resources.orphanage import OrphanageOrphans
from application.resources.orphanage import OrphanageReviewById
from application.resources.orphanage import OrphanageReviews
from application.resources.orphanage import Orphanages
from application.resources.sponsorship import SponsorshipById
from application.resources.sponsorship import SponsorshipPayment
from application.resources.sponsorship import Sponsorships
from application.resources.sponsorship import SponsorshipStats
from application.resources.sponsorship import SponsorshipStatus
from application.resources.volunteer import VolunteerApplicationResume
from application.resources.volunteer import VolunteerApplications
from application.resources.volunteer import VolunteerApplicationStatus
from application.resources.volunteer import VolunteerApply
from application.resources.volunteer import VolunteerOpportunities
from application.resources.volunteer import VolunteerOpportunityById
from application.resources.volunteer import VolunteerStats
# pylint: disable=too-many-locals
# pylint: disable=too-many-statements

API_PREFIX = '/api/v1'
DATABASE_ERROR_MESSAGE = 'A database error occurred'
INTERNAL_ERROR_MESSAGE = 'An internal error occurred'


def create_app( app_config_env=None ):
    """Application factory.

    Builds the HopeConnect API with a specific configuration, e.g. configurations for development,
    testing, and production. Implements a configuration loader to augment the Flask app.config() in loading these
    configurations. Supports YAML and tagged environment variables. Manages the application logging level.

    :param str app_config_env: The configuration name to use in loading the configuration variables.
    :return: The Flask application.
    """

    # APP_ENV is set by the deployment. If we can't find a value set the app_config_env to DEFAULT.
    if not app_config_env:
        if 'APP_ENV' in os.environ:
            app_config_env = os.environ[ 'APP_ENV' ]
        else:
            app_config_env = 'DEFAULT'

    app = Flask( 'hopeconnect_api' )

    conf_root = os.path.join( os.path.dirname( __file__ ), '..', 'configuration' )
    importlib.import_module( 'configuration' )
    configuration_module = importlib.import_module( '.config_loader', package='configuration' )
    configuration = configuration_module.ConfigLoader()
    configuration.update_from_yaml_file( os.path.join( conf_root, 'conf.yml' ), app_config_env )
    configuration.update_from_env_variables( app_config_env )

    app.config.update( configuration )
    app.config.update( { 'APP_CONFIG_ENV': app_config_env } )

    wsgi_log_level = 'WARNING'
    gunicorn_log_level = 'WARNING'
    # Set the level of the root logger.
    if app.config.get( 'WSGI_LOG_LEVEL' ):
        wsgi_log_level = app.config[ 'WSGI_LOG_LEVEL' ]
    if app.config.get( 'GUNICORN_LOG_LEVEL' ):
        gunicorn_log_level = app.config[ 'GUNICORN_LOG_LEVEL' ]

    # If running gunicorn add gunicorn.error to handlers.
    gunicorn = 'gunicorn' in sys.modules

    dictConfig( get_logging_configuration( wsgi_log_level, gunicorn_log_level, gunicorn ) )
    logging.root.log( logging.root.level, '***** Logging is enabled for this level.' )
    logging.root.log( logging.root.level, '***** Configuration environment: %s', app_config_env )

    database.init_app( app )
    marshmallow.init_app( app )
    jwt.init_app( app )
    register_jwt_callbacks( jwt )

    # Absolutely needed for JWT errors to work correctly in production
    app.config.update( PROPAGATE_EXCEPTIONS=True )
    # Anything the JSON encoder does not know, e.g. a Decimal in a statistic, is sent as a string.
    app.config.update( RESTFUL_JSON={ 'default': str } )

    api = Api( app, prefix=API_PREFIX )

    api.add_resource( Heartbeat, '/heartbeat' )

    api.add_resource( AuthRegister, '/auth/register' )
    api.add_resource( AuthLogin, '/auth/login' )
    api.add_resource( AuthVerifyEmail, '/auth/verify-email/<string:token>' )
    api.add_resource( AuthForgotPassword, '/auth/forgot-password' )
    api.add_resource( AuthResetPassword, '/auth/reset-password/<string:token>' )
    api.add_resource( AuthMe, '/auth/me' )
    api.add_resource( AuthUpdateDetails, '/auth/update-details' )
    api.add_resource( AuthUpdatePassword, '/auth/update-password' )
    api.add_resource( AuthLogout, '/auth/logout' )

    api.add_resource( Orphanages, '/orphanages' )
    api.add_resource( OrphanageById, '/orphanages/<int:orphanage_id>' )
    api.add_resource( OrphanageOrphans, '/orphanages/<int:orphanage_id>/orphans' )
    api.add_resource( OrphanageReviews, '/orphanages/<int:orphanage_id>/reviews' )
    api.add_resource( OrphanageReviewById, '/orphanages/<int:orphanage_id>/reviews/<int:review_id>' )

    api.add_resource( Orphans, '/orphans' )
    api.add_resource( OrphanById, '/orphans/<int:orphan_id>' )
    api.add_resource( OrphanUpdates, '/orphans/<int:orphan_id>/updates' )

    api.add_resource( Campaigns, '/campaigns' )
    api.add_resource( CampaignStats, '/campaigns/stats' )
    api.add_resource( CampaignById, '/campaigns/<int:campaign_id>' )
    api.add_resource( CampaignDonations, '/campaigns/<int:campaign_id>/donations' )

    api.add_resource( Donations, '/donations' )
    api.add_resource( DonationStats, '/donations/stats' )
    api.add_resource( DonationById, '/donations/<int:donation_id>' )
    api.add_resource( DonationStatus, '/donations/<int:donation_id>/status' )
    api.add_resource( DonationReceipt, '/donations/<int:donation_id>/receipt' )

    api.add_resource( Sponsorships, '/sponsorships' )
    api.add_resource( SponsorshipStats, '/sponsorships/stats' )
    api.add_resource( SponsorshipById, '/sponsorships/<int:sponsorship_id>' )
    api.add_resource( SponsorshipStatus, '/sponsorships/<int:sponsorship_id>/status' )
    api.add_resource( SponsorshipPayment, '/sponsorships/<int:sponsorship_id>/payment' )

    api.add_resource( Deliveries, '/deliveries' )
    api.add_resource( DeliveryById, '/deliveries/<int:delivery_id>' )

    api.add_resource( VolunteerOpportunities, '/volunteers/opportunities' )
    api.add_resource( VolunteerOpportunityById, '/volunteers/opportunities/<int:opportunity_id>' )
    api.add_resource( VolunteerApply, '/volunteers/opportunities/<int:opportunity_id>/apply' )
    api.add_resource( VolunteerApplications, '/volunteers/opportunities/<int:opportunity_id>/applications' )
    api.add_resource( VolunteerApplicationStatus, '/volunteers/applications/<int:application_id>/status' )
    api.add_resource( VolunteerApplicationResume, '/volunteers/applications/<int:application_id>/resume' )
    api.add_resource( VolunteerStats, '/volunteers/stats' )

    api.add_resource( Notifications, '/notifications' )
    api.add_resource( NotificationsReadAll, '/notifications/read-all' )
    api.add_resource( NotificationRead, '/notifications/<int:notification_id>/read' )
    api.add_resource( NotificationById, '/notifications/<int:notification_id>' )

    @app.after_request
    def after_request( response ):  # pylint: disable=unused-variable
        """A handler for defining response headers.

        :param response: an HTTP response object
        :return:
        """

        response.headers.add( 'Access-Control-Allow-Origin', '*' )
        response.headers.add( 'Access-Control-Allow-Headers', 'Content-Type, Authorization' )
        response.headers.add( 'Access-Control-Allow-Methods', 'GET, PUT, POST, DELETE' )
        return response

    @app.errorhandler( RequestError )
    @app.errorhandler( LedgerStateError )
    @app.errorhandler( AuthInvalidTokenError )
    def handle_400( error ):  # pylint: disable=unused-variable
        """HTTP status 400 ( bad request ) error handler.

         :param error: Error message raised by exception.
         :return:
         """

        return build_error_response( handle_error_message( error ), 400 )

    @app.errorhandler( MarshmallowValidationError )
    def handle_400_validation( error ):  # pylint: disable=unused-variable
        """HTTP status 400 for payload fields a schema rejected: the field messages are returned.

         :param error: The marshmallow ValidationError.
         :return:
         """

        logging.info( 'Validation error: %s', error.messages )
        return build_error_response( 'Invalid field values', 400, errors=error.messages )

    @app.errorhandler( AuthInvalidCredentialsError )
    @app.errorhandler( AuthEmailNotVerifiedError )
    def handle_401( error ):  # pylint: disable=unused-variable
        """HTTP status 401 ( unauthorized ) error handler.

         :param error: Error message raised by exception.
         :return:
         """

        return build_error_response( handle_error_message( error ), 401 )

    @app.errorhandler( AuthRoleError )
    @app.errorhandler( AuthOwnershipError )
    def handle_403( error ):  # pylint: disable=unused-variable
        """HTTP status 403 ( forbidden ) error handler.

         :param error: Error message raised by exception.
         :return:
         """

        return build_error_response( handle_error_message( error ), 403 )

    @app.errorhandler( ModelNotFoundError )
    def handle_404( error ):  # pylint: disable=unused-variable
        """HTTP status 404 ( not found ) error handler.

        :param error: Error message raised by exception.
        :return:
        """

        return build_error_response( handle_error_message( error ), 404 )

    @app.errorhandler( LedgerConflictError )
    def handle_409( error ):  # pylint: disable=unused-variable
        """HTTP status 409 ( conflict ) error handler.

        :param error: Error message raised by exception.
        :return:
        """

        return build_error_response( handle_error_message( error ), 409 )

    @app.errorhandler( SQLAlchemyError )
    def handle_database_500( error ):  # pylint: disable=unused-variable
        """HTTP status 500 ( internal server error ) error handler for the database: the cause is logged, not returned.

        :param error: Error message raised by exception.
        :return:
        """

        logging.exception( handle_error_message( error ) )
        return build_error_response( DATABASE_ERROR_MESSAGE, 500 )

    @app.errorhandler( CriticalPathError )
    @app.errorhandler( Exception )
    def handle_500( error ):  # pylint: disable=unused-variable
        """HTTP status 500 ( internal server error ) error handler for everything else.

        Routing errors such as 404 and 405 keep their own status.

        :param error: Error message raised by exception.
        :return:
        """

        if isinstance( error, HTTPException ):
            return error
        logging.exception( handle_error_message( error ) )
        return build_error_response( INTERNAL_ERROR_MESSAGE, 500 )

    def handle_error_message( error ):
        """Used by error handlers for handling error and error.message.

        :param error: The error raised by the exception.
        :return: return the error message.
        """

        if hasattr( error, 'message' ):
            logging.info( error.message )
            return error.message
        logging.info( error )
        return str( error )

    return app


def build_error_response( message, status_code, errors=None ):
    """The error envelope: { success: false, message }, with the field errors when a schema rejected a payload."""

    payload = { 'success': False, 'message': message }
    if errors is not None:
        payload[ 'errors' ] = errors
    response = jsonify( payload )
    response.status_code = status_code
    return response


hopeconnect_app = create_app()  # pylint: disable=invalid-name

if __name__ != '__main__':
    gunicorn_logger = logging.getLogger( 'gunicorn.error' )  # pylint: disable=invalid-name
    hopeconnect_app.logger.handlers = gunicorn_logger.handlers
    hopeconnect_app.logger.setLevel( gunicorn_logger.level )

if __name__ == '__main__':
    hopeconnect_app.run( host="127.0.0.1", port=5000, debug=True )
