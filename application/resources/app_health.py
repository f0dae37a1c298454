"""Resources entry point to test the health of the application."""
# pylint: disable=too-few-public-methods
# pylint: disable=no-self-use
from http import HTTPStatus

from flask_restful import Resource

from application.controllers.app_health import heartbeat


class Heartbeat( Resource ):
    """Flask-RESTful resource endpoint to test the heartbeat of the application."""

    def get( self ):
        """Endpoint to to see if the application is running."""

        if heartbeat():
            return { 'success': True, 'message': 'HopeConnect API is running' }, HTTPStatus.OK

        return { 'success': False }, HTTPStatus.INTERNAL_SERVER_ERROR
