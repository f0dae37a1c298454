"""Resource entry point for donation endpoints."""
# pylint: disable=too-few-public-methods
# pylint: disable=no-self-use
from http import HTTPStatus

from flask import request
from flask_restful import Resource

from application.controllers.donation import create_donation
from application.controllers.donation import get_donation_for_user
from application.controllers.donation import get_donation_stats
from application.controllers.donation import get_donations_query
from application.controllers.donation import update_donation_status
from application.controllers.donation import upload_receipt
from application.helpers.authorization import get_current_user
from application.helpers.authorization import requires_capability
from application.helpers.general_helper_functions import get_request_payload
from application.helpers.manage_paginate import get_page_information
from application.helpers.manage_paginate import paginate_query
from application.helpers.manage_paginate import transform_data
from application.schemas.donation import DonationSchema


class Donations( Resource ):
    """Flask-RESTful resource endpoints for DonationModel."""

    @requires_capability( 'donations', 'read' )
    def get( self ):
        """Endpoint to list donations: all of them for an administrator, otherwise the user's own."""

        query = get_donations_query( get_current_user(), request.args )
        page = paginate_query( query, get_page_information( request.args ) )
        return transform_data( page, DonationSchema() ), HTTPStatus.OK

    @requires_capability( 'donations', 'create' )
    def post( self ):
        """Endpoint to make a donation."""

        donation = create_donation( get_current_user(), get_request_payload( request ) )
        return { 'success': True, 'data': DonationSchema().dump( donation ) }, HTTPStatus.CREATED


class DonationById( Resource ):
    """Flask-RESTful resource endpoint for DonationModel by ID."""

    @requires_capability( 'donations', 'read' )
    def get( self, donation_id ):
        """Endpoint to retrieve a donation."""

        donation = get_donation_for_user( get_current_user(), donation_id )
        return { 'success': True, 'data': DonationSchema().dump( donation ) }, HTTPStatus.OK


class DonationStatus( Resource ):
    """Flask-RESTful resource endpoint to change the status of a donation."""

    @requires_capability( 'donations', 'update_status' )
    def put( self, donation_id ):
        """Endpoint to verify, complete or reject a donation."""

        donation = update_donation_status( donation_id, get_request_payload( request ) )
        return { 'success': True, 'data': DonationSchema().dump( donation ) }, HTTPStatus.OK


class DonationReceipt( Resource ):
    """Flask-RESTful resource endpoint to upload a donation receipt."""

    @requires_capability( 'donations', 'upload_receipt' )
    def put( self, donation_id ):
        """Endpoint to attach a receipt: multipart field receipt_image."""

        donation = upload_receipt( get_current_user(), donation_id, request.files.get( 'receipt_image' ) )
        return { 'success': True, 'data': DonationSchema().dump( donation ) }, HTTPStatus.OK


class DonationStats( Resource ):
    """Flask-RESTful resource endpoint for donation statistics."""

    @requires_capability( 'donations', 'stats' )
    def get( self ):
        """Endpoint to retrieve donation statistics."""

        return { 'success': True, 'data': get_donation_stats() }, HTTPStatus.OK
