"""Resource entry point for sponsorship endpoints."""
# pylint: disable=too-few-public-methods
# pylint: disable=no-self-use
from http import HTTPStatus

from flask import request
from flask_restful import Resource

from application.controllers.sponsorship import create_sponsorship
from application.controllers.sponsorship import get_sponsorship_for_user
from application.controllers.sponsorship import get_sponsorship_stats
from application.controllers.sponsorship import get_sponsorships_query
from application.controllers.sponsorship import process_payment
from application.controllers.sponsorship import update_sponsorship_status
from application.helpers.authorization import get_current_user
from application.helpers.authorization import requires_capability
from application.helpers.general_helper_functions import get_request_payload
from application.helpers.manage_paginate import get_page_information
from application.helpers.manage_paginate import paginate_query
from application.helpers.manage_paginate import transform_data
from application.schemas.donation import DonationSchema
from application.schemas.sponsorship import SponsorshipSchema


class Sponsorships( Resource ):
    """Flask-RESTful resource endpoints for SponsorshipModel."""

    @requires_capability( 'sponsorships', 'read' )
    def get( self ):
        """Endpoint to list sponsorships: all of them for an administrator, otherwise the user's own."""

        query = get_sponsorships_query( get_current_user(), request.args )
        page = paginate_query( query, get_page_information( request.args ) )
        return transform_data( page, SponsorshipSchema() ), HTTPStatus.OK

    @requires_capability( 'sponsorships', 'create' )
    def post( self ):
        """Endpoint to sponsor an orphan."""

        sponsorship = create_sponsorship( get_current_user(), get_request_payload( request ) )
        return { 'success': True, 'data': SponsorshipSchema().dump( sponsorship ) }, HTTPStatus.CREATED


class SponsorshipById( Resource ):
    """Flask-RESTful resource endpoint for SponsorshipModel by ID."""

    @requires_capability( 'sponsorships', 'read' )
    def get( self, sponsorship_id ):
        """Endpoint to retrieve a sponsorship."""

        sponsorship = get_sponsorship_for_user( get_current_user(), sponsorship_id )
        return { 'success': True, 'data': SponsorshipSchema().dump( sponsorship ) }, HTTPStatus.OK


class SponsorshipStatus( Resource ):
    """Flask-RESTful resource endpoint to pause, resume or terminate a sponsorship."""

    @requires_capability( 'sponsorships', 'update_status' )
    def put( self, sponsorship_id ):
        """Endpoint to change the status of a sponsorship."""

        sponsorship = update_sponsorship_status( get_current_user(), sponsorship_id, get_request_payload( request ) )
        return { 'success': True, 'data': SponsorshipSchema().dump( sponsorship ) }, HTTPStatus.OK


class SponsorshipPayment( Resource ):
    """Flask-RESTful resource endpoint to process a sponsorship payment."""

    @requires_capability( 'sponsorships', 'payment' )
    def post( self, sponsorship_id ):
        """Endpoint to record the payment that is due."""

        sponsorship, donation = process_payment( get_current_user(), sponsorship_id, get_request_payload( request ) )
        result = {
            'success': True,
            'data': {
                'sponsorship': SponsorshipSchema().dump( sponsorship ),
                'donation': DonationSchema().dump( donation )
            }
        }
        return result, HTTPStatus.OK


class SponsorshipStats( Resource ):
    """Flask-RESTful resource endpoint for sponsorship statistics."""

    @requires_capability( 'sponsorships', 'stats' )
    def get( self ):
        """Endpoint to retrieve sponsorship statistics."""

        return { 'success': True, 'data': get_sponsorship_stats() }, HTTPStatus.OK
