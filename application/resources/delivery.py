"""Resource entry point for delivery tracking endpoints."""
# pylint: disable=too-few-public-methods
# pylint: disable=no-self-use
from http import HTTPStatus

from flask import request
from flask_restful import Resource

from application.controllers.delivery import create_delivery
from application.controllers.delivery import get_deliveries_query
from application.controllers.delivery import get_delivery_for_user
from application.controllers.delivery import update_delivery
from application.helpers.authorization import get_current_user
from application.helpers.authorization import requires_capability
from application.helpers.general_helper_functions import get_request_payload
from application.helpers.manage_paginate import get_page_information
from application.helpers.manage_paginate import paginate_query
from application.helpers.manage_paginate import transform_data
from application.schemas.delivery import DeliveryDetailSchema
from application.schemas.delivery import DeliverySchema


class Deliveries( Resource ):
    """Flask-RESTful resource endpoints for DeliveryTrackingModel."""

    @requires_capability( 'deliveries', 'read' )
    def get( self ):
        """Endpoint to list deliveries: all of them for an administrator, otherwise those of the user's gifts."""

        query = get_deliveries_query( get_current_user(), request.args )
        page = paginate_query( query, get_page_information( request.args ) )
        return transform_data( page, DeliverySchema() ), HTTPStatus.OK

    @requires_capability( 'deliveries', 'create' )
    def post( self ):
        """Endpoint to start tracking the delivery of an in-kind donation."""

        delivery = create_delivery( get_request_payload( request ) )
        return { 'success': True, 'data': DeliveryDetailSchema().dump( delivery ) }, HTTPStatus.CREATED


class DeliveryById( Resource ):
    """Flask-RESTful resource endpoints for DeliveryTrackingModel by ID."""

    @requires_capability( 'deliveries', 'read' )
    def get( self, delivery_id ):
        """Endpoint to retrieve a delivery with its status history."""

        delivery = get_delivery_for_user( get_current_user(), delivery_id )
        return { 'success': True, 'data': DeliveryDetailSchema().dump( delivery ) }, HTTPStatus.OK

    @requires_capability( 'deliveries', 'update' )
    def put( self, delivery_id ):
        """Endpoint to update a delivery and move it through its states."""

        delivery = update_delivery( delivery_id, get_request_payload( request ) )
        return { 'success': True, 'data': DeliveryDetailSchema().dump( delivery ) }, HTTPStatus.OK
