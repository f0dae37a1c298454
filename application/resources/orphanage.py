"""Resource entry point for orphanage and review endpoints."""
# pylint: disable=too-few-public-methods
# pylint: disable=no-self-use
from http import HTTPStatus

from flask import request
from flask_restful import Resource

from application.controllers.orphanage import add_review
from application.controllers.orphanage import create_orphanage
from application.controllers.orphanage import delete_review
from application.controllers.orphanage import get_orphanage
from application.controllers.orphanage import get_orphanage_orphans_query
from application.controllers.orphanage import get_orphanages_query
from application.controllers.orphanage import get_rating_summary
from application.controllers.orphanage import get_reviews_query
from application.controllers.orphanage import update_orphanage
from application.helpers.authorization import get_current_user
from application.helpers.authorization import requires_capability
from application.helpers.general_helper_functions import get_request_payload
from application.helpers.manage_paginate import get_page_information
from application.helpers.manage_paginate import paginate_query
from application.helpers.manage_paginate import transform_data
from application.schemas.orphan import OrphanSchema
from application.schemas.orphanage import OrphanageDetailSchema
from application.schemas.orphanage import OrphanageSchema
from application.schemas.orphanage import ReviewSchema


class Orphanages( Resource ):
    """Flask-RESTful resource endpoints for OrphanageModel."""

    def get( self ):
        """Endpoint to list orphanages."""

        page = paginate_query( get_orphanages_query( request.args ), get_page_information( request.args ) )
        return transform_data( page, OrphanageSchema() ), HTTPStatus.OK

    @requires_capability( 'orphanages', 'create' )
    def post( self ):
        """Endpoint to create an orphanage."""

        orphanage = create_orphanage( get_current_user(), get_request_payload( request ) )
        return { 'success': True, 'data': OrphanageSchema().dump( orphanage ) }, HTTPStatus.CREATED


class OrphanageById( Resource ):
    """Flask-RESTful resource endpoints for OrphanageModel by ID."""

    def get( self, orphanage_id ):
        """Endpoint to retrieve an orphanage with its rating."""

        orphanage = get_orphanage( orphanage_id )
        return { 'success': True, 'data': OrphanageDetailSchema().dump( orphanage ) }, HTTPStatus.OK

    @requires_capability( 'orphanages', 'update' )
    def put( self, orphanage_id ):
        """Endpoint to update an orphanage."""

        orphanage = update_orphanage( get_current_user(), orphanage_id, get_request_payload( request ) )
        return { 'success': True, 'data': OrphanageSchema().dump( orphanage ) }, HTTPStatus.OK


class OrphanageOrphans( Resource ):
    """Flask-RESTful resource endpoint for the orphans of an orphanage."""

    def get( self, orphanage_id ):
        """Endpoint to list the orphans of an orphanage."""

        page = paginate_query( get_orphanage_orphans_query( orphanage_id ), get_page_information( request.args ) )
        return transform_data( page, OrphanSchema() ), HTTPStatus.OK


class OrphanageReviews( Resource ):
    """Flask-RESTful resource endpoints for ReviewModel by orphanage."""

    def get( self, orphanage_id ):
        """Endpoint to list reviews with the average rating and the rating distribution."""

        page = paginate_query( get_reviews_query( orphanage_id ), get_page_information( request.args ) )
        result = transform_data( page, ReviewSchema() )
        result.update( get_rating_summary( orphanage_id ) )
        return result, HTTPStatus.OK

    @requires_capability( 'reviews', 'create' )
    def post( self, orphanage_id ):
        """Endpoint to review an orphanage."""

        review = add_review( get_current_user(), orphanage_id, get_request_payload( request ) )
        return { 'success': True, 'data': ReviewSchema().dump( review ) }, HTTPStatus.CREATED


class OrphanageReviewById( Resource ):
    """Flask-RESTful resource endpoint for one review."""

    @requires_capability( 'reviews', 'delete' )
    def delete( self, orphanage_id, review_id ):
        """Endpoint to delete a review."""

        delete_review( get_current_user(), orphanage_id, review_id )
        return { 'success': True, 'data': {} }, HTTPStatus.OK
