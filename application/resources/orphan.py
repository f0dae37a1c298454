"""Resource entry point for orphan endpoints."""
# pylint: disable=too-few-public-methods
# pylint: disable=no-self-use
from http import HTTPStatus

from flask import request
from flask_restful import Resource

from application.controllers.orphan import add_orphan_update
from application.controllers.orphan import create_orphan
from application.controllers.orphan import delete_orphan
from application.controllers.orphan import get_orphan_detail
from application.controllers.orphan import get_orphan_updates_query
from application.controllers.orphan import get_orphans_query
from application.controllers.orphan import update_orphan
from application.helpers.authorization import get_current_user
from application.helpers.authorization import requires_capability
from application.helpers.general_helper_functions import get_request_payload
from application.helpers.manage_paginate import get_page_information
from application.helpers.manage_paginate import paginate_query
from application.helpers.manage_paginate import transform_data
from application.schemas.orphan import OrphanSchema
from application.schemas.orphan import OrphanUpdateSchema


class Orphans( Resource ):
    """Flask-RESTful resource endpoints for OrphanModel."""

    def get( self ):
        """Endpoint to list orphans."""

        page = paginate_query( get_orphans_query( request.args ), get_page_information( request.args ) )
        return transform_data( page, OrphanSchema() ), HTTPStatus.OK

    @requires_capability( 'orphans', 'create' )
    def post( self ):
        """Endpoint to add an orphan."""

        orphan = create_orphan( get_request_payload( request ) )
        return { 'success': True, 'data': OrphanSchema().dump( orphan ) }, HTTPStatus.CREATED


class OrphanById( Resource ):
    """Flask-RESTful resource endpoints for OrphanModel by ID."""

    def get( self, orphan_id ):
        """Endpoint to retrieve an orphan with the latest updates."""

        return { 'success': True, 'data': get_orphan_detail( orphan_id ) }, HTTPStatus.OK

    @requires_capability( 'orphans', 'update' )
    def put( self, orphan_id ):
        """Endpoint to update an orphan."""

        orphan = update_orphan( orphan_id, get_request_payload( request ) )
        return { 'success': True, 'data': OrphanSchema().dump( orphan ) }, HTTPStatus.OK

    @requires_capability( 'orphans', 'delete' )
    def delete( self, orphan_id ):
        """Endpoint to delete an orphan."""

        delete_orphan( orphan_id )
        return { 'success': True, 'data': {} }, HTTPStatus.OK


class OrphanUpdates( Resource ):
    """Flask-RESTful resource endpoints for OrphanUpdateModel by orphan."""

    def get( self, orphan_id ):
        """Endpoint to list the updates on an orphan."""

        page = paginate_query( get_orphan_updates_query( orphan_id ), get_page_information( request.args ) )
        return transform_data( page, OrphanUpdateSchema() ), HTTPStatus.OK

    @requires_capability( 'orphan_updates', 'create' )
    def post( self, orphan_id ):
        """Endpoint to post an update on an orphan."""

        orphan_update = add_orphan_update( get_current_user(), orphan_id, get_request_payload( request ) )
        return { 'success': True, 'data': OrphanUpdateSchema().dump( orphan_update ) }, HTTPStatus.CREATED
