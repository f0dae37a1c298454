"""Resource entry point for volunteer opportunity and application endpoints."""
# pylint: disable=too-few-public-methods
# pylint: disable=no-self-use
from http import HTTPStatus

from flask import request
from flask_restful import Resource

from application.controllers.volunteer import apply_for_opportunity
from application.controllers.volunteer import create_opportunity
from application.controllers.volunteer import delete_opportunity
from application.controllers.volunteer import get_applications_query
from application.controllers.volunteer import get_opportunities_query
from application.controllers.volunteer import get_opportunity
from application.controllers.volunteer import get_volunteer_stats
from application.controllers.volunteer import update_application_status
from application.controllers.volunteer import update_opportunity
from application.controllers.volunteer import upload_resume
from application.helpers.authorization import get_current_user
from application.helpers.authorization import requires_capability
from application.helpers.general_helper_functions import get_request_payload
from application.helpers.manage_paginate import get_page_information
from application.helpers.manage_paginate import paginate_query
from application.helpers.manage_paginate import transform_data
from application.schemas.volunteer import VolunteerApplicationSchema
from application.schemas.volunteer import VolunteerOpportunitySchema


class VolunteerOpportunities( Resource ):
    """Flask-RESTful resource endpoints for VolunteerOpportunityModel."""

    def get( self ):
        """Endpoint to list opportunities, open ones unless a status is given."""

        page = paginate_query( get_opportunities_query( request.args ), get_page_information( request.args ) )
        return transform_data( page, VolunteerOpportunitySchema() ), HTTPStatus.OK

    @requires_capability( 'opportunities', 'create' )
    def post( self ):
        """Endpoint to create an opportunity."""

        opportunity = create_opportunity( get_current_user(), get_request_payload( request ) )
        return { 'success': True, 'data': VolunteerOpportunitySchema().dump( opportunity ) }, HTTPStatus.CREATED


class VolunteerOpportunityById( Resource ):
    """Flask-RESTful resource endpoints for VolunteerOpportunityModel by ID."""

    def get( self, opportunity_id ):
        """Endpoint to retrieve an opportunity."""

        opportunity = get_opportunity( opportunity_id )
        return { 'success': True, 'data': VolunteerOpportunitySchema().dump( opportunity ) }, HTTPStatus.OK

    @requires_capability( 'opportunities', 'update' )
    def put( self, opportunity_id ):
        """Endpoint to update an opportunity."""

        opportunity = update_opportunity( opportunity_id, get_request_payload( request ) )
        return { 'success': True, 'data': VolunteerOpportunitySchema().dump( opportunity ) }, HTTPStatus.OK

    @requires_capability( 'opportunities', 'delete' )
    def delete( self, opportunity_id ):
        """Endpoint to delete an opportunity and its applications."""

        delete_opportunity( opportunity_id )
        return { 'success': True, 'data': {} }, HTTPStatus.OK


class VolunteerApply( Resource ):
    """Flask-RESTful resource endpoint to apply for an opportunity."""

    @requires_capability( 'applications', 'create' )
    def post( self, opportunity_id ):
        """Endpoint to apply for an opportunity."""

        application = apply_for_opportunity( get_current_user(), opportunity_id, get_request_payload( request ) )
        return { 'success': True, 'data': VolunteerApplicationSchema().dump( application ) }, HTTPStatus.CREATED


class VolunteerApplications( Resource ):
    """Flask-RESTful resource endpoint for the applications to an opportunity."""

    @requires_capability( 'applications', 'list' )
    def get( self, opportunity_id ):
        """Endpoint to list the applications to an opportunity."""

        page = paginate_query( get_applications_query( opportunity_id ), get_page_information( request.args ) )
        return transform_data( page, VolunteerApplicationSchema() ), HTTPStatus.OK


class VolunteerApplicationStatus( Resource ):
    """Flask-RESTful resource endpoint to decide on an application."""

    @requires_capability( 'applications', 'update_status' )
    def put( self, application_id ):
        """Endpoint to approve, reject or complete an application."""

        application = update_application_status( application_id, get_request_payload( request ) )
        return { 'success': True, 'data': VolunteerApplicationSchema().dump( application ) }, HTTPStatus.OK


class VolunteerApplicationResume( Resource ):
    """Flask-RESTful resource endpoint to upload a resume."""

    @requires_capability( 'applications', 'upload_resume' )
    def put( self, application_id ):
        """Endpoint to attach a resume: multipart field resume."""

        application = upload_resume( get_current_user(), application_id, request.files.get( 'resume' ) )
        return { 'success': True, 'data': VolunteerApplicationSchema().dump( application ) }, HTTPStatus.OK


class VolunteerStats( Resource ):
    """Flask-RESTful resource endpoint for volunteer statistics."""

    @requires_capability( 'volunteers', 'stats' )
    def get( self ):
        """Endpoint to retrieve volunteer statistics."""

        return { 'success': True, 'data': get_volunteer_stats() }, HTTPStatus.OK
