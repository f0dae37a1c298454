"""Resource entry point for campaign endpoints."""
# pylint: disable=too-few-public-methods
# pylint: disable=no-self-use
from http import HTTPStatus

from flask import request
from flask_restful import Resource

from application.controllers.campaign import create_campaign
from application.controllers.campaign import get_campaign
from application.controllers.campaign import get_campaign_donations_query
from application.controllers.campaign import get_campaign_stats
from application.controllers.campaign import get_campaigns_query
from application.controllers.campaign import update_campaign
from application.helpers.authorization import get_current_user
from application.helpers.authorization import requires_capability
from application.helpers.general_helper_functions import get_request_payload
from application.helpers.manage_paginate import get_page_information
from application.helpers.manage_paginate import paginate_query
from application.helpers.manage_paginate import transform_data
from application.schemas.campaign import CampaignSchema
from application.schemas.donation import PublicDonationSchema


class Campaigns( Resource ):
    """Flask-RESTful resource endpoints for CampaignModel."""

    def get( self ):
        """Endpoint to list campaigns with their progress."""

        page = paginate_query( get_campaigns_query( request.args ), get_page_information( request.args ) )
        return transform_data( page, CampaignSchema() ), HTTPStatus.OK

    @requires_capability( 'campaigns', 'create' )
    def post( self ):
        """Endpoint to create a campaign."""

        campaign = create_campaign( get_current_user(), get_request_payload( request ) )
        return { 'success': True, 'data': CampaignSchema().dump( campaign ) }, HTTPStatus.CREATED


class CampaignById( Resource ):
    """Flask-RESTful resource endpoints for CampaignModel by ID."""

    def get( self, campaign_id ):
        """Endpoint to retrieve a campaign by its ID."""

        return { 'success': True, 'data': CampaignSchema().dump( get_campaign( campaign_id ) ) }, HTTPStatus.OK

    @requires_capability( 'campaigns', 'update' )
    def put( self, campaign_id ):
        """Endpoint to update a campaign."""

        campaign = update_campaign( get_current_user(), campaign_id, get_request_payload( request ) )
        return { 'success': True, 'data': CampaignSchema().dump( campaign ) }, HTTPStatus.OK


class CampaignDonations( Resource ):
    """Flask-RESTful resource endpoint for the donations to a campaign."""

    def get( self, campaign_id ):
        """Endpoint to list a campaign's donations, anonymous donors masked."""

        page = paginate_query( get_campaign_donations_query( campaign_id ), get_page_information( request.args ) )
        return transform_data( page, PublicDonationSchema() ), HTTPStatus.OK


class CampaignStats( Resource ):
    """Flask-RESTful resource endpoint for campaign statistics."""

    @requires_capability( 'campaigns', 'stats' )
    def get( self ):
        """Endpoint to retrieve campaign statistics."""

        return { 'success': True, 'data': get_campaign_stats() }, HTTPStatus.OK
