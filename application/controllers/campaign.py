"""Controllers for Flask-RESTful resources: emergency campaigns.

A campaign's current_amount is never written here: it moves only with the donations made against it, through
the ledger helpers.
"""
import logging

from flask import current_app
from sqlalchemy import func

from application.exceptions.exception_model import ModelCampaignNotFoundError
from application.exceptions.exception_model import ModelOrphanageNotFoundError
from application.exceptions.exception_request import RequestImproperFieldError
from application.flask_essentials import database
from application.helpers.authorization import ensure_owner_or_admin
from application.helpers.email import build_campaign_announcement_email
from application.helpers.email import send_email_best_effort
from application.helpers.general_helper_functions import format_amount
from application.helpers.general_helper_functions import get_model_or_raise
from application.helpers.general_helper_functions import parse_amount
from application.helpers.general_helper_functions import parse_date
from application.helpers.general_helper_functions import parse_int
from application.helpers.general_helper_functions import validate_choice
from application.helpers.general_helper_functions import validate_required_fields
from application.helpers.ledger import ledger_transaction
from application.helpers.model_serialization import from_json
from application.helpers.notification import create_notification
from application.models.campaign import CAMPAIGN_STATUSES
from application.models.campaign import CampaignModel
from application.models.donation import DonationModel
from application.models.orphanage import OrphanageModel
from application.models.user import UserModel
from application.schemas.campaign import CampaignSchema

UPDATABLE_FIELDS = ( 'title', 'description', 'target_amount', 'end_date', 'status' )


def get_campaigns_query( args ):
    """Build the campaign listing query from the query string filters.

    :param args: status, orphanageId, minTarget, maxTarget, startDate and endDate.
    :return: A SQLAlchemy query, newest first.
    """

    query = CampaignModel.query
    if args.get( 'status' ):
        query = query.filter( CampaignModel.status == validate_choice( args[ 'status' ], CAMPAIGN_STATUSES, 'status' ) )
    if args.get( 'orphanageId' ):
        query = query.filter( CampaignModel.orphanage_id == parse_int( args[ 'orphanageId' ], 'orphanageId' ) )
    if args.get( 'minTarget' ):
        query = query.filter( CampaignModel.target_amount >= parse_amount( args[ 'minTarget' ], 'minTarget' ) )
    if args.get( 'maxTarget' ):
        query = query.filter( CampaignModel.target_amount <= parse_amount( args[ 'maxTarget' ], 'maxTarget' ) )
    if args.get( 'startDate' ):
        query = query.filter( CampaignModel.start_date >= parse_date( args[ 'startDate' ], 'startDate' ) )
    if args.get( 'endDate' ):
        query = query.filter( CampaignModel.end_date <= parse_date( args[ 'endDate' ], 'endDate' ) )
    return query.order_by( CampaignModel.created_at.desc(), CampaignModel.id.desc() )


def get_campaign( campaign_id ):
    """The campaign with the ID, or 404."""

    return get_model_or_raise( CampaignModel, campaign_id, ModelCampaignNotFoundError )


def validate_campaign_dates( start_date, end_date ):
    """The end date may not fall before the start date."""

    if start_date and end_date and end_date < start_date:
        raise RequestImproperFieldError( 'end_date must be on or after start_date' )


def create_campaign( user, payload ):
    """Create an active campaign with nothing raised yet, then announce it to past donors.

    :param user: The authenticated staff member.
    :param dict payload: title, description, target_amount, start_date, end_date and orphanage_id.
    :return: The campaign.
    """

    validate_required_fields( payload, [ 'title', 'description', 'target_amount', 'start_date', 'end_date' ] )
    campaign_dict = dict( payload )
    campaign_dict[ 'target_amount' ] = str( parse_amount( payload[ 'target_amount' ], 'target_amount' ) )
    validate_campaign_dates(
        parse_date( payload[ 'start_date' ], 'start_date' ), parse_date( payload[ 'end_date' ], 'end_date' )
    )
    if payload.get( 'orphanage_id' ) not in ( None, '' ):
        get_model_or_raise(
            OrphanageModel, parse_int( payload[ 'orphanage_id' ], 'orphanage_id' ), ModelOrphanageNotFoundError
        )
    campaign_dict[ 'created_by' ] = user.id
    campaign_dict[ 'status' ] = 'active'

    campaign = from_json( CampaignSchema(), campaign_dict, create=True )
    with ledger_transaction():
        database.session.add( campaign )
    logging.info( 'Campaign %s created by user %s.', campaign.id, user.id )

    announce_campaign( campaign )
    return campaign


def announce_campaign( campaign ):
    """Notify and email the donors with completed donations, up to the configured limit.

    :return: The number of donors told.
    """

    limit = current_app.config.get( 'CAMPAIGN_ANNOUNCEMENT_LIMIT', 100 )
    donor_ids = database.session.query( DonationModel.donor_id ) \
        .filter( DonationModel.status == 'completed' ) \
        .distinct() \
        .order_by( DonationModel.donor_id ) \
        .limit( limit ) \
        .all()

    told = 0
    for ( donor_id, ) in donor_ids:
        donor = UserModel.query.filter_by( id=donor_id ).one_or_none()
        if not donor:
            continue
        create_notification(
            donor.id,
            'New Emergency Campaign',
            'A new emergency campaign "{}" has been launched.'.format( campaign.title ),
            'campaign',
            campaign.id
        )
        send_email_best_effort( donor.email, *build_campaign_announcement_email( donor, campaign ) )
        told += 1
    return told


def update_campaign( user, campaign_id, payload ):
    """Update a campaign: its creator or an administrator.

    :param user: The authenticated staff member.
    :param int campaign_id: The campaign.
    :param dict payload: Any of title, description, target_amount, end_date and status.
    :return: The campaign.
    """

    campaign = get_campaign( campaign_id )
    ensure_owner_or_admin( user, campaign.created_by )

    payload = payload or {}
    campaign_dict = { key: payload[ key ] for key in UPDATABLE_FIELDS if key in payload }
    if 'target_amount' in campaign_dict:
        campaign_dict[ 'target_amount' ] = str( parse_amount( campaign_dict[ 'target_amount' ], 'target_amount' ) )
    if 'end_date' in campaign_dict:
        validate_campaign_dates( campaign.start_date, parse_date( campaign_dict[ 'end_date' ], 'end_date' ) )
    if 'status' in campaign_dict:
        validate_choice( campaign_dict[ 'status' ], CAMPAIGN_STATUSES, 'status' )

    with ledger_transaction():
        campaign = from_json( CampaignSchema(), campaign_dict, create=False, instance=campaign )
    return campaign


def get_campaign_donations_query( campaign_id ):
    """The donations made against a campaign, newest first."""

    get_campaign( campaign_id )
    return DonationModel.query.filter_by( campaign_id=campaign_id ) \
        .order_by( DonationModel.created_at.desc(), DonationModel.id.desc() )


def get_campaign_stats():
    """Campaign counts and amounts for the administrator dashboard."""

    by_status = {
        status: { 'count': 0, 'target_amount': '0.00', 'current_amount': '0.00' } for status in CAMPAIGN_STATUSES
    }
    rows = database.session.query(
        CampaignModel.status,
        func.count( CampaignModel.id ),
        func.sum( CampaignModel.target_amount ),
        func.sum( CampaignModel.current_amount )
    ).group_by( CampaignModel.status ).all()

    total_campaigns = 0
    for status, count, target_amount, current_amount in rows:
        by_status[ status ] = {
            'count': count,
            'target_amount': format_amount( target_amount ),
            'current_amount': format_amount( current_amount )
        }
        total_campaigns += count

    return {
        'total_campaigns': total_campaigns,
        'total_raised': format_amount(
            database.session.query( func.sum( CampaignModel.current_amount ) ).scalar()
        ),
        'by_status': by_status
    }