"""Controllers for Flask-RESTful resources: donations and their effect on campaign totals.

Creating a donation and changing its status are ledger operations. Each runs in one transaction, so the
donation row, its delivery for in-kind gifts and the campaign running total are written together or not at all.
Notifications and emails follow the commit and never undo it.
"""
import logging
from datetime import datetime
from datetime import timedelta

from sqlalchemy import func

from application.exceptions.exception_ledger import CampaignNotActiveError
from application.exceptions.exception_model import ModelCampaignNotFoundError
from application.exceptions.exception_model import ModelDonationNotFoundError
from application.exceptions.exception_model import ModelOrphanageNotFoundError
from application.exceptions.exception_model import ModelOrphanNotFoundError
from application.exceptions.exception_request import RequestInvalidStatusError
from application.flask_essentials import database
from application.helpers.authorization import ensure_owner_or_admin
from application.helpers.authorization import is_admin
from application.helpers.email import build_donation_received_email
from application.helpers.email import build_donation_status_email
from application.helpers.email import send_email_best_effort
from application.helpers.file_upload import RECEIPT_EXTENSIONS
from application.helpers.file_upload import save_upload
from application.helpers.general_helper_functions import format_amount
from application.helpers.general_helper_functions import get_model_or_raise
from application.helpers.general_helper_functions import parse_amount
from application.helpers.general_helper_functions import parse_date
from application.helpers.general_helper_functions import parse_int
from application.helpers.general_helper_functions import validate_choice
from application.helpers.general_helper_functions import validate_required_fields
from application.helpers.ledger import adjust_campaign_total
from application.helpers.ledger import ledger_transaction
from application.helpers.ledger import lock_row
from application.helpers.model_serialization import from_json
from application.helpers.notification import create_notification
from application.helpers.notification import notify_admins
from application.models.campaign import CampaignModel
from application.models.delivery import DeliveryStatusHistoryModel
from application.models.delivery import DeliveryTrackingModel
from application.models.donation import DONATION_CATEGORIES
from application.models.donation import DONATION_STATUSES
from application.models.donation import DONATION_TYPES
from application.models.donation import DonationModel
from application.models.orphan import OrphanModel
from application.models.orphanage import OrphanageModel
from application.schemas.donation import DonationSchema

REFERENCES = (
    ( 'orphan_id', OrphanModel, ModelOrphanNotFoundError ),
    ( 'orphanage_id', OrphanageModel, ModelOrphanageNotFoundError ),
    ( 'campaign_id', CampaignModel, ModelCampaignNotFoundError )
)


def get_donation( donation_id ):
    """The donation with the ID, or 404."""

    return get_model_or_raise( DonationModel, donation_id, ModelDonationNotFoundError )


def campaign_delta( old_status, new_status, amount ):
    """The change a donation status change makes to its campaign total.

    A rejected donation does not count. Entering rejected subtracts the amount and leaving it adds the amount
    back. Any other change, including rejecting a donation that is already rejected, changes nothing.

    :param str old_status: The current status.
    :param str new_status: The requested status.
    :param Decimal amount: The donation amount.
    :return: The signed amount to add to the campaign total.
    """

    if old_status != 'rejected' and new_status == 'rejected':
        return -amount
    if old_status == 'rejected' and new_status != 'rejected':
        return amount
    return 0


def create_donation( user, payload ):
    """Record a donation, its delivery when it is in kind, and its share of the campaign total.

    :param user: The authenticated donor.
    :param dict payload: amount, donation_type, category and optionally payment_method, transaction_id,
                         orphan_id, orphanage_id, campaign_id, description, is_anonymous, pickup_address and
                         delivery_address.
    :return: The donation.
    """

    validate_required_fields( payload, [ 'amount', 'donation_type', 'category' ] )
    amount = parse_amount( payload[ 'amount' ] )
    validate_choice( payload[ 'donation_type' ], DONATION_TYPES, 'donation_type' )
    validate_choice( payload[ 'category' ], DONATION_CATEGORIES, 'category' )

    donation_dict = dict( payload )
    donation_dict[ 'amount' ] = str( amount )
    donation_dict[ 'donor_id' ] = user.id
    for field, model, not_found_error in REFERENCES:
        if donation_dict.get( field ) in ( None, '' ):
            donation_dict[ field ] = None
            continue
        donation_dict[ field ] = parse_int( donation_dict[ field ], field )
        get_model_or_raise( model, donation_dict[ field ], not_found_error )
    donation_dict.pop( 'sponsorship_id', None )

    donation = from_json( DonationSchema(), donation_dict, create=True )
    donation.status = 'pending'

    with ledger_transaction():
        if donation.campaign_id:
            campaign = lock_row( CampaignModel, donation.campaign_id )
            if campaign.status != 'active':
                raise CampaignNotActiveError()

        database.session.add( donation )
        database.session.flush()

        if donation.category == 'in_kind':
            create_delivery_rows( donation, payload )

        if donation.campaign_id:
            adjust_campaign_total( donation.campaign_id, amount )

    logging.info( 'Donation %s of %s created by user %s.', donation.id, donation.amount, user.id )

    notify_admins(
        'New donation received',
        'A new {} donation of {} has been received.'.format( donation.category, donation.amount ),
        'donation',
        donation.id
    )
    send_email_best_effort( user.email, *build_donation_received_email( user, donation ) )
    return donation


def create_delivery_rows( donation, payload ):
    """Add the delivery of an in-kind donation and its first history row to the open transaction."""

    delivery_address = payload.get( 'delivery_address' )
    if not delivery_address and donation.orphanage_id:
        orphanage = OrphanageModel.query.filter_by( id=donation.orphanage_id ).one_or_none()
        delivery_address = orphanage.address if orphanage else None

    delivery = DeliveryTrackingModel(
        donation_id=donation.id,
        status='preparing',
        pickup_address=payload.get( 'pickup_address' ),
        delivery_address=delivery_address,
        notes=payload.get( 'delivery_notes' )
    )
    database.session.add( delivery )
    database.session.flush()
    database.session.add(
        DeliveryStatusHistoryModel( delivery_id=delivery.id, status='preparing', notes='Delivery created' )
    )
    return delivery


def update_donation_status( donation_id, payload ):
    """Change a donation's status and keep its campaign total in step.

    The row is locked while its status is read and written, so two concurrent rejections subtract once.

    :param int donation_id: The donation.
    :param dict payload: status.
    :return: The donation.
    """

    status = ( payload or {} ).get( 'status' )
    if status not in DONATION_STATUSES:
        raise RequestInvalidStatusError( DONATION_STATUSES )

    with ledger_transaction():
        donation = lock_row( DonationModel, donation_id )
        if not donation:
            raise ModelDonationNotFoundError()
        old_status = donation.status
        delta = campaign_delta( old_status, status, donation.amount )
        if delta and donation.campaign_id:
            adjust_campaign_total( donation.campaign_id, delta )
        donation.status = status

    if old_status == status:
        return donation

    logging.info( 'Donation %s status changed from %s to %s.', donation.id, old_status, status )
    create_notification(
        donation.donor_id,
        'Donation status updated',
        'Your donation #{} is now {}.'.format( donation.id, status ),
        'donation',
        donation.id
    )
    if donation.donor:
        send_email_best_effort( donation.donor.email, *build_donation_status_email( donation.donor, donation ) )
    return donation


def get_donations_query( user, args ):
    """Build the donation listing query: administrators see every donation, others only their own.

    :param user: The authenticated user.
    :param args: donorId ( administrators ), type, status, minAmount, maxAmount, startDate, endDate,
                 orphanId, orphanageId and campaignId.
    :return: A SQLAlchemy query, newest first.
    """

    query = DonationModel.query
    if not is_admin( user ):
        query = query.filter( DonationModel.donor_id == user.id )
    elif args.get( 'donorId' ):
        query = query.filter( DonationModel.donor_id == parse_int( args[ 'donorId' ], 'donorId' ) )

    if args.get( 'type' ):
        query = query.filter( DonationModel.donation_type == validate_choice( args[ 'type' ], DONATION_TYPES, 'type' ) )
    if args.get( 'status' ):
        query = query.filter( DonationModel.status == validate_choice( args[ 'status' ], DONATION_STATUSES, 'status' ) )
    if args.get( 'minAmount' ):
        query = query.filter( DonationModel.amount >= parse_amount( args[ 'minAmount' ], 'minAmount' ) )
    if args.get( 'maxAmount' ):
        query = query.filter( DonationModel.amount <= parse_amount( args[ 'maxAmount' ], 'maxAmount' ) )
    if args.get( 'startDate' ):
        start = parse_date( args[ 'startDate' ], 'startDate' )
        query = query.filter( DonationModel.created_at >= datetime.combine( start, datetime.min.time() ) )
    if args.get( 'endDate' ):
        end = parse_date( args[ 'endDate' ], 'endDate' ) + timedelta( days=1 )
        query = query.filter( DonationModel.created_at < datetime.combine( end, datetime.min.time() ) )
    for arg, column in (
            ( 'orphanId', DonationModel.orphan_id ),
            ( 'orphanageId', DonationModel.orphanage_id ),
            ( 'campaignId', DonationModel.campaign_id )
    ):
        if args.get( arg ):
            query = query.filter( column == parse_int( args[ arg ], arg ) )
    return query.order_by( DonationModel.created_at.desc(), DonationModel.id.desc() )


def get_donation_for_user( user, donation_id ):
    """A donation its donor or an administrator may read."""

    donation = get_donation( donation_id )
    ensure_owner_or_admin( user, donation.donor_id )
    return donation


def upload_receipt( user, donation_id, file_storage ):
    """Attach a receipt image or PDF to a donation."""

    donation = get_donation_for_user( user, donation_id )
    receipt_path = save_upload( file_storage, 'receipts', RECEIPT_EXTENSIONS )
    with ledger_transaction():
        donation.receipt_image = receipt_path
    return donation


def get_donation_stats():
    """Donation counts and amounts by status, category and type for the administrator dashboard."""

    def group_by( column, choices ):
        groups = { choice: { 'count': 0, 'amount': '0.00' } for choice in choices }
        rows = database.session.query( column, func.count( DonationModel.id ), func.sum( DonationModel.amount ) ) \
            .group_by( column ) \
            .all()
        for value, count, amount in rows:
            groups[ value ] = { 'count': count, 'amount': format_amount( amount ) }
        return groups

    total_amount = database.session.query( func.sum( DonationModel.amount ) ) \
        .filter( DonationModel.status != 'rejected' ) \
        .scalar()
    return {
        'total_donations': DonationModel.query.count(),
        'total_amount': format_amount( total_amount ),
        'by_status': group_by( DonationModel.status, DONATION_STATUSES ),
        'by_category': group_by( DonationModel.category, DONATION_CATEGORIES ),
        'by_type': group_by( DonationModel.donation_type, DONATION_TYPES )
    }
