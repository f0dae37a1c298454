"""Controllers for Flask-RESTful resources: sponsorships, their payments and the orphan's sponsored flag.

An orphan has at most one active sponsorship. Every operation that can change that, creation, a status change
or a payment, runs in one transaction with the sponsorship or orphan row locked.
"""
import logging
from datetime import date

from sqlalchemy import func

from application.exceptions.exception_ledger import OrphanAlreadySponsoredError
from application.exceptions.exception_ledger import SponsorshipNotActiveError
from application.exceptions.exception_ledger import SponsorshipTransitionError
from application.exceptions.exception_model import ModelOrphanNotFoundError
from application.exceptions.exception_model import ModelSponsorshipNotFoundError
from application.exceptions.exception_request import RequestImproperFieldError
from application.exceptions.exception_request import RequestInvalidStatusError
from application.flask_essentials import database
from application.helpers.authorization import ensure_owner_or_admin
from application.helpers.authorization import is_admin
from application.helpers.general_helper_functions import add_payment_period
from application.helpers.general_helper_functions import format_amount
from application.helpers.general_helper_functions import get_model_or_raise
from application.helpers.general_helper_functions import parse_amount
from application.helpers.general_helper_functions import parse_date
from application.helpers.general_helper_functions import parse_int
from application.helpers.general_helper_functions import validate_choice
from application.helpers.general_helper_functions import validate_required_fields
from application.helpers.ledger import ledger_transaction
from application.helpers.ledger import lock_row
from application.helpers.ledger import refresh_orphan_sponsored_flag
from application.helpers.notification import create_notification
from application.helpers.notification import notify_admins
from application.models.donation import DonationModel
from application.models.orphan import OrphanModel
from application.models.sponsorship import PAYMENT_FREQUENCIES
from application.models.sponsorship import SPONSORSHIP_STATUSES
from application.models.sponsorship import SponsorshipModel

# Allowed moves: terminated is final.
SPONSORSHIP_TRANSITIONS = {
    'active': ( 'paused', 'terminated' ),
    'paused': ( 'active', 'terminated' ),
    'terminated': ()
}


def get_sponsorship( sponsorship_id ):
    """The sponsorship with the ID, or 404."""

    return get_model_or_raise( SponsorshipModel, sponsorship_id, ModelSponsorshipNotFoundError )


def build_payment_donation( sponsorship, orphan, description, payment_method=None ):
    """The completed donation that records one sponsorship payment."""

    return DonationModel(
        donor_id=sponsorship.sponsor_id,
        amount=sponsorship.monthly_amount,
        donation_type='general',
        category='monetary',
        status='completed',
        payment_method=payment_method,
        orphan_id=orphan.id,
        orphanage_id=orphan.orphanage_id,
        sponsorship_id=sponsorship.id,
        description=description
    )


def create_sponsorship( user, payload, today=None ):
    """Start sponsoring an orphan: the first payment is taken at once.

    :param user: The authenticated sponsor.
    :param dict payload: orphan_id, monthly_amount and optionally payment_frequency, start_date, end_date and
                         payment_method.
    :param date today: The default start date.
    :return: The sponsorship.
    """

    validate_required_fields( payload, [ 'orphan_id', 'monthly_amount' ] )
    orphan_id = parse_int( payload[ 'orphan_id' ], 'orphan_id' )
    monthly_amount = parse_amount( payload[ 'monthly_amount' ], 'monthly_amount' )
    payment_frequency = validate_choice(
        payload.get( 'payment_frequency' ) or 'monthly', PAYMENT_FREQUENCIES, 'payment_frequency'
    )
    start_date = parse_date( payload.get( 'start_date' ), 'start_date' ) or today or date.today()
    end_date = parse_date( payload.get( 'end_date' ), 'end_date' )
    if end_date and end_date < start_date:
        raise RequestImproperFieldError( 'end_date must be on or after start_date' )

    with ledger_transaction():
        orphan = lock_row( OrphanModel, orphan_id )
        if not orphan:
            raise ModelOrphanNotFoundError()
        if SponsorshipModel.count_active( orphan.id ):
            raise OrphanAlreadySponsoredError()

        sponsorship = SponsorshipModel(
            sponsor_id=user.id,
            orphan_id=orphan.id,
            monthly_amount=monthly_amount,
            start_date=start_date,
            end_date=end_date,
            payment_frequency=payment_frequency,
            status='active',
            last_payment_date=start_date,
            next_payment_date=add_payment_period( start_date, payment_frequency ),
            total_paid=monthly_amount,
            payment_count=1
        )
        database.session.add( sponsorship )
        database.session.flush()

        orphan.is_sponsored = True
        database.session.add(
            build_payment_donation(
                sponsorship, orphan, 'First sponsorship payment', payload.get( 'payment_method' )
            )
        )

    logging.info( 'Sponsorship %s of orphan %s created by user %s.', sponsorship.id, orphan_id, user.id )
    notify_admins(
        'New sponsorship',
        '{} is now sponsoring {}.'.format( user.full_name, orphan.full_name ),
        'sponsorship',
        sponsorship.id
    )
    return sponsorship


def update_sponsorship_status( user, sponsorship_id, payload, today=None ):
    """Pause, resume or terminate a sponsorship: its sponsor or an administrator.

    The orphan's sponsored flag is recomputed from the active sponsorships after every change, so pausing or
    terminating the only active sponsorship clears it. Resuming checks again that no other sponsorship of the
    orphan became active meanwhile.

    :param user: The authenticated user.
    :param int sponsorship_id: The sponsorship.
    :param dict payload: status.
    :param date today: The end date recorded on termination.
    :return: The sponsorship.
    """

    status = ( payload or {} ).get( 'status' )
    if status not in SPONSORSHIP_STATUSES:
        raise RequestInvalidStatusError( SPONSORSHIP_STATUSES )
    ensure_owner_or_admin( user, get_sponsorship( sponsorship_id ).sponsor_id )

    with ledger_transaction():
        sponsorship = lock_row( SponsorshipModel, sponsorship_id )
        old_status = sponsorship.status
        if status == old_status:
            return sponsorship
        if status not in SPONSORSHIP_TRANSITIONS[ old_status ]:
            raise SponsorshipTransitionError( old_status, status )

        lock_row( OrphanModel, sponsorship.orphan_id )
        if status == 'active' and SponsorshipModel.count_active( sponsorship.orphan_id, exclude_id=sponsorship.id ):
            raise OrphanAlreadySponsoredError()

        sponsorship.status = status
        if status == 'terminated' and not sponsorship.end_date:
            sponsorship.end_date = today or date.today()
        database.session.flush()
        refresh_orphan_sponsored_flag( sponsorship.orphan_id )

    logging.info( 'Sponsorship %s status changed from %s to %s.', sponsorship.id, old_status, status )
    create_notification(
        sponsorship.sponsor_id,
        'Sponsorship status updated',
        'Your sponsorship #{} is now {}.'.format( sponsorship.id, status ),
        'sponsorship',
        sponsorship.id
    )
    return sponsorship


def process_payment( user, sponsorship_id, payload=None ):
    """Record the payment that is due and move the due date on by one period.

    :param user: The authenticated user.
    :param int sponsorship_id: The sponsorship.
    :param dict payload: Optionally payment_method.
    :return: The sponsorship and the payment donation.
    """

    payload = payload or {}
    ensure_owner_or_admin( user, get_sponsorship( sponsorship_id ).sponsor_id )

    with ledger_transaction():
        sponsorship = lock_row( SponsorshipModel, sponsorship_id )
        if sponsorship.status != 'active':
            raise SponsorshipNotActiveError()
        orphan = OrphanModel.query.filter_by( id=sponsorship.orphan_id ).one()

        donation = build_payment_donation(
            sponsorship, orphan, 'Sponsorship payment', payload.get( 'payment_method' )
        )
        database.session.add( donation )

        due_date = sponsorship.next_payment_date or date.today()
        sponsorship.last_payment_date = due_date
        sponsorship.next_payment_date = add_payment_period( due_date, sponsorship.payment_frequency )
        sponsorship.total_paid = sponsorship.total_paid + sponsorship.monthly_amount
        sponsorship.payment_count = sponsorship.payment_count + 1

    logging.info( 'Sponsorship %s payment %s recorded.', sponsorship.id, sponsorship.payment_count )
    create_notification(
        sponsorship.sponsor_id,
        'Sponsorship payment processed',
        'Your payment of {} for sponsorship #{} has been processed.'.format(
            sponsorship.monthly_amount, sponsorship.id
        ),
        'sponsorship',
        sponsorship.id
    )
    return sponsorship, donation


def get_sponsorships_query( user, args ):
    """Build the sponsorship listing query: administrators see every sponsorship, sponsors only their own.

    :param user: The authenticated user.
    :param args: sponsorId ( administrators ), status and orphanId.
    :return: A SQLAlchemy query, newest first.
    """

    query = SponsorshipModel.query
    if not is_admin( user ):
        query = query.filter( SponsorshipModel.sponsor_id == user.id )
    elif args.get( 'sponsorId' ):
        query = query.filter( SponsorshipModel.sponsor_id == parse_int( args[ 'sponsorId' ], 'sponsorId' ) )
    if args.get( 'status' ):
        query = query.filter(
            SponsorshipModel.status == validate_choice( args[ 'status' ], SPONSORSHIP_STATUSES, 'status' )
        )
    if args.get( 'orphanId' ):
        query = query.filter( SponsorshipModel.orphan_id == parse_int( args[ 'orphanId' ], 'orphanId' ) )
    return query.order_by( SponsorshipModel.created_at.desc(), SponsorshipModel.id.desc() )


def get_sponsorship_for_user( user, sponsorship_id ):
    """A sponsorship its sponsor or an administrator may read."""

    sponsorship = get_sponsorship( sponsorship_id )
    ensure_owner_or_admin( user, sponsorship.sponsor_id )
    return sponsorship


def get_sponsorship_stats():
    """Sponsorship counts and amounts for the administrator dashboard."""

    by_status = { status: 0 for status in SPONSORSHIP_STATUSES }
    rows = database.session.query( SponsorshipModel.status, func.count( SponsorshipModel.id ) ) \
        .group_by( SponsorshipModel.status ) \
        .all()
    for status, count in rows:
        by_status[ status ] = count

    return {
        'total_sponsorships': sum( by_status.values() ),
        'by_status': by_status,
        'total_paid': format_amount( database.session.query( func.sum( SponsorshipModel.total_paid ) ).scalar() ),
        'active_monthly_amount': format_amount(
            database.session.query( func.sum( SponsorshipModel.monthly_amount ) )
            .filter( SponsorshipModel.status == 'active' )
            .scalar()
        ),
        'sponsored_orphans': OrphanModel.query.filter_by( is_sponsored=True ).count()
    }
