"""Controllers for Flask-RESTful resources: delivery tracking of in-kind donations.

Statuses move preparing -> in_transit -> delivered, and preparing or in_transit -> failed. Every status change is
appended to the status history in the same transaction as the change itself.
"""
import logging
from datetime import date

from sqlalchemy.exc import IntegrityError

from application.exceptions.exception_ledger import DeliveryExistsError
from application.exceptions.exception_ledger import DeliveryNotInKindError
from application.exceptions.exception_ledger import DeliveryTransitionError
from application.exceptions.exception_model import ModelDeliveryNotFoundError
from application.exceptions.exception_model import ModelDonationNotFoundError
from application.exceptions.exception_request import RequestInvalidStatusError
from application.flask_essentials import database
from application.helpers.authorization import ensure_owner_or_admin
from application.helpers.authorization import is_admin
from application.helpers.email import build_delivery_email
from application.helpers.email import send_email_best_effort
from application.helpers.general_helper_functions import get_model_or_raise
from application.helpers.general_helper_functions import parse_date
from application.helpers.general_helper_functions import parse_int
from application.helpers.general_helper_functions import validate_choice
from application.helpers.general_helper_functions import validate_required_fields
from application.helpers.ledger import ledger_transaction
from application.helpers.ledger import lock_row
from application.helpers.model_serialization import from_json
from application.helpers.notification import create_notification
from application.models.delivery import DELIVERY_STATUSES
from application.models.delivery import DELIVERY_TRANSITIONS
from application.models.delivery import DeliveryStatusHistoryModel
from application.models.delivery import DeliveryTrackingModel
from application.models.donation import DonationModel
from application.schemas.delivery import DeliverySchema


def get_delivery( delivery_id ):
    """The delivery with the ID, or 404."""

    return get_model_or_raise( DeliveryTrackingModel, delivery_id, ModelDeliveryNotFoundError )


def tell_donor( delivery ):
    """Notify and email the donor about the delivery's status."""

    donation = delivery.donation
    if not donation:
        return
    create_notification(
        donation.donor_id,
        'Delivery update',
        'The delivery of your donation #{} is now {}.'.format( donation.id, delivery.status ),
        'delivery',
        delivery.id
    )
    if donation.donor:
        send_email_best_effort( donation.donor.email, *build_delivery_email( donation.donor, delivery ) )


def create_delivery( payload ):
    """Track the delivery of an in-kind donation that has none yet.

    :param dict payload: donation_id and optionally pickup_address, delivery_address, carrier, tracking_number,
                         estimated_delivery and notes.
    :return: The delivery.
    """

    validate_required_fields( payload, [ 'donation_id' ] )
    donation_id = parse_int( payload[ 'donation_id' ], 'donation_id' )
    donation = get_model_or_raise( DonationModel, donation_id, ModelDonationNotFoundError )
    if donation.category != 'in_kind':
        raise DeliveryNotInKindError()
    if DeliveryTrackingModel.query.filter_by( donation_id=donation_id ).one_or_none():
        raise DeliveryExistsError()

    delivery_dict = dict( payload )
    delivery_dict[ 'donation_id' ] = donation_id
    delivery = from_json( DeliverySchema(), delivery_dict, create=True )
    delivery.status = 'preparing'
    try:
        with ledger_transaction():
            database.session.add( delivery )
            database.session.flush()
            database.session.add(
                DeliveryStatusHistoryModel(
                    delivery_id=delivery.id, status='preparing', notes=payload.get( 'notes' ) or 'Delivery created'
                )
            )
    except IntegrityError:
        raise DeliveryExistsError()

    logging.info( 'Delivery %s created for donation %s.', delivery.id, donation_id )
    tell_donor( delivery )
    return delivery


def update_delivery( delivery_id, payload, today=None ):
    """Update the carrier details and move the delivery through its states.

    :param int delivery_id: The delivery.
    :param dict payload: Any of status, carrier, tracking_number, estimated_delivery, actual_delivery and notes.
    :param date today: The date recorded as actual_delivery when delivered without one.
    :return: The delivery.
    """

    payload = dict( payload or {} )
    payload.pop( 'id', None )
    payload.pop( 'donation_id', None )
    new_status = payload.get( 'status' )
    if new_status is not None and new_status not in DELIVERY_STATUSES:
        raise RequestInvalidStatusError( DELIVERY_STATUSES )

    with ledger_transaction():
        delivery = lock_row( DeliveryTrackingModel, delivery_id )
        if not delivery:
            raise ModelDeliveryNotFoundError()
        old_status = delivery.status
        status_changed = new_status is not None and new_status != old_status
        if status_changed and new_status not in DELIVERY_TRANSITIONS[ old_status ]:
            raise DeliveryTransitionError( old_status, new_status )

        delivery = from_json( DeliverySchema(), payload, create=False, instance=delivery )
        if status_changed:
            delivery.status = new_status
            if new_status == 'delivered' and not delivery.actual_delivery:
                delivery.actual_delivery = today or date.today()
            database.session.add(
                DeliveryStatusHistoryModel( delivery_id=delivery.id, status=new_status, notes=payload.get( 'notes' ) )
            )

    if status_changed:
        logging.info( 'Delivery %s status changed from %s to %s.', delivery.id, old_status, new_status )
        tell_donor( delivery )
    return delivery


def get_deliveries_query( user, args ):
    """Build the delivery listing query: administrators see every delivery, donors those of their donations.

    :param user: The authenticated user.
    :param args: status, donationId, estimatedStartDate and estimatedEndDate.
    :return: A SQLAlchemy query, newest first.
    """

    query = DeliveryTrackingModel.query.join(
        DonationModel, DonationModel.id == DeliveryTrackingModel.donation_id
    )
    if not is_admin( user ):
        query = query.filter( DonationModel.donor_id == user.id )
    if args.get( 'status' ):
        query = query.filter(
            DeliveryTrackingModel.status == validate_choice( args[ 'status' ], DELIVERY_STATUSES, 'status' )
        )
    if args.get( 'donationId' ):
        query = query.filter( DeliveryTrackingModel.donation_id == parse_int( args[ 'donationId' ], 'donationId' ) )
    if args.get( 'estimatedStartDate' ):
        query = query.filter(
            DeliveryTrackingModel.estimated_delivery >= parse_date( args[ 'estimatedStartDate' ], 'estimatedStartDate' )
        )
    if args.get( 'estimatedEndDate' ):
        query = query.filter(
            DeliveryTrackingModel.estimated_delivery <= parse_date( args[ 'estimatedEndDate' ], 'estimatedEndDate' )
        )
    return query.order_by( DeliveryTrackingModel.created_at.desc(), DeliveryTrackingModel.id.desc() )


def get_delivery_for_user( user, delivery_id ):
    """A delivery the donor of its donation or an administrator may read."""

    delivery = get_delivery( delivery_id )
    ensure_owner_or_admin( user, delivery.donor_id )
    return delivery
