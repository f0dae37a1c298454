"""Controllers for Flask-RESTful resources: orphanages and their reviews."""
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from application.exceptions.exception_auth import AuthOwnershipError
from application.exceptions.exception_ledger import ReviewExistsError
from application.exceptions.exception_model import ModelOrphanageNotFoundError
from application.exceptions.exception_model import ModelReviewNotFoundError
from application.exceptions.exception_request import RequestImproperFieldError
from application.flask_essentials import database
from application.helpers.authorization import ensure_owner_or_admin
from application.helpers.authorization import is_admin
from application.helpers.email import build_orphanage_verification_email
from application.helpers.email import send_email_best_effort
from application.helpers.general_helper_functions import get_model_or_raise
from application.helpers.general_helper_functions import validate_choice
from application.helpers.general_helper_functions import validate_required_fields
from application.helpers.ledger import ledger_transaction
from application.helpers.model_serialization import from_json
from application.helpers.notification import create_notification
from application.models.orphan import OrphanModel
from application.models.orphanage import VERIFICATION_STATUSES
from application.models.orphanage import OrphanageModel
from application.models.orphanage import ReviewModel
from application.schemas.orphanage import OrphanageSchema

RATINGS = ( 1, 2, 3, 4, 5 )


def get_orphanages_query( args ):
    """Build the orphanage listing query from the query string filters.

    :param args: name, location and verificationStatus.
    :return: A SQLAlchemy query, newest first.
    """

    query = OrphanageModel.query
    if args.get( 'name' ):
        query = query.filter( OrphanageModel.name.ilike( '%{}%'.format( args[ 'name' ] ) ) )
    if args.get( 'location' ):
        query = query.filter( OrphanageModel.location.ilike( '%{}%'.format( args[ 'location' ] ) ) )
    if args.get( 'verificationStatus' ):
        status = validate_choice( args[ 'verificationStatus' ], VERIFICATION_STATUSES, 'verificationStatus' )
        query = query.filter( OrphanageModel.verification_status == status )
    return query.order_by( OrphanageModel.created_at.desc(), OrphanageModel.id.desc() )


def get_orphanage( orphanage_id ):
    """The orphanage with the ID, or 404."""

    return get_model_or_raise( OrphanageModel, orphanage_id, ModelOrphanageNotFoundError )


def create_orphanage( user, payload ):
    """Create an orphanage pending verification.

    The creator becomes the contact person, unless an administrator names another user.

    :param user: The authenticated user.
    :param dict payload: The orphanage fields.
    :return: The orphanage.
    """

    validate_required_fields( payload, [ 'name', 'address' ] )
    orphanage_dict = dict( payload )
    orphanage_dict[ 'verification_status' ] = 'pending'
    if not ( is_admin( user ) and payload.get( 'contact_person_id' ) ):
        orphanage_dict[ 'contact_person_id' ] = user.id

    orphanage = from_json( OrphanageSchema(), orphanage_dict, create=True )
    with ledger_transaction():
        database.session.add( orphanage )
    logging.info( 'Orphanage %s created by user %s.', orphanage.id, user.id )
    return orphanage


def update_orphanage( user, orphanage_id, payload ):
    """Update an orphanage: the contact person or an administrator; only an administrator verifies.

    :param user: The authenticated user.
    :param int orphanage_id: The orphanage.
    :param dict payload: The fields to change.
    :return: The orphanage.
    """

    orphanage = get_orphanage( orphanage_id )
    ensure_owner_or_admin( user, orphanage.contact_person_id )

    payload = dict( payload or {} )
    payload.pop( 'id', None )
    old_status = orphanage.verification_status
    new_status = payload.get( 'verification_status', old_status )
    if new_status != old_status and not is_admin( user ):
        raise AuthOwnershipError( 'Only an administrator can change the verification status' )

    with ledger_transaction():
        orphanage = from_json( OrphanageSchema(), payload, create=False, instance=orphanage )

    if orphanage.verification_status != old_status and orphanage.contact_person:
        contact_person = orphanage.contact_person
        create_notification(
            contact_person.id,
            'Orphanage verification updated',
            'Your orphanage "{}" is now {}.'.format( orphanage.name, orphanage.verification_status ),
            'system',
            orphanage.id
        )
        send_email_best_effort(
            contact_person.email, *build_orphanage_verification_email( contact_person, orphanage )
        )
    return orphanage


def get_orphanage_orphans_query( orphanage_id ):
    """The orphans of an orphanage."""

    get_orphanage( orphanage_id )
    return OrphanModel.query.filter_by( orphanage_id=orphanage_id ).order_by( OrphanModel.id )


def parse_rating( value ):
    """Ratings are whole numbers from 1 to 5."""

    message = 'Rating is required and must be between 1 and 5'
    if isinstance( value, bool ):
        raise RequestImproperFieldError( message )
    try:
        rating = int( str( value ) )
    except ( TypeError, ValueError ):
        raise RequestImproperFieldError( message )
    if rating not in RATINGS:
        raise RequestImproperFieldError( message )
    return rating


def add_review( user, orphanage_id, payload ):
    """Add the user's one review of the orphanage and tell the contact person.

    :param user: The authenticated user.
    :param int orphanage_id: The orphanage.
    :param dict payload: rating and comment.
    :return: The review.
    """

    payload = payload or {}
    rating = parse_rating( payload.get( 'rating' ) )
    orphanage = get_orphanage( orphanage_id )

    if ReviewModel.query.filter_by( user_id=user.id, orphanage_id=orphanage_id ).one_or_none():
        raise ReviewExistsError()

    review = ReviewModel( user_id=user.id, orphanage_id=orphanage_id, rating=rating, comment=payload.get( 'comment' ) )
    try:
        with ledger_transaction():
            database.session.add( review )
    except IntegrityError:
        raise ReviewExistsError()

    create_notification(
        orphanage.contact_person_id,
        'New review',
        '{} rated {} {} out of 5.'.format( user.full_name, orphanage.name, rating ),
        'system',
        orphanage.id
    )
    return review


def get_reviews_query( orphanage_id ):
    """The reviews of an orphanage, newest first."""

    get_orphanage( orphanage_id )
    return ReviewModel.query.filter_by( orphanage_id=orphanage_id ).order_by( ReviewModel.id.desc() )


def get_rating_summary( orphanage_id ):
    """Average rating and the count of each star value, computed from the stored reviews.

    :param int orphanage_id: The orphanage.
    :return: A dictionary with average_rating and rating_distribution.
    """

    distribution = { rating: 0 for rating in RATINGS }
    rows = database.session.query( ReviewModel.rating, func.count( ReviewModel.id ) ) \
        .filter( ReviewModel.orphanage_id == orphanage_id ) \
        .group_by( ReviewModel.rating ) \
        .all()
    total = 0
    count = 0
    for rating, rating_count in rows:
        distribution[ int( rating ) ] = rating_count
        total += int( rating ) * rating_count
        count += rating_count

    average_rating = round( total / count, 1 ) if count else None
    return {
        'average_rating': average_rating,
        'rating_distribution': { str( rating ): distribution[ rating ] for rating in RATINGS }
    }


def delete_review( user, orphanage_id, review_id ):
    """Delete a review: its author or an administrator."""

    review = ReviewModel.query.filter_by( id=review_id, orphanage_id=orphanage_id ).one_or_none()
    if not review:
        raise ModelReviewNotFoundError()
    ensure_owner_or_admin( user, review.user_id )
    with ledger_transaction():
        database.session.delete( review )