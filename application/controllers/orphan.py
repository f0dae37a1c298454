"""Controllers for Flask-RESTful resources: orphans and their progress updates."""
import logging
from datetime import date

from application.exceptions.exception_ledger import OrphanHasActiveSponsorshipError
from application.exceptions.exception_ledger import OrphanHasSponsorshipHistoryError
from application.exceptions.exception_model import ModelOrphanageNotFoundError
from application.exceptions.exception_model import ModelOrphanNotFoundError
from application.flask_essentials import database
from application.helpers.general_helper_functions import add_months
from application.helpers.general_helper_functions import get_model_or_raise
from application.helpers.general_helper_functions import parse_bool
from application.helpers.general_helper_functions import parse_int
from application.helpers.general_helper_functions import validate_choice
from application.helpers.general_helper_functions import validate_required_fields
from application.helpers.ledger import ledger_transaction
from application.helpers.model_serialization import from_json
from application.helpers.notification import create_notification
from application.models.donation import DonationModel
from application.models.orphan import GENDERS
from application.models.orphan import OrphanModel
from application.models.orphan import OrphanUpdateModel
from application.models.orphanage import OrphanageModel
from application.models.sponsorship import SponsorshipModel
from application.schemas.orphan import OrphanSchema
from application.schemas.orphan import OrphanUpdateSchema

LATEST_UPDATES = 5


def get_orphans_query( args, today=None ):
    """Build the orphan listing query from the query string filters.

    Ages are turned into date of birth bounds so the filter runs in the database.

    :param args: gender, isSponsored, minAge, maxAge and orphanageId.
    :param date today: The reference date for ages.
    :return: A SQLAlchemy query, newest first.
    """

    today = today or date.today()
    query = OrphanModel.query
    if args.get( 'gender' ):
        query = query.filter( OrphanModel.gender == validate_choice( args[ 'gender' ], GENDERS, 'gender' ) )
    if args.get( 'isSponsored' ) not in ( None, '' ):
        query = query.filter( OrphanModel.is_sponsored == parse_bool( args[ 'isSponsored' ] ) )
    if args.get( 'minAge' ) not in ( None, '' ):
        min_age = parse_int( args[ 'minAge' ], 'minAge' )
        query = query.filter( OrphanModel.dob <= add_months( today, -12 * min_age ) )
    if args.get( 'maxAge' ) not in ( None, '' ):
        max_age = parse_int( args[ 'maxAge' ], 'maxAge' )
        query = query.filter( OrphanModel.dob > add_months( today, -12 * ( max_age + 1 ) ) )
    if args.get( 'orphanageId' ) not in ( None, '' ):
        query = query.filter( OrphanModel.orphanage_id == parse_int( args[ 'orphanageId' ], 'orphanageId' ) )
    return query.order_by( OrphanModel.created_at.desc(), OrphanModel.id.desc() )


def get_orphan( orphan_id ):
    """The orphan with the ID, or 404."""

    return get_model_or_raise( OrphanModel, orphan_id, ModelOrphanNotFoundError )


def get_orphan_detail( orphan_id ):
    """The orphan with the sponsorship state and the latest updates.

    :param int orphan_id: The orphan.
    :return: A dictionary ready for the response.
    """

    orphan = get_orphan( orphan_id )
    result = OrphanSchema().dump( orphan )
    result[ 'has_active_sponsorship' ] = SponsorshipModel.count_active( orphan.id ) > 0
    updates = OrphanUpdateModel.query.filter_by( orphan_id=orphan.id ) \
        .order_by( OrphanUpdateModel.id.desc() ) \
        .limit( LATEST_UPDATES ) \
        .all()
    result[ 'updates' ] = OrphanUpdateSchema( many=True ).dump( updates )
    return result


def check_orphanage( payload ):
    """An orphanage_id in the payload must reference an orphanage."""

    if payload.get( 'orphanage_id' ) not in ( None, '' ):
        get_model_or_raise(
            OrphanageModel, parse_int( payload[ 'orphanage_id' ], 'orphanage_id' ), ModelOrphanageNotFoundError
        )


def create_orphan( payload ):
    """Create an orphan. The is_sponsored flag starts false and is only set by sponsorships."""

    validate_required_fields( payload, [ 'first_name', 'last_name', 'dob', 'gender' ] )
    check_orphanage( payload )
    orphan = from_json( OrphanSchema(), payload, create=True )
    with ledger_transaction():
        database.session.add( orphan )
    logging.info( 'Orphan %s created.', orphan.id )
    return orphan


def update_orphan( orphan_id, payload ):
    """Update an orphan's details. is_sponsored is not writable here."""

    orphan = get_orphan( orphan_id )
    payload = dict( payload or {} )
    payload.pop( 'id', None )
    check_orphanage( payload )
    with ledger_transaction():
        orphan = from_json( OrphanSchema(), payload, create=False, instance=orphan )
    return orphan


def delete_orphan( orphan_id ):
    """Delete an orphan that no sponsorship references; its updates go with it.

    Donations keep their history with the orphan reference cleared.
    """

    orphan = get_orphan( orphan_id )
    if SponsorshipModel.count_active( orphan.id ):
        raise OrphanHasActiveSponsorshipError()
    if SponsorshipModel.query.filter_by( orphan_id=orphan.id ).count():
        raise OrphanHasSponsorshipHistoryError()

    with ledger_transaction():
        OrphanUpdateModel.query.filter_by( orphan_id=orphan.id ).delete( synchronize_session=False )
        DonationModel.query.filter_by( orphan_id=orphan.id ).update(
            { DonationModel.orphan_id: None }, synchronize_session=False
        )
        database.session.delete( orphan )
    logging.info( 'Orphan %s deleted.', orphan_id )


def add_orphan_update( user, orphan_id, payload ):
    """Record a progress update and tell the orphan's active sponsors.

    :param user: The authenticated staff member.
    :param int orphan_id: The orphan.
    :param dict payload: title, description and update_type.
    :return: The update.
    """

    orphan = get_orphan( orphan_id )
    validate_required_fields( payload, [ 'title', 'description' ] )
    update_dict = dict( payload )
    update_dict[ 'orphan_id' ] = orphan.id
    update_dict[ 'created_by' ] = user.id
    update_dict.setdefault( 'update_type', 'general' )

    orphan_update = from_json( OrphanUpdateSchema(), update_dict, create=True )
    with ledger_transaction():
        database.session.add( orphan_update )

    sponsorships = SponsorshipModel.query.filter_by( orphan_id=orphan.id, status='active' ).all()
    for sponsorship in sponsorships:
        create_notification(
            sponsorship.sponsor_id,
            'New update on {}'.format( orphan.full_name ),
            orphan_update.title,
            'sponsorship',
            orphan.id
        )
    return orphan_update


def get_orphan_updates_query( orphan_id ):
    """The updates on an orphan, newest first."""

    get_orphan( orphan_id )
    return OrphanUpdateModel.query.filter_by( orphan_id=orphan_id ).order_by( OrphanUpdateModel.id.desc() )
