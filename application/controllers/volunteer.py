"""Controllers for Flask-RESTful resources: volunteer opportunities and applications.

An application moves pending -> approved or rejected, and approved -> completed. Only an open opportunity takes
new applications, and a volunteer applies to an opportunity once.
"""
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from application.exceptions.exception_auth import AuthOwnershipError
from application.exceptions.exception_ledger import ApplicationExistsError
from application.exceptions.exception_ledger import ApplicationTransitionError
from application.exceptions.exception_ledger import OpportunityNotOpenError
from application.exceptions.exception_model import ModelApplicationNotFoundError
from application.exceptions.exception_model import ModelOpportunityNotFoundError
from application.exceptions.exception_model import ModelOrphanageNotFoundError
from application.exceptions.exception_request import RequestImproperFieldError
from application.exceptions.exception_request import RequestInvalidStatusError
from application.flask_essentials import database
from application.helpers.email import build_application_status_email
from application.helpers.email import send_email_best_effort
from application.helpers.file_upload import RESUME_EXTENSIONS
from application.helpers.file_upload import save_upload
from application.helpers.general_helper_functions import get_model_or_raise
from application.helpers.general_helper_functions import parse_date
from application.helpers.general_helper_functions import parse_int
from application.helpers.general_helper_functions import validate_choice
from application.helpers.general_helper_functions import validate_required_fields
from application.helpers.ledger import ledger_transaction
from application.helpers.ledger import lock_row
from application.helpers.model_serialization import from_json
from application.helpers.notification import create_notification
from application.models.orphanage import OrphanageModel
from application.models.volunteer import APPLICATION_STATUSES
from application.models.volunteer import APPLICATION_TRANSITIONS
from application.models.volunteer import OPPORTUNITY_STATUSES
from application.models.volunteer import VolunteerApplicationModel
from application.models.volunteer import VolunteerOpportunityModel
from application.schemas.volunteer import VolunteerOpportunitySchema


def get_opportunity( opportunity_id ):
    """The opportunity with the ID, or 404."""

    return get_model_or_raise( VolunteerOpportunityModel, opportunity_id, ModelOpportunityNotFoundError )


def get_opportunities_query( args ):
    """Build the opportunity listing query. Without a status filter only open opportunities are listed.

    :param args: status, orphanageId, startDate, endDate and skills.
    :return: A SQLAlchemy query, newest first.
    """

    status = validate_choice( args.get( 'status' ) or 'open', OPPORTUNITY_STATUSES, 'status' )
    query = VolunteerOpportunityModel.query.filter( VolunteerOpportunityModel.status == status )
    if args.get( 'orphanageId' ):
        query = query.filter(
            VolunteerOpportunityModel.orphanage_id == parse_int( args[ 'orphanageId' ], 'orphanageId' )
        )
    if args.get( 'startDate' ):
        query = query.filter( VolunteerOpportunityModel.start_date >= parse_date( args[ 'startDate' ], 'startDate' ) )
    if args.get( 'endDate' ):
        query = query.filter( VolunteerOpportunityModel.end_date <= parse_date( args[ 'endDate' ], 'endDate' ) )
    if args.get( 'skills' ):
        query = query.filter( VolunteerOpportunityModel.required_skills.ilike( '%{}%'.format( args[ 'skills' ] ) ) )
    return query.order_by( VolunteerOpportunityModel.created_at.desc(), VolunteerOpportunityModel.id.desc() )


def validate_opportunity_payload( payload, opportunity=None ):
    """Check the orphanage reference, the dates and the volunteer limit of an opportunity payload."""

    if payload.get( 'orphanage_id' ) not in ( None, '' ):
        get_model_or_raise(
            OrphanageModel, parse_int( payload[ 'orphanage_id' ], 'orphanage_id' ), ModelOrphanageNotFoundError
        )
    start_date = parse_date( payload.get( 'start_date' ), 'start_date' ) or (
        opportunity.start_date if opportunity else None
    )
    end_date = parse_date( payload.get( 'end_date' ), 'end_date' ) or ( opportunity.end_date if opportunity else None )
    if start_date and end_date and end_date < start_date:
        raise RequestImproperFieldError( 'end_date must be on or after start_date' )
    if payload.get( 'max_volunteers' ) not in ( None, '' ):
        if parse_int( payload[ 'max_volunteers' ], 'max_volunteers' ) < 1:
            raise RequestImproperFieldError( 'max_volunteers must be at least 1' )


def create_opportunity( user, payload ):
    """Create an open volunteer opportunity at an orphanage."""

    validate_required_fields( payload, [ 'orphanage_id', 'title', 'description' ] )
    validate_opportunity_payload( payload )
    opportunity_dict = dict( payload )
    opportunity_dict[ 'created_by' ] = user.id
    opportunity_dict.setdefault( 'status', 'open' )

    opportunity = from_json( VolunteerOpportunitySchema(), opportunity_dict, create=True )
    with ledger_transaction():
        database.session.add( opportunity )
    logging.info( 'Volunteer opportunity %s created by user %s.', opportunity.id, user.id )
    return opportunity


def update_opportunity( opportunity_id, payload ):
    """Update an opportunity, including opening or closing it."""

    opportunity = get_opportunity( opportunity_id )
    payload = dict( payload or {} )
    payload.pop( 'id', None )
    payload.pop( 'created_by', None )
    validate_opportunity_payload( payload, opportunity )
    with ledger_transaction():
        opportunity = from_json( VolunteerOpportunitySchema(), payload, create=False, instance=opportunity )
    return opportunity


def delete_opportunity( opportunity_id ):
    """Delete an opportunity together with its applications."""

    opportunity = get_opportunity( opportunity_id )
    with ledger_transaction():
        VolunteerApplicationModel.query.filter_by( opportunity_id=opportunity.id ).delete( synchronize_session=False )
        database.session.delete( opportunity )
    logging.info( 'Volunteer opportunity %s deleted.', opportunity_id )


def apply_for_opportunity( user, opportunity_id, payload ):
    """Apply to an open opportunity, once, and tell the orphanage's contact person.

    :param user: The authenticated volunteer.
    :param int opportunity_id: The opportunity.
    :param dict payload: Optionally message.
    :return: The application.
    """

    opportunity = get_opportunity( opportunity_id )
    if opportunity.status != 'open':
        raise OpportunityNotOpenError()
    if VolunteerApplicationModel.query.filter_by( volunteer_id=user.id, opportunity_id=opportunity.id ).one_or_none():
        raise ApplicationExistsError()

    application = VolunteerApplicationModel(
        volunteer_id=user.id,
        opportunity_id=opportunity.id,
        message=( payload or {} ).get( 'message' ),
        status='pending'
    )
    try:
        with ledger_transaction():
            database.session.add( application )
    except IntegrityError:
        raise ApplicationExistsError()

    if opportunity.orphanage:
        create_notification(
            opportunity.orphanage.contact_person_id,
            'New volunteer application',
            '{} applied for "{}".'.format( user.full_name, opportunity.title ),
            'volunteer',
            application.id
        )
    return application


def get_applications_query( opportunity_id ):
    """The applications to an opportunity, newest first."""

    get_opportunity( opportunity_id )
    return VolunteerApplicationModel.query.filter_by( opportunity_id=opportunity_id ) \
        .order_by( VolunteerApplicationModel.created_at.desc(), VolunteerApplicationModel.id.desc() )


def update_application_status( application_id, payload ):
    """Decide on an application and tell the volunteer.

    :param int application_id: The application.
    :param dict payload: status.
    :return: The application.
    """

    status = ( payload or {} ).get( 'status' )
    if status not in APPLICATION_STATUSES:
        raise RequestInvalidStatusError( APPLICATION_STATUSES )

    with ledger_transaction():
        application = lock_row( VolunteerApplicationModel, application_id )
        if not application:
            raise ModelApplicationNotFoundError()
        old_status = application.status
        if status not in APPLICATION_TRANSITIONS[ old_status ]:
            raise ApplicationTransitionError( old_status, status )
        application.status = status

    logging.info( 'Volunteer application %s status changed from %s to %s.', application.id, old_status, status )
    opportunity = application.opportunity
    create_notification(
        application.volunteer_id,
        'Volunteer application update',
        'Your application for "{}" is now {}.'.format( opportunity.title, status ),
        'volunteer',
        application.id
    )
    if application.volunteer:
        send_email_best_effort(
            application.volunteer.email,
            *build_application_status_email( application.volunteer, application, opportunity )
        )
    return application


def upload_resume( user, application_id, file_storage ):
    """Attach a resume to the user's own application."""

    application = get_model_or_raise( VolunteerApplicationModel, application_id, ModelApplicationNotFoundError )
    if application.volunteer_id != user.id:
        raise AuthOwnershipError()
    resume_path = save_upload( file_storage, 'resumes', RESUME_EXTENSIONS )
    with ledger_transaction():
        application.resume_path = resume_path
    return application


def get_volunteer_stats():
    """Opportunity and application counts for the administrator dashboard."""

    opportunities = { status: 0 for status in OPPORTUNITY_STATUSES }
    for status, count in database.session.query(
            VolunteerOpportunityModel.status, func.count( VolunteerOpportunityModel.id )
    ).group_by( VolunteerOpportunityModel.status ).all():
        opportunities[ status ] = count

    applications = { status: 0 for status in APPLICATION_STATUSES }
    for status, count in database.session.query(
            VolunteerApplicationModel.status, func.count( VolunteerApplicationModel.id )
    ).group_by( VolunteerApplicationModel.status ).all():
        applications[ status ] = count

    return {
        'total_opportunities': sum( opportunities.values() ),
        'opportunities_by_status': opportunities,
        'total_applications': sum( applications.values() ),
        'applications_by_status': applications,
        'total_volunteers': database.session.query(
            func.count( func.distinct( VolunteerApplicationModel.volunteer_id ) )
        ).scalar()
    }
