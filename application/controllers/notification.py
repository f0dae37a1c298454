"""Controllers for Flask-RESTful resources: a user's own notifications."""
from application.exceptions.exception_model import ModelNotificationNotFoundError
from application.flask_essentials import database
from application.helpers.general_helper_functions import parse_bool
from application.helpers.general_helper_functions import validate_choice
from application.helpers.ledger import ledger_transaction
from application.models.notification import NOTIFICATION_TYPES
from application.models.notification import NotificationModel


def get_notifications_query( user, args ):
    """The user's notifications, newest first, filtered by isRead and type."""

    query = NotificationModel.query.filter( NotificationModel.user_id == user.id )
    if args.get( 'isRead' ) not in ( None, '' ):
        query = query.filter( NotificationModel.is_read == parse_bool( args[ 'isRead' ] ) )
    if args.get( 'type' ):
        query = query.filter(
            NotificationModel.notification_type == validate_choice( args[ 'type' ], NOTIFICATION_TYPES, 'type' )
        )
    return query.order_by( NotificationModel.created_at.desc(), NotificationModel.id.desc() )


def get_unread_count( user ):
    """Number of unread notifications."""

    return NotificationModel.query.filter_by( user_id=user.id, is_read=False ).count()


def get_own_notification( user, notification_id ):
    """A notification of the user: someone else's is reported as not found."""

    notification = NotificationModel.query.filter_by( id=notification_id, user_id=user.id ).one_or_none()
    if not notification:
        raise ModelNotificationNotFoundError()
    return notification


def mark_read( user, notification_id ):
    """Mark one notification read."""

    notification = get_own_notification( user, notification_id )
    with ledger_transaction():
        notification.is_read = True
    return notification


def mark_all_read( user ):
    """Mark every notification of the user read.

    :return: The number of notifications changed.
    """

    with ledger_transaction():
        updated = NotificationModel.query.filter_by( user_id=user.id, is_read=False ).update(
            { NotificationModel.is_read: True }, synchronize_session='fetch'
        )
    return updated


def delete_notification( user, notification_id ):
    """Delete one of the user's notifications."""

    notification = get_own_notification( user, notification_id )
    with ledger_transaction():
        database.session.delete( notification )
