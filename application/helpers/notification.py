"""Helpers to create in-app notifications as a side effect of the mutating endpoints.

Notifications are written after the primary mutation has been committed, each in its own commit, so a failure
here never rolls back the donation, sponsorship or delivery that triggered it.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from application.exceptions.exception_critical_path import NotificationBuildPathError
from application.flask_essentials import database
from application.models.notification import NotificationModel
from application.models.user import UserModel


def create_notification( user_id, title, message, notification_type='system', related_id=None ):
    """Create a notification for one user.

    :param int user_id: The recipient.
    :param str title: Short title.
    :param str message: The message.
    :param str notification_type: donation, sponsorship, campaign, delivery, volunteer or system.
    :param int related_id: ID of the row the notification is about.
    :return: The notification, or None if it could not be saved.
    """

    if not user_id:
        return None
    try:
        notification = NotificationModel(
            user_id=user_id,
            title=title,
            message=message,
            notification_type=notification_type,
            related_id=related_id
        )
        database.session.add( notification )
        database.session.commit()
        return notification
    except SQLAlchemyError as error:
        database.session.rollback()
        logging.exception( NotificationBuildPathError( error ).message )
        return None


def notify_admins( title, message, notification_type='system', related_id=None ):
    """Create the same notification for every administrator.

    :return: The number of notifications created.
    """

    created = 0
    for admin in UserModel.get_admins():
        if create_notification( admin.id, title, message, notification_type, related_id ):
            created += 1
    return created
