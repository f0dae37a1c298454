"""The model for the HopeConnect API service: notifications table."""
# pylint: disable=R0903
from application.flask_essentials import database
from application.helpers.general_helper_functions import utc_now

NOTIFICATION_TYPES = ( 'donation', 'sponsorship', 'campaign', 'delivery', 'volunteer', 'system' )


class NotificationModel( database.Model ):
    """An in-app message for one user."""

    __tablename__ = 'notifications'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    user_id = database.Column( database.Integer, database.ForeignKey( 'users.id' ), nullable=False, index=True )
    title = database.Column( database.VARCHAR( 128 ), nullable=False )
    message = database.Column( database.Text, nullable=False )
    notification_type = database.Column(
        database.Enum( *NOTIFICATION_TYPES, native_enum=False ), nullable=False, default='system'
    )
    related_id = database.Column( database.Integer, nullable=True )
    is_read = database.Column( database.Boolean, nullable=False, default=False )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
