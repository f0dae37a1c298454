"""Marshmallow schema module for NotificationModel."""
# pylint: disable=too-few-public-methods
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from application.flask_essentials import database
from application.models.notification import NotificationModel


class NotificationSchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization of NotificationModel."""

    class Meta:
        """Meta object for Marshmallow schema."""

        model = NotificationModel
        include_fk = True
        load_instance = True
        sqla_session = database.session
