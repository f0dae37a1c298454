"""Marshmallow schema module for DeliveryTrackingModel and DeliveryStatusHistoryModel."""
# pylint: disable=too-few-public-methods
from marshmallow import fields
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from application.flask_essentials import database
from application.models.delivery import DeliveryStatusHistoryModel
from application.models.delivery import DeliveryTrackingModel


class DeliveryStatusHistorySchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization of DeliveryStatusHistoryModel."""

    class Meta:
        """Meta object for Marshmallow schema."""

        model = DeliveryStatusHistoryModel
        include_fk = True
        load_instance = True
        sqla_session = database.session


class DeliverySchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of DeliveryTrackingModel."""

    donor_id = fields.Integer( dump_only=True )
    donor_name = fields.String( dump_only=True )
    orphanage_name = fields.String( dump_only=True )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = DeliveryTrackingModel
        include_fk = True
        dump_only = ( 'status', 'created_at', 'updated_at' )
        load_instance = True
        sqla_session = database.session


class DeliveryDetailSchema( DeliverySchema ):
    """A delivery with its status history, newest first."""

    status_history = fields.List( fields.Nested( DeliveryStatusHistorySchema ), dump_only=True )
