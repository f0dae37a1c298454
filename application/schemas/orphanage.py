"""Marshmallow schema module for OrphanageModel and ReviewModel."""
# pylint: disable=too-few-public-methods
from marshmallow import fields
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from application.flask_essentials import database
from application.models.orphanage import OrphanageModel
from application.models.orphanage import ReviewModel


class OrphanageSchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of OrphanageModel."""

    contact_person_name = fields.String( dump_only=True )
    orphan_count = fields.Integer( dump_only=True )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = OrphanageModel
        include_fk = True
        dump_only = ( 'created_at', 'updated_at' )
        load_instance = True
        sqla_session = database.session


class OrphanageDetailSchema( OrphanageSchema ):
    """An orphanage with its rating aggregates."""

    average_rating = fields.Float( dump_only=True, allow_none=True )
    review_count = fields.Integer( dump_only=True )


class ReviewSchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of ReviewModel."""

    reviewer_name = fields.String( dump_only=True )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = ReviewModel
        include_fk = True
        dump_only = ( 'created_at', )
        load_instance = True
        sqla_session = database.session
