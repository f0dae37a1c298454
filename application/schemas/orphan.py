"""Marshmallow schema module for OrphanModel and OrphanUpdateModel."""
# pylint: disable=too-few-public-methods
from marshmallow import fields
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from application.flask_essentials import database
from application.models.orphan import OrphanModel
from application.models.orphan import OrphanUpdateModel


class OrphanSchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of OrphanModel.

    is_sponsored is dump only: the sponsorship ledger owns it.
    """

    age = fields.Integer( dump_only=True )
    orphanage_name = fields.String( dump_only=True )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = OrphanModel
        include_fk = True
        dump_only = ( 'is_sponsored', 'created_at', 'updated_at' )
        load_instance = True
        sqla_session = database.session


class OrphanUpdateSchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of OrphanUpdateModel."""

    class Meta:
        """Meta object for Marshmallow schema."""

        model = OrphanUpdateModel
        include_fk = True
        dump_only = ( 'created_at', )
        load_instance = True
        sqla_session = database.session
