"""Marshmallow schema module for CampaignModel."""
# pylint: disable=too-few-public-methods
from marshmallow import fields
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from application.flask_essentials import database
from application.models.campaign import CampaignModel


class CampaignSchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of CampaignModel.

    current_amount is dump only: donations move it through the ledger.
    """

    target_amount = fields.Decimal( places=2, as_string=True, required=True )
    current_amount = fields.Decimal( places=2, as_string=True, dump_only=True )
    progress_percentage = fields.Integer( dump_only=True )
    orphanage_name = fields.String( dump_only=True )
    donation_count = fields.Integer( dump_only=True )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = CampaignModel
        include_fk = True
        dump_only = ( 'created_at', 'updated_at' )
        load_instance = True
        sqla_session = database.session
