"""Marshmallow schema module for SponsorshipModel."""
# pylint: disable=too-few-public-methods
from marshmallow import fields
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from application.flask_essentials import database
from application.models.sponsorship import SponsorshipModel

LEDGER_ATTRIBUTES = (
    'status', 'last_payment_date', 'next_payment_date', 'total_paid', 'payment_count', 'created_at', 'updated_at'
)


class SponsorshipSchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of SponsorshipModel."""

    monthly_amount = fields.Decimal( places=2, as_string=True, required=True )
    total_paid = fields.Decimal( places=2, as_string=True, dump_only=True )
    sponsor_name = fields.String( dump_only=True )
    orphan_name = fields.String( dump_only=True )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = SponsorshipModel
        include_fk = True
        dump_only = LEDGER_ATTRIBUTES
        load_instance = True
        sqla_session = database.session
