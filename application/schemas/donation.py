"""Marshmallow schema module for DonationModel."""
# pylint: disable=too-few-public-methods
from marshmallow import fields
from marshmallow import post_dump
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from application.flask_essentials import database
from application.models.donation import DonationModel


class DonationSchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of DonationModel."""

    amount = fields.Decimal( places=2, as_string=True, required=True )
    donor_name = fields.String( dump_only=True )
    orphan_name = fields.String( dump_only=True )
    orphanage_name = fields.String( dump_only=True )
    campaign_title = fields.String( dump_only=True )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = DonationModel
        include_fk = True
        dump_only = ( 'status', 'receipt_image', 'created_at', 'updated_at' )
        load_instance = True
        sqla_session = database.session


class PublicDonationSchema( DonationSchema ):
    """The donation as a campaign page shows it: anonymous donors are not identified."""

    @post_dump
    def mask_anonymous_donor( self, data, **kwargs ):  # pylint: disable=unused-argument,no-self-use
        """Remove the donor ID when the donor asked to stay anonymous."""
        if data.get( 'is_anonymous' ):
            data[ 'donor_id' ] = None
        return data
