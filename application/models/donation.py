"""The model for the HopeConnect API service: donations table.

A donation moves through pending, verified, completed and rejected. A donation against a campaign counts towards
the campaign's current_amount in every status except rejected.
"""
# pylint: disable=R0903
from application.flask_essentials import database
from application.helpers.general_helper_functions import utc_now

DONATION_TYPES = ( 'general', 'education', 'healthcare', 'emergency' )
DONATION_CATEGORIES = ( 'monetary', 'in_kind' )
DONATION_STATUSES = ( 'pending', 'verified', 'completed', 'rejected' )


class DonationModel( database.Model ):
    """A gift of money or goods, optionally earmarked for an orphan, an orphanage or a campaign."""

    __tablename__ = 'donations'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    donor_id = database.Column( database.Integer, database.ForeignKey( 'users.id' ), nullable=False )
    amount = database.Column( database.Numeric( 12, 2 ), nullable=False )
    donation_type = database.Column(
        database.Enum( *DONATION_TYPES, native_enum=False ), nullable=False, default='general'
    )
    category = database.Column(
        database.Enum( *DONATION_CATEGORIES, native_enum=False ), nullable=False, default='monetary'
    )
    status = database.Column(
        database.Enum( *DONATION_STATUSES, native_enum=False ), nullable=False, default='pending'
    )
    payment_method = database.Column( database.VARCHAR( 64 ), nullable=True )
    transaction_id = database.Column( database.VARCHAR( 128 ), nullable=True )
    orphan_id = database.Column( database.Integer, database.ForeignKey( 'orphans.id' ), nullable=True )
    orphanage_id = database.Column( database.Integer, database.ForeignKey( 'orphanages.id' ), nullable=True )
    campaign_id = database.Column(
        database.Integer, database.ForeignKey( 'emergency_campaigns.id' ), nullable=True, index=True
    )
    sponsorship_id = database.Column( database.Integer, database.ForeignKey( 'sponsorships.id' ), nullable=True )
    description = database.Column( database.Text, nullable=True )
    is_anonymous = database.Column( database.Boolean, nullable=False, default=False )
    receipt_image = database.Column( database.VARCHAR( 255 ), nullable=True )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
    updated_at = database.Column( database.DateTime, nullable=False, default=utc_now, onupdate=utc_now )
    donor = database.relationship( 'UserModel', foreign_keys=[ donor_id ], viewonly=True )
    orphan = database.relationship( 'OrphanModel', foreign_keys=[ orphan_id ], viewonly=True )
    orphanage = database.relationship( 'OrphanageModel', foreign_keys=[ orphanage_id ], viewonly=True )
    campaign = database.relationship( 'CampaignModel', foreign_keys=[ campaign_id ], viewonly=True )

    @property
    def donor_name( self ):
        """The donor's name, masked when the donation is anonymous."""
        if self.is_anonymous:
            return 'Anonymous'
        if self.donor:
            return self.donor.full_name
        return None

    @property
    def orphan_name( self ):
        """Name of the orphan the donation is for."""
        if self.orphan:
            return self.orphan.full_name
        return None

    @property
    def orphanage_name( self ):
        """Name of the orphanage the donation is for."""
        if self.orphanage:
            return self.orphanage.name
        return None

    @property
    def campaign_title( self ):
        """Title of the campaign the donation counts towards."""
        if self.campaign:
            return self.campaign.title
        return None
