"""The model for the HopeConnect API service: emergency_campaigns table.

current_amount is a running total: the sum of the amounts of every donation against the campaign that has not
been rejected. Only the ledger helpers change it, using a single UPDATE so concurrent donations add up.
"""
# pylint: disable=R0903
from decimal import ROUND_HALF_UP
from decimal import Decimal

from application.flask_essentials import database
from application.helpers.general_helper_functions import utc_now
from application.models.donation import DonationModel

CAMPAIGN_STATUSES = ( 'active', 'completed', 'cancelled' )


class CampaignModel( database.Model ):
    """A time boxed fundraising goal, optionally for one orphanage."""

    __tablename__ = 'emergency_campaigns'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    title = database.Column( database.VARCHAR( 128 ), nullable=False )
    description = database.Column( database.Text, nullable=False )
    target_amount = database.Column( database.Numeric( 12, 2 ), nullable=False )
    current_amount = database.Column( database.Numeric( 12, 2 ), nullable=False, default=Decimal( '0.00' ) )
    start_date = database.Column( database.Date, nullable=False )
    end_date = database.Column( database.Date, nullable=False )
    orphanage_id = database.Column( database.Integer, database.ForeignKey( 'orphanages.id' ), nullable=True )
    created_by = database.Column( database.Integer, database.ForeignKey( 'users.id' ), nullable=False )
    status = database.Column(
        database.Enum( *CAMPAIGN_STATUSES, native_enum=False ), nullable=False, default='active'
    )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
    updated_at = database.Column( database.DateTime, nullable=False, default=utc_now, onupdate=utc_now )
    orphanage = database.relationship( 'OrphanageModel', foreign_keys=[ orphanage_id ], viewonly=True )

    @property
    def progress_percentage( self ):
        """Percentage of the target raised, rounded half up and capped at 100."""
        if not self.target_amount:
            return 0
        percentage = Decimal( self.current_amount or 0 ) / Decimal( self.target_amount ) * 100
        return min( 100, int( percentage.quantize( Decimal( '1' ), rounding=ROUND_HALF_UP ) ) )

    @property
    def orphanage_name( self ):
        """Name of the orphanage the campaign raises money for."""
        if self.orphanage:
            return self.orphanage.name
        return None

    @property
    def donation_count( self ):
        """Number of donations made against the campaign."""
        return DonationModel.query.filter_by( campaign_id=self.id ).count()
