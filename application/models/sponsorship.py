"""The model for the HopeConnect API service: sponsorships table.

At most one sponsorship per orphan is active at a time. total_paid and payment_count cover every payment
recorded for the sponsorship, the first payment taken at creation included.
"""
# pylint: disable=R0903
from decimal import Decimal

from application.flask_essentials import database
from application.helpers.general_helper_functions import utc_now

SPONSORSHIP_STATUSES = ( 'active', 'paused', 'terminated' )
PAYMENT_FREQUENCIES = ( 'monthly', 'quarterly', 'annually' )


class SponsorshipModel( database.Model ):
    """A recurring pledge from a sponsor to one orphan."""

    __tablename__ = 'sponsorships'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    sponsor_id = database.Column( database.Integer, database.ForeignKey( 'users.id' ), nullable=False )
    orphan_id = database.Column( database.Integer, database.ForeignKey( 'orphans.id' ), nullable=False, index=True )
    monthly_amount = database.Column( database.Numeric( 12, 2 ), nullable=False )
    start_date = database.Column( database.Date, nullable=False )
    end_date = database.Column( database.Date, nullable=True )
    payment_frequency = database.Column(
        database.Enum( *PAYMENT_FREQUENCIES, native_enum=False ), nullable=False, default='monthly'
    )
    status = database.Column(
        database.Enum( *SPONSORSHIP_STATUSES, native_enum=False ), nullable=False, default='active'
    )
    last_payment_date = database.Column( database.Date, nullable=True )
    next_payment_date = database.Column( database.Date, nullable=True )
    total_paid = database.Column( database.Numeric( 12, 2 ), nullable=False, default=Decimal( '0.00' ) )
    payment_count = database.Column( database.Integer, nullable=False, default=0 )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
    updated_at = database.Column( database.DateTime, nullable=False, default=utc_now, onupdate=utc_now )
    sponsor = database.relationship( 'UserModel', foreign_keys=[ sponsor_id ], viewonly=True )
    orphan = database.relationship( 'OrphanModel', foreign_keys=[ orphan_id ], viewonly=True )

    @property
    def sponsor_name( self ):
        """The sponsor's full name."""
        if self.sponsor:
            return self.sponsor.full_name
        return None

    @property
    def orphan_name( self ):
        """The sponsored orphan's full name."""
        if self.orphan:
            return self.orphan.full_name
        return None

    @staticmethod
    def count_active( orphan_id, exclude_id=None ):
        """Number of active sponsorships for the orphan, optionally leaving one sponsorship out."""
        query = SponsorshipModel.query.filter_by( orphan_id=orphan_id, status='active' )
        if exclude_id is not None:
            query = query.filter( SponsorshipModel.id != exclude_id )
        return query.count()
