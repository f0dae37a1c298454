"""The model for the HopeConnect API service: delivery_tracking and delivery_status_history tables.

Each in-kind donation has at most one delivery. Every status the delivery takes is appended to the history table,
which is never updated or deleted from.
"""
# pylint: disable=R0903
from application.flask_essentials import database
from application.helpers.general_helper_functions import utc_now

DELIVERY_STATUSES = ( 'preparing', 'in_transit', 'delivered', 'failed' )

# Allowed moves: delivered and failed are terminal.
DELIVERY_TRANSITIONS = {
    'preparing': ( 'in_transit', 'failed' ),
    'in_transit': ( 'delivered', 'failed' ),
    'delivered': (),
    'failed': ()
}


class DeliveryTrackingModel( database.Model ):
    """Physical delivery of an in-kind donation."""

    __tablename__ = 'delivery_tracking'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    donation_id = database.Column(
        database.Integer, database.ForeignKey( 'donations.id' ), nullable=False, unique=True
    )
    status = database.Column(
        database.Enum( *DELIVERY_STATUSES, native_enum=False ), nullable=False, default='preparing'
    )
    pickup_address = database.Column( database.Text, nullable=True )
    delivery_address = database.Column( database.Text, nullable=True )
    carrier = database.Column( database.VARCHAR( 128 ), nullable=True )
    tracking_number = database.Column( database.VARCHAR( 128 ), nullable=True )
    estimated_delivery = database.Column( database.Date, nullable=True )
    actual_delivery = database.Column( database.Date, nullable=True )
    notes = database.Column( database.Text, nullable=True )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
    updated_at = database.Column( database.DateTime, nullable=False, default=utc_now, onupdate=utc_now )
    donation = database.relationship( 'DonationModel', foreign_keys=[ donation_id ], viewonly=True )
    status_history = database.relationship(
        'DeliveryStatusHistoryModel',
        order_by='DeliveryStatusHistoryModel.id.desc()',
        viewonly=True
    )

    @property
    def donor_id( self ):
        """The donor who owns the delivery."""
        if self.donation:
            return self.donation.donor_id
        return None

    @property
    def donor_name( self ):
        """The donor name as the donation shows it."""
        if self.donation:
            return self.donation.donor_name
        return None

    @property
    def orphanage_name( self ):
        """The receiving orphanage."""
        if self.donation:
            return self.donation.orphanage_name
        return None


class DeliveryStatusHistoryModel( database.Model ):
    """Append only log of delivery statuses."""

    __tablename__ = 'delivery_status_history'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    delivery_id = database.Column(
        database.Integer, database.ForeignKey( 'delivery_tracking.id' ), nullable=False, index=True
    )
    status = database.Column( database.Enum( *DELIVERY_STATUSES, native_enum=False ), nullable=False )
    notes = database.Column( database.Text, nullable=True )
    updated_at = database.Column( database.DateTime, nullable=False, default=utc_now )
