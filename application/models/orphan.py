"""The model for the HopeConnect API service: orphans and orphan_updates tables.

The is_sponsored flag is a cache of "an active sponsorship exists for this orphan". It is written only by the
sponsorship ledger operations and checked by the reconciliation job.
"""
# pylint: disable=R0903
from application.flask_essentials import database
from application.helpers.general_helper_functions import calculate_age
from application.helpers.general_helper_functions import utc_now

GENDERS = ( 'male', 'female' )
UPDATE_TYPES = ( 'medical', 'education', 'general', 'achievement' )


class OrphanModel( database.Model ):
    """An orphan, optionally housed by an orphanage."""

    __tablename__ = 'orphans'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    first_name = database.Column( database.VARCHAR( 80 ), nullable=False )
    last_name = database.Column( database.VARCHAR( 80 ), nullable=False )
    dob = database.Column( database.Date, nullable=True )
    gender = database.Column( database.Enum( *GENDERS, native_enum=False ), nullable=True )
    orphanage_id = database.Column( database.Integer, database.ForeignKey( 'orphanages.id' ), nullable=True )
    health_status = database.Column( database.Text, nullable=True )
    education_status = database.Column( database.Text, nullable=True )
    background_story = database.Column( database.Text, nullable=True )
    profile_image = database.Column( database.VARCHAR( 255 ), nullable=True )
    is_sponsored = database.Column( database.Boolean, nullable=False, default=False )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
    updated_at = database.Column( database.DateTime, nullable=False, default=utc_now, onupdate=utc_now )
    orphanage = database.relationship( 'OrphanageModel', foreign_keys=[ orphanage_id ], viewonly=True )

    @property
    def age( self ):
        """Age in whole years from the date of birth."""
        return calculate_age( self.dob )

    @property
    def orphanage_name( self ):
        """Name of the orphanage the orphan lives in."""
        if self.orphanage:
            return self.orphanage.name
        return None

    @property
    def full_name( self ):
        """First and last name."""
        return '{} {}'.format( self.first_name, self.last_name )


class OrphanUpdateModel( database.Model ):
    """Progress updates on an orphan, shared with the orphan's sponsors."""

    __tablename__ = 'orphan_updates'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    orphan_id = database.Column( database.Integer, database.ForeignKey( 'orphans.id' ), nullable=False )
    update_type = database.Column(
        database.Enum( *UPDATE_TYPES, native_enum=False ), nullable=False, default='general'
    )
    title = database.Column( database.VARCHAR( 128 ), nullable=False )
    description = database.Column( database.Text, nullable=True )
    created_by = database.Column( database.Integer, database.ForeignKey( 'users.id' ), nullable=True )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
