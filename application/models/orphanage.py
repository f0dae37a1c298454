"""The model for the HopeConnect API service: orphanages and reviews tables."""
# pylint: disable=R0903
from sqlalchemy import func

from application.flask_essentials import database
from application.helpers.general_helper_functions import utc_now
from application.models.orphan import OrphanModel

VERIFICATION_STATUSES = ( 'pending', 'approved', 'rejected' )


class OrphanageModel( database.Model ):
    """An orphanage, owned by its contact person, verified by an administrator."""

    __tablename__ = 'orphanages'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    name = database.Column( database.VARCHAR( 128 ), nullable=False )
    address = database.Column( database.Text, nullable=True )
    location = database.Column( database.VARCHAR( 128 ), nullable=True )
    phone = database.Column( database.VARCHAR( 32 ), nullable=True )
    email = database.Column( database.VARCHAR( 255 ), nullable=True )
    description = database.Column( database.Text, nullable=True )
    contact_person_id = database.Column( database.Integer, database.ForeignKey( 'users.id' ), nullable=True )
    verification_status = database.Column(
        database.Enum( *VERIFICATION_STATUSES, native_enum=False ), nullable=False, default='pending'
    )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
    updated_at = database.Column( database.DateTime, nullable=False, default=utc_now, onupdate=utc_now )
    contact_person = database.relationship( 'UserModel', foreign_keys=[ contact_person_id ], viewonly=True )

    @property
    def contact_person_name( self ):
        """The contact person's full name, if there is one."""
        if self.contact_person:
            return self.contact_person.full_name
        return None

    @property
    def orphan_count( self ):
        """Number of orphans housed."""
        return OrphanModel.query.filter_by( orphanage_id=self.id ).count()

    @property
    def review_count( self ):
        """Number of reviews."""
        return ReviewModel.query.filter_by( orphanage_id=self.id ).count()

    @property
    def average_rating( self ):
        """Mean rating rounded to one decimal, or None before the first review."""
        average = database.session.query( func.avg( ReviewModel.rating ) ).filter(
            ReviewModel.orphanage_id == self.id
        ).scalar()
        if average is None:
            return None
        return round( float( average ), 1 )


class ReviewModel( database.Model ):
    """One review per user and orphanage: the rating is aggregated on read."""

    __tablename__ = 'reviews'
    __table_args__ = ( database.UniqueConstraint( 'user_id', 'orphanage_id', name='uq_review_user_orphanage' ), )
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    user_id = database.Column( database.Integer, database.ForeignKey( 'users.id' ), nullable=False )
    orphanage_id = database.Column( database.Integer, database.ForeignKey( 'orphanages.id' ), nullable=False )
    rating = database.Column( database.SmallInteger, nullable=False )
    comment = database.Column( database.Text, nullable=True )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
    user = database.relationship( 'UserModel', foreign_keys=[ user_id ], viewonly=True )

    @property
    def reviewer_name( self ):
        """Name of the reviewer."""
        if self.user:
            return self.user.full_name
        return None
