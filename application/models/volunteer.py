"""The model for the HopeConnect API service: volunteer_opportunities and volunteer_applications tables."""
# pylint: disable=R0903
from application.flask_essentials import database
from application.helpers.general_helper_functions import utc_now

OPPORTUNITY_STATUSES = ( 'open', 'closed', 'filled' )
APPLICATION_STATUSES = ( 'pending', 'approved', 'rejected', 'completed' )

APPLICATION_TRANSITIONS = {
    'pending': ( 'approved', 'rejected' ),
    'approved': ( 'completed', ),
    'rejected': (),
    'completed': ()
}


class VolunteerOpportunityModel( database.Model ):
    """Volunteer work offered by an orphanage."""

    __tablename__ = 'volunteer_opportunities'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    orphanage_id = database.Column( database.Integer, database.ForeignKey( 'orphanages.id' ), nullable=False )
    title = database.Column( database.VARCHAR( 128 ), nullable=False )
    description = database.Column( database.Text, nullable=False )
    required_skills = database.Column( database.Text, nullable=True )
    start_date = database.Column( database.Date, nullable=True )
    end_date = database.Column( database.Date, nullable=True )
    max_volunteers = database.Column( database.Integer, nullable=True )
    status = database.Column(
        database.Enum( *OPPORTUNITY_STATUSES, native_enum=False ), nullable=False, default='open'
    )
    created_by = database.Column( database.Integer, database.ForeignKey( 'users.id' ), nullable=True )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
    updated_at = database.Column( database.DateTime, nullable=False, default=utc_now, onupdate=utc_now )
    orphanage = database.relationship( 'OrphanageModel', foreign_keys=[ orphanage_id ], viewonly=True )

    @property
    def orphanage_name( self ):
        """Name of the orphanage offering the opportunity."""
        if self.orphanage:
            return self.orphanage.name
        return None

    @property
    def application_count( self ):
        """Number of applications received."""
        return VolunteerApplicationModel.query.filter_by( opportunity_id=self.id ).count()


class VolunteerApplicationModel( database.Model ):
    """One application per volunteer and opportunity."""

    __tablename__ = 'volunteer_applications'
    __table_args__ = (
        database.UniqueConstraint( 'volunteer_id', 'opportunity_id', name='uq_application_volunteer_opportunity' ),
    )
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    volunteer_id = database.Column( database.Integer, database.ForeignKey( 'users.id' ), nullable=False )
    opportunity_id = database.Column(
        database.Integer, database.ForeignKey( 'volunteer_opportunities.id' ), nullable=False
    )
    message = database.Column( database.Text, nullable=True )
    resume_path = database.Column( database.VARCHAR( 255 ), nullable=True )
    status = database.Column(
        database.Enum( *APPLICATION_STATUSES, native_enum=False ), nullable=False, default='pending'
    )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
    updated_at = database.Column( database.DateTime, nullable=False, default=utc_now, onupdate=utc_now )
    volunteer = database.relationship( 'UserModel', foreign_keys=[ volunteer_id ], viewonly=True )
    opportunity = database.relationship(
        'VolunteerOpportunityModel', foreign_keys=[ opportunity_id ], viewonly=True
    )

    @property
    def volunteer_name( self ):
        """The applicant's full name."""
        if self.volunteer:
            return self.volunteer.full_name
        return None

    @property
    def opportunity_title( self ):
        """Title of the opportunity applied for."""
        if self.opportunity:
            return self.opportunity.title
        return None
