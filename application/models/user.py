"""The model for the HopeConnect API service: users table.

Tables are explicitly named. Notice that the database=SQLAlchemy() is done through the import of flask_essentials.
This will keep the Marshmallow and model SQLAlchemy sessions the same.
"""
# pylint: disable=R0903
from werkzeug.security import check_password_hash
from werkzeug.security import generate_password_hash

from application.flask_essentials import database
from application.helpers.general_helper_functions import utc_now

USER_ROLES = ( 'donor', 'volunteer', 'orphanage_manager', 'admin' )
REGISTRATION_ROLES = ( 'donor', 'volunteer', 'orphanage_manager' )


class UserModel( database.Model ):
    """Credential store: every donor, volunteer, orphanage manager and administrator."""

    __tablename__ = 'users'
    id = database.Column( database.Integer, primary_key=True, autoincrement=True, nullable=False )
    email = database.Column( database.VARCHAR( 255 ), nullable=False, unique=True, index=True )
    password_hash = database.Column( database.VARCHAR( 255 ), nullable=False )
    first_name = database.Column( database.VARCHAR( 80 ), nullable=False, default='' )
    last_name = database.Column( database.VARCHAR( 80 ), nullable=False, default='' )
    role = database.Column(
        database.Enum( *USER_ROLES, native_enum=False ), nullable=False, default='donor'
    )
    phone = database.Column( database.VARCHAR( 32 ), nullable=True )
    address = database.Column( database.Text, nullable=True )
    profile_image = database.Column( database.VARCHAR( 255 ), nullable=True )
    is_verified = database.Column( database.Boolean, nullable=False, default=False )
    verification_token = database.Column( database.VARCHAR( 64 ), nullable=True, index=True )
    reset_password_token = database.Column( database.VARCHAR( 64 ), nullable=True, index=True )
    reset_password_expires = database.Column( database.DateTime, nullable=True )
    created_at = database.Column( database.DateTime, nullable=False, default=utc_now )
    updated_at = database.Column( database.DateTime, nullable=False, default=utc_now, onupdate=utc_now )

    def set_password( self, password ):
        """Hash and store the password."""
        self.password_hash = generate_password_hash( password )

    def check_password( self, password ):
        """Compare a plain text password with the stored hash."""
        if not self.password_hash or password is None:
            return False
        return check_password_hash( self.password_hash, password )

    @property
    def full_name( self ):
        """First and last name for emails and listings."""
        return '{} {}'.format( self.first_name or '', self.last_name or '' ).strip()

    @staticmethod
    def get_admins():
        """All administrators: the recipients of system notifications."""
        return UserModel.query.filter_by( role='admin' ).all()
