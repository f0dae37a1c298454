"""The following script will DROP ALL tables and then CREATE ALL, and seed the first administrator.

Use with caution! drop_all_and_create() removes all existing data, and then reconstructs the tables with no entries.
Administrators cannot register through the API, so the first one is created here. To run a function navigate to the
project root and, for example, on the command line type:

python -c "import scripts.manage_hopeconnect_db;scripts.manage_hopeconnect_db.drop_all_and_create()"
python -c "import scripts.manage_hopeconnect_db;scripts.manage_hopeconnect_db.create_database_tables()"
python -c "import scripts.manage_hopeconnect_db;scripts.manage_hopeconnect_db.create_admin( 'admin@example.org', 'secret' )"
"""
import logging
import os

from application.app import create_app
from application.flask_essentials import database
from application.models.user import UserModel

app_config_env = os.environ.get( 'APP_ENV', 'DEV' )  # pylint: disable=invalid-name
app = create_app( app_config_env )  # pylint: disable=C0103


def drop_all_and_create():
    """A function to drop and then recreate the database tables."""

    with app.app_context():
        database.drop_all()
        database.create_all()


def create_database_tables():
    """A function to create any HopeConnect tables that do not exist yet, leaving the others untouched."""

    with app.app_context():
        database.create_all()


def create_admin( email, password, first_name='HopeConnect', last_name='Admin' ):
    """Create a verified administrator, or promote the user who already has the email.

    :param str email: The administrator's email.
    :param str password: The password to log in with.
    :param str first_name: First name.
    :param str last_name: Last name.
    :return: The user ID.
    """

    with app.app_context():
        user = UserModel.query.filter_by( email=email.strip().lower() ).one_or_none()
        if not user:
            user = UserModel( email=email.strip().lower(), first_name=first_name, last_name=last_name )
            database.session.add( user )
        user.role = 'admin'
        user.is_verified = True
        user.set_password( password )
        database.session.commit()
        logging.info( 'Administrator %s ready with ID %s.', user.email, user.id )
        return user.id
