"""The unit tests require building several rows in the database at one time, and this provides that functionality."""
import copy
from datetime import date
from decimal import Decimal

from application.flask_essentials import database
from application.helpers.model_serialization import from_json
from application.models.campaign import CampaignModel
from application.models.orphan import OrphanModel
from application.models.orphanage import OrphanageModel
from application.models.user import UserModel
from application.schemas.orphan import OrphanSchema
from application.schemas.orphanage import OrphanageSchema
from tests.helpers.default_dictionaries import PASSWORD
from tests.helpers.default_dictionaries import get_orphan_dict
from tests.helpers.default_dictionaries import get_orphanage_dict


def create_model_list( model_schema, model_dict, total_items, iterate_over_key=None ):
    """Builds a list of models. Uses the Marshmallow schema and a dictionary.

    :param model_schema: Marshmallow schema for deserialization.
    :param model_dict: The dictionary to deserialize.
    :param total_items: Total items to build.
    :param iterate_over_key: A key to iterate over, e.g. name gets the suffix 1, 2, 3 ...
    :return: List of models.
    """

    models = []
    i = 1
    while i <= total_items:
        model_copy_dict = copy.deepcopy( model_dict )
        if iterate_over_key:
            model_copy_dict[ iterate_over_key ] = '{} {}'.format( model_copy_dict[ iterate_over_key ], i )
        models.append( from_json( model_schema, model_copy_dict, create=True ) )
        i += 1
    return models


def create_user( role='donor', email=None, is_verified=True, first_name='Test', last_name=None ):
    """Add a user with the default test password and commit.

    :param str role: donor, volunteer, orphanage_manager or admin.
    :param str email: Defaults to <role>@example.org.
    :param bool is_verified: Whether the email has been verified.
    :return: The user.
    """

    user = UserModel(
        email=email or '{}@example.org'.format( role ),
        first_name=first_name,
        last_name=last_name or role.replace( '_', ' ' ).title(),
        role=role,
        is_verified=is_verified
    )
    user.set_password( PASSWORD )
    database.session.add( user )
    database.session.commit()
    return user


def create_orphanage( contact_person_id=None, verification_status='approved', update_key_values=None ):
    """Add an orphanage and commit."""

    orphanage = from_json( OrphanageSchema(), get_orphanage_dict( update_key_values ), create=True )
    orphanage.contact_person_id = contact_person_id
    orphanage.verification_status = verification_status
    database.session.add( orphanage )
    database.session.commit()
    return orphanage


def create_orphan( orphanage_id=None, update_key_values=None ):
    """Add an orphan and commit."""

    orphan = from_json( OrphanSchema(), get_orphan_dict( update_key_values ), create=True )
    orphan.orphanage_id = orphanage_id
    database.session.add( orphan )
    database.session.commit()
    return orphan


def create_campaign( created_by, target_amount='1000.00', status='active', orphanage_id=None ):
    """Add a campaign with nothing raised and commit."""

    campaign = CampaignModel(
        title='Flood relief',
        description='Food and blankets after the floods.',
        target_amount=Decimal( target_amount ),
        current_amount=Decimal( '0.00' ),
        start_date=date( 2024, 1, 1 ),
        end_date=date( 2024, 12, 31 ),
        orphanage_id=orphanage_id,
        created_by=created_by,
        status=status
    )
    database.session.add( campaign )
    database.session.commit()
    return campaign
