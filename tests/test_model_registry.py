"""Tests that importing any one model maps every model, so the relationship targets always resolve."""
import sys
import unittest

from sqlalchemy.orm import configure_mappers

from application.flask_essentials import database
from application.models.user import UserModel
from application.schemas.user import UserSchema

MODEL_MODULES = [
    'application.models.campaign',
    'application.models.delivery',
    'application.models.donation',
    'application.models.notification',
    'application.models.orphan',
    'application.models.orphanage',
    'application.models.sponsorship',
    'application.models.user',
    'application.models.volunteer'
]


class ModelRegistryTestCase( unittest.TestCase ):
    """This test suite is designed to verify the model registry.

    python -m unittest discover -v
    python -m unittest -v tests.test_model_registry.ModelRegistryTestCase
    """

    def test_one_model_imports_all( self ):
        """The user model alone pulls in every model module."""

        self.assertIsNotNone( UserModel )
        for module_name in MODEL_MODULES:
            self.assertIn( module_name, sys.modules )

    def test_relationships_resolve( self ):
        """Every string relationship target names a mapped class."""

        configure_mappers()
        class_names = { mapper.class_.__name__ for mapper in database.Model.registry.mappers }
        for name in ( 'OrphanageModel', 'OrphanModel', 'UserModel', 'DonationModel', 'CampaignModel' ):
            self.assertIn( name, class_names )
        for mapper in database.Model.registry.mappers:
            for relationship in mapper.relationships:
                self.assertIn( relationship.mapper.class_.__name__, class_names )

    def test_user_schema_builds( self ):
        """The user schema is built over a fully mapped registry."""

        self.assertIn( 'email', UserSchema().fields )
