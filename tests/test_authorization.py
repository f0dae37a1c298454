"""Tests the capability table and the bearer token handling of the protected endpoints."""
import json
import unittest

from application.app import create_app
from application.flask_essentials import database
from application.helpers.authorization import CAPABILITIES
from application.helpers.authorization import is_allowed
from application.models.user import USER_ROLES
from tests.helpers.jwt_functions import get_auth_headers
from tests.helpers.model_helpers import create_user


class AuthorizationTestCase( unittest.TestCase ):
    """This test suite is designed to verify who may do what.

    python -m unittest discover -v
    python -m unittest -v tests.test_authorization.AuthorizationTestCase
    python -m unittest -v tests.test_authorization.AuthorizationTestCase.test_is_allowed
    """

    def setUp( self ):
        self.app = create_app( 'TEST' )
        self.app.testing = True
        self.test_client = self.app.test_client()
        with self.app.app_context():
            database.drop_all()
            database.create_all()

    def tearDown( self ):
        with self.app.app_context():
            database.session.remove()
            database.drop_all()

    def test_is_allowed( self ):
        """Spot check the table for each kind of rule."""

        self.assertTrue( is_allowed( 'admin', 'donations', 'update_status' ) )
        self.assertFalse( is_allowed( 'donor', 'donations', 'update_status' ) )
        self.assertTrue( is_allowed( 'orphanage_manager', 'campaigns', 'create' ) )
        self.assertFalse( is_allowed( 'volunteer', 'campaigns', 'create' ) )
        self.assertTrue( is_allowed( 'donor', 'applications', 'create' ) )
        self.assertFalse( is_allowed( 'orphanage_manager', 'applications', 'create' ) )
        self.assertFalse( is_allowed( 'orphanage_manager', 'orphans', 'delete' ) )
        self.assertTrue( is_allowed( 'volunteer', 'notifications', 'read' ) )

    def test_unknown_capability_is_denied( self ):
        """A capability missing from the table is denied to every role, administrators included."""

        for role in USER_ROLES:
            self.assertFalse( is_allowed( role, 'donations', 'delete' ) )
            self.assertFalse( is_allowed( role, 'ledger', 'rewrite' ) )

    def test_statistics_are_admin_only( self ):
        """Every statistics capability belongs to administrators alone."""

        stats = [ key for key in CAPABILITIES if key[ 1 ] == 'stats' ]
        self.assertEqual( len( stats ), 4 )
        for resource, action in stats:
            for role in USER_ROLES:
                self.assertEqual( is_allowed( role, resource, action ), role == 'admin' )

    def test_bearer_tokens( self ):
        """Missing, malformed and orphaned tokens are each a 401 with the error envelope."""

        with self.app.app_context():
            response = self.test_client.get( '/api/v1/auth/me' )
            self.assertEqual( response.status_code, 401 )
            self.assertFalse( json.loads( response.data.decode( 'utf-8' ) )[ 'success' ] )

            response = self.test_client.get( '/api/v1/auth/me', headers={ 'Authorization': 'Bearer not-a-jwt' } )
            self.assertEqual( response.status_code, 401 )

            user = create_user( 'donor' )
            headers = get_auth_headers( user )
            database.session.delete( user )
            database.session.commit()
            response = self.test_client.get( '/api/v1/auth/me', headers=headers )
            self.assertEqual( response.status_code, 401 )

    def test_role_error_envelope( self ):
        """A role without the capability gets a 403 naming the role."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            response = self.test_client.get( '/api/v1/volunteers/stats', headers=get_auth_headers( donor ) )
            body = json.loads( response.data.decode( 'utf-8' ) )
            self.assertEqual( response.status_code, 403 )
            self.assertFalse( body[ 'success' ] )
            self.assertIn( 'donor', body[ 'message' ] )
