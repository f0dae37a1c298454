"""The module tests the Notification API endpoints and the heartbeat."""
import json
import unittest

from application.app import create_app
from application.flask_essentials import database
from application.helpers.notification import create_notification
from application.helpers.notification import notify_admins
from application.models.notification import NotificationModel
from tests.helpers.jwt_functions import get_auth_headers
from tests.helpers.model_helpers import create_user


class APINotificationEndpointsTestCase( unittest.TestCase ):
    """This test suite is designed to verify the basic functionality of the API Notification endpoints.

    python -m unittest discover -v
    python -m unittest -v tests.test_api_notification_endpoints.APINotificationEndpointsTestCase
    python -m unittest -v tests.test_api_notification_endpoints.APINotificationEndpointsTestCase.test_read_all
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

    @staticmethod
    def decode( response ):
        """The JSON body of a response."""

        return json.loads( response.data.decode( 'utf-8' ) )

    def test_heartbeat( self ):
        """The application answers without a token ( methods = [ GET ] )."""

        with self.app.app_context():
            response = self.test_client.get( '/api/v1/heartbeat' )
            self.assertEqual( response.status_code, 200 )
            self.assertTrue( self.decode( response )[ 'success' ] )

    def test_get_notifications( self ):
        """Users list their own notifications with the unread count ( methods = [ GET ] )."""

        with self.app.app_context():
            user = create_user( 'donor' )
            other = create_user( 'volunteer' )
            create_notification( user.id, 'Donation received', 'Thank you.', 'donation', 1 )
            create_notification( user.id, 'Delivery update', 'On its way.', 'delivery', 1 )
            read = create_notification( user.id, 'Welcome', 'Hello.', 'system' )
            read.is_read = True
            database.session.commit()
            create_notification( other.id, 'Not yours', 'Hidden.', 'system' )

            response = self.test_client.get( '/api/v1/notifications', headers=get_auth_headers( user ) )
            body = self.decode( response )
            self.assertEqual( response.status_code, 200 )
            self.assertEqual( body[ 'pagination' ][ 'total' ], 3 )
            self.assertEqual( body[ 'unread_count' ], 2 )
            # Newest first.
            self.assertEqual( body[ 'data' ][ 0 ][ 'title' ], 'Welcome' )

            response = self.test_client.get( '/api/v1/notifications?isRead=false', headers=get_auth_headers( user ) )
            self.assertEqual( self.decode( response )[ 'pagination' ][ 'total' ], 2 )

            response = self.test_client.get( '/api/v1/notifications?type=delivery', headers=get_auth_headers( user ) )
            self.assertEqual( self.decode( response )[ 'pagination' ][ 'total' ], 1 )

            response = self.test_client.get( '/api/v1/notifications?type=gossip', headers=get_auth_headers( user ) )
            self.assertEqual( response.status_code, 400 )

            response = self.test_client.get( '/api/v1/notifications' )
            self.assertEqual( response.status_code, 401 )

    def test_mark_read_and_delete( self ):
        """Mark one notification read and delete it; someone else's is not found ( methods = [ PUT, DELETE ] )."""

        with self.app.app_context():
            user = create_user( 'donor' )
            other = create_user( 'volunteer' )
            notification_id = create_notification( user.id, 'Donation received', 'Thank you.', 'donation' ).id

            response = self.test_client.put(
                '/api/v1/notifications/{}/read'.format( notification_id ), headers=get_auth_headers( other )
            )
            self.assertEqual( response.status_code, 404 )

            response = self.test_client.put(
                '/api/v1/notifications/{}/read'.format( notification_id ), headers=get_auth_headers( user )
            )
            self.assertEqual( response.status_code, 200 )
            self.assertTrue( self.decode( response )[ 'data' ][ 'is_read' ] )

            response = self.test_client.delete(
                '/api/v1/notifications/{}'.format( notification_id ), headers=get_auth_headers( other )
            )
            self.assertEqual( response.status_code, 404 )

            response = self.test_client.delete(
                '/api/v1/notifications/{}'.format( notification_id ), headers=get_auth_headers( user )
            )
            self.assertEqual( response.status_code, 200 )
            self.assertEqual( NotificationModel.query.count(), 0 )

    def test_read_all( self ):
        """Mark every unread notification read and report how many changed ( methods = [ PUT ] )."""

        with self.app.app_context():
            user = create_user( 'donor' )
            other = create_user( 'volunteer' )
            for title in ( 'First', 'Second', 'Third' ):
                create_notification( user.id, title, 'Message.', 'system' )
            create_notification( other.id, 'Untouched', 'Message.', 'system' )

            response = self.test_client.put( '/api/v1/notifications/read-all', headers=get_auth_headers( user ) )
            self.assertEqual( response.status_code, 200 )
            self.assertEqual( self.decode( response )[ 'data' ][ 'updated' ], 3 )

            response = self.test_client.put( '/api/v1/notifications/read-all', headers=get_auth_headers( user ) )
            self.assertEqual( self.decode( response )[ 'data' ][ 'updated' ], 0 )

            self.assertEqual( NotificationModel.query.filter_by( user_id=other.id, is_read=False ).count(), 1 )

    def test_notify_admins( self ):
        """Every administrator gets the same notification, and a missing recipient is skipped."""

        with self.app.app_context():
            create_user( 'admin', email='first.admin@example.org' )
            create_user( 'admin', email='second.admin@example.org' )
            create_user( 'donor' )

            self.assertEqual( notify_admins( 'New donation received', 'A donation arrived.', 'donation' ), 2 )
            self.assertIsNone( create_notification( None, 'Nobody', 'Message.' ) )
            self.assertEqual( NotificationModel.query.count(), 2 )
