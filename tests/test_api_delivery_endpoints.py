"""The module tests the Delivery API endpoints: creation, the status machine and the status history."""
import json
import unittest
from datetime import date

from application.app import create_app
from application.controllers.delivery import update_delivery
from application.controllers.donation import create_donation
from application.exceptions.exception_ledger import DeliveryTransitionError
from application.flask_essentials import database
from application.models.delivery import DeliveryStatusHistoryModel
from application.models.delivery import DeliveryTrackingModel
from application.models.notification import NotificationModel
from tests.helpers.default_dictionaries import get_donation_dict
from tests.helpers.jwt_functions import get_auth_headers
from tests.helpers.model_helpers import create_orphanage
from tests.helpers.model_helpers import create_user


class APIDeliveryEndpointsTestCase( unittest.TestCase ):
    """This test suite is designed to verify the basic functionality of the API Delivery endpoints.

    python -m unittest discover -v
    python -m unittest -v tests.test_api_delivery_endpoints.APIDeliveryEndpointsTestCase
    python -m unittest -v tests.test_api_delivery_endpoints.APIDeliveryEndpointsTestCase.test_delivery_transitions
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

    def test_delivery_transitions( self ):
        """preparing -> in_transit -> delivered, each step recorded in the history ( methods = [ PUT, GET ] )."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            admin = create_user( 'admin' )
            orphanage = create_orphanage()
            donation = create_donation(
                donor, get_donation_dict( { 'category': 'in_kind', 'orphanage_id': orphanage.id } )
            )
            delivery = DeliveryTrackingModel.query.filter_by( donation_id=donation.id ).one()
            url = '/api/v1/deliveries/{}'.format( delivery.id )

            response = self.test_client.put(
                url, data=json.dumps( { 'status': 'in_transit' } ), headers=get_auth_headers( donor )
            )
            self.assertEqual( response.status_code, 403 )

            response = self.test_client.put(
                url,
                data=json.dumps( { 'status': 'in_transit', 'carrier': 'G4S', 'tracking_number': 'G4S-1001' } ),
                headers=get_auth_headers( admin )
            )
            body = self.decode( response )
            self.assertEqual( response.status_code, 200 )
            self.assertEqual( body[ 'data' ][ 'status' ], 'in_transit' )
            self.assertEqual( body[ 'data' ][ 'carrier' ], 'G4S' )

            # Skipping back is refused.
            response = self.test_client.put(
                url, data=json.dumps( { 'status': 'preparing' } ), headers=get_auth_headers( admin )
            )
            self.assertEqual( response.status_code, 400 )

            response = self.test_client.put(
                url, data=json.dumps( { 'status': 'delivered' } ), headers=get_auth_headers( admin )
            )
            body = self.decode( response )
            self.assertEqual( body[ 'data' ][ 'status' ], 'delivered' )
            self.assertIsNotNone( body[ 'data' ][ 'actual_delivery' ] )
            self.assertEqual(
                [ history[ 'status' ] for history in body[ 'data' ][ 'status_history' ] ],
                [ 'delivered', 'in_transit', 'preparing' ]
            )

            response = self.test_client.put(
                url, data=json.dumps( { 'status': 'failed' } ), headers=get_auth_headers( admin )
            )
            self.assertEqual( response.status_code, 400 )

            self.assertEqual( DeliveryStatusHistoryModel.query.filter_by( delivery_id=delivery.id ).count(), 3 )
            self.assertEqual(
                NotificationModel.query.filter_by( user_id=donor.id, notification_type='delivery' ).count(), 2
            )

    def test_delivered_date( self ):
        """A delivery without an actual date gets today's when it is delivered."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            donation = create_donation( donor, get_donation_dict( { 'category': 'in_kind' } ) )
            delivery_id = DeliveryTrackingModel.query.filter_by( donation_id=donation.id ).one().id

            update_delivery( delivery_id, { 'status': 'in_transit' } )
            delivery = update_delivery( delivery_id, { 'status': 'delivered' }, today=date( 2024, 5, 2 ) )
            self.assertEqual( delivery.actual_delivery, date( 2024, 5, 2 ) )

            with self.assertRaises( DeliveryTransitionError ):
                update_delivery( delivery_id, { 'status': 'in_transit' } )

    def test_same_status_and_details( self ):
        """Changing details without a new status adds no history row."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            donation = create_donation( donor, get_donation_dict( { 'category': 'in_kind' } ) )
            delivery_id = DeliveryTrackingModel.query.filter_by( donation_id=donation.id ).one().id

            delivery = update_delivery( delivery_id, { 'status': 'preparing', 'notes': 'Packed in two boxes' } )
            self.assertEqual( delivery.notes, 'Packed in two boxes' )
            self.assertEqual( DeliveryStatusHistoryModel.query.filter_by( delivery_id=delivery_id ).count(), 1 )

    def test_post_delivery( self ):
        """Only in-kind donations without a delivery get one ( methods = [ POST ] )."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            admin = create_user( 'admin' )
            monetary = create_donation( donor, get_donation_dict() )
            in_kind = create_donation( donor, get_donation_dict( { 'category': 'in_kind' } ) )
            headers = get_auth_headers( admin )

            response = self.test_client.post(
                '/api/v1/deliveries', data=json.dumps( { 'donation_id': monetary.id } ), headers=headers
            )
            self.assertEqual( response.status_code, 400 )

            response = self.test_client.post(
                '/api/v1/deliveries', data=json.dumps( { 'donation_id': in_kind.id } ), headers=headers
            )
            self.assertEqual( response.status_code, 409 )

            response = self.test_client.post(
                '/api/v1/deliveries', data=json.dumps( { 'donation_id': 99 } ), headers=headers
            )
            self.assertEqual( response.status_code, 404 )

    def test_post_delivery_for_untracked_donation( self ):
        """A delivery is created for an in-kind donation that lost its tracking row ( methods = [ POST ] )."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            admin = create_user( 'admin' )
            donation = create_donation( donor, get_donation_dict( { 'category': 'in_kind' } ) )
            delivery = DeliveryTrackingModel.query.filter_by( donation_id=donation.id ).one()
            DeliveryStatusHistoryModel.query.filter_by( delivery_id=delivery.id ).delete()
            database.session.delete( delivery )
            database.session.commit()

            response = self.test_client.post(
                '/api/v1/deliveries',
                data=json.dumps( { 'donation_id': donation.id, 'carrier': 'Posta', 'status': 'delivered' } ),
                headers=get_auth_headers( admin )
            )
            body = self.decode( response )
            self.assertEqual( response.status_code, 201 )
            self.assertEqual( body[ 'data' ][ 'status' ], 'preparing' )
            self.assertEqual( len( body[ 'data' ][ 'status_history' ] ), 1 )

    def test_get_deliveries( self ):
        """Donors see the deliveries of their own donations ( methods = [ GET ] )."""

        with self.app.app_context():
            donor = create_user( 'donor', email='donor@example.org' )
            other = create_user( 'donor', email='other@example.org' )
            admin = create_user( 'admin' )
            donation = create_donation( donor, get_donation_dict( { 'category': 'in_kind' } ) )
            create_donation( other, get_donation_dict( { 'category': 'in_kind' } ) )
            delivery = DeliveryTrackingModel.query.filter_by( donation_id=donation.id ).one()

            response = self.test_client.get( '/api/v1/deliveries', headers=get_auth_headers( donor ) )
            self.assertEqual( self.decode( response )[ 'pagination' ][ 'total' ], 1 )
            response = self.test_client.get( '/api/v1/deliveries', headers=get_auth_headers( admin ) )
            self.assertEqual( self.decode( response )[ 'pagination' ][ 'total' ], 2 )

            url = '/api/v1/deliveries/{}'.format( delivery.id )
            self.assertEqual( self.test_client.get( url, headers=get_auth_headers( donor ) ).status_code, 200 )
            self.assertEqual( self.test_client.get( url, headers=get_auth_headers( other ) ).status_code, 403 )
