"""Tests the email side channel: the POST to the email API, and that a failed send never undoes a donation."""
import unittest
from decimal import Decimal

import mock

from application.app import create_app
from application.controllers.donation import create_donation
from application.controllers.donation import update_donation_status
from application.exceptions.exception_critical_path import EmailHTTPStatusError
from application.exceptions.exception_critical_path import EmailSendPathError
from application.flask_essentials import database
from application.helpers.email import build_campaign_announcement_email
from application.helpers.email import build_donation_received_email
from application.helpers.email import send_email
from application.helpers.email import send_email_best_effort
from application.models.campaign import CampaignModel
from application.models.donation import DonationModel
from tests.helpers.default_dictionaries import get_donation_dict
from tests.helpers.mock_email_functions import EMAIL_API_URL
from tests.helpers.mock_email_functions import mock_email_accepted
from tests.helpers.mock_email_functions import mock_email_connection_error
from tests.helpers.mock_email_functions import mock_email_server_error
from tests.helpers.model_helpers import create_campaign
from tests.helpers.model_helpers import create_user


class DonationEmailsTestCase( unittest.TestCase ):
    """This test suite is designed to verify the automated email process.

    python -m unittest discover -v
    python -m unittest -v tests.test_donation_emails.DonationEmailsTestCase
    python -m unittest -v tests.test_donation_emails.DonationEmailsTestCase.test_donation_survives_email_outage
    """

    def setUp( self ):
        self.app = create_app( 'TEST' )
        self.app.testing = True
        self.app.config[ 'EMAIL_API_URL' ] = EMAIL_API_URL
        with self.app.app_context():
            database.drop_all()
            database.create_all()

    def tearDown( self ):
        with self.app.app_context():
            database.session.remove()
            database.drop_all()

    def test_send_email( self ):
        """The message is posted as JSON to the configured email API."""

        with self.app.app_context():
            with mock.patch( 'application.helpers.email.requests.post', side_effect=mock_email_accepted ) as post:
                self.assertTrue( send_email( 'amina.yusuf@example.org', 'Hello', '<p>Hello</p>' ) )

            args, kwargs = post.call_args
            self.assertEqual( args[ 0 ], EMAIL_API_URL )
            self.assertEqual( kwargs[ 'json' ][ 'to' ], 'amina.yusuf@example.org' )
            self.assertEqual( kwargs[ 'json' ][ 'subject' ], 'Hello' )

    def test_send_email_failures( self ):
        """An unreachable API and an error status raise, and best effort turns both into False."""

        with self.app.app_context():
            with mock.patch( 'application.helpers.email.requests.post', side_effect=mock_email_connection_error ):
                with self.assertRaises( EmailSendPathError ):
                    send_email( 'amina.yusuf@example.org', 'Hello', '<p>Hello</p>' )
                self.assertFalse( send_email_best_effort( 'amina.yusuf@example.org', 'Hello', '<p>Hello</p>' ) )

            with mock.patch( 'application.helpers.email.requests.post', side_effect=mock_email_server_error ):
                with self.assertRaises( EmailHTTPStatusError ):
                    send_email( 'amina.yusuf@example.org', 'Hello', '<p>Hello</p>' )
                self.assertFalse( send_email_best_effort( 'amina.yusuf@example.org', 'Hello', '<p>Hello</p>' ) )

            self.assertFalse( send_email_best_effort( None, 'Hello', '<p>Hello</p>' ) )

    def test_email_disabled( self ):
        """Without an email API URL nothing is posted."""

        with self.app.app_context():
            self.app.config[ 'EMAIL_API_URL' ] = ''
            with mock.patch( 'application.helpers.email.requests.post' ) as post:
                self.assertFalse( send_email( 'amina.yusuf@example.org', 'Hello', '<p>Hello</p>' ) )
            post.assert_not_called()

    def test_donation_survives_email_outage( self ):
        """The donation and the campaign total are committed even though every email fails."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            campaign_id = create_campaign( donor.id ).id
            with mock.patch(
                    'application.helpers.email.requests.post', side_effect=mock_email_connection_error
            ) as post:
                donation = create_donation(
                    donor, get_donation_dict( { 'amount': '300.00', 'campaign_id': campaign_id } )
                )
                update_donation_status( donation.id, { 'status': 'completed' } )
            self.assertEqual( post.call_count, 2 )

            database.session.remove()
            self.assertEqual( DonationModel.query.one().status, 'completed' )
            self.assertEqual( database.session.get( CampaignModel, campaign_id ).current_amount, Decimal( '300.00' ) )

    def test_email_builders( self ):
        """The templates fill in the names and amounts they are given."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            campaign = create_campaign( donor.id )
            donation = create_donation( donor, get_donation_dict( { 'amount': '42.50' } ) )

            subject, html = build_donation_received_email( donor, donation )
            self.assertEqual( subject, 'Thank you for your donation' )
            self.assertIn( '42.50', html )
            self.assertIn( 'Test', html )

            subject, html = build_campaign_announcement_email( donor, campaign )
            self.assertEqual( subject, 'New Emergency Campaign: Flood relief' )
