"""The module tests the donation ledger: campaign running totals, in-kind deliveries and transaction rollback."""
import unittest
from decimal import Decimal

import mock
from sqlalchemy.exc import SQLAlchemyError

from application.app import create_app
from application.controllers.donation import campaign_delta
from application.controllers.donation import create_donation
from application.controllers.donation import update_donation_status
from application.exceptions.exception_ledger import CampaignNotActiveError
from application.exceptions.exception_model import ModelCampaignNotFoundError
from application.exceptions.exception_request import RequestImproperFieldError
from application.exceptions.exception_request import RequestInvalidStatusError
from application.flask_essentials import database
from application.models.campaign import CampaignModel
from application.models.delivery import DeliveryStatusHistoryModel
from application.models.delivery import DeliveryTrackingModel
from application.models.donation import DonationModel
from application.models.notification import NotificationModel
from tests.helpers.default_dictionaries import get_donation_dict
from tests.helpers.model_helpers import create_campaign
from tests.helpers.model_helpers import create_orphanage
from tests.helpers.model_helpers import create_user


class DonationLedgerTestCase( unittest.TestCase ):
    """This test suite is designed to verify that donations keep the campaign totals consistent.

    python -m unittest discover -v
    python -m unittest -v tests.test_donation_ledger.DonationLedgerTestCase
    python -m unittest -v tests.test_donation_ledger.DonationLedgerTestCase.test_campaign_total_scenario
    """

    def setUp( self ):
        self.app = create_app( 'TEST' )
        self.app.testing = True
        with self.app.app_context():
            database.drop_all()
            database.create_all()

    def tearDown( self ):
        with self.app.app_context():
            database.session.remove()
            database.drop_all()

    def test_campaign_delta( self ):
        """Only entering or leaving rejected changes a campaign total."""

        amount = Decimal( '100.00' )
        self.assertEqual( campaign_delta( 'pending', 'rejected', amount ), -amount )
        self.assertEqual( campaign_delta( 'verified', 'rejected', amount ), -amount )
        self.assertEqual( campaign_delta( 'rejected', 'completed', amount ), amount )
        self.assertEqual( campaign_delta( 'rejected', 'rejected', amount ), 0 )
        self.assertEqual( campaign_delta( 'pending', 'verified', amount ), 0 )
        self.assertEqual( campaign_delta( 'verified', 'completed', amount ), 0 )

    def test_campaign_total_scenario( self ):
        """Donations add to the campaign, a rejection subtracts once, and un-rejecting adds back."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            manager = create_user( 'orphanage_manager' )
            campaign = create_campaign( manager.id, target_amount='1000.00' )
            campaign_id = campaign.id

            first = create_donation( donor, get_donation_dict( { 'amount': '300.00', 'campaign_id': campaign_id } ) )
            create_donation( donor, get_donation_dict( { 'amount': '200.00', 'campaign_id': campaign_id } ) )

            campaign = database.session.get( CampaignModel, campaign_id )
            self.assertEqual( campaign.current_amount, Decimal( '500.00' ) )
            self.assertEqual( campaign.progress_percentage, 50 )

            update_donation_status( first.id, { 'status': 'rejected' } )
            self.assertEqual( database.session.get( CampaignModel, campaign_id ).current_amount, Decimal( '200.00' ) )

            # Rejecting again changes nothing.
            update_donation_status( first.id, { 'status': 'rejected' } )
            self.assertEqual( database.session.get( CampaignModel, campaign_id ).current_amount, Decimal( '200.00' ) )

            update_donation_status( first.id, { 'status': 'verified' } )
            self.assertEqual( database.session.get( CampaignModel, campaign_id ).current_amount, Decimal( '500.00' ) )

    def test_status_changes_that_keep_the_total( self ):
        """Verifying and completing a donation leave the campaign total alone."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            campaign_id = create_campaign( donor.id ).id
            donation = create_donation( donor, get_donation_dict( { 'amount': '40.00', 'campaign_id': campaign_id } ) )

            update_donation_status( donation.id, { 'status': 'verified' } )
            update_donation_status( donation.id, { 'status': 'completed' } )

            self.assertEqual( database.session.get( CampaignModel, campaign_id ).current_amount, Decimal( '40.00' ) )
            self.assertEqual( database.session.get( DonationModel, donation.id ).status, 'completed' )

    def test_donation_without_campaign( self ):
        """A donation without a campaign is pending and leaves every campaign alone."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            campaign_id = create_campaign( donor.id ).id
            donation = create_donation( donor, get_donation_dict() )

            self.assertEqual( donation.status, 'pending' )
            self.assertEqual( donation.donor_id, donor.id )
            self.assertEqual( database.session.get( CampaignModel, campaign_id ).current_amount, Decimal( '0.00' ) )

    def test_client_status_is_ignored( self ):
        """A new donation is pending whatever status the payload carries."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            payload = get_donation_dict()
            payload[ 'status' ] = 'completed'
            donation = create_donation( donor, payload )
            self.assertEqual( donation.status, 'pending' )

    def test_campaign_not_active( self ):
        """A donation to a completed campaign is refused and nothing is written."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            campaign_id = create_campaign( donor.id, status='completed' ).id

            with self.assertRaises( CampaignNotActiveError ):
                create_donation( donor, get_donation_dict( { 'campaign_id': campaign_id } ) )

            self.assertEqual( DonationModel.query.count(), 0 )
            self.assertEqual( database.session.get( CampaignModel, campaign_id ).current_amount, Decimal( '0.00' ) )

    def test_unknown_campaign( self ):
        """A donation to a campaign that does not exist is a 404."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            with self.assertRaises( ModelCampaignNotFoundError ):
                create_donation( donor, get_donation_dict( { 'campaign_id': 99 } ) )

    def test_invalid_amount( self ):
        """Zero and negative amounts are refused."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            for amount in ( '0', '-5.00', 'ten' ):
                with self.assertRaises( RequestImproperFieldError ):
                    create_donation( donor, get_donation_dict( { 'amount': amount } ) )
            self.assertEqual( DonationModel.query.count(), 0 )

    def test_invalid_status( self ):
        """A status outside the donation statuses is a 400."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            donation = create_donation( donor, get_donation_dict() )
            with self.assertRaises( RequestInvalidStatusError ):
                update_donation_status( donation.id, { 'status': 'refunded' } )

    def test_in_kind_donation_delivery( self ):
        """An in-kind donation gets one delivery in preparing with one history row."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            orphanage = create_orphanage()
            donation = create_donation(
                donor,
                get_donation_dict( { 'category': 'in_kind', 'orphanage_id': orphanage.id } )
            )

            deliveries = DeliveryTrackingModel.query.filter_by( donation_id=donation.id ).all()
            self.assertEqual( len( deliveries ), 1 )
            self.assertEqual( deliveries[ 0 ].status, 'preparing' )
            self.assertEqual( deliveries[ 0 ].delivery_address, orphanage.address )

            history = DeliveryStatusHistoryModel.query.filter_by( delivery_id=deliveries[ 0 ].id ).all()
            self.assertEqual( len( history ), 1 )
            self.assertEqual( history[ 0 ].status, 'preparing' )

    def test_monetary_donation_has_no_delivery( self ):
        """A monetary donation is not delivered."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            create_donation( donor, get_donation_dict() )
            self.assertEqual( DeliveryTrackingModel.query.count(), 0 )

    def test_rollback_when_total_fails( self ):
        """If the campaign total cannot be written the donation is not written either."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            campaign_id = create_campaign( donor.id ).id

            with mock.patch(
                'application.controllers.donation.adjust_campaign_total',
                side_effect=SQLAlchemyError( 'Lock wait timeout exceeded' )
            ):
                with self.assertRaises( SQLAlchemyError ):
                    create_donation(
                        donor, get_donation_dict( { 'category': 'in_kind', 'campaign_id': campaign_id } )
                    )

            self.assertEqual( DonationModel.query.count(), 0 )
            self.assertEqual( DeliveryTrackingModel.query.count(), 0 )
            self.assertEqual( database.session.get( CampaignModel, campaign_id ).current_amount, Decimal( '0.00' ) )

    def test_notifications( self ):
        """Administrators hear about new donations and the donor about status changes, but not repeats."""

        with self.app.app_context():
            donor = create_user( 'donor' )
            admin = create_user( 'admin' )
            donation = create_donation( donor, get_donation_dict() )

            self.assertEqual( NotificationModel.query.filter_by( user_id=admin.id ).count(), 1 )

            update_donation_status( donation.id, { 'status': 'verified' } )
            update_donation_status( donation.id, { 'status': 'verified' } )
            notifications = NotificationModel.query.filter_by( user_id=donor.id ).all()
            self.assertEqual( len( notifications ), 1 )
            self.assertEqual( notifications[ 0 ].notification_type, 'donation' )
            self.assertEqual( notifications[ 0 ].related_id, donation.id )
