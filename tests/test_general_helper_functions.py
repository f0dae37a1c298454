"""The module tests the general helper functions: calendar arithmetic, amounts and payload checks."""
import unittest
from datetime import date
from decimal import Decimal

from application.app import create_app
from application.exceptions.exception_request import RequestImproperFieldError
from application.exceptions.exception_request import RequestMissingFieldsError
from application.helpers.general_helper_functions import add_months
from application.helpers.general_helper_functions import add_payment_period
from application.helpers.general_helper_functions import calculate_age
from application.helpers.general_helper_functions import format_amount
from application.helpers.general_helper_functions import parse_amount
from application.helpers.general_helper_functions import parse_bool
from application.helpers.general_helper_functions import parse_date
from application.helpers.general_helper_functions import validate_required_fields
from application.models.campaign import CampaignModel


class GeneralHelperFunctionsTestCase( unittest.TestCase ):
    """This test suite is designed to verify the general helper functions.

    python -m unittest -v tests.test_general_helper_functions.GeneralHelperFunctionsTestCase
    """

    def test_add_months_clamps( self ):
        """Month arithmetic clamps to the last day of the target month."""

        self.assertEqual( add_months( date( 2024, 1, 31 ), 1 ), date( 2024, 2, 29 ) )
        self.assertEqual( add_months( date( 2023, 1, 31 ), 1 ), date( 2023, 2, 28 ) )
        self.assertEqual( add_months( date( 2024, 3, 31 ), 1 ), date( 2024, 4, 30 ) )
        self.assertEqual( add_months( date( 2024, 11, 15 ), 3 ), date( 2025, 2, 15 ) )
        self.assertEqual( add_months( date( 2024, 3, 15 ), -3 ), date( 2023, 12, 15 ) )

    def test_add_payment_period( self ):
        """One period of each payment frequency."""

        start = date( 2024, 1, 1 )
        self.assertEqual( add_payment_period( start, 'monthly' ), date( 2024, 2, 1 ) )
        self.assertEqual( add_payment_period( start, 'quarterly' ), date( 2024, 4, 1 ) )
        self.assertEqual( add_payment_period( start, 'annually' ), date( 2025, 1, 1 ) )
        self.assertEqual( add_payment_period( date( 2024, 2, 29 ), 'annually' ), date( 2025, 2, 28 ) )
        with self.assertRaises( RequestImproperFieldError ):
            add_payment_period( start, 'weekly' )

    def test_calculate_age( self ):
        """Ages count whole years, birthday included."""

        dob = date( 2015, 6, 15 )
        self.assertEqual( calculate_age( dob, today=date( 2024, 6, 14 ) ), 8 )
        self.assertEqual( calculate_age( dob, today=date( 2024, 6, 15 ) ), 9 )
        self.assertIsNone( calculate_age( None ) )

    def test_parse_amount( self ):
        """Amounts are positive Decimals with two places."""

        self.assertEqual( parse_amount( '300' ), Decimal( '300.00' ) )
        self.assertEqual( parse_amount( 12.5 ), Decimal( '12.50' ) )
        self.assertEqual( parse_amount( '0.006' ), Decimal( '0.01' ) )
        for value in ( 0, '-1', 'abc', 'NaN', None, '0.004', '0.001', '-0.004', '1e40' ):
            with self.assertRaises( RequestImproperFieldError ):
                parse_amount( value )

    def test_parse_date_and_bool( self ):
        """Dates parse from ISO strings, booleans from query string text."""

        self.assertEqual( parse_date( '2024-01-01' ), date( 2024, 1, 1 ) )
        self.assertEqual( parse_date( '2024-01-01T10:00:00Z' ), date( 2024, 1, 1 ) )
        self.assertIsNone( parse_date( '' ) )
        with self.assertRaises( RequestImproperFieldError ):
            parse_date( '01/02/2024' )
        self.assertTrue( parse_bool( 'true' ) )
        self.assertFalse( parse_bool( 'false' ) )

    def test_validate_required_fields( self ):
        """Missing and empty fields are named in the error."""

        with self.assertRaises( RequestMissingFieldsError ) as context:
            validate_required_fields( { 'title': '', 'amount': 5 }, [ 'title', 'amount', 'description' ] )
        self.assertIn( 'title', context.exception.message )
        self.assertIn( 'description', context.exception.message )
        with self.assertRaises( RequestMissingFieldsError ):
            validate_required_fields( None, [ 'title' ] )

    def test_format_amount( self ):
        """Sums over no rows report zero."""

        self.assertEqual( format_amount( None ), '0.00' )
        self.assertEqual( format_amount( Decimal( '12.5' ) ), '12.50' )

    def test_progress_percentage( self ):
        """Progress rounds half up and stops at 100."""

        with create_app( 'TEST' ).app_context():
            campaign = CampaignModel( target_amount=Decimal( '1000.00' ), current_amount=Decimal( '500.00' ) )
            self.assertEqual( campaign.progress_percentage, 50 )
            campaign.current_amount = Decimal( '5.00' )
            self.assertEqual( campaign.progress_percentage, 1 )
            campaign.current_amount = Decimal( '4.99' )
            self.assertEqual( campaign.progress_percentage, 0 )
            campaign.current_amount = Decimal( '1500.00' )
            self.assertEqual( campaign.progress_percentage, 100 )
