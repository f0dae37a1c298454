"""A Module for general helper functions used across the application."""
import calendar
from datetime import date
from datetime import datetime
from datetime import timezone
from decimal import Decimal
from decimal import InvalidOperation

from application.exceptions.exception_request import RequestImproperFieldError
from application.exceptions.exception_request import RequestMissingFieldsError

MONTHS_PER_PERIOD = {
    'monthly': 1,
    'quarterly': 3,
    'annually': 12
}

TRUE_STRINGS = ( 'true', '1', 'yes' )


def utc_now():
    """The current UTC time as a naive datetime, the way the tables store it."""

    return datetime.now( timezone.utc ).replace( tzinfo=None )


def add_months( start, months ):
    """Add calendar months to a date, clamping the day to the end of the target month.

    :param date start: The date to advance.
    :param int months: The number of months to add.
    :return: The advanced date, e.g. 2024-01-31 + 1 month is 2024-02-29.
    """

    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min( start.day, calendar.monthrange( year, month )[ 1 ] )
    return start.replace( year=year, month=month, day=day )


def add_payment_period( start, payment_frequency ):
    """Advance a payment date by one period of the sponsorship frequency.

    :param date start: The current payment date.
    :param str payment_frequency: One of monthly, quarterly or annually.
    :return: The next payment date.
    """

    if payment_frequency not in MONTHS_PER_PERIOD:
        raise RequestImproperFieldError(
            'Payment frequency must be one of: {}'.format( ', '.join( MONTHS_PER_PERIOD ) )
        )
    return add_months( start, MONTHS_PER_PERIOD[ payment_frequency ] )


def calculate_age( date_of_birth, today=None ):
    """Whole years between the date of birth and today."""

    if not date_of_birth:
        return None
    today = today or date.today()
    age = today.year - date_of_birth.year
    if ( today.month, today.day ) < ( date_of_birth.month, date_of_birth.day ):
        age -= 1
    return age


def validate_required_fields( payload, required_fields, message=None ):
    """Raise if any required field is missing or empty on the payload.

    :param dict payload: The request JSON.
    :param required_fields: Iterable of required keys.
    :param str message: Optional message for the error.
    :return: The payload.
    """

    if not payload:
        raise RequestMissingFieldsError( message ) if message else RequestMissingFieldsError()
    missing = [ field for field in required_fields if payload.get( field ) in ( None, '' ) ]
    if missing:
        if message:
            raise RequestMissingFieldsError( message )
        raise RequestMissingFieldsError( 'Please provide: {}'.format( ', '.join( missing ) ) )
    return payload


def parse_amount( value, field='amount' ):
    """Convert a payload amount to a positive Decimal with two places."""

    try:
        amount = Decimal( str( value ) )
    except ( InvalidOperation, ValueError ):
        raise RequestImproperFieldError( '{} must be a number'.format( field ) )
    if not amount.is_finite():
        raise RequestImproperFieldError( '{} must be greater than zero'.format( field ) )
    # Stored with two places: the rounded value is the one that must be positive.
    try:
        amount = amount.quantize( Decimal( '0.01' ) )
    except InvalidOperation:
        raise RequestImproperFieldError( '{} is too large'.format( field ) )
    if amount <= 0:
        raise RequestImproperFieldError( '{} must be greater than zero'.format( field ) )
    return amount


def parse_date( value, field='date' ):
    """Convert an ISO date string ( YYYY-MM-DD, a time part is ignored ) to a date."""

    if value in ( None, '' ):
        return None
    if isinstance( value, datetime ):
        return value.date()
    if isinstance( value, date ):
        return value
    try:
        return datetime.strptime( str( value )[ :10 ], '%Y-%m-%d' ).date()
    except ValueError:
        raise RequestImproperFieldError( '{} must be a date formatted YYYY-MM-DD'.format( field ) )


def parse_int( value, field ):
    """Convert a query string or payload value to an integer."""

    try:
        return int( value )
    except ( TypeError, ValueError ):
        raise RequestImproperFieldError( '{} must be an integer'.format( field ) )


def parse_bool( value ):
    """Query strings carry booleans as text."""

    if isinstance( value, bool ):
        return value
    return str( value ).lower() in TRUE_STRINGS


def validate_choice( value, choices, field ):
    """Raise unless the value is one of the choices."""

    if value not in choices:
        raise RequestImproperFieldError( '{} must be one of: {}'.format( field, ', '.join( choices ) ) )
    return value


def get_model_or_raise( model, row_id, not_found_error ):
    """Return the row with the ID or raise the model's not found exception.

    :param model: The SQLAlchemy model class.
    :param row_id: The primary key.
    :param not_found_error: The exception class to raise, e.g. ModelCampaignNotFoundError.
    :return: The row.
    """

    row = model.query.filter_by( id=row_id ).one_or_none()
    if row is None:
        raise not_found_error()
    return row


def format_amount( amount ):
    """An amount as a string with two places: sums over no rows come back as None and report 0.00."""

    if amount is None:
        return '0.00'
    return '{:.2f}'.format( Decimal( str( amount ) ) )


def get_request_payload( request ):
    """The JSON body of the request, or an empty dictionary."""

    payload = request.get_json( silent=True )
    if isinstance( payload, dict ):
        return payload
    return {}
