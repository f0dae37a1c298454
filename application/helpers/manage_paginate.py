"""Module to handle pagination requests."""
from flask import current_app

from application.exceptions.exception_request import RequestImproperFieldError
from application.helpers.general_helper_functions import parse_int


def get_page_information( args ):
    """Read the page and limit query parameters.

    :param args: The request query string arguments.
    :return: A dictionary with the page number and the rows per page.
    """

    default_limit = current_app.config.get( 'DEFAULT_PAGE_LIMIT', 10 )
    max_limit = current_app.config.get( 'MAX_PAGE_LIMIT', 100 )

    page = parse_int( args.get( 'page', 1 ), 'page' )
    limit = parse_int( args.get( 'limit', default_limit ), 'limit' )
    if page < 1 or limit < 1:
        raise RequestImproperFieldError( 'page and limit must be positive integers' )

    return { 'page': page, 'limit': min( limit, max_limit ) }


def paginate_query( query, page_information ):
    """Take a SQLAlchemy query and paginate it.

    :param query: A SQLAlchemy query.
    :param page_information: Page number and rows per page.
    :return: A paginate object.
    """

    return query.paginate( page=page_information[ 'page' ], per_page=page_information[ 'limit' ], error_out=False )


def build_pagination( page ):
    """The pagination block of the response envelope."""

    return {
        'total': page.total,
        'page': page.page,
        'limit': page.per_page,
        'totalPages': page.pages
    }


def transform_data( page, schema ):
    """Transform paginate() data to the return payload.

    :param page: A paginate() object.
    :param schema: The schema instance to dump the items with.
    :return: JSON data payload.
    """

    return {
        'success': True,
        'pagination': build_pagination( page ),
        'data': schema.dump( page.items, many=True )
    }
