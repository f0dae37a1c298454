"""Resource entry point for notification endpoints."""
# pylint: disable=too-few-public-methods
# pylint: disable=no-self-use
from http import HTTPStatus

from flask import request
from flask_restful import Resource

from application.controllers.notification import delete_notification
from application.controllers.notification import get_notifications_query
from application.controllers.notification import get_unread_count
from application.controllers.notification import mark_all_read
from application.controllers.notification import mark_read
from application.helpers.authorization import get_current_user
from application.helpers.authorization import requires_capability
from application.helpers.manage_paginate import get_page_information
from application.helpers.manage_paginate import paginate_query
from application.helpers.manage_paginate import transform_data
from application.schemas.notification import NotificationSchema


class Notifications( Resource ):
    """Flask-RESTful resource endpoint for the user's notifications."""

    @requires_capability( 'notifications', 'read' )
    def get( self ):
        """Endpoint to list the user's notifications with the unread count."""

        user = get_current_user()
        page = paginate_query( get_notifications_query( user, request.args ), get_page_information( request.args ) )
        result = transform_data( page, NotificationSchema() )
        result[ 'unread_count' ] = get_unread_count( user )
        return result, HTTPStatus.OK


class NotificationRead( Resource ):
    """Flask-RESTful resource endpoint to mark a notification read."""

    @requires_capability( 'notifications', 'update' )
    def put( self, notification_id ):
        """Endpoint to mark one notification read."""

        notification = mark_read( get_current_user(), notification_id )
        return { 'success': True, 'data': NotificationSchema().dump( notification ) }, HTTPStatus.OK


class NotificationsReadAll( Resource ):
    """Flask-RESTful resource endpoint to mark every notification read."""

    @requires_capability( 'notifications', 'update' )
    def put( self ):
        """Endpoint to mark all of the user's notifications read."""

        updated = mark_all_read( get_current_user() )
        return { 'success': True, 'data': { 'updated': updated } }, HTTPStatus.OK


class NotificationById( Resource ):
    """Flask-RESTful resource endpoint for one notification."""

    @requires_capability( 'notifications', 'delete' )
    def delete( self, notification_id ):
        """Endpoint to delete a notification."""

        delete_notification( get_current_user(), notification_id )
        return { 'success': True, 'data': {} }, HTTPStatus.OK
