"""Helper to handle email: the POST to the transactional email API and the message templates.

Email is a side channel. The ledger never waits on it: callers use send_email_best_effort() after the
primary mutation has been committed, and a failed send is logged and otherwise ignored.
"""
import logging
from http import HTTPStatus

import requests
from flask import current_app

from application.exceptions.exception_critical_path import CriticalPathError
from application.exceptions.exception_critical_path import EmailHTTPStatusError
from application.exceptions.exception_critical_path import EmailSendPathError

EMAIL_TIMEOUT_SECONDS = 10
EMAIL_OK_STATUSES = ( HTTPStatus.OK, HTTPStatus.ACCEPTED )


def send_email( recipient, subject, html ):
    """The email POST request builder.

    :param str recipient: The email address to send to.
    :param str subject: The subject line.
    :param str html: The HTML body.
    :return: True if the email API accepted the message, False if email is disabled.
    """

    email_url = current_app.config.get( 'EMAIL_API_URL' )
    if not email_url:
        logging.info( 'Email is disabled: not sending "%s" to %s.', subject, recipient )
        return False

    data = {
        'from': current_app.config.get( 'EMAIL_FROM' ),
        'to': recipient,
        'subject': subject,
        'html': html
    }
    logging.debug( 'EMAIL PAYLOAD: %s', { 'to': recipient, 'subject': subject } )

    headers = {
        'content-type': 'application/json',
        'Authorization': 'Bearer {}'.format( current_app.config.get( 'EMAIL_API_KEY', '' ) )
    }

    try:
        response = requests.post( email_url, json=data, headers=headers, timeout=EMAIL_TIMEOUT_SECONDS )
    except requests.exceptions.RequestException as error:
        raise EmailSendPathError( error )

    if response.status_code not in EMAIL_OK_STATUSES:
        raise EmailHTTPStatusError( response.status_code )
    return True


def send_email_best_effort( recipient, subject, html ):
    """Send the email, logging rather than raising on failure.

    :return: Whether the email was handed to the email API.
    """

    if not recipient:
        return False
    try:
        return send_email( recipient, subject, html )
    except CriticalPathError as error:
        logging.exception( error.message )
        return False


def build_verification_email( user, verification_url ):
    """Welcome email with the link that verifies the address."""

    subject = 'Welcome to HopeConnect - Verify your email'
    html = (
        '<h1>Welcome to HopeConnect!</h1>'
        '<p>Hello {},</p>'
        '<p>Please verify your email address by clicking the link below:</p>'
        '<a href="{}">Verify Email</a>'
    ).format( user.first_name, verification_url )
    return subject, html


def build_password_reset_email( user, reset_url, expires_minutes ):
    """Password reset link."""

    subject = 'HopeConnect password reset'
    html = (
        '<p>Hello {},</p>'
        '<p>You requested a password reset. The link below is valid for {} minutes:</p>'
        '<a href="{}">Reset Password</a>'
        '<p>If you did not request this, please ignore this email.</p>'
    ).format( user.first_name, expires_minutes, reset_url )
    return subject, html


def build_donation_received_email( donor, donation ):
    """Thank the donor for a new donation."""

    subject = 'Thank you for your donation'
    if donation.category == 'in_kind':
        detail = 'Your in-kind donation has been received and its delivery is being prepared.'
    else:
        detail = 'We have received your donation of {}.'.format( donation.amount )
    html = (
        '<h1>Thank you for your donation!</h1>'
        '<p>Dear {},</p>'
        '<p>{}</p>'
        '<p>Donation ID: {}</p>'
        '<p>Status: {}</p>'
    ).format( donor.first_name, detail, donation.id, donation.status )
    return subject, html


def build_donation_status_email( donor, donation ):
    """Tell the donor about a donation status change."""

    subject = 'Donation status updated'
    html = (
        '<p>Dear {},</p>'
        '<p>The status of your donation #{} is now <strong>{}</strong>.</p>'
    ).format( donor.first_name, donation.id, donation.status )
    return subject, html


def build_campaign_announcement_email( donor, campaign ):
    """Announce a new campaign to a past donor."""

    subject = 'New Emergency Campaign: {}'.format( campaign.title )
    html = (
        '<h1>{}</h1>'
        '<p>Dear {},</p>'
        '<p>{}</p>'
        '<p>Target: {} by {}</p>'
    ).format( campaign.title, donor.first_name, campaign.description, campaign.target_amount, campaign.end_date )
    return subject, html


def build_delivery_email( donor, delivery ):
    """Tell the donor where the delivery of their in-kind donation is."""

    subject = 'Delivery update for your donation'
    tracking = ''
    if delivery.tracking_number:
        tracking = '<p>Carrier: {} Tracking number: {}</p>'.format( delivery.carrier or '', delivery.tracking_number )
    html = (
        '<p>Dear {},</p>'
        '<p>The delivery of your donation #{} is now <strong>{}</strong>.</p>'
        '{}'
    ).format( donor.first_name, delivery.donation_id, delivery.status, tracking )
    return subject, html


def build_application_status_email( volunteer, application, opportunity ):
    """Tell the volunteer the outcome of an application."""

    subject = 'Volunteer application {}'.format( application.status )
    html = (
        '<p>Dear {},</p>'
        '<p>Your application for "{}" is now <strong>{}</strong>.</p>'
    ).format( volunteer.first_name, opportunity.title, application.status )
    return subject, html


def build_orphanage_verification_email( contact_person, orphanage ):
    """Tell the contact person the verification decision."""

    subject = 'Orphanage verification {}'.format( orphanage.verification_status )
    html = (
        '<p>Dear {},</p>'
        '<p>The verification status of {} is now <strong>{}</strong>.</p>'
    ).format( contact_person.first_name, orphanage.name, orphanage.verification_status )
    return subject, html
