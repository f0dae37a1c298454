"""The ledger: the transaction wrapper and the writes that keep the denormalised caches consistent.

Two cached values are kept by the write paths and checked by the reconciliation job:

    emergency_campaigns.current_amount: the sum of the amounts of the campaign's donations that are not rejected.
    orphans.is_sponsored: whether an active sponsorship exists for the orphan.
"""
import logging
from contextlib import contextmanager
from decimal import Decimal

from sqlalchemy import func

from application.flask_essentials import database
from application.models.campaign import CampaignModel
from application.models.donation import DonationModel
from application.models.orphan import OrphanModel
from application.models.sponsorship import SponsorshipModel


@contextmanager
def ledger_transaction():
    """Run a block of statements as one unit: commit on normal exit, roll back and re-raise on any exception.

    Usage:

        with ledger_transaction():
            database.session.add( donation )
            adjust_campaign_total( donation.campaign_id, donation.amount )
    """

    try:
        yield database.session
        database.session.commit()
    except Exception:
        database.session.rollback()
        raise


def adjust_campaign_total( campaign_id, amount ):
    """Add a signed amount to the campaign running total with a single UPDATE.

    The arithmetic happens in the database, so two requests adding to the same campaign cannot lose an update.

    :param int campaign_id: The campaign.
    :param Decimal amount: Positive to add, negative to subtract.
    :return: Number of rows updated.
    """

    rows = CampaignModel.query.filter_by( id=campaign_id ).update(
        { CampaignModel.current_amount: CampaignModel.current_amount + amount },
        synchronize_session='fetch'
    )
    logging.info( 'Campaign %s current_amount adjusted by %s.', campaign_id, amount )
    return rows


def lock_row( model, row_id ):
    """Load a row FOR UPDATE, so the state it is read in stays valid until commit."""

    return model.query.filter_by( id=row_id ).with_for_update().one_or_none()


def refresh_orphan_sponsored_flag( orphan_id ):
    """Set orphans.is_sponsored from the sponsorships that are active right now.

    :return: The new value of the flag.
    """

    is_sponsored = SponsorshipModel.count_active( orphan_id ) > 0
    OrphanModel.query.filter_by( id=orphan_id ).update(
        { OrphanModel.is_sponsored: is_sponsored }, synchronize_session='fetch'
    )
    return is_sponsored


def reconcile_campaign_totals( fix=False ):
    """Recompute every campaign total from its donations.

    :param bool fix: Write the recomputed total where it differs.
    :return: A list of mismatches: campaign ID, stored amount and computed amount.
    """

    sums = dict(
        database.session.query( DonationModel.campaign_id, func.sum( DonationModel.amount ) )
        .filter( DonationModel.campaign_id.isnot( None ) )
        .filter( DonationModel.status != 'rejected' )
        .group_by( DonationModel.campaign_id )
        .all()
    )

    mismatches = []
    for campaign in CampaignModel.query.order_by( CampaignModel.id ).all():
        expected = Decimal( sums.get( campaign.id ) or 0 ).quantize( Decimal( '0.01' ) )
        stored = Decimal( campaign.current_amount or 0 ).quantize( Decimal( '0.01' ) )
        if expected != stored:
            logging.warning(
                'Campaign %s current_amount is %s but its donations add up to %s.', campaign.id, stored, expected
            )
            mismatches.append( { 'campaign_id': campaign.id, 'stored': stored, 'expected': expected } )
            if fix:
                campaign.current_amount = expected

    if fix and mismatches:
        database.session.commit()
    return mismatches


def reconcile_sponsorship_flags( fix=False ):
    """Recompute every orphan's is_sponsored flag from the active sponsorships.

    :param bool fix: Write the recomputed flag where it differs.
    :return: A list of mismatches: orphan ID, stored flag and computed flag.
    """

    sponsored_ids = {
        orphan_id for ( orphan_id, ) in
        database.session.query( SponsorshipModel.orphan_id ).filter_by( status='active' ).distinct().all()
    }

    mismatches = []
    for orphan in OrphanModel.query.order_by( OrphanModel.id ).all():
        expected = orphan.id in sponsored_ids
        if bool( orphan.is_sponsored ) != expected:
            logging.warning( 'Orphan %s is_sponsored is %s but should be %s.', orphan.id, orphan.is_sponsored, expected )
            mismatches.append( { 'orphan_id': orphan.id, 'stored': bool( orphan.is_sponsored ), 'expected': expected } )
            if fix:
                orphan.is_sponsored = expected

    if fix and mismatches:
        database.session.commit()
    return mismatches
