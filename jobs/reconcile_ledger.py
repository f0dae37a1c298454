"""Recompute the campaign totals and the orphans' sponsored flags from their source rows.

Run as a cron job to report drift, and with fix to repair it:

python -c "import jobs.reconcile_ledger;jobs.reconcile_ledger.get_cron_for_reconcile()"
python -c "import jobs.reconcile_ledger;jobs.reconcile_ledger.get_cron_for_reconcile( fix=True )"
"""
import logging
import os

from application.app import create_app
from application.helpers.ledger import reconcile_campaign_totals
from application.helpers.ledger import reconcile_sponsorship_flags

# Check for how the application is being run and use that.
app_config_env = os.environ.get( 'APP_ENV', 'DEFAULT' )  # pylint: disable=invalid-name
app = create_app( app_config_env )  # pylint: disable=C0103


def get_cron_for_reconcile( fix=False ):
    """A function to be called as a cron job to check, and optionally repair, the derived ledger fields.

    :param bool fix: Write the recomputed values where they differ.
    :return: The mismatches found, by kind.
    """

    with app.app_context():
        logging.info( '' )
        logging.info( '1. Reconcile the campaign totals.' )
        campaign_mismatches = reconcile_campaign_totals( fix=fix )
        logging.info( '    %s campaign(s) out of step.', len( campaign_mismatches ) )

        logging.info( '2. Reconcile the sponsored flags.' )
        orphan_mismatches = reconcile_sponsorship_flags( fix=fix )
        logging.info( '    %s orphan(s) out of step.', len( orphan_mismatches ) )

        if fix:
            logging.info( '3. Repaired the mismatches.' )

    return { 'campaigns': campaign_mismatches, 'orphans': orphan_mismatches }
