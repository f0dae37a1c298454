"""Exception handlers for state rules: conflicts with existing rows and disallowed transitions."""
# pylint: disable=too-few-public-methods


class LedgerError( Exception ):
    """Base class for some custom exceptions for state and consistency rules."""


class LedgerConflictError( LedgerError ):
    """Base class for a request that conflicts with rows already stored ( HTTP 409 )."""

    def __init__( self, message='The request conflicts with an existing record.' ):
        super().__init__()
        self.message = message


class LedgerStateError( LedgerError ):
    """Base class for a request that is not allowed in the current state of a record ( HTTP 400 )."""

    def __init__( self, message='The request is not allowed in the current state.' ):
        super().__init__()
        self.message = message


class CampaignNotActiveError( LedgerStateError ):
    """Exception for a donation against a campaign that is not active."""

    def __init__( self ):
        super().__init__( 'Campaign is not active' )


class OrphanAlreadySponsoredError( LedgerConflictError ):
    """Exception for a second active sponsorship on the same orphan."""

    def __init__( self ):
        super().__init__( 'This orphan is already sponsored by someone else' )


class OrphanHasActiveSponsorshipError( LedgerConflictError ):
    """Exception for deleting an orphan that still has an active sponsorship."""

    def __init__( self ):
        super().__init__( 'Cannot delete orphan with active sponsorships' )


class SponsorshipNotActiveError( LedgerStateError ):
    """Exception for a payment on a sponsorship that is paused or terminated."""

    def __init__( self ):
        super().__init__( 'Payments can only be processed for active sponsorships' )


class SponsorshipTransitionError( LedgerStateError ):
    """Exception for a sponsorship status change that is not allowed."""

    def __init__( self, old_status, new_status ):
        super().__init__(
            'Sponsorship status cannot change from {} to {}'.format( old_status, new_status )
        )


class DeliveryExistsError( LedgerConflictError ):
    """Exception for a second delivery on the same donation."""

    def __init__( self ):
        super().__init__( 'Delivery already exists for this donation' )


class DeliveryNotInKindError( LedgerStateError ):
    """Exception for a delivery on a monetary donation."""

    def __init__( self ):
        super().__init__( 'Delivery can only be created for in-kind donations' )


class DeliveryTransitionError( LedgerStateError ):
    """Exception for a delivery status change that is not allowed."""

    def __init__( self, old_status, new_status ):
        super().__init__(
            'Delivery status cannot change from {} to {}'.format( old_status, new_status )
        )


class ReviewExistsError( LedgerConflictError ):
    """Exception for a second review of the same orphanage by the same user."""

    def __init__( self ):
        super().__init__( 'You have already reviewed this orphanage' )


class ApplicationExistsError( LedgerConflictError ):
    """Exception for a second application to the same opportunity by the same volunteer."""

    def __init__( self ):
        super().__init__( 'You have already applied for this opportunity' )


class OpportunityNotOpenError( LedgerStateError ):
    """Exception for an application to an opportunity that is closed or filled."""

    def __init__( self ):
        super().__init__( 'Volunteer opportunity is not open' )


class ApplicationTransitionError( LedgerStateError ):
    """Exception for a volunteer application status change that is not allowed."""

    def __init__( self, old_status, new_status ):
        super().__init__(
            'Application status cannot change from {} to {}'.format( old_status, new_status )
        )


class EmailAlreadyRegisteredError( LedgerConflictError ):
    """Exception for a registration with an email that is already taken."""

    def __init__( self ):
        super().__init__( 'Email already registered' )


class OrphanHasSponsorshipHistoryError( LedgerConflictError ):
    """Exception for deleting an orphan whose paused or terminated sponsorships still reference it."""

    def __init__( self ):
        super().__init__( 'Cannot delete orphan with sponsorship history' )
