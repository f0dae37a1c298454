"""Exception handlers for the models: records that cannot be found."""
# pylint: disable=too-few-public-methods


class ModelError( Exception ):
    """Base class for some custom exceptions for the models."""


class ModelNotFoundError( ModelError ):
    """Exception for a request with no results found."""

    entity = 'Record'

    def __init__( self ):
        super().__init__()
        self.message = '{} not found'.format( self.entity )


class ModelUserNotFoundError( ModelNotFoundError ):
    """Exception for a user that was not found."""

    entity = 'User'


class ModelOrphanageNotFoundError( ModelNotFoundError ):
    """Exception for an orphanage that was not found."""

    entity = 'Orphanage'


class ModelOrphanNotFoundError( ModelNotFoundError ):
    """Exception for an orphan that was not found."""

    entity = 'Orphan'


class ModelReviewNotFoundError( ModelNotFoundError ):
    """Exception for a review that was not found."""

    entity = 'Review'


class ModelCampaignNotFoundError( ModelNotFoundError ):
    """Exception for a campaign that was not found."""

    entity = 'Campaign'


class ModelDonationNotFoundError( ModelNotFoundError ):
    """Exception for a donation that was not found."""

    entity = 'Donation'


class ModelSponsorshipNotFoundError( ModelNotFoundError ):
    """Exception for a sponsorship that was not found."""

    entity = 'Sponsorship'


class ModelDeliveryNotFoundError( ModelNotFoundError ):
    """Exception for a delivery tracking record that was not found."""

    entity = 'Delivery'


class ModelOpportunityNotFoundError( ModelNotFoundError ):
    """Exception for a volunteer opportunity that was not found."""

    entity = 'Volunteer opportunity'


class ModelApplicationNotFoundError( ModelNotFoundError ):
    """Exception for a volunteer application that was not found."""

    entity = 'Volunteer application'


class ModelNotificationNotFoundError( ModelNotFoundError ):
    """Exception for a notification that was not found or belongs to another user."""

    entity = 'Notification'
