"""Marshmallow schema module for VolunteerOpportunityModel and VolunteerApplicationModel."""
# pylint: disable=too-few-public-methods
from marshmallow import fields
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from application.flask_essentials import database
from application.models.volunteer import VolunteerApplicationModel
from application.models.volunteer import VolunteerOpportunityModel


class VolunteerOpportunitySchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of VolunteerOpportunityModel."""

    orphanage_name = fields.String( dump_only=True )
    application_count = fields.Integer( dump_only=True )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = VolunteerOpportunityModel
        include_fk = True
        dump_only = ( 'created_at', 'updated_at' )
        load_instance = True
        sqla_session = database.session


class VolunteerApplicationSchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of VolunteerApplicationModel."""

    volunteer_name = fields.String( dump_only=True )
    opportunity_title = fields.String( dump_only=True )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = VolunteerApplicationModel
        include_fk = True
        dump_only = ( 'status', 'resume_path', 'created_at', 'updated_at' )
        load_instance = True
        sqla_session = database.session
