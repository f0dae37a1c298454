"""Marshmallow schema module for UserModel."""
# pylint: disable=too-few-public-methods
from marshmallow import fields
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from application.flask_essentials import database
from application.models.user import UserModel

PRIVATE_ATTRIBUTES = ( 'password_hash', 'verification_token', 'reset_password_token', 'reset_password_expires' )


class UserSchema( SQLAlchemyAutoSchema ):
    """Marshmallow schema for serialization/deserialization of UserModel: credentials are never dumped."""

    full_name = fields.String( dump_only=True )

    class Meta:
        """Meta object for Marshmallow schema."""

        model = UserModel
        exclude = PRIVATE_ATTRIBUTES
        dump_only = ( 'id', 'role', 'is_verified', 'created_at', 'updated_at' )
        load_instance = True
        sqla_session = database.session
