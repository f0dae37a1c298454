"""A module to facilitate serialization and deserialization of a model given its schema."""

SERVER_MANAGED_FIELDS = ( 'created_at', 'updated_at' )


def from_json( model_schema, model_dictionary, create=True, instance=None ):
    """Takes the model_dictionary and deserializes it into the model using its Marshmallow schema: model_schema.

    Only the fields the schema is allowed to load are passed on, so dump only attributes such as ledger totals and
    flags in a request payload are ignored rather than written. If create is true the ID is removed and a new
    model is built. If create is False the model is updated: either the instance passed in, or the row that the
    ID in the dictionary identifies. Updates are partial, so only the keys present are changed.

    :param obj model_schema: This is a Marshmallow schema to be used for 2-way serialization.
    :param dict model_dictionary: The dictionary that is to be deserialized by the schema.
    :param bool create: Whether create or update the model. Default is to create.
    :param obj instance: The model to update when create is False.
    :return: The model.
    """

    columns = [ column.key for column in model_schema.Meta.model.__table__.columns ]
    fields = [
        field for field in model_schema.load_fields
        if field in columns and field not in SERVER_MANAGED_FIELDS
    ]
    if create and 'id' in fields:
        fields.remove( 'id' )

    model_json = {}
    for field in fields:
        if field in model_dictionary:
            model_json[ field ] = model_dictionary[ field ]

    if create:
        return model_schema.load( model_json )
    return model_schema.load( model_json, instance=instance, partial=True )
