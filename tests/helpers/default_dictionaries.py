"""A collection of dictionary payloads for the unit tests, e.g. payloads to build the models or POST to endpoints.

   Call the dictionary and provide it an argument for key-value pairs to be updated. If None is provided
   no key-value pairs are updated and the default dictionary is returned. So, for example, calling the
   get_donation_dict like:

       get_donation_dict( { 'amount': '300.00', 'campaign_id': 1 } )

   will return the default dictionary with the amount updated from '25.00' to '300.00'. The update()
   function at the end of the module is called to do the updating.
"""
import collections.abc

PASSWORD = 'secret123'


def get_register_dict( update_key_values=None ):
    """The payload for POST /auth/register.

    :param update_key_values: The key-value pairs that should be updated in the default dictionary.
    :return: Updated dictionary
    """

    register_default = {
        'email': 'amina.yusuf@example.org',
        'password': PASSWORD,
        'first_name': 'Amina',
        'last_name': 'Yusuf',
        'role': 'donor',
        'phone': '+254 700 000 001',
        'address': '12 Moi Avenue, Nairobi'
    }
    return update( update_key_values, register_default )


def get_orphanage_dict( update_key_values=None ):
    """The OrphanageModel dictionary for deserialization.

    :param update_key_values: The key-value pairs that should be updated in the default dictionary.
    :return: Updated dictionary
    """

    orphanage_default = {
        'id': None,
        'name': 'Sunrise Children Home',
        'address': '4 Riverside Drive, Nairobi',
        'location': 'Nairobi',
        'phone': '+254 700 000 002',
        'email': 'info@sunrise.example.org',
        'description': 'A home for forty children.'
    }
    return update( update_key_values, orphanage_default )


def get_orphan_dict( update_key_values=None ):
    """The OrphanModel dictionary for deserialization.

    :param update_key_values: The key-value pairs that should be updated in the default dictionary.
    :return: Updated dictionary
    """

    orphan_default = {
        'id': None,
        'first_name': 'Baraka',
        'last_name': 'Otieno',
        'dob': '2015-06-15',
        'gender': 'male',
        'orphanage_id': None,
        'health_status': 'Good',
        'education_status': 'Grade 3',
        'background_story': 'Lives at the home since 2019.'
    }
    return update( update_key_values, orphan_default )


def get_campaign_dict( update_key_values=None ):
    """The payload for POST /campaigns.

    :param update_key_values: The key-value pairs that should be updated in the default dictionary.
    :return: Updated dictionary
    """

    campaign_default = {
        'title': 'Flood relief',
        'description': 'Food and blankets after the floods.',
        'target_amount': '1000.00',
        'start_date': '2024-01-01',
        'end_date': '2024-12-31',
        'orphanage_id': None
    }
    return update( update_key_values, campaign_default )


def get_donation_dict( update_key_values=None ):
    """The payload for POST /donations.

    :param update_key_values: The key-value pairs that should be updated in the default dictionary.
    :return: Updated dictionary
    """

    donation_default = {
        'amount': '25.00',
        'donation_type': 'general',
        'category': 'monetary',
        'payment_method': 'card',
        'transaction_id': 'txn-0001',
        'orphan_id': None,
        'orphanage_id': None,
        'campaign_id': None,
        'description': 'For school books.',
        'is_anonymous': False
    }
    return update( update_key_values, donation_default )


def get_sponsorship_dict( update_key_values=None ):
    """The payload for POST /sponsorships.

    :param update_key_values: The key-value pairs that should be updated in the default dictionary.
    :return: Updated dictionary
    """

    sponsorship_default = {
        'orphan_id': None,
        'monthly_amount': '50.00',
        'payment_frequency': 'monthly',
        'start_date': '2024-01-01',
        'payment_method': 'card'
    }
    return update( update_key_values, sponsorship_default )


def get_opportunity_dict( update_key_values=None ):
    """The payload for POST /volunteers/opportunities.

    :param update_key_values: The key-value pairs that should be updated in the default dictionary.
    :return: Updated dictionary
    """

    opportunity_default = {
        'orphanage_id': None,
        'title': 'Weekend reading club',
        'description': 'Read with the younger children on Saturdays.',
        'required_skills': 'reading, patience',
        'start_date': '2024-03-01',
        'end_date': '2024-06-30',
        'max_volunteers': 4
    }
    return update( update_key_values, opportunity_default )


def update( update_key_values, base_dictionary ):
    """A routine to update a possibly nested dictionary with key-value pairs.

    :param update_key_values: The key-value pairs to update in the dictionary.
    :param base_dictionary: The dictionary to update.
    :return: Updated base dictionary.
    """

    if update_key_values:
        for base_key, base_value in base_dictionary.items():
            if isinstance( base_value, collections.abc.Mapping ):
                if base_key in update_key_values:
                    base_dictionary[ base_key ] = update(
                        update_key_values.get( base_key, {} ), base_value )
            else:
                if base_key in update_key_values:
                    base_dictionary[ base_key ] = update_key_values[ base_key ]

    return base_dictionary
