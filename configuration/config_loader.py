"""A configuration loader that augments the Flask app.config() with YAML and environment variables.

The YAML file has a DEFAULT section and one section per environment, e.g. DEV, TEST and PROD. The DEFAULT
section is loaded first and the environment section is laid over it. Environment variables are applied last:

    HOPECONNECT_JWT_SECRET_KEY=...          applies to every environment.
    HOPECONNECT_PROD_JWT_SECRET_KEY=...     applies only when the environment is PROD.
"""
import logging
import os

import yaml

ENV_VARIABLE_PREFIX = 'HOPECONNECT_'


class ConfigLoader( dict ):
    """A dictionary of configuration variables built from YAML and tagged environment variables."""

    def update_from_yaml_file( self, file_path, app_config_env ):
        """Load the DEFAULT section and then the section for the environment.

        :param str file_path: Path to the YAML configuration file.
        :param str app_config_env: The environment name, e.g. DEV, TEST or PROD.
        :return:
        """

        with open( file_path, 'r' ) as yaml_file:
            configuration = yaml.safe_load( yaml_file ) or {}

        self.update( configuration.get( 'DEFAULT', {} ) or {} )
        if app_config_env != 'DEFAULT':
            if app_config_env not in configuration:
                logging.warning( 'No configuration section found for environment %s.', app_config_env )
            self.update( configuration.get( app_config_env, {} ) or {} )

    def update_from_env_variables( self, app_config_env ):
        """Overlay configuration with environment variables tagged by the prefix.

        :param str app_config_env: The environment name, e.g. DEV, TEST or PROD.
        :return:
        """

        env_prefix = '{}{}_'.format( ENV_VARIABLE_PREFIX, app_config_env )
        general = {}
        specific = {}
        for key, value in os.environ.items():
            if key.startswith( env_prefix ):
                specific[ key[ len( env_prefix ): ] ] = self.cast_value( value )
            elif key.startswith( ENV_VARIABLE_PREFIX ):
                general[ key[ len( ENV_VARIABLE_PREFIX ): ] ] = self.cast_value( value )

        self.update( general )
        self.update( specific )

    @staticmethod
    def cast_value( value ):
        """Environment variables are strings: parse them as YAML scalars so integers and booleans survive."""

        try:
            return yaml.safe_load( value )
        except yaml.YAMLError:
            return value
