"""Importing any model imports them all, so every relationship target is mapped before a schema is built."""
# pylint: disable=unused-import
from application.models import donation
from application.models import campaign
from application.models import orphan
from application.models import orphanage
from application.models import user
from application.models import sponsorship
from application.models import delivery
from application.models import volunteer
from application.models import notification
