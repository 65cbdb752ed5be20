"""Factory Boy definition for :class:`favapi.models.client.Client`."""

from __future__ import annotations

import factory
from favapi.models.client import Client

from tests.factories import BaseFactory

DEFAULT_PASSWORD = "s3cret-pass"


class ClientFactory(BaseFactory):
    """
    Build persisted :class:`favapi.models.client.Client` instances.

    ``password`` goes through the model's write-only setter, so the stored
    value is always a hash.
    """

    class Meta:
        model = Client

    id = None  # let autoincrement handle it
    name = factory.Faker("name")
    email = factory.Sequence(lambda n: f"client{n}@example.com")
    password = DEFAULT_PASSWORD
