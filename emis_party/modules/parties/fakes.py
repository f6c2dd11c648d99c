from typing import List, Optional, Union

from faker import Faker

from emis_party.config import Settings, settings as default_settings

fake = Faker()


def fake_point() -> dict:
    return {"type": "Point", "coordinates": [float(fake.longitude()), float(fake.latitude())]}


def fake_party(count: Optional[int] = None, settings: Optional[Settings] = None) -> Union[dict, List[dict]]:
    """Valid party payload (camelCase keys) without parent or roles."""
    settings = settings or default_settings

    def sample() -> dict:
        return {
            "type": fake.random_element(settings.get_party_types_list()),
            "ownership": fake.random_element(settings.get_party_ownerships_list()),
            "name": fake.unique.company(),
            "avatar": fake.image_url(),
            "phone": fake.numerify("(9##) ###-####"),
            "landline": fake.phone_number(),
            "fax": fake.phone_number(),
            "email": fake.unique.email(),
            "website": fake.url(),
            "about": fake.paragraph(),
            "physicalAddress": fake.street_address(),
            "postalAddress": fake.street_address(),
            "locale": fake.random_element(settings.get_locales_list()),
            "location": fake_point(),
        }

    if count is None:
        return sample()
    return [sample() for _ in range(max(count, 1))]
