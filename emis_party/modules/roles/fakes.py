from typing import List, Optional, Union

from faker import Faker

from emis_party.config import Settings, settings as default_settings

fake = Faker()


def fake_role(count: Optional[int] = None, settings: Optional[Settings] = None) -> Union[dict, List[dict]]:
    """Valid role payload without permissions, or a list of ``count`` of them."""
    settings = settings or default_settings

    def sample() -> dict:
        return {
            "type": fake.random_element(settings.get_role_types_list()),
            "name": fake.unique.job(),
            "description": fake.paragraph(),
        }

    if count is None:
        return sample()
    return [sample() for _ in range(max(count, 1))]
