from typing import List, Optional, Union

from faker import Faker

fake = Faker()

ACTIONS = ["list", "create", "view", "edit", "delete", "share", "print", "export", "import"]


def fake_permission(count: Optional[int] = None) -> Union[dict, List[dict]]:
    """Valid permission payload, or a list of ``count`` distinct payloads."""
    def sample() -> dict:
        return {
            "resource": fake.unique.word(),
            "action": fake.random_element(ACTIONS),
            "description": fake.paragraph(),
        }

    if count is None:
        return sample()
    return [sample() for _ in range(max(count, 1))]
