from sqlalchemy import UniqueConstraint

from core.constants import SOCKS_UNIQUE_CONSTRAINT
from db.sock import Sock


def test_pair_is_covered_by_unique_constraint_only():
    table = Sock.__table__

    assert table.indexes == set()
    [unique] = [c for c in table.constraints if isinstance(c, UniqueConstraint)]
    assert unique.name == SOCKS_UNIQUE_CONSTRAINT
    assert [c.name for c in unique.columns] == ["color", "cotton_percentage"]
