#------------------------------------------------------------
#                     ranking_service.py
#        Orders project records by stars and marks the
#                     featured subset.

from dataclasses import replace
from typing import Iterable, List
from ..config import FEATURED_COUNT
from ..models import ProjectRecord


# This function does rank records by star count, most starred first.
# sorted() is stable, so equal star counts keep their input order.
def rank_projects(records: Iterable[ProjectRecord], featured_count: int = FEATURED_COUNT) -> List[ProjectRecord]:
    ranked = sorted(records, key=lambda record: record.stars, reverse=True)
    return [
        replace(record, featured=index < featured_count)
        for index, record in enumerate(ranked)
    ]
