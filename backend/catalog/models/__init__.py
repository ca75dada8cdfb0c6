"""ORM Models — SQLAlchemy declarative models for the catalog store relations.

Invariants:
    - All models inherit from Base (db/base.py)
    - refresh_state is the aggregate root; final_entities and search cascade from it

Design Decisions:
    - One file per relation for locality
    - All models imported here so Base.metadata is complete before create_all or autogenerate
"""

from catalog.models.refresh_state import RefreshState  # noqa: F401
from catalog.models.final_entity import FinalEntity  # noqa: F401
from catalog.models.refresh_state_reference import RefreshStateReference  # noqa: F401
from catalog.models.search_fact import SearchFact  # noqa: F401
