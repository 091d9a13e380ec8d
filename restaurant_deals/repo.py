"""
Repository layer for database operations.
Persists loaded restaurants and deals, and reads them back as domain data.
"""

import logging
from typing import Dict, List, Optional
from sqlmodel import SQLModel, Session, create_engine, select
from sqlalchemy import delete, func
from sqlalchemy.orm import selectinload

from .domain import ChallengeData, Deal, Restaurant
from .models import CuisineEntity, DealEntity, RestaurantEntity, SuburbEntity
from .schemas import AppConfig, SyncStatsResponse
from .windows import Window


logger = logging.getLogger(__name__)


class DatabaseRepository:
    """Database repository for restaurants, deals, suburbs and cuisines."""

    def __init__(self, config: AppConfig):
        """Initialize database connection."""
        self.config = config
        self.engine = create_engine(
            config.database.url,
            echo=config.database.echo
        )

    def create_tables(self) -> None:
        """Create all database tables."""
        SQLModel.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Get database session."""
        return Session(self.engine)

    # Lookup helpers
    def _get_or_create_suburb(self, session: Session, name: str,
                              stats: SyncStatsResponse) -> SuburbEntity:
        suburb = session.exec(select(SuburbEntity).where(SuburbEntity.name == name)).first()
        if suburb is None:
            suburb = SuburbEntity(name=name)
            session.add(suburb)
            session.flush()
            stats.suburbs_created += 1
        return suburb

    def _get_or_create_cuisine(self, session: Session, name: str,
                               stats: SyncStatsResponse) -> CuisineEntity:
        cuisine = session.exec(select(CuisineEntity).where(CuisineEntity.name == name)).first()
        if cuisine is None:
            cuisine = CuisineEntity(name=name)
            session.add(cuisine)
            session.flush()
            stats.cuisines_created += 1
        return cuisine

    # Save operations
    def save_challenge_data(self, data: ChallengeData) -> SyncStatsResponse:
        """
        Save restaurants with their suburb, cuisines and deals.

        Suburbs and cuisines are shared by name. A restaurant that already
        exists (same object_id) has its fields and deals replaced.

        Returns:
            Counts of what was written
        """
        stats = SyncStatsResponse()

        with self.get_session() as session:
            for r in data.restaurants:
                suburb = self._get_or_create_suburb(session, r.suburb, stats) if r.suburb else None

                entity = session.exec(
                    select(RestaurantEntity).where(RestaurantEntity.object_id == r.object_id)
                ).first()
                if entity is None:
                    entity = RestaurantEntity(object_id=r.object_id)
                else:
                    session.execute(delete(DealEntity).where(DealEntity.restaurant_id == entity.id))
                    stats.restaurants_replaced += 1

                entity.name = r.name
                entity.address1 = r.address1
                entity.image_link = r.image_link
                entity.open_time = r.hours.start if r.hours else None
                entity.close_time = r.hours.end if r.hours else None
                entity.suburb = suburb

                cuisines: Dict[str, CuisineEntity] = {}
                for name in r.cuisines:
                    if name not in cuisines:
                        cuisines[name] = self._get_or_create_cuisine(session, name, stats)
                entity.cuisines = list(cuisines.values())

                session.add(entity)
                session.flush()  # assigns entity.id

                for d in r.deals:
                    session.add(DealEntity(
                        object_id=d.object_id or "",
                        discount=d.discount,
                        dine_in=d.dine_in,
                        lightning=d.lightning,
                        qty_left=d.qty_left,
                        available_from=d.availability.start,
                        available_to=d.availability.end,
                        restaurant_id=entity.id,
                    ))
                    stats.deals_saved += 1

                stats.restaurants_saved += 1

            session.commit()

        logger.info(f"Saved {stats.restaurants_saved} restaurants and {stats.deals_saved} deals")
        return stats

    # Read operations
    def load_challenge_data(self) -> ChallengeData:
        """Read every stored restaurant back as domain data, in insertion order."""
        with self.get_session() as session:
            entities = session.exec(
                select(RestaurantEntity)
                .options(
                    selectinload(RestaurantEntity.suburb),
                    selectinload(RestaurantEntity.cuisines),
                    selectinload(RestaurantEntity.deals),
                )
                .order_by(RestaurantEntity.id)
            ).all()

            restaurants = [self._to_restaurant(e) for e in entities]

        return ChallengeData(restaurants=tuple(restaurants))

    @staticmethod
    def _to_restaurant(entity: RestaurantEntity) -> Restaurant:
        hours: Optional[Window] = None
        if entity.open_time is not None or entity.close_time is not None:
            hours = Window(entity.open_time, entity.close_time)

        deals: List[Deal] = [
            Deal(
                object_id=d.object_id,
                discount=d.discount,
                dine_in=d.dine_in,
                lightning=d.lightning,
                qty_left=d.qty_left,
                availability=Window(d.available_from, d.available_to),
            )
            for d in sorted(entity.deals, key=lambda d: d.id)
        ]

        return Restaurant(
            object_id=entity.object_id,
            name=entity.name,
            address1=entity.address1,
            image_link=entity.image_link,
            suburb=entity.suburb.name if entity.suburb else None,
            cuisines=tuple(sorted(c.name for c in entity.cuisines)),
            hours=hours,
            deals=tuple(deals),
        )

    def get_restaurant_by_object_id(self, object_id: str) -> Optional[RestaurantEntity]:
        """Get restaurant row by feed object id."""
        with self.get_session() as session:
            return session.exec(
                select(RestaurantEntity).where(RestaurantEntity.object_id == object_id)
            ).first()

    def count_restaurants(self) -> int:
        with self.get_session() as session:
            return session.exec(select(func.count()).select_from(RestaurantEntity)).one()

    def count_deals(self) -> int:
        with self.get_session() as session:
            return session.exec(select(func.count()).select_from(DealEntity)).one()

    # Utility operations
    def health_check(self) -> bool:
        """Check if database is accessible."""
        try:
            with self.get_session() as session:
                session.exec(select(1))
                return True
        except Exception:
            return False
