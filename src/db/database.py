from sqlalchemy import create_engine, inspect, func, Column, String, Float
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from contextlib import contextmanager
from enum import Enum
from threading import Lock
from typing import Optional, Sequence
import os
import logging

from src.geocoding.exceptions import StoreUnavailableError
from src.models.geocode import BoundingBox

# Get logger
logger = logging.getLogger(__name__)

CACHE_DIRNAME = "geocode"
CACHE_FILENAME = "cache.db"

Base = declarative_base()

# Places resolved by the remote service, valid anywhere inside their bounding box
class RegionDB(Base):
    __tablename__ = "regions"
    lat_min = Column(Float, primary_key=True)
    lat_max = Column(Float, primary_key=True)
    lon_min = Column(Float, primary_key=True)
    lon_max = Column(Float, primary_key=True)
    description = Column(String, nullable=False)

# Per-photo memoization: item key (content hash) -> description
class ItemKeyDB(Base):
    __tablename__ = "item_keys"
    item_key = Column(String, primary_key=True)
    description = Column(String, nullable=False)


class StoreState(Enum):
    CREATED = "created"  # file did not exist, empty schema was just written
    READY = "ready"
    UNAVAILABLE = "unavailable"  # file did not exist and could not be created


class GeocodeCache:
    """
    Persistent SQLite store of resolved place descriptions.

    Two indices are kept: an exact one keyed by an opaque item identifier and a
    spatial one keyed by bounding box and queried by point containment. A
    connection is opened for every operation and disposed afterwards.

    Read errors on a healthy store count as cache misses, write errors are
    logged and dropped. A store that cannot be created counts as empty. A store
    file that exists but cannot be read (corrupt file, foreign schema) raises
    StoreUnavailableError from lookups.
    """

    # Serializes first-touch creation and schema checks within this process
    _init_lock = Lock()

    def __init__(self, base_path):
        self.base_path = base_path
        self.db_path = os.path.join(base_path, CACHE_DIRNAME, CACHE_FILENAME)

    @contextmanager
    def _open(self):
        engine = create_engine(f"sqlite:///{self.db_path}")
        try:
            with self._init_lock:
                state = self._prepare(engine)
            yield state, sessionmaker(bind=engine, autoflush=False)
        finally:
            engine.dispose()

    def _prepare(self, engine) -> StoreState:
        if os.path.exists(self.db_path):
            self._verify_schema(engine)
            return StoreState.READY

        try:
            os.makedirs(os.path.dirname(self.db_path), exist_ok=True)
            Base.metadata.create_all(bind=engine)
        except (OSError, SQLAlchemyError) as e:
            if os.path.isfile(self.db_path):
                # A concurrent caller may have created the file first
                self._verify_schema(engine)
                return StoreState.READY
            logger.error(f"Cannot create geocode cache at {self.db_path}, caching disabled: {e}")
            return StoreState.UNAVAILABLE
        logger.info(f"Created geocode cache at {self.db_path}")
        return StoreState.CREATED

    def _verify_schema(self, engine):
        try:
            inspector = inspect(engine)
            tables = set(inspector.get_table_names())
            for table in Base.metadata.sorted_tables:
                if table.name not in tables:
                    raise StoreUnavailableError(self.db_path, f"missing table '{table.name}'")
                columns = {column["name"] for column in inspector.get_columns(table.name)}
                missing = set(table.columns.keys()) - columns
                if missing:
                    raise StoreUnavailableError(
                        self.db_path, f"table '{table.name}' lacks columns {sorted(missing)}"
                    )
        except SQLAlchemyError as e:
            raise StoreUnavailableError(self.db_path, str(e)) from e

    def initialize(self) -> StoreState:
        """Create the store if absent, otherwise check its schema."""
        with self._open() as (state, _):
            return state

    def lookup_by_key(self, item_key) -> Optional[str]:
        if not item_key:
            return None

        with self._open() as (state, Session):
            if state is not StoreState.READY:
                return None
            try:
                with Session() as session:
                    row = session.query(ItemKeyDB.description).filter(ItemKeyDB.item_key == item_key).first()
            except SQLAlchemyError as e:
                logger.warning(f"Key lookup failed for {item_key}, treating as cache miss: {e}")
                return None

        if row:
            logger.debug(f"Key cache hit for {item_key}")
            return row.description
        return None

    def lookup_by_region(self, latitude, longitude, item_key=None) -> Optional[str]:
        """
        Return the description of a stored region containing the point.

        Bounds are inclusive. When regions overlap, the smallest one wins. On a
        hit the item key (if any) is recorded so the next lookup for that item
        is an exact one.
        """
        with self._open() as (state, Session):
            if state is not StoreState.READY:
                return None
            try:
                with Session() as session:
                    area = (RegionDB.lat_max - RegionDB.lat_min) * (RegionDB.lon_max - RegionDB.lon_min)
                    row = (
                        session.query(RegionDB.description)
                        .filter(
                            RegionDB.lat_min <= latitude,
                            RegionDB.lat_max >= latitude,
                            RegionDB.lon_min <= longitude,
                            RegionDB.lon_max >= longitude,
                        )
                        .order_by(area, RegionDB.lat_min, RegionDB.lon_min)
                        .first()
                    )
            except SQLAlchemyError as e:
                logger.warning(f"Region lookup failed for ({latitude}, {longitude}), treating as cache miss: {e}")
                return None

        if not row:
            return None

        logger.debug(f"Region cache hit for ({latitude}, {longitude}): {row.description}")
        if item_key:
            self.record_key(item_key, row.description)
        return row.description

    def record_region(self, bbox: Sequence, description) -> bool:
        """
        Store a region given as [lon_min, lat_min, lon_max, lat_max].

        Silently ignored when the description is empty or the box is unusable.
        Returns True when the row is in the store afterwards.
        """
        if not description:
            return False
        box = BoundingBox.from_lon_lat(bbox)
        if box is None:
            logger.debug(f"Ignoring malformed bounding box {bbox!r}")
            return False

        stmt = (
            sqlite_insert(RegionDB)
            .values(
                lat_min=box.lat_min,
                lat_max=box.lat_max,
                lon_min=box.lon_min,
                lon_max=box.lon_max,
                description=description,
            )
            .on_conflict_do_nothing()
        )
        return self._write(stmt, f"region {box.model_dump()}")

    def record_key(self, item_key, description) -> bool:
        if not item_key or not description:
            return False
        stmt = (
            sqlite_insert(ItemKeyDB)
            .values(item_key=item_key, description=description)
            .on_conflict_do_nothing()
        )
        return self._write(stmt, f"item key {item_key}")

    def _write(self, stmt, label) -> bool:
        try:
            with self._open() as (state, Session):
                if state is StoreState.UNAVAILABLE:
                    logger.error(f"Failed to cache {label}: store at {self.db_path} is unavailable")
                    return False
                with Session() as session:
                    session.execute(stmt)
                    session.commit()
        except (SQLAlchemyError, StoreUnavailableError) as e:
            logger.error(f"Failed to cache {label}: {e}")
            return False
        logger.debug(f"Cached {label}")
        return True

    def stats(self):
        with self._open() as (state, Session):
            if state is not StoreState.READY:
                return {"regions": 0, "item_keys": 0}
            with Session() as session:
                return {
                    "regions": session.query(func.count()).select_from(RegionDB).scalar(),
                    "item_keys": session.query(func.count()).select_from(ItemKeyDB).scalar(),
                }
