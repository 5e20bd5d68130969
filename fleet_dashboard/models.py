from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Boolean,
    JSON,
    DateTime,
    ForeignKey,
    Text,
    Index,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo so every stored time is naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# --- Fleet ---

class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String, primary_key=True)  # e.g. "truck-001"
    name = Column(String, nullable=False)
    type = Column(String, nullable=False, index=True)  # haul_truck, excavator, loader, drill, bulldozer
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    status = Column(String, nullable=False, default="idle", index=True)
    capacity = Column(Float, nullable=False, default=100.0)  # tons
    current_load = Column(Float, nullable=False, default=0.0)
    battery_level = Column(Float, nullable=False, default=100.0)
    destination = Column(JSON, nullable=True)  # {"lat": ..., "lng": ...}
    route = Column(JSON, nullable=False, default=list)
    extra_metadata = Column("metadata", JSON, nullable=False, default=dict)
    last_update = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_vehicles_lat_lng", "lat", "lng"),
    )

    @property
    def position(self):
        return {"lat": self.lat, "lng": self.lng}

    @property
    def battery_status(self) -> str:
        if self.battery_level >= 75:
            return "good"
        if self.battery_level >= 50:
            return "fair"
        if self.battery_level >= 25:
            return "low"
        return "critical"

    @property
    def load_percentage(self) -> int:
        if not self.capacity:
            return 0
        return round(self.current_load / self.capacity * 100)


# --- Site ---

class PointOfInterest(Base):
    __tablename__ = "pois"

    id = Column(String, primary_key=True)  # e.g. "zone-a", "crusher-01"
    name = Column(String, nullable=False)
    type = Column(String, nullable=False, index=True)  # storage_zone, crusher, loading_dock, ...
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    materials = Column(JSON, nullable=False, default=list)  # material names held or accepted
    capacity = Column(Float, nullable=False, default=1000.0)
    current_amount = Column(Float, nullable=False, default=0.0)
    status = Column(String, nullable=False, default="operational", index=True)
    description = Column(Text, nullable=True)
    extra_metadata = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_pois_lat_lng", "lat", "lng"),
    )

    @property
    def position(self):
        return {"lat": self.lat, "lng": self.lng}

    @property
    def utilization_percentage(self) -> int:
        if not self.capacity:
            return 0
        return round(self.current_amount / self.capacity * 100)

    @property
    def available_space(self) -> float:
        return self.capacity - self.current_amount


class Material(Base):
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    type = Column(String, nullable=False, index=True)  # ore, mineral, waste, processed, fuel, equipment, chemical
    density = Column(Float, nullable=False)  # tons per cubic meter
    color = Column(String, nullable=False)  # hex, for map rendering
    description = Column(Text, nullable=True)
    properties = Column(JSON, nullable=False, default=dict)  # hardness, toxicity, flammability, ...
    economic_data = Column(JSON, nullable=False, default=dict)
    compliance = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    @property
    def safety_level(self) -> str:
        props = self.properties or {}
        toxicity = props.get("toxicity") or "none"
        flammability = props.get("flammability") or "none"
        corrosiveness = props.get("corrosiveness") or "none"
        radioactivity = bool(props.get("radioactivity"))

        if radioactivity or toxicity == "extreme" or (
            toxicity == "high" and (flammability == "high" or corrosiveness == "high")
        ):
            return "critical"
        levels = (toxicity, flammability, corrosiveness)
        for level in ("high", "medium", "low"):
            if level in levels:
                return level
        return "minimal"


# --- Tasks ---

class Task(Base):
    __tablename__ = "tasks"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    original_instruction = Column(Text, nullable=False)
    # Not a foreign key: a task may name a vehicle the store does not know.
    vehicle_id = Column(String, nullable=True, index=True)
    status = Column(String, nullable=False, default="pending_approval", index=True)
    priority = Column(String, nullable=False, default="medium", index=True)
    estimated_duration = Column(Integer, nullable=False, default=0)  # minutes
    actual_duration = Column(Integer, nullable=True)
    decomposition_summary = Column(Text, nullable=True)
    feedback = Column(Text, nullable=True)
    current_step_index = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False)

    approved_at = Column(DateTime, nullable=True)
    rejected_at = Column(DateTime, nullable=True)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    steps = relationship(
        "TaskStep",
        back_populates="task",
        order_by="TaskStep.step_number",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_tasks_status_priority", "status", "priority"),
        Index("ix_tasks_vehicle_status", "vehicle_id", "status"),
    )

    # Optimistic locking: a stale UPDATE raises StaleDataError
    __mapper_args__ = {"version_id_col": version}

    @property
    def completion_percentage(self) -> int:
        if not self.steps:
            return 0
        completed = sum(1 for step in self.steps if step.status == "completed")
        return round(completed / len(self.steps) * 100)

    @property
    def current_step(self):
        for step in self.steps:
            if step.status == "in_progress":
                return step
        for step in self.steps:
            if step.status == "pending":
                return step
        return None

    @property
    def elapsed_time(self) -> int:
        """Minutes since the task started, up to completion."""
        if not self.started_at:
            return 0
        end = self.completed_at or utcnow()
        return round((end - self.started_at).total_seconds() / 60)


class TaskStep(Base):
    __tablename__ = "task_steps"

    id = Column(String, primary_key=True)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    step_number = Column(Integer, nullable=False)  # 1-based
    action = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    estimated_duration = Column(Integer, nullable=False, default=0)  # minutes
    status = Column(String, nullable=False, default="pending")
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    parameters = Column(JSON, nullable=False, default=dict)
    results = Column(JSON, nullable=False, default=dict)

    task = relationship("Task", back_populates="steps")


# --- Chat ---

class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(String, primary_key=True)
    vehicle_id = Column(String, nullable=False, index=True)
    message = Column(Text, nullable=False)
    sender = Column(String, nullable=False, index=True)  # user, vehicle, system, operator
    message_type = Column(String, nullable=False, default="text")
    priority = Column(String, nullable=False, default="normal")
    timestamp = Column(DateTime, nullable=False, default=utcnow, index=True)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    related_task_id = Column(String, nullable=True)

    __table_args__ = (
        Index("ix_chat_messages_vehicle_timestamp", "vehicle_id", "timestamp"),
    )
