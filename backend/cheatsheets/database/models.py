"""Modèles SQLAlchemy pour les dépôts suivis et les brouillons de formulaire."""

from datetime import datetime
from typing import Optional
import json
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    String,
    Text,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.sql import func

Base = declarative_base()


def new_repository_id() -> str:
    return uuid.uuid4().hex


class TrackedRepository(Base):
    """Table des dépôts suivis par l'utilisateur."""

    __tablename__ = "user_repositories"

    id = Column(String, primary_key=True, default=new_repository_id)
    name = Column(String, nullable=False)
    owner = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    url = Column(String, nullable=False)
    is_private = Column(Boolean, nullable=False, default=False)
    default_branch = Column(String, nullable=False, default="main")
    subdirectory = Column(String, nullable=True)  # Dossier des cheatsheets dans le dépôt
    last_synced_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (Index("idx_user_repositories_owner_name", "owner", "name"),)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "owner": self.owner,
            "description": self.description,
            "url": self.url,
            "isPrivate": bool(self.is_private),
            "defaultBranch": self.default_branch,
            "subdirectory": self.subdirectory,
            "lastSyncedAt": self.last_synced_at.isoformat() if self.last_synced_at else None,
        }


class Draft(Base):
    """Valeurs de formulaire en cours de saisie (clé -> scalaire JSON)."""

    __tablename__ = "drafts"

    key = Column(String, primary_key=True)
    value_json = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def get_value(self) -> Optional[str | bool]:
        return json.loads(self.value_json)

    def set_value(self, value: str | bool) -> None:
        self.value_json = json.dumps(value)
        self.updated_at = datetime.now()


def init_db(db_path: str) -> Session:
    """Initialise la base de données et retourne une session."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    return SessionLocal()
