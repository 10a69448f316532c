from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .database import Base

USER_TYPE_USER = "user"
USER_TYPE_SYSTEM = "system"
USER_TYPE_ANONYMOUS = "anonymous"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    login = Column(String(255), nullable=False, unique=True, index=True)
    firstname = Column(String(60), nullable=True)
    lastname = Column(String(60), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    password_hash = Column(String(255), nullable=True)
    user_type = Column(String(16), nullable=False, default=USER_TYPE_USER, index=True)  # user|system|anonymous
    is_admin = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(String, nullable=False, default="")
    updated_at = Column(String, nullable=False, default="")

    memberships = relationship("Member", back_populates="user", cascade="all, delete-orphan")

    @property
    def name(self) -> str:
        full_name = " ".join(part for part in (self.firstname, self.lastname) if part and part.strip())
        return full_name.strip() or (self.login or "")

    @property
    def is_anonymous(self) -> bool:
        return self.user_type == USER_TYPE_ANONYMOUS

    def __str__(self) -> str:
        return self.name


class AuthSession(Base):
    __tablename__ = "auth_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    token_hash = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(String, nullable=False, index=True)
    revoked_at = Column(String, nullable=True, index=True)
    created_at = Column(String, nullable=False, index=True)


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    identifier = Column(String(100), nullable=True, unique=True, index=True)
    description = Column(Text, nullable=True)
    is_public = Column(Boolean, default=False, nullable=False)
    parent_project_id = Column(Integer, ForeignKey("projects.id"), nullable=True, index=True)
    created_at = Column(String, nullable=False, default="")
    updated_at = Column(String, nullable=False, default="")

    parent = relationship("Project", remote_side=[id], back_populates="children")
    children = relationship("Project", back_populates="parent")
    members = relationship("Member", back_populates="project", cascade="all, delete-orphan")
    versions = relationship("Version", back_populates="project", cascade="all, delete-orphan")

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def ancestors(self) -> list["Project"]:
        """Parent chain, root first. A cyclic chain stops at the first repeat."""
        chain: list[Project] = []
        seen = {id(self)}
        current = self.parent
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            chain.append(current)
            current = current.parent
        chain.reverse()
        return chain

    def is_descendant_of(self, other: "Project") -> bool:
        if other is None or other is self:
            return False
        other_id = getattr(other, "id", None)
        for ancestor in self.ancestors():
            if ancestor is other:
                return True
            if other_id is not None and ancestor.id == other_id:
                return True
        return False

    def __str__(self) -> str:
        return self.name or ""


class Member(Base):
    __tablename__ = "members"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_members_project_user"),)

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(String, nullable=False, default="")

    project = relationship("Project", back_populates="members")
    user = relationship("User", back_populates="memberships")


class Version(Base):
    __tablename__ = "versions"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(255), nullable=True)
    status = Column(String(16), nullable=False, default="open", index=True)  # open|locked|closed
    sharing = Column(String(16), nullable=False, default="none", index=True)  # none|descendants|hierarchy|tree|system
    effective_date = Column(String(10), nullable=True)
    created_at = Column(String, nullable=False, default="")
    updated_at = Column(String, nullable=False, default="")

    project = relationship("Project", back_populates="versions")

    def __str__(self) -> str:
        return self.name or ""
