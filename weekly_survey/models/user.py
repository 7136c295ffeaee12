# weekly_survey/models/user.py
from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from weekly_survey.db.base_class import Base

ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"


# users (id_number unique: número de estudiante / identificador del admin)
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    id_number = Column(String(50), unique=True, index=True, nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_STUDENT, server_default=ROLE_STUDENT)
    password_hash = Column(String(255), nullable=True)  # solo admins
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    submissions = relationship("Submission", back_populates="user", passive_deletes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
