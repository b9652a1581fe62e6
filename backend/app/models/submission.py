"""
Modèle SQLAlchemy pour la table student_submissions.
Les noms de colonnes reprennent les champs JSON (camelCase) à l'identique.
"""

from sqlalchemy import BigInteger, Column, Float, Integer, String

from app.database import Base


class StudentSubmissionRecord(Base):
    __tablename__ = "student_submissions"

    id = Column(String, primary_key=True)
    full_name = Column("fullName", String, nullable=False)
    class_name = Column("className", String, nullable=True)
    school = Column(String, nullable=True)
    province = Column(String, nullable=True)
    score = Column(Float, nullable=True)
    risk_level = Column("riskLevel", Integer, nullable=True)
    risk_level_name = Column("riskLevelName", String, nullable=True)
    timestamp = Column(BigInteger, nullable=True)

    def to_row(self) -> dict:
        """Ligne au format JSON de l'API (clés camelCase)."""
        return {
            column.name: getattr(self, attr.key)
            for attr in self.__mapper__.column_attrs
            for column in attr.columns
        }
